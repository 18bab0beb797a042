"""Input sources consumed by ACCEPT."""

from collections import deque
from typing import Iterable, Optional, TextIO


class InputSource:
    """Supplies one line of text per ACCEPT, or None when exhausted."""

    def read_line(self) -> Optional[str]:
        raise NotImplementedError


class ListInput(InputSource):
    """In-memory queue of input lines."""

    def __init__(self, lines: Iterable[str] = ()):
        self._lines = deque(lines)

    def read_line(self) -> Optional[str]:
        if not self._lines:
            return None
        return self._lines.popleft()


class StreamInput(InputSource):
    """Reads lines from a text stream such as ``sys.stdin``."""

    def __init__(self, stream: TextIO):
        self.stream = stream

    def read_line(self) -> Optional[str]:
        line = self.stream.readline()
        if not line:
            return None
        return line.rstrip("\r\n")
