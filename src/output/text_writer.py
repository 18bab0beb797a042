"""Plain text output writer for captured program output."""

from pathlib import Path
from typing import Iterable, Optional, TextIO


class TextWriter:
    """Writes captured output lines, one per line."""

    def __init__(self, line_ending: str = "\n"):
        self.line_ending = line_ending

    def write(self, lines: Iterable[str], output_path: Optional[Path] = None) -> str:
        """Join lines into text, writing them to ``output_path`` if given.

        Returns:
            The joined text (without a trailing line ending)
        """
        text = self.line_ending.join(lines)
        if output_path:
            output_path.write_text(text + self.line_ending if text else "", encoding="utf-8")
        return text

    def write_to_stream(self, lines: Iterable[str], stream: TextIO) -> None:
        for line in lines:
            stream.write(line + self.line_ending)
