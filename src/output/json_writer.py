"""JSON output writer for run results.

A run is written as one JSON document holding the program name, the
captured output lines, the run time and, when requested, source file
metadata.
"""

import json
from pathlib import Path
from typing import Any, Dict, Optional, TextIO, Union

from cobol_interpreter import RunResult

TIMING_KEY = "execution_time_seconds"


class JSONWriter:
    """Writes run results as JSON documents.

    Results may be given as a RunResult or as its ``to_dict`` form.
    Dropping the timing field makes the document reproducible across runs.
    """

    def __init__(
        self,
        pretty_print: bool = True,
        indent: int = 2,
        sort_keys: bool = True,
        include_timing: bool = True,
    ):
        """Initialize the JSON writer.

        Args:
            pretty_print: Indent the document (False: single line)
            indent: Number of spaces per indentation level
            sort_keys: Emit keys in sorted order
            include_timing: Keep the execution_time_seconds field
        """
        self.pretty_print = pretty_print
        self.indent = indent if pretty_print else None
        self.sort_keys = sort_keys
        self.include_timing = include_timing

    def render(self, result: Union[RunResult, Dict[str, Any]]) -> str:
        """Render a run result as a JSON string."""
        return json.dumps(
            self._document(result),
            indent=self.indent,
            sort_keys=self.sort_keys,
            ensure_ascii=False,
            default=_encode_path,
        )

    def write(
        self,
        result: Union[RunResult, Dict[str, Any]],
        output_path: Optional[Path] = None,
    ) -> str:
        """Render a run result, writing it to ``output_path`` if given.

        Returns:
            The JSON document (without a trailing newline)
        """
        document = self.render(result)
        if output_path:
            Path(output_path).write_text(document + "\n", encoding="utf-8")
        return document

    def write_to_stream(self, result: Union[RunResult, Dict[str, Any]], stream: TextIO) -> None:
        stream.write(self.render(result))

    def _document(self, result: Union[RunResult, Dict[str, Any]]) -> Dict[str, Any]:
        data = result.to_dict() if isinstance(result, RunResult) else dict(result)
        if not self.include_timing:
            data.pop(TIMING_KEY, None)
        return data


def _encode_path(obj: Any) -> Any:
    if isinstance(obj, Path):
        return str(obj)
    raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
