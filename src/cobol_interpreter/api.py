"""Public API for running COBOL programs.

This module provides the programmatic interface to the interpreter.
Use these functions instead of calling CLI internals directly.

Example:
    from cobol_interpreter import run_file, RunOptions

    result = run_file(
        source_path=Path("program.cob"),
        options=RunOptions(input_lines=["42"]),
    )

    for line in result.output:
        print(line)
"""

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, TextIO

from .executor import ExecutionContext, StatementExecutor
from .inputs import InputSource, ListInput, StreamInput
from .structurer import ProgramStructurer

logger = logging.getLogger(__name__)

SAMPLE_PROGRAM: List[str] = [
    "IDENTIFICATION DIVISION.",
    "PROGRAM-ID. HELLO.",
    "DATA DIVISION.",
    "WORKING-STORAGE SECTION.",
    "01 X PIC 9(3).",
    "PROCEDURE DIVISION.",
    "    MOVE 10 TO X.",
    "    ADD 5 TO X.",
    "    SUBTRACT 2 FROM X.",
    "    DISPLAY X.",
    "    MOVE 'HELLO' TO MSG.",
    "    DISPLAY 'Message:'",
    "    DISPLAY MSG.",
    "    STOP RUN.",
]


class InterpreterError(Exception):
    """Raised when a program cannot be loaded."""
    pass


class CobolInterpreter:
    """Runs COBOL programs given as lists of source lines.

    Every call to ``run`` structures the program again and starts from a
    fresh execution context, so one interpreter can run any number of
    programs independently.

    Example:
        >>> CobolInterpreter().run(SAMPLE_PROGRAM)
        ['13', 'Message:', 'HELLO']
    """

    def __init__(self, input_source: Optional[InputSource] = None):
        """Initialize the interpreter.

        Args:
            input_source: Where ACCEPT reads from (None: ACCEPT does nothing)
        """
        self.input_source = input_source
        self.program_name = "UNKNOWN"

    def run(self, source_lines: Iterable[str]) -> List[str]:
        """Run a program and return its captured output lines."""
        program = ProgramStructurer().structure(source_lines)
        self.program_name = program.name

        context = ExecutionContext.from_structure(program, self.input_source)
        executor = StatementExecutor(context)
        try:
            executor.execute_block(program.procedure)
        except RecursionError:
            logger.error(f"Program {program.name} nested too deeply; run stopped")
            context.running = False

        return list(context.output)


@dataclass
class RunOptions:
    """Options for running a program.

    Attributes:
        input_lines: Lines supplied to ACCEPT (takes precedence over input_stream)
        input_stream: Text stream supplying ACCEPT lines (e.g. sys.stdin)
        encoding: Encoding used to read source files (default: utf-8)
        include_source_info: Include source file metadata in the result
    """
    input_lines: Optional[List[str]] = None
    input_stream: Optional[TextIO] = None
    encoding: str = "utf-8"
    include_source_info: bool = False

    def create_input_source(self) -> Optional[InputSource]:
        if self.input_lines is not None:
            return ListInput(self.input_lines)
        if self.input_stream is not None:
            return StreamInput(self.input_stream)
        return None


@dataclass
class RunResult:
    """Result of running a program.

    Attributes:
        program_name: PROGRAM-ID of the program (UNKNOWN if absent)
        output: Captured output lines
        execution_time_seconds: Wall time of the run
        source_info: Source file metadata (if include_source_info was True)
    """
    program_name: str
    output: List[str] = field(default_factory=list)
    execution_time_seconds: float = 0.0
    source_info: Optional[Dict[str, Any]] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "program_name": self.program_name,
            "output": list(self.output),
            "execution_time_seconds": round(self.execution_time_seconds, 4),
        }
        if self.source_info is not None:
            data["source_info"] = self.source_info
        return data


def run_program(
    source_lines: Iterable[str],
    options: Optional[RunOptions] = None,
) -> RunResult:
    """Run a program given as source lines.

    Args:
        source_lines: Program text, one line per item
        options: Run options (uses defaults if None)

    Returns:
        RunResult with the captured output
    """
    options = options or RunOptions()
    start_time = time.perf_counter()

    interpreter = CobolInterpreter(options.create_input_source())
    output = interpreter.run(source_lines)

    elapsed = time.perf_counter() - start_time
    logger.info(f"Program {interpreter.program_name} produced {len(output)} output lines")
    return RunResult(
        program_name=interpreter.program_name,
        output=output,
        execution_time_seconds=elapsed,
    )


def run_file(
    source_path: Path,
    options: Optional[RunOptions] = None,
) -> RunResult:
    """Read a program file and run it.

    Args:
        source_path: Path to the COBOL source file
        options: Run options (uses defaults if None)

    Returns:
        RunResult with the captured output

    Raises:
        InterpreterError: If the file does not exist or cannot be read
    """
    options = options or RunOptions()
    source_path = Path(source_path)

    if not source_path.exists():
        raise InterpreterError(f"Source file not found: {source_path}")
    if not source_path.is_file():
        raise InterpreterError(f"Source path is not a file: {source_path}")

    logger.info(f"Reading source file: {source_path}")
    try:
        source = source_path.read_text(encoding=options.encoding, errors="replace")
    except (OSError, LookupError) as e:
        raise InterpreterError(f"Failed to read {source_path}: {e}") from e

    source_lines = source.splitlines()
    result = run_program(source_lines, options)

    if options.include_source_info:
        result.source_info = {
            "file_path": str(source_path.absolute()),
            "file_name": source_path.name,
            "lines_count": len(source_lines),
        }
    return result


def run_sample(options: Optional[RunOptions] = None) -> RunResult:
    """Run the built-in sample program."""
    return run_program(SAMPLE_PROGRAM, options)

