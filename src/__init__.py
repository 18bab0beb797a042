"""COBOL Interpreter - A tree-walking interpreter for a small COBOL subset.

Public API:
    CobolInterpreter: Runs programs given as source lines
    run_program: Run source lines and return a RunResult
    run_file: Read a source file and run it
    run_sample: Run the built-in sample program
    RunOptions: Configuration options for a run
    RunResult: Result container with the captured output
    InterpreterError: Exception raised when a program cannot be loaded

Example:
    >>> from cobol_interpreter import run_file
    >>> from pathlib import Path
    >>>
    >>> result = run_file(Path("myprogram.cob"))
    >>> print("\\n".join(result.output))
"""

from .cobol_interpreter.api import (
    CobolInterpreter,
    run_program,
    run_file,
    run_sample,
    RunOptions,
    RunResult,
    InterpreterError,
    SAMPLE_PROGRAM,
)

__version__ = "0.1.0"

__all__ = [
    "CobolInterpreter",
    "run_program",
    "run_file",
    "run_sample",
    "RunOptions",
    "RunResult",
    "InterpreterError",
    "SAMPLE_PROGRAM",
]
