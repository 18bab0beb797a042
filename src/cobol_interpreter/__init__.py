"""Interpreter module containing the data model, evaluators, executor and public API."""

__version__ = "0.1.0"

from .nodes import (
    Declaration,
    Paragraph,
    PictureSpec,
    ProgramStructure,
    Verb,
    WhenBranch,
)
from .variables import VariableStore
from .structurer import ProgramStructurer
from .expressions import ExpressionEvaluator
from .conditions import ConditionEvaluator
from .inputs import InputSource, ListInput, StreamInput
from .executor import DIVIDE_BY_ZERO_MESSAGE, ExecutionContext, StatementExecutor
from .api import (
    SAMPLE_PROGRAM,
    CobolInterpreter,
    InterpreterError,
    RunOptions,
    RunResult,
    run_file,
    run_program,
    run_sample,
)

__all__ = [
    "__version__",
    # Data model
    "Declaration",
    "Paragraph",
    "PictureSpec",
    "ProgramStructure",
    "Verb",
    "WhenBranch",
    # Engine
    "VariableStore",
    "ProgramStructurer",
    "ExpressionEvaluator",
    "ConditionEvaluator",
    "ExecutionContext",
    "StatementExecutor",
    "DIVIDE_BY_ZERO_MESSAGE",
    # Input sources
    "InputSource",
    "ListInput",
    "StreamInput",
    # Public API
    "SAMPLE_PROGRAM",
    "CobolInterpreter",
    "InterpreterError",
    "RunOptions",
    "RunResult",
    "run_file",
    "run_program",
    "run_sample",
]
