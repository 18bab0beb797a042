"""Statement executor for interpreted COBOL programs.

The executor walks a block of raw statement lines with a forward-only
cursor and dispatches each statement on its verb. Block constructs
(IF, EVALUATE) consume their own sub-blocks from the enclosing cursor
and run them through a recursive call; PERFORM and GOTO run paragraph
bodies the same way. STOP RUN clears the run flag, which every active
block loop checks before taking its next statement.
"""

import logging
import re
from dataclasses import dataclass, field
from functools import partial
from typing import Callable, Dict, Iterable, List, Optional, Tuple

from preprocessor import strip_terminator

from .conditions import ConditionEvaluator
from .expressions import ExpressionEvaluator, truncating_divide
from .inputs import InputSource
from .nodes import Paragraph, ProgramStructure, Value, Verb, WhenBranch
from .variables import VariableStore, is_integer_literal, parse_integer, to_text

logger = logging.getLogger(__name__)

DIVIDE_BY_ZERO_MESSAGE = "ERROR: DIVIDE BY ZERO"

OPERAND_PATTERN = re.compile(r"'[^']*'|\"[^\"]*\"|\S+")

FIGURATIVE_CONSTANTS: Dict[str, Value] = {
    "SPACE": " ",
    "SPACES": " ",
    "ZERO": 0,
    "ZEROS": 0,
    "ZEROES": 0,
}

ARITHMETIC_OPERATIONS: Dict[Verb, Callable[[int, int], int]] = {
    Verb.ADD: lambda current, amount: current + amount,
    Verb.SUBTRACT: lambda current, amount: current - amount,
    Verb.MULTIPLY: lambda current, amount: current * amount,
    Verb.DIVIDE: truncating_divide,
}


def is_quoted(token: str) -> bool:
    """Check if a token is a quoted literal."""
    return len(token) >= 2 and token[0] == token[-1] and token[0] in ("'", '"')


@dataclass
class ExecutionContext:
    """Mutable state of a single run.

    Attributes:
        variables: Working-storage slots
        paragraphs: Paragraph bodies keyed by label
        output: Captured output lines, in emission order
        input_source: Where ACCEPT reads from (None: ACCEPT is a no-op)
        running: Cleared by STOP RUN to unwind every active block
    """

    variables: VariableStore = field(default_factory=VariableStore)
    paragraphs: Dict[str, Paragraph] = field(default_factory=dict)
    output: List[str] = field(default_factory=list)
    input_source: Optional[InputSource] = None
    running: bool = True

    @classmethod
    def from_structure(
        cls,
        program: ProgramStructure,
        input_source: Optional[InputSource] = None,
    ) -> "ExecutionContext":
        """Create a fresh context holding a structured program's declarations."""
        context = cls(paragraphs=dict(program.paragraphs), input_source=input_source)
        for declaration in program.declarations.values():
            context.variables.declare(declaration.name, declaration.picture, declaration.value)
        return context


class Block:
    """Forward-only, single-pass cursor over statement lines."""

    def __init__(self, lines: Iterable[str]):
        self._lines = list(lines)
        self._position = 0

    def next_line(self) -> Optional[str]:
        """Take the next line, or None when the block is exhausted."""
        if self._position >= len(self._lines):
            return None
        line = self._lines[self._position]
        self._position += 1
        return line

    @property
    def exhausted(self) -> bool:
        return self._position >= len(self._lines)


class StatementExecutor:
    """Executes statement blocks against an execution context."""

    def __init__(self, context: ExecutionContext):
        self.context = context
        self.expressions = ExpressionEvaluator(context.variables)
        self.conditions = ConditionEvaluator(context.variables)
        self._handlers: Dict[Verb, Callable[[str, Block], None]] = {
            Verb.MOVE: self._handle_move,
            Verb.COMPUTE: self._handle_compute,
            Verb.ADD: partial(self._handle_arithmetic, Verb.ADD),
            Verb.SUBTRACT: partial(self._handle_arithmetic, Verb.SUBTRACT),
            Verb.MULTIPLY: partial(self._handle_arithmetic, Verb.MULTIPLY),
            Verb.DIVIDE: partial(self._handle_arithmetic, Verb.DIVIDE),
            Verb.DISPLAY: self._handle_display,
            Verb.ACCEPT: self._handle_accept,
            Verb.IF: self._handle_if,
            Verb.EVALUATE: self._handle_evaluate,
            Verb.PERFORM: self._handle_perform,
            Verb.GOTO: self._handle_goto,
            Verb.STOP_RUN: self._handle_stop,
            Verb.GOBACK: self._handle_stop,
        }

    def execute_block(self, lines: Iterable[str]) -> None:
        """Run statements until the block is exhausted or the run stops."""
        block = Block(lines)
        while self.context.running:
            line = block.next_line()
            if line is None:
                break
            self.execute(line, block)

    def execute(self, statement: str, block: Block) -> None:
        """Execute one statement; block constructs read ahead from ``block``."""
        statement = statement.strip()
        if not statement:
            return

        verb = Verb.from_statement(statement)
        handler = self._handlers.get(verb)
        if handler is None:
            if verb is Verb.UNKNOWN:
                logger.debug(f"Skipping unrecognized statement: {statement}")
            return
        handler(statement, block)

    # === Operand helpers ===

    def _arguments(self, statement: str) -> str:
        """Statement text after its verb, without the terminating period."""
        parts = strip_terminator(statement).split(None, 1)
        return parts[1].strip() if len(parts) > 1 else ""

    def _resolve_value(self, token: str) -> Value:
        """Resolve a MOVE/DISPLAY operand: literal, constant or variable."""
        if is_quoted(token):
            return token[1:-1]
        if is_integer_literal(token):
            return int(token)
        constant = FIGURATIVE_CONSTANTS.get(token.upper())
        if constant is not None and token not in self.context.variables:
            return constant
        return self.context.variables.get(token)

    def _lookup_paragraph(self, label: str) -> Optional[Paragraph]:
        paragraph = self.context.paragraphs.get(label.upper())
        if paragraph is None:
            logger.debug(f"Ignoring reference to unknown paragraph {label.upper()}")
        return paragraph

    # === Data movement and arithmetic ===

    def _handle_move(self, statement: str, block: Block) -> None:
        arguments = self._arguments(statement)
        index = arguments.upper().rfind(" TO ")
        if index < 0:
            return

        source = arguments[:index].strip()
        targets = arguments[index + 4:].split()
        if not source or not targets:
            return

        value = self._resolve_value(source)
        for target in targets:
            self.context.variables.set(target, value)

    def _handle_compute(self, statement: str, block: Block) -> None:
        target, separator, expression = self._arguments(statement).partition("=")
        target = target.strip()
        if not separator or not target:
            return

        value = self.expressions.evaluate(expression.strip())
        if value is None:
            return
        self.context.variables.set(target, value)

    def _handle_arithmetic(self, verb: Verb, statement: str, block: Block) -> None:
        # <verb> <integer literal> TO|FROM|BY|INTO <target>
        tokens = strip_terminator(statement).split()
        if len(tokens) < 4:
            return

        operand, target = tokens[1], tokens[3]
        if not is_integer_literal(operand):
            logger.debug(f"{verb.name} needs an integer literal operand: {statement}")
            return

        amount = int(operand)
        if verb is Verb.DIVIDE and amount == 0:
            self.context.output.append(DIVIDE_BY_ZERO_MESSAGE)
            return

        current = self.context.variables.get(target)
        if not isinstance(current, int):
            current = 0
        self.context.variables.set(target, ARITHMETIC_OPERATIONS[verb](current, amount))

    # === Input/output ===

    def _handle_display(self, statement: str, block: Block) -> None:
        arguments = self._arguments(statement)
        if not arguments:
            return

        pieces = []
        for token in OPERAND_PATTERN.findall(arguments):
            if is_integer_literal(token):
                pieces.append(token)
            else:
                pieces.append(to_text(self._resolve_value(token)))
        self.context.output.append("".join(pieces))

    def _handle_accept(self, statement: str, block: Block) -> None:
        tokens = strip_terminator(statement).split()
        if len(tokens) < 2 or self.context.input_source is None:
            return

        line = self.context.input_source.read_line()
        if line is None:
            return

        value: Value = int(line) if is_integer_literal(line) else line
        self.context.variables.set(tokens[1], value)

    # === Block constructs ===

    def _handle_if(self, statement: str, block: Block) -> None:
        condition = self._arguments(statement)
        true_lines, false_lines = self._consume_if_block(block)
        if self.conditions.evaluate(condition):
            self.execute_block(true_lines)
        else:
            self.execute_block(false_lines)

    def _consume_if_block(self, block: Block) -> Tuple[List[str], List[str]]:
        """Read lines up to the matching END-IF, split at ELSE."""
        true_lines: List[str] = []
        false_lines: List[str] = []
        current = true_lines
        depth = 0

        while True:
            line = block.next_line()
            if line is None:
                break

            verb = Verb.from_statement(line)
            if verb is Verb.IF:
                depth += 1
            elif verb is Verb.END_IF:
                if depth == 0:
                    break
                depth -= 1
            elif verb is Verb.ELSE and depth == 0:
                current = false_lines
                remainder = self._arguments(line)
                if remainder:
                    current.append(remainder)
                continue

            current.append(line)

        return true_lines, false_lines

    def _handle_evaluate(self, statement: str, block: Block) -> None:
        subject = self._arguments(statement)
        branches = self._consume_evaluate_block(block)
        number, text = self._evaluate_subject(subject)

        for branch in branches:
            if self._branch_matches(branch, number, text):
                self.execute_block(branch.lines)
                break

    def _consume_evaluate_block(self, block: Block) -> List[WhenBranch]:
        """Read WHEN branches up to the matching END-EVALUATE."""
        branches: List[WhenBranch] = []
        current: Optional[WhenBranch] = None
        depth = 0

        while True:
            line = block.next_line()
            if line is None:
                break

            verb = Verb.from_statement(line)
            if verb is Verb.EVALUATE:
                depth += 1
            elif verb is Verb.END_EVALUATE:
                if depth == 0:
                    break
                depth -= 1
            elif verb is Verb.WHEN and depth == 0:
                arguments = self._arguments(line)
                match = OPERAND_PATTERN.match(arguments)
                current = WhenBranch(value=match.group(0) if match else "")
                remainder = arguments[match.end():].strip() if match else ""
                if remainder:
                    current.lines.append(remainder)
                branches.append(current)
                continue

            if current is not None:
                current.lines.append(line)

        return branches

    def _evaluate_subject(self, subject: str) -> Tuple[Optional[int], str]:
        """Evaluate an EVALUATE subject once, as (number, text).

        A quoted literal or a variable holding text has no numeric value;
        trailing spaces of a text variable are not significant.
        """
        if is_quoted(subject):
            return None, subject[1:-1]
        if subject in self.context.variables:
            value = self.context.variables.get(subject)
            if isinstance(value, str):
                return None, value.rstrip()

        number = self.expressions.evaluate(subject)
        if number is None:
            return None, subject
        return number, str(number)

    def _branch_matches(self, branch: WhenBranch, number: Optional[int], text: str) -> bool:
        if branch.is_other:
            return True

        value = branch.value
        if is_integer_literal(value):
            return number is not None and int(value) == number
        if is_quoted(value):
            return value[1:-1] == text
        return value.upper() == text.upper()

    # === Control transfer ===

    def _handle_perform(self, statement: str, block: Block) -> None:
        tokens = strip_terminator(statement).split()
        if len(tokens) < 2:
            return

        paragraph = self._lookup_paragraph(tokens[1])
        if paragraph is None:
            return

        upper_tokens = [token.upper() for token in tokens]
        if "UNTIL" in upper_tokens[2:]:
            condition = " ".join(tokens[upper_tokens.index("UNTIL", 2) + 1:])
            # Repeat-until: the body always runs before the first test
            while True:
                self.execute_block(paragraph.lines)
                if not self.context.running or self.conditions.evaluate(condition):
                    break
        elif len(tokens) >= 4 and upper_tokens[3] == "TIMES":
            count = parse_integer(self._resolve_value(tokens[2])) or 0
            for _ in range(count):
                if not self.context.running:
                    break
                self.execute_block(paragraph.lines)
        else:
            self.execute_block(paragraph.lines)

    def _handle_goto(self, statement: str, block: Block) -> None:
        # GOTO runs the paragraph as a nested call; control comes back here
        tokens = strip_terminator(statement).split()
        label_index = 2 if tokens[0].upper() == "GO" else 1
        if len(tokens) <= label_index:
            return

        paragraph = self._lookup_paragraph(tokens[label_index])
        if paragraph is not None:
            self.execute_block(paragraph.lines)

    def _handle_stop(self, statement: str, block: Block) -> None:
        logger.debug(f"Run stopped by: {statement}")
        self.context.running = False
