"""Integer arithmetic expression evaluator.

Grammar (left-associative, usual precedence)::

    expression := term (('+' | '-') term)*
    term       := factor (('*' | '/') factor)*
    factor     := '(' expression ')' | ['+' | '-'] digits | identifier

Division truncates toward zero. Any failure (malformed token, unbalanced
parenthesis, trailing input, division by zero) makes the whole
expression evaluate to None; partial results are never returned.
"""

import logging
from typing import Optional

from .variables import VariableStore, parse_integer

logger = logging.getLogger(__name__)


class ExpressionError(Exception):
    """Raised internally when an expression cannot be evaluated."""

    def __init__(self, message: str, position: int = 0):
        super().__init__(f"{message} at position {position}")
        self.position = position


def truncating_divide(dividend: int, divisor: int) -> int:
    """Integer division rounding toward zero."""
    if divisor == 0:
        raise ZeroDivisionError("division by zero")
    quotient = abs(dividend) // abs(divisor)
    return quotient if (dividend >= 0) == (divisor >= 0) else -quotient


class _ExpressionParser:
    """Recursive-descent parser that evaluates while it parses."""

    def __init__(self, text: str, variables: VariableStore):
        self.text = text
        self.variables = variables
        self.index = 0

    def parse(self) -> int:
        value = self.parse_expression()
        self._skip_whitespace()
        if self.index < len(self.text):
            raise ExpressionError(f"Unexpected '{self.text[self.index]}'", self.index)
        return value

    def parse_expression(self) -> int:
        value = self.parse_term()
        while True:
            self._skip_whitespace()
            char = self._peek()
            if char == "+":
                self.index += 1
                value += self.parse_term()
            elif char == "-":
                self.index += 1
                value -= self.parse_term()
            else:
                return value

    def parse_term(self) -> int:
        value = self.parse_factor()
        while True:
            self._skip_whitespace()
            char = self._peek()
            if char == "*":
                self.index += 1
                value *= self.parse_factor()
            elif char == "/":
                position = self.index
                self.index += 1
                divisor = self.parse_factor()
                try:
                    value = truncating_divide(value, divisor)
                except ZeroDivisionError:
                    raise ExpressionError("Division by zero", position)
            else:
                return value

    def parse_factor(self) -> int:
        self._skip_whitespace()
        char = self._peek()

        if char == "(":
            self.index += 1
            value = self.parse_expression()
            self._skip_whitespace()
            if self._peek() != ")":
                raise ExpressionError("Missing ')'", self.index)
            self.index += 1
            return value

        if char in ("+", "-") or char.isdigit():
            return self._parse_number()

        if char.isalpha():
            return self._parse_identifier()

        if not char:
            raise ExpressionError("Unexpected end of expression", self.index)
        raise ExpressionError(f"Unexpected '{char}'", self.index)

    def _parse_number(self) -> int:
        start = self.index
        if self._peek() in ("+", "-"):
            self.index += 1
        digits_start = self.index
        while self._peek().isdigit():
            self.index += 1
        if self.index == digits_start:
            raise ExpressionError("Expected digits", self.index)
        return int(self.text[start:self.index])

    def _parse_identifier(self) -> int:
        start = self.index
        while self._peek().isalnum() or self._peek() in ("-", "_"):
            self.index += 1
        name = self.text[start:self.index]
        number = parse_integer(self.variables.get(name))
        return number if number is not None else 0

    def _peek(self) -> str:
        if self.index >= len(self.text):
            return ""
        return self.text[self.index]

    def _skip_whitespace(self) -> None:
        while self._peek().isspace():
            self.index += 1


class ExpressionEvaluator:
    """Evaluates arithmetic expressions against a variable store."""

    def __init__(self, variables: VariableStore):
        self.variables = variables

    def evaluate(self, expression: str) -> Optional[int]:
        """Evaluate an expression.

        Args:
            expression: Expression text, e.g. ``(A + 2) * 3``

        Returns:
            The integer result, or None if the expression failed
        """
        try:
            return _ExpressionParser(expression, self.variables).parse()
        except ExpressionError as e:
            logger.debug(f"Expression '{expression}' failed: {e}")
            return None
