"""Binary condition evaluator for IF and PERFORM UNTIL."""

import operator
from typing import Callable, Dict

from .nodes import Value
from .variables import VariableStore, is_integer_literal

COMPARISONS: Dict[str, Callable[[Value, Value], bool]] = {
    "=": operator.eq,
    "<>": operator.ne,
    ">": operator.gt,
    "<": operator.lt,
    ">=": operator.ge,
    "<=": operator.le,
}


class ConditionEvaluator:
    """Evaluates ``<left> <operator> <right>`` conditions.

    Operands resolve to a variable's value if the variable exists, else to
    an integer literal, else to the token's text (quotes removed). Two
    integers compare numerically; anything else compares as text.
    Malformed conditions are false.
    """

    def __init__(self, variables: VariableStore):
        self.variables = variables

    def evaluate(self, condition: str) -> bool:
        parts = condition.split()
        if len(parts) < 3:
            return False

        left, op, right = parts[0], parts[1], parts[2]
        compare = COMPARISONS.get(op)
        if compare is None:
            return False

        left_value = self.resolve(left)
        right_value = self.resolve(right)
        if isinstance(left_value, int) and isinstance(right_value, int):
            return compare(left_value, right_value)
        return compare(str(left_value), str(right_value))

    def resolve(self, token: str) -> Value:
        """Resolve an operand token to a value."""
        if token in self.variables:
            return self.variables.get(token)
        if is_integer_literal(token):
            return int(token)
        if len(token) >= 2 and token[0] == token[-1] and token[0] in ("'", '"'):
            return token[1:-1]
        return token
