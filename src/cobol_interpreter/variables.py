"""Typed variable store for the interpreter.

Every slot is keyed by its uppercased identifier. Slots declared with a
picture are coerced on every write: numeric slots hold integers, text
slots hold strings of exactly the picture's length. Undeclared slots are
created on first write and hold whatever was written.
"""

import re
from typing import Dict, Optional

from .nodes import PictureSpec, Value

INTEGER_PATTERN = re.compile(r"^-?\d+$")
SIGNED_INTEGER_PATTERN = re.compile(r"^[+-]?\d+$")


def is_integer_literal(token: str) -> bool:
    """Check if a token is an integer literal (optional leading minus)."""
    return bool(INTEGER_PATTERN.match(token))


def parse_integer(value: Value) -> Optional[int]:
    """Parse a value's textual form as an integer.

    Returns:
        The integer, or None if the text is not an integer
    """
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if SIGNED_INTEGER_PATTERN.match(text):
        return int(text)
    return None


def to_text(value: Value) -> str:
    """Textual form of a value, as DISPLAY shows it."""
    return str(value)


def fit_text(text: str, length: int) -> str:
    """Left-justify text in a field of ``length`` characters."""
    return text[:length].ljust(length)


class VariableStore:
    """Storage for working-storage variables.

    Example:
        >>> store = VariableStore()
        >>> store.declare("NAME", PictureSpec(is_numeric=False, length=5))
        >>> store.set("name", "HI")
        >>> store.get("NAME")
        'HI   '
    """

    def __init__(self):
        self._values: Dict[str, Value] = {}
        self._pictures: Dict[str, PictureSpec] = {}

    def declare(self, name: str, picture: PictureSpec, value: Optional[Value] = None) -> None:
        """Register a variable with its picture and initial value."""
        key = name.upper()
        self._pictures[key] = picture
        if value is None:
            self._values[key] = picture.blank_value
        else:
            self._values[key] = self.coerce(key, value)

    def get(self, name: str) -> Value:
        """Current value of a variable, 0 if it was never declared or set."""
        return self._values.get(name.upper(), 0)

    def set(self, name: str, value: Value) -> None:
        """Write a value, coercing it to the variable's picture if declared."""
        key = name.upper()
        self._values[key] = self.coerce(key, value)

    def coerce(self, name: str, value: Value) -> Value:
        """Coerce a value to the picture registered for ``name``.

        Text pictures truncate or space-pad to their length. Numeric
        pictures parse the value as an integer and fall back to 0.
        Unregistered names keep the value unchanged.
        """
        picture = self._pictures.get(name.upper())
        if picture is None:
            return value

        if picture.is_numeric:
            number = parse_integer(value)
            return number if number is not None else 0

        return fit_text(to_text(value), picture.length)

    def picture_of(self, name: str) -> Optional[PictureSpec]:
        """Picture registered for a variable, if any."""
        return self._pictures.get(name.upper())

    def is_declared(self, name: str) -> bool:
        """Check if a variable was declared with a picture."""
        return name.upper() in self._pictures

    def clear(self) -> None:
        """Remove all slots and pictures."""
        self._values.clear()
        self._pictures.clear()

    def snapshot(self) -> Dict[str, Value]:
        """Copy of the current slot values."""
        return dict(self._values)

    def __contains__(self, name: str) -> bool:
        return name.upper() in self._values

    def __len__(self) -> int:
        return len(self._values)
