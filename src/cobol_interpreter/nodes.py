"""Node definitions for interpreted COBOL programs.

This module defines the data model shared by the structurer and the
executor: picture specifications, declarations, paragraphs, the
structured program, and the statement verbs the executor dispatches on.
"""

import re
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Dict, List, Optional, Union

# Runtime value of a variable slot
Value = Union[int, str]

PICTURE_SYMBOL_PATTERN = re.compile(r"([9X])(?:\((\d+)\))?")


class Verb(Enum):
    """Statement verbs recognized by the executor."""

    # Data movement
    MOVE = auto()

    # Arithmetic
    COMPUTE = auto()
    ADD = auto()
    SUBTRACT = auto()
    MULTIPLY = auto()
    DIVIDE = auto()

    # Input/output
    DISPLAY = auto()
    ACCEPT = auto()

    # Block constructs and their markers
    IF = auto()
    ELSE = auto()
    END_IF = auto()
    EVALUATE = auto()
    WHEN = auto()
    END_EVALUATE = auto()

    # Control transfer
    PERFORM = auto()
    GOTO = auto()
    STOP_RUN = auto()
    GOBACK = auto()
    CONTINUE = auto()
    EXIT = auto()

    # Other
    UNKNOWN = auto()

    @classmethod
    def from_statement(cls, statement: str) -> "Verb":
        """Determine the verb of a statement from its leading keyword(s)."""
        tokens = statement.upper().replace(".", " ").split()
        if not tokens:
            return cls.UNKNOWN

        keyword = tokens[0]
        following = tokens[1] if len(tokens) > 1 else ""
        if keyword == "STOP":
            return cls.STOP_RUN if following == "RUN" else cls.UNKNOWN
        if keyword == "GO" and following == "TO":
            return cls.GOTO
        if keyword in ("STOP_RUN", "UNKNOWN"):
            return cls.UNKNOWN

        try:
            return cls[keyword.replace("-", "_")]
        except KeyError:
            return cls.UNKNOWN


@dataclass(frozen=True)
class PictureSpec:
    """Storage shape of a declared variable.

    Attributes:
        is_numeric: True for ``9`` pictures, False for ``X`` pictures
        length: Total character width (sum of the repeated symbols)
    """

    is_numeric: bool
    length: int

    @classmethod
    def parse(cls, picture: str) -> "PictureSpec":
        """Parse a picture string such as ``9(3)``, ``X(10)`` or ``S99``.

        Args:
            picture: The picture token following PIC

        Returns:
            The parsed PictureSpec
        """
        picture = picture.strip().upper()
        if picture.startswith("S"):
            picture = picture[1:]

        length = 0
        for match in PICTURE_SYMBOL_PATTERN.finditer(picture):
            repeat = match.group(2)
            length += int(repeat) if repeat is not None else 1

        return cls(is_numeric=picture.startswith("9"), length=length)

    @property
    def blank_value(self) -> Value:
        """Initial value of a slot declared without VALUE."""
        return 0 if self.is_numeric else " " * self.length


@dataclass
class Declaration:
    """A WORKING-STORAGE variable declaration."""

    name: str
    picture: PictureSpec
    value: Optional[Value] = None
    line_number: int = 0


@dataclass
class Paragraph:
    """A named, callable sequence of raw statement lines."""

    name: str
    lines: List[str] = field(default_factory=list)


@dataclass
class WhenBranch:
    """One branch of an EVALUATE block."""

    value: str
    lines: List[str] = field(default_factory=list)

    @property
    def is_other(self) -> bool:
        """Check if this is the WHEN OTHER branch."""
        return self.value.upper() == "OTHER"


@dataclass
class ProgramStructure:
    """Result of structuring a program's source lines.

    Attributes:
        name: PROGRAM-ID of the program (UNKNOWN if absent)
        declarations: Declared variables keyed by uppercased name
        paragraphs: Paragraph bodies keyed by label
        procedure: Every statement of the PROCEDURE DIVISION, in order
    """

    name: str = "UNKNOWN"
    declarations: Dict[str, Declaration] = field(default_factory=dict)
    paragraphs: Dict[str, Paragraph] = field(default_factory=dict)
    procedure: List[str] = field(default_factory=list)

    def get_paragraph(self, label: str) -> Optional[Paragraph]:
        """Find a paragraph by label (case-insensitive)."""
        return self.paragraphs.get(label.upper())
