"""Program structurer for COBOL source text.

This module splits a program's lines into the three views the executor
needs:
- Picture declarations from the DATA DIVISION
- Paragraph bodies keyed by label
- The full PROCEDURE DIVISION statement sequence

Structuring is lenient: lines that cannot be understood are dropped.
"""

import logging
import re
from typing import Iterable, List, Optional

from preprocessor import normalize_source, split_sentences

from .nodes import Declaration, Paragraph, PictureSpec, ProgramStructure, Value

logger = logging.getLogger(__name__)

PIC_PATTERN = re.compile(r"\bPIC(?:TURE)?\s+(?:IS\s+)?(S?[9X][^\s.]*)", re.IGNORECASE)
VALUE_PATTERN = re.compile(
    r"\bVALUE\s+(?:IS\s+)?('[^']*'|\"[^\"]*\"|[+-]?\d+|SPACES?|ZEROE?S?)",
    re.IGNORECASE,
)
PROGRAM_ID_PATTERN = re.compile(r"^PROGRAM-ID\.?\s+([A-Za-z0-9-]+)", re.IGNORECASE)
LABEL_PATTERN = re.compile(r"^([A-Z0-9-]+)\.$")


class ProgramStructurer:
    """Extracts declarations, paragraphs and the procedure body.

    Each call to ``structure`` starts from scratch, so one instance can
    structure any number of programs.
    """

    # Words that may appear alone on a line and look like paragraph labels
    _STATEMENT_KEYWORDS = {
        "EXIT", "CONTINUE", "GOBACK", "ELSE",
        "END-IF", "END-EVALUATE", "END-PERFORM",
    }

    _DATA_MARKERS = ("DATA DIVISION", "WORKING-STORAGE SECTION", "LOCAL-STORAGE SECTION")

    def structure(self, source_lines: Iterable[str]) -> ProgramStructure:
        """Structure a program.

        Args:
            source_lines: Raw program lines

        Returns:
            ProgramStructure with declarations, paragraphs and procedure
        """
        lines = normalize_source(source_lines)
        program = ProgramStructure()

        program.name = self._find_program_name(lines)
        self._scan_declarations(lines, program)
        program.procedure = self._extract_procedure(lines)
        self._segment_paragraphs(program)

        logger.debug(
            f"Structured {program.name}: {len(program.declarations)} declarations, "
            f"{len(program.paragraphs)} paragraphs, {len(program.procedure)} statements"
        )
        return program

    def _find_program_name(self, lines: List[str]) -> str:
        """Find the PROGRAM-ID, if any."""
        for line in lines:
            match = PROGRAM_ID_PATTERN.match(line)
            if match:
                return match.group(1).upper()
        return "UNKNOWN"

    def _scan_declarations(self, lines: List[str], program: ProgramStructure) -> None:
        """Collect picture declarations up to the PROCEDURE DIVISION."""
        in_data = False

        for line_number, line in enumerate(lines, start=1):
            upper = line.upper()
            if upper.startswith("PROCEDURE DIVISION"):
                break
            if any(upper.startswith(marker) for marker in self._DATA_MARKERS):
                in_data = True
                continue
            if not in_data:
                continue

            for sentence in split_sentences(line):
                declaration = self._parse_declaration(sentence, line_number)
                if declaration is not None:
                    program.declarations[declaration.name] = declaration

    def _parse_declaration(self, line: str, line_number: int) -> Optional[Declaration]:
        """Parse a ``<level> <name> PIC <picture> [VALUE <literal>]`` line."""
        match = PIC_PATTERN.search(line)
        if not match:
            return None

        tokens = line[:match.start()].split()
        if len(tokens) < 2:
            logger.debug(f"Ignoring declaration without level or name: {line}")
            return None

        name = tokens[-1].replace(".", "").upper()
        picture = PictureSpec.parse(match.group(1))
        value = self._parse_value(line[match.end():])

        return Declaration(name=name, picture=picture, value=value, line_number=line_number)

    def _parse_value(self, clause: str) -> Optional[Value]:
        """Parse the VALUE clause following a picture."""
        match = VALUE_PATTERN.search(clause)
        if not match:
            return None

        literal = match.group(1)
        upper = literal.upper()
        if literal[0] in ("'", '"'):
            return literal[1:-1]
        if upper.startswith("SPACE"):
            return " "
        if upper.startswith("ZERO"):
            return 0
        return int(literal)

    def _extract_procedure(self, lines: List[str]) -> List[str]:
        """Collect every statement of the PROCEDURE DIVISION, in order."""
        procedure: List[str] = []
        in_procedure = False

        for line in lines:
            if line.upper().startswith("PROCEDURE DIVISION"):
                in_procedure = True
                continue
            if in_procedure:
                procedure.extend(split_sentences(line))

        return procedure

    def _segment_paragraphs(self, program: ProgramStructure) -> None:
        """Split the procedure statements into labelled paragraphs."""
        current: Optional[Paragraph] = None

        for statement in program.procedure:
            label = self.label_of(statement)
            if label is not None:
                current = Paragraph(name=label)
                program.paragraphs[label] = current
                continue
            if current is not None:
                current.lines.append(statement)

    def label_of(self, statement: str) -> Optional[str]:
        """Return the paragraph label a statement declares, if it is one."""
        match = LABEL_PATTERN.match(statement)
        if not match:
            return None
        label = match.group(1)
        if label in self._STATEMENT_KEYWORDS:
            return None
        return label
