"""Tests for the program structurer."""

import pytest

# Path is setup in conftest.py

from cobol_interpreter.nodes import PictureSpec
from cobol_interpreter.structurer import ProgramStructurer


class TestDeclarations:
    """Tests for the DATA DIVISION scan."""

    @pytest.fixture
    def program(self):
        """Structure a program with a variety of declarations."""
        source = """
       IDENTIFICATION DIVISION.
       PROGRAM-ID. DECLS.
       DATA DIVISION.
       WORKING-STORAGE SECTION.
      * counters
       01 WS-COUNT          PIC 9(3).
       01 WS-NAME           PIC X(10) VALUE 'ALICE'.
       77 WS-FLAG           PICTURE IS X.
       01 WS-TOTAL          PIC S9(5) VALUE 12.
       01 WS-BLANK          PIC X(3) VALUE SPACES.
       01 WS-ZERO           PIC 9(2) VALUE ZERO.
       01 WS-GROUP.
       PIC 9(3).
       PROCEDURE DIVISION.
           DISPLAY WS-COUNT.
        """
        return ProgramStructurer().structure(source.splitlines())

    def test_program_name(self, program):
        """Test PROGRAM-ID extraction."""
        assert program.name == "DECLS"

    def test_pictures(self, program):
        """Test that pictures are parsed for each declaration."""
        declarations = program.declarations
        assert declarations["WS-COUNT"].picture == PictureSpec(is_numeric=True, length=3)
        assert declarations["WS-NAME"].picture == PictureSpec(is_numeric=False, length=10)
        assert declarations["WS-FLAG"].picture == PictureSpec(is_numeric=False, length=1)
        assert declarations["WS-TOTAL"].picture == PictureSpec(is_numeric=True, length=5)

    def test_values(self, program):
        """Test VALUE clause parsing."""
        declarations = program.declarations
        assert declarations["WS-COUNT"].value is None
        assert declarations["WS-NAME"].value == "ALICE"
        assert declarations["WS-TOTAL"].value == 12
        assert declarations["WS-BLANK"].value == " "
        assert declarations["WS-ZERO"].value == 0

    def test_lines_without_picture_are_ignored(self, program):
        """Test that group items and bare pictures are not declarations."""
        assert "WS-GROUP" not in program.declarations
        assert len(program.declarations) == 6

    def test_declarations_outside_data_division_are_ignored(self):
        """Test that PIC text before the DATA DIVISION is not declared."""
        lines = [
            "IDENTIFICATION DIVISION.",
            "01 EARLY PIC 9.",
            "DATA DIVISION.",
            "WORKING-STORAGE SECTION.",
            "01 LATE PIC 9.",
            "PROCEDURE DIVISION.",
            "01 AFTER PIC 9.",
        ]
        program = ProgramStructurer().structure(lines)
        assert list(program.declarations) == ["LATE"]

    def test_missing_program_id(self):
        """Test the default program name."""
        program = ProgramStructurer().structure(["PROCEDURE DIVISION.", "STOP RUN."])
        assert program.name == "UNKNOWN"


class TestProcedure:
    """Tests for paragraph segmentation and the procedure body."""

    @pytest.fixture
    def program(self):
        """Structure a program with two paragraphs."""
        lines = [
            "DATA DIVISION.",
            "WORKING-STORAGE SECTION.",
            "01 X PIC 9(3).",
            "PROCEDURE DIVISION.",
            "    MOVE 1 TO X.",
            "FIRST-PARA.",
            "    ADD 1 TO X.",
            "",
            "    * a comment",
            "    DISPLAY X.",
            "SECOND-PARA.",
            "    IF X > 1",
            "        EXIT.",
            "    END-IF.",
            "    STOP RUN.",
        ]
        return ProgramStructurer().structure(lines)

    def test_paragraph_labels(self, program):
        """Test that labels open paragraphs in order."""
        assert list(program.paragraphs) == ["FIRST-PARA", "SECOND-PARA"]

    def test_paragraph_bodies(self, program):
        """Test that bodies hold the lines up to the next label."""
        assert program.paragraphs["FIRST-PARA"].lines == ["ADD 1 TO X.", "DISPLAY X."]
        assert program.paragraphs["SECOND-PARA"].lines == [
            "IF X > 1",
            "EXIT.",
            "END-IF.",
            "STOP RUN.",
        ]

    def test_procedure_holds_every_statement(self, program):
        """Test that the procedure body ignores paragraph boundaries."""
        assert program.procedure == [
            "MOVE 1 TO X.",
            "FIRST-PARA.",
            "ADD 1 TO X.",
            "DISPLAY X.",
            "SECOND-PARA.",
            "IF X > 1",
            "EXIT.",
            "END-IF.",
            "STOP RUN.",
        ]

    def test_get_paragraph_is_case_insensitive(self, program):
        """Test paragraph lookup by label."""
        assert program.get_paragraph("first-para") is program.paragraphs["FIRST-PARA"]
        assert program.get_paragraph("NOPE") is None

    def test_multi_sentence_lines_are_split(self):
        """Test that sentences sharing a line become separate statements."""
        lines = [
            "PROCEDURE DIVISION.",
            "MAIN-PARA. MOVE 10 TO X. ADD 5 TO X.",
        ]
        program = ProgramStructurer().structure(lines)
        assert program.procedure == ["MAIN-PARA.", "MOVE 10 TO X.", "ADD 5 TO X."]
        assert program.paragraphs["MAIN-PARA"].lines == ["MOVE 10 TO X.", "ADD 5 TO X."]

    def test_statement_keywords_are_not_labels(self):
        """Test that lone EXIT/END-IF lines do not open paragraphs."""
        structurer = ProgramStructurer()
        assert structurer.label_of("EXIT.") is None
        assert structurer.label_of("END-IF.") is None
        assert structurer.label_of("GOBACK.") is None
        assert structurer.label_of("MAIN-PARA.") == "MAIN-PARA"
        assert structurer.label_of("main-para.") is None
        assert structurer.label_of("STOP RUN.") is None

    def test_structurer_is_reusable(self):
        """Test that each call starts from scratch."""
        structurer = ProgramStructurer()
        first = structurer.structure(["PROCEDURE DIVISION.", "A-PARA.", "STOP RUN."])
        second = structurer.structure(["PROCEDURE DIVISION.", "B-PARA.", "STOP RUN."])
        assert list(first.paragraphs) == ["A-PARA"]
        assert list(second.paragraphs) == ["B-PARA"]
