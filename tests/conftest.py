"""Shared pytest configuration and fixtures."""

import sys
from pathlib import Path

import pytest

# Make the packages under src/ importable without installation
SRC_DIR = Path(__file__).parent.parent / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

FIXTURES_DIR = Path(__file__).parent / "fixtures"


@pytest.fixture
def fixtures_path():
    """Get path to test fixtures."""
    return FIXTURES_DIR


def build_program(procedure, declarations=()):
    """Build a complete program from declaration and procedure lines."""
    lines = [
        "IDENTIFICATION DIVISION.",
        "PROGRAM-ID. TEST-PROG.",
        "DATA DIVISION.",
        "WORKING-STORAGE SECTION.",
    ]
    lines.extend(declarations)
    lines.append("PROCEDURE DIVISION.")
    lines.extend(procedure)
    return lines


@pytest.fixture
def make_program():
    """Factory fixture building a program around procedure lines."""
    return build_program
