"""Tests for picture specifications and the variable store."""

import pytest

# Path is setup in conftest.py

from cobol_interpreter.nodes import PictureSpec
from cobol_interpreter.variables import (
    VariableStore,
    fit_text,
    is_integer_literal,
    parse_integer,
)


class TestPictureSpec:
    """Tests for picture parsing."""

    @pytest.mark.parametrize("picture,is_numeric,length", [
        ("9(3)", True, 3),
        ("X(10)", False, 10),
        ("999", True, 3),
        ("XX", False, 2),
        ("9", True, 1),
        ("x(4)", False, 4),
        ("S9(5)", True, 5),
        ("9(2)99", True, 4),
    ])
    def test_parse(self, picture, is_numeric, length):
        """Test numeric flag and summed length."""
        spec = PictureSpec.parse(picture)
        assert spec.is_numeric is is_numeric
        assert spec.length == length

    def test_blank_values(self):
        """Test initial values of undeclared-VALUE slots."""
        assert PictureSpec(is_numeric=True, length=3).blank_value == 0
        assert PictureSpec(is_numeric=False, length=3).blank_value == "   "

    def test_is_immutable(self):
        """Test that a parsed picture cannot be changed."""
        spec = PictureSpec.parse("9(3)")
        with pytest.raises(Exception):
            spec.length = 5


class TestHelpers:
    """Tests for value helpers."""

    def test_is_integer_literal(self):
        """Test integer literal detection."""
        assert is_integer_literal("42")
        assert is_integer_literal("-7")
        assert not is_integer_literal("+7")
        assert not is_integer_literal("4.2")
        assert not is_integer_literal("X")

    def test_parse_integer(self):
        """Test lenient integer parsing."""
        assert parse_integer(5) == 5
        assert parse_integer(" 12 ") == 12
        assert parse_integer("+3") == 3
        assert parse_integer("ABC") is None
        assert parse_integer("") is None

    def test_fit_text(self):
        """Test truncation and padding."""
        assert fit_text("HI", 5) == "HI   "
        assert fit_text("HELLO WORLD", 5) == "HELLO"
        assert fit_text("ABC", 0) == ""


class TestVariableStore:
    """Tests for the variable store."""

    @pytest.fixture
    def store(self):
        """Create a store with one text and one numeric variable."""
        store = VariableStore()
        store.declare("NAME", PictureSpec(is_numeric=False, length=5))
        store.declare("COUNT", PictureSpec(is_numeric=True, length=3))
        return store

    def test_declared_initial_values(self, store):
        """Test blank initial values."""
        assert store.get("NAME") == "     "
        assert store.get("COUNT") == 0

    def test_declare_with_value(self):
        """Test that declared values are coerced."""
        store = VariableStore()
        store.declare("CITY", PictureSpec(is_numeric=False, length=3), "PARIS")
        assert store.get("CITY") == "PAR"

    def test_text_is_padded(self, store):
        """Test that short text is space padded to the picture length."""
        store.set("NAME", "HI")
        assert store.get("NAME") == "HI   "

    def test_text_is_truncated(self, store):
        """Test that long text is truncated to the picture length."""
        store.set("NAME", "ALEXANDER")
        assert store.get("NAME") == "ALEXA"

    def test_text_length_always_matches_picture(self, store):
        """Test the length invariant across several writes."""
        for value in ("", "A", "ABCDE", "ABCDEFGHIJ", 12345678, 7):
            store.set("NAME", value)
            assert len(store.get("NAME")) == 5

    def test_number_into_text(self, store):
        """Test that numbers are stored as text in text slots."""
        store.set("NAME", 42)
        assert store.get("NAME") == "42   "

    def test_numeric_parse(self, store):
        """Test that numeric text is parsed into numeric slots."""
        store.set("COUNT", "17")
        assert store.get("COUNT") == 17

    def test_numeric_parse_failure_stores_zero(self, store):
        """Test the silent fallback to zero."""
        store.set("COUNT", 9)
        store.set("COUNT", "ABC")
        assert store.get("COUNT") == 0

    def test_numeric_has_no_width_limit(self, store):
        """Test that numeric slots are not truncated to their picture."""
        store.set("COUNT", 12345)
        assert store.get("COUNT") == 12345

    def test_case_insensitive(self, store):
        """Test that names are case-insensitive."""
        store.set("name", "AB")
        assert store.get("Name") == "AB   "

    def test_undeclared_defaults_to_zero(self, store):
        """Test reading a variable that was never declared or set."""
        assert store.get("MISSING") == 0
        assert "MISSING" not in store

    def test_undeclared_stores_raw_value(self, store):
        """Test that undeclared slots are created lazily without coercion."""
        store.set("MSG", "HELLO")
        assert store.get("MSG") == "HELLO"
        assert "MSG" in store
        assert not store.is_declared("MSG")
        assert store.picture_of("MSG") is None

    def test_clear(self, store):
        """Test that clear removes slots and pictures."""
        store.clear()
        assert len(store) == 0
        assert not store.is_declared("NAME")

    def test_snapshot_is_a_copy(self, store):
        """Test that snapshots do not track later writes."""
        snapshot = store.snapshot()
        store.set("COUNT", 5)
        assert snapshot["COUNT"] == 0
