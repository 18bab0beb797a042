"""Preprocessor module for COBOL source code normalization."""

from .normalizer import (
    is_comment_line,
    normalize_source,
    split_sentences,
    strip_inline_comment,
    strip_terminator,
)

__all__ = [
    "is_comment_line",
    "normalize_source",
    "split_sentences",
    "strip_inline_comment",
    "strip_terminator",
]
