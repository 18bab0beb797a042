"""Source normalizer for COBOL programs.

This module turns raw program text into the logical lines the
interpreter works with by:
- Trimming surrounding whitespace
- Dropping blank lines and comment lines
- Removing inline ``*>`` comments
- Splitting a line that holds several period-terminated sentences
"""

from typing import Iterable, List, Optional

COMMENT_MARKER = "*"
INLINE_COMMENT_MARKER = "*>"
QUOTE_CHARS = ("'", '"')


def is_comment_line(line: str) -> bool:
    """Check if a line is a comment.

    Both the classic ``*`` marker and the free format ``*>`` marker
    are recognized once leading whitespace is removed.

    Args:
        line: The source line to check

    Returns:
        True if the line is a comment, False otherwise
    """
    return line.strip().startswith(COMMENT_MARKER)


def strip_inline_comment(line: str) -> str:
    """Remove a trailing ``*>`` comment that is not inside a literal.

    Args:
        line: The source line

    Returns:
        The line without its inline comment
    """
    quote: Optional[str] = None
    for index, char in enumerate(line):
        if quote:
            if char == quote:
                quote = None
        elif char in QUOTE_CHARS:
            quote = char
        elif line.startswith(INLINE_COMMENT_MARKER, index):
            return line[:index].rstrip()
    return line


def strip_terminator(sentence: str) -> str:
    """Remove the sentence-ending period, if it is outside any literal.

    ``DISPLAY 'END.'`` keeps its period because it belongs to the literal,
    while ``DISPLAY 'END'.`` loses it.
    """
    text = sentence.rstrip()
    if not text.endswith("."):
        return text

    quote: Optional[str] = None
    for char in text[:-1]:
        if quote:
            if char == quote:
                quote = None
        elif char in QUOTE_CHARS:
            quote = char

    if quote:
        return text
    return text[:-1].rstrip()


def split_sentences(line: str) -> List[str]:
    """Split a line into sentences at periods followed by whitespace.

    Periods inside quoted literals never split. Each sentence keeps its
    own terminating period.

    Args:
        line: A normalized source line

    Returns:
        List of sentences, in source order
    """
    sentences = []
    quote: Optional[str] = None
    start = 0

    for index, char in enumerate(line):
        if quote:
            if char == quote:
                quote = None
            continue
        if char in QUOTE_CHARS:
            quote = char
        elif char == "." and index + 1 < len(line) and line[index + 1].isspace():
            sentences.append(line[start:index + 1].strip())
            start = index + 1

    sentences.append(line[start:].strip())
    return [sentence for sentence in sentences if sentence]


def normalize_source(lines: Iterable[str]) -> List[str]:
    """Normalize program lines for structuring.

    Args:
        lines: Raw source lines (with or without line terminators)

    Returns:
        Trimmed, non-blank, non-comment lines in source order
    """
    normalized_lines = []

    for line in lines:
        # Handle empty lines
        if not line or line.isspace():
            continue

        # Handle comment lines
        if is_comment_line(line):
            continue

        content = strip_inline_comment(line).strip()
        if content:
            normalized_lines.append(content)

    return normalized_lines
