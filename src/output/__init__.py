"""Output module for delivering captured program output."""

from .json_writer import JSONWriter
from .text_writer import TextWriter

__all__ = ["JSONWriter", "TextWriter"]
