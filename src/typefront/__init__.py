from __future__ import annotations

from .api import load_file, load_source, parse_file, parse_source
from .errors import Diagnostic, IoError, ParseError, TypeCheckError, UndefinedNameError
from .format import format_statements
from .grammar import ParseMode
from .spans import SourceLocation, SourceSpan, offset_to_line_col

__all__ = [
    "Diagnostic",
    "IoError",
    "ParseError",
    "ParseMode",
    "SourceLocation",
    "SourceSpan",
    "TypeCheckError",
    "UndefinedNameError",
    "format_statements",
    "load_file",
    "load_source",
    "offset_to_line_col",
    "parse_file",
    "parse_source",
]
