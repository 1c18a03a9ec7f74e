"""The external grammar parser, seen as a capability.

Given text and an entry mode, a backend returns CPython's own tree or raises
``GrammarFailure`` carrying a UTF-8 byte offset and a message. Everything about
locations and diagnostics is decided by the caller.
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Protocol


logger = logging.getLogger(__name__)


class ParseMode(str, Enum):
    MODULE = "module"
    EXPRESSION = "expression"
    INTERACTIVE = "interactive"
    FUNCTION_TYPE = "function_type"

    @property
    def compile_mode(self) -> str:
        return _COMPILE_MODES[self]


_COMPILE_MODES: dict[ParseMode, str] = {
    ParseMode.MODULE: "exec",
    ParseMode.EXPRESSION: "eval",
    ParseMode.INTERACTIVE: "single",
    ParseMode.FUNCTION_TYPE: "func_type",
}


@dataclass(slots=True)
class GrammarFailure(Exception):
    offset: int  # UTF-8 byte offset into the parsed text
    message: str

    def __str__(self) -> str:
        return f"{self.message} (at byte {self.offset})"


class GrammarBackend(Protocol):
    def parse(self, src: str, mode: ParseMode, filename: str) -> ast.mod: ...


class CPythonGrammar:
    """Backend over the running interpreter's ``ast.parse``."""

    def parse(self, src: str, mode: ParseMode, filename: str) -> ast.mod:
        try:
            return ast.parse(src, filename=filename, mode=mode.compile_mode)
        except SyntaxError as e:
            offset = syntax_error_offset(src, e.lineno, e.offset)
            logger.debug("syntax error in %s at line=%s col=%s -> byte %d", filename, e.lineno, e.offset, offset)
            raise GrammarFailure(offset=offset, message=e.msg) from e
        except ValueError as e:
            # Older interpreters reject NUL bytes with ValueError instead of SyntaxError.
            raise GrammarFailure(offset=0, message=str(e)) from e
        except (RecursionError, MemoryError) as e:
            logger.debug("%s exhausted the parser: %s", filename, type(e).__name__)
            raise GrammarFailure(offset=0, message="source is nested too deeply to parse") from e


def syntax_error_offset(src: str, lineno: int | None, col: int | None) -> int:
    """Convert a SyntaxError's 1-based line and 1-based character column to a byte offset.

    Lines are split on ``\\n`` only. A line number past the end clamps to the end of
    the text; a column past the end of its line clamps to the line's end.
    """
    if not lineno or lineno < 1:
        return 0
    lines = src.split("\n")
    if lineno > len(lines):
        return len(src.encode("utf-8"))
    start = sum(len(line.encode("utf-8")) + 1 for line in lines[: lineno - 1])
    if not col or col < 1:
        return start
    return start + len(lines[lineno - 1][: col - 1].encode("utf-8"))
