from __future__ import annotations

import ast
import logging
import os
from pathlib import Path

from .errors import IoError, ParseError
from .grammar import CPythonGrammar, GrammarBackend, GrammarFailure, ParseMode
from .lowering import lower_statements
from .spans import FilePath, SourceLocation, offset_to_line_col
from .syntax import Stmt


logger = logging.getLogger(__name__)

_DEFAULT_GRAMMAR: GrammarBackend = CPythonGrammar()


def parse_source(
    src: str,
    *,
    file: FilePath = "<memory>",
    mode: ParseMode = ParseMode.MODULE,
    grammar: GrammarBackend | None = None,
) -> list[ast.stmt]:
    """Parse ``src`` and return CPython's top-level statements.

    In EXPRESSION mode the single expression comes back wrapped in one ``ast.Expr``.
    INTERACTIVE and FUNCTION_TYPE results are not statement lists and yield ``[]``.
    Raises ParseError located in ``file`` on the first syntax error.
    """
    backend = grammar or _DEFAULT_GRAMMAR
    logger.debug("parsing %s (mode=%s, %d chars)", os.fspath(file), mode.value, len(src))
    try:
        tree = backend.parse(src, mode, os.fspath(file))
    except GrammarFailure as e:
        line, column = offset_to_line_col(src, e.offset)
        raise ParseError(
            location=SourceLocation(file=file, line=line, column=column),
            message=e.message,
        ) from e

    if isinstance(tree, ast.Module):
        return tree.body
    if isinstance(tree, ast.Expression):
        return [ast.copy_location(ast.Expr(value=tree.body), tree.body)]
    logger.debug("%s result has no statement list; returning none", type(tree).__name__)
    return []


def parse_file(
    path: FilePath,
    *,
    mode: ParseMode = ParseMode.MODULE,
    grammar: GrammarBackend | None = None,
) -> list[ast.stmt]:
    """Read ``path`` as UTF-8 and parse it; locations carry ``path`` unchanged."""
    src = read_source(path)
    return parse_source(src, file=path, mode=mode, grammar=grammar)


def read_source(path: FilePath) -> str:
    try:
        src = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise IoError(cause=e) from e
    logger.debug("read %d chars from %s", len(src), os.fspath(path))
    return src


def load_source(
    src: str,
    *,
    file: FilePath = "<memory>",
    mode: ParseMode = ParseMode.MODULE,
) -> tuple[Stmt, ...]:
    """Parse and lower ``src`` into the internal syntax tree."""
    return lower_statements(parse_source(src, file=file, mode=mode), file=file)


def load_file(path: FilePath, *, mode: ParseMode = ParseMode.MODULE) -> tuple[Stmt, ...]:
    return lower_statements(parse_file(path, mode=mode), file=path)
