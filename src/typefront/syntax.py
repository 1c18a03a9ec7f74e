"""Internal syntax tree consumed by symbol resolution and type checking.

Each category (statements, expressions, type annotations) is a closed union of frozen
dataclasses. Consumers dispatch with ``match`` and finish with ``assert_never`` so a new
variant fails type checking everywhere it is not handled.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from types import EllipsisType
from typing import TypeAlias

from .spans import SourceSpan


class BinOpKind(str, Enum):
    ADD = "+"
    SUB = "-"
    MULT = "*"
    DIV = "/"
    FLOOR_DIV = "//"
    MOD = "%"
    POW = "**"
    MAT_MULT = "@"
    LSHIFT = "<<"
    RSHIFT = ">>"
    BIT_OR = "|"
    BIT_XOR = "^"
    BIT_AND = "&"


class ParamKind(str, Enum):
    POSITIONAL_ONLY = "positional_only"
    POSITIONAL_OR_KEYWORD = "positional_or_keyword"
    VAR_POSITIONAL = "var_positional"
    KEYWORD_ONLY = "keyword_only"
    VAR_KEYWORD = "var_keyword"


# ---------------------------------------------------------------------------
# Type annotations
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class NameAnnotation:
    name: str  # dotted, e.g. "int" or "typing.Any"
    span: SourceSpan


@dataclass(frozen=True, slots=True)
class GenericAnnotation:
    """``base[arg, ...]``, e.g. ``list[int]``."""

    base: NameAnnotation
    args: tuple[TypeAnnotation, ...]
    span: SourceSpan


@dataclass(frozen=True, slots=True)
class UnionAnnotation:
    """``A | B | ...`` flattened left to right."""

    members: tuple[TypeAnnotation, ...]
    span: SourceSpan


@dataclass(frozen=True, slots=True)
class OpaqueAnnotation:
    span: SourceSpan


TypeAnnotation: TypeAlias = NameAnnotation | GenericAnnotation | UnionAnnotation | OpaqueAnnotation


# ---------------------------------------------------------------------------
# Expressions
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Name:
    id: str
    span: SourceSpan


ConstantValue: TypeAlias = int | float | complex | str | bytes | bool | None | EllipsisType


@dataclass(frozen=True, slots=True)
class Constant:
    value: ConstantValue
    span: SourceSpan


@dataclass(frozen=True, slots=True)
class BinOp:
    left: Expr
    op: BinOpKind
    right: Expr
    span: SourceSpan


@dataclass(frozen=True, slots=True)
class Keyword:
    name: str | None  # None for ``**kwargs``
    value: Expr
    span: SourceSpan


@dataclass(frozen=True, slots=True)
class Call:
    func: Expr
    args: tuple[Expr, ...]
    keywords: tuple[Keyword, ...]
    span: SourceSpan


@dataclass(frozen=True, slots=True)
class OpaqueExpr:
    """An expression form not modeled yet; ``kind`` is the source node's class name."""

    kind: str
    span: SourceSpan


Expr: TypeAlias = Name | Constant | BinOp | Call | OpaqueExpr


# ---------------------------------------------------------------------------
# Statements
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Param:
    name: str
    annotation: TypeAnnotation | None
    kind: ParamKind
    span: SourceSpan


@dataclass(frozen=True, slots=True)
class FunctionDef:
    name: str
    params: tuple[Param, ...]
    returns: TypeAnnotation | None
    body: tuple[Stmt, ...]
    is_async: bool
    span: SourceSpan


@dataclass(frozen=True, slots=True)
class AnnAssign:
    target: str
    annotation: TypeAnnotation
    value: Expr | None
    span: SourceSpan


@dataclass(frozen=True, slots=True)
class Assign:
    targets: tuple[str, ...]
    value: Expr
    span: SourceSpan


@dataclass(frozen=True, slots=True)
class ExprStmt:
    value: Expr
    span: SourceSpan


@dataclass(frozen=True, slots=True)
class Return:
    value: Expr | None
    span: SourceSpan


@dataclass(frozen=True, slots=True)
class Pass:
    span: SourceSpan


@dataclass(frozen=True, slots=True)
class OpaqueStmt:
    """A statement form not modeled yet; ``kind`` is the source node's class name."""

    kind: str
    span: SourceSpan


Stmt: TypeAlias = FunctionDef | AnnAssign | Assign | ExprStmt | Return | Pass | OpaqueStmt
