from __future__ import annotations

import json
import math
import textwrap
from dataclasses import fields, is_dataclass
from enum import Enum

from . import syntax as S
from .errors import nesting_error
from .spans import SourceSpan


def dump_statements(stmts: tuple[S.Stmt, ...] | list[S.Stmt]) -> list[dict[str, object]]:
    """JSON-able view of lowered statements; each node is tagged with ``"node"``.

    Raises ParseError at a statement nested too deeply to walk.
    """
    out: list[dict[str, object]] = []
    for st in stmts:
        try:
            out.append(_to_jsonable(st))  # type: ignore[arg-type]
        except RecursionError:
            raise nesting_error(st.span) from None
    return out


def dump_json(stmts: tuple[S.Stmt, ...] | list[S.Stmt], *, indent: int = 2) -> str:
    """Strict JSON text of ``dump_statements``, laid out like ``json.dumps(..., indent=indent)``."""
    if not stmts:
        return "[]"
    items: list[str] = []
    for st, obj in zip(stmts, dump_statements(stmts)):
        # The encoder recurses once per nested node too.
        try:
            text = json.dumps(obj, indent=indent, allow_nan=False)
        except RecursionError:
            raise nesting_error(st.span) from None
        items.append(textwrap.indent(text, " " * indent))
    return "[\n" + ",\n".join(items) + "\n]"


def _to_jsonable(obj: object) -> object:
    if isinstance(obj, SourceSpan):
        return obj.format()
    if isinstance(obj, Enum):
        return obj.value
    if is_dataclass(obj):
        out: dict[str, object] = {"node": type(obj).__name__}
        for f in fields(obj):
            out[f.name] = _to_jsonable(getattr(obj, f.name))
        return out
    if isinstance(obj, (tuple, list)):
        return [_to_jsonable(x) for x in obj]
    if isinstance(obj, float) and not math.isfinite(obj):
        return repr(obj)
    if obj is None or isinstance(obj, (bool, int, float, str)):
        return obj
    # bytes, complex, Ellipsis
    return repr(obj)
