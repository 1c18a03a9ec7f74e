from __future__ import annotations

from typing import assert_never

from . import syntax as S
from .errors import nesting_error


_INDENT = "    "

# Binding strength of binary operators, loosest first.
_PRECEDENCE: dict[S.BinOpKind, int] = {
    S.BinOpKind.BIT_OR: 1,
    S.BinOpKind.BIT_XOR: 2,
    S.BinOpKind.BIT_AND: 3,
    S.BinOpKind.LSHIFT: 4,
    S.BinOpKind.RSHIFT: 4,
    S.BinOpKind.ADD: 5,
    S.BinOpKind.SUB: 5,
    S.BinOpKind.MULT: 6,
    S.BinOpKind.DIV: 6,
    S.BinOpKind.FLOOR_DIV: 6,
    S.BinOpKind.MOD: 6,
    S.BinOpKind.MAT_MULT: 6,
    S.BinOpKind.POW: 8,
}
_ATOM = 10


def format_statements(stmts: tuple[S.Stmt, ...] | list[S.Stmt]) -> str:
    """Render statements as Python source, one statement per line.

    Spans are not preserved. Constructs the tree does not model (opaque nodes,
    parameter defaults, decorators) are dropped or printed as ``...``. Raises
    ParseError at a statement nested too deeply to walk.
    """
    out: list[str] = []
    for st in stmts:
        try:
            out.extend(_format_stmt(st, indent=0))
        except RecursionError:
            raise nesting_error(st.span) from None
    if not out:
        return ""
    return "\n".join(out) + "\n"


def _format_stmt(st: S.Stmt, *, indent: int) -> list[str]:
    pad = _INDENT * indent
    match st:
        case S.FunctionDef():
            head = "async def" if st.is_async else "def"
            sig = f"{pad}{head} {st.name}({_format_params(st.params)})"
            if st.returns is not None:
                sig += f" -> {format_annotation(st.returns)}"
            out = [sig + ":"]
            for inner in st.body:
                out.extend(_format_stmt(inner, indent=indent + 1))
            if not st.body:
                out.append(_INDENT * (indent + 1) + "pass")
            return out
        case S.AnnAssign():
            s = f"{pad}{st.target}: {format_annotation(st.annotation)}"
            if st.value is not None:
                s += f" = {format_expr(st.value)}"
            return [s]
        case S.Assign():
            targets = " = ".join(st.targets)
            return [f"{pad}{targets} = {format_expr(st.value)}"]
        case S.ExprStmt():
            return [pad + format_expr(st.value)]
        case S.Return():
            if st.value is None:
                return [pad + "return"]
            return [f"{pad}return {format_expr(st.value)}"]
        case S.Pass():
            return [pad + "pass"]
        case S.OpaqueStmt():
            return [pad + "..."]
        case _:
            assert_never(st)


def _format_params(params: tuple[S.Param, ...]) -> str:
    parts: list[str] = []
    kinds = {p.kind for p in params}
    for i, p in enumerate(params):
        if (
            p.kind is S.ParamKind.KEYWORD_ONLY
            and S.ParamKind.VAR_POSITIONAL not in kinds
            and (i == 0 or params[i - 1].kind is not S.ParamKind.KEYWORD_ONLY)
        ):
            parts.append("*")
        text = p.name
        if p.kind is S.ParamKind.VAR_POSITIONAL:
            text = "*" + text
        elif p.kind is S.ParamKind.VAR_KEYWORD:
            text = "**" + text
        if p.annotation is not None:
            text += f": {format_annotation(p.annotation)}"
        parts.append(text)
        if p.kind is S.ParamKind.POSITIONAL_ONLY and (
            i + 1 == len(params) or params[i + 1].kind is not S.ParamKind.POSITIONAL_ONLY
        ):
            parts.append("/")
    return ", ".join(parts)


def format_expr(e: S.Expr) -> str:
    match e:
        case S.Name():
            return e.id
        case S.Constant():
            return "..." if e.value is Ellipsis else repr(e.value)
        case S.BinOp():
            return _format_binop(e)
        case S.Call():
            args = [format_expr(a) for a in e.args]
            for kw in e.keywords:
                if kw.name is None:
                    args.append(f"**{format_expr(kw.value)}")
                else:
                    args.append(f"{kw.name}={format_expr(kw.value)}")
            return f"{_wrap(e.func, _ATOM)}({', '.join(args)})"
        case S.OpaqueExpr():
            return "..."
        case _:
            assert_never(e)


def _format_binop(e: S.BinOp) -> str:
    # Left-nested chains are rendered iteratively, innermost first.
    chain = [e]
    while isinstance(chain[-1].left, S.BinOp):
        chain.append(chain[-1].left)
    text = format_expr(chain[-1].left)
    for link in reversed(chain):
        prec = _PRECEDENCE[link.op]
        right_assoc = link.op is S.BinOpKind.POW
        if _expr_precedence(link.left) < (prec + 1 if right_assoc else prec):
            text = f"({text})"
        right = _wrap(link.right, prec if right_assoc else prec + 1)
        text = f"{text} {link.op.value} {right}"
    return text


def _wrap(e: S.Expr, min_prec: int) -> str:
    s = format_expr(e)
    if _expr_precedence(e) < min_prec:
        return f"({s})"
    return s


def _expr_precedence(e: S.Expr) -> int:
    if isinstance(e, S.BinOp):
        return _PRECEDENCE[e.op]
    return _ATOM


def format_annotation(ann: S.TypeAnnotation) -> str:
    match ann:
        case S.NameAnnotation():
            return ann.name
        case S.GenericAnnotation():
            args = ", ".join(format_annotation(a) for a in ann.args) or "()"
            return f"{ann.base.name}[{args}]"
        case S.UnionAnnotation():
            return " | ".join(format_annotation(m) for m in ann.members)
        case S.OpaqueAnnotation():
            return "..."
        case _:
            assert_never(ann)
