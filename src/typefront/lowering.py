"""Lowering from CPython's ``ast`` tree to the internal syntax tree.

Every produced node gets the span of the CPython node it came from. Constructs the
internal tree does not model yet become ``OpaqueStmt`` / ``OpaqueExpr`` /
``OpaqueAnnotation`` so that lowering is total.
"""

from __future__ import annotations

import ast
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from . import syntax as S
from .errors import nesting_error
from .spans import FilePath, SourceSpan


logger = logging.getLogger(__name__)


_BINOPS: dict[type[ast.operator], S.BinOpKind] = {
    ast.Add: S.BinOpKind.ADD,
    ast.Sub: S.BinOpKind.SUB,
    ast.Mult: S.BinOpKind.MULT,
    ast.Div: S.BinOpKind.DIV,
    ast.FloorDiv: S.BinOpKind.FLOOR_DIV,
    ast.Mod: S.BinOpKind.MOD,
    ast.Pow: S.BinOpKind.POW,
    ast.MatMult: S.BinOpKind.MAT_MULT,
    ast.LShift: S.BinOpKind.LSHIFT,
    ast.RShift: S.BinOpKind.RSHIFT,
    ast.BitOr: S.BinOpKind.BIT_OR,
    ast.BitXor: S.BinOpKind.BIT_XOR,
    ast.BitAnd: S.BinOpKind.BIT_AND,
}


def lower_statements(stmts: Iterable[ast.stmt], *, file: FilePath) -> tuple[S.Stmt, ...]:
    """Lower top-level statements.

    Raises ParseError at a statement nested too deeply to walk.
    """
    lowerer = _Lowerer(file)
    out: list[S.Stmt] = []
    for node in stmts:
        try:
            out.append(lowerer.stmt(node))
        except RecursionError:
            raise nesting_error(lowerer.span(node)) from None
    logger.debug("lowered %d top-level statements", len(out))
    return tuple(out)


def lower_expression(node: ast.expr, *, file: FilePath) -> S.Expr:
    return _Lowerer(file).expr(node)


def lower_annotation(node: ast.expr, *, file: FilePath) -> S.TypeAnnotation:
    return _Lowerer(file).annotation(node)


@dataclass(slots=True)
class _Lowerer:
    file: FilePath

    def span(self, node: ast.AST) -> SourceSpan:
        lineno = getattr(node, "lineno", None)
        if lineno is None:
            return SourceSpan.unknown()
        col = node.col_offset  # type: ignore[attr-defined]
        end_lineno = getattr(node, "end_lineno", None)
        end_col = getattr(node, "end_col_offset", None)
        return SourceSpan(
            file=self.file,
            start_line=lineno,
            start_col=col,
            end_line=lineno if end_lineno is None else end_lineno,
            end_col=col if end_col is None else end_col,
        )

    # -- statements ---------------------------------------------------------

    def statements(self, stmts: Iterable[ast.stmt]) -> tuple[S.Stmt, ...]:
        return tuple(self.stmt(s) for s in stmts)

    def stmt(self, node: ast.stmt) -> S.Stmt:
        sp = self.span(node)
        match node:
            case ast.FunctionDef() | ast.AsyncFunctionDef():
                return S.FunctionDef(
                    name=node.name,
                    params=self.params(node.args),
                    returns=None if node.returns is None else self.annotation(node.returns),
                    body=self.statements(node.body),
                    is_async=isinstance(node, ast.AsyncFunctionDef),
                    span=sp,
                )
            case ast.AnnAssign(target=ast.Name(id=target), annotation=ann, value=value):
                return S.AnnAssign(
                    target=target,
                    annotation=self.annotation(ann),
                    value=None if value is None else self.expr(value),
                    span=sp,
                )
            case ast.Assign(targets=targets, value=value) if all(isinstance(t, ast.Name) for t in targets):
                return S.Assign(
                    targets=tuple(t.id for t in targets),  # type: ignore[attr-defined]
                    value=self.expr(value),
                    span=sp,
                )
            case ast.Expr(value=value):
                return S.ExprStmt(value=self.expr(value), span=sp)
            case ast.Return(value=value):
                return S.Return(value=None if value is None else self.expr(value), span=sp)
            case ast.Pass():
                return S.Pass(span=sp)
        return S.OpaqueStmt(kind=type(node).__name__, span=sp)

    def params(self, args: ast.arguments) -> tuple[S.Param, ...]:
        out: list[S.Param] = []
        out.extend(self.param(a, S.ParamKind.POSITIONAL_ONLY) for a in args.posonlyargs)
        out.extend(self.param(a, S.ParamKind.POSITIONAL_OR_KEYWORD) for a in args.args)
        if args.vararg is not None:
            out.append(self.param(args.vararg, S.ParamKind.VAR_POSITIONAL))
        out.extend(self.param(a, S.ParamKind.KEYWORD_ONLY) for a in args.kwonlyargs)
        if args.kwarg is not None:
            out.append(self.param(args.kwarg, S.ParamKind.VAR_KEYWORD))
        return tuple(out)

    def param(self, arg: ast.arg, kind: S.ParamKind) -> S.Param:
        return S.Param(
            name=arg.arg,
            annotation=None if arg.annotation is None else self.annotation(arg.annotation),
            kind=kind,
            span=self.span(arg),
        )

    # -- expressions --------------------------------------------------------

    def expr(self, node: ast.expr) -> S.Expr:
        sp = self.span(node)
        match node:
            case ast.Name(id=name):
                return S.Name(id=name, span=sp)
            case ast.Constant(value=value):
                return S.Constant(value=value, span=sp)
            case ast.BinOp():
                return self.binop(node)
            case ast.Call(func=func, args=args, keywords=keywords):
                return S.Call(
                    func=self.expr(func),
                    args=tuple(self.expr(a) for a in args),
                    keywords=tuple(
                        S.Keyword(name=kw.arg, value=self.expr(kw.value), span=self.span(kw))
                        for kw in keywords
                    ),
                    span=sp,
                )
        return S.OpaqueExpr(kind=type(node).__name__, span=sp)

    def binop(self, node: ast.BinOp) -> S.Expr:
        # Left-nested chains (a + b + c ...) are walked iteratively.
        chain = [node]
        while isinstance(chain[-1].left, ast.BinOp):
            chain.append(chain[-1].left)
        out = self.expr(chain[-1].left)
        for link in reversed(chain):
            out = S.BinOp(
                left=out,
                op=_BINOPS[type(link.op)],
                right=self.expr(link.right),
                span=self.span(link),
            )
        return out

    # -- annotations --------------------------------------------------------

    def annotation(self, node: ast.expr) -> S.TypeAnnotation:
        sp = self.span(node)
        name = _dotted_name(node)
        if name is not None:
            return S.NameAnnotation(name=name, span=sp)
        match node:
            case ast.Subscript(value=base, slice=index):
                base_name = _dotted_name(base)
                if base_name is None:
                    return S.OpaqueAnnotation(span=sp)
                elts = index.elts if isinstance(index, ast.Tuple) else [index]
                return S.GenericAnnotation(
                    base=S.NameAnnotation(name=base_name, span=self.span(base)),
                    args=tuple(self.annotation(e) for e in elts),
                    span=sp,
                )
            case ast.BinOp(op=ast.BitOr()):
                return S.UnionAnnotation(members=tuple(self.annotation(m) for m in _union_members(node)), span=sp)
        return S.OpaqueAnnotation(span=sp)


def _dotted_name(node: ast.expr) -> str | None:
    """Name spelled by ``a``, ``a.b.c``, ``None`` or a string forward reference to one."""
    match node:
        case ast.Name(id=name):
            return name
        case ast.Attribute(value=value, attr=attr):
            head = _dotted_name(value)
            if head is None or isinstance(value, ast.Constant):
                return None
            return f"{head}.{attr}"
        case ast.Constant(value=None):
            return "None"
        case ast.Constant(value=str() as text) if text and all(p.isidentifier() for p in text.split(".")):
            return text
    return None


def _union_members(node: ast.expr) -> list[ast.expr]:
    if isinstance(node, ast.BinOp) and isinstance(node.op, ast.BitOr):
        return _union_members(node.left) + _union_members(node.right)
    return [node]
