from __future__ import annotations

import ast
from dataclasses import fields, is_dataclass
from pathlib import Path

import pytest

from typefront import ParseError, ParseMode, SourceSpan, load_source, offset_to_line_col
from typefront import syntax as S
from typefront.lowering import lower_statements


def _spans(node: object) -> list[SourceSpan]:
    out: list[SourceSpan] = []
    if isinstance(node, SourceSpan):
        out.append(node)
    elif is_dataclass(node):
        for f in fields(node):
            out.extend(_spans(getattr(node, f.name)))
    elif isinstance(node, tuple):
        for x in node:
            out.extend(_spans(x))
    return out


def test_function_def() -> None:
    src = "def add(a: int, b: int) -> int:\n    return a + b\n"
    (fn,) = load_source(src, file="m.py")
    assert isinstance(fn, S.FunctionDef)
    assert fn.name == "add"
    assert not fn.is_async
    assert fn.span == SourceSpan("m.py", 1, 0, 2, 16)
    assert [p.name for p in fn.params] == ["a", "b"]
    assert fn.params[0].annotation == S.NameAnnotation("int", SourceSpan("m.py", 1, 11, 1, 14))
    assert fn.params[0].span == SourceSpan("m.py", 1, 8, 1, 14)
    assert fn.returns == S.NameAnnotation("int", SourceSpan("m.py", 1, 27, 1, 30))

    (ret,) = fn.body
    assert isinstance(ret, S.Return)
    assert ret.span == SourceSpan("m.py", 2, 4, 2, 16)
    assert ret.value == S.BinOp(
        left=S.Name("a", SourceSpan("m.py", 2, 11, 2, 12)),
        op=S.BinOpKind.ADD,
        right=S.Name("b", SourceSpan("m.py", 2, 15, 2, 16)),
        span=SourceSpan("m.py", 2, 11, 2, 16),
    )


def test_parameter_kinds() -> None:
    (fn,) = load_source("async def f(a, /, b, *args, c, **kw):\n    pass\n", file="m.py")
    assert isinstance(fn, S.FunctionDef)
    assert fn.is_async
    assert [(p.name, p.kind) for p in fn.params] == [
        ("a", S.ParamKind.POSITIONAL_ONLY),
        ("b", S.ParamKind.POSITIONAL_OR_KEYWORD),
        ("args", S.ParamKind.VAR_POSITIONAL),
        ("c", S.ParamKind.KEYWORD_ONLY),
        ("kw", S.ParamKind.VAR_KEYWORD),
    ]
    assert isinstance(fn.body[0], S.Pass)


def test_annotated_and_plain_assignments() -> None:
    stmts = load_source('x: int = 5\ny: str = "hello"\nz: float\na = b = x\n', file="m.py")
    assert [type(s) for s in stmts] == [S.AnnAssign, S.AnnAssign, S.AnnAssign, S.Assign]
    x, y, z, ab = stmts
    assert isinstance(x, S.AnnAssign) and isinstance(x.value, S.Constant)
    assert x.value.value == 5
    assert isinstance(y, S.AnnAssign) and isinstance(y.value, S.Constant)
    assert y.value.value == "hello"
    assert isinstance(z, S.AnnAssign) and z.value is None
    assert isinstance(ab, S.Assign)
    assert ab.targets == ("a", "b")
    assert ab.value == S.Name("x", SourceSpan("m.py", 4, 8, 4, 9))


def test_annotations() -> None:
    src = "a: list[int | None]\nb: typing.Dict[str, 'Foo']\nc: Callable[..., int]\nd: tuple[()]\n"
    a, b, c, d = load_source(src, file="m.py")
    assert isinstance(a, S.AnnAssign)
    assert isinstance(a.annotation, S.GenericAnnotation)
    assert a.annotation.base.name == "list"
    (union,) = a.annotation.args
    assert isinstance(union, S.UnionAnnotation)
    assert [m.name for m in union.members] == ["int", "None"]  # type: ignore[union-attr]

    assert isinstance(b, S.AnnAssign) and isinstance(b.annotation, S.GenericAnnotation)
    assert b.annotation.base.name == "typing.Dict"
    assert [a.name for a in b.annotation.args] == ["str", "Foo"]  # type: ignore[union-attr]

    assert isinstance(c, S.AnnAssign) and isinstance(c.annotation, S.GenericAnnotation)
    assert isinstance(c.annotation.args[0], S.OpaqueAnnotation)

    assert isinstance(d, S.AnnAssign) and isinstance(d.annotation, S.GenericAnnotation)
    assert d.annotation.args == ()


def test_call_with_keywords() -> None:
    (st,) = load_source("f(1, k='v', **rest)\n", file="m.py")
    assert isinstance(st, S.ExprStmt)
    call = st.value
    assert isinstance(call, S.Call)
    assert call.func == S.Name("f", SourceSpan("m.py", 1, 0, 1, 1))
    assert [a.value for a in call.args] == [1]  # type: ignore[union-attr]
    assert [kw.name for kw in call.keywords] == ["k", None]
    assert call.keywords[0].span == SourceSpan("m.py", 1, 5, 1, 10)


def test_unmodeled_constructs_are_opaque() -> None:
    stmts = load_source("for i in x:\n    pass\nobj.attr = 1\na, b = t\nx = [1]\n", file="m.py")
    assert [type(s) for s in stmts] == [S.OpaqueStmt, S.OpaqueStmt, S.OpaqueStmt, S.Assign]
    assert [s.kind for s in stmts[:3]] == ["For", "Assign", "Assign"]  # type: ignore[union-attr]
    assert stmts[3].value == S.OpaqueExpr("List", SourceSpan("m.py", 5, 4, 5, 7))  # type: ignore[union-attr]


def test_expression_mode_wrapper_uses_child_span() -> None:
    (st,) = load_source("1 + 2", file="m.py", mode=ParseMode.EXPRESSION)
    assert isinstance(st, S.ExprStmt)
    assert isinstance(st.value, S.BinOp)
    assert st.span == st.value.span == SourceSpan("m.py", 1, 0, 1, 5)


def test_spans_use_utf8_byte_columns() -> None:
    src = "s = 'é' + t"
    (st,) = load_source(src, file="m.py")
    assert isinstance(st, S.Assign) and isinstance(st.value, S.BinOp)
    right = st.value.right
    assert right.span == SourceSpan("m.py", 1, 11, 1, 12)
    assert offset_to_line_col(src, src.encode("utf-8").index(b"t")) == (right.span.start_line, right.span.start_col)


def test_every_node_is_spanned_in_the_given_file(tmp_path: Path) -> None:
    path = tmp_path / "mod.py"
    src = """
import os

def f(a: int, *rest: str, key: 'Foo' = None) -> dict[str, int | None]:
    x: int = a + 2 * g(a, k=3)
    if x:
        return x
    return None

class C:
    y = 1

value = f(1) ** 2 - 3
print(value, [value], sep='')
"""
    stmts = load_source(src, file=path)
    spans = _spans(stmts)
    assert len(spans) > 20
    for sp in spans:
        assert sp.file is path
        assert not sp.is_unknown
        assert (sp.start_line, sp.start_col) <= (sp.end_line, sp.end_col)


def test_long_operator_chain_lowers() -> None:
    (st,) = load_source("x = " + " + ".join(["1"] * 1400) + "\n", file="m.py")
    assert isinstance(st, S.Assign)
    node = st.value
    depth = 0
    while isinstance(node, S.BinOp):
        assert node.op is S.BinOpKind.ADD
        assert node.span.start_col == 4
        node = node.left
        depth += 1
    assert depth == 1399
    assert node == S.Constant(1, SourceSpan("m.py", 1, 4, 1, 5))


def test_too_deep_statement_is_parse_error() -> None:
    value: ast.expr = ast.Constant(value=1)
    for _ in range(5000):
        value = ast.BinOp(left=ast.Constant(value=1), op=ast.Add(), right=value)
    st = ast.Assign(
        targets=[ast.Name(id="x", ctx=ast.Store())],
        value=value,
        lineno=3,
        col_offset=0,
        end_lineno=3,
        end_col_offset=9,
    )
    with pytest.raises(ParseError) as e:
        lower_statements([st], file="m.py")
    assert str(e.value) == "Parse error at m.py:3:0: statement is nested too deeply to analyze"
