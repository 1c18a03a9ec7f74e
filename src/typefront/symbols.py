from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, assert_never

from . import syntax as S
from .spans import SourceSpan


@dataclass(frozen=True, slots=True)
class Binding:
    name: str
    kind: Literal["function", "variable"]
    annotation: S.TypeAnnotation | None
    span: SourceSpan


@dataclass(slots=True)
class SymbolTable:
    """Module-level names. Only the first binding of a name is kept."""

    bindings: dict[str, Binding] = field(default_factory=dict)

    def bind(self, binding: Binding) -> None:
        self.bindings.setdefault(binding.name, binding)

    def lookup(self, name: str) -> Binding | None:
        return self.bindings.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.bindings

    def __len__(self) -> int:
        return len(self.bindings)


def collect_bindings(stmts: tuple[S.Stmt, ...] | list[S.Stmt]) -> SymbolTable:
    table = SymbolTable()
    for st in stmts:
        match st:
            case S.FunctionDef():
                table.bind(Binding(st.name, "function", st.returns, st.span))
            case S.AnnAssign():
                table.bind(Binding(st.target, "variable", st.annotation, st.span))
            case S.Assign():
                for target in st.targets:
                    table.bind(Binding(target, "variable", None, st.span))
            case S.ExprStmt() | S.Return() | S.Pass() | S.OpaqueStmt():
                pass
            case _:
                assert_never(st)
    return table
