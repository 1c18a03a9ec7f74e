from __future__ import annotations

import logging

from . import syntax as S
from .errors import Diagnostic
from .symbols import collect_bindings


logger = logging.getLogger(__name__)


def check_statements(stmts: tuple[S.Stmt, ...] | list[S.Stmt]) -> list[Diagnostic]:
    """Type-check a lowered module.

    Builds the module symbol table; inference is not implemented, so no
    diagnostics are produced yet.
    """
    table = collect_bindings(stmts)
    logger.debug("collected %d module-level bindings", len(table))
    return []
