from __future__ import annotations

import os
from dataclasses import dataclass
from typing import TypeAlias


FilePath: TypeAlias = str | os.PathLike[str]

UNKNOWN_FILE = "<unknown>"


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """A single point in a source file.

    Lines are 1-based; columns are 0-based UTF-8 byte offsets from the start of the line.
    """

    file: FilePath
    line: int
    column: int

    def format(self) -> str:
        return f"{os.fspath(self.file)}:{self.line}:{self.column}"


@dataclass(frozen=True, slots=True)
class SourceSpan:
    """Half-open range [start, end) in a single file, columns as in SourceLocation."""

    file: FilePath
    start_line: int
    start_col: int
    end_line: int
    end_col: int

    @classmethod
    def unknown(cls) -> SourceSpan:
        """Span for synthesized nodes that have no source origin."""
        return cls(file=UNKNOWN_FILE, start_line=0, start_col=0, end_line=0, end_col=0)

    @property
    def is_unknown(self) -> bool:
        return self.start_line == 0

    @property
    def start(self) -> SourceLocation:
        if self.is_unknown:
            raise ValueError("span has no source origin")
        return SourceLocation(file=self.file, line=self.start_line, column=self.start_col)

    def format(self) -> str:
        if self.is_unknown:
            return UNKNOWN_FILE
        return f"{os.fspath(self.file)}:{self.start_line}:{self.start_col}"


def offset_to_line_col(src: str, offset: int) -> tuple[int, int]:
    """Translate a UTF-8 byte offset into ``src`` to a (line, column) pair.

    The line is 1 + the number of ``\\n`` strictly before ``offset``; the column is the
    distance in bytes from the start of that line. A newline byte never occurs inside a
    multi-byte UTF-8 sequence, so scanning the encoded text is character-safe. Offsets
    past the end are measured against the last line.
    """
    if offset <= 0:
        return 1, 0
    head = src.encode("utf-8")[:offset]
    line_start = head.rfind(b"\n") + 1
    return head.count(b"\n") + 1, max(offset - line_start, 0)
