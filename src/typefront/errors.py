from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar

from .spans import SourceLocation, SourceSpan


class Diagnostic(Exception):
    """Base of every failure reported by the front-end and later phases.

    Subclasses are the closed set of diagnostic kinds. Located kinds render as
    ``"<Kind> error at <file>:<line>:<column>: <message>"``.
    """

    kind: ClassVar[str] = "Unknown"

    location: SourceLocation | None

    @property
    def detail(self) -> str:
        raise NotImplementedError

    def __str__(self) -> str:
        if self.location is None:
            return self.detail
        return f"{self.kind} error at {self.location.format()}: {self.detail}"


@dataclass(slots=True)
class ParseError(Diagnostic):
    kind: ClassVar[str] = "Parse"

    location: SourceLocation
    message: str

    @property
    def detail(self) -> str:
        return self.message


@dataclass(slots=True)
class TypeCheckError(Diagnostic):
    kind: ClassVar[str] = "Type"

    location: SourceLocation
    message: str

    @property
    def detail(self) -> str:
        return self.message


@dataclass(slots=True)
class UndefinedNameError(Diagnostic):
    kind: ClassVar[str] = "Name"

    name: str
    location: SourceLocation

    @property
    def detail(self) -> str:
        return f"undefined name {self.name!r}"


@dataclass(slots=True)
class IoError(Diagnostic):
    """Reading source failed; renders the operating system's message."""

    kind: ClassVar[str] = "IO"

    cause: OSError | UnicodeDecodeError
    location: SourceLocation | None = field(default=None, init=False, repr=False)

    @property
    def detail(self) -> str:
        return str(self.cause)


def nesting_error(span: SourceSpan) -> ParseError:
    """The statement at ``span`` is too deep for the recursive tree walkers."""
    location = SourceLocation(file=span.file, line=1, column=0) if span.is_unknown else span.start
    return ParseError(location=location, message="statement is nested too deeply to analyze")
