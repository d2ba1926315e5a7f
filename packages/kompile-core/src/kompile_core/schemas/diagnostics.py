"""Compiler diagnostics models for kompile.

Diagnostics are the uniform currency every backend reports in:
- ProjectSeverity: INFO / WARNING / ERROR
- TextPosition, TextInterval: 0-based source coordinates
- ErrorDescriptor: A single diagnostic
- CompilerDiagnostics: File name -> diagnostics in detection order
- ExceptionDescriptor: Serializable description of an internal failure
"""

from __future__ import annotations

import traceback
from collections.abc import Iterable, Iterator
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_MODEL_CONFIG = ConfigDict(
    frozen=True,
    extra="forbid",
    alias_generator=to_camel,
    populate_by_name=True,
)


class ProjectSeverity(str, Enum):
    """Severity of a diagnostic."""

    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"


class TextPosition(BaseModel):
    """A 0-based position in a source file.

    Attributes:
        line: 0-based line number.
        ch: 0-based column.
    """

    model_config = _MODEL_CONFIG

    line: int = Field(..., ge=0, description="0-based line")
    ch: int = Field(..., ge=0, description="0-based column")


class TextInterval(BaseModel):
    """A source range between two 0-based positions."""

    model_config = _MODEL_CONFIG

    start: TextPosition
    end: TextPosition

    @classmethod
    def of(cls, start_line: int, start_ch: int, end_line: int, end_ch: int) -> TextInterval:
        """Build an interval from raw coordinates."""
        return cls(
            start=TextPosition(line=start_line, ch=start_ch),
            end=TextPosition(line=end_line, ch=end_ch),
        )


class ErrorDescriptor(BaseModel):
    """A single diagnostic reported by a backend.

    Attributes:
        interval: Source range, if the backend could locate the issue.
        message: Human-readable message.
        severity: Diagnostic severity.
        class_name: Backend-specific diagnostic class (e.g., "ERROR", "WARNING",
            or a finer-grained tag used by editors for styling).

    Example:
        >>> ErrorDescriptor(
        ...     interval=TextInterval.of(4, 9, 4, 12),
        ...     message="Unresolved reference: foo",
        ...     severity=ProjectSeverity.ERROR,
        ... )
    """

    model_config = _MODEL_CONFIG

    interval: TextInterval | None = Field(default=None, description="Source range")
    message: str = Field(..., description="Diagnostic message")
    severity: ProjectSeverity = Field(..., description="Diagnostic severity")
    class_name: str | None = Field(default=None, description="Diagnostic class")

    @property
    def is_error(self) -> bool:
        """Check if this diagnostic is an error."""
        return self.severity == ProjectSeverity.ERROR


class CompilerDiagnostics(BaseModel):
    """Diagnostics grouped by file name.

    Keys are file names from the originating project. Values preserve the
    order in which the backend detected the issues.

    Attributes:
        map: File name -> ordered diagnostics.
    """

    model_config = _MODEL_CONFIG

    map: dict[str, list[ErrorDescriptor]] = Field(default_factory=dict)

    @classmethod
    def empty(cls) -> CompilerDiagnostics:
        """Diagnostics with no entries."""
        return cls(map={})

    @property
    def has_errors(self) -> bool:
        """Check if any file carries an ERROR diagnostic."""
        return any(d.is_error for d in self.all())

    def all(self) -> Iterator[ErrorDescriptor]:
        """Iterate all diagnostics in file order, then detection order."""
        for descriptors in self.map.values():
            yield from descriptors

    def errors(self) -> list[ErrorDescriptor]:
        """All ERROR diagnostics."""
        return [d for d in self.all() if d.is_error]

    def count(self, severity: ProjectSeverity | None = None) -> int:
        """Count diagnostics, optionally of a single severity."""
        return sum(1 for d in self.all() if severity is None or d.severity == severity)

    def restricted_to(self, names: Iterable[str]) -> CompilerDiagnostics:
        """Keep only entries whose key is one of ``names``."""
        allowed = set(names)
        return CompilerDiagnostics(
            map={name: list(ds) for name, ds in self.map.items() if name in allowed}
        )

    def merged_with(self, other: CompilerDiagnostics) -> CompilerDiagnostics:
        """Append ``other``'s diagnostics after this instance's, per file."""
        merged: dict[str, list[ErrorDescriptor]] = {k: list(v) for k, v in self.map.items()}
        for name, descriptors in other.map.items():
            merged.setdefault(name, []).extend(descriptors)
        return CompilerDiagnostics(map=merged)

    def __bool__(self) -> bool:
        return any(self.map.values())


class ExceptionDescriptor(BaseModel):
    """Serializable description of an exception raised inside a backend.

    Attributes:
        message: Exception message.
        full_name: Qualified exception class name.
        stack_trace: Formatted stack frames, innermost last.
        cause: Description of the chained cause, if any.
    """

    model_config = _MODEL_CONFIG

    message: str | None = None
    full_name: str
    stack_trace: list[str] = Field(default_factory=list)
    cause: ExceptionDescriptor | None = None

    @classmethod
    def from_exception(cls, exc: BaseException) -> ExceptionDescriptor:
        """Describe ``exc`` and its cause chain."""
        exc_type = type(exc)
        cause = exc.__cause__ or exc.__context__
        return cls(
            message=str(exc) or None,
            full_name=f"{exc_type.__module__}.{exc_type.__qualname__}",
            stack_trace=[line.rstrip() for line in traceback.format_tb(exc.__traceback__)],
            cause=cls.from_exception(cause) if cause is not None and cause is not exc else None,
        )
