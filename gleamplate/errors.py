"""Structured diagnostics and exception hierarchy for gleamplate.

Every error carries a stable code (``RND`` render, ``AST`` node decoding,
``SRV`` request layer), an optional source range, and a ``details`` mapping
with the values a caller needs to point at the problem without parsing the
message.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Mapping

from gleamplate.source_range import SourceRange


@dataclass(frozen=True)
class Diagnostic:
    """Serializable form of a ``TemplateError``."""

    code: str
    message: str
    span: SourceRange | None = None
    hint: str = ""
    details: Mapping[str, Any] = field(default_factory=dict)

    @property
    def location(self) -> str:
        return self.span.describe() if self.span is not None else ""

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code, "message": self.message, "hint": self.hint}
        if self.span is not None:
            payload["span"] = self.span.to_dict()
        if self.details:
            payload["details"] = dict(self.details)
        return payload


class TemplateError(Exception):
    """Base class for all gleamplate failures."""

    def __init__(
        self,
        code: str,
        message: str,
        span: SourceRange | None = None,
        hint: str = "",
        details: Mapping[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.span = span
        self.hint = hint
        self.details = dict(details or {})

    def to_diagnostic(self) -> Diagnostic:
        return Diagnostic(
            code=self.code,
            message=self.message,
            span=self.span,
            hint=self.hint,
            details=dict(self.details),
        )

    def __str__(self) -> str:
        where = f" ({self.span.describe()})" if self.span is not None else ""
        return f"[{self.code}] {self.message}{where}"


class RenderError(TemplateError):
    """Raised when a node tree cannot be turned into a Gleam module."""


class DuplicateParamNameError(RenderError):
    """A ``with`` declaration reuses a parameter name from the same level."""

    def __init__(self, name: str, span: SourceRange | None = None) -> None:
        super().__init__(
            code="RND001",
            message=f"Parameter '{name}' is declared more than once.",
            span=span,
            hint="Remove the repeated 'with' line or rename one of the parameters.",
            details={"name": name},
        )
        self.name = name


class NodeDecodeError(TemplateError):
    """Raised when serialized template nodes are malformed."""


class ServiceError(TemplateError):
    """Raised by the request layer for bad method names or payloads."""


def format_diagnostic(diag: Diagnostic) -> str:
    """One-line ``CODE file:line:col: message Hint: ...`` rendering."""
    parts = [diag.code]
    if diag.location:
        parts.append(f" {diag.location}")
    parts.append(f": {diag.message}")
    if diag.hint:
        parts.append(f" Hint: {diag.hint}")
    return "".join(parts)
