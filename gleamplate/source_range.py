"""Source positions attached to template nodes for diagnostics."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class SourceRange:
    """A range in template source, in 1-based line/column coordinates."""

    file: str
    line: int
    column: int
    end_line: int
    end_column: int

    def describe(self) -> str:
        """Return the start position as ``file:line:column``."""
        return f"{self.file}:{self.line}:{self.column}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "file": self.file,
            "line": self.line,
            "column": self.column,
            "end_line": self.end_line,
            "end_column": self.end_column,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SourceRange:
        """Build a range from its ``to_dict`` form; ``file`` defaults to ``<template>``."""
        line = int(data["line"])
        column = int(data["column"])
        return cls(
            file=str(data.get("file", "<template>")),
            line=line,
            column=column,
            end_line=int(data.get("end_line", line)),
            end_column=int(data.get("end_column", column)),
        )
