"""Template AST consumed by the renderer.

Nodes are produced by the template parser and are never mutated here.
Nested node groups are stored as tuples so a parsed template can be shared
between renders.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Union

from gleamplate.source_range import SourceRange


@dataclass(frozen=True)
class Text:
    """Literal template text."""

    text: str


@dataclass(frozen=True)
class Identifier:
    """``{{ name }}``: a value converted to a string on output."""

    name: str


@dataclass(frozen=True)
class Builder:
    """``{[ name ]}``: a value that is already a ``StringBuilder``."""

    name: str


@dataclass(frozen=True)
class Import:
    """``{> import details``: hoisted to the top of the generated module."""

    details: str


@dataclass(frozen=True)
class With:
    """``{> with name as Type``: declares a render function parameter."""

    name: str
    type_name: str
    span: SourceRange | None = None


@dataclass(frozen=True)
class If:
    """Conditional block with an optional else branch."""

    condition: str
    then_nodes: tuple[Node, ...] = field(default_factory=tuple)
    else_nodes: tuple[Node, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class For:
    """Loop over a list, binding each entry to ``entry_name``."""

    entry_name: str
    entry_type: str | None
    list_name: str
    body: tuple[Node, ...] = field(default_factory=tuple)


Node = Union[Text, Identifier, Builder, Import, With, If, For]


@dataclass(frozen=True)
class TypedParam:
    """A declared render parameter and its Gleam type."""

    name: str
    type_name: str
