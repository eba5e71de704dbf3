"""Gleam module generation from a template node tree.

Every node becomes a rebinding of ``builder``, so the generated program is a
straight sequence of ``let builder = ...`` statements. Conditionals and loops
render their children as independent traversals and thread the same
``builder`` value through a ``case`` expression or a ``list.fold`` callback.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Final, Iterable

from gleamplate.ast import Builder, For, Identifier, If, Import, Node, Text, TypedParam, With
from gleamplate.errors import DuplicateParamNameError
from gleamplate.source_range import SourceRange


INDENT: Final[str] = "    "

PRELUDE_IMPORTS: Final[tuple[str, ...]] = (
    "gleam/string_builder.{StringBuilder}",
    "gleam/list",
)


@dataclass(frozen=True)
class Line:
    """One emitted statement fragment, ``depth`` levels below its traversal."""

    depth: int
    code: str


@dataclass
class RenderDetails:
    """Output of a single traversal level."""

    lines: list[Line] = field(default_factory=list)
    imports: list[str] = field(default_factory=list)
    params: list[TypedParam] = field(default_factory=list)

    def emit(self, code: str, depth: int = 0) -> None:
        self.lines.append(Line(depth=depth, code=code))

    def extend(self, lines: Iterable[Line], depth: int) -> None:
        """Append lines from a nested traversal, shifted by ``depth``."""
        for line in lines:
            self.lines.append(Line(depth=line.depth + depth, code=line.code))

    def declare(self, name: str, type_name: str, span: SourceRange | None = None) -> None:
        """Record a parameter, rejecting a name already declared at this level."""
        # Linear scan over a list keeps signature order identical to declaration order.
        if any(param.name == name for param in self.params):
            raise DuplicateParamNameError(name, span)
        self.params.append(TypedParam(name=name, type_name=type_name))

    def program(self, depth: int = 0) -> str:
        """Join the emitted statements, indenting each by its depth."""
        return "\n".join(INDENT * (depth + line.depth) + line.code for line in self.lines)


@dataclass
class RenderOutcome:
    """Result of ``try_render``: either generated code or the error that stopped it."""

    code: str | None = None
    error: DuplicateParamNameError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


def escape_text(text: str) -> str:
    """Escape double quotes for a Gleam string literal.

    Only ``"`` is escaped. Backslashes and other characters pass through
    unchanged.
    """
    return text.replace('"', '\\"')


def format_params(params: Iterable[TypedParam]) -> str:
    """Labelled parameter list: ``name name: Type, ...``."""
    return ", ".join(f"{param.name} {param.name}: {param.type_name}" for param in params)


def format_args(params: Iterable[TypedParam]) -> str:
    """Labelled argument list forwarding each parameter: ``name: name, ...``."""
    return ", ".join(f"{param.name}: {param.name}" for param in params)


def render_lines(nodes: Iterable[Node]) -> RenderDetails:
    """Render one level of nodes into builder statements, imports and params.

    Branch and loop bodies are rendered with fresh accumulators. Imports and
    ``with`` declarations found inside them are dropped, but errors raised
    while rendering them still propagate.
    """
    details = RenderDetails()

    for node in nodes:
        if isinstance(node, Text):
            details.emit(f'let builder = string_builder.append(builder, "{escape_text(node.text)}")')
        elif isinstance(node, Identifier):
            details.emit(f"let builder = string_builder.append(builder, {node.name})")
        elif isinstance(node, Builder):
            details.emit(f"let builder = string_builder.append_builder(builder, {node.name})")
        elif isinstance(node, Import):
            details.imports.append(node.details)
        elif isinstance(node, With):
            details.declare(node.name, node.type_name, node.span)
        elif isinstance(node, If):
            then_lines = render_lines(node.then_nodes).lines
            else_lines = render_lines(node.else_nodes).lines
            details.emit(f"let builder = case {node.condition} {{")
            details.emit("True -> {", 1)
            details.extend(then_lines, 2)
            details.emit("builder", 2)
            details.emit("}", 1)
            details.emit("False -> {", 1)
            details.extend(else_lines, 2)
            details.emit("builder", 2)
            details.emit("}", 1)
            details.emit("}")
        elif isinstance(node, For):
            annotation = f": {node.entry_type}" if node.entry_type is not None else ""
            body_lines = render_lines(node.body).lines
            details.emit(
                f"let builder = list.fold({node.list_name}, builder, "
                f"fn(builder, {node.entry_name}{annotation}) {{"
            )
            details.extend(body_lines, 1)
            details.emit("builder", 1)
            details.emit("})")
        else:
            raise TypeError(f"Unsupported template node: {type(node).__name__}")

    return details


def render(nodes: Iterable[Node]) -> str:
    """Render a full template node sequence into a Gleam module.

    Raises ``DuplicateParamNameError`` for the first repeated top-level
    ``with`` name; nothing is returned in that case.
    """
    return assemble_module(render_lines(nodes))


def assemble_module(details: RenderDetails) -> str:
    """Wrap a top-level traversal in the prelude and the two public functions.

    The user import section is always present, so a template without imports
    leaves an empty section between the prelude and ``render_builder``.
    """
    params = format_params(details.params)
    args = format_args(details.params)

    sections = ["\n".join(f"import {module}" for module in PRELUDE_IMPORTS)]
    sections.append("\n".join(f"import {module}" for module in details.imports))

    body = [f'{INDENT}let builder = string_builder.from_string("")']
    if details.lines:
        body.append(details.program(depth=1))
    body.append(f"{INDENT}builder")

    sections.append(
        "\n".join(
            [
                f"pub fn render_builder({params}) -> StringBuilder {{",
                *body,
                "}",
            ]
        )
    )
    sections.append(
        "\n".join(
            [
                f"pub fn render({params}) -> String {{",
                f"{INDENT}string_builder.to_string(render_builder({args}))",
                "}",
            ]
        )
    )
    return "\n\n".join(sections) + "\n"


def try_render(nodes: Iterable[Node]) -> RenderOutcome:
    """Render without raising, returning the code or the duplicate-name error."""
    try:
        return RenderOutcome(code=render(nodes))
    except DuplicateParamNameError as err:
        return RenderOutcome(error=err)
