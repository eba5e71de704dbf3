"""JSON interchange for template node trees.

The template parser may hand its output over as JSON: a list of objects
tagged by ``"kind"``. Field names match the dataclasses in ``gleamplate.ast``.
"""

from __future__ import annotations

import json
from typing import Any

from gleamplate.ast import Builder, For, Identifier, If, Import, Node, Text, With
from gleamplate.errors import NodeDecodeError
from gleamplate.source_range import SourceRange


def node_to_dict(node: Node) -> dict[str, Any]:
    """Serialize a single node, recursing into nested blocks."""
    if isinstance(node, Text):
        return {"kind": "text", "text": node.text}
    if isinstance(node, Identifier):
        return {"kind": "identifier", "name": node.name}
    if isinstance(node, Builder):
        return {"kind": "builder", "name": node.name}
    if isinstance(node, Import):
        return {"kind": "import", "details": node.details}
    if isinstance(node, With):
        payload: dict[str, Any] = {"kind": "with", "name": node.name, "type_name": node.type_name}
        if node.span is not None:
            payload["span"] = node.span.to_dict()
        return payload
    if isinstance(node, If):
        return {
            "kind": "if",
            "condition": node.condition,
            "then_nodes": [node_to_dict(child) for child in node.then_nodes],
            "else_nodes": [node_to_dict(child) for child in node.else_nodes],
        }
    if isinstance(node, For):
        return {
            "kind": "for",
            "entry_name": node.entry_name,
            "entry_type": node.entry_type,
            "list_name": node.list_name,
            "body": [node_to_dict(child) for child in node.body],
        }
    raise TypeError(f"Unsupported template node: {type(node).__name__}")


def node_from_dict(data: Any) -> Node:
    """Deserialize a single node, raising ``NodeDecodeError`` on malformed input."""
    if not isinstance(data, dict):
        raise NodeDecodeError(
            code="AST001",
            message=f"Template node must be a JSON object, got {type(data).__name__}.",
            hint="Encode each node as an object with a 'kind' field.",
        )

    kind = data.get("kind")
    if kind == "text":
        return Text(text=_require_str(data, "text"))
    if kind == "identifier":
        return Identifier(name=_require_str(data, "name"))
    if kind == "builder":
        return Builder(name=_require_str(data, "name"))
    if kind == "import":
        return Import(details=_require_str(data, "details"))
    if kind == "with":
        span_data = data.get("span")
        return With(
            name=_require_str(data, "name"),
            type_name=_require_str(data, "type_name"),
            span=_decode_span(span_data) if span_data is not None else None,
        )
    if kind == "if":
        return If(
            condition=_require_str(data, "condition"),
            then_nodes=_decode_children(data, "then_nodes"),
            else_nodes=_decode_children(data, "else_nodes"),
        )
    if kind == "for":
        entry_type = data.get("entry_type")
        if entry_type is not None and not isinstance(entry_type, str):
            raise _field_error("for", "entry_type", "a string or null")
        return For(
            entry_name=_require_str(data, "entry_name"),
            entry_type=entry_type,
            list_name=_require_str(data, "list_name"),
            body=_decode_children(data, "body"),
        )

    raise NodeDecodeError(
        code="AST002",
        message=f"Unknown template node kind {kind!r}.",
        hint="Use one of: text, identifier, builder, import, with, if, for.",
    )


def nodes_from_list(items: Any) -> tuple[Node, ...]:
    """Deserialize a top-level node sequence."""
    if not isinstance(items, list):
        raise NodeDecodeError(
            code="AST001",
            message=f"Template nodes must be a JSON array, got {type(items).__name__}.",
            hint="Wrap the nodes in a list.",
        )
    return tuple(node_from_dict(item) for item in items)


def nodes_to_json(nodes: tuple[Node, ...] | list[Node], indent: int = 2) -> str:
    """Serialize a node sequence to JSON text."""
    return json.dumps([node_to_dict(node) for node in nodes], indent=indent)


def nodes_from_json(payload: str) -> tuple[Node, ...]:
    """Deserialize a node sequence from JSON text."""
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise NodeDecodeError(
            code="AST001",
            message=f"Invalid JSON for template nodes: {exc.msg}.",
            hint="Check the parser output for truncation.",
        ) from exc
    return nodes_from_list(data)


def _require_str(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if not isinstance(value, str):
        raise _field_error(str(data.get("kind")), key, "a string")
    return value


def _decode_children(data: dict[str, Any], key: str) -> tuple[Node, ...]:
    value = data.get(key, [])
    if not isinstance(value, list):
        raise _field_error(str(data.get("kind")), key, "a list of nodes")
    return tuple(node_from_dict(item) for item in value)


def _decode_span(value: Any) -> SourceRange:
    if not isinstance(value, dict):
        raise _field_error("with", "span", "an object")
    try:
        return SourceRange.from_dict(value)
    except (KeyError, TypeError, ValueError) as exc:
        raise _field_error("with", "span", "an object with integer 'line' and 'column'") from exc


def _field_error(kind: str, key: str, expected: str) -> NodeDecodeError:
    return NodeDecodeError(
        code="AST003",
        message=f"Field '{key}' of '{kind}' node must be {expected}.",
        hint="Check the node against the template AST schema.",
    )
