"""Request/response layer for tools that drive the renderer programmatically.

Payloads are plain dicts so transport adapters can pass decoded JSON straight
through.
"""

from __future__ import annotations

from typing import Any, Callable

from gleamplate import __version__
from gleamplate.ast import Node
from gleamplate.errors import ServiceError, TemplateError
from gleamplate.renderer import assemble_module, render_lines
from gleamplate.serialization import nodes_from_json, nodes_from_list


def render_request(payload: dict[str, Any]) -> dict[str, Any]:
    """Render serialized nodes into Gleam source."""
    nodes = _resolve_nodes(payload)
    details = render_lines(nodes)
    return {
        "target": "gleam",
        "code": assemble_module(details),
        "metrics": {
            "nodes": len(nodes),
            "params": len(details.params),
            "imports": len(details.imports),
        },
    }


def check_request(payload: dict[str, Any]) -> dict[str, Any]:
    """Validate nodes and report the declared parameters and imports."""
    details = render_lines(_resolve_nodes(payload))
    return {
        "ok": True,
        "params": [{"name": param.name, "type_name": param.type_name} for param in details.params],
        "imports": list(details.imports),
    }


def capabilities_request(payload: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return service capability metadata for automation clients."""
    return {
        "service": "gleamplate",
        "version": __version__,
        "methods": sorted(_METHODS.keys()),
        "targets": ["gleam"],
    }


_METHODS: dict[str, Callable[[dict[str, Any]], dict[str, Any]]] = {
    "render": render_request,
    "check": check_request,
    "capabilities": capabilities_request,
}


def dispatch(method: str, payload: dict[str, Any] | None = None) -> dict[str, Any]:
    """Dispatch a method call for integration adapters."""
    fn = _METHODS.get(method)
    if fn is None:
        raise ServiceError(
            code="SRV001",
            message=f"Unknown service method '{method}'.",
            hint=f"Available methods: {', '.join(sorted(_METHODS.keys()))}",
        )
    if payload is None:
        payload = {}
    if not isinstance(payload, dict):
        raise ServiceError(
            code="SRV004",
            message=f"Request payload must be a JSON object, got {type(payload).__name__}.",
            hint="Send the request parameters as an object.",
        )
    return fn(payload)


def safe_dispatch(method: str, payload: dict[str, Any] | None = None) -> tuple[bool, dict[str, Any]]:
    """Dispatch method and turn template errors into diagnostic payloads."""
    try:
        return True, dispatch(method, payload)
    except TemplateError as err:
        return False, {"error": err.to_diagnostic().to_dict()}
    except Exception as err:
        return False, {
            "error": {
                "code": "SRV999",
                "message": f"Internal service error: {type(err).__name__}: {err}",
                "hint": "Check the request payload; deeply nested templates can exceed the recursion limit.",
            }
        }


def _resolve_nodes(payload: dict[str, Any]) -> tuple[Node, ...]:
    nodes = payload.get("nodes")
    nodes_json = payload.get("nodes_json")

    if nodes is not None and nodes_json is not None:
        raise ServiceError(
            code="SRV002",
            message="Provide only one of 'nodes' or 'nodes_json'.",
            hint="Pass decoded nodes or JSON text, not both.",
        )
    if nodes is not None:
        return nodes_from_list(nodes)
    if nodes_json is not None:
        return nodes_from_json(str(nodes_json))

    raise ServiceError(
        code="SRV003",
        message="Missing template nodes.",
        hint="Provide 'nodes' or 'nodes_json'.",
    )
