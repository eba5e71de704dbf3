"""Gleam code generation for parsed templates."""

from __future__ import annotations

from typing import Any


__version__ = "0.1.0"

__all__ = [
    "DuplicateParamNameError",
    "RenderOutcome",
    "dispatch_service",
    "render",
    "render_lines",
    "try_render",
]


def render(*args: Any, **kwargs: Any):
    from gleamplate.renderer import render as _render

    return _render(*args, **kwargs)


def render_lines(*args: Any, **kwargs: Any):
    from gleamplate.renderer import render_lines as _render_lines

    return _render_lines(*args, **kwargs)


def try_render(*args: Any, **kwargs: Any):
    from gleamplate.renderer import try_render as _try_render

    return _try_render(*args, **kwargs)


def dispatch_service(*args: Any, **kwargs: Any):
    from gleamplate.service import dispatch as _dispatch

    return _dispatch(*args, **kwargs)


def __getattr__(name: str):
    if name == "DuplicateParamNameError":
        from gleamplate.errors import DuplicateParamNameError

        return DuplicateParamNameError
    if name == "RenderOutcome":
        from gleamplate.renderer import RenderOutcome

        return RenderOutcome
    raise AttributeError(name)
