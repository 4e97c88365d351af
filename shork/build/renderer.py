"""Render compiled templates with Jinja2.

Compiled dialect output is plain Jinja2 source. Templates are parsed before
rendering so syntax errors surface with the template's path; runtime failures
are reported together with a bounded snapshot of the data the template saw.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

import msgspec.json as msgspec_json
from jinja2 import Environment, StrictUndefined, TemplateError, Undefined

from shork.errors import TemplateRenderError

from .filters import ContentFilters

if typ.TYPE_CHECKING:
    from pathlib import Path

    from jinja2 import Template

SNAPSHOT_DEPTH = 6


def data_snapshot(data: cabc.Mapping[str, typ.Any]) -> str:
    """Return a JSON dump of ``data`` safe for error messages.

    ``props`` mappings are reduced to their keys and nesting is cut off after
    a few levels, so large or self-referencing data cannot flood the output.

    >>> print(data_snapshot({"props": {"a": 1}, "n": 2}))
    {
      "props": [
        "a"
      ],
      "n": 2
    }
    """

    def _sanitize(value: typ.Any, depth: int) -> typ.Any:
        if isinstance(value, str | int | float | bool) or value is None:
            return value
        if depth >= SNAPSHOT_DEPTH:
            return "..."
        if isinstance(value, cabc.Mapping):
            return {
                str(key): (
                    sorted(map(str, item))
                    if key == "props" and isinstance(item, cabc.Mapping)
                    else _sanitize(item, depth + 1)
                )
                for key, item in value.items()
            }
        if isinstance(value, list | tuple | set | frozenset):
            return [_sanitize(item, depth + 1) for item in value]
        return repr(value)

    encoded = msgspec_json.encode(_sanitize(dict(data), 0))
    return msgspec_json.format(encoded, indent=2).decode()


class ComponentProps(dict[str, typ.Any]):
    """Page ``props`` whose missing keys render as empty text.

    A component used without one of its props leaves ``{{ props.<key> }}``
    in the page; looking that key up yields ``""`` while every other name
    stays subject to the environment's undefined policy.

    >>> ComponentProps({"a": 1})["b"]
    ''
    """

    def __missing__(self, key: str) -> str:
        return ""


class TemplateRenderer:
    """A Jinja2 environment configured for compiled dialect templates."""

    def __init__(
        self,
        *,
        strict_undefined: bool = True,
        filters: ContentFilters | None = None,
    ) -> None:
        """Initialize the Jinja2 environment.

        Parameters
        ----------
        strict_undefined : bool, optional
            Raise on undefined names instead of rendering them as ``""``.
        filters : ContentFilters, optional
            Markdown and highlighting filters; a monokai-styled instance is
            used when omitted.
        """
        filters = filters or ContentFilters()
        self.env = Environment(
            autoescape=False,
            keep_trailing_newline=True,
            undefined=StrictUndefined if strict_undefined else Undefined,
        )
        self.env.filters.update(filters.as_filters())
        self.env.globals["highlight_css"] = filters.stylesheet

    def compile(self, source: str, path: Path) -> Template:
        """Parse ``source``, reporting syntax errors against ``path``."""
        try:
            return self.env.from_string(source)
        except TemplateError as exc:
            lineno = getattr(exc, "lineno", None)
            where = f"line {lineno}: " if lineno else ""
            raise TemplateRenderError(path, f"{where}{exc.message}") from exc

    def render(
        self, source: str, data: cabc.Mapping[str, typ.Any], *, path: Path
    ) -> str:
        """Render ``source`` with ``data``.

        Raises
        ------
        TemplateRenderError
            If the template does not parse, or raises while rendering.
        """
        template = self.compile(source, path)
        try:
            return template.render(dict(data))
        except (TemplateError, TypeError, ValueError, AttributeError) as exc:
            raise TemplateRenderError(
                path, str(exc), snapshot=data_snapshot(data)
            ) from exc


__all__ = ["ComponentProps", "TemplateRenderer", "data_snapshot"]
