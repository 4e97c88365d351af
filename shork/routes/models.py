"""Route and manifest dataclasses shared by the builder and the client contract."""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
from pathlib import Path

from shork.errors import RouteParamsError

if typ.TYPE_CHECKING:
    import collections.abc as cabc

INVALID_SEGMENTS = frozenset({"", ".", ".."})


@dc.dataclass(frozen=True, slots=True)
class Route:
    """One page of the route tree.

    Attributes
    ----------
    path : str
        URL path with bracketed parameters, e.g. ``"/blog/[slug]"``.
    regex : str
        Anchored pattern matching concrete URL paths for this route.
    param_keys : tuple[str, ...]
        Parameter names in the order of their capture groups.
    page : Path
        The ``+page.html`` template.
    layout : Path
        The nearest ``+layout.html`` (or the root layout).
    js : Path or None
        The co-located ``+page.py`` data loader, if any.
    schema : Path or None
        The co-located ``+schema.py`` module, if any.
    """

    path: str
    regex: str
    param_keys: tuple[str, ...]
    page: Path
    layout: Path
    js: Path | None = None
    schema: Path | None = None

    @property
    def is_dynamic(self) -> bool:
        """Return ``True`` when the route has at least one parameter."""
        return bool(self.param_keys)

    def match(self, url_path: str) -> dict[str, str] | None:
        """Return parameter bindings when ``url_path`` matches this route."""
        found = re.match(self.regex, url_path)
        if found is None:
            return None
        return dict(zip(self.param_keys, found.groups(), strict=True))

    def resolve_path(self, params: cabc.Mapping[str, typ.Any]) -> str:
        """Substitute ``params`` into :attr:`path`.

        >>> from pathlib import Path
        >>> route = Route("/blog/[slug]", "^/blog/([^/]+)$", ("slug",), Path("p"), Path("l"))
        >>> route.resolve_path({"slug": "hello"})
        '/blog/hello'

        Raises
        ------
        RouteParamsError
            If a parameter of the route has no value in ``params``, or its
            value is not a single path segment.
        """
        resolved = self.path
        for key in self.param_keys:
            if key not in params or params[key] is None:
                msg = f"Missing value for parameter '{key}' of route {self.path}"
                raise RouteParamsError(msg)
            value = str(params[key])
            if value in INVALID_SEGMENTS or any(sep in value for sep in "/\\"):
                msg = (
                    f"Invalid value {value!r} for parameter '{key}' of route "
                    f"{self.path}: expected a single path segment"
                )
                raise RouteParamsError(msg)
            resolved = resolved.replace(f"[{key}]", value)
        return resolved

    def to_json(self) -> dict[str, typ.Any]:
        """Return the manifest entry consumed by the client runtime."""
        return {
            "path": self.path,
            "regex": self.regex,
            "paramKeys": list(self.param_keys),
            "page": str(self.page),
            "layout": str(self.layout),
            "js": str(self.js) if self.js else None,
            "schema": str(self.schema) if self.schema else None,
        }

    @classmethod
    def from_json(cls, data: cabc.Mapping[str, typ.Any]) -> Route:
        """Build a route from a manifest entry."""
        js = data.get("js")
        schema = data.get("schema")
        return cls(
            path=data["path"],
            regex=data["regex"],
            param_keys=tuple(data.get("paramKeys", ())),
            page=Path(data["page"]),
            layout=Path(data["layout"]),
            js=Path(js) if js else None,
            schema=Path(schema) if schema else None,
        )


@dc.dataclass(slots=True)
class Manifest:
    """Ordered routes; static routes precede dynamic ones."""

    routes: list[Route] = dc.field(default_factory=list)

    def __iter__(self) -> cabc.Iterator[Route]:
        return iter(self.routes)

    def __len__(self) -> int:
        return len(self.routes)

    def match(self, url_path: str) -> tuple[Route, dict[str, str]] | None:
        """Return the first route matching ``url_path`` and its bindings."""
        for route in self.routes:
            params = route.match(url_path)
            if params is not None:
                return route, params
        return None

    def to_json(self) -> dict[str, typ.Any]:
        return {"routes": [route.to_json() for route in self.routes]}

    @classmethod
    def from_json(cls, data: cabc.Mapping[str, typ.Any]) -> Manifest:
        return cls(routes=[Route.from_json(entry) for entry in data.get("routes", [])])


__all__ = ["Manifest", "Route"]
