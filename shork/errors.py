"""Exception hierarchy shared by the shork build pipeline."""

from __future__ import annotations

import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path


class ShorkError(Exception):
    """Base class for every error raised by the build pipeline."""


class ShorkConfigError(ShorkError, ValueError):
    """Raised when ``shork.yaml`` is invalid or incomplete."""


class LayoutNotFoundError(ShorkError):
    """Raised when no layout can be found for a route."""


class ComponentCycleError(ShorkError):
    """Raised when a component expands into itself, directly or transitively."""

    def __init__(self, chain: cabc.Sequence[str]) -> None:
        self.chain = tuple(chain)
        super().__init__(f"Cyclic component reference: {' -> '.join(self.chain)}")


class DialectSyntaxError(ShorkError):
    """Raised when template block markers are unbalanced or unknown."""

    def __init__(self, message: str, *, line: int) -> None:
        self.line = line
        super().__init__(f"{message} (line {line})")


class RouteParamsError(ShorkError):
    """Raised when static params do not bind every route parameter."""


class BundleError(ShorkError):
    """Raised when the client runtime cannot be bundled."""


class TemplateRenderError(ShorkError):
    """Raised when a compiled template fails to parse or render.

    Attributes
    ----------
    path : Path
        Source file of the template that failed.
    snapshot : str
        Sanitized JSON dump of the data available at render time; empty for
        syntax errors detected before rendering.
    """

    def __init__(self, path: Path, message: str, *, snapshot: str = "") -> None:
        self.path = path
        self.snapshot = snapshot
        super().__init__(f"{path}: {message}")


class SchemaValidationError(ShorkError):
    """Raised when page data does not satisfy a route schema."""

    def __init__(self, route_path: str, issues: cabc.Sequence[typ.Any]) -> None:
        self.route_path = route_path
        self.issues = list(issues)
        super().__init__(
            f"Schema validation failed for {route_path} "
            f"({len(self.issues)} issue{'s' if len(self.issues) != 1 else ''})"
        )


__all__ = [
    "BundleError",
    "ComponentCycleError",
    "DialectSyntaxError",
    "LayoutNotFoundError",
    "RouteParamsError",
    "SchemaValidationError",
    "ShorkConfigError",
    "ShorkError",
    "TemplateRenderError",
]
