"""Discover routes on disk and persist the route manifest.

:class:`RouteManifestBuilder` walks ``src/routes`` for ``+page.html`` files.
Each directory becomes a URL path; bracketed directory names (``[slug]``)
become parameters matched by a single path segment. The nearest
``+layout.html`` is found by walking up towards the routes root, falling back
to ``src/lib/+layout.html``. Routes are ordered by parameter count so that
static paths win over patterns during client-side lookup.

Example
-------
>>> from pathlib import Path
>>> from shork.config import load_config
>>> builder = RouteManifestBuilder(load_config(Path(".")))  # doctest: +SKIP
>>> [route.path for route in builder.build()]  # doctest: +SKIP
['/', '/blog', '/blog/[slug]']
"""

from __future__ import annotations

import logging
import re
import typing as typ

import msgspec.json as msgspec_json

from shork._constants import LAYOUT_FILE, LOADER_FILE, PAGE_FILE, SCHEMA_FILE
from shork.errors import LayoutNotFoundError, ShorkConfigError

from .models import Manifest, Route

if typ.TYPE_CHECKING:
    from pathlib import Path

    from shork.config import ShorkConfig

logger = logging.getLogger(__name__)

PARAM_SEGMENT_PATTERN = re.compile(r"^\[([^\]]+)\]$")
PARAM_SEGMENT_REGEX = "([^/]+)"


def route_pattern(route_path: str) -> tuple[str, tuple[str, ...]]:
    """Return the matcher regex and parameter keys for ``route_path``.

    >>> route_pattern("/blog/[slug]")
    ('^/blog/([^/]+)$', ('slug',))
    >>> route_pattern("/")
    ('^/$', ())
    """
    if route_path == "/":
        return "^/$", ()
    keys: list[str] = []
    segments: list[str] = []
    for segment in route_path.strip("/").split("/"):
        param = PARAM_SEGMENT_PATTERN.match(segment)
        if param:
            keys.append(param.group(1))
            segments.append(PARAM_SEGMENT_REGEX)
        else:
            segments.append(re.escape(segment))
    return f"^/{'/'.join(segments)}$", tuple(keys)


class RouteManifestBuilder:
    """Build the :class:`Manifest` for a project."""

    def __init__(self, config: ShorkConfig) -> None:
        self.config = config
        self.routes_dir = config.routes_dir

    def build(self) -> Manifest:
        """Discover every page and return the ordered manifest.

        Raises
        ------
        ShorkConfigError
            If the routes directory does not exist.
        LayoutNotFoundError
            If a page has no layout in its ancestry and no root layout exists.
        """
        if not self.routes_dir.is_dir():
            msg = f"Routes directory '{self.routes_dir}' not found."
            raise ShorkConfigError(msg)
        routes = [self._build_route(page) for page in sorted(self.routes_dir.rglob(PAGE_FILE))]
        routes.sort(key=lambda route: len(route.param_keys))
        return Manifest(routes=routes)

    def _build_route(self, page: Path) -> Route:
        directory = page.parent
        relative = directory.relative_to(self.routes_dir).as_posix()
        route_path = "/" if relative == "." else f"/{relative}"
        regex, keys = route_pattern(route_path)
        loader = directory / LOADER_FILE
        schema = directory / SCHEMA_FILE
        return Route(
            path=route_path,
            regex=regex,
            param_keys=keys,
            page=page,
            layout=self.find_layout(directory, route_path),
            js=loader if loader.is_file() else None,
            schema=schema if schema.is_file() else None,
        )

    def find_layout(self, directory: Path, route_path: str = "") -> Path:
        """Return the layout governing pages in ``directory``."""
        current = directory
        while True:
            candidate = current / LAYOUT_FILE
            if candidate.is_file():
                return candidate
            if current == self.routes_dir or current == current.parent:
                break
            current = current.parent

        root_layout = self.config.lib_dir / LAYOUT_FILE
        if root_layout.is_file():
            return root_layout
        label = route_path or str(directory)
        msg = (
            f"No layout found for {label}. Create a {LAYOUT_FILE} in the "
            "directory or any parent directory."
        )
        raise LayoutNotFoundError(msg)


def write_manifest(manifest: Manifest, path: Path) -> Path:
    """Persist ``manifest`` as indented JSON at ``path``."""
    path.parent.mkdir(parents=True, exist_ok=True)
    encoded = msgspec_json.format(msgspec_json.encode(manifest.to_json()), indent=2)
    path.write_bytes(encoded + b"\n")
    logger.info("Route manifest written to %s", path)
    return path


def load_manifest(path: Path) -> Manifest:
    """Read a manifest previously written by :func:`write_manifest`."""
    data = msgspec_json.decode(path.read_bytes())
    return Manifest.from_json(typ.cast("dict[str, typ.Any]", data))


__all__ = ["RouteManifestBuilder", "load_manifest", "route_pattern", "write_manifest"]
