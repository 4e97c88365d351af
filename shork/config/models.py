"""Typed dataclass describing a shork project's layout and build switches."""

from __future__ import annotations

import dataclasses as dc
from pathlib import Path

from shork._constants import COMPONENT_PREFIX


@dc.dataclass(slots=True)
class ShorkConfig:
    """Resolved project configuration.

    Every path is absolute once produced by :func:`~shork.config.load_config`.

    Attributes
    ----------
    root_dir : Path
        Project root all relative paths were resolved against.
    src_dir : Path
        Source tree; layout lookup never climbs above it.
    routes_dir : Path
        Directory holding the ``+page.html`` route tree.
    components_dir : Path
        Directory with one ``<Name>.html`` file per component.
    lib_dir : Path
        Directory holding the fallback root ``+layout.html``.
    static_dir : Path
        Assets copied verbatim into ``dist_dir``.
    dist_dir : Path
        Build output directory; emptied at the start of every build.
    app_template : Path
        Application shell containing ``%head%`` and ``%body%``.
    global_data : Path
        Optional module exporting ``data`` shared by every page.
    runtime_entry : Path
        Client runtime entry handed to the bundler.
    output_js : Path
        Bundled runtime destination.
    manifest : Path
        Route manifest destination.
    component_prefix : str
        Tag prefix of the element component convention.
    scope_css : bool
        Scope element-component CSS to each occurrence.
    minify_css : bool
        Minify the combined page and layout CSS.
    strict_undefined : bool
        Treat undefined template references as render failures.
    bundle : bool
        Bundle ``runtime_entry`` during a full build.
    """

    root_dir: Path
    src_dir: Path
    routes_dir: Path
    components_dir: Path
    lib_dir: Path
    static_dir: Path
    dist_dir: Path
    app_template: Path
    global_data: Path
    runtime_entry: Path
    output_js: Path
    manifest: Path
    component_prefix: str = COMPONENT_PREFIX
    scope_css: bool = True
    minify_css: bool = True
    strict_undefined: bool = True
    bundle: bool = True

    @classmethod
    def for_root(cls, root: Path) -> ShorkConfig:
        """Return the default configuration for a project rooted at ``root``."""
        root = root.resolve()
        src = root / "src"
        lib = src / "lib"
        dist = root / "dist"
        return cls(
            root_dir=root,
            src_dir=src,
            routes_dir=src / "routes",
            components_dir=lib / "components",
            lib_dir=lib,
            static_dir=root / "static",
            dist_dir=dist,
            app_template=src / "app.html",
            global_data=src / "data.py",
            runtime_entry=lib / "runtime.js",
            output_js=dist / "main.js",
            manifest=dist / "manifest.json",
        )


__all__ = ["ShorkConfig"]
