"""Static asset handling: output directory, static copy, CSS and JS tools.

CSS minification and JavaScript bundling are delegated to external tools.
Both are plain callables so a build can swap them out, e.g. in tests.
"""

from __future__ import annotations

import collections.abc as cabc
import logging
import shutil
import subprocess
from pathlib import Path

import rcssmin

from shork.errors import BundleError

logger = logging.getLogger(__name__)

CssMinifier = cabc.Callable[[str], str]
Bundler = cabc.Callable[[Path], str]


def minify_css(css: str) -> str:
    """Return ``css`` minified with rcssmin."""
    return rcssmin.cssmin(css)


class EsbuildBundler:
    """Bundle a JavaScript entry point with the ``esbuild`` executable."""

    def __init__(self, executable: str = "esbuild") -> None:
        self.executable = executable

    def __call__(self, entry: Path) -> str:
        """Return the minified bundle for ``entry`` with an inline source map.

        Raises
        ------
        BundleError
            If ``esbuild`` is not on ``PATH`` or exits with an error.
        """
        resolved = shutil.which(self.executable)
        if not resolved:
            msg = f"Unable to locate '{self.executable}' on PATH"
            raise BundleError(msg)
        command = [resolved, str(entry), "--bundle", "--minify", "--sourcemap=inline"]
        try:
            completed = subprocess.run(  # noqa: S603
                command, check=True, capture_output=True, text=True
            )
        except subprocess.CalledProcessError as exc:
            msg = f"esbuild failed for {entry}: {exc.stderr.strip()}"
            raise BundleError(msg) from exc
        return completed.stdout


def empty_dir(path: Path) -> None:
    """Remove everything inside ``path``, creating it when missing."""
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True)


def copy_static(static_dir: Path, dist_dir: Path) -> bool:
    """Copy ``static_dir`` into ``dist_dir``; return ``False`` when it is absent."""
    if not static_dir.is_dir():
        logger.warning("Static directory %s not found; skipping copy", static_dir)
        return False
    shutil.copytree(static_dir, dist_dir, dirs_exist_ok=True)
    return True


__all__ = [
    "Bundler",
    "CssMinifier",
    "EsbuildBundler",
    "copy_static",
    "empty_dir",
    "minify_css",
]
