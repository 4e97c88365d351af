"""Run a complete build: output directory, assets, manifest, and pages."""

from __future__ import annotations

import logging
import typing as typ

from shork.routes import RouteManifestBuilder, write_manifest

from .assets import Bundler, CssMinifier, EsbuildBundler, copy_static, empty_dir
from .page_builder import PageBuilder
from .session import BuildSession

if typ.TYPE_CHECKING:
    from pathlib import Path

    from shork.config import ShorkConfig

logger = logging.getLogger(__name__)


class SiteBuilder:
    """Build a whole project into its ``dist`` directory."""

    def __init__(
        self,
        config: ShorkConfig,
        *,
        bundler: Bundler | None = None,
        minifier: CssMinifier | None = None,
    ) -> None:
        self.config = config
        self.bundler = bundler or EsbuildBundler()
        self.minifier = minifier

    def run(self) -> list[Path]:
        """Build the project and return every file written.

        Each run starts a new :class:`BuildSession`, so component files and
        route modules edited since the previous run are picked up.

        Returns
        -------
        list[Path]
            The bundled runtime (when built), the manifest, then each page in
            manifest order.

        Notes
        -----
        The output directory is emptied first; static assets are copied into
        it before anything else is written so generated files win on clashes.
        """
        config = self.config
        empty_dir(config.dist_dir)
        copy_static(config.static_dir, config.dist_dir)

        written: list[Path] = []
        bundle = self._bundle_runtime()
        if bundle is not None:
            written.append(bundle)

        manifest = RouteManifestBuilder(config).build()
        written.append(write_manifest(manifest, config.manifest))

        pages = PageBuilder(
            config,
            session=BuildSession.for_config(config),
            minifier=self.minifier,
        )
        written.extend(pages.build_all(manifest))
        logger.info("Build complete: %d files in %s", len(written), config.dist_dir)
        return written

    def _bundle_runtime(self) -> Path | None:
        entry = self.config.runtime_entry
        if not self.config.bundle:
            return None
        if not entry.is_file():
            logger.warning("Runtime entry %s not found; skipping bundle", entry)
            return None
        code = self.bundler(entry)
        output = self.config.output_js
        output.parent.mkdir(parents=True, exist_ok=True)
        output.write_text(code, encoding="utf-8")
        return output


__all__ = ["SiteBuilder"]
