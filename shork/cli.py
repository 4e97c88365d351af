"""Cyclopts CLI entrypoint for building shork sites.

The ``shork`` console script builds a project into static HTML (``shork
build``) or prints the routes a build would produce (``shork routes``).
Domain errors are reported on stderr and end the process with status 1;
schema violations are listed one per line so the source data can be fixed
before the next run.

Examples
--------
Build the project in the current directory:

>>> from shork.cli import main
>>> main()  # doctest: +SKIP

Build another project with verbose logging:

>>> from shork.cli import app
>>> app(["build", "--root", "sites/blog", "--verbose"])  # doctest: +SKIP
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .build import SiteBuilder
from .config import load_config
from .errors import SchemaValidationError, ShorkError, TemplateRenderError
from .routes import RouteManifestBuilder

app = App(name="shork", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]

logger = logging.getLogger("shork")


def _format_path(path: Path) -> str:
    """Return a cwd-relative path when possible, otherwise the absolute path."""
    if path.is_absolute():
        try:
            return str(path.relative_to(Path.cwd()))
        except ValueError:
            return str(path)
    return str(path)


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.INFO if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _report(error: ShorkError) -> None:
    """Log ``error`` with the detail an operator needs to fix the sources."""
    logger.error("Build failed: %s", error)
    if isinstance(error, SchemaValidationError):
        for issue in error.issues:
            logger.error("  - %s", issue)
    elif isinstance(error, TemplateRenderError) and error.snapshot:
        logger.error("  Data available: %s", error.snapshot)


@app.command(help="Build the site into its dist directory.")
def build(
    *,
    root: typ.Annotated[
        Path, Parameter(help="Project root directory", env_var="INPUT_ROOT")
    ] = Path(),
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to shork.yaml", env_var="INPUT_CONFIG"),
    ] = None,
    verbose: typ.Annotated[
        bool, Parameter(help="Log every page as it is built")
    ] = False,
) -> None:
    """Build every route of the project.

    Parameters
    ----------
    root : Path, optional
        Project root; defaults to the current directory.
    config : Path or None, optional
        Explicit configuration file; defaults to ``<root>/shork.yaml``.
    verbose : bool, optional
        Enable info-level logging.

    Raises
    ------
    SystemExit
        With status 1 when the build fails with a domain error.
    """
    _configure_logging(verbose)
    try:
        site_config = load_config(root, config)
        written = SiteBuilder(site_config).run()
    except ShorkError as exc:
        _report(exc)
        raise SystemExit(1) from exc
    for path in written:
        print(f"wrote {_format_path(path)}")


@app.command(help="List the routes discovered in the project.")
def routes(
    *,
    root: typ.Annotated[
        Path, Parameter(help="Project root directory", env_var="INPUT_ROOT")
    ] = Path(),
    config: typ.Annotated[
        Path | None,
        Parameter(help="Path to shork.yaml", env_var="INPUT_CONFIG"),
    ] = None,
) -> None:
    """Print each route's path, matcher and layout, in match order."""
    _configure_logging(False)
    try:
        site_config = load_config(root, config)
        manifest = RouteManifestBuilder(site_config).build()
    except ShorkError as exc:
        _report(exc)
        raise SystemExit(1) from exc
    for route in manifest:
        layout = _format_path(route.layout)
        print(f"{route.path}\t{route.regex}\t{layout}")


def main() -> None:
    """Invoke the Cyclopts application behind the ``shork`` console command."""
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
