"""Build the HTML documents of every route in a manifest.

:class:`PageBuilder` turns each :class:`~shork.routes.Route` into one or more
concrete pages. Static routes produce a single page. Dynamic routes ask their
``+page.py`` for ``generate_static_params(global_data)`` and produce one page
per returned entry, in order; a dynamic route without a loader or without that
function is skipped with a warning.

For every page the builder compiles the page and layout templates, layers the
page data (route parameters, global data, per-entry props, ``load()``
output), validates it, renders the page into the layout, and writes the
application shell with the collected CSS and component scripts to
``dist/<path>/index.html``.

Example
-------
>>> from pathlib import Path
>>> from shork.config import load_config
>>> from shork.routes import RouteManifestBuilder
>>> config = load_config(Path("."))  # doctest: +SKIP
>>> builder = PageBuilder(config)  # doctest: +SKIP
>>> builder.build_all(RouteManifestBuilder(config).build())  # doctest: +SKIP
[PosixPath('dist/index.html'), PosixPath('dist/blog/index.html')]
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import typing as typ

from shork._constants import (
    BODY_PLACEHOLDER,
    GLOBAL_DATA_ATTRIBUTE,
    HEAD_PLACEHOLDER,
    LOADER_FILE,
    SCHEMA_FILE,
)
from shork.compiler import PagePreprocessor
from shork.components import ComponentResolver

from .assets import CssMinifier, minify_css
from .modules import RouteModule, run_sync
from .renderer import ComponentProps, TemplateRenderer
from .session import BuildSession
from .validation import ensure_valid

if typ.TYPE_CHECKING:
    from pathlib import Path

    from shork.compiler import PreprocessResult
    from shork.config import ShorkConfig
    from shork.routes import Manifest, Route

logger = logging.getLogger(__name__)


@dc.dataclass(slots=True)
class PageInstance:
    """Concrete parameter values (and extra props) for one page of a route."""

    params: dict[str, typ.Any] = dc.field(default_factory=dict)
    props: dict[str, typ.Any] = dc.field(default_factory=dict)

    @classmethod
    def from_entry(cls, entry: cabc.Mapping[str, typ.Any]) -> PageInstance:
        """Build an instance from a ``generate_static_params`` entry.

        Entries are either ``{"params": {...}, "props": {...}}`` or a flat
        mapping of parameter values with an optional ``props`` key.

        >>> PageInstance.from_entry({"slug": "a", "props": {"x": 1}})
        PageInstance(params={'slug': 'a'}, props={'x': 1})
        >>> PageInstance.from_entry({"params": {"slug": "b"}})
        PageInstance(params={'slug': 'b'}, props={})
        """
        props = dict(entry.get("props") or {})
        nested = entry.get("params")
        if isinstance(nested, cabc.Mapping):
            return cls(params=dict(nested), props=props)
        params = {key: value for key, value in entry.items() if key != "props"}
        return cls(params=params, props=props)


def output_path_for(dist_dir: Path, route_path: str) -> Path:
    """Return ``index.html`` under ``dist_dir`` for a concrete route path."""
    relative = route_path.strip("/")
    if not relative:
        return dist_dir / "index.html"
    return dist_dir / relative / "index.html"


class PageBuilder:
    """Render and write every page of a manifest."""

    def __init__(
        self,
        config: ShorkConfig,
        *,
        session: BuildSession | None = None,
        renderer: TemplateRenderer | None = None,
        minifier: CssMinifier | None = None,
    ) -> None:
        """Initialize the builder.

        Parameters
        ----------
        config : ShorkConfig
            Project configuration.
        session : BuildSession, optional
            Caches for this build; a fresh session is created when omitted.
        renderer : TemplateRenderer, optional
            Jinja2 renderer; honours ``config.strict_undefined`` by default.
        minifier : Callable[[str], str], optional
            CSS minifier used when ``config.minify_css`` is set.
        """
        self.config = config
        self.session = session or BuildSession.for_config(config)
        self.renderer = renderer or TemplateRenderer(
            strict_undefined=config.strict_undefined
        )
        self.minifier = minifier or minify_css
        self.preprocessor = PagePreprocessor(
            ComponentResolver(
                self.session.components,
                prefix=config.component_prefix,
                scope_css=config.scope_css,
                scope_ids=self.session.scope_ids,
            )
        )
        self._app_template: str | None = None
        self._global_data: dict[str, typ.Any] | None = None

    @property
    def app_template(self) -> str:
        """Return the application shell, read once per builder."""
        if self._app_template is None:
            self._app_template = self.config.app_template.read_text(encoding="utf-8")
        return self._app_template

    @property
    def global_data(self) -> dict[str, typ.Any]:
        """Return the ``data`` exported by the global data module, or ``{}``."""
        if self._global_data is None:
            self._global_data = self._load_global_data()
        return self._global_data

    def _load_global_data(self) -> dict[str, typ.Any]:
        path = self.config.global_data
        if not path.is_file():
            return {}
        module = self.session.modules.load(path)
        data = getattr(module, GLOBAL_DATA_ATTRIBUTE, None)
        if callable(data):
            data = run_sync(data())
        if data is None:
            return {}
        if not isinstance(data, cabc.Mapping):
            msg = f"'{GLOBAL_DATA_ATTRIBUTE}' in {path} must be a mapping"
            raise TypeError(msg)
        return dict(data)

    def route_module(self, path: Path | None) -> RouteModule:
        """Return the :class:`RouteModule` view of ``path`` (empty when ``None``)."""
        if path is None:
            return RouteModule()
        return RouteModule.from_module(self.session.modules.load(path))

    def build_all(self, manifest: Manifest) -> list[Path]:
        """Build every page of ``manifest`` and return the written paths."""
        written: list[Path] = []
        for route in manifest:
            for instance in self.instances(route):
                written.append(self.build_page(route, instance))
        return written

    def instances(self, route: Route) -> list[PageInstance]:
        """Return the concrete pages to build for ``route``."""
        if not route.is_dynamic:
            return [PageInstance()]
        if route.js is None:
            logger.warning(
                "Skipping dynamic route %s: no %s data loader", route.path, LOADER_FILE
            )
            return []
        module = self.route_module(route.js)
        if module.generate_static_params is None:
            logger.warning(
                "Skipping dynamic route %s: %s does not define generate_static_params",
                route.path,
                route.js,
            )
            return []
        entries = module.call_static_params(self.global_data)
        return [PageInstance.from_entry(entry) for entry in entries]

    def build_page(self, route: Route, instance: PageInstance | None = None) -> Path:
        """Render one page of ``route`` and write it to the output tree.

        Parameters
        ----------
        route : Route
            The route being built.
        instance : PageInstance, optional
            Parameter values and props; empty for static routes.

        Returns
        -------
        Path
            The written ``index.html``.

        Raises
        ------
        RouteParamsError
            If ``instance`` does not bind every route parameter.
        SchemaValidationError
            If loaded or merged page data violates a route schema.
        TemplateRenderError
            If the page or layout template fails to compile or render.
        """
        instance = instance or PageInstance()
        route_path = route.resolve_path(instance.params)
        logger.info("Building page: %s", route_path)

        page = self.preprocessor.preprocess(route.page.read_text(encoding="utf-8"))
        layout = self.preprocessor.preprocess(route.layout.read_text(encoding="utf-8"))
        data = self.page_data(route, route_path, instance)

        page_html = self.renderer.render(page.template, data, path=route.page)
        layout_html = self.renderer.render(
            layout.template, {**data, "body": page_html}, path=route.layout
        )
        document = self.assemble(page, layout, layout_html)

        output_path = output_path_for(self.config.dist_dir, route_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(document, encoding="utf-8")
        return output_path

    def page_data(
        self, route: Route, route_path: str, instance: PageInstance
    ) -> dict[str, typ.Any]:
        """Layer and validate the data a page renders with.

        Later sources win: base fields, global data, instance props, then the
        output of ``load(params)``.
        """
        data: dict[str, typ.Any] = {
            "page": {"params": dict(instance.params)},
            "is_index": route.path == "/",
            "props": {},
        }
        data.update(self.global_data)
        data.update(instance.props)

        if route.js is not None:
            module = self.route_module(route.js)
            if module.load is not None:
                loaded = module.call_load(instance.params)
                self._validate_loaded(route.js, route_path, loaded)
                data.update(loaded)

        if route.schema is not None:
            schema = self.route_module(route.schema).schema
            if schema is not None:
                ensure_valid(schema, data, route_path=route_path)
        if isinstance(data["props"], cabc.Mapping):
            data["props"] = ComponentProps(data["props"])
        return data

    def _validate_loaded(
        self, loader: Path, route_path: str, loaded: dict[str, typ.Any]
    ) -> None:
        """Validate ``load()`` output against the schema next to ``loader``."""
        schema_path = loader.with_name(SCHEMA_FILE)
        if not schema_path.is_file():
            return
        schema = self.route_module(schema_path).schema
        if schema is None:
            return
        logger.info("Validating data for: %s", route_path)
        ensure_valid(schema, loaded, route_path=route_path)

    def assemble(
        self, page: PreprocessResult, layout: PreprocessResult, layout_html: str
    ) -> str:
        """Insert the styles, scripts and rendered layout into the app shell."""
        css = f"{layout.css}\n{page.css}"
        if self.config.minify_css:
            css = self.minifier(css)
        head = f"<style>{css}</style>"
        script = f"{layout.script}{page.script}"
        if script:
            head += f"<script>{script}</script>"
        return self.app_template.replace(HEAD_PLACEHOLDER, head, 1).replace(
            BODY_PLACEHOLDER, layout_html, 1
        )


__all__ = ["PageBuilder", "PageInstance", "output_path_for"]
