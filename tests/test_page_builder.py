"""End-to-end tests for building pages from the sample project."""

from __future__ import annotations

import logging
import typing as typ
from textwrap import dedent

import pytest
from bs4 import BeautifulSoup

from shork.build import PageBuilder, PageInstance, SiteBuilder, output_path_for
from shork.config import ShorkConfig, load_config
from shork.errors import (
    RouteParamsError,
    SchemaValidationError,
    TemplateRenderError,
)
from shork.routes import RouteManifestBuilder

if typ.TYPE_CHECKING:
    from pathlib import Path


def _soup(path: Path) -> BeautifulSoup:
    return BeautifulSoup(path.read_text(encoding="utf-8"), "html.parser")


def _build(config: ShorkConfig) -> list[Path]:
    return SiteBuilder(config, bundler=lambda entry: "/* bundle */").run()


@pytest.fixture
def built_site(site_config: ShorkConfig) -> ShorkConfig:
    _build(site_config)
    return site_config


def test_written_files(site_config: ShorkConfig) -> None:
    written = _build(site_config)
    dist = site_config.dist_dir
    assert written == [
        dist / "manifest.json",
        dist / "index.html",
        dist / "blog" / "index.html",
        dist / "blog" / "first" / "index.html",
        dist / "blog" / "second" / "index.html",
    ]
    assert (dist / "robots.txt").read_text(encoding="utf-8") == "User-agent: *\n"


def test_home_page_document(built_site: ShorkConfig) -> None:
    soup = _soup(built_site.dist_dir / "index.html")
    assert soup.select_one("main h1").get_text() == "Shork Blog"
    assert soup.select_one("main p").get_text() == "Home", "is_index is set on /"
    counter = soup.select_one("main [data-shork-id] .counter button")
    assert counter is not None

    style = soup.select_one("head style")
    assert style is not None
    assert "data-shork-id" in style.get_text()
    assert "main{margin:0" in style.get_text()

    script = soup.select_one("head script")
    assert script is not None
    scope_id = soup.select_one("main [data-shork-id]")["data-shork-id"]
    assert f"('{scope_id}')" in script.get_text()


def test_blog_listing(built_site: ShorkConfig) -> None:
    soup = _soup(built_site.dist_dir / "blog" / "index.html")
    assert [li.get_text() for li in soup.select("main li")] == [
        "First post",
        "Second post",
    ]
    assert [li["data-index"] for li in soup.select("main li")] == ["0", "1"]
    assert soup.select_one("head script") is None, "no component scripts here"


def test_dynamic_route_produces_one_page_per_entry(built_site: ShorkConfig) -> None:
    for slug, title, body in [
        ("first", "First post", "<p>Hello <strong>world</strong></p>"),
        ("second", "Second post", "<p>More words</p>"),
    ]:
        soup = _soup(built_site.dist_dir / "blog" / slug / "index.html")
        card = soup.select_one("article [data-shork-id] .card")
        assert card is not None
        assert card.select_one("h3").get_text() == title
        assert card.select_one(".card-content").decode_contents() == body


def test_build_is_idempotent(site_config: ShorkConfig) -> None:
    first = {path: path.read_bytes() for path in _build(site_config)}
    second = {path: path.read_bytes() for path in _build(site_config)}
    assert first == second


def test_stale_output_is_removed(site_config: ShorkConfig) -> None:
    stale = site_config.dist_dir / "old" / "index.html"
    stale.parent.mkdir(parents=True)
    stale.write_text("old", encoding="utf-8")
    _build(site_config)
    assert not stale.exists()


def test_runtime_is_bundled_when_present(
    site_root: Path, write_files: typ.Callable[..., Path]
) -> None:
    write_files(site_root, {"src/lib/runtime.js": "console.log('hi');\n"})
    config = load_config(site_root)
    bundled: list[Path] = []

    def bundler(entry: Path) -> str:
        bundled.append(entry)
        return "/* bundle */"

    written = SiteBuilder(config, bundler=bundler).run()
    assert bundled == [config.runtime_entry]
    assert written[0] == config.output_js
    assert config.output_js.read_text(encoding="utf-8") == "/* bundle */"


def test_missing_runtime_skips_bundle(
    site_config: ShorkConfig, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING):
        written = _build(site_config)
    assert site_config.output_js not in written
    assert "skipping bundle" in caplog.text


def test_data_layering(
    site_root: Path, write_files: typ.Callable[..., Path]
) -> None:
    write_files(
        site_root,
        {
            "src/data.py": 'data = {"site_name": "Global", "title": "global", "tag": "g"}\n',
            "src/routes/tags/[tag]/+page.html": (
                "{{ site_name }}|{{ title }}|{{ tag }}|{{ page.params.tag }}"
            ),
            "src/routes/tags/[tag]/+page.py": dedent(
                """
                def generate_static_params(global_data):
                    return [
                        {"params": {"tag": "py"}, "props": {"title": "from props"}},
                    ]


                async def load(params):
                    return {"tag": params["tag"].upper()}
                """
            ),
        },
    )
    config = load_config(site_root)
    _build(config)
    soup = _soup(config.dist_dir / "tags" / "py" / "index.html")
    assert soup.select_one("main").get_text() == "Global|from props|PY|py"


def test_global_data_may_be_callable(
    site_root: Path, write_files: typ.Callable[..., Path]
) -> None:
    write_files(
        site_root,
        {"src/data.py": 'def data():\n    return {"site_name": "Called"}\n'},
    )
    config = load_config(site_root)
    _build(config)
    soup = _soup(config.dist_dir / "index.html")
    assert soup.select_one("main h1").get_text() == "Called"


def test_dynamic_route_without_loader_is_skipped(
    site_root: Path,
    write_files: typ.Callable[..., Path],
    caplog: pytest.LogCaptureFixture,
) -> None:
    write_files(
        site_root,
        {
            "src/routes/orphan/[id]/+page.html": "{{ page.params.id }}",
            "src/routes/nostatic/[id]/+page.html": "{{ page.params.id }}",
            "src/routes/nostatic/[id]/+page.py": "def load(params):\n    return {}\n",
        },
    )
    config = load_config(site_root)
    with caplog.at_level(logging.WARNING, logger="shork.build.page_builder"):
        written = _build(config)
    assert not any("orphan" in str(path) for path in written)
    assert not any("nostatic" in str(path) for path in written)
    assert "Skipping dynamic route /orphan/[id]" in caplog.text
    assert "does not define generate_static_params" in caplog.text


def test_static_params_missing_a_key(
    site_root: Path, write_files: typ.Callable[..., Path]
) -> None:
    write_files(
        site_root,
        {
            "src/routes/blog/[slug]/+page.py": (
                "def generate_static_params(global_data):\n"
                '    return [{"id": "first"}]\n'
            ),
        },
    )
    with pytest.raises(RouteParamsError, match="slug"):
        _build(load_config(site_root))


def test_loaded_data_is_validated(
    site_root: Path, write_files: typ.Callable[..., Path]
) -> None:
    write_files(
        site_root,
        {
            "src/routes/blog/[slug]/+page.py": dedent(
                """
                def generate_static_params(global_data):
                    return [{"slug": "broken"}]


                def load(params):
                    return {"post": {"slug": params["slug"], "title": 7}}
                """
            ),
        },
    )
    with pytest.raises(SchemaValidationError) as excinfo:
        _build(load_config(site_root))
    error = excinfo.value
    assert error.route_path == "/blog/broken"
    paths = sorted(issue.path for issue in error.issues)
    assert paths == ["post.body", "post.title"]
    assert str(error.issues[0]).startswith("Path: post.")


def test_msgspec_schema_checks_merged_data(
    site_root: Path, write_files: typ.Callable[..., Path]
) -> None:
    write_files(
        site_root,
        {
            "src/routes/about/+page.html": "<p>{{ site_name }}</p>",
            "src/routes/about/+schema.py": dedent(
                """
                import msgspec


                class About(msgspec.Struct):
                    site_name: int


                schema = About
                """
            ),
        },
    )
    with pytest.raises(SchemaValidationError) as excinfo:
        _build(load_config(site_root))
    (issue,) = excinfo.value.issues
    assert issue.path == "site_name"
    assert "Expected `int`" in issue.message


def test_render_error_carries_data_snapshot(
    site_root: Path, write_files: typ.Callable[..., Path]
) -> None:
    write_files(site_root, {"src/routes/+page.html": "<p>{{ missing.name }}</p>"})
    config = load_config(site_root)
    with pytest.raises(TemplateRenderError) as excinfo:
        _build(config)
    error = excinfo.value
    assert error.path == config.routes_dir / "+page.html"
    assert "'missing' is undefined" in str(error)
    assert '"site_name": "Shork Blog"' in error.snapshot


def test_lenient_undefined(
    site_root: Path, write_files: typ.Callable[..., Path]
) -> None:
    write_files(
        site_root,
        {
            "shork.yaml": "strict_undefined: false\n",
            "src/routes/+page.html": "<p>[{{ missing }}]</p>",
        },
    )
    config = load_config(site_root)
    _build(config)
    assert _soup(config.dist_dir / "index.html").select_one("p").get_text() == "[]"


def test_missing_component_prop_renders_empty(
    site_root: Path, write_files: typ.Callable[..., Path]
) -> None:
    write_files(
        site_root,
        {
            "src/lib/components/Badge.html": (
                '<span class="badge">{{ props.label }}</span>'
            ),
            "src/routes/+page.html": (
                '<shork-badge></shork-badge><shork-badge label="New"></shork-badge>'
            ),
        },
    )
    config = load_config(site_root)
    _build(config)
    badges = _soup(config.dist_dir / "index.html").select("main .badge")
    assert [badge.get_text() for badge in badges] == ["", "New"]


def test_missing_component_prop_keeps_other_names_strict(
    site_root: Path, write_files: typ.Callable[..., Path]
) -> None:
    write_files(
        site_root,
        {
            "src/lib/components/Badge.html": "<span>{{ props.label }}</span>",
            "src/routes/+page.html": "<shork-badge></shork-badge>{{ nope }}",
        },
    )
    with pytest.raises(TemplateRenderError, match="'nope' is undefined"):
        _build(load_config(site_root))


def test_bracket_component_script_is_emitted_verbatim(
    site_root: Path, write_files: typ.Callable[..., Path]
) -> None:
    script = 'var t = "{% tick %}"; /* {# note #} */'
    write_files(
        site_root,
        {
            "src/lib/components/Clock.html": (
                f"<script>{script}</script><time>now</time>"
            ),
            "src/routes/+page.html": "<Component:Clock />",
        },
    )
    config = load_config(site_root)
    _build(config)
    soup = _soup(config.dist_dir / "index.html")
    assert soup.select_one("main time").get_text() == "now"
    assert soup.select_one("main script").get_text() == script


@pytest.mark.parametrize("slug", ["../../escape", "a/b", ".."])
def test_static_params_must_be_single_segments(
    site_root: Path, write_files: typ.Callable[..., Path], slug: str
) -> None:
    write_files(
        site_root,
        {
            "src/routes/blog/[slug]/+page.py": (
                "def generate_static_params(global_data):\n"
                f"    return [{{'slug': {slug!r}}}]\n"
            ),
        },
    )
    with pytest.raises(RouteParamsError, match="single path segment"):
        _build(load_config(site_root))
    assert not (site_root / "escape").exists()


def test_unminified_css(site_root: Path, write_files: typ.Callable[..., Path]) -> None:
    write_files(site_root, {"shork.yaml": "minify_css: false\n"})
    config = load_config(site_root)
    _build(config)
    style = _soup(config.dist_dir / "blog" / "index.html").select_one("head style")
    assert style.get_text() == "main { margin: 0; }\n"


def test_build_single_page(site_config: ShorkConfig) -> None:
    manifest = RouteManifestBuilder(site_config).build()
    post = list(manifest)[-1]
    builder = PageBuilder(site_config, minifier=lambda css: css)
    path = builder.build_page(post, PageInstance(params={"slug": "second"}))
    assert path == site_config.dist_dir / "blog" / "second" / "index.html"
    assert "Second post" in path.read_text(encoding="utf-8")


@pytest.mark.parametrize(
    ("route_path", "expected"),
    [("/", "index.html"), ("/blog", "blog/index.html"), ("/a/b/", "a/b/index.html")],
)
def test_output_path_for(tmp_path: Path, route_path: str, expected: str) -> None:
    assert output_path_for(tmp_path, route_path) == tmp_path / expected
