"""Tests for route discovery, layout lookup and the manifest file."""

from __future__ import annotations

import typing as typ

import msgspec.json as msgspec_json
import pytest

from shork.config import ShorkConfig, load_config
from shork.errors import LayoutNotFoundError, RouteParamsError, ShorkConfigError
from shork.routes import (
    Manifest,
    RouteManifestBuilder,
    load_manifest,
    route_pattern,
    write_manifest,
)

if typ.TYPE_CHECKING:
    from pathlib import Path


def _paths(manifest: Manifest) -> list[str]:
    return [route.path for route in manifest]


def test_sample_project_routes(site_config: ShorkConfig) -> None:
    manifest = RouteManifestBuilder(site_config).build()
    assert _paths(manifest) == ["/", "/blog", "/blog/[slug]"]

    home, blog, post = manifest
    assert home.regex == "^/$"
    assert home.layout == site_config.lib_dir / "+layout.html"
    assert home.js is None
    assert blog.js == site_config.routes_dir / "blog" / "+page.py"
    assert post.param_keys == ("slug",)
    assert post.regex == "^/blog/([^/]+)$"
    assert post.schema == site_config.routes_dir / "blog" / "[slug]" / "+schema.py"


def test_routes_sorted_by_parameter_count(
    tmp_path: Path, write_files: typ.Callable[..., Path]
) -> None:
    root = write_files(
        tmp_path,
        {
            "src/lib/+layout.html": "{{ body }}",
            "src/routes/a/[x]/[y]/+page.html": "two",
            "src/routes/b/+page.html": "zero",
            "src/routes/c/[z]/+page.html": "one",
            "src/routes/d/+page.html": "zero again",
        },
    )
    manifest = RouteManifestBuilder(load_config(root)).build()
    assert _paths(manifest) == ["/b", "/d", "/c/[z]", "/a/[x]/[y]"]
    assert [len(route.param_keys) for route in manifest] == [0, 0, 1, 2]


def test_nearest_layout_wins(
    site_root: Path, write_files: typ.Callable[..., Path]
) -> None:
    write_files(site_root, {"src/routes/blog/+layout.html": "<div>{{ body }}</div>"})
    config = load_config(site_root)
    manifest = RouteManifestBuilder(config).build()
    layouts = {route.path: route.layout for route in manifest}
    blog_layout = config.routes_dir / "blog" / "+layout.html"
    assert layouts["/blog"] == blog_layout
    assert layouts["/blog/[slug]"] == blog_layout
    assert layouts["/"] == config.lib_dir / "+layout.html"


def test_missing_layout_raises(
    tmp_path: Path, write_files: typ.Callable[..., Path]
) -> None:
    root = write_files(tmp_path, {"src/routes/about/+page.html": "about"})
    with pytest.raises(LayoutNotFoundError, match="/about"):
        RouteManifestBuilder(load_config(root)).build()


def test_missing_routes_dir_raises(tmp_path: Path) -> None:
    with pytest.raises(ShorkConfigError, match="Routes directory"):
        RouteManifestBuilder(load_config(tmp_path)).build()


@pytest.mark.parametrize(
    ("path", "expected"),
    [
        ("/", ("^/$", ())),
        ("/about", ("^/about$", ())),
        ("/docs/v1.0", (r"^/docs/v1\.0$", ())),
        ("/[lang]/posts/[slug]", ("^/([^/]+)/posts/([^/]+)$", ("lang", "slug"))),
    ],
)
def test_route_pattern(path: str, expected: tuple[str, tuple[str, ...]]) -> None:
    assert route_pattern(path) == expected


def test_manifest_match_prefers_static_routes(site_config: ShorkConfig) -> None:
    manifest = RouteManifestBuilder(site_config).build()
    matched = manifest.match("/blog")
    assert matched is not None
    assert matched[0].path == "/blog"

    matched = manifest.match("/blog/hello")
    assert matched is not None
    route, params = matched
    assert route.path == "/blog/[slug]"
    assert params == {"slug": "hello"}

    assert manifest.match("/blog/hello/extra") is None


def test_resolve_path_requires_every_param(site_config: ShorkConfig) -> None:
    post = list(RouteManifestBuilder(site_config).build())[-1]
    assert post.resolve_path({"slug": "first"}) == "/blog/first"
    with pytest.raises(RouteParamsError, match="slug"):
        post.resolve_path({"id": "first"})


@pytest.mark.parametrize("value", ["..", ".", "", "a/b", "..\\x"])
def test_resolve_path_rejects_values_outside_one_segment(
    site_config: ShorkConfig, value: str
) -> None:
    post = list(RouteManifestBuilder(site_config).build())[-1]
    with pytest.raises(RouteParamsError, match="single path segment"):
        post.resolve_path({"slug": value})
    assert post.resolve_path({"slug": "v1.2"}) == "/blog/v1.2"


def test_manifest_file_round_trip(site_config: ShorkConfig, tmp_path: Path) -> None:
    manifest = RouteManifestBuilder(site_config).build()
    path = write_manifest(manifest, tmp_path / "out" / "manifest.json")

    raw = msgspec_json.decode(path.read_bytes())
    entry = raw["routes"][2]
    assert set(entry) == {"path", "regex", "paramKeys", "page", "layout", "js", "schema"}
    assert entry["paramKeys"] == ["slug"]
    assert raw["routes"][0]["js"] is None

    assert load_manifest(path) == manifest
