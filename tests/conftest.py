"""Shared fixtures: a small but complete shork project written to ``tmp_path``.

The project has a home page using a scripted component, a blog listing with a
data loader, and a dynamic ``/blog/[slug]`` route with a schema and two
generated pages. Tests that need variations write extra files on top of it
with :func:`write_tree`.
"""

from __future__ import annotations

import typing as typ
from textwrap import dedent

import pytest

from shork.config import ShorkConfig, load_config

if typ.TYPE_CHECKING:
    from pathlib import Path

CARD_COMPONENT = """\
<style>
.card { border: 1px solid #ccc; }
</style>
<div class="card"><h3>{{ props.title }}</h3><div class="card-content">{{ slot }}</div></div>
"""

COUNTER_COMPONENT = """\
<style>
.counter { font-weight: bold; }
</style>
<script>
return { increment(event) { event.target.textContent = "1"; } };
</script>
<div class="counter"><button>0</button></div>
"""

SITE_FILES: dict[str, str] = {
    "src/app.html": (
        "<!doctype html>\n<html>\n<head>%head%</head>\n<body>%body%</body>\n</html>\n"
    ),
    "src/lib/+layout.html": (
        "<style>main { margin: 0; }</style>\n<main>{{ body }}</main>\n"
    ),
    "src/lib/components/Card.html": CARD_COMPONENT,
    "src/lib/components/Counter.html": COUNTER_COMPONENT,
    "src/data.py": 'data = {"site_name": "Shork Blog"}\n',
    "src/routes/+page.html": (
        "<h1>{{ site_name }}</h1>\n"
        "{{#if is_index}}<p>Home</p>{{/if}}\n"
        "<shork-counter></shork-counter>\n"
    ),
    "src/routes/blog/+page.html": (
        "<ul>{{#each posts as post, i}}"
        '<li data-index="{{ i }}">{{ post.title }}</li>'
        "{{/each}}</ul>\n"
    ),
    "src/routes/blog/+page.py": dedent(
        """
        def load(params):
            return {
                "posts": [
                    {"slug": "first", "title": "First post"},
                    {"slug": "second", "title": "Second post"},
                ]
            }
        """
    ),
    "src/routes/blog/[slug]/+page.html": (
        '<article><shork-card title="{{ post.title }}">'
        "{{ post.body | markdown }}"
        "</shork-card></article>\n"
    ),
    "src/routes/blog/[slug]/+page.py": dedent(
        """
        POSTS = [
            {"slug": "first", "title": "First post", "body": "Hello **world**"},
            {"slug": "second", "title": "Second post", "body": "More words"},
        ]


        def generate_static_params(global_data):
            return [{"slug": post["slug"]} for post in POSTS]


        def load(params):
            post = next(post for post in POSTS if post["slug"] == params["slug"])
            return {"post": post}
        """
    ),
    "src/routes/blog/[slug]/+schema.py": dedent(
        """
        import pydantic


        class Post(pydantic.BaseModel):
            slug: str
            title: str
            body: str


        class PostPage(pydantic.BaseModel):
            post: Post


        schema = PostPage
        """
    ),
    "static/robots.txt": "User-agent: *\n",
}


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Write ``files`` (relative path to text) below ``root`` and return ``root``."""
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """Return the root of a freshly written sample project."""
    return write_tree(tmp_path / "site", SITE_FILES)


@pytest.fixture
def site_config(site_root: Path) -> ShorkConfig:
    """Return the default configuration of the sample project."""
    return load_config(site_root)


@pytest.fixture
def components_dir(tmp_path: Path) -> Path:
    """Return a components directory holding ``Card`` and ``Counter``."""
    return write_tree(
        tmp_path / "components",
        {"Card.html": CARD_COMPONENT, "Counter.html": COUNTER_COMPONENT},
    )


@pytest.fixture
def write_files() -> typ.Callable[[Path, dict[str, str]], Path]:
    """Expose :func:`write_tree` to tests that extend the sample project."""
    return write_tree
