"""Markdown and syntax-highlighting filters available in page templates.

Templates can render Markdown held in page data (``{{ post.body | markdown }}``)
or highlight a snippet (``{{ snippet | highlight("python") }}``). The
``highlight_css`` global carries the matching Pygments stylesheet.
"""

from __future__ import annotations

import collections.abc as cabc
import typing as typ

from markdown import Markdown
from pygments import highlight
from pygments.formatters.html import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

MARKDOWN_EXTENSIONS = ["fenced_code", "codehilite", "tables", "sane_lists"]


class ContentFilters:
    """Render Markdown and code snippets with a shared Pygments style."""

    def __init__(self, pygments_style: str = "monokai") -> None:
        self.pygments_style = pygments_style
        self._formatter = HtmlFormatter(style=pygments_style, cssclass="codehilite")

    @property
    def stylesheet(self) -> str:
        """Return the CSS used for highlighted code blocks."""
        return self._formatter.get_style_defs(".codehilite")

    def markdown(self, text: str | None) -> str:
        """Render ``text`` as HTML; ``None`` and blank input render as ``""``."""
        if not text or not text.strip():
            return ""
        md = Markdown(
            extensions=MARKDOWN_EXTENSIONS,
            extension_configs={
                "codehilite": {
                    "linenums": False,
                    "guess_lang": False,
                    "css_class": "codehilite",
                    "pygments_style": self.pygments_style,
                }
            },
        )
        return md.convert(text)

    def highlight(self, code: str, language: str | None = None) -> str:
        """Highlight ``code``, falling back to plain text for unknown languages."""
        try:
            lexer = get_lexer_by_name(language or "text")
        except ClassNotFound:
            lexer = get_lexer_by_name("text")
        return highlight(code, lexer, self._formatter)

    def as_filters(self) -> dict[str, cabc.Callable[..., typ.Any]]:
        return {"markdown": self.markdown, "highlight": self.highlight}


__all__ = ["ContentFilters"]
