"""Turn a raw page or layout template into a Jinja2 template and its CSS.

Order matters: components are expanded first so that the dialect inside a
component body is compiled together with the page, then the page's own
``<style>`` blocks are collected, and only then is the dialect compiled.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ

from shork.components.models import STYLE_PATTERN

from .dialect import DialectCompiler

if typ.TYPE_CHECKING:
    from shork.components import ComponentResolver


@dc.dataclass(frozen=True, slots=True)
class PreprocessResult:
    """Compiled template plus the assets collected while compiling it."""

    template: str
    css: str
    script: str = ""


class PagePreprocessor:
    """Run component expansion, style extraction and dialect compilation."""

    def __init__(
        self, resolver: ComponentResolver, compiler: DialectCompiler | None = None
    ) -> None:
        self.resolver = resolver
        self.compiler = compiler or DialectCompiler()

    def preprocess(self, raw: str) -> PreprocessResult:
        """Compile ``raw`` into a renderable template.

        Parameters
        ----------
        raw : str
            Source of a ``+page.html`` or ``+layout.html`` file.

        Returns
        -------
        PreprocessResult
            The Jinja2 template, component CSS followed by the template's own
            style blocks, and the component scripts.
        """
        expanded = self.resolver.resolve(raw)
        styles: list[str] = [expanded.css]

        def _collect(match: re.Match[str]) -> str:
            styles.append(match.group(1))
            return ""

        html = STYLE_PATTERN.sub(_collect, expanded.html)
        return PreprocessResult(
            template=self.compiler.compile(html),
            css="".join(styles),
            script=expanded.script,
        )


__all__ = ["PagePreprocessor", "PreprocessResult"]
