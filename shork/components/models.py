"""Shared dataclasses used by the component resolver."""

from __future__ import annotations

import dataclasses as dc
import re

STYLE_PATTERN = re.compile(r"<style\b[^>]*>(.*?)</style\s*>", re.DOTALL | re.IGNORECASE)
SCRIPT_PATTERN = re.compile(
    r"<script\b[^>]*>(.*?)</script\s*>", re.DOTALL | re.IGNORECASE
)

Props = dict[str, str]


@dc.dataclass(frozen=True, slots=True)
class ComponentDefinition:
    """A component file split into markup, style and script.

    Attributes
    ----------
    name : str
        Component identifier, e.g. ``"Card"`` for ``Card.html``.
    html : str
        Template body with the style and script blocks removed.
    css : str
        Raw text of the first ``<style>`` block, or ``""``.
    script : str
        Raw text of the first ``<script>`` block, or ``""``.
    """

    name: str
    html: str
    css: str = ""
    script: str = ""

    @classmethod
    def parse(cls, name: str, source: str) -> ComponentDefinition:
        """Split a component file's ``source`` into its three parts."""
        css = ""
        script = ""
        style_match = STYLE_PATTERN.search(source)
        if style_match:
            css = style_match.group(1)
            source = source[: style_match.start()] + source[style_match.end() :]
        script_match = SCRIPT_PATTERN.search(source)
        if script_match:
            script = script_match.group(1)
            source = source[: script_match.start()] + source[script_match.end() :]
        return cls(name=name, html=source.strip(), css=css, script=script)


@dc.dataclass(frozen=True, slots=True)
class ExpansionResult:
    """Markup with every component expanded, plus the collected assets.

    Attributes
    ----------
    html : str
        The resolved fragment.
    css : str
        CSS of every expanded component, in discovery order.
    script : str
        Registry initialisers of every element-convention component.
    """

    html: str
    css: str = ""
    script: str = ""

    @classmethod
    def join(cls, html: str, parts: list[ExpansionResult]) -> ExpansionResult:
        """Return a result for ``html`` carrying the assets of ``parts`` in order."""
        return cls(
            html=html,
            css="".join(part.css for part in parts),
            script="".join(part.script for part in parts),
        )


__all__ = ["ComponentDefinition", "ExpansionResult", "Props"]
