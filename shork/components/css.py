"""Scope component CSS to a single component occurrence.

The rewrite is textual: every run of selector text immediately preceding a
``{`` is prefixed with an attribute selector naming the occurrence. Rules
inside blocks are never touched, at-rules keep their prelude, and keyframe
steps (``from``, ``to``, percentages) are left alone.

Example
-------
>>> scope_css(".card, h3 { color: red; }", "shork-1")
'[data-shork-id="shork-1"] .card, [data-shork-id="shork-1"] h3 { color: red; }'
"""

from __future__ import annotations

import re

from shork._constants import SCOPE_ATTRIBUTE

SELECTOR_PATTERN = re.compile(r"(^|\s*)([^{};\s][^{};]*?)(?=\s*\{)")
KEYFRAME_STEP_PATTERN = re.compile(r"^(?:from|to|\d+(?:\.\d+)?%)$", re.IGNORECASE)


def scope_selector(selector: str, scope_id: str) -> str:
    """Prefix each comma-separated part of ``selector`` with the scope attribute."""
    prefix = f'[{SCOPE_ATTRIBUTE}="{scope_id}"]'
    parts = [part.strip() for part in selector.split(",")]
    if all(KEYFRAME_STEP_PATTERN.match(part) for part in parts):
        return selector
    return ", ".join(f"{prefix} {part}" for part in parts)


def scope_css(css: str, scope_id: str) -> str:
    """Return ``css`` with every rule selector scoped to ``scope_id``."""

    def _repl(match: re.Match[str]) -> str:
        leading, selector = match.groups()
        if selector.strip().startswith("@"):
            return match.group(0)
        return f"{leading}{scope_selector(selector, scope_id)}"

    return SELECTOR_PATTERN.sub(_repl, css)


__all__ = ["scope_css", "scope_selector"]
