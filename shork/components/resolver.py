"""Expand custom component tags into plain markup.

:class:`ComponentResolver` walks the tag tree produced by
:func:`~shork.components.scanner.parse_fragment`. For every occurrence it
loads the component definition through the session's
:class:`~shork.components.cache.ComponentCache`, substitutes
``{{ props.<key> }}`` placeholders with attribute values, substitutes
``{{ slot }}`` with the already resolved inner content, and then resolves the
result again so a component body may use other components. CSS and (for the
element convention) wrapped scripts are collected along the way.

Example
-------
>>> from pathlib import Path
>>> from shork.components import ComponentCache, ComponentResolver
>>> resolver = ComponentResolver(ComponentCache(Path("src/lib/components")))
>>> resolver.resolve("<p>plain</p>").html
'<p>plain</p>'
"""

from __future__ import annotations

import logging
import re
import typing as typ

from shork._constants import COMPONENT_PREFIX, SCOPE_ATTRIBUTE
from shork.errors import ComponentCycleError

from .cache import ComponentCache, ScopeIdFactory
from .css import scope_css
from .models import ExpansionResult
from .scanner import Convention, Node, TagNode, has_components, parse_fragment
from .scripts import wrap_script

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .models import ComponentDefinition

logger = logging.getLogger(__name__)

SLOT_PATTERN = re.compile(r"\{\{\s*slot\s*\}\}")


def substitute_props(html: str, props: cabc.Mapping[str, str]) -> str:
    """Replace ``{{ props.<key> }}`` placeholders with the matching values.

    Placeholders naming a key absent from ``props`` are left untouched.

    >>> substitute_props("<h3>{{ props.title }}</h3>{{props.x}}", {"title": "Hi"})
    '<h3>Hi</h3>{{props.x}}'
    """
    for key, value in props.items():
        pattern = re.compile(rf"\{{\{{\s*props\.{re.escape(key)}\s*\}}\}}")
        html = pattern.sub(lambda _match, value=value: value, html)
    return html


def substitute_slot(html: str, slot: str) -> str:
    """Replace every ``{{ slot }}`` placeholder with ``slot``."""
    return SLOT_PATTERN.sub(lambda _match: slot, html)


class ComponentResolver:
    """Resolve component tags against a component cache."""

    def __init__(
        self,
        cache: ComponentCache,
        *,
        prefix: str = COMPONENT_PREFIX,
        scope_css: bool = True,
        scope_ids: ScopeIdFactory | None = None,
    ) -> None:
        """Initialize the resolver.

        Parameters
        ----------
        cache : ComponentCache
            Source of component definitions, shared for the whole build.
        prefix : str, optional
            Tag prefix of the element convention. Defaults to ``"shork-"``.
        scope_css : bool, optional
            Scope the CSS of element-convention occurrences to their wrapper.
        scope_ids : ScopeIdFactory, optional
            Identifier source; share one per build so identifiers never repeat
            within a document.
        """
        self.cache = cache
        self.prefix = prefix
        self.scope_css = scope_css
        self.scope_ids = scope_ids or ScopeIdFactory()

    def resolve(self, html: str) -> ExpansionResult:
        """Expand every component occurrence in ``html``.

        Parameters
        ----------
        html : str
            Markup that may contain custom component tags.

        Returns
        -------
        ExpansionResult
            The expanded markup with the collected CSS and scripts. Input
            without component tags is returned unchanged with empty assets.

        Raises
        ------
        ComponentCycleError
            If a component's body references a component that is already
            being expanded on the current path.
        """
        return self._resolve_nodes(parse_fragment(html, self.prefix), ())

    def _resolve_nodes(
        self, nodes: list[Node], chain: tuple[str, ...]
    ) -> ExpansionResult:
        if not has_components(nodes):
            return ExpansionResult("".join(typ.cast("list[str]", nodes)))
        pieces: list[str] = []
        parts: list[ExpansionResult] = []
        for node in nodes:
            if isinstance(node, str):
                pieces.append(node)
                continue
            expanded = self._expand(node, chain)
            pieces.append(expanded.html)
            parts.append(expanded)
        return ExpansionResult.join("".join(pieces), parts)

    def _expand(self, node: TagNode, chain: tuple[str, ...]) -> ExpansionResult:
        name = node.component_name
        definition = self.cache.get(name)
        if definition is None:
            logger.warning(
                "Component not found: %s (expected %s)", name, self.cache.path_for(name)
            )
            return ExpansionResult("")
        if name in chain:
            raise ComponentCycleError((*chain, name))

        scope_id, own = self._own_assets(node, definition)
        slot = self._resolve_nodes(node.children, chain)
        body = substitute_slot(substitute_props(definition.html, node.attrs), slot.html)
        nested = self._resolve_nodes(parse_fragment(body, self.prefix), (*chain, name))

        html = nested.html
        if scope_id is not None:
            html = f'<div {SCOPE_ATTRIBUTE}="{scope_id}">{html}</div>'
        elif definition.script:
            html = (
                f"{html}<script>{{% raw %}}{definition.script}{{% endraw %}}</script>"
            )
        return ExpansionResult.join(html, [own, slot, nested])

    def _own_assets(
        self, node: TagNode, definition: ComponentDefinition
    ) -> tuple[str | None, ExpansionResult]:
        """Return the scope id of ``node`` and the component's own CSS and script."""
        if node.convention is Convention.BRACKET:
            return None, ExpansionResult("", css=definition.css)
        scope_id = self.scope_ids(definition.name)
        css = scope_css(definition.css, scope_id) if self.scope_css else definition.css
        script = (
            wrap_script(definition.script, scope_id, definition.name)
            if definition.script
            else ""
        )
        return scope_id, ExpansionResult("", css=css, script=script)


__all__ = ["ComponentResolver", "substitute_props", "substitute_slot"]
