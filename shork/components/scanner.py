r"""Locate custom component tags and arrange them into a tree.

Only custom tags are recognised; every other byte of the input is kept as
literal text, so a fragment without components round-trips unchanged. Two
conventions are understood:

* bracketed tags, ``<Component:Card title="x">...</Component:Card>``;
* element tags carrying a reserved prefix, ``<shork-card>...</shork-card>``.

Both may be self-closing. Close tags pair with the nearest open tag of the
same name; a close tag with no opener stays literal text and an opener that is
never closed extends to the end of its parent.

Example
-------
>>> nodes = parse_fragment('<p>hi</p><shork-card title="A"><b>x</b></shork-card>')
>>> nodes[1].component_name, nodes[1].attrs
('Card', {'title': 'A'})
"""

from __future__ import annotations

import dataclasses as dc
import enum
import functools
import re

from shork._constants import BRACKET_TAG_PREFIX, COMPONENT_PREFIX

ATTRIBUTE_PATTERN = re.compile(
    r"""([^\s=/>"']+)(?:\s*=\s*(?:"([^"]*)"|'([^']*)'|([^\s"'>]+)))?"""
)


class Convention(enum.Enum):
    """Which of the two tag conventions produced a node."""

    BRACKET = "bracket"
    ELEMENT = "element"


@dc.dataclass(slots=True)
class TagNode:
    """One custom tag occurrence and the nodes between its open and close tag."""

    tag: str
    convention: Convention
    component_name: str
    attrs: dict[str, str]
    children: list[Node] = dc.field(default_factory=list)


Node = str | TagNode


@functools.lru_cache(maxsize=8)
def _tag_pattern(prefix: str) -> re.Pattern[str]:
    name = rf"(?:{re.escape(BRACKET_TAG_PREFIX)}\w+|{re.escape(prefix)}[\w-]+)"
    attrs = r"""(?:\s+[^\s=/>"']+(?:\s*=\s*(?:"[^"]*"|'[^']*'|[^\s"'>]+))?)*"""
    return re.compile(
        rf"<(?P<open>{name})(?P<attrs>{attrs})\s*(?P<selfclose>/)?>"
        rf"|</(?P<close>{name})\s*>",
        re.IGNORECASE,
    )


def parse_attributes(text: str) -> dict[str, str]:
    """Return the attributes of an open tag as a name to string mapping."""
    attrs: dict[str, str] = {}
    for match in ATTRIBUTE_PATTERN.finditer(text):
        name, double, single, bare = match.groups()
        value = next((v for v in (double, single, bare) if v is not None), "")
        attrs[name] = value
    return attrs


def component_name(tag: str, prefix: str = COMPONENT_PREFIX) -> tuple[Convention, str]:
    """Return the convention and component identifier for a custom ``tag``.

    >>> component_name("Component:Card")
    (<Convention.BRACKET: 'bracket'>, 'Card')
    >>> component_name("shork-card")
    (<Convention.ELEMENT: 'element'>, 'Card')
    """
    if tag.lower().startswith(BRACKET_TAG_PREFIX.lower()):
        return Convention.BRACKET, tag[len(BRACKET_TAG_PREFIX) :]
    remainder = tag[len(prefix) :].lower()
    return Convention.ELEMENT, remainder[:1].upper() + remainder[1:]


def parse_fragment(html: str, prefix: str = COMPONENT_PREFIX) -> list[Node]:
    """Split ``html`` into literal text runs and :class:`TagNode` trees."""
    root: list[Node] = []
    stack: list[TagNode] = []
    cursor = 0

    def _children() -> list[Node]:
        return stack[-1].children if stack else root

    for match in _tag_pattern(prefix).finditer(html):
        if match.start() > cursor:
            _children().append(html[cursor : match.start()])
        cursor = match.end()
        if match.group("open"):
            tag = match.group("open")
            convention, name = component_name(tag, prefix)
            node = TagNode(
                tag=tag,
                convention=convention,
                component_name=name,
                attrs=parse_attributes(match.group("attrs")),
            )
            _children().append(node)
            if not match.group("selfclose"):
                stack.append(node)
            continue
        closing = match.group("close").lower()
        depth = next(
            (
                index
                for index in range(len(stack) - 1, -1, -1)
                if stack[index].tag.lower() == closing
            ),
            None,
        )
        if depth is None:
            _children().append(match.group(0))
        else:
            del stack[depth:]
    if cursor < len(html):
        _children().append(html[cursor:])
    return root


def has_components(nodes: list[Node]) -> bool:
    """Return ``True`` when ``nodes`` contains at least one custom tag."""
    return any(isinstance(node, TagNode) for node in nodes)


__all__ = [
    "Convention",
    "Node",
    "TagNode",
    "component_name",
    "has_components",
    "parse_attributes",
    "parse_fragment",
]
