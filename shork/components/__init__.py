"""Component definitions, tag scanning, and recursive component expansion."""

from .cache import ComponentCache, ScopeIdFactory
from .css import scope_css
from .models import ComponentDefinition, ExpansionResult, Props
from .resolver import ComponentResolver, substitute_props, substitute_slot
from .scanner import Convention, TagNode, parse_fragment
from .scripts import wrap_script

__all__ = [
    "ComponentCache",
    "ComponentDefinition",
    "ComponentResolver",
    "Convention",
    "ExpansionResult",
    "Props",
    "ScopeIdFactory",
    "TagNode",
    "parse_fragment",
    "scope_css",
    "substitute_props",
    "substitute_slot",
    "wrap_script",
]
