"""Per-build state: the component cache, the module cache and scope ids."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from shork.components import ComponentCache, ScopeIdFactory

from .modules import ModuleCache

if typ.TYPE_CHECKING:
    from shork.config import ShorkConfig


@dc.dataclass(slots=True)
class BuildSession:
    """Caches that live exactly as long as one build.

    Component files and route modules are loaded at most once per session and
    never reloaded; a long-running caller that wants to see edited sources
    starts a new session. Scope identifiers restart with every session, so
    two builds of unchanged sources produce identical output.
    """

    components: ComponentCache
    modules: ModuleCache
    scope_ids: ScopeIdFactory = dc.field(default_factory=ScopeIdFactory)

    @classmethod
    def for_config(cls, config: ShorkConfig) -> BuildSession:
        return cls(
            components=ComponentCache(config.components_dir),
            modules=ModuleCache(search_paths=[config.src_dir]),
        )


__all__ = ["BuildSession"]
