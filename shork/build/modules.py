"""Load route modules (``+page.py``, ``+schema.py``, ``data.py``) from disk.

Modules are executed at most once per :class:`ModuleCache`. The build code
never touches a loaded module directly; it reads the narrow
:class:`RouteModule` view instead, so the loading mechanism can change
without affecting the page builder.
"""

from __future__ import annotations

import asyncio
import collections.abc as cabc
import dataclasses as dc
import hashlib
import importlib.util
import inspect
import logging
import sys
import typing as typ
from pathlib import Path

from shork._constants import (
    LOAD_FUNCTION,
    SCHEMA_ATTRIBUTE,
    STATIC_PARAMS_FUNCTION,
)

if typ.TYPE_CHECKING:
    from types import ModuleType

logger = logging.getLogger(__name__)


class ModuleCache:
    """Execute Python files as modules, caching them by resolved path.

    Parameters
    ----------
    search_paths : Sequence[Path], optional
        Directories placed on ``sys.path`` while a module executes, so route
        modules can import project helpers (``from lib.db import posts``).
    """

    def __init__(self, search_paths: cabc.Sequence[Path] = ()) -> None:
        self.search_paths = [str(path) for path in search_paths]
        self._modules: dict[Path, ModuleType] = {}

    def __contains__(self, path: object) -> bool:
        return isinstance(path, Path) and path.resolve() in self._modules

    def __len__(self) -> int:
        return len(self._modules)

    def load(self, path: Path) -> ModuleType:
        """Return the module defined by ``path``, executing it on first use.

        Raises
        ------
        ImportError
            If ``path`` cannot be turned into a module spec.
        """
        key = path.resolve()
        cached = self._modules.get(key)
        if cached is not None:
            logger.debug("Module cache hit: %s", key)
            return cached

        digest = hashlib.sha1(str(key).encode(), usedforsecurity=False).hexdigest()
        name = f"shork_module_{digest[:12]}"
        spec = importlib.util.spec_from_file_location(name, key)
        if spec is None or spec.loader is None:
            msg = f"Cannot load module from '{key}'"
            raise ImportError(msg)
        module = importlib.util.module_from_spec(spec)
        sys.modules[name] = module
        added = [entry for entry in self.search_paths if entry not in sys.path]
        sys.path[:0] = added
        try:
            spec.loader.exec_module(module)
        except BaseException:
            sys.modules.pop(name, None)
            raise
        finally:
            for entry in added:
                sys.path.remove(entry)
        self._modules[key] = module
        return module


def run_sync(value: typ.Any) -> typ.Any:
    """Return ``value``, awaiting it first when a loader returned an awaitable."""
    if not inspect.isawaitable(value):
        return value

    async def _wait() -> typ.Any:
        return await value

    return asyncio.run(_wait())


@dc.dataclass(frozen=True, slots=True)
class RouteModule:
    """The parts of a route module the page builder relies on.

    Attributes
    ----------
    load : Callable or None
        ``load(params)`` returning a mapping merged into the page data.
    generate_static_params : Callable or None
        ``generate_static_params(global_data)`` returning the parameter
        bindings of a dynamic route.
    schema : object or None
        Validator for the module's data; see :func:`shork.build.validate`.
    """

    load: cabc.Callable[..., typ.Any] | None = None
    generate_static_params: cabc.Callable[..., typ.Any] | None = None
    schema: typ.Any = None

    @classmethod
    def from_module(cls, module: ModuleType) -> RouteModule:
        load = getattr(module, LOAD_FUNCTION, None)
        static_params = getattr(module, STATIC_PARAMS_FUNCTION, None)
        return cls(
            load=load if callable(load) else None,
            generate_static_params=static_params if callable(static_params) else None,
            schema=getattr(module, SCHEMA_ATTRIBUTE, None),
        )

    def call_load(self, params: cabc.Mapping[str, typ.Any]) -> dict[str, typ.Any]:
        """Call ``load`` and return its mapping; ``{}`` when there is no loader."""
        if self.load is None:
            return {}
        loaded = run_sync(self.load(dict(params)))
        if loaded is None:
            return {}
        if not isinstance(loaded, cabc.Mapping):
            msg = f"load() must return a mapping, got {type(loaded).__name__}"
            raise TypeError(msg)
        return dict(loaded)

    def call_static_params(
        self, global_data: cabc.Mapping[str, typ.Any]
    ) -> list[cabc.Mapping[str, typ.Any]]:
        """Call ``generate_static_params`` and return its entries in order."""
        if self.generate_static_params is None:
            return []
        entries = run_sync(self.generate_static_params(global_data))
        return list(entries or [])


__all__ = ["ModuleCache", "RouteModule", "run_sync"]
