"""Load component files at most once per build session."""

from __future__ import annotations

import hashlib
import itertools
import logging
import typing as typ

from .models import ComponentDefinition

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)


class ComponentCache:
    """Lazily populated map of component name to :class:`ComponentDefinition`.

    Entries are added on first reference and never replaced, so edits to a
    component file are only seen by a new cache. Missing files are not
    remembered; each lookup checks the disk again.
    """

    def __init__(self, components_dir: Path) -> None:
        self.components_dir = components_dir
        self._definitions: dict[str, ComponentDefinition] = {}

    def __contains__(self, name: object) -> bool:
        return name in self._definitions

    def __len__(self) -> int:
        return len(self._definitions)

    def path_for(self, name: str) -> Path:
        """Return the file backing the component ``name``."""
        return self.components_dir / f"{name}.html"

    def get(self, name: str) -> ComponentDefinition | None:
        """Return the definition for ``name``, or ``None`` when no file exists."""
        definition = self._definitions.get(name)
        if definition is not None:
            logger.debug("Component cache hit: %s", name)
            return definition
        path = self.path_for(name)
        if not path.is_file():
            return None
        definition = ComponentDefinition.parse(name, path.read_text(encoding="utf-8"))
        self._definitions[name] = definition
        return definition


class ScopeIdFactory:
    """Produce deterministic per-occurrence scope identifiers.

    Identifiers depend only on the component name and the order in which
    occurrences are expanded, so a fresh factory replays the same sequence.

    >>> ids = ScopeIdFactory()
    >>> first = ids("Card")
    >>> first == ScopeIdFactory()("Card"), first == ids("Card")
    (True, False)
    """

    def __init__(self, prefix: str = "shork") -> None:
        self.prefix = prefix
        self._sequence = itertools.count(1)

    def __call__(self, name: str) -> str:
        seed = f"{name}:{next(self._sequence)}".encode()
        digest = hashlib.blake2s(seed, digest_size=6).hexdigest()
        return f"{self.prefix}-{digest}"


__all__ = ["ComponentCache", "ScopeIdFactory"]
