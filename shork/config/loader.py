"""Load ``shork.yaml`` into a :class:`ShorkConfig`."""

from __future__ import annotations

import dataclasses as dc
import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from shork._constants import CONFIG_FILE
from shork.errors import ShorkConfigError

from .models import ShorkConfig

_PATH_KEYS = frozenset(
    {
        "src_dir",
        "routes_dir",
        "components_dir",
        "lib_dir",
        "static_dir",
        "dist_dir",
        "app_template",
        "global_data",
        "runtime_entry",
        "output_js",
        "manifest",
    }
)
_BOOL_KEYS = frozenset({"scope_css", "minify_css", "strict_undefined", "bundle"})
_STR_KEYS = frozenset({"component_prefix"})


def load_config(root: Path, path: Path | None = None) -> ShorkConfig:
    """Load the project configuration for ``root``.

    Parameters
    ----------
    root : Path
        Project root directory. Relative paths in the file resolve against it.
    path : Path, optional
        Explicit configuration file. Defaults to ``<root>/shork.yaml``; when
        that default is absent every setting keeps its default value.

    Returns
    -------
    ShorkConfig
        Configuration with absolute paths.

    Raises
    ------
    FileNotFoundError
        If an explicit ``path`` does not exist.
    ShorkConfigError
        If the YAML is not a mapping, names an unknown key, or carries a value
        of the wrong type.

    Examples
    --------
    >>> from pathlib import Path
    >>> config = load_config(Path("."))  # doctest: +SKIP
    >>> config.routes_dir.name  # doctest: +SKIP
    'routes'
    """
    config = ShorkConfig.for_root(root)
    if path is None:
        path = config.root_dir / CONFIG_FILE
        if not path.exists():
            return config
    elif not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = f"Top-level YAML structure in '{path}' must be a mapping."
        raise ShorkConfigError(msg)
    return _apply_overrides(config, typ.cast("dict[str, typ.Any]", loaded))


def _apply_overrides(
    config: ShorkConfig, raw: typ.Mapping[str, typ.Any]
) -> ShorkConfig:
    """Return ``config`` with the values from ``raw`` applied."""
    changes: dict[str, typ.Any] = {}
    for key, value in raw.items():
        if key in _PATH_KEYS:
            if not isinstance(value, str) or not value:
                msg = f"'{key}' must be a non-empty path string."
                raise ShorkConfigError(msg)
            changes[key] = (config.root_dir / value).resolve()
        elif key in _BOOL_KEYS:
            if not isinstance(value, bool):
                msg = f"'{key}' must be true or false."
                raise ShorkConfigError(msg)
            changes[key] = value
        elif key in _STR_KEYS:
            if not isinstance(value, str) or not value:
                msg = f"'{key}' must be a non-empty string."
                raise ShorkConfigError(msg)
            changes[key] = value.lower()
        else:
            msg = f"Unknown configuration key '{key}'."
            raise ShorkConfigError(msg)
    return dc.replace(config, **changes)


__all__ = ["load_config"]
