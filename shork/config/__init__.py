"""Load and validate the ``shork.yaml`` project configuration.

The configuration names the directories of a project (routes, components,
static assets, output) and the switches that shape a build. Every value has a
default derived from the project root, so a project without ``shork.yaml``
builds with the conventional ``src/`` and ``dist/`` layout.

Examples
--------
>>> from pathlib import Path
>>> from shork.config import load_config
>>> config = load_config(Path("my-site"))  # doctest: +SKIP
>>> config.dist_dir.name  # doctest: +SKIP
'dist'
"""

from shork.errors import ShorkConfigError

from .loader import load_config
from .models import ShorkConfig

__all__ = ["ShorkConfig", "ShorkConfigError", "load_config"]
