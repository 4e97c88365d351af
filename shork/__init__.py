"""Static-site generator compiling component templates into HTML pages.

shork reads a route tree of ``+page.html`` / ``+layout.html`` templates,
expands ``<Component:Name>`` and ``<shork-name>`` component tags, compiles the
``{{ }}`` template dialect into Jinja2, renders every page with the data its
``+page.py`` provides, and writes the result to ``dist/``.

Exports
-------
- ``app``: Cyclopts application with the ``build`` and ``routes`` commands.
- ``main``: Convenience function that invokes the app.

Examples
--------
>>> from shork import main
>>> main()  # doctest: +SKIP
>>> from shork import app
>>> app(["build", "--verbose"])  # doctest: +SKIP
"""

from __future__ import annotations

from .cli import app, main

__all__ = ["app", "main"]
