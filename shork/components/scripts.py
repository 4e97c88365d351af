"""Wrap component scripts into client registry initialisers."""

from __future__ import annotations

from shork._constants import CLIENT_REGISTRY

_INITIALISER = """
// Component: {name}
((id) => {{
    window.Shork = window.Shork || {{}};
    {registry} = {registry} || {{}};
    {registry}[id] = (() => {{
        {script}
    }})();
}})('{scope_id}');
"""


def wrap_script(script: str, scope_id: str, name: str) -> str:
    """Return ``script`` as an initialiser stored under ``scope_id``.

    The component script runs once inside its own closure; whatever it returns
    (usually an object of event handlers) is stored in the client registry so
    hydration can look it up by the ``data-shork-id`` of the occurrence.
    """
    return _INITIALISER.format(
        name=name,
        registry=CLIENT_REGISTRY,
        script=script.strip(),
        scope_id=scope_id,
    )


__all__ = ["wrap_script"]
