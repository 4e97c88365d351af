"""Common literal values used across shork.

File names of the route conventions, placeholder tokens of the application
shell, and the names the client runtime expects live here so the manifest
builder, the page builder and tests import the same values.

Examples
--------
>>> from shork import _constants
>>> _constants.PAGE_FILE
'+page.html'
>>> _constants.SCOPE_ATTRIBUTE
'data-shork-id'
"""

PAGE_FILE = "+page.html"
LAYOUT_FILE = "+layout.html"
LOADER_FILE = "+page.py"
SCHEMA_FILE = "+schema.py"

CONFIG_FILE = "shork.yaml"

BODY_PLACEHOLDER = "%body%"
HEAD_PLACEHOLDER = "%head%"

COMPONENT_PREFIX = "shork-"
BRACKET_TAG_PREFIX = "Component:"
SCOPE_ATTRIBUTE = "data-shork-id"
CLIENT_REGISTRY = "window.Shork._componentFunctions"

LOAD_FUNCTION = "load"
STATIC_PARAMS_FUNCTION = "generate_static_params"
SCHEMA_ATTRIBUTE = "schema"
GLOBAL_DATA_ATTRIBUTE = "data"
