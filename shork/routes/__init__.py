"""Route discovery and the route manifest."""

from .manifest import RouteManifestBuilder, load_manifest, route_pattern, write_manifest
from .models import Manifest, Route

__all__ = [
    "Manifest",
    "Route",
    "RouteManifestBuilder",
    "load_manifest",
    "route_pattern",
    "write_manifest",
]
