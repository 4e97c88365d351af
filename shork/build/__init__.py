"""Page building: route modules, validation, rendering, and output assembly."""

from .assets import EsbuildBundler, copy_static, empty_dir, minify_css
from .filters import ContentFilters
from .modules import ModuleCache, RouteModule
from .page_builder import PageBuilder, PageInstance, output_path_for
from .renderer import ComponentProps, TemplateRenderer, data_snapshot
from .session import BuildSession
from .site import SiteBuilder
from .validation import ValidationIssue, ensure_valid, validate

__all__ = [
    "BuildSession",
    "ComponentProps",
    "ContentFilters",
    "EsbuildBundler",
    "ModuleCache",
    "PageBuilder",
    "PageInstance",
    "RouteModule",
    "SiteBuilder",
    "TemplateRenderer",
    "ValidationIssue",
    "copy_static",
    "data_snapshot",
    "empty_dir",
    "ensure_valid",
    "minify_css",
    "output_path_for",
    "validate",
]
