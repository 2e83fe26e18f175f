"""
Site Fabricator - Build static sites from HTML, XML and markdown sources

A small, extensible static site pipeline with support for:
- Microdata and meta tag extraction from HTML/XML pages
- Markdown pages with YAML front matter and layouts
- Jinja2 layouts and partials
- Extension hooks for every stage of a build
"""

from sfab.core.models import (
    BuildFailure,
    BuildResult,
    ExtensionLoadError,
    FabricatorError,
    FileEntry,
    RenderError,
    WriteError,
    RenderKind,
    RenderResult,
)
from sfab.core.config import FabricatorConfig, load_config
from sfab.core.discovery import TreeWalker, walk
from sfab.core.fabricator import SiteFabricator
from sfab.core.hooks import HookChain

__version__ = "0.1.0"

__all__ = [
    "BuildFailure",
    "BuildResult",
    "ExtensionLoadError",
    "FabricatorError",
    "FileEntry",
    "RenderError",
    "WriteError",
    "RenderKind",
    "RenderResult",
    "FabricatorConfig",
    "load_config",
    "TreeWalker",
    "walk",
    "SiteFabricator",
    "HookChain",
]
