"""Core components for Site Fabricator."""

from sfab.core.models import BuildFailure, BuildResult, ConfigError, ExtensionLoadError, FabricatorError, FileEntry, ParsedMarkdown, RenderError, RenderKind, RenderResult, WriteError
from sfab.core.config import FabricatorConfig, load_config
from sfab.core.discovery import TreeWalker, is_layout_path, walk
from sfab.core.hooks import HookChain
from sfab.core.metadata import extract_markup_metadata
from sfab.core.partials import PartialRegistrar
from sfab.core.processor import Renderer
from sfab.core.writer import OutputWriter
from sfab.core.fabricator import SiteFabricator

__all__ = [
    "BuildFailure",
    "BuildResult",
    "ConfigError",
    "ExtensionLoadError",
    "FabricatorError",
    "FileEntry",
    "ParsedMarkdown",
    "RenderError",
    "WriteError",
    "RenderKind",
    "RenderResult",
    "FabricatorConfig",
    "load_config",
    "TreeWalker",
    "is_layout_path",
    "walk",
    "HookChain",
    "extract_markup_metadata",
    "PartialRegistrar",
    "Renderer",
    "OutputWriter",
    "SiteFabricator",
]
