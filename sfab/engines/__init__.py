"""Rendering backends for Site Fabricator."""

from sfab.engines.markdown import MarkdownRenderer, split_frontmatter
from sfab.engines.templates import TemplateEngine

__all__ = [
    "MarkdownRenderer",
    "TemplateEngine",
    "split_frontmatter",
]
