"""Markdown parsing with YAML front matter."""

from typing import Any, Dict, Optional, Tuple

import yaml
from markdown_it import MarkdownIt

from sfab.core.models import ParsedMarkdown


def create_parser() -> MarkdownIt:
    """Create the markdown-it parser used for page bodies.

    Raw HTML passes through, bare URLs become links and typographic
    replacements (quotes, dashes) are applied.
    """
    return MarkdownIt("js-default", {"html": True, "linkify": True, "typographer": True})


class MarkdownRenderer:
    """Splits front matter from a markdown document and renders the body.

    Every call to :meth:`render` returns its own :class:`ParsedMarkdown`;
    the renderer keeps no per-document state.
    """

    def __init__(self, parser: Optional[MarkdownIt] = None):
        self.parser = parser or create_parser()

    def render(self, raw: str) -> ParsedMarkdown:
        """Parse a markdown document.

        Args:
            raw: Full file content including front matter

        Returns:
            ParsedMarkdown with body source, rendered HTML and front matter

        Raises:
            yaml.YAMLError: If the front matter is not valid YAML
        """
        meta, body = split_frontmatter(raw)
        return ParsedMarkdown(body=body, html=self.parser.render(body), meta=meta)


def split_frontmatter(raw: str) -> Tuple[Dict[str, Any], str]:
    """Split a document into its front matter mapping and body.

    Args:
        raw: Full file content

    Returns:
        Tuple of (front matter dict, body). The dict is empty when the
        document has no front matter block.

    Raises:
        yaml.YAMLError: If the front matter is not valid YAML
    """
    content = raw.replace('\r\n', '\n')
    if not content.endswith('\n'):
        content += '\n'
    if not content.startswith('---\n'):
        return {}, content

    parts = content.split('---\n', 2)
    if len(parts) < 3:
        return {}, content

    meta = yaml.safe_load(parts[1])
    if meta is None:
        meta = {}
    if not isinstance(meta, dict):
        raise yaml.YAMLError(f"front matter must be a mapping, got {type(meta).__name__}")

    return meta, parts[2]
