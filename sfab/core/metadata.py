"""Metadata extraction from markup pages."""

from pathlib import Path
from typing import Any, Dict

from bs4 import BeautifulSoup

from sfab.core.models import FileEntry
from sfab.transforms.frontmatter import parse_date, split_tags


def extract_markup_metadata(content: str) -> Dict[str, Any]:
    """Extract page metadata from HTML or XML source.

    Reads microdata and document meta tags:
    - every element with an ``itemprop`` attribute contributes its
      ``content`` attribute; ``headline`` uses the element text and
      ``published`` parses the ``datetime`` attribute
    - every ``<meta name=... content=...>`` contributes its content;
      ``tags`` is split on commas

    A new parser is created per call.

    Args:
        content: Raw page source

    Returns:
        Flat metadata dict
    """
    soup = BeautifulSoup(content, 'html.parser', multi_valued_attributes=None)
    props: Dict[str, Any] = {}

    for el in soup.find_all(attrs={'itemprop': True}):
        prop = el.get('itemprop')
        value: Any = el.get('content')
        if prop == 'headline':
            value = el.get_text().strip()
        elif prop == 'published':
            value = parse_date(el.get('datetime'))
        props[prop] = value

    for el in soup.find_all('meta'):
        name = el.get('name')
        if not name:
            continue
        value = el.get('content')
        if name == 'tags':
            value = split_tags(value)
        props[name] = value

    return props


def markup_links(entry: FileEntry, source_root: Path) -> Dict[str, str]:
    """Compute ``uri`` and ``relativeLink`` for a markup page.

    Args:
        entry: The page
        source_root: Root of the source tree

    Returns:
        Dict with ``uri`` (leading slash) and ``relativeLink`` (none)
    """
    relative = (entry.relative_dir(source_root) / entry.name).as_posix()
    return {'uri': '/' + relative, 'relativeLink': relative}
