"""Front matter transform factories for Site Fabricator.

These factories create transform functions that derive view-model keys
from a markdown page's front matter. Each transform receives a copy of the
front matter and the page's FileEntry and returns the updated mapping.
"""

import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from sfab.core.models import FileEntry

FrontmatterTransform = Callable[[Dict[str, Any], "FileEntry"], Dict[str, Any]]

MARKDOWN_EXTENSION = ".md"
OUTPUT_EXTENSION = ".html"


def output_name(name: str) -> str:
    """Map a source file name to its output file name.

    Markdown sources become HTML files; every other name is unchanged.
    """
    path = Path(name)
    if path.suffix.lower() == MARKDOWN_EXTENSION:
        return path.with_suffix(OUTPUT_EXTENSION).name
    return name


def split_tags(value: Any) -> List[str]:
    """Normalize a tags value into a list of strings.

    Handles both list and comma-separated string formats.

    Args:
        value: Raw tags value (list, str or None)

    Returns:
        List of tag strings
    """
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return [str(tag) for tag in value]
    return [tag.strip() for tag in str(value).split(',') if tag.strip()]


def parse_date(value: Any) -> Optional[datetime.datetime]:
    """Convert various date formats to a datetime.

    Args:
        value: Date in various formats (str, datetime, date, None)

    Returns:
        datetime, or None if the value is missing or not ISO-8601
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime.datetime):
        return value

    if isinstance(value, datetime.date):
        return datetime.datetime(value.year, value.month, value.day)

    try:
        return datetime.datetime.fromisoformat(str(value).strip())
    except ValueError:
        return None


def format_display_date(value: datetime.datetime) -> str:
    """Format a date for display, e.g. ``Monday, January 15, 2024 at 10:30 AM``."""
    hour = value.strftime('%I:%M %p')
    return f"{value:%A}, {value:%B} {value.day}, {value:%Y} at {hour}"


def links(source_root: Path) -> FrontmatterTransform:
    """Create a transform that adds ``permalink`` and ``relativeLink``.

    The permalink is the page's path relative to ``source_root`` with a
    leading slash and the markdown extension replaced by ``.html``.

    Args:
        source_root: Root of the source tree

    Returns:
        A transform function
    """
    root = Path(source_root)

    def transform(fm: Dict[str, Any], entry: "FileEntry") -> Dict[str, Any]:
        relative = entry.relative_dir(root) / output_name(entry.name)
        result = fm.copy()
        result['permalink'] = '/' + relative.as_posix()
        result['relativeLink'] = relative.as_posix()
        return result
    return transform


def tags() -> FrontmatterTransform:
    """Create a transform that normalizes ``tags`` into a list (default empty)."""
    def transform(fm: Dict[str, Any], entry: "FileEntry") -> Dict[str, Any]:
        result = fm.copy()
        result['tags'] = split_tags(fm.get('tags'))
        return result
    return transform


def birthtime() -> FrontmatterTransform:
    """Create a transform that attaches the file's creation time.

    Uses ``st_birthtime`` where the platform records it and falls back to
    ``st_ctime``.
    """
    def transform(fm: Dict[str, Any], entry: "FileEntry") -> Dict[str, Any]:
        stat = entry.full_path.stat()
        created = getattr(stat, 'st_birthtime', stat.st_ctime)
        result = fm.copy()
        result['birthtime'] = datetime.datetime.fromtimestamp(created)
        return result
    return transform


def display_date() -> FrontmatterTransform:
    """Create a transform that adds ``displayDate`` when ``published`` is set.

    A string ``published`` value is parsed as ISO-8601 and replaced by the
    parsed datetime.
    """
    def transform(fm: Dict[str, Any], entry: "FileEntry") -> Dict[str, Any]:
        result = fm.copy()
        published = parse_date(fm.get('published'))
        if published is not None:
            result['published'] = published
            result['displayDate'] = format_display_date(published)
        return result
    return transform


def compose(*transforms: FrontmatterTransform) -> FrontmatterTransform:
    """Chain transforms left to right."""
    def transform(fm: Dict[str, Any], entry: "FileEntry") -> Dict[str, Any]:
        result = fm.copy()
        for t in transforms:
            result = t(result, entry)
        return result
    return transform


def markdown_page(source_root: Path) -> FrontmatterTransform:
    """The standard derivations applied to every markdown page."""
    return compose(links(source_root), tags(), birthtime(), display_date())
