"""Source tree discovery."""

import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from sfab.core.models import FileEntry

logger = logging.getLogger(__name__)

LAYOUT_DIRS = ("layouts", "partials")


class TreeWalker:
    """Lazily enumerates every file beneath a root directory."""

    def __init__(self, ignore_names: Optional[Sequence[str]] = None):
        """Initialize TreeWalker.

        Args:
            ignore_names: Directory names that are never descended into
        """
        self.ignore_names = set(ignore_names or [])

    def walk(self, root: Path) -> Iterator[FileEntry]:
        """Yield every file below ``root``, depth first.

        Entries of a directory are visited in name order. Directories are
        recursed into but not yielded. A directory that cannot be read is
        logged and skipped; the rest of the walk continues.

        Args:
            root: Directory to walk

        Yields:
            FileEntry for each file, tagged with its containing directory
        """
        root = Path(root)
        try:
            with os.scandir(root) as it:
                children = sorted(it, key=lambda e: e.name)
        except OSError as e:
            logger.error("Cannot read directory %s: %s", root, e)
            return

        for child in children:
            if child.is_dir():
                if child.name in self.ignore_names:
                    continue
                yield from self.walk(root / child.name)
            else:
                yield FileEntry(name=child.name, path=root)

    def find(self, root: Path, name: str) -> List[FileEntry]:
        """Find every file below ``root`` whose name equals ``name``.

        Args:
            root: Directory to search
            name: File name to match exactly

        Returns:
            Matching entries in walk order
        """
        return [entry for entry in self.walk(root) if entry.name == name]


def walk(root: Path) -> Iterator[FileEntry]:
    """Walk ``root`` with a default TreeWalker."""
    return TreeWalker().walk(root)


def is_layout_path(entry: FileEntry, root: Path) -> bool:
    """Check whether an entry lives under a layouts or partials directory.

    Only directory segments below ``root`` are considered, case-insensitively.

    Args:
        entry: Entry to check
        root: Source root the entry was discovered under

    Returns:
        True if any containing directory is named layouts or partials
    """
    try:
        parts = entry.relative_dir(root).parts
    except ValueError:
        parts = Path(entry.path).parts
    return any(part.lower() in LAYOUT_DIRS for part in parts)
