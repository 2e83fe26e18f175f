"""Writing rendered pages and copying assets to the destination tree."""

import logging
import shutil
from pathlib import Path
from typing import List, Optional, Tuple

from sfab.core.discovery import TreeWalker
from sfab.core.hooks import HookChain
from sfab.core.models import FileEntry
from sfab.transforms.frontmatter import output_name

logger = logging.getLogger(__name__)

IGNORED_FILES = frozenset({".DS_Store"})


def normalize_whitespace(text: str) -> str:
    """Strip leading whitespace from every line."""
    return '\n'.join(line.lstrip() for line in text.split('\n'))


class OutputWriter:
    """Mirrors the source tree's structure under a destination root."""

    def __init__(self, hooks: Optional[HookChain] = None, walker: Optional[TreeWalker] = None):
        self.hooks = hooks or HookChain()
        self.walker = walker or TreeWalker()

    def write(self, destination_dir: Path, entry: FileEntry, text: str) -> Tuple[Path, str]:
        """Write rendered text for an entry.

        The directory is created if needed and an existing file is
        overwritten. Markdown names are rewritten to ``.html``.

        Args:
            destination_dir: Directory mirroring the entry's source directory
            entry: Source entry that was rendered
            text: Rendered text

        Returns:
            Tuple of (written path, text as written)
        """
        destination_dir = Path(destination_dir)
        destination_dir.mkdir(parents=True, exist_ok=True)
        target = destination_dir / output_name(entry.name)
        logger.debug("Creating %s", target)
        text = normalize_whitespace(text)
        target.write_text(text, encoding='utf-8')
        return target, text

    def copy(self, entry: FileEntry, source_root: Path, destination_root: Path) -> List[Path]:
        """Copy an entry byte-for-byte to the same relative location.

        Directories are copied recursively. OS metadata files such as
        ``.DS_Store`` are skipped. The ``copied`` hook fires once per file.

        Args:
            entry: File or directory to copy
            source_root: Root the entry's location is relative to
            destination_root: Root of the destination tree

        Returns:
            Paths of the copied files
        """
        if entry.name in IGNORED_FILES:
            logger.debug("Skipping %s", entry.full_path)
            return []

        target_dir = Path(destination_root) / entry.relative_dir(source_root)
        target_dir.mkdir(parents=True, exist_ok=True)

        if entry.is_dir:
            copied = []
            for child in self.walker.walk(entry.full_path):
                copied.extend(self.copy(child, source_root, destination_root))
            return copied

        target = target_dir / entry.name
        logger.debug("Copying %s to %s", entry.full_path, target)
        shutil.copyfile(entry.full_path, target)
        self.hooks.copied(target)
        return [target]
