"""Layout and partial registration."""

import logging
from pathlib import Path
from typing import List, Optional

from sfab.core.discovery import TreeWalker, is_layout_path
from sfab.core.hooks import HookChain
from sfab.core.models import FileEntry
from sfab.engines.templates import TemplateEngine

logger = logging.getLogger(__name__)

PARTIAL_EXTENSION = "html"


class PartialRegistrar:
    """Registers every layout and partial in a source tree with the engine."""

    def __init__(
        self,
        engine: TemplateEngine,
        hooks: Optional[HookChain] = None,
        walker: Optional[TreeWalker] = None,
    ):
        self.engine = engine
        self.hooks = hooks or HookChain()
        self.walker = walker or TreeWalker()

    @staticmethod
    def is_partial(entry: FileEntry, source_root: Path) -> bool:
        """Check if an entry is an HTML file under a layouts or partials directory."""
        return entry.extension == PARTIAL_EXTENSION and is_layout_path(entry, source_root)

    @staticmethod
    def partial_name(entry: FileEntry, source_root: Path) -> str:
        """Name a partial by its path after the source root's last segment.

        Everything up to and including the last occurrence of the root
        directory's name is stripped, so ``www/layouts/base.html`` under
        root ``www`` becomes ``layouts/base.html``.
        """
        root_name = Path(source_root).name
        full = '/' + (Path(entry.path) / entry.name).as_posix().lstrip('/')
        marker = f"/{root_name}/"
        if root_name and marker in full:
            return full.split(marker)[-1].lstrip('/')
        relative = entry.relative_dir(source_root) / entry.name
        return relative.as_posix().lstrip('/')

    def register_all(self, source_root: Path) -> List[str]:
        """Scan ``source_root`` and register every layout and partial.

        Files are registered in walk order, so when two files map to the
        same name the one scanned last wins. The ``partial`` hook fires
        after each registration.

        Args:
            source_root: Root of the source tree

        Returns:
            Registered names in scan order
        """
        source_root = Path(source_root)
        registered = []
        for entry in self.walker.walk(source_root):
            if not self.is_partial(entry, source_root):
                continue

            name = self.partial_name(entry, source_root)
            text = entry.read_raw()
            logger.debug("Registering partial %s", name)
            self.engine.register_partial(name, text)
            self.hooks.partial(name, text, self.engine)
            registered.append(name)
        return registered
