"""Extension hook chain."""

import logging
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

from sfab.core.models import FileEntry

logger = logging.getLogger(__name__)


class HookChain:
    """Ordered list of extension objects.

    A hook is any object implementing some of ``model``, ``partial``,
    ``copied``, ``transformed`` and ``done``. Hooks are called in the
    order they were added. An exception raised by one hook is logged and
    the next hook still runs.
    """

    def __init__(self, hooks: Optional[List[Any]] = None):
        self.hooks: List[Any] = list(hooks or [])

    def __len__(self) -> int:
        return len(self.hooks)

    def __iter__(self):
        return iter(self.hooks)

    def use(self, hook: Any) -> None:
        """Append a hook to the chain."""
        self.hooks.append(hook)

    def _call(self, name: str, *args: Any) -> None:
        for hook in self.hooks:
            callback = getattr(hook, name, None)
            if not callable(callback):
                continue
            try:
                callback(*args)
            except Exception:
                logger.exception("Hook %r failed in %s()", hook, name)

    def model(self, entry: FileEntry, model: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Collect view-model fields from every ``model`` hook.

        Each hook sees the fields contributed so far; later hooks overwrite
        earlier keys.

        Args:
            entry: File about to be rendered
            model: Starting fields

        Returns:
            Merged fields
        """
        merged: Dict[str, Any] = dict(model or {})
        for hook in self.hooks:
            callback = getattr(hook, "model", None)
            if not callable(callback):
                continue
            try:
                contribution = callback(entry, dict(merged))
            except Exception:
                logger.exception("Hook %r failed in model() for %s", hook, entry.full_path)
                continue
            if not contribution:
                continue
            if not isinstance(contribution, Mapping):
                logger.error(
                    "Hook %r returned %s from model() for %s; expected a mapping",
                    hook, type(contribution).__name__, entry.full_path,
                )
                continue
            merged.update(contribution)
        return merged

    def partial(self, name: str, text: str, engine: Any) -> None:
        """Announce a registered layout or partial."""
        self._call("partial", name, text, engine)

    def copied(self, destination: Path) -> None:
        """Announce a file copied verbatim to ``destination``."""
        self._call("copied", destination)

    def transformed(
        self,
        view_key: str,
        destination: Path,
        entry: FileEntry,
        model: Dict[str, Any],
        text: str,
        view_model: Dict[str, Any],
    ) -> None:
        """Announce a rendered page written to ``destination``."""
        self._call("transformed", view_key, destination, entry, model, text, view_model)

    def done(self) -> None:
        """Announce the end of a build."""
        self._call("done")
