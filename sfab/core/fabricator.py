"""Pipeline orchestration."""

import importlib.util
import itertools
import logging
import sys
from pathlib import Path
from typing import Any, Iterable, List, Optional, Sequence

from sfab.core.config import FabricatorConfig
from sfab.core.discovery import TreeWalker, is_layout_path
from sfab.core.hooks import HookChain
from sfab.core.models import (
    BuildFailure,
    BuildResult,
    ExtensionLoadError,
    FabricatorError,
    FileEntry,
    RenderError,
    WriteError,
)
from sfab.core.partials import PartialRegistrar
from sfab.core.processor import Renderer
from sfab.core.writer import OutputWriter
from sfab.engines.templates import TemplateEngine

logger = logging.getLogger(__name__)

SCRIPT_EXTENSION = "py"

_module_ids = itertools.count()


class SiteFabricator:
    """Builds a destination tree from a source tree.

    One instance owns the template engine (and so the partial registry)
    and the hook chain for a build. Files are processed one at a time;
    each file is fully written before the next one starts.
    """

    def __init__(
        self,
        config: Optional[FabricatorConfig] = None,
        engine: Optional[TemplateEngine] = None,
        hooks: Optional[HookChain] = None,
        walker: Optional[TreeWalker] = None,
    ):
        """Initialize SiteFabricator.

        Args:
            config: Build settings (default: FabricatorConfig())
            engine: Template engine (default: a new TemplateEngine)
            hooks: Hook chain (default: empty)
            walker: Tree walker used for every scan
        """
        self.config = config or FabricatorConfig()
        self.engine = engine or TemplateEngine()
        self.hooks = hooks or HookChain()
        self.walker = walker or TreeWalker()
        self.renderer = Renderer(self.engine, options=self.config.as_options())
        self.registrar = PartialRegistrar(self.engine, self.hooks, self.walker)
        self.writer = OutputWriter(self.hooks, self.walker)

    def use(self, hook: Any) -> None:
        """Register an extension hook."""
        self.hooks.use(hook)

    # Flows

    def build_folder(self, folder: Optional[Path] = None, destination: Optional[Path] = None) -> BuildResult:
        """Render and copy every file in a source folder.

        Args:
            folder: Source root (default: config.folder)
            destination: Destination root (default: config.destination)

        Returns:
            BuildResult for the run
        """
        source = Path(folder or self.config.folder).resolve()
        destination = Path(destination or self.config.destination).resolve()
        logger.info("Building %s into %s", source, destination)
        return self.transform(self.walker.walk(source), source, destination)

    def build_file(self, file: Path, destination: Optional[Path] = None) -> BuildResult:
        """Render (or copy) every file named like ``file`` below its directory.

        The file's directory is walked and each entry with the same name is
        processed, so ``blog/index.md`` also builds ``blog/2024/index.md``.
        Links and partials are resolved against config.folder when the file
        lives inside it, otherwise against the file's own directory.

        Args:
            file: Source file
            destination: Destination root (default: config.destination)

        Returns:
            BuildResult for the run

        Raises:
            FabricatorError: If the file does not exist
        """
        file = Path(file).resolve()
        if not file.is_file():
            raise FabricatorError(f"No such file: {file}")

        destination = Path(destination or self.config.destination).resolve()
        source = Path(self.config.folder).resolve()
        if not file.is_relative_to(source):
            source = file.parent

        logger.info("Building %s into %s", file, destination)
        entries = self.walker.find(file.parent, file.name)
        return self.transform(entries, source, destination)

    def copy_folders(self, folders: Sequence[Path], destination: Optional[Path] = None) -> BuildResult:
        """Copy the contents of each folder into the destination, unrendered.

        Each folder's contents land at the destination root with their
        structure relative to that folder. Files under layouts or partials
        directories are not copied.

        Args:
            folders: Folders to copy
            destination: Destination root (default: config.destination)

        Returns:
            BuildResult listing the copied files
        """
        destination = Path(destination or self.config.destination).resolve()
        destination.mkdir(parents=True, exist_ok=True)

        result = BuildResult()
        for folder in folders:
            source = Path(folder).resolve()
            logger.info("Copying %s into %s", source, destination)
            entries = (e for e in self.walker.walk(source) if not is_layout_path(e, source))
            result.merge(self.copy(entries, source, destination))
        return result

    def serve(self, directory: Optional[Path] = None, port: Optional[int] = None, mount: Optional[str] = None) -> None:
        """Serve the destination tree over HTTP until interrupted."""
        from sfab.server import serve

        serve(
            Path(directory or self.config.destination),
            port=port or self.config.port,
            mount=mount or self.config.mount,
        )

    # Pipeline stages

    def transform(self, entries: Iterable[FileEntry], source: Path, destination: Path) -> BuildResult:
        """Register partials, process every entry, then run ``done`` hooks.

        Args:
            entries: Entries to process
            source: Source root
            destination: Destination root

        Returns:
            BuildResult for the run

        Raises:
            RenderError, WriteError: If a file fails and config.fail_fast
                is set. Files already written are left in place and ``done``
                hooks do not run.
        """
        source, destination = Path(source), Path(destination)
        destination.mkdir(parents=True, exist_ok=True)

        result = BuildResult()
        result.partials.extend(self.registrar.register_all(source))
        result.merge(self.render(entries, source, destination))
        self.hooks.done()
        return result

    def render(self, entries: Iterable[FileEntry], source: Path, destination: Path) -> BuildResult:
        """Render renderable entries and copy everything else.

        Entries under layouts or partials directories are skipped.
        """
        source, destination = Path(source), Path(destination)
        result = BuildResult()
        for entry in entries:
            if is_layout_path(entry, source):
                continue

            try:
                if self.renderer.kind_for(entry) is None:
                    result.merge(self.copy([entry], source, destination))
                else:
                    result.transformed.append(self._transform_entry(entry, source, destination))
            except (RenderError, WriteError) as e:
                logger.error("%s", e)
                if self.config.fail_fast:
                    raise
                result.failures.append(BuildFailure(path=entry.full_path, error=str(e)))
        return result

    def copy(self, entries: Iterable[FileEntry], source: Path, destination: Path) -> BuildResult:
        """Copy entries verbatim, preserving their structure below ``source``.

        Raises:
            WriteError: If an entry cannot be copied
        """
        result = BuildResult()
        for entry in entries:
            try:
                result.copied.extend(self.writer.copy(entry, source, destination))
            except OSError as e:
                raise WriteError(entry.full_path, e) from e
        return result

    def _transform_entry(self, entry: FileEntry, source: Path, destination: Path) -> Path:
        relative_dir = entry.relative_dir(source)
        view_key = (relative_dir / entry.name).as_posix()

        model = self.hooks.model(entry)
        rendered = self.renderer.render(entry, source, model)
        try:
            target, text = self.writer.write(destination / relative_dir, entry, rendered.text)
        except OSError as e:
            raise WriteError(entry.full_path, e) from e

        self.hooks.transformed(view_key, target, entry, model, text, rendered.view_model)
        return target

    # Extensions

    def load_script(self, path: Path, options: Any = None) -> Any:
        """Import an extension script and register the hook it returns.

        The script must define ``setup(fabricator, options)``. Its return
        value, when not None, is added to the hook chain. A script that
        fails to import or set up is logged and skipped.

        Args:
            path: Python file to load
            options: Passed to setup (default: this fabricator's config)

        Returns:
            The registered hook, or None
        """
        path = Path(path).resolve()
        module_name = f"sfab_extension_{next(_module_ids)}_{path.stem}"
        try:
            spec = importlib.util.spec_from_file_location(module_name, path)
            if spec is None or spec.loader is None:
                raise ImportError(f"cannot import {path.name}")
            module = importlib.util.module_from_spec(spec)
            sys.modules[module_name] = module
            spec.loader.exec_module(module)

            setup = getattr(module, "setup", None)
            if not callable(setup):
                raise AttributeError("script does not define setup(fabricator, options)")
            hook = setup(self, options if options is not None else self.config)
        except Exception as e:
            sys.modules.pop(module_name, None)
            logger.error("%s", ExtensionLoadError(path, e), exc_info=True)
            return None

        if hook is not None:
            self.use(hook)
        logger.debug("Loaded extension %s", path)
        return hook

    def load_scripts(self, folder: Path, options: Any = None) -> List[Any]:
        """Load every Python script below ``folder`` in walk order.

        Returns:
            Hooks registered, in load order
        """
        walker = TreeWalker(ignore_names=["__pycache__"])
        hooks = []
        for entry in walker.walk(Path(folder)):
            if entry.extension != SCRIPT_EXTENSION:
                continue
            hook = self.load_script(entry.full_path, options)
            if hook is not None:
                hooks.append(hook)
        return hooks
