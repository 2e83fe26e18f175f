"""Render dispatch for source pages."""

import logging
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from markupsafe import Markup

from sfab.core.metadata import extract_markup_metadata, markup_links
from sfab.core.models import FileEntry, RenderError, RenderKind, RenderResult
from sfab.engines.markdown import MarkdownRenderer
from sfab.engines.templates import CONTENT_BLOCK, SLOT_BLOCK, TemplateEngine
from sfab.transforms.frontmatter import FrontmatterTransform, markdown_page

logger = logging.getLogger(__name__)

EXTENSION_KINDS: Dict[str, RenderKind] = {
    'html': RenderKind.MARKUP,
    'xml': RenderKind.MARKUP,
    'md': RenderKind.MARKDOWN,
}


class Renderer:
    """Renders source pages into text plus the view-model used.

    Handles:
    - HTML and XML pages, with microdata and meta tag extraction
    - Markdown pages, with front matter and layout wrapping

    The view-model is built from extracted metadata, then the ``model``
    passed by the caller (hook contributions), then ``options``; later
    sources win.
    """

    def __init__(
        self,
        engine: TemplateEngine,
        markdown: Optional[MarkdownRenderer] = None,
        options: Optional[Dict[str, Any]] = None,
        frontmatter_transform: Optional[FrontmatterTransform] = None,
    ):
        """Initialize Renderer.

        Args:
            engine: Template engine holding the partial registry
            markdown: Markdown parser (default: a new MarkdownRenderer)
            options: Caller-supplied render options merged into every view-model
            frontmatter_transform: Optional extra transform applied to markdown
                                   front matter after the standard derivations
        """
        self.engine = engine
        self.markdown = markdown or MarkdownRenderer()
        self.options = dict(options or {})
        self.frontmatter_transform = frontmatter_transform
        self.handlers: Dict[RenderKind, Callable[..., RenderResult]] = {
            RenderKind.MARKUP: self._render_markup,
            RenderKind.MARKDOWN: self._render_markdown,
        }

    @staticmethod
    def kind_for(entry: FileEntry) -> Optional[RenderKind]:
        """Select the render kind for an entry, or None if it is copied verbatim."""
        if entry.is_dir:
            return None
        return EXTENSION_KINDS.get(entry.extension)

    def render(
        self,
        entry: FileEntry,
        source_root: Path,
        model: Optional[Dict[str, Any]] = None,
    ) -> RenderResult:
        """Render a source page.

        Args:
            entry: Page to render
            source_root: Root of the source tree
            model: View-model fields contributed by hooks

        Returns:
            RenderResult with rendered text and the final view-model

        Raises:
            RenderError: If the entry cannot be rendered
        """
        kind = self.kind_for(entry)
        if kind is None:
            raise RenderError(entry.full_path, f"no renderer for '.{entry.extension}' files")

        logger.debug("Rendering %s", entry.full_path)
        try:
            return self.handlers[kind](entry, Path(source_root), model or {})
        except RenderError:
            raise
        except Exception as e:
            raise RenderError(entry.full_path, e) from e

    def _view_model(self, metadata: Dict[str, Any], model: Dict[str, Any]) -> Dict[str, Any]:
        view_model = dict(metadata)
        view_model.update(model)
        view_model.update(self.options)
        return view_model

    def _render_markup(self, entry: FileEntry, source_root: Path, model: Dict[str, Any]) -> RenderResult:
        raw = entry.read_raw()
        metadata = extract_markup_metadata(raw)
        metadata.update(markup_links(entry, source_root))

        view_model = self._view_model(metadata, model)
        template = self.engine.compile(raw)
        return RenderResult(text=template(view_model), view_model=view_model)

    def _render_markdown(self, entry: FileEntry, source_root: Path, model: Dict[str, Any]) -> RenderResult:
        parsed = self.markdown.render(entry.read_raw())

        layout_name = parsed.meta.get('layout')
        if not layout_name:
            raise RenderError(entry.full_path, "front matter has no 'layout'")
        layout = self.engine.resolve_layout(layout_name)
        if layout is None:
            raise RenderError(entry.full_path, f"layout '{layout_name}' is not registered")

        metadata = markdown_page(source_root)(parsed.meta, entry)
        if self.frontmatter_transform:
            metadata = self.frontmatter_transform(metadata, entry)

        slot = self.engine.layout_slot(layout)
        if slot is None:
            raise RenderError(
                entry.full_path,
                f"layout '{layout}' has no {{% block {CONTENT_BLOCK} %}} and does not print {{{{ {CONTENT_BLOCK} }}}}",
            )

        view_model = self._view_model(metadata, model)
        view_model[CONTENT_BLOCK] = Markup(self.engine.compile(parsed.html)(view_model))
        if slot == SLOT_BLOCK:
            template = self.engine.compile(self.engine.wrap_in_layout(layout))
        else:
            template = self.engine.load(layout)
        return RenderResult(text=template(view_model), view_model=view_model)
