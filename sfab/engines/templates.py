"""Template engine backed by Jinja2.

Partials and layouts live in an in-memory registry keyed by their path
relative to the source root (``layouts/base.html``). Templates include
them with ``{% include %}`` and extend them with ``{% extends %}``.
"""

import logging
from typing import Any, Callable, Dict, List, Optional

import inflection
import jinja2
import jinja2.meta
import jinja2.nodes
import titlecase as tc

logger = logging.getLogger(__name__)

TemplateFunction = Callable[[Dict[str, Any]], str]

# Block or variable a layout uses for the page body
CONTENT_BLOCK = "content"

SLOT_BLOCK = "block"
SLOT_VARIABLE = "variable"

LAYOUT_SEARCH_DIRS = ("", "layouts/", "partials/")


def current(url: Optional[str], suffix: str) -> str:
    """Return ``" current"`` when ``url`` ends with ``suffix``.

    Used to mark the active entry in navigation menus.
    """
    if not url:
        return ''
    return ' current' if str(url).endswith(suffix) else ''


def unescape_amp(text: Optional[str]) -> str:
    """Undo HTML escaping of ampersands."""
    return (text or '').replace('&amp;', '&')


def oneof(value: Any, *candidates: Any) -> bool:
    """Test whether ``value`` equals any of ``candidates``."""
    return value in candidates


def titlecase(text: Optional[str]) -> str:
    return tc.titlecase(text or '')


def slugify(text: Optional[str]) -> str:
    return inflection.parameterize(text or '')


class TemplateEngine:
    """Compiles templates and holds the partial registry for one run."""

    def __init__(self, autoescape: bool = True):
        """Initialize TemplateEngine.

        Args:
            autoescape: Escape HTML in interpolated values
        """
        self.partials: Dict[str, str] = {}
        self.env = jinja2.Environment(
            loader=jinja2.DictLoader(self.partials),
            autoescape=autoescape,
            keep_trailing_newline=True,
        )
        self.env.filters['current'] = current
        self.env.filters['unescape_amp'] = unescape_amp
        self.env.filters['titlecase'] = titlecase
        self.env.filters['slugify'] = slugify
        self.env.tests['oneof'] = oneof

    def register_partial(self, name: str, text: str) -> None:
        """Register (or replace) a partial under ``name``."""
        if name in self.partials:
            logger.debug("Replacing partial %s", name)
        self.partials[name] = text

    def compile(self, text: str) -> TemplateFunction:
        """Compile template text.

        Args:
            text: Template source

        Returns:
            A function rendering the template with a view-model

        Raises:
            jinja2.TemplateSyntaxError: If the template does not parse
        """
        template = self.env.from_string(text)

        def render(view_model: Dict[str, Any]) -> str:
            return template.render(view_model)
        return render

    def resolve_layout(self, name: str) -> Optional[str]:
        """Find the registered partial a layout name refers to.

        ``base``, ``base.html``, ``layouts/base`` and ``layouts/base.html``
        all resolve to a partial registered as ``layouts/base.html``.

        Args:
            name: Layout name as written in front matter

        Returns:
            Registered partial name, or None if nothing matches
        """
        name = str(name).lstrip('/')
        for candidate in self._layout_candidates(name):
            if candidate in self.partials:
                return candidate
        return None

    def _layout_candidates(self, name: str) -> List[str]:
        candidates = []
        for prefix in LAYOUT_SEARCH_DIRS:
            candidates.append(f"{prefix}{name}")
            if not name.endswith('.html'):
                candidates.append(f"{prefix}{name}.html")
        return candidates

    def load(self, name: str) -> TemplateFunction:
        """Compile a registered partial by name."""
        template = self.env.get_template(name)

        def render(view_model: Dict[str, Any]) -> str:
            return template.render(view_model)
        return render

    def layout_slot(self, name: str) -> Optional[str]:
        """Report how a layout takes the page body.

        A layout either defines ``{% block content %}`` (directly or through
        the layouts it extends) or prints ``{{ content }}``.

        Args:
            name: Registered layout name

        Returns:
            SLOT_BLOCK, SLOT_VARIABLE, or None when the layout has neither

        Raises:
            jinja2.TemplateSyntaxError: If the layout does not parse
        """
        seen = set()
        uses_variable = False
        while name in self.partials and name not in seen:
            seen.add(name)
            ast = self.env.parse(self.partials[name])
            if any(block.name == CONTENT_BLOCK for block in ast.find_all(jinja2.nodes.Block)):
                return SLOT_BLOCK
            if CONTENT_BLOCK in jinja2.meta.find_undeclared_variables(ast):
                uses_variable = True
            parent = next(ast.find_all(jinja2.nodes.Extends), None)
            if parent is None or not isinstance(parent.template, jinja2.nodes.Const):
                break
            name = parent.template.value
        return SLOT_VARIABLE if uses_variable else None

    def wrap_in_layout(self, layout: str) -> str:
        """Template source placing ``content`` in ``layout``'s content block."""
        return (
            f'{{% extends "{layout}" %}}'
            f'{{% block {CONTENT_BLOCK} %}}\n{{{{ {CONTENT_BLOCK} }}}}{{% endblock %}}\n'
        )
