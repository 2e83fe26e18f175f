"""Tests for the Renderer and metadata extraction."""

import datetime

import pytest
from pathlib import Path
import tempfile
import shutil

from sfab.core.metadata import extract_markup_metadata, markup_links
from sfab.core.models import FileEntry, RenderError, RenderKind
from sfab.core.processor import Renderer
from sfab.engines.templates import TemplateEngine


ARTICLE = """<html>
<head>
  <title>{{ description }}</title>
  <meta name="description" content="A page about things">
  <meta name="tags" content="python,static sites">
  <meta charset="utf-8">
</head>
<body>
  <article>
    <h1 itemprop="headline"> Hello World </h1>
    <time itemprop="published" datetime="2024-01-15T10:30:00">Jan 15</time>
    <span itemprop="author" content="Ann"></span>
  </article>
</body>
</html>
"""


class TestExtractMarkupMetadata:
    """Tests for microdata and meta tag extraction."""

    def test_itemprop_content(self):
        props = extract_markup_metadata(ARTICLE)
        assert props["author"] == "Ann"

    def test_headline_uses_text(self):
        props = extract_markup_metadata(ARTICLE)
        assert props["headline"] == "Hello World"

    def test_published_parsed(self):
        props = extract_markup_metadata(ARTICLE)
        assert props["published"] == datetime.datetime(2024, 1, 15, 10, 30)

    def test_meta_tags(self):
        props = extract_markup_metadata(ARTICLE)
        assert props["description"] == "A page about things"
        assert props["tags"] == ["python", "static sites"]

    def test_meta_without_name_ignored(self):
        props = extract_markup_metadata(ARTICLE)
        assert None not in props
        assert "charset" not in props

    def test_xml_source(self):
        feed = """<?xml version="1.0"?>
<rss><channel>
  <meta name="title" content="My Feed"/>
  <item itemprop="category" content="news"></item>
</channel></rss>
"""
        props = extract_markup_metadata(feed)
        assert props["title"] == "My Feed"
        assert props["category"] == "news"

    def test_no_metadata(self):
        assert extract_markup_metadata("<p>plain</p>") == {}

    def test_markup_links(self):
        entry = FileEntry(name="post.html", path=Path("/site/blog"))
        assert markup_links(entry, Path("/site")) == {
            "uri": "/blog/post.html",
            "relativeLink": "blog/post.html",
        }


class TestRenderer:
    """Tests for Renderer class."""

    @pytest.fixture
    def temp_site(self):
        temp_dir = tempfile.mkdtemp()
        yield Path(temp_dir)
        shutil.rmtree(temp_dir)

    @pytest.fixture
    def engine(self):
        engine = TemplateEngine()
        engine.register_partial(
            "layouts/base.html",
            "<main><h1>{{ title }}</h1>{% block content %}{% endblock %}</main>",
        )
        return engine

    def _create_file(self, root: Path, relative: str, content: str) -> FileEntry:
        """Helper to create a source file and its FileEntry."""
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
        return FileEntry(name=path.name, path=path.parent)

    def test_kind_for(self, temp_site):
        assert Renderer.kind_for(FileEntry("a.html", temp_site)) is RenderKind.MARKUP
        assert Renderer.kind_for(FileEntry("feed.XML", temp_site)) is RenderKind.MARKUP
        assert Renderer.kind_for(FileEntry("post.md", temp_site)) is RenderKind.MARKDOWN
        assert Renderer.kind_for(FileEntry("logo.png", temp_site)) is None
        assert Renderer.kind_for(FileEntry("Makefile", temp_site)) is None
        assert Renderer.kind_for(FileEntry("docs.md", temp_site, is_dir=True)) is None

    def test_render_markup(self, engine, temp_site):
        entry = self._create_file(temp_site, "blog/article.html", ARTICLE)

        result = Renderer(engine).render(entry, temp_site)

        assert "<title>A page about things</title>" in result.text
        assert result.view_model["uri"] == "/blog/article.html"
        assert result.view_model["relativeLink"] == "blog/article.html"
        assert result.view_model["headline"] == "Hello World"

    def test_render_markup_with_partial(self, engine, temp_site):
        engine.register_partial("partials/footer.html", "<footer>{{ relativeLink }}</footer>")
        entry = self._create_file(temp_site, "index.html", '{% include "partials/footer.html" %}')

        result = Renderer(engine).render(entry, temp_site)

        assert result.text == "<footer>index.html</footer>"

    def test_render_markdown(self, engine, temp_site):
        entry = self._create_file(
            temp_site, "blog/post.md", "---\nlayout: base\ntitle: Hi\ntags: a,b\n---\nWelcome to {{ title }}\n"
        )

        result = Renderer(engine).render(entry, temp_site)

        assert result.text.startswith("<main><h1>Hi</h1>")
        assert "<p>Welcome to Hi</p>" in result.text
        assert result.view_model["tags"] == ["a", "b"]
        assert result.view_model["permalink"] == "/blog/post.html"
        assert result.view_model["relativeLink"] == "blog/post.html"
        assert isinstance(result.view_model["birthtime"], datetime.datetime)

    def test_markdown_tags_default_empty(self, engine, temp_site):
        entry = self._create_file(temp_site, "post.md", "---\nlayout: base\n---\nText\n")
        result = Renderer(engine).render(entry, temp_site)
        assert result.view_model["tags"] == []

    def test_markdown_display_date(self, engine, temp_site):
        entry = self._create_file(
            temp_site, "post.md", "---\nlayout: base\npublished: 2024-01-15 10:30:00\n---\n{{ displayDate }}\n"
        )
        result = Renderer(engine).render(entry, temp_site)
        assert "Monday, January 15, 2024 at 10:30 AM" in result.text

    def test_markdown_missing_layout(self, engine, temp_site):
        entry = self._create_file(temp_site, "post.md", "---\ntitle: No layout\n---\nText\n")

        with pytest.raises(RenderError) as exc_info:
            Renderer(engine).render(entry, temp_site)

        assert exc_info.value.path == temp_site / "post.md"
        assert "layout" in str(exc_info.value)

    def test_markdown_unknown_layout(self, engine, temp_site):
        entry = self._create_file(temp_site, "post.md", "---\nlayout: fancy\n---\nText\n")

        with pytest.raises(RenderError) as exc_info:
            Renderer(engine).render(entry, temp_site)

        assert "fancy" in str(exc_info.value)

    def test_markdown_layout_printing_content(self, engine, temp_site):
        engine.register_partial("layouts/plain.html", "<body>{{ content }}</body>")
        entry = self._create_file(temp_site, "index.md", "---\nlayout: plain\ntitle: Home\n---\nWelcome {{ title }}\n")

        result = Renderer(engine).render(entry, temp_site)

        assert result.text == "<body><p>Welcome Home</p>\n</body>"
        assert result.view_model["content"] == "<p>Welcome Home</p>\n"

    def test_markdown_content_in_view_model_for_block_layouts(self, engine, temp_site):
        entry = self._create_file(temp_site, "index.md", "---\nlayout: base\n---\nBody\n")
        result = Renderer(engine).render(entry, temp_site)
        assert result.view_model["content"] == "<p>Body</p>\n"

    def test_markdown_layout_without_body_slot(self, engine, temp_site):
        engine.register_partial("layouts/bare.html", "<body>{{ title }}</body>")
        entry = self._create_file(temp_site, "index.md", "---\nlayout: bare\n---\nLost\n")

        with pytest.raises(RenderError) as exc_info:
            Renderer(engine).render(entry, temp_site)

        assert exc_info.value.path == temp_site / "index.md"
        assert "layouts/bare.html" in str(exc_info.value)

    def test_markdown_bad_yaml(self, engine, temp_site):
        entry = self._create_file(temp_site, "post.md", "---\ntags: [unclosed\n---\nText\n")

        with pytest.raises(RenderError) as exc_info:
            Renderer(engine).render(entry, temp_site)

        assert exc_info.value.path == temp_site / "post.md"
        assert exc_info.value.__cause__ is not None

    def test_template_error_tagged(self, engine, temp_site):
        entry = self._create_file(temp_site, "broken.html", "{% for %}")

        with pytest.raises(RenderError) as exc_info:
            Renderer(engine).render(entry, temp_site)

        assert exc_info.value.path == temp_site / "broken.html"

    def test_unreadable_file(self, engine, temp_site):
        entry = FileEntry(name="missing.md", path=temp_site)

        with pytest.raises(RenderError):
            Renderer(engine).render(entry, temp_site)

    def test_no_renderer(self, engine, temp_site):
        entry = self._create_file(temp_site, "logo.png", "png")

        with pytest.raises(RenderError):
            Renderer(engine).render(entry, temp_site)

    def test_view_model_precedence(self, engine, temp_site):
        entry = self._create_file(
            temp_site, "post.md", "---\nlayout: base\ntitle: Front\nsubtitle: Front\nauthor: Front\n---\nText\n"
        )
        renderer = Renderer(engine, options={"title": "Option"})

        result = renderer.render(entry, temp_site, {"title": "Hook", "subtitle": "Hook"})

        assert result.view_model["title"] == "Option"
        assert result.view_model["subtitle"] == "Hook"
        assert result.view_model["author"] == "Front"
        assert "<h1>Option</h1>" in result.text

    def test_no_metadata_leak_between_files(self, engine, temp_site):
        first = self._create_file(temp_site, "a.md", "---\nlayout: base\nauthor: Ann\ntags: x\n---\nA\n")
        second = self._create_file(temp_site, "b.md", "---\nlayout: base\n---\nB\n")
        renderer = Renderer(engine)

        renderer.render(first, temp_site)
        result = renderer.render(second, temp_site)

        assert "author" not in result.view_model
        assert result.view_model["tags"] == []

    def test_frontmatter_transform(self, engine, temp_site):
        entry = self._create_file(temp_site, "post.md", "---\nlayout: base\ntitle: loud\n---\nText\n")

        def shout(fm, e):
            return {**fm, "title": fm["title"].upper()}

        result = Renderer(engine, frontmatter_transform=shout).render(entry, temp_site)

        assert result.view_model["title"] == "LOUD"

    def test_render_is_deterministic(self, engine, temp_site):
        entry = self._create_file(temp_site, "post.md", "---\nlayout: base\ntitle: Hi\n---\n{{ birthtime }}\n")
        renderer = Renderer(engine)

        first = renderer.render(entry, temp_site)
        second = renderer.render(entry, temp_site)

        assert first.text == second.text
