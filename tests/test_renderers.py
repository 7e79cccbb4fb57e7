from trellis.extractors import (
    FrontmatterConverterRegistry,
    JsonFrontmatterConverter,
    YamlFrontmatterConverter,
)
from trellis.protocols import BodyConverter, FrontmatterConverter
from trellis.renderers import (
    BodyConverterRegistry,
    HTMLConverter,
    MarkdownConverter,
    _generate_heading_id,
)


def test_markdown_converter_renders_headings_with_ids():
    html = MarkdownConverter().convert("# Hello World\n\n## Hello World\n\nText")
    assert '<h1 id="hello-world">Hello World</h1>' in html
    assert '<h2 id="hello-world-1">Hello World</h2>' in html
    assert "<p>Text</p>" in html


def test_markdown_converter_highlights_known_languages():
    html = MarkdownConverter().convert("```python\nprint('hi')\n```\n")
    assert 'class="highlight"' in html


def test_markdown_converter_escapes_unknown_languages():
    html = MarkdownConverter().convert("```nosuchlang\n<b>x</b>\n```\n")
    assert '<pre><code class="language-nosuchlang">&lt;b&gt;x&lt;/b&gt;' in html


def test_markdown_converter_plugins():
    html = MarkdownConverter().convert("~~gone~~ and https://example.com")
    assert "<del>gone</del>" in html
    assert 'href="https://example.com"' in html


def test_heading_id_generation():
    assert _generate_heading_id("Getting Started!") == "getting-started"
    assert _generate_heading_id("<em>Styled</em> heading") == "styled-heading"


def test_converters_satisfy_protocols():
    assert isinstance(MarkdownConverter(), BodyConverter)
    assert isinstance(HTMLConverter(), BodyConverter)
    assert isinstance(YamlFrontmatterConverter(), FrontmatterConverter)
    assert isinstance(JsonFrontmatterConverter(), FrontmatterConverter)


def test_body_registry_accepts_custom_converters():
    class ShoutConverter:
        format = "shout"

        def convert(self, body):
            return body.upper()

    registry = BodyConverterRegistry()
    registry.register(ShoutConverter())
    assert registry.convert("hey", "shout") == "HEY"
    assert registry.convert("<i>x</i>", "html") == "<i>x</i>"


def test_frontmatter_registry_converts_yaml():
    registry = FrontmatterConverterRegistry()
    assert registry.convert("tags: [a, b]", "yaml") == {"tags": ["a", "b"]}
    assert registry.convert("", "yaml") == {}
    assert registry.convert("- just\n- a list", "yaml") == {}
