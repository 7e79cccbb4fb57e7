"""Body converters for Trellis.

Each converter turns a page body written in one markup format into HTML.
The configured ``body.format`` selects the converter.

Key classes:
- MarkdownConverter: Renders Markdown to HTML with syntax highlighting.
- HTMLConverter: Passes through HTML content.
- BodyConverterRegistry: Maps format names to converters.
"""

from __future__ import annotations

import re

import mistune
from pygments import highlight
from pygments.formatters import HtmlFormatter
from pygments.lexers import get_lexer_by_name
from pygments.util import ClassNotFound

from .protocols import BodyConverter


def _generate_heading_id(text: str) -> str:
    """Generate a URL-friendly ID from heading text.

    Args:
        text: The heading text.

    Returns:
        URL-friendly slug suitable for anchor links.
    """
    slug = re.sub(r"<[^>]+>", "", text).lower().strip()
    slug = re.sub(r"[^\w\s-]", "", slug)
    slug = re.sub(r"[-\s]+", "-", slug)
    return slug.strip("-")


class _HighlightRenderer(mistune.HTMLRenderer):
    """Markdown renderer adding heading anchors and Pygments highlighting."""

    def __init__(self):
        super().__init__(escape=False)
        self._heading_id_counts: dict[str, int] = {}

    def heading(self, text: str, level: int, **attrs) -> str:
        """Render a heading with a unique auto-generated ID.

        Args:
            text: Heading text content.
            level: Heading level (1-6).
            **attrs: Additional attributes.

        Returns:
            HTML heading tag with id attribute.
        """
        base_id = _generate_heading_id(text)
        if base_id in self._heading_id_counts:
            self._heading_id_counts[base_id] += 1
            heading_id = f"{base_id}-{self._heading_id_counts[base_id]}"
        else:
            self._heading_id_counts[base_id] = 0
            heading_id = base_id
        return f'<h{level} id="{heading_id}">{text}</h{level}>\n'

    def block_code(self, code: str, info: str | None = None) -> str:
        """Render a code block with Pygments syntax highlighting.

        Args:
            code: The code content.
            info: Language identifier (e.g., 'python', 'javascript').

        Returns:
            HTML string with highlighted code.
        """
        lang = info.split()[0] if info and info.strip() else ""
        if lang:
            try:
                lexer = get_lexer_by_name(lang, stripall=True)
            except ClassNotFound:
                lexer = None
            if lexer is not None:
                formatter = HtmlFormatter(nowrap=False, cssclass="highlight")
                return highlight(code, lexer, formatter)
        escaped = code.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")
        lang_class = f' class="language-{lang}"' if lang else ""
        return f"<pre><code{lang_class}>{escaped}</code></pre>\n"


class MarkdownConverter:
    """Converts Markdown bodies to HTML."""

    format = "md"

    def convert(self, body: str) -> str:
        """Render Markdown content to HTML.

        Args:
            body: Markdown source.

        Returns:
            Rendered HTML.
        """
        markdown = mistune.create_markdown(
            renderer=_HighlightRenderer(),
            plugins=["strikethrough", "footnotes", "table", "url"],
        )
        return markdown(body)


class HTMLConverter:
    """Passes HTML bodies through unchanged."""

    format = "html"

    def convert(self, body: str) -> str:
        return body


class BodyConverterRegistry:
    """Registry of body converters keyed by format name.

    New markup formats can be added without modifying existing code.
    """

    def __init__(self):
        self._converters: dict[str, BodyConverter] = {}
        self.register(MarkdownConverter())
        self.register(HTMLConverter())

    def register(self, converter: BodyConverter) -> None:
        """Register a converter under its ``format`` name.

        Args:
            converter: A BodyConverter implementation.
        """
        self._converters[converter.format] = converter

    def get(self, fmt: str) -> BodyConverter:
        """Return the converter for a format.

        Raises:
            ValueError: If no converter handles the format.
        """
        try:
            return self._converters[fmt]
        except KeyError:
            raise ValueError(f"Unknown body format: {fmt}") from None

    def convert(self, body: str, fmt: str) -> str:
        return self.get(fmt).convert(body)


default_body_registry = BodyConverterRegistry()
