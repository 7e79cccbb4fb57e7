"""Front matter extraction for Trellis.

A content file starts with an optional front matter block delimited by
``---`` lines, followed by the body. Splitting keeps the raw front matter
text on the page; converting it into a mapping happens later, through the
converter registered for the configured format.

Key classes:
- YamlFrontmatterConverter: Parses YAML front matter.
- JsonFrontmatterConverter: Parses JSON front matter.
- FrontmatterConverterRegistry: Maps format names to converters.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

import yaml

from .protocols import FrontmatterConverter

FRONTMATTER_RE = re.compile(
    r"\A\ufeff?---[ \t]*\r?\n(?:(.*?)\r?\n)?---[ \t]*(?:\r?\n|\Z)", re.DOTALL
)

logger = logging.getLogger(__name__)


def split_frontmatter(text: str) -> tuple[str, str]:
    """Split raw file content into front matter text and body.

    Args:
        text: Raw file content.

    Returns:
        Tuple of (raw front matter, body). Front matter is empty when the
        file has no delimited block.
    """
    match = FRONTMATTER_RE.match(text)
    if not match:
        return "", text
    return match.group(1) or "", text[match.end() :]


class YamlFrontmatterConverter:
    """Converts YAML front matter into a mapping."""

    format = "yaml"

    def convert(self, text: str) -> dict[str, Any]:
        """Parse YAML text.

        Args:
            text: Raw front matter.

        Returns:
            Parsed mapping, empty when the text is blank or not a mapping.

        Raises:
            yaml.YAMLError: If the text is not valid YAML.
        """
        if not text.strip():
            return {}
        data = yaml.safe_load(text)
        return data if isinstance(data, dict) else {}


class JsonFrontmatterConverter:
    """Converts JSON front matter into a mapping."""

    format = "json"

    def convert(self, text: str) -> dict[str, Any]:
        if not text.strip():
            return {}
        data = json.loads(text)
        return data if isinstance(data, dict) else {}


class FrontmatterConverterRegistry:
    """Registry of front matter converters keyed by format name."""

    def __init__(self):
        self._converters: dict[str, FrontmatterConverter] = {}
        self.register(YamlFrontmatterConverter())
        self.register(JsonFrontmatterConverter())

    def register(self, converter: FrontmatterConverter) -> None:
        """Register a converter under its ``format`` name.

        Args:
            converter: A FrontmatterConverter implementation.
        """
        self._converters[converter.format] = converter

    def get(self, fmt: str) -> FrontmatterConverter:
        """Return the converter for a format.

        Raises:
            ValueError: If no converter handles the format.
        """
        try:
            return self._converters[fmt]
        except KeyError:
            raise ValueError(f"Unknown front matter format: {fmt}") from None

    def convert(self, text: str, fmt: str, source: str = "") -> dict[str, Any]:
        """Convert front matter text, tolerating malformed input.

        Malformed front matter is logged and treated as empty so the page
        still builds.

        Args:
            text: Raw front matter.
            fmt: Format name (``yaml``, ``json``).
            source: Page identifier used in the log message.

        Returns:
            Parsed mapping.
        """
        converter = self.get(fmt)
        try:
            return converter.convert(text)
        except (yaml.YAMLError, ValueError) as exc:
            logger.warning("Ignoring malformed %s front matter in '%s': %s", fmt, source, exc)
            return {}


default_frontmatter_registry = FrontmatterConverterRegistry()
