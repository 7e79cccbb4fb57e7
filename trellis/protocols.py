"""Protocol definitions for Trellis.

These protocols describe the pluggable seams of the pipeline: front matter
formats and body markup formats. Registries accept any
object satisfying them, so new formats can be added without modifying
existing code.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class FrontmatterConverter(Protocol):
    """Protocol for parsing raw front matter into a mapping."""

    format: str

    @abstractmethod
    def convert(self, text: str) -> dict[str, Any]:
        """Parse front matter text.

        Args:
            text: Raw front matter, without delimiters.

        Returns:
            Parsed mapping.
        """
        ...


@runtime_checkable
class BodyConverter(Protocol):
    """Protocol for converting a page body into HTML."""

    format: str

    @abstractmethod
    def convert(self, body: str) -> str:
        """Convert body markup to HTML.

        Args:
            body: Raw body text.

        Returns:
            HTML string.
        """
        ...

