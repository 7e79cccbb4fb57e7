"""Exception types for Trellis.

Every error raised by the build pipeline derives from TrellisError so the
CLI can report failures uniformly.
"""

from __future__ import annotations

from typing import Any


class TrellisError(Exception):
    """Base class for all Trellis errors."""


class DuplicateKeyError(TrellisError, LookupError):
    """Raised when adding an entity whose key already exists in a collection.

    Attributes:
        key: The conflicting key.
    """

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Key '{key}' already exists in collection")


class NotFoundError(TrellisError, LookupError):
    """Raised when looking up or replacing a key absent from a collection.

    Attributes:
        key: The missing key.
    """

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Key '{key}' not found in collection")


class LayoutNotFoundError(TrellisError):
    """Raised when no layout candidate exists in any search root.

    Attributes:
        page_id: ID of the page being resolved.
        candidate: The last candidate tried.
        candidates: Every candidate tried, most specific first.
    """

    def __init__(self, page_id: str, candidate: str, candidates: list[str] | None = None):
        self.page_id = page_id
        self.candidate = candidate
        self.candidates = list(candidates or [])
        super().__init__(f"Layout '{candidate}' not found for page '{page_id}'!")


class ThemeNotFoundError(TrellisError):
    """Raised when the configured theme directory does not exist."""

    def __init__(self, theme: str, themes_dir: Any):
        self.theme = theme
        self.themes_dir = themes_dir
        super().__init__(f"Theme '{theme}' not found in '{themes_dir}'!")


class PluginAlreadyRegisteredError(TrellisError):
    """Raised when the same plugin instance is registered twice."""

    def __init__(self, plugin: Any):
        self.plugin = plugin
        super().__init__(f'Plugin of type "{type(plugin).__name__}" already registered')


class BuildError(TrellisError):
    """Error during site build with page context.

    Attributes:
        source: Page ID or source path that caused the error.
        message: Human-readable error message.
        original_error: The original exception that was caught.
        failures: Per-page (source, message) pairs when several pages failed.
    """

    def __init__(
        self,
        source: Any,
        message: str,
        original_error: Exception | None = None,
        failures: list[tuple[str, str]] | None = None,
    ):
        self.source = source
        self.message = message
        self.original_error = original_error
        self.failures = list(failures or [])
        super().__init__(f"{source}: {message}")
