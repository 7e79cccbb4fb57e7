"""Plugin support for Trellis.

Plugins subclass Plugin and override the hooks they care about. The
builder consults the registry synchronously around the content-location
stage, passing a mutable params object so a plugin can redirect or filter
discovery before the pipeline proceeds.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from .errors import PluginAlreadyRegisteredError


@dataclass
class LocateContentParams:
    """Parameters of the content-location stage, shared with plugins.

    Attributes:
        dir: Directory searched for content files.
        ext: Content file extension.
        files: Located files, filled in before ``after_locate_content``.
        error: The failure, set before ``on_locate_content_error``.
    """

    dir: Path
    ext: str
    files: list[Path] = field(default_factory=list)
    error: Exception | None = None


class Plugin:
    """Base class for plugins; every hook defaults to a no-op.

    Attributes:
        priority: Higher priorities run first.
    """

    priority: int = 1

    def before_locate_content(self, params: LocateContentParams) -> None:
        """Called before content files are located."""

    def after_locate_content(self, params: LocateContentParams) -> None:
        """Called once content files are located."""

    def on_locate_content_error(self, params: LocateContentParams) -> None:
        """Called when locating content fails."""


class PluginRegistry:
    """Ordered registry of plugin instances.

    Plugins run by descending priority, ties in registration order.
    """

    def __init__(self):
        self._entries: list[tuple[int, int, Plugin]] = []
        self._counter = 0

    def add(self, plugin: Plugin, priority: int | None = None) -> None:
        """Register a plugin.

        Args:
            plugin: Plugin instance.
            priority: Overrides the plugin's own priority.

        Raises:
            PluginAlreadyRegisteredError: If the instance is already registered.
        """
        if self.has(plugin):
            raise PluginAlreadyRegisteredError(plugin)
        rank = plugin.priority if priority is None else priority
        self._entries.append((rank, self._counter, plugin))
        self._counter += 1
        self._entries.sort(key=lambda entry: (-entry[0], entry[1]))

    def remove(self, plugin: Plugin) -> None:
        """Unregister a plugin; unknown plugins are ignored."""
        self._entries = [entry for entry in self._entries if entry[2] is not plugin]

    def has(self, plugin: Plugin) -> bool:
        return any(entry[2] is plugin for entry in self._entries)

    def __iter__(self):
        return iter([entry[2] for entry in self._entries])

    def __len__(self) -> int:
        return len(self._entries)

    def before_locate_content(self, params: LocateContentParams) -> None:
        for plugin in self:
            plugin.before_locate_content(params)

    def after_locate_content(self, params: LocateContentParams) -> None:
        for plugin in self:
            plugin.after_locate_content(params)

    def on_locate_content_error(self, params: LocateContentParams) -> None:
        for plugin in self:
            plugin.on_locate_content_error(params)
