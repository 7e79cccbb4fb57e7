from pathlib import Path

import pytest

from trellis.errors import PluginAlreadyRegisteredError
from trellis.plugins import LocateContentParams, Plugin, PluginRegistry


class Recorder(Plugin):
    def __init__(self, name, calls, priority=1):
        self.name = name
        self.calls = calls
        self.priority = priority

    def before_locate_content(self, params):
        self.calls.append((self.name, "before"))


def test_add_twice_raises():
    registry = PluginRegistry()
    plugin = Plugin()
    registry.add(plugin)
    with pytest.raises(PluginAlreadyRegisteredError) as excinfo:
        registry.add(plugin)
    assert 'Plugin of type "Plugin" already registered' in str(excinfo.value)
    # a second instance of the same type is fine
    registry.add(Plugin())
    assert len(registry) == 2


def test_remove_and_has():
    registry = PluginRegistry()
    plugin = Plugin()
    assert not registry.has(plugin)
    registry.add(plugin)
    assert registry.has(plugin)
    registry.remove(plugin)
    assert not registry.has(plugin)
    registry.remove(plugin)
    assert len(registry) == 0


def test_hooks_run_by_priority_then_registration_order():
    calls = []
    registry = PluginRegistry()
    registry.add(Recorder("low", calls, priority=1))
    registry.add(Recorder("high", calls, priority=10))
    registry.add(Recorder("low-2", calls, priority=1))
    registry.add(Recorder("forced", calls), priority=5)
    registry.before_locate_content(LocateContentParams(dir=Path("."), ext="md"))
    assert [name for name, _ in calls] == ["high", "forced", "low", "low-2"]


def test_default_hooks_are_noops():
    registry = PluginRegistry()
    registry.add(Plugin())
    params = LocateContentParams(dir=Path("content"), ext="md")
    registry.before_locate_content(params)
    registry.after_locate_content(params)
    registry.on_locate_content_error(params)
    assert params.files == [] and params.error is None
