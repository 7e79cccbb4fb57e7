"""Menu aggregation for Trellis.

A page joins menus through its ``menu`` variable::

    menu: main              # one weightless entry in "main"
    menu: [main, footer]    # one weightless entry in each
    menu:
      main:
        weight: 5           # weighted entry in "main"
      footer:               # weightless entry in "footer"
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

from .collections import Collection, Entity
from .content import Page

logger = logging.getLogger(__name__)


class Entry(Entity):
    """A menu entry keyed by the ID of the page it points to."""

    def __init__(self, page_id: str, name: str = "", url: str = "", weight: Any = None):
        super().__init__(page_id)
        self.name = name
        self.url = url
        self.weight = weight

    @classmethod
    def for_page(cls, page: Page, weight: Any = None) -> Entry:
        return cls(page.id, name=page.title, url=page.pathname, weight=weight)

    @property
    def page_id(self) -> str:
        return self.key


class Menu(Entity):
    """A named menu holding entries in page-iteration order."""

    def __init__(self, name: str):
        super().__init__(name)
        self.entries: Collection[Entry] = Collection()

    @property
    def name(self) -> str:
        return self.key

    def put(self, entry: Entry) -> None:
        """Add an entry, replacing the one already held for the same page."""
        if self.entries.has(entry.key):
            self.entries.replace(entry.key, entry)
        else:
            self.entries.add(entry)

    def sorted(self) -> list[Entry]:
        """Entries ordered by weight; weightless entries come last."""
        return sorted(self.entries, key=_sort_key)

    def __iter__(self):
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


class Menus(Collection[Menu]):
    """Collection of menus, created on first use."""

    def menu(self, name: str) -> Menu:
        if not self.has(name):
            self.add(Menu(name))
        return self.get(name)


def build_menus(pages: Iterable[Page]) -> Menus:
    """Build every menu from the pages' ``menu`` variables.

    Menus are rebuilt wholesale on each call, and a page contributes at
    most one entry per menu.

    Args:
        pages: Pages in collection order.

    Returns:
        Menus in first-seen order.
    """
    menus = Menus()
    for page in pages:
        value = page.get_variable("menu")
        if not value:
            continue
        if isinstance(value, str):
            menus.menu(value).put(Entry.for_page(page))
        elif isinstance(value, Mapping):
            for name, settings in value.items():
                weight = settings.get("weight") if isinstance(settings, Mapping) else None
                weight = _menu_weight(weight, page.id, name)
                menus.menu(str(name)).put(Entry.for_page(page, weight))
        elif isinstance(value, (list, tuple)):
            for name in value:
                menus.menu(str(name)).put(Entry.for_page(page))
    return menus


def _sort_key(entry: Entry) -> tuple[bool, float]:
    weight = entry.weight
    if isinstance(weight, (int, float)) and not isinstance(weight, bool):
        return False, weight
    return True, 0


def _menu_weight(value: Any, page_id: str, menu: Any) -> int | float | None:
    """Normalize a front matter weight to a number.

    Numeric strings such as ``'5'`` are converted; anything else is logged
    and the entry becomes weightless.
    """
    if value is None:
        return None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return int(text)
        except ValueError:
            pass
        try:
            return float(text)
        except ValueError:
            pass
    logger.warning(
        "Ignoring invalid weight %r for page '%s' in menu '%s'", value, page_id, menu
    )
    return None
