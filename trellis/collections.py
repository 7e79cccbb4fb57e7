"""Keyed entities and ordered collections.

Every content object (page, menu entry, taxonomy term, vocabulary) is an
Entity: an immutable string key plus an open bag of variables. A Collection
holds entities of one kind, keyed uniquely and iterated in insertion order.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from typing import Any, Generic, TypeVar

from .errors import DuplicateKeyError, NotFoundError


class Entity:
    """A uniquely keyed object carrying a mapping of named variables.

    Attributes:
        variables: Extension variables (front matter keys, synthesized data).
    """

    def __init__(self, key: str, variables: dict[str, Any] | None = None):
        self._key = str(key)
        self.variables: dict[str, Any] = dict(variables or {})

    @property
    def key(self) -> str:
        return self._key

    def get_variable(self, name: str, default: Any = None) -> Any:
        return self.variables.get(name, default)

    def set_variable(self, name: str, value: Any) -> Entity:
        self.variables[name] = value
        return self

    def has_variable(self, name: str) -> bool:
        return name in self.variables

    def __getitem__(self, name: str) -> Any:
        # Jinja falls back to item access for unknown attributes
        return self.variables[name]

    def __contains__(self, name: str) -> bool:
        return name in self.variables

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"{type(self).__name__}({self._key!r})"


T = TypeVar("T", bound=Entity)


class Collection(Generic[T]):
    """Ordered mapping from key to entity with unique keys.

    Iteration yields entities (not keys) in insertion order; ``replace``
    keeps the original position.
    """

    def __init__(self, entities: Iterable[T] = ()):
        self._items: dict[str, T] = {}
        for entity in entities:
            self.add(entity)

    def add(self, entity: T) -> T:
        if entity.key in self._items:
            raise DuplicateKeyError(entity.key)
        self._items[entity.key] = entity
        return entity

    def replace(self, key: str, entity: T) -> T:
        if key not in self._items:
            raise NotFoundError(key)
        if entity.key != key:
            raise ValueError(f"Cannot replace '{key}' with entity keyed '{entity.key}'")
        self._items[key] = entity
        return entity

    def get(self, key: str) -> T:
        try:
            return self._items[key]
        except KeyError:
            raise NotFoundError(key) from None

    def has(self, key: str) -> bool:
        return key in self._items

    def keys(self) -> list[str]:
        return list(self._items)

    def items(self) -> list[tuple[str, T]]:
        return list(self._items.items())

    def __iter__(self) -> Iterator[T]:
        # Snapshot so callers may add while iterating (virtual page synthesis)
        return iter(list(self._items.values()))

    def __len__(self) -> int:
        return len(self._items)

    def __contains__(self, key: object) -> bool:
        return key in self._items

    def __getitem__(self, key: str) -> T:
        return self.get(key)

    def __bool__(self) -> bool:
        return bool(self._items)

    def __repr__(self) -> str:  # pragma: no cover - for debugging
        return f"{type(self).__name__}({len(self._items)} items)"
