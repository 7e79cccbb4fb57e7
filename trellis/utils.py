"""Utility functions for Trellis.

Key functions:
    urlize: Convert paths and names to URL-safe slugs.
    collapse_slashes: Remove redundant path separators.
    as_list: Coerce a scalar variable into a list.
    deep_merge: Recursively merge option mappings.
    ensure_clean_dir: Ensure a directory exists and is empty.
"""

from __future__ import annotations

import re
import shutil
import unicodedata
from collections.abc import Mapping
from pathlib import Path
from typing import Any

URLIZE_RE = re.compile(r"([^a-z0-9/]|-)+")
SLASHES_RE = re.compile(r"/+")


def urlize(value: str) -> str:
    """Convert a string into a lowercase, hyphen-separated URL path token.

    Slashes survive so relative paths keep their segments. Accented
    characters are transliterated to ASCII.

    Args:
        value: String to normalize.

    Returns:
        URL-safe slug.

    Examples:
        >>> urlize("Blog/Post 1")
        'blog/post-1'

        >>> urlize("tags" + "Café Culture")
        'tagscafe-culture'
    """
    normalized = unicodedata.normalize("NFKD", str(value))
    ascii_only = normalized.encode("ascii", "ignore").decode("ascii").lower()
    return URLIZE_RE.sub("-", ascii_only).strip("-")


def collapse_slashes(path: str) -> str:
    """Collapse runs of ``/`` into a single separator."""
    return SLASHES_RE.sub("/", path)


def as_list(value: Any) -> list[Any]:
    """Return value as a list, wrapping a bare scalar.

    Args:
        value: A list, tuple or scalar.

    Returns:
        A list (the original list object when value already is one).
    """
    if isinstance(value, list):
        return value
    if isinstance(value, tuple):
        return list(value)
    return [value]


def deep_merge(base: Mapping[str, Any], override: Mapping[str, Any]) -> dict[str, Any]:
    """Recursively merge override into a copy of base.

    Nested mappings merge key by key; every other value, lists included,
    replaces the base value.

    Args:
        base: Mapping providing defaults.
        override: Mapping whose values win.

    Returns:
        A new merged dictionary.
    """
    merged: dict[str, Any] = {
        key: deep_merge(value, {}) if isinstance(value, Mapping) else value
        for key, value in base.items()
    }
    for key, value in override.items():
        if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
            merged[key] = deep_merge(merged[key], value)
        elif isinstance(value, Mapping):
            merged[key] = deep_merge(value, {})
        else:
            merged[key] = value
    return merged


def ensure_clean_dir(path: Path) -> None:
    """Ensure a directory exists and is empty.

    If the directory exists, removes all contents. Creates the
    directory if it doesn't exist.

    Args:
        path: Directory path to clean or create.
    """
    if path.exists():
        shutil.rmtree(path)
    path.mkdir(parents=True, exist_ok=True)
