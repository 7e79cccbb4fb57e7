"""Configuration for Trellis.

Options come from three layers, later ones winning: DEFAULT_CONFIG, the
optional ``trellis.yaml`` at the source root, and options passed in code or
on the command line.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from .utils import deep_merge

CONFIG_FILENAME = "trellis.yaml"

DEFAULT_CONFIG: dict[str, Any] = {
    "site": {
        "title": "Trellis",
        "baseline": "A Trellis website",
        "baseurl": "http://localhost:8000/",
        "description": "",
        "taxonomies": {
            "tags": "tag",
            "categories": "category",
        },
    },
    "content": {"dir": "content", "ext": "md"},
    "frontmatter": {"format": "yaml"},
    "body": {"format": "md"},
    "static": {"dir": "static"},
    "layouts": {"dir": "layouts", "ext": "html"},
    "output": {"dir": "_site", "filename": "index.html"},
    "themes": {"dir": "themes"},
    "build": {"workers": 1, "clean": True, "strict": False},
    "virtual": {"not_found": False},
}


def load_config(
    source_dir: Path, overrides: Mapping[str, Any] | None = None
) -> dict[str, Any]:
    """Load options for a site.

    Args:
        source_dir: Site source directory.
        overrides: Options that win over the file and the defaults.

    Returns:
        Merged options.

    Raises:
        yaml.YAMLError: If trellis.yaml is not valid YAML.
    """
    config = deep_merge(DEFAULT_CONFIG, {})
    config_path = source_dir / CONFIG_FILENAME
    if config_path.exists():
        with open(config_path, encoding="utf-8") as f:
            loaded = yaml.safe_load(f) or {}
        if isinstance(loaded, dict):
            config = deep_merge(config, loaded)
    if overrides:
        config = deep_merge(config, overrides)
    return config


@dataclass(frozen=True)
class BuildContext:
    """Resolved, read-only settings threaded through every build stage.

    Attributes:
        source_dir: Site source directory.
        dest_dir: Directory receiving the output directory.
        options: Merged options.
    """

    source_dir: Path
    dest_dir: Path
    options: Mapping[str, Any]

    @classmethod
    def create(
        cls,
        source_dir: Path | str | None = None,
        dest_dir: Path | str | None = None,
        options: Mapping[str, Any] | None = None,
    ) -> BuildContext:
        """Resolve directories and options.

        Args:
            source_dir: Site source directory, defaults to the working directory.
            dest_dir: Destination, defaults to the source directory.
            options: Option overrides.
        """
        source = Path(source_dir) if source_dir is not None else Path.cwd()
        dest = Path(dest_dir) if dest_dir is not None else source
        return cls(source_dir=source, dest_dir=dest, options=load_config(source, options))

    def option(self, group: str, name: str, default: Any = None) -> Any:
        return self.options.get(group, {}).get(name, default)

    @property
    def theme(self) -> str | None:
        return self.options.get("theme") or None

    @property
    def site_options(self) -> dict[str, Any]:
        return dict(self.options.get("site", {}))

    @property
    def taxonomies(self) -> dict[str, str]:
        return dict(self.site_options.get("taxonomies") or {})

    @property
    def content_dir(self) -> Path:
        return self.source_dir / self.option("content", "dir")

    @property
    def layouts_dir(self) -> Path:
        return self.source_dir / self.option("layouts", "dir")

    @property
    def themes_dir(self) -> Path:
        return self.source_dir / self.option("themes", "dir")

    @property
    def static_dir(self) -> Path:
        return self.source_dir / self.option("static", "dir")

    @property
    def theme_static_dir(self) -> Path | None:
        if self.theme is None:
            return None
        return self.themes_dir / self.theme / "static"

    @property
    def output_dir(self) -> Path:
        return self.dest_dir / self.option("output", "dir")
