"""Static asset copying for Trellis.

Static files are mirrored into the output directory as-is: the active
theme's static directory first, then the site's own static directory so
site files override theme files of the same name.
"""

from __future__ import annotations

import logging
import shutil
from pathlib import Path

logger = logging.getLogger(__name__)


class StaticMirror:
    """Mirrors static directories into the output directory.

    Attributes:
        sources: Static directories, lowest priority first.
        output_dir: Directory receiving the files.
    """

    def __init__(self, sources: list[Path | None], output_dir: Path):
        self.sources = [source for source in sources if source is not None]
        self.output_dir = output_dir

    def run(self) -> list[Path]:
        """Copy every existing source tree, overwriting earlier copies.

        Returns:
            The source directories that were copied.
        """
        copied: list[Path] = []
        for source in self.sources:
            if not source.is_dir():
                continue
            logger.debug("Copying static files from %s", source)
            shutil.copytree(source, self.output_dir, dirs_exist_ok=True)
            copied.append(source)
        return copied
