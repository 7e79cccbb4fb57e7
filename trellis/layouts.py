"""Layout resolution for Trellis.

A page's node type maps to an ordered list of candidate templates, most
specific first. The first candidate found in the site layouts directory,
then in the active theme's layouts directory, wins.

Key items:
- layout_candidates: Pure fallback chain for a page.
- LayoutFinder: Walks the search roots to pick the template.
"""

from __future__ import annotations

from functools import cached_property
from pathlib import Path

from .content import NodeType, Page, TaxonomyNode, TermsNode
from .errors import LayoutNotFoundError, ThemeNotFoundError


def layout_candidates(page: Page, ext: str = "html") -> list[str]:
    """Return the layout fallback chain for a page.

    | node type | candidates |
    |---|---|
    | homepage | ``index``, ``_default/list``, ``_default/page`` |
    | list | ``section/<section>``, ``_default/section``, ``_default/list`` |
    | taxonomy | ``taxonomy/<singular>``, ``_default/taxonomy``, ``_default/list`` |
    | terms | ``taxonomy/<singular>.terms``, ``_default/terms`` |
    | page | ``<section>/<layout>``, ``<section>/page`` or ``<layout>``, ``page``; then ``_default/page`` |

    Args:
        page: Page to resolve.
        ext: Template file extension appended to each candidate.

    Returns:
        Candidate template paths relative to a layouts root.
    """
    node_type = page.node_type
    section = page.section
    if node_type is NodeType.HOMEPAGE:
        names = ["index", "_default/list", "_default/page"]
    elif node_type is NodeType.LIST:
        names = ["_default/section", "_default/list"]
        if section:
            names.insert(0, f"section/{section}")
    elif node_type is NodeType.TAXONOMY:
        names = ["_default/taxonomy", "_default/list"]
        singular = page.node.singular if isinstance(page.node, TaxonomyNode) else None
        if singular:
            names.insert(0, f"taxonomy/{singular}")
    elif node_type is NodeType.TERMS:
        names = ["_default/terms"]
        singular = page.node.singular if isinstance(page.node, TermsNode) else None
        if singular:
            names.insert(0, f"taxonomy/{singular}.terms")
    else:
        if section:
            names = [f"{section}/page"]
            if page.layout:
                names.insert(0, f"{section}/{page.layout}")
        else:
            names = ["page"]
            if page.layout:
                names.insert(0, page.layout)
        names.append("_default/page")
    suffix = f".{ext}" if ext else ""
    return [f"{name}{suffix}" for name in names]


class LayoutFinder:
    """Finds the layout template for a page across the search roots.

    The theme root is validated lazily: a missing theme directory raises
    ThemeNotFoundError at the first lookup that needs it.

    Attributes:
        layouts_dir: Site layouts directory.
        themes_dir: Directory containing themes.
        theme: Active theme name, or None.
        ext: Template file extension.
    """

    def __init__(
        self,
        layouts_dir: Path,
        themes_dir: Path | None = None,
        theme: str | None = None,
        ext: str = "html",
    ):
        self.layouts_dir = layouts_dir
        self.themes_dir = themes_dir
        self.theme = theme or None
        self.ext = ext

    @cached_property
    def theme_layouts_dir(self) -> Path | None:
        """Layouts directory of the active theme, or None without a theme.

        Raises:
            ThemeNotFoundError: If the configured theme directory is missing.
        """
        if self.theme is None:
            return None
        if self.themes_dir is None or not (self.themes_dir / self.theme).is_dir():
            raise ThemeNotFoundError(self.theme, self.themes_dir)
        return self.themes_dir / self.theme / "layouts"

    @property
    def search_roots(self) -> list[Path]:
        """Search roots in priority order: site layouts, then theme layouts."""
        roots = [self.layouts_dir]
        if self.theme_layouts_dir is not None:
            roots.append(self.theme_layouts_dir)
        return roots

    def find(self, page: Page) -> str:
        """Return the first existing candidate template for a page.

        Args:
            page: Page to resolve.

        Returns:
            Template path relative to its layouts root.

        Raises:
            LayoutNotFoundError: If no candidate exists in any root.
            ThemeNotFoundError: If the configured theme is missing.
        """
        candidates = layout_candidates(page, self.ext)
        for candidate in candidates:
            if (self.layouts_dir / candidate).is_file():
                return candidate
        theme_root = self.theme_layouts_dir
        if theme_root is not None:
            for candidate in candidates:
                if (theme_root / candidate).is_file():
                    return candidate
        raise LayoutNotFoundError(page.id, candidates[-1], candidates)
