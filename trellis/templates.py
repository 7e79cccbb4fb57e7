"""Template rendering engine for Trellis.

This module uses Jinja2 to render a page with its resolved layout.
Templates see three variables: ``page`` (the page being rendered), ``site``
(site options plus menus, pages and taxonomies) and ``trellis`` (generator
metadata). ``content`` holds the page HTML, marked safe. The ``slug``
filter applies the same normalization as page IDs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from jinja2 import Environment, FileSystemLoader, StrictUndefined, Undefined, select_autoescape
from markupsafe import Markup

from . import __version__
from .content import Page
from .utils import urlize

GENERATOR_VARS = {
    "url": "https://pypi.org/project/trellis-ssg/",
    "version": __version__,
    "poweredby": f"Trellis v{__version__}",
}


class TemplateEngine:
    """Template rendering engine using Jinja2.

    The engine is read-only once constructed, so pages may render
    concurrently.

    Attributes:
        search_roots: Layout directories, highest priority first.
        site: Read-only site variables.
        env: Jinja2 environment.
    """

    def __init__(
        self,
        search_roots: Sequence[Path],
        site: Mapping[str, Any],
        strict: bool = False,
    ):
        """Initialize the template engine.

        Args:
            search_roots: Layout directories searched in order.
            site: Site variables exposed as ``site``.
            strict: Fail on undefined template variables.
        """
        self.search_roots = list(search_roots)
        self.site = site
        self.env = Environment(
            loader=FileSystemLoader([str(root) for root in self.search_roots]),
            autoescape=select_autoescape(["html", "xml"]),
            undefined=StrictUndefined if strict else Undefined,
            keep_trailing_newline=True,
        )
        self.env.globals["site"] = self.site
        self.env.globals["trellis"] = GENERATOR_VARS
        self.env.filters["slug"] = urlize

    def render(self, template: str, page: Page) -> str:
        """Render a page with a layout template.

        Args:
            template: Template path relative to a search root.
            page: Page to render.

        Returns:
            Rendered document.
        """
        return self.env.get_template(template).render(page=page, content=Markup(page.html))
