"""Site building functionality for Trellis.

The Builder runs a fixed sequence of stages, each one completing for every
page before the next begins:

    locate -> materialize -> convert -> virtual pages -> taxonomies ->
    taxonomy pages -> menus -> site variables -> render -> copy static

Key items:
- Builder: The pipeline orchestrator.
- BuildResult: What a build produced.
- build_site: Build a site in one call.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any

from jinja2 import TemplateSyntaxError

from .assets import StaticMirror
from .collections import Collection
from .config import BuildContext
from .content import (
    FileContentLoader,
    HomepageNode,
    ListNode,
    Page,
    PageBuilder,
    PageConverter,
    TaxonomyNode,
    TermsNode,
)
from .errors import BuildError, LayoutNotFoundError
from .layouts import LayoutFinder
from .menus import Menus, build_menus
from .plugins import LocateContentParams, Plugin, PluginRegistry
from .taxonomy import Taxonomies, build_taxonomies
from .templates import TemplateEngine
from .utils import collapse_slashes, ensure_clean_dir, urlize

logger = logging.getLogger(__name__)

SECTION_WEIGHT_START = 100
SECTION_WEIGHT_STEP = 10


@dataclass
class BuildResult:
    """Result of a site build.

    Attributes:
        pages: Every page, file-backed and virtual, in collection order.
        menus: Aggregated menus.
        taxonomies: Aggregated vocabularies.
        site: Site variables handed to templates.
        output_dir: Directory the site was written to.
        written: Output files, in page order.
    """

    pages: Collection[Page]
    menus: Menus
    taxonomies: Taxonomies
    site: Mapping[str, Any]
    output_dir: Path
    written: list[Path] = field(default_factory=list)


class Builder:
    """Builds a site from a source directory.

    Attributes:
        context: Resolved directories and options.
        plugins: Registered plugins.
        layout_finder: Resolves layouts across the site and theme roots.
    """

    def __init__(
        self,
        source_dir: Path | str | None = None,
        dest_dir: Path | str | None = None,
        options: Mapping[str, Any] | None = None,
    ):
        """Initialize the builder.

        Args:
            source_dir: Site source directory, defaults to the working directory.
            dest_dir: Destination directory, defaults to the source directory.
            options: Option overrides merged over trellis.yaml and the defaults.
        """
        self.context = BuildContext.create(source_dir, dest_dir, options)
        self.plugins = PluginRegistry()
        self.layout_finder = LayoutFinder(
            self.context.layouts_dir,
            self.context.themes_dir,
            self.context.theme,
            ext=self.context.option("layouts", "ext", "html"),
        )
        self.converter = PageConverter(
            frontmatter_format=self.context.option("frontmatter", "format", "yaml"),
            body_format=self.context.option("body", "format", "md"),
        )

    def add_plugin(self, plugin: Plugin, priority: int | None = None) -> Builder:
        self.plugins.add(plugin, priority)
        return self

    def remove_plugin(self, plugin: Plugin) -> Builder:
        self.plugins.remove(plugin)
        return self

    def has_plugin(self, plugin: Plugin) -> bool:
        return self.plugins.has(plugin)

    def build(self) -> BuildResult:
        """Build the whole site.

        Returns:
            BuildResult describing the built site.

        Raises:
            TrellisError: If any stage fails; the output may be partial.
        """
        located = self.locate_content()
        pages = self.materialize_pages(located)
        self.convert_pages(pages)
        self.add_virtual_pages(pages)
        taxonomies = self.build_taxonomies(pages)
        self.add_taxonomy_pages(pages, taxonomies)
        menus = self.build_menus(pages)
        site = self.site_vars(pages, menus, taxonomies)
        written = self.render_pages(pages, site)
        self.copy_static()
        logger.info("Built %d pages into %s", len(written), self.context.output_dir)
        return BuildResult(
            pages=pages,
            menus=menus,
            taxonomies=taxonomies,
            site=site,
            output_dir=self.context.output_dir,
            written=written,
        )

    def locate_content(self) -> LocateContentParams:
        """Locate content files, notifying plugins around the stage.

        Failures are dispatched to ``on_locate_content_error`` hooks and
        then re-raised.
        """
        params = LocateContentParams(
            dir=self.context.content_dir,
            ext=str(self.context.option("content", "ext", "md")),
        )
        try:
            self.plugins.before_locate_content(params)
            params.files = FileContentLoader(params.dir, params.ext).iter_files()
            self.plugins.after_locate_content(params)
        except Exception as exc:
            params.error = exc
            self.plugins.on_locate_content_error(params)
            raise
        logger.debug("Located %d content files in %s", len(params.files), params.dir)
        return params

    def materialize_pages(self, located: LocateContentParams) -> Collection[Page]:
        """Create one page per located file.

        Raises:
            DuplicateKeyError: If two files urlize to the same page ID.
        """
        builder = PageBuilder(located.dir)
        pages: Collection[Page] = Collection()
        for path in located.files:
            pages.add(builder.build(path))
        return pages

    def convert_pages(self, pages: Collection[Page]) -> None:
        """Merge front matter into variables and render bodies to HTML."""
        for page in pages:
            if page.virtual:
                continue
            pages.replace(page.id, self.converter.convert(page))

    def add_virtual_pages(self, pages: Collection[Page]) -> None:
        self.add_homepage(pages)
        if self.context.option("virtual", "not_found", False):
            self.add_not_found_page(pages)
        self.add_section_pages(pages)

    def add_homepage(self, pages: Collection[Page]) -> None:
        """Add a homepage unless a content file provides ``index``."""
        if pages.has("index"):
            return
        pages.add(
            Page(
                "homepage",
                pathname="",
                title="Home",
                node=HomepageNode(),
                variables={"menu": {"main": {"weight": 1}}},
            )
        )

    def add_not_found_page(self, pages: Collection[Page]) -> None:
        if pages.has("404"):
            return
        pages.add(Page("404", title="Page not found!", layout="404"))

    def add_section_pages(self, pages: Collection[Page]) -> None:
        """Add a list page for each section lacking its own index.

        Sections are visited in first-seen order; their menu weights start
        at 100 and grow by 10.
        """
        sections: dict[str, list[Page]] = {}
        for page in pages:
            if page.section:
                sections.setdefault(page.section, []).append(page)
        weight = SECTION_WEIGHT_START
        for section, members in sections.items():
            page_id = f"{section}/index"
            if pages.has(page_id):
                continue
            pages.add(
                Page(
                    page_id,
                    pathname=section,
                    title=section[:1].upper() + section[1:],
                    section=section,
                    node=ListNode(pages=members),
                    variables={"menu": {"main": {"weight": weight}}},
                )
            )
            weight += SECTION_WEIGHT_STEP

    def build_taxonomies(self, pages: Collection[Page]) -> Taxonomies:
        return build_taxonomies(pages, self.context.taxonomies)

    def add_taxonomy_pages(self, pages: Collection[Page], taxonomies: Taxonomies) -> None:
        """Add a page per term and, when a layout exists, a page per vocabulary."""
        for vocabulary in taxonomies:
            for term in vocabulary.terms:
                slug = urlize(f"{vocabulary.plural}{term.name}")
                _ensure_free(pages, slug, f"term '{term.name}' of '{vocabulary.plural}'")
                pages.add(
                    Page(
                        slug,
                        pathname=slug,
                        title=term.name,
                        node=TaxonomyNode(singular=vocabulary.singular, pages=term.pages),
                    )
                )
            slug = vocabulary.plural.lower()
            terms_page = Page(
                slug,
                pathname=slug,
                title=vocabulary.plural,
                node=TermsNode(
                    plural=vocabulary.plural,
                    singular=vocabulary.singular,
                    terms=vocabulary.terms,
                ),
            )
            try:
                self.layout_finder.find(terms_page)
            except LayoutNotFoundError as exc:
                logger.warning("%s Skipping '%s' terms page.", exc, slug)
                continue
            _ensure_free(pages, slug, f"terms page of '{vocabulary.plural}'")
            pages.add(terms_page)

    def build_menus(self, pages: Collection[Page]) -> Menus:
        return build_menus(pages)

    def site_vars(
        self, pages: Collection[Page], menus: Menus, taxonomies: Taxonomies
    ) -> Mapping[str, Any]:
        """Return the read-only ``site`` variables for templates."""
        site = self.context.site_options
        site.update({"menus": menus, "pages": pages, "taxonomies": taxonomies})
        return MappingProxyType(site)

    def destination(self, page: Page) -> Path:
        """Return the output file for a page."""
        filename = self.context.option("output", "filename", "index.html")
        if page.id == "404":
            rel = "404.html"
        elif page.name == "index":
            rel = f"{page.path}/{filename}"
        else:
            rel = f"{page.pathname}/{filename}"
        return self.context.output_dir / collapse_slashes(rel).lstrip("/")

    def render_pages(self, pages: Collection[Page], site: Mapping[str, Any]) -> list[Path]:
        """Render every page to its output file.

        A failing page does not stop its siblings; all failures are
        reported together once every page has been attempted.

        Raises:
            ThemeNotFoundError: If the configured theme is missing.
            BuildError: If outputs collide or any page fails to render.
        """
        engine = TemplateEngine(
            self.layout_finder.search_roots,
            site,
            strict=bool(self.context.option("build", "strict", False)),
        )
        targets = self._plan_outputs(pages)
        output_dir = self.context.output_dir
        if self.context.option("build", "clean", True):
            ensure_clean_dir(output_dir)
        else:
            output_dir.mkdir(parents=True, exist_ok=True)

        ordered = list(pages)
        workers = max(1, int(self.context.option("build", "workers", 1) or 1))
        if workers == 1:
            outcomes = [self._render_page(engine, page, targets[page.id]) for page in ordered]
        else:
            with ThreadPoolExecutor(max_workers=workers) as executor:
                futures = [
                    executor.submit(self._render_page, engine, page, targets[page.id])
                    for page in ordered
                ]
                outcomes = [future.result() for future in futures]

        failures = [(page.id, error) for page, error in zip(ordered, outcomes) if error]
        if failures:
            raise _failures_to_error(failures)
        return [targets[page.id] for page in ordered]

    def _plan_outputs(self, pages: Iterable[Page]) -> dict[str, Path]:
        targets: dict[str, Path] = {}
        owners: dict[Path, str] = {}
        for page in pages:
            target = self.destination(page)
            if target in owners:
                raise BuildError(
                    page.id,
                    f"Output '{target}' is already written by page '{owners[target]}'",
                )
            owners[target] = page.id
            targets[page.id] = target
        return targets

    def _render_page(
        self, engine: TemplateEngine, page: Page, target: Path
    ) -> BuildError | None:
        try:
            rendered = engine.render(self.layout_finder.find(page), page)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(rendered, encoding="utf-8")
        except TemplateSyntaxError as exc:
            return BuildError(
                page.id,
                f"Template syntax error in {exc.name} on line {exc.lineno}: {exc.message}",
                exc,
            )
        except Exception as exc:
            return BuildError(page.id, _format_error_message(exc), exc)
        logger.info("%s", target)
        return None

    def copy_static(self) -> list[Path]:
        """Mirror theme then site static files into the output directory."""
        return StaticMirror(
            [self.context.theme_static_dir, self.context.static_dir],
            self.context.output_dir,
        ).run()


def _ensure_free(pages: Collection[Page], page_id: str, owner: str) -> None:
    if pages.has(page_id):
        raise BuildError(
            page_id,
            f"Page ID '{page_id}' for the {owner} is already taken by another page",
        )


def _format_error_message(exc: Exception) -> str:
    """Format an exception into a user-friendly error message.

    Args:
        exc: The exception to format.

    Returns:
        A human-readable error message.
    """
    error_type = type(exc).__name__
    error_msg = str(exc)

    if error_type == "UndefinedError":
        return f"Undefined variable: {error_msg}"
    if error_type == "TemplateNotFound":
        return f"Template not found: {error_msg}"
    if isinstance(exc, LayoutNotFoundError):
        return error_msg

    return f"{error_type}: {error_msg}"


def _failures_to_error(failures: list[tuple[str, BuildError]]) -> BuildError:
    if len(failures) == 1:
        return failures[0][1]
    first = failures[0][1]
    return BuildError(
        f"{len(failures)} pages",
        "; ".join(f"{page_id}: {error.message}" for page_id, error in failures),
        first.original_error,
        failures=[(page_id, error.message) for page_id, error in failures],
    )


def build_site(
    source_dir: Path | str | None = None,
    dest_dir: Path | str | None = None,
    options: Mapping[str, Any] | None = None,
    plugins: Iterable[Plugin] = (),
) -> BuildResult:
    """Build a site in one call.

    Args:
        source_dir: Site source directory.
        dest_dir: Destination directory.
        options: Option overrides.
        plugins: Plugins to register before building.

    Returns:
        BuildResult describing the built site.
    """
    builder = Builder(source_dir, dest_dir, options)
    for plugin in plugins:
        builder.add_plugin(plugin)
    return builder.build()
