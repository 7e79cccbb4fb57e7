"""Content model and processing for Trellis.

This module defines the Page entity and the components that discover
content files, materialize them into pages and convert their front matter
and body.

Key classes:
- Page: Entity with derived identity, node type and variable bag.
- NodeType / PageNode / HomepageNode / ListNode / TaxonomyNode / TermsNode:
  Closed set of node kinds, each carrying the data its layouts need.
- FileContentLoader: Discovers content files.
- PageBuilder: Builds file-backed pages from discovered files.
- PageConverter: Merges front matter and renders bodies.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, ClassVar

from .collections import Collection, Entity
from .extractors import FrontmatterConverterRegistry, default_frontmatter_registry, split_frontmatter
from .renderers import BodyConverterRegistry, default_body_registry
from .utils import collapse_slashes, urlize

if TYPE_CHECKING:
    from .taxonomy import Term

logger = logging.getLogger(__name__)


class NodeType(str, Enum):
    """Structural category of a page."""

    PAGE = "page"
    HOMEPAGE = "homepage"
    LIST = "list"
    TAXONOMY = "taxonomy"
    TERMS = "terms"


@dataclass(frozen=True)
class PageNode:
    node_type: ClassVar[NodeType] = NodeType.PAGE

    def template_vars(self) -> dict[str, Any]:
        return {}


@dataclass(frozen=True)
class HomepageNode:
    node_type: ClassVar[NodeType] = NodeType.HOMEPAGE

    def template_vars(self) -> dict[str, Any]:
        return {}


@dataclass(frozen=True)
class ListNode:
    """Section index listing every page of one section."""

    node_type: ClassVar[NodeType] = NodeType.LIST
    pages: list[Page] = field(default_factory=list)

    def template_vars(self) -> dict[str, Any]:
        return {"list": self.pages}


@dataclass(frozen=True)
class TaxonomyNode:
    """Listing of the pages tagged with one term."""

    node_type: ClassVar[NodeType] = NodeType.TAXONOMY
    singular: str | None = None
    pages: Collection[Page] = field(default_factory=Collection)

    def template_vars(self) -> dict[str, Any]:
        return {"singular": self.singular, "list": self.pages}


@dataclass(frozen=True)
class TermsNode:
    """Index of every term of one vocabulary."""

    node_type: ClassVar[NodeType] = NodeType.TERMS
    plural: str = ""
    singular: str | None = None
    terms: Collection[Term] = field(default_factory=Collection)

    def template_vars(self) -> dict[str, Any]:
        return {"plural": self.plural, "singular": self.singular, "terms": self.terms}


Node = PageNode | HomepageNode | ListNode | TaxonomyNode | TermsNode


class Page(Entity):
    """A site page, either backed by a content file or synthesized.

    Attributes:
        pathname: Slug used for the output URL.
        path: Parent directory slug.
        name: Leaf slug.
        title: Human-readable title.
        layout: Explicit layout override.
        virtual: True when not backed by a content file.
        source: Path to the content file, if any.
        frontmatter: Raw front matter text.
        body: Raw body text.
        html: Rendered body HTML.
    """

    def __init__(
        self,
        id: str,
        *,
        pathname: str | None = None,
        path: str = "",
        name: str = "",
        title: str = "Default title",
        section: str | None = None,
        layout: str | None = None,
        node: Node | None = None,
        virtual: bool = True,
        source: Path | None = None,
        frontmatter: str = "",
        body: str = "",
        variables: dict[str, Any] | None = None,
    ):
        super().__init__(id, variables)
        self.pathname = id if pathname is None else pathname
        self.path = path
        self.name = name
        self.title = title
        self._section = section
        self.layout = layout
        self.virtual = virtual
        self.source = source
        self.frontmatter = frontmatter
        self.body = body
        self.html = ""
        self.node: Node = PageNode()
        if node is not None:
            self.set_node(node)

    @classmethod
    def from_file(cls, source: Path, content_dir: Path) -> Page:
        """Create a file-backed page with identity derived from its path.

        For ``Blog/Post 1.md`` the page gets ``id == pathname == "blog/post-1"``,
        ``path == "blog"``, ``name == "post-1"``, ``section == "blog"`` and the
        raw basename ``Post 1`` as default title.

        Args:
            source: Path to the content file.
            content_dir: Content root the identity is relative to.

        Returns:
            A non-virtual Page without front matter or body loaded.
        """
        rel = source.relative_to(content_dir)
        file_path = "" if rel.parent == Path(".") else rel.parent.as_posix()
        basename = rel.name[: -len(rel.suffix)] if rel.suffix else rel.name
        file_id = f"{file_path}/{basename}" if file_path else basename
        path = urlize(file_path)
        page_id = urlize(file_id)
        return cls(
            page_id,
            pathname=page_id,
            path=path,
            name=urlize(basename),
            title=basename,
            section=path.split("/")[0],
            virtual=False,
            source=source,
        )

    @property
    def id(self) -> str:
        return self.key

    @property
    def section(self) -> str:
        """Top-level path segment, derived from ``path`` when unset."""
        if not self._section and self.path:
            self._section = self.path.split("/")[0]
        return self._section or ""

    @section.setter
    def section(self, value: str | None) -> None:
        self._section = value

    @property
    def node_type(self) -> NodeType:
        return self.node.node_type

    @property
    def is_virtual(self) -> bool:
        return self.virtual

    @property
    def content(self) -> str:
        return self.html

    @property
    def url(self) -> str:
        return collapse_slashes(f"/{self.pathname}/")

    def set_node(self, node: Node) -> Page:
        """Set the node kind and expose its data to templates as variables."""
        self.node = node
        self.variables.update(node.template_vars())
        return self


class FileContentLoader:
    """Discovers content files under a directory.

    Attributes:
        content_dir: Directory containing content files.
        ext: Content file extension, without the dot.
    """

    def __init__(self, content_dir: Path, ext: str = "md"):
        self.content_dir = content_dir
        self.ext = ext.lstrip(".")

    def iter_files(self) -> list[Path]:
        """Return every content file, sorted by relative path.

        Raises:
            FileNotFoundError: If the content directory does not exist.
        """
        if not self.content_dir.is_dir():
            raise FileNotFoundError(f"Content directory not found: {self.content_dir}")
        return sorted(
            path for path in self.content_dir.rglob(f"*.{self.ext}") if path.is_file()
        )


class PageBuilder:
    """Builds file-backed Page objects from content files.

    Reads the file and splits it into raw front matter and body; no
    conversion happens here.
    """

    def __init__(self, content_dir: Path):
        self.content_dir = content_dir

    def build(self, path: Path) -> Page:
        page = Page.from_file(path, self.content_dir)
        page.frontmatter, page.body = split_frontmatter(path.read_text(encoding="utf-8"))
        logger.debug("Read %s as page '%s'", path, page.id)
        return page


class PageConverter:
    """Converts a page's front matter into variables and its body into HTML.

    ``title`` and ``section`` are promoted out of the variable bag into
    first-class fields; ``layout`` sets the override and stays visible as a
    variable.
    """

    def __init__(
        self,
        frontmatter_format: str = "yaml",
        body_format: str = "md",
        frontmatter_registry: FrontmatterConverterRegistry | None = None,
        body_registry: BodyConverterRegistry | None = None,
    ):
        self.frontmatter_format = frontmatter_format
        self.body_format = body_format
        self.frontmatter_registry = frontmatter_registry or default_frontmatter_registry
        self.body_registry = body_registry or default_body_registry

    def convert(self, page: Page) -> Page:
        variables = self.frontmatter_registry.convert(
            page.frontmatter, self.frontmatter_format, source=page.id
        )
        title = variables.pop("title", None)
        if title is not None:
            page.title = str(title)
        section = variables.pop("section", None)
        if section is not None:
            page.section = str(section)
        if variables.get("layout"):
            page.layout = str(variables["layout"])
        page.html = self.body_registry.convert(page.body, self.body_format)
        page.variables.update(variables)
        return page
