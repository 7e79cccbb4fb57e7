"""Taxonomy aggregation for Trellis.

Taxonomies are two-level: a collection of vocabularies (``tags``,
``categories``), each holding terms, each holding the pages tagged with it.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .collections import Collection, Entity
from .content import Page
from .utils import as_list


class Term(Entity):
    """One value within a vocabulary, aggregating the pages that use it."""

    def __init__(self, term: str):
        super().__init__(term)
        self.pages: Collection[Page] = Collection()

    @property
    def name(self) -> str:
        return self.key

    def add_page(self, page: Page) -> None:
        if not self.pages.has(page.id):
            self.pages.add(page)

    def __iter__(self):
        return iter(self.pages)

    def __len__(self) -> int:
        return len(self.pages)


class Vocabulary(Entity):
    """A named taxonomy dimension holding its terms.

    Attributes:
        singular: Singular name used to pick layouts (``tag`` for ``tags``).
        terms: Collection of Term keyed by term text.
    """

    def __init__(self, plural: str, singular: str | None = None):
        super().__init__(plural)
        self.singular = singular
        self.terms: Collection[Term] = Collection()

    @property
    def plural(self) -> str:
        return self.key

    def term(self, name: str) -> Term:
        """Return the term, adding it first when absent."""
        if not self.terms.has(name):
            self.terms.add(Term(name))
        return self.terms.get(name)

    def __iter__(self):
        return iter(self.terms)

    def __len__(self) -> int:
        return len(self.terms)


class Taxonomies(Collection[Vocabulary]):
    """Collection of vocabularies."""


def build_taxonomies(pages: Iterable[Page], vocabularies: Mapping[str, str]) -> Taxonomies:
    """Aggregate pages into vocabularies and terms.

    A bare scalar value (``tags: python``) is coerced to a single-element
    list, and the page variable is rewritten to that list. Adding the same
    page to a term twice is a no-op.

    Args:
        pages: Converted pages, in collection order.
        vocabularies: Mapping of vocabulary plural to singular name.

    Returns:
        One Vocabulary per configured plural, terms in first-seen order.
    """
    taxonomies = Taxonomies(
        Vocabulary(plural, singular) for plural, singular in vocabularies.items()
    )
    for page in pages:
        for plural in vocabularies:
            value = page.get_variable(plural)
            if value is None:
                continue
            terms = as_list(value)
            if terms is not value:
                page.set_variable(plural, terms)
            vocabulary = taxonomies.get(plural)
            for term in terms:
                if term is None or term == "":
                    continue
                vocabulary.term(str(term)).add_page(page)
    return taxonomies
