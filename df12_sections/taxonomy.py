"""Read-only access to the host's category graph.

The section engine never owns categories. It consumes them through the
:class:`TaxonomyGateway` protocol, which a host adapter implements on top of its
own data model. :class:`StaticTaxonomy` is the reference adapter used by the
CLI and the test-suite; it holds an immutable forest of :class:`Category`
records loaded from ``config/sections.yaml``.

Example
-------
>>> from df12_sections.taxonomy import Category, StaticTaxonomy
>>> taxonomy = StaticTaxonomy(
...     [Category(1, "News", "news"), Category(11, "Politics", "politics", parent=1)]
... )
>>> [child.slug for child in taxonomy.children_of(1)]
['politics']
>>> taxonomy.link_for(taxonomy.category(11))
'/category/news/politics/'
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

if typ.TYPE_CHECKING:
    import collections.abc as cabc


@dc.dataclass(frozen=True, slots=True)
class Category:
    """A category node supplied by the host taxonomy.

    Attributes
    ----------
    id : int
        Host identifier; always positive.
    name : str
        Display name used for link text and titles.
    slug : str
        URL-safe identifier, also used to build section CSS classes.
    parent : int
        Identifier of the parent category, ``0`` for top-level categories.
    link : str | None
        Explicit permalink; adapters derive one when ``None``.
    """

    id: int
    name: str
    slug: str
    parent: int = 0
    link: str | None = None

    @property
    def is_top_level(self) -> bool:
        """Return True when the category has no parent."""
        return not self.parent


class TaxonomyGateway(typ.Protocol):
    """Lookups the engine needs from the host category graph."""

    def category(self, category_id: int) -> Category | None:
        """Return the category for ``category_id`` or None when unknown."""
        ...

    def children_of(self, category_id: int) -> list[Category]:
        """Return the direct children of ``category_id`` (empty when none)."""
        ...

    def link_for(self, category: Category) -> str:
        """Return the permalink for ``category``."""
        ...


class StaticTaxonomy:
    """In-memory taxonomy built from a fixed collection of categories.

    Children are returned in the order the categories were supplied. Links
    default to ``/category/<ancestor slugs>/<slug>/`` unless a category carries
    an explicit ``link``.
    """

    def __init__(
        self, categories: cabc.Iterable[Category], *, base_path: str = "/category"
    ) -> None:
        self._categories: dict[int, Category] = {}
        self._children: dict[int, list[int]] = {}
        self.base_path = base_path.rstrip("/")
        for category in categories:
            if category.id in self._categories:
                msg = f"Duplicate category id {category.id} in taxonomy."
                raise ValueError(msg)
            self._categories[category.id] = category
        for category in self._categories.values():
            if category.parent:
                self._children.setdefault(category.parent, []).append(category.id)

    def __len__(self) -> int:
        return len(self._categories)

    def __iter__(self) -> cabc.Iterator[Category]:
        return iter(self._categories.values())

    def category(self, category_id: int) -> Category | None:
        """Return the category for ``category_id`` or None when unknown."""
        return self._categories.get(category_id)

    def children_of(self, category_id: int) -> list[Category]:
        """Return the direct children of ``category_id`` in insertion order."""
        return [self._categories[child] for child in self._children.get(category_id, [])]

    def link_for(self, category: Category) -> str:
        """Return the explicit link or a slug path derived from the ancestry."""
        if category.link:
            return category.link
        slugs = [category.slug]
        seen = {category.id}
        parent = self._categories.get(category.parent)
        while parent is not None and parent.id not in seen:
            seen.add(parent.id)
            slugs.append(parent.slug)
            parent = self._categories.get(parent.parent)
        path = "/".join(reversed(slugs))
        return f"{self.base_path}/{path}/"


__all__ = ["Category", "StaticTaxonomy", "TaxonomyGateway"]
