"""Decide which section the page being rendered belongs to.

The host calls :meth:`CurrentSectionEvaluator.evaluate` once per page view with
a :class:`PageContext` built from its own request model. The first matching
rule wins:

1. A not-found page keeps the section already computed for this view. Some
   hosts fire their render hook several times for one 404 (browsers retrying
   missing assets), and the first answer must stand.
2. The front page belongs to the home section.
3. A category listing, or a single item, belongs to the section its category
   (the item's first category) ascends to, if that root is registered.
4. Everything else belongs to the fallback ``other`` section.

The result is kept until :meth:`CurrentSectionEvaluator.end_view` so later
calls for the same view (body classes, menus) agree with it.
"""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from ._constants import DEFAULT_CLASS_PREFIX, OTHER_SECTION_ID, OTHER_SECTION_SLUG

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .ancestry import AncestorResolver
    from .registry import SectionsRecord


@dc.dataclass(frozen=True, slots=True)
class PageContext:
    """Page-type predicates for one view, supplied by the host.

    Attributes
    ----------
    is_front_page : bool
        The view is the site front page or main index.
    is_not_found : bool
        The view is a 404 page.
    listing_category_id : int | None
        Category of a category listing view, None for other views.
    is_single_item : bool
        The view shows one content item.
    item_category_ids : tuple[int, ...]
        Categories assigned to that item, in assignment order.
    """

    is_front_page: bool = False
    is_not_found: bool = False
    listing_category_id: int | None = None
    is_single_item: bool = False
    item_category_ids: tuple[int, ...] = ()

    @property
    def is_taxonomy_listing(self) -> bool:
        """Return True for category listing views."""
        return self.listing_category_id is not None

    @property
    def subject_category_id(self) -> int | None:
        """Return the category that classifies this view, if any."""
        if self.is_taxonomy_listing:
            return self.listing_category_id
        if self.is_single_item and self.item_category_ids:
            return self.item_category_ids[0]
        return None

    @classmethod
    def front_page(cls) -> PageContext:
        return cls(is_front_page=True)

    @classmethod
    def not_found(cls) -> PageContext:
        return cls(is_not_found=True)

    @classmethod
    def listing(cls, category_id: int) -> PageContext:
        return cls(listing_category_id=category_id)

    @classmethod
    def single(cls, *category_ids: int) -> PageContext:
        return cls(is_single_item=True, item_category_ids=tuple(category_ids))

    @classmethod
    def other(cls) -> PageContext:
        return cls()


@dc.dataclass(frozen=True, slots=True)
class CurrentSection:
    """The section a view or category was classified into."""

    id: int
    slug: str

    @property
    def is_fallback(self) -> bool:
        """Return True when no registered section matched."""
        return self.id == OTHER_SECTION_ID


FALLBACK_SECTION = CurrentSection(OTHER_SECTION_ID, OTHER_SECTION_SLUG)


class CurrentSectionEvaluator:
    """Classify page views and categories against a :class:`SectionsRecord`."""

    def __init__(
        self,
        record: SectionsRecord,
        resolver: AncestorResolver,
        *,
        class_prefix: str = DEFAULT_CLASS_PREFIX,
    ) -> None:
        self.record = record
        self.resolver = resolver
        self.class_prefix = class_prefix
        self.evaluations = 0
        self._current: CurrentSection | None = None

    @property
    def current(self) -> CurrentSection | None:
        """Return the section computed for the current view, if any."""
        return self._current

    @property
    def home(self) -> CurrentSection:
        """Return the configured home section."""
        return CurrentSection(self.record.home_id, self.record.home_slug)

    def evaluate(self, context: PageContext) -> CurrentSection:
        """Classify the view described by ``context`` and remember the result.

        Parameters
        ----------
        context : PageContext
            Predicates for the page being rendered.

        Returns
        -------
        CurrentSection
            The matched section, the home section for the front page, or
            :data:`FALLBACK_SECTION` when nothing matched.
        """
        if context.is_not_found and self._current is not None:
            return self._current

        self.evaluations += 1
        if context.is_front_page:
            section = self.home
        elif context.subject_category_id is not None:
            section = self.section_of(context.subject_category_id)
        else:
            section = FALLBACK_SECTION
        self._current = section
        return section

    def end_view(self) -> None:
        """Forget the section of the finished view."""
        self._current = None

    def section_of(self, category_id: int) -> CurrentSection:
        """Return the registered section ``category_id`` belongs to.

        Categories that no longer exist, whose ancestry is cyclic, or whose
        root is not a registered section map to :data:`FALLBACK_SECTION`.
        """
        if self.resolver.taxonomy.category(category_id) is None:
            return FALLBACK_SECTION
        root = self.resolver.root_of(category_id)
        if root is None or root not in self.record:
            return FALLBACK_SECTION
        return CurrentSection(root, self.record.slugs[root])

    def section_class(self) -> str:
        """Return the ``<prefix><slug>`` class of the current view."""
        section = self._current or FALLBACK_SECTION
        return f"{self.class_prefix}{section.slug}"

    def body_classes(self, existing: cabc.Iterable[str] = ()) -> list[str]:
        """Return ``existing`` with the current section class appended."""
        classes = list(existing)
        classes.append(self.section_class())
        return classes


__all__ = [
    "FALLBACK_SECTION",
    "CurrentSection",
    "CurrentSectionEvaluator",
    "PageContext",
]
