"""Derive and cache the two-tier section navigation menu.

The menu is a view over the Sections Record: one primary item per section, in
record order, and one secondary item per direct child of that section. It is
stored as structured :class:`MenuItem` records under
:data:`~df12_sections._constants.MENUS_KEY`; CSS classes are never stored and
are applied by :class:`~df12_sections.rendering.NavigationRenderer` at render
time, so the same cached menu serves every page.

The builder is called by the registry whenever the record is rebuilt. The
section overview listing is built with :meth:`NavigationBuilder.overview`,
which reads the taxonomy directly on every call and never touches the cache.
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import typing as typ

from ._constants import MENUS_KEY
from .store import read_cached

if typ.TYPE_CHECKING:
    from .registry import SectionsRecord
    from .store import ConfigStore
    from .taxonomy import Category, TaxonomyGateway

logger = logging.getLogger(__name__)

MenuType = typ.Literal["primary", "secondary"]
MENU_TYPES: tuple[MenuType, ...] = ("primary", "secondary")


@dc.dataclass(slots=True)
class MenuItem:
    """A navigable link to one category.

    Attributes
    ----------
    kind : MenuType
        ``"primary"`` for sections, ``"secondary"`` for their children.
    category_id : int
        Category the item links to.
    slug : str
        Slug of that category.
    label : str
        Display name, used for the anchor text and title.
    href : str
        Permalink of the category.
    classes : list[str]
        Classes applied to the list item; empty in cached menus.
    children : list[MenuItem]
        Secondary items beneath a primary item.
    """

    kind: MenuType
    category_id: int
    slug: str
    label: str
    href: str
    classes: list[str] = dc.field(default_factory=list)
    children: list[MenuItem] = dc.field(default_factory=list)

    def decorated(self, classes: cabc.Iterable[str]) -> MenuItem:
        """Return a copy carrying ``classes``; children are not copied."""
        return dc.replace(self, classes=list(classes), children=[])

    def to_payload(self) -> dict[str, typ.Any]:
        """Return the item as a JSON-compatible mapping (without children)."""
        return {
            "kind": self.kind,
            "id": self.category_id,
            "slug": self.slug,
            "label": self.label,
            "href": self.href,
        }

    @classmethod
    def from_payload(cls, payload: cabc.Mapping[str, typ.Any]) -> MenuItem:
        """Rebuild an item from :meth:`to_payload` output."""
        kind = payload["kind"]
        if kind not in MENU_TYPES:
            msg = f"Unknown menu item kind {kind!r}."
            raise ValueError(msg)
        return cls(
            kind=kind,
            category_id=int(payload["id"]),
            slug=str(payload["slug"]),
            label=str(payload["label"]),
            href=str(payload["href"]),
        )


@dc.dataclass(slots=True)
class Menu:
    """Primary section items keyed by section slug, each with its children."""

    primary: dict[str, MenuItem] = dc.field(default_factory=dict)

    @property
    def secondary(self) -> dict[str, list[MenuItem]]:
        """Return the children of every section, keyed by section slug."""
        return {slug: list(item.children) for slug, item in self.primary.items()}

    def items(self, menu_type: MenuType, section_id: int | None = None) -> list[MenuItem]:
        """Return the primary items, or the secondary items of section ``section_id``."""
        if menu_type == "primary":
            return list(self.primary.values())
        for section in self.primary.values():
            if section.category_id == section_id:
                return list(section.children)
        return []

    def to_payload(self) -> dict[str, typ.Any]:
        """Return the persisted ``{"primary": ..., "secondary": ...}`` layout."""
        return {
            "primary": {slug: item.to_payload() for slug, item in self.primary.items()},
            "secondary": {
                slug: [child.to_payload() for child in item.children]
                for slug, item in self.primary.items()
                if item.children
            },
        }

    @classmethod
    def from_payload(cls, payload: object) -> Menu | None:
        """Rebuild a menu from :meth:`to_payload` output, or None if unusable."""
        if not isinstance(payload, cabc.Mapping):
            return None
        try:
            primary = {
                str(slug): MenuItem.from_payload(item)
                for slug, item in payload["primary"].items()
            }
            for slug, children in (payload.get("secondary") or {}).items():
                if slug in primary:
                    primary[slug].children = [
                        MenuItem.from_payload(child) for child in children
                    ]
        except (KeyError, TypeError, ValueError, AttributeError):
            return None
        return cls(primary=primary)


class NavigationBuilder:
    """Build section menus from the taxonomy and cache them in the store."""

    def __init__(self, taxonomy: TaxonomyGateway, store: ConfigStore) -> None:
        self.taxonomy = taxonomy
        self.store = store

    def build(self, record: SectionsRecord) -> Menu:
        """Build the menu for ``record`` and persist it, replacing any cache."""
        menu = Menu(primary={item.slug: item for item in self.overview(record)})
        self.store.set(MENUS_KEY, menu.to_payload())
        return menu

    def load(self, record: SectionsRecord) -> Menu:
        """Return the cached menu, building it when the cache is empty or unreadable."""
        cached = Menu.from_payload(read_cached(self.store, MENUS_KEY))
        if cached is None:
            return self.build(record)
        return cached

    def overview(self, record: SectionsRecord) -> list[MenuItem]:
        """Return every section with its direct children, read fresh from the taxonomy."""
        sections: list[MenuItem] = []
        for section_id in record.ids:
            category = self.taxonomy.category(section_id)
            if category is None:
                logger.warning(
                    "Section %s no longer resolves to a category; omitting it.",
                    section_id,
                )
                continue
            item = self._item(category, "primary")
            item.slug = record.slugs.get(section_id, category.slug)
            item.children = [
                self._item(child, "secondary")
                for child in self.taxonomy.children_of(section_id)
            ]
            sections.append(item)
        return sections

    def _item(self, category: Category, kind: MenuType) -> MenuItem:
        return MenuItem(
            kind=kind,
            category_id=category.id,
            slug=category.slug,
            label=category.name,
            href=self.taxonomy.link_for(category),
        )


__all__ = ["MENU_TYPES", "Menu", "MenuItem", "MenuType", "NavigationBuilder"]
