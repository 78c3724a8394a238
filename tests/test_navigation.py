"""Tests for building, caching, and rendering the section menus.

Rendered markup is parsed with BeautifulSoup so assertions target elements
and attributes rather than whitespace.
"""

from __future__ import annotations

import typing as typ

import pytest
from bs4 import BeautifulSoup

from df12_sections._constants import MENUS_KEY
from df12_sections.evaluator import PageContext
from df12_sections.manager import SectionManager
from df12_sections.navigation import Menu, NavigationBuilder
from df12_sections.registry import SectionsRegistry
from df12_sections.store import ConfigStoreError
from df12_sections.taxonomy import Category, StaticTaxonomy

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from pytest_mock import MockerFixture

    from df12_sections.store import MemoryStore


def _items(html: str) -> list[typ.Any]:
    return BeautifulSoup(html, "html.parser").find_all("li")


def test_build_lists_sections_and_direct_children(
    taxonomy: StaticTaxonomy, store: MemoryStore
) -> None:
    """Primary items follow record order; secondary items are direct children only."""
    record = SectionsRegistry(taxonomy, store).configure([2, 1, 4])
    menu = NavigationBuilder(taxonomy, store).build(record)

    assert list(menu.primary) == ["sport", "news", "culture"], (
        f"unexpected primary order {list(menu.primary)!r}"
    )
    assert [item.slug for item in menu.secondary["news"]] == ["politics", "business"], (
        "expected only direct children of News"
    )
    assert menu.secondary["culture"] == [], "expected Culture to have no children"
    assert menu.primary["sport"].href == "/category/sport/", (
        f"unexpected href {menu.primary['sport'].href!r}"
    )
    assert store.get(MENUS_KEY) == menu.to_payload(), "expected the menu to be cached"


def test_load_serves_cached_menu(
    taxonomy: StaticTaxonomy, store: MemoryStore, mocker: MockerFixture
) -> None:
    """A cached menu is returned without consulting the taxonomy."""
    record = SectionsRegistry(taxonomy, store).configure([1, 2])
    builder = NavigationBuilder(taxonomy, store)
    built = builder.build(record)
    spy = mocker.spy(taxonomy, "children_of")

    loaded = builder.load(record)

    assert loaded == built, "expected the cached menu to match the built one"
    assert spy.call_count == 0, "expected no taxonomy lookups for a cached menu"


def test_load_rebuilds_missing_menu(
    taxonomy: StaticTaxonomy, store: MemoryStore
) -> None:
    """An absent menu cache is not an error; it is rebuilt."""
    record = SectionsRegistry(taxonomy, store).configure([1, 2])
    menu = NavigationBuilder(taxonomy, store).load(record)
    assert list(menu.primary) == ["news", "sport"], "expected the menu to be rebuilt"
    assert Menu.from_payload(store.get(MENUS_KEY)) == menu, (
        "expected the rebuilt menu to be cached"
    )


def test_primary_menu_marks_current_section(manager: SectionManager) -> None:
    """The current section gets the marker class; others get hover variants."""
    manager.evaluate(PageContext.listing(21))
    items = _items(manager.render("primary", ["nav-item"]))

    assert [li.a["title"] for li in items] == ["News", "Sport", "Culture"], (
        "expected one item per section in order"
    )
    assert items[0]["class"] == ["nav-item", "section-news-background-hover"], (
        f"unexpected News classes {items[0]['class']!r}"
    )
    assert items[1]["class"] == [
        "nav-item",
        "current-section-menu-item",
        "section-sport-background",
    ], f"unexpected Sport classes {items[1]['class']!r}"
    assert items[1].a["href"] == "/category/sport/", "expected the Sport permalink"
    assert items[1].a.get_text() == "Sport", "expected the Sport label"


def test_render_does_not_mutate_cached_menu(manager: SectionManager) -> None:
    """Classes are applied to copies, so the cached skeleton stays undecorated."""
    manager.evaluate(PageContext.front_page())
    manager.render("primary", "extra")
    assert all(not item.classes for item in manager.menu.primary.values()), (
        "expected cached menu items to carry no classes"
    )


def test_secondary_menu_lists_current_section_children(
    manager: SectionManager,
) -> None:
    """Only the current section's children render, each with its hover class."""
    manager.evaluate(PageContext.single(211))
    items = _items(manager.render("secondary"))

    assert [li.a.get_text() for li in items] == ["Football", "Tennis"], (
        "expected Sport's direct children only"
    )
    assert items[0]["class"] == ["section-21-text-hover"], (
        f"unexpected Football classes {items[0]['class']!r}"
    )


@pytest.mark.parametrize("context", [PageContext.listing(4), PageContext.listing(31)])
def test_secondary_menu_empty_without_children(
    manager: SectionManager, context: PageContext
) -> None:
    """A childless or fallback section renders nothing."""
    manager.evaluate(context)
    assert manager.render("secondary") == "", "expected no secondary markup"


def test_unknown_menu_type_is_rejected(manager: SectionManager) -> None:
    """Only the primary and secondary tiers exist."""
    with pytest.raises(ValueError, match="Unknown menu type"):
        manager.render("tertiary")  # type: ignore[arg-type]


def test_labels_and_links_are_escaped(store: MemoryStore) -> None:
    """Category names and links cannot inject markup."""
    taxonomy = StaticTaxonomy(
        [Category(1, 'News & "Views" <b>', "news", link='/news?a=1&b="2"')]
    )
    with SectionManager([1], taxonomy=taxonomy, store=store) as manager:
        html = manager.render("primary")

    assert "<b>" not in html, "expected the label to be escaped"
    anchor = BeautifulSoup(html, "html.parser").a
    assert anchor["title"] == 'News & "Views" <b>', "expected the title to round-trip"
    assert anchor["href"] == '/news?a=1&b="2"', "expected the href to round-trip"


def test_anchor_without_classes_has_no_class_attribute(
    taxonomy: StaticTaxonomy, store: MemoryStore
) -> None:
    """An anchor without classes renders no class attribute at all."""
    with SectionManager([1], taxonomy=taxonomy, store=store, class_prefix="") as manager:
        manager.evaluate(PageContext.other())
        html = manager.render("primary")
    assert 'class="news-background-hover"' in html, (
        "expected only the hover class with an empty prefix"
    )
    assert "<a title=" in html, "expected the anchor to carry no class attribute"


def test_list_item_without_classes_has_no_class_attribute(
    manager: SectionManager,
) -> None:
    """A list item with an empty class list renders a bare ``<li>``."""
    item = manager.menu.primary["news"]
    html = manager.renderer.menu_template.render(items=[item.decorated([])])
    assert "<li><a title=" in html, f"unexpected markup {html!r}"
    assert "class=" not in html, "expected no class attribute anywhere"


@pytest.fixture
def other_slug_manager(store: MemoryStore) -> cabc.Iterator[SectionManager]:
    """Yield a manager whose second section is slugged like the fallback."""
    taxonomy = StaticTaxonomy(
        [
            Category(1, "News", "news"),
            Category(2, "Other", "other"),
            Category(3, "Weather", "weather"),
            Category(21, "Misc", "misc", parent=2),
        ]
    )
    with SectionManager([1, 2], taxonomy=taxonomy, store=store) as active:
        yield active


def test_fallback_does_not_match_section_slugged_other(
    other_slug_manager: SectionManager,
) -> None:
    """An unsectioned view never marks a real section named ``other`` as current."""
    section = other_slug_manager.evaluate(PageContext.listing(3))
    assert section.is_fallback, f"expected the fallback section, got {section!r}"

    soup = BeautifulSoup(other_slug_manager.render("primary"), "html.parser")
    assert soup.select("li.current-section-menu-item") == [], (
        "expected no primary item to be marked current"
    )
    assert other_slug_manager.render("secondary") == "", (
        "expected no secondary menu for the fallback section"
    )


def test_section_slugged_other_renders_its_children_when_current(
    other_slug_manager: SectionManager,
) -> None:
    """The real ``other`` section still gets its own secondary menu."""
    other_slug_manager.evaluate(PageContext.listing(21))
    items = _items(other_slug_manager.render("secondary"))
    assert [li.a.get_text() for li in items] == ["Misc"], (
        "expected the children of the section slugged 'other'"
    )


def test_load_rebuilds_when_store_is_unreadable(
    taxonomy: StaticTaxonomy, store: MemoryStore, mocker: MockerFixture
) -> None:
    """A failing store read is treated like an empty menu cache."""
    record = SectionsRegistry(taxonomy, store).configure([1, 2])
    mocker.patch.object(store, "get", side_effect=ConfigStoreError("Unable to read."))

    menu = NavigationBuilder(taxonomy, store).load(record)

    assert list(menu.primary) == ["news", "sport"], "expected the menu to be rebuilt"
    assert store.writes[-1] == MENUS_KEY, "expected the rebuilt menu to be written"
