"""Tests for the grouped section overview listing."""

from __future__ import annotations

import typing as typ

import pytest
from bs4 import BeautifulSoup

from df12_sections.config import OverviewOptions
from df12_sections.manager import SectionManager
from df12_sections.rendering import group_sections
from df12_sections.taxonomy import Category, StaticTaxonomy

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from pytest_mock import MockerFixture

    from df12_sections.store import MemoryStore

SECTION_NAMES = ["News", "Sport", "Weather", "Culture", "Travel", "Money", "Opinion"]


@pytest.fixture
def seven_sections(store: MemoryStore) -> cabc.Iterator[SectionManager]:
    """Yield a manager over seven top-level sections; News has two children."""
    categories = [
        Category(index, name, name.lower())
        for index, name in enumerate(SECTION_NAMES, start=1)
    ]
    categories += [
        Category(11, "Politics", "politics", parent=1),
        Category(12, "Business", "business", parent=1),
    ]
    with SectionManager(
        list(range(1, 8)), taxonomy=StaticTaxonomy(categories), store=store
    ) as manager:
        yield manager


def test_sections_are_grouped_in_wrappers(seven_sections: SectionManager) -> None:
    """Seven sections at three per group give wrappers of three, three, and one."""
    soup = BeautifulSoup(seven_sections.section_overview(), "html.parser")
    wrappers = soup.find_all("nav", recursive=False)

    assert [len(nav.find_all("ul")) for nav in wrappers] == [3, 3, 1], (
        "expected groups of 3, 3, and 1 sections"
    )
    assert all(nav["class"] == ["footer-site-sections"] for nav in wrappers), (
        "expected the default container class on every wrapper"
    )
    ids = [ul["id"] for ul in soup.find_all("ul")]
    assert ids == [f"section-footer-menu-{name.lower()}" for name in SECTION_NAMES], (
        f"unexpected list ids {ids!r}"
    )


def test_section_list_contains_section_then_children(
    seven_sections: SectionManager,
) -> None:
    """Each list starts with the section link followed by its direct children."""
    soup = BeautifulSoup(seven_sections.section_overview(), "html.parser")
    news = soup.find("ul", id="section-footer-menu-news")

    assert news["class"] == ["footer-section-menu"], "expected the menu class"
    items = news.find_all("li")
    assert [li.a.get_text() for li in items] == ["News", "Politics", "Business"], (
        "expected the section followed by its children"
    )
    assert all(li["class"] == ["footer-section-item"] for li in items), (
        "expected the item class on every list item"
    )
    assert items[0].a["class"] == ["footer-section-link"], (
        "expected the anchor class on the section link"
    )
    assert not items[1].a.has_attr("class"), "expected child links to carry no class"


def test_overrides_replace_defaults(seven_sections: SectionManager) -> None:
    """Keyword overrides change grouping and can drop the wrapper."""
    html = seven_sections.section_overview(items_per_group=4, wrap_container=False)
    soup = BeautifulSoup(html, "html.parser")

    assert soup.find("nav") is None, "expected no wrapper element"
    assert len(soup.find_all("ul", recursive=False)) == 7, (
        "expected every section list at the top level"
    )


def test_custom_container_element(seven_sections: SectionManager) -> None:
    """The wrapper element and its class come from the options."""
    options = OverviewOptions(
        items_per_group=7, container_type="div", container_class="sitemap"
    )
    soup = BeautifulSoup(seven_sections.section_overview(options), "html.parser")
    wrappers = soup.find_all("div")
    assert len(wrappers) == 1, "expected a single wrapper for one group"
    assert wrappers[0]["class"] == ["sitemap"], "expected the custom class"


@pytest.mark.parametrize("container_type", ["", "nav onclick=x", "<script>"])
def test_invalid_container_element_is_rejected(
    seven_sections: SectionManager, container_type: str
) -> None:
    """Only plain element names may be used for the wrapper."""
    with pytest.raises(ValueError, match="container element"):
        seven_sections.section_overview(container_type=container_type)


def test_items_per_group_must_be_positive(seven_sections: SectionManager) -> None:
    """A zero group size cannot partition the sections."""
    with pytest.raises(ValueError, match="items_per_group"):
        seven_sections.section_overview(items_per_group=0)


def test_group_sections_keeps_order() -> None:
    """Groups are consecutive slices; the last one may be short."""
    assert group_sections([1, 2, 3, 4, 5], 2) == [[1, 2], [3, 4], [5]], (  # type: ignore[list-item]
        "expected consecutive groups of two"
    )
    assert group_sections([], 3) == [], "expected no groups for no sections"


def test_overview_reads_taxonomy_on_every_call(
    seven_sections: SectionManager, mocker: MockerFixture
) -> None:
    """The overview is not cached; each call consults the taxonomy afresh."""
    spy = mocker.spy(seven_sections.taxonomy, "children_of")
    seven_sections.section_overview()
    seven_sections.section_overview()
    assert spy.call_count == 14, (
        f"expected one children lookup per section per call, got {spy.call_count}"
    )
