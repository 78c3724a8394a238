"""Shared fixtures for the df12_sections test-suite.

The sample taxonomy mirrors a small news site::

    News (1)        Politics (11) > Elections (111), Business (12)
    Sport (2)       Football (21) > Premier League (211), Tennis (22)
    Weather (3)     Forecasts (31)
    Culture (4)     (no children)

Weather is deliberately left out of the default section list so tests can
exercise the fallback section.
"""

from __future__ import annotations

import typing as typ

import pytest

from df12_sections.manager import SectionManager
from df12_sections.store import MemoryStore
from df12_sections.taxonomy import Category, StaticTaxonomy

if typ.TYPE_CHECKING:
    import collections.abc as cabc

SAMPLE_CATEGORIES = [
    Category(1, "News", "news"),
    Category(2, "Sport", "sport"),
    Category(3, "Weather", "weather"),
    Category(4, "Culture", "culture"),
    Category(11, "Politics", "politics", parent=1),
    Category(12, "Business", "business", parent=1),
    Category(111, "Elections", "elections", parent=11),
    Category(21, "Football", "football", parent=2),
    Category(22, "Tennis", "tennis", parent=2),
    Category(211, "Premier League", "premier-league", parent=21),
    Category(31, "Forecasts", "forecasts", parent=3),
]


@pytest.fixture
def taxonomy() -> StaticTaxonomy:
    """Return the sample news-site taxonomy."""
    return StaticTaxonomy(SAMPLE_CATEGORIES)


@pytest.fixture
def store() -> MemoryStore:
    """Return an empty in-memory config store."""
    return MemoryStore()


@pytest.fixture
def manager(
    taxonomy: StaticTaxonomy, store: MemoryStore
) -> cabc.Iterator[SectionManager]:
    """Yield a manager over News, Sport, and Culture, closing it afterwards."""
    with SectionManager([1, 2, 4], taxonomy=taxonomy, store=store) as active:
        yield active


@pytest.fixture(autouse=True)
def _release_section_manager() -> cabc.Iterator[None]:
    """Release any manager a failing test left active."""
    yield
    active = SectionManager._active
    if active is not None:
        active.close()
