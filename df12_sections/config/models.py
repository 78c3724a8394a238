"""Typed dataclasses describing df12 section configuration structures."""

from __future__ import annotations

import dataclasses as dc
import typing as typ

from .._constants import DEFAULT_CLASS_PREFIX

if typ.TYPE_CHECKING:
    from pathlib import Path

    from ..taxonomy import Category


class SectionsConfigError(ValueError):
    """Raised when the section configuration is invalid or incomplete."""


@dc.dataclass(slots=True)
class OverviewOptions:
    """Markup choices for the grouped section overview listing.

    Attributes
    ----------
    items_per_group : int
        Number of sections placed in each container group.
    wrap_container : bool
        Wrap each group of sections in ``container_type`` when True.
    container_type : str
        Element name of the group wrapper.
    container_class : str
        Class applied to each group wrapper.
    menu_class : str
        Class applied to each per-section ``<ul>``.
    menu_item_class : str
        Class applied to every ``<li>``.
    anchor_class : str
        Class applied to the section (first) anchor of each list.
    """

    items_per_group: int = 3
    wrap_container: bool = True
    container_type: str = "nav"
    container_class: str = "footer-site-sections"
    menu_class: str = "footer-section-menu"
    menu_item_class: str = "footer-section-item"
    anchor_class: str = "footer-section-link"


@dc.dataclass(slots=True)
class SectionsSiteConfig:
    """A fully resolved section setup sourced from YAML config."""

    sections: list[typ.Any]
    taxonomy: list[Category]
    home: int | None = None
    class_prefix: str = DEFAULT_CLASS_PREFIX
    debug: bool = False
    store_path: Path | None = None
    overview: OverviewOptions = dc.field(default_factory=OverviewOptions)


__all__ = ["OverviewOptions", "SectionsConfigError", "SectionsSiteConfig"]
