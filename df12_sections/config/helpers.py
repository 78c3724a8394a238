"""Utility helpers shared by the df12 section configuration loader."""

from __future__ import annotations

import re
import typing as typ

from ..taxonomy import Category
from .models import OverviewOptions, SectionsConfigError


def _normalize_classes(value: str | typ.Iterable[object] | None) -> list[str]:
    """Normalize class definitions into a list of non-empty strings."""
    if isinstance(value, str):
        return [segment for segment in value.split() if segment]
    if value is None:
        return []
    normalized: list[str] = []
    for segment in value:
        text = str(segment).strip()
        if text:
            normalized.append(text)
    return normalized


def _optional_str(value: object | None) -> str | None:
    """Return a stripped string value or None when empty."""
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_id(value: object) -> int | None:
    """Return ``value`` as a category id, or None when it cannot be one."""
    match value:
        case bool():
            return None
        case int():
            return value
        case str() as text if text.strip().isdecimal():
            return int(text.strip())
        case _:
            return None


def _slugify(name: str) -> str:
    """Return a lowercase, hyphenated slug for ``name``."""
    slug = re.sub(r"[^a-z0-9]+", "-", name.lower()).strip("-")
    return slug or "category"


def _build_category(payload: typ.Any, index: int) -> Category:
    """Build a Category from one ``taxonomy`` entry."""
    if not isinstance(payload, dict):
        msg = f"Taxonomy entry #{index} must be a mapping."
        raise SectionsConfigError(msg)
    category_id = _coerce_id(payload.get("id"))
    if category_id is None or category_id < 1:
        msg = f"Taxonomy entry #{index} needs a positive integer 'id'."
        raise SectionsConfigError(msg)
    name = _optional_str(payload.get("name"))
    if not name:
        msg = f"Taxonomy entry {category_id} is missing 'name'."
        raise SectionsConfigError(msg)
    raw_parent = payload.get("parent")
    parent = 0 if raw_parent in (None, 0) else _coerce_id(raw_parent)
    if parent is None:
        msg = f"Taxonomy entry {category_id} has an invalid 'parent'."
        raise SectionsConfigError(msg)
    return Category(
        id=category_id,
        name=name,
        slug=_optional_str(payload.get("slug")) or _slugify(name),
        parent=parent,
        link=_optional_str(payload.get("link")),
    )


def _build_overview_options(payload: typ.Mapping[str, typ.Any] | None) -> OverviewOptions:
    """Merge an ``overview`` mapping into the default OverviewOptions."""
    base = OverviewOptions()
    if not payload:
        return base
    per_group = payload.get("items_per_group", base.items_per_group)
    if _coerce_id(per_group) is None or int(per_group) < 1:
        msg = "overview.items_per_group must be a positive integer."
        raise SectionsConfigError(msg)
    return OverviewOptions(
        items_per_group=int(per_group),
        wrap_container=bool(payload.get("wrap_container", base.wrap_container)),
        container_type=payload.get("container_type", base.container_type),
        container_class=payload.get("container_class", base.container_class),
        menu_class=payload.get("menu_class", base.menu_class),
        menu_item_class=payload.get("menu_item_class", base.menu_item_class),
        anchor_class=payload.get("anchor_class", base.anchor_class),
    )


__all__ = [
    "_build_category",
    "_build_overview_options",
    "_coerce_id",
    "_normalize_classes",
    "_optional_str",
    "_slugify",
]
