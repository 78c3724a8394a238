"""Render section menus and the section overview as HTML fragments.

Menus are cached as plain :class:`~df12_sections.navigation.MenuItem` records.
:class:`NavigationRenderer` decorates copies of those records with the classes
that depend on the current view (current section, hover variants) and renders
them through the Jinja templates in ``df12_sections/templates``. Autoescaping
is enabled, so category names and links are always escaped.
"""

from __future__ import annotations

import dataclasses as dc
import re
import typing as typ
from pathlib import Path

from jinja2 import Environment, FileSystemLoader
from markupsafe import Markup

from ._constants import CURRENT_MENU_ITEM_CLASS, DEFAULT_CLASS_PREFIX
from .config.helpers import _normalize_classes

if typ.TYPE_CHECKING:
    import collections.abc as cabc

    from .config.models import OverviewOptions
    from .navigation import MenuItem, MenuType

_ELEMENT_NAME = re.compile(r"[A-Za-z][A-Za-z0-9-]*")


def class_attribute(value: str | cabc.Iterable[object] | None) -> Markup:
    """Return `` class="..."`` for non-empty ``value``, otherwise an empty string."""
    classes = _normalize_classes(value)
    if not classes:
        return Markup("")
    return Markup(' class="%s"') % " ".join(classes)


@dc.dataclass(slots=True)
class OverviewSection:
    """One section of the overview listing with its decorated children."""

    slug: str
    item: MenuItem
    children: list[MenuItem]


def group_sections(
    sections: cabc.Sequence[OverviewSection], per_group: int
) -> list[list[OverviewSection]]:
    """Split ``sections`` into consecutive groups of ``per_group`` (the last may be short)."""
    if per_group < 1:
        msg = "items_per_group must be at least 1."
        raise ValueError(msg)
    return [
        list(sections[start : start + per_group])
        for start in range(0, len(sections), per_group)
    ]


class NavigationRenderer:
    """Turn cached menu records into HTML for the current view."""

    def __init__(
        self,
        *,
        class_prefix: str = DEFAULT_CLASS_PREFIX,
        templates_dir: Path | None = None,
    ) -> None:
        """Initialize the renderer and its Jinja environment.

        Parameters
        ----------
        class_prefix : str, optional
            Prefix of every section class (``section-`` yields
            ``section-news-background``).
        templates_dir : Path, optional
            Directory containing ``menu.jinja`` and
            ``section_overview.jinja``. Defaults to ``df12_sections/templates``.
        """
        self.class_prefix = class_prefix
        self.templates_dir = templates_dir or Path(__file__).parent / "templates"
        self.env = Environment(
            loader=FileSystemLoader(str(self.templates_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )
        self.env.filters["class_attr"] = class_attribute
        self.menu_template = self.env.get_template("menu.jinja")
        self.overview_template = self.env.get_template("section_overview.jinja")

    def decorate(
        self,
        items: cabc.Iterable[MenuItem],
        menu_type: MenuType,
        *,
        current_id: int,
        extra_classes: str | cabc.Iterable[str] = (),
    ) -> list[MenuItem]:
        """Return copies of ``items`` carrying their per-view classes.

        Primary items get ``<prefix><slug>-background-hover``, or the current
        item marker and ``<prefix><slug>-background`` for the current section.
        Secondary items get ``<prefix><category id>-text-hover``.
        """
        base = _normalize_classes(extra_classes)
        decorated: list[MenuItem] = []
        for item in items:
            classes = list(base)
            if menu_type == "primary":
                if item.category_id == current_id:
                    classes.append(CURRENT_MENU_ITEM_CLASS)
                    classes.append(f"{self.class_prefix}{item.slug}-background")
                else:
                    classes.append(f"{self.class_prefix}{item.slug}-background-hover")
            else:
                classes.append(f"{self.class_prefix}{item.category_id}-text-hover")
            decorated.append(item.decorated(classes))
        return decorated

    def render_menu(
        self,
        items: cabc.Sequence[MenuItem],
        menu_type: MenuType,
        *,
        current_id: int,
        extra_classes: str | cabc.Iterable[str] = (),
    ) -> str:
        """Render ``items`` as ``<li>`` elements, or ``""`` when there are none."""
        if not items:
            return ""
        decorated = self.decorate(
            items, menu_type, current_id=current_id, extra_classes=extra_classes
        )
        return self.menu_template.render(items=decorated)

    def render_overview(
        self, sections: cabc.Sequence[MenuItem], options: OverviewOptions
    ) -> str:
        """Render every section and its children, grouped per ``options``."""
        if options.wrap_container and not _ELEMENT_NAME.fullmatch(
            options.container_type
        ):
            msg = f"Invalid container element name {options.container_type!r}."
            raise ValueError(msg)
        item_classes = _normalize_classes(options.menu_item_class)
        entries = [
            OverviewSection(
                slug=section.slug,
                item=section.decorated(item_classes),
                children=[child.decorated(item_classes) for child in section.children],
            )
            for section in sections
        ]
        groups = group_sections(entries, options.items_per_group)
        if not groups:
            return ""
        return self.overview_template.render(groups=groups, options=options)


__all__ = [
    "NavigationRenderer",
    "OverviewSection",
    "class_attribute",
    "group_sections",
]
