"""Host-facing facade bundling the section engine's components.

:class:`SectionManager` is what a site integration constructs: it validates the
requested sections once (rebuilding the cached record and menu only when they
changed), then answers per-view questions: which section is this page in,
which body class should it carry, and what do the section menus look like.

Only one manager may be active in a process at a time, because two live
configurations would fight over the same cached record. Close the manager (or
use it as a context manager) to release it.

Example
-------
>>> from df12_sections import PageContext, SectionManager
>>> from df12_sections.store import MemoryStore
>>> from df12_sections.taxonomy import Category, StaticTaxonomy
>>> taxonomy = StaticTaxonomy([Category(1, "News", "news"), Category(2, "Sport", "sport")])
>>> with SectionManager([1, 2], taxonomy=taxonomy, store=MemoryStore()) as sections:
...     sections.evaluate(PageContext.front_page()).slug
...     sections.body_classes(["home"])
'news'
['home', 'section-news']
"""

from __future__ import annotations

import dataclasses as dc
import threading
import typing as typ

from ._constants import DEFAULT_CLASS_PREFIX, DEFAULT_MAX_DEPTH
from .ancestry import AncestorResolver
from .config.models import OverviewOptions
from .evaluator import FALLBACK_SECTION, CurrentSection, CurrentSectionEvaluator
from .navigation import MENU_TYPES, NavigationBuilder
from .registry import SectionsRegistry
from .rendering import NavigationRenderer

if typ.TYPE_CHECKING:
    import collections.abc as cabc
    from pathlib import Path

    from .config.models import SectionsSiteConfig
    from .evaluator import PageContext
    from .navigation import Menu, MenuType
    from .registry import SectionsRecord
    from .store import ConfigStore
    from .taxonomy import Category, TaxonomyGateway


class SectionManagerActiveError(RuntimeError):
    """Raised when a second SectionManager is constructed while one is active."""


class SectionManager:
    """Classify pages into site sections and render section navigation."""

    _active: typ.ClassVar[SectionManager | None] = None
    _claim_lock: typ.ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        sections: cabc.Sequence[typ.Any],
        home: int | None = None,
        *,
        taxonomy: TaxonomyGateway,
        store: ConfigStore,
        class_prefix: str = DEFAULT_CLASS_PREFIX,
        force_recompute: bool = False,
        templates_dir: Path | None = None,
        max_depth: int = DEFAULT_MAX_DEPTH,
        overview: OverviewOptions | None = None,
    ) -> None:
        """Validate the requested sections and load the cached record and menu.

        Parameters
        ----------
        sections : Sequence
            Ordered ids of the top-level categories that form the sections.
        home : int, optional
            Section used for the front page; defaults to the first section.
        taxonomy : TaxonomyGateway
            Host category lookups.
        store : ConfigStore
            Persistent store for the Sections Record and menu.
        class_prefix : str, optional
            Prefix of section CSS classes. Defaults to ``"section-"``.
        force_recompute : bool, optional
            Rebuild the record and menu even when unchanged (debug mode).
        templates_dir : Path, optional
            Override the Jinja templates used for menus and the overview.
        max_depth : int, optional
            Deepest category nesting followed when resolving sections.
        overview : OverviewOptions, optional
            Default options for :meth:`section_overview`.

        Raises
        ------
        SectionManagerActiveError
            If another manager has not been closed.
        SectionsConfigError
            If ``sections`` is empty, malformed, or has no usable section.
        """
        with SectionManager._claim_lock:
            if SectionManager._active is not None:
                msg = "SectionManager can only be instantiated once; close the active one first."
                raise SectionManagerActiveError(msg)
            SectionManager._active = self
        try:
            self.taxonomy = taxonomy
            self.store = store
            self.class_prefix = class_prefix
            self.overview_options = overview or OverviewOptions()
            self.navigation = NavigationBuilder(taxonomy, store)
            self.registry = SectionsRegistry(taxonomy, store, navigation=self.navigation)
            self.record: SectionsRecord = self.registry.configure(
                sections, home, force_recompute=force_recompute
            )
            self.menu: Menu = self.navigation.load(self.record)
            self.resolver = AncestorResolver(taxonomy, max_depth=max_depth)
            self.evaluator = CurrentSectionEvaluator(
                self.record, self.resolver, class_prefix=class_prefix
            )
            self.renderer = NavigationRenderer(
                class_prefix=class_prefix, templates_dir=templates_dir
            )
        except BaseException:
            self._release()
            raise

    @classmethod
    def from_config(
        cls,
        config: SectionsSiteConfig,
        *,
        taxonomy: TaxonomyGateway,
        store: ConfigStore,
        force_recompute: bool = False,
    ) -> SectionManager:
        """Construct a manager from a loaded ``sections.yaml`` configuration."""
        return cls(
            config.sections,
            config.home,
            taxonomy=taxonomy,
            store=store,
            class_prefix=config.class_prefix,
            force_recompute=force_recompute or config.debug,
            overview=config.overview,
        )

    def __enter__(self) -> SectionManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release the single-instance claim so a new manager can be built."""
        self._release()

    def _release(self) -> None:
        with SectionManager._claim_lock:
            if SectionManager._active is self:
                SectionManager._active = None

    @property
    def warnings(self) -> list[str]:
        """Return warnings reported while building the record."""
        return list(self.registry.warnings)

    @property
    def rebuilt(self) -> bool:
        """Return True when construction rebuilt the cached record."""
        return self.registry.rebuilt

    @property
    def current_section(self) -> CurrentSection:
        """Return the current view's section, or the fallback before evaluation."""
        return self.evaluator.current or FALLBACK_SECTION

    def evaluate(self, context: PageContext) -> CurrentSection:
        """Classify the view described by ``context``; call once per render."""
        return self.evaluator.evaluate(context)

    def end_view(self) -> None:
        """Forget the current view's section."""
        self.evaluator.end_view()

    def body_classes(self, existing: cabc.Iterable[str] = ()) -> list[str]:
        """Return ``existing`` plus the ``<prefix><slug>`` class of the current view."""
        return self.evaluator.body_classes(existing)

    def render(
        self, menu_type: MenuType = "primary", classes: str | cabc.Iterable[str] = ()
    ) -> str:
        """Render the primary menu, or the current section's secondary menu.

        Parameters
        ----------
        menu_type : {"primary", "secondary"}
            Which tier to render.
        classes : str or Iterable[str], optional
            Extra classes added to every item.

        Returns
        -------
        str
            ``<li>`` markup, or ``""`` when the menu has no items.
        """
        if menu_type not in MENU_TYPES:
            msg = f"Unknown menu type {menu_type!r}; expected one of {MENU_TYPES}."
            raise ValueError(msg)
        current = self.current_section
        if menu_type == "secondary" and current.is_fallback:
            return ""
        items = self.menu.items(menu_type, current.id)
        return self.renderer.render_menu(
            items, menu_type, current_id=current.id, extra_classes=classes
        )

    def section_overview(
        self, options: OverviewOptions | None = None, **overrides: typ.Any
    ) -> str:
        """Render every section and its children in grouped lists.

        Parameters
        ----------
        options : OverviewOptions, optional
            Base options; defaults to the options given at construction.
        **overrides
            Individual :class:`OverviewOptions` fields to replace, for example
            ``items_per_group=4``.
        """
        resolved = dc.replace(options or self.overview_options, **overrides)
        sections = self.navigation.overview(self.record)
        return self.renderer.render_overview(sections, resolved)

    def child_categories_of(self, category_id: int) -> list[Category]:
        """Return the direct children of ``category_id``."""
        return self.taxonomy.children_of(category_id)

    def section_of(self, category_id: int) -> CurrentSection:
        """Return the section ``category_id`` belongs to, or the fallback."""
        return self.evaluator.section_of(category_id)

    def section_id_of(self, category_id: int) -> int:
        """Return the id of the section ``category_id`` belongs to."""
        return self.section_of(category_id).id

    def section_slug_of(self, category_id: int) -> str:
        """Return the slug of the section ``category_id`` belongs to."""
        return self.section_of(category_id).slug


__all__ = ["SectionManager", "SectionManagerActiveError"]
