"""Validate requested sections and keep the canonical Sections Record cached.

The site is segmented into a handful of primary sections, each a top-level
category. :class:`SectionsRegistry` turns the requested list of category ids
into a :class:`SectionsRecord`, persists it under
:data:`~df12_sections._constants.SECTIONS_KEY`, and rebuilds it only when the
requested ids or home section change (or when a debug run forces it). Sections
are not expected to change often, so the rebuild, and the navigation rebuild
it triggers, normally runs once.

Per-item problems (unknown ids, child categories, repeated ids or slugs) are
logged as warnings and skipped. An empty or malformed request, or one with no
usable entry at all, raises :class:`~df12_sections.config.SectionsConfigError` and
leaves the store untouched.

Example
-------
>>> from df12_sections.registry import SectionsRegistry
>>> from df12_sections.store import MemoryStore
>>> from df12_sections.taxonomy import Category, StaticTaxonomy
>>> taxonomy = StaticTaxonomy([Category(1, "News", "news"), Category(2, "Sport", "sport")])
>>> record = SectionsRegistry(taxonomy, MemoryStore()).configure([1, 2])
>>> record.ids, record.home_slug
([1, 2], 'news')
"""

from __future__ import annotations

import collections.abc as cabc
import dataclasses as dc
import logging
import typing as typ

from ._constants import SECTIONS_KEY
from .config.helpers import _coerce_id
from .config.models import SectionsConfigError
from .store import read_cached

if typ.TYPE_CHECKING:
    from .navigation import NavigationBuilder
    from .store import ConfigStore
    from .taxonomy import TaxonomyGateway

logger = logging.getLogger(__name__)

_EMPTY_REQUEST = "An ordered list of category ids must be passed to the section manager."
_NO_VALID_SECTIONS = "None of the requested categories is a usable top-level section."


@dc.dataclass(slots=True)
class SectionsRecord:
    """Canonical section configuration shared by every other component.

    Attributes
    ----------
    ids : list[int]
        Section category ids in display order; unique and top-level.
    slugs : dict[int, str]
        Slug of each section, keyed by id.
    home_id : int
        Default section used for the front page; always one of ``ids``.
    home_slug : str
        Slug of the default section.
    requested_ids : list[int | str]
        The request this record was built from, normalized for comparison.
    requested_home : int | str | None
        The requested home section, normalized for comparison.
    """

    ids: list[int]
    slugs: dict[int, str]
    home_id: int
    home_slug: str
    requested_ids: list[int | str] = dc.field(default_factory=list)
    requested_home: int | str | None = None

    def __contains__(self, category_id: object) -> bool:
        return category_id in self.slugs

    def slug_for(self, category_id: int) -> str | None:
        """Return the slug of section ``category_id`` or None when unregistered."""
        return self.slugs.get(category_id)

    def matches(
        self, requested_ids: list[int | str], requested_home: int | str | None
    ) -> bool:
        """Return True when this record was built from the given request."""
        return (
            self.requested_ids == requested_ids
            and self.requested_home == requested_home
        )

    def to_payload(self) -> dict[str, typ.Any]:
        """Return the JSON-compatible mapping persisted in the config store."""
        return {
            "ids": list(self.ids),
            "slugs": {str(key): slug for key, slug in self.slugs.items()},
            "home": {"id": self.home_id, "slug": self.home_slug},
            "requested": {
                "ids": list(self.requested_ids),
                "home": self.requested_home,
            },
        }

    @classmethod
    def from_payload(cls, payload: object) -> SectionsRecord | None:
        """Rebuild a record from :meth:`to_payload` output, or None if unusable."""
        if not isinstance(payload, cabc.Mapping):
            return None
        try:
            ids = [int(value) for value in payload["ids"]]
            slugs = {int(key): str(slug) for key, slug in payload["slugs"].items()}
            home = payload["home"]
            requested = payload.get("requested") or {}
            record = cls(
                ids=ids,
                slugs=slugs,
                home_id=int(home["id"]),
                home_slug=str(home["slug"]),
                requested_ids=list(requested.get("ids") or []),
                requested_home=requested.get("home"),
            )
        except (KeyError, TypeError, ValueError, AttributeError):
            return None
        if not ids or set(ids) != set(slugs) or record.home_id not in slugs:
            return None
        return record


def _request_key(value: object) -> int | str:
    """Normalize one requested entry so requests compare and serialize cleanly."""
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    return str(value)


def _validate_request(requested: object) -> list[typ.Any]:
    """Return ``requested`` as a list, raising for empty or non-list input."""
    if isinstance(requested, (str, bytes)) or not isinstance(
        requested, cabc.Sequence
    ):
        raise SectionsConfigError(_EMPTY_REQUEST)
    if not requested:
        raise SectionsConfigError(_EMPTY_REQUEST)
    return list(requested)


class SectionsRegistry:
    """Resolve requested section ids into the cached :class:`SectionsRecord`."""

    def __init__(
        self,
        taxonomy: TaxonomyGateway,
        store: ConfigStore,
        *,
        navigation: NavigationBuilder | None = None,
    ) -> None:
        """Bind the registry to its collaborators.

        Parameters
        ----------
        taxonomy : TaxonomyGateway
            Read-only category lookups used to validate requested ids.
        store : ConfigStore
            Persistent store holding the cached record.
        navigation : NavigationBuilder, optional
            Rebuilt whenever the record is rebuilt; omitted in tests that only
            exercise the record.
        """
        self.taxonomy = taxonomy
        self.store = store
        self.navigation = navigation
        self.warnings: list[str] = []
        self.rebuilt = False

    def configure(
        self,
        requested_sections: cabc.Sequence[typ.Any],
        requested_home: int | str | None = None,
        *,
        force_recompute: bool = False,
    ) -> SectionsRecord:
        """Return the Sections Record for the requested ids, rebuilding if needed.

        Parameters
        ----------
        requested_sections : Sequence
            Ordered category ids. Entries that are unknown, not top-level, or
            repeated are skipped with a warning.
        requested_home : int | str | None, optional
            Section used for the front page; defaults to the first valid
            section, which is also used when the home is not a valid section.
        force_recompute : bool, optional
            Rebuild even when the cached record matches (debug mode).

        Returns
        -------
        SectionsRecord
            The cached record when the request is unchanged, otherwise the
            freshly built and persisted record.

        Raises
        ------
        SectionsConfigError
            If ``requested_sections`` is empty or not a list, or none of its
            entries is a usable section. Nothing is written in that case.
        """
        requested = _validate_request(requested_sections)
        request_key = [_request_key(item) for item in requested]
        home_key = None if requested_home is None else _request_key(requested_home)
        self.warnings = []

        with self.store.transaction():
            cached = SectionsRecord.from_payload(
                read_cached(self.store, SECTIONS_KEY)
            )
            if (
                cached is not None
                and not force_recompute
                and cached.matches(request_key, home_key)
            ):
                self.rebuilt = False
                return cached

            record = self._build(requested, request_key, home_key)
            self.store.set(SECTIONS_KEY, record.to_payload())
            if self.navigation is not None:
                self.navigation.build(record)
            self.rebuilt = True
        logger.debug("Rebuilt sections %s (home %s).", record.ids, record.home_id)
        return record

    def load(self) -> SectionsRecord | None:
        """Return the cached record without validating it against a request."""
        return SectionsRecord.from_payload(read_cached(self.store, SECTIONS_KEY))

    def _build(
        self,
        requested: list[typ.Any],
        request_key: list[int | str],
        home_key: int | str | None,
    ) -> SectionsRecord:
        ids: list[int] = []
        slugs: dict[int, str] = {}
        for item in requested:
            category_id = _coerce_id(item)
            category = (
                self.taxonomy.category(category_id) if category_id is not None else None
            )
            if category is None:
                self._warn('"%s" is not a valid category and will be skipped', item)
                continue
            if not category.is_top_level:
                self._warn('"%s" is a child category and will be skipped', item)
                continue
            if category.id in slugs:
                self._warn('"%s" is listed more than once and will be skipped', item)
                continue
            if category.slug in slugs.values():
                self._warn(
                    '"%s" has the slug "%s" of another section and will be skipped',
                    item,
                    category.slug,
                )
                continue
            ids.append(category.id)
            slugs[category.id] = category.slug

        if not ids:
            raise SectionsConfigError(_NO_VALID_SECTIONS)

        home_id = ids[0]
        if home_key is not None:
            candidate = _coerce_id(home_key)
            if candidate in slugs:
                home_id = typ.cast(int, candidate)
            else:
                self._warn(
                    '"%s" is not a registered section; the home section is "%s"',
                    home_key,
                    slugs[home_id],
                )

        return SectionsRecord(
            ids=ids,
            slugs=slugs,
            home_id=home_id,
            home_slug=slugs[home_id],
            requested_ids=request_key,
            requested_home=home_key,
        )

    def _warn(self, template: str, *args: object) -> None:
        logger.warning(template, *args)
        self.warnings.append(template % args)


__all__ = ["SectionsRecord", "SectionsRegistry"]
