"""Resolve the top-level ancestor of a category.

Every classification in the engine reduces a category to the root of its
branch: a section is a root category, so "which section does this belong to"
is "which root does this ascend to". The walk is bounded by ``max_depth`` so a
malformed (cyclic) parent graph fails closed instead of looping.
"""

from __future__ import annotations

import logging
import typing as typ

from ._constants import DEFAULT_MAX_DEPTH

if typ.TYPE_CHECKING:
    from .taxonomy import TaxonomyGateway

logger = logging.getLogger(__name__)


class AncestorResolver:
    """Walk parent links through a :class:`TaxonomyGateway`."""

    def __init__(
        self, taxonomy: TaxonomyGateway, *, max_depth: int = DEFAULT_MAX_DEPTH
    ) -> None:
        if max_depth < 1:
            msg = "max_depth must be at least 1."
            raise ValueError(msg)
        self.taxonomy = taxonomy
        self.max_depth = max_depth

    def root_of(self, category_id: int) -> int | None:
        """Return the id of the top-level ancestor of ``category_id``.

        Parameters
        ----------
        category_id : int
            Category to resolve. An id that does not resolve to a category is
            returned unchanged; callers are expected to validate beforehand.

        Returns
        -------
        int | None
            The root category id (``category_id`` itself for top-level
            categories), or ``None`` when the parent chain loops or exceeds
            ``max_depth`` ascents.
        """
        current = category_id
        seen: set[int] = set()
        for _ in range(self.max_depth + 1):
            category = self.taxonomy.category(current)
            if category is None or not category.parent:
                return current
            seen.add(current)
            if category.parent in seen:
                logger.warning(
                    "Category %s has a cyclic parent chain; treating it as unsectioned.",
                    category_id,
                )
                return None
            current = category.parent
        logger.warning(
            "Category %s is nested deeper than %s levels; treating it as unsectioned.",
            category_id,
            self.max_depth,
        )
        return None


__all__ = ["AncestorResolver"]
