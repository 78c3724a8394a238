"""Classify df12 site pages into sections and render section navigation.

This package keeps the site's primary sections (top-level categories) in a
cached Sections Record, resolves which section any category or page view
belongs to, and renders the two-tier section menus and the section overview.
It also exposes the CLI used by ``uv run sections``.

Exports
-------
- ``SectionManager``: Host-facing facade; construct once per process.
- ``PageContext``: Page-type predicates passed to ``SectionManager.evaluate``.
- ``app``: Cyclopts application entry for subcommands.
- ``main``: Convenience function that invokes the Cyclopts app.

Examples
--------
>>> from df12_sections import main
>>> main()  # doctest: +SKIP
>>> from df12_sections import PageContext
>>> PageContext.listing(21).subject_category_id
21
"""

from __future__ import annotations

from .cli import app, main
from .evaluator import CurrentSection, PageContext
from .manager import SectionManager, SectionManagerActiveError

__all__ = [
    "CurrentSection",
    "PageContext",
    "SectionManager",
    "SectionManagerActiveError",
    "app",
    "main",
]
