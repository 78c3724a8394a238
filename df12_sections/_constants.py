"""Common literal values used across df12_sections.

These constants keep store keys, CSS class fragments, and the fallback section
identity centralized so the registry, evaluator, renderer, and tests can import
the same values without drifting. Intended for internal use within the
df12_sections package.

Examples
--------
>>> from df12_sections import _constants
>>> _constants.SECTIONS_KEY
'section_manager_sections'
>>> f"{_constants.DEFAULT_CLASS_PREFIX}{_constants.OTHER_SECTION_SLUG}"
'section-other'
"""

SECTIONS_KEY = "section_manager_sections"
MENUS_KEY = "section_manager_menus"

# Host category ids are positive, so a negative id never names a real category.
OTHER_SECTION_ID = -1
OTHER_SECTION_SLUG = "other"

DEFAULT_CLASS_PREFIX = "section-"
CURRENT_MENU_ITEM_CLASS = "current-section-menu-item"
DEFAULT_MAX_DEPTH = 64
