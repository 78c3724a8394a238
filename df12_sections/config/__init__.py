"""Load and validate section configuration YAML for df12 site builds.

This subpackage parses the project's ``sections.yaml`` file: the ordered list
of section category ids, the optional home section, CSS class prefix, debug
(force recompute) flag, cache store location, overview markup defaults, and
the taxonomy used by the reference host adapter. The primary entry point is
:func:`load_sections_config`, which returns a :class:`SectionsSiteConfig`
ready to construct a :class:`~df12_sections.manager.SectionManager`.

Examples
--------
>>> from pathlib import Path
>>> from df12_sections.config import load_sections_config
>>> site = load_sections_config(Path("config/sections.yaml"))  # doctest: +SKIP
>>> site.home  # doctest: +SKIP
1
"""

from .loader import load_sections_config
from .models import OverviewOptions, SectionsConfigError, SectionsSiteConfig

__all__ = [
    "OverviewOptions",
    "SectionsConfigError",
    "SectionsSiteConfig",
    "load_sections_config",
]
