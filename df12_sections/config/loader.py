"""Load section configuration YAML into typed dataclasses."""

from __future__ import annotations

import typing as typ
from pathlib import Path

from ruamel.yaml import YAML

from .._constants import DEFAULT_CLASS_PREFIX
from .helpers import _build_category, _build_overview_options, _coerce_id, _optional_str
from .models import SectionsConfigError, SectionsSiteConfig


def load_sections_config(path: Path) -> SectionsSiteConfig:
    """Load the YAML configuration describing sections and the taxonomy.

    Parameters
    ----------
    path : Path
        Filesystem path to the YAML configuration file (for example,
        ``config/sections.yaml``).

    Returns
    -------
    SectionsSiteConfig
        Parsed configuration: the requested section ids (passed through
        unvalidated, the registry reports bad entries), the optional home
        section, class prefix, debug flag, store location, overview defaults,
        and the taxonomy categories.

    Raises
    ------
    FileNotFoundError
        If the configuration file does not exist at ``path``.
    TypeError
        If the top-level YAML structure is not a mapping.
    SectionsConfigError
        If ``sections`` is missing, empty, or not a list, or if a taxonomy
        entry is malformed.
    YAMLError
        If the YAML content cannot be parsed by the underlying loader.

    Examples
    --------
    >>> from pathlib import Path
    >>> from df12_sections.config import load_sections_config
    >>> config = load_sections_config(Path("config/sections.yaml"))  # doctest: +SKIP
    >>> config.sections  # doctest: +SKIP
    [1, 2]
    """
    if not path.exists():
        msg = f"Configuration file '{path}' not found."
        raise FileNotFoundError(msg)

    loader = YAML(typ="safe")
    loader.version = (1, 2)
    with path.open("r", encoding="utf-8") as handle:
        loaded = loader.load(handle) or {}
    if not isinstance(loaded, dict):
        msg = "Top-level YAML structure must be a mapping."
        raise TypeError(msg)
    raw: dict[str, typ.Any] = dict(loaded)

    sections = raw.get("sections")
    if not isinstance(sections, list) or not sections:
        msg = "'sections' must be a non-empty list of category ids."
        raise SectionsConfigError(msg)

    raw_home = raw.get("home")
    home = None if raw_home is None else _coerce_id(raw_home)
    if raw_home is not None and home is None:
        msg = f"'home' must be a category id, got {raw_home!r}."
        raise SectionsConfigError(msg)

    taxonomy_raw = raw.get("taxonomy") or []
    if not isinstance(taxonomy_raw, list):
        msg = "'taxonomy' must be a list of category mappings."
        raise SectionsConfigError(msg)
    taxonomy = [
        _build_category(entry, index)
        for index, entry in enumerate(taxonomy_raw, start=1)
    ]

    store = _optional_str(raw.get("store"))
    store_path = None
    if store:
        store_path = Path(store)
        if not store_path.is_absolute():
            store_path = path.parent / store_path

    return SectionsSiteConfig(
        sections=list(sections),
        taxonomy=taxonomy,
        home=home,
        class_prefix=raw.get("class_prefix", DEFAULT_CLASS_PREFIX) or "",
        debug=bool(raw.get("debug", False)),
        store_path=store_path,
        overview=_build_overview_options(raw.get("overview")),
    )


__all__ = ["load_sections_config"]
