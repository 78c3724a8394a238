"""Cyclopts CLI entrypoint for building and inspecting df12 site sections.

The ``sections`` console script defined here loads ``config/sections.yaml``,
builds (or validates) the cached Sections Record and navigation menu, and lets
you check how categories are classified and how the menus render. Typical usage
involves running ``sections configure`` after editing the section list, and
``sections classify`` or ``sections menu`` while debugging templates.

Examples
--------
Build the section cache for the default configuration:

>>> from df12_sections.cli import main
>>> main()  # doctest: +SKIP

Check which section a category belongs to:

>>> from df12_sections.cli import app
>>> app(["classify", "21", "--config", "config/sections.yaml"])  # doctest: +SKIP
2 sport
"""

from __future__ import annotations

import logging
import typing as typ
from pathlib import Path

import cyclopts
from cyclopts import App, Parameter

from .config import load_sections_config
from .evaluator import PageContext
from .manager import SectionManager
from .store import JsonFileStore, MemoryStore
from .taxonomy import StaticTaxonomy

DEFAULT_CONFIG = Path("config/sections.yaml")

app = App(name="sections", config=cyclopts.config.Env("INPUT_", command=False))  # type: ignore[unknown-argument]


def _open_manager(config: Path, *, force: bool = False) -> SectionManager:
    """Build a SectionManager from the YAML config and its configured store."""
    site_config = load_sections_config(config)
    taxonomy = StaticTaxonomy(site_config.taxonomy)
    store = (
        JsonFileStore(site_config.store_path)
        if site_config.store_path
        else MemoryStore()
    )
    return SectionManager.from_config(
        site_config, taxonomy=taxonomy, store=store, force_recompute=force
    )


@app.command(help="Build or validate the cached sections record and menus.")
def configure(
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to sections config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
    force: typ.Annotated[
        bool, Parameter(help="Rebuild even when the sections are unchanged")
    ] = False,
) -> None:
    """Build the Sections Record and menu cache for ``config``.

    Parameters
    ----------
    config : Path, optional
        Path to the ``sections.yaml`` configuration file (overridable via
        ``INPUT_CONFIG``).
    force : bool, optional
        Rebuild the cache even when the requested sections match it.

    Returns
    -------
    None
        Prints the number of skipped entries, the resolved sections, and whether
        the cache was rebuilt.
    """
    with _open_manager(config, force=force) as manager:
        if manager.warnings:
            print(f"skipped {len(manager.warnings)} entries (see warnings)")
        record = manager.record
        state = "rebuilt" if manager.rebuilt else "unchanged"
        print(f"sections {state}: {', '.join(record.slugs[i] for i in record.ids)}")
        print(f"home: {record.home_slug}")


@app.command(help="Print the section a category belongs to.")
def classify(
    category: int,
    *,
    config: typ.Annotated[
        Path, Parameter(help="Path to sections config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
) -> None:
    """Print ``<section id> <section slug>`` for ``category``."""
    with _open_manager(config) as manager:
        section = manager.section_of(category)
        print(f"{section.id} {section.slug}")


@app.command(help="Render a section menu for a page context.")
def menu(
    *,
    menu_type: typ.Annotated[
        typ.Literal["primary", "secondary"],
        Parameter(name="--type", help="Menu tier"),
    ] = "primary",
    category: typ.Annotated[
        int | None, Parameter(help="Render as a listing of this category")
    ] = None,
    front_page: typ.Annotated[
        bool, Parameter(help="Render as the front page")
    ] = False,
    config: typ.Annotated[
        Path, Parameter(help="Path to sections config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
) -> None:
    """Evaluate a page context and print the rendered menu markup.

    Parameters
    ----------
    menu_type : str, optional
        ``primary`` (default) or ``secondary``.
    category : int or None, optional
        Treat the page as the listing of this category.
    front_page : bool, optional
        Treat the page as the front page; takes precedence over ``category``.
    config : Path, optional
        Path to the ``sections.yaml`` configuration file.
    """
    if front_page:
        context = PageContext.front_page()
    elif category is not None:
        context = PageContext.listing(category)
    else:
        context = PageContext.other()
    with _open_manager(config) as manager:
        manager.evaluate(context)
        print(manager.render(menu_type), end="")


@app.command(help="Render the grouped overview of all sections.")
def overview(
    *,
    per_group: typ.Annotated[
        int | None, Parameter(help="Sections per group (default from config)")
    ] = None,
    wrap: typ.Annotated[
        bool, Parameter(help="Wrap groups in the container element")
    ] = True,
    config: typ.Annotated[
        Path, Parameter(help="Path to sections config", env_var="INPUT_CONFIG")
    ] = DEFAULT_CONFIG,
) -> None:
    """Print the section overview markup."""
    overrides: dict[str, typ.Any] = {"wrap_container": wrap}
    if per_group is not None:
        overrides["items_per_group"] = per_group
    with _open_manager(config) as manager:
        print(manager.section_overview(**overrides), end="")


def main() -> None:
    """Invoke the Cyclopts application that powers the `sections` console command.

    Returns
    -------
    None
        This function executes for its side effects of parsing CLI arguments
        and running the requested subcommand.

    Examples
    --------
    >>> main()  # doctest: +SKIP
    """
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s: %(message)s")
    app()


if __name__ == "__main__":  # pragma: no cover - manual invocation helper
    main()
