"""Implementation of the ``citesmith list`` command."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer

from citesmith.core.bibliography import BibliographyLoader, select_entries
from citesmith.core.bibliography.entries import format_persons
from citesmith.core.config import LayeredConfig, ScholarConfig, load_scholar_config
from citesmith.core.exceptions import CitesmithError, exception_hint

from .._options import ConfigOption, DebugOption, VerbosityOption
from ..state import configure_logging, emit_error, emit_warning, get_cli_state, set_cli_state


if TYPE_CHECKING:
    from pybtex.database import Entry
    from rich.panel import Panel


def build_reference_panel(entry: Entry) -> Panel:
    """Create a Rich panel that visualises a single bibliography entry."""
    from rich import box
    from rich.panel import Panel
    from rich.table import Table

    fields = {str(name).lower(): str(value) for name, value in entry.fields.items()}
    grid = Table.grid(padding=(0, 1))
    grid.add_column(style="bold green", no_wrap=True)
    grid.add_column()

    def _add_field(label: str, value: str | None) -> None:
        if value is None or not value.strip():
            return
        grid.add_row(label, value)

    _add_field("Title", fields.pop("title", None))
    _add_field("Year", fields.pop("year", None))
    _add_field("Journal", fields.pop("journal", None) or fields.pop("booktitle", None))
    for role in entry.persons:
        _add_field(role.title() + "s", format_persons(entry, role))
    for key, value in sorted(fields.items()):
        _add_field(key.title(), value)

    return Panel(grid, title=f"{entry.key} ({entry.type})", box=box.SIMPLE)


def list_bibliography(
    files: Annotated[
        list[Path],
        typer.Argument(
            metavar="BIB...",
            help="BibTeX files to load.",
            exists=True,
            dir_okay=False,
            readable=True,
            resolve_path=True,
        ),
    ],
    query: Annotated[
        str | None,
        typer.Option("--query", "-q", help="Query expression such as '@article[year=2001]'."),
    ] = None,
    sort_by: Annotated[
        str | None,
        typer.Option("--sort-by", help="Field used to sort entries ('none' keeps file order)."),
    ] = None,
    order: Annotated[
        str | None,
        typer.Option("--order", help="'ascending' or 'descending'."),
    ] = None,
    config: ConfigOption = None,
    verbose: VerbosityOption = 0,
    debug: DebugOption = False,
) -> None:
    """List bibliography entries."""
    set_cli_state(verbosity=verbose, debug=debug)
    configure_logging(verbose)

    try:
        settings = load_scholar_config(config) if config is not None else ScholarConfig()
        layered = LayeredConfig.from_site(settings).with_overlay(
            {"sort_by": sort_by, "order": order}
        )
        loader = BibliographyLoader(layered, files=[str(path) for path in files])
        entries = select_entries(loader.bibliography, layered, query=query)
    except CitesmithError as exc:
        if debug:
            raise
        emit_error(exception_hint(exc) or str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    if not entries:
        emit_warning(f"No entries matched the query '{query or layered['query']}'.")

    console = get_cli_state().console
    console.print(f"[bold]Entries[/bold] ({len(entries)})")
    for entry in entries:
        console.print(build_reference_panel(entry))


__all__ = ["build_reference_panel", "list_bibliography"]
