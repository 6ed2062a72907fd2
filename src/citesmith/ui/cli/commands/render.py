"""Implementation of the ``citesmith render`` command."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer

from citesmith.adapters.markdown import render_markdown
from citesmith.core.config import ScholarConfig, load_scholar_config
from citesmith.core.exceptions import CitesmithError, exception_hint

from .._options import (
    BibliographyOption,
    ConfigOption,
    DebugOption,
    LayoutsOption,
    OutputPathOption,
    VerbosityOption,
)
from ..state import configure_logging, emit_error, get_cli_state, set_cli_state


def resolve_settings(
    config: Path | None,
    bibliography: list[Path] | None,
) -> ScholarConfig:
    """Load the configuration file and apply command line source overrides."""
    settings = load_scholar_config(config) if config is not None else ScholarConfig()
    if bibliography:
        settings = settings.model_copy(
            update={"bibliography": [str(path) for path in bibliography]}
        )
    return settings


def render(
    input_path: Annotated[
        Path,
        typer.Argument(
            metavar="INPUT",
            help="Markdown document containing scholar tags.",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    config: ConfigOption = None,
    bibliography: BibliographyOption = None,
    layouts: LayoutsOption = None,
    output: OutputPathOption = None,
    verbose: VerbosityOption = 0,
    debug: DebugOption = False,
) -> None:
    """Render a Markdown document, expanding citations and bibliographies to HTML."""
    set_cli_state(verbosity=verbose, debug=debug)
    configure_logging(verbose)

    try:
        settings = resolve_settings(config, bibliography)
        source = input_path.read_text(encoding="utf-8")
        document = render_markdown(source, config=settings, layouts=layouts)
    except CitesmithError as exc:
        if debug:
            raise
        emit_error(exception_hint(exc) or str(exc), exception=exc)
        raise typer.Exit(code=1) from exc

    if output is None:
        typer.echo(document.html)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(document.html + "\n", encoding="utf-8")
    if verbose:
        get_cli_state().err_console.print(
            f"Wrote {output} ({len(document.cited)} citation(s))."
        )


__all__ = ["render", "resolve_settings"]
