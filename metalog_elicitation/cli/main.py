"""Typer CLI entrypoint."""

from __future__ import annotations

import sys

import typer

from metalog_elicitation.cli.commands.convert import convert
from metalog_elicitation.cli.commands.fit import fit
from metalog_elicitation.cli.commands.plot import plot
from metalog_elicitation.cli.commands.sample import sample
from metalog_elicitation.utils.logging import configure_logging, get_logger

EXIT_UNEXPECTED = 255

app = typer.Typer(help="Metalog elicitation CLI")

app.command()(fit)
app.command()(sample)
app.command()(plot)
app.command()(convert)

log = get_logger(__name__, component="cli")


def main() -> None:
    """Run the CLI; domain errors are mapped to exit codes inside each command."""

    configure_logging(component="cli")
    try:
        app()
    except Exception:
        log.exception("Unhandled exception")
        sys.exit(EXIT_UNEXPECTED)


if __name__ == "__main__":
    main()
