"""Convert CLI command: human durations and probabilities into normalized space."""

from __future__ import annotations

import json
from typing import Optional

import typer

from metalog_elicitation.cli.common import EXIT_INVALID_INPUT, err_console
from metalog_elicitation.conversion import (
    format_probability,
    format_time,
    parse_duration,
    parse_probability,
    time_to_normalized,
)


def convert(
    duration: Optional[str] = typer.Option(None, "--duration", help='Duration such as "6 months" or "2 years"'),
    probability: Optional[str] = typer.Option(None, "--probability", help='Probability such as "25%" or "0.25"'),
) -> None:
    """Print the normalized x (time) and y (probability) for human-unit inputs."""

    if duration is None and probability is None:
        err_console.print("[red]Provide --duration and/or --probability[/red]")
        raise typer.Exit(code=EXIT_INVALID_INPUT)

    result: dict = {}
    if duration is not None:
        years = parse_duration(duration)
        if years is None:
            err_console.print(f"[red]Invalid duration:[/red] {duration!r}")
            raise typer.Exit(code=EXIT_INVALID_INPUT)
        result.update({"years": years, "x": time_to_normalized(years), "time": format_time(years)})
    if probability is not None:
        value = parse_probability(probability)
        if value is None:
            err_console.print(f"[red]Invalid probability:[/red] {probability!r}")
            raise typer.Exit(code=EXIT_INVALID_INPUT)
        result.update({"y": value, "probability": format_probability(value)})
    typer.echo(json.dumps(result))
