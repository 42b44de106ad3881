"""Plot CLI command wiring."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from metalog_elicitation.cli.common import cli_errors, load_cli_settings, load_points
from metalog_elicitation.distributions.api import fit_distribution
from metalog_elicitation.utils.plots import plot_distribution


def plot(
    points_file: Path = typer.Argument(..., help="CSV (x,y columns) or JSON list of {x, y} points"),
    output: Path = typer.Option(Path("distribution.png"), "--output", help="PNG output path"),
    num_points: Optional[int] = typer.Option(None, "--points", help="Number of probability steps to sample"),
    title: Optional[str] = typer.Option(None, "--title", help="Figure title"),
    config: Optional[Path] = typer.Option(None, "--config", help="Optional YAML/JSON settings file"),
    time_units: str = typer.Option(
        "normalized", "--time-units", help="Units of the x column: normalized | years"
    ),
) -> None:
    """Render the fitted S-curve and the elicited points to a PNG."""

    with cli_errors():
        settings = load_cli_settings(config)
        points = load_points(points_file, time_units)
        distribution = fit_distribution(points, settings)
        path = plot_distribution(distribution, output, num_points=num_points, title=title, settings=settings)
    typer.echo(str(path))
