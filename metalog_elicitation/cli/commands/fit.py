"""Fit CLI command wiring."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from metalog_elicitation.cli.common import cli_errors, load_cli_settings, load_points
from metalog_elicitation.distributions.api import fit_distribution, get_distribution_info
from metalog_elicitation.utils.logging import get_logger

console = Console()
log = get_logger(__name__, component="cli_fit")


def _render_info(info: dict) -> None:
    table = Table(title="Fitted distribution")
    table.add_column("Field")
    table.add_column("Value")
    table.add_row("type", info["type"])
    table.add_row("status", info["status"])
    if info["type"] == "metalog":
        table.add_row("terms", str(info["num_terms"]))
        table.add_row("coefficients", ", ".join(f"{c:.6f}" for c in info["coefficients"]))
        table.add_row("max error", f"{info.get('max_error', float('nan')):.4f}")
    else:
        table.add_row("curve points", str(info["num_points"]))
        table.add_row("fallback reason", str(info["fallback_reason"]))
    table.add_row("data points", str(info["num_data_points"]))
    attempts = "; ".join(f"k={a['num_terms']}: {a['outcome']}" for a in info["attempts"])
    table.add_row("attempts", attempts or "-")
    console.print(table)


def fit(
    points_file: Path = typer.Argument(..., help="CSV (x,y columns) or JSON list of {x, y} points"),
    config: Optional[Path] = typer.Option(None, "--config", help="Optional YAML/JSON settings file"),
    quality_threshold: Optional[float] = typer.Option(
        None, "--quality-threshold", help="Maximum absolute x error for a metalog fit"
    ),
    time_units: str = typer.Option(
        "normalized", "--time-units", help="Units of the x column: normalized | years"
    ),
    as_json: bool = typer.Option(False, "--json", help="Print distribution info as JSON"),
) -> None:
    """Fit a metalog (or interpolation fallback) to elicited points and describe it."""

    with cli_errors():
        settings = load_cli_settings(config, quality_threshold)
        points = load_points(points_file, time_units)
        distribution = fit_distribution(points, settings)
        info = get_distribution_info(distribution)

    if as_json:
        typer.echo(json.dumps(info, indent=2))
    else:
        _render_info(info)
