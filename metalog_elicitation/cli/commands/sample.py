"""Sample CLI command wiring."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer

from metalog_elicitation.cli.common import cli_errors, load_cli_settings, load_points
from metalog_elicitation.cli.validation import validate_sample_inputs
from metalog_elicitation.conversion import normalized_to_time
from metalog_elicitation.distributions.api import fit_distribution, plot_data_frame
from metalog_elicitation.utils.logging import get_logger

log = get_logger(__name__, component="cli_sample")


def sample(
    points_file: Path = typer.Argument(..., help="CSV (x,y columns) or JSON list of {x, y} points"),
    num_points: int = typer.Option(200, "--points", help="Number of probability steps to sample"),
    output: Optional[Path] = typer.Option(None, "--output", help="CSV output path (stdout when omitted)"),
    config: Optional[Path] = typer.Option(None, "--config", help="Optional YAML/JSON settings file"),
    time_units: str = typer.Option(
        "normalized", "--time-units", help="Units of the x column: normalized | years"
    ),
) -> None:
    """Write render-ready curve points for the fitted distribution."""

    with cli_errors():
        validate_sample_inputs(num_points=num_points, time_units=time_units)
        settings = load_cli_settings(config)
        points = load_points(points_file, time_units)
        distribution = fit_distribution(points, settings)
        frame = plot_data_frame(distribution, num_points, settings)

    if time_units.lower() == "years":
        frame["years"] = frame["x"].map(normalized_to_time)

    if output is None:
        typer.echo(frame.to_csv(index=False), nl=False)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    frame.to_csv(output, index=False)
    log.info(
        f"Wrote {len(frame)} curve points to {output}",
        extra={"distribution_type": distribution.kind, "num_points": len(frame)},
    )
