"""Shared helpers for CLI commands: point loading, settings and error mapping."""

from __future__ import annotations

from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional

import typer
from rich.console import Console

from metalog_elicitation.cli.validation import validate_quality_threshold, validate_time_units
from metalog_elicitation.config.loader import load_settings_with_precedence
from metalog_elicitation.config.settings import FitSettings
from metalog_elicitation.conversion import time_to_normalized
from metalog_elicitation.exceptions import ConfigError, DependencyError, DistributionFitError, InvalidInputError
from metalog_elicitation.schema.points import DataPoint, read_points
from metalog_elicitation.utils.logging import get_logger

err_console = Console(stderr=True)
log = get_logger(__name__, component="cli")

EXIT_CONFIG = 1
EXIT_INVALID_INPUT = 2
EXIT_FIT_ERROR = 3
EXIT_DEPENDENCY = 4


@contextmanager
def cli_errors() -> Iterator[None]:
    """Map domain errors onto exit codes with a readable message."""

    try:
        yield
    except ConfigError as exc:
        err_console.print(f"[red]Configuration error:[/red] {exc}")
        raise typer.Exit(code=EXIT_CONFIG)
    except InvalidInputError as exc:
        err_console.print(f"[red]Invalid input:[/red] {exc}")
        raise typer.Exit(code=EXIT_INVALID_INPUT)
    except DistributionFitError as exc:
        err_console.print(f"[red]Distribution fitting failed:[/red] {exc}")
        raise typer.Exit(code=EXIT_FIT_ERROR)
    except DependencyError as exc:
        err_console.print(f"[red]Missing dependency:[/red] {exc}")
        raise typer.Exit(code=EXIT_DEPENDENCY)


def load_points(path: Path, time_units: str = "normalized") -> List[DataPoint]:
    units = validate_time_units(time_units)
    points = read_points(path)
    if units == "years":
        points = [DataPoint(x=time_to_normalized(p.x), y=p.y) for p in points]
    log.debug("Loaded points", extra={"num_points": len(points)})
    return points


def load_cli_settings(config: Optional[Path], quality_threshold: Optional[float] = None) -> FitSettings:
    validate_quality_threshold(quality_threshold)
    return load_settings_with_precedence(config, {"quality_threshold": quality_threshold})


__all__ = [
    "EXIT_CONFIG",
    "EXIT_DEPENDENCY",
    "EXIT_FIT_ERROR",
    "EXIT_INVALID_INPUT",
    "cli_errors",
    "err_console",
    "load_cli_settings",
    "load_points",
]
