"""Normalized (time, cumulative probability) control points and their validation."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterable, List, Mapping, Sequence, Tuple

import pandas as pd

from metalog_elicitation.exceptions import InvalidInputError


@dataclass(frozen=True, slots=True)
class DataPoint:
    """A control point in [0,1]²: ``x`` is normalized time, ``y`` cumulative probability."""

    x: float
    y: float

    def to_dict(self) -> dict:
        return {"x": self.x, "y": self.y}


Points = Tuple[DataPoint, ...]


def _coerce(record: Any) -> DataPoint:
    if isinstance(record, DataPoint):
        return record
    if isinstance(record, Mapping):
        try:
            return DataPoint(x=float(record["x"]), y=float(record["y"]))
        except KeyError as exc:
            raise InvalidInputError(f"Point is missing coordinate {exc}") from exc
    try:
        x, y = record
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Cannot interpret {record!r} as an (x, y) point") from exc
    return DataPoint(x=float(x), y=float(y))


def points_from_records(records: Iterable[Any] | pd.DataFrame) -> List[DataPoint]:
    """Build DataPoints from mappings, (x, y) pairs, DataPoints or an x/y DataFrame."""

    if isinstance(records, pd.DataFrame):
        missing = {"x", "y"} - set(records.columns)
        if missing:
            raise InvalidInputError(f"Point table missing required columns: {sorted(missing)}")
        return [DataPoint(x=float(x), y=float(y)) for x, y in zip(records["x"], records["y"])]
    try:
        return [_coerce(r) for r in records]
    except (TypeError, ValueError) as exc:
        raise InvalidInputError(f"Invalid point data: {exc}") from exc


def points_to_frame(points: Sequence[DataPoint]) -> pd.DataFrame:
    return pd.DataFrame({"x": [p.x for p in points], "y": [p.y for p in points]}, columns=["x", "y"])


def read_points(path: Path) -> List[DataPoint]:
    """Read points from a CSV (x,y columns) or JSON (list of {x, y}) file."""

    if not path.exists():
        raise InvalidInputError(f"Points file not found: {path}")
    if path.suffix.lower() == ".json":
        try:
            payload = json.loads(path.read_text())
        except json.JSONDecodeError as exc:
            raise InvalidInputError(f"Invalid JSON in {path}: {exc}") from exc
        if isinstance(payload, Mapping):
            payload = payload.get("points", [])
        return points_from_records(payload)
    return points_from_records(pd.read_csv(path))


def _pct(value: float) -> str:
    return f"{value * 100:.1f}%"


def validate_points(points: Sequence[DataPoint]) -> Points:
    """Check that ``points`` describe a CDF the metalog fitter can work with.

    Returns the points sorted ascending by x. Raises InvalidInputError for fewer
    than two points, coordinates outside [0,1], duplicate times, decreasing
    probabilities, and boundary combinations known to be infeasible for metalogs
    (an exact 0%→100% span, or near-0/near-1 endpoints spanning more than 90%).
    """

    if len(points) < 2:
        raise InvalidInputError("Need at least 2 data points")

    for p in points:
        if not (math.isfinite(p.x) and math.isfinite(p.y)):
            raise InvalidInputError("All coordinates must be finite numbers")
        if p.x < 0:
            raise InvalidInputError("All times must be non-negative")
        if p.x > 1 or not (0.0 <= p.y <= 1.0):
            raise InvalidInputError("Points must lie in the normalized [0,1] range")

    ordered = tuple(sorted(points, key=lambda p: (p.x, p.y)))
    for prev, cur in zip(ordered, ordered[1:]):
        if cur.x == prev.x:
            raise InvalidInputError(f"Duplicate time value {cur.x:.4f}; times must be unique")
        if cur.y < prev.y:
            raise InvalidInputError(f"Probability cannot decrease: {_pct(prev.y)} → {_pct(cur.y)}")

    first, last = ordered[0], ordered[-1]
    if first.y == 0 and last.y == 1:
        raise InvalidInputError("0% → 100% probability range is typically infeasible for metalog distributions")
    if (first.y <= 0.01 or last.y >= 0.99) and (last.y - first.y) > 0.9:
        raise InvalidInputError("Extreme probability ranges near boundaries may cause numerical instability")

    return ordered


def sort_by_probability(points: Iterable[DataPoint]) -> Points:
    return tuple(sorted(points, key=lambda p: (p.y, p.x)))


__all__ = [
    "DataPoint",
    "Points",
    "points_from_records",
    "points_to_frame",
    "read_points",
    "sort_by_probability",
    "validate_points",
]
