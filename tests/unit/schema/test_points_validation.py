import json

import pandas as pd
import pytest

from metalog_elicitation.exceptions import InvalidInputError
from metalog_elicitation.schema.points import (
    DataPoint,
    points_from_records,
    points_to_frame,
    read_points,
    sort_by_probability,
    validate_points,
)


def test_validate_returns_points_sorted_by_time() -> None:
    points = [DataPoint(0.7, 0.75), DataPoint(0.3, 0.25), DataPoint(0.5, 0.5)]
    assert [p.x for p in validate_points(points)] == [0.3, 0.5, 0.7]


@pytest.mark.parametrize(
    "points, message",
    [
        ([DataPoint(0.5, 0.5)], "Need at least 2 data points"),
        ([DataPoint(-0.1, 0.2), DataPoint(0.5, 0.5)], "All times must be non-negative"),
        ([DataPoint(0.2, 0.2), DataPoint(1.5, 0.5)], "normalized"),
        ([DataPoint(0.2, 0.2), DataPoint(0.5, 1.2)], "normalized"),
        ([DataPoint(0.2, 0.2), DataPoint(float("nan"), 0.5)], "finite"),
        ([DataPoint(0.2, 0.2), DataPoint(0.2, 0.5)], "Duplicate time"),
        ([DataPoint(0.2, 0.4), DataPoint(0.5, 0.3)], "Probability cannot decrease: 40.0% → 30.0%"),
        ([DataPoint(0.1, 0.0), DataPoint(0.9, 1.0)], "0% → 100%"),
        ([DataPoint(0.1, 0.01), DataPoint(0.9, 0.99)], "Extreme probability ranges"),
        ([DataPoint(0.1, 0.05), DataPoint(0.9, 0.99)], "Extreme probability ranges"),
    ],
)
def test_validation_errors(points, message) -> None:
    with pytest.raises(InvalidInputError, match=message):
        validate_points(points)


def test_near_boundary_with_narrow_span_is_allowed() -> None:
    assert len(validate_points([DataPoint(0.1, 0.005), DataPoint(0.4, 0.5)])) == 2


def test_equal_probabilities_are_allowed() -> None:
    assert len(validate_points([DataPoint(0.2, 0.5), DataPoint(0.8, 0.5)])) == 2


def test_sort_by_probability() -> None:
    points = [DataPoint(0.8, 0.9), DataPoint(0.2, 0.1)]
    assert sort_by_probability(points) == (DataPoint(0.2, 0.1), DataPoint(0.8, 0.9))


def test_points_from_records_variants() -> None:
    expected = [DataPoint(0.1, 0.2), DataPoint(0.3, 0.4)]
    assert points_from_records([{"x": 0.1, "y": 0.2}, {"x": 0.3, "y": 0.4}]) == expected
    assert points_from_records([(0.1, 0.2), [0.3, 0.4]]) == expected
    assert points_from_records(expected) == expected
    assert points_from_records(pd.DataFrame({"x": [0.1, 0.3], "y": [0.2, 0.4]})) == expected


def test_points_from_records_rejects_bad_rows() -> None:
    with pytest.raises(InvalidInputError):
        points_from_records([(0.1, 0.2, 0.3)])
    with pytest.raises(InvalidInputError):
        points_from_records([{"x": "abc", "y": 0.2}])
    with pytest.raises(InvalidInputError, match="missing required columns"):
        points_from_records(pd.DataFrame({"x": [0.1]}))


def test_points_frame_round_trip() -> None:
    points = [DataPoint(0.1, 0.2), DataPoint(0.3, 0.4)]
    frame = points_to_frame(points)
    assert list(frame.columns) == ["x", "y"]
    assert points_from_records(frame) == points


def test_read_points_from_csv_and_json(tmp_path) -> None:
    csv_path = tmp_path / "points.csv"
    csv_path.write_text("x,y\n0.125,0.25\n0.5,0.5\n")
    assert read_points(csv_path) == [DataPoint(0.125, 0.25), DataPoint(0.5, 0.5)]

    json_path = tmp_path / "points.json"
    json_path.write_text(json.dumps({"points": [{"x": 0.3, "y": 0.25}]}))
    assert read_points(json_path) == [DataPoint(0.3, 0.25)]

    list_path = tmp_path / "list.json"
    list_path.write_text(json.dumps([{"x": 0.5, "y": 0.5}]))
    assert read_points(list_path) == [DataPoint(0.5, 0.5)]


def test_read_points_errors(tmp_path) -> None:
    with pytest.raises(InvalidInputError, match="not found"):
        read_points(tmp_path / "missing.csv")
    bad = tmp_path / "bad.json"
    bad.write_text("{not json")
    with pytest.raises(InvalidInputError, match="Invalid JSON"):
        read_points(bad)
