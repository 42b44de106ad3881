import pytest

from metalog_elicitation.conversion import (
    MAX_TIME_YEARS,
    MIN_TIME_YEARS,
    format_probability,
    format_time,
    normalized_to_time,
    parse_duration,
    parse_probability,
    time_to_normalized,
)


def test_time_axis_spans_one_day_to_one_century() -> None:
    assert time_to_normalized(MIN_TIME_YEARS) == pytest.approx(0.0)
    assert time_to_normalized(MAX_TIME_YEARS) == pytest.approx(1.0)
    assert time_to_normalized(1e-6) == pytest.approx(0.0)
    assert time_to_normalized(1e6) == pytest.approx(1.0)
    assert normalized_to_time(time_to_normalized(2.5)) == pytest.approx(2.5)
    assert normalized_to_time(0.0) == pytest.approx(MIN_TIME_YEARS)


@pytest.mark.parametrize(
    "text, years",
    [
        ("6 months", 0.5),
        ("2 weeks", 2 / 52.18),
        ("10 days", 10 / 365.25),
        ("2 years", 2.0),
        ("3 decades", 30.0),
        ("1 century", 100.0),
        ("2 centuries", 200.0),
        ("5", 5.0),
    ],
)
def test_parse_duration(text: str, years: float) -> None:
    assert parse_duration(text) == pytest.approx(years)


@pytest.mark.parametrize("text", ["abc", "", "-1 years", "0 months"])
def test_parse_duration_rejects_invalid(text: str) -> None:
    assert parse_duration(text) is None


@pytest.mark.parametrize(
    "text, probability",
    [("25%", 0.25), ("25", 0.25), ("0.25", 0.25), ("1", 0.01), ("150%", 1.0), ("0", 0.0)],
)
def test_parse_probability(text: str, probability: float) -> None:
    assert parse_probability(text) == pytest.approx(probability)


def test_parse_probability_rejects_text() -> None:
    assert parse_probability("likely") is None


@pytest.mark.parametrize(
    "years, label",
    [
        (10 / 365.25, "10 days"),
        (0.5, "6.0 months"),
        (1.0, "1 year"),
        (2.0, "2.0 years"),
        (50.0, "50 years"),
        (100.0, "1 century"),
        (200.0, "2.0 centuries"),
    ],
)
def test_format_time(years: float, label: str) -> None:
    assert format_time(years) == label


def test_format_probability() -> None:
    assert format_probability(0.25) == "25%"
    assert format_probability(1.0) == "100%"
