"""Time and probability conversion between human units and the normalized [0,1] space.

Time is mapped on a log10 scale from one day to one century, so x = 0 is one day
and x = 1 is one hundred years.
"""

from __future__ import annotations

import math
import re
from typing import Optional

MIN_TIME_YEARS = 1 / 365.25
MAX_TIME_YEARS = 100.0

_NUMBER_PREFIX = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)")

# Checked in order; "centur" covers century and centuries.
_DURATION_UNITS = (
    ("day", 1 / 365.25),
    ("week", 1 / 52.18),
    ("month", 1 / 12),
    ("year", 1.0),
    ("decade", 10.0),
    ("centur", 100.0),
)


def _leading_number(text: str) -> Optional[float]:
    match = _NUMBER_PREFIX.match(text)
    return float(match.group(1)) if match else None


def clip(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


def time_to_normalized(years: float) -> float:
    log_min = math.log10(MIN_TIME_YEARS)
    log_max = math.log10(MAX_TIME_YEARS)
    log_value = math.log10(clip(years, MIN_TIME_YEARS, MAX_TIME_YEARS))
    return (log_value - log_min) / (log_max - log_min)


def normalized_to_time(value: float) -> float:
    log_min = math.log10(MIN_TIME_YEARS)
    log_max = math.log10(MAX_TIME_YEARS)
    return 10 ** (log_min + value * (log_max - log_min))


def parse_duration(text: str) -> Optional[float]:
    """Parse "6 months", "2 years", "3 decades" into years; bare numbers are years."""

    cleaned = text.lower().strip()
    number = _leading_number(cleaned)
    if number is None or number <= 0:
        return None
    for unit, years in _DURATION_UNITS:
        if unit in cleaned:
            return number * years
    return number


def parse_probability(text: str) -> Optional[float]:
    """Parse "25%", "25" or "0.25" into a probability in [0, 1].

    A percent sign, or an integer from 1 to 100, is read as a percentage.
    """

    cleaned = text.strip()
    number = _leading_number(cleaned)
    if number is None:
        return None
    if "%" in cleaned or (number.is_integer() and 1 <= number <= 100):
        number = number / 100
    return clip(number, 0.0, 1.0)


def format_time(years: float) -> str:
    if years < 1 / 365.25:
        days = years * 365.25
        return "1 day" if days == 1 else f"{days:.1f} days"
    if years < 1 / 12:
        days = round(years * 365.25)
        return "1 day" if days == 1 else f"{days} days"
    if years < 0.99:
        months = years * 12
        return "1 month" if months == 1 else f"{months:.1f} months"
    if years < 10:
        return "1 year" if years == 1 else f"{years:.1f} years"
    if years < 100:
        return f"{years:.0f} years"
    centuries = years / 100
    return "1 century" if centuries == 1 else f"{centuries:.1f} centuries"


def format_probability(probability: float) -> str:
    return f"{probability * 100:.0f}%"


__all__ = [
    "MAX_TIME_YEARS",
    "MIN_TIME_YEARS",
    "clip",
    "format_probability",
    "format_time",
    "normalized_to_time",
    "parse_duration",
    "parse_probability",
    "time_to_normalized",
]
