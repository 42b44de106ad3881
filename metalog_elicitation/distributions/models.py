"""Fit results: metalog payloads, interpolation curves and the Distribution union."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Literal, Optional, Tuple, Union

from metalog_elicitation.schema.points import DataPoint

AttemptOutcome = Literal["singular", "infeasible", "quality_failed", "accepted"]
FallbackReason = Literal["infeasible", "quality"]

INTERPOLATION_STATUS = "using smooth interpolation"


@dataclass(frozen=True, slots=True)
class Metalog:
    """Fitted metalog: ``coefficients[j - 1]`` weighs basis term gⱼ."""

    coefficients: Tuple[float, ...]
    num_terms: int
    data_points: Tuple[DataPoint, ...]

    def __post_init__(self) -> None:
        if len(self.coefficients) != self.num_terms:
            raise ValueError(
                f"Metalog has {len(self.coefficients)} coefficients but num_terms={self.num_terms}"
            )


@dataclass(frozen=True, slots=True)
class InterpolationCurve:
    """Render-ready monotone point sequence, extended with boundary points."""

    points: Tuple[DataPoint, ...]
    original_data: Tuple[DataPoint, ...]


@dataclass(frozen=True, slots=True)
class FitAttempt:
    num_terms: int
    outcome: AttemptOutcome
    detail: str = ""

    def to_dict(self) -> dict:
        return {"num_terms": self.num_terms, "outcome": self.outcome, "detail": self.detail}


@dataclass(frozen=True, slots=True)
class QualityReport:
    errors: Tuple[float, ...]
    max_error: float
    threshold: float

    @property
    def passed(self) -> bool:
        return all(e <= self.threshold for e in self.errors)


@dataclass(frozen=True)
class MetalogDistribution:
    kind: ClassVar[str] = "metalog"

    metalog: Metalog
    data_points: Tuple[DataPoint, ...]
    attempts: Tuple[FitAttempt, ...] = field(default_factory=tuple)
    quality: Optional[QualityReport] = None


@dataclass(frozen=True)
class InterpolationDistribution:
    kind: ClassVar[str] = "interpolation"

    curve: InterpolationCurve
    attempts: Tuple[FitAttempt, ...] = field(default_factory=tuple)
    fallback_reason: Optional[FallbackReason] = None


Distribution = Union[MetalogDistribution, InterpolationDistribution]


__all__ = [
    "AttemptOutcome",
    "Distribution",
    "FallbackReason",
    "FitAttempt",
    "INTERPOLATION_STATUS",
    "InterpolationCurve",
    "InterpolationDistribution",
    "Metalog",
    "MetalogDistribution",
    "QualityReport",
]
