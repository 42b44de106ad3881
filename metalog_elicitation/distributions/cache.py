"""Caller-owned memoization of fitted distributions keyed by a point-set hash."""

from __future__ import annotations

import hashlib
import json
from typing import Any, Callable, Dict, Iterable, Optional

from metalog_elicitation.config.settings import DEFAULT_SETTINGS, FitSettings
from metalog_elicitation.distributions.api import fit_distribution
from metalog_elicitation.distributions.models import Distribution
from metalog_elicitation.schema.points import points_from_records
from metalog_elicitation.utils.logging import get_logger

log = get_logger(__name__, component="fit_cache")

Fitter = Callable[..., Distribution]


def hash_points(points: Iterable[Any], settings: FitSettings = DEFAULT_SETTINGS, precision: int = 12) -> str:
    data = sorted((round(p.x, precision), round(p.y, precision)) for p in points_from_records(points))
    payload = json.dumps({"points": data, "settings": settings.to_dict()}, sort_keys=True)
    return hashlib.sha256(payload.encode()).hexdigest()


class FitCache:
    """Distributions are immutable, so a cached result can be handed out repeatedly."""

    def __init__(
        self,
        settings: FitSettings = DEFAULT_SETTINGS,
        fitter: Fitter = fit_distribution,
        precision: int = 12,
    ) -> None:
        self.settings = settings
        self.fitter = fitter
        self.precision = precision
        self._entries: Dict[str, Distribution] = {}
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        return len(self._entries)

    def key(self, points: Iterable[Any]) -> str:
        return hash_points(points, self.settings, self.precision)

    def get_or_fit(self, points: Iterable[Any]) -> Distribution:
        data = points_from_records(points)
        key = self.key(data)
        cached = self._entries.get(key)
        if cached is not None:
            self.hits += 1
            return cached
        self.misses += 1
        distribution = self.fitter(data, self.settings)
        self._entries[key] = distribution
        log.debug("Cached new fit", extra={"num_points": len(data), "distribution_type": distribution.kind})
        return distribution

    def invalidate(self, points: Optional[Iterable[Any]] = None) -> None:
        if points is None:
            self._entries.clear()
            return
        self._entries.pop(self.key(points), None)


__all__ = ["FitCache", "hash_points"]
