"""Matplotlib rendering of fitted S-curves against the elicited points."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from metalog_elicitation.config.settings import DEFAULT_SETTINGS, FitSettings
from metalog_elicitation.distributions.api import get_distribution_info, get_plot_data
from metalog_elicitation.distributions.models import Distribution, MetalogDistribution
from metalog_elicitation.exceptions import DependencyError
from metalog_elicitation.utils.logging import get_logger

log = get_logger(__name__, component="plots")


def plot_distribution(
    distribution: Distribution,
    output_path: Path,
    num_points: Optional[int] = None,
    title: Optional[str] = None,
    settings: FitSettings = DEFAULT_SETTINGS,
) -> Path:
    """Write a PNG of the fitted curve with the original control points overlaid."""

    try:
        import matplotlib

        matplotlib.use("Agg")
        import matplotlib.pyplot as plt
    except Exception as exc:  # pragma: no cover - optional dependency
        raise DependencyError("matplotlib is required for plot generation") from exc

    curve = get_plot_data(distribution, num_points, settings)
    info = get_distribution_info(distribution)
    if isinstance(distribution, MetalogDistribution):
        originals = distribution.data_points
        label = f"metalog (k={info['num_terms']})"
    else:
        originals = distribution.curve.original_data
        label = info["status"]

    fig, ax = plt.subplots(figsize=(8, 5))
    try:
        ax.plot([p.x for p in curve], [p.y for p in curve], linewidth=2, label=label)
        ax.scatter([p.x for p in originals], [p.y for p in originals], color="black", zorder=3, label="elicited points")
        ax.set_xlim(0, 1)
        ax.set_ylim(0, 1)
        ax.set_xlabel("Normalized time")
        ax.set_ylabel("Cumulative probability")
        ax.set_title(title or "Elicited distribution")
        ax.grid(alpha=0.3)
        ax.legend(loc="lower right")

        output_path.parent.mkdir(parents=True, exist_ok=True)
        fig.savefig(output_path, dpi=150, bbox_inches="tight")
    finally:
        plt.close(fig)

    log.info(f"Saved distribution plot to {output_path}", extra={"distribution_type": distribution.kind})
    return output_path


__all__ = ["plot_distribution"]
