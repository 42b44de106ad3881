"""Metalog distribution fitting for expert-elicited S-curves."""

from metalog_elicitation.distributions.api import (
    evaluate,
    fit_distribution,
    get_distribution_info,
    get_plot_data,
    sample,
)
from metalog_elicitation.schema.points import DataPoint

__all__ = [
    "DataPoint",
    "evaluate",
    "fit_distribution",
    "get_distribution_info",
    "get_plot_data",
    "sample",
]
