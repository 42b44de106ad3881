import math

import pytest

from metalog_elicitation.distributions.metalog.fit import (
    check_fit_quality,
    design_matrix,
    evaluate_metalog,
    fit_metalog,
    metalog_derivative,
)
from metalog_elicitation.distributions.models import Metalog
from metalog_elicitation.exceptions import DistributionFitError, SingularMatrixError
from metalog_elicitation.schema.points import DataPoint

SYMMETRIC = [DataPoint(0.3, 0.25), DataPoint(0.5, 0.5), DataPoint(0.7, 0.75)]


def _logit(y: float) -> float:
    return math.log(y / (1 - y))


def _logistic_points(ys):
    return [DataPoint(0.5 + 0.1 * _logit(y), y) for y in ys]


def test_exact_fit_for_three_symmetric_points() -> None:
    metalog = fit_metalog(SYMMETRIC, 3)
    assert metalog.num_terms == 3
    a1, a2, a3 = metalog.coefficients
    assert a1 == pytest.approx(0.5)
    assert a2 == pytest.approx(0.2 / math.log(3.0))
    assert a3 == pytest.approx(0.0, abs=1e-12)
    for p in SYMMETRIC:
        assert evaluate_metalog(metalog, p.y) == pytest.approx(p.x)


def test_least_squares_recovers_logistic_quantile() -> None:
    metalog = fit_metalog(_logistic_points([0.1, 0.25, 0.4, 0.6, 0.75, 0.9]), 2)
    assert metalog.coefficients == pytest.approx((0.5, 0.1), abs=1e-9)


def test_num_terms_capped_by_point_count() -> None:
    assert fit_metalog(SYMMETRIC, 5).num_terms == 3


def test_data_points_stored_in_probability_order() -> None:
    metalog = fit_metalog(list(reversed(SYMMETRIC)), 3)
    assert [p.y for p in metalog.data_points] == [0.25, 0.5, 0.75]


def test_equal_probabilities_make_design_singular() -> None:
    with pytest.raises(SingularMatrixError):
        fit_metalog([DataPoint(0.2, 0.5), DataPoint(0.8, 0.5)], 2)


def test_invalid_term_count_rejected() -> None:
    with pytest.raises(DistributionFitError):
        fit_metalog(SYMMETRIC, 0)
    with pytest.raises(DistributionFitError):
        fit_metalog([], 2)


def test_design_matrix_shape() -> None:
    matrix = design_matrix(SYMMETRIC, 3)
    assert matrix.shape == (3, 3)
    assert list(matrix[:, 0]) == [1.0, 1.0, 1.0]


def test_evaluation_clamps_probability() -> None:
    metalog = Metalog(coefficients=(0.5, 0.1), num_terms=2, data_points=())
    assert evaluate_metalog(metalog, 0.0) == evaluate_metalog(metalog, 0.001)
    assert math.isfinite(evaluate_metalog(metalog, 1.0))
    assert metalog_derivative(metalog, 0.5) == pytest.approx(0.4)


def test_coefficient_count_must_match_terms() -> None:
    with pytest.raises(ValueError):
        Metalog(coefficients=(0.5,), num_terms=2, data_points=())


def test_quality_report_flags_large_errors() -> None:
    exact = fit_metalog(SYMMETRIC, 3)
    report = check_fit_quality(exact, SYMMETRIC)
    assert report.passed
    assert report.max_error < 1e-9

    shifted = Metalog(coefficients=(0.55, exact.coefficients[1], 0.0), num_terms=3, data_points=())
    report = check_fit_quality(shifted, SYMMETRIC)
    assert not report.passed
    assert report.max_error == pytest.approx(0.05)
    assert report.threshold == 0.025
