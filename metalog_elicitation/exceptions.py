"""Project-wide exception types."""

class ElicitationError(Exception):
    """Base exception for all elicitation fitting errors."""


class InvalidInputError(ElicitationError):
    """Raised when a point set cannot describe a CDF or is known to be infeasible."""


class DistributionFitError(ElicitationError):
    """Raised when distribution fitting fails or is implausible."""


class SingularMatrixError(DistributionFitError):
    """Raised when a design or normal-equation matrix is not invertible."""


class InfeasibleFitError(DistributionFitError):
    """Raised when a fitted quantile function is not strictly increasing."""


class QualityFailureError(DistributionFitError):
    """Raised when a feasible fit misses a data point by more than the tolerance."""


class LogisticFitError(DistributionFitError):
    """Raised when the boundary logistic curve cannot be linearized."""


class UnsupportedOperationError(ElicitationError):
    """Raised when a distribution variant does not support the requested operation."""


class ConfigError(ElicitationError):
    """Raised when configuration is missing or malformed."""


class ConfigValidationError(ConfigError):
    """Raised when validation fails for supplied configuration."""


class DependencyError(ElicitationError):
    """Raised when required dependencies are missing or incompatible."""
