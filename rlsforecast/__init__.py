"""rlsforecast -- out-of-sample forecast errors by recursive least squares.

Fits ``y_(t+h) = b0 + b1 * x_(j,t)`` for every candidate predictor
``x_j`` (plus an intercept-only benchmark) on an expanding window and
returns the h-step-ahead forecast errors.  Coefficients are updated
with the Sherman-Morrison formula, so the design matrix is inverted
only once per model.
"""

from rlsforecast.models.recursive_forecaster import ForecastErrors, recursive_hstep_fast
from rlsforecast.models.recursive_ls import SingularDesignError
from rlsforecast.quality.input_validation import (
    InputValidationError,
    MissingValueError,
    ParameterRangeError,
    ShapeError,
)

__version__ = "0.1.0"

__all__ = [
    "ForecastErrors",
    "InputValidationError",
    "MissingValueError",
    "ParameterRangeError",
    "ShapeError",
    "SingularDesignError",
    "recursive_hstep_fast",
]
