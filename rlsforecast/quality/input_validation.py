"""Input validation for the recursive forecast-error computation.

Checks, before any estimation starts:
  - **Shapes**: ``y`` is a single series, ``x`` is a vector or a 2-D
    matrix, and both have the same number of rows.
  - **Missing values**: no NaN (or infinite) entries in ``y`` or ``x``.
  - **Parameter ranges**: ``pi0`` lies strictly inside (0, 1) and ``h``
    is an integer with ``1 <= h <= n - 1``.

Every violation raises a subclass of ``InputValidationError`` naming the
offending argument.  Nothing is coerced silently: a ``y`` with more
than one column is rejected rather than flattened.
"""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass, field
from typing import Any

import numpy as np
import pandas as pd

from rlsforecast.constants import PREDICTOR_PREFIX

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class InputValidationError(ValueError):
    """Base class for rejected inputs."""

    def __init__(self, argument: str, message: str) -> None:
        self.argument = argument
        super().__init__(message)


class ShapeError(InputValidationError):
    """Raised for null, non-numeric or wrongly shaped ``y`` / ``x``."""


class MissingValueError(InputValidationError):
    """Raised when ``y`` or ``x`` contains NaN or infinite entries."""


class ParameterRangeError(InputValidationError):
    """Raised when ``pi0``, ``h`` or ``n_jobs`` is missing or out of range."""


# ---------------------------------------------------------------------------
# Validated container
# ---------------------------------------------------------------------------


@dataclass
class ValidatedInputs:
    """Normalised inputs ready for estimation."""

    y: np.ndarray                      # shape (n,)
    x: np.ndarray                      # shape (n, p)
    pi0: float
    h: int
    k0: int
    predictor_names: list[str] = field(default_factory=list)
    # Row labels of y (pandas index) or None for plain arrays.
    index: pd.Index | None = None

    @property
    def n(self) -> int:
        return int(self.y.shape[0])

    @property
    def p(self) -> int:
        return int(self.x.shape[1])

    @property
    def n_forecasts(self) -> int:
        return self.n - self.k0 - self.h + 1


# ---------------------------------------------------------------------------
# Individual checks
# ---------------------------------------------------------------------------


def _to_float_array(value: Any, argument: str) -> np.ndarray:
    try:
        if isinstance(value, (pd.Series, pd.DataFrame)):
            # Nullable dtypes (Float64, Int64) hold pd.NA, which np.asarray rejects.
            value = value.to_numpy(dtype=float, na_value=np.nan)
        arr = np.asarray(value, dtype=float)
    except (TypeError, ValueError) as exc:
        raise ShapeError(argument, f"{argument} must be numeric") from exc
    return arr


def _check_finite(arr: np.ndarray, argument: str) -> None:
    if np.isnan(arr).any():
        raise MissingValueError(argument, f"{argument} must not contain NA")
    if not np.isfinite(arr).all():
        raise MissingValueError(argument, f"{argument} must not contain infinite values")


def validate_outcome(y: Any) -> np.ndarray:
    """Return ``y`` as a 1-D float array.

    A single-column 2-D array or DataFrame is accepted; anything wider
    raises ``ShapeError``.
    """
    if y is None:
        raise ShapeError("y", "y must be one dimension")

    arr = _to_float_array(y, "y")
    if arr.ndim == 2 and arr.shape[1] == 1:
        arr = arr[:, 0]
    if arr.ndim != 1:
        raise ShapeError("y", f"y must be one dimension, got shape {arr.shape}")
    if arr.shape[0] == 0:
        raise ShapeError("y", "y must not be empty")

    _check_finite(arr, "y")
    return arr


def validate_predictors(x: Any) -> np.ndarray:
    """Return ``x`` as a 2-D float array of shape (n, p).

    A 1-D vector is a single predictor column.
    """
    if x is None:
        raise ShapeError("x", "x must be a vector or a matrix")

    arr = _to_float_array(x, "x")
    if arr.ndim == 1:
        arr = arr[:, np.newaxis]
    if arr.ndim != 2:
        raise ShapeError("x", f"x must be a vector or a matrix, got shape {arr.shape}")
    if arr.shape[1] == 0:
        raise ShapeError("x", "x must have at least one predictor column")

    _check_finite(arr, "x")
    return arr


def validate_pi0(pi0: Any) -> float:
    """Return ``pi0`` as a float strictly inside (0, 1)."""
    if pi0 is None or isinstance(pi0, bool) or not isinstance(pi0, numbers.Real):
        raise ParameterRangeError("pi0", "pi0 must be between 0 and 1")
    value = float(pi0)
    if not 0.0 < value < 1.0:
        raise ParameterRangeError("pi0", f"pi0 must be between 0 and 1, got {value}")
    return value


def validate_horizon(h: Any, n: int) -> int:
    """Return ``h`` as an int in ``[1, n - 1]``.

    Fractional values are truncated toward zero (``2.7`` becomes ``2``).
    """
    if h is None or isinstance(h, bool) or not isinstance(h, numbers.Real):
        raise ParameterRangeError("h", "h must be a positive integer")
    try:
        value = int(h)
    except (ValueError, OverflowError) as exc:
        raise ParameterRangeError("h", "h must be a positive integer") from exc

    if value != h:
        logger.warning("Horizon h=%s truncated to %d", h, value)
    if value <= 0 or value > n - 1:
        raise ParameterRangeError(
            "h", f"h must be a positive integer no larger than n-1={n - 1}, got {h}"
        )
    return value


def initial_window(n: int, pi0: float) -> int:
    """Size of the first estimation window, ``round(n * pi0)``.

    Python's ``round`` rounds half to even, matching R's ``round``.
    """
    return int(round(n * pi0))


def _predictor_names(x: Any, p: int) -> list[str]:
    if isinstance(x, pd.DataFrame):
        return [str(c) for c in x.columns]
    if isinstance(x, pd.Series) and x.name is not None:
        return [str(x.name)]
    return [f"{PREDICTOR_PREFIX}{j + 1}" for j in range(p)]


def _row_index(y: Any, x: Any) -> pd.Index | None:
    for obj in (y, x):
        if isinstance(obj, (pd.Series, pd.DataFrame)):
            return obj.index
    return None


# ---------------------------------------------------------------------------
# Top-level entry point
# ---------------------------------------------------------------------------


def validate_inputs(y: Any, x: Any, pi0: Any, h: Any) -> ValidatedInputs:
    """Validate and normalise all inputs of ``recursive_hstep_fast``.

    Parameters
    ----------
    y:
        Outcome series (1-D array, list, Series, or single-column frame).
    x:
        Predictor vector or matrix (array, Series or DataFrame).
    pi0:
        Fraction of the sample used for the first estimation window.
    h:
        Forecast horizon.

    Returns
    -------
    ValidatedInputs

    Raises
    ------
    ShapeError, MissingValueError, ParameterRangeError
    """
    y_arr = validate_outcome(y)
    x_arr = validate_predictors(x)

    n = y_arr.shape[0]
    if x_arr.shape[0] != n:
        raise ShapeError(
            "x", f"y and x must have same length of rows ({n} != {x_arr.shape[0]})"
        )

    pi0_value = validate_pi0(pi0)
    h_value = validate_horizon(h, n)

    k0 = initial_window(n, pi0_value)
    if k0 + h_value > n:
        raise ParameterRangeError(
            "pi0",
            f"no out-of-sample forecasts: k0={k0} plus h={h_value} exceeds n={n}",
        )

    return ValidatedInputs(
        y=y_arr,
        x=x_arr,
        pi0=pi0_value,
        h=h_value,
        k0=k0,
        predictor_names=_predictor_names(x, x_arr.shape[1]),
        index=_row_index(y, x),
    )
