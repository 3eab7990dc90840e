"""Multi-model driver: one RLS run per predictor plus the benchmark.

For every column ``x_j`` of the predictor matrix the model
``y_(t+h) = b0 + b1 * x_(j,t)`` is estimated recursively on an expanding
window; the intercept-only model ``y_(t+h) = b0`` is the benchmark.
The first window is ``(1..k0)`` with ``k0 = round(n * pi0)`` and the
last ``(1..n-h)``, giving ``n - k0 - h + 1`` forecasts per model.

Sub-models share nothing but the read-only inputs, so they can be run
on a joblib thread pool (``n_jobs``); any failure aborts the batch.

Top-level entry point:
    ``recursive_hstep_fast(y, x, pi0, h) -> ForecastErrors``
"""

from __future__ import annotations

import logging
import numbers
from dataclasses import dataclass, field
from typing import Any, Iterator

import numpy as np
import pandas as pd
from joblib import Parallel, delayed

from rlsforecast.config_loader import get_forecast_defaults
from rlsforecast.constants import INTERCEPT_ONLY
from rlsforecast.models.recursive_ls import RLSState, forecast_errors
from rlsforecast.quality.input_validation import (
    ParameterRangeError,
    ValidatedInputs,
    validate_inputs,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Result container
# ---------------------------------------------------------------------------


@dataclass(eq=False)
class ForecastErrors:
    """Forecast errors of the benchmark and of each single-predictor model.

    Unpacks as the pair ``(ehat0, ehatj)``.
    """

    # Intercept-only model, shape (n_forecasts,).
    ehat0: np.ndarray
    # One column per predictor, shape (n_forecasts, p).
    ehatj: np.ndarray

    n: int = 0
    k0: int = 0
    h: int = 1
    pi0: float = float("nan")
    predictor_names: list[str] = field(default_factory=list)

    # Labels of the forecast targets (rows k0+h-1 .. n-1 of y), or None.
    target_index: pd.Index | None = None

    # RLS snapshots, filled only with keep_history=True.
    history0: list[RLSState] | None = None
    historyj: list[list[RLSState]] | None = None

    def __iter__(self) -> Iterator[np.ndarray]:
        yield self.ehat0
        yield self.ehatj

    @property
    def n_forecasts(self) -> int:
        return int(self.ehat0.shape[0])

    def to_frame(self) -> pd.DataFrame:
        """Errors as a DataFrame with columns ``ehat0`` and the predictor names."""
        data = np.column_stack([self.ehat0, self.ehatj])
        columns = ["ehat0", *self.predictor_names]
        index = self.target_index
        if index is None:
            index = pd.RangeIndex(self.k0 + self.h - 1, self.n, name="target_row")
        return pd.DataFrame(data, index=index, columns=columns)


# ---------------------------------------------------------------------------
# Sub-model runs
# ---------------------------------------------------------------------------


def _design_matrix(column: np.ndarray | None, n: int) -> np.ndarray:
    """``[1, x_j]`` for a predictor, ``[1]`` for the benchmark."""
    n_regressors = 1 if column is None else 2
    design = np.ones((n, n_regressors), dtype=float)
    if column is not None:
        design[:, 1] = column
    return design


def _run_submodel(
    inputs: ValidatedInputs,
    j: int | None,
    keep_history: bool,
) -> tuple[np.ndarray, list[RLSState] | None]:
    if j is None:
        label, column = INTERCEPT_ONLY, None
    else:
        label, column = inputs.predictor_names[j], inputs.x[:, j]

    logger.debug("Running sub-model %s", label)
    design = _design_matrix(column, inputs.n)
    return forecast_errors(
        design, inputs.y, inputs.k0, inputs.h,
        model=label, keep_history=keep_history,
    )


def _resolve_n_jobs(n_jobs: int | None) -> int:
    """Worker count for joblib; negative values count back from the CPU total."""
    if n_jobs is None:
        n_jobs = get_forecast_defaults().get("n_jobs", 1)
    if isinstance(n_jobs, bool) or not isinstance(n_jobs, numbers.Integral) or n_jobs == 0:
        raise ParameterRangeError(
            "n_jobs", f"n_jobs must be a non-zero integer, got {n_jobs!r}"
        )
    return int(n_jobs)


# ---------------------------------------------------------------------------
# Top-level entry point
# ---------------------------------------------------------------------------


def recursive_hstep_fast(
    y: Any,
    x: Any,
    pi0: float,
    h: int,
    *,
    n_jobs: int | None = None,
    keep_history: bool = False,
) -> ForecastErrors:
    """h-step-ahead forecast errors by recursive least squares.

    Parameters
    ----------
    y:
        Outcome series of length n (array, list, Series or
        single-column DataFrame).  No missing values.
    x:
        Predictor vector or n x p matrix; the intercept is added
        automatically.  No missing values.
    pi0:
        Fraction of the sample in the first estimation window, in (0, 1).
    h:
        Forecast horizon, ``1 <= h <= n - 1``.
    n_jobs:
        Worker threads for the p + 1 sub-models.  ``None`` reads
        ``forecast.n_jobs`` from the global config (default 1).
    keep_history:
        Retain every ``(inv_gram, beta)`` snapshot per sub-model.

    Returns
    -------
    ForecastErrors
        ``ehat0`` (benchmark) and ``ehatj`` (one column per predictor),
        each with ``n - k0 - h + 1`` rows.

    Raises
    ------
    InputValidationError
        Before any computation, for malformed inputs.
    SingularDesignError
        If any sub-model's first Gram matrix cannot be inverted.
    """
    inputs = validate_inputs(y, x, pi0, h)
    workers = _resolve_n_jobs(n_jobs)

    logger.info(
        "Recursive forecast errors: n=%d p=%d k0=%d h=%d -> %d forecasts",
        inputs.n, inputs.p, inputs.k0, inputs.h, inputs.n_forecasts,
    )

    # Benchmark last, matching the column order of the assembled result.
    jobs: list[int | None] = [*range(inputs.p), None]
    runs = Parallel(n_jobs=workers, prefer="threads")(
        delayed(_run_submodel)(inputs, j, keep_history) for j in jobs
    )

    ehatj = np.column_stack([errors for errors, _ in runs[:-1]])
    ehat0, history0 = runs[-1]

    target_index = None
    if inputs.index is not None:
        target_index = inputs.index[inputs.k0 + inputs.h - 1:]

    result = ForecastErrors(
        ehat0=ehat0,
        ehatj=ehatj,
        n=inputs.n,
        k0=inputs.k0,
        h=inputs.h,
        pi0=inputs.pi0,
        predictor_names=list(inputs.predictor_names),
        target_index=target_index,
    )
    if keep_history:
        result.history0 = history0
        result.historyj = [history for _, history in runs[:-1]]

    logger.info("Computed %d forecast error series", inputs.p + 1)
    return result
