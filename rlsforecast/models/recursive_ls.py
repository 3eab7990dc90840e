"""Expanding-window recursive least squares for h-step-ahead forecasts.

For a design matrix ``X`` (intercept included) and outcome ``y``, the
coefficients used to forecast ``y[s]`` are fitted on the pairs
``(X[r], y[r + h])`` whose target ``r + h`` is at most ``s - h``.  The
first window has ``k0`` targets; each step adds one pair.

The initial window is solved directly; afterwards the inverse Gram
matrix ``M = (X'X)^-1`` and the coefficients are advanced with the
Sherman-Morrison rank-1 update (Brown, Durbin and Evans, 1975)::

    d      = 1 + x' M x
    M_new  = M - (M x x' M) / d
    b_new  = b + M x (y - x' b) / d

which reproduces OLS on the grown window exactly (up to rounding) at
O(nc^2) per step.

All indices in this module are zero-based.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator

import numpy as np

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class SingularDesignError(np.linalg.LinAlgError):
    """Raised when the first window's Gram matrix cannot be inverted."""

    def __init__(self, n_obs: int, n_regressors: int, model: str = "") -> None:
        self.n_obs = n_obs
        self.n_regressors = n_regressors
        self.model = model
        label = f" for model {model!r}" if model else ""
        super().__init__(
            f"Initial Gram matrix is singular{label}: {n_obs} observation(s) "
            f"for {n_regressors} regressor(s); increase pi0 or reduce h, "
            "or check for a constant predictor"
        )


# ---------------------------------------------------------------------------
# State container
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RLSState:
    """Snapshot of the recursion after ``step`` updates.

    ``window_end`` is the last outcome row (zero-based) the coefficients
    have seen.
    """

    step: int
    window_end: int
    inv_gram: np.ndarray
    beta: np.ndarray


def _freeze(arr: np.ndarray) -> np.ndarray:
    out = arr.copy()
    out.flags.writeable = False
    return out


# ---------------------------------------------------------------------------
# Building blocks
# ---------------------------------------------------------------------------


def initial_fit(
    design: np.ndarray,
    y: np.ndarray,
    k0: int,
    h: int,
    *,
    model: str = "",
) -> tuple[np.ndarray, np.ndarray]:
    """OLS on the first window: rows ``0 .. k0-h-1`` against ``y[h:k0]``.

    Returns
    -------
    (inv_gram, beta)

    Raises
    ------
    SingularDesignError
        Fewer observations than regressors, or a rank-deficient block
        (e.g. a predictor constant over the first window).
    """
    n_obs = k0 - h
    n_regressors = design.shape[1]
    if n_obs < n_regressors:
        raise SingularDesignError(max(n_obs, 0), n_regressors, model)

    x_block = design[:n_obs]
    y_block = y[h:k0]
    if np.linalg.matrix_rank(x_block) < n_regressors:
        raise SingularDesignError(n_obs, n_regressors, model)

    try:
        inv_gram = np.linalg.inv(x_block.T @ x_block)
    except np.linalg.LinAlgError as exc:
        raise SingularDesignError(n_obs, n_regressors, model) from exc

    beta = inv_gram @ (x_block.T @ y_block)
    return inv_gram, beta


def sherman_morrison_update(
    inv_gram: np.ndarray,
    beta: np.ndarray,
    x_new: np.ndarray,
    y_new: float,
) -> tuple[np.ndarray, np.ndarray]:
    """Add one observation ``(x_new, y_new)`` to an OLS fit.

    Both the inverse Gram matrix and the coefficients are updated from
    the pre-update ``inv_gram``; the residual uses the pre-update
    ``beta``.  Inputs are not modified.
    """
    mx = inv_gram @ x_new
    denom = 1.0 + x_new @ mx
    residual = y_new - x_new @ beta
    new_inv_gram = inv_gram - np.outer(mx, mx) / denom
    new_beta = beta + mx * (residual / denom)
    return new_inv_gram, new_beta


def iter_rls_states(
    design: np.ndarray,
    y: np.ndarray,
    k0: int,
    h: int,
    *,
    model: str = "",
) -> Iterator[RLSState]:
    """Yield the ``n - k0 + 1`` states of the expanding-window recursion.

    State ``t`` has seen outcome rows ``h .. k0-1+t``.  The transition
    ``t -> t+1`` adds predictor row ``t + k0 - h`` paired with outcome
    row ``t + k0``.
    """
    n = y.shape[0]
    inv_gram, beta = initial_fit(design, y, k0, h, model=model)
    yield RLSState(0, k0 - 1, _freeze(inv_gram), _freeze(beta))

    for t in range(n - k0):
        window_end = t + k0
        inv_gram, beta = sherman_morrison_update(
            inv_gram, beta, design[window_end - h], y[window_end]
        )
        yield RLSState(t + 1, window_end, _freeze(inv_gram), _freeze(beta))


def forecast_errors(
    design: np.ndarray,
    y: np.ndarray,
    k0: int,
    h: int,
    *,
    model: str = "",
    keep_history: bool = False,
) -> tuple[np.ndarray, list[RLSState] | None]:
    """Out-of-sample h-step-ahead forecast errors for one design.

    Error ``i`` (``i = 0 .. n-k0-h``) targets row ``s = k0 + h - 1 + i``
    and is forecast from predictor row ``s - h`` with the coefficients
    of state ``i``, i.e. fitted on outcomes up to row ``s - h`` only.

    Returns
    -------
    (errors, history)
        ``errors`` has length ``n - k0 - h + 1``.  ``history`` holds all
        ``n - k0 + 1`` states when *keep_history* is set, else None.
    """
    n = y.shape[0]
    n_forecasts = n - k0 - h + 1
    first_target = k0 + h - 1

    errors = np.empty(n_forecasts, dtype=float)
    history: list[RLSState] | None = [] if keep_history else None

    for state in iter_rls_states(design, y, k0, h, model=model):
        i = state.step
        if i < n_forecasts:
            target = first_target + i
            errors[i] = y[target] - design[target - h] @ state.beta
        if history is not None:
            history.append(state)
        elif i >= n_forecasts - 1:
            # The remaining updates only feed coefficients nobody forecasts with.
            break

    logger.debug(
        "RLS %s: k0=%d h=%d -> %d forecast errors", model or "<model>", k0, h, n_forecasts,
    )
    return errors, history


# ---------------------------------------------------------------------------
# Direct OLS reference
# ---------------------------------------------------------------------------


def expanding_window_ols(
    design: np.ndarray,
    y: np.ndarray,
    k0: int,
    h: int,
) -> np.ndarray:
    """Coefficient path recomputed from scratch on every expanding window.

    Row ``t`` of the result solves the normal equations on predictor
    rows ``0 .. k0-h-1+t`` and outcome rows ``h .. k0-1+t`` and matches
    ``RLSState(step=t).beta``.  O(n * nc^3); meant for verification.
    """
    n = y.shape[0]
    n_regressors = design.shape[1]
    betas = np.empty((n - k0 + 1, n_regressors), dtype=float)
    for t in range(n - k0 + 1):
        window_end = k0 - 1 + t
        x_block = design[: window_end - h + 1]
        y_block = y[h : window_end + 1]
        betas[t] = np.linalg.solve(x_block.T @ x_block, x_block.T @ y_block)
    return betas
