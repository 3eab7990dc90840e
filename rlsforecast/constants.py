"""Global constants for the rlsforecast package."""

# ---------------------------------------------------------------------------
# Defaults (overridden by config/global_config.yml when present)
# ---------------------------------------------------------------------------
DEFAULT_PI0: float = 0.5
DEFAULT_HORIZON: int = 1
DEFAULT_N_JOBS: int = 1

# ---------------------------------------------------------------------------
# Sub-model labels
# ---------------------------------------------------------------------------
INTERCEPT_ONLY: str = "intercept_only"
PREDICTOR_PREFIX: str = "x"

# ---------------------------------------------------------------------------
# Numerical checks
# ---------------------------------------------------------------------------
# Relative tolerance when comparing recursive and direct OLS coefficients.
OLS_RTOL: float = 1e-8
