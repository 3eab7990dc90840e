"""YAML settings for rlsforecast.

Files live in ``config/`` next to the package and are addressed by stem:
``load_config("global_config")`` reads ``config/global_config.yml``.
Parsed files are memoised per process.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from rlsforecast.constants import DEFAULT_HORIZON, DEFAULT_N_JOBS, DEFAULT_PI0

logger = logging.getLogger(__name__)

_CONFIG_DIR = Path(__file__).resolve().parent.parent / "config"

_loaded: dict[str, dict[str, Any]] = {}

_FORECAST_DEFAULTS: dict[str, Any] = {
    "pi0": DEFAULT_PI0,
    "horizon": DEFAULT_HORIZON,
    "n_jobs": DEFAULT_N_JOBS,
}


def config_path(name: str) -> Path:
    """Location of the settings file called *name*."""
    return _CONFIG_DIR / f"{name}.yml"


def load_config(name: str, *, reload: bool = False) -> dict[str, Any]:
    """Parsed contents of ``config/<name>.yml``.

    An empty file yields ``{}``.  Pass *reload* to re-read a file that
    was already memoised.

    Raises
    ------
    FileNotFoundError
        No such settings file.
    """
    if name in _loaded and not reload:
        return _loaded[name]

    path = config_path(name)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    settings = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    logger.debug("Read settings %r (%d top-level keys) from %s", name, len(settings), path)
    _loaded[name] = settings
    return settings


def get_global_config() -> dict[str, Any]:
    """Settings shared by the library and the CLI."""
    return load_config("global_config")


def get_forecast_defaults() -> dict[str, Any]:
    """Return the ``forecast`` section merged over the built-in defaults.

    Falls back to the constants in :mod:`rlsforecast.constants` when the
    config file is not shipped (e.g. a wheel install).
    """
    merged = dict(_FORECAST_DEFAULTS)
    try:
        section = get_global_config().get("forecast") or {}
    except FileNotFoundError:
        logger.debug("No global config found; using built-in forecast defaults")
        return merged
    merged.update({k: v for k, v in section.items() if v is not None})
    return merged
