"""Solver settings loader."""

import json
import logging
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any

from .constants import (
    DEFAULT_GREEDY_BOOTSTRAP_TIME_LIMIT_MS,
    DEFAULT_HYBRID_TIMEOUT_MS,
    DEFAULT_MAX_CLASSES_FOR_EXACT,
    DEFAULT_MAX_HORIZON_SLICE_MS,
    DEFAULT_MIN_HORIZON_SLICE_MS,
    DEFAULT_MIP_TIMEOUT_MS,
    DEFAULT_ORACLE_TIMEOUT_MS,
    DEFAULT_PERIOD_SEARCH_TIME_LIMIT_MS,
)

logger = logging.getLogger(__name__)


@dataclass
class SolverSettings:
    """Per-solver defaults, overridable from a JSON settings file."""

    mip_timeout_ms: float = DEFAULT_MIP_TIMEOUT_MS
    hybrid_timeout_ms: float = DEFAULT_HYBRID_TIMEOUT_MS
    oracle_timeout_ms: float = DEFAULT_ORACLE_TIMEOUT_MS
    period_search_time_limit_ms: float = DEFAULT_PERIOD_SEARCH_TIME_LIMIT_MS
    greedy_period_search_time_limit_ms: float = DEFAULT_GREEDY_BOOTSTRAP_TIME_LIMIT_MS
    min_horizon_slice_ms: float = DEFAULT_MIN_HORIZON_SLICE_MS
    max_horizon_slice_ms: float = DEFAULT_MAX_HORIZON_SLICE_MS
    retry_timed_out_horizons: bool = False
    max_classes_for_exact: int = DEFAULT_MAX_CLASSES_FOR_EXACT
    num_workers: int = 0
    log_search_progress: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SolverSettings":
        """Create settings from a dictionary with camelCase or snake_case keys."""
        known = {f.name: f for f in fields(cls)}
        values: dict[str, Any] = {}

        for key, value in data.items():
            name = _snake_case(key)
            if name not in known:
                logger.warning(f"Ignoring unknown solver setting '{key}'")
                continue

            default = known[name].default
            if isinstance(default, bool):
                if not isinstance(value, bool):
                    logger.warning(f"Setting '{key}' must be a boolean, keeping default")
                    continue
            elif isinstance(value, bool) or not isinstance(value, (int, float)):
                logger.warning(f"Setting '{key}' must be a number, keeping default")
                continue
            values[name] = value

        return cls(**values)


def _snake_case(key: str) -> str:
    return "".join(f"_{ch.lower()}" if ch.isupper() else ch for ch in key)


def load_settings(path: Path | None = None) -> SolverSettings:
    """Load solver settings from a JSON file.

    A missing path or file yields the defaults.
    """
    if path is None or not Path(path).exists():
        return SolverSettings()

    with open(path, encoding="utf-8") as f:
        data = json.load(f)

    if not isinstance(data, dict):
        logger.warning(f"Settings file {path} does not hold an object, using defaults")
        return SolverSettings()

    return SolverSettings.from_dict(data)
