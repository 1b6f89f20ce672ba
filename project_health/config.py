"""Engine configuration: scoring weights, thresholds and the recency window."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field, replace
from datetime import timedelta

logger = logging.getLogger(__name__)

ENV_PREFIX = "PROJECT_HEALTH_"


def _default_deductions() -> dict[str, float]:
    return {"progress": 0.5, "quality": 1.0, "safety": 2.0, "other": 0.1}


@dataclass(frozen=True)
class EngineConfig:
    """Business policy constants consumed by the scoring and status rules."""

    recency_window: timedelta = timedelta(days=3)
    issue_deductions: dict[str, float] = field(default_factory=_default_deductions)
    risk_thresholds: tuple[float, float, float] = (8.0, 6.0, 4.0)
    default_base_score: float = 10.0
    min_score: float = 0.0
    max_score: float = 10.0
    default_sort: str = "createdAt-desc"


DEFAULT_CONFIG = EngineConfig()


def _env_float(name: str, default: float) -> float:
    value = os.getenv(ENV_PREFIX + name)
    if value is None:
        return default
    try:
        return float(value)
    except ValueError:
        logger.warning("Ignoring non-numeric %s%s=%r", ENV_PREFIX, name, value)
        return default


def load_config(base: EngineConfig = DEFAULT_CONFIG) -> EngineConfig:
    """Return ``base`` with any ``PROJECT_HEALTH_*`` environment overrides applied."""

    window_hours = _env_float("RECENCY_WINDOW_HOURS", base.recency_window.total_seconds() / 3600.0)
    deductions = {
        issue_type: _env_float(f"DEDUCTION_{issue_type.upper()}", weight)
        for issue_type, weight in base.issue_deductions.items()
    }
    low_min, medium_min, high_min = base.risk_thresholds
    thresholds = (
        _env_float("RISK_LOW_MIN", low_min),
        _env_float("RISK_MEDIUM_MIN", medium_min),
        _env_float("RISK_HIGH_MIN", high_min),
    )
    if not thresholds[0] >= thresholds[1] >= thresholds[2]:
        logger.warning("Risk thresholds %s are not descending; keeping %s", thresholds, base.risk_thresholds)
        thresholds = base.risk_thresholds

    return replace(
        base,
        recency_window=timedelta(hours=window_hours),
        issue_deductions=deductions,
        risk_thresholds=thresholds,
        default_base_score=_env_float("BASE_SCORE", base.default_base_score),
        default_sort=os.getenv(ENV_PREFIX + "DEFAULT_SORT", base.default_sort),
    )
