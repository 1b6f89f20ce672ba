"""Threshold-based risk classification from the quality score."""

from __future__ import annotations

from project_health.config import DEFAULT_CONFIG, EngineConfig


def classify_risk(final_score: float, config: EngineConfig = DEFAULT_CONFIG) -> str:
    """Map a quality score to ``low``/``medium``/``high``/``critical``.

    Thresholds are checked high to low; a score equal to a threshold falls
    into the better bucket.
    """

    low_min, medium_min, high_min = config.risk_thresholds
    if final_score >= low_min:
        return "low"
    if final_score >= medium_min:
        return "medium"
    if final_score >= high_min:
        return "high"
    return "critical"
