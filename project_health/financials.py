"""Budget and cost helpers."""

from __future__ import annotations

from typing import Optional

from project_health.schema import ProjectRecord


def actual_cost(record: ProjectRecord) -> float:
    """Actual spend, falling back to ``financial_metrics['actualCost']``."""

    if record.actual_budget is not None:
        return float(record.actual_budget)
    fallback = (record.financial_metrics or {}).get("actualCost")
    try:
        return float(fallback or 0.0)
    except (TypeError, ValueError):
        return 0.0


def cost_performance_index(estimated: Optional[float], actual: Optional[float]) -> float:
    """Planned over actual cost; 1.0 when either side is zero or missing."""

    if not estimated or not actual:
        return 1.0
    return float(estimated) / float(actual)
