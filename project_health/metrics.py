"""Fleet-wide project statistics."""

from __future__ import annotations

import math
from collections import Counter
from typing import Any, Optional, Sequence

import numpy as np

from project_health.config import DEFAULT_CONFIG, EngineConfig
from project_health.financials import actual_cost
from project_health.quality import compute_quality_score, issue_field, unresolved_issues
from project_health.schema import HEALTH_LEVELS, PHASES, RISK_LEVELS, AggregateStats, ProjectRecord, ProjectView
from project_health.status import is_completed, is_recent, latest_activity
from project_health.timestamps import now_epoch, to_epoch_or_none
from project_health.views import build_views


def _round_half_up(value: float, digits: int = 0) -> float:
    factor = 10**digits
    return math.floor(value * factor + 0.5) / factor


def _distribution(labels: list[Optional[str]], known: Sequence[str]) -> dict[str, int]:
    counts = Counter(label for label in labels if label is not None)
    distribution = {label: counts.pop(label, 0) for label in known}
    distribution.update(sorted(counts.items()))
    return distribution


def _has_unresolved_safety_issue(record: ProjectRecord) -> bool:
    return any(issue_field(issue, "type") == "safety" for issue in unresolved_issues(record.issues))


def compute_stats(
    records: Sequence[ProjectRecord],
    views: Optional[Sequence[ProjectView]] = None,
    now: Any = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> AggregateStats:
    """Compute counts, distributions and budget totals over the unfiltered collection."""

    reference = now_epoch(now)
    if views is None:
        views = build_views(records, reference, config)

    completed = on_hold = in_progress = overdue = high_risk = 0
    for record in records:
        if is_completed(record.progress):
            completed += 1

        latest = latest_activity(record.reports)
        if is_recent(latest, reference, config.recency_window):
            in_progress += 1
        else:
            on_hold += 1

        end = to_epoch_or_none(record.estimated_end_date)
        if end is not None and end < reference:
            overdue += 1

        if _has_unresolved_safety_issue(record):
            high_risk += 1

    statuses = Counter(view.effective_status for view in views)
    scores = np.fromiter((view.quality_score for view in views), dtype=float, count=len(views))
    average = int(_round_half_up(float(scores.mean()))) if scores.size else 0
    progress = np.fromiter((view.progress or 0.0 for view in views), dtype=float, count=len(views))
    average_progress = int(_round_half_up(float(progress.mean()))) if progress.size else 0

    total_budget = float(sum(record.estimated_budget or 0.0 for record in records))
    total_actual = float(sum(actual_cost(record) for record in records))

    return AggregateStats(
        total=len(records),
        completed=completed,
        on_hold=on_hold,
        in_progress=in_progress,
        active=statuses.get("in-progress", 0),
        planning=statuses.get("planning", 0),
        approved=statuses.get("approved", 0),
        overdue=overdue,
        high_risk=high_risk,
        risk_distribution=_distribution([r.risk_level_stored for r in records], RISK_LEVELS),
        health_distribution=_distribution([r.health_level for r in records], HEALTH_LEVELS),
        phase_distribution=_distribution([r.phase for r in records], PHASES),
        average_quality_score=average,
        average_progress=average_progress,
        total_budget=total_budget,
        total_actual_cost=total_actual,
        budget_variance=total_budget - total_actual,
        total_quality_issues=sum(view.quality_or_progress_issue_count for view in views),
    )


def compute_quality_summary(records: Sequence[ProjectRecord], config: EngineConfig = DEFAULT_CONFIG) -> dict:
    """Summarize the fleet's current quality score and issue counts."""

    results = [compute_quality_score(r.quality_score_base, r.issues, config) for r in records]
    if results:
        current = _round_half_up(float(np.mean([result.final_score for result in results])), 1)
    else:
        current = 0.0

    return {
        "current_score": current,
        "base_score": config.default_base_score,
        "quality_or_progress_issues_count": sum(r.quality_or_progress_issue_count for r in results),
        "total_issues_count": sum(len(r.issues or ()) for r in records),
    }
