"""Lifecycle status derived from progress, sticky states and report recency."""

from __future__ import annotations

from datetime import timedelta
from typing import Any, Iterable, Optional

from project_health.config import DEFAULT_CONFIG, EngineConfig
from project_health.schema import STICKY_STATUSES
from project_health.timestamps import now_epoch, to_epoch

COMPLETED = "completed"
IN_PROGRESS = "in-progress"
ON_HOLD = "on-hold"


def _report_updated_at(report: Any) -> Any:
    if isinstance(report, dict):
        return report.get("updated_at", report.get("updatedAt"))
    return getattr(report, "updated_at", None)


def latest_activity(reports: Optional[Iterable[Any]]) -> Optional[float]:
    """Return the newest report epoch, or ``None`` when there are no reports."""

    epochs = [to_epoch(_report_updated_at(report)) for report in reports or ()]
    return max(epochs) if epochs else None


def is_recent(latest: Optional[float], now: float, window: timedelta) -> bool:
    """True when ``latest`` lies no further than ``window`` before ``now``."""

    if latest is None:
        return False
    return now - latest <= window.total_seconds()


def is_completed(progress: Any) -> bool:
    try:
        return float(progress or 0) >= 100
    except (TypeError, ValueError):
        return False


def derive_status(
    stored_status: Optional[str],
    progress: Any,
    reports: Optional[Iterable[Any]],
    now: Any = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> str:
    """Compute the effective lifecycle status.

    Completion wins over everything, cancelled/archived are passed through,
    and every other project is ``in-progress`` or ``on-hold`` depending on
    whether its latest report falls inside the recency window. Stored
    ``planning``/``approved`` values are therefore never returned for an
    active project.
    """

    if is_completed(progress):
        return COMPLETED
    if stored_status in STICKY_STATUSES:
        return stored_status

    latest = latest_activity(reports)
    if latest is None:
        return ON_HOLD
    if is_recent(latest, now_epoch(now), config.recency_window):
        return IN_PROGRESS
    return ON_HOLD
