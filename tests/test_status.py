from datetime import datetime, timedelta, timezone

from project_health.config import EngineConfig
from project_health.schema import ActivityReport
from project_health.status import derive_status, is_recent, latest_activity

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


class LazyTimestamp:
    def __init__(self, value):
        self.value = value

    def to_date(self):
        return self.value


def report_at(delta, report_id="r"):
    return ActivityReport(id=report_id, updated_at=NOW - delta)


def test_completed_overrides_everything():
    reports = [report_at(timedelta(days=30))]
    assert derive_status("cancelled", 100, reports, NOW) == "completed"
    assert derive_status("on-hold", 120, [], NOW) == "completed"


def test_cancelled_and_archived_are_sticky():
    stale = [report_at(timedelta(days=10))]
    fresh = [report_at(timedelta(hours=1))]
    assert derive_status("cancelled", 50, stale, NOW) == "cancelled"
    assert derive_status("archived", 50, fresh, NOW) == "archived"


def test_recency_boundary():
    assert derive_status("in-progress", 40, [report_at(timedelta(days=3))], NOW) == "in-progress"
    assert derive_status("in-progress", 40, [report_at(timedelta(days=3, minutes=1))], NOW) == "on-hold"
    assert derive_status("in-progress", 40, [], NOW) == "on-hold"


def test_recent_report_means_in_progress():
    assert derive_status("on-hold", 40, [report_at(timedelta(days=2))], NOW) == "in-progress"


def test_planning_without_reports_reports_on_hold():
    assert derive_status("planning", 30, [], NOW) == "on-hold"
    assert derive_status("approved", 0, None, NOW) == "on-hold"


def test_latest_report_wins_across_timestamp_shapes():
    reports = [
        ActivityReport(id="a", updated_at=(NOW - timedelta(days=9)).isoformat()),
        ActivityReport(id="b", updated_at=LazyTimestamp(NOW - timedelta(days=1))),
        ActivityReport(id="c", updated_at=NOW - timedelta(days=5)),
    ]
    assert latest_activity(reports) == (NOW - timedelta(days=1)).timestamp()
    assert derive_status("in-progress", 10, reports, NOW) == "in-progress"


def test_malformed_report_timestamp_counts_as_very_old():
    reports = [ActivityReport(id="a", updated_at="yesterday-ish")]
    assert latest_activity(reports) == 0.0
    assert derive_status("in-progress", 10, reports, NOW) == "on-hold"


def test_recency_window_is_configurable():
    config = EngineConfig(recency_window=timedelta(days=1))
    reports = [report_at(timedelta(days=2))]
    assert derive_status("in-progress", 10, reports, NOW, config) == "on-hold"


def test_is_recent_handles_missing_activity():
    assert not is_recent(None, NOW.timestamp(), timedelta(days=3))
    assert is_recent(NOW.timestamp(), NOW.timestamp(), timedelta(0))
