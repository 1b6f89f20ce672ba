from datetime import datetime, timedelta, timezone

import pytest

from project_health.engine import ProjectCollectionObserver, recompute
from project_health.schema import ActivityReport, FilterSpec, IssueRecord, ProjectRecord

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


def sample_records():
    return [
        ProjectRecord(
            id="A",
            name="Alpha",
            progress=60,
            quality_score_base=10,
            created_at="2024-01-01",
            issues=[
                IssueRecord(id="1", type="quality", status="open"),
                IssueRecord(id="2", type="quality", status="open"),
                IssueRecord(id="3", type="safety", status="open"),
            ],
            reports=[ActivityReport(id="r", updated_at=NOW - timedelta(hours=6))],
        ),
        ProjectRecord(id="B", name="Bravo", stored_status="planning", progress=30, created_at="2024-02-01"),
        ProjectRecord(
            id="C",
            name="Charlie",
            progress=40,
            created_at="2024-03-01",
            reports=[ActivityReport(id="r", updated_at=NOW - timedelta(days=2))],
        ),
    ]


def by_id(result):
    return {view.id: view for view in result.views}


def test_end_to_end_scenarios():
    views = by_id(recompute(sample_records(), now=NOW))

    assert views["A"].quality_deduction == pytest.approx(4.0)
    assert views["A"].quality_score == pytest.approx(6.0)
    assert views["A"].effective_risk_level == "medium"

    assert views["B"].effective_status == "on-hold"
    assert views["C"].effective_status == "in-progress"


def test_default_sort_and_unfiltered_stats():
    result = recompute(sample_records(), FilterSpec(search="alpha"), now=NOW)
    assert [view.id for view in result.views] == ["A"]
    assert result.stats.total == 3
    assert result.stats.in_progress == 2
    assert result.quality_summary["total_issues_count"] == 3
    assert result.generated_at == NOW.timestamp()

    ordered = recompute(sample_records(), now=NOW)
    assert [view.id for view in ordered.views] == ["C", "B", "A"]


def test_recompute_is_idempotent():
    records = sample_records()
    first = recompute(records, sort="name-asc", now=NOW)
    second = recompute(records, sort="name-asc", now=NOW)
    assert first == second


def test_observer_publishes_on_every_change():
    observer = ProjectCollectionObserver(clock=lambda: NOW)
    received = []
    observer.subscribe(received.append)

    observer.on_snapshot(sample_records())
    observer.set_filters(FilterSpec(status="in-progress"))
    observer.set_sort("name-desc")

    assert len(received) == 3
    assert [view.id for view in received[-1].views] == ["C", "A"]
    assert observer.latest is received[-1]
    assert observer.generation == 3


def test_observer_drops_stale_results():
    observer = ProjectCollectionObserver(clock=lambda: NOW)
    received = []
    observer.subscribe(received.append)

    stale = observer.on_snapshot(sample_records()[:1])
    observer.on_snapshot(sample_records())

    assert observer.publish(stale, generation=1) is None
    assert len(observer.latest.views) == 3
    assert len(received) == 2


def test_unsubscribe_stops_delivery():
    observer = ProjectCollectionObserver(clock=lambda: NOW)
    received = []
    unsubscribe = observer.subscribe(received.append)
    observer.on_snapshot(sample_records())
    unsubscribe()
    observer.set_sort("name-asc")
    assert len(received) == 1
