from datetime import datetime, timedelta, timezone

import pytest

from project_health.financials import cost_performance_index
from project_health.metrics import compute_quality_summary, compute_stats
from project_health.schema import ActivityReport, IssueRecord, ProjectRecord
from project_health.views import build_views

NOW = datetime(2025, 3, 10, 12, 0, tzinfo=timezone.utc)


def report(days):
    return ActivityReport(id=f"r{days}", updated_at=NOW - timedelta(days=days))


def sample_records():
    return [
        ProjectRecord(
            id="p1",
            name="North Substation",
            progress=45,
            risk_level_stored="medium",
            health_level="good",
            phase="execution",
            estimated_budget=1000.0,
            actual_budget=600.0,
            estimated_end_date=NOW + timedelta(days=90),
            issues=[
                IssueRecord(id="a", type="quality", status="open"),
                IssueRecord(id="b", type="quality", status="open"),
                IssueRecord(id="c", type="safety", status="open"),
            ],
            reports=[report(2)],
        ),
        ProjectRecord(
            id="p2",
            name="Harbour Crane",
            stored_status="planning",
            progress=30,
            risk_level_stored="low",
            health_level="fair",
            phase="planning",
            estimated_budget=300.0,
            financial_metrics={"actualCost": 100},
            estimated_end_date="2025-02-28",
            issues=[IssueRecord(id="d", type="progress", status="resolved")],
        ),
        ProjectRecord(
            id="p3",
            name="Northgate Relocation",
            progress=100,
            risk_level_stored="low",
            health_level="excellent",
            phase="closure",
            estimated_budget=500.0,
            actual_budget=550.0,
            issues=[
                IssueRecord(id="e", type="safety", status="resolved"),
                IssueRecord(id="f", type="other", status="open"),
            ],
            reports=[report(10)],
        ),
        ProjectRecord(
            id="p4",
            name="West Yard",
            stored_status="cancelled",
            progress=50,
            risk_level_stored="severe",
            phase="execution",
            estimated_end_date="not a date",
            reports=[report(1)],
        ),
    ]


def test_counts():
    records = sample_records()
    stats = compute_stats(records, build_views(records, NOW), NOW)
    assert stats.total == 4
    assert stats.completed == 1
    assert stats.in_progress == 2
    assert stats.active == 1
    assert stats.on_hold == 2
    assert stats.planning == 0
    assert stats.approved == 0
    assert stats.overdue == 1
    assert stats.high_risk == 1


def test_distributions_use_stored_labels():
    stats = compute_stats(sample_records(), now=NOW)
    assert stats.risk_distribution == {"low": 2, "medium": 1, "high": 0, "critical": 0, "severe": 1}
    assert stats.health_distribution == {"excellent": 1, "good": 1, "fair": 1, "poor": 0, "critical": 0}
    assert stats.phase_distribution == {
        "initiation": 0,
        "planning": 1,
        "execution": 2,
        "monitoring": 0,
        "closure": 1,
    }


def test_quality_and_financial_aggregates():
    stats = compute_stats(sample_records(), now=NOW)
    assert stats.average_quality_score == 9
    assert stats.average_progress == 56
    assert stats.total_quality_issues == 2
    assert stats.total_budget == 1800.0
    assert stats.total_actual_cost == 1250.0
    assert stats.budget_variance == 550.0


def test_empty_collection():
    stats = compute_stats([], now=NOW)
    assert stats.total == 0
    assert stats.average_quality_score == 0
    assert stats.average_progress == 0
    assert stats.active == 0
    assert stats.budget_variance == 0.0
    assert stats.risk_distribution == {"low": 0, "medium": 0, "high": 0, "critical": 0}


def test_average_rounds_half_up():
    records = [
        ProjectRecord(id="x", name="x", issues=[IssueRecord(id="a", type="safety", status="open")] * 2),
        ProjectRecord(id="y", name="y", issues=[IssueRecord(id="b", type="quality", status="open")]),
    ]
    # scores 6 and 9 average to 7.5
    assert compute_stats(records, now=NOW).average_quality_score == 8


def test_quality_summary():
    summary = compute_quality_summary(sample_records())
    assert summary["current_score"] == pytest.approx(9.0)
    assert summary["base_score"] == 10.0
    assert summary["quality_or_progress_issues_count"] == 2
    assert summary["total_issues_count"] == 6


def test_cost_performance_index():
    assert cost_performance_index(1000, 500) == 2.0
    assert cost_performance_index(0, 500) == 1.0
    assert cost_performance_index(1000, None) == 1.0


def test_average_progress_rounds_half_up():
    records = [ProjectRecord(id="x", name="x", progress=40), ProjectRecord(id="y", name="y", progress=45)]
    assert compute_stats(records, now=NOW).average_progress == 43


def test_quality_summary_tolerates_missing_issue_list():
    records = [ProjectRecord(id="x", name="x", issues=None)]
    assert compute_quality_summary(records)["total_issues_count"] == 0


def test_high_risk_reads_mapping_issues():
    records = [
        ProjectRecord(id="x", name="x", issues=[{"type": "safety", "status": "open"}]),
        ProjectRecord(id="y", name="y", issues=[{"type": "safety", "status": "resolved"}]),
    ]
    assert compute_stats(records, now=NOW).high_risk == 1
