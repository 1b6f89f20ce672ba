"""Per-project view composition."""

from __future__ import annotations

from typing import Any, Iterable

from project_health.config import DEFAULT_CONFIG, EngineConfig
from project_health.financials import actual_cost, cost_performance_index
from project_health.quality import compute_quality_score
from project_health.ranks import health_rank, priority_rank, risk_rank
from project_health.risk_model import classify_risk
from project_health.schema import ProjectRecord, ProjectView, SortKeys
from project_health.status import derive_status, latest_activity
from project_health.timestamps import now_epoch, to_epoch


def searchable_fields(record: ProjectRecord) -> tuple[str, ...]:
    """Lower-cased name, contract id, region, manager and project type."""

    values = (record.name, record.contract_id, record.region, record.manager, record.project_type)
    return tuple(str(value).lower() for value in values if value not in (None, ""))


def build_view(
    record: ProjectRecord,
    now: Any = None,
    config: EngineConfig = DEFAULT_CONFIG,
    dynamic_risk: bool = True,
) -> ProjectView:
    """Derive score, risk and status for one record and copy its display fields."""

    quality = compute_quality_score(record.quality_score_base, record.issues, config)
    computed_risk = classify_risk(quality.final_score, config)
    if dynamic_risk:
        risk_level = computed_risk
    else:
        risk_level = record.risk_level_stored or computed_risk

    fields = searchable_fields(record)
    estimated = record.estimated_budget or 0.0
    actual = actual_cost(record)

    return ProjectView(
        id=record.id,
        name=record.name,
        effective_status=derive_status(record.stored_status, record.progress, record.reports, now, config),
        effective_risk_level=risk_level,
        quality_score=quality.final_score,
        quality_deduction=quality.total_deduction,
        quality_or_progress_issue_count=quality.quality_or_progress_issue_count,
        searchable_fields=fields,
        search_text=" ".join(fields),
        sort_keys=SortKeys(
            priority=priority_rank(record.priority),
            risk=risk_rank(risk_level),
            health=health_rank(record.health_level),
            created_at=to_epoch(record.created_at),
            start_date=to_epoch(record.start_date),
        ),
        progress=record.progress or 0.0,
        stored_status=record.stored_status,
        risk_level_stored=record.risk_level_stored,
        health_level=record.health_level,
        phase=record.phase,
        manager=record.manager,
        region=record.region,
        project_type=record.project_type,
        priority=record.priority,
        contract_id=record.contract_id,
        created_at=record.created_at,
        start_date=record.start_date,
        estimated_end_date=record.estimated_end_date,
        estimated_budget=record.estimated_budget,
        actual_budget=record.actual_budget,
        budget_variance=estimated - actual,
        cost_performance_index=cost_performance_index(estimated, actual),
        latest_activity=latest_activity(record.reports),
        issue_count=len(record.issues or ()),
        report_count=len(record.reports or ()),
        extra=dict(record.extra or {}),
    )


def build_views(
    records: Iterable[ProjectRecord],
    now: Any = None,
    config: EngineConfig = DEFAULT_CONFIG,
    dynamic_risk: bool = True,
) -> list[ProjectView]:
    """Build one view per record, preserving input order."""

    reference = now_epoch(now)
    return [build_view(record, reference, config, dynamic_risk) for record in records]
