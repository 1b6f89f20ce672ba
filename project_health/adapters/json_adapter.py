"""JSON adapter for raw project documents."""

from __future__ import annotations

import json
import logging
from typing import Any, Optional

from project_health.schema import ActivityReport, IssueRecord, ProjectRecord
from project_health.timestamps import classify

logger = logging.getLogger(__name__)

_KNOWN_FIELDS = {
    "id",
    "name",
    "projectName",
    "status",
    "progress",
    "qualityScore",
    "riskLevel",
    "healthLevel",
    "phase",
    "manager",
    "region",
    "projectType",
    "priority",
    "startDate",
    "estimatedEndDate",
    "estimatedBudget",
    "actualBudget",
    "contractId",
    "createdAt",
    "financialMetrics",
    "issues",
    "reports",
}


def _optional_float(item: dict, key: str, index: int) -> Optional[float]:
    raw = item.get(key)
    if raw in (None, ""):
        return None
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"Item {index}: invalid {key}") from exc


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _parse_issue(raw: Any, index: int, position: int) -> IssueRecord:
    if not isinstance(raw, dict):
        raise ValueError(f"Item {index}: issue {position} must be an object")
    return IssueRecord(
        id=str(raw.get("id", position)),
        type=_optional_str(raw.get("type")),
        status=_optional_str(raw.get("status")),
        severity=_optional_str(raw.get("severity")),
        assigned_to=_optional_str(raw.get("assignedTo")),
        due_date=classify(raw.get("dueDate")),
        created_at=classify(raw.get("createdAt")),
    )


def _parse_report(raw: Any, index: int, position: int) -> ActivityReport:
    if not isinstance(raw, dict):
        raise ValueError(f"Item {index}: report {position} must be an object")
    return ActivityReport(id=str(raw.get("id", position)), updated_at=classify(raw.get("updatedAt")))


def _list_field(item: dict, key: str, index: int) -> list:
    value = item.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"Item {index}: {key} must be a list")
    return value


def parse_item(item: Any, index: int) -> ProjectRecord:
    """Convert one raw project document into a ``ProjectRecord``."""

    if not isinstance(item, dict):
        raise ValueError(f"Item {index}: expected an object")
    project_id = _optional_str(item.get("id"))
    if project_id is None:
        raise ValueError(f"Item {index}: missing required field 'id'")

    financial_metrics = item.get("financialMetrics") or {}
    if not isinstance(financial_metrics, dict):
        raise ValueError(f"Item {index}: financialMetrics must be an object")

    return ProjectRecord(
        id=project_id,
        name=_optional_str(item.get("name") or item.get("projectName")) or project_id,
        stored_status=_optional_str(item.get("status")),
        progress=_optional_float(item, "progress", index) or 0.0,
        quality_score_base=_optional_float(item, "qualityScore", index),
        risk_level_stored=_optional_str(item.get("riskLevel")),
        health_level=_optional_str(item.get("healthLevel")),
        phase=_optional_str(item.get("phase")),
        manager=_optional_str(item.get("manager")),
        region=_optional_str(item.get("region")),
        project_type=_optional_str(item.get("projectType")),
        priority=_optional_str(item.get("priority")),
        start_date=classify(item.get("startDate")),
        estimated_end_date=classify(item.get("estimatedEndDate")),
        estimated_budget=_optional_float(item, "estimatedBudget", index),
        actual_budget=_optional_float(item, "actualBudget", index),
        contract_id=_optional_str(item.get("contractId")),
        created_at=classify(item.get("createdAt")),
        financial_metrics=financial_metrics,
        issues=[_parse_issue(raw, index, pos) for pos, raw in enumerate(_list_field(item, "issues", index), start=1)],
        reports=[_parse_report(raw, index, pos) for pos, raw in enumerate(_list_field(item, "reports", index), start=1)],
        extra={key: value for key, value in item.items() if key not in _KNOWN_FIELDS},
    )


def parse_payload(payload: Any) -> list[ProjectRecord]:
    """Parse an already-decoded JSON payload into project records."""

    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of objects")
    records = [parse_item(item, i) for i, item in enumerate(payload, start=1)]
    logger.debug("Parsed %d project records", len(records))
    return records


def parse(file_path: str) -> list[ProjectRecord]:
    """Parse a JSON snapshot file into project records."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)
    return parse_payload(payload)
