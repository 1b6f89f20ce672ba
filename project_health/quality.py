"""Issue-driven quality score with a clamped 0-10 range."""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from project_health.config import DEFAULT_CONFIG, EngineConfig

logger = logging.getLogger(__name__)

RESOLVED = "resolved"
SCORE_PRECISION = 6
_COUNTED_TYPES = ("quality", "progress")


@dataclass(frozen=True)
class QualityResult:
    """Outcome of scoring one project's unresolved issues."""

    final_score: float
    total_deduction: float
    quality_or_progress_issue_count: int


def issue_field(issue: Any, name: str) -> Any:
    """Read a field from an ``IssueRecord`` or a plain mapping."""

    if isinstance(issue, dict):
        return issue.get(name)
    return getattr(issue, name, None)


def unresolved_issues(issues: Optional[Iterable[Any]]) -> list:
    """Return issues whose status is anything other than ``resolved``."""

    return [issue for issue in issues or () if issue_field(issue, "status") != RESOLVED]


def _coerce_base(base_score: Any, default: float) -> float:
    if base_score is None:
        return default
    try:
        return float(base_score)
    except (TypeError, ValueError):
        logger.warning("Non-numeric base quality score %r; using %s", base_score, default)
        return default


def compute_quality_score(
    base_score: Any,
    issues: Optional[Iterable[Any]],
    config: EngineConfig = DEFAULT_CONFIG,
) -> QualityResult:
    """Deduct per unresolved issue type from the base score and clamp the result."""

    base = _coerce_base(base_score, config.default_base_score)

    weights: list[float] = []
    counted = 0
    for issue in unresolved_issues(issues):
        issue_type = issue_field(issue, "type")
        weight = config.issue_deductions.get(issue_type) if isinstance(issue_type, str) else None
        if weight is None:
            logger.debug("Issue type %r carries no deduction", issue_type)
            continue
        weights.append(weight)
        if issue_type in _COUNTED_TYPES:
            counted += 1

    # fixed precision keeps exact threshold scores (e.g. 4.1 - 0.1) on the boundary
    total_deduction = round(math.fsum(weights), SCORE_PRECISION)
    final_score = round(max(config.min_score, min(config.max_score, base - total_deduction)), SCORE_PRECISION)
    return QualityResult(
        final_score=final_score,
        total_deduction=total_deduction,
        quality_or_progress_issue_count=counted,
    )
