"""Core data schema for project records, derived views and query inputs."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

PROJECT_STATUSES = ("planning", "approved", "in-progress", "on-hold", "completed", "cancelled", "archived")
STICKY_STATUSES = ("cancelled", "archived")
ISSUE_TYPES = ("progress", "quality", "safety", "other")
ISSUE_STATUSES = ("open", "in-progress", "resolved")
PRIORITIES = ("low", "medium", "high", "critical")
RISK_LEVELS = ("low", "medium", "high", "critical")
HEALTH_LEVELS = ("excellent", "good", "fair", "poor", "critical")
PHASES = ("initiation", "planning", "execution", "monitoring", "closure")
PROJECT_TYPES = ("system", "maintenance", "transport")


@dataclass
class IssueRecord:
    """Issue tracked against a project."""

    id: str
    type: Optional[str]
    status: Optional[str]
    severity: Optional[str] = None
    assigned_to: Optional[str] = None
    due_date: Any = None
    created_at: Any = None


@dataclass
class ActivityReport:
    """One work-log submission; only ``updated_at`` matters to the engine."""

    id: str
    updated_at: Any


@dataclass
class ProjectRecord:
    """Raw project document as supplied by the backing store."""

    id: str
    name: str
    stored_status: Optional[str] = None
    progress: float = 0.0
    quality_score_base: Optional[float] = None
    risk_level_stored: Optional[str] = None
    health_level: Optional[str] = None
    phase: Optional[str] = None
    manager: Optional[str] = None
    region: Optional[str] = None
    project_type: Optional[str] = None
    priority: Optional[str] = None
    start_date: Any = None
    estimated_end_date: Any = None
    estimated_budget: Optional[float] = None
    actual_budget: Optional[float] = None
    contract_id: Optional[str] = None
    created_at: Any = None
    financial_metrics: dict = field(default_factory=dict)
    issues: list[IssueRecord] = field(default_factory=list)
    reports: list[ActivityReport] = field(default_factory=list)
    extra: dict = field(default_factory=dict)


@dataclass(frozen=True)
class SortKeys:
    """Pre-computed comparison keys for ordinal and date sorts."""

    priority: int
    risk: int
    health: int
    created_at: float
    start_date: float


@dataclass(frozen=True)
class ProjectView:
    """Derived, read-only project view rebuilt on every recomputation."""

    id: str
    name: str
    effective_status: str
    effective_risk_level: str
    quality_score: float
    quality_deduction: float
    quality_or_progress_issue_count: int
    searchable_fields: tuple[str, ...]
    search_text: str
    sort_keys: SortKeys
    progress: float
    stored_status: Optional[str]
    risk_level_stored: Optional[str]
    health_level: Optional[str]
    phase: Optional[str]
    manager: Optional[str]
    region: Optional[str]
    project_type: Optional[str]
    priority: Optional[str]
    contract_id: Optional[str]
    created_at: Any
    start_date: Any
    estimated_end_date: Any
    estimated_budget: Optional[float]
    actual_budget: Optional[float]
    budget_variance: float
    cost_performance_index: float
    latest_activity: Optional[float]
    issue_count: int
    report_count: int
    extra: dict = field(default_factory=dict)


@dataclass(frozen=True)
class NumericRange:
    """Inclusive numeric range."""

    min: float
    max: float


@dataclass(frozen=True)
class DateRange:
    """Inclusive date range; bounds accept any timestamp form."""

    start: Any
    end: Any


@dataclass(frozen=True)
class FilterSpec:
    """Optional predicates; every supplied one must hold."""

    search: Optional[str] = None
    status: Optional[str] = None
    project_type: Optional[str] = None
    priority: Optional[str] = None
    risk_level: Optional[str] = None
    health_level: Optional[str] = None
    phase: Optional[str] = None
    manager: Optional[str] = None
    region: Optional[str] = None
    date_range: Optional[DateRange] = None
    progress_range: Optional[NumericRange] = None
    budget_range: Optional[NumericRange] = None
    quality_range: Optional[NumericRange] = None


@dataclass
class AggregateStats:
    """Fleet-wide counts, label distributions and financial totals."""

    total: int
    completed: int
    on_hold: int
    in_progress: int
    active: int
    planning: int
    approved: int
    overdue: int
    high_risk: int
    risk_distribution: dict[str, int]
    health_distribution: dict[str, int]
    phase_distribution: dict[str, int]
    average_quality_score: int
    average_progress: int
    total_budget: float
    total_actual_cost: float
    budget_variance: float
    total_quality_issues: int
