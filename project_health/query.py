"""Filtering and sorting over derived project views."""

from __future__ import annotations

import logging
import re
from typing import Any, Callable, Optional, Sequence

from project_health.schema import FilterSpec, NumericRange, ProjectView
from project_health.timestamps import to_epoch_or_none

logger = logging.getLogger(__name__)

DEFAULT_SORT = "createdAt-desc"

_SORT_FIELDS = (
    "name",
    "createdAt",
    "status",
    "progress",
    "priority",
    "riskLevel",
    "healthLevel",
    "qualityScore",
    "budget",
    "startDate",
)
SORT_OPTIONS = tuple(f"{name}-{direction}" for name in _SORT_FIELDS for direction in ("asc", "desc"))

_TOKEN_SPLIT = re.compile(r"[\s,;]+")

_SORT_KEYS: dict[str, Callable[[ProjectView], Any]] = {
    "name": lambda view: (view.name or "").casefold(),
    "createdAt": lambda view: view.sort_keys.created_at,
    "status": lambda view: view.effective_status,
    "progress": lambda view: view.progress or 0.0,
    "qualityScore": lambda view: view.quality_score,
    "budget": lambda view: view.estimated_budget or 0.0,
    "startDate": lambda view: view.sort_keys.start_date,
    "priority": lambda view: view.sort_keys.priority,
    "riskLevel": lambda view: view.sort_keys.risk,
    "healthLevel": lambda view: view.sort_keys.health,
}

_EXACT_FILTERS = (
    ("status", "effective_status"),
    ("project_type", "project_type"),
    ("priority", "priority"),
    ("risk_level", "effective_risk_level"),
    ("health_level", "health_level"),
    ("phase", "phase"),
    ("manager", "manager"),
    ("region", "region"),
)


def tokenize_search(term: Optional[str]) -> list[str]:
    """Split a search string on whitespace, commas and semicolons."""

    if not term:
        return []
    return [token.lower() for token in _TOKEN_SPLIT.split(term) if token]


def resolve_sort_option(option: Any) -> tuple[str, bool]:
    """Return ``(field, descending)``, falling back to ``createdAt-desc``."""

    if option not in SORT_OPTIONS:
        logger.warning("Unknown sort option %r; using %s", option, DEFAULT_SORT)
        option = DEFAULT_SORT
    field, direction = option.rsplit("-", 1)
    return field, direction == "desc"


def _in_range(value: float, bounds: NumericRange) -> bool:
    return bounds.min <= value <= bounds.max


def _predicates(filters: FilterSpec) -> list[Callable[[ProjectView], bool]]:
    predicates: list[Callable[[ProjectView], bool]] = []

    tokens = tokenize_search(filters.search)
    if tokens:
        predicates.append(lambda view: any(token in view.search_text for token in tokens))

    for filter_name, attribute in _EXACT_FILTERS:
        expected = getattr(filters, filter_name)
        if expected:
            predicates.append(lambda view, attr=attribute, value=expected: getattr(view, attr) == value)

    if filters.date_range is not None:
        start = to_epoch_or_none(filters.date_range.start)
        end = to_epoch_or_none(filters.date_range.end)

        def in_date_range(view: ProjectView) -> bool:
            started = to_epoch_or_none(view.start_date)
            if started is None:
                return False
            if start is not None and started < start:
                return False
            if end is not None and started > end:
                return False
            return True

        predicates.append(in_date_range)

    if filters.progress_range is not None:
        bounds = filters.progress_range
        predicates.append(lambda view: _in_range(view.progress or 0.0, bounds))

    if filters.budget_range is not None:
        budget_bounds = filters.budget_range
        predicates.append(lambda view: _in_range(view.estimated_budget or 0.0, budget_bounds))

    if filters.quality_range is not None:
        quality_bounds = filters.quality_range
        predicates.append(lambda view: _in_range(view.quality_score, quality_bounds))

    return predicates


def filter_views(views: Sequence[ProjectView], filters: Optional[FilterSpec] = None) -> list[ProjectView]:
    """Keep views satisfying every supplied predicate, in input order."""

    if filters is None:
        return list(views)
    predicates = _predicates(filters)
    return [view for view in views if all(predicate(view) for predicate in predicates)]


def sort_views(views: Sequence[ProjectView], sort: Any = DEFAULT_SORT) -> list[ProjectView]:
    """Stable sort by one key; ties keep their input order in both directions."""

    field, descending = resolve_sort_option(sort)
    return sorted(views, key=_SORT_KEYS[field], reverse=descending)


def query(
    views: Sequence[ProjectView],
    filters: Optional[FilterSpec] = None,
    sort: Any = DEFAULT_SORT,
) -> list[ProjectView]:
    """Filter then sort a collection of views."""

    return sort_views(filter_views(views, filters), sort)
