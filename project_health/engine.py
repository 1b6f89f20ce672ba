"""Full recomputation from raw records to views and stats, plus a snapshot observer."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable, Optional, Sequence

from project_health.config import DEFAULT_CONFIG, EngineConfig
from project_health.metrics import compute_quality_summary, compute_stats
from project_health.query import query
from project_health.schema import AggregateStats, FilterSpec, ProjectRecord, ProjectView
from project_health.timestamps import now_epoch
from project_health.views import build_views

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecomputeResult:
    """Output of one recomputation pass."""

    views: list[ProjectView]
    stats: AggregateStats
    quality_summary: dict
    generated_at: float


def recompute(
    records: Sequence[ProjectRecord],
    filters: Optional[FilterSpec] = None,
    sort: Any = None,
    now: Any = None,
    config: EngineConfig = DEFAULT_CONFIG,
) -> RecomputeResult:
    """Rebuild every view, then filter/sort them and aggregate the unfiltered set."""

    reference = now_epoch(now)
    all_views = build_views(records, reference, config)
    visible = query(all_views, filters, sort if sort is not None else config.default_sort)
    logger.debug("Recomputed %d views, %d visible", len(all_views), len(visible))
    return RecomputeResult(
        views=visible,
        stats=compute_stats(records, all_views, reference, config),
        quality_summary=compute_quality_summary(records, config),
        generated_at=reference,
    )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ProjectCollectionObserver:
    """Holds the latest snapshot and query state and republishes on every change.

    Each event triggers a full :func:`recompute`. A result is published only
    if no newer event started while it was being computed, so a stale pass
    can simply be dropped.
    """

    def __init__(self, config: EngineConfig = DEFAULT_CONFIG, clock: Optional[Callable[[], Any]] = None):
        self.config = config
        self.clock = clock or _utc_now
        self.records: list[ProjectRecord] = []
        self.filters: Optional[FilterSpec] = None
        self.sort: str = config.default_sort
        self._generation = 0
        self._latest: Optional[RecomputeResult] = None
        self._subscribers: list[Callable[[RecomputeResult], None]] = []

    @property
    def latest(self) -> Optional[RecomputeResult]:
        return self._latest

    @property
    def generation(self) -> int:
        return self._generation

    def subscribe(self, callback: Callable[[RecomputeResult], None]) -> Callable[[], None]:
        """Register ``callback`` for future results; returns an unsubscribe function."""

        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def on_snapshot(self, records: Sequence[ProjectRecord]) -> Optional[RecomputeResult]:
        self.records = list(records)
        return self._refresh()

    def set_filters(self, filters: Optional[FilterSpec]) -> Optional[RecomputeResult]:
        self.filters = filters
        return self._refresh()

    def set_sort(self, sort: str) -> Optional[RecomputeResult]:
        self.sort = sort
        return self._refresh()

    def _refresh(self) -> Optional[RecomputeResult]:
        self._generation += 1
        generation = self._generation
        result = recompute(self.records, self.filters, self.sort, self.clock(), self.config)
        return self.publish(result, generation)

    def publish(self, result: RecomputeResult, generation: int) -> Optional[RecomputeResult]:
        """Publish ``result`` unless a newer generation has already started."""

        if generation != self._generation:
            logger.debug("Dropping stale result for generation %d (current %d)", generation, self._generation)
            return None
        self._latest = result
        for callback in list(self._subscribers):
            callback(result)
        return result
