"""Canonical label -> rank tables shared by sorting, classification and stats."""

from __future__ import annotations

import logging
from typing import Optional

logger = logging.getLogger(__name__)

PRIORITY_RANKS = {"critical": 4, "high": 3, "medium": 2, "low": 1}
RISK_RANKS = {"critical": 4, "high": 3, "medium": 2, "low": 1}
HEALTH_RANKS = {"excellent": 5, "good": 4, "fair": 3, "poor": 2, "critical": 1}


def _rank(table: dict[str, int], label: Optional[str], kind: str) -> int:
    if not isinstance(label, str):
        return 0
    rank = table.get(label)
    if rank is None:
        logger.debug("Unknown %s label %r ranked as 0", kind, label)
        return 0
    return rank


def priority_rank(label: Optional[str]) -> int:
    return _rank(PRIORITY_RANKS, label, "priority")


def risk_rank(label: Optional[str]) -> int:
    return _rank(RISK_RANKS, label, "risk")


def health_rank(label: Optional[str]) -> int:
    return _rank(HEALTH_RANKS, label, "health")
