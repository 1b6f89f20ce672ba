"""Normalization of heterogeneous timestamp shapes into UTC epoch seconds."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import date, datetime, time, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)

EPOCH_ORIGIN = 0.0

NATIVE = "native"
ISO = "iso"
LAZY = "lazy"
MISSING = "missing"
INVALID = "invalid"

_LAZY_METHODS = ("to_date", "toDate", "to_datetime")

_COMPACT_OFFSET = re.compile(r"(\d{2}:\d{2}(?::\d{2}(?:\.\d+)?)?)([+-]\d{2})(\d{2})$")
_FRACTION = re.compile(r"(:\d{2})\.(\d+)")


@dataclass(frozen=True)
class Timestamp:
    """A raw timestamp value tagged with the shape it was recognised as."""

    kind: str
    value: Any


def _lazy_method(raw: Any):
    for name in _LAZY_METHODS:
        method = getattr(raw, name, None)
        if callable(method):
            return method
    return None


def classify(raw: Any) -> Timestamp:
    """Tag a raw value once so later normalization never has to sniff types."""

    if isinstance(raw, Timestamp):
        return raw
    if raw is None:
        return Timestamp(MISSING, None)
    if isinstance(raw, (datetime, date)):
        return Timestamp(NATIVE, raw)
    if isinstance(raw, str):
        return Timestamp(ISO, raw) if raw.strip() else Timestamp(MISSING, raw)
    if _lazy_method(raw) is not None:
        return Timestamp(LAZY, raw)
    return Timestamp(INVALID, raw)


def _native_epoch(value: Any) -> Optional[float]:
    if isinstance(value, datetime):
        dt = value if value.tzinfo else value.replace(tzinfo=timezone.utc)
        return dt.timestamp()
    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc).timestamp()
    return None


def _parse_iso(token: str) -> Optional[datetime]:
    cleaned = token.strip()
    if cleaned.endswith(("Z", "z")):
        cleaned = cleaned[:-1] + "+00:00"
    # fromisoformat before 3.11 needs "+HH:MM" offsets and 3 or 6 fraction digits
    cleaned = _COMPACT_OFFSET.sub(r"\1\2:\3", cleaned)
    cleaned = _FRACTION.sub(lambda match: f"{match.group(1)}.{match.group(2)[:6].ljust(6, '0')}", cleaned)
    try:
        return datetime.fromisoformat(cleaned)
    except ValueError:
        return None


def to_epoch_or_none(value: Any) -> Optional[float]:
    """Return UTC epoch seconds, or ``None`` when the value is missing or unreadable."""

    ts = classify(value)
    if ts.kind == NATIVE:
        return _native_epoch(ts.value)
    if ts.kind == ISO:
        parsed = _parse_iso(ts.value)
        if parsed is None:
            logger.warning("Unparseable timestamp string %r", ts.value)
            return None
        return _native_epoch(parsed)
    if ts.kind == LAZY:
        try:
            converted = _lazy_method(ts.value)()
        except Exception:  # noqa: BLE001
            logger.warning("Timestamp wrapper %r failed to convert", type(ts.value).__name__, exc_info=True)
            return None
        epoch = _native_epoch(converted)
        if epoch is None:
            logger.warning("Timestamp wrapper %r returned %r", type(ts.value).__name__, converted)
        return epoch
    if ts.kind == INVALID:
        logger.warning("Unrecognized timestamp shape %r", type(ts.value).__name__)
    return None


def to_epoch(value: Any) -> float:
    """Return UTC epoch seconds, mapping anything unreadable to the epoch origin."""

    epoch = to_epoch_or_none(value)
    return EPOCH_ORIGIN if epoch is None else epoch


def now_epoch(now: Any = None) -> float:
    """Resolve a reference instant; ``None`` means the current UTC time."""

    if now is None:
        return datetime.now(timezone.utc).timestamp()
    if isinstance(now, (int, float)) and not isinstance(now, bool):
        return float(now)
    return to_epoch(now)
