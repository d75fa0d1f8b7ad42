"""Clock helpers for scheduling publication and the daily chart."""

from __future__ import annotations

from datetime import UTC, datetime, time, timedelta
from typing import Protocol


class Clock(Protocol):
    def __call__(self) -> datetime: ...


def utcnow() -> datetime:
    return datetime.now(UTC)


def ensure_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        raise ValueError("Datetime values must include timezone information")
    return value.astimezone(UTC)


def parse_iso_datetime(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; naive values are taken as UTC."""

    try:
        normalized = value.strip()
        if normalized.endswith("Z"):
            normalized = normalized[:-1] + "+00:00"
        dt = datetime.fromisoformat(normalized)
    except ValueError as exc:
        raise ValueError(f"Invalid ISO timestamp: {value}") from exc
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def hour_marker(now: datetime) -> str:
    """Identify the UTC clock hour containing ``now``."""

    return ensure_aware(now).strftime("%Y-%m-%dT%H")


def last_cutover(now: datetime, cutover: time) -> datetime:
    """Return the most recent daily cutover at or before ``now`` (in UTC).

    ``cutover`` must carry a tzinfo; the boundary is computed in that zone.
    """

    if cutover.tzinfo is None:
        raise ValueError("Cutover time must include timezone information")
    local_now = ensure_aware(now).astimezone(cutover.tzinfo)
    boundary = datetime.combine(local_now.date(), cutover.replace(tzinfo=None), cutover.tzinfo)
    if boundary > local_now:
        boundary -= timedelta(days=1)
    return boundary.astimezone(UTC)


__all__ = [
    "Clock",
    "ensure_aware",
    "hour_marker",
    "last_cutover",
    "parse_iso_datetime",
    "utcnow",
]
