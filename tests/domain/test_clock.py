from __future__ import annotations

from datetime import UTC, datetime, time, timedelta, timezone

import pytest

from huevify.domain.clock import ensure_aware, hour_marker, last_cutover, parse_iso_datetime

MSK = timezone(timedelta(hours=3))


def test_parse_iso_datetime_accepts_z_suffix() -> None:
    parsed = parse_iso_datetime("2025-06-01T12:00:00.000Z")

    assert parsed == datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


def test_parse_iso_datetime_treats_naive_values_as_utc() -> None:
    assert parse_iso_datetime("2025-06-01T12:00:00").tzinfo is UTC


def test_parse_iso_datetime_normalizes_offsets() -> None:
    parsed = parse_iso_datetime("2025-06-01T15:00:00+03:00")

    assert parsed == datetime(2025, 6, 1, 12, 0, tzinfo=UTC)
    assert parsed.tzinfo is UTC


def test_parse_iso_datetime_rejects_garbage() -> None:
    with pytest.raises(ValueError, match="Invalid ISO timestamp"):
        parse_iso_datetime("yesterday")


def test_ensure_aware_rejects_naive() -> None:
    with pytest.raises(ValueError, match="timezone"):
        ensure_aware(datetime(2025, 6, 1))  # noqa: DTZ001


def test_hour_marker_uses_utc_hour() -> None:
    moment = datetime(2025, 6, 1, 2, 30, tzinfo=MSK)

    assert hour_marker(moment) == "2025-05-31T23"


def test_last_cutover_in_cutover_zone() -> None:
    msk_midnight = time(0, 0, tzinfo=MSK)

    before = last_cutover(datetime(2025, 6, 1, 20, 59, tzinfo=UTC), msk_midnight)
    after = last_cutover(datetime(2025, 6, 1, 21, 1, tzinfo=UTC), msk_midnight)

    assert before == datetime(2025, 5, 31, 21, 0, tzinfo=UTC)
    assert after == datetime(2025, 6, 1, 21, 0, tzinfo=UTC)


def test_last_cutover_requires_tzinfo() -> None:
    with pytest.raises(ValueError, match="timezone"):
        last_cutover(datetime(2025, 6, 1, tzinfo=UTC), time(0, 0))
