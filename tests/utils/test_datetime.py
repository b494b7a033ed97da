"""Tests for the application timezone helpers."""

from __future__ import annotations

from datetime import datetime, timezone

from zoneinfo import ZoneInfo

from app.utils.datetime import _resolve_timezone, ensure_app_naive_datetime


def test_known_zone_names_are_used_as_is() -> None:
    assert _resolve_timezone("Europe/Madrid") == ZoneInfo("Europe/Madrid")


def test_unknown_zone_names_fall_back_to_local_time() -> None:
    assert _resolve_timezone("Mars/Olympus_Mons") == ZoneInfo("America/Bogota")
    assert _resolve_timezone("UTC+05:00") == ZoneInfo("America/Bogota")


def test_aware_values_are_stored_as_local_wall_time() -> None:
    value = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)

    assert ensure_app_naive_datetime(value) == datetime(2026, 1, 15, 7, 0)
    assert ensure_app_naive_datetime(None) is None
