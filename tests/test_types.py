"""Tests for custom column types."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from sqlalchemy.dialects import postgresql, sqlite

from taskmanager.core.types import UTCDateTime, utc_now


def test_bind_param_strips_timezone_for_sqlite() -> None:
    """SQLite receives naive UTC values."""
    value = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=2)))
    result = UTCDateTime().process_bind_param(value, sqlite.dialect())
    assert result == datetime(2024, 5, 1, 10, 0)
    assert result is not None and result.tzinfo is None


def test_bind_param_keeps_utc_offset_for_other_dialects() -> None:
    value = datetime(2024, 5, 1, 12, 0, tzinfo=timezone(timedelta(hours=-3)))
    result = UTCDateTime().process_bind_param(value, postgresql.dialect())
    assert result == datetime(2024, 5, 1, 15, 0, tzinfo=timezone.utc)
    assert result is not None and result.utcoffset() == timedelta(0)


def test_naive_values_are_treated_as_utc() -> None:
    value = datetime(2024, 5, 1, 12, 0)
    result = UTCDateTime().process_bind_param(value, postgresql.dialect())
    assert result == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_result_value_is_timezone_aware() -> None:
    """Values read back always carry UTC."""
    result = UTCDateTime().process_result_value(datetime(2024, 5, 1, 12, 0), sqlite.dialect())
    assert result is not None
    assert result.tzinfo == timezone.utc


def test_none_passes_through() -> None:
    decorator = UTCDateTime()
    assert decorator.process_bind_param(None, sqlite.dialect()) is None
    assert decorator.process_result_value(None, sqlite.dialect()) is None


def test_utc_now_is_aware() -> None:
    assert utc_now().utcoffset() == timedelta(0)
