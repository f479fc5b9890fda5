"""Time helper tests."""

from __future__ import annotations

from datetime import UTC, datetime

from chorecoins.utils.time import next_stamp, parse_iso_datetime


def test_parse_iso_datetime_accepts_trailing_z() -> None:
    """A ``Z`` suffix should parse as UTC."""
    parsed = parse_iso_datetime("2026-02-07T10:30:00Z")
    assert parsed == datetime(2026, 2, 7, 10, 30, tzinfo=UTC)


def test_parse_iso_datetime_makes_naive_values_utc() -> None:
    parsed = parse_iso_datetime("2026-02-07T10:30:00")
    assert parsed is not None
    assert parsed.tzinfo is UTC


def test_parse_iso_datetime_empty() -> None:
    assert parse_iso_datetime(None) is None
    assert parse_iso_datetime("") is None


def test_next_stamp_is_strictly_increasing() -> None:
    """Tokens and timestamps created back to back should sort in call order."""
    stamps = [next_stamp() for _ in range(50)]
    tokens = [token for token, _ in stamps]
    moments = [parse_iso_datetime(moment) for _, moment in stamps]

    assert tokens == sorted(tokens)
    assert len(set(tokens)) == len(tokens)
    assert all(earlier < later for earlier, later in zip(moments, moments[1:]))
