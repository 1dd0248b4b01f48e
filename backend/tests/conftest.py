"""Shared test fixtures for all test groups."""

import os
from datetime import UTC, datetime, timedelta

import pytest

# Settings are cached on first use; pin test-friendly values before any app import.
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("WEEK_TIMEZONE", "UTC")
os.environ.setdefault("FREE_HISTORY_DAYS", "30")
os.environ.setdefault("STRIPE_SECRET_KEY", "sk_test_dummy")
os.environ.setdefault("STRIPE_WEBHOOK_SECRET", "whsec_test_dummy")
os.environ.setdefault("STRIPE_PRICE_PRO_MONTHLY", "price_test_pro_monthly")

from weekline.domain.aggregation import SessionRecord  # noqa: E402


@pytest.fixture
def fixed_now():
    """Wednesday 2025-11-19 12:00 UTC; its week runs Mon Nov 17 to Sun Nov 23."""
    return datetime(2025, 11, 19, 12, 0, tzinfo=UTC)


@pytest.fixture
def make_record():
    """Factory for SessionRecord with sensible defaults."""
    counter = {"id": 0}

    def _make(
        project_id: int,
        minutes: float,
        start: datetime,
        project_name: str | None = None,
        intention: str = "Deep work",
        notes: str | None = None,
        color: str | None = None,
    ) -> SessionRecord:
        counter["id"] += 1
        duration_ms = int(minutes * 60_000)
        return SessionRecord(
            id=counter["id"],
            project_id=project_id,
            project_name=project_name or f"Project {project_id}",
            project_color=color,
            intention=intention,
            notes=notes,
            start_time=start,
            end_time=start + timedelta(milliseconds=duration_ms),
            duration_ms=duration_ms,
            created_at=start,
        )

    return _make


@pytest.fixture
def make_report(fixed_now):
    """Build a WeekReport for the fixed week from SessionRecords (UTC week)."""
    from weekline.domain.aggregation import aggregate_sessions
    from weekline.domain.history import clamp_week
    from weekline.domain.report import WeekReport
    from weekline.domain.weeks import get_week_range

    def _make(records, highlight: str = "", is_pro: bool = True) -> WeekReport:
        week = get_week_range(0, now=fixed_now, tz=UTC)
        return WeekReport(
            week=week,
            tz=UTC,
            aggregate=aggregate_sessions(records, UTC),
            window=clamp_week(week, is_pro, fixed_now, UTC),
            highlight=highlight,
        )

    return _make


@pytest.fixture
def sample_records(make_record):
    """Alpha 45m + Alpha 30m on Monday, Beta 15m on Tuesday."""
    monday = datetime(2025, 11, 17, tzinfo=UTC)
    return [
        make_record(1, 45, monday + timedelta(hours=9), project_name="Alpha", notes="Shipped the parser"),
        make_record(1, 30, monday + timedelta(hours=14), project_name="Alpha", intention="Code review"),
        make_record(2, 15, monday + timedelta(days=1, hours=10), project_name="Beta", intention="Standup"),
    ]
