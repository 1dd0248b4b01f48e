"""Plan status and the free-tier history window.

Free accounts only see the last ``free_history_days`` days. The clamp is
applied at query time; older sessions stay in storage and reappear after an
upgrade.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta, tzinfo

from weekline.domain.weeks import WeekRange, midnight

FREE_HISTORY_DAYS = 30

ACTIVE_SUBSCRIPTION_STATUSES = ("active", "trialing")

PLAN_FREE = "FREE"
PLAN_PRO = "PRO"


@dataclass(frozen=True)
class ProStatus:
    is_pro: bool
    plan: str
    pro_expires_at: datetime | None = None

    @classmethod
    def free(cls) -> "ProStatus":
        return cls(is_pro=False, plan=PLAN_FREE, pro_expires_at=None)


@dataclass(frozen=True)
class HistoryWindow:
    """Effective query bounds for a requested week."""

    history_limit: datetime
    effective_start: datetime
    end: datetime
    is_locked: bool  # whole week older than the free window: fetch nothing
    is_limited: bool  # free plan (show the upgrade hint)


def subscription_is_active(status: str | None) -> bool:
    return status in ACTIVE_SUBSCRIPTION_STATUSES


def history_limit_date(now: datetime, tz: tzinfo, free_history_days: int = FREE_HISTORY_DAYS) -> datetime:
    return midnight(now, tz) - timedelta(days=free_history_days)


def clamp_week(
    week: WeekRange,
    is_pro: bool,
    now: datetime,
    tz: tzinfo,
    free_history_days: int = FREE_HISTORY_DAYS,
) -> HistoryWindow:
    """Apply the free-tier history clamp to a requested week."""
    limit = history_limit_date(now, tz, free_history_days)

    if is_pro:
        return HistoryWindow(
            history_limit=limit,
            effective_start=week.start,
            end=week.end,
            is_locked=False,
            is_limited=False,
        )

    return HistoryWindow(
        history_limit=limit,
        effective_start=max(week.start, limit),
        end=week.end,
        is_locked=week.end <= limit,
        is_limited=True,
    )
