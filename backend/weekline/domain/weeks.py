"""Monday-anchored week windows.

Pure functions. ``now`` and ``tz`` are explicit so callers (and tests) never
depend on ambient clock or server locale.
"""

from dataclasses import dataclass
from datetime import date, datetime, timedelta, tzinfo
from zoneinfo import ZoneInfo

from weekline.core.config import get_settings


@dataclass(frozen=True)
class WeekRange:
    """Half-open ``[start, end)`` window; both bounds are local midnights."""

    start: datetime
    end: datetime

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end


@dataclass(frozen=True)
class WeekDay:
    key: str
    label: str
    day_number: int
    is_weekend: bool
    total_ms: int
    has_sessions: bool


def get_week_tz(name: str | None = None) -> tzinfo:
    """Return the zone used for week boundaries (``WEEK_TIMEZONE`` by default)."""
    return ZoneInfo(name or get_settings().week_timezone)


def midnight(moment: datetime, tz: tzinfo) -> datetime:
    """Local midnight of the calendar day containing ``moment``."""
    local = moment.astimezone(tz)
    return datetime(local.year, local.month, local.day, tzinfo=tz)


def _resolve(now: datetime | None, tz: tzinfo | None) -> tuple[datetime, tzinfo]:
    tz = tz or get_week_tz()
    if now is None:
        now = datetime.now(tz)
    return now, tz


def get_today_range(now: datetime | None = None, tz: tzinfo | None = None) -> WeekRange:
    """Local midnight today to local midnight tomorrow."""
    now, tz = _resolve(now, tz)
    start = midnight(now, tz)
    return WeekRange(start=start, end=start + timedelta(days=1))


def get_week_range(offset: int = 0, now: datetime | None = None, tz: tzinfo | None = None) -> WeekRange:
    """Get the start/end of a week, Monday -> next Monday.

    offset = 0  -> this week
    offset = -1 -> last week
    offset = 1  -> next week
    """
    now, tz = _resolve(now, tz)
    base = midnight(now, tz)

    # weekday(): Mon=0 ... Sun=6
    start = base - timedelta(days=base.weekday()) + timedelta(weeks=offset)
    end = start + timedelta(days=7)
    return WeekRange(start=start, end=end)


def format_day_label(day: date) -> str:
    """Format a date as "Nov 17, 2025"."""
    return f"{day:%b} {day.day}, {day.year}"


def week_labels(week: WeekRange) -> tuple[str, str]:
    """Human labels for the first and last day of the week."""
    last_day = (week.end - timedelta(days=1)).date()
    return format_day_label(week.start.date()), format_day_label(last_day)


def week_days(week: WeekRange) -> list[date]:
    first = week.start.date()
    return [first + timedelta(days=i) for i in range(7)]


def build_week_days(week: WeekRange, totals_by_day: dict[str, int]) -> list[WeekDay]:
    """The 7-day strip shown on the week view."""
    strip = []
    for day in week_days(week):
        key = day.isoformat()
        total = totals_by_day.get(key, 0)
        strip.append(
            WeekDay(
                key=key,
                label=f"{day:%a}".upper(),
                day_number=day.day,
                is_weekend=day.weekday() >= 5,
                total_ms=total,
                has_sessions=total > 0,
            )
        )
    return strip


def resolve_active_day(
    week: WeekRange,
    raw_day: str | None,
    now: datetime | None = None,
    tz: tzinfo | None = None,
) -> str:
    """Pick the highlighted day: requested day, else today, else Monday."""
    now, tz = _resolve(now, tz)
    keys = {day.isoformat() for day in week_days(week)}

    if raw_day:
        try:
            requested = date.fromisoformat(raw_day[:10])
        except ValueError:
            requested = None
        if requested is not None and requested.isoformat() in keys:
            return requested.isoformat()

    today = now.astimezone(tz).date().isoformat()
    if today in keys:
        return today
    return week.start.date().isoformat()
