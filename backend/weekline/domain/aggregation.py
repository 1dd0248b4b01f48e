"""Weekly session aggregation.

Pure functions with no external dependencies. The aggregator trusts its input:
callers select the sessions for a window (and apply any plan clamp) before
handing them over in chronological order.
"""

from dataclasses import dataclass, field
from datetime import datetime, tzinfo

from weekline.domain.project_colors import normalize_color


@dataclass(frozen=True)
class SessionRecord:
    """A session joined with its project's display fields."""

    id: int
    project_id: int
    project_name: str
    project_color: str | None
    intention: str
    notes: str | None
    start_time: datetime
    end_time: datetime
    duration_ms: int
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, session) -> "SessionRecord":
        project = session.project
        return cls(
            id=session.id,
            project_id=session.project_id,
            project_name=project.name if project is not None else "",
            project_color=project.color if project is not None else None,
            intention=session.intention,
            notes=session.notes,
            start_time=session.start_time,
            end_time=session.end_time,
            duration_ms=session.duration_ms or 0,
            created_at=session.created_at,
        )


@dataclass
class ProjectTotal:
    project_id: int
    name: str
    color: str
    total_ms: int = 0
    count: int = 0
    percentage_of_week: int = 0


@dataclass
class DayGroup:
    key: str  # YYYY-MM-DD, local date
    label: str  # "Mon, Nov 18"
    total_ms: int = 0
    sessions: list[SessionRecord] = field(default_factory=list)


@dataclass
class WeekAggregate:
    total_ms: int
    sessions_count: int
    project_totals: list[ProjectTotal]
    day_groups: list[DayGroup]

    @property
    def projects_count(self) -> int:
        return len(self.project_totals)

    @property
    def active_days_count(self) -> int:
        return sum(1 for day in self.day_groups if day.total_ms > 0)

    @property
    def avg_per_active_day_ms(self) -> int:
        days = self.active_days_count
        if days == 0:
            return 0
        return round_half_up(self.total_ms, days)

    @property
    def sessions(self) -> list[SessionRecord]:
        return [s for day in self.day_groups for s in day.sessions]

    def totals_by_day(self) -> dict[str, int]:
        return {day.key: day.total_ms for day in self.day_groups}


def round_half_up(numerator: int, denominator: int) -> int:
    """Integer division rounded half up (non-negative operands)."""
    return (2 * numerator + denominator) // (2 * denominator)


def percentage_of_week(project_ms: int, total_ms: int) -> int:
    """Share of the week's total, 0-100, rounded independently per project.

    Shares across projects are not forced to sum to 100.
    """
    if total_ms <= 0:
        return 0
    return round_half_up(project_ms * 100, total_ms)


def day_label(moment: datetime) -> str:
    return f"{moment:%a}, {moment:%b} {moment.day}"


def aggregate_sessions(sessions: list[SessionRecord], tz: tzinfo) -> WeekAggregate:
    """Bucket sessions by project and by local calendar day in a single pass.

    Returns:
        WeekAggregate with projects sorted by time descending (stable, so ties
        keep first-seen order) and days sorted ascending.
    """
    total_ms = 0
    by_project: dict[int, ProjectTotal] = {}
    by_day: dict[str, DayGroup] = {}

    for s in sessions:
        total_ms += s.duration_ms

        project = by_project.get(s.project_id)
        if project is None:
            project = ProjectTotal(
                project_id=s.project_id,
                name=s.project_name,
                color=normalize_color(s.project_color),
            )
            by_project[s.project_id] = project
        project.total_ms += s.duration_ms
        project.count += 1

        local_start = s.start_time.astimezone(tz)
        key = local_start.date().isoformat()
        day = by_day.get(key)
        if day is None:
            day = DayGroup(key=key, label=day_label(local_start))
            by_day[key] = day
        day.sessions.append(s)
        day.total_ms += s.duration_ms

    project_totals = sorted(by_project.values(), key=lambda p: p.total_ms, reverse=True)
    for project in project_totals:
        project.percentage_of_week = percentage_of_week(project.total_ms, total_ms)

    day_groups = sorted(by_day.values(), key=lambda d: d.key)

    return WeekAggregate(
        total_ms=total_ms,
        sessions_count=len(sessions),
        project_totals=project_totals,
        day_groups=day_groups,
    )
