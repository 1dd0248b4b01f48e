"""WeekReportService: owner-scoped reads behind the Today, Week, Summary,
Projects and Settings views.

Queries select the sessions for a window; aggregation and the free-plan clamp
live in the domain layer.
"""

from datetime import datetime, tzinfo

import structlog
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from weekline.core.config import get_settings
from weekline.db.models.project import Project
from weekline.db.models.work_session import WorkSession
from weekline.domain.aggregation import SessionRecord, WeekAggregate, aggregate_sessions
from weekline.domain.durations import format_duration
from weekline.domain.history import clamp_week
from weekline.domain.project_colors import color_label, normalize_color
from weekline.domain.report import WeekReport
from weekline.domain.weeks import (
    build_week_days,
    get_today_range,
    get_week_range,
    get_week_tz,
    resolve_active_day,
)
from weekline.schemas.week import (
    AccountOverviewResponse,
    DayGroupItem,
    DayStripItem,
    HistoryInfo,
    ProjectItem,
    ProjectsOverviewResponse,
    ProjectTotalItem,
    SessionItem,
    TodayProject,
    TodayResponse,
    WeekResponse,
)
from weekline.services.highlights import get_weekly_highlight
from weekline.services.user_settings import get_user_pro_status

logger = structlog.get_logger(__name__)


def session_item(record: SessionRecord) -> SessionItem:
    return SessionItem(
        id=record.id,
        project_id=record.project_id,
        project_name=record.project_name,
        project_color=normalize_color(record.project_color),
        intention=record.intention,
        notes=record.notes,
        start_time=record.start_time,
        end_time=record.end_time,
        duration_ms=record.duration_ms,
        duration_label=format_duration(record.duration_ms),
    )


def project_total_items(aggregate: WeekAggregate) -> list[ProjectTotalItem]:
    return [
        ProjectTotalItem(
            project_id=p.project_id,
            name=p.name,
            color=p.color,
            total_ms=p.total_ms,
            count=p.count,
            percentage_of_week=p.percentage_of_week,
        )
        for p in aggregate.project_totals
    ]


def history_info(report: WeekReport) -> HistoryInfo:
    return HistoryInfo(
        is_limited=report.window.is_limited,
        is_locked=report.window.is_locked,
        history_limit=report.window.history_limit,
        effective_start=report.window.effective_start,
    )


class WeekReportService:
    """Service layer for week-scoped reads.

    Every query filters on owner_id; nothing here writes.
    """

    def __init__(self, tz: tzinfo | None = None, free_history_days: int | None = None):
        self.tz = tz or get_week_tz()
        self.free_history_days = (
            free_history_days if free_history_days is not None else get_settings().free_history_days
        )

    async def load_sessions(
        self,
        session: AsyncSession,
        owner_id: str,
        start: datetime,
        end: datetime,
        project_id: int | None = None,
    ) -> list[SessionRecord]:
        """Sessions with ``start <= start_time < end``, oldest first, project joined."""
        query = (
            select(WorkSession)
            .options(selectinload(WorkSession.project))
            .where(
                WorkSession.owner_id == owner_id,
                WorkSession.start_time >= start,
                WorkSession.start_time < end,
            )
            .order_by(WorkSession.start_time.asc(), WorkSession.id.asc())
        )
        if project_id is not None:
            query = query.where(WorkSession.project_id == project_id)

        result = await session.execute(query)
        return [SessionRecord.from_model(row) for row in result.scalars().all()]

    async def build_report(
        self,
        session: AsyncSession,
        owner_id: str,
        offset: int = 0,
        project_id: int | None = None,
        now: datetime | None = None,
    ) -> WeekReport:
        """Aggregate one week for the caller with the plan clamp applied.

        A locked week (entirely outside the free window) never hits the
        sessions table.
        """
        now = now or datetime.now(self.tz)
        week = get_week_range(offset, now=now, tz=self.tz)
        pro_status = await get_user_pro_status(session, owner_id)
        window = clamp_week(week, pro_status.is_pro, now, self.tz, self.free_history_days)

        if window.is_locked:
            records = []
        else:
            records = await self.load_sessions(
                session, owner_id, window.effective_start, window.end, project_id
            )

        highlight = await get_weekly_highlight(session, owner_id, week.start)

        logger.debug(
            "week_report_built",
            owner_id=owner_id,
            offset=offset,
            sessions=len(records),
            locked=window.is_locked,
        )
        return WeekReport(
            week=week,
            tz=self.tz,
            aggregate=aggregate_sessions(records, self.tz),
            window=window,
            highlight=highlight,
            project_id=project_id,
        )

    async def week_view(
        self,
        session: AsyncSession,
        owner_id: str,
        offset: int = 0,
        raw_day: str | None = None,
        now: datetime | None = None,
    ) -> WeekResponse:
        now = now or datetime.now(self.tz)
        report = await self.build_report(session, owner_id, offset, now=now)
        aggregate = report.aggregate

        active_day = resolve_active_day(report.week, raw_day, now, self.tz)
        groups = sorted(aggregate.day_groups, key=lambda d: d.key != active_day)

        return WeekResponse(
            offset=offset,
            start=report.week.start,
            end=report.week.end,
            start_label=report.start_label,
            end_label=report.end_label,
            total_ms=aggregate.total_ms,
            sessions_count=aggregate.sessions_count,
            projects_count=aggregate.projects_count,
            active_days_count=aggregate.active_days_count,
            avg_per_active_day_ms=aggregate.avg_per_active_day_ms,
            project_totals=project_total_items(aggregate),
            days=[
                DayStripItem(**vars(day))
                for day in build_week_days(report.week, aggregate.totals_by_day())
            ],
            active_day=active_day,
            day_groups=[
                DayGroupItem(
                    key=day.key,
                    label=day.label,
                    total_ms=day.total_ms,
                    sessions=[session_item(s) for s in day.sessions],
                )
                for day in groups
            ],
            history=history_info(report),
        )

    async def today_overview(
        self,
        session: AsyncSession,
        owner_id: str,
        now: datetime | None = None,
    ) -> TodayResponse:
        """Today's sessions plus the active projects offered by the log form."""
        today = get_today_range(now or datetime.now(self.tz), self.tz)

        projects = (
            await session.execute(
                select(Project)
                .where(Project.owner_id == owner_id, Project.is_archived.is_(False))
                .order_by(Project.created_at.asc(), Project.id.asc())
            )
        ).scalars().all()
        records = await self.load_sessions(session, owner_id, today.start, today.end)
        aggregate = aggregate_sessions(records, self.tz)

        top = aggregate.project_totals[0].name if aggregate.project_totals else None

        return TodayResponse(
            start=today.start,
            end=today.end,
            total_ms=aggregate.total_ms,
            sessions_count=aggregate.sessions_count,
            primary_project_name=top,
            projects=[
                TodayProject(id=p.id, name=p.name, color=normalize_color(p.color)) for p in projects
            ],
            sessions=[session_item(s) for s in records],
        )

    async def project_overview(
        self,
        session: AsyncSession,
        owner_id: str,
        now: datetime | None = None,
    ) -> ProjectsOverviewResponse:
        """Active and archived projects with this week's totals."""
        week = get_week_range(0, now=now or datetime.now(self.tz), tz=self.tz)

        projects = (
            await session.execute(
                select(Project)
                .where(Project.owner_id == owner_id)
                .order_by(Project.created_at.asc(), Project.id.asc())
            )
        ).scalars().all()

        totals = await session.execute(
            select(
                WorkSession.project_id,
                func.coalesce(func.sum(WorkSession.duration_ms), 0),
                func.count(WorkSession.id),
            )
            .where(
                WorkSession.owner_id == owner_id,
                WorkSession.start_time >= week.start,
                WorkSession.start_time < week.end,
            )
            .group_by(WorkSession.project_id)
        )
        weekly = {project_id: (int(total_ms), count) for project_id, total_ms, count in totals.all()}

        items = []
        for p in projects:
            total_ms, count = weekly.get(p.id, (0, 0))
            items.append(
                ProjectItem(
                    id=p.id,
                    name=p.name,
                    color=normalize_color(p.color),
                    color_label=color_label(p.color),
                    is_archived=p.is_archived,
                    created_at=p.created_at,
                    week_total_ms=total_ms,
                    week_sessions_count=count,
                )
            )

        active = [item for item in items if not item.is_archived]
        return ProjectsOverviewResponse(
            active=active,
            archived=[item for item in items if item.is_archived],
            active_touched_this_week=sum(1 for item in active if item.week_sessions_count > 0),
            active_week_total_ms=sum(item.week_total_ms for item in active),
        )

    async def account_overview(
        self,
        session: AsyncSession,
        owner_id: str,
        email: str | None = None,
        now: datetime | None = None,
    ) -> AccountOverviewResponse:
        """This week's total, lifetime totals and plan for the settings page."""
        week = get_week_range(0, now=now or datetime.now(self.tz), tz=self.tz)

        week_total = (
            await session.execute(
                select(func.coalesce(func.sum(WorkSession.duration_ms), 0)).where(
                    WorkSession.owner_id == owner_id,
                    WorkSession.start_time >= week.start,
                    WorkSession.start_time < week.end,
                )
            )
        ).scalar_one()

        lifetime_total, lifetime_count = (
            await session.execute(
                select(
                    func.coalesce(func.sum(WorkSession.duration_ms), 0),
                    func.count(WorkSession.id),
                ).where(WorkSession.owner_id == owner_id)
            )
        ).one()

        pro_status = await get_user_pro_status(session, owner_id)

        return AccountOverviewResponse(
            email=email,
            is_pro=pro_status.is_pro,
            plan=pro_status.plan,
            pro_expires_at=pro_status.pro_expires_at,
            week_total_ms=int(week_total),
            lifetime_total_ms=int(lifetime_total),
            lifetime_sessions_count=lifetime_count,
        )
