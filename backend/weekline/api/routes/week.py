"""Week view and weekly summary routes.

Reads require a signed-in caller and apply the free-plan history clamp from
the caller's settings.
"""

from fastapi import APIRouter, Depends, Query, Response

from weekline.core.auth import CurrentUser, optional_auth, require_auth
from weekline.db.base import get_session_factory
from weekline.domain.summary import SummaryMode, SummaryVocabulary, parse_mode, parse_view, resolve_view
from weekline.exports import MarkdownExporter
from weekline.schemas.summary import HighlightUpdate, SummaryResponse
from weekline.schemas.week import WeekResponse
from weekline.services.highlights import save_weekly_highlight
from weekline.services.inputs import coerce_id, coerce_offset
from weekline.services.week_service import WeekReportService, history_info, project_total_items

router = APIRouter()


@router.get("/week", response_model=WeekResponse)
async def get_week(
    offset: str | None = None,
    day: str | None = None,
    user: CurrentUser = Depends(require_auth),
):
    """Per-day and per-project totals for one week.

    ``day`` (YYYY-MM-DD) picks the highlighted day; it defaults to today when
    today is in the week, else Monday.
    """
    async with get_session_factory()() as session:
        return await WeekReportService().week_view(session, user.user_id, coerce_offset(offset), day)


@router.get("/summary", response_model=SummaryResponse)
async def get_summary(
    offset: str | None = None,
    mode: str | None = None,
    view: str | None = None,
    project_id: str | None = Query(None, alias="projectId"),
    client_name: str | None = Query(None, alias="clientName"),
    user: CurrentUser = Depends(require_auth),
):
    """Copy-paste Markdown summary for self, manager or client.

    Client mode never includes the day-by-day breakdown, whatever view is
    requested.
    """
    week_offset = coerce_offset(offset)
    summary_mode = parse_mode(mode)
    summary_view = resolve_view(summary_mode, parse_view(view))
    vocab = SummaryVocabulary.for_mode(summary_mode)

    service = WeekReportService()
    async with get_session_factory()() as session:
        report = await service.build_report(session, user.user_id, week_offset, coerce_id(project_id))

    markdown = MarkdownExporter().export_week(
        report,
        summary_mode,
        summary_view,
        client_name=client_name if summary_mode == SummaryMode.CLIENT else None,
    )

    return SummaryResponse(
        offset=week_offset,
        mode=summary_mode.value,
        view=summary_view.value,
        total_time_label=vocab.total_time_label,
        sessions_label=vocab.sessions_label,
        projects_label=vocab.projects_label,
        week_start=report.week.start.date().isoformat(),
        start_label=report.start_label,
        end_label=report.end_label,
        markdown=markdown,
        highlight=report.highlight,
        total_ms=report.aggregate.total_ms,
        sessions_count=report.aggregate.sessions_count,
        projects_count=report.aggregate.projects_count,
        project_totals=project_total_items(report.aggregate),
        history=history_info(report),
    )


@router.put("/summary/highlight", status_code=204)
async def put_weekly_highlight(body: HighlightUpdate, user: CurrentUser | None = Depends(optional_auth)):
    """Save the week's highlight; empty text removes it."""
    service = WeekReportService()
    async with get_session_factory()() as session:
        await save_weekly_highlight(
            session,
            user.user_id if user else None,
            body.week_start,
            body.highlight,
            service.tz,
        )
    return Response(status_code=204)
