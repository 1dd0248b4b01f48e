"""Week export routes: CSV, JSON and PDF attachments.

All three formats are built from the same aggregated, plan-clamped report,
so they always agree on totals.
"""

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, Response

from weekline.core.auth import CurrentUser, require_auth
from weekline.core.exceptions import PDFRenderError
from weekline.db.base import get_session_factory
from weekline.domain.report import WeekReport
from weekline.domain.summary import parse_mode
from weekline.exports import CSVExporter, JSONExporter, PDFExporter
from weekline.exports.formatting import export_filename
from weekline.services.inputs import coerce_id, coerce_offset
from weekline.services.week_service import WeekReportService

logger = structlog.get_logger(__name__)

router = APIRouter()


async def _load_report(user: CurrentUser, offset: str | None, project_id: str | None) -> WeekReport:
    async with get_session_factory()() as session:
        return await WeekReportService().build_report(
            session, user.user_id, coerce_offset(offset), coerce_id(project_id)
        )


def _attachment(filename: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{filename}"'}


@router.get("/week/csv")
async def export_week_csv(
    offset: str | None = None,
    project_id: str | None = Query(None, alias="projectId"),
    mode: str | None = None,
    user: CurrentUser = Depends(require_auth),
):
    report = await _load_report(user, offset, project_id)
    filename = export_filename(parse_mode(mode), report.start_label, report.end_label, "csv")

    logger.info("week_exported", format="csv", sessions=report.aggregate.sessions_count)
    return Response(
        content=CSVExporter().export_week(report),
        media_type="text/csv; charset=utf-8",
        headers=_attachment(filename),
    )


@router.get("/week/json")
async def export_week_json(
    offset: str | None = None,
    project_id: str | None = Query(None, alias="projectId"),
    mode: str | None = None,
    user: CurrentUser = Depends(require_auth),
):
    report = await _load_report(user, offset, project_id)
    filename = export_filename(parse_mode(mode), report.start_label, report.end_label, "json")

    logger.info("week_exported", format="json", sessions=report.aggregate.sessions_count)
    return Response(
        content=JSONExporter().export_week(report),
        media_type="application/json; charset=utf-8",
        headers=_attachment(filename),
    )


@router.get("/week/pdf")
async def export_week_pdf(
    offset: str | None = None,
    project_id: str | None = Query(None, alias="projectId"),
    mode: str | None = None,
    client: str | None = None,
    user: CurrentUser = Depends(require_auth),
):
    """Printable weekly summary; ``client`` adds a client line to the header."""
    summary_mode = parse_mode(mode)
    report = await _load_report(user, offset, project_id)

    try:
        pdf_bytes = await PDFExporter().export_week(
            report,
            summary_mode,
            owner_email=user.email,
            client_name=client,
        )
    except PDFRenderError as e:
        logger.error("week_pdf_export_failed", error=str(e))
        raise HTTPException(status_code=503, detail="PDF export is temporarily unavailable") from e

    filename = export_filename(summary_mode, report.start_label, report.end_label, "pdf")
    logger.info("week_exported", format="pdf", sessions=report.aggregate.sessions_count)
    return Response(content=pdf_bytes, media_type="application/pdf", headers=_attachment(filename))
