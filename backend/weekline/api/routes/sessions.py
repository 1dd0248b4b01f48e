"""Session routes: today's log plus create/edit/delete.

Durations arrive in minutes. Like project mutations, these are silent 204
no-ops for anonymous callers, malformed input and foreign rows.
"""

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from weekline.core.auth import CurrentUser, optional_auth, require_auth
from weekline.db.base import get_session_factory
from weekline.domain.durations import format_duration
from weekline.schemas.week import TodayResponse
from weekline.services.session_actions import create_session, delete_session, update_session
from weekline.services.week_service import WeekReportService

router = APIRouter()


class SessionCreate(BaseModel):
    project_id: int | str | None = None
    intention: str | None = None
    duration_minutes: float | str | None = None
    notes: str | None = None


class SessionUpdate(BaseModel):
    intention: str | None = None
    duration_minutes: float | str | None = None
    notes: str | None = None


def _owner(user: CurrentUser | None) -> str | None:
    return user.user_id if user else None


@router.get("/today", response_model=TodayResponse)
async def get_today(user: CurrentUser = Depends(require_auth)):
    async with get_session_factory()() as session:
        return await WeekReportService().today_overview(session, user.user_id)


@router.post("", status_code=201)
async def create_session_route(body: SessionCreate, user: CurrentUser | None = Depends(optional_auth)):
    """Log a finished session that ends now."""
    async with get_session_factory()() as session:
        work_session = await create_session(
            session,
            _owner(user),
            body.project_id,
            body.intention,
            body.duration_minutes,
            body.notes,
        )

    if work_session is None:
        return Response(status_code=204)

    return JSONResponse(
        status_code=201,
        content={
            "id": work_session.id,
            "project_id": work_session.project_id,
            "intention": work_session.intention,
            "notes": work_session.notes,
            "start_time": work_session.start_time.isoformat(),
            "end_time": work_session.end_time.isoformat(),
            "duration_ms": work_session.duration_ms,
            "duration_label": format_duration(work_session.duration_ms),
        },
    )


@router.put("/{session_id}", status_code=204)
async def update_session_route(
    session_id: str,
    body: SessionUpdate,
    user: CurrentUser | None = Depends(optional_auth),
):
    async with get_session_factory()() as session:
        await update_session(
            session,
            _owner(user),
            session_id,
            body.intention,
            body.duration_minutes,
            body.notes,
        )
    return Response(status_code=204)


@router.delete("/{session_id}", status_code=204)
async def delete_session_route(session_id: str, user: CurrentUser | None = Depends(optional_auth)):
    async with get_session_factory()() as session:
        await delete_session(session, _owner(user), session_id)
    return Response(status_code=204)
