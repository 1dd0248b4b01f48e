"""Project routes: overview plus create/rename/archive/unarchive.

Mutations answer 204 and change nothing when the caller is anonymous, the
input is malformed or the project is not theirs.
"""

from fastapi import APIRouter, Depends, Response
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from weekline.core.auth import CurrentUser, optional_auth, require_auth
from weekline.db.base import get_session_factory
from weekline.domain.project_colors import color_label, normalize_color
from weekline.schemas.week import ProjectItem, ProjectsOverviewResponse
from weekline.services.project_actions import (
    archive_project,
    create_project,
    rename_project,
    unarchive_project,
)
from weekline.services.week_service import WeekReportService

router = APIRouter()


class ProjectCreate(BaseModel):
    name: str | None = None
    color: str | None = None


class ProjectRename(BaseModel):
    name: str | None = None


def _owner(user: CurrentUser | None) -> str | None:
    return user.user_id if user else None


@router.get("", response_model=ProjectsOverviewResponse)
async def list_projects(user: CurrentUser = Depends(require_auth)):
    """Active and archived projects with this week's time per project."""
    async with get_session_factory()() as session:
        return await WeekReportService().project_overview(session, user.user_id)


@router.post("", status_code=201, response_model=ProjectItem)
async def create_project_route(body: ProjectCreate, user: CurrentUser | None = Depends(optional_auth)):
    async with get_session_factory()() as session:
        project = await create_project(session, _owner(user), body.name, body.color)

    if project is None:
        return Response(status_code=204)

    item = ProjectItem(
        id=project.id,
        name=project.name,
        color=normalize_color(project.color),
        color_label=color_label(project.color),
        is_archived=project.is_archived,
        created_at=project.created_at,
    )
    return JSONResponse(status_code=201, content=item.model_dump(mode="json"))


@router.post("/{project_id}/rename", status_code=204)
async def rename_project_route(
    project_id: str,
    body: ProjectRename,
    user: CurrentUser | None = Depends(optional_auth),
):
    async with get_session_factory()() as session:
        await rename_project(session, _owner(user), project_id, body.name)
    return Response(status_code=204)


@router.post("/{project_id}/archive", status_code=204)
async def archive_project_route(project_id: str, user: CurrentUser | None = Depends(optional_auth)):
    async with get_session_factory()() as session:
        await archive_project(session, _owner(user), project_id)
    return Response(status_code=204)


@router.post("/{project_id}/unarchive", status_code=204)
async def unarchive_project_route(project_id: str, user: CurrentUser | None = Depends(optional_auth)):
    async with get_session_factory()() as session:
        await unarchive_project(session, _owner(user), project_id)
    return Response(status_code=204)
