"""Owner-scoped project mutations.

Every action is a silent no-op (returns False) when the caller is anonymous,
the input is malformed or the project belongs to someone else. Projects are
archived, never hard-deleted, so historical sessions keep their project.
"""

import structlog
from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession

from weekline.db.models.project import Project
from weekline.domain.project_colors import PROJECT_COLOR_KEYS
from weekline.services.inputs import clean_text, coerce_id

logger = structlog.get_logger(__name__)


def _clean_color(raw) -> str | None:
    if isinstance(raw, str) and raw.strip() in PROJECT_COLOR_KEYS:
        return raw.strip()
    return None


async def create_project(session: AsyncSession, owner_id: str | None, name, color=None) -> Project | None:
    if not owner_id:
        return None

    name = clean_text(name)
    if not name:
        return None

    project = Project(owner_id=owner_id, name=name, color=_clean_color(color), is_archived=False)
    session.add(project)
    await session.commit()
    await session.refresh(project)

    logger.info("project_created", project_id=project.id, owner_id=owner_id)
    return project


async def _update_owned(session: AsyncSession, owner_id: str, project_id: int, **values) -> bool:
    result = await session.execute(
        update(Project)
        .where(Project.id == project_id, Project.owner_id == owner_id)
        .values(**values)
    )
    await session.commit()
    return result.rowcount > 0


async def rename_project(session: AsyncSession, owner_id: str | None, project_id, name) -> bool:
    project_id = coerce_id(project_id)
    if not owner_id or project_id is None:
        return False

    name = clean_text(name)
    if not name:
        return False

    changed = await _update_owned(session, owner_id, project_id, name=name)
    if changed:
        logger.info("project_renamed", project_id=project_id, owner_id=owner_id)
    return changed


async def set_project_archived(
    session: AsyncSession,
    owner_id: str | None,
    project_id,
    archived: bool,
) -> bool:
    project_id = coerce_id(project_id)
    if not owner_id or project_id is None:
        return False

    changed = await _update_owned(session, owner_id, project_id, is_archived=archived)
    if changed:
        logger.info(
            "project_archived" if archived else "project_unarchived",
            project_id=project_id,
            owner_id=owner_id,
        )
    return changed


async def archive_project(session: AsyncSession, owner_id: str | None, project_id) -> bool:
    return await set_project_archived(session, owner_id, project_id, True)


async def unarchive_project(session: AsyncSession, owner_id: str | None, project_id) -> bool:
    return await set_project_archived(session, owner_id, project_id, False)
