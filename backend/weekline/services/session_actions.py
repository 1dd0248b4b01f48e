"""Owner-scoped session mutations.

Durations are entered in minutes. A session is anchored on its end time:
``start_time`` is always ``end_time - duration``. Malformed input, anonymous
callers and foreign rows are silent no-ops.
"""

from datetime import datetime, timedelta

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from weekline.db.base import utcnow
from weekline.db.models.project import Project
from weekline.db.models.work_session import WorkSession
from weekline.domain.durations import minutes_to_ms
from weekline.services.inputs import clean_optional_text, clean_text, coerce_id, coerce_minutes

logger = structlog.get_logger(__name__)


async def create_session(
    session: AsyncSession,
    owner_id: str | None,
    project_id,
    intention,
    duration_minutes=None,
    notes=None,
    now: datetime | None = None,
) -> WorkSession | None:
    """Log a finished session ending at ``now``.

    Negative or non-numeric durations are stored as zero.
    """
    project_id = coerce_id(project_id)
    if not owner_id or project_id is None:
        return None

    intention = clean_text(intention)
    if not intention:
        return None

    minutes = coerce_minutes(duration_minutes)
    duration_ms = minutes_to_ms(max(0.0, minutes)) if minutes is not None else 0

    project = (
        await session.execute(
            select(Project).where(Project.id == project_id, Project.owner_id == owner_id)
        )
    ).scalar_one_or_none()
    if project is None:
        return None

    end_time = now or utcnow()
    work_session = WorkSession(
        owner_id=owner_id,
        project_id=project.id,
        intention=intention,
        notes=clean_optional_text(notes),
        start_time=end_time - timedelta(milliseconds=duration_ms),
        end_time=end_time,
        duration_ms=duration_ms,
    )
    session.add(work_session)
    await session.commit()
    await session.refresh(work_session)

    logger.info(
        "session_created",
        session_id=work_session.id,
        project_id=project.id,
        duration_ms=duration_ms,
    )
    return work_session


async def update_session(
    session: AsyncSession,
    owner_id: str | None,
    session_id,
    intention,
    duration_minutes=None,
    notes=None,
) -> bool:
    """Edit intention, notes and duration; the end time stays put.

    Durations below one minute (or unparseable) become one minute.
    """
    session_id = coerce_id(session_id)
    if not owner_id or session_id is None:
        return False

    intention = clean_text(intention)
    if not intention:
        return False

    minutes = coerce_minutes(duration_minutes)
    duration_ms = minutes_to_ms(max(1.0, minutes) if minutes is not None else 1.0)

    work_session = (
        await session.execute(
            select(WorkSession).where(WorkSession.id == session_id, WorkSession.owner_id == owner_id)
        )
    ).scalar_one_or_none()
    if work_session is None:
        return False

    work_session.intention = intention
    work_session.notes = clean_optional_text(notes)
    work_session.duration_ms = duration_ms
    work_session.start_time = work_session.end_time - timedelta(milliseconds=duration_ms)
    await session.commit()

    logger.info("session_updated", session_id=session_id, duration_ms=duration_ms)
    return True


async def delete_session(session: AsyncSession, owner_id: str | None, session_id) -> bool:
    session_id = coerce_id(session_id)
    if not owner_id or session_id is None:
        return False

    result = await session.execute(
        delete(WorkSession).where(WorkSession.id == session_id, WorkSession.owner_id == owner_id)
    )
    await session.commit()

    if result.rowcount:
        logger.info("session_deleted", session_id=session_id)
    return result.rowcount > 0
