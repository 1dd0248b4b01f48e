"""Per-user plan state."""

import structlog
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from weekline.db.models.user_settings import UserSettings
from weekline.domain.history import PLAN_FREE, PLAN_PRO, ProStatus

logger = structlog.get_logger(__name__)


async def get_user_settings(session: AsyncSession, owner_id: str) -> UserSettings | None:
    result = await session.execute(select(UserSettings).where(UserSettings.owner_id == owner_id))
    return result.scalar_one_or_none()


async def get_or_create_user_settings(
    session: AsyncSession,
    owner_id: str,
    email: str | None = None,
) -> UserSettings:
    """Load the settings row, creating a FREE one on first sign-in.

    A known email is backfilled onto an existing row that lacks one.
    """
    settings = await get_user_settings(session, owner_id)
    if settings is None:
        settings = UserSettings(owner_id=owner_id, email=email, is_pro=False, plan=PLAN_FREE)
        session.add(settings)
        await session.commit()
        await session.refresh(settings)
        logger.info("user_settings_created", owner_id=owner_id)
    elif email and settings.email != email:
        settings.email = email
        await session.commit()
    return settings


async def get_user_pro_status(session: AsyncSession, owner_id: str | None) -> ProStatus:
    """Plan for the caller; a missing row or a database failure counts as FREE."""
    if not owner_id:
        return ProStatus.free()

    try:
        settings = await get_user_settings(session, owner_id)
    except SQLAlchemyError as e:
        logger.warning("pro_status_lookup_failed", owner_id=owner_id, error=str(e))
        await session.rollback()
        return ProStatus.free()

    if settings is None:
        return ProStatus.free()

    is_pro = bool(settings.is_pro)
    return ProStatus(
        is_pro=is_pro,
        plan=PLAN_PRO if is_pro else PLAN_FREE,
        pro_expires_at=settings.pro_expires_at,
    )
