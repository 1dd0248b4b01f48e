"""Weekly highlight: one optional free-text note per (owner, week start)."""

from datetime import date, datetime, tzinfo

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from weekline.db.models.weekly_highlight import WeeklyHighlight

logger = structlog.get_logger(__name__)


def parse_week_start(raw, tz: tzinfo) -> datetime | None:
    """Parse an ISO date/datetime into the local-midnight key used for storage."""
    if isinstance(raw, datetime):
        moment = raw if raw.tzinfo else raw.replace(tzinfo=tz)
    elif isinstance(raw, date):
        moment = datetime(raw.year, raw.month, raw.day, tzinfo=tz)
    elif isinstance(raw, str) and raw.strip():
        try:
            moment = datetime.fromisoformat(raw.strip().replace("Z", "+00:00"))
        except ValueError:
            return None
        if moment.tzinfo is None:
            moment = moment.replace(tzinfo=tz)
    else:
        return None

    local = moment.astimezone(tz)
    return datetime(local.year, local.month, local.day, tzinfo=tz)


async def get_weekly_highlight(session: AsyncSession, owner_id: str, week_start: datetime) -> str:
    result = await session.execute(
        select(WeeklyHighlight.highlight).where(
            WeeklyHighlight.owner_id == owner_id,
            WeeklyHighlight.week_start == week_start,
        )
    )
    return result.scalar_one_or_none() or ""


async def save_weekly_highlight(
    session: AsyncSession,
    owner_id: str | None,
    week_start_raw,
    text,
    tz: tzinfo,
) -> bool:
    """Upsert the highlight; empty text removes it. Bad dates are ignored."""
    if not owner_id:
        return False

    week_start = parse_week_start(week_start_raw, tz)
    if week_start is None:
        return False

    text = text.strip() if isinstance(text, str) else ""

    if not text:
        await session.execute(
            delete(WeeklyHighlight).where(
                WeeklyHighlight.owner_id == owner_id,
                WeeklyHighlight.week_start == week_start,
            )
        )
        await session.commit()
        logger.info("weekly_highlight_cleared", owner_id=owner_id, week_start=week_start.isoformat())
        return True

    existing = (
        await session.execute(
            select(WeeklyHighlight).where(
                WeeklyHighlight.owner_id == owner_id,
                WeeklyHighlight.week_start == week_start,
            )
        )
    ).scalar_one_or_none()

    if existing is None:
        session.add(WeeklyHighlight(owner_id=owner_id, week_start=week_start, highlight=text))
    else:
        existing.highlight = text
    await session.commit()

    logger.info("weekly_highlight_saved", owner_id=owner_id, week_start=week_start.isoformat())
    return True
