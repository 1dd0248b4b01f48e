"""WeeklyHighlight model: one free-text note per (owner, week start)."""

from sqlalchemy import Column, Integer, String, Text, UniqueConstraint

from weekline.db.base import Base, UTCDateTime, utcnow


class WeeklyHighlight(Base):
    __tablename__ = "weekly_highlights"
    __table_args__ = (UniqueConstraint("owner_id", "week_start", name="uq_weekly_highlight_owner_week"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(255), nullable=False, index=True)
    week_start = Column(UTCDateTime, nullable=False)
    highlight = Column(Text, nullable=False)

    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)
