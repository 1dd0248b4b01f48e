"""WorkSession model: one logged block of focused work.

``duration_ms`` is authoritative for display and aggregation; ``start_time`` is
derived from ``end_time - duration_ms`` whenever a session is created or edited.
"""

from sqlalchemy import BigInteger, Column, ForeignKey, Index, Integer, String, Text
from sqlalchemy.orm import relationship

from weekline.db.base import Base, UTCDateTime, utcnow


class WorkSession(Base):
    __tablename__ = "sessions"
    __table_args__ = (Index("ix_sessions_owner_start", "owner_id", "start_time"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(255), nullable=False, index=True)
    project_id = Column(Integer, ForeignKey("projects.id"), nullable=False, index=True)

    intention = Column(String(500), nullable=False)
    notes = Column(Text, nullable=True)

    start_time = Column(UTCDateTime, nullable=False)
    end_time = Column(UTCDateTime, nullable=False)
    duration_ms = Column(BigInteger, nullable=False, default=0)

    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    project = relationship("Project", back_populates="sessions")
