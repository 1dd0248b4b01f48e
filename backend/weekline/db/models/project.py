"""Project model: named buckets that sessions are logged against."""

from sqlalchemy import Boolean, Column, Integer, String
from sqlalchemy.orm import relationship

from weekline.db.base import Base, UTCDateTime, utcnow


class Project(Base):
    __tablename__ = "projects"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(255), nullable=False, index=True)

    name = Column(String(255), nullable=False)
    color = Column(String(32), nullable=True)  # one of PROJECT_COLOR_KEYS, None = neutral
    is_archived = Column(Boolean, nullable=False, default=False)

    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)

    sessions = relationship("WorkSession", back_populates="project")
