"""UserSettings model: per-user plan and billing state."""

from sqlalchemy import Boolean, Column, Integer, String

from weekline.db.base import Base, UTCDateTime, utcnow


class UserSettings(Base):
    __tablename__ = "user_settings"

    id = Column(Integer, primary_key=True, autoincrement=True)
    owner_id = Column(String(255), unique=True, nullable=False, index=True)
    email = Column(String(255), nullable=True)

    # Plan
    is_pro = Column(Boolean, nullable=False, default=False)
    plan = Column(String(16), nullable=False, default="FREE")  # FREE | PRO
    pro_expires_at = Column(UTCDateTime, nullable=True)

    # Stripe
    stripe_customer_id = Column(String(255), unique=True, nullable=True, index=True)
    stripe_subscription_id = Column(String(255), nullable=True, index=True)
    stripe_subscription_status = Column(String(50), nullable=True)

    created_at = Column(UTCDateTime, nullable=False, default=utcnow)
    updated_at = Column(UTCDateTime, nullable=False, default=utcnow, onupdate=utcnow)
