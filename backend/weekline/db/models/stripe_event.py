"""StripeWebhookEvent model for idempotency tracking."""

from sqlalchemy import Column, String

from weekline.db.base import Base, UTCDateTime, utcnow


class StripeWebhookEvent(Base):
    """Tracks processed Stripe webhook event IDs to prevent duplicate processing."""

    __tablename__ = "stripe_webhook_events"

    event_id = Column(String(255), primary_key=True)
    processed_at = Column(UTCDateTime, nullable=False, default=utcnow)
