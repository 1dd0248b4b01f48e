"""Re-export all models so Base.metadata sees them."""

from weekline.db.models.project import Project
from weekline.db.models.stripe_event import StripeWebhookEvent
from weekline.db.models.user_settings import UserSettings
from weekline.db.models.weekly_highlight import WeeklyHighlight
from weekline.db.models.work_session import WorkSession

__all__ = [
    "Project",
    "StripeWebhookEvent",
    "UserSettings",
    "WeeklyHighlight",
    "WorkSession",
]
