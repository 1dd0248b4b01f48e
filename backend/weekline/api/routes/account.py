"""Account routes: identity, plan status and the settings overview."""

from datetime import datetime

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from weekline.core.auth import CurrentUser, optional_auth, require_auth
from weekline.db.base import get_session_factory
from weekline.schemas.week import AccountOverviewResponse
from weekline.services.user_settings import get_or_create_user_settings, get_user_pro_status
from weekline.services.week_service import WeekReportService

router = APIRouter()


class MeResponse(BaseModel):
    user_id: str
    email: str | None
    is_pro: bool
    plan: str
    pro_expires_at: datetime | None = None


class SubscriptionStatusResponse(BaseModel):
    is_pro: bool
    plan: str


@router.get("/me", response_model=MeResponse)
async def get_me(user: CurrentUser = Depends(require_auth)):
    """Return the caller, provisioning their settings row on first sign-in."""
    async with get_session_factory()() as session:
        settings = await get_or_create_user_settings(session, user.user_id, user.email)
        return MeResponse(
            user_id=user.user_id,
            email=settings.email,
            is_pro=settings.is_pro,
            plan=settings.plan,
            pro_expires_at=settings.pro_expires_at,
        )


@router.get("/subscription/status", response_model=SubscriptionStatusResponse)
async def get_subscription_status(user: CurrentUser | None = Depends(optional_auth)):
    """Plan for the caller; anonymous callers are reported as FREE."""
    async with get_session_factory()() as session:
        status = await get_user_pro_status(session, user.user_id if user else None)
    return SubscriptionStatusResponse(is_pro=status.is_pro, plan=status.plan)


@router.get("/settings/overview", response_model=AccountOverviewResponse)
async def get_settings_overview(user: CurrentUser = Depends(require_auth)):
    async with get_session_factory()() as session:
        return await WeekReportService().account_overview(session, user.user_id, user.email)
