"""Billing routes: Stripe Checkout, Customer Portal, webhooks.

A single Pro subscription price is sold. Webhooks are the only writer of
plan state; ``is_pro`` follows the subscription status (active or trialing).
"""

from datetime import UTC, datetime

import stripe
import structlog
from fastapi import APIRouter, Depends, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError

from weekline.core.auth import CurrentUser, require_auth
from weekline.core.config import get_settings
from weekline.core.exceptions import BillingNotConfiguredError
from weekline.db.base import get_session_factory
from weekline.db.models.stripe_event import StripeWebhookEvent
from weekline.db.models.user_settings import UserSettings
from weekline.domain.history import PLAN_FREE, PLAN_PRO, subscription_is_active
from weekline.services.user_settings import get_or_create_user_settings

logger = structlog.get_logger(__name__)

router = APIRouter()


# ── Request / Response schemas ──────────────────────────────────────


class CheckoutResponse(BaseModel):
    url: str


class PortalResponse(BaseModel):
    url: str


# ── Helpers ─────────────────────────────────────────────────────────


def _get_stripe() -> None:
    """Configure the stripe module with the secret key."""
    settings = get_settings()
    if not settings.stripe_secret_key:
        raise BillingNotConfiguredError("stripe_secret_key")
    stripe.api_key = settings.stripe_secret_key


def get_pro_price_id() -> str:
    price_id = get_settings().stripe_price_pro_monthly
    if not price_id:
        raise BillingNotConfiguredError("stripe_price_pro_monthly")
    return price_id


def _unix_to_datetime(value) -> datetime | None:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return datetime.fromtimestamp(value, tz=UTC)
    return None


def _read_current_period_end(obj) -> datetime | None:
    """Period end from a subscription; newer API versions moved it onto the items."""
    period_end = obj.get("current_period_end")
    if period_end is None:
        items = (obj.get("items") or {}).get("data") or []
        if items:
            period_end = items[0].get("current_period_end")
    return _unix_to_datetime(period_end)


def _not_configured(exc: BillingNotConfiguredError) -> JSONResponse:
    logger.error("billing_not_configured", setting=exc.setting)
    return JSONResponse(status_code=500, content={"detail": str(exc)})


async def _get_or_create_stripe_customer(user: CurrentUser) -> str:
    """Return the Stripe customer ID, creating one if needed."""
    factory = get_session_factory()
    async with factory() as session:
        user_settings = await get_or_create_user_settings(session, user.user_id, user.email)
        if user_settings.stripe_customer_id:
            return user_settings.stripe_customer_id

    customer = await stripe.Customer.create_async(
        email=user.email,
        metadata={"owner_id": user.user_id},
    )

    async with factory() as session:
        try:
            result = await session.execute(select(UserSettings).where(UserSettings.owner_id == user.user_id))
            us = result.scalar_one()
            us.stripe_customer_id = customer.id
            await session.commit()
        except IntegrityError:
            # Concurrent request already stored a customer; use theirs
            await session.rollback()
            result = await session.execute(select(UserSettings).where(UserSettings.owner_id == user.user_id))
            return result.scalar_one().stripe_customer_id

    logger.info("stripe_customer_created", owner_id=user.user_id)
    return customer.id


async def _claim_event(event_id: str) -> bool:
    """Return True if event is new (claimed). False if duplicate."""
    factory = get_session_factory()
    async with factory() as session:
        try:
            session.add(StripeWebhookEvent(event_id=event_id))
            await session.commit()
            return True
        except IntegrityError:
            await session.rollback()
            return False


async def _release_event(event_id: str) -> None:
    """Forget a claimed event so Stripe's retry is processed."""
    async with get_session_factory()() as session:
        await session.execute(delete(StripeWebhookEvent).where(StripeWebhookEvent.event_id == event_id))
        await session.commit()


# ── Endpoints ───────────────────────────────────────────────────────


@router.post("/stripe/create-checkout-session", response_model=CheckoutResponse)
async def create_checkout_session(user: CurrentUser = Depends(require_auth)):
    """Create a Stripe Checkout session for the Pro plan and return its URL."""
    try:
        _get_stripe()
        price_id = get_pro_price_id()
    except BillingNotConfiguredError as e:
        return _not_configured(e)

    customer_id = await _get_or_create_stripe_customer(user)
    settings = get_settings()

    checkout_session = await stripe.checkout.Session.create_async(
        mode="subscription",
        customer=customer_id,
        line_items=[{"price": price_id, "quantity": 1}],
        success_url=f"{settings.frontend_url}/settings?billing=success",
        cancel_url=f"{settings.frontend_url}/settings?billing=cancel",
        metadata={"owner_id": user.user_id},
    )

    logger.info("checkout_session_created", owner_id=user.user_id)
    return CheckoutResponse(url=checkout_session.url)


@router.post("/stripe/create-portal-session", response_model=PortalResponse)
async def create_portal_session(user: CurrentUser = Depends(require_auth)):
    """Create a Stripe Customer Portal session and return its URL."""
    try:
        _get_stripe()
    except BillingNotConfiguredError as e:
        return _not_configured(e)

    async with get_session_factory()() as session:
        result = await session.execute(select(UserSettings).where(UserSettings.owner_id == user.user_id))
        user_settings = result.scalar_one_or_none()

    if user_settings is None or not user_settings.stripe_customer_id:
        raise HTTPException(status_code=400, detail="No Stripe customer")

    portal_session = await stripe.billing_portal.Session.create_async(
        customer=user_settings.stripe_customer_id,
        return_url=f"{get_settings().frontend_url}/settings",
    )
    return PortalResponse(url=portal_session.url)


@router.post("/stripe/webhook")
async def stripe_webhook(request: Request):
    """Handle Stripe webhook events with signature verification.

    Each event id is processed at most once. A handler failure releases the
    claim and answers 500 so Stripe retries.
    """
    settings = get_settings()
    if not settings.stripe_webhook_secret:
        logger.error("stripe_webhook_secret_missing")
        raise HTTPException(status_code=503, detail="Stripe webhook endpoint is not configured")

    body = await request.body()
    sig_header = request.headers.get("stripe-signature")

    if not sig_header:
        raise HTTPException(status_code=400, detail="Missing stripe-signature header")

    try:
        event = stripe.Webhook.construct_event(body, sig_header, settings.stripe_webhook_secret)
    except ValueError:
        logger.warning("stripe_webhook_payload_invalid")
        raise HTTPException(status_code=400, detail="Invalid payload")
    except stripe.SignatureVerificationError:
        logger.warning("stripe_webhook_signature_invalid")
        raise HTTPException(status_code=400, detail="Invalid signature")

    event_id = event["id"]
    if not await _claim_event(event_id):
        logger.info("stripe_duplicate_event_ignored", event_id=event_id)
        return {"status": "ok"}

    event_type = event["type"]
    data = event["data"]["object"]

    logger.info("stripe_webhook_received", event_type=event_type, event_id=event_id)

    try:
        if event_type == "checkout.session.completed":
            await _handle_checkout_completed(data)
        elif event_type in ("customer.subscription.updated", "customer.subscription.deleted"):
            await _handle_subscription_changed(data)
    except Exception as e:
        logger.error(
            "stripe_webhook_handler_failed",
            event_type=event_type,
            event_id=event_id,
            error=str(e),
            error_type=type(e).__name__,
            exc_info=True,
        )
        await _release_event(event_id)
        return JSONResponse(status_code=500, content={"detail": "Webhook handler failed"})

    return {"status": "ok"}


# ── Webhook handlers ────────────────────────────────────────────────


async def _handle_checkout_completed(session_data) -> None:
    """Record the customer and subscription and grant Pro if it is active."""
    metadata = session_data.get("metadata") or {}
    owner_id = metadata.get("owner_id")
    subscription_id = session_data.get("subscription")
    customer_id = session_data.get("customer")
    customer_email = (session_data.get("customer_details") or {}).get("email")

    if not owner_id or not subscription_id or not customer_id:
        # no owner to credit; logged for manual reconciliation
        logger.warning(
            "checkout_completed_missing_fields",
            checkout_session_id=session_data.get("id"),
            customer_id=customer_id,
            customer_email=customer_email,
        )
        return

    _get_stripe()
    subscription = await stripe.Subscription.retrieve_async(subscription_id)
    status = subscription.get("status") or "active"
    is_active = subscription_is_active(status)
    period_end = _read_current_period_end(subscription) or datetime.now(UTC)

    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(select(UserSettings).where(UserSettings.owner_id == owner_id))
        user_settings = result.scalar_one_or_none()
        if user_settings is None:
            user_settings = UserSettings(owner_id=owner_id, email=customer_email)
            session.add(user_settings)

        user_settings.stripe_customer_id = customer_id
        user_settings.stripe_subscription_id = subscription_id
        user_settings.stripe_subscription_status = status
        user_settings.is_pro = is_active
        user_settings.plan = PLAN_PRO if is_active else PLAN_FREE
        user_settings.pro_expires_at = period_end
        await session.commit()

    logger.info("checkout_completed", owner_id=owner_id, status=status, is_pro=is_active)


async def _handle_subscription_changed(subscription) -> None:
    """Sync plan state from an updated or deleted subscription."""
    subscription_id = subscription.get("id")
    status = subscription.get("status")

    if not subscription_id:
        return

    factory = get_session_factory()
    async with factory() as session:
        result = await session.execute(
            select(UserSettings).where(UserSettings.stripe_subscription_id == subscription_id)
        )
        user_settings = result.scalar_one_or_none()
        if user_settings is None:
            logger.warning("subscription_changed_unknown_subscription", subscription_id=subscription_id)
            return

        is_active = subscription_is_active(status)
        user_settings.stripe_subscription_status = status
        user_settings.is_pro = is_active
        user_settings.plan = PLAN_PRO if is_active else PLAN_FREE
        user_settings.pro_expires_at = _read_current_period_end(subscription) if is_active else None
        await session.commit()

        logger.info(
            "subscription_status_updated",
            owner_id=user_settings.owner_id,
            status=status,
            is_pro=is_active,
        )
