"""Subscription lifecycle: pending Pix payment -> active via provider webhook.

A subscription row is created `pending` only after Mercado Pago has accepted
the payment intent, and becomes `active` only after a webhook whose payment,
re-fetched from Mercado Pago, reports `approved`. Nothing here ever writes
`expired` or `cancelled`; expiry is judged at read time from `expires_at`.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict

from paywall.config.plans import get_plan
from paywall.db.connection import get_provider
from paywall.db.subscriptions import (
    activate_subscription_by_payment_id,
    create_subscription,
    get_latest_subscription,
    get_subscription_by_payment_id,
)
from paywall.errors import BadRequest, DatabaseUnavailableError, InternalError
from paywall.integrations.mercadopago import (
    MercadoPagoClient,
    MercadoPagoPayment,
    PaymentProviderError,
)
from paywall.models.subscription import NewSubscription
from paywall.models.user import User

logger = logging.getLogger(__name__)

# Webhook actions that may carry a status change worth re-fetching.
PAYMENT_ACTIONS = frozenset({"payment.updated", "payment.created"})


class PixPayment(BaseModel):
    """What the payer needs to complete a Pix transfer."""

    subscription_id: int
    pix_code: str
    pix_qr_code_base64: str
    amount: float  # BRL
    expires_at: datetime


class NotificationData(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    id: str


class PaymentNotification(BaseModel):
    """Webhook body pushed by Mercado Pago. Only the payment ID is trusted."""

    action: str
    data: NotificationData


def create_pix_payment(
    user: User,
    plan_type: str,
    client: MercadoPagoClient,
    now: Optional[datetime] = None,
) -> PixPayment:
    """Start a subscription: create a Pix payment and store it as pending.

    Args:
        user: The authenticated user subscribing.
        plan_type: Plan code, e.g. 'monthly'.
        client: Mercado Pago client used to create the payment intent.
        now: Creation time; defaults to the current UTC time.

    Returns:
        The Pix payload for the new pending subscription.

    Raises:
        BadRequest: if the user already has an active subscription or the plan is unknown.
        InternalError: if the database or Mercado Pago is unavailable; no payment
            or row is left behind in either case.
    """
    if now is None:
        now = datetime.now(timezone.utc)

    # No database means no pending row, so no payment may be created either.
    if not get_provider().available:
        logger.error(
            f"Refusing Pix checkout for user id={user.id}: database not configured"
        )
        raise DatabaseUnavailableError()

    existing = get_latest_subscription(user.id)
    if existing is not None and existing.is_active(now):
        raise BadRequest("You already have an active subscription")

    plan = get_plan(plan_type)
    if plan is None:
        raise BadRequest(f"Unknown plan '{plan_type}'")

    try:
        payment = client.create_pix_payment(
            amount=plan.price,
            description=plan.description,
            payer_email=user.email or "",
            payer_first_name=user.name or "",
        )
    except PaymentProviderError as e:
        logger.error(f"Could not create Pix payment for user id={user.id}: {e}")
        raise InternalError("Failed to create payment") from e

    try:
        subscription = create_subscription(
            NewSubscription(
                user_id=user.id,
                plan_type=plan.code,
                status="pending",
                payment_id=str(payment.id),
                pix_code=payment.pix_code,
                pix_qr_code=payment.pix_qr_code_base64,
                amount=plan.amount_cents,
                expires_at=now + plan.duration,
            )
        )
    except Exception:
        logger.exception(
            f"Pix payment {payment.id} was created but its subscription row was not "
            f"stored (user id={user.id})"
        )
        raise

    return PixPayment(
        subscription_id=subscription.id,
        pix_code=subscription.pix_code or "",
        pix_qr_code_base64=subscription.pix_qr_code or "",
        amount=float(plan.price),
        expires_at=subscription.expires_at or now + plan.duration,
    )


def confirm_payment(payment_id: str, client: MercadoPagoClient) -> MercadoPagoPayment:
    """Re-fetch a payment from Mercado Pago, the authority on its status.

    Raises:
        InternalError: if Mercado Pago can't be reached or rejects the lookup.
    """
    try:
        payment = client.get_payment(payment_id)
    except PaymentProviderError as e:
        logger.error(f"Could not fetch payment {payment_id}: {e}")
        raise InternalError("Failed to fetch payment") from e
    return payment


def handle_payment_notification(
    notification: PaymentNotification, client: MercadoPagoClient
) -> bool:
    """Process a Mercado Pago webhook.

    Unknown actions are acknowledged without side effects so the provider
    doesn't keep retrying them. Redelivered notifications are harmless.

    Returns:
        True if a subscription was activated by this notification.
    """
    if notification.action not in PAYMENT_ACTIONS:
        logger.debug(f"Ignoring webhook action {notification.action}")
        return False

    if not (notification.data.id.isascii() and notification.data.id.isdigit()):
        raise BadRequest(f"Invalid payment id '{notification.data.id}'")

    payment = confirm_payment(notification.data.id, client)
    logger.info(
        f"Webhook {notification.action} for payment {payment.id}: status={payment.status}"
    )
    if not payment.is_approved:
        return False

    payment_id = str(payment.id)
    activated = activate_subscription_by_payment_id(payment_id)
    if not activated and get_subscription_by_payment_id(payment_id) is None:
        logger.warning(f"Approved payment {payment_id} matches no subscription")
    return activated
