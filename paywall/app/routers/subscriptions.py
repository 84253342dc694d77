"""Subscription routes: the caller's subscription, Pix checkout, and the payment webhook."""

from typing import Optional

from fastapi import APIRouter, Depends

from paywall.app.auth import require_user
from paywall.app.dependencies import mercadopago_client
from paywall.app.models import CreatePixPaymentRequest, SuccessResponse
from paywall.billing.lifecycle import (
    PaymentNotification,
    PixPayment,
    create_pix_payment,
    handle_payment_notification,
)
from paywall.db.subscriptions import get_latest_subscription
from paywall.integrations.mercadopago import MercadoPagoClient
from paywall.models.subscription import Subscription
from paywall.models.user import User

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])


@router.get("/mine", response_model=Optional[Subscription])
def read_my_subscription(user: User = Depends(require_user)) -> Optional[Subscription]:
    """Get the caller's most recent subscription, or null if they never subscribed.

    `effective_status` reports `expired` for active subscriptions past their expiry.
    """
    return get_latest_subscription(user.id)


@router.post("/pix", response_model=PixPayment)
def start_pix_payment(
    request: CreatePixPaymentRequest,
    user: User = Depends(require_user),
    client: MercadoPagoClient = Depends(mercadopago_client),
) -> PixPayment:
    """Create a Pix payment for a plan and a pending subscription tied to it.

    The subscription becomes active once Mercado Pago reports the payment as
    approved through the webhook.
    """
    return create_pix_payment(user, request.plan_type, client)


@router.post("/webhook", response_model=SuccessResponse)
def payment_webhook(
    notification: PaymentNotification,
    client: MercadoPagoClient = Depends(mercadopago_client),
) -> SuccessResponse:
    """Receive a payment notification from Mercado Pago.

    The pushed payload is never trusted: the payment is re-fetched by ID before
    any subscription changes. Unknown actions are acknowledged and ignored.
    """
    handle_payment_notification(notification, client)
    return SuccessResponse()
