"""Database operations for subscriptions."""

import logging
from typing import Optional

from paywall.models.subscription import NewSubscription, Subscription
from .connection import get_db_cursor, degrade_when_unavailable

logger = logging.getLogger(__name__)

SUBSCRIPTION_COLUMNS = """
    id, user_id, plan_type, status, payment_id, pix_code, pix_qr_code,
    amount, expires_at, created_at, updated_at
"""


@degrade_when_unavailable(None)
def get_latest_subscription(user_id: int) -> Optional[Subscription]:
    """Get the most recently created subscription for a user.

    Only the latest row decides access; older rows are history.
    """
    with get_db_cursor() as cursor:
        cursor.execute(
            f"""
            SELECT {SUBSCRIPTION_COLUMNS}
            FROM subscriptions
            WHERE user_id = %s
            ORDER BY created_at DESC, id DESC
            LIMIT 1
            """,
            (user_id,),
        )
        row = cursor.fetchone()
        return _row_to_subscription(row) if row else None


@degrade_when_unavailable(None)
def get_subscription_by_payment_id(payment_id: str) -> Optional[Subscription]:
    """Get the subscription tied to a payment provider transaction."""
    with get_db_cursor() as cursor:
        cursor.execute(
            f"""
            SELECT {SUBSCRIPTION_COLUMNS}
            FROM subscriptions
            WHERE payment_id = %s
            """,
            (payment_id,),
        )
        row = cursor.fetchone()
        return _row_to_subscription(row) if row else None


@degrade_when_unavailable([])
def get_all_subscriptions() -> list[Subscription]:
    """Get every subscription, newest first."""
    with get_db_cursor() as cursor:
        cursor.execute(
            f"""
            SELECT {SUBSCRIPTION_COLUMNS}
            FROM subscriptions
            ORDER BY created_at DESC, id DESC
            """
        )
        rows = cursor.fetchall()
        return [_row_to_subscription(row) for row in rows]


def create_subscription(subscription: NewSubscription) -> Subscription:
    """Insert a subscription row and return it as stored."""
    with get_db_cursor() as cursor:
        cursor.execute(
            f"""
            INSERT INTO subscriptions (
                user_id, plan_type, status, payment_id, pix_code, pix_qr_code,
                amount, expires_at
            )
            VALUES (%s, %s, %s, %s, %s, %s, %s, %s)
            RETURNING {SUBSCRIPTION_COLUMNS}
            """,
            (
                subscription.user_id,
                subscription.plan_type,
                subscription.status,
                subscription.payment_id,
                subscription.pix_code,
                subscription.pix_qr_code,
                subscription.amount,
                subscription.expires_at,
            ),
        )
        row = cursor.fetchone()
        created = _row_to_subscription(row)
        logger.info(
            f"Created {created.status} subscription id={created.id} "
            f"for user id={created.user_id} (payment_id={created.payment_id})"
        )
        return created


def activate_subscription_by_payment_id(payment_id: str) -> bool:
    """Flip the pending subscription for a payment to active.

    Rows that are already active (a redelivered webhook) are left untouched.

    Returns:
        True if a row changed, False if there was nothing pending for the payment.
    """
    with get_db_cursor() as cursor:
        cursor.execute(
            """
            UPDATE subscriptions
            SET status = 'active'
            WHERE payment_id = %s AND status = 'pending'
            """,
            (payment_id,),
        )
        activated = cursor.rowcount > 0

    if activated:
        logger.info(f"Activated subscription for payment_id={payment_id}")
    else:
        logger.info(f"No pending subscription to activate for payment_id={payment_id}")
    return activated


def _row_to_subscription(row) -> Subscription:
    """Convert a database row to a Subscription object."""
    (
        id,
        user_id,
        plan_type,
        status,
        payment_id,
        pix_code,
        pix_qr_code,
        amount,
        expires_at,
        created_at,
        updated_at,
    ) = row
    return Subscription(
        id=id,
        user_id=user_id,
        plan_type=plan_type,
        status=status,
        payment_id=payment_id,
        pix_code=pix_code,
        pix_qr_code=pix_qr_code,
        amount=amount,
        expires_at=expires_at,
        created_at=created_at,
        updated_at=updated_at,
    )
