"""Subscription model and its read-time expiry rule."""

from __future__ import annotations
from datetime import datetime, timezone
from typing import Literal

from pydantic import BaseModel, Field, computed_field


SubscriptionStatus = Literal["pending", "active", "expired", "cancelled"]


def _as_utc(value: datetime) -> datetime:
    # Ensure timezone awareness
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Subscription(BaseModel):
    """A (possibly still unpaid) subscription to a plan.

    The stored status never becomes `expired` on its own; an `active` row whose
    `expires_at` has passed is treated as expired when read.
    """

    id: int
    user_id: int
    plan_type: str
    status: SubscriptionStatus
    payment_id: str | None = Field(
        default=None, description="Payment provider transaction ID"
    )
    pix_code: str | None = Field(default=None, description="Copy-paste Pix string")
    pix_qr_code: str | None = Field(
        default=None, description="Base64-encoded Pix QR code image"
    )
    amount: int = Field(description="Price in cents")
    expires_at: datetime | None = None
    created_at: datetime
    updated_at: datetime

    def is_active(self, now: datetime | None = None) -> bool:
        """True if the subscription is paid for and not yet past its expiry."""
        if self.status != "active" or self.expires_at is None:
            return False
        if now is None:
            now = datetime.now(timezone.utc)
        return _as_utc(self.expires_at) > _as_utc(now)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def effective_status(self) -> SubscriptionStatus:
        """The stored status, with lapsed `active` rows reported as `expired`."""
        if self.status == "active" and not self.is_active():
            return "expired"
        return self.status


class NewSubscription(BaseModel):
    """Values for a subscription row about to be inserted."""

    user_id: int
    plan_type: str
    status: SubscriptionStatus = "pending"
    payment_id: str
    pix_code: str | None = None
    pix_qr_code: str | None = None
    amount: int
    expires_at: datetime
