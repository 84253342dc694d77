"""Subscription plans offered on the platform."""

from dataclasses import dataclass
from datetime import timedelta
from decimal import Decimal
from typing import Literal

PlanType = Literal["monthly", "yearly"]


@dataclass(frozen=True)
class Plan:
    code: PlanType
    label: str
    price: Decimal  # BRL
    duration: timedelta

    @property
    def amount_cents(self) -> int:
        """Price in integer cents, as stored on the subscription row."""
        return int((self.price * 100).to_integral_value())

    @property
    def description(self) -> str:
        """Description shown to the payer by the payment provider."""
        return f"{self.label} subscription - {PLATFORM_NAME}"


PLATFORM_NAME = "Lia Vasconcelos Platform"

PLANS: dict[str, Plan] = {
    "monthly": Plan(
        code="monthly",
        label="Monthly",
        price=Decimal("97.00"),
        duration=timedelta(days=30),
    ),
    "yearly": Plan(
        code="yearly",
        label="Yearly",
        price=Decimal("970.00"),
        duration=timedelta(days=365),
    ),
}


def get_plan(code: str) -> Plan | None:
    """Look up a plan by its code.

    Args:
        code: Plan code, e.g. 'monthly'

    Returns:
        The Plan, or None for an unknown code.
    """
    return PLANS.get(code)
