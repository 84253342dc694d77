"""Pydantic models for Mercado Pago API payloads."""

from __future__ import annotations
from typing import Optional

from pydantic import BaseModel


# Statuses as documented by Mercado Pago for /v1/payments
APPROVED = "approved"


class TransactionData(BaseModel):
    """Pix details for a payment awaiting transfer."""

    qr_code: Optional[str] = None  # Copy-paste Pix string
    qr_code_base64: Optional[str] = None  # PNG, base64-encoded
    ticket_url: Optional[str] = None


class PointOfInteraction(BaseModel):
    type: Optional[str] = None
    transaction_data: Optional[TransactionData] = None


class MercadoPagoPayment(BaseModel):
    """A payment as returned by POST /v1/payments and GET /v1/payments/{id}.

    Mercado Pago returns many more fields; only the ones used here are parsed.
    """

    id: int
    status: str
    status_detail: Optional[str] = None
    transaction_amount: Optional[float] = None
    point_of_interaction: Optional[PointOfInteraction] = None

    @property
    def is_approved(self) -> bool:
        return self.status == APPROVED

    def _transaction_data(self) -> TransactionData:
        if self.point_of_interaction and self.point_of_interaction.transaction_data:
            return self.point_of_interaction.transaction_data
        return TransactionData()

    @property
    def pix_code(self) -> str:
        return self._transaction_data().qr_code or ""

    @property
    def pix_qr_code_base64(self) -> str:
        return self._transaction_data().qr_code_base64 or ""


class Payer(BaseModel):
    email: str
    first_name: str


class PixPaymentRequest(BaseModel):
    """Body for creating a Pix payment."""

    transaction_amount: float
    description: str
    payment_method_id: str = "pix"
    payer: Payer
