"""Mercado Pago integration for Pix subscription payments."""

from .client import MercadoPagoClient, PaymentProviderError
from .models import MercadoPagoPayment, PointOfInteraction, TransactionData

__all__ = [
    "MercadoPagoClient",
    "PaymentProviderError",
    "MercadoPagoPayment",
    "PointOfInteraction",
    "TransactionData",
]
