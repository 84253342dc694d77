"""Mercado Pago API client for Pix payments."""

import os
import uuid
import logging
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

import httpx
from pydantic import ValidationError

from .models import MercadoPagoPayment, Payer, PixPaymentRequest

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.mercadopago.com"


class PaymentProviderError(Exception):
    """Raised when Mercado Pago is misconfigured, unreachable, or rejects a request."""


@dataclass
class MercadoPagoClient:
    """Client for interacting with the Mercado Pago payments API.

    An empty access token is allowed at construction time so that callers can
    run checks that don't need the provider; any request made without a token
    fails with PaymentProviderError.
    """

    access_token: str
    base_url: str = DEFAULT_BASE_URL

    @classmethod
    def from_env(cls) -> "MercadoPagoClient":
        return cls(
            access_token=os.getenv("MERCADO_PAGO_ACCESS_TOKEN", ""),
            base_url=os.getenv("MERCADO_PAGO_API_URL", DEFAULT_BASE_URL).rstrip("/"),
        )

    @property
    def payments_url(self) -> str:
        return f"{self.base_url}/v1/payments"

    def _auth_headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self.access_token}",
            "Content-Type": "application/json",
        }

    def _make_request(self, method: str, url: str, **kwargs) -> httpx.Response:
        """Make an API request to Mercado Pago, raising on any unsuccessful outcome."""
        if not self.access_token:
            logger.error("MERCADO_PAGO_ACCESS_TOKEN is not set")
            raise PaymentProviderError("Mercado Pago is not configured")

        kwargs.setdefault("timeout", 30)
        headers = {**self._auth_headers(), **kwargs.pop("headers", {})}

        try:
            with httpx.Client() as client:
                response = client.request(method, url, headers=headers, **kwargs)
        except httpx.RequestError as e:
            logger.error(
                f"Mercado Pago request failed for {method} {url}: "
                f"exception_type={type(e).__name__}, error={e}"
            )
            raise PaymentProviderError(f"Mercado Pago unreachable: {e}") from e

        if not response.is_success:
            logger.error(
                f"Mercado Pago API error for {method} {url}: "
                f"{response.status_code} {response.text}"
            )
            raise PaymentProviderError(
                f"Mercado Pago returned status {response.status_code}"
            )

        return response

    def create_pix_payment(
        self,
        amount: Decimal,
        description: str,
        payer_email: str,
        payer_first_name: str,
        idempotency_key: Optional[str] = None,
    ) -> MercadoPagoPayment:
        """Create a Pix payment intent.

        Args:
            amount: Amount to charge, in BRL.
            description: Description shown to the payer.
            payer_email: Payer's email address.
            payer_first_name: Payer's first name.
            idempotency_key: Key that lets Mercado Pago deduplicate retries.
                A fresh UUID is used when omitted.

        Returns:
            The created payment, including the Pix QR payload.
        """
        body = PixPaymentRequest(
            transaction_amount=float(amount),
            description=description,
            payer=Payer(email=payer_email, first_name=payer_first_name),
        )
        key = idempotency_key or str(uuid.uuid4())
        logger.info(f"Creating Pix payment for {amount} BRL (idempotency_key={key})")

        response = self._make_request(
            "POST",
            self.payments_url,
            json=body.model_dump(),
            headers={"X-Idempotency-Key": key},
        )
        payment = _parse_payment(response)
        logger.info(f"Created Pix payment id={payment.id} status={payment.status}")
        return payment

    def get_payment(self, payment_id: str) -> MercadoPagoPayment:
        """Fetch the current state of a payment by ID."""
        logger.debug(f"Fetching Mercado Pago payment {payment_id}")
        response = self._make_request("GET", f"{self.payments_url}/{payment_id}")
        return _parse_payment(response)


def _parse_payment(response: httpx.Response) -> MercadoPagoPayment:
    try:
        return MercadoPagoPayment.model_validate(response.json())
    except (ValueError, ValidationError) as e:
        logger.error(f"Unexpected Mercado Pago payment payload: {response.text}")
        raise PaymentProviderError("Malformed payment payload from Mercado Pago") from e
