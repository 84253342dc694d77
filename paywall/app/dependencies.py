from paywall.integrations.mercadopago import MercadoPagoClient


def mercadopago_client() -> MercadoPagoClient:
    """Build a Mercado Pago client from the environment.

    Construction never fails; a missing access token only surfaces as a
    PaymentProviderError once a request actually reaches the provider.
    """
    return MercadoPagoClient.from_env()
