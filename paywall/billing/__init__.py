from .lifecycle import (
    PixPayment,
    PaymentNotification,
    create_pix_payment,
    confirm_payment,
    handle_payment_notification,
)

__all__ = [
    "PixPayment",
    "PaymentNotification",
    "create_pix_payment",
    "confirm_payment",
    "handle_payment_notification",
]
