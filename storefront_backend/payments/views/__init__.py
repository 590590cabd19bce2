from .payment_intent import CreatePaymentIntentView, PaymentStatusView
from .webhook import StripeWebhookView

__all__ = [
    "CreatePaymentIntentView",
    "PaymentStatusView",
    "StripeWebhookView",
]
