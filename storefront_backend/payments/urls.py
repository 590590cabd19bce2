"""
PATH: payments/urls.py
"""

from django.urls import path

from payments.views import CreatePaymentIntentView, PaymentStatusView, StripeWebhookView

app_name = "payments"

urlpatterns = [
    path("create-payment-intent/", CreatePaymentIntentView.as_view(), name="create-payment-intent"),
    path("webhook/", StripeWebhookView.as_view(), name="webhook"),
    path("status/<uuid:order_id>/", PaymentStatusView.as_view(), name="payment-status"),
]
