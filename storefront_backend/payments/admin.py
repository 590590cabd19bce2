# payments/admin.py

from django.contrib import admin

from payments.models import WebhookEvent


@admin.register(WebhookEvent)
class WebhookEventAdmin(admin.ModelAdmin):
    list_display = ("event_id", "event_type", "outcome", "order", "received_at")
    list_filter = ("event_type", "outcome")
    search_fields = ("event_id", "payment_intent_id", "order__order_no")
    readonly_fields = (
        "event_id",
        "event_type",
        "payment_intent_id",
        "order",
        "outcome",
        "payload",
        "received_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
