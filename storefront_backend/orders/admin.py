# orders/admin.py

"""
Orders are immutable money records: admin is read-only except for
status, which must go through the lifecycle service.
"""

from django.contrib import admin, messages

from core.exceptions import StorefrontError
from orders.models import Order, OrderItem
from orders.services.order_lifecycle import transition_order


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    can_delete = False
    readonly_fields = ("product", "quantity", "price_at_purchase", "line_total", "created_at")

    def has_add_permission(self, request, obj=None):
        return False


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = ("order_no", "user", "status", "total_amount", "paid_at", "created_at")
    list_filter = ("status",)
    search_fields = ("order_no", "user__email", "payment_intent_id")
    inlines = [OrderItemInline]
    actions = ["mark_shipped", "mark_delivered", "mark_cancelled"]

    readonly_fields = (
        "id",
        "order_no",
        "user",
        "status",
        "subtotal_amount",
        "tax_amount",
        "discount_amount",
        "total_amount",
        "payment_intent_id",
        "shipping_address",
        "paid_at",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False

    def _transition(self, request, queryset, target):
        moved = 0
        for order in queryset:
            try:
                transition_order(order.pk, target)
                moved += 1
            except StorefrontError as exc:
                self.message_user(request, f"{order.order_no}: {exc.message}", level=messages.WARNING)
        if moved:
            self.message_user(request, f"{moved} order(s) moved to {target}.")

    @admin.action(description="Mark selected orders as shipped")
    def mark_shipped(self, request, queryset):
        self._transition(request, queryset, Order.STATUS_SHIPPED)

    @admin.action(description="Mark selected orders as delivered")
    def mark_delivered(self, request, queryset):
        self._transition(request, queryset, Order.STATUS_DELIVERED)

    @admin.action(description="Cancel selected orders (releases stock)")
    def mark_cancelled(self, request, queryset):
        self._transition(request, queryset, Order.STATUS_CANCELLED)
