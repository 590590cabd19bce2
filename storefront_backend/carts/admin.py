# carts/admin.py

from django.contrib import admin

from carts.models import Cart, CartItem


class CartItemInline(admin.TabularInline):
    model = CartItem
    extra = 0
    autocomplete_fields = ("product",)
    readonly_fields = ("created_at", "updated_at")


@admin.register(Cart)
class CartAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "item_count", "updated_at")
    search_fields = ("user__email",)
    readonly_fields = ("id", "created_at", "updated_at")
    inlines = [CartItemInline]
