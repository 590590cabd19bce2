# products/admin.py
"""
=====================================================
PATH: products/admin.py
=====================================================

Admin rules:

- Catalog rows are edited here (catalog CRUD has no public API).
- Stock is set once on creation. After that an edit never writes the
  stock column; restocking adds units through restore_stock() (F()
  increment), so checkouts that ran while the form was open keep
  their reservations.
"""

from __future__ import annotations

from django import forms
from django.contrib import admin
from django.db import transaction

from products.models import Product
from products.services.inventory import restore_stock


class ProductAdminForm(forms.ModelForm):
    restock_units = forms.IntegerField(
        min_value=0,
        required=False,
        help_text="Units to add to the current stock.",
    )

    class Meta:
        model = Product
        fields = "__all__"


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    form = ProductAdminForm
    list_display = ("name", "slug", "price", "discount_percent", "stock", "is_active", "updated_at")
    list_filter = ("is_active",)
    search_fields = ("name", "slug")
    prepopulated_fields = {"slug": ("name",)}
    readonly_fields = ("id", "created_at", "updated_at")
    ordering = ("name",)

    def get_readonly_fields(self, request, obj=None):
        if obj is None:
            return self.readonly_fields
        return (*self.readonly_fields, "stock")

    def get_fields(self, request, obj=None):
        fields = list(super().get_fields(request, obj))
        if obj is None and "restock_units" in fields:
            fields.remove("restock_units")
        return fields

    @transaction.atomic
    def save_model(self, request, obj, form, change):
        if not change:
            super().save_model(request, obj, form, change)
            return

        obj.save(
            update_fields=[
                f.name
                for f in obj._meta.concrete_fields
                if not f.primary_key and f.name != "stock"
            ]
        )

        restock = form.cleaned_data.get("restock_units") if form is not None else None
        if restock:
            restore_stock(obj.pk, restock)

        obj.refresh_from_db(fields=["stock"])
