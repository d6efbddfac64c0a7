from django.contrib import admin

from .models import Property


@admin.register(Property)
class PropertyAdmin(admin.ModelAdmin):
    list_display = (
        "property_type",
        "partner_name",
        "area",
        "area_unit",
        "total_cost",
        "amount_paid",
        "amount_pending",
        "transaction_date",
    )
    list_filter = ("property_type", "area_unit", "transaction_date")
    search_fields = ("partner_name", "seller_name", "buyer_name")
    readonly_fields = ("amount_pending", "created_at", "updated_at")
