from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("kind", "amount", "date", "payment_mode", "worker", "cultivation", "paid_to")
    list_filter = ("kind", "payment_mode", "date")
    search_fields = ("paid_to", "description", "worker__name", "cultivation__crop_name")
    ordering = ("-date", "-id")
    readonly_fields = ("created_at", "updated_at")
