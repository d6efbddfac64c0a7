from django.contrib import admin

from .models import Cultivation, Person


class CultivationInline(admin.TabularInline):
    model = Cultivation
    extra = 0
    fields = ("crop_name", "area", "rate_per_bigha", "total_cost", "amount_received", "amount_pending")
    readonly_fields = ("total_cost", "amount_pending")


@admin.register(Person)
class PersonAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "created_by", "created_at")
    search_fields = ("name", "phone")
    inlines = [CultivationInline]


@admin.register(Cultivation)
class CultivationAdmin(admin.ModelAdmin):
    list_display = (
        "crop_name",
        "person",
        "area",
        "total_cost",
        "amount_received",
        "amount_pending",
        "payment_mode",
        "cultivation_date",
    )
    list_filter = ("payment_mode", "cultivation_date")
    search_fields = ("crop_name", "buyer_name", "paid_to", "person__name")
    readonly_fields = ("total_cost", "amount_pending", "created_at", "updated_at")
