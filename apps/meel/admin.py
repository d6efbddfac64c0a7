from django.contrib import admin

from .models import Meel, MeelPartner


class MeelPartnerInline(admin.TabularInline):
    model = MeelPartner
    extra = 0


@admin.register(Meel)
class MeelAdmin(admin.ModelAdmin):
    list_display = ("crop_name", "transaction_type", "transaction_mode", "total_cost", "tag", "created_by", "created_at")
    list_filter = ("transaction_type", "transaction_mode")
    search_fields = ("crop_name", "tag", "partners__name")
    inlines = [MeelPartnerInline]
