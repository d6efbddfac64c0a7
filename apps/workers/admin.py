from django.contrib import admin

from .models import Worker


@admin.register(Worker)
class WorkerAdmin(admin.ModelAdmin):
    list_display = ("name", "phone", "salary", "joining_date", "is_active", "total_working_days")
    list_filter = ("is_active",)
    search_fields = ("name", "phone")
    readonly_fields = ("total_working_days", "created_at", "updated_at")
