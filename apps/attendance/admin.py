from django.contrib import admin

from .models import Attendance


@admin.register(Attendance)
class AttendanceAdmin(admin.ModelAdmin):
    list_display = ("worker", "date", "status", "working_hours", "created_at")
    list_filter = ("status", "date")
    search_fields = ("worker__name", "notes")
    ordering = ("-date", "-id")
    readonly_fields = ("created_at", "updated_at")
