from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as DjangoUserAdmin

from .models import OTP, AuditLog, User


@admin.register(User)
class UserAdmin(DjangoUserAdmin):
    list_display = (
        "username",
        "email",
        "role",
        "telegram_username",
        "is_active",
        "is_staff",
    )
    list_filter = (
        "role",
        "is_active",
        "is_staff",
    )
    search_fields = (
        "username",
        "first_name",
        "last_name",
        "email",
        "telegram_username",
    )
    ordering = ("id",)
    fieldsets = DjangoUserAdmin.fieldsets + (
        ("PayTrack", {"fields": ("role", "telegram_username")}),
    )
    add_fieldsets = DjangoUserAdmin.add_fieldsets + (
        ("PayTrack", {"fields": ("email", "role", "telegram_username")}),
    )


@admin.register(OTP)
class OTPAdmin(admin.ModelAdmin):
    list_display = ("mobile_number", "is_used", "expires_at", "created_at")
    list_filter = ("is_used",)
    search_fields = ("mobile_number",)
    readonly_fields = ("code", "created_at")


@admin.register(AuditLog)
class AuditLogAdmin(admin.ModelAdmin):
    list_display = ("created_at", "action", "level", "category", "user", "object_type", "object_id", "ip_address")
    list_filter = ("level", "category")
    search_fields = ("action", "object_type", "object_id", "user__username")
    readonly_fields = [field.name for field in AuditLog._meta.fields]

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False
