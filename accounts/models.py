from django.conf import settings
from django.contrib.auth.models import AbstractUser
from django.core.validators import RegexValidator
from django.db import models
from django.utils import timezone

from .managers import UserManager


telegram_username_validator = RegexValidator(
    regex=r"^[A-Za-z0-9_]{3,32}$",
    message="Telegram username must be 3-32 characters: letters, numbers and underscores.",
)


# ================= User =================
class User(AbstractUser):
    class Role(models.TextChoices):
        ADMIN = "admin", "Admin"
        USER = "user", "User"

    email = models.EmailField("Email", unique=True)
    role = models.CharField("Role", max_length=10, choices=Role.choices, default=Role.USER)
    telegram_username = models.CharField(
        "Telegram username",
        max_length=32,
        unique=True,
        null=True,
        blank=True,
        validators=[telegram_username_validator],
    )

    objects = UserManager()

    class Meta:
        verbose_name = "User"
        verbose_name_plural = "Users"

    @property
    def is_admin_like(self) -> bool:
        return self.is_superuser or self.role == self.Role.ADMIN


# ================= OTP =================
class OTP(models.Model):
    mobile_number = models.CharField("Mobile number", max_length=15)
    code = models.CharField("Code", max_length=6)
    expires_at = models.DateTimeField("Expires at", db_index=True)
    is_used = models.BooleanField("Used", default=False)
    created_at = models.DateTimeField("Created", auto_now_add=True)

    class Meta:
        verbose_name = "One-time code"
        verbose_name_plural = "One-time codes"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["mobile_number", "created_at"], name="accounts_otp_mobile_idx"),
        ]

    def is_expired(self, now=None) -> bool:
        return (now or timezone.now()) >= self.expires_at

    def __str__(self):
        return f"{self.mobile_number}:{'used' if self.is_used else 'open'}"


# ================= Audit =================
class AuditLog(models.Model):
    """
    Primary audit storage backend.
    Use apps.audit.log_event as unified entrypoint for new writes.
    """

    class Level(models.TextChoices):
        INFO = "info", "Info"
        WARNING = "warning", "Warning"
        ERROR = "error", "Error"
        CRITICAL = "critical", "Critical"

    class Category(models.TextChoices):
        AUTH = "auth", "Authentication"
        USER = "user", "User management"
        WORKFORCE = "workforce", "Workers and attendance"
        FINANCE = "finance", "Payments and ledgers"
        BOT = "bot", "Telegram bot"
        SYSTEM = "system", "System"

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        verbose_name="User",
    )

    action = models.CharField("Action", max_length=255)
    object_type = models.CharField("Object type", max_length=100, blank=True)
    object_id = models.CharField("Object ID", max_length=100, blank=True)

    level = models.CharField(
        "Level",
        max_length=20,
        choices=Level.choices,
        default=Level.INFO,
    )

    category = models.CharField(
        "Category",
        max_length=50,
        choices=Category.choices,
        default=Category.SYSTEM,
    )

    ip_address = models.GenericIPAddressField("IP address", null=True, blank=True)
    metadata = models.JSONField("Metadata", default=dict, blank=True)
    created_at = models.DateTimeField("Created", auto_now_add=True)

    class Meta:
        verbose_name = "Audit log"
        verbose_name_plural = "Audit log"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["level"], name="accounts_audit_level_idx"),
            models.Index(fields=["category"], name="accounts_audit_category_idx"),
            models.Index(fields=["created_at"], name="accounts_audit_created_idx"),
            models.Index(fields=["user"], name="accounts_audit_user_idx"),
        ]

    @classmethod
    def log(
        cls,
        action,
        user=None,
        object_type="",
        object_id="",
        level=Level.INFO,
        category=Category.SYSTEM,
        ip_address=None,
        metadata=None,
    ):
        return cls.objects.create(
            user=user,
            action=action,
            object_type=object_type,
            object_id=object_id,
            level=level,
            category=category,
            ip_address=ip_address,
            metadata=metadata or {},
        )

    def __str__(self):
        return f"[{self.level.upper()}] {self.action}"
