from decimal import Decimal

from django.conf import settings
from django.core.validators import MinLengthValidator, MinValueValidator
from django.db import models


ZERO = Decimal("0.00")


class Meel(models.Model):
    class TransactionType(models.TextChoices):
        BUY = "Buy", "Buy"
        SELL = "Sell", "Sell"

    class TransactionMode(models.TextChoices):
        INDIVIDUAL = "Individual", "Individual"
        WITH_PARTNER = "With Partner", "With Partner"

    crop_name = models.CharField(max_length=100)
    transaction_type = models.CharField(max_length=10, choices=TransactionType.choices)
    transaction_mode = models.CharField(max_length=20, choices=TransactionMode.choices)
    total_cost = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    tag = models.CharField(max_length=50)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="meel_records",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["crop_name"], name="meel_crop_idx"),
            models.Index(fields=["transaction_type"], name="meel_type_idx"),
            models.Index(fields=["transaction_mode"], name="meel_mode_idx"),
            models.Index(fields=["tag"], name="meel_tag_idx"),
            models.Index(fields=["created_by", "created_at"], name="meel_owner_created_idx"),
        ]

    def __str__(self):
        return f"{self.transaction_type} {self.crop_name} [{self.tag}]"

    @property
    def total_partners(self) -> int:
        return len(self.partners.all())

    @property
    def total_contribution(self) -> Decimal:
        return sum((partner.contribution for partner in self.partners.all()), ZERO)

    @property
    def pending_amount(self) -> Decimal:
        if self.transaction_type == self.TransactionType.BUY:
            return Decimal(self.total_cost) - self.total_contribution
        return ZERO


class MeelPartner(models.Model):
    meel = models.ForeignKey(Meel, on_delete=models.CASCADE, related_name="partners")
    name = models.CharField(max_length=100)
    mobile = models.CharField(max_length=15, validators=[MinLengthValidator(10)])
    contribution = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return f"{self.name} ({self.contribution})"
