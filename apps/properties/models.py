from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


ZERO = Decimal("0.00")
CENT = Decimal("0.01")


class Property(models.Model):
    class Type(models.TextChoices):
        BUY = "buy", "Buy"
        SELL = "sell", "Sell"

    class AreaUnit(models.TextChoices):
        BIGHA = "Bigha", "Bigha"
        GAJ = "Gaj", "Gaj"

    property_type = models.CharField(max_length=10, choices=Type.choices)
    area = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    area_unit = models.CharField(max_length=10, choices=AreaUnit.choices)
    partner_name = models.CharField(max_length=100)
    seller_name = models.CharField(max_length=100, blank=True)
    buyer_name = models.CharField(max_length=100, blank=True)
    rate_per_unit = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    total_cost = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    amount_paid = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    amount_pending = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
    )
    transaction_date = models.DateField(default=timezone.localdate)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "properties"
        ordering = ["-transaction_date", "-id"]
        indexes = [
            models.Index(fields=["property_type"], name="properties_type_idx"),
            models.Index(fields=["transaction_date"], name="properties_date_idx"),
            models.Index(fields=["partner_name"], name="properties_partner_idx"),
        ]

    def __str__(self):
        return f"{self.property_type} {self.area} {self.area_unit} ({self.partner_name})"

    @property
    def profit(self) -> Decimal:
        if self.property_type == self.Type.SELL:
            return Decimal(self.amount_paid) - Decimal(self.total_cost)
        return ZERO

    def save(self, *args, **kwargs):
        if self.total_cost is None:
            self.total_cost = (Decimal(self.area) * Decimal(self.rate_per_unit)).quantize(CENT)
        self.amount_pending = max(ZERO, Decimal(self.total_cost) - Decimal(self.amount_paid))
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = {*update_fields, "amount_pending"}
        super().save(*args, **kwargs)
