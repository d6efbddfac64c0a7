from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


ZERO = Decimal("0.00")
CENT = Decimal("0.01")


class Person(models.Model):
    name = models.CharField(max_length=100)
    phone = models.CharField(max_length=15, blank=True)
    address = models.CharField(max_length=500, blank=True)
    notes = models.TextField(max_length=1000, blank=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="persons",
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name", "id"]
        indexes = [
            models.Index(fields=["name"], name="agri_person_name_idx"),
            models.Index(fields=["created_by"], name="agri_person_owner_idx"),
        ]

    def __str__(self):
        return self.name


class Cultivation(models.Model):
    class PaymentMode(models.TextChoices):
        CASH = "cash", "Cash"
        UPI = "UPI", "UPI"

    person = models.ForeignKey(
        Person,
        on_delete=models.CASCADE,
        related_name="cultivations",
        null=True,
        blank=True,
    )
    crop_name = models.CharField(max_length=100)
    area = models.DecimalField(max_digits=10, decimal_places=2, validators=[MinValueValidator(0)])
    rate_per_bigha = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    total_cost = models.DecimalField(max_digits=12, decimal_places=2, default=0, validators=[MinValueValidator(0)])
    paid_to = models.CharField(max_length=100, blank=True)
    buyer_name = models.CharField(max_length=100, blank=True)
    amount_received = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
    )
    amount_pending = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=0,
        validators=[MinValueValidator(0)],
    )
    payment_mode = models.CharField(max_length=10, choices=PaymentMode.choices)
    cultivation_date = models.DateField(default=timezone.localdate)
    harvest_date = models.DateField(null=True, blank=True)
    notes = models.TextField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-cultivation_date", "-id"]
        indexes = [
            models.Index(fields=["person"], name="agri_cult_person_idx"),
            models.Index(fields=["crop_name"], name="agri_cult_crop_idx"),
            models.Index(fields=["cultivation_date"], name="agri_cult_date_idx"),
            models.Index(fields=["payment_mode"], name="agri_cult_mode_idx"),
        ]

    def __str__(self):
        return f"{self.crop_name} ({self.area} Bigha)"

    @property
    def profit(self) -> Decimal:
        return Decimal(self.amount_received) - Decimal(self.total_cost)

    def recompute_totals(self) -> None:
        self.total_cost = (Decimal(self.area) * Decimal(self.rate_per_bigha)).quantize(CENT)
        self.amount_pending = max(ZERO, self.total_cost - Decimal(self.amount_received))

    def save(self, *args, **kwargs):
        self.recompute_totals()
        update_fields = kwargs.get("update_fields")
        if update_fields is not None:
            kwargs["update_fields"] = {*update_fields, "total_cost", "amount_pending"}
        super().save(*args, **kwargs)
