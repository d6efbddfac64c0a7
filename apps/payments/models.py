from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Payment(models.Model):
    """
    One table for both money flows.

    kind=worker rows carry `worker` and pay wages; kind=cultivation rows carry
    `cultivation` and are receipts counted into the cultivation's amount_received.
    """

    class Kind(models.TextChoices):
        WORKER = "worker", "Worker"
        CULTIVATION = "cultivation", "Cultivation"

    class Mode(models.TextChoices):
        CASH = "cash", "Cash"
        UPI = "UPI", "UPI"
        BANK = "bank", "Bank"

    kind = models.CharField(max_length=20, choices=Kind.choices)
    worker = models.ForeignKey(
        "workers.Worker",
        on_delete=models.CASCADE,
        related_name="payments",
        null=True,
        blank=True,
    )
    cultivation = models.ForeignKey(
        "agriculture.Cultivation",
        on_delete=models.CASCADE,
        related_name="payments",
        null=True,
        blank=True,
    )
    amount = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    date = models.DateField(default=timezone.localdate)
    payment_mode = models.CharField(max_length=10, choices=Mode.choices)
    paid_to = models.CharField(max_length=100, blank=True)
    description = models.CharField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-date", "-id"]
        indexes = [
            models.Index(fields=["kind", "date"], name="payments_kind_date_idx"),
            models.Index(fields=["worker", "date"], name="payments_worker_date_idx"),
            models.Index(fields=["cultivation", "date"], name="payments_cult_date_idx"),
            models.Index(fields=["payment_mode"], name="payments_mode_idx"),
        ]

    def __str__(self):
        return f"{self.kind}:{self.amount} on {self.date}"
