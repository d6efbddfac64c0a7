from django.core.validators import MinValueValidator
from django.db import models
from django.utils import timezone


class Worker(models.Model):
    name = models.CharField(max_length=100)
    phone = models.CharField(max_length=20)
    address = models.CharField(max_length=255, blank=True)
    joining_date = models.DateField(default=timezone.localdate)
    salary = models.DecimalField(max_digits=12, decimal_places=2, validators=[MinValueValidator(0)])
    is_active = models.BooleanField(default=True)
    notes = models.TextField(blank=True)
    total_working_days = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]
        indexes = [
            models.Index(fields=["name"], name="workers_name_idx"),
            models.Index(fields=["is_active"], name="workers_active_idx"),
        ]

    def __str__(self):
        return f"{self.name} ({self.phone})"
