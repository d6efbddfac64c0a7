from django.core.validators import MinValueValidator
from django.db import models


class Attendance(models.Model):
    class Status(models.TextChoices):
        PRESENT = "present", "Present"
        ABSENT = "absent", "Absent"
        HALF_DAY = "half_day", "Half day"
        LEAVE = "leave", "Leave"

    worker = models.ForeignKey(
        "workers.Worker",
        on_delete=models.CASCADE,
        related_name="attendance_records",
    )
    date = models.DateField()
    status = models.CharField(max_length=20, choices=Status.choices)
    check_in_time = models.TimeField(null=True, blank=True)
    check_out_time = models.TimeField(null=True, blank=True)
    working_hours = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        validators=[MinValueValidator(0)],
    )
    notes = models.CharField(max_length=500, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        unique_together = ("worker", "date")
        ordering = ["-date", "-id"]
        indexes = [
            models.Index(fields=["worker", "date"], name="attendance_worker_date_idx"),
            models.Index(fields=["date"], name="attendance_date_idx"),
            models.Index(fields=["status"], name="attendance_status_idx"),
        ]

    def __str__(self):
        return f"{self.worker_id} {self.date} {self.status}"
