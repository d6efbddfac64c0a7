import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ("workers", "0001_initial"),
        ("agriculture", "0001_initial"),
    ]

    operations = [
        migrations.CreateModel(
            name="Payment",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "kind",
                    models.CharField(choices=[("worker", "Worker"), ("cultivation", "Cultivation")], max_length=20),
                ),
                (
                    "amount",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("date", models.DateField(default=django.utils.timezone.localdate)),
                (
                    "payment_mode",
                    models.CharField(choices=[("cash", "Cash"), ("UPI", "UPI"), ("bank", "Bank")], max_length=10),
                ),
                ("paid_to", models.CharField(blank=True, max_length=100)),
                ("description", models.CharField(blank=True, max_length=500)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "worker",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payments",
                        to="workers.worker",
                    ),
                ),
                (
                    "cultivation",
                    models.ForeignKey(
                        blank=True,
                        null=True,
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="payments",
                        to="agriculture.cultivation",
                    ),
                ),
            ],
            options={
                "ordering": ["-date", "-id"],
                "indexes": [
                    models.Index(fields=["kind", "date"], name="payments_kind_date_idx"),
                    models.Index(fields=["worker", "date"], name="payments_worker_date_idx"),
                    models.Index(fields=["cultivation", "date"], name="payments_cult_date_idx"),
                    models.Index(fields=["payment_mode"], name="payments_mode_idx"),
                ],
            },
        ),
    ]
