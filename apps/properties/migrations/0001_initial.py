import django.core.validators
import django.utils.timezone
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Property",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("property_type", models.CharField(choices=[("buy", "Buy"), ("sell", "Sell")], max_length=10)),
                (
                    "area",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("area_unit", models.CharField(choices=[("Bigha", "Bigha"), ("Gaj", "Gaj")], max_length=10)),
                ("partner_name", models.CharField(max_length=100)),
                ("seller_name", models.CharField(blank=True, max_length=100)),
                ("buyer_name", models.CharField(blank=True, max_length=100)),
                (
                    "rate_per_unit",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "total_cost",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "amount_paid",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "amount_pending",
                    models.DecimalField(
                        decimal_places=2,
                        default=0,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                ("transaction_date", models.DateField(default=django.utils.timezone.localdate)),
                ("notes", models.TextField(blank=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name_plural": "properties",
                "ordering": ["-transaction_date", "-id"],
                "indexes": [
                    models.Index(fields=["property_type"], name="properties_type_idx"),
                    models.Index(fields=["transaction_date"], name="properties_date_idx"),
                    models.Index(fields=["partner_name"], name="properties_partner_idx"),
                ],
            },
        ),
    ]
