import django.core.validators
import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name="Meel",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("crop_name", models.CharField(max_length=100)),
                ("transaction_type", models.CharField(choices=[("Buy", "Buy"), ("Sell", "Sell")], max_length=10)),
                (
                    "transaction_mode",
                    models.CharField(
                        choices=[("Individual", "Individual"), ("With Partner", "With Partner")],
                        max_length=20,
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
                ("tag", models.CharField(max_length=50)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "created_by",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="meel_records",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at", "-id"],
                "indexes": [
                    models.Index(fields=["crop_name"], name="meel_crop_idx"),
                    models.Index(fields=["transaction_type"], name="meel_type_idx"),
                    models.Index(fields=["transaction_mode"], name="meel_mode_idx"),
                    models.Index(fields=["tag"], name="meel_tag_idx"),
                    models.Index(fields=["created_by", "created_at"], name="meel_owner_created_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="MeelPartner",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                (
                    "mobile",
                    models.CharField(
                        max_length=15,
                        validators=[django.core.validators.MinLengthValidator(10)],
                    ),
                ),
                (
                    "contribution",
                    models.DecimalField(
                        decimal_places=2,
                        max_digits=12,
                        validators=[django.core.validators.MinValueValidator(0)],
                    ),
                ),
                (
                    "meel",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="partners",
                        to="meel.meel",
                    ),
                ),
            ],
            options={
                "ordering": ["id"],
            },
        ),
    ]
