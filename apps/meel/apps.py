from django.apps import AppConfig


class MeelConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.meel"
    verbose_name = "Meel ledger"
