from django.apps import AppConfig


class AgricultureConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.agriculture"
    verbose_name = "Agriculture"
