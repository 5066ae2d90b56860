from django.apps import AppConfig


class LinetrainerConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "linetrainer"
