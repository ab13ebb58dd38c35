# grading/apps.py

from django.apps import AppConfig


class GradingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "grading"
    verbose_name = "Grading"

    def ready(self):
        """
        Import signal handlers when the app is ready.
        """
        import grading.signals  # noqa: F401
