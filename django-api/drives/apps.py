from django.apps import AppConfig


class DrivesConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "drives"
    verbose_name = "Volunteer drives"

    def ready(self) -> None:
        from drives import signals  # noqa: F401
