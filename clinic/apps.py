from django.apps import AppConfig


class ClinicConfig(AppConfig):
    name = "clinic"
    verbose_name = "Clinic records"

    def ready(self) -> None:
        # Register system checks.
        from clinic import checks  # noqa: F401
