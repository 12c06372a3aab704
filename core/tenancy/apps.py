from django.apps import AppConfig


class TenancyConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "core.tenancy"

    def ready(self):
        # register signals
        from . import signals  # noqa: F401
