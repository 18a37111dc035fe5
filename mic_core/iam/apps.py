from django.apps import AppConfig


class IamConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "mic_core.iam"

    def ready(self) -> None:
        # import here so app loading doesn’t break tooling
        from mic_core.iam import signals  # noqa: F401
