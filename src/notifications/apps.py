"""Notifications app configuration."""

from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    """Configuration for the notifications app."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "notifications"
    verbose_name = "Notifications"

    def ready(self) -> None:
        """Import template modules so they register themselves."""
        import notifications.service.templates.event_templates  # noqa: F401
        import notifications.service.templates.registration_templates  # noqa: F401
        import notifications.service.templates.subscription_templates  # noqa: F401
