from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "modules.notifications"
    label = "notifications"

    def ready(self) -> None:
        from modules.notifications.handlers import status_entered_handler
        from modules.orders.events import StatusEntered
        from shared.infrastructure.bus import event_bus

        event_bus.subscribe(StatusEntered, status_entered_handler)
