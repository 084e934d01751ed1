# notifications/apps.py

"""
NOTIFICATIONS APP CONFIG

DB-backed email queue:
- NotificationJob rows are enqueued on new comic releases or by admins
- process_notifications (management command) delivers them with retries
"""

from django.apps import AppConfig


class NotificationsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "notifications"
    verbose_name = "Notifications"

    def ready(self):
        from notifications import signals  # noqa: F401
