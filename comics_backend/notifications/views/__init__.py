from .admin import (
    ComicNotificationView,
    NotificationJobListView,
    NotificationStatisticsView,
    UserNotificationView,
)

__all__ = [
    "ComicNotificationView",
    "NotificationJobListView",
    "NotificationStatisticsView",
    "UserNotificationView",
]
