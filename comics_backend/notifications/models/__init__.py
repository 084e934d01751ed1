# notifications/models/__init__.py

from .announcement import ReleaseAnnouncement
from .job import NotificationJob

__all__ = [
    "NotificationJob",
    "ReleaseAnnouncement",
]
