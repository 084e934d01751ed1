# notifications/services/exceptions.py


class NotificationServiceError(Exception):
    """Base error for the notification queue."""


class ComicNotReleasedError(NotificationServiceError):
    """Comic must be visible and published before announcing it."""


class RecipientOptedOutError(NotificationServiceError):
    """Recipient turned off new release emails."""
