# users/authentication.py

"""
JWT authentication that also records activity.

Every authenticated API request refreshes User.last_seen_at, at most once
per LAST_SEEN_UPDATE_INTERVAL_SECONDS, so realtime "online" metrics cover
token users who never log in again.
"""

from __future__ import annotations

from datetime import timedelta

from django.conf import settings
from rest_framework_simplejwt.authentication import JWTAuthentication


def _touch_interval() -> timedelta:
    return timedelta(seconds=int(getattr(settings, "LAST_SEEN_UPDATE_INTERVAL_SECONDS", 300)))


class ActivityJWTAuthentication(JWTAuthentication):
    def authenticate(self, request):
        result = super().authenticate(request)
        if result is not None:
            user, _token = result
            user.touch_last_seen(min_interval=_touch_interval())
        return result
