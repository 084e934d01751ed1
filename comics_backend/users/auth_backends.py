"""
PATH: users/auth_backends.py

Readers sign in with their email; staff created through the admin may still
use their username. Matching is case-insensitive and inactive accounts are
refused.
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.contrib.auth.backends import BaseBackend
from django.db.models import Q

User = get_user_model()


class EmailOrUsernameBackend(BaseBackend):
    def authenticate(self, request, username=None, password=None, **kwargs):
        identifier = (username or kwargs.get("email") or "").strip()
        if not identifier or password is None:
            return None

        match = Q(email__iexact=identifier) if "@" in identifier else Q(username__iexact=identifier)
        user = User.objects.filter(match, is_active=True).first()

        if user is not None and user.check_password(password):
            return user
        return None

    def get_user(self, user_id):
        return User.objects.filter(pk=user_id, is_active=True).first()
