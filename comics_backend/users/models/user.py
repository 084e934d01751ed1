"""
PATH: users/models/user.py

CUSTOM USER MODEL

Identity:
- Email is the login identifier (USERNAME_FIELD).
- username is derived from the email local part when not supplied (unique).
- name is the display name shown on comments and reviews.

Subscription state:
- subscription_type / subscription_status / subscription_expires_at are written
  by the payments app when a subscription payment succeeds or is refunded.
"""

from __future__ import annotations

import uuid
from datetime import timedelta

from django.contrib.auth.models import AbstractBaseUser, BaseUserManager, PermissionsMixin
from django.core.exceptions import ValidationError
from django.db import models
from django.utils import timezone


# ---------------- USER MANAGER ----------------
class UserManager(BaseUserManager):
    def _unique_username(self, base: str) -> str:
        base = (base or "reader").strip().lower()
        candidate = base
        i = 1
        while self.model.objects.filter(username__iexact=candidate).exists():
            i += 1
            candidate = f"{base}{i}"
        return candidate

    def create_user(self, email=None, password=None, **extra_fields):
        """
        Rules:
        - email is required.
        - username is derived from the email local part when missing.
        - name defaults to the username.
        """
        email = (email or extra_fields.pop("email", "") or "").strip()
        if not email:
            raise ValueError("Users must have an email address")

        email = self.normalize_email(email)

        username = (extra_fields.get("username") or "").strip()
        if not username:
            username = self._unique_username(email.split("@")[0])

        extra_fields["username"] = username
        extra_fields.setdefault("name", username)
        extra_fields.setdefault("is_active", True)

        user = self.model(email=email, **extra_fields)

        if password:
            user.set_password(password)
        else:
            user.set_unusable_password()

        user.full_clean(exclude=["password"])
        user.save(using=self._db)
        return user

    def create_superuser(self, email, password=None, **extra_fields):
        if not password:
            raise ValueError("Superuser must have a password")

        extra_fields.setdefault("role", User.ROLE_ADMIN)
        extra_fields.setdefault("is_staff", True)
        extra_fields.setdefault("is_superuser", True)

        if extra_fields.get("is_staff") is not True:
            raise ValueError("Superuser must have is_staff=True")
        if extra_fields.get("is_superuser") is not True:
            raise ValueError("Superuser must have is_superuser=True")

        return self.create_user(email=email, password=password, **extra_fields)


# ---------------- USER MODEL ----------------
class User(AbstractBaseUser, PermissionsMixin):
    ROLE_ADMIN = "admin"
    ROLE_MODERATOR = "moderator"
    ROLE_READER = "reader"

    ROLE_CHOICES = [
        (ROLE_ADMIN, "Admin"),
        (ROLE_MODERATOR, "Moderator"),
        (ROLE_READER, "Reader"),
    ]

    SUBSCRIPTION_MONTHLY = "monthly"
    SUBSCRIPTION_YEARLY = "yearly"

    SUBSCRIPTION_TYPE_CHOICES = [
        (SUBSCRIPTION_MONTHLY, "Monthly"),
        (SUBSCRIPTION_YEARLY, "Yearly"),
    ]

    SUBSCRIPTION_ACTIVE = "active"
    SUBSCRIPTION_CANCELED = "canceled"
    SUBSCRIPTION_EXPIRED = "expired"

    SUBSCRIPTION_STATUS_CHOICES = [
        (SUBSCRIPTION_ACTIVE, "Active"),
        (SUBSCRIPTION_CANCELED, "Canceled"),
        (SUBSCRIPTION_EXPIRED, "Expired"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    email = models.EmailField(unique=True)
    username = models.CharField(max_length=150, unique=True)
    name = models.CharField(max_length=255, blank=True)

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default=ROLE_READER)

    subscription_type = models.CharField(
        max_length=20, choices=SUBSCRIPTION_TYPE_CHOICES, null=True, blank=True
    )
    subscription_status = models.CharField(
        max_length=20, choices=SUBSCRIPTION_STATUS_CHOICES, null=True, blank=True
    )
    subscription_expires_at = models.DateTimeField(null=True, blank=True)

    is_active = models.BooleanField(default=True)
    is_staff = models.BooleanField(default=False)

    last_seen_at = models.DateTimeField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = UserManager()

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["subscription_status"], name="users_sub_status_idx"),
            models.Index(fields=["subscription_expires_at"], name="users_sub_expires_idx"),
            models.Index(fields=["last_seen_at"], name="users_last_seen_idx"),
        ]

    def clean(self):
        if self.email:
            self.email = self.__class__.objects.normalize_email(self.email).strip()
        if not self.email:
            raise ValidationError("User must have an email")

    def save(self, *args, **kwargs):
        # Admin-created users arrive without a username.
        if not (self.username or "").strip() and self.email:
            self.username = self.__class__.objects._unique_username(self.email.split("@")[0])
        super().save(*args, **kwargs)

    def __str__(self):
        return f"{self.email} ({self.role})"

    # ---------------- SUBSCRIPTION ----------------
    def has_active_subscription(self) -> bool:
        if self.subscription_status != self.SUBSCRIPTION_ACTIVE:
            return False
        if self.subscription_expires_at is None:
            return True
        return self.subscription_expires_at > timezone.now()

    # ---------------- ACCESS ----------------
    def has_access_to_comic(self, comic) -> bool:
        """
        Free comics are open to everyone; paid comics need an active
        subscription or a library entry that grants access.
        """
        if comic.is_free:
            return True
        if self.has_active_subscription():
            return True

        entry = self.library_entries.filter(comic=comic).first()
        return bool(entry and entry.has_access())

    def touch_last_seen(self, *, min_interval: timedelta | None = None) -> bool:
        """Returns True when last_seen_at was written."""
        now = timezone.now()
        if min_interval and self.last_seen_at and now - self.last_seen_at < min_interval:
            return False
        self.last_seen_at = now
        User.objects.filter(pk=self.pk).update(last_seen_at=now)
        return True
