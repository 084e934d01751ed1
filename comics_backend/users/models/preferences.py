# users/models/preferences.py

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class UserPreferences(models.Model):
    """
    Reader + notification preferences (one row per user, created lazily).

    Notification flags are read by the notifications app when a new comic is
    released: only users with BOTH email_notifications and
    new_releases_notifications enabled are emailed.
    """

    VIEW_SINGLE = "single"
    VIEW_DOUBLE = "double"
    VIEW_CONTINUOUS = "continuous"

    VIEW_MODE_CHOICES = [
        (VIEW_SINGLE, "Single page"),
        (VIEW_DOUBLE, "Double page"),
        (VIEW_CONTINUOUS, "Continuous scroll"),
    ]

    DIRECTION_LTR = "ltr"
    DIRECTION_RTL = "rtl"

    DIRECTION_CHOICES = [
        (DIRECTION_LTR, "Left to right"),
        (DIRECTION_RTL, "Right to left"),
    ]

    THEME_LIGHT = "light"
    THEME_DARK = "dark"
    THEME_AUTO = "auto"

    THEME_CHOICES = [
        (THEME_LIGHT, "Light"),
        (THEME_DARK, "Dark"),
        (THEME_AUTO, "Auto"),
    ]

    EDITABLE_FIELDS = (
        "reading_view_mode",
        "reading_direction",
        "reading_zoom_level",
        "auto_hide_controls",
        "control_hide_delay",
        "theme",
        "reduce_motion",
        "high_contrast",
        "email_notifications",
        "new_releases_notifications",
        "reading_reminders",
    )

    user = models.OneToOneField(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="preferences",
    )

    reading_view_mode = models.CharField(max_length=20, choices=VIEW_MODE_CHOICES, default=VIEW_SINGLE)
    reading_direction = models.CharField(max_length=3, choices=DIRECTION_CHOICES, default=DIRECTION_LTR)
    reading_zoom_level = models.DecimalField(
        max_digits=4,
        decimal_places=2,
        default=Decimal("1.20"),
        validators=[MinValueValidator(Decimal("0.50")), MaxValueValidator(Decimal("3.00"))],
    )
    auto_hide_controls = models.BooleanField(default=True)
    control_hide_delay = models.PositiveIntegerField(default=3000)
    theme = models.CharField(max_length=10, choices=THEME_CHOICES, default=THEME_DARK)
    reduce_motion = models.BooleanField(default=False)
    high_contrast = models.BooleanField(default=False)

    email_notifications = models.BooleanField(default=True)
    new_releases_notifications = models.BooleanField(default=True)
    reading_reminders = models.BooleanField(default=False)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name_plural = "user preferences"

    def __str__(self):
        return f"Preferences<{self.user_id}>"

    @classmethod
    def defaults(cls) -> dict:
        return {name: cls._meta.get_field(name).get_default() for name in cls.EDITABLE_FIELDS}

    @classmethod
    def for_user(cls, user) -> "UserPreferences":
        prefs, _ = cls.objects.get_or_create(user=user)
        return prefs

    def update_preferences(self, values: dict) -> None:
        """Apply only known fields; unknown keys are ignored."""
        changed = []
        for name in self.EDITABLE_FIELDS:
            if name in values:
                setattr(self, name, values[name])
                changed.append(name)
        if changed:
            self.save(update_fields=[*changed, "updated_at"])

    def reset_to_defaults(self) -> None:
        for name, value in self.defaults().items():
            setattr(self, name, value)
        self.save()

    def wants_new_release_emails(self) -> bool:
        return self.email_notifications and self.new_releases_notifications
