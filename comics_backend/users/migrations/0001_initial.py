"""
======================================================
PATH: users/migrations/0001_initial.py
======================================================
MIGRATION: CREATE User + UserPreferences

Purpose:
- Custom email-login user with role + subscription state.
- One-to-one reader/notification preferences.
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
import django.core.validators
from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = [
        ("auth", "0012_alter_user_first_name_max_length"),
    ]

    operations = [
        migrations.CreateModel(
            name="User",
            fields=[
                ("password", models.CharField(max_length=128, verbose_name="password")),
                ("last_login", models.DateTimeField(blank=True, null=True, verbose_name="last login")),
                (
                    "is_superuser",
                    models.BooleanField(
                        default=False,
                        help_text="Designates that this user has all permissions without explicitly assigning them.",
                        verbose_name="superuser status",
                    ),
                ),
                (
                    "id",
                    models.UUIDField(
                        primary_key=True,
                        default=uuid.uuid4,
                        editable=False,
                        serialize=False,
                    ),
                ),
                ("email", models.EmailField(max_length=254, unique=True)),
                ("username", models.CharField(max_length=150, unique=True)),
                ("name", models.CharField(blank=True, max_length=255)),
                (
                    "role",
                    models.CharField(
                        choices=[("admin", "Admin"), ("moderator", "Moderator"), ("reader", "Reader")],
                        default="reader",
                        max_length=20,
                    ),
                ),
                (
                    "subscription_type",
                    models.CharField(
                        blank=True,
                        choices=[("monthly", "Monthly"), ("yearly", "Yearly")],
                        max_length=20,
                        null=True,
                    ),
                ),
                (
                    "subscription_status",
                    models.CharField(
                        blank=True,
                        choices=[("active", "Active"), ("canceled", "Canceled"), ("expired", "Expired")],
                        max_length=20,
                        null=True,
                    ),
                ),
                ("subscription_expires_at", models.DateTimeField(blank=True, null=True)),
                ("is_active", models.BooleanField(default=True)),
                ("is_staff", models.BooleanField(default=False)),
                ("last_seen_at", models.DateTimeField(blank=True, null=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "groups",
                    models.ManyToManyField(
                        blank=True,
                        help_text="The groups this user belongs to. A user will get all permissions granted to each of their groups.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.group",
                        verbose_name="groups",
                    ),
                ),
                (
                    "user_permissions",
                    models.ManyToManyField(
                        blank=True,
                        help_text="Specific permissions for this user.",
                        related_name="user_set",
                        related_query_name="user",
                        to="auth.permission",
                        verbose_name="user permissions",
                    ),
                ),
            ],
            options={
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(fields=["subscription_status"], name="users_sub_status_idx"),
                    models.Index(fields=["subscription_expires_at"], name="users_sub_expires_idx"),
                    models.Index(fields=["last_seen_at"], name="users_last_seen_idx"),
                ],
            },
        ),
        migrations.CreateModel(
            name="UserPreferences",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "reading_view_mode",
                    models.CharField(
                        choices=[
                            ("single", "Single page"),
                            ("double", "Double page"),
                            ("continuous", "Continuous scroll"),
                        ],
                        default="single",
                        max_length=20,
                    ),
                ),
                (
                    "reading_direction",
                    models.CharField(
                        choices=[("ltr", "Left to right"), ("rtl", "Right to left")],
                        default="ltr",
                        max_length=3,
                    ),
                ),
                (
                    "reading_zoom_level",
                    models.DecimalField(
                        decimal_places=2,
                        default=Decimal("1.20"),
                        max_digits=4,
                        validators=[
                            django.core.validators.MinValueValidator(Decimal("0.50")),
                            django.core.validators.MaxValueValidator(Decimal("3.00")),
                        ],
                    ),
                ),
                ("auto_hide_controls", models.BooleanField(default=True)),
                ("control_hide_delay", models.PositiveIntegerField(default=3000)),
                (
                    "theme",
                    models.CharField(
                        choices=[("light", "Light"), ("dark", "Dark"), ("auto", "Auto")],
                        default="dark",
                        max_length=10,
                    ),
                ),
                ("reduce_motion", models.BooleanField(default=False)),
                ("high_contrast", models.BooleanField(default=False)),
                ("email_notifications", models.BooleanField(default=True)),
                ("new_releases_notifications", models.BooleanField(default=True)),
                ("reading_reminders", models.BooleanField(default=False)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "user",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="preferences",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name_plural": "user preferences",
            },
        ),
    ]
