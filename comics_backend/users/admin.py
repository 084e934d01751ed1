# users/admin.py

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from users.models import User, UserPreferences


# ======================================================
# USER ADMIN
# ======================================================


@admin.register(User)
class UserAdmin(BaseUserAdmin):
    ordering = ("-created_at",)
    list_display = (
        "email",
        "name",
        "role",
        "subscription_type",
        "subscription_status",
        "subscription_expires_at",
        "is_active",
        "created_at",
    )
    list_filter = ("role", "subscription_status", "is_active", "is_staff")
    search_fields = ("email", "username", "name")
    readonly_fields = ("created_at", "updated_at", "last_login", "last_seen_at")

    fieldsets = (
        (None, {"fields": ("email", "username", "password")}),
        ("Profile", {"fields": ("name", "role")}),
        (
            "Subscription",
            {"fields": ("subscription_type", "subscription_status", "subscription_expires_at")},
        ),
        (
            "Permissions",
            {"fields": ("is_active", "is_staff", "is_superuser", "groups", "user_permissions")},
        ),
        ("Activity", {"fields": ("last_login", "last_seen_at", "created_at", "updated_at")}),
    )
    add_fieldsets = (
        (
            None,
            {
                "classes": ("wide",),
                "fields": ("email", "name", "role", "password1", "password2"),
            },
        ),
    )


# ======================================================
# PREFERENCES ADMIN
# ======================================================


@admin.register(UserPreferences)
class UserPreferencesAdmin(admin.ModelAdmin):
    list_display = (
        "user",
        "theme",
        "reading_view_mode",
        "email_notifications",
        "new_releases_notifications",
        "reading_reminders",
    )
    list_filter = ("email_notifications", "new_releases_notifications", "theme")
    search_fields = ("user__email",)
    readonly_fields = ("created_at", "updated_at")
