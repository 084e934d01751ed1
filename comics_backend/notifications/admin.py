# notifications/admin.py

from __future__ import annotations

from django.contrib import admin
from django.utils import timezone

from notifications.models import NotificationJob, ReleaseAnnouncement


@admin.register(NotificationJob)
class NotificationJobAdmin(admin.ModelAdmin):
    list_display = ("kind", "recipient", "comic", "status", "attempts", "available_at", "sent_at")
    list_filter = ("kind", "status")
    search_fields = ("recipient__email", "comic__title", "subject")
    raw_id_fields = ("recipient", "comic")
    readonly_fields = ("attempts", "last_error", "sent_at", "created_at", "updated_at")
    actions = ["requeue"]

    @admin.action(description="Requeue selected jobs")
    def requeue(self, request, queryset):
        updated = queryset.exclude(status=NotificationJob.STATUS_SENT).update(
            status=NotificationJob.STATUS_PENDING,
            attempts=0,
            last_error="",
            available_at=timezone.now(),
        )
        self.message_user(request, f"{updated} job(s) requeued.")


@admin.register(ReleaseAnnouncement)
class ReleaseAnnouncementAdmin(admin.ModelAdmin):
    list_display = ("comic", "recipients", "announced_at")
    search_fields = ("comic__title",)
    readonly_fields = ("comic", "recipients", "announced_at")

    def has_add_permission(self, request):
        return False
