# notifications/models/job.py

"""
======================================================
PATH: notifications/models/job.py
======================================================
NOTIFICATION JOB (email queue row)

Lifecycle:
    pending -> sent
    pending -> pending (attempt failed, available_at pushed back)
    pending -> failed  (attempts reached max_attempts)

A worker only picks rows with status=pending and available_at <= now.
"""

from __future__ import annotations

import uuid

from django.conf import settings
from django.db import models
from django.utils import timezone


def _default_max_attempts() -> int:
    return int(getattr(settings, "NOTIFICATION_MAX_ATTEMPTS", 3))


class NotificationJob(models.Model):
    KIND_NEW_COMIC = "new_comic"
    KIND_DIRECT = "direct"

    KIND_CHOICES = [
        (KIND_NEW_COMIC, "New comic release"),
        (KIND_DIRECT, "Direct"),
    ]

    STATUS_PENDING = "pending"
    STATUS_SENT = "sent"
    STATUS_FAILED = "failed"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_SENT, "Sent"),
        (STATUS_FAILED, "Failed"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    kind = models.CharField(max_length=20, choices=KIND_CHOICES)
    recipient = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="notification_jobs",
    )
    comic = models.ForeignKey(
        "comics.Comic",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="notification_jobs",
    )

    subject = models.CharField(max_length=255)
    body = models.TextField()

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    attempts = models.PositiveSmallIntegerField(default=0)
    max_attempts = models.PositiveSmallIntegerField(default=_default_max_attempts)
    last_error = models.TextField(blank=True, default="")

    available_at = models.DateTimeField(default=timezone.now)
    sent_at = models.DateTimeField(null=True, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["available_at", "created_at"]
        indexes = [
            models.Index(fields=["status", "available_at"], name="notif_job_queue_idx"),
            models.Index(fields=["comic", "kind"], name="notif_job_comic_kind_idx"),
        ]

    def __str__(self):
        return f"NotificationJob<{self.kind} -> {self.recipient_id} [{self.status}]>"

    @property
    def is_exhausted(self) -> bool:
        return self.attempts >= self.max_attempts
