# library/models/progress.py

"""
======================================================
PATH: library/models/progress.py
======================================================
READING PROGRESS

Rules:
- progress_percentage = current_page / total_pages * 100 (2dp, capped at 100)
- completed once current_page >= total_pages; completed_at is set once
- reading_sessions is a JSON list of session dicts. At most one dict has
  is_active=True; ended sessions carry duration_minutes + pages_read and feed
  the aggregate columns (averages, reading_speed, paused minutes).
"""

from __future__ import annotations

import uuid
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.db import models

TWOPLACES = Decimal("0.01")


def _to_decimal(value) -> Decimal:
    return Decimal(str(value or 0)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


class UserComicProgress(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="reading_progress",
    )
    comic = models.ForeignKey(
        "comics.Comic",
        on_delete=models.CASCADE,
        related_name="progress_records",
    )

    current_page = models.PositiveIntegerField(default=1)
    total_pages = models.PositiveIntegerField(default=0)
    progress_percentage = models.DecimalField(max_digits=5, decimal_places=2, default=Decimal("0.00"))
    is_completed = models.BooleanField(default=False)
    completed_at = models.DateTimeField(null=True, blank=True)
    is_bookmarked = models.BooleanField(default=False)

    reading_time_minutes = models.PositiveIntegerField(default=0)
    first_read_at = models.DateTimeField(null=True, blank=True)
    last_read_at = models.DateTimeField(null=True, blank=True)

    # ---------------- SESSIONS ----------------
    reading_sessions = models.JSONField(default=list, blank=True)
    total_reading_sessions = models.PositiveIntegerField(default=0)
    average_session_duration = models.DecimalField(max_digits=8, decimal_places=2, default=Decimal("0.00"))
    pages_per_session_avg = models.DecimalField(max_digits=8, decimal_places=2, default=Decimal("0.00"))
    reading_speed = models.DecimalField(
        max_digits=8,
        decimal_places=2,
        default=Decimal("0.00"),
        help_text="Pages per minute across ended sessions.",
    )
    total_time_paused_minutes = models.PositiveIntegerField(default=0)

    # ---------------- BOOKMARKS ----------------
    bookmark_count = models.PositiveIntegerField(default=0)
    last_bookmark_at = models.DateTimeField(null=True, blank=True)

    reading_preferences = models.JSONField(default=dict, blank=True)
    reading_metadata = models.JSONField(default=dict, blank=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-last_read_at"]
        constraints = [
            models.UniqueConstraint(fields=["user", "comic"], name="uniq_progress_user_comic"),
        ]
        indexes = [
            models.Index(fields=["user", "last_read_at"], name="progress_user_last_read_idx"),
            models.Index(fields=["user", "is_completed"], name="progress_user_done_idx"),
        ]

    def __str__(self):
        return f"Progress<{self.user_id} {self.comic_id} p{self.current_page}>"

    @staticmethod
    def calculate_percentage(current_page: int, total_pages: int) -> Decimal:
        if not total_pages:
            return Decimal("0.00")
        pct = Decimal(current_page) / Decimal(total_pages) * 100
        return min(_to_decimal(pct), Decimal("100.00"))

    # ---------------- SESSION HELPERS ----------------
    def sessions(self) -> list[dict]:
        return list(self.reading_sessions or [])

    def active_session(self) -> dict | None:
        for session in self.sessions():
            if session.get("is_active"):
                return session
        return None

    def ended_sessions(self) -> list[dict]:
        return [s for s in self.sessions() if not s.get("is_active")]

    def recompute_session_aggregates(self) -> None:
        """Refresh the aggregate columns from ended sessions (no save)."""
        ended = self.ended_sessions()
        self.total_reading_sessions = len(ended)
        if not ended:
            return

        total_minutes = sum(s.get("duration_minutes", 0) for s in ended)
        total_pages = sum(s.get("pages_read", 0) for s in ended)

        self.average_session_duration = _to_decimal(Decimal(total_minutes) / len(ended))
        self.pages_per_session_avg = _to_decimal(Decimal(total_pages) / len(ended))
        if total_minutes > 0:
            self.reading_speed = _to_decimal(Decimal(total_pages) / Decimal(total_minutes))
        self.total_time_paused_minutes = sum(s.get("paused_minutes", 0) for s in ended)

    def session_statistics(self) -> dict:
        ended = self.ended_sessions()
        return {
            "total_sessions": self.total_reading_sessions,
            "completed_sessions": len(ended),
            "active_sessions": len(self.sessions()) - len(ended),
            "total_reading_time_minutes": self.reading_time_minutes,
            "average_session_duration": float(self.average_session_duration),
            "pages_per_session_avg": float(self.pages_per_session_avg),
            "reading_speed": float(self.reading_speed),
            "total_time_paused_minutes": self.total_time_paused_minutes,
            "bookmark_count": self.bookmark_count,
            "progress_percentage": float(self.progress_percentage),
            "is_completed": self.is_completed,
            "first_read_at": self.first_read_at,
            "last_read_at": self.last_read_at,
            "last_bookmark_at": self.last_bookmark_at,
        }
