# library/services/progress.py

"""
======================================================
PATH: library/services/progress.py
======================================================
READING PROGRESS SERVICE

- update_progress: page position, completion, reading time, library sync
- start_session / end_session / add_pause_time: reading session log
- reading_statistics: per-user totals + daily reading streak
- recently_read / continue_reading: shelves for the reader home screen

Completion:
- completed_at is written once. Comic.total_readers is incremented only on
  that first completion, never when a completed comic is re-read.
"""

from __future__ import annotations

import logging
import uuid
from datetime import timedelta

from django.db import transaction
from django.db.models import Avg, Count, Q, Sum
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from comics.models import Comic
from comics.services.recommendations import favorite_genres
from library.models import UserComicProgress, UserLibrary
from library.services.exceptions import InvalidProgressError, NoActiveSessionError

logger = logging.getLogger(__name__)

SHELF_LIMIT = 6


def get_or_create_progress(user, comic: Comic, *, lock: bool = False) -> UserComicProgress:
    progress, _ = UserComicProgress.objects.get_or_create(
        user=user,
        comic=comic,
        defaults={"total_pages": comic.page_count or 0},
    )
    if lock:
        progress = UserComicProgress.objects.select_for_update().get(pk=progress.pk)
    return progress


def _sync_library_entry(progress: UserComicProgress, *, added_seconds: int = 0) -> None:
    entry = UserLibrary.objects.filter(user_id=progress.user_id, comic_id=progress.comic_id).first()
    if entry is None:
        return
    entry.completion_percentage = progress.progress_percentage
    entry.last_accessed_at = progress.last_read_at or timezone.now()
    if added_seconds > 0:
        entry.total_reading_time = (entry.total_reading_time or 0) + added_seconds
    entry.save(update_fields=["completion_percentage", "last_accessed_at", "total_reading_time", "updated_at"])


# ============================================================
# PAGE POSITION
# ============================================================


@transaction.atomic
def update_progress(
    *,
    user,
    comic: Comic,
    current_page: int,
    total_pages: int | None = None,
    reading_time_minutes: int | None = None,
) -> UserComicProgress:
    if current_page < 1:
        raise InvalidProgressError("current_page must be at least 1")

    progress = get_or_create_progress(user, comic, lock=True)
    now = timezone.now()

    total = total_pages or comic.page_count or progress.total_pages
    if total and current_page > total:
        raise InvalidProgressError(f"current_page cannot exceed total pages ({total})")

    progress.current_page = current_page
    progress.total_pages = total or 0
    progress.progress_percentage = UserComicProgress.calculate_percentage(current_page, total)
    progress.last_read_at = now
    if progress.first_read_at is None:
        progress.first_read_at = now

    first_completion = False
    if total and current_page >= total:
        progress.is_completed = True
        if progress.completed_at is None:
            progress.completed_at = now
            first_completion = True

    added_minutes = max(0, int(reading_time_minutes or 0))
    progress.reading_time_minutes = (progress.reading_time_minutes or 0) + added_minutes
    progress.save()

    if first_completion:
        comic.increment_counter("total_readers")
        logger.info(
            "Comic completed",
            extra={"user_id": str(user.id), "comic_id": str(comic.id)},
        )

    _sync_library_entry(progress, added_seconds=added_minutes * 60)
    return progress


# ============================================================
# READING SESSIONS
# ============================================================


def _close_session(session: dict, *, end_page: int, now) -> dict:
    started = parse_datetime(session["started_at"]) or now
    duration = max(0, int((now - started).total_seconds() // 60))
    session.update(
        {
            "ended_at": now.isoformat(),
            "end_page": end_page,
            "pages_read": max(0, end_page - int(session.get("start_page") or 0)),
            "duration_minutes": duration,
            "is_active": False,
        }
    )
    return session


@transaction.atomic
def start_session(progress: UserComicProgress, *, page: int | None = None, metadata: dict | None = None) -> dict:
    progress = UserComicProgress.objects.select_for_update().get(pk=progress.pk)
    now = timezone.now()
    sessions = progress.sessions()

    # a stale open session is closed where the reader left off
    for session in sessions:
        if session.get("is_active"):
            _close_session(session, end_page=progress.current_page, now=now)

    session = {
        "id": uuid.uuid4().hex,
        "started_at": now.isoformat(),
        "ended_at": None,
        "start_page": page or progress.current_page,
        "end_page": None,
        "pages_read": 0,
        "duration_minutes": 0,
        "paused_minutes": 0,
        "metadata": metadata or {},
        "is_active": True,
    }
    sessions.append(session)

    progress.reading_sessions = sessions
    progress.recompute_session_aggregates()
    if progress.first_read_at is None:
        progress.first_read_at = now
    progress.last_read_at = now
    progress.save()
    return session


@transaction.atomic
def end_session(progress: UserComicProgress, *, page: int, metadata: dict | None = None) -> dict:
    progress = UserComicProgress.objects.select_for_update().get(pk=progress.pk)
    now = timezone.now()
    sessions = progress.sessions()

    active = next((s for s in sessions if s.get("is_active")), None)
    if active is None:
        raise NoActiveSessionError("No active reading session")

    _close_session(active, end_page=page, now=now)
    if metadata:
        active["metadata"] = {**(active.get("metadata") or {}), **metadata}

    progress.reading_sessions = sessions
    progress.recompute_session_aggregates()
    progress.reading_time_minutes = (progress.reading_time_minutes or 0) + active["duration_minutes"]
    progress.last_read_at = now
    progress.save()

    _sync_library_entry(progress, added_seconds=active["duration_minutes"] * 60)
    return active


@transaction.atomic
def add_pause_time(progress: UserComicProgress, *, minutes: int) -> dict:
    progress = UserComicProgress.objects.select_for_update().get(pk=progress.pk)
    sessions = progress.sessions()

    active = next((s for s in sessions if s.get("is_active")), None)
    if active is None:
        raise NoActiveSessionError("No active reading session")

    active["paused_minutes"] = int(active.get("paused_minutes") or 0) + max(0, int(minutes))
    progress.reading_sessions = sessions
    progress.save(update_fields=["reading_sessions", "updated_at"])
    return active


def update_reading_preferences(progress: UserComicProgress, values: dict) -> dict:
    progress.reading_preferences = {**(progress.reading_preferences or {}), **values}
    progress.save(update_fields=["reading_preferences", "updated_at"])
    return progress.reading_preferences


# ============================================================
# STATISTICS + SHELVES
# ============================================================


def _activity_dates(records) -> set:
    dates = set()
    for progress in records:
        if progress.last_read_at:
            dates.add(timezone.localtime(progress.last_read_at).date())
        for session in progress.sessions():
            started = parse_datetime(session.get("started_at") or "")
            if started:
                dates.add(timezone.localtime(started).date())
    return dates


def reading_streak(user) -> int:
    """Consecutive days with reading activity, ending today or yesterday."""
    dates = _activity_dates(UserComicProgress.objects.filter(user=user).only("last_read_at", "reading_sessions"))
    if not dates:
        return 0

    day = timezone.localdate()
    if day not in dates:
        day -= timedelta(days=1)
        if day not in dates:
            return 0

    streak = 0
    while day in dates:
        streak += 1
        day -= timedelta(days=1)
    return streak


def reading_statistics(user) -> dict:
    records = UserComicProgress.objects.filter(user=user)
    agg = records.aggregate(
        started=Count("id"),
        completed=Count("id", filter=Q(is_completed=True)),
        total_minutes=Sum("reading_time_minutes"),
        average_progress=Avg("progress_percentage"),
        pages_read=Sum("current_page"),
    )
    average_progress = agg["average_progress"]
    return {
        "comics_started": agg["started"] or 0,
        "comics_completed": agg["completed"] or 0,
        "total_reading_time_minutes": agg["total_minutes"] or 0,
        "average_progress": round(float(average_progress), 2) if average_progress is not None else 0.0,
        "pages_read": agg["pages_read"] or 0,
        "reading_streak": reading_streak(user),
        "favorite_genres": favorite_genres(user, limit=5),
    }


def recently_read(user, *, limit: int = SHELF_LIMIT):
    return list(
        UserComicProgress.objects.filter(user=user, last_read_at__isnull=False)
        .select_related("comic")
        .order_by("-last_read_at")[:limit]
    )


def continue_reading(user, *, limit: int = SHELF_LIMIT):
    return list(
        UserComicProgress.objects.filter(user=user, is_completed=False, current_page__gt=1)
        .select_related("comic")
        .order_by("-last_read_at")[:limit]
    )
