# comics/services/view_tracking.py

"""
PATH: comics/services/view_tracking.py

VIEW TRACKING + POPULARITY

record_view dedup window (1 hour), most specific identity wins:
1) authenticated user
2) session key
3) client IP

Popularity:
- popular_comics: raw view counts inside a trailing window
- trending_comics: views in the last 7 days minus the 7 days before
  (growth > 0 only)
"""

from __future__ import annotations

from datetime import timedelta

from django.db import transaction
from django.db.models import Count, Q
from django.utils import timezone

from comics.models import Comic, ComicView

DEDUP_WINDOW = timedelta(hours=1)
TRENDING_WINDOW_DAYS = 7


def client_ip(request) -> str | None:
    forwarded = (request.META.get("HTTP_X_FORWARDED_FOR") or "").strip()
    if forwarded:
        return forwarded.split(",")[0].strip() or None
    return request.META.get("REMOTE_ADDR") or None


def _recent_view_exists(*, comic: Comic, user, session_key: str, ip: str | None, since) -> bool:
    qs = ComicView.objects.filter(comic=comic, viewed_at__gte=since)
    if user is not None and user.is_authenticated:
        return qs.filter(user=user).exists()
    if session_key:
        return qs.filter(session_key=session_key).exists()
    if ip:
        return qs.filter(ip_address=ip).exists()
    return False


@transaction.atomic
def record_view(
    *,
    comic: Comic,
    user=None,
    session_key: str = "",
    ip_address: str | None = None,
    user_agent: str = "",
) -> bool:
    """Returns True when a new view was counted."""
    now = timezone.now()

    if _recent_view_exists(
        comic=comic,
        user=user,
        session_key=session_key,
        ip=ip_address,
        since=now - DEDUP_WINDOW,
    ):
        return False

    ComicView.objects.create(
        comic=comic,
        user=user if (user is not None and user.is_authenticated) else None,
        session_key=(session_key or "")[:64],
        ip_address=ip_address,
        user_agent=(user_agent or "")[:500],
        viewed_at=now,
    )
    comic.increment_counter("view_count")
    return True


def record_view_for_request(request, comic: Comic) -> bool:
    session = getattr(request, "session", None)
    session_key = getattr(session, "session_key", None) or ""
    return record_view(
        comic=comic,
        user=request.user,
        session_key=session_key,
        ip_address=client_ip(request),
        user_agent=request.META.get("HTTP_USER_AGENT", ""),
    )


def popular_comics(*, days: int = 30, limit: int = 10):
    since = timezone.now() - timedelta(days=days)
    return list(
        Comic.objects.visible()
        .annotate(recent_views=Count("views", filter=Q(views__viewed_at__gte=since)))
        .filter(recent_views__gt=0)
        .order_by("-recent_views", "-view_count")[:limit]
    )


def trending_comics(*, limit: int = 10):
    now = timezone.now()
    current_start = now - timedelta(days=TRENDING_WINDOW_DAYS)
    previous_start = now - timedelta(days=TRENDING_WINDOW_DAYS * 2)

    qs = Comic.objects.visible().annotate(
        current_views=Count("views", filter=Q(views__viewed_at__gte=current_start)),
        previous_views=Count(
            "views",
            filter=Q(views__viewed_at__gte=previous_start, views__viewed_at__lt=current_start),
        ),
    )

    rows = []
    for comic in qs:
        growth = comic.current_views - comic.previous_views
        if growth > 0:
            comic.growth = growth
            rows.append(comic)

    rows.sort(key=lambda c: (c.growth, c.current_views), reverse=True)
    return rows[:limit]
