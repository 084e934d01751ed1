# analytics/services/platform.py

"""
PLATFORM ANALYTICS SERVICE

Aggregations for the admin dashboard. Every function takes a window in days
(default 30) measured back from now.

Contract:
- Read-only: no mutations.
- Money is returned as 2dp strings, rates as floats rounded to 2dp.
- Revenue only counts succeeded payments (paid_at inside the window).
  Bundle revenue is attributed to each comic by its allocated share.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.db.models import Avg, Count, Q, Sum
from django.db.models.functions import TruncDate
from django.utils import timezone

from analytics.services.formatting import money as _money, q2 as _q2, rate as _rate
from comics.models import Comic, ComicView
from comics.services.view_tracking import popular_comics, trending_comics
from library.models import UserComicProgress
from payments.models import Payment

DEFAULT_DAYS = 30
TOP_LIMIT = 10
CONVERSION_LIMIT = 20
MIN_RATINGS_FOR_BEST_RATED = 3

ONLINE_WINDOW = timedelta(minutes=15)
ACTIVE_READER_WINDOW = timedelta(minutes=30)


def _since(days: int):
    return timezone.now() - timedelta(days=days)


def _succeeded(since=None):
    qs = Payment.objects.filter(status=Payment.STATUS_SUCCEEDED)
    if since is not None:
        qs = qs.filter(paid_at__gte=since)
    return qs


def _comic_card(comic: Comic, **extra) -> dict:
    return {
        "id": str(comic.id),
        "slug": comic.slug,
        "title": comic.title,
        "author": comic.author,
        "genre": comic.genre,
        **extra,
    }


def comic_sales(since) -> dict:
    """
    {comic_id: {"revenue": Decimal, "purchases": int}} for succeeded single
    and bundle payments since `since`.
    """
    totals = defaultdict(lambda: {"revenue": Decimal("0.00"), "purchases": 0})

    payments = _succeeded(since).filter(
        payment_type__in=[Payment.TYPE_SINGLE, Payment.TYPE_BUNDLE]
    ).only("id", "payment_type", "comic_id", "amount", "comic_ids")

    for payment in payments.iterator():
        if payment.payment_type == Payment.TYPE_SINGLE:
            if payment.comic_id is None:
                continue
            row = totals[str(payment.comic_id)]
            row["revenue"] += _q2(payment.amount)
            row["purchases"] += 1
            continue

        for item in payment.comic_ids or []:
            comic_id = item.get("comic_id") if isinstance(item, dict) else item
            if not comic_id:
                continue
            row = totals[str(comic_id)]
            row["revenue"] += _q2(item.get("price") if isinstance(item, dict) else 0)
            row["purchases"] += 1

    return dict(totals)


def _ranked_sales(since, *, key: str, limit: int) -> list[dict]:
    sales = comic_sales(since)
    ranked = sorted(sales.items(), key=lambda kv: (kv[1][key], kv[1]["revenue"]), reverse=True)[:limit]
    comics = {str(pk): comic for pk, comic in Comic.objects.in_bulk([comic_id for comic_id, _ in ranked]).items()}

    rows = []
    for comic_id, row in ranked:
        comic = comics.get(comic_id)
        if comic is None:
            continue
        rows.append(_comic_card(comic, revenue=_money(row["revenue"]), purchases=row["purchases"]))
    return rows


# ============================================================
# PLATFORM
# ============================================================


def platform_metrics(days: int = DEFAULT_DAYS) -> dict:
    User = get_user_model()
    since = _since(days)

    all_time = _succeeded().aggregate(total=Sum("amount"), count=Count("id"))
    period = _succeeded(since).aggregate(total=Sum("amount"), count=Count("id"))

    return {
        "total_users": User.objects.count(),
        "new_users": User.objects.filter(created_at__gte=since).count(),
        "total_comics": Comic.objects.filter(is_visible=True).count(),
        "total_revenue": _money(all_time["total"]),
        "revenue_period": _money(period["total"]),
        "total_purchases": all_time["count"] or 0,
        "purchases_period": period["count"] or 0,
        "total_views": ComicView.objects.count(),
        "views_period": ComicView.objects.filter(viewed_at__gte=since).count(),
        "active_readers": (
            UserComicProgress.objects.filter(last_read_at__gte=since)
            .values("user_id")
            .distinct()
            .count()
        ),
    }


# ============================================================
# REVENUE
# ============================================================


def revenue_analytics(days: int = DEFAULT_DAYS) -> dict:
    since = _since(days)
    qs = _succeeded(since)

    daily = (
        qs.annotate(day=TruncDate("paid_at"))
        .values("day")
        .annotate(revenue=Sum("amount"), transactions=Count("id"))
        .order_by("day")
    )
    by_type = qs.values("payment_type").annotate(revenue=Sum("amount"), transactions=Count("id")).order_by("payment_type")

    return {
        "daily_revenue": [
            {
                "date": row["day"].isoformat() if row["day"] else None,
                "revenue": _money(row["revenue"]),
                "transactions": row["transactions"],
            }
            for row in daily
        ],
        "top_earning_comics": _ranked_sales(since, key="revenue", limit=TOP_LIMIT),
        "average_transaction_value": _money(qs.aggregate(avg=Avg("amount"))["avg"]),
        "revenue_by_type": {
            row["payment_type"]: {"revenue": _money(row["revenue"]), "transactions": row["transactions"]}
            for row in by_type
        },
    }


# ============================================================
# ENGAGEMENT
# ============================================================


def user_engagement(days: int = DEFAULT_DAYS) -> dict:
    since = _since(days)
    progress = UserComicProgress.objects.filter(last_read_at__gte=since)

    stats = progress.aggregate(
        total=Count("id"),
        completed=Count("id", filter=Q(is_completed=True)),
        average_progress=Avg("progress_percentage"),
        average_reading_time=Avg("reading_time_minutes"),
    )

    active_users = (
        progress.values("user_id", "user__email", "user__name")
        .annotate(comics_read=Count("id"), reading_time_minutes=Sum("reading_time_minutes"))
        .order_by("-reading_time_minutes", "-comics_read")[:TOP_LIMIT]
    )

    genres = (
        ComicView.objects.filter(viewed_at__gte=since)
        .exclude(comic__genre="")
        .values("comic__genre")
        .annotate(views=Count("id"))
        .order_by("-views", "comic__genre")[:TOP_LIMIT]
    )

    return {
        "completion_stats": {
            "total_reading_records": stats["total"] or 0,
            "completed": stats["completed"] or 0,
            "average_progress": round(float(stats["average_progress"] or 0), 2),
            "average_reading_time_minutes": round(float(stats["average_reading_time"] or 0), 2),
        },
        "active_users": [
            {
                "user_id": str(row["user_id"]),
                "email": row["user__email"],
                "name": row["user__name"],
                "comics_read": row["comics_read"],
                "reading_time_minutes": row["reading_time_minutes"] or 0,
            }
            for row in active_users
        ],
        "genre_popularity": [{"genre": row["comic__genre"], "views": row["views"]} for row in genres],
        "reading_completion_rate": _rate(stats["completed"] or 0, stats["total"] or 0),
    }


# ============================================================
# COMIC PERFORMANCE + CONVERSION
# ============================================================


def comic_performance(days: int = DEFAULT_DAYS) -> dict:
    since = _since(days)

    best_rated = (
        Comic.objects.visible()
        .filter(total_ratings__gte=MIN_RATINGS_FOR_BEST_RATED)
        .order_by("-average_rating", "-total_ratings")[:TOP_LIMIT]
    )

    return {
        "most_viewed": [
            _comic_card(c, views=c.recent_views) for c in popular_comics(days=days, limit=TOP_LIMIT)
        ],
        "trending": [
            _comic_card(c, growth=c.growth, current_views=c.current_views)
            for c in trending_comics(limit=TOP_LIMIT)
        ],
        "best_rated": [
            _comic_card(c, average_rating=f"{c.average_rating:.2f}", total_ratings=c.total_ratings)
            for c in best_rated
        ],
        "most_purchased": _ranked_sales(since, key="purchases", limit=TOP_LIMIT),
    }


def conversion_analytics(days: int = DEFAULT_DAYS) -> dict:
    """
    Views -> purchases for visible paid comics. Comics without views in the
    window are left out of the per-comic list.
    """
    since = _since(days)
    sales = comic_sales(since)

    paid = (
        Comic.objects.filter(is_visible=True, is_free=False)
        .annotate(period_views=Count("views", filter=Q(views__viewed_at__gte=since)))
    )

    rows = []
    total_views = 0
    total_purchases = 0
    for comic in paid:
        purchases = sales.get(str(comic.id), {}).get("purchases", 0)
        total_views += comic.period_views
        total_purchases += purchases
        if comic.period_views > 0:
            rows.append(
                _comic_card(
                    comic,
                    views=comic.period_views,
                    purchases=purchases,
                    conversion_rate=_rate(purchases, comic.period_views),
                )
            )

    rows.sort(key=lambda r: (r["conversion_rate"], r["views"]), reverse=True)

    return {
        "comics": rows[:CONVERSION_LIMIT],
        "overall_conversion_rate": _rate(total_purchases, total_views),
        "total_views": total_views,
        "total_purchases": total_purchases,
    }


# ============================================================
# REALTIME
# ============================================================


def realtime_metrics() -> dict:
    User = get_user_model()
    now = timezone.now()
    today = timezone.localdate()

    online_since = now - ONLINE_WINDOW
    online = (
        User.objects.filter(
            Q(last_seen_at__gte=online_since) | Q(reading_progress__last_read_at__gte=online_since)
        )
        .distinct()
        .count()
    )

    return {
        "online_users": online,
        "active_readers": (
            UserComicProgress.objects.filter(last_read_at__gte=now - ACTIVE_READER_WINDOW)
            .values("user_id")
            .distinct()
            .count()
        ),
        "revenue_today": _money(
            Payment.objects.filter(status=Payment.STATUS_SUCCEEDED, paid_at__date=today).aggregate(
                total=Sum("amount")
            )["total"]
        ),
        "new_users_today": User.objects.filter(created_at__date=today).count(),
        "views_last_hour": ComicView.objects.filter(viewed_at__gte=now - timedelta(hours=1)).count(),
        "last_updated": now.isoformat(),
    }


# ============================================================
# FULL REPORT
# ============================================================


def comprehensive_report(days: int = DEFAULT_DAYS) -> dict:
    return {
        "summary": {
            "period": f"{days} days",
            "generated_at": timezone.now().isoformat(),
            "platform_metrics": platform_metrics(days),
        },
        "revenue_analytics": revenue_analytics(days),
        "user_engagement": user_engagement(days),
        "comic_performance": comic_performance(days),
        "conversion_metrics": conversion_analytics(days),
        "realtime_metrics": realtime_metrics(),
    }
