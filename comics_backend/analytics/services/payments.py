# analytics/services/payments.py

"""
======================================================
PATH: analytics/services/payments.py
======================================================
PAYMENT ANALYTICS (by calendar period)

Periods: today, week (Mon..Sun), month, quarter, year. Default: month.
An explicit from_date/to_date (YYYY-MM-DD, inclusive) overrides the period.

Bounds are timezone-aware [start, end) in the server timezone.

Event times:
- revenue         -> paid_at of succeeded payments
- attempts/failed -> created_at
- refunds         -> refunded_at (latest refund on the payment)
"""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from decimal import Decimal

from django.db.models import Count, Q, Sum
from django.db.models.functions import TruncDay, TruncMonth, TruncWeek
from django.utils import timezone

from analytics.services.exceptions import InvalidPeriodError
from analytics.services.formatting import money as _money, rate as _rate
from payments.models import Payment

PERIOD_TODAY = "today"
PERIOD_WEEK = "week"
PERIOD_MONTH = "month"
PERIOD_QUARTER = "quarter"
PERIOD_YEAR = "year"

PERIODS = (PERIOD_TODAY, PERIOD_WEEK, PERIOD_MONTH, PERIOD_QUARTER, PERIOD_YEAR)
DEFAULT_PERIOD = PERIOD_MONTH

TREND_GROUPINGS = {
    "daily": TruncDay,
    "weekly": TruncWeek,
    "monthly": TruncMonth,
}

FAILURE_RECOMMENDATIONS = (
    ("insufficient", "Consider payment retry reminders for insufficient funds"),
    ("card", "Offer alternative payment methods for card failures"),
    ("expired", "Prompt customers to update expired cards"),
)
DEFAULT_RECOMMENDATION = "Monitor payment failures and implement targeted solutions"


def _aware(d: date) -> datetime:
    return timezone.make_aware(datetime.combine(d, time.min), timezone.get_current_timezone())


def _parse_date(raw: str | None, *, field: str) -> date | None:
    if not raw:
        return None
    try:
        return datetime.strptime(raw, "%Y-%m-%d").date()
    except ValueError:
        raise InvalidPeriodError(f"Invalid {field}. Use YYYY-MM-DD.")


def period_bounds(period: str | None = None, *, today: date | None = None) -> tuple[datetime, datetime]:
    period = (period or DEFAULT_PERIOD).strip().lower()
    if period not in PERIODS:
        raise InvalidPeriodError(f"Unknown period '{period}'. Use one of: {', '.join(PERIODS)}")

    today = today or timezone.localdate()

    if period == PERIOD_TODAY:
        start = today
        end = today + timedelta(days=1)
    elif period == PERIOD_WEEK:
        start = today - timedelta(days=today.weekday())
        end = start + timedelta(days=7)
    elif period == PERIOD_MONTH:
        start = today.replace(day=1)
        end = (start + timedelta(days=32)).replace(day=1)
    elif period == PERIOD_QUARTER:
        first_month = 3 * ((today.month - 1) // 3) + 1
        start = today.replace(month=first_month, day=1)
        end = (start + timedelta(days=95)).replace(day=1)
    else:
        start = today.replace(month=1, day=1)
        end = start.replace(year=start.year + 1)

    return _aware(start), _aware(end)


def resolve_range(*, period=None, from_date=None, to_date=None) -> tuple[datetime, datetime]:
    """
    from_date/to_date win over period. A single side is treated as a
    one-day range.
    """
    start_d = _parse_date(from_date, field="from_date")
    end_d = _parse_date(to_date, field="to_date")

    if not start_d and not end_d:
        return period_bounds(period)

    start_d = start_d or end_d
    end_d = end_d or start_d
    if end_d < start_d:
        raise InvalidPeriodError("to_date must be on or after from_date")

    return _aware(start_d), _aware(end_d + timedelta(days=1))


def _range_payload(start, end) -> dict:
    return {"from": start.isoformat(), "to": end.isoformat()}


# ============================================================
# DASHBOARD
# ============================================================


def payment_dashboard(start: datetime, end: datetime) -> dict:
    attempts = Payment.objects.filter(created_at__gte=start, created_at__lt=end)
    counts = attempts.aggregate(
        total=Count("id"),
        succeeded=Count("id", filter=Q(status__in=[Payment.STATUS_SUCCEEDED, Payment.STATUS_REFUNDED])),
        failed=Count("id", filter=Q(status=Payment.STATUS_FAILED)),
        pending=Count("id", filter=Q(status=Payment.STATUS_PENDING)),
        canceled=Count("id", filter=Q(status=Payment.STATUS_CANCELED)),
    )

    paid = Payment.objects.filter(
        status=Payment.STATUS_SUCCEEDED,
        paid_at__gte=start,
        paid_at__lt=end,
    )
    revenue = paid.aggregate(total=Sum("amount"), count=Count("id"), refunded=Sum("refund_amount"))
    by_type = paid.values("payment_type").annotate(revenue=Sum("amount"), count=Count("id")).order_by("payment_type")

    gross = revenue["total"] or Decimal("0.00")
    partial_refunds = revenue["refunded"] or Decimal("0.00")
    count = revenue["count"] or 0

    return {
        "total_revenue": _money(gross),
        "net_revenue": _money(gross - partial_refunds),
        "total_transactions": counts["total"] or 0,
        "successful_transactions": counts["succeeded"] or 0,
        "failed_transactions": counts["failed"] or 0,
        "pending_transactions": counts["pending"] or 0,
        "canceled_transactions": counts["canceled"] or 0,
        "success_rate": _rate(counts["succeeded"] or 0, counts["total"] or 0),
        "failure_rate": _rate(counts["failed"] or 0, counts["total"] or 0),
        "average_transaction_value": _money(gross / count if count else 0),
        "revenue_by_type": {
            row["payment_type"]: {"revenue": _money(row["revenue"]), "count": row["count"]}
            for row in by_type
        },
        "date_range": _range_payload(start, end),
    }


# ============================================================
# TRENDS
# ============================================================


def revenue_trends(start: datetime, end: datetime, *, grouping: str = "daily") -> list[dict]:
    trunc = TREND_GROUPINGS.get(grouping)
    if trunc is None:
        raise InvalidPeriodError(f"Unknown grouping '{grouping}'. Use daily, weekly or monthly.")

    rows = (
        Payment.objects.filter(status=Payment.STATUS_SUCCEEDED, paid_at__gte=start, paid_at__lt=end)
        .annotate(bucket=trunc("paid_at"))
        .values("bucket")
        .annotate(revenue=Sum("amount"), transactions=Count("id"))
        .order_by("bucket")
    )

    return [
        {
            "date": timezone.localtime(row["bucket"]).date().isoformat() if row["bucket"] else None,
            "revenue": _money(row["revenue"]),
            "transactions": row["transactions"],
        }
        for row in rows
    ]


# ============================================================
# FAILURES
# ============================================================


def failure_recommendations(reasons) -> list[str]:
    out = []
    for reason in reasons:
        lowered = (reason or "").lower()
        for needle, advice in FAILURE_RECOMMENDATIONS:
            if needle in lowered and advice not in out:
                out.append(advice)
                break

    return out or [DEFAULT_RECOMMENDATION]


def failed_payment_analysis(start: datetime, end: datetime) -> dict:
    failed = Payment.objects.filter(
        status=Payment.STATUS_FAILED,
        created_at__gte=start,
        created_at__lt=end,
    )
    totals = failed.aggregate(count=Count("id"), amount=Sum("amount"))
    rows = failed.values("failure_reason").annotate(count=Count("id"), amount=Sum("amount")).order_by("-count")

    reasons = {}
    for row in rows:
        key = row["failure_reason"] or "unknown"
        bucket = reasons.setdefault(key, {"count": 0, "total_amount": Decimal("0.00")})
        bucket["count"] += row["count"]
        bucket["total_amount"] += row["amount"] or Decimal("0.00")

    return {
        "failed_payments": {
            "total_count": totals["count"] or 0,
            "total_amount": _money(totals["amount"]),
            "failure_reasons": {
                key: {"count": v["count"], "total_amount": _money(v["total_amount"])}
                for key, v in reasons.items()
            },
        },
        "recommendations": failure_recommendations(reasons.keys()),
        "date_range": _range_payload(start, end),
    }


# ============================================================
# REFUNDS
# ============================================================


def refund_analytics(start: datetime, end: datetime) -> dict:
    refunded = Payment.objects.filter(
        refund_amount__gt=0,
        refunded_at__gte=start,
        refunded_at__lt=end,
    )
    totals = refunded.aggregate(count=Count("id"), amount=Sum("refund_amount"))
    revenue = Payment.objects.filter(
        status__in=[Payment.STATUS_SUCCEEDED, Payment.STATUS_REFUNDED],
        paid_at__gte=start,
        paid_at__lt=end,
    ).aggregate(total=Sum("amount"))["total"]

    by_type = refunded.values("payment_type").annotate(count=Count("id"), amount=Sum("refund_amount")).order_by("payment_type")

    return {
        "refunds": {
            "total_count": totals["count"] or 0,
            "total_amount": _money(totals["amount"]),
            "full_refunds": refunded.filter(status=Payment.STATUS_REFUNDED).count(),
            "refund_rate": _rate(totals["amount"] or 0, revenue or 0),
            "by_payment_type": {
                row["payment_type"]: {"count": row["count"], "amount": _money(row["amount"])}
                for row in by_type
            },
        },
        "date_range": _range_payload(start, end),
    }
