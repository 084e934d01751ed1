# analytics/tests/test_payments.py

from __future__ import annotations

from datetime import date
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from analytics.services.exceptions import InvalidPeriodError
from analytics.services.payments import failure_recommendations, period_bounds, resolve_range
from analytics.tests.test_platform import paid
from comics.tests.factories import make_comic, make_user
from payments.models import Payment


class PeriodBoundsTests(TestCase):
    def test_week_starts_monday(self):
        start, end = period_bounds("week", today=date(2026, 3, 12))  # Thursday
        self.assertEqual(timezone.localtime(start).date(), date(2026, 3, 9))
        self.assertEqual(timezone.localtime(end).date(), date(2026, 3, 16))

    def test_month_and_quarter(self):
        start, end = period_bounds("month", today=date(2026, 2, 14))
        self.assertEqual((timezone.localtime(start).date(), timezone.localtime(end).date()), (date(2026, 2, 1), date(2026, 3, 1)))

        start, end = period_bounds("quarter", today=date(2026, 8, 20))
        self.assertEqual(timezone.localtime(start).date(), date(2026, 7, 1))
        self.assertEqual(timezone.localtime(end).date(), date(2026, 10, 1))

    def test_year(self):
        start, end = period_bounds("year", today=date(2026, 8, 20))
        self.assertEqual(timezone.localtime(start).date(), date(2026, 1, 1))
        self.assertEqual(timezone.localtime(end).date(), date(2027, 1, 1))

    def test_unknown_period(self):
        with self.assertRaises(InvalidPeriodError):
            period_bounds("decade")

    def test_explicit_range_is_inclusive(self):
        start, end = resolve_range(period="year", from_date="2026-01-05", to_date="2026-01-07")
        self.assertEqual(timezone.localtime(start).date(), date(2026, 1, 5))
        self.assertEqual(timezone.localtime(end).date(), date(2026, 1, 8))

    def test_bad_ranges(self):
        with self.assertRaises(InvalidPeriodError):
            resolve_range(from_date="05/01/2026")
        with self.assertRaises(InvalidPeriodError):
            resolve_range(from_date="2026-01-07", to_date="2026-01-05")


class FailureRecommendationTests(TestCase):
    def test_known_reasons(self):
        advice = failure_recommendations(["Your card has insufficient funds.", "card_declined", "insufficient_funds"])
        self.assertEqual(
            advice,
            [
                "Consider payment retry reminders for insufficient funds",
                "Offer alternative payment methods for card failures",
            ],
        )

    def test_fallback(self):
        self.assertEqual(
            failure_recommendations(["processing_error"]),
            ["Monitor payment failures and implement targeted solutions"],
        )


class PaymentAnalyticsEndpointTests(TestCase):
    """
    GUARANTEES:
    - payments.view capability required
    - dashboard rates are computed over attempts in the window
    - refunds are reported from refund_amount / refunded_at
    """

    def setUp(self):
        self.client = APIClient()
        self.client.force_authenticate(make_user("admin@example.com", role="admin"))

        self.reader = make_user()
        comic = make_comic("Alpha", price="4.00")
        paid(self.reader, intent="pi_1", amount="4.00", comic=comic)
        refunded = paid(self.reader, intent="pi_2", amount="6.00", payment_type=Payment.TYPE_SUBSCRIPTION)
        refunded.refund_amount = Decimal("1.00")
        refunded.refunded_at = timezone.now()
        refunded.save()
        Payment.objects.create(
            user=self.reader,
            stripe_payment_intent_id="pi_3",
            amount=Decimal("4.00"),
            status=Payment.STATUS_FAILED,
            failure_reason="Your card has insufficient funds.",
        )
        Payment.objects.create(user=self.reader, stripe_payment_intent_id="pi_4", amount=Decimal("4.00"))

    def test_reader_is_forbidden(self):
        self.client.force_authenticate(self.reader)
        res = self.client.get(reverse("payment-analytics:dashboard"))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_dashboard(self):
        res = self.client.get(reverse("payment-analytics:dashboard"), {"period": "today"})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        data = res.data["analytics"]
        self.assertEqual(res.data["period"], "today")
        self.assertEqual(data["total_revenue"], "10.00")
        self.assertEqual(data["net_revenue"], "9.00")
        self.assertEqual(data["total_transactions"], 4)
        self.assertEqual(data["success_rate"], 50.0)
        self.assertEqual(data["failure_rate"], 25.0)
        self.assertEqual(data["average_transaction_value"], "5.00")

    def test_dashboard_bad_period(self):
        res = self.client.get(reverse("payment-analytics:dashboard"), {"period": "decade"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_trends(self):
        res = self.client.get(reverse("payment-analytics:trends"), {"period": "today", "grouping": "daily"})

        self.assertEqual(len(res.data["trends"]), 1)
        self.assertEqual(res.data["trends"][0]["revenue"], "10.00")
        self.assertEqual(res.data["trends"][0]["transactions"], 2)

    def test_trends_bad_grouping(self):
        res = self.client.get(reverse("payment-analytics:trends"), {"grouping": "hourly"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_failed_analysis(self):
        res = self.client.get(reverse("payment-analytics:failed"), {"period": "today"})

        failed = res.data["failed_payments"]
        self.assertEqual(failed["total_count"], 1)
        self.assertEqual(failed["failure_reasons"]["Your card has insufficient funds."]["total_amount"], "4.00")
        self.assertIn("Consider payment retry reminders for insufficient funds", res.data["recommendations"])

    def test_refunds(self):
        res = self.client.get(reverse("payment-analytics:refunds"), {"period": "today"})

        refunds = res.data["refunds"]
        self.assertEqual(refunds["total_count"], 1)
        self.assertEqual(refunds["total_amount"], "1.00")
        self.assertEqual(refunds["full_refunds"], 0)
        self.assertEqual(refunds["refund_rate"], 10.0)
