# analytics/tests/test_platform.py

from __future__ import annotations

import csv
import io
import json
import shutil
import tempfile
from decimal import Decimal
from pathlib import Path

from django.core.management import call_command
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from analytics.services.platform import comic_sales, conversion_analytics, platform_metrics, revenue_analytics
from comics.models import ComicView
from comics.tests.factories import make_comic, make_user
from library.models import UserComicProgress
from payments.models import Payment


def paid(user, *, intent, amount, comic=None, payment_type=Payment.TYPE_SINGLE, comic_ids=None):
    return Payment.objects.create(
        user=user,
        comic=comic,
        stripe_payment_intent_id=intent,
        amount=Decimal(amount),
        payment_type=payment_type,
        comic_ids=comic_ids or [],
        status=Payment.STATUS_SUCCEEDED,
        paid_at=timezone.now(),
    )


class PlatformAnalyticsTests(TestCase):
    """
    GUARANTEES:
    - only succeeded payments count as revenue
    - bundle revenue is split across comics by allocated share
    """

    def setUp(self):
        self.reader = make_user()
        self.alpha = make_comic("Alpha", price="4.00")
        self.beta = make_comic("Beta", price="2.00")

        paid(self.reader, intent="pi_a", amount="4.00", comic=self.alpha)
        paid(
            self.reader,
            intent="pi_bundle",
            amount="5.40",
            payment_type=Payment.TYPE_BUNDLE,
            comic_ids=[
                {"comic_id": str(self.alpha.id), "price": "3.60"},
                {"comic_id": str(self.beta.id), "price": "1.80"},
            ],
        )
        Payment.objects.create(
            user=self.reader,
            comic=self.beta,
            stripe_payment_intent_id="pi_failed",
            amount=Decimal("2.00"),
            status=Payment.STATUS_FAILED,
        )

    def test_comic_sales_attributes_bundle_shares(self):
        sales = comic_sales(None)

        self.assertEqual(sales[str(self.alpha.id)], {"revenue": Decimal("7.60"), "purchases": 2})
        self.assertEqual(sales[str(self.beta.id)], {"revenue": Decimal("1.80"), "purchases": 1})

    def test_platform_metrics(self):
        ComicView.objects.create(comic=self.alpha, ip_address="10.0.0.1", viewed_at=timezone.now())
        UserComicProgress.objects.create(user=self.reader, comic=self.alpha, last_read_at=timezone.now())

        metrics = platform_metrics(30)

        self.assertEqual(metrics["total_revenue"], "9.40")
        self.assertEqual(metrics["total_purchases"], 2)
        self.assertEqual(metrics["total_comics"], 2)
        self.assertEqual(metrics["views_period"], 1)
        self.assertEqual(metrics["active_readers"], 1)

    def test_revenue_analytics(self):
        data = revenue_analytics(30)

        self.assertEqual(data["average_transaction_value"], "4.70")
        self.assertEqual(data["top_earning_comics"][0]["slug"], self.alpha.slug)
        self.assertEqual(data["top_earning_comics"][0]["revenue"], "7.60")
        self.assertEqual(data["revenue_by_type"]["bundle"], {"revenue": "5.40", "transactions": 1})

    def test_conversion_skips_comics_without_views(self):
        for n in range(4):
            ComicView.objects.create(comic=self.alpha, ip_address=f"10.0.0.{n}", viewed_at=timezone.now())

        data = conversion_analytics(30)

        self.assertEqual([row["slug"] for row in data["comics"]], [self.alpha.slug])
        self.assertEqual(data["comics"][0]["conversion_rate"], 50.0)
        self.assertEqual(data["total_purchases"], 3)


class AnalyticsEndpointTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = make_user("admin@example.com", role="admin")
        self.client.force_authenticate(self.admin)

    def test_reader_is_forbidden(self):
        self.client.force_authenticate(make_user())
        res = self.client.get(reverse("analytics:platform"))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_days_window(self):
        res = self.client.get(reverse("analytics:platform"), {"days": 7})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["period_days"], 7)
        self.assertIn("total_users", res.data["data"])

    def test_days_out_of_range(self):
        for raw in ("0", "400", "abc"):
            res = self.client.get(reverse("analytics:platform"), {"days": raw})
            self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_comprehensive_report_sections(self):
        res = self.client.get(reverse("analytics:report"))
        self.assertEqual(
            set(res.data["data"]),
            {
                "summary",
                "revenue_analytics",
                "user_engagement",
                "comic_performance",
                "conversion_metrics",
                "realtime_metrics",
            },
        )

    def test_realtime_counts_recent_readers(self):
        UserComicProgress.objects.create(user=self.admin, comic=make_comic(), last_read_at=timezone.now())
        res = self.client.get(reverse("analytics:realtime"))

        self.assertEqual(res.data["data"]["active_readers"], 1)
        self.assertEqual(res.data["data"]["online_users"], 1)

    def test_csv_export(self):
        res = self.client.get(reverse("analytics:export"), {"file_format": "csv"})

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res["Content-Type"], "text/csv")
        self.assertIn('attachment; filename="analytics_report_', res["Content-Disposition"])

        rows = list(csv.reader(io.StringIO(res.content.decode("utf-8"))))
        self.assertEqual(rows[0], ["Section", "Metric", "Value", "Date"])
        self.assertIn("Total Users", [row[1] for row in rows if row[0] == "Platform"])

    def test_json_export(self):
        res = self.client.get(reverse("analytics:export"), {"file_format": "json"})
        self.assertIn("summary", json.loads(res.content))

    def test_unknown_export_format(self):
        res = self.client.get(reverse("analytics:export"), {"file_format": "xlsx"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)


class ExportCommandTests(TestCase):
    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.tmp, ignore_errors=True)

    def test_writes_report_to_configured_directory(self):
        out = io.StringIO()
        with override_settings(ANALYTICS_EXPORT_DIR=self.tmp):
            call_command("export_analytics", "--format", "json", "--filename", "report.json", stdout=out)

        path = Path(self.tmp) / "report.json"
        self.assertTrue(path.exists())
        self.assertIn("platform_metrics", json.loads(path.read_text())["summary"])
        self.assertIn(str(path), out.getvalue())
