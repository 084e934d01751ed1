# payments/tests/test_webhooks.py

from __future__ import annotations

import json
import time
from datetime import timedelta
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from comics.tests.factories import make_comic, make_user
from library.models import UserLibrary
from payments.models import Payment
from payments.services.access import add_months
from payments.services.stripe_client import compute_signature, verify_stripe_signature

User = get_user_model()

WEBHOOK_SECRET = "whsec_test_secret"
STRIPE_SETTINGS = {
    "STRIPE": {
        "SECRET_KEY": "sk_test",
        "PUBLISHABLE_KEY": "pk_test",
        "WEBHOOK_SECRET": WEBHOOK_SECRET,
        "CURRENCY": "usd",
    }
}


def signed_headers(body: bytes, *, secret: str = WEBHOOK_SECRET, timestamp: int | None = None) -> dict:
    timestamp = int(time.time()) if timestamp is None else timestamp
    signature = compute_signature(payload=body, timestamp=timestamp, secret=secret)
    return {"HTTP_STRIPE_SIGNATURE": f"t={timestamp},v1={signature}"}


def intent_event(event_type: str, intent_id: str, **intent) -> bytes:
    return json.dumps(
        {
            "id": f"evt_{intent_id}",
            "type": event_type,
            "data": {"object": {"id": intent_id, **intent}},
        }
    ).encode("utf-8")


class SignatureTests(TestCase):
    def test_valid_signature(self):
        body = b'{"id": "evt_1"}'
        ts = int(time.time())
        header = f"t={ts},v1={compute_signature(payload=body, timestamp=ts, secret='s')}"
        self.assertTrue(verify_stripe_signature(raw_body=body, signature=header, secret="s"))

    def test_tampered_body_fails(self):
        ts = int(time.time())
        header = f"t={ts},v1={compute_signature(payload=b'original', timestamp=ts, secret='s')}"
        self.assertFalse(verify_stripe_signature(raw_body=b"tampered", signature=header, secret="s"))

    def test_stale_timestamp_fails(self):
        body = b"{}"
        ts = int(time.time()) - 3600
        header = f"t={ts},v1={compute_signature(payload=body, timestamp=ts, secret='s')}"
        self.assertFalse(verify_stripe_signature(raw_body=body, signature=header, secret="s"))

    def test_missing_secret_fails(self):
        self.assertFalse(verify_stripe_signature(raw_body=b"{}", signature="t=1,v1=abc", secret=""))


@override_settings(PAYMENTS=STRIPE_SETTINGS)
class StripeWebhookTests(TestCase):
    """
    GUARANTEES:
    - unsigned / badly signed requests are rejected with 400
    - payment_intent.succeeded grants access exactly once
    - subscriptions stack on top of an unexpired subscription
    """

    def setUp(self):
        self.client = APIClient()
        self.url = reverse("payments:stripe-webhook")
        self.user = make_user()
        self.comic = make_comic("Hollow Hill", price="3.99")
        self.payment = Payment.objects.create(
            user=self.user,
            comic=self.comic,
            stripe_payment_intent_id="pi_hook",
            amount=Decimal("3.99"),
            payment_type=Payment.TYPE_SINGLE,
        )

    def post_event(self, body: bytes, **headers):
        return self.client.generic("POST", self.url, body, content_type="application/json", **headers)

    def test_bad_signature_is_400(self):
        body = intent_event("payment_intent.succeeded", "pi_hook")
        res = self.post_event(body, **signed_headers(body, secret="wrong"))

        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.STATUS_PENDING)

    def test_missing_signature_is_400(self):
        res = self.post_event(intent_event("payment_intent.succeeded", "pi_hook"))
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_succeeded_event_is_idempotent(self):
        body = intent_event("payment_intent.succeeded", "pi_hook", payment_method="pm_1")

        first = self.post_event(body, **signed_headers(body))
        second = self.post_event(body, **signed_headers(body))

        self.assertEqual(first.data["detail"], "processed")
        self.assertEqual(second.data["detail"], "duplicate")

        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.STATUS_SUCCEEDED)
        self.assertEqual(UserLibrary.objects.filter(user=self.user, comic=self.comic).count(), 1)

    def test_failed_then_succeeded(self):
        failed = intent_event(
            "payment_intent.payment_failed",
            "pi_hook",
            last_payment_error={"message": "Your card was declined."},
        )
        self.post_event(failed, **signed_headers(failed))
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.STATUS_FAILED)
        self.assertEqual(self.payment.failure_reason, "Your card was declined.")

        succeeded = intent_event("payment_intent.succeeded", "pi_hook")
        res = self.post_event(succeeded, **signed_headers(succeeded))

        self.assertEqual(res.data["detail"], "processed")
        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.STATUS_SUCCEEDED)
        self.assertEqual(self.payment.failure_reason, "")

    def test_canceled_event(self):
        body = intent_event("payment_intent.canceled", "pi_hook")
        self.post_event(body, **signed_headers(body))

        self.payment.refresh_from_db()
        self.assertEqual(self.payment.status, Payment.STATUS_CANCELED)

    def test_unknown_intent_and_event_type_are_acknowledged(self):
        unknown = intent_event("payment_intent.succeeded", "pi_missing")
        res = self.post_event(unknown, **signed_headers(unknown))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["detail"], "unknown_payment")

        other = intent_event("customer.created", "cus_1")
        res = self.post_event(other, **signed_headers(other))
        self.assertEqual(res.data["detail"], "ignored")

    def test_bundle_success_grants_every_comic(self):
        second = make_comic("Beta", price="2.00")
        bundle = Payment.objects.create(
            user=self.user,
            stripe_payment_intent_id="pi_bundle",
            amount=Decimal("5.39"),
            payment_type=Payment.TYPE_BUNDLE,
            comic_ids=[
                {"comic_id": str(self.comic.id), "price": "3.59"},
                {"comic_id": str(second.id), "price": "1.80"},
            ],
        )
        body = intent_event("payment_intent.succeeded", bundle.stripe_payment_intent_id)
        self.post_event(body, **signed_headers(body))

        prices = dict(
            UserLibrary.objects.filter(user=self.user).values_list("comic_id", "purchase_price")
        )
        self.assertEqual(prices, {self.comic.id: Decimal("3.59"), second.id: Decimal("1.80")})

    def test_subscription_stacks_on_active_subscription(self):
        current_expiry = timezone.now() + timedelta(days=10)
        self.user.subscription_status = User.SUBSCRIPTION_ACTIVE
        self.user.subscription_expires_at = current_expiry
        self.user.save()

        Payment.objects.create(
            user=self.user,
            stripe_payment_intent_id="pi_sub",
            amount=Decimal("9.99"),
            payment_type=Payment.TYPE_SUBSCRIPTION,
            subscription_type=Payment.SUBSCRIPTION_MONTHLY,
        )
        body = intent_event("payment_intent.succeeded", "pi_sub")
        self.post_event(body, **signed_headers(body))

        self.user.refresh_from_db()
        self.assertEqual(self.user.subscription_type, "monthly")
        self.assertEqual(self.user.subscription_expires_at, add_months(current_expiry, 1))
        self.assertTrue(self.user.has_access_to_comic(self.comic))


class AddMonthsTests(TestCase):
    def test_end_of_month_is_clamped(self):
        jan_31 = timezone.now().replace(year=2026, month=1, day=31)
        self.assertEqual(add_months(jan_31, 1).day, 28)
        self.assertEqual(add_months(jan_31, 12).year, 2027)
