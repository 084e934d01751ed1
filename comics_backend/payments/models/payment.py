# payments/models/payment.py

"""
======================================================
PATH: payments/models/payment.py
======================================================
PAYMENT (Stripe PaymentIntent mirror)

Idempotency rule:
- stripe_payment_intent_id is unique. Confirmation + webhook processing
  look payments up by it under select_for_update, so duplicate deliveries
  cannot grant access twice.

Money:
- amount / refund_amount are decimal currency units (not cents).
"""

from __future__ import annotations

import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

MAX_RETRIES = 3


class Payment(models.Model):
    STATUS_PENDING = "pending"
    STATUS_SUCCEEDED = "succeeded"
    STATUS_FAILED = "failed"
    STATUS_CANCELED = "canceled"
    STATUS_REFUNDED = "refunded"

    STATUS_CHOICES = [
        (STATUS_PENDING, "Pending"),
        (STATUS_SUCCEEDED, "Succeeded"),
        (STATUS_FAILED, "Failed"),
        (STATUS_CANCELED, "Canceled"),
        (STATUS_REFUNDED, "Refunded"),
    ]

    TYPE_SINGLE = "single"
    TYPE_BUNDLE = "bundle"
    TYPE_SUBSCRIPTION = "subscription"

    TYPE_CHOICES = [
        (TYPE_SINGLE, "Single comic"),
        (TYPE_BUNDLE, "Bundle"),
        (TYPE_SUBSCRIPTION, "Subscription"),
    ]

    SUBSCRIPTION_MONTHLY = "monthly"
    SUBSCRIPTION_YEARLY = "yearly"

    SUBSCRIPTION_TYPE_CHOICES = [
        (SUBSCRIPTION_MONTHLY, "Monthly"),
        (SUBSCRIPTION_YEARLY, "Yearly"),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)

    user = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name="payments",
    )
    # null for bundles + subscriptions
    comic = models.ForeignKey(
        "comics.Comic",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="payments",
    )

    stripe_payment_intent_id = models.CharField(max_length=255, unique=True)
    stripe_payment_method_id = models.CharField(max_length=255, blank=True, default="")

    amount = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.00"))],
    )
    refund_amount = models.DecimalField(max_digits=10, decimal_places=2, default=Decimal("0.00"))
    currency = models.CharField(max_length=3, default="usd")

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    payment_type = models.CharField(max_length=20, choices=TYPE_CHOICES, default=TYPE_SINGLE)
    subscription_type = models.CharField(
        max_length=20,
        choices=SUBSCRIPTION_TYPE_CHOICES,
        null=True,
        blank=True,
    )

    # bundles: [{"comic_id": "...", "price": "4.50"}, ...] (allocated, discounted)
    comic_ids = models.JSONField(default=list, blank=True)
    metadata = models.JSONField(default=dict, blank=True)

    paid_at = models.DateTimeField(null=True, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)
    failure_reason = models.TextField(blank=True, default="")
    retry_count = models.PositiveSmallIntegerField(default=0)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["user", "status"], name="payments_user_status_idx"),
            models.Index(fields=["status", "paid_at"], name="payments_status_paid_idx"),
            models.Index(fields=["payment_type"], name="payments_type_idx"),
            models.Index(fields=["created_at"], name="payments_created_idx"),
        ]

    def __str__(self):
        return f"Payment<{self.stripe_payment_intent_id} {self.status} {self.amount}>"

    def can_be_retried(self) -> bool:
        return self.status == self.STATUS_FAILED and self.retry_count < MAX_RETRIES

    def can_be_refunded(self) -> bool:
        return self.status == self.STATUS_SUCCEEDED and self.refund_amount < self.amount

    def bundle_comic_ids(self) -> list[str]:
        return [str(row.get("comic_id")) for row in (self.comic_ids or []) if row.get("comic_id")]
