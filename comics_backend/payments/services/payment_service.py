# payments/services/payment_service.py

"""
======================================================
PATH: payments/services/payment_service.py
======================================================
PAYMENT SERVICE (Stripe PaymentIntents)

Checkout flow:
1) create_*_intent -> Stripe PaymentIntent + pending Payment, client_secret
   goes back to the browser (Stripe.js confirms the card)
2) confirm_payment (client) and/or the webhook (Stripe) move the Payment to
   succeeded and call grant_access. Both paths lock the row, so the second
   one is a no-op.

Refunds:
- full refund  -> status refunded + access revoked
- partial      -> refund_amount grows, status stays succeeded
"""

from __future__ import annotations

import logging
import uuid
from decimal import ROUND_HALF_UP, Decimal

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from comics.models import Comic
from payments.models import Payment
from payments.services import stripe_client
from payments.services.access import grant_access, revoke_access
from payments.services.exceptions import (
    InvalidBundleError,
    PaymentNotAllowedError,
    PaymentNotFoundError,
    PaymentStateError,
)
from payments.services.lifecycle import validate_transition

logger = logging.getLogger(__name__)

TWOPLACES = Decimal("0.01")
MIN_BUNDLE_SIZE = 2

# Stripe intent states in which the existing client_secret is still usable.
REUSABLE_INTENT_STATES = {"requires_payment_method", "requires_confirmation", "requires_action"}


def _money(value) -> Decimal:
    return Decimal(str(value or "0")).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def subscription_price(subscription_type: str) -> Decimal:
    prices = getattr(settings, "SUBSCRIPTION_PRICES", {}) or {}
    if subscription_type not in prices:
        raise PaymentNotAllowedError(f"Unknown subscription type: {subscription_type}")
    return _money(prices[subscription_type])


def default_bundle_discount() -> Decimal:
    return Decimal(str(getattr(settings, "BUNDLE_DISCOUNT_PERCENT", "10") or "0"))


def _intent_payload(payment: Payment, intent: dict) -> dict:
    return {
        "payment": payment,
        "client_secret": intent.get("client_secret"),
        "payment_intent_id": payment.stripe_payment_intent_id,
        "publishable_key": (settings.PAYMENTS.get("STRIPE") or {}).get("PUBLISHABLE_KEY", ""),
    }


def _create_payment(*, user, amount: Decimal, payment_type: str, description: str, metadata: dict, **fields):
    currency = stripe_client.default_currency()
    intent = stripe_client.create_payment_intent(
        amount=amount,
        currency=currency,
        description=description,
        metadata={"user_id": str(user.id), "payment_type": payment_type, **metadata},
    )
    payment = Payment.objects.create(
        user=user,
        stripe_payment_intent_id=intent["id"],
        amount=amount,
        currency=currency,
        payment_type=payment_type,
        status=Payment.STATUS_PENDING,
        metadata=metadata,
        **fields,
    )
    logger.info(
        "Payment intent created",
        extra={
            "payment_id": str(payment.id),
            "intent_id": payment.stripe_payment_intent_id,
            "payment_type": payment_type,
            "amount": str(amount),
        },
    )
    return payment, intent


# ============================================================
# INTENTS
# ============================================================


def create_single_intent(*, user, comic: Comic) -> dict:
    if comic.is_free:
        raise PaymentNotAllowedError("This comic is free")
    if user.has_access_to_comic(comic):
        raise PaymentNotAllowedError("You already have access to this comic")

    existing = Payment.objects.filter(
        user=user,
        comic=comic,
        payment_type=Payment.TYPE_SINGLE,
        status=Payment.STATUS_PENDING,
    ).first()
    if existing:
        intent = stripe_client.retrieve_payment_intent(existing.stripe_payment_intent_id)
        if intent.get("status") in REUSABLE_INTENT_STATES:
            return _intent_payload(existing, intent)

    payment, intent = _create_payment(
        user=user,
        amount=_money(comic.price),
        payment_type=Payment.TYPE_SINGLE,
        description=f"Purchase of {comic.title}",
        metadata={"comic_id": str(comic.id), "comic_title": comic.title},
        comic=comic,
    )
    return _intent_payload(payment, intent)


def allocate_bundle(prices: list[Decimal], total: Decimal) -> list[Decimal]:
    """Split total proportionally to prices; the last share absorbs rounding."""
    subtotal = sum(prices, Decimal("0"))
    if subtotal <= 0:
        return [Decimal("0.00") for _ in prices]

    shares = [_money(price / subtotal * total) for price in prices[:-1]]
    shares.append(_money(total - sum(shares, Decimal("0"))))
    return shares


def create_bundle_intent(*, user, comic_ids, discount_percent=None) -> dict:
    discount = Decimal(str(discount_percent)) if discount_percent is not None else default_bundle_discount()
    if discount < 0 or discount >= 100:
        raise InvalidBundleError("discount_percent must be between 0 and 100")

    candidates = Comic.objects.visible().paid().filter(pk__in=list(comic_ids or [])).order_by("title")
    comics = [c for c in candidates if not user.has_access_to_comic(c)]
    if len(comics) < MIN_BUNDLE_SIZE:
        raise InvalidBundleError(
            f"A bundle needs at least {MIN_BUNDLE_SIZE} paid comics you do not own yet"
        )

    prices = [_money(c.price) for c in comics]
    subtotal = sum(prices, Decimal("0.00"))
    total = _money(subtotal * (Decimal("100") - discount) / Decimal("100"))
    shares = allocate_bundle(prices, total)

    rows = [{"comic_id": str(c.id), "price": f"{share:.2f}"} for c, share in zip(comics, shares)]

    payment, intent = _create_payment(
        user=user,
        amount=total,
        payment_type=Payment.TYPE_BUNDLE,
        description=f"Bundle purchase of {len(comics)} comics",
        metadata={
            "original_amount": f"{subtotal:.2f}",
            "discount_percent": str(discount),
            "comic_count": str(len(comics)),
        },
        comic_ids=rows,
    )
    result = _intent_payload(payment, intent)
    result.update({"original_amount": subtotal, "discount_percent": discount, "comics": comics})
    return result


def create_subscription_intent(*, user, subscription_type: str) -> dict:
    amount = subscription_price(subscription_type)
    payment, intent = _create_payment(
        user=user,
        amount=amount,
        payment_type=Payment.TYPE_SUBSCRIPTION,
        description=f"{subscription_type.capitalize()} subscription",
        metadata={"subscription_type": subscription_type},
        subscription_type=subscription_type,
    )
    return _intent_payload(payment, intent)


# ============================================================
# STATE CHANGES (caller holds the row lock)
# ============================================================


def mark_succeeded(payment: Payment, *, payment_method_id: str = "") -> bool:
    """Returns False when the payment was already succeeded (duplicate delivery)."""
    if payment.status == Payment.STATUS_SUCCEEDED:
        return False

    # Stripe lets a failed intent succeed with a new payment method.
    if payment.status == Payment.STATUS_FAILED:
        validate_transition(payment=payment, target_status=Payment.STATUS_PENDING)
        payment.status = Payment.STATUS_PENDING

    validate_transition(payment=payment, target_status=Payment.STATUS_SUCCEEDED)
    payment.status = Payment.STATUS_SUCCEEDED
    payment.paid_at = timezone.now()
    payment.failure_reason = ""
    if payment_method_id:
        payment.stripe_payment_method_id = payment_method_id
    payment.save(update_fields=["status", "paid_at", "failure_reason", "stripe_payment_method_id", "updated_at"])

    grant_access(payment)
    logger.info("Payment succeeded", extra={"payment_id": str(payment.id), "intent_id": payment.stripe_payment_intent_id})
    return True


def mark_failed(payment: Payment, *, reason: str) -> bool:
    reason = (reason or "Payment failed").strip()
    if payment.status == Payment.STATUS_FAILED:
        payment.failure_reason = reason
        payment.save(update_fields=["failure_reason", "updated_at"])
        return False

    validate_transition(payment=payment, target_status=Payment.STATUS_FAILED)
    payment.status = Payment.STATUS_FAILED
    payment.failure_reason = reason
    payment.save(update_fields=["status", "failure_reason", "updated_at"])
    logger.warning("Payment failed", extra={"payment_id": str(payment.id), "reason": reason})
    return True


def mark_canceled(payment: Payment) -> bool:
    if payment.status == Payment.STATUS_CANCELED:
        return False
    validate_transition(payment=payment, target_status=Payment.STATUS_CANCELED)
    payment.status = Payment.STATUS_CANCELED
    payment.save(update_fields=["status", "updated_at"])
    return True


def _last_error_message(intent: dict) -> str:
    error = intent.get("last_payment_error") or {}
    return error.get("message") or ""


# ============================================================
# CONFIRM / REFUND / RETRY
# ============================================================


@transaction.atomic
def confirm_payment(*, user, payment_intent_id: str) -> Payment:
    payment = (
        Payment.objects.select_for_update()
        .filter(user=user, stripe_payment_intent_id=payment_intent_id)
        .first()
    )
    if payment is None:
        raise PaymentNotFoundError("Payment not found")

    intent = stripe_client.retrieve_payment_intent(payment_intent_id)
    intent_status = intent.get("status")

    if intent_status == "succeeded":
        if payment.status in (Payment.STATUS_PENDING, Payment.STATUS_FAILED):
            mark_succeeded(payment, payment_method_id=intent.get("payment_method") or "")
    elif intent_status == "canceled":
        if payment.status == Payment.STATUS_PENDING:
            mark_canceled(payment)
    elif _last_error_message(intent) and payment.status == Payment.STATUS_PENDING:
        mark_failed(payment, reason=_last_error_message(intent))

    return payment


@transaction.atomic
def refund_payment(*, payment: Payment, amount=None, reason: str = "") -> Payment:
    payment = Payment.objects.select_for_update().get(pk=payment.pk)
    if not payment.can_be_refunded():
        raise PaymentStateError("Only succeeded payments that are not refunded can be refunded")

    remaining = _money(payment.amount - payment.refund_amount)
    refund = remaining if amount is None else _money(amount)
    if refund <= 0 or refund > remaining:
        raise PaymentStateError(f"Refund amount must be between 0.01 and {remaining:.2f}")

    response = stripe_client.create_refund(
        payment_intent_id=payment.stripe_payment_intent_id,
        amount=refund,
        reason="requested_by_customer",
        metadata={"payment_id": str(payment.id), "reason": (reason or "")[:200]},
    )

    payment.refund_amount = _money(payment.refund_amount + refund)
    refunds = (payment.metadata or {}).get("refunds", [])
    refunds.append({"id": response.get("id"), "amount": f"{refund:.2f}", "reason": reason})
    payment.metadata = {**(payment.metadata or {}), "refunds": refunds}
    payment.refunded_at = timezone.now()
    fields = ["refund_amount", "metadata", "refunded_at", "updated_at"]

    if payment.refund_amount >= payment.amount:
        validate_transition(payment=payment, target_status=Payment.STATUS_REFUNDED)
        payment.status = Payment.STATUS_REFUNDED
        fields.append("status")

    payment.save(update_fields=fields)

    if payment.status == Payment.STATUS_REFUNDED:
        revoke_access(payment)

    logger.info(
        "Payment refunded",
        extra={"payment_id": str(payment.id), "amount": f"{refund:.2f}", "full": payment.status == Payment.STATUS_REFUNDED},
    )
    return payment


@transaction.atomic
def retry_payment(*, payment: Payment) -> dict:
    payment = Payment.objects.select_for_update().get(pk=payment.pk)
    if not payment.can_be_retried():
        raise PaymentStateError("This payment cannot be retried")

    validate_transition(payment=payment, target_status=Payment.STATUS_PENDING)

    intent = stripe_client.create_payment_intent(
        amount=payment.amount,
        currency=payment.currency,
        description=f"Retry of payment {payment.id}",
        metadata={
            "user_id": str(payment.user_id),
            "payment_type": payment.payment_type,
            "retry_of": payment.stripe_payment_intent_id,
        },
    )

    previous = [*(payment.metadata or {}).get("previous_intents", []), payment.stripe_payment_intent_id]
    payment.metadata = {**(payment.metadata or {}), "previous_intents": previous}
    payment.stripe_payment_intent_id = intent["id"]
    payment.retry_count += 1
    payment.status = Payment.STATUS_PENDING
    payment.failure_reason = ""
    payment.save(
        update_fields=["metadata", "stripe_payment_intent_id", "retry_count", "status", "failure_reason", "updated_at"]
    )

    logger.info("Payment retried", extra={"payment_id": str(payment.id), "retry_count": payment.retry_count})
    return _intent_payload(payment, intent)


# ============================================================
# READ MODELS
# ============================================================


def payment_history(user):
    return Payment.objects.filter(user=user).select_related("comic").order_by("-created_at")


def receipt(payment: Payment) -> dict:
    if payment.status != Payment.STATUS_SUCCEEDED:
        raise PaymentStateError("Receipts are only available for succeeded payments")

    if payment.payment_type == Payment.TYPE_SINGLE:
        items = [{"description": payment.comic.title if payment.comic else "Comic", "amount": f"{payment.amount:.2f}"}]
    elif payment.payment_type == Payment.TYPE_BUNDLE:
        titles = dict(
            Comic.objects.filter(pk__in=payment.bundle_comic_ids()).values_list("id", "title")
        )
        items = [
            {"description": titles.get(_as_uuid(row["comic_id"]), "Comic"), "amount": row.get("price")}
            for row in payment.comic_ids or []
        ]
    else:
        items = [{"description": f"{(payment.subscription_type or '').capitalize()} subscription", "amount": f"{payment.amount:.2f}"}]

    paid_at = payment.paid_at or payment.updated_at
    original = (payment.metadata or {}).get("original_amount")
    return {
        "receipt_number": f"RCPT-{paid_at:%Y%m%d}-{payment.id.hex[:8].upper()}",
        "payment_id": str(payment.id),
        "date": paid_at,
        "customer": {"name": payment.user.name, "email": payment.user.email},
        "payment_type": payment.payment_type,
        "items": items,
        "subtotal": original or f"{payment.amount:.2f}",
        "discount_percent": (payment.metadata or {}).get("discount_percent"),
        "total": f"{payment.amount:.2f}",
        "refunded": f"{payment.refund_amount:.2f}",
        "currency": payment.currency.upper(),
        "payment_method": payment.stripe_payment_method_id,
    }


def _as_uuid(value):
    try:
        return uuid.UUID(str(value))
    except ValueError:
        return value
