# payments/services/webhooks.py

"""
STRIPE WEBHOOK EVENT HANDLING

Signature verification happens in the view. handle_event only routes a
verified event:

- payment_intent.succeeded       -> succeeded + access granted
- payment_intent.payment_failed  -> failed (last_payment_error.message)
- payment_intent.canceled        -> canceled
- charge.dispute.created         -> logged for manual follow-up
- anything else                  -> acknowledged, ignored

Every branch is idempotent: duplicate deliveries find the payment already in
its target state and do nothing.
"""

from __future__ import annotations

import logging

from django.db import transaction

from payments.models import Payment
from payments.services.payment_service import mark_canceled, mark_failed, mark_succeeded

logger = logging.getLogger(__name__)

OUTCOME_PROCESSED = "processed"
OUTCOME_DUPLICATE = "duplicate"
OUTCOME_UNKNOWN_PAYMENT = "unknown_payment"
OUTCOME_IGNORED = "ignored"


def _locked_payment(intent_id: str) -> Payment | None:
    if not intent_id:
        return None
    return Payment.objects.select_for_update().filter(stripe_payment_intent_id=intent_id).first()


@transaction.atomic
def _intent_succeeded(intent: dict) -> str:
    payment = _locked_payment(intent.get("id"))
    if payment is None:
        logger.warning("Webhook for unknown payment intent", extra={"intent_id": intent.get("id")})
        return OUTCOME_UNKNOWN_PAYMENT

    if payment.status not in (Payment.STATUS_PENDING, Payment.STATUS_FAILED):
        return OUTCOME_DUPLICATE

    changed = mark_succeeded(payment, payment_method_id=intent.get("payment_method") or "")
    return OUTCOME_PROCESSED if changed else OUTCOME_DUPLICATE


@transaction.atomic
def _intent_failed(intent: dict) -> str:
    payment = _locked_payment(intent.get("id"))
    if payment is None:
        logger.warning("Webhook for unknown payment intent", extra={"intent_id": intent.get("id")})
        return OUTCOME_UNKNOWN_PAYMENT

    if payment.status not in (Payment.STATUS_PENDING, Payment.STATUS_FAILED):
        return OUTCOME_DUPLICATE

    reason = (intent.get("last_payment_error") or {}).get("message") or "Payment failed"
    changed = mark_failed(payment, reason=reason)
    return OUTCOME_PROCESSED if changed else OUTCOME_DUPLICATE


@transaction.atomic
def _intent_canceled(intent: dict) -> str:
    payment = _locked_payment(intent.get("id"))
    if payment is None:
        return OUTCOME_UNKNOWN_PAYMENT

    if payment.status != Payment.STATUS_PENDING:
        return OUTCOME_DUPLICATE

    mark_canceled(payment)
    return OUTCOME_PROCESSED


def _dispute_created(dispute: dict) -> str:
    logger.warning(
        "Charge dispute created",
        extra={
            "dispute_id": dispute.get("id"),
            "charge_id": dispute.get("charge"),
            "intent_id": dispute.get("payment_intent"),
            "amount": dispute.get("amount"),
            "reason": dispute.get("reason"),
        },
    )
    return OUTCOME_PROCESSED


HANDLERS = {
    "payment_intent.succeeded": _intent_succeeded,
    "payment_intent.payment_failed": _intent_failed,
    "payment_intent.canceled": _intent_canceled,
    "charge.dispute.created": _dispute_created,
}


def handle_event(event: dict) -> str:
    event_type = str(event.get("type") or "")
    obj = (event.get("data") or {}).get("object") or {}

    handler = HANDLERS.get(event_type)
    if handler is None:
        logger.info("Unhandled Stripe event type", extra={"event_type": event_type, "event_id": event.get("id")})
        return OUTCOME_IGNORED

    outcome = handler(obj)
    logger.info(
        "Stripe event handled",
        extra={"event_type": event_type, "event_id": event.get("id"), "outcome": outcome},
    )
    return outcome
