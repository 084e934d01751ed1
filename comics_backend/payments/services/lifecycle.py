"""
PAYMENT LIFECYCLE DOMAIN RULES

Allowed transitions:

    pending   -> succeeded | failed | canceled
    failed    -> pending          (retry)
    succeeded -> refunded

refunded + canceled are terminal. No database writes here.
"""

from payments.models import Payment
from payments.services.exceptions import PaymentStateError


class InvalidPaymentTransitionError(PaymentStateError):
    pass


TERMINAL_STATES = {
    Payment.STATUS_REFUNDED,
    Payment.STATUS_CANCELED,
}

ALLOWED_TRANSITIONS = {
    Payment.STATUS_PENDING: {
        Payment.STATUS_SUCCEEDED,
        Payment.STATUS_FAILED,
        Payment.STATUS_CANCELED,
    },
    Payment.STATUS_FAILED: {
        Payment.STATUS_PENDING,
    },
    Payment.STATUS_SUCCEEDED: {
        Payment.STATUS_REFUNDED,
    },
}


def can_transition(*, from_status: str, to_status: str) -> bool:
    if from_status in TERMINAL_STATES:
        return False

    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, payment: Payment, target_status: str):
    if not can_transition(from_status=payment.status, to_status=target_status):
        raise InvalidPaymentTransitionError(
            f"Payment {payment.id} cannot transition from "
            f"'{payment.status}' to '{target_status}'"
        )
