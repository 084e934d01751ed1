# payments/services/exceptions.py


class PaymentServiceError(Exception):
    """Base error for payment operations."""


class PaymentNotAllowedError(PaymentServiceError):
    """Request is valid but the purchase cannot be made (free comic, already owned...)."""


class InvalidBundleError(PaymentServiceError):
    """Bundle selection does not leave at least two purchasable comics."""


class PaymentProviderError(PaymentServiceError):
    """Stripe rejected the request or was unreachable."""


class PaymentStateError(PaymentServiceError):
    """Payment is not in a state that allows the operation."""


class InvalidWebhookSignatureError(PaymentServiceError):
    """Stripe-Signature header missing, malformed, stale or wrong."""


class PaymentNotFoundError(PaymentServiceError):
    """No payment with that intent id for this user."""
