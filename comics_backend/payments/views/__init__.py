from .history import (
    PaymentDetailView,
    PaymentHistoryView,
    PaymentReceiptView,
    PaymentRefundView,
    PaymentRetryView,
)
from .intents import (
    BundleIntentView,
    ComicIntentView,
    ConfirmPaymentView,
    PaymentConfigView,
    SubscriptionIntentView,
)
from .webhook import StripeWebhookView

__all__ = [
    "PaymentConfigView",
    "ComicIntentView",
    "BundleIntentView",
    "SubscriptionIntentView",
    "ConfirmPaymentView",
    "PaymentHistoryView",
    "PaymentDetailView",
    "PaymentReceiptView",
    "PaymentRefundView",
    "PaymentRetryView",
    "StripeWebhookView",
]
