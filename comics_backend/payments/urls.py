# payments/urls.py

from django.urls import path

from payments.views import (
    BundleIntentView,
    ComicIntentView,
    ConfirmPaymentView,
    PaymentConfigView,
    PaymentDetailView,
    PaymentHistoryView,
    PaymentReceiptView,
    PaymentRefundView,
    PaymentRetryView,
    StripeWebhookView,
    SubscriptionIntentView,
)

app_name = "payments"

urlpatterns = [
    path("", PaymentHistoryView.as_view(), name="history"),
    path("config/", PaymentConfigView.as_view(), name="config"),
    path("webhook/", StripeWebhookView.as_view(), name="stripe-webhook"),
    path("comics/<slug:slug>/intent/", ComicIntentView.as_view(), name="comic-intent"),
    path("bundle/intent/", BundleIntentView.as_view(), name="bundle-intent"),
    path("subscription/intent/", SubscriptionIntentView.as_view(), name="subscription-intent"),
    path("confirm/", ConfirmPaymentView.as_view(), name="confirm"),
    path("<uuid:payment_id>/", PaymentDetailView.as_view(), name="detail"),
    path("<uuid:payment_id>/receipt/", PaymentReceiptView.as_view(), name="receipt"),
    path("<uuid:payment_id>/refund/", PaymentRefundView.as_view(), name="refund"),
    path("<uuid:payment_id>/retry/", PaymentRetryView.as_view(), name="retry"),
]
