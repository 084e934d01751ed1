# payments/admin.py
"""
Payments admin.

Money, status and Stripe identifiers are read-only: payments only change
state through the payment service (confirm, webhook, refund, retry).
"""

from django.contrib import admin

from payments.models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = (
        "stripe_payment_intent_id",
        "user",
        "payment_type",
        "status",
        "amount",
        "refund_amount",
        "currency",
        "paid_at",
        "created_at",
    )
    list_filter = ("status", "payment_type", "subscription_type", "currency")
    search_fields = ("stripe_payment_intent_id", "user__email", "comic__title")
    date_hierarchy = "created_at"
    readonly_fields = (
        "user",
        "comic",
        "stripe_payment_intent_id",
        "stripe_payment_method_id",
        "amount",
        "refund_amount",
        "currency",
        "status",
        "payment_type",
        "subscription_type",
        "comic_ids",
        "metadata",
        "paid_at",
        "refunded_at",
        "failure_reason",
        "retry_count",
        "created_at",
        "updated_at",
    )

    def has_add_permission(self, request):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
