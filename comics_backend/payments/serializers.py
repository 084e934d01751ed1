# payments/serializers.py

from __future__ import annotations

from decimal import Decimal

from rest_framework import serializers

from payments.models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    comic_slug = serializers.CharField(source="comic.slug", read_only=True, default=None)
    comic_title = serializers.CharField(source="comic.title", read_only=True, default=None)
    can_be_retried = serializers.SerializerMethodField()
    can_be_refunded = serializers.SerializerMethodField()

    class Meta:
        model = Payment
        fields = [
            "id",
            "payment_type",
            "status",
            "amount",
            "refund_amount",
            "currency",
            "comic_slug",
            "comic_title",
            "comic_ids",
            "subscription_type",
            "stripe_payment_intent_id",
            "failure_reason",
            "retry_count",
            "can_be_retried",
            "can_be_refunded",
            "paid_at",
            "refunded_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_can_be_retried(self, obj) -> bool:
        return obj.can_be_retried()

    def get_can_be_refunded(self, obj) -> bool:
        return obj.can_be_refunded()


class BundleIntentSerializer(serializers.Serializer):
    comic_ids = serializers.ListField(child=serializers.UUIDField(), min_length=2, max_length=50)
    discount_percent = serializers.DecimalField(
        max_digits=5,
        decimal_places=2,
        min_value=0,
        max_value=90,
        required=False,
    )


class SubscriptionIntentSerializer(serializers.Serializer):
    subscription_type = serializers.ChoiceField(choices=[Payment.SUBSCRIPTION_MONTHLY, Payment.SUBSCRIPTION_YEARLY])


class ConfirmPaymentSerializer(serializers.Serializer):
    payment_intent_id = serializers.CharField(max_length=255)


class RefundSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal("0.01"), required=False)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")
