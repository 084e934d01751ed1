# payments/views/intents.py
"""
CHECKOUT (V2, authenticated)

GET  /api/v2/payments/config/                  publishable key + prices
POST /api/v2/payments/comics/<slug>/intent/    single comic PaymentIntent
POST /api/v2/payments/bundle/intent/           {comic_ids, discount_percent?}
POST /api/v2/payments/subscription/intent/     {subscription_type}
POST /api/v2/payments/confirm/                 {payment_intent_id}
"""

from __future__ import annotations

from django.conf import settings
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from comics.models import Comic
from comics.serializers import ComicSerializer
from payments.serializers import (
    BundleIntentSerializer,
    ConfirmPaymentSerializer,
    PaymentSerializer,
    SubscriptionIntentSerializer,
)
from payments.services.exceptions import (
    InvalidBundleError,
    PaymentNotAllowedError,
    PaymentNotFoundError,
    PaymentProviderError,
    PaymentStateError,
)
from payments.services.payment_service import (
    confirm_payment,
    create_bundle_intent,
    create_single_intent,
    create_subscription_intent,
    default_bundle_discount,
)


def _intent_response(result: dict, *, status_code=status.HTTP_201_CREATED, **extra) -> Response:
    payment = result["payment"]
    body = {
        "client_secret": result["client_secret"],
        "payment_intent_id": result["payment_intent_id"],
        "publishable_key": result["publishable_key"],
        "payment": PaymentSerializer(payment).data,
    }
    body.update(extra)
    return Response(body, status=status_code)


def _provider_error(exc) -> Response:
    return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)


class CheckoutView(APIView):
    permission_classes = [IsAuthenticated]


class PaymentConfigView(CheckoutView):
    @extend_schema(tags=["Payments"], responses={200: OpenApiResponse(description="Stripe key + prices")})
    def get(self, request):
        stripe_cfg = settings.PAYMENTS.get("STRIPE") or {}
        return Response(
            {
                "publishable_key": stripe_cfg.get("PUBLISHABLE_KEY", ""),
                "currency": stripe_cfg.get("CURRENCY", "usd"),
                "subscription_prices": settings.SUBSCRIPTION_PRICES,
                "bundle_discount_percent": str(default_bundle_discount()),
            }
        )


class ComicIntentView(CheckoutView):
    @extend_schema(tags=["Payments"], request=None, responses={201: OpenApiResponse(description="client_secret")})
    def post(self, request, slug):
        comic = get_object_or_404(Comic.objects.visible(), slug=slug)
        try:
            result = create_single_intent(user=request.user, comic=comic)
        except PaymentNotAllowedError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except PaymentProviderError as exc:
            return _provider_error(exc)

        return _intent_response(result, amount=f"{comic.price:.2f}")


class BundleIntentView(CheckoutView):
    @extend_schema(tags=["Payments"], request=BundleIntentSerializer)
    def post(self, request):
        serializer = BundleIntentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = create_bundle_intent(
                user=request.user,
                comic_ids=serializer.validated_data["comic_ids"],
                discount_percent=serializer.validated_data.get("discount_percent"),
            )
        except InvalidBundleError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except PaymentProviderError as exc:
            return _provider_error(exc)

        return _intent_response(
            result,
            original_amount=f"{result['original_amount']:.2f}",
            discount_percent=str(result["discount_percent"]),
            amount=f"{result['payment'].amount:.2f}",
            comics=ComicSerializer(result["comics"], many=True).data,
        )


class SubscriptionIntentView(CheckoutView):
    @extend_schema(tags=["Payments"], request=SubscriptionIntentSerializer)
    def post(self, request):
        serializer = SubscriptionIntentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = create_subscription_intent(
                user=request.user,
                subscription_type=serializer.validated_data["subscription_type"],
            )
        except PaymentNotAllowedError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except PaymentProviderError as exc:
            return _provider_error(exc)

        return _intent_response(result, amount=f"{result['payment'].amount:.2f}")


class ConfirmPaymentView(CheckoutView):
    @extend_schema(tags=["Payments"], request=ConfirmPaymentSerializer, responses={200: PaymentSerializer})
    def post(self, request):
        serializer = ConfirmPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            payment = confirm_payment(
                user=request.user,
                payment_intent_id=serializer.validated_data["payment_intent_id"],
            )
        except PaymentNotFoundError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except PaymentStateError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except PaymentProviderError as exc:
            return _provider_error(exc)

        return Response(
            {
                "success": payment.status == payment.STATUS_SUCCEEDED,
                "payment": PaymentSerializer(payment).data,
            }
        )
