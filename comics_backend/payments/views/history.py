# payments/views/history.py
"""
PAYMENT HISTORY + AFTER-SALE ACTIONS (V2, authenticated)

GET  /api/v2/payments/                       history (status, payment_type, date_from, date_to)
GET  /api/v2/payments/<uuid>/                status of one payment
GET  /api/v2/payments/<uuid>/receipt/        succeeded payments only
POST /api/v2/payments/<uuid>/refund/         owner or payments staff
POST /api/v2/payments/<uuid>/retry/          failed payments, < 3 retries
"""

from __future__ import annotations

from django_filters.utils import translate_validation
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from payments.filters import PaymentHistoryFilter
from payments.models import Payment
from payments.serializers import PaymentSerializer, RefundSerializer
from payments.services.exceptions import PaymentProviderError, PaymentStateError
from payments.services.payment_service import payment_history, receipt, refund_payment, retry_payment
from permissions.roles import CAP_PAYMENTS_VIEW, user_has_capability


class PaymentView(APIView):
    permission_classes = [IsAuthenticated]

    def get_payment(self, request, payment_id, *, allow_staff: bool = False):
        qs = Payment.objects.select_related("comic", "user")
        if not (allow_staff and user_has_capability(request.user, CAP_PAYMENTS_VIEW)):
            qs = qs.filter(user=request.user)
        return qs.filter(pk=payment_id).first()


def _not_found() -> Response:
    return Response({"detail": "Payment not found"}, status=status.HTTP_404_NOT_FOUND)


class PaymentHistoryView(PaymentView):
    @extend_schema(tags=["Payments"], responses={200: PaymentSerializer(many=True)})
    def get(self, request):
        filterset = PaymentHistoryFilter(request.query_params, queryset=payment_history(request.user))
        if not filterset.is_valid():
            return Response(translate_validation(filterset.errors).detail, status=status.HTTP_400_BAD_REQUEST)

        paginator = PageNumberPagination()
        page = paginator.paginate_queryset(filterset.qs, request, view=self)
        return paginator.get_paginated_response(PaymentSerializer(page, many=True).data)


class PaymentDetailView(PaymentView):
    @extend_schema(tags=["Payments"], responses={200: PaymentSerializer, 404: OpenApiResponse()})
    def get(self, request, payment_id):
        payment = self.get_payment(request, payment_id, allow_staff=True)
        if payment is None:
            return _not_found()
        return Response({"data": PaymentSerializer(payment).data})


class PaymentReceiptView(PaymentView):
    @extend_schema(tags=["Payments"], responses={200: OpenApiResponse(description="Receipt"), 400: OpenApiResponse()})
    def get(self, request, payment_id):
        payment = self.get_payment(request, payment_id, allow_staff=True)
        if payment is None:
            return _not_found()
        try:
            return Response({"data": receipt(payment)})
        except PaymentStateError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


class PaymentRefundView(PaymentView):
    @extend_schema(tags=["Payments"], request=RefundSerializer, responses={200: PaymentSerializer})
    def post(self, request, payment_id):
        payment = self.get_payment(request, payment_id, allow_staff=True)
        if payment is None:
            return _not_found()

        serializer = RefundSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            payment = refund_payment(
                payment=payment,
                amount=serializer.validated_data.get("amount"),
                reason=serializer.validated_data["reason"],
            )
        except PaymentStateError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except PaymentProviderError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)

        return Response({"message": "Refund processed", "payment": PaymentSerializer(payment).data})


class PaymentRetryView(PaymentView):
    @extend_schema(tags=["Payments"], request=None, responses={200: OpenApiResponse(description="client_secret")})
    def post(self, request, payment_id):
        payment = self.get_payment(request, payment_id)
        if payment is None:
            return _not_found()

        try:
            result = retry_payment(payment=payment)
        except PaymentStateError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        except PaymentProviderError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_502_BAD_GATEWAY)

        return Response(
            {
                "client_secret": result["client_secret"],
                "payment_intent_id": result["payment_intent_id"],
                "payment": PaymentSerializer(result["payment"]).data,
            }
        )
