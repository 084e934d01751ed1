# analytics/views/payments.py
"""
PAYMENT ANALYTICS (V2, payments staff)

Query params:
- period: today | week | month | quarter | year (default month)
- from_date / to_date: YYYY-MM-DD, inclusive; override period
- grouping (trends only): daily | weekly | monthly (default daily)

GET /api/v2/admin/payments/dashboard/
GET /api/v2/admin/payments/trends/
GET /api/v2/admin/payments/failed/
GET /api/v2/admin/payments/refunds/
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from analytics.services.exceptions import InvalidPeriodError
from analytics.services.payments import (
    DEFAULT_PERIOD,
    PERIODS,
    failed_payment_analysis,
    payment_dashboard,
    refund_analytics,
    resolve_range,
    revenue_trends,
)
from permissions.roles import CAP_PAYMENTS_VIEW, HasCapability

RANGE_PARAMS = [
    OpenApiParameter(name="period", type=OpenApiTypes.STR, enum=list(PERIODS), required=False),
    OpenApiParameter(name="from_date", type=OpenApiTypes.DATE, required=False),
    OpenApiParameter(name="to_date", type=OpenApiTypes.DATE, required=False),
]


class PaymentAnalyticsView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_PAYMENTS_VIEW

    def resolve(self, request):
        params = request.query_params
        return resolve_range(
            period=params.get("period"),
            from_date=params.get("from_date"),
            to_date=params.get("to_date"),
        )


def _bad_range(exc) -> Response:
    return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)


class PaymentDashboardView(PaymentAnalyticsView):
    @extend_schema(tags=["Admin: Payments"], parameters=RANGE_PARAMS, responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        try:
            start, end = self.resolve(request)
        except InvalidPeriodError as exc:
            return _bad_range(exc)

        return Response(
            {
                "analytics": payment_dashboard(start, end),
                "period": request.query_params.get("period") or DEFAULT_PERIOD,
            }
        )


class RevenueTrendsView(PaymentAnalyticsView):
    @extend_schema(
        tags=["Admin: Payments"],
        parameters=[
            *RANGE_PARAMS,
            OpenApiParameter(name="grouping", type=OpenApiTypes.STR, enum=["daily", "weekly", "monthly"], required=False),
        ],
        responses={200: OpenApiTypes.OBJECT},
    )
    def get(self, request):
        grouping = request.query_params.get("grouping") or "daily"
        try:
            start, end = self.resolve(request)
            trends = revenue_trends(start, end, grouping=grouping)
        except InvalidPeriodError as exc:
            return _bad_range(exc)

        return Response({"trends": trends, "grouping": grouping})


class FailedPaymentAnalysisView(PaymentAnalyticsView):
    @extend_schema(tags=["Admin: Payments"], parameters=RANGE_PARAMS, responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        try:
            start, end = self.resolve(request)
        except InvalidPeriodError as exc:
            return _bad_range(exc)
        return Response(failed_payment_analysis(start, end))


class RefundAnalyticsView(PaymentAnalyticsView):
    @extend_schema(tags=["Admin: Payments"], parameters=RANGE_PARAMS, responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        try:
            start, end = self.resolve(request)
        except InvalidPeriodError as exc:
            return _bad_range(exc)
        return Response(refund_analytics(start, end))
