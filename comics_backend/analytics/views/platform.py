# analytics/views/platform.py
"""
PLATFORM ANALYTICS (V2, admin only)

All endpoints accept ?days=N (1..365, default 30).

GET /api/v2/analytics/                 comprehensive report
GET /api/v2/analytics/platform/        headline metrics
GET /api/v2/analytics/revenue/
GET /api/v2/analytics/engagement/
GET /api/v2/analytics/comics/          comic performance
GET /api/v2/analytics/conversion/
GET /api/v2/analytics/realtime/        ignores ?days
GET /api/v2/analytics/export/?file_format=csv|json   file download
"""

from __future__ import annotations

import logging

from django.http import HttpResponse
from drf_spectacular.utils import OpenApiParameter, OpenApiTypes, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from analytics.services.exceptions import UnsupportedExportFormatError
from analytics.services.export import default_filename, render_report
from analytics.services.platform import (
    DEFAULT_DAYS,
    comic_performance,
    comprehensive_report,
    conversion_analytics,
    platform_metrics,
    realtime_metrics,
    revenue_analytics,
    user_engagement,
)
from permissions.roles import IsAdmin

logger = logging.getLogger(__name__)

MAX_DAYS = 365

DAYS_PARAM = OpenApiParameter(
    name="days",
    type=OpenApiTypes.INT,
    required=False,
    description=f"Window in days (1..{MAX_DAYS}). Defaults to {DEFAULT_DAYS}.",
)


def parse_days(raw) -> int | None:
    if raw in (None, ""):
        return DEFAULT_DAYS
    try:
        days = int(raw)
    except (TypeError, ValueError):
        return None
    if days < 1 or days > MAX_DAYS:
        return None
    return days


class AnalyticsView(APIView):
    permission_classes = [IsAuthenticated, IsAdmin]

    # subclasses set this to one of the service functions
    report = None

    def get_days(self, request):
        return parse_days(request.query_params.get("days"))

    @extend_schema(tags=["Analytics"], parameters=[DAYS_PARAM], responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        days = self.get_days(request)
        if days is None:
            return Response(
                {"detail": f"days must be an integer between 1 and {MAX_DAYS}"},
                status=status.HTTP_400_BAD_REQUEST,
            )
        return Response({"period_days": days, "data": self.report(days)})


class ComprehensiveReportView(AnalyticsView):
    report = staticmethod(comprehensive_report)


class PlatformMetricsView(AnalyticsView):
    report = staticmethod(platform_metrics)


class RevenueAnalyticsView(AnalyticsView):
    report = staticmethod(revenue_analytics)


class UserEngagementView(AnalyticsView):
    report = staticmethod(user_engagement)


class ComicPerformanceView(AnalyticsView):
    report = staticmethod(comic_performance)


class ConversionAnalyticsView(AnalyticsView):
    report = staticmethod(conversion_analytics)


class RealtimeMetricsView(AnalyticsView):
    @extend_schema(tags=["Analytics"], responses={200: OpenApiTypes.OBJECT})
    def get(self, request):
        return Response({"data": realtime_metrics()})


class AnalyticsExportView(AnalyticsView):
    @extend_schema(
        tags=["Analytics"],
        parameters=[
            DAYS_PARAM,
            OpenApiParameter(name="file_format", type=OpenApiTypes.STR, enum=["csv", "json"], required=False),
        ],
        responses={200: OpenApiTypes.BINARY},
    )
    def get(self, request):
        days = self.get_days(request)
        if days is None:
            return Response(
                {"detail": f"days must be an integer between 1 and {MAX_DAYS}"},
                status=status.HTTP_400_BAD_REQUEST,
            )

        fmt = (request.query_params.get("file_format") or "csv").lower()
        try:
            content, content_type = render_report(comprehensive_report(days), fmt)
        except UnsupportedExportFormatError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        filename = default_filename(fmt)
        logger.info("Analytics export", extra={"format": fmt, "days": days, "user_id": str(request.user.id)})

        response = HttpResponse(content, content_type=content_type)
        response["Content-Disposition"] = f'attachment; filename="{filename}"'
        return response
