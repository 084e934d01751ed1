# analytics/urls.py

from django.urls import path

from analytics.views import (
    AnalyticsExportView,
    ComicPerformanceView,
    ComprehensiveReportView,
    ConversionAnalyticsView,
    PlatformMetricsView,
    RealtimeMetricsView,
    RevenueAnalyticsView,
    UserEngagementView,
)

app_name = "analytics"

urlpatterns = [
    path("", ComprehensiveReportView.as_view(), name="report"),
    path("platform/", PlatformMetricsView.as_view(), name="platform"),
    path("revenue/", RevenueAnalyticsView.as_view(), name="revenue"),
    path("engagement/", UserEngagementView.as_view(), name="engagement"),
    path("comics/", ComicPerformanceView.as_view(), name="comics"),
    path("conversion/", ConversionAnalyticsView.as_view(), name="conversion"),
    path("realtime/", RealtimeMetricsView.as_view(), name="realtime"),
    path("export/", AnalyticsExportView.as_view(), name="export"),
]
