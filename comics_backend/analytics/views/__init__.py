from .payments import (
    FailedPaymentAnalysisView,
    PaymentDashboardView,
    RefundAnalyticsView,
    RevenueTrendsView,
)
from .platform import (
    AnalyticsExportView,
    ComicPerformanceView,
    ComprehensiveReportView,
    ConversionAnalyticsView,
    PlatformMetricsView,
    RealtimeMetricsView,
    RevenueAnalyticsView,
    UserEngagementView,
)

__all__ = [
    "AnalyticsExportView",
    "ComicPerformanceView",
    "ComprehensiveReportView",
    "ConversionAnalyticsView",
    "FailedPaymentAnalysisView",
    "PaymentDashboardView",
    "PlatformMetricsView",
    "RealtimeMetricsView",
    "RefundAnalyticsView",
    "RevenueAnalyticsView",
    "RevenueTrendsView",
    "UserEngagementView",
]
