# analytics/payment_urls.py

from django.urls import path

from analytics.views import (
    FailedPaymentAnalysisView,
    PaymentDashboardView,
    RefundAnalyticsView,
    RevenueTrendsView,
)

app_name = "payment-analytics"

urlpatterns = [
    path("dashboard/", PaymentDashboardView.as_view(), name="dashboard"),
    path("trends/", RevenueTrendsView.as_view(), name="trends"),
    path("failed/", FailedPaymentAnalysisView.as_view(), name="failed"),
    path("refunds/", RefundAnalyticsView.as_view(), name="refunds"),
]
