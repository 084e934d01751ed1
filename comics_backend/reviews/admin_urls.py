# reviews/admin_urls.py

from django.urls import path

from reviews.views import (
    BulkModerationView,
    ModerationDeleteView,
    ModerationStatisticsView,
    PendingReviewsView,
    ReviewApproveView,
    ReviewRejectView,
)

app_name = "reviews-admin"

urlpatterns = [
    path("pending/", PendingReviewsView.as_view(), name="pending"),
    path("statistics/", ModerationStatisticsView.as_view(), name="statistics"),
    path("bulk/", BulkModerationView.as_view(), name="bulk"),
    path("<uuid:review_id>/", ModerationDeleteView.as_view(), name="delete"),
    path("<uuid:review_id>/approve/", ReviewApproveView.as_view(), name="approve"),
    path("<uuid:review_id>/reject/", ReviewRejectView.as_view(), name="reject"),
]
