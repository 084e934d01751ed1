# notifications/urls.py

from django.urls import path

from notifications.views import (
    ComicNotificationView,
    NotificationJobListView,
    NotificationStatisticsView,
    UserNotificationView,
)

app_name = "notifications"

urlpatterns = [
    path("statistics/", NotificationStatisticsView.as_view(), name="statistics"),
    path("jobs/", NotificationJobListView.as_view(), name="jobs"),
    path("comics/<slug:slug>/", ComicNotificationView.as_view(), name="comic"),
    path("users/", UserNotificationView.as_view(), name="user"),
]
