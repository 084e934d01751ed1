# notifications/views/admin.py
"""
NOTIFICATION ADMIN (V2)

GET  /api/v2/admin/notifications/statistics/
GET  /api/v2/admin/notifications/jobs/?status=pending|sent|failed
POST /api/v2/admin/notifications/comics/<slug>/   {force?}   queue release emails
POST /api/v2/admin/notifications/users/           {user_id, comic_slug, force?}
"""

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from comics.models import Comic
from notifications.models import NotificationJob
from notifications.serializers import (
    ComicNotificationSerializer,
    NotificationJobSerializer,
    UserNotificationSerializer,
)
from notifications.services.exceptions import ComicNotReleasedError, RecipientOptedOutError
from notifications.services.notifications import (
    notification_statistics,
    notify_new_comic,
    send_to_user,
)
from permissions.roles import CAP_NOTIFICATIONS_SEND, HasCapability


class NotificationAdminView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_NOTIFICATIONS_SEND


class NotificationStatisticsView(NotificationAdminView):
    @extend_schema(tags=["Admin: Notifications"], responses={200: OpenApiResponse(description="Subscriber + queue counts")})
    def get(self, request):
        return Response({"statistics": notification_statistics()})


class NotificationJobListView(NotificationAdminView):
    @extend_schema(
        tags=["Admin: Notifications"],
        parameters=[OpenApiParameter("status", str, OpenApiParameter.QUERY, enum=["pending", "sent", "failed"])],
        responses={200: NotificationJobSerializer(many=True)},
    )
    def get(self, request):
        qs = NotificationJob.objects.select_related("recipient", "comic").order_by("-created_at")
        job_status = request.query_params.get("status")
        if job_status:
            qs = qs.filter(status=job_status)

        paginator = PageNumberPagination()
        page = paginator.paginate_queryset(qs, request, view=self)
        return paginator.get_paginated_response(NotificationJobSerializer(page, many=True).data)


class ComicNotificationView(NotificationAdminView):
    @extend_schema(
        tags=["Admin: Notifications"],
        request=ComicNotificationSerializer,
        responses={202: OpenApiResponse(), 400: OpenApiResponse()},
    )
    def post(self, request, slug):
        comic = get_object_or_404(Comic, slug=slug)
        serializer = ComicNotificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            queued = notify_new_comic(comic, force=serializer.validated_data["force"])
        except ComicNotReleasedError as exc:
            return Response(
                {
                    "detail": f"{exc}. Use force=true to override.",
                    "comic": {
                        "id": str(comic.id),
                        "title": comic.title,
                        "is_visible": comic.is_visible,
                        "published_at": comic.published_at,
                    },
                },
                status=status.HTTP_400_BAD_REQUEST,
            )

        return Response(
            {
                "message": "Notifications have been queued for sending.",
                "queued": queued,
                "comic": {"id": str(comic.id), "title": comic.title, "slug": comic.slug},
            },
            status=status.HTTP_202_ACCEPTED,
        )


class UserNotificationView(NotificationAdminView):
    @extend_schema(
        tags=["Admin: Notifications"],
        request=UserNotificationSerializer,
        responses={202: NotificationJobSerializer, 400: OpenApiResponse(), 404: OpenApiResponse()},
    )
    def post(self, request):
        serializer = UserNotificationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = get_object_or_404(get_user_model(), pk=serializer.validated_data["user_id"])
        comic = get_object_or_404(Comic, slug=serializer.validated_data["comic_slug"])

        try:
            job = send_to_user(user, comic, force=serializer.validated_data["force"])
        except RecipientOptedOutError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(NotificationJobSerializer(job).data, status=status.HTTP_202_ACCEPTED)
