# reviews/views/moderation.py
"""
REVIEW MODERATION (moderators + admins)

GET    /api/v2/admin/reviews/pending/
GET    /api/v2/admin/reviews/statistics/
POST   /api/v2/admin/reviews/bulk/               {action: approve|reject, review_ids, reason?}
POST   /api/v2/admin/reviews/<uuid>/approve/
POST   /api/v2/admin/reviews/<uuid>/reject/      {reason?}
DELETE /api/v2/admin/reviews/<uuid>/
"""

from __future__ import annotations

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from permissions.roles import IsModeratorOrAdmin
from reviews.models import ComicReview
from reviews.serializers import (
    BulkModerationSerializer,
    ModerationReviewSerializer,
    RejectInputSerializer,
)
from reviews.services.lifecycle import InvalidReviewTransitionError
from reviews.services.moderation import (
    approve_review,
    bulk_moderate,
    moderation_statistics,
    moderator_delete_review,
    pending_reviews,
    reject_review,
)


class ModerationView(APIView):
    permission_classes = [IsAuthenticated, IsModeratorOrAdmin]


class PendingReviewsView(ModerationView):
    @extend_schema(tags=["Admin: Reviews"], responses={200: ModerationReviewSerializer(many=True)})
    def get(self, request):
        paginator = PageNumberPagination()
        page = paginator.paginate_queryset(pending_reviews(), request, view=self)
        return paginator.get_paginated_response(ModerationReviewSerializer(page, many=True).data)


class ModerationStatisticsView(ModerationView):
    @extend_schema(tags=["Admin: Reviews"], responses={200: OpenApiResponse(description="Queue counts")})
    def get(self, request):
        return Response({"data": moderation_statistics()})


class BulkModerationView(ModerationView):
    @extend_schema(tags=["Admin: Reviews"], request=BulkModerationSerializer)
    def post(self, request):
        serializer = BulkModerationSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        changed = bulk_moderate(
            review_ids=serializer.validated_data["review_ids"],
            action=serializer.validated_data["action"],
            moderator=request.user,
            reason=serializer.validated_data["reason"],
        )
        return Response({"updated": changed})


class ReviewApproveView(ModerationView):
    @extend_schema(tags=["Admin: Reviews"], request=None, responses={200: ModerationReviewSerializer})
    def post(self, request, review_id):
        review = get_object_or_404(ComicReview, pk=review_id)
        try:
            review = approve_review(review=review, moderator=request.user)
        except InvalidReviewTransitionError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"message": "Review approved", "data": ModerationReviewSerializer(review).data})


class ReviewRejectView(ModerationView):
    @extend_schema(tags=["Admin: Reviews"], request=RejectInputSerializer, responses={200: ModerationReviewSerializer})
    def post(self, request, review_id):
        review = get_object_or_404(ComicReview, pk=review_id)
        serializer = RejectInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            review = reject_review(
                review=review,
                moderator=request.user,
                reason=serializer.validated_data["reason"],
            )
        except InvalidReviewTransitionError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"message": "Review rejected", "data": ModerationReviewSerializer(review).data})


class ModerationDeleteView(ModerationView):
    @extend_schema(tags=["Admin: Reviews"], responses={200: OpenApiResponse()})
    def delete(self, request, review_id):
        review = get_object_or_404(ComicReview, pk=review_id)
        moderator_delete_review(review=review, moderator=request.user)
        return Response({"message": "Review deleted"})
