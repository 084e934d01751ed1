# reviews/views/reviews.py
"""
REVIEWS (V2)

GET    /api/v2/reviews/                          recent approved reviews (public)
GET    /api/v2/reviews/most-helpful/             >= 5 votes, by helpful ratio (public)
GET    /api/v2/reviews/mine/                     the caller's reviews (any status)
GET    /api/v2/reviews/comics/<slug>/            approved, ?sort=newest|oldest|rating|helpful&spoilers=false
POST   /api/v2/reviews/comics/<slug>/            submit (403 without access, 409 duplicate)
GET    /api/v2/reviews/comics/<slug>/statistics/ average + 1..5 distribution
GET    /api/v2/reviews/comics/<slug>/mine/       the caller's review for that comic
PATCH  /api/v2/reviews/<uuid>/                   owner edit
DELETE /api/v2/reviews/<uuid>/                   owner or moderator delete
POST   /api/v2/reviews/<uuid>/vote/              {is_helpful}
DELETE /api/v2/reviews/<uuid>/vote/
"""

from __future__ import annotations

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from comics.models import Comic
from comics.views.engagement import EngagementThrottle
from reviews.models import ComicReview
from reviews.serializers import (
    ComicReviewSerializer,
    ReviewInputSerializer,
    ReviewUpdateSerializer,
    VoteInputSerializer,
)
from reviews.services.exceptions import (
    DuplicateReviewError,
    ReviewAccessDeniedError,
    ReviewOwnershipError,
    SelfVoteError,
    VoteNotFoundError,
)
from reviews.services.review_service import (
    delete_review,
    most_helpful_reviews,
    recent_reviews,
    remove_vote,
    review_statistics,
    reviews_for_comic,
    submit_review,
    update_review,
    user_review_for,
    user_reviews,
    vote,
)


def _comic_or_404(slug: str) -> Comic:
    return get_object_or_404(Comic.objects.visible(), slug=slug)


def _falsy(raw) -> bool:
    return str(raw or "").strip().lower() in {"0", "false", "no", "off"}


class RecentReviewsView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(tags=["Reviews"], responses={200: ComicReviewSerializer(many=True)})
    def get(self, request):
        return Response({"data": ComicReviewSerializer(recent_reviews(), many=True).data})


class MostHelpfulReviewsView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(tags=["Reviews"], responses={200: ComicReviewSerializer(many=True)})
    def get(self, request):
        return Response({"data": ComicReviewSerializer(most_helpful_reviews(), many=True).data})


class MyReviewsView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Reviews"], responses={200: ComicReviewSerializer(many=True)})
    def get(self, request):
        paginator = PageNumberPagination()
        page = paginator.paginate_queryset(user_reviews(request.user), request, view=self)
        return paginator.get_paginated_response(ComicReviewSerializer(page, many=True).data)


class ComicReviewsView(APIView):
    throttle_classes = [EngagementThrottle]

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated()]

    @extend_schema(
        tags=["Reviews"],
        parameters=[
            OpenApiParameter("sort", str, OpenApiParameter.QUERY, enum=["newest", "oldest", "rating", "helpful"]),
            OpenApiParameter("spoilers", bool, OpenApiParameter.QUERY),
        ],
        responses={200: ComicReviewSerializer(many=True)},
    )
    def get(self, request, slug):
        comic = _comic_or_404(slug)
        qs = reviews_for_comic(
            comic,
            sort=request.query_params.get("sort"),
            include_spoilers=not _falsy(request.query_params.get("spoilers", "true")),
        )
        paginator = PageNumberPagination()
        page = paginator.paginate_queryset(qs, request, view=self)
        return paginator.get_paginated_response(ComicReviewSerializer(page, many=True).data)

    @extend_schema(
        tags=["Reviews"],
        request=ReviewInputSerializer,
        responses={201: ComicReviewSerializer, 403: OpenApiResponse(), 409: OpenApiResponse()},
    )
    def post(self, request, slug):
        comic = _comic_or_404(slug)
        serializer = ReviewInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            review = submit_review(user=request.user, comic=comic, **serializer.validated_data)
        except ReviewAccessDeniedError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        except DuplicateReviewError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_409_CONFLICT)

        message = "Review published" if review.is_approved else "Review submitted for moderation"
        return Response(
            {"message": message, "data": ComicReviewSerializer(review).data},
            status=status.HTTP_201_CREATED,
        )


class ComicReviewStatisticsView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(tags=["Reviews"], responses={200: OpenApiResponse(description="average + distribution")})
    def get(self, request, slug):
        comic = _comic_or_404(slug)
        return Response({"data": review_statistics(comic)})


class MyComicReviewView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Reviews"], responses={200: ComicReviewSerializer})
    def get(self, request, slug):
        comic = _comic_or_404(slug)
        review = user_review_for(request.user, comic)
        return Response({"data": ComicReviewSerializer(review).data if review else None})


class ReviewDetailView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Reviews"], request=ReviewUpdateSerializer, responses={200: ComicReviewSerializer})
    def patch(self, request, review_id):
        review = get_object_or_404(ComicReview, pk=review_id)
        serializer = ReviewUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            review = update_review(user=request.user, review=review, **serializer.validated_data)
        except ReviewOwnershipError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)

        return Response({"data": ComicReviewSerializer(review).data})

    @extend_schema(tags=["Reviews"], responses={200: OpenApiResponse(), 403: OpenApiResponse()})
    def delete(self, request, review_id):
        review = get_object_or_404(ComicReview, pk=review_id)
        try:
            delete_review(user=request.user, review=review)
        except ReviewOwnershipError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)
        return Response({"message": "Review deleted"})


class ReviewVoteView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_classes = [EngagementThrottle]

    @extend_schema(tags=["Reviews"], request=VoteInputSerializer, responses={200: ComicReviewSerializer})
    def post(self, request, review_id):
        review = get_object_or_404(ComicReview, pk=review_id, is_approved=True)
        serializer = VoteInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            review = vote(user=request.user, review=review, is_helpful=serializer.validated_data["is_helpful"])
        except SelfVoteError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)

        return Response(
            {
                "helpful_votes": review.helpful_votes,
                "total_votes": review.total_votes,
                "helpfulness_ratio": review.helpfulness_ratio,
            }
        )

    @extend_schema(tags=["Reviews"], responses={200: OpenApiResponse(), 404: OpenApiResponse()})
    def delete(self, request, review_id):
        review = get_object_or_404(ComicReview, pk=review_id)
        try:
            review = remove_vote(user=request.user, review=review)
        except VoteNotFoundError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)

        return Response({"helpful_votes": review.helpful_votes, "total_votes": review.total_votes})
