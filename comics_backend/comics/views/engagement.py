# comics/views/engagement.py
"""
ENGAGEMENT ENDPOINTS (V2, authenticated writes)

POST /api/v2/comics/<slug>/like/      toggle like
POST /api/v2/comics/<slug>/rate/      {rating: 1..5}
GET  /api/v2/comics/<slug>/comments/  approved comments (public, paginated)
POST /api/v2/comics/<slug>/comments/  {content, is_spoiler}
POST /api/v2/comics/<slug>/view/      count a view (deduplicated for an hour)
"""

from __future__ import annotations

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import UserRateThrottle
from rest_framework.views import APIView

from comics.models import Comic
from comics.serializers import (
    ComicCommentSerializer,
    CommentInputSerializer,
    RateInputSerializer,
)
from comics.services.engagement import add_comment, approved_comments, rate_comic, toggle_like
from comics.services.view_tracking import record_view_for_request


class EngagementThrottle(UserRateThrottle):
    scope = "engagement"


def _visible_comic_or_404(slug: str) -> Comic:
    return get_object_or_404(Comic.objects.visible(), slug=slug)


class ComicLikeView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_classes = [EngagementThrottle]

    @extend_schema(tags=["Engagement"], request=None, responses={200: OpenApiResponse(description="{is_liked, likes_count}")})
    def post(self, request, slug):
        comic = _visible_comic_or_404(slug)
        is_liked, likes_count = toggle_like(user=request.user, comic=comic)
        return Response({"is_liked": is_liked, "likes_count": likes_count})


class ComicRateView(APIView):
    permission_classes = [IsAuthenticated]
    throttle_classes = [EngagementThrottle]

    @extend_schema(tags=["Engagement"], request=RateInputSerializer)
    def post(self, request, slug):
        comic = _visible_comic_or_404(slug)
        serializer = RateInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        rating = serializer.validated_data["rating"]
        comic = rate_comic(user=request.user, comic=comic, rating=rating)

        return Response(
            {
                "rating": rating,
                "average_rating": f"{comic.average_rating:.2f}",
                "total_ratings": comic.total_ratings,
            }
        )


class ComicCommentsView(APIView):
    throttle_classes = [EngagementThrottle]

    def get_permissions(self):
        if self.request.method == "GET":
            return [AllowAny()]
        return [IsAuthenticated()]

    @extend_schema(tags=["Engagement"], responses={200: ComicCommentSerializer(many=True)})
    def get(self, request, slug):
        comic = _visible_comic_or_404(slug)

        paginator = PageNumberPagination()
        page = paginator.paginate_queryset(approved_comments(comic), request, view=self)
        return paginator.get_paginated_response(ComicCommentSerializer(page, many=True).data)

    @extend_schema(tags=["Engagement"], request=CommentInputSerializer, responses={201: ComicCommentSerializer})
    def post(self, request, slug):
        comic = _visible_comic_or_404(slug)
        serializer = CommentInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        comment = add_comment(
            user=request.user,
            comic=comic,
            content=serializer.validated_data["content"],
            is_spoiler=serializer.validated_data["is_spoiler"],
        )
        return Response({"data": ComicCommentSerializer(comment).data}, status=status.HTTP_201_CREATED)


class ComicViewTrackView(APIView):
    permission_classes = [AllowAny]

    @extend_schema(tags=["Engagement"], request=None, responses={200: OpenApiResponse(description="{counted, view_count}")})
    def post(self, request, slug):
        comic = _visible_comic_or_404(slug)
        counted = record_view_for_request(request, comic)
        return Response({"counted": counted, "view_count": comic.view_count})
