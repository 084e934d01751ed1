# library/views/library.py
"""
USER LIBRARY (V2, authenticated)

GET    /api/v2/library/                  filtered + paginated entries
GET    /api/v2/library/statistics/       totals, spend, reading time
GET    /api/v2/library/favorites/
GET    /api/v2/library/recent/           last 10 added
POST   /api/v2/library/<slug>/           add (access_type free|reading)
DELETE /api/v2/library/<slug>/           remove
POST   /api/v2/library/<slug>/favorite/  toggle favorite (adds when missing)
POST   /api/v2/library/<slug>/rating/    {rating, review}
"""

from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404
from django_filters.utils import translate_validation
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.pagination import PageNumberPagination
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from comics.models import Comic
from library.filters import LibraryFilter
from library.serializers import (
    AddToLibrarySerializer,
    LibraryRatingSerializer,
    UserLibrarySerializer,
)
from library.services.exceptions import LibraryAccessError, LibraryEntryNotFoundError
from library.services.library import (
    add_to_library,
    favorites,
    library_statistics,
    recently_added,
    remove_from_library,
    set_rating,
    toggle_favorite,
    user_library,
)

logger = logging.getLogger(__name__)


def _comic_or_404(slug: str) -> Comic:
    return get_object_or_404(Comic.objects.visible(), slug=slug)


class LibraryView(APIView):
    permission_classes = [IsAuthenticated]


class LibraryListView(LibraryView):
    @extend_schema(tags=["Library"], responses={200: UserLibrarySerializer(many=True)})
    def get(self, request):
        filterset = LibraryFilter(
            request.query_params,
            queryset=user_library(request.user).order_by("-created_at"),
            request=request,
        )
        if not filterset.is_valid():
            return Response(translate_validation(filterset.errors).detail, status=status.HTTP_400_BAD_REQUEST)

        paginator = PageNumberPagination()
        page = paginator.paginate_queryset(filterset.qs, request, view=self)
        return paginator.get_paginated_response(UserLibrarySerializer(page, many=True).data)


class LibraryStatisticsView(LibraryView):
    @extend_schema(tags=["Library"], responses={200: OpenApiResponse(description="Library totals")})
    def get(self, request):
        return Response({"data": library_statistics(request.user)})


class LibraryFavoritesView(LibraryView):
    @extend_schema(tags=["Library"], responses={200: UserLibrarySerializer(many=True)})
    def get(self, request):
        return Response({"data": UserLibrarySerializer(favorites(request.user), many=True).data})


class LibraryRecentView(LibraryView):
    @extend_schema(tags=["Library"], responses={200: UserLibrarySerializer(many=True)})
    def get(self, request):
        return Response({"data": UserLibrarySerializer(recently_added(request.user), many=True).data})


class LibraryEntryView(LibraryView):
    @extend_schema(
        tags=["Library"],
        request=AddToLibrarySerializer,
        responses={201: UserLibrarySerializer, 200: UserLibrarySerializer, 403: OpenApiResponse()},
    )
    def post(self, request, slug):
        comic = _comic_or_404(slug)
        serializer = AddToLibrarySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            entry, created = add_to_library(
                user=request.user,
                comic=comic,
                access_type=serializer.validated_data.get("access_type"),
            )
        except LibraryAccessError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_403_FORBIDDEN)

        return Response(
            {
                "message": "Comic added to library" if created else "Comic already in library",
                "data": UserLibrarySerializer(entry).data,
            },
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )

    @extend_schema(tags=["Library"], responses={200: OpenApiResponse(), 404: OpenApiResponse()})
    def delete(self, request, slug):
        comic = _comic_or_404(slug)
        try:
            remove_from_library(user=request.user, comic=comic)
        except LibraryEntryNotFoundError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        return Response({"message": "Comic removed from library"})


class LibraryFavoriteToggleView(LibraryView):
    @extend_schema(tags=["Library"], request=None, responses={200: OpenApiResponse(description="{is_favorite}")})
    def post(self, request, slug):
        comic = _comic_or_404(slug)
        entry = toggle_favorite(user=request.user, comic=comic)
        return Response({"is_favorite": entry.is_favorite})


class LibraryRatingView(LibraryView):
    @extend_schema(tags=["Library"], request=LibraryRatingSerializer, responses={200: UserLibrarySerializer})
    def post(self, request, slug):
        comic = _comic_or_404(slug)
        serializer = LibraryRatingSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            entry = set_rating(
                user=request.user,
                comic=comic,
                rating=serializer.validated_data["rating"],
                review=serializer.validated_data.get("review"),
            )
        except LibraryEntryNotFoundError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)

        return Response({"data": UserLibrarySerializer(entry).data})
