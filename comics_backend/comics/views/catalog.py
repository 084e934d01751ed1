# comics/views/catalog.py
"""
COMICS CATALOG (V2)

GET /api/v2/comics/                   list (genre, is_free, search, sort, direction, limit, page)
GET /api/v2/comics/featured/          top rated (6)
GET /api/v2/comics/recent/            newest (12)
GET /api/v2/comics/genres/            distinct genres
GET /api/v2/comics/popular/           most viewed in a window (?days=30)
GET /api/v2/comics/trending/          week-over-week view growth
GET /api/v2/comics/recommendations/   personalised picks (auth)
GET /api/v2/comics/<slug>/            detail (+ preview pages when locked)
GET /api/v2/comics/<slug>/pages/      all pages (403 ACCESS_DENIED when locked)
GET /api/v2/comics/<slug>/similar/    weighted similarity

Rules:
- Only visible comics are ever returned (hidden -> 404).
- Page URLs of paid comics are only exposed to users with access.
"""

from __future__ import annotations

from django.core.paginator import EmptyPage, Paginator
from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from comics.models import Comic
from comics.serializers import ComicSerializer, engagement_context
from comics.services.catalog import (
    catalog_queryset,
    featured_comics,
    genre_list,
    parse_limit,
    recent_comics,
)
from comics.services.recommendations import recommendations_for_user, similar_comics
from comics.services.view_tracking import popular_comics, trending_comics

PREVIEW_PAGES = 2


class CatalogThrottle(AnonRateThrottle):
    scope = "catalog"


def _serialize(request, comics, **extra_context):
    comics = list(comics)
    context = engagement_context(request.user, comics)
    context.update(extra_context)
    return ComicSerializer(comics, many=True, context=context).data


def _user_can_read(user, comic: Comic) -> bool:
    if comic.is_free:
        return True
    return bool(user and user.is_authenticated and user.has_access_to_comic(comic))


def _visible_comic_or_404(slug: str) -> Comic:
    return get_object_or_404(Comic.objects.visible(), slug=slug)


class PublicCatalogView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [CatalogThrottle]


class ComicListView(PublicCatalogView):
    @extend_schema(
        tags=["Comics"],
        parameters=[
            OpenApiParameter("genre", str, OpenApiParameter.QUERY),
            OpenApiParameter("is_free", bool, OpenApiParameter.QUERY),
            OpenApiParameter("search", str, OpenApiParameter.QUERY),
            OpenApiParameter("sort", str, OpenApiParameter.QUERY, enum=["rating", "popular", "title", "created"]),
            OpenApiParameter("direction", str, OpenApiParameter.QUERY, enum=["asc", "desc"]),
            OpenApiParameter("limit", int, OpenApiParameter.QUERY, description="Default 20, max 50"),
            OpenApiParameter("page", int, OpenApiParameter.QUERY),
        ],
        responses={200: OpenApiResponse(description="{data: [...], meta: {...}}")},
    )
    def get(self, request):
        params = request.query_params
        qs = catalog_queryset(
            genre=params.get("genre"),
            is_free=params.get("is_free"),
            search=params.get("search"),
            sort=params.get("sort"),
            direction=params.get("direction"),
        )
        limit = parse_limit(params.get("limit"))

        paginator = Paginator(qs, limit)
        try:
            page = paginator.page(params.get("page") or 1)
        except EmptyPage:
            page = paginator.page(paginator.num_pages)
        except (TypeError, ValueError):
            page = paginator.page(1)

        return Response(
            {
                "data": _serialize(request, page.object_list),
                "meta": {
                    "current_page": page.number,
                    "total": paginator.count,
                    "per_page": limit,
                    "last_page": paginator.num_pages,
                },
            }
        )


class FeaturedComicsView(PublicCatalogView):
    @extend_schema(tags=["Comics"], responses={200: ComicSerializer(many=True)})
    def get(self, request):
        return Response({"data": _serialize(request, featured_comics())})


class RecentComicsView(PublicCatalogView):
    @extend_schema(tags=["Comics"], responses={200: ComicSerializer(many=True)})
    def get(self, request):
        return Response({"data": _serialize(request, recent_comics())})


class GenreListView(PublicCatalogView):
    @extend_schema(tags=["Comics"], responses={200: OpenApiResponse(description="{data: [genre, ...]}")})
    def get(self, request):
        return Response({"data": genre_list()})


class PopularComicsView(PublicCatalogView):
    @extend_schema(
        tags=["Comics"],
        parameters=[
            OpenApiParameter("days", int, OpenApiParameter.QUERY),
            OpenApiParameter("limit", int, OpenApiParameter.QUERY),
        ],
        responses={200: ComicSerializer(many=True)},
    )
    def get(self, request):
        days = parse_limit(request.query_params.get("days"), default=30, maximum=365)
        limit = parse_limit(request.query_params.get("limit"), default=10)
        return Response({"data": _serialize(request, popular_comics(days=days, limit=limit))})


class TrendingComicsView(PublicCatalogView):
    @extend_schema(tags=["Comics"], responses={200: ComicSerializer(many=True)})
    def get(self, request):
        limit = parse_limit(request.query_params.get("limit"), default=10)
        comics = trending_comics(limit=limit)
        data = _serialize(request, comics)
        for row, comic in zip(data, comics):
            row["growth"] = comic.growth
        return Response({"data": data})


class RecommendationsView(APIView):
    permission_classes = [IsAuthenticated]

    @extend_schema(tags=["Comics"], responses={200: ComicSerializer(many=True)})
    def get(self, request):
        limit = parse_limit(request.query_params.get("limit"), default=10)
        return Response({"data": _serialize(request, recommendations_for_user(request.user, limit=limit))})


class ComicDetailView(PublicCatalogView):
    @extend_schema(
        tags=["Comics"],
        responses={200: OpenApiResponse(description="{data: comic + pages}"), 404: OpenApiResponse()},
    )
    def get(self, request, slug):
        comic = _visible_comic_or_404(slug)
        user = request.user

        data = _serialize(request, [comic])[0]
        data["comments_count"] = comic.comments.filter(is_approved=True).count()

        has_access = _user_can_read(user, comic)
        data["has_access"] = has_access

        pages = comic.page_urls()
        if has_access:
            data["pages"] = pages
        else:
            data["pages"] = pages[:PREVIEW_PAGES]
            data["preview_only"] = True
            data["total_pages"] = len(pages)

        if user.is_authenticated:
            progress = comic.progress_records.filter(user=user).first()
            if progress:
                data["user_progress"] = {
                    "current_page": progress.current_page,
                    "total_pages": progress.total_pages or comic.page_count,
                    "percentage": float(progress.progress_percentage),
                }

        return Response({"data": data})


class ComicPagesView(PublicCatalogView):
    @extend_schema(
        tags=["Comics"],
        responses={
            200: OpenApiResponse(description="{data: [url, ...]}"),
            403: OpenApiResponse(description="ACCESS_DENIED"),
        },
    )
    def get(self, request, slug):
        comic = _visible_comic_or_404(slug)

        if not _user_can_read(request.user, comic):
            return Response(
                {
                    "error": "Purchase required",
                    "code": "ACCESS_DENIED",
                    "is_free": comic.is_free,
                    "price": f"{comic.price:.2f}",
                },
                status=status.HTTP_403_FORBIDDEN,
            )

        return Response({"data": comic.page_urls()})


class SimilarComicsView(PublicCatalogView):
    @extend_schema(tags=["Comics"], responses={200: ComicSerializer(many=True)})
    def get(self, request, slug):
        comic = _visible_comic_or_404(slug)
        limit = parse_limit(request.query_params.get("limit"), default=5, maximum=20)
        similar = similar_comics(comic, limit=limit)
        data = _serialize(request, similar)
        for row, other in zip(data, similar):
            row["similarity_score"] = other.similarity_score
        return Response({"data": data})
