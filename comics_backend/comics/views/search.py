# comics/views/search.py
"""
CATALOG SEARCH (V2)

GET /api/v2/comics/search/                  filtered search (see comics/filters.py)
GET /api/v2/comics/search/suggestions/      ?query=  flat list of titles / authors / publishers
GET /api/v2/comics/search/autocomplete/     ?query=  grouped suggestions
GET /api/v2/comics/search/filter-options/   values for the search UI
GET /api/v2/comics/search/popular-terms/    top genres + authors

Validation errors -> 400 {"detail", "errors"}.
"""

from __future__ import annotations

from django.core.paginator import EmptyPage, Paginator
from drf_spectacular.utils import OpenApiParameter, OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.response import Response

from comics.services.catalog import parse_limit
from comics.services.exceptions import InvalidSearchError
from comics.services.search import (
    autocomplete,
    filter_options,
    filters_applied,
    popular_search_terms,
    search_comics,
    search_suggestions,
)
from comics.views.catalog import PublicCatalogView, _serialize

SEARCH_PAGE_SIZE = 20
SEARCH_MAX_PAGE_SIZE = 100
SUGGESTION_MAX = 20


def _query_or_400(request):
    query = (request.query_params.get("query") or "").strip()
    if not query or len(query) > 255:
        return None, Response(
            {"detail": "query is required (1-255 characters)."},
            status=status.HTTP_400_BAD_REQUEST,
        )
    return query, None


class ComicSearchView(PublicCatalogView):
    @extend_schema(
        tags=["Search"],
        parameters=[
            OpenApiParameter("query", str, OpenApiParameter.QUERY),
            OpenApiParameter("genre", str, OpenApiParameter.QUERY, description="Comma-separated"),
            OpenApiParameter("min_rating", float, OpenApiParameter.QUERY),
            OpenApiParameter("price_min", float, OpenApiParameter.QUERY),
            OpenApiParameter("price_max", float, OpenApiParameter.QUERY),
            OpenApiParameter("tags", str, OpenApiParameter.QUERY, description="Comma-separated, all required"),
            OpenApiParameter("year_min", int, OpenApiParameter.QUERY),
            OpenApiParameter("year_max", int, OpenApiParameter.QUERY),
            OpenApiParameter("sort", str, OpenApiParameter.QUERY),
            OpenApiParameter("per_page", int, OpenApiParameter.QUERY, description="Default 20, max 100"),
            OpenApiParameter("page", int, OpenApiParameter.QUERY),
        ],
        responses={
            200: OpenApiResponse(description="{data, pagination, search_info}"),
            400: OpenApiResponse(description="Invalid filters"),
        },
    )
    def get(self, request):
        params = request.query_params
        try:
            qs = search_comics(params)
        except InvalidSearchError as exc:
            return Response({"detail": str(exc), "errors": exc.errors}, status=status.HTTP_400_BAD_REQUEST)

        per_page = parse_limit(params.get("per_page"), default=SEARCH_PAGE_SIZE, maximum=SEARCH_MAX_PAGE_SIZE)
        paginator = Paginator(qs, per_page)
        try:
            page = paginator.page(params.get("page") or 1)
        except EmptyPage:
            page = paginator.page(paginator.num_pages)
        except (TypeError, ValueError):
            page = paginator.page(1)

        empty = paginator.count == 0
        return Response(
            {
                "data": _serialize(request, page.object_list),
                "pagination": {
                    "current_page": page.number,
                    "last_page": paginator.num_pages,
                    "per_page": per_page,
                    "total": paginator.count,
                    "from": None if empty else page.start_index(),
                    "to": None if empty else page.end_index(),
                },
                "search_info": {
                    "query": (params.get("query") or "").strip(),
                    "filters_applied": filters_applied(params),
                    "sort": params.get("sort") or "relevance",
                },
            }
        )


class SearchSuggestionsView(PublicCatalogView):
    @extend_schema(
        tags=["Search"],
        parameters=[
            OpenApiParameter("query", str, OpenApiParameter.QUERY, required=True),
            OpenApiParameter("limit", int, OpenApiParameter.QUERY, description="Default 10, max 20"),
        ],
        responses={200: OpenApiResponse(description="{data: [term, ...], query}")},
    )
    def get(self, request):
        query, error = _query_or_400(request)
        if error:
            return error
        limit = parse_limit(request.query_params.get("limit"), default=10, maximum=SUGGESTION_MAX)
        return Response({"data": search_suggestions(query, limit=limit), "query": query})


class SearchAutocompleteView(PublicCatalogView):
    @extend_schema(
        tags=["Search"],
        parameters=[
            OpenApiParameter("query", str, OpenApiParameter.QUERY, required=True),
            OpenApiParameter("limit", int, OpenApiParameter.QUERY, description="Default 10, max 20"),
        ],
        responses={200: OpenApiResponse(description="{data: {titles, authors, publishers, series}, query}")},
    )
    def get(self, request):
        query, error = _query_or_400(request)
        if error:
            return error
        limit = parse_limit(request.query_params.get("limit"), default=10, maximum=SUGGESTION_MAX)
        return Response({"data": autocomplete(query, limit=limit), "query": query})


class SearchFilterOptionsView(PublicCatalogView):
    @extend_schema(tags=["Search"], responses={200: OpenApiResponse(description="{data: {...}}")})
    def get(self, request):
        return Response({"data": filter_options()})


class PopularSearchTermsView(PublicCatalogView):
    @extend_schema(
        tags=["Search"],
        parameters=[OpenApiParameter("limit", int, OpenApiParameter.QUERY, description="Default 10, max 50")],
        responses={200: OpenApiResponse(description="{data: [term, ...]}")},
    )
    def get(self, request):
        limit = parse_limit(request.query_params.get("limit"), default=10, maximum=50)
        return Response({"data": popular_search_terms(limit=limit)})
