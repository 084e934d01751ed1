# comics/services/search.py

"""
PATH: comics/services/search.py

CATALOG SEARCH

Only visible, already published comics are ever returned.

- search_comics(params): narrowed by ComicSearchFilter; relevance (rating, then readers) unless sort is given.
- search_suggestions / autocomplete: title, author, publisher (and series)
  matches for a partial query; nothing under 2 characters.
- filter_options: values the search UI can offer.
- popular_search_terms: most common genres, then best-read authors.
"""

from __future__ import annotations

from django.db.models import Count, Max, Min, Sum
from django_filters.utils import translate_validation

from comics.filters import FILTER_PARAMS, RELEVANCE, ComicSearchFilter
from comics.models import Comic
from comics.services.exceptions import InvalidSearchError

MIN_QUERY_LENGTH = 2
OPTION_LIMIT = 100


def _searchable():
    return Comic.objects.visible().published()


def search_comics(params):
    base = _searchable().order_by(*RELEVANCE)
    filterset = ComicSearchFilter(params, queryset=base)
    if not filterset.is_valid():
        raise InvalidSearchError(translate_validation(filterset.errors).detail)
    return filterset.qs


def filters_applied(params) -> bool:
    return any((params.get(name) or "").strip() for name in FILTER_PARAMS)


def _matching(field: str, query: str):
    return _searchable().filter(**{f"{field}__icontains": query})


def _distinct_values(field: str, query: str, limit: int, *, order_by: str | None = None) -> list[str]:
    qs = _matching(field, query).exclude(**{field: ""})
    qs = qs.order_by(order_by or field)
    values = []
    for value in qs.values_list(field, flat=True):
        if value not in values:
            values.append(value)
        if len(values) >= limit:
            break
    return values


def search_suggestions(query: str, limit: int = 10) -> list[str]:
    query = (query or "").strip()
    if len(query) < MIN_QUERY_LENGTH:
        return []

    candidates = []
    for field in ("title", "author", "publisher"):
        candidates += _distinct_values(field, query, limit, order_by="-total_readers")

    unique = list(dict.fromkeys(candidates))
    return unique[:limit]


def autocomplete(query: str, limit: int = 10) -> dict:
    query = (query or "").strip()
    if len(query) < MIN_QUERY_LENGTH:
        return {"titles": [], "authors": [], "publishers": [], "series": []}

    titles = [
        {
            "id": str(comic.id),
            "title": comic.title,
            "slug": comic.slug,
            "cover_image_url": comic.cover_image_url,
        }
        for comic in _matching("title", query).order_by("-total_readers")[:limit]
    ]

    return {
        "titles": titles,
        "authors": _distinct_values("author", query, limit),
        "publishers": _distinct_values("publisher", query, limit),
        "series": _distinct_values("series", query, limit),
    }


def _options(field: str, *, limit: int | None = None) -> list:
    qs = (
        _searchable()
        .exclude(**{field: ""})
        .order_by(field)
        .values_list(field, flat=True)
        .distinct()
    )
    return list(qs[:limit] if limit else qs)


def filter_options() -> dict:
    comics = _searchable()
    years = comics.aggregate(min=Min("publication_year"), max=Max("publication_year"))
    prices = {
        "min": comics.filter(price__gt=0).aggregate(value=Min("price"))["value"],
        "max": comics.aggregate(value=Max("price"))["value"],
    }

    tags = set()
    for comic in comics.only("pk", "tags"):
        tags.update(comic.get_tags())

    return {
        "genres": _options("genre"),
        "authors": _options("author", limit=OPTION_LIMIT),
        "publishers": _options("publisher", limit=OPTION_LIMIT),
        "languages": _options("language"),
        "publication_years": years,
        "price_range": {key: (f"{value:.2f}" if value is not None else None) for key, value in prices.items()},
        "tags": sorted(tags),
    }


def popular_search_terms(limit: int = 10) -> list[str]:
    comics = _searchable()

    genres = (
        comics.exclude(genre="")
        .values("genre")
        .annotate(total=Count("id"))
        .order_by("-total", "genre")[:limit]
    )
    authors = (
        comics.exclude(author="")
        .values("author")
        .annotate(readers=Sum("total_readers"))
        .order_by("-readers", "author")[:limit]
    )

    terms = [row["genre"] for row in genres] + [row["author"] for row in authors]
    return list(dict.fromkeys(terms))
