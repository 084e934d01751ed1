# comics/services/catalog.py

"""
PATH: comics/services/catalog.py

CATALOG QUERIES

Purpose:
- Single place for the visible-catalog listing rules used by the V2 API.
- Search is case-insensitive over title / author / description.
- Sorting: rating | popular | title (asc/desc) | default newest first.
- Page size defaults to 20 and is capped at 50.
"""

from __future__ import annotations

from django.db.models import Q, QuerySet

from comics.models import Comic

DEFAULT_LIMIT = 20
MAX_LIMIT = 50

FEATURED_LIMIT = 6
RECENT_LIMIT = 12


def parse_limit(raw, *, default: int = DEFAULT_LIMIT, maximum: int = MAX_LIMIT) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        return default
    if value < 1:
        return default
    return min(value, maximum)


def _truthy(raw) -> bool:
    return str(raw or "").strip().lower() in {"1", "true", "yes", "on"}


def catalog_queryset(
    *,
    genre: str | None = None,
    is_free=None,
    search: str | None = None,
    sort: str | None = None,
    direction: str | None = None,
) -> QuerySet:
    qs = Comic.objects.visible()

    genre = (genre or "").strip()
    if genre:
        qs = qs.filter(genre__iexact=genre)

    if _truthy(is_free):
        qs = qs.filter(is_free=True)

    search = (search or "").strip()
    if search:
        qs = qs.filter(
            Q(title__icontains=search)
            | Q(author__icontains=search)
            | Q(description__icontains=search)
        )

    sort = (sort or "").strip().lower()
    direction = (direction or "desc").strip().lower()

    if sort == "rating":
        return qs.order_by("-average_rating", "-created_at")
    if sort == "popular":
        return qs.order_by("-total_readers", "-created_at")
    if sort == "title":
        return qs.order_by("-title" if direction == "desc" else "title")
    return qs.order_by("-created_at")


def featured_comics(limit: int = FEATURED_LIMIT):
    return list(Comic.objects.visible().order_by("-average_rating", "-total_readers")[:limit])


def recent_comics(limit: int = RECENT_LIMIT):
    return list(Comic.objects.visible().order_by("-created_at")[:limit])


def genre_list() -> list[str]:
    genres = (
        Comic.objects.visible()
        .exclude(genre="")
        .order_by("genre")
        .values_list("genre", flat=True)
        .distinct()
    )
    return list(genres)


def get_visible_comic(slug: str) -> Comic | None:
    return Comic.objects.visible().filter(slug=slug).first()
