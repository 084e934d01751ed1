# comics/filters.py

"""
Catalog search filters (django-filter).

Query params:
- query                              text over title / author / series / publisher / description
- genre, author, publisher, language comma-separated, any of
- price_min, price_max               price bounds
- is_free, has_mature_content        booleans
- year_min, year_max                 publication year bounds
- min_rating                         average_rating >= (0..5)
- tags                               comma-separated, all required
- is_new_release                     published in the last 30 days
- max_reading_time                   minutes (2 per page)
- sort                               see SEARCH_SORTS; default relevance
"""

from __future__ import annotations

from datetime import timedelta

import django_filters
from django.db.models import Q
from django.utils import timezone

from comics.models import Comic
from comics.models.comic import MINUTES_PER_PAGE

NEW_RELEASE_DAYS = 30

RELEVANCE = ("-average_rating", "-total_readers")

SEARCH_SORTS = {
    "relevance": RELEVANCE,
    "title_asc": ("title",),
    "title_desc": ("-title",),
    "author_asc": ("author", "title"),
    "author_desc": ("-author", "title"),
    "publication_year_asc": ("publication_year", "title"),
    "publication_year_desc": ("-publication_year", "title"),
    "rating_desc": ("-average_rating", "title"),
    "rating_asc": ("average_rating", "title"),
    "popularity_desc": ("-total_readers", "title"),
    "popularity_asc": ("total_readers", "title"),
    "price_asc": ("price", "title"),
    "price_desc": ("-price", "title"),
    "newest": ("-published_at",),
    "oldest": ("published_at",),
    "recent_views": ("-view_count", "title"),
}

# params that narrow the result set (sort / paging excluded)
FILTER_PARAMS = (
    "genre",
    "author",
    "publisher",
    "language",
    "price_min",
    "price_max",
    "is_free",
    "has_mature_content",
    "year_min",
    "year_max",
    "min_rating",
    "tags",
    "is_new_release",
    "max_reading_time",
)


class CharInFilter(django_filters.BaseInFilter, django_filters.CharFilter):
    pass


class ComicSearchFilter(django_filters.FilterSet):
    query = django_filters.CharFilter(method="filter_query", max_length=255)

    genre = CharInFilter(field_name="genre", lookup_expr="in")
    author = CharInFilter(field_name="author", lookup_expr="in")
    publisher = CharInFilter(field_name="publisher", lookup_expr="in")
    language = CharInFilter(field_name="language", lookup_expr="in")

    price_min = django_filters.NumberFilter(field_name="price", lookup_expr="gte", min_value=0)
    price_max = django_filters.NumberFilter(field_name="price", lookup_expr="lte", min_value=0)
    is_free = django_filters.BooleanFilter(field_name="is_free")
    has_mature_content = django_filters.BooleanFilter(field_name="has_mature_content")

    year_min = django_filters.NumberFilter(field_name="publication_year", lookup_expr="gte", min_value=1900)
    year_max = django_filters.NumberFilter(field_name="publication_year", lookup_expr="lte", min_value=1900)
    min_rating = django_filters.NumberFilter(
        field_name="average_rating", lookup_expr="gte", min_value=0, max_value=5
    )

    tags = CharInFilter(method="filter_tags")
    is_new_release = django_filters.BooleanFilter(method="filter_new_release")
    max_reading_time = django_filters.NumberFilter(method="filter_reading_time", min_value=1)

    sort = django_filters.ChoiceFilter(
        method="apply_sort",
        choices=[(key, key) for key in SEARCH_SORTS],
    )

    class Meta:
        model = Comic
        fields = []

    def filter_query(self, queryset, name, value):
        value = value.strip()
        if not value:
            return queryset
        return queryset.filter(
            Q(title__icontains=value)
            | Q(author__icontains=value)
            | Q(series__icontains=value)
            | Q(publisher__icontains=value)
            | Q(description__icontains=value)
        )

    def filter_tags(self, queryset, name, value):
        wanted = {tag.strip().lower() for tag in value if tag.strip()}
        if not wanted:
            return queryset
        # tags may be a JSON list or a legacy comma string; match in Python
        matching = [
            comic.pk
            for comic in queryset.only("pk", "tags")
            if wanted <= {tag.lower() for tag in comic.get_tags()}
        ]
        return queryset.filter(pk__in=matching)

    def filter_new_release(self, queryset, name, value):
        if value:
            return queryset.filter(published_at__gt=timezone.now() - timedelta(days=NEW_RELEASE_DAYS))
        return queryset

    def filter_reading_time(self, queryset, name, value):
        return queryset.filter(page_count__lte=int(value) // MINUTES_PER_PAGE)

    def apply_sort(self, queryset, name, value):
        return queryset.order_by(*SEARCH_SORTS[value])
