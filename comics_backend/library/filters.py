# library/filters.py

"""
Library list filters (django-filter).

Query params:
- genre, publisher        case-insensitive exact match on the comic
- favorites=true          favorites only
- rating_min, rating_max  quick rating bounds (1..5)
- status                  unread | reading | completed
- date_from, date_to      date the comic was added (inclusive)
- sort_by / direction     last_read | rating | progress | date_added | title
"""

from __future__ import annotations

import django_filters
from django.db.models import Exists, F, OuterRef, Q

from library.models import UserComicProgress, UserLibrary

STATUS_UNREAD = "unread"
STATUS_READING = "reading"
STATUS_COMPLETED = "completed"

SORT_FIELDS = {
    "last_read": "last_accessed_at",
    "rating": "rating",
    "progress": "completion_percentage",
    "date_added": "created_at",
    "title": "comic__title",
}


def _progress_for_entry():
    return UserComicProgress.objects.filter(user=OuterRef("user"), comic=OuterRef("comic"))


class LibraryFilter(django_filters.FilterSet):
    genre = django_filters.CharFilter(field_name="comic__genre", lookup_expr="iexact")
    publisher = django_filters.CharFilter(field_name="comic__publisher", lookup_expr="iexact")
    favorites = django_filters.BooleanFilter(method="filter_favorites")
    rating_min = django_filters.NumberFilter(field_name="rating", lookup_expr="gte", min_value=1, max_value=5)
    rating_max = django_filters.NumberFilter(field_name="rating", lookup_expr="lte", min_value=1, max_value=5)
    status = django_filters.ChoiceFilter(
        method="filter_status",
        choices=[
            (STATUS_UNREAD, "Unread"),
            (STATUS_READING, "Reading"),
            (STATUS_COMPLETED, "Completed"),
        ],
    )
    date_from = django_filters.DateFilter(field_name="created_at", lookup_expr="date__gte")
    date_to = django_filters.DateFilter(field_name="created_at", lookup_expr="date__lte")
    sort_by = django_filters.ChoiceFilter(
        method="apply_sort",
        choices=[(key, key) for key in SORT_FIELDS],
    )
    direction = django_filters.ChoiceFilter(
        method="noop",
        choices=[("asc", "asc"), ("desc", "desc")],
    )

    class Meta:
        model = UserLibrary
        fields = []

    def filter_favorites(self, queryset, name, value):
        if value:
            return queryset.filter(is_favorite=True)
        return queryset

    def filter_status(self, queryset, name, value):
        started = _progress_for_entry().filter(Q(current_page__gt=1) | Q(is_completed=True))
        completed = _progress_for_entry().filter(is_completed=True)

        queryset = queryset.annotate(_started=Exists(started), _completed=Exists(completed))
        if value == STATUS_UNREAD:
            return queryset.filter(_started=False)
        if value == STATUS_READING:
            return queryset.filter(_started=True, _completed=False)
        return queryset.filter(_completed=True)

    def apply_sort(self, queryset, name, value):
        field = SORT_FIELDS[value]
        descending = (self.data.get("direction") or "desc").lower() != "asc"
        expr = F(field).desc(nulls_last=True) if descending else F(field).asc(nulls_last=True)
        return queryset.order_by(expr, "-created_at")

    def noop(self, queryset, name, value):
        return queryset
