# library/urls.py

from django.urls import path

from library.views import (
    LibraryEntryView,
    LibraryFavoritesView,
    LibraryFavoriteToggleView,
    LibraryListView,
    LibraryRatingView,
    LibraryRecentView,
    LibraryStatisticsView,
)

app_name = "library"

urlpatterns = [
    path("", LibraryListView.as_view(), name="list"),
    path("statistics/", LibraryStatisticsView.as_view(), name="statistics"),
    path("favorites/", LibraryFavoritesView.as_view(), name="favorites"),
    path("recent/", LibraryRecentView.as_view(), name="recent"),
    path("<slug:slug>/", LibraryEntryView.as_view(), name="entry"),
    path("<slug:slug>/favorite/", LibraryFavoriteToggleView.as_view(), name="favorite"),
    path("<slug:slug>/rating/", LibraryRatingView.as_view(), name="rating"),
]
