# library/progress_urls.py

from django.urls import path

from library.views import (
    BookmarkDeleteView,
    BookmarkListView,
    ComicBookmarksView,
    ComicProgressView,
    ContinueReadingView,
    ProgressListView,
    ReadingPreferencesView,
    ReadingStatisticsView,
    RecentlyReadView,
    SessionEndView,
    SessionPauseView,
    SessionStartView,
)

app_name = "progress"

urlpatterns = [
    path("", ProgressListView.as_view(), name="list"),
    path("statistics/", ReadingStatisticsView.as_view(), name="statistics"),
    path("recent/", RecentlyReadView.as_view(), name="recent"),
    path("continue/", ContinueReadingView.as_view(), name="continue"),
    path("bookmarks/", BookmarkListView.as_view(), name="bookmarks"),
    path("<slug:slug>/", ComicProgressView.as_view(), name="detail"),
    path("<slug:slug>/session/start/", SessionStartView.as_view(), name="session-start"),
    path("<slug:slug>/session/end/", SessionEndView.as_view(), name="session-end"),
    path("<slug:slug>/session/pause/", SessionPauseView.as_view(), name="session-pause"),
    path("<slug:slug>/preferences/", ReadingPreferencesView.as_view(), name="preferences"),
    path("<slug:slug>/bookmarks/", ComicBookmarksView.as_view(), name="comic-bookmarks"),
    path("<slug:slug>/bookmarks/<int:page_number>/", BookmarkDeleteView.as_view(), name="bookmark-delete"),
]
