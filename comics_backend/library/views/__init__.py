from .library import (
    LibraryEntryView,
    LibraryFavoritesView,
    LibraryFavoriteToggleView,
    LibraryListView,
    LibraryRatingView,
    LibraryRecentView,
    LibraryStatisticsView,
)
from .progress import (
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

__all__ = [
    "LibraryListView",
    "LibraryStatisticsView",
    "LibraryFavoritesView",
    "LibraryRecentView",
    "LibraryEntryView",
    "LibraryFavoriteToggleView",
    "LibraryRatingView",
    "ProgressListView",
    "ReadingStatisticsView",
    "RecentlyReadView",
    "ContinueReadingView",
    "BookmarkListView",
    "ComicProgressView",
    "SessionStartView",
    "SessionEndView",
    "SessionPauseView",
    "ReadingPreferencesView",
    "ComicBookmarksView",
    "BookmarkDeleteView",
]
