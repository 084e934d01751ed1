from .admin_uploads import ComicCoverUploadView, ComicFromDirectoryView, ComicPagesUploadView
from .catalog import (
    ComicDetailView,
    ComicListView,
    ComicPagesView,
    FeaturedComicsView,
    GenreListView,
    PopularComicsView,
    RecentComicsView,
    RecommendationsView,
    SimilarComicsView,
    TrendingComicsView,
)
from .engagement import ComicCommentsView, ComicLikeView, ComicRateView, ComicViewTrackView
from .search import (
    ComicSearchView,
    PopularSearchTermsView,
    SearchAutocompleteView,
    SearchFilterOptionsView,
    SearchSuggestionsView,
)

__all__ = [
    "ComicListView",
    "FeaturedComicsView",
    "RecentComicsView",
    "GenreListView",
    "PopularComicsView",
    "TrendingComicsView",
    "RecommendationsView",
    "ComicDetailView",
    "ComicPagesView",
    "SimilarComicsView",
    "ComicLikeView",
    "ComicRateView",
    "ComicCommentsView",
    "ComicViewTrackView",
    "ComicSearchView",
    "SearchSuggestionsView",
    "SearchAutocompleteView",
    "SearchFilterOptionsView",
    "PopularSearchTermsView",
    "ComicFromDirectoryView",
    "ComicPagesUploadView",
    "ComicCoverUploadView",
]
