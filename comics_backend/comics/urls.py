# comics/urls.py

"""
COMICS API URLS (V2)

Rules:
- Fixed routes (featured/, recent/, genres/, ...) MUST come before <slug:slug>/
  otherwise they are captured as slugs.
"""

from django.urls import path

from comics.views import (
    ComicCommentsView,
    ComicDetailView,
    ComicLikeView,
    ComicListView,
    ComicPagesView,
    ComicRateView,
    ComicSearchView,
    ComicViewTrackView,
    FeaturedComicsView,
    GenreListView,
    PopularComicsView,
    PopularSearchTermsView,
    RecentComicsView,
    RecommendationsView,
    SearchAutocompleteView,
    SearchFilterOptionsView,
    SearchSuggestionsView,
    SimilarComicsView,
    TrendingComicsView,
)

app_name = "comics"

urlpatterns = [
    path("", ComicListView.as_view(), name="list"),
    path("featured/", FeaturedComicsView.as_view(), name="featured"),
    path("recent/", RecentComicsView.as_view(), name="recent"),
    path("genres/", GenreListView.as_view(), name="genres"),
    path("popular/", PopularComicsView.as_view(), name="popular"),
    path("trending/", TrendingComicsView.as_view(), name="trending"),
    path("recommendations/", RecommendationsView.as_view(), name="recommendations"),
    path("search/", ComicSearchView.as_view(), name="search"),
    path("search/suggestions/", SearchSuggestionsView.as_view(), name="search-suggestions"),
    path("search/autocomplete/", SearchAutocompleteView.as_view(), name="search-autocomplete"),
    path("search/filter-options/", SearchFilterOptionsView.as_view(), name="search-filter-options"),
    path("search/popular-terms/", PopularSearchTermsView.as_view(), name="search-popular-terms"),
    # ---------------- PER COMIC ----------------
    path("<slug:slug>/", ComicDetailView.as_view(), name="detail"),
    path("<slug:slug>/pages/", ComicPagesView.as_view(), name="pages"),
    path("<slug:slug>/similar/", SimilarComicsView.as_view(), name="similar"),
    path("<slug:slug>/like/", ComicLikeView.as_view(), name="like"),
    path("<slug:slug>/rate/", ComicRateView.as_view(), name="rate"),
    path("<slug:slug>/comments/", ComicCommentsView.as_view(), name="comments"),
    path("<slug:slug>/view/", ComicViewTrackView.as_view(), name="view"),
]
