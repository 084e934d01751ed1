# reviews/urls.py

from django.urls import path

from reviews.views import (
    ComicReviewsView,
    ComicReviewStatisticsView,
    MostHelpfulReviewsView,
    MyComicReviewView,
    MyReviewsView,
    RecentReviewsView,
    ReviewDetailView,
    ReviewVoteView,
)

app_name = "reviews"

urlpatterns = [
    path("", RecentReviewsView.as_view(), name="recent"),
    path("most-helpful/", MostHelpfulReviewsView.as_view(), name="most-helpful"),
    path("mine/", MyReviewsView.as_view(), name="mine"),
    path("comics/<slug:slug>/", ComicReviewsView.as_view(), name="comic-reviews"),
    path("comics/<slug:slug>/statistics/", ComicReviewStatisticsView.as_view(), name="comic-statistics"),
    path("comics/<slug:slug>/mine/", MyComicReviewView.as_view(), name="comic-mine"),
    path("<uuid:review_id>/", ReviewDetailView.as_view(), name="detail"),
    path("<uuid:review_id>/vote/", ReviewVoteView.as_view(), name="vote"),
]
