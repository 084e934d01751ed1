from .moderation import (
    BulkModerationView,
    ModerationDeleteView,
    ModerationStatisticsView,
    PendingReviewsView,
    ReviewApproveView,
    ReviewRejectView,
)
from .reviews import (
    ComicReviewsView,
    ComicReviewStatisticsView,
    MostHelpfulReviewsView,
    MyComicReviewView,
    MyReviewsView,
    RecentReviewsView,
    ReviewDetailView,
    ReviewVoteView,
)

__all__ = [
    "RecentReviewsView",
    "MostHelpfulReviewsView",
    "MyReviewsView",
    "ComicReviewsView",
    "ComicReviewStatisticsView",
    "MyComicReviewView",
    "ReviewDetailView",
    "ReviewVoteView",
    "PendingReviewsView",
    "ModerationStatisticsView",
    "BulkModerationView",
    "ReviewApproveView",
    "ReviewRejectView",
    "ModerationDeleteView",
]
