"""
REVIEW MODERATION LIFECYCLE

    pending  -> approved | rejected
    rejected -> approved
    approved -> rejected

No database writes here.
"""

from reviews.models import ComicReview
from reviews.services.exceptions import ReviewServiceError


class InvalidReviewTransitionError(ReviewServiceError):
    pass


ALLOWED_TRANSITIONS = {
    ComicReview.STATUS_PENDING: {
        ComicReview.STATUS_APPROVED,
        ComicReview.STATUS_REJECTED,
    },
    ComicReview.STATUS_REJECTED: {
        ComicReview.STATUS_APPROVED,
    },
    ComicReview.STATUS_APPROVED: {
        ComicReview.STATUS_REJECTED,
    },
}


def can_transition(*, from_status: str, to_status: str) -> bool:
    return to_status in ALLOWED_TRANSITIONS.get(from_status, set())


def validate_transition(*, review: ComicReview, target_status: str):
    if not can_transition(from_status=review.status, to_status=target_status):
        raise InvalidReviewTransitionError(
            f"Review {review.id} cannot transition from "
            f"'{review.status}' to '{target_status}'"
        )
