# reviews/services/exceptions.py


class ReviewServiceError(Exception):
    """Base error for review operations."""


class DuplicateReviewError(ReviewServiceError):
    """User already reviewed this comic."""


class ReviewAccessDeniedError(ReviewServiceError):
    """User cannot review a comic they cannot read."""


class ReviewOwnershipError(ReviewServiceError):
    """Only the author may change or delete their review."""


class SelfVoteError(ReviewServiceError):
    """Users cannot vote on their own review."""


class VoteNotFoundError(ReviewServiceError):
    """No vote to remove."""
