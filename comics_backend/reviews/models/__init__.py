# reviews/models/__init__.py

from .review import ComicReview
from .vote import ReviewVote

__all__ = [
    "ComicReview",
    "ReviewVote",
]
