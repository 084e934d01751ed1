# reviews/services/review_service.py

"""
======================================================
PATH: reviews/services/review_service.py
======================================================
REVIEW SERVICE (reader side)

Rules:
- one review per user per comic
- only readers with access to the comic may review it
- approved reviews are the source of Comic.average_rating / total_ratings
- authors cannot vote on their own review; vote totals are recounted
"""

from __future__ import annotations

import logging

from django.db import IntegrityError, transaction
from django.db.models import Count, F, FloatField, Q
from django.db.models.functions import Cast

from comics.models import Comic
from permissions.roles import CAP_REVIEWS_MODERATE, user_has_capability
from reviews.models import ComicReview, ReviewVote
from reviews.services.exceptions import (
    DuplicateReviewError,
    ReviewAccessDeniedError,
    ReviewOwnershipError,
    SelfVoteError,
    VoteNotFoundError,
)
from reviews.services.moderation import should_auto_approve

logger = logging.getLogger(__name__)

MOST_HELPFUL_MIN_VOTES = 5
RECENT_LIMIT = 10

SORTS = {
    "newest": ("-created_at",),
    "oldest": ("created_at",),
    "rating": ("-rating", "-created_at"),
    "helpful": ("-helpful_votes", "-total_votes", "-created_at"),
}


# ============================================================
# WRITE
# ============================================================


@transaction.atomic
def submit_review(*, user, comic: Comic, rating: int, content: str, title: str = "", is_spoiler: bool = False) -> ComicReview:
    if not user.has_access_to_comic(comic):
        raise ReviewAccessDeniedError("You need access to this comic before reviewing it")

    if ComicReview.objects.filter(user=user, comic=comic).exists():
        raise DuplicateReviewError("You have already reviewed this comic")

    title = (title or "").strip()
    content = (content or "").strip()
    approved = should_auto_approve(user=user, title=title, content=content)

    try:
        with transaction.atomic():
            review = ComicReview.objects.create(
                user=user,
                comic=comic,
                rating=rating,
                title=title,
                content=content,
                is_spoiler=bool(is_spoiler),
                is_approved=approved,
            )
    except IntegrityError:
        raise DuplicateReviewError("You have already reviewed this comic")

    if approved:
        comic.update_rating_from_reviews()

    logger.info(
        "Review submitted",
        extra={"review_id": str(review.id), "comic_id": str(comic.id), "auto_approved": approved},
    )
    return review


@transaction.atomic
def update_review(*, user, review: ComicReview, **changes) -> ComicReview:
    review = ComicReview.objects.select_for_update().select_related("comic").get(pk=review.pk)
    if review.user_id != user.id:
        raise ReviewOwnershipError("You can only edit your own review")

    was_approved = review.is_approved
    text_changed = False
    for field in ("rating", "title", "content", "is_spoiler"):
        if field not in changes:
            continue
        value = changes[field]
        if field in ("title", "content"):
            value = (value or "").strip()
            text_changed = text_changed or value != getattr(review, field)
        setattr(review, field, value)

    if text_changed:
        # edited text goes back through screening
        review.is_approved = should_auto_approve(user=user, title=review.title, content=review.content)
        review.moderated_at = None
        review.moderated_by = None
        review.moderation_reason = ""

    review.save()

    if was_approved or review.is_approved:
        review.comic.update_rating_from_reviews()
    return review


@transaction.atomic
def delete_review(*, user, review: ComicReview) -> None:
    if review.user_id != user.id and not user_has_capability(user, CAP_REVIEWS_MODERATE):
        raise ReviewOwnershipError("You can only delete your own review")
    comic = review.comic
    review.delete()
    comic.update_rating_from_reviews()


# ============================================================
# VOTES
# ============================================================


def _recount_votes(review: ComicReview) -> ComicReview:
    agg = review.votes.aggregate(total=Count("id"), helpful=Count("id", filter=Q(is_helpful=True)))
    review.total_votes = agg["total"] or 0
    review.helpful_votes = agg["helpful"] or 0
    review.save(update_fields=["total_votes", "helpful_votes", "updated_at"])
    return review


@transaction.atomic
def vote(*, user, review: ComicReview, is_helpful: bool) -> ComicReview:
    review = ComicReview.objects.select_for_update().get(pk=review.pk)
    if review.user_id == user.id:
        raise SelfVoteError("You cannot vote on your own review")

    ReviewVote.objects.update_or_create(user=user, review=review, defaults={"is_helpful": bool(is_helpful)})
    return _recount_votes(review)


@transaction.atomic
def remove_vote(*, user, review: ComicReview) -> ComicReview:
    review = ComicReview.objects.select_for_update().get(pk=review.pk)
    deleted, _ = ReviewVote.objects.filter(user=user, review=review).delete()
    if not deleted:
        raise VoteNotFoundError("Vote not found")
    return _recount_votes(review)


# ============================================================
# READ
# ============================================================


def reviews_for_comic(comic: Comic, *, sort: str | None = None, include_spoilers: bool = True):
    qs = comic.reviews.filter(is_approved=True).select_related("user")
    if not include_spoilers:
        qs = qs.filter(is_spoiler=False)
    return qs.order_by(*SORTS.get(sort or "newest", SORTS["newest"]))


def review_statistics(comic: Comic) -> dict:
    approved = comic.reviews.filter(is_approved=True)
    counts = dict(approved.values("rating").annotate(n=Count("id")).values_list("rating", "n"))
    total = sum(counts.values())

    distribution = {}
    for stars in range(1, 6):
        n = counts.get(stars, 0)
        distribution[str(stars)] = {
            "count": n,
            "percentage": round(n / total * 100, 1) if total else 0.0,
        }

    average = sum(stars * n for stars, n in counts.items()) / total if total else 0.0
    return {
        "average_rating": round(average, 2),
        "total_reviews": total,
        "distribution": distribution,
    }


def most_helpful_reviews(*, comic: Comic | None = None, limit: int = RECENT_LIMIT):
    qs = ComicReview.objects.filter(is_approved=True, total_votes__gte=MOST_HELPFUL_MIN_VOTES)
    if comic is not None:
        qs = qs.filter(comic=comic)
    return list(
        qs.select_related("user", "comic")
        .annotate(ratio=Cast(F("helpful_votes"), FloatField()) / Cast(F("total_votes"), FloatField()))
        .order_by("-ratio", "-total_votes")[:limit]
    )


def recent_reviews(*, limit: int = RECENT_LIMIT):
    return list(
        ComicReview.objects.filter(is_approved=True, comic__is_visible=True)
        .select_related("user", "comic")
        .order_by("-created_at")[:limit]
    )


def user_reviews(user):
    return ComicReview.objects.filter(user=user).select_related("comic").order_by("-created_at")


def user_review_for(user, comic: Comic) -> ComicReview | None:
    return ComicReview.objects.filter(user=user, comic=comic).first()
