# reviews/services/moderation.py

"""
======================================================
PATH: reviews/services/moderation.py
======================================================
REVIEW MODERATION

Automatic screening (submit + content edits):
- held for a moderator when the author had a review rejected in the last
  30 days, or the text contains a flagged term
- otherwise approved immediately

Moderator actions (approve / reject / bulk / delete) go through the
lifecycle rules and recalculate the comic rating whenever the approved set
changes.
"""

from __future__ import annotations

import logging
import re
from datetime import timedelta

from django.db import transaction
from django.utils import timezone

from reviews.models import ComicReview
from reviews.services.lifecycle import can_transition, validate_transition

logger = logging.getLogger(__name__)

REJECTION_LOOKBACK = timedelta(days=30)

FLAGGED_TERMS = (
    "spam",
    "fake",
    "bot",
    "advertisement",
    "buy now",
    "click here",
    "free download",
    "virus",
    "malware",
    "hack",
)

_FLAGGED_RE = re.compile(r"\b(" + "|".join(re.escape(t) for t in FLAGGED_TERMS) + r")\b", re.IGNORECASE)


# ============================================================
# SCREENING
# ============================================================


def contains_flagged_content(*texts: str) -> bool:
    return any(_FLAGGED_RE.search(text or "") for text in texts)


def recently_rejected(user) -> bool:
    since = timezone.now() - REJECTION_LOOKBACK
    return ComicReview.objects.filter(
        user=user,
        is_approved=False,
        moderated_at__isnull=False,
        moderated_at__gte=since,
    ).exists()


def should_auto_approve(*, user, title: str, content: str) -> bool:
    if recently_rejected(user):
        return False
    return not contains_flagged_content(title, content)


# ============================================================
# MODERATOR ACTIONS
# ============================================================


def _apply(review: ComicReview, *, target: str, moderator, reason: str = "") -> None:
    validate_transition(review=review, target_status=target)
    review.is_approved = target == ComicReview.STATUS_APPROVED
    review.moderated_at = timezone.now()
    review.moderated_by = moderator
    review.moderation_reason = reason
    review.save(update_fields=["is_approved", "moderated_at", "moderated_by", "moderation_reason", "updated_at"])


@transaction.atomic
def approve_review(*, review: ComicReview, moderator) -> ComicReview:
    review = ComicReview.objects.select_for_update().select_related("comic").get(pk=review.pk)
    _apply(review, target=ComicReview.STATUS_APPROVED, moderator=moderator)
    review.comic.update_rating_from_reviews()
    logger.info("Review approved", extra={"review_id": str(review.id), "moderator_id": str(moderator.id)})
    return review


@transaction.atomic
def reject_review(*, review: ComicReview, moderator, reason: str = "") -> ComicReview:
    review = ComicReview.objects.select_for_update().select_related("comic").get(pk=review.pk)
    was_approved = review.is_approved
    _apply(review, target=ComicReview.STATUS_REJECTED, moderator=moderator, reason=reason)
    if was_approved:
        review.comic.update_rating_from_reviews()
    logger.info(
        "Review rejected",
        extra={"review_id": str(review.id), "moderator_id": str(moderator.id), "reason": reason},
    )
    return review


@transaction.atomic
def bulk_moderate(*, review_ids, action: str, moderator, reason: str = "") -> int:
    """Returns how many reviews actually changed state."""
    review_ids = list(review_ids)
    target = ComicReview.STATUS_APPROVED if action == "approve" else ComicReview.STATUS_REJECTED
    reviews = ComicReview.objects.select_for_update().select_related("comic").filter(pk__in=review_ids)

    changed = 0
    touched_comics = {}
    for review in reviews:
        if not can_transition(from_status=review.status, to_status=target):
            continue
        _apply(review, target=target, moderator=moderator, reason=reason)
        touched_comics[review.comic_id] = review.comic
        changed += 1

    for comic in touched_comics.values():
        comic.update_rating_from_reviews()

    logger.info(
        "Bulk review moderation",
        extra={"action": action, "requested": len(review_ids), "changed": changed},
    )
    return changed


@transaction.atomic
def moderator_delete_review(*, review: ComicReview, moderator) -> None:
    comic = review.comic
    review_id = str(review.id)
    review.delete()
    comic.update_rating_from_reviews()
    logger.info("Review deleted by moderator", extra={"review_id": review_id, "moderator_id": str(moderator.id)})


def pending_reviews():
    return (
        ComicReview.objects.filter(is_approved=False, moderated_at__isnull=True)
        .select_related("user", "comic")
        .order_by("created_at")
    )


def moderation_statistics() -> dict:
    now = timezone.now()
    today = timezone.localtime(now).replace(hour=0, minute=0, second=0, microsecond=0)
    week_start = today - timedelta(days=today.weekday())
    month_start = today.replace(day=1)

    reviews = ComicReview.objects.all()
    return {
        "pending": reviews.filter(is_approved=False, moderated_at__isnull=True).count(),
        "approved": reviews.filter(is_approved=True).count(),
        "rejected": reviews.filter(is_approved=False, moderated_at__isnull=False).count(),
        "total": reviews.count(),
        "today": reviews.filter(created_at__gte=today).count(),
        "this_week": reviews.filter(created_at__gte=week_start).count(),
        "this_month": reviews.filter(created_at__gte=month_start).count(),
    }
