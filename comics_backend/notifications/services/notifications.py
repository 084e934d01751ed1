# notifications/services/notifications.py

"""
======================================================
PATH: notifications/services/notifications.py
======================================================
NEW COMIC NOTIFICATIONS (DB-backed queue)

Enqueue:
- notify_new_comic(comic): one job per active, subscribed user.
  Users that already have a new_comic job for this comic are skipped, so a
  comic that is hidden and re-published does not mail everyone twice.
  Every call records a ReleaseAnnouncement for the comic.
- announce_due_releases(): sweep for scheduled releases that went live
  without a save (no announcement row yet).
- send_to_user(user, comic): one direct job.

Subscribed = email_notifications AND new_releases_notifications. Users that
never saved preferences get the defaults (both on).

Deliver:
- process_pending_jobs(limit): send_mail per due job.
  failure -> attempts += 1, last_error, available_at = now + delay * 2^(attempts-1)
  attempts >= max_attempts -> failed
"""

from __future__ import annotations

import logging
from datetime import timedelta

from django.conf import settings
from django.contrib.auth import get_user_model
from django.core.mail import send_mail
from django.db import transaction
from django.db.models import Count, F, Q
from django.utils import timezone

from comics.models import Comic
from notifications.models import NotificationJob, ReleaseAnnouncement
from notifications.services.exceptions import ComicNotReleasedError, RecipientOptedOutError

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 100


def notifications_enabled() -> bool:
    return bool(getattr(settings, "NOTIFICATIONS_ENABLED", True))


def _retry_delay(attempts: int) -> timedelta:
    base = int(getattr(settings, "NOTIFICATION_RETRY_DELAY_SECONDS", 60))
    return timedelta(seconds=base * (2 ** max(attempts - 1, 0)))


def _subscribed_filter() -> Q:
    return Q(preferences__isnull=True) | Q(
        preferences__email_notifications=True,
        preferences__new_releases_notifications=True,
    )


def subscribed_users():
    return get_user_model().objects.filter(is_active=True).filter(_subscribed_filter())


def wants_new_release_emails(user) -> bool:
    prefs = getattr(user, "preferences", None)
    if prefs is None:
        return True
    return prefs.wants_new_release_emails()


def comic_url(comic: Comic) -> str:
    base = (getattr(settings, "FRONTEND_BASE_URL", "") or "").rstrip("/")
    return f"{base}/comics/{comic.slug}"


def new_comic_message(comic: Comic, user) -> tuple[str, str]:
    subject = f"New comic: {comic.title}"
    lines = [
        f"Hi {user.name or user.email},",
        "",
        f"{comic.title} by {comic.author} is now available.",
    ]
    if comic.description:
        lines += ["", comic.description[:300]]
    lines += [
        "",
        "Free to read" if comic.is_free else f"Price: {comic.price}",
        f"Read it here: {comic_url(comic)}",
        "",
        "You are receiving this because new release emails are on in your preferences.",
    ]
    return subject, "\n".join(lines)


def _ensure_released(comic: Comic) -> None:
    if not (comic.is_visible and comic.is_published):
        raise ComicNotReleasedError("Comic must be visible and published to send notifications")


# ============================================================
# ENQUEUE
# ============================================================


@transaction.atomic
def notify_new_comic(comic: Comic, *, force: bool = False) -> int:
    """Returns the number of jobs enqueued."""
    if not notifications_enabled():
        return 0
    if not force:
        _ensure_released(comic)

    already = NotificationJob.objects.filter(
        comic=comic,
        kind=NotificationJob.KIND_NEW_COMIC,
    ).values_list("recipient_id", flat=True)

    recipients = subscribed_users().exclude(pk__in=already).distinct()

    jobs = []
    for user in recipients.iterator():
        subject, body = new_comic_message(comic, user)
        jobs.append(
            NotificationJob(
                kind=NotificationJob.KIND_NEW_COMIC,
                recipient=user,
                comic=comic,
                subject=subject,
                body=body,
            )
        )

    NotificationJob.objects.bulk_create(jobs)

    announcement, created = ReleaseAnnouncement.objects.get_or_create(
        comic=comic,
        defaults={"recipients": len(jobs)},
    )
    if not created and jobs:
        ReleaseAnnouncement.objects.filter(pk=announcement.pk).update(recipients=F("recipients") + len(jobs))

    logger.info(
        "New comic notifications enqueued",
        extra={"comic_id": str(comic.id), "recipients": len(jobs)},
    )
    return len(jobs)


def send_to_user(user, comic: Comic, *, force: bool = False) -> NotificationJob:
    if not force and not wants_new_release_emails(user):
        raise RecipientOptedOutError("User has new release emails turned off")

    subject, body = new_comic_message(comic, user)
    job = NotificationJob.objects.create(
        kind=NotificationJob.KIND_DIRECT,
        recipient=user,
        comic=comic,
        subject=subject,
        body=body,
    )
    logger.info(
        "Direct notification enqueued",
        extra={"job_id": str(job.id), "user_id": str(user.id), "comic_id": str(comic.id)},
    )
    return job


def announce_due_releases(*, now=None) -> int:
    """
    Announce scheduled releases that have gone live since they were saved.
    Only comics published within NOTIFICATION_RELEASE_LOOKBACK_DAYS are
    considered. Returns the number of comics announced.
    """
    if not notifications_enabled():
        return 0

    now = now or timezone.now()
    lookback = timedelta(days=int(getattr(settings, "NOTIFICATION_RELEASE_LOOKBACK_DAYS", 7)))

    due = Comic.objects.filter(
        is_visible=True,
        published_at__isnull=False,
        published_at__lte=now,
        published_at__gte=now - lookback,
        release_announcement__isnull=True,
    ).order_by("published_at")

    announced = 0
    for comic in due:
        notify_new_comic(comic)
        announced += 1

    if announced:
        logger.info("Scheduled releases announced", extra={"comics": announced})
    return announced


# ============================================================
# DELIVERY
# ============================================================


def deliver(job: NotificationJob) -> bool:
    """
    One attempt. Returns True when sent. Failures are recorded on the job
    and never raised.
    """
    job.attempts += 1
    try:
        send_mail(
            subject=job.subject,
            message=job.body,
            from_email=settings.DEFAULT_FROM_EMAIL or None,
            recipient_list=[job.recipient.email],
            fail_silently=False,
        )
    except Exception as exc:
        job.last_error = f"{type(exc).__name__}: {exc}"[:2000]
        if job.is_exhausted:
            job.status = NotificationJob.STATUS_FAILED
            logger.error(
                "Notification failed permanently",
                extra={"job_id": str(job.id), "attempts": job.attempts, "error": job.last_error},
            )
        else:
            job.available_at = timezone.now() + _retry_delay(job.attempts)
            logger.warning(
                "Notification attempt failed",
                extra={"job_id": str(job.id), "attempts": job.attempts, "error": job.last_error},
            )
        job.save(update_fields=["attempts", "last_error", "status", "available_at", "updated_at"])
        return False

    job.status = NotificationJob.STATUS_SENT
    job.sent_at = timezone.now()
    job.last_error = ""
    job.save(update_fields=["attempts", "status", "sent_at", "last_error", "updated_at"])
    return True


def process_pending_jobs(limit: int = DEFAULT_BATCH_SIZE) -> dict:
    """
    Deliver up to `limit` due jobs. Returns {"processed", "sent", "retrying", "failed"}.
    """
    now = timezone.now()
    summary = {"processed": 0, "sent": 0, "retrying": 0, "failed": 0}

    with transaction.atomic():
        due = list(
            NotificationJob.objects.select_for_update(skip_locked=True, of=("self",))
            .select_related("recipient")
            .filter(status=NotificationJob.STATUS_PENDING, available_at__lte=now)
            .order_by("available_at", "created_at")[:limit]
        )

        for job in due:
            summary["processed"] += 1
            if deliver(job):
                summary["sent"] += 1
            elif job.status == NotificationJob.STATUS_FAILED:
                summary["failed"] += 1
            else:
                summary["retrying"] += 1

    if summary["processed"]:
        logger.info("Notification batch processed", extra=summary)
    return summary


# ============================================================
# STATS
# ============================================================


def notification_statistics() -> dict:
    User = get_user_model()
    total = User.objects.count()
    email_enabled = User.objects.filter(
        Q(preferences__isnull=True) | Q(preferences__email_notifications=True)
    ).count()
    subscribed = User.objects.filter(_subscribed_filter()).count()

    jobs = NotificationJob.objects.aggregate(
        pending=Count("id", filter=Q(status=NotificationJob.STATUS_PENDING)),
        sent=Count("id", filter=Q(status=NotificationJob.STATUS_SENT)),
        failed=Count("id", filter=Q(status=NotificationJob.STATUS_FAILED)),
    )

    return {
        "total_users": total,
        "email_enabled_users": email_enabled,
        "new_releases_subscribers": subscribed,
        "subscription_rate": round(subscribed / total * 100, 2) if total else 0,
        "jobs": {
            "pending": jobs["pending"] or 0,
            "sent": jobs["sent"] or 0,
            "failed": jobs["failed"] or 0,
        },
    }
