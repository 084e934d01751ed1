# notifications/signals.py

"""
Announce a comic when it becomes released (visible AND published).

- created already released -> notify
- updated from not-released to released -> notify
- any other save (counters, cover, pages, edits) -> nothing

Enqueueing runs on commit so a rolled-back save never mails anyone.
"""

from __future__ import annotations

import logging

from django.db import transaction
from django.db.models.signals import post_save, pre_save
from django.dispatch import receiver
from django.utils import timezone

from comics.models import Comic
from notifications.services.notifications import notifications_enabled, notify_new_comic

logger = logging.getLogger(__name__)


def _released(is_visible, published_at) -> bool:
    return bool(is_visible) and published_at is not None and published_at <= timezone.now()


@receiver(pre_save, sender=Comic, dispatch_uid="notifications.comic_pre_save")
def remember_release_state(sender, instance, raw=False, **kwargs):
    if raw or instance._state.adding:
        instance._was_released = False
        return

    previous = sender.objects.filter(pk=instance.pk).values("is_visible", "published_at").first()
    instance._was_released = bool(previous) and _released(previous["is_visible"], previous["published_at"])


@receiver(post_save, sender=Comic, dispatch_uid="notifications.comic_post_save")
def announce_released_comic(sender, instance, created, raw=False, **kwargs):
    if raw or not notifications_enabled():
        return
    if getattr(instance, "_was_released", False):
        return
    if not _released(instance.is_visible, instance.published_at):
        return

    instance._was_released = True
    comic_id = instance.pk

    def _enqueue():
        comic = Comic.objects.filter(pk=comic_id).first()
        if comic is not None:
            notify_new_comic(comic)

    transaction.on_commit(_enqueue)
    logger.info("Comic release detected", extra={"comic_id": str(comic_id), "created": created})
