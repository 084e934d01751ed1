# notifications/tests/test_notifications.py

from __future__ import annotations

from datetime import timedelta
from io import StringIO
from smtplib import SMTPException
from unittest.mock import patch

from django.core import mail
from django.core.management import call_command
from django.test import TestCase, override_settings
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from comics.models import Comic
from comics.tests.factories import make_comic, make_user
from notifications.models import NotificationJob, ReleaseAnnouncement
from notifications.services.exceptions import ComicNotReleasedError, RecipientOptedOutError
from notifications.services.notifications import (
    announce_due_releases,
    notification_statistics,
    notify_new_comic,
    process_pending_jobs,
    send_to_user,
)
from users.models import UserPreferences


def opt_out(user, **flags):
    prefs = UserPreferences.for_user(user)
    for name, value in flags.items():
        setattr(prefs, name, value)
    prefs.save()
    return prefs


class ReleaseSignalTests(TestCase):
    """
    GUARANTEES:
    - a comic is announced once, when it becomes visible and published
    - opted-out readers are skipped
    - nothing is queued until the transaction commits
    """

    def setUp(self):
        self.alice = make_user("alice@example.com")
        self.bob = make_user("bob@example.com")
        opt_out(self.bob, new_releases_notifications=False)

    def test_new_released_comic_queues_jobs_on_commit(self):
        with self.captureOnCommitCallbacks(execute=True):
            comic = make_comic("Night Shift")

        jobs = NotificationJob.objects.filter(comic=comic)
        self.assertEqual([job.recipient.email for job in jobs], ["alice@example.com"])
        self.assertEqual(jobs[0].subject, "New comic: Night Shift")

    def test_hidden_comic_is_announced_when_made_visible(self):
        with self.captureOnCommitCallbacks(execute=True):
            comic = make_comic("Night Shift", is_visible=False)
        self.assertFalse(NotificationJob.objects.exists())

        with self.captureOnCommitCallbacks(execute=True):
            comic.is_visible = True
            comic.save()
        self.assertEqual(NotificationJob.objects.count(), 1)

    def test_later_saves_do_not_requeue(self):
        with self.captureOnCommitCallbacks(execute=True):
            comic = make_comic("Night Shift")

        with self.captureOnCommitCallbacks(execute=True):
            comic.description = "Updated blurb"
            comic.save()

        self.assertEqual(NotificationJob.objects.count(), 1)

    def test_republish_does_not_mail_twice(self):
        with self.captureOnCommitCallbacks(execute=True):
            comic = make_comic("Night Shift")

        with self.captureOnCommitCallbacks(execute=True):
            comic.is_visible = False
            comic.save()
            comic.is_visible = True
            comic.save()

        self.assertEqual(NotificationJob.objects.count(), 1)

    def test_scheduled_release_is_announced_once_it_goes_live(self):
        with self.captureOnCommitCallbacks(execute=True):
            comic = make_comic("Night Shift", published_at=timezone.now() + timedelta(days=3))
        self.assertFalse(NotificationJob.objects.exists())
        self.assertEqual(announce_due_releases(), 0)

        # release time passes without any save
        Comic.objects.filter(pk=comic.pk).update(published_at=timezone.now() - timedelta(minutes=1))

        self.assertEqual(announce_due_releases(), 1)
        self.assertEqual(
            [job.recipient.email for job in NotificationJob.objects.filter(comic=comic)],
            ["alice@example.com"],
        )
        self.assertEqual(ReleaseAnnouncement.objects.get(comic=comic).recipients, 1)

        self.assertEqual(announce_due_releases(), 0)
        self.assertEqual(NotificationJob.objects.count(), 1)

    def test_sweep_skips_comics_announced_on_save(self):
        with self.captureOnCommitCallbacks(execute=True):
            make_comic("Night Shift")

        self.assertEqual(announce_due_releases(), 0)
        self.assertEqual(NotificationJob.objects.count(), 1)

    def test_sweep_ignores_hidden_and_old_releases(self):
        make_comic("Hidden", is_visible=False, published_at=timezone.now() - timedelta(hours=1))
        make_comic("Back Catalog", published_at=timezone.now() - timedelta(days=30))

        self.assertEqual(announce_due_releases(), 0)

    def test_command_announces_and_delivers(self):
        comic = make_comic("Night Shift", published_at=timezone.now() + timedelta(days=3))
        Comic.objects.filter(pk=comic.pk).update(published_at=timezone.now() - timedelta(minutes=1))
        out = StringIO()

        call_command("process_notifications", stdout=out)

        self.assertIn("announced=1 processed=1 sent=1", out.getvalue())
        self.assertEqual([message.to for message in mail.outbox], [["alice@example.com"]])

    @override_settings(NOTIFICATIONS_ENABLED=False)
    def test_disabled_notifications(self):
        with self.captureOnCommitCallbacks(execute=True):
            make_comic("Night Shift")
        self.assertFalse(NotificationJob.objects.exists())


class EnqueueTests(TestCase):
    def setUp(self):
        self.comic = make_comic("Night Shift", is_visible=False)

    def test_unreleased_comic_needs_force(self):
        make_user()
        with self.assertRaises(ComicNotReleasedError):
            notify_new_comic(self.comic)

        self.assertEqual(notify_new_comic(self.comic, force=True), 1)

    def test_email_notifications_off_skips_user(self):
        opt_out(make_user(), email_notifications=False)
        make_user("inactive@example.com", is_active=False)
        self.assertEqual(notify_new_comic(self.comic, force=True), 0)

    def test_direct_send_respects_preferences(self):
        user = make_user()
        opt_out(user, new_releases_notifications=False)

        with self.assertRaises(RecipientOptedOutError):
            send_to_user(user, self.comic)

        job = send_to_user(user, self.comic, force=True)
        self.assertEqual(job.kind, NotificationJob.KIND_DIRECT)


@override_settings(NOTIFICATION_RETRY_DELAY_SECONDS=60)
class DeliveryTests(TestCase):
    """
    GUARANTEES:
    - due jobs are mailed and marked sent
    - failures back off exponentially and stop at max_attempts
    """

    def setUp(self):
        self.user = make_user(name="Alice")
        self.comic = make_comic("Night Shift", is_visible=False)
        self.job = send_to_user(self.user, self.comic)

    def test_sends_due_jobs(self):
        summary = process_pending_jobs()

        self.assertEqual(summary, {"processed": 1, "sent": 1, "retrying": 0, "failed": 0})
        self.assertEqual(len(mail.outbox), 1)
        self.assertEqual(mail.outbox[0].to, ["reader@example.com"])
        self.assertEqual(mail.outbox[0].subject, "New comic: Night Shift")
        self.assertIn("Hi Alice,", mail.outbox[0].body)

        self.job.refresh_from_db()
        self.assertEqual(self.job.status, NotificationJob.STATUS_SENT)
        self.assertIsNotNone(self.job.sent_at)

    def test_future_jobs_wait(self):
        NotificationJob.objects.update(available_at=timezone.now() + timedelta(minutes=5))
        self.assertEqual(process_pending_jobs()["processed"], 0)

    @patch("notifications.services.notifications.send_mail", side_effect=SMTPException("relay down"))
    def test_retry_then_fail(self, send):
        before = timezone.now()
        summary = process_pending_jobs()
        self.assertEqual(summary["retrying"], 1)

        self.job.refresh_from_db()
        self.assertEqual(self.job.attempts, 1)
        self.assertEqual(self.job.status, NotificationJob.STATUS_PENDING)
        self.assertIn("relay down", self.job.last_error)
        self.assertGreaterEqual(self.job.available_at, before + timedelta(seconds=60))

        # second failure doubles the delay
        NotificationJob.objects.update(available_at=timezone.now())
        before = timezone.now()
        process_pending_jobs()
        self.job.refresh_from_db()
        self.assertGreaterEqual(self.job.available_at, before + timedelta(seconds=120))

        NotificationJob.objects.update(available_at=timezone.now())
        summary = process_pending_jobs()

        self.assertEqual(summary["failed"], 1)
        self.job.refresh_from_db()
        self.assertEqual(self.job.status, NotificationJob.STATUS_FAILED)
        self.assertEqual(self.job.attempts, 3)
        self.assertEqual(send.call_count, 3)

    def test_statistics(self):
        opt_out(make_user("quiet@example.com"), email_notifications=False)

        stats = notification_statistics()

        self.assertEqual(stats["total_users"], 2)
        self.assertEqual(stats["email_enabled_users"], 1)
        self.assertEqual(stats["new_releases_subscribers"], 1)
        self.assertEqual(stats["subscription_rate"], 50.0)
        self.assertEqual(stats["jobs"]["pending"], 1)


class NotificationAdminEndpointTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.admin = make_user("admin@example.com", role="admin")
        self.client.force_authenticate(self.admin)
        self.comic = make_comic("Night Shift", is_visible=False)

    def test_reader_is_forbidden(self):
        self.client.force_authenticate(make_user())
        res = self.client.get(reverse("notifications:statistics"))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_statistics(self):
        res = self.client.get(reverse("notifications:statistics"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["statistics"]["total_users"], 1)

    def test_comic_notification_requires_release_or_force(self):
        url = reverse("notifications:comic", args=[self.comic.slug])

        refused = self.client.post(url, {}, format="json")
        self.assertEqual(refused.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(refused.data["comic"]["is_visible"])

        queued = self.client.post(url, {"force": True}, format="json")
        self.assertEqual(queued.status_code, status.HTTP_202_ACCEPTED)
        self.assertEqual(queued.data["queued"], 1)

    def test_user_notification(self):
        reader = make_user()
        res = self.client.post(
            reverse("notifications:user"),
            {"user_id": str(reader.id), "comic_slug": self.comic.slug},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_202_ACCEPTED)
        self.assertEqual(res.data["recipient"], "reader@example.com")
        self.assertEqual(res.data["status"], NotificationJob.STATUS_PENDING)

    def test_user_notification_opted_out(self):
        reader = make_user()
        opt_out(reader, email_notifications=False)
        res = self.client.post(
            reverse("notifications:user"),
            {"user_id": str(reader.id), "comic_slug": self.comic.slug},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_unknown_user_is_404(self):
        res = self.client.post(
            reverse("notifications:user"),
            {"user_id": "00000000-0000-0000-0000-000000000000", "comic_slug": self.comic.slug},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_job_list_filters_by_status(self):
        job = send_to_user(self.admin, self.comic)
        NotificationJob.objects.filter(pk=job.pk).update(status=NotificationJob.STATUS_SENT)
        send_to_user(self.admin, self.comic)

        res = self.client.get(reverse("notifications:jobs"), {"status": "sent"})
        self.assertEqual(res.data["count"], 1)
