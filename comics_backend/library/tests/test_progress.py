# library/tests/test_progress.py

from __future__ import annotations

from datetime import timedelta
from unittest.mock import patch

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from comics.tests.factories import make_comic, make_user
from library.models import ComicBookmark, UserComicProgress, UserLibrary
from library.services.progress import reading_streak


class ProgressUpdateTests(TestCase):
    """
    GUARANTEES:
    - percentage follows current_page / total_pages
    - completion is recorded once and counts one reader
    - pages beyond the comic are rejected
    - paid comics need access before progress is stored
    """

    def setUp(self):
        self.client = APIClient()
        self.user = make_user()
        self.client.force_authenticate(self.user)
        self.comic = make_comic("Night Shift", pages=4)
        self.url = reverse("progress:detail", args=[self.comic.slug])

    def test_progress_percentage(self):
        res = self.client.post(self.url, {"current_page": 2, "reading_time_minutes": 3}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["data"]["progress_percentage"], "50.00")
        self.assertEqual(res.data["data"]["reading_time_minutes"], 3)
        self.assertFalse(res.data["data"]["is_completed"])

    def test_completion_counts_reader_once(self):
        self.client.post(self.url, {"current_page": 4}, format="json")
        self.client.post(self.url, {"current_page": 1}, format="json")
        self.client.post(self.url, {"current_page": 4}, format="json")

        self.comic.refresh_from_db()
        self.assertEqual(self.comic.total_readers, 1)

        progress = UserComicProgress.objects.get(user=self.user, comic=self.comic)
        self.assertTrue(progress.is_completed)
        self.assertIsNotNone(progress.completed_at)

    def test_page_beyond_total_rejected(self):
        res = self.client.post(self.url, {"current_page": 9}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_progress_syncs_library_entry(self):
        UserLibrary.objects.create(user=self.user, comic=self.comic)
        self.client.post(self.url, {"current_page": 3, "reading_time_minutes": 2}, format="json")

        entry = UserLibrary.objects.get(user=self.user, comic=self.comic)
        self.assertEqual(str(entry.completion_percentage), "75.00")
        self.assertEqual(entry.total_reading_time, 120)
        self.assertIsNotNone(entry.last_accessed_at)

    def test_paid_comic_without_access_is_403(self):
        paid = make_comic("Hollow Hill", price="3.99", pages=4)
        res = self.client.post(reverse("progress:detail", args=[paid.slug]), {"current_page": 1}, format="json")

        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(res.data["code"], "ACCESS_DENIED")
        self.assertFalse(UserComicProgress.objects.filter(comic=paid).exists())

    def test_get_without_progress_returns_null(self):
        res = self.client.get(self.url)
        self.assertIsNone(res.data["data"])

    def test_continue_reading_excludes_finished_and_unstarted(self):
        other = make_comic("Hollow Hill", pages=4)
        done = make_comic("Pun Patrol", pages=4)

        self.client.post(self.url, {"current_page": 2}, format="json")
        self.client.post(reverse("progress:detail", args=[other.slug]), {"current_page": 1}, format="json")
        self.client.post(reverse("progress:detail", args=[done.slug]), {"current_page": 4}, format="json")

        res = self.client.get(reverse("progress:continue"))
        self.assertEqual([row["comic"]["slug"] for row in res.data["data"]], [self.comic.slug])


class ReadingSessionTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = make_user()
        self.client.force_authenticate(self.user)
        self.comic = make_comic("Night Shift", pages=20)

    def _url(self, name):
        return reverse(f"progress:{name}", args=[self.comic.slug])

    def test_session_lifecycle(self):
        start = timezone.now()
        with patch("library.services.progress.timezone.now", return_value=start):
            res = self.client.post(self._url("session-start"), {"page": 1}, format="json")
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertTrue(res.data["session"]["is_active"])

        pause = self.client.post(self._url("session-pause"), {"minutes": 2}, format="json")
        self.assertEqual(pause.data["session"]["paused_minutes"], 2)

        with patch("library.services.progress.timezone.now", return_value=start + timedelta(minutes=10)):
            res = self.client.post(self._url("session-end"), {"page": 11}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        session = res.data["session"]
        self.assertFalse(session["is_active"])
        self.assertEqual(session["pages_read"], 10)
        self.assertEqual(session["duration_minutes"], 10)

        stats = res.data["statistics"]
        self.assertEqual(stats["total_sessions"], 1)
        self.assertEqual(stats["reading_speed"], 1.0)
        self.assertEqual(stats["total_time_paused_minutes"], 2)
        self.assertEqual(stats["total_reading_time_minutes"], 10)

    def test_end_without_session_is_400(self):
        res = self.client.post(self._url("session-end"), {"page": 3}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_starting_again_closes_stale_session(self):
        self.client.post(self._url("session-start"), {}, format="json")
        self.client.post(self._url("session-start"), {}, format="json")

        progress = UserComicProgress.objects.get(user=self.user, comic=self.comic)
        sessions = progress.sessions()
        self.assertEqual(len(sessions), 2)
        self.assertEqual([s["is_active"] for s in sessions], [False, True])
        self.assertEqual(progress.total_reading_sessions, 1)

    def test_reading_preferences_merge(self):
        self.client.patch(self._url("preferences"), {"preferences": {"zoom": 1.5}}, format="json")
        res = self.client.patch(self._url("preferences"), {"preferences": {"mode": "double"}}, format="json")

        self.assertEqual(res.data["reading_preferences"], {"zoom": 1.5, "mode": "double"})


class BookmarkTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = make_user()
        self.client.force_authenticate(self.user)
        self.comic = make_comic("Night Shift", pages=10)

    def test_add_update_remove_bookmark(self):
        url = reverse("progress:comic-bookmarks", args=[self.comic.slug])

        created = self.client.post(url, {"page_number": 3, "note": "cliffhanger"}, format="json")
        updated = self.client.post(url, {"page_number": 3, "note": "re-read"}, format="json")

        self.assertEqual(created.status_code, status.HTTP_201_CREATED)
        self.assertEqual(updated.status_code, status.HTTP_200_OK)
        self.assertEqual(ComicBookmark.objects.get(user=self.user).note, "re-read")

        progress = UserComicProgress.objects.get(user=self.user, comic=self.comic)
        self.assertTrue(progress.is_bookmarked)
        self.assertEqual(progress.bookmark_count, 1)

        res = self.client.delete(reverse("progress:bookmark-delete", args=[self.comic.slug, 3]))
        self.assertEqual(res.status_code, status.HTTP_200_OK)

        progress.refresh_from_db()
        self.assertFalse(progress.is_bookmarked)
        self.assertEqual(progress.bookmark_count, 0)

    def test_bookmark_out_of_range(self):
        res = self.client.post(
            reverse("progress:comic-bookmarks", args=[self.comic.slug]),
            {"page_number": 11},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_remove_missing_bookmark_is_404(self):
        res = self.client.delete(reverse("progress:bookmark-delete", args=[self.comic.slug, 4]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)


class ReadingStreakTests(TestCase):
    def setUp(self):
        self.user = make_user()

    def _read(self, title, days_ago):
        UserComicProgress.objects.create(
            user=self.user,
            comic=make_comic(title),
            last_read_at=timezone.now() - timedelta(days=days_ago),
        )

    def test_no_activity(self):
        self.assertEqual(reading_streak(self.user), 0)

    def test_consecutive_days(self):
        self._read("One", 0)
        self._read("Two", 1)
        self._read("Three", 2)
        self._read("Gap", 5)
        self.assertEqual(reading_streak(self.user), 3)

    def test_streak_may_end_yesterday(self):
        self._read("One", 1)
        self._read("Two", 2)
        self.assertEqual(reading_streak(self.user), 2)

    def test_old_activity_breaks_streak(self):
        self._read("One", 3)
        self.assertEqual(reading_streak(self.user), 0)
