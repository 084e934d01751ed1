# library/tests/test_library.py

from __future__ import annotations

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from comics.tests.factories import make_comic, make_user
from library.models import UserComicProgress, UserLibrary


class LibraryEntryTests(TestCase):
    """
    GUARANTEES:
    - adding is idempotent (201 then 200)
    - paid comics can be tracked but never claimed as free
    - removing a rated entry refreshes the comic rating
    """

    def setUp(self):
        self.client = APIClient()
        self.user = make_user()
        self.client.force_authenticate(self.user)
        self.free = make_comic("Night Shift")
        self.paid = make_comic("Hollow Hill", price="3.99")

    def test_add_free_comic_twice(self):
        url = reverse("library:entry", args=[self.free.slug])

        first = self.client.post(url, {}, format="json")
        second = self.client.post(url, {}, format="json")

        self.assertEqual(first.status_code, status.HTTP_201_CREATED)
        self.assertEqual(second.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data["data"]["access_type"], UserLibrary.ACCESS_FREE)
        self.assertEqual(UserLibrary.objects.filter(user=self.user).count(), 1)

    def test_paid_comic_is_added_for_tracking_only(self):
        res = self.client.post(reverse("library:entry", args=[self.paid.slug]), {}, format="json")

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["data"]["access_type"], UserLibrary.ACCESS_READING)
        self.assertFalse(res.data["data"]["has_access"])

    def test_paid_comic_cannot_be_claimed_as_free(self):
        res = self.client.post(
            reverse("library:entry", args=[self.paid.slug]),
            {"access_type": "free"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertFalse(UserLibrary.objects.filter(user=self.user).exists())

    def test_purchased_access_type_is_not_client_settable(self):
        res = self.client.post(
            reverse("library:entry", args=[self.paid.slug]),
            {"access_type": "purchased"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_remove_missing_entry_is_404(self):
        res = self.client.delete(reverse("library:entry", args=[self.free.slug]))
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_remove_rated_entry_refreshes_rating(self):
        self.client.post(reverse("library:entry", args=[self.free.slug]), {}, format="json")
        self.client.post(reverse("library:rating", args=[self.free.slug]), {"rating": 5}, format="json")
        self.free.refresh_from_db()
        self.assertEqual(self.free.total_ratings, 1)

        res = self.client.delete(reverse("library:entry", args=[self.free.slug]))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.free.refresh_from_db()
        self.assertEqual(self.free.total_ratings, 0)

    def test_rating_requires_entry(self):
        res = self.client.post(reverse("library:rating", args=[self.free.slug]), {"rating": 3}, format="json")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_favorite_toggle_adds_entry(self):
        url = reverse("library:favorite", args=[self.free.slug])

        self.assertTrue(self.client.post(url).data["is_favorite"])
        self.assertFalse(self.client.post(url).data["is_favorite"])
        self.assertTrue(UserLibrary.objects.filter(user=self.user, comic=self.free).exists())

    def test_library_requires_auth(self):
        self.client.force_authenticate(None)
        res = self.client.get(reverse("library:list"))
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)


class LibraryFilterTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = make_user()
        self.client.force_authenticate(self.user)

        self.action = make_comic("Night Shift", genre="Action", pages=10)
        self.horror = make_comic("Hollow Hill", genre="Horror", pages=10)
        self.comedy = make_comic("Pun Patrol", genre="Comedy", pages=10)

        UserLibrary.objects.create(user=self.user, comic=self.action, rating=5, is_favorite=True)
        UserLibrary.objects.create(user=self.user, comic=self.horror, rating=2)
        UserLibrary.objects.create(user=self.user, comic=self.comedy)

        UserComicProgress.objects.create(user=self.user, comic=self.action, current_page=10, total_pages=10, is_completed=True)
        UserComicProgress.objects.create(user=self.user, comic=self.horror, current_page=4, total_pages=10)

    def _slugs(self, **params):
        res = self.client.get(reverse("library:list"), params)
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        return [row["comic"]["slug"] for row in res.data["results"]]

    def test_genre_filter(self):
        self.assertEqual(self._slugs(genre="horror"), [self.horror.slug])

    def test_favorites_filter(self):
        self.assertEqual(self._slugs(favorites="true"), [self.action.slug])

    def test_rating_bounds(self):
        self.assertEqual(self._slugs(rating_min=3), [self.action.slug])

    def test_status_filter(self):
        self.assertEqual(self._slugs(status="completed"), [self.action.slug])
        self.assertEqual(self._slugs(status="reading"), [self.horror.slug])
        self.assertEqual(self._slugs(status="unread"), [self.comedy.slug])

    def test_sort_by_rating_puts_unrated_last(self):
        self.assertEqual(
            self._slugs(sort_by="rating", direction="desc"),
            [self.action.slug, self.horror.slug, self.comedy.slug],
        )

    def test_invalid_status_is_400(self):
        res = self.client.get(reverse("library:list"), {"status": "abandoned"})
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_statistics(self):
        res = self.client.get(reverse("library:statistics"))
        data = res.data["data"]

        self.assertEqual(data["total_comics"], 3)
        self.assertEqual(data["favorites"], 1)
        self.assertEqual(data["completed"], 1)
        self.assertEqual(data["in_progress"], 1)
        self.assertEqual(data["average_rating_given"], 3.5)
        self.assertEqual(data["total_spent"], "0.00")

    def test_purchased_entries_count_towards_spend(self):
        paid = make_comic("Deluxe", price="4.50")
        UserLibrary.objects.create(
            user=self.user,
            comic=paid,
            access_type=UserLibrary.ACCESS_PURCHASED,
            purchase_price="4.50",
            purchased_at=timezone.now(),
        )
        res = self.client.get(reverse("library:statistics"))
        self.assertEqual(res.data["data"]["total_spent"], "4.50")
