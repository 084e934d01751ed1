# comics/tests/test_engagement.py

from __future__ import annotations

from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from comics.models import ComicComment, ComicView
from comics.tests.factories import make_comic, make_user
from library.models import UserLibrary


class LikeTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = make_user()
        self.comic = make_comic()
        self.client.force_authenticate(self.user)

    def test_like_toggles(self):
        url = reverse("comics:like", args=[self.comic.slug])

        first = self.client.post(url)
        self.assertEqual(first.status_code, status.HTTP_200_OK)
        self.assertEqual(first.data, {"is_liked": True, "likes_count": 1})

        second = self.client.post(url)
        self.assertEqual(second.data, {"is_liked": False, "likes_count": 0})

    def test_like_requires_auth(self):
        self.client.force_authenticate(None)
        res = self.client.post(reverse("comics:like", args=[self.comic.slug]))
        self.assertEqual(res.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_liked_flag_shows_in_list(self):
        self.client.post(reverse("comics:like", args=[self.comic.slug]))
        res = self.client.get(reverse("comics:list"))
        self.assertTrue(res.data["data"][0]["is_liked"])


class RatingTests(TestCase):
    """
    GUARANTEES:
    - rating 1..5 only
    - rating creates a library entry when missing and refreshes the comic average
    """

    def setUp(self):
        self.client = APIClient()
        self.comic = make_comic()
        self.alice = make_user("alice@example.com")
        self.bob = make_user("bob@example.com")

    def test_rate_updates_average(self):
        url = reverse("comics:rate", args=[self.comic.slug])

        self.client.force_authenticate(self.alice)
        self.client.post(url, {"rating": 5}, format="json")
        self.client.force_authenticate(self.bob)
        res = self.client.post(url, {"rating": 2}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["average_rating"], "3.50")
        self.assertEqual(res.data["total_ratings"], 2)
        self.assertTrue(UserLibrary.objects.filter(user=self.alice, comic=self.comic).exists())

    def test_rerating_replaces_previous_value(self):
        url = reverse("comics:rate", args=[self.comic.slug])
        self.client.force_authenticate(self.alice)

        self.client.post(url, {"rating": 1}, format="json")
        res = self.client.post(url, {"rating": 4}, format="json")

        self.assertEqual(res.data["average_rating"], "4.00")
        self.assertEqual(res.data["total_ratings"], 1)

    def test_out_of_range_rating_rejected(self):
        self.client.force_authenticate(self.alice)
        res = self.client.post(reverse("comics:rate", args=[self.comic.slug]), {"rating": 6}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)


class CommentTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.user = make_user(name="Alice")
        self.comic = make_comic()

    def test_post_and_list_comments(self):
        self.client.force_authenticate(self.user)
        res = self.client.post(
            reverse("comics:comments", args=[self.comic.slug]),
            {"content": "  Great art  ", "is_spoiler": True},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["data"]["content"], "Great art")
        self.assertEqual(res.data["data"]["user"], "Alice")

        self.client.force_authenticate(None)
        listing = self.client.get(reverse("comics:comments", args=[self.comic.slug]))
        self.assertEqual(listing.status_code, status.HTTP_200_OK)
        self.assertEqual(listing.data["count"], 1)

    def test_unapproved_comments_are_hidden(self):
        ComicComment.objects.create(user=self.user, comic=self.comic, content="spam", is_approved=False)
        res = self.client.get(reverse("comics:comments", args=[self.comic.slug]))
        self.assertEqual(res.data["count"], 0)

    def test_empty_comment_rejected(self):
        self.client.force_authenticate(self.user)
        res = self.client.post(reverse("comics:comments", args=[self.comic.slug]), {"content": ""}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)


class ViewTrackingTests(TestCase):
    """Views are deduplicated per identity for an hour."""

    def setUp(self):
        self.client = APIClient()
        self.comic = make_comic()

    def test_anonymous_views_deduplicate_by_ip(self):
        url = reverse("comics:view", args=[self.comic.slug])

        first = self.client.post(url, REMOTE_ADDR="10.1.1.1")
        second = self.client.post(url, REMOTE_ADDR="10.1.1.1")
        other = self.client.post(url, REMOTE_ADDR="10.1.1.2")

        self.assertTrue(first.data["counted"])
        self.assertFalse(second.data["counted"])
        self.assertTrue(other.data["counted"])
        self.assertEqual(other.data["view_count"], 2)
        self.assertEqual(ComicView.objects.filter(comic=self.comic).count(), 2)

    def test_forwarded_for_header_wins(self):
        url = reverse("comics:view", args=[self.comic.slug])
        self.client.post(url, HTTP_X_FORWARDED_FOR="203.0.113.9, 10.0.0.1")

        view = ComicView.objects.get(comic=self.comic)
        self.assertEqual(view.ip_address, "203.0.113.9")

    def test_authenticated_views_deduplicate_by_user(self):
        user = make_user()
        self.client.force_authenticate(user)
        url = reverse("comics:view", args=[self.comic.slug])

        self.client.post(url, REMOTE_ADDR="10.1.1.1")
        res = self.client.post(url, REMOTE_ADDR="10.9.9.9")

        self.assertFalse(res.data["counted"])
        self.assertEqual(ComicView.objects.get(comic=self.comic).user, user)
