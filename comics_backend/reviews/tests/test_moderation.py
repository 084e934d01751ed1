# reviews/tests/test_moderation.py

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from comics.tests.factories import make_comic, make_user
from reviews.models import ComicReview
from reviews.services.lifecycle import can_transition
from reviews.tests.test_reviews import make_review


class ReviewLifecycleTests(TestCase):
    def test_transitions(self):
        self.assertTrue(can_transition(from_status="pending", to_status="approved"))
        self.assertTrue(can_transition(from_status="rejected", to_status="approved"))
        self.assertTrue(can_transition(from_status="approved", to_status="rejected"))
        self.assertFalse(can_transition(from_status="approved", to_status="approved"))
        self.assertFalse(can_transition(from_status="approved", to_status="pending"))


class ModerationQueueTests(TestCase):
    """
    GUARANTEES:
    - moderators and admins only
    - approving / rejecting keeps the comic rating in step with approved reviews
    - repeat transitions are refused with 400
    """

    def setUp(self):
        self.client = APIClient()
        self.moderator = make_user("mod@example.com", role="moderator")
        self.client.force_authenticate(self.moderator)

        self.comic = make_comic("Night Shift")
        self.pending = make_review(make_user("a@example.com"), self.comic, rating=2, approved=False)
        self.approved = make_review(make_user("b@example.com"), self.comic, rating=4)
        self.comic.update_rating_from_reviews()

    def test_reader_is_forbidden(self):
        self.client.force_authenticate(make_user("reader2@example.com"))
        res = self.client.get(reverse("reviews-admin:pending"))
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_pending_queue(self):
        res = self.client.get(reverse("reviews-admin:pending"))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["user_email"], "a@example.com")

    def test_approve_updates_rating(self):
        res = self.client.post(reverse("reviews-admin:approve", args=[self.pending.id]))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["data"]["status"], ComicReview.STATUS_APPROVED)
        self.assertEqual(res.data["data"]["moderated_by"], "mod@example.com")

        self.comic.refresh_from_db()
        self.assertEqual(self.comic.average_rating, Decimal("3.00"))
        self.assertEqual(self.comic.total_ratings, 2)

    def test_approving_twice_is_400(self):
        res = self.client.post(reverse("reviews-admin:approve", args=[self.approved.id]))
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reject_approved_review(self):
        res = self.client.post(
            reverse("reviews-admin:reject", args=[self.approved.id]),
            {"reason": "off topic"},
            format="json",
        )

        self.assertEqual(res.data["data"]["status"], ComicReview.STATUS_REJECTED)
        self.assertEqual(res.data["data"]["moderation_reason"], "off topic")

        self.comic.refresh_from_db()
        self.assertEqual(self.comic.total_ratings, 0)

    def test_bulk_counts_only_changed_reviews(self):
        res = self.client.post(
            reverse("reviews-admin:bulk"),
            {"action": "approve", "review_ids": [str(self.pending.id), str(self.approved.id)]},
            format="json",
        )

        self.assertEqual(res.data, {"updated": 1})
        self.comic.refresh_from_db()
        self.assertEqual(self.comic.total_ratings, 2)

    def test_moderator_delete(self):
        res = self.client.delete(reverse("reviews-admin:delete", args=[self.approved.id]))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertFalse(ComicReview.objects.filter(pk=self.approved.id).exists())

    def test_statistics(self):
        make_review(
            make_user("c@example.com"),
            self.comic,
            approved=False,
            moderated_at=timezone.now(),
        )

        data = self.client.get(reverse("reviews-admin:statistics")).data["data"]

        self.assertEqual((data["pending"], data["approved"], data["rejected"]), (1, 1, 1))
        self.assertEqual(data["total"], 3)
        self.assertEqual(data["today"], 3)
