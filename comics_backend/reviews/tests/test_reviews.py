# reviews/tests/test_reviews.py

from __future__ import annotations

from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from comics.tests.factories import make_comic, make_user
from reviews.models import ComicReview
from reviews.services.moderation import contains_flagged_content

GOOD_TEXT = "Tight pacing and gorgeous ink work throughout."


def make_review(user, comic, *, rating=4, approved=True, **extra):
    extra.setdefault("content", GOOD_TEXT)
    return ComicReview.objects.create(user=user, comic=comic, rating=rating, is_approved=approved, **extra)


class FlaggedContentTests(TestCase):
    def test_matches_whole_words_only(self):
        self.assertTrue(contains_flagged_content("This is SPAM"))
        self.assertTrue(contains_flagged_content("", "click here for more"))
        self.assertFalse(contains_flagged_content("the robot uprising arc"))
        self.assertFalse(contains_flagged_content("a shack in the woods"))


class SubmitReviewTests(TestCase):
    """
    GUARANTEES:
    - access to the comic is required
    - clean reviews publish immediately and drive the comic rating
    - flagged text waits for a moderator
    - one review per user per comic (409)
    """

    def setUp(self):
        self.client = APIClient()
        self.user = make_user()
        self.client.force_authenticate(self.user)
        self.comic = make_comic("Night Shift")
        self.url = reverse("reviews:comic-reviews", args=[self.comic.slug])

    def test_clean_review_is_published(self):
        res = self.client.post(self.url, {"rating": 4, "title": "Great", "content": GOOD_TEXT}, format="json")

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["message"], "Review published")
        self.assertEqual(res.data["data"]["status"], ComicReview.STATUS_APPROVED)

        self.comic.refresh_from_db()
        self.assertEqual(self.comic.average_rating, Decimal("4.00"))
        self.assertEqual(self.comic.total_ratings, 1)

    def test_flagged_review_is_held(self):
        res = self.client.post(
            self.url,
            {"rating": 5, "content": "Best comic ever, click here for a free download"},
            format="json",
        )

        self.assertEqual(res.data["data"]["status"], ComicReview.STATUS_PENDING)
        self.comic.refresh_from_db()
        self.assertEqual(self.comic.total_ratings, 0)

    def test_recent_rejection_holds_next_review(self):
        other = make_comic("Hollow Hill")
        make_review(self.user, other, approved=False, moderated_at=timezone.now())

        res = self.client.post(self.url, {"rating": 3, "content": GOOD_TEXT}, format="json")
        self.assertEqual(res.data["data"]["status"], ComicReview.STATUS_PENDING)

    def test_duplicate_review_is_409(self):
        self.client.post(self.url, {"rating": 4, "content": GOOD_TEXT}, format="json")
        res = self.client.post(self.url, {"rating": 2, "content": GOOD_TEXT}, format="json")
        self.assertEqual(res.status_code, status.HTTP_409_CONFLICT)

    def test_paid_comic_requires_access(self):
        paid = make_comic("Hollow Hill", price="3.99")
        res = self.client.post(
            reverse("reviews:comic-reviews", args=[paid.slug]),
            {"rating": 4, "content": GOOD_TEXT},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_short_content_rejected(self):
        res = self.client.post(self.url, {"rating": 4, "content": "meh"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)


class ReviewListingTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.comic = make_comic("Night Shift")
        self.alice = make_user("alice@example.com")
        self.bob = make_user("bob@example.com")
        self.carol = make_user("carol@example.com")

        make_review(self.alice, self.comic, rating=5)
        make_review(self.bob, self.comic, rating=3, is_spoiler=True)
        make_review(self.carol, self.comic, rating=1, approved=False)

    def test_only_approved_reviews_listed(self):
        res = self.client.get(reverse("reviews:comic-reviews", args=[self.comic.slug]))
        self.assertEqual(res.data["count"], 2)

    def test_spoilers_can_be_hidden(self):
        res = self.client.get(reverse("reviews:comic-reviews", args=[self.comic.slug]), {"spoilers": "false"})
        self.assertEqual(res.data["count"], 1)
        self.assertEqual(res.data["results"][0]["rating"], 5)

    def test_sort_by_rating(self):
        res = self.client.get(reverse("reviews:comic-reviews", args=[self.comic.slug]), {"sort": "rating"})
        self.assertEqual([row["rating"] for row in res.data["results"]], [5, 3])

    def test_statistics_distribution(self):
        res = self.client.get(reverse("reviews:comic-statistics", args=[self.comic.slug]))
        data = res.data["data"]

        self.assertEqual(data["total_reviews"], 2)
        self.assertEqual(data["average_rating"], 4.0)
        self.assertEqual(data["distribution"]["5"], {"count": 1, "percentage": 50.0})
        self.assertEqual(data["distribution"]["1"]["count"], 0)

    def test_my_review_for_comic(self):
        self.client.force_authenticate(self.carol)
        res = self.client.get(reverse("reviews:comic-mine", args=[self.comic.slug]))
        self.assertEqual(res.data["data"]["status"], ComicReview.STATUS_PENDING)

        self.client.force_authenticate(make_user("dave@example.com"))
        res = self.client.get(reverse("reviews:comic-mine", args=[self.comic.slug]))
        self.assertIsNone(res.data["data"])


class EditReviewTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.owner = make_user("owner@example.com")
        self.comic = make_comic("Night Shift")
        self.review = make_review(self.owner, self.comic, rating=4)
        self.comic.update_rating_from_reviews()

    def test_owner_can_change_rating(self):
        self.client.force_authenticate(self.owner)
        res = self.client.patch(reverse("reviews:detail", args=[self.review.id]), {"rating": 2}, format="json")

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.comic.refresh_from_db()
        self.assertEqual(self.comic.average_rating, Decimal("2.00"))

    def test_flagged_edit_goes_back_to_pending(self):
        self.client.force_authenticate(self.owner)
        res = self.client.patch(
            reverse("reviews:detail", args=[self.review.id]),
            {"content": "Now with a free download link for everyone"},
            format="json",
        )

        self.assertEqual(res.data["data"]["status"], ComicReview.STATUS_PENDING)
        self.comic.refresh_from_db()
        self.assertEqual(self.comic.total_ratings, 0)

    def test_other_reader_cannot_edit_or_delete(self):
        self.client.force_authenticate(make_user("other@example.com"))

        patch_res = self.client.patch(reverse("reviews:detail", args=[self.review.id]), {"rating": 1}, format="json")
        delete_res = self.client.delete(reverse("reviews:detail", args=[self.review.id]))

        self.assertEqual(patch_res.status_code, status.HTTP_403_FORBIDDEN)
        self.assertEqual(delete_res.status_code, status.HTTP_403_FORBIDDEN)

    def test_moderator_can_delete(self):
        self.client.force_authenticate(make_user("mod@example.com", role="moderator"))
        res = self.client.delete(reverse("reviews:detail", args=[self.review.id]))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.comic.refresh_from_db()
        self.assertEqual(self.comic.total_ratings, 0)


class VoteTests(TestCase):
    def setUp(self):
        self.client = APIClient()
        self.author = make_user("author@example.com")
        self.comic = make_comic("Night Shift")
        self.review = make_review(self.author, self.comic)
        self.url = reverse("reviews:vote", args=[self.review.id])

    def test_vote_and_change_mind(self):
        voter = make_user("voter@example.com")
        self.client.force_authenticate(voter)

        first = self.client.post(self.url, {"is_helpful": True}, format="json")
        self.assertEqual((first.data["helpful_votes"], first.data["total_votes"]), (1, 1))
        self.assertEqual(first.data["helpfulness_ratio"], 1.0)

        changed = self.client.post(self.url, {"is_helpful": False}, format="json")
        self.assertEqual((changed.data["helpful_votes"], changed.data["total_votes"]), (0, 1))

        removed = self.client.delete(self.url)
        self.assertEqual(removed.data["total_votes"], 0)

        missing = self.client.delete(self.url)
        self.assertEqual(missing.status_code, status.HTTP_404_NOT_FOUND)

    def test_author_cannot_vote(self):
        self.client.force_authenticate(self.author)
        res = self.client.post(self.url, {"is_helpful": True}, format="json")
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_pending_review_cannot_be_voted(self):
        pending = make_review(make_user("p@example.com"), self.comic, approved=False)
        self.client.force_authenticate(make_user("voter@example.com"))
        res = self.client.post(reverse("reviews:vote", args=[pending.id]), {"is_helpful": True}, format="json")
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_most_helpful_needs_five_votes(self):
        for i in range(5):
            self.client.force_authenticate(make_user(f"v{i}@example.com"))
            self.client.post(self.url, {"is_helpful": i < 4}, format="json")

        res = self.client.get(reverse("reviews:most-helpful"))
        self.assertEqual([row["id"] for row in res.data["data"]], [str(self.review.id)])
