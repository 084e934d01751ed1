# comics/tests/test_search.py

from __future__ import annotations

from datetime import timedelta
from decimal import Decimal

from django.test import TestCase
from django.urls import reverse
from django.utils import timezone
from rest_framework import status
from rest_framework.test import APIClient

from comics.services.search import autocomplete, filter_options, popular_search_terms, search_suggestions
from comics.tests.factories import make_comic


def titles(res):
    return [row["title"] for row in res.data["data"]]


class SearchFixtureMixin:
    def setUp(self):
        self.client = APIClient()
        self.shift = make_comic(
            "Night Shift",
            pages=10,
            price="3.99",
            genre="Action",
            author="R. Vale",
            publisher="Ironleaf",
            series="Night Chronicles",
            tags=["noir", "crime"],
            publication_year=2019,
            average_rating=Decimal("4.50"),
            total_readers=50,
        )
        self.hollow = make_comic(
            "Hollow Hill",
            pages=40,
            genre="Horror",
            author="M. Crane",
            publisher="Blackpine",
            tags=["gothic"],
            publication_year=2023,
            average_rating=Decimal("3.20"),
            total_readers=200,
        )
        self.market = make_comic(
            "Night Market",
            pages=5,
            price="1.99",
            genre="Action",
            author="R. Vale",
            publisher="Ironleaf",
            tags="noir, market",
            publication_year=2021,
            average_rating=Decimal("4.00"),
            total_readers=10,
            published_at=timezone.now() - timedelta(days=60),
        )
        make_comic("Night Draft", is_visible=False)
        make_comic("Night Future", published_at=timezone.now() + timedelta(days=5))


class ComicSearchEndpointTests(SearchFixtureMixin, TestCase):
    """
    GUARANTEES:
    - only visible, published comics are searchable
    - default order is relevance (rating, then readers)
    - every filter narrows; bad values are 400
    """

    def search(self, **params):
        return self.client.get(reverse("comics:search"), params)

    def test_default_relevance_and_envelope(self):
        res = self.search()

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(titles(res), ["Night Shift", "Night Market", "Hollow Hill"])
        self.assertEqual(
            res.data["pagination"],
            {"current_page": 1, "last_page": 1, "per_page": 20, "total": 3, "from": 1, "to": 3},
        )
        self.assertEqual(res.data["search_info"], {"query": "", "filters_applied": False, "sort": "relevance"})

    def test_query_matches_title_author_series(self):
        self.assertEqual(titles(self.search(query="night")), ["Night Shift", "Night Market"])
        self.assertEqual(titles(self.search(query="crane")), ["Hollow Hill"])
        self.assertEqual(titles(self.search(query="chronicles")), ["Night Shift"])

    def test_genre_list_and_min_rating(self):
        res = self.search(genre="Action,Horror", min_rating="4")

        self.assertEqual(titles(res), ["Night Shift", "Night Market"])
        self.assertTrue(res.data["search_info"]["filters_applied"])

    def test_tags_require_every_tag(self):
        self.assertEqual(titles(self.search(tags="noir")), ["Night Shift", "Night Market"])
        self.assertEqual(titles(self.search(tags="noir,crime")), ["Night Shift"])

    def test_price_and_year_ranges(self):
        self.assertEqual(titles(self.search(price_min="1", price_max="2")), ["Night Market"])
        self.assertEqual(
            titles(self.search(year_min="2020", sort="title_asc")),
            ["Hollow Hill", "Night Market"],
        )

    def test_new_releases_and_reading_time(self):
        self.assertEqual(titles(self.search(is_new_release="true")), ["Night Shift", "Hollow Hill"])
        # 20 minutes at 2 per page -> 10 pages
        self.assertEqual(titles(self.search(max_reading_time="20")), ["Night Shift", "Night Market"])

    def test_free_filter_and_price_sort(self):
        self.assertEqual(titles(self.search(is_free="true")), ["Hollow Hill"])
        self.assertEqual(titles(self.search(sort="price_desc")), ["Night Shift", "Night Market", "Hollow Hill"])

    def test_invalid_params_are_400(self):
        res = self.search(sort="shuffle")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("sort", res.data["errors"])

        res = self.search(min_rating="7")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertIn("min_rating", res.data["errors"])

    def test_per_page(self):
        res = self.search(per_page="2", page="2")

        self.assertEqual(titles(res), ["Hollow Hill"])
        self.assertEqual(res.data["pagination"]["last_page"], 2)
        self.assertEqual(res.data["pagination"]["from"], 3)

        self.assertEqual(self.search(per_page="500").data["pagination"]["per_page"], 100)


class SearchSuggestionTests(SearchFixtureMixin, TestCase):
    def test_suggestions_rank_by_readers(self):
        self.assertEqual(search_suggestions("Night"), ["Night Shift", "Night Market"])
        self.assertEqual(search_suggestions("iron"), ["Ironleaf"])

    def test_short_query_suggests_nothing(self):
        self.assertEqual(search_suggestions("n"), [])

    def test_autocomplete_groups(self):
        result = autocomplete("night", limit=5)

        self.assertEqual([row["title"] for row in result["titles"]], ["Night Shift", "Night Market"])
        self.assertEqual(result["series"], ["Night Chronicles"])
        self.assertEqual(autocomplete("vale")["authors"], ["R. Vale"])

    def test_suggestion_endpoints_require_query(self):
        res = self.client.get(reverse("comics:search-suggestions"))
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

        res = self.client.get(reverse("comics:search-autocomplete"), {"query": "hollow"})
        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["query"], "hollow")
        self.assertEqual(res.data["data"]["titles"][0]["slug"], self.hollow.slug)


class FilterOptionTests(SearchFixtureMixin, TestCase):
    def test_filter_options(self):
        options = filter_options()

        self.assertEqual(options["genres"], ["Action", "Horror"])
        self.assertEqual(options["publishers"], ["Blackpine", "Ironleaf"])
        self.assertEqual(options["publication_years"], {"min": 2019, "max": 2023})
        self.assertEqual(options["price_range"], {"min": "1.99", "max": "3.99"})
        self.assertEqual(options["tags"], ["crime", "gothic", "market", "noir"])

    def test_popular_terms(self):
        self.assertEqual(popular_search_terms(), ["Action", "Horror", "M. Crane", "R. Vale"])

    def test_endpoints(self):
        res = self.client.get(reverse("comics:search-filter-options"))
        self.assertEqual(res.data["data"]["languages"], ["en"])

        res = self.client.get(reverse("comics:search-popular-terms"), {"limit": 1})
        self.assertEqual(res.data["data"], ["Action", "M. Crane"])
