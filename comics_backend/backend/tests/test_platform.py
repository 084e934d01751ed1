# backend/tests/test_platform.py

from __future__ import annotations

from unittest.mock import patch

from django.db.utils import OperationalError
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient


class PlatformEndpointTests(TestCase):
    def setUp(self):
        self.client = APIClient()

    def test_api_index_is_public(self):
        res = self.client.get(reverse("api-root"))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["auth"]["login"], "/api/v2/auth/login/")
        self.assertEqual(res.data["modules"]["comics"], "/api/v2/comics/")

    def test_health_ok(self):
        res = self.client.get(reverse("health-check"))
        self.assertEqual(res.data, {"status": "ok", "db": "ok"})

    def test_health_reports_database_outage(self):
        with patch("backend.urls.connections") as conns:
            conns.__getitem__.return_value.cursor.side_effect = OperationalError("connection refused")
            res = self.client.get(reverse("health-check"))

        self.assertEqual(res.status_code, status.HTTP_503_SERVICE_UNAVAILABLE)
        self.assertEqual(res.data["db"], "down")

    def test_root_redirects_to_docs(self):
        res = self.client.get("/")
        self.assertEqual(res.status_code, 302)
        self.assertEqual(res["Location"], "/api/docs/")
