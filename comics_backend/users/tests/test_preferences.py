# users/tests/test_preferences.py

from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.test import TestCase
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from users.models import UserPreferences

User = get_user_model()


class PreferencesTests(TestCase):
    def setUp(self):
        self.user = User.objects.create_user(email="prefs@example.com", password="pass-1234-word")
        self.client = APIClient()
        self.client.force_authenticate(self.user)

    def test_first_read_creates_defaults(self):
        res = self.client.get(reverse("users:preferences"))

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["theme"], UserPreferences.THEME_DARK)
        self.assertTrue(res.data["email_notifications"])
        self.assertTrue(UserPreferences.objects.filter(user=self.user).exists())

    def test_patch_updates_only_given_fields(self):
        res = self.client.patch(
            reverse("users:preferences"),
            {"theme": "light", "new_releases_notifications": False},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)

        prefs = UserPreferences.objects.get(user=self.user)
        self.assertEqual(prefs.theme, UserPreferences.THEME_LIGHT)
        self.assertFalse(prefs.new_releases_notifications)
        self.assertTrue(prefs.email_notifications)
        self.assertFalse(prefs.wants_new_release_emails())

    def test_patch_rejects_out_of_range_zoom(self):
        res = self.client.patch(reverse("users:preferences"), {"reading_zoom_level": "9.00"}, format="json")
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_reset_restores_defaults(self):
        prefs = UserPreferences.for_user(self.user)
        prefs.update_preferences({"theme": UserPreferences.THEME_LIGHT, "reading_zoom_level": Decimal("2.00")})

        res = self.client.post(reverse("users:preferences-reset"))
        self.assertEqual(res.status_code, status.HTTP_200_OK)

        prefs.refresh_from_db()
        self.assertEqual(prefs.theme, UserPreferences.THEME_DARK)
        self.assertEqual(prefs.reading_zoom_level, Decimal("1.20"))
