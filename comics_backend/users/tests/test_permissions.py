# users/tests/test_permissions.py

from __future__ import annotations

from django.contrib.auth import get_user_model
from django.test import RequestFactory, TestCase

from permissions.roles import (
    CAP_CATALOG_MANAGE,
    CAP_PAYMENTS_VIEW,
    CAP_REVIEWS_MODERATE,
    HasCapability,
    IsAdmin,
    IsModeratorOrAdmin,
    user_has_capability,
)

User = get_user_model()


class RolePermissionTests(TestCase):
    def setUp(self):
        self.factory = RequestFactory()
        self.admin = User.objects.create_user(email="admin@example.com", password="x-pass-123", role=User.ROLE_ADMIN)
        self.moderator = User.objects.create_user(
            email="mod@example.com", password="x-pass-123", role=User.ROLE_MODERATOR
        )
        self.reader = User.objects.create_user(email="reader@example.com", password="x-pass-123")

    def _request(self, user):
        request = self.factory.get("/")
        request.user = user
        return request

    def test_admin_has_every_capability(self):
        for cap in (CAP_CATALOG_MANAGE, CAP_PAYMENTS_VIEW, CAP_REVIEWS_MODERATE):
            self.assertTrue(user_has_capability(self.admin, cap))

    def test_moderator_only_moderates(self):
        self.assertTrue(user_has_capability(self.moderator, CAP_REVIEWS_MODERATE))
        self.assertFalse(user_has_capability(self.moderator, CAP_CATALOG_MANAGE))
        self.assertFalse(user_has_capability(self.moderator, CAP_PAYMENTS_VIEW))

    def test_reader_has_no_capabilities(self):
        self.assertFalse(user_has_capability(self.reader, CAP_REVIEWS_MODERATE))

    def test_superuser_counts_as_admin(self):
        root = User.objects.create_superuser(email="root@example.com", password="x-pass-123", role=User.ROLE_READER)
        self.assertTrue(IsAdmin().has_permission(self._request(root), None))

    def test_role_permissions(self):
        self.assertTrue(IsAdmin().has_permission(self._request(self.admin), None))
        self.assertFalse(IsAdmin().has_permission(self._request(self.moderator), None))
        self.assertTrue(IsModeratorOrAdmin().has_permission(self._request(self.moderator), None))
        self.assertFalse(IsModeratorOrAdmin().has_permission(self._request(self.reader), None))

    def test_has_capability_denies_without_declared_capability(self):
        class _View:
            pass

        self.assertFalse(HasCapability().has_permission(self._request(self.admin), _View()))

        view = _View()
        view.required_capability = CAP_CATALOG_MANAGE
        self.assertTrue(HasCapability().has_permission(self._request(self.admin), view))
        self.assertFalse(HasCapability().has_permission(self._request(self.reader), view))
