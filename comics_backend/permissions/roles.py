# permissions/roles.py

from __future__ import annotations

from typing import Optional

from rest_framework.permissions import BasePermission


# =========================================================
# ROLE CONSTANTS
# =========================================================
ROLE_ADMIN = "admin"
ROLE_MODERATOR = "moderator"
ROLE_READER = "reader"

STAFF_ROLES = {
    ROLE_ADMIN,
    ROLE_MODERATOR,
}


# =========================================================
# CAPABILITIES
# =========================================================
# Views protect capabilities, not raw roles.
CAP_CATALOG_MANAGE = "catalog.manage"          # uploads, visibility
CAP_REVIEWS_MODERATE = "reviews.moderate"
CAP_PAYMENTS_VIEW = "payments.view"            # payment analytics
CAP_NOTIFICATIONS_SEND = "notifications.send"

ALL_CAPABILITIES = {
    CAP_CATALOG_MANAGE,
    CAP_REVIEWS_MODERATE,
    CAP_PAYMENTS_VIEW,
    CAP_NOTIFICATIONS_SEND,
}


# =========================================================
# ROLE → CAPABILITY MAP
# =========================================================
ROLE_CAPABILITIES: dict[str, set[str]] = {
    ROLE_ADMIN: {
        *ALL_CAPABILITIES,
    },
    ROLE_MODERATOR: {
        CAP_REVIEWS_MODERATE,
    },
    ROLE_READER: set(),
}


# =========================================================
# Helpers
# =========================================================
def get_user_role(user) -> Optional[str]:
    if getattr(user, "is_superuser", False):
        return ROLE_ADMIN
    return getattr(user, "role", None)


def effective_capabilities_for(user) -> set[str]:
    return set(ROLE_CAPABILITIES.get(get_user_role(user), set()))


def user_has_capability(user, capability: str) -> bool:
    if not user or not getattr(user, "is_authenticated", False):
        return False
    return capability in effective_capabilities_for(user)


# =========================================================
# Permissions
# =========================================================
class BaseRolePermission(BasePermission):
    """Grants access when the caller's role is in `allowed_roles`."""

    allowed_roles: set[str] = set()

    def has_permission(self, request, view):
        user = request.user
        if not (user and user.is_authenticated):
            return False
        return get_user_role(user) in self.allowed_roles


class HasCapability(BasePermission):
    """
    Reads `required_capability` off the view:

        permission_classes = [IsAuthenticated, HasCapability]
        required_capability = CAP_PAYMENTS_VIEW

    A view without one is closed to everybody.
    """

    def has_permission(self, request, view):
        required = getattr(view, "required_capability", None)
        return bool(required) and user_has_capability(request.user, required)


class IsAdmin(BaseRolePermission):
    allowed_roles = {ROLE_ADMIN}


class IsModeratorOrAdmin(BaseRolePermission):
    allowed_roles = STAFF_ROLES
