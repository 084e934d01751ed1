# backend/urls.py
"""
PROJECT URLS

All API routes live under /api/ and the versioned storefront API under /api/v2/.

Layout:
- /api/              index (AllowAny)
- /api/health/       DB connectivity check (AllowAny)
- /api/schema/       OpenAPI schema, /api/docs/ Swagger UI
- /api/v2/auth/      register, login, logout, refresh, current user, preferences
- /api/v2/comics/    catalog + engagement (likes, ratings, comments, views)
- /api/v2/library/   user library, /api/v2/progress/ reading progress + bookmarks
- /api/v2/payments/  Stripe payment intents, history, refunds, webhook
- /api/v2/reviews/   reviews + helpfulness votes
- /api/v2/analytics/ admin analytics, /api/v2/admin/... admin workflows

Security hardening:
- Django admin path is configurable via env var (ADMIN_PATH).
"""

from __future__ import annotations

import logging

from django.conf import settings
from django.contrib import admin
from django.db import connections
from django.db.utils import OperationalError
from django.urls import include, path
from django.views.generic import RedirectView
from drf_spectacular.utils import OpenApiTypes, extend_schema
from drf_spectacular.views import SpectacularAPIView, SpectacularSwaggerView
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)


API_INDEX = {
    "message": "Comics Platform API is running",
    "auth": {
        name: f"/api/v2/auth/{name}/"
        for name in ("register", "login", "logout", "refresh", "user")
    },
    "docs": {"swagger": "/api/docs/", "schema": "/api/schema/"},
    "modules": {
        name: f"/api/v2/{name}/"
        for name in ("comics", "library", "progress", "payments", "reviews", "analytics")
    },
}


# ------------------ API ROOT (PUBLIC) ------------------
@extend_schema(tags=["Platform"], responses={200: OpenApiTypes.OBJECT})
@api_view(["GET"])
@permission_classes([AllowAny])
def api_root(request):
    return Response(API_INDEX)


# ------------------ HEALTH CHECK (PUBLIC) ------------------
@extend_schema(tags=["Platform"], responses={200: OpenApiTypes.OBJECT, 503: OpenApiTypes.OBJECT})
@api_view(["GET"])
@permission_classes([AllowAny])
def health_check(request):
    """200 when the default database answers a trivial query, 503 otherwise."""
    try:
        with connections["default"].cursor() as cursor:
            cursor.execute("SELECT 1")
            cursor.fetchone()
    except OperationalError as exc:
        logger.error("Health check: database unreachable", extra={"error": str(exc)})
        return Response(
            {"status": "degraded", "db": "down", "error": str(exc)},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return Response({"status": "ok", "db": "ok"})


# ------------------ ADMIN PATH (HARDENED) ------------------
# Keep the trailing slash; production should use a non-obvious value.
ADMIN_PATH = getattr(settings, "ADMIN_PATH", "admin/")
if not ADMIN_PATH.endswith("/"):
    ADMIN_PATH = f"{ADMIN_PATH}/"


# ------------------ V2 ROUTES ------------------
v2_urlpatterns = [
    path("auth/", include("users.urls")),
    path("comics/", include("comics.urls")),
    path("library/", include("library.urls")),
    path("progress/", include("library.progress_urls")),
    path("payments/", include("payments.urls")),
    path("reviews/", include("reviews.urls")),
    path("analytics/", include("analytics.urls")),
    # Admin workflows (role-gated inside each app)
    path("admin/comics/", include("comics.admin_urls")),
    path("admin/reviews/", include("reviews.admin_urls")),
    path("admin/payments/", include("analytics.payment_urls")),
    path("admin/notifications/", include("notifications.urls")),
]


# ------------------ API ROUTES (ALL UNDER /api/) ------------------
api_urlpatterns = [
    path("", api_root, name="api-root"),
    path("health/", health_check, name="health-check"),
    # OpenAPI / Swagger
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    path("docs/", SpectacularSwaggerView.as_view(url_name="schema"), name="swagger-ui"),
    path("v2/", include(v2_urlpatterns)),
]

urlpatterns = [
    path(ADMIN_PATH, admin.site.urls),
    path("", RedirectView.as_view(url="/api/docs/", permanent=False), name="root"),
    path("api/", include(api_urlpatterns)),
]
