# backend/settings/prod.py
"""
PATH: backend/settings/prod.py

PRODUCTION SETTINGS

Startup fails (ImproperlyConfigured) unless:
- SECRET_KEY is set and not the dev placeholder
- ALLOWED_HOSTS is non-empty
- DATABASE_URL points at a real database server (never sqlite)
- Stripe secret + webhook secret are present
- CORS / CSRF origins are explicit https origins

On top of that: WhiteNoise for static files, proxy-aware SSL, HSTS,
secure cookies and the usual security headers.
"""

from __future__ import annotations

from django.core.exceptions import ImproperlyConfigured

from .base import *  # noqa: F403
from .base import BASE_DIR, EMAIL_BACKEND, MIDDLEWARE, PAYMENTS, env


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise ImproperlyConfigured(message)


def _origins(name: str) -> list[str]:
    origins = [o.strip() for o in env.list(name, default=[]) if o.strip()]
    _require(bool(origins), f"{name} must be set in production.")
    for origin in origins:
        _require(
            "localhost" not in origin and "127.0.0.1" not in origin,
            f"{name} may not contain local origins in production ({origin}).",
        )
        _require(origin.startswith("https://"), f"{name} entries must be https:// in production ({origin}).")
    return origins


DEBUG = False

# ---------------- secrets / hosts ----------------
SECRET_KEY = (env("SECRET_KEY", default="") or "").strip()
_require(
    bool(SECRET_KEY) and SECRET_KEY != "dev-insecure-change-me",
    "SECRET_KEY must be set to a strong value in production.",
)

ALLOWED_HOSTS = env.list("ALLOWED_HOSTS", default=[])
_require(bool(ALLOWED_HOSTS), "ALLOWED_HOSTS must be set in production.")

# ---------------- database ----------------
_database_url = (env("DATABASE_URL", default="") or "").strip()
_require(bool(_database_url), "DATABASE_URL must be set in production.")
_require(not _database_url.startswith("sqlite"), "SQLite is not supported in production; use Postgres.")

DATABASES = {"default": env.db("DATABASE_URL")}
DATABASES["default"]["CONN_MAX_AGE"] = env.int("DB_CONN_MAX_AGE", default=60)

# ---------------- payments ----------------
_stripe = PAYMENTS["STRIPE"]
_require(bool(_stripe["SECRET_KEY"]), "STRIPE_SECRET_KEY must be set in production.")
_require(bool(_stripe["WEBHOOK_SECRET"]), "STRIPE_WEBHOOK_SECRET must be set in production.")

# ---------------- email ----------------
# console mail is dev-only
_require(
    EMAIL_BACKEND != "django.core.mail.backends.console.EmailBackend",
    "EMAIL_URL must point at a real mail server in production.",
)

# ---------------- static / media ----------------
STATIC_ROOT = env("STATIC_ROOT", default=str(BASE_DIR / "staticfiles"))

MIDDLEWARE.insert(1, "whitenoise.middleware.WhiteNoiseMiddleware")
STORAGES = {
    "default": {"BACKEND": "django.core.files.storage.FileSystemStorage"},
    "staticfiles": {"BACKEND": "whitenoise.storage.CompressedManifestStaticFilesStorage"},
}

# ---------------- transport security ----------------
SECURE_PROXY_SSL_HEADER = ("HTTP_X_FORWARDED_PROTO", "https")
SECURE_SSL_REDIRECT = env.bool("SECURE_SSL_REDIRECT", default=True)
SECURE_HSTS_SECONDS = env.int("SECURE_HSTS_SECONDS", default=3600)
SECURE_HSTS_INCLUDE_SUBDOMAINS = env.bool("SECURE_HSTS_INCLUDE_SUBDOMAINS", default=True)
SECURE_HSTS_PRELOAD = env.bool("SECURE_HSTS_PRELOAD", default=False)

SESSION_COOKIE_SECURE = CSRF_COOKIE_SECURE = True
SESSION_COOKIE_HTTPONLY = CSRF_COOKIE_HTTPONLY = True
SESSION_COOKIE_SAMESITE = CSRF_COOKIE_SAMESITE = "Lax"

SECURE_CONTENT_TYPE_NOSNIFF = True
SECURE_REFERRER_POLICY = "same-origin"
SECURE_CROSS_ORIGIN_OPENER_POLICY = "same-origin"
X_FRAME_OPTIONS = "DENY"

# ---------------- CORS / CSRF ----------------
CORS_ALLOWED_ORIGINS = _origins("CORS_ALLOWED_ORIGINS")
CSRF_TRUSTED_ORIGINS = _origins("CSRF_TRUSTED_ORIGINS")
CORS_ALLOW_CREDENTIALS = False
