# analytics/apps.py

"""
ANALYTICS APP CONFIG

Read-only reporting over users, payments, views and reading progress.
No models of its own.
"""

from django.apps import AppConfig


class AnalyticsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "analytics"
    verbose_name = "Analytics"
