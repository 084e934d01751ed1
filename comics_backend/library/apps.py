# library/apps.py

"""
LIBRARY APP CONFIG

Reader-owned state:
- Library entries (access grants, favorites, quick ratings)
- Reading progress + sessions
- Page bookmarks
"""

from django.apps import AppConfig


class LibraryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "library"
    verbose_name = "Reader Library"
