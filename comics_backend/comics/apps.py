# comics/apps.py

"""
COMICS APP CONFIG

Catalog module:
- Comic records, pages, likes, comments, view tracking
- Discovery (featured, recent, popular, trending, similar, recommendations)
- Admin upload workflows (directory import, page/cover upload)
"""

from django.apps import AppConfig


class ComicsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "comics"
    verbose_name = "Comics Catalog"
