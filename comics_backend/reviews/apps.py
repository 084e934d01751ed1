# reviews/apps.py

"""
REVIEWS APP CONFIG

Written reviews with helpfulness votes, automatic screening and a
moderator queue. Approved reviews drive Comic.average_rating.
"""

from django.apps import AppConfig


class ReviewsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "reviews"
    verbose_name = "Reviews & Moderation"
