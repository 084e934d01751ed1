# payments/apps.py

"""
PAYMENTS APP CONFIG

Stripe-backed checkout:
- single comic purchase, discounted bundles, monthly/yearly subscriptions
- confirmation, refunds, retries
- signed webhook ingestion
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"
