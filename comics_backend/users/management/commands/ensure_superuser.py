# users/management/commands/ensure_superuser.py

"""
Bootstrap the platform admin from AUTO_ADMIN_EMAIL / AUTO_ADMIN_PASSWORD
(or --email / --password).

Safe to run on every deploy: an existing account is promoted back to an
active admin superuser and gets the configured password. The password is
never echoed.
"""

from __future__ import annotations

import os

from django.contrib.auth import get_user_model
from django.core.management.base import BaseCommand
from django.db import transaction

ADMIN_FLAGS = {"is_active": True, "is_staff": True, "is_superuser": True}


class Command(BaseCommand):
    help = "Create or refresh the platform admin account (idempotent)."

    def add_arguments(self, parser):
        parser.add_argument("--email", default=None, help="Overrides AUTO_ADMIN_EMAIL.")
        parser.add_argument("--password", default=None, help="Overrides AUTO_ADMIN_PASSWORD.")

    def handle(self, *args, **options):
        email = (options["email"] or os.environ.get("AUTO_ADMIN_EMAIL", "")).strip()
        password = (options["password"] or os.environ.get("AUTO_ADMIN_PASSWORD", "")).strip()

        if not (email and password):
            self.stdout.write(self.style.WARNING("No admin credentials configured; nothing to do."))
            return

        User = get_user_model()

        with transaction.atomic():
            user = User.objects.select_for_update().filter(email__iexact=email).first()
            if user is None:
                User.objects.create_superuser(email=email, password=password)
                outcome = "created"
            else:
                for field, value in ADMIN_FLAGS.items():
                    setattr(user, field, value)
                user.role = User.ROLE_ADMIN
                user.set_password(password)
                user.save()
                outcome = "updated"

        self.stdout.write(self.style.SUCCESS(f"Admin account {outcome}: {email}"))
