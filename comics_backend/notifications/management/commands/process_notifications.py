# notifications/management/commands/process_notifications.py

"""
Announce scheduled releases that went live, then deliver due notification emails.

Usage:
    python manage.py process_notifications
    python manage.py process_notifications --limit 500
    python manage.py process_notifications --loop --sleep 30     # simple worker
"""

from __future__ import annotations

import time

from django.core.management.base import BaseCommand, CommandError

from notifications.services.notifications import (
    DEFAULT_BATCH_SIZE,
    announce_due_releases,
    process_pending_jobs,
)


class Command(BaseCommand):
    help = "Queue scheduled release emails and send pending notifications (retries with backoff)."

    def add_arguments(self, parser):
        parser.add_argument("--limit", type=int, default=DEFAULT_BATCH_SIZE)
        parser.add_argument("--loop", action="store_true", help="Keep polling until interrupted.")
        parser.add_argument("--sleep", type=int, default=30, help="Seconds between polls with --loop.")

    def handle(self, *args, **options):
        limit = options["limit"]
        if limit < 1:
            raise CommandError("--limit must be at least 1")

        while True:
            announced = announce_due_releases()
            summary = process_pending_jobs(limit=limit)
            self.stdout.write(
                self.style.SUCCESS(
                    "announced={announced} processed={processed} sent={sent} "
                    "retrying={retrying} failed={failed}".format(announced=announced, **summary)
                )
            )
            if not options["loop"]:
                break
            time.sleep(max(options["sleep"], 1))
