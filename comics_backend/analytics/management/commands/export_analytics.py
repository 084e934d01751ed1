# analytics/management/commands/export_analytics.py

"""
Write the comprehensive analytics report to disk.

Usage:
    python manage.py export_analytics
    python manage.py export_analytics --days 90 --format json --output-dir /tmp/reports
"""

from __future__ import annotations

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from analytics.services.exceptions import UnsupportedExportFormatError
from analytics.services.export import FORMATS, write_report
from analytics.services.platform import DEFAULT_DAYS, comprehensive_report


class Command(BaseCommand):
    help = "Export the comprehensive analytics report as CSV or JSON."

    def add_arguments(self, parser):
        parser.add_argument("--days", type=int, default=DEFAULT_DAYS, help="Window in days (default 30).")
        parser.add_argument("--format", dest="fmt", choices=FORMATS, default="csv")
        parser.add_argument("--output-dir", dest="output_dir", default=None)
        parser.add_argument("--filename", default=None, help="Override the generated file name.")

    def handle(self, *args, **options):
        days = options["days"]
        if days < 1:
            raise CommandError("--days must be at least 1")

        directory = options["output_dir"] or settings.ANALYTICS_EXPORT_DIR

        try:
            path = write_report(
                comprehensive_report(days),
                options["fmt"],
                directory=directory,
                filename=options["filename"],
            )
        except UnsupportedExportFormatError as exc:
            raise CommandError(str(exc))

        self.stdout.write(self.style.SUCCESS(f"Analytics report written to {path}"))
