# comics/management/commands/import_comic_directory.py

"""
Import a folder of page images as a new (visible, published) comic.

Usage:
    python manage.py import_comic_directory path/to/folder --title "X" --author "Y"
    python manage.py import_comic_directory folder --title "X" --author "Y" --paid --price 4.99
"""

from __future__ import annotations

from decimal import Decimal, InvalidOperation

from django.core.management.base import BaseCommand, CommandError

from comics.services.exceptions import NoImagesFoundError, UploadDirectoryNotFoundError
from comics.services.uploads import create_from_directory


class Command(BaseCommand):
    help = "Create a comic from a directory of page images (natural sort order)."

    def add_arguments(self, parser):
        parser.add_argument("directory", help="Absolute path or path relative to COMIC_IMPORT_ROOT.")
        parser.add_argument("--title", required=True)
        parser.add_argument("--author", required=True)
        parser.add_argument("--description", default="")
        parser.add_argument("--genre", default="")
        parser.add_argument("--paid", action="store_true", help="Mark the comic as paid.")
        parser.add_argument("--price", default=None)

    def handle(self, *args, **options):
        price = None
        if options["price"] is not None:
            try:
                price = Decimal(options["price"])
            except InvalidOperation:
                raise CommandError(f"Invalid price: {options['price']}")
            if price < 0:
                raise CommandError("Price cannot be negative.")

        try:
            comic = create_from_directory(
                title=options["title"],
                author=options["author"],
                directory=options["directory"],
                description=options["description"],
                genre=options["genre"],
                is_free=not options["paid"],
                price=price,
            )
        except (UploadDirectoryNotFoundError, NoImagesFoundError) as exc:
            raise CommandError(str(exc))

        self.stdout.write(
            self.style.SUCCESS(f"Imported '{comic.title}' ({comic.page_count} pages) as /{comic.slug}")
        )
