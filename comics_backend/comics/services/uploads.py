# comics/services/uploads.py

"""
======================================================
PATH: comics/services/uploads.py
======================================================
ADMIN UPLOAD WORKFLOWS

- create_from_directory: import a folder of page images as a new comic
  (natural sort order, first page doubles as cover, visible + published now)
- upload_pages: add/replace pages on an existing comic (upsert by page number)
- upload_cover: replace the cover image

Files are written through django.core.files.storage.default_storage so the
backend (filesystem, S3, ...) is a settings concern.
======================================================
"""

from __future__ import annotations

import logging
import os
import re
from pathlib import Path

from django.conf import settings
from django.core.files import File
from django.core.files.storage import default_storage
from django.db import transaction
from django.utils import timezone

from comics.models import Comic, ComicPage
from comics.services.exceptions import (
    InvalidUploadError,
    NoImagesFoundError,
    UploadDirectoryNotFoundError,
)

logger = logging.getLogger(__name__)

IMAGE_EXTENSIONS = {".jpg", ".jpeg", ".png", ".webp"}
MAX_PAGE_BYTES = 10 * 1024 * 1024
MAX_COVER_BYTES = 5 * 1024 * 1024


def natural_key(name: str):
    return [int(part) if part.isdigit() else part.lower() for part in re.split(r"(\d+)", name)]


def _extension(name: str) -> str:
    return os.path.splitext(name or "")[1].lower()


def _validate_image(upload, *, max_bytes: int) -> None:
    ext = _extension(getattr(upload, "name", ""))
    if ext not in IMAGE_EXTENSIONS:
        raise InvalidUploadError(f"Unsupported image type: {ext or 'unknown'}")
    size = getattr(upload, "size", None)
    if size is not None and size > max_bytes:
        raise InvalidUploadError(f"File too large ({size} bytes, max {max_bytes})")


def _page_storage_path(comic: Comic, page_number: int, ext: str) -> str:
    return f"comics/{comic.slug}/pages/{page_number:04d}{ext}"


def _cover_storage_path(comic: Comic, ext: str) -> str:
    return f"comics/{comic.slug}/cover{ext}"


def _store(path: str, content) -> str:
    if default_storage.exists(path):
        default_storage.delete(path)
    return default_storage.save(path, content)


def resolve_import_directory(directory: str) -> Path:
    path = Path(directory)
    if not path.is_absolute():
        root = Path(getattr(settings, "COMIC_IMPORT_ROOT", settings.MEDIA_ROOT))
        path = root / directory
    return path


def list_directory_images(directory: Path) -> list[Path]:
    files = [p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in IMAGE_EXTENSIONS]
    return sorted(files, key=lambda p: natural_key(p.name))


# ============================================================
# DIRECTORY IMPORT
# ============================================================


def create_from_directory(
    *,
    title: str,
    author: str,
    directory: str,
    description: str = "",
    genre: str = "",
    is_free: bool = True,
    price=None,
) -> Comic:
    folder = resolve_import_directory(directory)
    if not folder.is_dir():
        raise UploadDirectoryNotFoundError(f"Directory not found: {folder}")

    images = list_directory_images(folder)
    if not images:
        raise NoImagesFoundError(f"No image files found in {folder}")

    with transaction.atomic():
        comic = Comic(
            title=title.strip(),
            author=author.strip(),
            description=description or "",
            genre=(genre or "General").strip(),
            is_free=is_free,
            is_visible=True,
            published_at=timezone.now(),
            page_count=len(images),
        )
        if not is_free and price is not None:
            comic.price = price
        comic.save()

        for index, image in enumerate(images, start=1):
            with image.open("rb") as fh:
                stored = _store(_page_storage_path(comic, index, image.suffix.lower()), File(fh))
            ComicPage.objects.create(
                comic=comic,
                page_number=index,
                image_path=stored,
                file_size=image.stat().st_size,
            )

        with images[0].open("rb") as fh:
            comic.cover_image = _store(_cover_storage_path(comic, images[0].suffix.lower()), File(fh))
        comic.save(update_fields=["cover_image", "updated_at"])

    logger.info(
        "Comic imported from directory",
        extra={"comic_id": str(comic.id), "pages": len(images), "directory": str(folder)},
    )
    return comic


# ============================================================
# PAGE + COVER UPLOAD
# ============================================================


def upload_pages(*, comic: Comic, files, start_page: int = 1) -> dict:
    """
    Returns {"uploaded": [...], "errors": [...], "total_pages": n}.
    Invalid files are reported per page; valid ones are still stored.
    """
    uploaded = []
    errors = []

    with transaction.atomic():
        for offset, upload in enumerate(files):
            page_number = start_page + offset
            try:
                _validate_image(upload, max_bytes=MAX_PAGE_BYTES)
            except InvalidUploadError as exc:
                errors.append({"page_number": page_number, "error": str(exc)})
                continue

            stored = _store(_page_storage_path(comic, page_number, _extension(upload.name)), upload)
            page, _ = ComicPage.objects.update_or_create(
                comic=comic,
                page_number=page_number,
                defaults={
                    "image_path": stored,
                    "image_url": "",
                    "file_size": getattr(upload, "size", None),
                },
            )
            uploaded.append({"page_number": page_number, "url": page.url})

        comic.page_count = comic.pages.count()
        comic.save(update_fields=["page_count", "updated_at"])

    logger.info(
        "Comic pages uploaded",
        extra={"comic_id": str(comic.id), "uploaded": len(uploaded), "failed": len(errors)},
    )
    return {"uploaded": uploaded, "errors": errors, "total_pages": comic.page_count}


def upload_cover(*, comic: Comic, upload) -> str:
    _validate_image(upload, max_bytes=MAX_COVER_BYTES)
    comic.cover_image = _store(_cover_storage_path(comic, _extension(upload.name)), upload)
    comic.save(update_fields=["cover_image", "updated_at"])
    return comic.cover_image_url
