# comics/tests/test_uploads.py

from __future__ import annotations

import shutil
import tempfile
from io import StringIO
from pathlib import Path

from django.core.files.uploadedfile import SimpleUploadedFile
from django.core.management import CommandError, call_command
from django.test import TestCase, override_settings
from django.urls import reverse
from rest_framework import status
from rest_framework.test import APIClient

from comics.models import Comic
from comics.services.uploads import natural_key
from comics.tests.factories import make_comic, make_user

FAKE_PNG = b"\x89PNG\r\n\x1a\n" + b"0" * 64


def _image(name: str) -> SimpleUploadedFile:
    return SimpleUploadedFile(name, FAKE_PNG, content_type="image/png")


class UploadTestCase(TestCase):
    """Each test writes into its own throwaway MEDIA_ROOT / COMIC_IMPORT_ROOT."""

    def setUp(self):
        self.tmp = tempfile.mkdtemp()
        self.addCleanup(shutil.rmtree, self.tmp, ignore_errors=True)

        overrides = override_settings(MEDIA_ROOT=self.tmp, COMIC_IMPORT_ROOT=self.tmp)
        overrides.enable()
        self.addCleanup(overrides.disable)

        self.client = APIClient()
        self.admin = make_user("admin@example.com", role="admin")
        self.reader = make_user("reader@example.com")

    def make_folder(self, name: str, files) -> Path:
        folder = Path(self.tmp) / name
        folder.mkdir()
        for filename in files:
            (folder / filename).write_bytes(FAKE_PNG)
        return folder


class NaturalSortTests(TestCase):
    def test_numbers_sort_numerically(self):
        names = ["page10.png", "page2.png", "Page1.png"]
        self.assertEqual(sorted(names, key=natural_key), ["Page1.png", "page2.png", "page10.png"])


class DirectoryImportTests(UploadTestCase):
    def test_admin_imports_folder_in_natural_order(self):
        self.make_folder("issue-1", ["page10.png", "page2.png", "page1.png", "notes.txt"])
        self.client.force_authenticate(self.admin)

        res = self.client.post(
            reverse("comics-admin:from-directory"),
            {"title": "Issue One", "author": "R. Vale", "directory": "issue-1", "genre": "Action"},
            format="json",
        )

        self.assertEqual(res.status_code, status.HTTP_201_CREATED)
        self.assertEqual(res.data["total_pages"], 3)

        comic = Comic.objects.get(slug="issue-one")
        self.assertTrue(comic.is_visible)
        self.assertTrue(comic.is_published)
        self.assertTrue(comic.is_free)
        paths = list(comic.pages.order_by("page_number").values_list("image_path", flat=True))
        self.assertEqual(
            paths,
            [
                "comics/issue-one/pages/0001.png",
                "comics/issue-one/pages/0002.png",
                "comics/issue-one/pages/0003.png",
            ],
        )
        self.assertEqual(comic.cover_image, "comics/issue-one/cover.png")

    def test_missing_directory_is_404(self):
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            reverse("comics-admin:from-directory"),
            {"title": "Ghost", "author": "Nobody", "directory": "does-not-exist"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_404_NOT_FOUND)

    def test_folder_without_images_is_400(self):
        self.make_folder("empty", ["readme.txt"])
        self.client.force_authenticate(self.admin)
        res = self.client.post(
            reverse("comics-admin:from-directory"),
            {"title": "Empty", "author": "Nobody", "directory": "empty"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)
        self.assertFalse(Comic.objects.filter(title="Empty").exists())

    def test_readers_cannot_import(self):
        self.make_folder("issue-2", ["1.png"])
        self.client.force_authenticate(self.reader)
        res = self.client.post(
            reverse("comics-admin:from-directory"),
            {"title": "Nope", "author": "Nobody", "directory": "issue-2"},
            format="json",
        )
        self.assertEqual(res.status_code, status.HTTP_403_FORBIDDEN)

    def test_management_command_imports_paid_comic(self):
        self.make_folder("issue-3", ["1.png", "2.png"])
        out = StringIO()

        call_command(
            "import_comic_directory",
            "issue-3",
            "--title",
            "Paid Issue",
            "--author",
            "R. Vale",
            "--paid",
            "--price",
            "2.50",
            stdout=out,
        )

        comic = Comic.objects.get(slug="paid-issue")
        self.assertFalse(comic.is_free)
        self.assertEqual(str(comic.price), "2.50")
        self.assertIn("2 pages", out.getvalue())

    def test_management_command_rejects_negative_price(self):
        self.make_folder("issue-4", ["1.png"])
        with self.assertRaises(CommandError):
            call_command("import_comic_directory", "issue-4", "--title", "X", "--author", "Y", "--price", "-1")


class PageUploadTests(UploadTestCase):
    def setUp(self):
        super().setUp()
        self.comic = make_comic("Night Shift")
        self.client.force_authenticate(self.admin)

    def test_upload_reports_invalid_files_per_page(self):
        res = self.client.post(
            reverse("comics-admin:upload-pages", args=[self.comic.slug]),
            {"pages": [_image("a.png"), SimpleUploadedFile("b.gif", b"GIF89a"), _image("c.jpg")], "start_page": 1},
            format="multipart",
        )

        self.assertEqual(res.status_code, status.HTTP_200_OK)
        self.assertEqual(res.data["uploaded"], 2)
        self.assertEqual(res.data["failed"], 1)
        self.assertEqual(res.data["errors"][0]["page_number"], 2)
        self.assertEqual(res.data["total_pages"], 2)

        self.comic.refresh_from_db()
        self.assertEqual(self.comic.page_count, 2)

    def test_upload_replaces_existing_page_number(self):
        url = reverse("comics-admin:upload-pages", args=[self.comic.slug])
        self.client.post(url, {"pages": [_image("first.png")], "start_page": 1}, format="multipart")
        res = self.client.post(url, {"pages": [_image("again.png")], "start_page": 1}, format="multipart")

        self.assertEqual(res.data["total_pages"], 1)
        self.assertEqual(self.comic.pages.count(), 1)

    def test_cover_upload_rejects_unknown_type(self):
        res = self.client.post(
            reverse("comics-admin:upload-cover", args=[self.comic.slug]),
            {"cover": SimpleUploadedFile("cover.bmp", b"BM")},
            format="multipart",
        )
        self.assertEqual(res.status_code, status.HTTP_400_BAD_REQUEST)

    def test_cover_upload_stores_file(self):
        res = self.client.post(
            reverse("comics-admin:upload-cover", args=[self.comic.slug]),
            {"cover": _image("cover.png")},
            format="multipart",
        )
        self.assertEqual(res.status_code, status.HTTP_200_OK)

        self.comic.refresh_from_db()
        self.assertEqual(self.comic.cover_image, "comics/night-shift/cover.png")
        self.assertTrue((Path(self.tmp) / "comics/night-shift/cover.png").exists())
