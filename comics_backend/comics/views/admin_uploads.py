# comics/views/admin_uploads.py
"""
ADMIN UPLOAD ENDPOINTS

POST /api/v2/admin/comics/from-directory/   import a server-side folder as a comic
POST /api/v2/admin/comics/<slug>/pages/     multipart pages[] (+ start_page)
POST /api/v2/admin/comics/<slug>/cover/     multipart cover

Security:
- Requires catalog.manage capability (admins).
"""

from __future__ import annotations

import logging

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from comics.models import Comic
from comics.serializers import (
    ComicSerializer,
    CoverUploadSerializer,
    DirectoryImportSerializer,
    PageUploadSerializer,
)
from comics.services.exceptions import (
    InvalidUploadError,
    NoImagesFoundError,
    UploadDirectoryNotFoundError,
)
from comics.services.uploads import create_from_directory, upload_cover, upload_pages
from permissions.roles import CAP_CATALOG_MANAGE, HasCapability

logger = logging.getLogger(__name__)


class CatalogAdminView(APIView):
    permission_classes = [IsAuthenticated, HasCapability]
    required_capability = CAP_CATALOG_MANAGE


class ComicFromDirectoryView(CatalogAdminView):
    parser_classes = [JSONParser, FormParser]

    @extend_schema(
        tags=["Admin: Comics"],
        request=DirectoryImportSerializer,
        responses={
            201: ComicSerializer,
            400: OpenApiResponse(description="No images in directory"),
            404: OpenApiResponse(description="Directory not found"),
        },
    )
    def post(self, request):
        serializer = DirectoryImportSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            comic = create_from_directory(**serializer.validated_data)
        except UploadDirectoryNotFoundError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        except NoImagesFoundError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {
                "message": "Comic created successfully",
                "comic": ComicSerializer(comic).data,
                "total_pages": comic.page_count,
            },
            status=status.HTTP_201_CREATED,
        )


class ComicPagesUploadView(CatalogAdminView):
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(tags=["Admin: Comics"], request=PageUploadSerializer)
    def post(self, request, slug):
        comic = get_object_or_404(Comic, slug=slug)

        serializer = PageUploadSerializer(
            data={
                "pages": request.FILES.getlist("pages"),
                "start_page": request.data.get("start_page", 1),
            }
        )
        serializer.is_valid(raise_exception=True)

        result = upload_pages(
            comic=comic,
            files=serializer.validated_data["pages"],
            start_page=serializer.validated_data["start_page"],
        )
        return Response(
            {
                "message": "Pages uploaded",
                "uploaded": len(result["uploaded"]),
                "failed": len(result["errors"]),
                "pages": result["uploaded"],
                "errors": result["errors"],
                "total_pages": result["total_pages"],
            }
        )


class ComicCoverUploadView(CatalogAdminView):
    parser_classes = [MultiPartParser, FormParser]

    @extend_schema(tags=["Admin: Comics"], request=CoverUploadSerializer)
    def post(self, request, slug):
        comic = get_object_or_404(Comic, slug=slug)
        serializer = CoverUploadSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            url = upload_cover(comic=comic, upload=serializer.validated_data["cover"])
        except InvalidUploadError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        logger.info("Comic cover replaced", extra={"comic_id": str(comic.id)})
        return Response({"message": "Cover uploaded successfully", "url": url})
