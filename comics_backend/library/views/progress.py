# library/views/progress.py
"""
READING PROGRESS + BOOKMARKS (V2, authenticated)

GET  /api/v2/progress/                         all progress rows
GET  /api/v2/progress/statistics/              reading totals + streak
GET  /api/v2/progress/recent/                  recently read (6)
GET  /api/v2/progress/continue/                started, not completed (6)
GET  /api/v2/progress/bookmarks/               every bookmark of the user
GET  /api/v2/progress/<slug>/                  progress for one comic
POST /api/v2/progress/<slug>/                  {current_page, total_pages?, reading_time_minutes?}
POST /api/v2/progress/<slug>/session/start/    {page?}
POST /api/v2/progress/<slug>/session/end/      {page}
POST /api/v2/progress/<slug>/session/pause/    {minutes}
PATCH /api/v2/progress/<slug>/preferences/     {preferences: {...}}
GET|POST /api/v2/progress/<slug>/bookmarks/
DELETE /api/v2/progress/<slug>/bookmarks/<page>/

Paid comics require access (403 ACCESS_DENIED) for every write.
"""

from __future__ import annotations

from django.shortcuts import get_object_or_404
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from comics.models import Comic
from library.models import UserComicProgress
from library.serializers import (
    BookmarkInputSerializer,
    ComicBookmarkSerializer,
    PauseSerializer,
    ProgressUpdateSerializer,
    ReadingPreferencesSerializer,
    SessionEndSerializer,
    SessionStartSerializer,
    UserComicProgressSerializer,
)
from library.services.bookmarks import add_bookmark, list_bookmarks, remove_bookmark
from library.services.exceptions import (
    BookmarkNotFoundError,
    InvalidProgressError,
    NoActiveSessionError,
)
from library.services.progress import (
    add_pause_time,
    continue_reading,
    end_session,
    get_or_create_progress,
    reading_statistics,
    recently_read,
    start_session,
    update_progress,
    update_reading_preferences,
)


def _access_denied(comic: Comic) -> Response:
    return Response(
        {
            "error": "Purchase required",
            "code": "ACCESS_DENIED",
            "is_free": comic.is_free,
            "price": f"{comic.price:.2f}",
        },
        status=status.HTTP_403_FORBIDDEN,
    )


class ProgressView(APIView):
    permission_classes = [IsAuthenticated]

    def readable_comic(self, request, slug):
        """Returns (comic, error_response)."""
        comic = get_object_or_404(Comic.objects.visible(), slug=slug)
        if not request.user.has_access_to_comic(comic):
            return comic, _access_denied(comic)
        return comic, None


# ---------------- COLLECTIONS ----------------
class ProgressListView(ProgressView):
    @extend_schema(tags=["Progress"], responses={200: UserComicProgressSerializer(many=True)})
    def get(self, request):
        qs = UserComicProgress.objects.filter(user=request.user).select_related("comic").order_by("-last_read_at")
        return Response({"data": UserComicProgressSerializer(qs, many=True).data})


class ReadingStatisticsView(ProgressView):
    @extend_schema(tags=["Progress"], responses={200: OpenApiResponse(description="Reading totals")})
    def get(self, request):
        return Response({"data": reading_statistics(request.user)})


class RecentlyReadView(ProgressView):
    @extend_schema(tags=["Progress"], responses={200: UserComicProgressSerializer(many=True)})
    def get(self, request):
        return Response({"data": UserComicProgressSerializer(recently_read(request.user), many=True).data})


class ContinueReadingView(ProgressView):
    @extend_schema(tags=["Progress"], responses={200: UserComicProgressSerializer(many=True)})
    def get(self, request):
        return Response({"data": UserComicProgressSerializer(continue_reading(request.user), many=True).data})


class BookmarkListView(ProgressView):
    @extend_schema(tags=["Progress"], responses={200: ComicBookmarkSerializer(many=True)})
    def get(self, request):
        return Response({"data": ComicBookmarkSerializer(list_bookmarks(user=request.user), many=True).data})


# ---------------- PER COMIC ----------------
class ComicProgressView(ProgressView):
    @extend_schema(tags=["Progress"], responses={200: UserComicProgressSerializer})
    def get(self, request, slug):
        comic = get_object_or_404(Comic.objects.visible(), slug=slug)
        progress = UserComicProgress.objects.filter(user=request.user, comic=comic).select_related("comic").first()
        if progress is None:
            return Response({"data": None})
        return Response(
            {
                "data": UserComicProgressSerializer(progress).data,
                "statistics": progress.session_statistics(),
            }
        )

    @extend_schema(tags=["Progress"], request=ProgressUpdateSerializer, responses={200: UserComicProgressSerializer})
    def post(self, request, slug):
        comic, denied = self.readable_comic(request, slug)
        if denied:
            return denied

        serializer = ProgressUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            progress = update_progress(user=request.user, comic=comic, **serializer.validated_data)
        except InvalidProgressError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({"data": UserComicProgressSerializer(progress).data})


class SessionStartView(ProgressView):
    @extend_schema(tags=["Progress"], request=SessionStartSerializer)
    def post(self, request, slug):
        comic, denied = self.readable_comic(request, slug)
        if denied:
            return denied

        serializer = SessionStartSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        progress = get_or_create_progress(request.user, comic)
        session = start_session(
            progress,
            page=serializer.validated_data.get("page"),
            metadata=serializer.validated_data.get("metadata"),
        )
        return Response({"session": session}, status=status.HTTP_201_CREATED)


class SessionEndView(ProgressView):
    @extend_schema(tags=["Progress"], request=SessionEndSerializer)
    def post(self, request, slug):
        comic, denied = self.readable_comic(request, slug)
        if denied:
            return denied

        serializer = SessionEndSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        progress = get_or_create_progress(request.user, comic)
        try:
            session = end_session(
                progress,
                page=serializer.validated_data["page"],
                metadata=serializer.validated_data.get("metadata"),
            )
        except NoActiveSessionError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        progress.refresh_from_db()
        return Response({"session": session, "statistics": progress.session_statistics()})


class SessionPauseView(ProgressView):
    @extend_schema(tags=["Progress"], request=PauseSerializer)
    def post(self, request, slug):
        comic, denied = self.readable_comic(request, slug)
        if denied:
            return denied

        serializer = PauseSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        progress = get_or_create_progress(request.user, comic)
        try:
            session = add_pause_time(progress, minutes=serializer.validated_data["minutes"])
        except NoActiveSessionError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)
        return Response({"session": session})


class ReadingPreferencesView(ProgressView):
    @extend_schema(tags=["Progress"], request=ReadingPreferencesSerializer)
    def patch(self, request, slug):
        comic, denied = self.readable_comic(request, slug)
        if denied:
            return denied

        serializer = ReadingPreferencesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        progress = get_or_create_progress(request.user, comic)
        prefs = update_reading_preferences(progress, serializer.validated_data["preferences"])
        return Response({"reading_preferences": prefs})


class ComicBookmarksView(ProgressView):
    @extend_schema(tags=["Progress"], responses={200: ComicBookmarkSerializer(many=True)})
    def get(self, request, slug):
        comic = get_object_or_404(Comic.objects.visible(), slug=slug)
        bookmarks = list_bookmarks(user=request.user, comic=comic)
        return Response({"data": ComicBookmarkSerializer(bookmarks, many=True).data})

    @extend_schema(tags=["Progress"], request=BookmarkInputSerializer, responses={201: ComicBookmarkSerializer})
    def post(self, request, slug):
        comic, denied = self.readable_comic(request, slug)
        if denied:
            return denied

        serializer = BookmarkInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            bookmark, created = add_bookmark(user=request.user, comic=comic, **serializer.validated_data)
        except InvalidProgressError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response(
            {"data": ComicBookmarkSerializer(bookmark).data},
            status=status.HTTP_201_CREATED if created else status.HTTP_200_OK,
        )


class BookmarkDeleteView(ProgressView):
    @extend_schema(tags=["Progress"], responses={200: OpenApiResponse(), 404: OpenApiResponse()})
    def delete(self, request, slug, page_number):
        comic = get_object_or_404(Comic.objects.visible(), slug=slug)
        try:
            remove_bookmark(user=request.user, comic=comic, page_number=page_number)
        except BookmarkNotFoundError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_404_NOT_FOUND)
        return Response({"message": "Bookmark removed"})
