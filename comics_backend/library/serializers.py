# library/serializers.py

from __future__ import annotations

from rest_framework import serializers

from comics.serializers import ComicSerializer
from library.models import ComicBookmark, UserComicProgress, UserLibrary


# ---------------- LIBRARY ----------------
class UserLibrarySerializer(serializers.ModelSerializer):
    comic = ComicSerializer(read_only=True)
    has_access = serializers.SerializerMethodField()

    class Meta:
        model = UserLibrary
        fields = [
            "id",
            "comic",
            "access_type",
            "has_access",
            "purchase_price",
            "purchased_at",
            "access_expires_at",
            "is_favorite",
            "rating",
            "review",
            "last_accessed_at",
            "total_reading_time",
            "completion_percentage",
            "created_at",
        ]
        read_only_fields = fields

    def get_has_access(self, obj) -> bool:
        return obj.has_access()


class AddToLibrarySerializer(serializers.Serializer):
    access_type = serializers.ChoiceField(
        choices=[UserLibrary.ACCESS_FREE, UserLibrary.ACCESS_READING],
        required=False,
    )


class LibraryRatingSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    review = serializers.CharField(required=False, allow_blank=True, max_length=1000)


# ---------------- PROGRESS ----------------
class ProgressComicSerializer(serializers.Serializer):
    id = serializers.UUIDField()
    slug = serializers.CharField()
    title = serializers.CharField()
    author = serializers.CharField()
    cover_image_url = serializers.CharField()
    page_count = serializers.IntegerField()


class UserComicProgressSerializer(serializers.ModelSerializer):
    comic = ProgressComicSerializer(read_only=True)
    has_active_session = serializers.SerializerMethodField()

    class Meta:
        model = UserComicProgress
        fields = [
            "id",
            "comic",
            "current_page",
            "total_pages",
            "progress_percentage",
            "is_completed",
            "completed_at",
            "is_bookmarked",
            "bookmark_count",
            "reading_time_minutes",
            "total_reading_sessions",
            "average_session_duration",
            "reading_speed",
            "has_active_session",
            "reading_preferences",
            "first_read_at",
            "last_read_at",
        ]
        read_only_fields = fields

    def get_has_active_session(self, obj) -> bool:
        return obj.active_session() is not None


class ProgressUpdateSerializer(serializers.Serializer):
    current_page = serializers.IntegerField(min_value=1)
    total_pages = serializers.IntegerField(min_value=1, required=False)
    reading_time_minutes = serializers.IntegerField(min_value=0, required=False)


class SessionStartSerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, required=False)
    metadata = serializers.DictField(required=False)


class SessionEndSerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1)
    metadata = serializers.DictField(required=False)


class PauseSerializer(serializers.Serializer):
    minutes = serializers.IntegerField(min_value=1, max_value=24 * 60)


class ReadingPreferencesSerializer(serializers.Serializer):
    preferences = serializers.DictField()


# ---------------- BOOKMARKS ----------------
class ComicBookmarkSerializer(serializers.ModelSerializer):
    comic_slug = serializers.CharField(source="comic.slug", read_only=True)
    comic_title = serializers.CharField(source="comic.title", read_only=True)

    class Meta:
        model = ComicBookmark
        fields = ["id", "comic_slug", "comic_title", "page_number", "note", "created_at", "updated_at"]
        read_only_fields = fields


class BookmarkInputSerializer(serializers.Serializer):
    page_number = serializers.IntegerField(min_value=1)
    note = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")
