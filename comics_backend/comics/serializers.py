# comics/serializers.py

from __future__ import annotations

from rest_framework import serializers

from comics.models import Comic, ComicComment


def engagement_context(user, comics) -> dict:
    """
    Precompute liked / bookmarked comic ids for a page of comics so list
    serialization stays at two queries regardless of page size.
    """
    if not user or not user.is_authenticated:
        return {"liked_ids": set(), "bookmarked_ids": set()}

    from library.models import ComicBookmark

    ids = [c.pk for c in comics]
    liked = set(user.comic_likes.filter(comic_id__in=ids).values_list("comic_id", flat=True))
    bookmarked = set(
        ComicBookmark.objects.filter(user=user, comic_id__in=ids).values_list("comic_id", flat=True)
    )
    return {"liked_ids": liked, "bookmarked_ids": bookmarked}


# ---------------- COMIC (LIST / CARD) ----------------
class ComicSerializer(serializers.ModelSerializer):
    genres = serializers.SerializerMethodField()
    cover_image_url = serializers.CharField(read_only=True)
    rating = serializers.DecimalField(source="average_rating", max_digits=3, decimal_places=2, read_only=True)
    reading_time_estimate = serializers.IntegerField(read_only=True)
    is_liked = serializers.SerializerMethodField()
    is_bookmarked = serializers.SerializerMethodField()

    class Meta:
        model = Comic
        fields = [
            "id",
            "slug",
            "title",
            "author",
            "description",
            "cover_image_url",
            "genre",
            "genres",
            "tags",
            "rating",
            "total_ratings",
            "page_count",
            "issue_number",
            "series",
            "publisher",
            "publication_year",
            "language",
            "likes_count",
            "view_count",
            "total_readers",
            "is_liked",
            "is_bookmarked",
            "is_free",
            "price",
            "has_mature_content",
            "reading_time_estimate",
            "published_at",
            "created_at",
        ]
        read_only_fields = fields

    def get_genres(self, obj) -> list[str]:
        genres = [obj.genre] if obj.genre else []
        for tag in obj.get_tags():
            if tag not in genres:
                genres.append(tag)
        return genres

    def get_is_liked(self, obj) -> bool:
        return obj.pk in self.context.get("liked_ids", set())

    def get_is_bookmarked(self, obj) -> bool:
        return obj.pk in self.context.get("bookmarked_ids", set())


# ---------------- COMMENTS ----------------
class ComicCommentSerializer(serializers.ModelSerializer):
    user = serializers.CharField(source="user.name", read_only=True)

    class Meta:
        model = ComicComment
        fields = ["id", "user", "content", "is_spoiler", "created_at"]
        read_only_fields = ["id", "user", "created_at"]


class CommentInputSerializer(serializers.Serializer):
    content = serializers.CharField(min_length=1, max_length=1000)
    is_spoiler = serializers.BooleanField(required=False, default=False)


class RateInputSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)


# ---------------- ADMIN UPLOADS ----------------
class DirectoryImportSerializer(serializers.Serializer):
    title = serializers.CharField(max_length=255)
    author = serializers.CharField(max_length=255)
    directory = serializers.CharField()
    description = serializers.CharField(required=False, allow_blank=True, default="")
    genre = serializers.CharField(required=False, allow_blank=True, default="")
    is_free = serializers.BooleanField(required=False, default=True)
    price = serializers.DecimalField(max_digits=8, decimal_places=2, required=False, min_value=0)


class PageUploadSerializer(serializers.Serializer):
    pages = serializers.ListField(child=serializers.FileField(), min_length=1)
    start_page = serializers.IntegerField(required=False, min_value=1, default=1)


class CoverUploadSerializer(serializers.Serializer):
    cover = serializers.FileField()
