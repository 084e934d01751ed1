# reviews/serializers.py

from __future__ import annotations

from rest_framework import serializers

from reviews.models import ComicReview


class ComicReviewSerializer(serializers.ModelSerializer):
    user = serializers.CharField(source="user.name", read_only=True)
    comic_slug = serializers.CharField(source="comic.slug", read_only=True)
    status = serializers.CharField(read_only=True)
    helpfulness_ratio = serializers.FloatField(read_only=True)

    class Meta:
        model = ComicReview
        fields = [
            "id",
            "user",
            "comic_slug",
            "rating",
            "title",
            "content",
            "is_spoiler",
            "helpful_votes",
            "total_votes",
            "helpfulness_ratio",
            "status",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class ModerationReviewSerializer(ComicReviewSerializer):
    user_email = serializers.EmailField(source="user.email", read_only=True)
    comic_title = serializers.CharField(source="comic.title", read_only=True)
    moderated_by = serializers.CharField(source="moderated_by.email", read_only=True, default=None)

    class Meta(ComicReviewSerializer.Meta):
        fields = ComicReviewSerializer.Meta.fields + [
            "user_email",
            "comic_title",
            "moderated_at",
            "moderated_by",
            "moderation_reason",
        ]
        read_only_fields = fields


class ReviewInputSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5)
    title = serializers.CharField(required=False, allow_blank=True, max_length=255, default="")
    content = serializers.CharField(min_length=10, max_length=5000)
    is_spoiler = serializers.BooleanField(required=False, default=False)


class ReviewUpdateSerializer(serializers.Serializer):
    rating = serializers.IntegerField(min_value=1, max_value=5, required=False)
    title = serializers.CharField(required=False, allow_blank=True, max_length=255)
    content = serializers.CharField(min_length=10, max_length=5000, required=False)
    is_spoiler = serializers.BooleanField(required=False)


class VoteInputSerializer(serializers.Serializer):
    is_helpful = serializers.BooleanField()


class RejectInputSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")


class BulkModerationSerializer(serializers.Serializer):
    action = serializers.ChoiceField(choices=["approve", "reject"])
    review_ids = serializers.ListField(child=serializers.UUIDField(), min_length=1, max_length=200)
    reason = serializers.CharField(required=False, allow_blank=True, max_length=500, default="")
