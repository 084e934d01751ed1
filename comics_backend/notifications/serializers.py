# notifications/serializers.py

from rest_framework import serializers

from notifications.models import NotificationJob


class NotificationJobSerializer(serializers.ModelSerializer):
    recipient = serializers.EmailField(source="recipient.email", read_only=True)
    comic = serializers.CharField(source="comic.slug", read_only=True, default=None)

    class Meta:
        model = NotificationJob
        fields = [
            "id",
            "kind",
            "recipient",
            "comic",
            "subject",
            "status",
            "attempts",
            "max_attempts",
            "last_error",
            "available_at",
            "sent_at",
            "created_at",
        ]
        read_only_fields = fields


class ComicNotificationSerializer(serializers.Serializer):
    force = serializers.BooleanField(required=False, default=False)


class UserNotificationSerializer(serializers.Serializer):
    user_id = serializers.UUIDField()
    comic_slug = serializers.SlugField()
    force = serializers.BooleanField(required=False, default=False)
