# users/serializers.py

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from rest_framework import serializers

from users.models import UserPreferences

User = get_user_model()


# ---------------- REGISTER ----------------
class RegisterSerializer(serializers.ModelSerializer):
    password = serializers.CharField(
        write_only=True,
        validators=[validate_password],
        style={"input_type": "password"},
    )
    name = serializers.CharField(max_length=255)

    class Meta:
        model = User
        fields = [
            "name",
            "email",
            "password",
        ]

    def validate_email(self, value):
        email = (value or "").strip().lower()
        if User.objects.filter(email__iexact=email).exists():
            raise serializers.ValidationError("The email has already been taken.")
        return email

    def create(self, validated_data):
        # Self-registration always yields a reader.
        return User.objects.create_user(
            email=validated_data["email"],
            password=validated_data["password"],
            name=validated_data["name"].strip(),
        )


# ---------------- LOGIN (INPUT ONLY) ----------------
class LoginSerializer(serializers.Serializer):
    """
    Input validation only.
    Authentication is handled in the view.
    """

    email = serializers.EmailField()
    password = serializers.CharField(
        write_only=True,
        style={"input_type": "password"},
    )


class RefreshInputSerializer(serializers.Serializer):
    refresh = serializers.CharField()


# ---------------- USER OUTPUT ----------------
class UserSerializer(serializers.ModelSerializer):
    """
    Safe user representation for frontend consumption.
    """

    has_active_subscription = serializers.SerializerMethodField()

    class Meta:
        model = User
        fields = [
            "id",
            "name",
            "email",
            "role",
            "subscription_type",
            "subscription_status",
            "subscription_expires_at",
            "has_active_subscription",
            "created_at",
        ]

    def get_has_active_subscription(self, obj) -> bool:
        return obj.has_active_subscription()


# ---------------- PREFERENCES ----------------
class UserPreferencesSerializer(serializers.ModelSerializer):
    class Meta:
        model = UserPreferences
        fields = list(UserPreferences.EDITABLE_FIELDS) + ["updated_at"]
        read_only_fields = ["updated_at"]
