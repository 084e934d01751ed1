# users/views/preferences.py

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from users.models import UserPreferences
from users.serializers import UserPreferencesSerializer


class PreferencesView(APIView):
    """
    GET   /api/v2/auth/preferences/  (defaults created on first read)
    PATCH /api/v2/auth/preferences/  (partial, unknown keys ignored)
    """

    permission_classes = [IsAuthenticated]
    serializer_class = UserPreferencesSerializer

    @extend_schema(tags=["Preferences"], responses={200: UserPreferencesSerializer})
    def get(self, request):
        prefs = UserPreferences.for_user(request.user)
        return Response(UserPreferencesSerializer(prefs).data)

    @extend_schema(
        tags=["Preferences"],
        request=UserPreferencesSerializer,
        responses={200: UserPreferencesSerializer},
    )
    def patch(self, request):
        prefs = UserPreferences.for_user(request.user)

        serializer = UserPreferencesSerializer(prefs, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        prefs.update_preferences(serializer.validated_data)

        return Response(UserPreferencesSerializer(prefs).data)


class PreferencesResetView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = UserPreferencesSerializer

    @extend_schema(tags=["Preferences"], request=None, responses={200: UserPreferencesSerializer})
    def post(self, request):
        prefs = UserPreferences.for_user(request.user)
        prefs.reset_to_defaults()
        return Response(UserPreferencesSerializer(prefs).data)
