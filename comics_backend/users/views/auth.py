# users/views/auth.py

"""
PATH: users/views/auth.py

AUTH ENDPOINTS (V2)

- POST /api/v2/auth/register/  -> user + JWT pair (201)
- POST /api/v2/auth/login/     -> user + JWT pair
- POST /api/v2/auth/logout/    -> blacklist refresh token
- POST /api/v2/auth/refresh/   -> new access token (rotating refresh)

Security:
- register/login are throttled under the "auth" scope.
"""

from __future__ import annotations

import logging

from django.contrib.auth import authenticate
from drf_spectacular.utils import OpenApiResponse, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAuthenticated
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView
from rest_framework_simplejwt.exceptions import TokenError
from rest_framework_simplejwt.tokens import RefreshToken
from rest_framework_simplejwt.views import TokenRefreshView

from users.serializers import (
    LoginSerializer,
    RefreshInputSerializer,
    RegisterSerializer,
    UserSerializer,
)

logger = logging.getLogger(__name__)


class AuthThrottle(AnonRateThrottle):
    scope = "auth"


def _token_payload(user) -> dict:
    refresh = RefreshToken.for_user(user)
    return {
        "user": UserSerializer(user).data,
        "access": str(refresh.access_token),
        "refresh": str(refresh),
    }


# ---------------- REGISTER ----------------
class RegisterView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [AuthThrottle]
    serializer_class = RegisterSerializer

    @extend_schema(
        tags=["Auth"],
        request=RegisterSerializer,
        responses={201: OpenApiResponse(description="User + JWT pair")},
        description="Register a new reader account",
    )
    def post(self, request):
        serializer = RegisterSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        user = serializer.save()

        logger.info("User registered", extra={"user_id": str(user.id)})

        return Response(_token_payload(user), status=status.HTTP_201_CREATED)


# ---------------- LOGIN ----------------
class LoginView(APIView):
    permission_classes = [AllowAny]
    throttle_classes = [AuthThrottle]
    serializer_class = LoginSerializer

    @extend_schema(
        tags=["Auth"],
        request=LoginSerializer,
        responses={
            200: OpenApiResponse(description="User + JWT pair"),
            401: OpenApiResponse(description="Invalid credentials"),
        },
        description="Authenticate with email and password",
    )
    def post(self, request):
        serializer = LoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = authenticate(
            request=request,
            username=serializer.validated_data["email"],
            password=serializer.validated_data["password"],
        )

        if not user:
            logger.warning("Failed login attempt")
            return Response(
                {"detail": "Invalid credentials"},
                status=status.HTTP_401_UNAUTHORIZED,
            )

        user.touch_last_seen()
        return Response(_token_payload(user))


# ---------------- LOGOUT ----------------
class LogoutView(APIView):
    permission_classes = [IsAuthenticated]
    serializer_class = RefreshInputSerializer

    @extend_schema(
        tags=["Auth"],
        request=RefreshInputSerializer,
        responses={
            200: OpenApiResponse(description="Logged out"),
            400: OpenApiResponse(description="Invalid or expired refresh token"),
        },
        description="Blacklist the supplied refresh token",
    )
    def post(self, request):
        serializer = RefreshInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            RefreshToken(serializer.validated_data["refresh"]).blacklist()
        except TokenError as exc:
            return Response({"detail": str(exc)}, status=status.HTTP_400_BAD_REQUEST)

        return Response({"message": "Logged out successfully"})


# ---------------- REFRESH ----------------
class RefreshView(TokenRefreshView):
    throttle_classes = [AuthThrottle]
