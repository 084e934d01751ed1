# users/urls.py

from django.urls import path

from .views import (
    CurrentUserView,
    LoginView,
    LogoutView,
    PreferencesResetView,
    PreferencesView,
    RefreshView,
    RegisterView,
)

app_name = "users"

urlpatterns = [
    # ---------------- PUBLIC AUTH ----------------
    path("register/", RegisterView.as_view(), name="register"),
    path("login/", LoginView.as_view(), name="login"),
    path("refresh/", RefreshView.as_view(), name="refresh"),
    # ---------------- AUTHENTICATED ----------------
    path("logout/", LogoutView.as_view(), name="logout"),
    path("user/", CurrentUserView.as_view(), name="user"),
    path("preferences/", PreferencesView.as_view(), name="preferences"),
    path("preferences/reset/", PreferencesResetView.as_view(), name="preferences-reset"),
]
