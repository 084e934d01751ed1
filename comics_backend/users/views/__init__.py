from .auth import LoginView, LogoutView, RefreshView, RegisterView
from .me import CurrentUserView
from .preferences import PreferencesResetView, PreferencesView

__all__ = [
    "RegisterView",
    "LoginView",
    "LogoutView",
    "RefreshView",
    "CurrentUserView",
    "PreferencesView",
    "PreferencesResetView",
]
