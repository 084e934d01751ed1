# users/models/__init__.py

from .preferences import UserPreferences
from .user import User, UserManager

__all__ = [
    "User",
    "UserManager",
    "UserPreferences",
]
