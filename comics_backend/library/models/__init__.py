# library/models/__init__.py

"""
LIBRARY MODELS PACKAGE EXPORTS
"""

from .bookmark import ComicBookmark
from .library import UserLibrary
from .progress import UserComicProgress

__all__ = [
    "UserLibrary",
    "UserComicProgress",
    "ComicBookmark",
]
