# comics/models/__init__.py

"""
COMICS MODELS PACKAGE EXPORTS
"""

from .comic import Comic
from .engagement import ComicComment, ComicLike
from .page import ComicPage
from .view import ComicView

__all__ = [
    "Comic",
    "ComicPage",
    "ComicLike",
    "ComicComment",
    "ComicView",
]
