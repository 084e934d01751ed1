# comics/tests/factories.py

"""Small builders shared by the app test suites."""

from __future__ import annotations

from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone

from comics.models import Comic, ComicPage

User = get_user_model()

PASSWORD = "pass-1234-word"


def make_user(email="reader@example.com", *, role=None, **extra):
    if role:
        extra["role"] = role
    return User.objects.create_user(email=email, password=PASSWORD, **extra)


def make_comic(title="Night Shift", *, pages=0, price=None, **extra):
    extra.setdefault("author", "R. Vale")
    extra.setdefault("genre", "Action")
    extra.setdefault("published_at", timezone.now())

    if price is not None:
        extra.setdefault("is_free", False)
        extra["price"] = Decimal(str(price))
    else:
        extra.setdefault("is_free", True)

    comic = Comic.objects.create(title=title, page_count=pages, **extra)
    for number in range(1, pages + 1):
        ComicPage.objects.create(
            comic=comic,
            page_number=number,
            image_url=f"https://cdn.example.com/{comic.slug}/{number}.jpg",
        )
    return comic
