# comics/services/recommendations.py

"""
PATH: comics/services/recommendations.py

RECOMMENDATIONS

similar_comics: weighted similarity against every other visible comic.

    genre match            +40
    author match           +30
    publisher match        +20
    each shared tag        +5
    publication years within 5  +(5 - diff) * 2
    candidate rating >= 4.0     +10   (>= 3.5: +5)
    candidate readers > 100     +5

Candidates scoring below MIN_SIMILARITY_SCORE are dropped.

recommendations_for_user: genre affinity first (top library genres, comics not
yet in the library), then collaborative fill from readers who share comics
with the user.
"""

from __future__ import annotations

from decimal import Decimal

from django.db.models import Count

from comics.models import Comic

MIN_SIMILARITY_SCORE = 10


def similarity_score(base: Comic, other: Comic) -> int:
    score = 0

    if base.genre and other.genre == base.genre:
        score += 40
    if base.author and other.author == base.author:
        score += 30
    if base.publisher and other.publisher == base.publisher:
        score += 20

    shared = set(base.get_tags()) & set(other.get_tags())
    score += 5 * len(shared)

    if base.publication_year and other.publication_year:
        diff = abs(base.publication_year - other.publication_year)
        if diff <= 5:
            score += (5 - diff) * 2

    rating = Decimal(str(other.average_rating or 0))
    if rating >= Decimal("4.0"):
        score += 10
    elif rating >= Decimal("3.5"):
        score += 5

    if (other.total_readers or 0) > 100:
        score += 5

    return score


def similar_comics(comic: Comic, *, limit: int = 5) -> list[Comic]:
    scored = []
    for candidate in Comic.objects.visible().exclude(pk=comic.pk):
        score = similarity_score(comic, candidate)
        if score >= MIN_SIMILARITY_SCORE:
            candidate.similarity_score = score
            scored.append(candidate)

    scored.sort(key=lambda c: (c.similarity_score, c.average_rating), reverse=True)
    return scored[:limit]


def _owned_comic_ids(user) -> set:
    return set(user.library_entries.values_list("comic_id", flat=True))


def favorite_genres(user, *, limit: int = 5) -> list[str]:
    rows = (
        user.library_entries.exclude(comic__genre="")
        .values("comic__genre")
        .annotate(total=Count("id"))
        .order_by("-total", "comic__genre")[:limit]
    )
    return [r["comic__genre"] for r in rows]


def recommendations_for_user(user, *, limit: int = 10) -> list[Comic]:
    owned = _owned_comic_ids(user)
    picks: list[Comic] = []

    genres = favorite_genres(user)
    if genres:
        picks.extend(
            Comic.objects.visible()
            .filter(genre__in=genres)
            .exclude(pk__in=owned)
            .order_by("-average_rating", "-total_readers")[:limit]
        )

    if len(picks) < limit and owned:
        from library.models import UserLibrary

        peers = (
            UserLibrary.objects.filter(comic_id__in=owned)
            .exclude(user=user)
            .values_list("user_id", flat=True)
            .distinct()
        )
        seen = owned | {c.pk for c in picks}
        collaborative = (
            Comic.objects.visible()
            .filter(library_entries__user_id__in=peers)
            .exclude(pk__in=seen)
            .annotate(peer_count=Count("library_entries"))
            .order_by("-peer_count", "-average_rating")[: limit - len(picks)]
        )
        picks.extend(collaborative)

    if len(picks) < limit:
        seen = owned | {c.pk for c in picks}
        picks.extend(
            Comic.objects.visible()
            .exclude(pk__in=seen)
            .order_by("-average_rating", "-total_readers")[: limit - len(picks)]
        )

    return picks[:limit]
