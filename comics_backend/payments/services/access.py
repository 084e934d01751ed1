# payments/services/access.py

"""
ACCESS GRANTS

grant_access runs inside the caller's transaction once a payment succeeds:
- single        -> purchased library entry (price = payment amount)
- bundle        -> one purchased entry per comic (allocated discounted price)
- subscription  -> user subscription active; +1 month / +1 year, stacked on
                   top of an unexpired subscription

revoke_access undoes a fully refunded payment: purchased entries are
removed (comic ratings recalculated when a removed entry was rated),
subscriptions are canceled immediately.
"""

from __future__ import annotations

import calendar
import logging
from datetime import datetime
from decimal import Decimal

from django.contrib.auth import get_user_model
from django.utils import timezone

from comics.models import Comic
from library.models import UserLibrary
from payments.models import Payment

logger = logging.getLogger(__name__)

User = get_user_model()


def add_months(value: datetime, months: int) -> datetime:
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


def subscription_expiry(*, current_expiry: datetime | None, subscription_type: str, now: datetime) -> datetime:
    base = current_expiry if current_expiry and current_expiry > now else now
    months = 12 if subscription_type == Payment.SUBSCRIPTION_YEARLY else 1
    return add_months(base, months)


def _grant_comic(*, user, comic_id, price: Decimal, purchased_at) -> None:
    UserLibrary.objects.update_or_create(
        user=user,
        comic_id=comic_id,
        defaults={
            "access_type": UserLibrary.ACCESS_PURCHASED,
            "purchase_price": price,
            "purchased_at": purchased_at,
        },
    )


def grant_access(payment: Payment) -> None:
    purchased_at = payment.paid_at or timezone.now()

    if payment.payment_type == Payment.TYPE_SINGLE:
        if payment.comic_id:
            _grant_comic(
                user=payment.user,
                comic_id=payment.comic_id,
                price=payment.amount,
                purchased_at=purchased_at,
            )

    elif payment.payment_type == Payment.TYPE_BUNDLE:
        for row in payment.comic_ids or []:
            _grant_comic(
                user=payment.user,
                comic_id=row["comic_id"],
                price=Decimal(str(row.get("price") or "0.00")),
                purchased_at=purchased_at,
            )

    elif payment.payment_type == Payment.TYPE_SUBSCRIPTION:
        user = User.objects.select_for_update().get(pk=payment.user_id)
        current = user.subscription_expires_at if user.has_active_subscription() else None
        user.subscription_type = payment.subscription_type
        user.subscription_status = User.SUBSCRIPTION_ACTIVE
        user.subscription_expires_at = subscription_expiry(
            current_expiry=current,
            subscription_type=payment.subscription_type,
            now=timezone.now(),
        )
        user.save(update_fields=["subscription_type", "subscription_status", "subscription_expires_at", "updated_at"])

    logger.info(
        "Access granted",
        extra={"payment_id": str(payment.id), "payment_type": payment.payment_type},
    )


def revoke_access(payment: Payment) -> None:
    if payment.payment_type == Payment.TYPE_SUBSCRIPTION:
        User.objects.filter(pk=payment.user_id).update(
            subscription_status=User.SUBSCRIPTION_CANCELED,
            subscription_expires_at=timezone.now(),
            updated_at=timezone.now(),
        )
    else:
        comic_ids = [payment.comic_id] if payment.comic_id else payment.bundle_comic_ids()
        entries = UserLibrary.objects.filter(
            user_id=payment.user_id,
            comic_id__in=comic_ids,
            access_type=UserLibrary.ACCESS_PURCHASED,
        )
        rated_comic_ids = list(entries.filter(rating__isnull=False).values_list("comic_id", flat=True))
        entries.delete()

        # removed entries may have carried ratings
        for comic in Comic.objects.filter(pk__in=rated_comic_ids):
            comic.update_rating_from_library()

    logger.info(
        "Access revoked",
        extra={"payment_id": str(payment.id), "payment_type": payment.payment_type},
    )
