# analytics/services/formatting.py

"""
JSON-safe number helpers shared by the analytics services.

- money: 2dp string ("12.50"), None -> "0.00"
- rate:  percentage float rounded to 2dp, 0.0 when the whole is empty
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

TWOPLACES = Decimal("0.01")


def q2(amount) -> Decimal:
    return Decimal(str(amount or 0)).quantize(TWOPLACES, rounding=ROUND_HALF_UP)


def money(amount) -> str:
    return f"{q2(amount):.2f}"


def rate(part, whole) -> float:
    if not whole:
        return 0.0
    return round(float(part) / float(whole) * 100, 2)
