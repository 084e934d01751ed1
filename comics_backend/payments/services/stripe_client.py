# payments/services/stripe_client.py

"""
Minimal Stripe REST client (urllib, form-encoded requests).

Covers what checkout needs:
- PaymentIntents: create / retrieve
- Refunds: create
- Webhook signature verification (Stripe-Signature: t=...,v1=...)
"""

from __future__ import annotations

import hashlib
import hmac
import json
import time
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any
from urllib.error import HTTPError, URLError
from urllib.parse import quote, urlencode
from urllib.request import Request, urlopen

from django.conf import settings

from payments.services.exceptions import PaymentProviderError

STRIPE_BASE = "https://api.stripe.com/v1"
SIGNATURE_TOLERANCE_SECONDS = 300


def _stripe_cfg() -> dict:
    payments = getattr(settings, "PAYMENTS", {}) or {}
    cfg = payments.get("STRIPE") if isinstance(payments, dict) else None
    return cfg if isinstance(cfg, dict) else {}


def _get_secret_key() -> str:
    sk = (_stripe_cfg().get("SECRET_KEY") or "").strip()
    if not sk:
        raise PaymentProviderError(
            "STRIPE SECRET_KEY is not configured. Expected settings.PAYMENTS['STRIPE']['SECRET_KEY']."
        )
    return sk


def _get_webhook_secret() -> str:
    return (_stripe_cfg().get("WEBHOOK_SECRET") or "").strip()


def default_currency() -> str:
    return (_stripe_cfg().get("CURRENCY") or "usd").strip().lower()


def to_cents(amount) -> int:
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError, TypeError) as exc:
        raise ValueError("amount must be a valid Decimal") from exc
    return int((value * Decimal("100")).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def _flatten(params: dict, prefix: str = "") -> list[tuple[str, str]]:
    """Stripe's nested form keys: metadata[user_id]=..., items[0][price]=..."""
    pairs: list[tuple[str, str]] = []
    for key, value in params.items():
        full_key = f"{prefix}[{key}]" if prefix else str(key)
        if value is None:
            continue
        if isinstance(value, dict):
            pairs.extend(_flatten(value, full_key))
        elif isinstance(value, (list, tuple)):
            for i, item in enumerate(value):
                if isinstance(item, dict):
                    pairs.extend(_flatten(item, f"{full_key}[{i}]"))
                else:
                    pairs.append((f"{full_key}[{i}]", str(item)))
        elif isinstance(value, bool):
            pairs.append((full_key, "true" if value else "false"))
        else:
            pairs.append((full_key, str(value)))
    return pairs


def _safe_preview(text: str, limit: int = 800) -> str:
    text = (text or "").strip()
    if len(text) <= limit:
        return text
    return text[:limit] + " ...(truncated)"


def _request_json(
    method: str,
    path: str,
    *,
    params: dict | None = None,
    idempotency_key: str = "",
    timeout: int = 25,
) -> dict[str, Any]:
    sk = _get_secret_key()
    data = None
    if params is not None:
        data = urlencode(_flatten(params)).encode("utf-8")

    headers = {
        "Authorization": f"Bearer {sk}",
        "Content-Type": "application/x-www-form-urlencoded",
        "Accept": "application/json",
    }
    if idempotency_key:
        headers["Idempotency-Key"] = idempotency_key

    req = Request(f"{STRIPE_BASE}{path}", data=data, headers=headers, method=method)

    try:
        with urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8", errors="replace")
    except HTTPError as e:
        raw = e.read().decode("utf-8", errors="replace") if e.fp else ""
        try:
            err = (json.loads(raw) or {}).get("error") or {}
        except ValueError:
            err = {}
        msg = err.get("message") or _safe_preview(raw) or "Stripe rejected request"
        raise PaymentProviderError(f"Stripe HTTPError: {e.code} {msg}") from e
    except URLError as e:
        raise PaymentProviderError(f"Stripe URLError: {e}") from e

    try:
        parsed = json.loads(raw)
    except ValueError as e:
        raise PaymentProviderError(f"Stripe returned non-JSON: {_safe_preview(raw)}") from e

    if not isinstance(parsed, dict):
        raise PaymentProviderError("Stripe returned an unexpected payload")
    return parsed


# ============================================================
# PAYMENT INTENTS
# ============================================================


def create_payment_intent(
    *,
    amount,
    currency: str = "",
    metadata: dict | None = None,
    description: str = "",
    idempotency_key: str = "",
) -> dict:
    params = {
        "amount": to_cents(amount),
        "currency": (currency or default_currency()).lower(),
        "automatic_payment_methods": {"enabled": True},
        "metadata": metadata or {},
    }
    if description:
        params["description"] = description

    return _request_json(
        "POST",
        "/payment_intents",
        params=params,
        idempotency_key=idempotency_key,
    )


def retrieve_payment_intent(intent_id: str) -> dict:
    intent_id = str(intent_id or "").strip()
    if not intent_id:
        raise PaymentProviderError("payment_intent_id is required")
    return _request_json("GET", f"/payment_intents/{quote(intent_id, safe='')}")


def create_refund(*, payment_intent_id: str, amount=None, reason: str = "", metadata: dict | None = None) -> dict:
    params: dict = {"payment_intent": payment_intent_id}
    if amount is not None:
        params["amount"] = to_cents(amount)
    if reason in {"duplicate", "fraudulent", "requested_by_customer"}:
        params["reason"] = reason
    if metadata:
        params["metadata"] = metadata
    return _request_json("POST", "/refunds", params=params)


# ============================================================
# WEBHOOK SIGNATURE
# ============================================================


def _parse_signature_header(header: str) -> tuple[int | None, list[str]]:
    timestamp = None
    signatures = []
    for part in (header or "").split(","):
        key, _, value = part.strip().partition("=")
        if key == "t":
            try:
                timestamp = int(value)
            except ValueError:
                timestamp = None
        elif key == "v1" and value:
            signatures.append(value)
    return timestamp, signatures


def compute_signature(*, payload: bytes, timestamp: int, secret: str) -> str:
    signed = f"{timestamp}.".encode("utf-8") + (payload or b"")
    return hmac.new(secret.encode("utf-8"), signed, hashlib.sha256).hexdigest()


def verify_stripe_signature(
    *,
    raw_body: bytes,
    signature: str | None,
    secret: str | None = None,
    tolerance: int = SIGNATURE_TOLERANCE_SECONDS,
    now: float | None = None,
) -> bool:
    secret = secret if secret is not None else _get_webhook_secret()
    if not signature or not secret:
        return False

    timestamp, candidates = _parse_signature_header(signature)
    if timestamp is None or not candidates:
        return False

    current = time.time() if now is None else now
    if abs(current - timestamp) > tolerance:
        return False

    expected = compute_signature(payload=raw_body, timestamp=timestamp, secret=secret)
    return any(hmac.compare_digest(expected, candidate) for candidate in candidates)
