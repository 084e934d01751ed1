# payments/views/webhook.py

from __future__ import annotations

import json
import logging

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.throttling import AnonRateThrottle
from rest_framework.views import APIView

from payments.services.stripe_client import verify_stripe_signature
from payments.services.webhooks import handle_event

logger = logging.getLogger(__name__)


class WebhookThrottle(AnonRateThrottle):
    scope = "webhook"


class StripeWebhookView(APIView):
    """
    POST /api/v2/payments/webhook/

    - 400 when the Stripe-Signature header does not verify against the raw body
    - 500 when processing fails, so Stripe redelivers
    - 200 otherwise (including unknown event types)
    """

    permission_classes = [AllowAny]
    authentication_classes = []
    throttle_classes = [WebhookThrottle]

    @extend_schema(exclude=True)
    def post(self, request, *args, **kwargs):
        raw_body = request.body or b""
        signature = request.headers.get("Stripe-Signature")

        if not verify_stripe_signature(raw_body=raw_body, signature=signature):
            logger.warning("Invalid Stripe signature")
            return Response({"ok": False, "detail": "Invalid signature"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            event = json.loads(raw_body.decode("utf-8"))
        except (UnicodeDecodeError, ValueError):
            logger.warning("Stripe webhook body is not JSON")
            return Response({"ok": False, "detail": "Invalid payload"}, status=status.HTTP_400_BAD_REQUEST)

        try:
            outcome = handle_event(event)
        except Exception:
            logger.exception(
                "Unhandled webhook error",
                extra={"event_id": event.get("id"), "event_type": event.get("type")},
            )
            return Response(
                {"ok": False, "detail": "Webhook processing failed"},
                status=status.HTTP_500_INTERNAL_SERVER_ERROR,
            )

        return Response({"ok": True, "detail": outcome}, status=status.HTTP_200_OK)
