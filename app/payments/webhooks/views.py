"""
Webhook endpoint view for the payment gateway.

The view:
1. Verifies the signature over the raw request body
2. Creates/retrieves the WebhookEvent record (idempotent)
3. Applies the event synchronously through the handler registry
4. Answers with a status the gateway's redelivery logic understands

Usage:
    # In urls.py
    from payments.webhooks.views import cashfree_webhook

    urlpatterns = [
        path("webhook/", cashfree_webhook, name="cashfree_webhook"),
    ]
"""

from __future__ import annotations

import hashlib
import logging

from django.http import HttpRequest, HttpResponse
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_POST

from core.exceptions import ValidationError
from payments.adapters import CashfreeAdapter
from payments.exceptions import SignatureError
from payments.models import WebhookEvent
from payments.state_machines import WebhookEventStatus
from payments.webhooks.handlers import dispatch_webhook


logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-webhook-signature"
TIMESTAMP_HEADER = "x-webhook-timestamp"


def delivery_key_for(timestamp: str, raw_body: bytes) -> str:
    return hashlib.sha256(timestamp.encode("utf-8") + raw_body).hexdigest()


@csrf_exempt
@require_POST
def cashfree_webhook(request: HttpRequest) -> HttpResponse:
    """
    Receive and apply gateway webhook events.

    Security:
    - HMAC signature over timestamp + raw body, checked before parsing
    - CSRF exemption required for external webhooks
    - Only POST requests accepted

    Idempotency:
    - WebhookEvent.delivery_key is unique
    - A delivery that was already processed returns 200 without reapplying

    Returns:
        HttpResponse with status:
        - 200: Event applied, duplicate, or of a type we do not handle
        - 400: Missing/invalid signature or malformed payload
        - 404: No payment record holds the order
        - 500: Processing failed, the gateway should redeliver
    """
    raw_body = request.body
    signature = request.headers.get(SIGNATURE_HEADER)
    timestamp = request.headers.get(TIMESTAMP_HEADER)

    if not signature or not timestamp:
        logger.warning("Webhook received without signature headers")
        return HttpResponse("Missing signature", status=400)

    # Step 1: Verify signature and parse
    try:
        with CashfreeAdapter.from_settings() as gateway:
            payload = gateway.construct_event(raw_body, signature, timestamp)
    except SignatureError:
        return HttpResponse("Invalid signature", status=400)
    except ValidationError as e:
        logger.warning("Webhook payload rejected", extra={"error": e.message})
        return HttpResponse("Invalid payload", status=400)

    logger.info(
        f"Received gateway webhook: {payload.event_type}",
        extra={"gateway_order_id": payload.order_id, "event_type": payload.event_type},
    )

    # Step 2: Create/get WebhookEvent (idempotent)
    webhook_event, created = WebhookEvent.objects.get_or_create(
        delivery_key=delivery_key_for(timestamp, raw_body),
        defaults={
            "event_type": payload.event_type,
            "gateway_order_id": payload.order_id,
            "payload": payload.raw,
            "status": WebhookEventStatus.PENDING,
        },
    )

    if not created and webhook_event.is_processed:
        logger.info(
            "Webhook already processed, returning success",
            extra={"gateway_order_id": payload.order_id},
        )
        return HttpResponse("Already processed", status=200)

    # Step 3: Apply
    webhook_event.mark_processing()
    webhook_event.save(update_fields=["status", "attempt_count", "updated_at"])

    result = dispatch_webhook(webhook_event, payload)

    if result:
        webhook_event.mark_processed()
        webhook_event.save(update_fields=["status", "processed_at", "error_message", "updated_at"])
        return HttpResponse("OK", status=200)

    webhook_event.mark_failed(result.error or "Processing failed")
    webhook_event.save(update_fields=["status", "error_message", "updated_at"])

    if result.error_code == "PAYMENT_RECORD_NOT_FOUND":
        return HttpResponse("Payment record not found", status=404)

    logger.error(
        "Webhook processing failed",
        extra={
            "gateway_order_id": payload.order_id,
            "error_code": result.error_code,
            "error": result.error,
        },
    )
    return HttpResponse("Processing failed", status=500)
