"""
Webhook event handlers for gateway payment events.

This module provides a handler registry and the handlers for the
payment events the gateway delivers.

Usage:
    from payments.webhooks.handlers import dispatch_webhook, register_handler

    # Register a handler for another event type
    @register_handler("REFUND_STATUS")
    def handle_refund_status(webhook_event, payload) -> ServiceResult:
        ...

    # Dispatch an event to its handler
    result = dispatch_webhook(webhook_event, payload)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable

from core.exceptions import BaseApplicationError
from core.services import ServiceResult
from payments.services import PaymentRecordService

if TYPE_CHECKING:
    from payments.adapters import WebhookPayload
    from payments.models import WebhookEvent


logger = logging.getLogger(__name__)


# =============================================================================
# Handler Registry
# =============================================================================


# Maps normalised event types to handler functions
WEBHOOK_HANDLERS: dict[str, Callable[[WebhookEvent, WebhookPayload], ServiceResult]] = {}


def register_handler(*event_types: str) -> Callable:
    """
    Decorator to register a webhook event handler.

    Args:
        event_types: Normalised event types, without the _WEBHOOK suffix
    """

    def decorator(func: Callable[[WebhookEvent, WebhookPayload], ServiceResult]) -> Callable:
        for event_type in event_types:
            WEBHOOK_HANDLERS[event_type] = func
            logger.debug(f"Registered webhook handler for {event_type}")
        return func

    return decorator


def dispatch_webhook(webhook_event: WebhookEvent, payload: WebhookPayload) -> ServiceResult:
    """
    Dispatch a webhook event to the appropriate handler.

    Unknown event types are acknowledged with success so the gateway
    does not keep redelivering them.
    """
    handler = WEBHOOK_HANDLERS.get(webhook_event.event_type)

    if not handler:
        logger.info(
            f"No handler registered for event type: {webhook_event.event_type}",
            extra={"gateway_order_id": webhook_event.gateway_order_id},
        )
        return ServiceResult.success(None)

    logger.info(
        f"Dispatching {webhook_event.event_type} to handler",
        extra={"gateway_order_id": webhook_event.gateway_order_id},
    )

    return handler(webhook_event, payload)


# =============================================================================
# Payment Handlers
# =============================================================================


@register_handler("PAYMENT_SUCCESS", "PAYMENT_FAILED", "PAYMENT_USER_DROPPED")
def handle_payment_event(webhook_event: WebhookEvent, payload: WebhookPayload) -> ServiceResult:
    """
    Apply a payment success or failure to the record holding the order.

    Success and failure go through the same transitions as client-side
    verification, so whichever arrives first wins and a late failure
    never undoes a recorded payment.
    """
    try:
        result = PaymentRecordService.apply_webhook_event(payload)
    except BaseApplicationError as e:
        logger.warning(
            f"{webhook_event.event_type}: {e.message}",
            extra={"gateway_order_id": webhook_event.gateway_order_id, "error_code": e.error_code},
        )
        return ServiceResult.from_exception(e)

    logger.info(
        f"{webhook_event.event_type} handled",
        extra={
            "gateway_order_id": webhook_event.gateway_order_id,
            "payment_id": str(result.record.id),
            "outcome": result.outcome,
            "changed": result.changed,
        },
    )
    return ServiceResult.success(result)
