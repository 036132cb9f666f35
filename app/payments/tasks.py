"""
Celery tasks for payment processing.

This module provides async tasks for:
- Reconciling orders the gateway never confirmed (lost webhook, verify timeout)
- Periodic cleanup of old webhook events

Usage:
    from payments.tasks import reconcile_payment_record

    # Re-check a single record at the gateway
    reconcile_payment_record.delay(str(record.id))

    # Sweep all stale orders (typically via celery-beat)
    from payments.tasks import reconcile_stale_orders
    reconcile_stale_orders.delay()
"""

from __future__ import annotations

import logging
from datetime import timedelta

from celery import shared_task
from django.conf import settings
from django.utils import timezone

from payments.adapters import CashfreeAdapter
from payments.exceptions import GatewayTimeoutError, GatewayUnavailableError
from payments.models import PaymentRecord, WebhookEvent
from payments.services import PaymentRecordService
from payments.state_machines import StageStatus, WebhookEventStatus

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

MAX_RECONCILE_RETRIES = 5
RECONCILE_BATCH_SIZE = 100


# =============================================================================
# Reconciliation Tasks
# =============================================================================


@shared_task(
    bind=True,
    autoretry_for=(GatewayTimeoutError, GatewayUnavailableError),
    retry_backoff=True,
    retry_backoff_max=300,
    retry_kwargs={"max_retries": MAX_RECONCILE_RETRIES},
    acks_late=True,
)
def reconcile_payment_record(self, payment_record_id: str) -> dict:
    """
    Re-check one created order at the gateway and apply the outcome.

    Retries with backoff while the gateway times out or is unavailable.
    Safe to run alongside verify and webhooks: a paid record is never
    downgraded and repeated outcomes are no-ops.

    Args:
        payment_record_id: UUID of the PaymentRecord

    Returns:
        Dict with reconciliation outcome
    """
    logger.info(
        "Reconciling payment record",
        extra={"payment_id": payment_record_id, "attempt": self.request.retries + 1},
    )

    with CashfreeAdapter.from_settings() as gateway:
        result = PaymentRecordService.reconcile(payment_record_id, gateway=gateway)

    return {
        "status": "reconciled" if result.changed else "unchanged",
        "payment_id": payment_record_id,
        "outcome": str(result.outcome),
        "stage_status": result.record.stage_status,
    }


@shared_task
def reconcile_stale_orders() -> dict:
    """
    Periodic task to queue reconciliation for orders left in CREATED.

    An order is stale once it has sat unconfirmed for
    PAYMENT_RECONCILE_AFTER_MINUTES, which covers lost webhooks and
    verification calls that timed out.

    Returns:
        Dict with count of records queued
    """
    threshold = timezone.now() - timedelta(minutes=settings.PAYMENT_RECONCILE_AFTER_MINUTES)

    stale_ids = list(
        PaymentRecord.objects.filter(
            stage_status=StageStatus.CREATED,
            gateway_order_id__isnull=False,
            updated_at__lt=threshold,
        )
        .order_by("updated_at")
        .values_list("id", flat=True)[:RECONCILE_BATCH_SIZE]
    )

    for record_id in stale_ids:
        reconcile_payment_record.delay(str(record_id))

    if stale_ids:
        logger.info(
            f"Queued {len(stale_ids)} stale orders for reconciliation",
            extra={"queued_count": len(stale_ids)},
        )

    return {"queued_count": len(stale_ids)}


# =============================================================================
# Cleanup Tasks
# =============================================================================


@shared_task
def cleanup_old_webhooks(days: int = 90) -> dict:
    """
    Periodic task to clean up old processed webhook events.

    Failed deliveries are kept for debugging.

    Args:
        days: Delete processed webhooks older than this many days

    Returns:
        Dict with count of webhooks deleted
    """
    cutoff = timezone.now() - timedelta(days=days)

    deleted_count, _ = WebhookEvent.objects.filter(
        status=WebhookEventStatus.PROCESSED,
        processed_at__lt=cutoff,
    ).delete()

    if deleted_count > 0:
        logger.info(
            f"Deleted {deleted_count} old webhook events",
            extra={
                "deleted_count": deleted_count,
                "cutoff_date": cutoff.isoformat(),
            },
        )

    return {"deleted_count": deleted_count}
