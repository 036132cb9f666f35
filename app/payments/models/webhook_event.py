"""
WebhookEvent model for gateway webhook tracking.

Every signature-valid webhook delivery is stored before it is applied.
The delivery key is a digest of the signed timestamp and raw body, so a
redelivery of the same payload maps to the same row and is answered
without being applied twice.

Usage:
    from payments.models import WebhookEvent

    event, created = WebhookEvent.objects.get_or_create(
        delivery_key=delivery_key,
        defaults={"event_type": "PAYMENT_SUCCESS", "payload": payload, ...},
    )
    if not created and event.is_processed:
        return HttpResponse(status=200)
"""

from __future__ import annotations

from django.db import models
from django.utils import timezone

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel
from payments.state_machines import WebhookEventStatus


class WebhookEvent(UUIDPrimaryKeyMixin, BaseModel):
    """
    Tracks gateway webhook deliveries for idempotent processing.

    Processing Flow:
        1. Webhook arrives, verify signature over the raw body
        2. Insert/get WebhookEvent with delivery_key
        3. If exists and PROCESSED -> return 200 (duplicate)
        4. Set status to PROCESSING
        5. Route to the handler registered for event_type
        6. Set status to PROCESSED or FAILED
        7. If FAILED, respond non-200 so the gateway redelivers

    Fields:
        delivery_key: sha256 of timestamp + raw body
        event_type: Normalised event type (PAYMENT_SUCCESS, PAYMENT_FAILED, ...)
        gateway_order_id: Order the event refers to
        payload: Parsed JSON payload
        status: Processing status
        processed_at: When event was successfully processed
        error_message: Error details if processing failed
        attempt_count: Number of processing attempts
    """

    delivery_key = models.CharField(
        max_length=64,
        unique=True,
        help_text="sha256(timestamp + raw body) - unique constraint for idempotency",
    )
    event_type = models.CharField(max_length=100, db_index=True)
    gateway_order_id = models.CharField(max_length=64, blank=True, default="", db_index=True)
    payload = models.JSONField()

    status = models.CharField(
        max_length=20,
        choices=WebhookEventStatus.choices,
        default=WebhookEventStatus.PENDING,
        db_index=True,
    )
    processed_at = models.DateTimeField(null=True, blank=True)
    error_message = models.TextField(null=True, blank=True)
    attempt_count = models.PositiveSmallIntegerField(default=0)

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Webhook Event"
        verbose_name_plural = "Webhook Events"
        indexes = [
            models.Index(fields=["status", "created_at"]),
        ]

    def __str__(self) -> str:
        return f"WebhookEvent({self.event_type}, {self.gateway_order_id})"

    @property
    def is_processed(self) -> bool:
        return self.status == WebhookEventStatus.PROCESSED

    def mark_processing(self) -> None:
        """Mark event as being processed. Caller must save."""
        self.status = WebhookEventStatus.PROCESSING
        self.attempt_count += 1

    def mark_processed(self) -> None:
        """Mark event as successfully processed. Caller must save."""
        self.status = WebhookEventStatus.PROCESSED
        self.processed_at = timezone.now()
        self.error_message = None

    def mark_failed(self, error_message: str) -> None:
        """Mark event as failed. Caller must save."""
        self.status = WebhookEventStatus.FAILED
        self.error_message = error_message
