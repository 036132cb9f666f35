"""
State enums for payment models.

These are Django TextChoices for database storage and admin integration.
Transition rules live in payments.state_machines.transitions.

State Machines Overview:

Collection stage (PaymentRecord.stage_status):
    pending → created → paid
    pending/created → failed
    failed → created (client starts a new order)

Overall status (PaymentRecord.overall_status):
    pending → final_paid → released
    pending/failed/final_paid → refunded
    pending → failed

Release status (PaymentRecord.release_status):
    not_released → released | refunded (terminal, never reversed)
"""

from django.db import models


class StageStatus(models.TextChoices):
    """
    Status of the collection stage (money moving from client to platform).

    Terminal state for gateway callbacks: PAID.
    FAILED is terminal for verification; a new order reopens it as CREATED.
    """

    PENDING = "pending", "Pending"
    CREATED = "created", "Order Created"
    PAID = "paid", "Paid"
    FAILED = "failed", "Failed"


class OverallStatus(models.TextChoices):
    """
    Escrow status of the whole payment.

    ADVANCE_PAID is kept for records migrated from split-stage payments;
    new records move straight from PENDING to FINAL_PAID.
    """

    PENDING = "pending", "Pending"
    ADVANCE_PAID = "advance_paid", "Advance Paid"
    FINAL_PAID = "final_paid", "Final Paid"
    RELEASED = "released", "Released"
    REFUNDED = "refunded", "Refunded"
    FAILED = "failed", "Failed"


class ReleaseStatus(models.TextChoices):
    """
    Whether held funds went to the freelancer or back to the client.

    Monotonic: NOT_RELEASED → RELEASED or NOT_RELEASED → REFUNDED.
    """

    NOT_RELEASED = "not_released", "Not Released"
    RELEASED = "released", "Released"
    REFUNDED = "refunded", "Refunded"


class PaymentMethod(models.TextChoices):
    """How the client paid."""

    GATEWAY = "gateway", "Payment Gateway"
    UPI = "upi", "UPI (manual)"


class WebhookEventStatus(models.TextChoices):
    """
    Processing status for WebhookEvent.

    State Flow:
        PENDING → PROCESSING → PROCESSED
        PENDING → PROCESSING → FAILED (gateway redelivers)
    """

    PENDING = "pending", "Pending"
    PROCESSING = "processing", "Processing"
    PROCESSED = "processed", "Processed"
    FAILED = "failed", "Failed"


class GatewayOutcome(models.TextChoices):
    """Normalised result of a gateway payment attempt."""

    SUCCESS = "success", "Success"
    FAILED = "failed", "Failed"
    PENDING = "pending", "Pending"


__all__ = [
    "StageStatus",
    "OverallStatus",
    "ReleaseStatus",
    "PaymentMethod",
    "WebhookEventStatus",
    "GatewayOutcome",
]
