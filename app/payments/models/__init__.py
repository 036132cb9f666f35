"""
Payment domain models.

- PaymentRecord: Escrow payment for a project (main record or admin-management fee)
- WebhookEvent: Gateway webhook deliveries for idempotent processing
"""

from payments.models.payment_record import PaymentRecord
from payments.models.webhook_event import WebhookEvent

__all__ = [
    "PaymentRecord",
    "WebhookEvent",
]
