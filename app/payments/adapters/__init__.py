"""
Payment adapters for external services.

All payment gateway calls go through CashfreeAdapter so error handling,
timeouts, idempotency and logging stay consistent.

Usage:
    from payments.adapters import CashfreeAdapter

    with CashfreeAdapter.from_settings() as gateway:
        status = gateway.fetch_payment_status(record.gateway_order_id)
"""

from payments.adapters.cashfree_adapter import (
    CashfreeAdapter,
    CreateOrderParams,
    CustomerDetails,
    OrderResult,
    PaymentAttempt,
    PaymentStatusResult,
    WebhookPayload,
)

__all__ = [
    "CashfreeAdapter",
    "CreateOrderParams",
    "CustomerDetails",
    "OrderResult",
    "PaymentAttempt",
    "PaymentStatusResult",
    "WebhookPayload",
]
