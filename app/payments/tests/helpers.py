"""
Builders for gateway payloads used across payment tests.
"""

import json

import httpx

from payments.adapters import CashfreeAdapter, PaymentAttempt

WEBHOOK_SECRET = "test-webhook-secret"


def make_attempt(status: str, payment_id: str = "cf_pay_1", **kwargs) -> PaymentAttempt:
    return PaymentAttempt(gateway_payment_id=payment_id, status=status, **kwargs)


def webhook_body(event_type: str, order_id: str, payment_status: str = "SUCCESS", **payment) -> bytes:
    """Raw JSON body of a gateway payment webhook."""
    payload = {
        "type": f"{event_type}_WEBHOOK",
        "event_time": "2026-01-15T10:00:00+05:30",
        "data": {
            "order": {"order_id": order_id, "order_amount": 1200.0, "order_currency": "INR"},
            "payment": {
                "cf_payment_id": payment.pop("cf_payment_id", "cf_pay_webhook"),
                "payment_status": payment_status,
                "payment_amount": 1200.0,
                "payment_time": "2026-01-15T09:59:00+05:30",
                "payment_group": "upi",
                **payment,
            },
        },
    }
    return json.dumps(payload, separators=(",", ":")).encode("utf-8")


def signed_headers(raw_body: bytes, timestamp: str = "1736915400", secret: str = WEBHOOK_SECRET) -> dict:
    """Django test client headers carrying a valid signature for ``raw_body``."""
    adapter = CashfreeAdapter(
        base_url="https://sandbox.cashfree.test/pg",
        app_id="test-app-id",
        secret_key="test-secret-key",
        webhook_secret=secret,
        client=httpx.Client(),
    )
    try:
        signature = adapter.compute_signature(timestamp, raw_body)
    finally:
        adapter.close()
    return {
        "HTTP_X_WEBHOOK_SIGNATURE": signature,
        "HTTP_X_WEBHOOK_TIMESTAMP": timestamp,
    }
