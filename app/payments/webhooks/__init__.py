"""
Webhook handling for payment events from the gateway.

Deliveries are signature-verified over the raw body, stored idempotently
by delivery key, and applied synchronously.

Usage:
    # In urls.py
    from payments.webhooks.views import cashfree_webhook

    urlpatterns = [
        path("webhook/", cashfree_webhook, name="cashfree_webhook"),
    ]
"""

from payments.webhooks.handlers import dispatch_webhook, register_handler
from payments.webhooks.views import cashfree_webhook

__all__ = [
    "cashfree_webhook",
    "dispatch_webhook",
    "register_handler",
]
