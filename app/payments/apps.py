"""
Payments app configuration.

This app provides the escrow payment lifecycle:
- PaymentRecord fee math and state transitions
- Cashfree gateway integration
- Webhook handling and background reconciliation
"""

from django.apps import AppConfig


class PaymentsConfig(AppConfig):
    """Configuration for the payments application."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "payments"
    verbose_name = "Payments"
