"""
Tests for payments app.

This package contains test modules for:
- test_fees.py: FeeCalculator tests
- test_state_transitions.py: Pure PaymentRecord transition tests
- test_adapters.py: CashfreeAdapter tests against httpx.MockTransport
- test_services.py: PaymentRecordService tests
- test_webhooks.py: Webhook endpoint and handler tests
- test_tasks.py: Reconciliation and cleanup task tests
- test_views.py: API endpoint tests

Usage:
    pytest payments/tests/
    pytest payments/tests/test_services.py
"""
