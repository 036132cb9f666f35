"""
Pytest fixtures for payment tests.

Fixtures provide payment records in the states the lifecycle tests start
from, and gateway doubles for the service layer.

Usage:
    def test_release(paid_record, admin_user):
        record = PaymentRecordService.release(paid_record.id, admin_user)
        assert record.release_status == ReleaseStatus.RELEASED
"""

from decimal import Decimal
from unittest.mock import MagicMock

import httpx
import pytest

from payments.adapters import CashfreeAdapter, OrderResult, PaymentStatusResult
from payments.tests.factories import AdminFeeRecordFactory, PaymentRecordFactory
from payments.tests.helpers import make_attempt
from projects.tests.factories import InProgressProjectFactory


# =============================================================================
# Project & Record Fixtures
# =============================================================================


@pytest.fixture
def project(db, client_user, freelancer_user):
    """In-progress project owned by client_user and assigned to freelancer_user."""
    return InProgressProjectFactory(
        created_by=client_user,
        assigned_to=freelancer_user,
        final_budget=Decimal("1200"),
    )


@pytest.fixture
def pending_record(db, project):
    return PaymentRecordFactory(project=project)


@pytest.fixture
def created_record(db, project):
    """Record with a gateway order waiting for payment."""
    return PaymentRecordFactory(project=project, created=True)


@pytest.fixture
def paid_record(db, project):
    """Record collected and held in escrow (overall final_paid)."""
    return PaymentRecordFactory(project=project, paid=True)


@pytest.fixture
def admin_fee_record(db, project):
    return AdminFeeRecordFactory(project=project, client=project.created_by)


# =============================================================================
# Gateway Doubles
# =============================================================================


@pytest.fixture
def gateway():
    """
    MagicMock standing in for a CashfreeAdapter.

    Configure per test:
        gateway.fetch_payment_status.return_value = PaymentStatusResult(
            order_id=..., attempts=[make_attempt("SUCCESS")]
        )
    """
    mock = MagicMock(spec=CashfreeAdapter)
    mock.create_order.side_effect = lambda params: OrderResult(
        order_id=params.order_id,
        session_token=f"session_{params.order_id}",
        status="ACTIVE",
    )
    mock.fetch_payment_status.return_value = PaymentStatusResult(order_id="", attempts=[])
    return mock


@pytest.fixture
def gateway_status(gateway):
    """Set the attempts the gateway reports for any order."""

    def _set(*statuses: str):
        gateway.fetch_payment_status.side_effect = lambda order_id: PaymentStatusResult(
            order_id=order_id,
            attempts=[make_attempt(status, payment_id=f"cf_pay_{i}") for i, status in enumerate(statuses)],
        )

    return _set


@pytest.fixture
def http_adapter():
    """
    Build a real CashfreeAdapter over an httpx.MockTransport.

    Usage:
        adapter = http_adapter(lambda request: httpx.Response(200, json=[...]))
    """
    adapters = []

    def _make(handler, **overrides):
        options = {
            "base_url": "https://sandbox.cashfree.test/pg",
            "app_id": "test-app-id",
            "secret_key": "test-secret-key",
            "webhook_secret": "test-webhook-secret",
            "max_retries": 1,
            "retry_backoff_seconds": 0,
            "client": httpx.Client(transport=httpx.MockTransport(handler)),
        }
        options.update(overrides)
        adapter = CashfreeAdapter(**options)
        adapters.append(adapter)
        return adapter

    yield _make

    for adapter in adapters:
        adapter.close()
