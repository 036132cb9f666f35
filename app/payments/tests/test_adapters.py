"""
Tests for CashfreeAdapter.

HTTP is served by httpx.MockTransport so request shapes, error mapping
and signature handling are exercised without a network.
"""

import json
from decimal import Decimal

import httpx
import pytest

from core.exceptions import ValidationError
from payments.adapters import (
    CashfreeAdapter,
    CreateOrderParams,
    CustomerDetails,
    PaymentAttempt,
    PaymentStatusResult,
)
from payments.exceptions import (
    GatewayError,
    GatewayRateLimitError,
    GatewayRequestError,
    GatewayTimeoutError,
    GatewayUnavailableError,
    SignatureError,
)
from payments.state_machines import GatewayOutcome
from payments.tests.helpers import WEBHOOK_SECRET, make_attempt, webhook_body


def order_params(**overrides) -> CreateOrderParams:
    options = {
        "order_id": "order-abc",
        "amount": Decimal("1260"),
        "currency": "INR",
        "customer": CustomerDetails(
            customer_id="user_1",
            name="Client One",
            email="client@example.com",
            phone="9876500001",
        ),
        "return_url": "https://app.example.com/payments/return?order_id={order_id}",
        "notify_url": "https://api.example.com/api/v1/payments/webhook/",
    }
    options.update(overrides)
    return CreateOrderParams(**options)


# =============================================================================
# Data Types
# =============================================================================


class TestCreateOrderParams:
    def test_idempotency_key_defaults_to_order_id(self):
        assert order_params().idempotency_key == "create_order:order-abc"

    def test_rejects_non_positive_amount(self):
        with pytest.raises(ValueError):
            order_params(amount=Decimal("0"))

    def test_rejects_missing_order_id(self):
        with pytest.raises(ValueError):
            order_params(order_id="")


class TestPaymentAttempt:
    @pytest.mark.parametrize(
        "status,outcome",
        [
            ("SUCCESS", GatewayOutcome.SUCCESS),
            ("FAILED", GatewayOutcome.FAILED),
            ("USER_DROPPED", GatewayOutcome.FAILED),
            ("CANCELLED", GatewayOutcome.FAILED),
            ("PENDING", GatewayOutcome.PENDING),
            ("NOT_ATTEMPTED", GatewayOutcome.PENDING),
        ],
    )
    def test_outcome(self, status, outcome):
        assert make_attempt(status).outcome == outcome

    def test_from_payload(self):
        attempt = PaymentAttempt.from_payload(
            {
                "cf_payment_id": 12345,
                "payment_status": "failed",
                "payment_amount": 1260.0,
                "payment_time": "2026-01-15T09:59:00+05:30",
                "payment_group": "upi",
                "error_details": {"error_code": "TRANSACTION_DECLINED", "error_description": "Declined by bank"},
            }
        )

        assert attempt.gateway_payment_id == "12345"
        assert attempt.status == "FAILED"
        assert attempt.amount == Decimal("1260.0")
        assert attempt.payment_time is not None
        assert attempt.error_code == "TRANSACTION_DECLINED"
        assert attempt.error_description == "Declined by bank"


class TestDecisiveAttempt:
    def test_any_success_wins(self):
        status = PaymentStatusResult(
            order_id="order-1",
            attempts=[make_attempt("FAILED", "a"), make_attempt("SUCCESS", "b"), make_attempt("FAILED", "c")],
        )

        assert status.decisive_attempt().gateway_payment_id == "b"
        assert status.outcome == GatewayOutcome.SUCCESS

    def test_no_attempts_is_pending(self):
        status = PaymentStatusResult(order_id="order-1")

        assert status.decisive_attempt() is None
        assert status.outcome == GatewayOutcome.PENDING

    def test_only_pending_attempts_decide_nothing(self):
        status = PaymentStatusResult(order_id="order-1", attempts=[make_attempt("PENDING")])
        assert status.decisive_attempt() is None

    def test_latest_failure_decides(self):
        earlier = PaymentAttempt.from_payload(
            {"cf_payment_id": "a", "payment_status": "PENDING", "payment_time": "2026-01-15T09:00:00Z"}
        )
        later = PaymentAttempt.from_payload(
            {"cf_payment_id": "b", "payment_status": "FAILED", "payment_time": "2026-01-15T09:05:00Z"}
        )

        status = PaymentStatusResult(order_id="order-1", attempts=[earlier, later])

        assert status.decisive_attempt().gateway_payment_id == "b"


# =============================================================================
# Core Operations
# =============================================================================


class TestCreateOrder:
    def test_sends_order_and_returns_session(self, http_adapter):
        captured = {}

        def handler(request: httpx.Request) -> httpx.Response:
            captured["request"] = request
            return httpx.Response(
                200,
                json={"order_id": "order-abc", "payment_session_id": "session_xyz", "order_status": "ACTIVE"},
            )

        order = http_adapter(handler).create_order(order_params())

        request = captured["request"]
        body = json.loads(request.content)
        assert request.method == "POST"
        assert request.url.path == "/pg/orders"
        assert request.headers["x-client-id"] == "test-app-id"
        assert request.headers["x-client-secret"] == "test-secret-key"
        assert request.headers["x-api-version"] == "2023-08-01"
        assert request.headers["x-idempotency-key"] == "create_order:order-abc"
        assert body["order_amount"] == 1260.0
        assert body["customer_details"]["customer_phone"] == "9876500001"
        assert body["order_meta"]["notify_url"].endswith("/payments/webhook/")
        assert order.order_id == "order-abc"
        assert order.session_token == "session_xyz"
        assert order.status == "ACTIVE"

    def test_missing_session_is_bad_response(self, http_adapter):
        adapter = http_adapter(lambda request: httpx.Response(200, json={"order_id": "order-abc"}))

        with pytest.raises(GatewayError) as exc_info:
            adapter.create_order(order_params())

        assert exc_info.value.error_code == "GATEWAY_BAD_RESPONSE"

    def test_upstream_4xx_passes_through_with_message(self, http_adapter):
        adapter = http_adapter(
            lambda request: httpx.Response(
                400,
                json={"message": "customer_phone is invalid", "code": "customer_details.customer_phone_invalid"},
            )
        )

        with pytest.raises(GatewayRequestError) as exc_info:
            adapter.create_order(order_params())

        error = exc_info.value
        assert error.message == "customer_phone is invalid"
        assert error.status_code == 400
        assert error.details["upstream_code"] == "customer_details.customer_phone_invalid"

    def test_credential_failure_becomes_502(self, http_adapter):
        adapter = http_adapter(lambda request: httpx.Response(401, json={"message": "authentication failed"}))

        with pytest.raises(GatewayRequestError) as exc_info:
            adapter.create_order(order_params())

        assert exc_info.value.status_code == 502
        assert "test-secret-key" not in exc_info.value.message

    def test_rate_limit(self, http_adapter):
        adapter = http_adapter(lambda request: httpx.Response(429, json={"message": "slow down"}))

        with pytest.raises(GatewayRateLimitError) as exc_info:
            adapter.create_order(order_params())

        assert exc_info.value.status_code == 429
        assert exc_info.value.is_retryable

    def test_server_error(self, http_adapter):
        adapter = http_adapter(lambda request: httpx.Response(503, text="unavailable"))

        with pytest.raises(GatewayUnavailableError):
            adapter.create_order(order_params())

    def test_timeout(self, http_adapter):
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        with pytest.raises(GatewayTimeoutError) as exc_info:
            http_adapter(handler).create_order(order_params())

        assert exc_info.value.status_code == 504

    def test_connect_errors_are_retried(self, http_adapter):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 3:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={"order_id": "order-abc", "payment_session_id": "s"})

        order = http_adapter(handler, max_retries=3).create_order(order_params())

        assert len(calls) == 3
        assert order.session_token == "s"

    def test_gives_up_after_max_retries(self, http_adapter):
        calls = []

        def handler(request):
            calls.append(request)
            raise httpx.ConnectError("refused", request=request)

        with pytest.raises(GatewayUnavailableError):
            http_adapter(handler, max_retries=2).create_order(order_params())

        assert len(calls) == 2

    def test_http_errors_are_not_retried(self, http_adapter):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500)

        with pytest.raises(GatewayUnavailableError):
            http_adapter(handler, max_retries=3).create_order(order_params())

        assert len(calls) == 1


class TestFetchPaymentStatus:
    def test_parses_attempts(self, http_adapter):
        captured = {}

        def handler(request):
            captured["path"] = request.url.path
            return httpx.Response(
                200,
                json=[
                    {"cf_payment_id": 1, "payment_status": "FAILED"},
                    {"cf_payment_id": 2, "payment_status": "SUCCESS", "payment_group": "upi"},
                ],
            )

        status = http_adapter(handler).fetch_payment_status("order-abc")

        assert captured["path"] == "/pg/orders/order-abc/payments"
        assert [a.gateway_payment_id for a in status.attempts] == ["1", "2"]
        assert status.outcome == GatewayOutcome.SUCCESS

    def test_non_list_response_is_bad_response(self, http_adapter):
        adapter = http_adapter(lambda request: httpx.Response(200, json={"unexpected": True}))

        with pytest.raises(GatewayError) as exc_info:
            adapter.fetch_payment_status("order-abc")

        assert exc_info.value.error_code == "GATEWAY_BAD_RESPONSE"

    def test_unparseable_body_is_bad_response(self, http_adapter):
        adapter = http_adapter(lambda request: httpx.Response(200, text="<html>"))

        with pytest.raises(GatewayError) as exc_info:
            adapter.fetch_payment_status("order-abc")

        assert exc_info.value.error_code == "GATEWAY_BAD_RESPONSE"


# =============================================================================
# Webhooks
# =============================================================================


class TestWebhookSignature:
    @pytest.fixture
    def adapter(self, http_adapter):
        return http_adapter(lambda request: httpx.Response(200))

    def test_valid_signature(self, adapter):
        body = webhook_body("PAYMENT_SUCCESS", "order-1")
        signature = adapter.compute_signature("1736915400", body)

        assert adapter.verify_signature("1736915400", body, signature)

    def test_tampered_body_rejected(self, adapter):
        body = webhook_body("PAYMENT_SUCCESS", "order-1")
        signature = adapter.compute_signature("1736915400", body)

        assert not adapter.verify_signature("1736915400", body.replace(b"order-1", b"order-2"), signature)

    def test_reserialized_json_rejected(self, adapter):
        body = webhook_body("PAYMENT_SUCCESS", "order-1")
        signature = adapter.compute_signature("1736915400", body)
        reserialized = json.dumps(json.loads(body), indent=2).encode()

        assert not adapter.verify_signature("1736915400", reserialized, signature)

    def test_different_timestamp_rejected(self, adapter):
        body = webhook_body("PAYMENT_SUCCESS", "order-1")
        signature = adapter.compute_signature("1736915400", body)

        assert not adapter.verify_signature("1736915401", body, signature)

    def test_missing_parts_rejected(self, adapter):
        body = webhook_body("PAYMENT_SUCCESS", "order-1")

        assert not adapter.verify_signature(None, body, "sig")
        assert not adapter.verify_signature("1736915400", body, None)

    def test_webhook_secret_defaults_to_secret_key(self):
        adapter = CashfreeAdapter(
            base_url="https://sandbox.cashfree.test/pg",
            app_id="id",
            secret_key="shared-secret",
            client=httpx.Client(),
        )
        other = CashfreeAdapter(
            base_url="https://sandbox.cashfree.test/pg",
            app_id="id",
            secret_key="unused",
            webhook_secret="shared-secret",
            client=httpx.Client(),
        )
        try:
            assert adapter.compute_signature("1", b"{}") == other.compute_signature("1", b"{}")
        finally:
            adapter.close()
            other.close()


class TestConstructEvent:
    @pytest.fixture
    def adapter(self, http_adapter):
        return http_adapter(lambda request: httpx.Response(200), webhook_secret=WEBHOOK_SECRET)

    def test_normalises_event_type_and_attempt(self, adapter):
        body = webhook_body("PAYMENT_SUCCESS", "order-1", cf_payment_id="cf_77")
        signature = adapter.compute_signature("1736915400", body)

        event = adapter.construct_event(body, signature, "1736915400")

        assert event.event_type == "PAYMENT_SUCCESS"
        assert event.order_id == "order-1"
        assert event.attempt.gateway_payment_id == "cf_77"
        assert event.attempt.outcome == GatewayOutcome.SUCCESS
        assert event.raw["type"] == "PAYMENT_SUCCESS_WEBHOOK"

    def test_user_dropped_event(self, adapter):
        body = webhook_body("PAYMENT_USER_DROPPED", "order-1", payment_status="USER_DROPPED")
        signature = adapter.compute_signature("1736915400", body)

        event = adapter.construct_event(body, signature, "1736915400")

        assert event.event_type == "PAYMENT_USER_DROPPED"
        assert event.attempt.outcome == GatewayOutcome.FAILED

    def test_bad_signature_raises(self, adapter):
        body = webhook_body("PAYMENT_SUCCESS", "order-1")

        with pytest.raises(SignatureError):
            adapter.construct_event(body, "not-a-signature", "1736915400")

    def test_invalid_json_raises_validation_error(self, adapter):
        body = b"not json"
        signature = adapter.compute_signature("1736915400", body)

        with pytest.raises(ValidationError) as exc_info:
            adapter.construct_event(body, signature, "1736915400")

        assert exc_info.value.error_code == "INVALID_WEBHOOK_PAYLOAD"

    def test_missing_order_id_raises_validation_error(self, adapter):
        body = json.dumps({"type": "PAYMENT_SUCCESS_WEBHOOK", "data": {}}).encode()
        signature = adapter.compute_signature("1736915400", body)

        with pytest.raises(ValidationError) as exc_info:
            adapter.construct_event(body, signature, "1736915400")

        assert exc_info.value.error_code == "INVALID_WEBHOOK_PAYLOAD"


class TestFromSettings:
    def test_reads_settings(self, settings):
        settings.CASHFREE_BASE_URL = "https://sandbox.cashfree.test/pg/"
        settings.CASHFREE_APP_ID = "configured-id"

        with CashfreeAdapter.from_settings() as adapter:
            assert adapter.base_url == "https://sandbox.cashfree.test/pg"
            assert adapter.app_id == "configured-id"

    def test_overrides(self):
        with CashfreeAdapter.from_settings(app_id="override-id", max_retries=0) as adapter:
            assert adapter.app_id == "override-id"
            assert adapter.max_retries == 1
