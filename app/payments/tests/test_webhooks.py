"""
Tests for the gateway webhook endpoint and handler registry.
"""

import pytest

from payments.models import WebhookEvent
from payments.state_machines import OverallStatus, StageStatus, WebhookEventStatus
from payments.tests.factories import WebhookEventFactory
from payments.tests.helpers import signed_headers, webhook_body
from payments.webhooks.handlers import WEBHOOK_HANDLERS
from payments.webhooks.views import delivery_key_for

WEBHOOK_URL = "/api/v1/payments/webhook/"


@pytest.fixture
def post_webhook(client):
    def _post(body: bytes, headers: dict | None = None):
        return client.post(
            WEBHOOK_URL,
            data=body,
            content_type="application/json",
            **(signed_headers(body) if headers is None else headers),
        )

    return _post


@pytest.mark.django_db
class TestSignature:
    def test_tampered_body_rejected(self, post_webhook, created_record):
        body = webhook_body("PAYMENT_SUCCESS", created_record.gateway_order_id)
        headers = signed_headers(body)
        tampered = body.replace(b"1200.0", b"1.0")

        response = post_webhook(tampered, headers)

        assert response.status_code == 400
        created_record.refresh_from_db()
        assert created_record.stage_status == StageStatus.CREATED
        assert not WebhookEvent.objects.exists()

    def test_missing_headers_rejected(self, post_webhook, created_record):
        body = webhook_body("PAYMENT_SUCCESS", created_record.gateway_order_id)

        response = post_webhook(body, {})

        assert response.status_code == 400

    def test_wrong_secret_rejected(self, post_webhook, created_record):
        body = webhook_body("PAYMENT_SUCCESS", created_record.gateway_order_id)

        response = post_webhook(body, signed_headers(body, secret="not-the-secret"))

        assert response.status_code == 400

    def test_get_not_allowed(self, client):
        assert client.get(WEBHOOK_URL).status_code == 405


@pytest.mark.django_db
class TestPaymentEvents:
    def test_success_marks_record_paid(self, post_webhook, created_record):
        body = webhook_body("PAYMENT_SUCCESS", created_record.gateway_order_id)

        response = post_webhook(body)

        assert response.status_code == 200
        created_record.refresh_from_db()
        assert created_record.stage_status == StageStatus.PAID
        assert created_record.overall_status == OverallStatus.FINAL_PAID
        assert created_record.gateway_payment_id == "cf_pay_webhook"

        event = WebhookEvent.objects.get()
        assert event.status == WebhookEventStatus.PROCESSED
        assert event.event_type == "PAYMENT_SUCCESS"
        assert event.gateway_order_id == created_record.gateway_order_id
        assert event.delivery_key == delivery_key_for("1736915400", body)

    def test_duplicate_delivery_not_reapplied(self, post_webhook, created_record):
        body = webhook_body("PAYMENT_SUCCESS", created_record.gateway_order_id)
        post_webhook(body)
        created_record.refresh_from_db()
        version = created_record.version

        response = post_webhook(body)

        assert response.status_code == 200
        assert response.content == b"Already processed"
        created_record.refresh_from_db()
        assert created_record.version == version
        assert WebhookEvent.objects.count() == 1

    def test_failure_marks_record_failed(self, post_webhook, created_record):
        body = webhook_body(
            "PAYMENT_FAILED",
            created_record.gateway_order_id,
            payment_status="FAILED",
        )

        response = post_webhook(body)

        assert response.status_code == 200
        created_record.refresh_from_db()
        assert created_record.stage_status == StageStatus.FAILED
        assert created_record.overall_status == OverallStatus.FAILED

    def test_late_failure_keeps_record_paid(self, post_webhook, created_record):
        post_webhook(webhook_body("PAYMENT_SUCCESS", created_record.gateway_order_id))

        response = post_webhook(
            webhook_body(
                "PAYMENT_FAILED",
                created_record.gateway_order_id,
                payment_status="FAILED",
                cf_payment_id="cf_pay_late",
            )
        )

        assert response.status_code == 200
        created_record.refresh_from_db()
        assert created_record.stage_status == StageStatus.PAID
        assert created_record.gateway_payment_id == "cf_pay_webhook"

    def test_unknown_order_returns_404(self, post_webhook, db):
        response = post_webhook(webhook_body("PAYMENT_SUCCESS", "no-such-order"))

        assert response.status_code == 404
        event = WebhookEvent.objects.get()
        assert event.status == WebhookEventStatus.FAILED

    def test_unhandled_type_acknowledged(self, post_webhook, created_record):
        response = post_webhook(webhook_body("REFUND_STATUS", created_record.gateway_order_id))

        assert response.status_code == 200
        created_record.refresh_from_db()
        assert created_record.stage_status == StageStatus.CREATED

    def test_failed_delivery_is_retried(self, post_webhook, created_record):
        body = webhook_body("PAYMENT_SUCCESS", created_record.gateway_order_id)
        WebhookEventFactory(
            delivery_key=delivery_key_for("1736915400", body),
            gateway_order_id=created_record.gateway_order_id,
            status=WebhookEventStatus.FAILED,
            attempt_count=1,
        )

        response = post_webhook(body)

        assert response.status_code == 200
        event = WebhookEvent.objects.get()
        assert event.status == WebhookEventStatus.PROCESSED
        assert event.attempt_count == 2


class TestHandlerRegistry:
    def test_payment_events_registered(self):
        for event_type in ("PAYMENT_SUCCESS", "PAYMENT_FAILED", "PAYMENT_USER_DROPPED"):
            assert event_type in WEBHOOK_HANDLERS
