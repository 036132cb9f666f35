"""
Cashfree Payment Gateway adapter.

This module provides the CashfreeAdapter class which encapsulates all
gateway interactions. All gateway calls go through one adapter instance
so error handling, timeouts, idempotency and logging stay consistent.

The adapter is an explicitly constructed object owning an httpx.Client.
Callers build one (CashfreeAdapter.from_settings()), pass it into the
payment services, and close it when done:

    with CashfreeAdapter.from_settings() as gateway:
        PaymentRecordService.create_order(record_id, actor, gateway=gateway)

Features:
- Bounded timeout on every call (CASHFREE_API_TIMEOUT_SECONDS)
- Retries with exponential backoff on timeouts and connection errors (tenacity)
- Idempotency key on order creation so a retried POST cannot mint two orders
- Automatic error translation to payments.exceptions
- Webhook signature verification (HMAC-SHA256, base64, constant-time compare)

Configuration (via settings):
- CASHFREE_BASE_URL: API root, e.g. https://sandbox.cashfree.com/pg
- CASHFREE_APP_ID / CASHFREE_SECRET_KEY: API credentials
- CASHFREE_WEBHOOK_SECRET: Webhook signing secret (defaults to the secret key)
- CASHFREE_API_VERSION: x-api-version header
- CASHFREE_API_TIMEOUT_SECONDS: API call timeout (default: 10)
- CASHFREE_MAX_RETRIES: Max attempts for transient failures (default: 3)
"""

from __future__ import annotations

import base64
import hashlib
import hmac
import json
import logging
import time
from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING, Any

import httpx
from django.conf import settings
from django.utils.dateparse import parse_datetime
from tenacity import (
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from core.exceptions import ValidationError
from payments.exceptions import (
    GatewayError,
    GatewayRateLimitError,
    GatewayRequestError,
    GatewayTimeoutError,
    GatewayUnavailableError,
    SignatureError,
)
from payments.state_machines import GatewayOutcome

if TYPE_CHECKING:
    from datetime import datetime


# Attempt statuses reported by the gateway
SUCCESS_STATUSES = frozenset({"SUCCESS"})
FAILURE_STATUSES = frozenset({"FAILED", "USER_DROPPED", "CANCELLED", "VOID"})

# Webhook type suffix dropped when normalising event types
WEBHOOK_SUFFIX = "_WEBHOOK"


# =============================================================================
# Data Types
# =============================================================================


@dataclass
class CustomerDetails:
    """Customer block required by the gateway on every order."""

    customer_id: str
    name: str
    email: str
    phone: str


@dataclass
class CreateOrderParams:
    """
    Parameters for creating a gateway order.

    Attributes:
        order_id: Our order id (unique per attempt)
        amount: Amount to collect, in whole currency units
        currency: ISO 4217 currency code
        customer: Customer details
        return_url: Where the gateway sends the client after checkout
        notify_url: Webhook URL for this order
        idempotency_key: Sent as x-idempotency-key
    """

    order_id: str
    amount: Decimal
    currency: str
    customer: CustomerDetails
    return_url: str = ""
    notify_url: str = ""
    idempotency_key: str = ""

    def __post_init__(self) -> None:
        if self.amount <= 0:
            raise ValueError("amount must be positive")
        if not self.order_id:
            raise ValueError("order_id is required")
        if not self.currency:
            raise ValueError("currency is required")
        if not self.idempotency_key:
            self.idempotency_key = f"create_order:{self.order_id}"


@dataclass
class OrderResult:
    """Result of order creation."""

    order_id: str
    session_token: str
    status: str
    raw_response: dict[str, Any] = field(default_factory=dict)


@dataclass
class PaymentAttempt:
    """
    One payment attempt against an order, as reported by the gateway.

    Attributes:
        gateway_payment_id: cf_payment_id
        status: Gateway-native status (SUCCESS, FAILED, PENDING, USER_DROPPED, ...)
        amount: Amount of the attempt
        payment_time: When the attempt completed
        payment_group: Instrument family (upi, card, netbanking, ...)
        error_code/error_description: error_details block for failed attempts
    """

    gateway_payment_id: str
    status: str
    amount: Decimal | None = None
    payment_time: datetime | None = None
    payment_group: str | None = None
    error_code: str | None = None
    error_description: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def outcome(self) -> str:
        if self.status in SUCCESS_STATUSES:
            return GatewayOutcome.SUCCESS
        if self.status in FAILURE_STATUSES:
            return GatewayOutcome.FAILED
        return GatewayOutcome.PENDING

    @classmethod
    def from_payload(cls, payment: dict[str, Any], error_details: dict[str, Any] | None = None) -> PaymentAttempt:
        error_details = error_details or payment.get("error_details") or {}
        amount = payment.get("payment_amount")
        payment_time = payment.get("payment_completion_time") or payment.get("payment_time")
        return cls(
            gateway_payment_id=str(payment.get("cf_payment_id") or ""),
            status=str(payment.get("payment_status") or "").upper(),
            amount=Decimal(str(amount)) if amount is not None else None,
            payment_time=parse_datetime(payment_time) if payment_time else None,
            payment_group=payment.get("payment_group"),
            error_code=error_details.get("error_code"),
            error_description=error_details.get("error_description")
            or payment.get("payment_message"),
            raw=payment,
        )


@dataclass
class PaymentStatusResult:
    """All attempts the gateway knows for one order."""

    order_id: str
    attempts: list[PaymentAttempt] = field(default_factory=list)

    def decisive_attempt(self) -> PaymentAttempt | None:
        """
        The attempt that settles the order, if any.

        Any successful attempt wins. Otherwise the most recent attempt
        decides if it failed. Pending attempts decide nothing.
        """
        for attempt in self.attempts:
            if attempt.outcome == GatewayOutcome.SUCCESS:
                return attempt
        if not self.attempts:
            return None
        latest = max(
            self.attempts,
            key=lambda a: a.payment_time.timestamp() if a.payment_time else 0,
        )
        if latest.outcome == GatewayOutcome.FAILED:
            return latest
        return None

    @property
    def outcome(self) -> str:
        attempt = self.decisive_attempt()
        return attempt.outcome if attempt else GatewayOutcome.PENDING


@dataclass
class WebhookPayload:
    """Normalised webhook event."""

    event_type: str
    order_id: str
    attempt: PaymentAttempt | None
    event_time: str | None = None
    raw: dict[str, Any] = field(default_factory=dict)


# =============================================================================
# Adapter
# =============================================================================


class CashfreeAdapter:
    """
    Adapter for Cashfree PG REST API operations.

    Instances own an httpx.Client and must be closed (or used as a
    context manager). They are safe to share across requests in a process.

    Usage:
        gateway = CashfreeAdapter.from_settings()
        order = gateway.create_order(params)
        status = gateway.fetch_payment_status(order.order_id)
        gateway.close()
    """

    def __init__(
        self,
        *,
        base_url: str,
        app_id: str,
        secret_key: str,
        webhook_secret: str | None = None,
        api_version: str = "2023-08-01",
        timeout_seconds: float = 10,
        max_retries: int = 3,
        retry_backoff_seconds: float = 0.5,
        client: httpx.Client | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.app_id = app_id
        self._secret_key = secret_key
        self._webhook_secret = webhook_secret or secret_key
        self.api_version = api_version
        self.timeout_seconds = timeout_seconds
        self.max_retries = max(1, max_retries)
        self.retry_backoff_seconds = retry_backoff_seconds
        self._client = client or httpx.Client(timeout=httpx.Timeout(timeout_seconds))

    @classmethod
    def from_settings(cls, **overrides) -> CashfreeAdapter:
        """Build an adapter from Django settings. Keyword arguments override."""
        options = {
            "base_url": settings.CASHFREE_BASE_URL,
            "app_id": settings.CASHFREE_APP_ID,
            "secret_key": settings.CASHFREE_SECRET_KEY,
            "webhook_secret": settings.CASHFREE_WEBHOOK_SECRET,
            "api_version": settings.CASHFREE_API_VERSION,
            "timeout_seconds": settings.CASHFREE_API_TIMEOUT_SECONDS,
            "max_retries": settings.CASHFREE_MAX_RETRIES,
        }
        options.update(overrides)
        return cls(**options)

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> CashfreeAdapter:
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get logger for this adapter."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    # =========================================================================
    # Core Operations
    # =========================================================================

    def create_order(self, params: CreateOrderParams) -> OrderResult:
        """
        Create a gateway order and return its checkout session token.

        Raises:
            GatewayRequestError: Gateway rejected the order
            GatewayUnavailableError: Gateway unreachable or 5xx
            GatewayTimeoutError: Request timed out
        """
        body = {
            "order_id": params.order_id,
            "order_amount": float(params.amount),
            "order_currency": params.currency,
            "customer_details": {
                "customer_id": params.customer.customer_id,
                "customer_name": params.customer.name,
                "customer_email": params.customer.email,
                "customer_phone": params.customer.phone,
            },
            "order_meta": {
                key: value
                for key, value in (
                    ("return_url", params.return_url),
                    ("notify_url", params.notify_url),
                )
                if value
            },
        }
        log_context = {
            "operation": "create_order",
            "order_id": params.order_id,
            "amount": str(params.amount),
            "currency": params.currency,
        }

        data = self._request(
            "POST",
            "/orders",
            log_context,
            json=body,
            headers={"x-idempotency-key": params.idempotency_key},
        )

        session_token = data.get("payment_session_id")
        if not session_token:
            raise GatewayError(
                "Gateway response did not include a payment session",
                error_code="GATEWAY_BAD_RESPONSE",
                details={"order_id": params.order_id},
            )

        return OrderResult(
            order_id=str(data.get("order_id") or params.order_id),
            session_token=session_token,
            status=str(data.get("order_status") or "ACTIVE"),
            raw_response=data,
        )

    def fetch_payment_status(self, gateway_order_id: str) -> PaymentStatusResult:
        """
        Fetch every payment attempt for an order.

        This is the client-independent cross-check used by verification;
        a client's claim that checkout succeeded is never trusted alone.

        Raises:
            GatewayRequestError: Unknown order or rejected request
            GatewayUnavailableError: Gateway unreachable or 5xx
            GatewayTimeoutError: Request timed out
        """
        log_context = {"operation": "fetch_payment_status", "order_id": gateway_order_id}
        data = self._request("GET", f"/orders/{gateway_order_id}/payments", log_context)

        if not isinstance(data, list):
            raise GatewayError(
                "Unexpected payment status response from gateway",
                error_code="GATEWAY_BAD_RESPONSE",
                details={"order_id": gateway_order_id},
            )

        return PaymentStatusResult(
            order_id=gateway_order_id,
            attempts=[PaymentAttempt.from_payload(item) for item in data if isinstance(item, dict)],
        )

    # =========================================================================
    # Webhooks
    # =========================================================================

    def compute_signature(self, timestamp: str, raw_body: bytes) -> str:
        """base64(HMAC-SHA256(secret, timestamp + raw_body))."""
        message = timestamp.encode("utf-8") + raw_body
        digest = hmac.new(self._webhook_secret.encode("utf-8"), message, hashlib.sha256).digest()
        return base64.b64encode(digest).decode("ascii")

    def verify_signature(self, timestamp: str | None, raw_body: bytes, signature: str | None) -> bool:
        """
        Check a webhook signature over the raw, unparsed request body.

        The body must be the exact bytes received; re-serialised JSON
        produces a different digest.
        """
        if not timestamp or not signature:
            return False
        expected = self.compute_signature(timestamp, raw_body)
        return hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8", "ignore"))

    def construct_event(
        self,
        raw_body: bytes,
        signature: str | None,
        timestamp: str | None,
    ) -> WebhookPayload:
        """
        Verify and parse a webhook delivery.

        Raises:
            SignatureError: Missing or mismatched signature
            ValidationError: Signed body is not a payment event
        """
        if not self.verify_signature(timestamp, raw_body, signature):
            self.get_logger().warning(
                "Webhook signature verification failed",
                extra={"has_signature": bool(signature), "has_timestamp": bool(timestamp)},
            )
            raise SignatureError("Invalid webhook signature")

        try:
            payload = json.loads(raw_body)
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise ValidationError(
                "Webhook body is not valid JSON",
                error_code="INVALID_WEBHOOK_PAYLOAD",
            ) from e

        if not isinstance(payload, dict):
            raise ValidationError("Webhook body must be an object", error_code="INVALID_WEBHOOK_PAYLOAD")

        data = payload.get("data") or {}
        order_id = (data.get("order") or {}).get("order_id")
        if not order_id:
            raise ValidationError(
                "Webhook payload has no order id",
                error_code="INVALID_WEBHOOK_PAYLOAD",
            )

        event_type = str(payload.get("type") or "").upper()
        if event_type.endswith(WEBHOOK_SUFFIX):
            event_type = event_type[: -len(WEBHOOK_SUFFIX)]

        payment = data.get("payment")
        attempt = (
            PaymentAttempt.from_payload(payment, data.get("error_details"))
            if isinstance(payment, dict)
            else None
        )

        return WebhookPayload(
            event_type=event_type,
            order_id=str(order_id),
            attempt=attempt,
            event_time=payload.get("event_time"),
            raw=payload,
        )

    # =========================================================================
    # Transport
    # =========================================================================

    def _headers(self) -> dict[str, str]:
        return {
            "x-client-id": self.app_id,
            "x-client-secret": self._secret_key,
            "x-api-version": self.api_version,
            "accept": "application/json",
        }

    def _request(
        self,
        method: str,
        path: str,
        log_context: dict[str, Any],
        *,
        headers: dict[str, str] | None = None,
        **kwargs,
    ) -> Any:
        logger = self.get_logger()
        url = f"{self.base_url}{path}"
        request_headers = {**self._headers(), **(headers or {})}

        start_time = time.time()
        logger.info("Starting gateway operation", extra=log_context)

        retrying = Retrying(
            retry=retry_if_exception_type((httpx.TimeoutException, httpx.ConnectError)),
            stop=stop_after_attempt(self.max_retries),
            wait=wait_exponential(multiplier=self.retry_backoff_seconds, max=4),
            reraise=True,
        )

        try:
            for attempt in retrying:
                with attempt:
                    response = self._client.request(method, url, headers=request_headers, **kwargs)
                    response.raise_for_status()
            data = response.json()
        except (httpx.HTTPError, ValueError) as e:
            duration_ms = (time.time() - start_time) * 1000
            self._handle_gateway_error(e, log_context, duration_ms)
            raise  # Never reached, but satisfies type checker

        duration_ms = (time.time() - start_time) * 1000
        logger.info(
            "Gateway operation completed",
            extra={**log_context, "status_code": response.status_code, "duration_ms": duration_ms},
        )
        return data

    # =========================================================================
    # Error Handling
    # =========================================================================

    def _handle_gateway_error(
        self,
        error: Exception,
        log_context: dict[str, Any],
        duration_ms: float,
    ) -> None:
        """
        Translate httpx exceptions to payments.exceptions.

        Raises:
            GatewayTimeoutError: Request timed out
            GatewayUnavailableError: Connection failure or 5xx
            GatewayRateLimitError: 429
            GatewayRequestError: Other 4xx
            GatewayError: Unparseable response
        """
        logger = self.get_logger()
        log_context = {**log_context, "duration_ms": duration_ms}

        if isinstance(error, httpx.TimeoutException):
            logger.warning("Gateway request timed out", extra=log_context)
            raise GatewayTimeoutError(
                "Payment gateway did not respond in time. Please retry.",
            ) from error

        if isinstance(error, httpx.HTTPStatusError):
            status_code = error.response.status_code
            upstream_message, upstream_code = _error_body(error.response)
            log_context = {**log_context, "upstream_status": status_code, "upstream_code": upstream_code}

            if status_code == 429:
                logger.warning("Rate limited by gateway", extra=log_context)
                raise GatewayRateLimitError(
                    "Payment gateway rate limit exceeded. Please retry.",
                    upstream_status=status_code,
                    upstream_code=upstream_code,
                ) from error

            if status_code >= 500:
                logger.error("Gateway server error", extra=log_context)
                raise GatewayUnavailableError(
                    "Payment gateway error. Please retry.",
                    upstream_status=status_code,
                    upstream_code=upstream_code,
                ) from error

            if status_code in (401, 403):
                logger.critical("Gateway authentication failed - check credentials", extra=log_context)
                raise GatewayRequestError(
                    "Payment gateway authentication failed",
                    upstream_status=status_code,
                    upstream_code=upstream_code,
                ) from error

            logger.error("Gateway rejected request", extra=log_context)
            raise GatewayRequestError(
                upstream_message or "Payment gateway rejected the request",
                upstream_status=status_code,
                upstream_code=upstream_code,
            ) from error

        if isinstance(error, httpx.HTTPError):
            logger.error("Could not reach gateway", extra=log_context, exc_info=True)
            raise GatewayUnavailableError(
                "Could not connect to payment gateway. Please retry.",
            ) from error

        logger.error("Unparseable gateway response", extra=log_context, exc_info=True)
        raise GatewayError(
            "Payment gateway returned an unreadable response",
            error_code="GATEWAY_BAD_RESPONSE",
        ) from error


def _error_body(response: httpx.Response) -> tuple[str | None, str | None]:
    try:
        body = response.json()
    except ValueError:
        return None, None
    if not isinstance(body, dict):
        return None, None
    return body.get("message"), body.get("code")
