"""
Payment-specific exceptions.

Exception Hierarchy:
    PaymentError (base for payment domain)
    ├── PaymentNotFoundError - PaymentRecord lookup failures
    ├── PaymentFailedError - Gateway reported a failed attempt on verify
    └── GatewayError - Base for all payment gateway failures
        ├── GatewayRequestError - Gateway rejected the request (4xx, permanent)
        ├── GatewayRateLimitError - Rate limited by the gateway (transient, retry)
        ├── GatewayUnavailableError - Network failure or 5xx (transient, retry)
        └── GatewayTimeoutError - Request timed out (transient, retry)

    SignatureError - Webhook signature missing or invalid (HTTP 400)
    StaleRecordError - Optimistic locking conflict (inherits ConflictError)

Usage:
    from payments.exceptions import GatewayError, SignatureError

    try:
        order = gateway.create_order(params)
    except GatewayError as e:
        if e.is_retryable:
            ...
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from core.exceptions import BaseApplicationError, ConflictError, NotFoundError

if TYPE_CHECKING:
    from typing import Any


# =============================================================================
# Payment Domain Exceptions
# =============================================================================


class PaymentError(BaseApplicationError):
    """Base exception for all payment operations."""

    default_error_code: str = "PAYMENT_ERROR"


class PaymentNotFoundError(NotFoundError):
    """
    Raised when a PaymentRecord cannot be found.

    Example:
        record = PaymentRecord.objects.filter(gateway_order_id=order_id).first()
        if record is None:
            raise PaymentNotFoundError(
                "Payment record not found",
                details={"gateway_order_id": order_id},
            )
    """

    default_error_code: str = "PAYMENT_RECORD_NOT_FOUND"


class PaymentFailedError(PaymentError):
    """
    Raised when the gateway reports that the payment attempt failed.

    The failed stage is already persisted when this is raised; details
    carry the serialized record and the gateway outcome.
    """

    default_error_code: str = "PAYMENT_FAILED"
    http_status: int = 400


# =============================================================================
# Gateway Exceptions
# =============================================================================


class GatewayError(PaymentError):
    """
    Base exception for all payment gateway errors.

    Attributes:
        upstream_status: HTTP status returned by the gateway, if any
        upstream_code: Gateway's own error code, if any
        is_retryable: Whether the call can be retried safely
        status_code: Status surfaced to our API client. Upstream 4xx
            responses (other than credential failures) pass through;
            everything else becomes 502.

    The message carries the gateway's own error message so clients see
    why an order was rejected. Credentials never appear in it.
    """

    default_error_code: str = "GATEWAY_ERROR"
    http_status: int = 502
    is_retryable: bool = False

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        upstream_status: int | None = None,
        upstream_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        details = details or {}
        if upstream_status is not None:
            details["upstream_status"] = upstream_status
        if upstream_code:
            details["upstream_code"] = upstream_code
        super().__init__(message, error_code=error_code, details=details)
        self.upstream_status = upstream_status
        self.upstream_code = upstream_code

    @property
    def status_code(self) -> int:
        if (
            self.upstream_status is not None
            and 400 <= self.upstream_status < 500
            and self.upstream_status not in (401, 403)
        ):
            return self.upstream_status
        return self.http_status


class GatewayRequestError(GatewayError):
    """
    The gateway rejected the request (validation, unknown order, bad credentials).

    This is a permanent error; retrying with the same parameters fails again.
    """

    default_error_code: str = "GATEWAY_REQUEST_REJECTED"
    is_retryable: bool = False


class GatewayRateLimitError(GatewayError):
    """Rate limited by the gateway. Retry with backoff."""

    default_error_code: str = "GATEWAY_RATE_LIMITED"
    is_retryable: bool = True


class GatewayUnavailableError(GatewayError):
    """
    Gateway unreachable or returned a 5xx.

    Covers connection failures, DNS errors and upstream server errors.
    """

    default_error_code: str = "GATEWAY_UNAVAILABLE"
    is_retryable: bool = True


class GatewayTimeoutError(GatewayError):
    """
    Gateway call exceeded CASHFREE_API_TIMEOUT_SECONDS.

    IMPORTANT: the call may have succeeded on the gateway's side. A
    timed-out order creation leaves the record untouched, and a timed-out
    verification never marks the payment failed; the webhook or the
    reconciliation task settles it later.
    """

    default_error_code: str = "GATEWAY_TIMEOUT"
    http_status: int = 504
    is_retryable: bool = True


# =============================================================================
# Webhook Exceptions
# =============================================================================


class SignatureError(PaymentError):
    """
    Raised when a webhook signature header is missing or does not match.

    No state is mutated when this is raised; the webhook endpoint answers
    400 so the sender stops retrying a payload we will never accept.
    """

    default_error_code: str = "INVALID_SIGNATURE"
    http_status: int = 400


# =============================================================================
# Concurrency Control Exceptions
# =============================================================================


class StaleRecordError(ConflictError):
    """
    Raised when a conditional update keeps losing to concurrent writers.

    Attributes:
        details: Contains pk and the transition being applied
    """

    default_error_code: str = "STALE_RECORD"


__all__ = [
    "PaymentError",
    "PaymentNotFoundError",
    "PaymentFailedError",
    "GatewayError",
    "GatewayRequestError",
    "GatewayRateLimitError",
    "GatewayUnavailableError",
    "GatewayTimeoutError",
    "SignatureError",
    "StaleRecordError",
]
