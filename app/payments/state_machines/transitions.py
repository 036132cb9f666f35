"""
Pure transition functions for PaymentRecord.

Each function takes an immutable PaymentState snapshot plus the input of
the operation and returns a Transition: the field changes to write and
the preconditions the row must still satisfy when they are written. No
function here touches the database. PaymentRecordService applies the
result with a single conditional UPDATE, so a concurrent writer that got
there first makes the update match zero rows instead of overwriting it.

Rules enforced here:
    - stage_status never leaves PAID
    - gateway success evidence always wins over an earlier failure, so
      webhook and verify converge whichever arrives first
    - release_status is monotonic: not_released → released | refunded
    - release requires overall_status == final_paid

Usage:
    state = PaymentState.from_record(record)
    transition = transitions.release(state, now=timezone.now())
    if not transition.is_noop:
        PaymentRecord.objects.filter(
            pk=record.pk, version=record.version, **transition.expected
        ).update(**transition.changes)
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from core.exceptions import ConflictError, InvalidStateError, ValidationError
from payments.fees import compute_fees
from payments.state_machines.states import (
    OverallStatus,
    PaymentMethod,
    ReleaseStatus,
    StageStatus,
)

if TYPE_CHECKING:
    from datetime import datetime
    from typing import Any


# =============================================================================
# State & Result Types
# =============================================================================


@dataclass(frozen=True)
class PaymentState:
    """Snapshot of the PaymentRecord fields the transitions read."""

    total_amount: Decimal
    service_charge: Decimal = Decimal("0")
    commission_fee: Decimal = Decimal("0")
    stage_amount: Decimal = Decimal("0")
    stage_status: str = StageStatus.PENDING
    overall_status: str = OverallStatus.PENDING
    release_status: str = ReleaseStatus.NOT_RELEASED
    claimed_paid: bool = False
    is_admin_management_fee: bool = False
    gateway_order_id: str | None = None
    gateway_payment_id: str | None = None
    completed_at: datetime | None = None

    @classmethod
    def from_record(cls, record) -> PaymentState:
        return cls(
            total_amount=record.total_amount,
            service_charge=record.service_charge,
            commission_fee=record.commission_fee,
            stage_amount=record.stage_amount,
            stage_status=record.stage_status,
            overall_status=record.overall_status,
            release_status=record.release_status,
            claimed_paid=record.claimed_paid,
            is_admin_management_fee=record.is_admin_management_fee,
            gateway_order_id=record.gateway_order_id,
            gateway_payment_id=record.gateway_payment_id,
            completed_at=record.completed_at,
        )


@dataclass(frozen=True)
class Transition:
    """
    Result of a transition function.

    Attributes:
        name: Operation name, used in logs
        changes: Field values to write; empty means nothing to do
        expected: Field values the row must still have when written
    """

    name: str
    changes: dict[str, Any] = field(default_factory=dict)
    expected: dict[str, Any] = field(default_factory=dict)

    @property
    def is_noop(self) -> bool:
        return not self.changes


def _noop(name: str) -> Transition:
    return Transition(name=name)


def _settled_overall(state: PaymentState) -> str:
    # A refund issued before the money arrived stays a refund
    if state.overall_status in (OverallStatus.REFUNDED, OverallStatus.RELEASED):
        return state.overall_status
    return OverallStatus.FINAL_PAID


def _require_open_escrow(state: PaymentState, action: str) -> None:
    if state.release_status == ReleaseStatus.RELEASED:
        raise ConflictError(
            "Payment has already been released",
            error_code="ALREADY_RELEASED",
            details={"action": action},
        )
    if state.release_status == ReleaseStatus.REFUNDED:
        raise ConflictError(
            "Payment has already been refunded",
            error_code="ALREADY_REFUNDED",
            details={"action": action},
        )


# =============================================================================
# Fees
# =============================================================================


def recompute_fees(state: PaymentState, admin_managed: bool) -> Transition:
    """
    Recompute platform fees after the admin-managed flag changed.

    A live gateway order was minted for the old amount, so changing the
    amount of a created stage drops the order and puts the stage back to
    pending; the client has to create a new order.

    Raises:
        InvalidStateError: the collection stage is already paid
    """
    if state.stage_status == StageStatus.PAID:
        raise InvalidStateError(
            "Fees cannot change after the payment is collected",
            error_code="PAYMENT_ALREADY_PAID",
            details={"stage_status": state.stage_status},
        )
    if state.is_admin_management_fee:
        # The management fee carries no further platform fee
        return _noop("recompute_fees")

    fees = compute_fees(state.total_amount, admin_managed)
    if (
        fees.service_charge == state.service_charge
        and fees.commission_fee == state.commission_fee
        and fees.grand_total == state.stage_amount
    ):
        return _noop("recompute_fees")

    changes: dict[str, Any] = {
        "service_charge": fees.service_charge,
        "commission_fee": fees.commission_fee,
        "stage_amount": fees.grand_total,
    }
    if state.stage_status == StageStatus.CREATED and fees.grand_total != state.stage_amount:
        changes.update(stage_status=StageStatus.PENDING, gateway_order_id=None, payment_session_id=None)

    return Transition(
        name="recompute_fees",
        changes=changes,
        expected={"stage_status": state.stage_status},
    )


# =============================================================================
# Gateway Collection
# =============================================================================


def record_order(state: PaymentState, gateway_order_id: str, session_id: str) -> Transition:
    """
    Store a freshly minted gateway order. The last order created wins.

    Raises:
        ValidationError: the payment is already paid
        ConflictError: the payment was refunded or released
    """
    if state.stage_status == StageStatus.PAID:
        raise ValidationError(
            "Payment has already been completed",
            error_code="PAYMENT_ALREADY_PAID",
        )
    _require_open_escrow(state, "create_order")

    changes: dict[str, Any] = {
        "gateway_order_id": gateway_order_id,
        "payment_session_id": session_id,
        "stage_status": StageStatus.CREATED,
        "payment_method": PaymentMethod.GATEWAY,
        "error_code": None,
        "error_message": None,
    }
    if state.overall_status == OverallStatus.FAILED:
        changes["overall_status"] = OverallStatus.PENDING

    return Transition(
        name="record_order",
        changes=changes,
        expected={"stage_status": state.stage_status},
    )


def apply_gateway_success(
    state: PaymentState,
    *,
    gateway_payment_id: str,
    paid_at: datetime,
    signature: str | None = None,
) -> Transition:
    """
    Mark the collection stage paid from gateway evidence.

    Idempotent: a record that is already paid is returned unchanged, so a
    second verify or a redelivered webhook writes nothing.
    """
    if state.stage_status == StageStatus.PAID:
        return _noop("gateway_success")

    changes: dict[str, Any] = {
        "stage_status": StageStatus.PAID,
        "gateway_payment_id": gateway_payment_id,
        "payment_method": PaymentMethod.GATEWAY,
        "completed_at": state.completed_at or paid_at,
        "overall_status": _settled_overall(state),
        "claimed_paid": False,
        "error_code": None,
        "error_message": None,
    }
    if signature:
        changes["gateway_signature"] = signature

    return Transition(
        name="gateway_success",
        changes=changes,
        expected={"stage_status": state.stage_status},
    )


def apply_gateway_failure(
    state: PaymentState,
    *,
    error_code: str | None,
    error_message: str | None,
) -> Transition:
    """
    Mark the collection stage failed from gateway evidence.

    Never downgrades a paid stage and never re-fails a failed one.
    """
    if state.stage_status in (StageStatus.PAID, StageStatus.FAILED):
        return _noop("gateway_failure")

    changes: dict[str, Any] = {
        "stage_status": StageStatus.FAILED,
        "error_code": (error_code or "PAYMENT_FAILED")[:100],
        "error_message": (error_message or "Payment failed at the gateway")[:500],
    }
    if state.overall_status == OverallStatus.PENDING:
        changes["overall_status"] = OverallStatus.FAILED

    return Transition(
        name="gateway_failure",
        changes=changes,
        expected={"stage_status": state.stage_status},
    )


# =============================================================================
# Manual (UPI) Collection
# =============================================================================


def claim_paid(state: PaymentState, now: datetime) -> Transition:
    """
    Client declares an off-gateway payment as sent.

    Raises:
        InvalidStateError: stage is neither pending nor created
        ConflictError: the payment was refunded or released
    """
    _require_open_escrow(state, "mark_paid")
    if state.stage_status not in (StageStatus.PENDING, StageStatus.CREATED):
        raise InvalidStateError(
            "Only pending payments can be marked as paid",
            error_code="PAYMENT_NOT_PENDING",
            details={"stage_status": state.stage_status},
        )
    if state.claimed_paid:
        return _noop("claim_paid")

    return Transition(
        name="claim_paid",
        changes={"claimed_paid": True, "claimed_paid_at": now},
        expected={"stage_status": state.stage_status, "claimed_paid": False},
    )


def confirm_received(state: PaymentState, now: datetime) -> Transition:
    """
    Payee confirms an off-gateway payment arrived.

    Raises:
        ValidationError: nothing was claimed and the stage is not paid
    """
    if not state.claimed_paid and state.stage_status != StageStatus.PAID:
        raise ValidationError(
            "Payment has not been marked as paid by the client",
            error_code="PAYMENT_NOT_CLAIMED",
        )
    if state.stage_status == StageStatus.PAID:
        if not state.claimed_paid:
            return _noop("confirm_received")
        return Transition(
            name="confirm_received",
            changes={"claimed_paid": False},
            expected={"stage_status": StageStatus.PAID},
        )

    return Transition(
        name="confirm_received",
        changes={
            "stage_status": StageStatus.PAID,
            "payment_method": PaymentMethod.UPI,
            "completed_at": now,
            "claimed_paid": False,
            "overall_status": _settled_overall(state),
            "error_code": None,
            "error_message": None,
        },
        expected={"stage_status": state.stage_status, "claimed_paid": True},
    )


# =============================================================================
# Escrow Settlement
# =============================================================================


def release(state: PaymentState, now: datetime) -> Transition:
    """
    Release held funds to the freelancer.

    Raises:
        ConflictError: already released or refunded
        InvalidStateError: overall_status is not final_paid
    """
    _require_open_escrow(state, "release")
    if state.overall_status != OverallStatus.FINAL_PAID:
        raise InvalidStateError(
            "Payment must be fully paid before release",
            error_code="PAYMENT_NOT_PAID",
            details={"overall_status": state.overall_status},
        )

    release_amount = state.total_amount - state.service_charge - state.commission_fee
    return Transition(
        name="release",
        changes={
            "release_amount": release_amount,
            "release_status": ReleaseStatus.RELEASED,
            "overall_status": OverallStatus.RELEASED,
            "released_at": now,
        },
        expected={
            "release_status": ReleaseStatus.NOT_RELEASED,
            "overall_status": OverallStatus.FINAL_PAID,
        },
    )


def refund(state: PaymentState, now: datetime) -> Transition:
    """
    Return held funds to the client.

    Raises:
        ConflictError: already released or refunded
    """
    _require_open_escrow(state, "refund")
    return Transition(
        name="refund",
        changes={
            "release_status": ReleaseStatus.REFUNDED,
            "overall_status": OverallStatus.REFUNDED,
            "refunded_at": now,
        },
        expected={"release_status": ReleaseStatus.NOT_RELEASED},
    )
