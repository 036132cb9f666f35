"""
PaymentRecord service: the escrow payment lifecycle.

Every state change follows the same two steps:
1. a pure function in payments.state_machines.transitions decides the
   next state from a snapshot of the current row (or raises)
2. _apply writes it with one conditional UPDATE keyed on the row's
   version and the transition's status preconditions

If the UPDATE matches no row, another writer changed the record first;
the record is re-read and the transition re-evaluated, so the caller
sees the idempotent no-op or the conflict the new state implies. No lock
is held across the gateway call.

Usage:
    from payments.adapters import CashfreeAdapter
    from payments.services import PaymentRecordService

    record = PaymentRecordService.create_record(project.id, actor=client)

    with CashfreeAdapter.from_settings() as gateway:
        record, order = PaymentRecordService.create_order(record.id, client, gateway=gateway)
        result = PaymentRecordService.verify(record.id, order.order_id, client, gateway=gateway)

    PaymentRecordService.release(record.id, actor=admin)
"""

from __future__ import annotations

import secrets
from dataclasses import dataclass
from decimal import Decimal
from typing import TYPE_CHECKING
from urllib.parse import urlencode

from django.conf import settings
from django.db import IntegrityError, transaction
from django.db.models import F
from django.utils import timezone

from authentication import policy
from authentication.policy import Capability
from core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from core.services import BaseService
from notifications.models import NotificationKind
from notifications.services import NotificationService
from payments.adapters import CreateOrderParams, CustomerDetails
from payments.exceptions import GatewayTimeoutError, PaymentNotFoundError, StaleRecordError
from payments.fees import compute_fees, percent_of, to_amount
from payments.models import PaymentRecord
from payments.state_machines import GatewayOutcome, StageStatus, transitions
from payments.state_machines.transitions import PaymentState, Transition

if TYPE_CHECKING:
    from collections.abc import Callable
    from typing import Any

    from authentication.models import User
    from payments.adapters import CashfreeAdapter, OrderResult, PaymentAttempt, WebhookPayload
    from projects.models import Project


MAX_APPLY_ATTEMPTS = 3
MODERATION_ID_ATTEMPTS = 5

SUCCESS_EVENTS = frozenset({"PAYMENT_SUCCESS"})
FAILURE_EVENTS = frozenset({"PAYMENT_FAILED", "PAYMENT_USER_DROPPED"})


def generate_moderation_id() -> str:
    """Human-readable reference for admin-management fee payments: MOD-12345."""
    return f"MOD-{secrets.randbelow(90000) + 10000}"


def generate_order_id(record: PaymentRecord) -> str:
    # Alphanumeric with dashes, under the gateway's 45 character limit
    return f"{record.id.hex}-{secrets.token_hex(4)}"


@dataclass
class VerificationResult:
    """
    Outcome of verify() or of applying a webhook.

    Attributes:
        record: The record after the call
        outcome: GatewayOutcome value (success, failed, pending)
        changed: Whether this call wrote anything
    """

    record: PaymentRecord
    outcome: str
    changed: bool

    @property
    def is_paid(self) -> bool:
        return self.record.stage_status == StageStatus.PAID


class PaymentRecordService(BaseService):
    """
    Service for PaymentRecord creation, collection, settlement and reads.

    Methods:
        create_record: Main payment record for a committed project
        create_admin_fee_record: Admin-management fee record
        recompute_fees: Re-derive fees after the admin-managed flag flips
        create_order: Mint a gateway order for the record
        verify: Cross-check the gateway and apply the result
        apply_webhook_event: Apply a verified webhook delivery
        reconcile: Re-check a record against the gateway (background)
        mark_claimed_paid / mark_received: Manual UPI collection
        release / refund: Terminal escrow settlement (admin)
        upi_link: UPI deeplink for manual payment
        get_for_actor / get_by_project / list_for_user / list_all: Reads
    """

    # =========================================================================
    # Creation
    # =========================================================================

    @classmethod
    def create_record(
        cls,
        project_id,
        actor: User,
        total_amount=None,
    ) -> PaymentRecord:
        """
        Create the main payment record for a project.

        The amount defaults to the committed final budget. The service
        charge applies when the project is already under admin management.

        Raises:
            ForbiddenError: Actor is not the owning client or an admin
            NotFoundError: Project does not exist
            ValidationError: Project has no assigned freelancer, or no amount
            ConflictError: Project already has a main payment record
        """
        from projects.models import Project

        policy.require(actor, Capability.CREATE_PAYMENT_RECORD)

        project = Project.objects.select_related("created_by", "assigned_to").filter(pk=project_id).first()
        if project is None:
            raise NotFoundError(
                "Project not found",
                error_code="PROJECT_NOT_FOUND",
                details={"project_id": str(project_id)},
            )
        policy.require_owner_or_admin(actor, project)

        if project.assigned_to_id is None:
            raise ValidationError(
                "Project has no assigned freelancer",
                error_code="PROJECT_NOT_ASSIGNED",
                details={"project_id": str(project.id)},
            )
        if PaymentRecord.objects.main().filter(project=project).exists():
            raise ConflictError(
                "Payment record already exists for this project",
                error_code="PAYMENT_RECORD_EXISTS",
                details={"project_id": str(project.id)},
            )

        amount = total_amount if total_amount is not None else project.committed_budget
        if amount is None:
            raise ValidationError("Total amount is required", error_code="AMOUNT_REQUIRED")

        fees = compute_fees(amount, project.has_requested_admin_management)
        client = project.created_by

        try:
            with cls.atomic():
                record = PaymentRecord.objects.create(
                    project=project,
                    client=client,
                    freelancer=project.assigned_to,
                    total_amount=fees.total_amount,
                    currency=settings.PAYMENT_CURRENCY,
                    service_charge=fees.service_charge,
                    commission_fee=fees.commission_fee,
                    stage_amount=fees.grand_total,
                    customer_name=client.get_full_name(),
                    customer_email=client.email,
                    customer_phone=client.phone,
                )
                Project.objects.filter(pk=project.pk, payment__isnull=True).update(
                    payment=record,
                    updated_at=timezone.now(),
                )
        except IntegrityError as e:
            raise ConflictError(
                "Payment record already exists for this project",
                error_code="PAYMENT_RECORD_EXISTS",
                details={"project_id": str(project.id)},
            ) from e

        cls.get_logger().info(
            "Payment record created",
            extra={
                "payment_id": str(record.id),
                "project_id": str(project.id),
                "total_amount": str(record.total_amount),
                "service_charge": str(record.service_charge),
            },
        )
        NotificationService.notify(
            record.client_id,
            NotificationKind.PAYMENT,
            title="Payment due",
            preview=f"{record.stage_amount} {record.currency} for {project.title}",
            meta={"payment_id": record.id, "project_id": project.id},
        )
        return record

    @classmethod
    def create_admin_fee_record(cls, project: Project) -> PaymentRecord:
        """
        Create the admin-management fee record for a project.

        The fee is ADMIN_MANAGEMENT_FEE_PERCENT of the committed budget and
        carries no further platform fee. Moderation id collisions are
        retried with a fresh id.
        """
        base = to_amount(project.committed_budget or 0)
        amount = max(percent_of(base, settings.ADMIN_MANAGEMENT_FEE_PERCENT), Decimal("1"))

        for attempt in range(1, MODERATION_ID_ATTEMPTS + 1):
            moderation_id = generate_moderation_id()
            try:
                with transaction.atomic():
                    record = PaymentRecord.objects.create(
                        project=project,
                        client_id=project.created_by_id,
                        freelancer=None,
                        total_amount=amount,
                        currency=settings.PAYMENT_CURRENCY,
                        service_charge=Decimal("0"),
                        commission_fee=Decimal("0"),
                        stage_amount=amount,
                        is_admin_management_fee=True,
                        moderation_id=moderation_id,
                        customer_name=project.created_by.get_full_name(),
                        customer_email=project.created_by.email,
                        customer_phone=project.created_by.phone,
                    )
            except IntegrityError:
                if not PaymentRecord.objects.filter(moderation_id=moderation_id).exists():
                    raise
                cls.get_logger().warning(
                    "Moderation id collision, regenerating",
                    extra={"project_id": str(project.id), "attempt": attempt},
                )
                continue

            cls.get_logger().info(
                "Admin management fee record created",
                extra={
                    "payment_id": str(record.id),
                    "project_id": str(project.id),
                    "moderation_id": moderation_id,
                    "total_amount": str(amount),
                },
            )
            return record

        raise ConflictError(
            "Could not allocate a moderation id",
            error_code="MODERATION_ID_EXHAUSTED",
            details={"project_id": str(project.id)},
        )

    @classmethod
    def recompute_fees(cls, record_id, admin_managed: bool) -> PaymentRecord:
        """
        Recompute fees after the admin-managed flag changed.

        An outstanding gateway order for the old amount is dropped and the
        stage goes back to pending.

        Raises:
            InvalidStateError: The record is already paid
        """
        record, transition = cls._apply(
            record_id,
            lambda state: transitions.recompute_fees(state, admin_managed),
        )
        if "gateway_order_id" in transition.changes:
            cls.get_logger().info(
                "Gateway order dropped after fee change",
                extra={"payment_id": str(record.id), "stage_amount": str(record.stage_amount)},
            )
        return record

    # =========================================================================
    # Gateway Collection
    # =========================================================================

    @classmethod
    def create_order(
        cls,
        record_id,
        actor: User,
        *,
        gateway: CashfreeAdapter,
    ) -> tuple[PaymentRecord, OrderResult]:
        """
        Mint a gateway order for the record and store its id.

        Safe to call repeatedly before payment; the last order wins. A
        gateway failure or timeout leaves the record unchanged.

        Raises:
            ForbiddenError: Actor is not the paying client
            ValidationError: Record is already paid, or client has no phone
            GatewayError: Gateway failure, with upstream detail
        """
        record = cls._get(record_id)
        cls._require_payer(actor, record)

        # Fail fast before creating an order for a record that cannot take one
        transitions.record_order(PaymentState.from_record(record), "pending", "pending")

        if not record.customer_phone:
            raise ValidationError(
                "A phone number is required to pay through the gateway",
                error_code="CUSTOMER_PHONE_REQUIRED",
            )

        params = CreateOrderParams(
            order_id=generate_order_id(record),
            amount=record.stage_amount,
            currency=record.currency,
            customer=CustomerDetails(
                customer_id=f"user_{record.client_id}",
                name=record.customer_name or record.customer_email,
                email=record.customer_email,
                phone=record.customer_phone,
            ),
            return_url=settings.PAYMENT_RETURN_URL,
            notify_url=settings.PAYMENT_NOTIFY_URL,
        )
        order = gateway.create_order(params)

        record, _ = cls._apply(
            record.id,
            lambda state: transitions.record_order(state, order.order_id, order.session_token),
        )
        cls.get_logger().info(
            "Gateway order recorded",
            extra={"payment_id": str(record.id), "gateway_order_id": order.order_id},
        )
        return record, order

    @classmethod
    def verify(
        cls,
        record_id,
        gateway_order_id: str,
        actor: User,
        *,
        gateway: CashfreeAdapter,
    ) -> VerificationResult:
        """
        Cross-check payment status at the gateway and apply it.

        Idempotent: an already paid record is returned unchanged without
        calling the gateway. A gateway timeout leaves the record as it was,
        queues reconcile_payment_record for it and propagates.

        Raises:
            ForbiddenError: Actor is not a party to the payment
            ValidationError: Order id does not match the record
            GatewayError: Gateway failure (including GatewayTimeoutError)
        """
        record = cls._get(record_id)
        policy.require_payment_party(actor, record)

        if record.stage_status == StageStatus.PAID:
            return VerificationResult(record=record, outcome=GatewayOutcome.SUCCESS, changed=False)

        if not gateway_order_id or record.gateway_order_id != gateway_order_id:
            raise ValidationError(
                "Order id does not match this payment",
                error_code="ORDER_MISMATCH",
                details={"payment_id": str(record.id)},
            )

        try:
            status = gateway.fetch_payment_status(gateway_order_id)
        except GatewayTimeoutError:
            from payments.tasks import reconcile_payment_record

            cls.get_logger().warning(
                "Verification timed out, queueing reconciliation",
                extra={"payment_id": str(record.id), "gateway_order_id": gateway_order_id},
            )
            reconcile_payment_record.delay(str(record.id))
            raise

        return cls._apply_attempt(record.id, status.decisive_attempt(), source="verify")

    @classmethod
    def apply_webhook_event(cls, event: WebhookPayload) -> VerificationResult:
        """
        Apply a signature-verified webhook event.

        Success and failure events map exactly like verify(). Redelivery
        and late events are no-ops because the transitions re-check the
        current stage status.

        Raises:
            PaymentNotFoundError: No record holds the event's order id
        """
        record = PaymentRecord.objects.filter(gateway_order_id=event.order_id).first()
        if record is None:
            raise PaymentNotFoundError(
                "Payment record not found for order",
                details={"gateway_order_id": event.order_id},
            )

        if event.event_type in SUCCESS_EVENTS or event.event_type in FAILURE_EVENTS:
            attempt = event.attempt
            if attempt is not None and event.event_type in SUCCESS_EVENTS and attempt.outcome != GatewayOutcome.SUCCESS:
                cls.get_logger().warning(
                    "Success event carries a non-success attempt",
                    extra={"payment_id": str(record.id), "attempt_status": attempt.status},
                )
            if attempt is None or attempt.outcome == GatewayOutcome.PENDING:
                return VerificationResult(record=record, outcome=GatewayOutcome.PENDING, changed=False)
            return cls._apply_attempt(record.id, attempt, source="webhook")

        cls.get_logger().info(
            "Ignoring unhandled webhook event type",
            extra={"payment_id": str(record.id), "event_type": event.event_type},
        )
        return VerificationResult(record=record, outcome=GatewayOutcome.PENDING, changed=False)

    @classmethod
    def reconcile(cls, record_id, *, gateway: CashfreeAdapter) -> VerificationResult:
        """Re-check a created order at the gateway without an acting user."""
        record = cls._get(record_id)
        if record.stage_status != StageStatus.CREATED or not record.gateway_order_id:
            return VerificationResult(record=record, outcome=GatewayOutcome.PENDING, changed=False)
        status = gateway.fetch_payment_status(record.gateway_order_id)
        return cls._apply_attempt(record.id, status.decisive_attempt(), source="reconcile")

    @classmethod
    def _apply_attempt(cls, record_id, attempt: PaymentAttempt | None, source: str) -> VerificationResult:
        if attempt is None:
            record = cls._get(record_id)
            return VerificationResult(record=record, outcome=GatewayOutcome.PENDING, changed=False)

        if attempt.outcome == GatewayOutcome.SUCCESS:
            paid_at = attempt.payment_time or timezone.now()
            build = lambda state: transitions.apply_gateway_success(  # noqa: E731
                state,
                gateway_payment_id=attempt.gateway_payment_id,
                paid_at=paid_at,
            )
        elif attempt.outcome == GatewayOutcome.FAILED:
            build = lambda state: transitions.apply_gateway_failure(  # noqa: E731
                state,
                error_code=attempt.error_code or attempt.status,
                error_message=attempt.error_description,
            )
        else:
            record = cls._get(record_id)
            return VerificationResult(record=record, outcome=GatewayOutcome.PENDING, changed=False)

        record, transition = cls._apply(
            record_id,
            build,
            extra_changes={"raw_gateway_response": {"source": source, "payment": attempt.raw}},
        )

        if not transition.is_noop:
            cls.get_logger().info(
                f"Gateway outcome applied: {attempt.outcome}",
                extra={
                    "payment_id": str(record.id),
                    "gateway_order_id": record.gateway_order_id,
                    "gateway_payment_id": attempt.gateway_payment_id,
                    "source": source,
                },
            )
            if attempt.outcome == GatewayOutcome.SUCCESS:
                cls._notify_paid(record)
            else:
                NotificationService.notify(
                    record.client_id,
                    NotificationKind.PAYMENT,
                    title="Payment failed",
                    preview=record.error_message or "Your payment could not be completed",
                    meta={"payment_id": record.id, "project_id": record.project_id},
                )

        return VerificationResult(
            record=record,
            outcome=GatewayOutcome.SUCCESS if record.stage_status == StageStatus.PAID else attempt.outcome,
            changed=not transition.is_noop,
        )

    # =========================================================================
    # Manual (UPI) Collection
    # =========================================================================

    @classmethod
    def mark_claimed_paid(cls, record_id, actor: User) -> PaymentRecord:
        """
        Client declares an off-gateway payment as sent.

        Raises:
            ForbiddenError: Actor is not the paying client
            InvalidStateError: Record is not pending/created
        """
        record = cls._get(record_id)
        cls._require_payer(actor, record)

        record, transition = cls._apply(record.id, lambda state: transitions.claim_paid(state, timezone.now()))
        if not transition.is_noop:
            payee_id = record.freelancer_id
            if record.is_admin_management_fee:
                admin = type(actor).objects.first_admin()
                payee_id = admin.pk if admin else None
            NotificationService.notify(
                payee_id,
                NotificationKind.PAYMENT,
                title="Payment marked as sent",
                preview=f"Client reports {record.stage_amount} {record.currency} sent. Please confirm receipt.",
                meta={"payment_id": record.id, "project_id": record.project_id},
            )
        return record

    @classmethod
    def mark_received(cls, record_id, actor: User) -> PaymentRecord:
        """
        Payee confirms an off-gateway payment arrived.

        The freelancer confirms main records; an admin confirms
        admin-management fee records.

        Raises:
            ForbiddenError: Actor is not the payee
            ValidationError: Nothing was claimed and the record is not paid
        """
        record = cls._get(record_id)
        if record.is_admin_management_fee:
            policy.require(actor, Capability.CONFIRM_ADMIN_FEE_RECEIPT)
        elif not (policy.can(actor, Capability.CONFIRM_RECEIPT) and actor.pk == record.freelancer_id):
            raise ForbiddenError(
                "Only the assigned freelancer can confirm receipt",
                error_code="NOT_PAYEE",
                details={"payment_id": str(record.id)},
            )

        record, transition = cls._apply(record.id, lambda state: transitions.confirm_received(state, timezone.now()))
        if not transition.is_noop and record.stage_status == StageStatus.PAID:
            cls._notify_paid(record)
        return record

    @classmethod
    def upi_link(cls, record_id, actor: User) -> dict[str, Any]:
        """
        Build a UPI deeplink for paying the record manually.

        Raises:
            ForbiddenError: Actor is not a party to the payment
            ValidationError: The platform UPI id is not configured
        """
        record = cls._get(record_id)
        policy.require_payment_party(actor, record)

        upi_id = settings.PLATFORM_UPI_ID
        if not upi_id:
            raise ValidationError("UPI payments are not configured", error_code="UPI_NOT_CONFIGURED")

        note = record.moderation_id or record.project.title or "Project payment"
        query = urlencode(
            {
                "pa": upi_id,
                "pn": settings.PLATFORM_UPI_PAYEE_NAME,
                "am": str(record.stage_amount),
                "cu": record.currency,
                "tn": note,
            }
        )
        return {
            "upi_link": f"upi://pay?{query}",
            "amount": str(record.stage_amount),
            "currency": record.currency,
            "note": note,
        }

    # =========================================================================
    # Escrow Settlement
    # =========================================================================

    @classmethod
    def release(cls, record_id, actor: User) -> PaymentRecord:
        """
        Release held funds to the freelancer. Terminal.

        Raises:
            ForbiddenError: Actor is not an admin
            ConflictError: Already released or refunded
            InvalidStateError: Payment is not final_paid
        """
        policy.require(actor, Capability.RELEASE_PAYMENT)
        record, _ = cls._apply(record_id, lambda state: transitions.release(state, timezone.now()))

        cls.get_logger().info(
            "Payment released",
            extra={
                "payment_id": str(record.id),
                "release_amount": str(record.release_amount),
                "actor_id": str(actor.pk),
            },
        )
        NotificationService.notify(
            record.freelancer_id,
            NotificationKind.PAYMENT,
            title="Payment released",
            preview=f"{record.release_amount} {record.currency} has been released to you",
            meta={"payment_id": record.id, "project_id": record.project_id},
        )
        return record

    @classmethod
    def refund(cls, record_id, actor: User) -> PaymentRecord:
        """
        Refund held funds to the client. Terminal.

        Raises:
            ForbiddenError: Actor is not an admin
            ConflictError: Already released or refunded
        """
        policy.require(actor, Capability.REFUND_PAYMENT)
        record, _ = cls._apply(record_id, lambda state: transitions.refund(state, timezone.now()))

        cls.get_logger().info(
            "Payment refunded",
            extra={"payment_id": str(record.id), "actor_id": str(actor.pk)},
        )
        NotificationService.notify(
            record.client_id,
            NotificationKind.PAYMENT,
            title="Payment refunded",
            preview=f"Your payment of {record.stage_amount} {record.currency} has been refunded",
            meta={"payment_id": record.id, "project_id": record.project_id},
        )
        return record

    # =========================================================================
    # Reads
    # =========================================================================

    @classmethod
    def get_for_actor(cls, record_id, actor: User) -> PaymentRecord:
        record = cls._get(record_id)
        policy.require_payment_party(actor, record)
        return record

    @classmethod
    def get_by_project(cls, project_id, actor: User) -> PaymentRecord:
        record = PaymentRecord.objects.main_for_project(project_id)
        if record is None:
            raise PaymentNotFoundError(
                "No payment record for this project",
                details={"project_id": str(project_id)},
            )
        policy.require_payment_party(actor, record)
        return record

    @classmethod
    def list_for_user(cls, actor: User):
        """
        Records where the actor is the paying client or the freelancer.

        Raises:
            ForbiddenError: Actor is neither a client nor a freelancer
        """
        queryset = PaymentRecord.objects.select_related("project")
        if actor.is_client:
            return queryset.filter(client=actor)
        if actor.is_freelancer:
            return queryset.filter(freelancer=actor)
        raise ForbiddenError(
            "Only clients and freelancers have payments",
            error_code="ROLE_HAS_NO_PAYMENTS",
        )

    @classmethod
    def list_all(cls, actor: User):
        policy.require(actor, Capability.VIEW_ALL_PAYMENTS)
        return PaymentRecord.objects.select_related("project", "client", "freelancer")

    # =========================================================================
    # Internals
    # =========================================================================

    @classmethod
    def _get(cls, record_id) -> PaymentRecord:
        record = PaymentRecord.objects.filter(pk=record_id).first()
        if record is None:
            raise PaymentNotFoundError(
                "Payment record not found",
                details={"payment_id": str(record_id)},
            )
        return record

    @classmethod
    def _require_payer(cls, actor: User, record: PaymentRecord) -> None:
        if not (policy.can(actor, Capability.PAY) and actor.pk == record.client_id):
            raise ForbiddenError(
                "Only the client of this project can pay",
                error_code="NOT_PAYER",
                details={"payment_id": str(record.id)},
            )

    @classmethod
    def _apply(
        cls,
        record_id,
        build: Callable[[PaymentState], Transition],
        extra_changes: dict[str, Any] | None = None,
    ) -> tuple[PaymentRecord, Transition]:
        """
        Evaluate ``build`` against the current row and write the result.

        The UPDATE is conditional on the row's version and on the
        transition's expected fields. A lost race re-reads and
        re-evaluates, up to MAX_APPLY_ATTEMPTS times.

        Raises:
            StaleRecordError: Lost the race on every attempt
            (plus whatever ``build`` raises for the current state)
        """
        logger = cls.get_logger()

        for attempt in range(1, MAX_APPLY_ATTEMPTS + 1):
            record = cls._get(record_id)
            transition = build(PaymentState.from_record(record))
            if transition.is_noop:
                return record, transition

            changes = {**transition.changes, **(extra_changes or {})}
            updated = PaymentRecord.objects.filter(
                pk=record.pk,
                version=record.version,
                **transition.expected,
            ).update(
                **changes,
                version=F("version") + 1,
                updated_at=timezone.now(),
            )

            if updated:
                record.refresh_from_db()
                logger.debug(
                    f"Applied transition {transition.name}",
                    extra={"payment_id": str(record.pk), "version": record.version},
                )
                return record, transition

            logger.info(
                "Concurrent update detected, re-evaluating transition",
                extra={"payment_id": str(record.pk), "transition": transition.name, "attempt": attempt},
            )

        raise StaleRecordError(
            "Payment record is being modified concurrently, please retry",
            details={"payment_id": str(record_id)},
        )

    @classmethod
    def _notify_paid(cls, record: PaymentRecord) -> None:
        meta = {"payment_id": record.id, "project_id": record.project_id}
        NotificationService.notify(
            record.client_id,
            NotificationKind.PAYMENT,
            title="Payment successful",
            preview=f"{record.stage_amount} {record.currency} received and held in escrow",
            meta=meta,
        )
        if record.freelancer_id:
            NotificationService.notify(
                record.freelancer_id,
                NotificationKind.PAYMENT,
                title="Client payment received",
                preview="Funds for your project are held in escrow until release",
                meta=meta,
            )
