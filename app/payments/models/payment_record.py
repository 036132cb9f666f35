"""
PaymentRecord model: escrow-style payment for one project.

A record collects money from the client (the "stage"), holds it, and is
finally released to the freelancer or refunded to the client by an admin.
Admin-management fees are separate records flagged with
is_admin_management_fee and identified by a moderation id.

State changes never go through save(): PaymentRecordService writes them
as conditional UPDATEs built by payments.state_machines.transitions.

Usage:
    from payments.models import PaymentRecord
    from payments.state_machines import StageStatus

    record = PaymentRecord.objects.main_for_project(project.id)
    if record and record.stage_status == StageStatus.PAID:
        ...
"""

from __future__ import annotations

from decimal import Decimal

from django.conf import settings
from django.db import models
from django.db.models import Q

from core.model_mixins import UUIDPrimaryKeyMixin
from core.models import BaseModel
from payments.state_machines import (
    OverallStatus,
    PaymentMethod,
    ReleaseStatus,
    StageStatus,
)


class PaymentRecordQuerySet(models.QuerySet):
    def main(self):
        return self.filter(is_admin_management_fee=False)

    def main_for_project(self, project_id):
        return self.main().filter(project_id=project_id).first()

    def for_user(self, user):
        return self.filter(Q(client=user) | Q(freelancer=user))


class PaymentRecord(UUIDPrimaryKeyMixin, BaseModel):
    """
    Escrow payment for a project.

    Invariants (enforced by constraints and transitions):
        - at most one non-fee record per project
        - stage_amount == total_amount + service_charge
        - release_status only moves not_released → released | refunded
        - freelancer is required unless is_admin_management_fee
        - moderation_id is set iff is_admin_management_fee

    Fields:
        project/client/freelancer: Parties of the payment
        total_amount: Base project amount (finalBudget at commitment)
        service_charge/commission_fee: Platform fees
        stage_*: Collection stage (amount charged, status, gateway ids)
        overall_status: Escrow status of the whole payment
        release_amount/release_status: Settlement outcome
        version: Optimistic locking version, bumped on every transition
    """

    # ==========================================================================
    # Relationships
    # ==========================================================================

    project = models.ForeignKey(
        "projects.Project",
        on_delete=models.PROTECT,
        related_name="payment_records",
    )
    client = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name="payments_as_client",
    )
    freelancer = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="payments_as_freelancer",
    )

    # ==========================================================================
    # Amounts
    # ==========================================================================

    total_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Base amount agreed for the project",
    )
    currency = models.CharField(max_length=3, default="INR")
    service_charge = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0"),
        help_text="Charged to the client on top of total_amount (admin-managed projects)",
    )
    commission_fee = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        default=Decimal("0"),
        help_text="Deducted from the freelancer's share at release",
    )

    # ==========================================================================
    # Collection Stage
    # ==========================================================================

    stage_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="Amount collected from the client (total_amount + service_charge)",
    )
    stage_status = models.CharField(
        max_length=20,
        choices=StageStatus.choices,
        default=StageStatus.PENDING,
        db_index=True,
    )
    gateway_order_id = models.CharField(
        max_length=64,
        unique=True,
        null=True,
        blank=True,
        help_text="Order id minted at the gateway; the last order created wins",
    )
    payment_session_id = models.CharField(max_length=255, null=True, blank=True)
    gateway_payment_id = models.CharField(max_length=64, null=True, blank=True)
    gateway_signature = models.CharField(max_length=255, null=True, blank=True)
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        null=True,
        blank=True,
    )
    claimed_paid = models.BooleanField(
        default=False,
        help_text="Client declared a manual (UPI) payment as sent",
    )
    claimed_paid_at = models.DateTimeField(null=True, blank=True)
    error_code = models.CharField(max_length=100, null=True, blank=True)
    error_message = models.CharField(max_length=500, null=True, blank=True)
    completed_at = models.DateTimeField(null=True, blank=True)

    customer_name = models.CharField(max_length=150, blank=True, default="")
    customer_email = models.EmailField(blank=True, default="")
    customer_phone = models.CharField(max_length=20, blank=True, default="")

    # ==========================================================================
    # Escrow Settlement
    # ==========================================================================

    overall_status = models.CharField(
        max_length=20,
        choices=OverallStatus.choices,
        default=OverallStatus.PENDING,
        db_index=True,
    )
    release_amount = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        null=True,
        blank=True,
    )
    release_status = models.CharField(
        max_length=20,
        choices=ReleaseStatus.choices,
        default=ReleaseStatus.NOT_RELEASED,
    )
    released_at = models.DateTimeField(null=True, blank=True)
    refunded_at = models.DateTimeField(null=True, blank=True)

    # ==========================================================================
    # Admin Management Fee
    # ==========================================================================

    is_admin_management_fee = models.BooleanField(default=False)
    moderation_id = models.CharField(
        max_length=16,
        unique=True,
        null=True,
        blank=True,
        help_text="MOD-xxxxx reference for manual reconciliation of fee payments",
    )

    # ==========================================================================
    # Audit & Concurrency
    # ==========================================================================

    raw_gateway_response = models.JSONField(
        default=dict,
        blank=True,
        help_text="Last gateway payload applied to this record",
    )
    version = models.PositiveIntegerField(
        default=1,
        help_text="Version for optimistic locking - incremented on each transition",
    )

    objects = PaymentRecordQuerySet.as_manager()

    class Meta:
        ordering = ["-created_at"]
        verbose_name = "Payment Record"
        verbose_name_plural = "Payment Records"
        indexes = [
            models.Index(fields=["client", "created_at"]),
            models.Index(fields=["freelancer", "created_at"]),
            models.Index(fields=["stage_status", "updated_at"]),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["project"],
                condition=Q(is_admin_management_fee=False),
                name="payment_one_main_record_per_project",
            ),
            models.CheckConstraint(
                condition=Q(is_admin_management_fee=True) | Q(freelancer__isnull=False),
                name="payment_freelancer_required_for_main_record",
            ),
            models.CheckConstraint(
                condition=(
                    Q(is_admin_management_fee=True, moderation_id__isnull=False)
                    | Q(is_admin_management_fee=False, moderation_id__isnull=True)
                ),
                name="payment_moderation_id_iff_fee",
            ),
            models.CheckConstraint(
                condition=Q(total_amount__gt=0),
                name="payment_total_amount_positive",
            ),
        ]

    def __str__(self) -> str:
        label = self.moderation_id or "main"
        return f"PaymentRecord({self.id}, {label}, {self.stage_status}/{self.overall_status})"

    @property
    def is_paid(self) -> bool:
        return self.stage_status == StageStatus.PAID

    @property
    def grand_total(self) -> Decimal:
        return self.total_amount + self.service_charge
