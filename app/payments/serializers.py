"""
DRF serializers for payments app.

This module provides serializers for:
- PaymentRecord display
- Record creation, order creation and verification requests

Usage:
    serializer = PaymentRecordSerializer(record)
    data = serializer.data
"""

from __future__ import annotations

from rest_framework import serializers

from payments.models import PaymentRecord


class PaymentRecordSerializer(serializers.ModelSerializer):
    """
    PaymentRecord serializer for API responses.

    Gateway internals (signature, raw response) are never exposed.
    """

    grand_total = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = PaymentRecord
        fields = [
            "id",
            "project",
            "client",
            "freelancer",
            "total_amount",
            "currency",
            "service_charge",
            "commission_fee",
            "stage_amount",
            "grand_total",
            "stage_status",
            "gateway_order_id",
            "payment_session_id",
            "gateway_payment_id",
            "payment_method",
            "claimed_paid",
            "claimed_paid_at",
            "error_code",
            "error_message",
            "completed_at",
            "overall_status",
            "release_amount",
            "release_status",
            "released_at",
            "refunded_at",
            "is_admin_management_fee",
            "moderation_id",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


class CreatePaymentRecordSerializer(serializers.Serializer):
    """
    Create the main payment record for a project.

    Fields:
        project_id: Project the payment belongs to
        total_amount: Optional override, defaults to the committed budget
    """

    project_id = serializers.UUIDField()
    total_amount = serializers.DecimalField(
        max_digits=12,
        decimal_places=2,
        min_value=1,
        required=False,
    )


class CreateOrderResponseSerializer(serializers.Serializer):
    """Order handle the client hands to the gateway checkout."""

    order_id = serializers.CharField()
    payment_session_id = serializers.CharField(source="session_token")
    order_status = serializers.CharField(source="status")


class VerifyPaymentSerializer(serializers.Serializer):
    """Order id returned to the client by the gateway checkout."""

    order_id = serializers.CharField(max_length=64)


class UpiLinkSerializer(serializers.Serializer):
    upi_link = serializers.CharField()
    amount = serializers.CharField()
    currency = serializers.CharField()
    note = serializers.CharField()
