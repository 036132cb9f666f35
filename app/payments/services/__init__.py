"""
Payment services for the escrow payment lifecycle.

This module provides:
- PaymentRecordService: Record creation, gateway collection, manual (UPI)
  collection, release and refund
- VerificationResult: Outcome of verify() and of applied webhook events

Usage:
    from payments.services import PaymentRecordService

    record = PaymentRecordService.create_record(project.id, actor=client)

    with CashfreeAdapter.from_settings() as gateway:
        record, order = PaymentRecordService.create_order(record.id, client, gateway=gateway)

    PaymentRecordService.release(record.id, actor=admin)
"""

from payments.services.payment_service import (
    PaymentRecordService,
    VerificationResult,
    generate_moderation_id,
)

__all__ = [
    "PaymentRecordService",
    "VerificationResult",
    "generate_moderation_id",
]
