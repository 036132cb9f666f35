"""
Factory Boy factories for payment test data.

Usage:
    from payments.tests.factories import PaymentRecordFactory, WebhookEventFactory

    # Unpaid main record for a committed project (1200 base, no service charge)
    record = PaymentRecordFactory()

    # Record with a gateway order waiting for payment
    record = PaymentRecordFactory(created=True)

    # Paid and held in escrow
    record = PaymentRecordFactory(paid=True)
"""

import uuid
from decimal import Decimal

import factory
from django.utils import timezone

from payments.models import PaymentRecord, WebhookEvent
from payments.state_machines import (
    OverallStatus,
    PaymentMethod,
    StageStatus,
    WebhookEventStatus,
)
from projects.tests.factories import InProgressProjectFactory


class PaymentRecordFactory(factory.django.DjangoModelFactory):
    """
    Main payment record for an in-progress project.

    Amounts follow the fee rules for a non admin-managed project:
    1200 base, 0 service charge, 120 commission.

    Traits:
        created: Gateway order minted, waiting for payment
        paid: Collected through the gateway and held in escrow
    """

    class Meta:
        model = PaymentRecord

    project = factory.SubFactory(InProgressProjectFactory)
    client = factory.SelfAttribute("project.created_by")
    freelancer = factory.SelfAttribute("project.assigned_to")
    total_amount = Decimal("1200")
    currency = "INR"
    service_charge = Decimal("0")
    commission_fee = Decimal("120")
    stage_amount = factory.LazyAttribute(lambda o: o.total_amount + o.service_charge)
    customer_name = factory.LazyAttribute(lambda o: o.client.get_full_name())
    customer_email = factory.LazyAttribute(lambda o: o.client.email)
    customer_phone = factory.LazyAttribute(lambda o: o.client.phone)

    class Params:
        created = factory.Trait(
            stage_status=StageStatus.CREATED,
            gateway_order_id=factory.LazyFunction(lambda: f"order-{uuid.uuid4().hex[:12]}"),
            payment_session_id="session_test",
            payment_method=PaymentMethod.GATEWAY,
        )
        paid = factory.Trait(
            stage_status=StageStatus.PAID,
            overall_status=OverallStatus.FINAL_PAID,
            gateway_order_id=factory.LazyFunction(lambda: f"order-{uuid.uuid4().hex[:12]}"),
            gateway_payment_id="cf_pay_1",
            payment_method=PaymentMethod.GATEWAY,
            completed_at=factory.LazyFunction(timezone.now),
        )


class AdminFeeRecordFactory(PaymentRecordFactory):
    """Admin-management fee record: 5% of the committed budget, no payee."""

    freelancer = None
    total_amount = Decimal("60")
    commission_fee = Decimal("0")
    is_admin_management_fee = True
    moderation_id = factory.Sequence(lambda n: f"MOD-{10000 + n}")


class WebhookEventFactory(factory.django.DjangoModelFactory):
    """PENDING PAYMENT_SUCCESS delivery."""

    class Meta:
        model = WebhookEvent

    delivery_key = factory.LazyFunction(lambda: uuid.uuid4().hex + uuid.uuid4().hex)
    event_type = "PAYMENT_SUCCESS"
    gateway_order_id = factory.Sequence(lambda n: f"order-{n}")
    payload = factory.LazyAttribute(
        lambda o: {"type": "PAYMENT_SUCCESS_WEBHOOK", "data": {"order": {"order_id": o.gateway_order_id}}}
    )
    status = WebhookEventStatus.PENDING
