"""
DRF views for payments app.

Endpoints:
    POST /api/v1/payments/records/                          - Create main payment record
    GET  /api/v1/payments/records/{id}/                     - Get payment record
    GET  /api/v1/payments/records/project/{project_id}/     - Main record for a project
    GET  /api/v1/payments/records/mine/                     - Records where I pay or get paid
    GET  /api/v1/payments/records/all/                      - All records (admin)
    POST /api/v1/payments/records/{id}/create-order/        - Create gateway order
    POST /api/v1/payments/records/{id}/verify/              - Verify gateway payment
    POST /api/v1/payments/records/{id}/mark-paid/           - Client claims manual payment
    POST /api/v1/payments/records/{id}/mark-received/       - Payee confirms manual payment
    GET  /api/v1/payments/records/{id}/upi-link/            - UPI deeplink for manual payment
    POST /api/v1/payments/records/{id}/release/             - Release to freelancer (admin)
    POST /api/v1/payments/records/{id}/refund/              - Refund to client (admin)

Security:
    - All endpoints require authentication
    - Ownership and role checks happen in PaymentRecordService
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from authentication.permissions import HasCapability
from authentication.policy import Capability
from core.responses import success_response
from payments.adapters import CashfreeAdapter
from payments.exceptions import PaymentFailedError
from payments.serializers import (
    CreateOrderResponseSerializer,
    CreatePaymentRecordSerializer,
    PaymentRecordSerializer,
    UpiLinkSerializer,
    VerifyPaymentSerializer,
)
from payments.services import PaymentRecordService
from payments.state_machines import GatewayOutcome


class PaymentRecordViewSet(viewsets.GenericViewSet):
    """
    Payment record lifecycle endpoints.

    The gateway adapter is created per request and closed afterwards.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = PaymentRecordSerializer
    lookup_value_regex = "[0-9a-f-]{32,36}"
    required_capability: Capability | None = None

    def get_gateway(self) -> CashfreeAdapter:
        return CashfreeAdapter.from_settings()

    def _record_response(self, record, message: str = "", status_code: int = status.HTTP_200_OK):
        return success_response(PaymentRecordSerializer(record).data, message=message, status=status_code)

    @extend_schema(
        operation_id="create_payment_record",
        summary="Create payment record",
        request=CreatePaymentRecordSerializer,
        responses={201: PaymentRecordSerializer},
        tags=["Payments"],
    )
    def create(self, request):
        serializer = CreatePaymentRecordSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        record = PaymentRecordService.create_record(
            serializer.validated_data["project_id"],
            actor=request.user,
            total_amount=serializer.validated_data.get("total_amount"),
        )
        return self._record_response(record, "Payment record created", status.HTTP_201_CREATED)

    @extend_schema(operation_id="get_payment_record", summary="Get payment record", tags=["Payments"])
    def retrieve(self, request, pk=None):
        return self._record_response(PaymentRecordService.get_for_actor(pk, request.user))

    @extend_schema(
        operation_id="get_project_payment_record",
        summary="Get a project's payment record",
        tags=["Payments"],
    )
    @action(detail=False, methods=["get"], url_path=r"project/(?P<project_id>[0-9a-f-]{32,36})")
    def by_project(self, request, project_id=None):
        return self._record_response(PaymentRecordService.get_by_project(project_id, request.user))

    @extend_schema(
        operation_id="list_my_payment_records",
        summary="List my payment records",
        responses={200: PaymentRecordSerializer(many=True)},
        tags=["Payments"],
    )
    @action(detail=False, methods=["get"])
    def mine(self, request):
        records = PaymentRecordService.list_for_user(request.user)
        return success_response(PaymentRecordSerializer(records, many=True).data)

    @extend_schema(
        operation_id="list_all_payment_records",
        summary="List all payment records",
        responses={200: PaymentRecordSerializer(many=True)},
        tags=["Payments"],
    )
    @action(
        detail=False,
        methods=["get"],
        url_path="all",
        permission_classes=[IsAuthenticated, HasCapability],
        required_capability=Capability.VIEW_ALL_PAYMENTS,
    )
    def list_all(self, request):
        records = PaymentRecordService.list_all(request.user)
        return success_response(PaymentRecordSerializer(records, many=True).data)

    @extend_schema(
        operation_id="create_payment_order",
        summary="Create gateway order",
        request=None,
        responses={201: CreateOrderResponseSerializer},
        tags=["Payments"],
    )
    @action(detail=True, methods=["post"], url_path="create-order")
    def create_order(self, request, pk=None):
        with self.get_gateway() as gateway:
            record, order = PaymentRecordService.create_order(pk, request.user, gateway=gateway)
        return success_response(
            {
                **CreateOrderResponseSerializer(order).data,
                "payment": PaymentRecordSerializer(record).data,
            },
            message="Order created",
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        operation_id="verify_payment",
        summary="Verify gateway payment",
        request=VerifyPaymentSerializer,
        tags=["Payments"],
    )
    @action(detail=True, methods=["post"])
    def verify(self, request, pk=None):
        serializer = VerifyPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        with self.get_gateway() as gateway:
            result = PaymentRecordService.verify(
                pk,
                serializer.validated_data["order_id"],
                request.user,
                gateway=gateway,
            )
        payload = {"outcome": str(result.outcome), "payment": PaymentRecordSerializer(result.record).data}
        if result.outcome == GatewayOutcome.FAILED:
            # The failed stage stays committed; only the envelope reports failure.
            raise PaymentFailedError("Payment verification failed", details=payload)
        return success_response(
            payload,
            message="Payment verified" if result.is_paid else "Payment not completed",
        )

    @extend_schema(operation_id="mark_payment_paid", summary="Mark manual payment as sent", request=None, tags=["Payments"])
    @action(detail=True, methods=["post"], url_path="mark-paid")
    def mark_paid(self, request, pk=None):
        record = PaymentRecordService.mark_claimed_paid(pk, request.user)
        return self._record_response(record, "Payment marked as sent")

    @extend_schema(
        operation_id="mark_payment_received",
        summary="Confirm manual payment received",
        request=None,
        tags=["Payments"],
    )
    @action(detail=True, methods=["post"], url_path="mark-received")
    def mark_received(self, request, pk=None):
        record = PaymentRecordService.mark_received(pk, request.user)
        return self._record_response(record, "Payment confirmed")

    @extend_schema(
        operation_id="get_payment_upi_link",
        summary="Get UPI payment link",
        responses={200: UpiLinkSerializer},
        tags=["Payments"],
    )
    @action(detail=True, methods=["get"], url_path="upi-link")
    def upi_link(self, request, pk=None):
        return success_response(PaymentRecordService.upi_link(pk, request.user))

    @extend_schema(operation_id="release_payment", summary="Release payment to freelancer", request=None, tags=["Payments"])
    @action(detail=True, methods=["post"])
    def release(self, request, pk=None):
        record = PaymentRecordService.release(pk, request.user)
        return self._record_response(record, "Payment released")

    @extend_schema(operation_id="refund_payment", summary="Refund payment to client", request=None, tags=["Payments"])
    @action(detail=True, methods=["post"])
    def refund(self, request, pk=None):
        record = PaymentRecordService.refund(pk, request.user)
        return self._record_response(record, "Payment refunded")
