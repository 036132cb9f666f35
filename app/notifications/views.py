"""
Views for notification API.

Endpoints:
    GET  /api/v1/notifications/            - List user's notifications (?is_read=false for unread)
    GET  /api/v1/notifications/{id}/       - Get notification detail
    POST /api/v1/notifications/{id}/read/  - Mark single notification as read
    POST /api/v1/notifications/read-all/   - Mark all notifications as read
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from core.responses import success_response
from notifications.models import Notification
from notifications.serializers import NotificationSerializer
from notifications.services import NotificationService


@extend_schema_view(
    list=extend_schema(
        operation_id="list_notifications",
        summary="List notifications",
        parameters=[
            OpenApiParameter(
                name="is_read",
                type=bool,
                location=OpenApiParameter.QUERY,
                description="Filter by read status (true/false)",
                required=False,
            ),
        ],
        tags=["Notifications"],
    ),
    retrieve=extend_schema(
        operation_id="get_notification",
        summary="Get notification",
        tags=["Notifications"],
    ),
)
class NotificationViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for the authenticated user's notifications.

    Users can only access their own notifications.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = NotificationSerializer

    def get_queryset(self):
        queryset = Notification.objects.filter(recipient=self.request.user)

        is_read = self.request.query_params.get("is_read")
        if is_read is not None:
            queryset = queryset.filter(is_read=is_read.lower() == "true")

        return queryset

    def list(self, request, *args, **kwargs):
        serializer = self.get_serializer(self.get_queryset(), many=True)
        return success_response(serializer.data)

    def retrieve(self, request, *args, **kwargs):
        return success_response(self.get_serializer(self.get_object()).data)

    @extend_schema(
        operation_id="mark_notification_read",
        summary="Mark notification as read",
        request=None,
        tags=["Notifications"],
    )
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        notification = NotificationService.mark_as_read(self.get_object(), request.user)
        return success_response(self.get_serializer(notification).data)

    @extend_schema(
        operation_id="mark_all_notifications_read",
        summary="Mark all notifications as read",
        request=None,
        tags=["Notifications"],
    )
    @action(detail=False, methods=["post"], url_path="read-all")
    def read_all(self, request):
        count = NotificationService.mark_all_as_read(request.user)
        return success_response({"marked_count": count})
