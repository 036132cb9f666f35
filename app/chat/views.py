"""
DRF views for chat app.

Endpoints:
    GET    /api/v1/chat/chats/                                - List user's chats
    GET    /api/v1/chat/chats/{id}/                           - Get chat
    GET    /api/v1/chat/chats/{id}/messages/                  - List messages
    POST   /api/v1/chat/chats/{id}/messages/                  - Send message
    POST   /api/v1/chat/chats/{id}/read/                      - Mark messages read
    POST   /api/v1/chat/chats/{id}/proceed/                   - Commit to this freelancer
    POST   /api/v1/chat/chats/{id}/add-admin/                 - Admin joins the chat
    POST   /api/v1/chat/chats/{id}/participants/              - Add group participant
    DELETE /api/v1/chat/chats/{id}/participants/{user_id}/    - Remove group participant
"""

from __future__ import annotations

from drf_spectacular.utils import extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from chat.serializers import (
    AddParticipantSerializer,
    ChatMessageSerializer,
    ChatSerializer,
    ProceedSerializer,
    SendMessageSerializer,
)
from chat.services import ChatMessaging
from core.responses import success_response
from projects.serializers import ProjectSerializer
from projects.services import ProjectCommitmentWorkflow


@extend_schema_view(
    list=extend_schema(operation_id="list_chats", summary="List chats", tags=["Chat"]),
    retrieve=extend_schema(operation_id="get_chat", summary="Get chat", tags=["Chat"]),
)
class ChatViewSet(viewsets.GenericViewSet):
    """
    Chats the authenticated user participates in.

    Admins can read any chat and join it with add-admin.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ChatSerializer
    lookup_value_regex = "[0-9a-f-]{32,36}"

    def list(self, request):
        chats = ChatMessaging.list_for_user(request.user)
        return success_response(ChatSerializer(chats, many=True).data)

    def retrieve(self, request, pk=None):
        chat = ChatMessaging.get_for_user(pk, request.user)
        return success_response(ChatSerializer(chat).data)

    @extend_schema(
        operation_id="chat_messages",
        summary="List or send messages",
        request=SendMessageSerializer,
        responses={200: ChatMessageSerializer(many=True), 201: ChatMessageSerializer},
        tags=["Chat"],
    )
    @action(detail=True, methods=["get", "post"])
    def messages(self, request, pk=None):
        if request.method == "GET":
            messages = ChatMessaging.list_messages(pk, request.user)
            return success_response(ChatMessageSerializer(messages, many=True).data)

        serializer = SendMessageSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        message = ChatMessaging.send_message(pk, request.user, serializer.validated_data["content"])
        return success_response(
            ChatMessageSerializer(message).data,
            message="Message sent",
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(operation_id="mark_chat_read", summary="Mark messages read", request=None, tags=["Chat"])
    @action(detail=True, methods=["post"])
    def read(self, request, pk=None):
        count = ChatMessaging.mark_read(pk, request.user)
        return success_response({"marked_count": count}, message=f"Marked {count} messages as read")

    @extend_schema(
        operation_id="proceed_with_freelancer",
        summary="Commit to this chat's freelancer",
        request=ProceedSerializer,
        responses={200: ProjectSerializer},
        tags=["Chat"],
    )
    @action(detail=True, methods=["post"])
    def proceed(self, request, pk=None):
        serializer = ProceedSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        project = ProjectCommitmentWorkflow.proceed_with_freelancer(
            pk,
            serializer.validated_data["final_budget"],
            request.user,
        )
        return success_response(ProjectSerializer(project).data, message="Freelancer committed")

    @extend_schema(operation_id="chat_add_admin", summary="Join chat as admin", request=None, tags=["Chat"])
    @action(detail=True, methods=["post"], url_path="add-admin")
    def add_admin(self, request, pk=None):
        chat = ChatMessaging.add_admin(pk, request.user)
        return success_response(ChatSerializer(chat).data, message="Admin added")

    @extend_schema(
        operation_id="chat_add_participant",
        summary="Add group participant",
        request=AddParticipantSerializer,
        tags=["Chat"],
    )
    @action(detail=True, methods=["post"])
    def participants(self, request, pk=None):
        serializer = AddParticipantSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        chat = ChatMessaging.add_participant(pk, serializer.validated_data["user_id"], request.user)
        return success_response(
            ChatSerializer(chat).data,
            message="Participant added",
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(operation_id="chat_remove_participant", summary="Remove group participant", tags=["Chat"])
    @action(detail=True, methods=["delete"], url_path=r"participants/(?P<user_id>\d+)")
    def remove_participant(self, request, pk=None, user_id=None):
        chat = ChatMessaging.remove_participant(pk, int(user_id), request.user)
        return success_response(ChatSerializer(chat).data, message="Participant removed")
