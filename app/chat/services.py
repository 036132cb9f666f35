"""
Chat system service layer.

Services:
    ChatStatusSync: Keeps chat status and lock flags in step with the
        project commitment workflow and writes the system-message audit trail
    ChatMessaging: Participant-facing operations (send, read, list, moderate)

Design Principles:
    - Services are stateless (use class methods)
    - Business rule violations raise core.exceptions
    - Status changes are conditional UPDATEs keyed on the previous status
    - System messages are generated for every workflow event

Usage:
    from chat.services import ChatMessaging, ChatStatusSync

    chat = ChatStatusSync.open_discussion(project, freelancer)
    committed, closed = ChatStatusSync.commit(chat)

    message = ChatMessaging.send_message(chat.id, sender=user, content="Hello!")
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.contrib.auth import get_user_model
from django.utils import timezone

from authentication import policy
from authentication.policy import Capability
from chat.models import Chat, ChatMessage, ChatStatus, ChatType, MessageType, SystemEvent
from core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from core.services import BaseService
from notifications.models import NotificationKind
from notifications.services import NotificationService

if TYPE_CHECKING:
    from authentication.models import User
    from projects.models import Project


MAX_MESSAGE_LENGTH = 5000


def _display_name(user: User) -> str:
    return user.get_full_name()


# =============================================================================
# ChatStatusSync
# =============================================================================


class ChatStatusSync(BaseService):
    """
    Mirrors commitment and admin-management events into chats.

    Methods:
        append_system_message: Append an immutable event message
        open_discussion: Discussion chat for a new application
        commit: Commit one discussion and close its siblings
        enable_admin_management: Lock the project's chats and bring in an admin
        add_admin: Add an admin participant to a chat
    """

    @classmethod
    def append_system_message(cls, chat: Chat, event: str, content: str) -> ChatMessage:
        """
        Append a system message to ``chat``.

        Should be called within the caller's transaction.
        """
        message = ChatMessage.objects.create(
            chat=chat,
            sender=None,
            message_type=MessageType.SYSTEM,
            event=event,
            content=content,
        )
        Chat.objects.filter(pk=chat.pk).update(
            last_message_at=message.created_at,
            updated_at=message.created_at,
        )
        chat.last_message_at = message.created_at
        return message

    @classmethod
    def open_discussion(cls, project: Project, freelancer: User) -> Chat:
        """
        Create the discussion chat between a freelancer and the project's client.

        Raises:
            ConflictError: A discussion already exists for this pair
        """
        if Chat.objects.filter(project=project, freelancer=freelancer, chat_type=ChatType.PROJECT).exists():
            raise ConflictError(
                "You already have a discussion for this project",
                error_code="DISCUSSION_EXISTS",
                details={"project_id": str(project.pk)},
            )

        chat = Chat.objects.create(
            chat_type=ChatType.PROJECT,
            name=project.title[:200],
            project=project,
            freelancer=freelancer,
            created_by=freelancer,
        )
        chat.participants.add(freelancer, project.created_by_id)
        cls.append_system_message(
            chat,
            SystemEvent.DISCUSSION_STARTED,
            f"{_display_name(freelancer)} started a discussion about {project.title}",
        )

        cls.get_logger().info(
            "Discussion opened",
            extra={"chat_id": str(chat.pk), "project_id": str(project.pk), "freelancer_id": freelancer.pk},
        )
        return chat

    @classmethod
    def commit(cls, chat: Chat) -> tuple[Chat, list[Chat]]:
        """
        Mark ``chat`` committed and close every other discussion of its project.

        Should be called within the caller's transaction.

        Raises:
            ConflictError: The chat (or a sibling) was committed first
            InvalidStateError: The chat is closed
        """
        if chat.status == ChatStatus.COMMITTED:
            raise ConflictError(
                "This discussion is already committed",
                error_code="CHAT_ALREADY_COMMITTED",
                details={"chat_id": str(chat.pk)},
            )

        previous = cls.run_transition(chat, "commit", error_code="CHAT_NOT_IN_DISCUSSION")
        if not cls.conditional_update(chat, ["status"], status=previous):
            raise ConflictError(
                "This discussion was changed by another request",
                error_code="CHAT_ALREADY_COMMITTED",
                details={"chat_id": str(chat.pk)},
            )

        freelancer_name = _display_name(chat.freelancer) if chat.freelancer_id else "the freelancer"
        cls.append_system_message(
            chat,
            SystemEvent.FREELANCER_COMMITTED,
            f"The client committed to {freelancer_name} for this project",
        )

        siblings = list(
            Chat.objects.filter(
                project_id=chat.project_id,
                chat_type=ChatType.PROJECT,
                status=ChatStatus.DISCUSSION,
            ).exclude(pk=chat.pk)
        )
        closed: list[Chat] = []
        for sibling in siblings:
            previous = cls.run_transition(sibling, "close")
            if not cls.conditional_update(sibling, ["status"], status=previous):
                continue
            cls.append_system_message(
                sibling,
                SystemEvent.DISCUSSION_CLOSED,
                "The client has chosen another freelancer. This discussion is closed.",
            )
            closed.append(sibling)

        cls.get_logger().info(
            "Discussion committed",
            extra={
                "chat_id": str(chat.pk),
                "project_id": str(chat.project_id),
                "closed_count": len(closed),
            },
        )
        return chat, closed

    @classmethod
    def add_admin(cls, chat: Chat, admin: User) -> bool:
        """
        Add ``admin`` to ``chat`` and flag it as admin-attended.

        Returns False if the admin was already a participant.
        """
        already = chat.has_participant(admin)
        if not already:
            chat.participants.add(admin)
        if not chat.admin_added:
            chat.admin_added = True
            Chat.objects.filter(pk=chat.pk).update(admin_added=True, updated_at=timezone.now())
        if already:
            return False
        cls.append_system_message(
            chat,
            SystemEvent.USER_ADDED,
            f"{_display_name(admin)} (admin) joined the chat",
        )
        return True

    @classmethod
    def enable_admin_management(
        cls,
        project: Project,
        admin: User | None,
    ) -> Chat:
        """
        Lock the project's group chat and committed discussion and add an admin.

        The group chat is created from the committed discussion's
        participants when the project has none. Locks are never lifted
        automatically.

        Should be called within the caller's transaction.
        """
        committed = Chat.objects.filter(
            project=project,
            chat_type=ChatType.PROJECT,
            status=ChatStatus.COMMITTED,
        ).first()

        group = Chat.objects.filter(project=project, chat_type=ChatType.GROUP).first()
        if group is None:
            group = Chat.objects.create(
                chat_type=ChatType.GROUP,
                name=f"{project.title[:180]} (managed)",
                project=project,
                created_by_id=project.created_by_id,
            )
            members = list(committed.participants.all()) if committed else [project.created_by]
            if project.assigned_to_id:
                members.append(project.assigned_to)
            group.participants.add(*members)

        chats = [group] + ([committed] if committed else [])
        for chat in chats:
            Chat.objects.filter(pk=chat.pk).update(is_locked=True, updated_at=timezone.now())
            chat.is_locked = True
            cls.append_system_message(
                chat,
                SystemEvent.ADMIN_MANAGEMENT_ENABLED,
                "Admin management is enabled. Only admins can send messages in this chat.",
            )
            if admin is not None:
                cls.add_admin(chat, admin)

        if admin is None:
            cls.get_logger().warning(
                "No active admin to add to managed chats",
                extra={"project_id": str(project.pk)},
            )

        cls.get_logger().info(
            "Admin management enabled for chats",
            extra={"project_id": str(project.pk), "chat_ids": [str(c.pk) for c in chats]},
        )
        return group


# =============================================================================
# ChatMessaging
# =============================================================================


class ChatMessaging(BaseService):
    """
    Participant-facing chat operations.

    Methods:
        get_for_user: Load a chat the user participates in
        list_for_user: User's chats, most recently active first
        list_messages: Messages of a chat in append order
        send_message: Send a user message
        mark_read: Mark others' messages as read
        add_admin: An admin joins a chat
        add_participant / remove_participant: Group membership
    """

    @classmethod
    def get_for_user(cls, chat_id, user: User) -> Chat:
        """
        Raises:
            NotFoundError: Chat does not exist
            ForbiddenError: User is not a participant (admins may read any chat)
        """
        chat = Chat.objects.select_related("project", "freelancer").filter(pk=chat_id).first()
        if chat is None:
            raise NotFoundError("Chat not found", error_code="CHAT_NOT_FOUND", details={"chat_id": str(chat_id)})
        if not policy.can(user, Capability.MODERATE_CHAT) and not chat.has_participant(user):
            raise ForbiddenError(
                "You are not a participant in this chat",
                error_code="NOT_PARTICIPANT",
                details={"chat_id": str(chat_id)},
            )
        return chat

    @classmethod
    def list_for_user(cls, user: User):
        return (
            Chat.objects.filter(participants=user)
            .select_related("project")
            .prefetch_related("participants")
            .order_by("-updated_at")
        )

    @classmethod
    def list_messages(cls, chat_id, user: User):
        chat = cls.get_for_user(chat_id, user)
        return chat.messages.select_related("sender").order_by("created_at", "id")

    @classmethod
    def send_message(cls, chat_id, sender: User, content: str) -> ChatMessage:
        """
        Send a user message.

        Raises:
            ForbiddenError: Sender is not a participant, or the chat is locked
                and the sender is not an admin
            ValidationError: Empty or oversized content, or the chat is closed
        """
        chat = cls.get_for_user(chat_id, sender)
        if not chat.has_participant(sender):
            raise ForbiddenError(
                "You are not a participant in this chat",
                error_code="NOT_PARTICIPANT",
                details={"chat_id": str(chat.pk)},
            )

        content = content.strip() if content else ""
        if not content:
            raise ValidationError("Message content cannot be empty", error_code="EMPTY_CONTENT")
        if len(content) > MAX_MESSAGE_LENGTH:
            raise ValidationError(
                f"Message content cannot exceed {MAX_MESSAGE_LENGTH} characters",
                error_code="CONTENT_TOO_LONG",
            )

        if chat.status == ChatStatus.CLOSED:
            raise ValidationError(
                "This discussion is closed",
                error_code="CHAT_CLOSED",
                details={"chat_id": str(chat.pk)},
            )
        if chat.is_locked and not policy.can(sender, Capability.SEND_IN_LOCKED_CHAT):
            raise ForbiddenError(
                "This chat is locked. Only admins can send messages.",
                error_code="CHAT_LOCKED",
                details={"chat_id": str(chat.pk)},
            )

        with cls.atomic():
            message = ChatMessage.objects.create(
                chat=chat,
                sender=sender,
                message_type=MessageType.USER,
                content=content,
            )
            Chat.objects.filter(pk=chat.pk).update(
                last_message_at=message.created_at,
                updated_at=message.created_at,
            )

        recipient_ids = chat.participants.exclude(pk=sender.pk).values_list("pk", flat=True)
        for recipient_id in recipient_ids:
            NotificationService.notify(
                recipient_id,
                NotificationKind.MESSAGE,
                title=f"New message from {_display_name(sender)}",
                preview=content[:100],
                meta={"chat_id": chat.pk, "message_id": message.pk},
            )

        cls.get_logger().debug(f"User {sender.pk} sent message {message.pk} to chat {chat.pk}")
        return message

    @classmethod
    def mark_read(cls, chat_id, user: User) -> int:
        """Mark every message not sent by ``user`` as read. Returns the count."""
        chat = cls.get_for_user(chat_id, user)
        count = (
            chat.messages.filter(read=False, message_type=MessageType.USER)
            .exclude(sender=user)
            .update(read=True, updated_at=timezone.now())
        )
        cls.get_logger().debug(f"User {user.pk} marked {count} messages read in chat {chat.pk}")
        return count

    @classmethod
    def add_admin(cls, chat_id, actor: User) -> Chat:
        """
        The acting admin joins the chat.

        Raises:
            ForbiddenError: Actor is not an admin
        """
        policy.require(actor, Capability.MODERATE_CHAT)
        chat = cls.get_for_user(chat_id, actor)
        with cls.atomic():
            ChatStatusSync.add_admin(chat, actor)
        return chat

    @classmethod
    def add_participant(cls, chat_id, user_id, actor: User) -> Chat:
        """
        Add a user to a group chat.

        Raises:
            ValidationError: Not a group chat
            ForbiddenError: Actor is neither an admin nor the chat's creator
            NotFoundError: User does not exist
            ConflictError: User is already a participant
        """
        chat = cls._get_managed_group(chat_id, actor)
        user = cls._get_user(user_id)
        if chat.has_participant(user):
            raise ConflictError(
                "User is already a participant in this chat",
                error_code="ALREADY_PARTICIPANT",
                details={"chat_id": str(chat.pk), "user_id": user.pk},
            )

        with cls.atomic():
            chat.participants.add(user)
            ChatStatusSync.append_system_message(
                chat,
                SystemEvent.USER_ADDED,
                f"{_display_name(user)} was added by {_display_name(actor)}",
            )

        NotificationService.notify(
            user.pk,
            NotificationKind.MESSAGE,
            title="Added to a chat",
            preview=f"You were added to {chat.name or 'a group chat'}",
            meta={"chat_id": chat.pk},
        )
        cls.get_logger().info(f"Added user {user.pk} to chat {chat.pk} by user {actor.pk}")
        return chat

    @classmethod
    def remove_participant(cls, chat_id, user_id, actor: User) -> Chat:
        """
        Remove a user from a group chat.

        Raises:
            ValidationError: Not a group chat
            ForbiddenError: Actor is neither an admin nor the chat's creator
            NotFoundError: User is not in the chat
        """
        chat = cls._get_managed_group(chat_id, actor)
        user = cls._get_user(user_id)
        if not chat.has_participant(user):
            raise NotFoundError(
                "User is not a participant in this chat",
                error_code="NOT_PARTICIPANT",
                details={"chat_id": str(chat.pk), "user_id": user.pk},
            )

        with cls.atomic():
            chat.participants.remove(user)
            ChatStatusSync.append_system_message(
                chat,
                SystemEvent.USER_REMOVED,
                f"{_display_name(user)} was removed by {_display_name(actor)}",
            )

        cls.get_logger().info(f"Removed user {user.pk} from chat {chat.pk} by user {actor.pk}")
        return chat

    @classmethod
    def _get_managed_group(cls, chat_id, actor: User) -> Chat:
        chat = Chat.objects.filter(pk=chat_id).first()
        if chat is None:
            raise NotFoundError("Chat not found", error_code="CHAT_NOT_FOUND", details={"chat_id": str(chat_id)})
        if chat.chat_type != ChatType.GROUP:
            raise ValidationError(
                "Participants can only be managed in group chats",
                error_code="NOT_GROUP",
                details={"chat_id": str(chat.pk)},
            )
        if not (policy.can(actor, Capability.MODERATE_CHAT) or chat.created_by_id == actor.pk):
            raise ForbiddenError(
                "Only admins or the chat creator can manage participants",
                error_code="PERMISSION_DENIED",
                details={"chat_id": str(chat.pk)},
            )
        return chat

    @classmethod
    def _get_user(cls, user_id) -> User:
        user = get_user_model().objects.filter(pk=user_id, is_active=True).first()
        if user is None:
            raise NotFoundError("User not found", error_code="USER_NOT_FOUND", details={"user_id": user_id})
        return user
