"""
Tests for ChatMessaging.
"""

import pytest
from django.db.models import RestrictedError

from authentication.tests.factories import ClientFactory, UserFactory
from chat.models import Chat, ChatMessage, ChatStatus, MessageType, SystemEvent
from chat.services import MAX_MESSAGE_LENGTH, ChatMessaging, ChatStatusSync
from chat.tests.factories import ChatMessageFactory
from core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from notifications.models import Notification


@pytest.mark.django_db
class TestSendMessage:
    def test_participant_sends(self, discussion_chat, freelancer_user, client_user):
        message = ChatMessaging.send_message(discussion_chat.id, freelancer_user, "  Hello there  ")

        assert message.content == "Hello there"
        assert message.sender == freelancer_user
        assert message.message_type == MessageType.USER
        discussion_chat.refresh_from_db()
        assert discussion_chat.last_message_at == message.created_at

        notification = Notification.objects.get(recipient=client_user)
        assert notification.meta == {"chat_id": str(discussion_chat.pk), "message_id": str(message.pk)}
        assert not Notification.objects.filter(recipient=freelancer_user).exists()

    def test_non_participant_rejected(self, discussion_chat):
        with pytest.raises(ForbiddenError) as exc_info:
            ChatMessaging.send_message(discussion_chat.id, ClientFactory(), "Hi")

        assert exc_info.value.error_code == "NOT_PARTICIPANT"

    def test_admin_must_join_before_sending(self, discussion_chat, admin_user):
        with pytest.raises(ForbiddenError) as exc_info:
            ChatMessaging.send_message(discussion_chat.id, admin_user, "Hi")

        assert exc_info.value.error_code == "NOT_PARTICIPANT"

    @pytest.mark.parametrize("content", ["", "   ", None])
    def test_empty_content(self, discussion_chat, freelancer_user, content):
        with pytest.raises(ValidationError) as exc_info:
            ChatMessaging.send_message(discussion_chat.id, freelancer_user, content)

        assert exc_info.value.error_code == "EMPTY_CONTENT"

    def test_content_too_long(self, discussion_chat, freelancer_user):
        with pytest.raises(ValidationError) as exc_info:
            ChatMessaging.send_message(discussion_chat.id, freelancer_user, "x" * (MAX_MESSAGE_LENGTH + 1))

        assert exc_info.value.error_code == "CONTENT_TOO_LONG"

    def test_closed_chat_rejects_messages(self, discussion_chat, sibling_chat, other_freelancer):
        ChatStatusSync.commit(discussion_chat)

        with pytest.raises(ValidationError) as exc_info:
            ChatMessaging.send_message(sibling_chat.id, other_freelancer, "Still there?")

        assert exc_info.value.error_code == "CHAT_CLOSED"

    def test_committed_chat_accepts_messages(self, discussion_chat, client_user):
        ChatStatusSync.commit(discussion_chat)

        assert ChatMessaging.send_message(discussion_chat.id, client_user, "Welcome aboard")

    def test_locked_chat_only_admins_send(self, discussion_chat, client_user, freelancer_user, admin_user):
        ChatStatusSync.commit(discussion_chat)
        ChatStatusSync.enable_admin_management(discussion_chat.project, admin_user)

        for user in (client_user, freelancer_user):
            with pytest.raises(ForbiddenError) as exc_info:
                ChatMessaging.send_message(discussion_chat.id, user, "Can I still talk?")
            assert exc_info.value.error_code == "CHAT_LOCKED"

        message = ChatMessaging.send_message(discussion_chat.id, admin_user, "Admin here")
        assert message.sender == admin_user

    def test_unknown_chat(self, freelancer_user):
        with pytest.raises(NotFoundError) as exc_info:
            ChatMessaging.send_message("00000000-0000-0000-0000-000000000000", freelancer_user, "Hi")

        assert exc_info.value.error_code == "CHAT_NOT_FOUND"


@pytest.mark.django_db
class TestReading:
    def test_list_messages_in_append_order(self, discussion_chat, freelancer_user, client_user):
        ChatStatusSync.append_system_message(discussion_chat, SystemEvent.DISCUSSION_STARTED, "Started")
        first = ChatMessaging.send_message(discussion_chat.id, freelancer_user, "one")
        second = ChatMessaging.send_message(discussion_chat.id, client_user, "two")

        messages = list(ChatMessaging.list_messages(discussion_chat.id, client_user))

        assert [m.message_type for m in messages] == [MessageType.SYSTEM, MessageType.USER, MessageType.USER]
        assert messages[1:] == [first, second]

    def test_admin_can_read_any_chat(self, discussion_chat, admin_user):
        assert ChatMessaging.get_for_user(discussion_chat.id, admin_user) == discussion_chat

    def test_stranger_cannot_read(self, discussion_chat, other_freelancer):
        with pytest.raises(ForbiddenError):
            ChatMessaging.list_messages(discussion_chat.id, other_freelancer)

    def test_list_for_user(self, discussion_chat, sibling_chat, freelancer_user, client_user):
        assert list(ChatMessaging.list_for_user(freelancer_user)) == [discussion_chat]
        assert set(ChatMessaging.list_for_user(client_user)) == {discussion_chat, sibling_chat}

    def test_mark_read_counts_others_messages(self, discussion_chat, freelancer_user, client_user):
        ChatMessageFactory.create_batch(2, chat=discussion_chat, sender=freelancer_user)
        ChatMessageFactory(chat=discussion_chat, sender=client_user)
        ChatStatusSync.append_system_message(discussion_chat, SystemEvent.USER_ADDED, "joined")

        assert ChatMessaging.mark_read(discussion_chat.id, client_user) == 2
        assert ChatMessaging.mark_read(discussion_chat.id, client_user) == 0


@pytest.mark.django_db
class TestModeration:
    def test_admin_joins(self, discussion_chat, admin_user):
        chat = ChatMessaging.add_admin(discussion_chat.id, admin_user)

        assert chat.admin_added
        assert chat.has_participant(admin_user)

    def test_client_cannot_join_as_admin(self, discussion_chat, client_user):
        with pytest.raises(ForbiddenError):
            ChatMessaging.add_admin(discussion_chat.id, client_user)

    def test_add_and_remove_participant(self, group_chat, admin_user):
        newcomer = UserFactory()

        chat = ChatMessaging.add_participant(group_chat.id, newcomer.pk, admin_user)
        assert chat.has_participant(newcomer)
        assert chat.messages.filter(event=SystemEvent.USER_ADDED).exists()
        assert Notification.objects.filter(recipient=newcomer, title="Added to a chat").exists()

        chat = ChatMessaging.remove_participant(group_chat.id, newcomer.pk, admin_user)
        assert not chat.has_participant(newcomer)
        assert chat.messages.filter(event=SystemEvent.USER_REMOVED).exists()

    def test_creator_manages_participants(self, group_chat, client_user):
        newcomer = UserFactory()

        assert ChatMessaging.add_participant(group_chat.id, newcomer.pk, client_user).has_participant(newcomer)

    def test_other_member_cannot_manage(self, group_chat, freelancer_user):
        with pytest.raises(ForbiddenError) as exc_info:
            ChatMessaging.add_participant(group_chat.id, UserFactory().pk, freelancer_user)

        assert exc_info.value.error_code == "PERMISSION_DENIED"

    def test_discussion_membership_is_fixed(self, discussion_chat, admin_user):
        with pytest.raises(ValidationError) as exc_info:
            ChatMessaging.add_participant(discussion_chat.id, UserFactory().pk, admin_user)

        assert exc_info.value.error_code == "NOT_GROUP"

    def test_add_existing_participant(self, group_chat, freelancer_user, admin_user):
        with pytest.raises(ConflictError) as exc_info:
            ChatMessaging.add_participant(group_chat.id, freelancer_user.pk, admin_user)

        assert exc_info.value.error_code == "ALREADY_PARTICIPANT"

    def test_add_unknown_user(self, group_chat, admin_user):
        with pytest.raises(NotFoundError) as exc_info:
            ChatMessaging.add_participant(group_chat.id, 999999, admin_user)

        assert exc_info.value.error_code == "USER_NOT_FOUND"

    def test_remove_non_participant(self, group_chat, admin_user):
        with pytest.raises(NotFoundError) as exc_info:
            ChatMessaging.remove_participant(group_chat.id, UserFactory().pk, admin_user)

        assert exc_info.value.error_code == "NOT_PARTICIPANT"


@pytest.mark.django_db
def test_closed_status_survives_new_messages_elsewhere(discussion_chat, sibling_chat, client_user):
    ChatStatusSync.commit(discussion_chat)
    ChatMessaging.send_message(discussion_chat.id, client_user, "Let's start")

    assert Chat.objects.get(pk=sibling_chat.pk).status == ChatStatus.CLOSED


@pytest.mark.django_db
class TestSenderDeletion:
    def test_sender_with_messages_outside_own_chats_is_kept(self, group_chat, freelancer_user):
        message = ChatMessageFactory(chat=group_chat, sender=freelancer_user)

        with pytest.raises(RestrictedError):
            freelancer_user.delete()

        message.refresh_from_db()
        assert message.sender == freelancer_user

    def test_messages_deleted_with_their_chat(self, discussion_chat, client_user):
        message = ChatMessageFactory(chat=discussion_chat, sender=client_user)

        client_user.delete()

        assert not Chat.objects.filter(pk=discussion_chat.pk).exists()
        assert not ChatMessage.objects.filter(pk=message.pk).exists()
