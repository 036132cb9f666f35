"""
Tests for the chat API.
"""

import pytest

from authentication.tests.factories import UserFactory
from chat.models import ChatStatus, MessageType
from chat.services import ChatStatusSync

BASE_URL = "/api/v1/chat/chats/"


@pytest.mark.django_db
class TestChatViews:
    def test_list(self, client_for, discussion_chat, freelancer_user):
        response = client_for(freelancer_user).get(BASE_URL)

        assert response.status_code == 200
        data = response.json()["data"]
        assert [c["id"] for c in data] == [str(discussion_chat.id)]
        assert data[0]["project_title"] == discussion_chat.project.title
        assert data[0]["status"] == ChatStatus.DISCUSSION

    def test_retrieve_as_stranger(self, client_for, discussion_chat, other_freelancer):
        response = client_for(other_freelancer).get(f"{BASE_URL}{discussion_chat.id}/")

        assert response.status_code == 403
        assert response.json()["error_code"] == "NOT_PARTICIPANT"

    def test_send_and_list_messages(self, client_for, discussion_chat, freelancer_user):
        api = client_for(freelancer_user)

        sent = api.post(f"{BASE_URL}{discussion_chat.id}/messages/", {"content": "Hello"}, format="json")
        assert sent.status_code == 201
        assert sent.json()["data"]["sender"]["id"] == freelancer_user.pk

        listed = api.get(f"{BASE_URL}{discussion_chat.id}/messages/")
        assert [m["content"] for m in listed.json()["data"]] == ["Hello"]

    def test_system_messages_have_no_sender(self, client_for, discussion_chat, client_user):
        ChatStatusSync.commit(discussion_chat)

        data = client_for(client_user).get(f"{BASE_URL}{discussion_chat.id}/messages/").json()["data"]

        assert data[0]["message_type"] == MessageType.SYSTEM
        assert data[0]["sender"] is None
        assert data[0]["event"] == "freelancer_committed"

    def test_locked_chat_returns_403(self, client_for, discussion_chat, client_user, admin_user):
        ChatStatusSync.commit(discussion_chat)
        ChatStatusSync.enable_admin_management(discussion_chat.project, admin_user)

        response = client_for(client_user).post(
            f"{BASE_URL}{discussion_chat.id}/messages/", {"content": "Hello?"}, format="json"
        )

        assert response.status_code == 403
        assert response.json()["error_code"] == "CHAT_LOCKED"

    def test_blank_message_rejected(self, client_for, discussion_chat, freelancer_user):
        response = client_for(freelancer_user).post(
            f"{BASE_URL}{discussion_chat.id}/messages/", {"content": ""}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["success"] is False

    def test_mark_read(self, client_for, discussion_chat, freelancer_user, client_user):
        client_for(freelancer_user).post(f"{BASE_URL}{discussion_chat.id}/messages/", {"content": "Hi"}, format="json")

        response = client_for(client_user).post(f"{BASE_URL}{discussion_chat.id}/read/")

        assert response.status_code == 200
        assert response.json()["data"] == {"marked_count": 1}

    def test_add_admin(self, client_for, discussion_chat, admin_user):
        response = client_for(admin_user).post(f"{BASE_URL}{discussion_chat.id}/add-admin/")

        assert response.status_code == 200
        assert response.json()["data"]["admin_added"] is True

    def test_participants(self, client_for, group_chat, admin_user):
        newcomer = UserFactory()
        api = client_for(admin_user)

        added = api.post(f"{BASE_URL}{group_chat.id}/participants/", {"user_id": newcomer.pk}, format="json")
        assert added.status_code == 201
        assert newcomer.pk in [p["id"] for p in added.json()["data"]["participants"]]

        removed = api.delete(f"{BASE_URL}{group_chat.id}/participants/{newcomer.pk}/")
        assert removed.status_code == 200
        assert newcomer.pk not in [p["id"] for p in removed.json()["data"]["participants"]]

    def test_proceed_closed_chat_returns_error(self, client_for, discussion_chat, sibling_chat, client_user):
        api = client_for(client_user)
        api.post(f"{BASE_URL}{discussion_chat.id}/proceed/", {"final_budget": "1200.00"}, format="json")

        response = api.post(f"{BASE_URL}{sibling_chat.id}/proceed/", {"final_budget": "1000.00"}, format="json")

        assert response.status_code == 400
        assert response.json()["error_code"] == "PROJECT_NOT_OPEN"
