"""
Test configuration and fixtures for chat tests.

Usage:
    def test_send(discussion_chat, freelancer_user):
        message = ChatMessaging.send_message(discussion_chat.id, freelancer_user, "Hi")
"""

import pytest

from chat.tests.factories import DiscussionChatFactory, GroupChatFactory
from projects.tests.factories import ProjectFactory


@pytest.fixture
def chat_project(db, client_user):
    return ProjectFactory(created_by=client_user)


@pytest.fixture
def discussion_chat(chat_project, freelancer_user):
    """Discussion between client_user and freelancer_user."""
    return DiscussionChatFactory(project=chat_project, freelancer=freelancer_user)


@pytest.fixture
def sibling_chat(chat_project, other_freelancer):
    """Second discussion on the same project."""
    return DiscussionChatFactory(project=chat_project, freelancer=other_freelancer)


@pytest.fixture
def group_chat(chat_project, client_user, freelancer_user):
    return GroupChatFactory(project=chat_project, participants=[client_user, freelancer_user])
