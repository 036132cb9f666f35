"""
Factory Boy factories for chat models.

Provides test data for:
- Chat: Project discussions and group chats
- ChatMessage: User and system messages

Usage:
    from chat.tests.factories import DiscussionChatFactory, GroupChatFactory, ChatMessageFactory

    # Discussion between a project's client and a freelancer
    chat = DiscussionChatFactory()

    # Group chat for a project, created by its client
    group = GroupChatFactory(project=project)

    # Message in a chat
    message = ChatMessageFactory(chat=chat, sender=chat.freelancer)
"""

import factory

from authentication.tests.factories import FreelancerFactory
from chat.models import Chat, ChatMessage, ChatStatus, ChatType, MessageType, SystemEvent
from projects.tests.factories import ProjectFactory


class DiscussionChatFactory(factory.django.DjangoModelFactory):
    """
    Project discussion chat.

    The freelancer and the project's client are added as participants.

    Examples:
        chat = DiscussionChatFactory(project=project, freelancer=freelancer)
        closed = DiscussionChatFactory(status=ChatStatus.CLOSED)
    """

    class Meta:
        model = Chat
        skip_postgeneration_save = True

    chat_type = ChatType.PROJECT
    name = factory.LazyAttribute(lambda o: o.project.title)
    project = factory.SubFactory(ProjectFactory)
    freelancer = factory.SubFactory(FreelancerFactory)
    created_by = factory.SelfAttribute("freelancer")
    status = ChatStatus.DISCUSSION

    @factory.post_generation
    def add_participants(self, create, extracted, **kwargs):
        """Add the freelancer and the client after the chat is created."""
        if not create:
            return
        self.participants.add(self.freelancer, self.project.created_by)


class GroupChatFactory(factory.django.DjangoModelFactory):
    """
    Group chat for a project.

    The creator (the project's client by default) is the only participant
    unless ``participants`` is passed.

    Examples:
        group = GroupChatFactory(project=project, participants=[client, freelancer])
    """

    class Meta:
        model = Chat
        skip_postgeneration_save = True

    chat_type = ChatType.GROUP
    name = factory.Sequence(lambda n: f"Group Chat {n}")
    project = factory.SubFactory(ProjectFactory)
    created_by = factory.SelfAttribute("project.created_by")

    @factory.post_generation
    def participants(self, create, extracted, **kwargs):
        if not create:
            return
        self.participants.add(*(extracted if extracted is not None else [self.created_by]))


class ChatMessageFactory(factory.django.DjangoModelFactory):
    """User message sent by the chat's freelancer."""

    class Meta:
        model = ChatMessage

    chat = factory.SubFactory(DiscussionChatFactory)
    sender = factory.SelfAttribute("chat.freelancer")
    content = factory.Faker("sentence")
    message_type = MessageType.USER


class SystemMessageFactory(ChatMessageFactory):
    sender = None
    message_type = MessageType.SYSTEM
    event = SystemEvent.DISCUSSION_STARTED
    content = "Discussion started"
