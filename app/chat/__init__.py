"""
Chat app for project discussions.

This app handles:
- Discussion chats opened when a freelancer applies
- Committing and closing discussions as the client chooses
- Locked group chats for admin-managed projects
- Message sending, history and read tracking

Related apps:
    - projects: Commitment workflow drives chat status
    - notifications: Message notifications

Usage:
    from chat.services import ChatMessaging

    message = ChatMessaging.send_message(chat.id, sender=user, content="Hello!")
"""
