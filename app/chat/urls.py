"""
URL configuration for chat API.

Routes:
    /chats/                                 - List chats
    /chats/{id}/                            - Chat detail
    /chats/{id}/messages/                   - Messages (GET, POST)
    /chats/{id}/read/                       - Mark read (POST)
    /chats/{id}/proceed/                    - Commit freelancer (POST)
    /chats/{id}/add-admin/                  - Admin joins (POST)
    /chats/{id}/participants/               - Add participant (POST)
    /chats/{id}/participants/{user_id}/     - Remove participant (DELETE)
"""

from rest_framework.routers import DefaultRouter

from chat.views import ChatViewSet

router = DefaultRouter()
router.register(r"chats", ChatViewSet, basename="chat")

app_name = "chat"
urlpatterns = router.urls
