"""
URL configuration for the marketplace backend.

URL Structure:
    /                              - ReDoc API documentation
    /admin/                        - Django admin interface
    /health/                       - Health check endpoint (for load balancers, Docker)
    /schema/                       - OpenAPI schema (YAML)
    /api/v1/auth/                  - Authentication endpoints
        token/                     - Obtain JWT pair
        token/refresh/             - Refresh access token
        me/                        - Current user (GET/PATCH)
    /api/v1/projects/              - Projects and applications
    /api/v1/chat/                  - Chat endpoints
        chats/                     - Chat list
        chats/{id}/messages/       - Message list/send
        chats/{id}/proceed/        - Commit to this chat's freelancer
    /api/v1/payments/              - Payment endpoints
        webhook/                   - Cashfree webhook endpoint (POST)
        records/                   - Payment records and actions
    /api/v1/notifications/         - Notifications

For more information, see:
https://docs.djangoproject.com/en/5.2/topics/http/urls/
"""

from django.contrib import admin
from django.urls import include, path
from drf_spectacular.views import SpectacularAPIView, SpectacularRedocView

from core.views import health_check

# =============================================================================
# API v1 Routes
# =============================================================================
api_v1_patterns = [
    path("auth/", include("authentication.urls")),
    path("projects/", include("projects.urls")),
    path("chat/", include("chat.urls")),
    path("payments/", include("payments.urls")),
    path("notifications/", include("notifications.urls")),
]

urlpatterns = [
    # Documentation
    path("", SpectacularRedocView.as_view(url_name="schema"), name="redoc"),
    path("schema/", SpectacularAPIView.as_view(), name="schema"),
    # Admin
    path("admin/", admin.site.urls),
    # Health check (Docker, Kubernetes, load balancers)
    path("health/", health_check, name="health_check"),
    # API v1
    path("api/v1/", include(api_v1_patterns)),
]

# =============================================================================
# Admin Site Customization
# =============================================================================
admin.site.site_header = "GigMarket Admin"
admin.site.site_title = "GigMarket Admin Portal"
admin.site.index_title = "Marketplace administration"
