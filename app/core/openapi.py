"""
OpenAPI schema customizations for drf-spectacular.

This module provides hooks to customize the generated OpenAPI schema,
including natural language summaries for third-party endpoints and tag
descriptions for ReDoc/Swagger UI.

Tag naming follows the pattern: [App Name] or [App Name] - [Group Name]
Examples:
- Auth (tokens, current user)
- Projects (posting, applications, escalation)
- Chat (discussions and messages)
- Payments (records, gateway orders, manual UPI)
"""

# Natural language summaries for simplejwt endpoints
# Maps operation_id to (summary, description)
TOKEN_ENDPOINT_SUMMARIES = {
    "auth_token_create": (
        "Log in",
        "Authenticate with email and password to receive a JWT access/refresh pair.",
    ),
    "auth_token_refresh_create": (
        "Refresh access token",
        "Get a new access token using a valid refresh token.",
    ),
}

TAG_DESCRIPTIONS = [
    {
        "name": "Auth",
        "description": "Token issue and refresh, and the current user's profile.",
    },
    {
        "name": "Projects",
        "description": "Project posting, applications, shortlisting, admin-management escalation and completion.",
    },
    {
        "name": "Chat",
        "description": "Discussion chats opened on application, committing to a freelancer, and group chats.",
    },
    {
        "name": "Payments",
        "description": "Payment records, gateway orders and verification, manual UPI, release and refund.",
    },
    {
        "name": "Notifications",
        "description": "In-app notifications generated by workflow and payment events.",
    },
]


def group_auth_endpoints(result, generator, request, public):
    """
    Postprocessing hook to tag and describe auth endpoints.

    simplejwt views carry no @extend_schema, so their tags and summaries
    are filled in here. Other apps set tags= in their views.
    """
    paths = result.get("paths", {})

    for path, methods in paths.items():
        for method, operation in methods.items():
            if not isinstance(operation, dict):
                continue

            operation_id = operation.get("operationId", "")

            if operation_id in TOKEN_ENDPOINT_SUMMARIES:
                summary, description = TOKEN_ENDPOINT_SUMMARIES[operation_id]
                operation["summary"] = summary
                operation["description"] = description

            if operation_id.startswith("auth_"):
                operation["tags"] = ["Auth"]

    result["tags"] = TAG_DESCRIPTIONS

    return result
