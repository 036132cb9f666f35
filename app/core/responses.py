"""
Success response envelope shared by all API views.

Error responses are rendered by core.exception_handler; successful ones go
through success_response so both halves share the same top-level keys.

Usage:
    return success_response(
        PaymentRecordSerializer(record).data,
        message="Payment released",
    )
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import status as http_status
from rest_framework.response import Response

if TYPE_CHECKING:
    from typing import Any


def success_response(
    data: Any = None,
    message: str = "",
    status: int = http_status.HTTP_200_OK,
) -> Response:
    """Build a {success: true, message, data} response."""
    return Response(
        {"success": True, "message": message, "data": data},
        status=status,
    )
