"""
DRF exception handler rendering the application error envelope.

Wired through REST_FRAMEWORK["EXCEPTION_HANDLER"]. Application errors are
the request boundary's recovery point: they are logged with their error
code and returned as {success: false, message, error_code, details} with
the status carried by the exception class. DRF's own exceptions
(authentication, parse errors, serializer validation) are wrapped into the
same envelope so clients only ever see one error shape.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.exceptions import BaseApplicationError

if TYPE_CHECKING:
    from typing import Any

logger = logging.getLogger(__name__)


def _http_status_for(exc: BaseApplicationError) -> int:
    # Gateway errors may pass an upstream 4xx through per instance
    return getattr(exc, "status_code", None) or exc.http_status


def api_exception_handler(exc: Exception, context: dict[str, Any]) -> Response | None:
    """Convert exceptions raised inside DRF views into the error envelope."""
    if isinstance(exc, BaseApplicationError):
        status_code = _http_status_for(exc)
        view = context.get("view")
        logger.log(
            logging.ERROR if status_code >= 500 else logging.WARNING,
            f"{exc.__class__.__name__}: {exc.message}",
            extra={
                "error_code": exc.error_code,
                "status_code": status_code,
                "view": view.__class__.__name__ if view else None,
            },
        )
        return Response(exc.to_dict(), status=status_code)

    response = exception_handler(exc, context)
    if response is None:
        return None

    data = response.data
    if isinstance(data, dict) and "detail" in data:
        message = str(data["detail"])
        errors = None
    else:
        message = "Invalid request"
        errors = data

    body: dict[str, Any] = {
        "success": False,
        "message": message,
        "error_code": getattr(exc, "default_code", "error").upper(),
    }
    if errors:
        body["errors"] = errors
    response.data = body
    return response
