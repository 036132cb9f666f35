"""
Base exception classes for application-wide error handling.

Every business-rule violation raised by a service is one of these classes.
They are recovered at the request boundary by
core.exception_handler.api_exception_handler and rendered as the
structured {success: false, message, error_code, details} envelope, so no
business error ever reaches the WSGI server as a 500.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError      - bad or missing input (400)
    ├── ForbiddenError       - role or ownership check failed (403)
    ├── NotFoundError        - resource not found (404)
    ├── ConflictError        - exclusive or already-satisfied transition (409)
    ├── InvalidStateError    - operation not valid in the current lifecycle state (400)
    └── ExternalServiceError - third-party service failures (502)

Usage:
    from core.exceptions import ConflictError, ForbiddenError

    if record.release_status != ReleaseStatus.NOT_RELEASED:
        raise ConflictError(
            "Payment has already been released",
            error_code="ALREADY_RELEASED",
            details={"payment_id": str(record.id)},
        )

    # Convert to dict for API response
    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=e.http_status)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, ids, upstream status)
        http_status: Status code used when the error reaches the API boundary
    """

    default_error_code: str = "APPLICATION_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        """
        Initialize the exception.

        Args:
            message: Human-readable error description
            error_code: Machine-readable error code (defaults to class default)
            details: Additional error context
        """
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to the API error envelope.

        Example:
            {
                "success": False,
                "message": "Project not found",
                "error_code": "PROJECT_NOT_FOUND",
                "details": {"project_id": "..."}
            }
        """
        result: dict[str, Any] = {
            "success": False,
            "message": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        """Return string representation with error code."""
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        """Return detailed representation for debugging."""
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when input validation fails.

    Use for:
    - Missing required fields (finalBudget, assignedTo)
    - Business rule violations (admin-management window elapsed)
    - Requests that contradict the stored record (mismatched gateway order id)

    Note:
        For DRF serializer validation, use DRF's built-in validation.
        Use this for service-layer validation logic.
    """

    default_error_code: str = "VALIDATION_ERROR"
    http_status: int = 400


class NotFoundError(BaseApplicationError):
    """
    Raised when a requested resource is not found.

    Example:
        project = Project.objects.filter(id=project_id).first()
        if project is None:
            raise NotFoundError(
                "Project not found",
                error_code="PROJECT_NOT_FOUND",
                details={"project_id": str(project_id)},
            )
    """

    default_error_code: str = "NOT_FOUND"
    http_status: int = 404


class ForbiddenError(BaseApplicationError):
    """
    Raised when the acting user lacks the role or ownership for an operation.

    Example:
        if not policy.can(user, Capability.RELEASE_PAYMENT):
            raise ForbiddenError(
                "Only admins can release payments",
                error_code="ADMIN_REQUIRED",
            )

    Note:
        For authentication failures (missing/invalid token), DRF's
        NotAuthenticated/AuthenticationFailed apply. Use this for
        authorization failures.
    """

    default_error_code: str = "FORBIDDEN"
    http_status: int = 403


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with current resource state.

    Use for:
    - Duplicate entries (second payment record for a project)
    - Exclusive transitions already taken (chat committed, payment released)
    - Concurrent modification detected by a conditional update

    Note:
        HTTP 409 Conflict is the appropriate status for these errors.
    """

    default_error_code: str = "CONFLICT"
    http_status: int = 409


class InvalidStateError(BaseApplicationError):
    """
    Raised when an operation is not valid in the record's current lifecycle state.

    Example:
        if record.overall_status != OverallStatus.FINAL_PAID:
            raise InvalidStateError(
                "Payment must be fully paid before release",
                error_code="PAYMENT_NOT_PAID",
                details={"overall_status": record.overall_status},
            )
    """

    default_error_code: str = "INVALID_STATE"
    http_status: int = 400


class ExternalServiceError(BaseApplicationError):
    """
    Raised when an external service call fails.

    Note:
        Log the original error for debugging but don't expose
        internal details or credentials to clients.
    """

    default_error_code: str = "EXTERNAL_SERVICE_ERROR"
    http_status: int = 502
