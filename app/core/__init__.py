"""
Core Application - Infrastructure & Base Classes

Shared building blocks for the domain apps (projects, chat, payments,
notifications). No domain logic lives here.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes and HTTP status
    - ValidationError, ForbiddenError, NotFoundError, ConflictError,
      InvalidStateError, ExternalServiceError

Responses (import from core.responses):
    - success_response: {success: true, message, data} envelope

Exception handler (core.exception_handler):
    - api_exception_handler: DRF EXCEPTION_HANDLER rendering the error envelope
"""
