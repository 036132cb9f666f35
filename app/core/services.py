"""
Base service layer patterns for business logic encapsulation.

This module provides foundational patterns for the service layer:
- ServiceResult: Standard result wrapper for callers that need value-or-error
  (webhook handlers, Celery tasks) instead of exceptions
- BaseService: Base class with logging and transaction helpers

Service Layer Philosophy:
    Services encapsulate business logic separate from views and models.
    Views handle HTTP concerns, models handle data, services handle logic.
    Request-facing operations raise core.exceptions; the DRF exception
    handler turns them into the error envelope.

Usage:
    from core.services import BaseService, ServiceResult

    class ProjectCommitmentWorkflow(BaseService):
        @classmethod
        def complete(cls, project, actor):
            with cls.atomic():
                ...
            cls.get_logger().info("Project completed", extra={"project_id": str(project.id)})
            return project

    # In a webhook handler
    result = dispatch_webhook(webhook_event, payload)
    if not result.success:
        webhook_event.mark_failed(result.error)
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import TYPE_CHECKING, Generic, TypeVar

from django.db import transaction
from django.utils import timezone
from django_fsm import TransitionNotAllowed

from core.exceptions import BaseApplicationError, InvalidStateError

if TYPE_CHECKING:
    from collections.abc import Generator

# Generic type for ServiceResult data
T = TypeVar("T")


@dataclass
class ServiceResult(Generic[T]):
    """
    Standard result wrapper for service operations.

    Attributes:
        success: Whether the operation succeeded
        data: Result data if successful (None if failed)
        error: Error message if failed (None if successful)
        error_code: Machine-readable error code for client handling

    Usage:
        result = dispatch_webhook(webhook_event, payload)
        if result:
            webhook_event.mark_processed()
        elif result.error_code == "PAYMENT_RECORD_NOT_FOUND":
            return HttpResponse(status=404)
    """

    success: bool
    data: T | None = None
    error: str | None = None
    error_code: str | None = None

    @classmethod
    def success(cls, data: T = None) -> ServiceResult[T]:
        """Create a successful result carrying ``data``."""
        return cls(success=True, data=data)

    @classmethod
    def from_exception(cls, exc: Exception, error_code: str | None = None) -> ServiceResult[T]:
        """
        Create a failed result from an exception.

        Application errors keep their own error code; anything else is
        labelled with the exception class name.
        """
        if isinstance(exc, BaseApplicationError):
            return cls(
                success=False,
                error=exc.message,
                error_code=error_code or exc.error_code,
            )
        return cls(
            success=False,
            error=str(exc),
            error_code=error_code or exc.__class__.__name__.upper(),
        )

    def __bool__(self) -> bool:
        """Allow using result in boolean context."""
        return self.success


class BaseService:
    """
    Base class for service layer classes.

    Design Notes:
        - Use @classmethod (no instance state)
        - Collaborators such as the payment gateway are passed in as arguments
        - Raise core.exceptions for business rule violations
    """

    @classmethod
    def get_logger(cls) -> logging.Logger:
        """Get a logger named after the service class."""
        return logging.getLogger(f"{cls.__module__}.{cls.__name__}")

    @classmethod
    @contextmanager
    def atomic(cls) -> Generator[None, None, None]:
        """
        Execute operations in a database transaction.

        All database operations within this context manager are
        wrapped in a transaction. If any operation fails, all
        changes are rolled back.
        """
        with transaction.atomic():
            yield

    @classmethod
    def run_transition(cls, instance, name: str, *args, error_code: str = "INVALID_TRANSITION", **kwargs) -> str:
        """
        Run a django-fsm transition on ``instance`` in memory.

        Returns the state the instance was in before the transition, to be
        used as the precondition of the conditional UPDATE that persists it.

        Raises:
            InvalidStateError: The transition is not allowed from the current state
        """
        method = getattr(instance, name)
        field_name = method._django_fsm.field.name
        previous = getattr(instance, field_name)
        try:
            method(*args, **kwargs)
        except TransitionNotAllowed as e:
            raise InvalidStateError(
                f"Cannot {name.replace('_', ' ')} while {previous}",
                error_code=error_code,
                details={"id": str(instance.pk), "status": previous},
            ) from e
        return previous

    @classmethod
    def conditional_update(cls, instance, fields: list[str], **expected) -> bool:
        """
        Write ``fields`` of ``instance`` only if its row still matches ``expected``.

        Returns False when another writer changed the row first; the
        instance is left as the caller modified it.

        Usage:
            previous = cls.run_transition(project, "complete")
            if not cls.conditional_update(project, ["status", "completed_at"], status=previous):
                raise ConflictError(...)
        """
        instance.updated_at = timezone.now()
        values = {field: getattr(instance, field) for field in fields}
        updated = (
            type(instance)
            .objects.filter(pk=instance.pk, **expected)
            .update(**values, updated_at=instance.updated_at)
        )
        return updated == 1
