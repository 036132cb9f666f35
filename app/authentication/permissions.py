"""
DRF permission classes backed by authentication.policy.

View-level checks only cover role gates that do not need the target
record; ownership checks happen in the services, where the record is
loaded.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rest_framework import permissions

from authentication import policy
from authentication.policy import Capability

if TYPE_CHECKING:
    from rest_framework.request import Request
    from rest_framework.views import APIView


class HasCapability(permissions.BasePermission):
    """
    Grants access when the user's role has the view's ``required_capability``.

    Usage:
        class AllPaymentsView(APIView):
            permission_classes = [IsAuthenticated, HasCapability]
            required_capability = Capability.VIEW_ALL_PAYMENTS
    """

    message = "You are not allowed to perform this action."

    def has_permission(self, request: Request, view: APIView) -> bool:
        capability: Capability | None = getattr(view, "required_capability", None)
        if capability is None:
            return True
        return policy.can(request.user, capability)
