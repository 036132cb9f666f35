"""
Centralised authorization policy.

Every service operation states the capability it needs and asks this
module, instead of comparing role strings inline. Role grants live in one
table (ROLE_CAPABILITIES); ownership rules (the client who created a
project, the parties of a payment) are separate helpers because they
depend on the record, not only on the role.

Usage:
    from authentication.policy import Capability, require, require_project_owner

    require(actor, Capability.RELEASE_PAYMENT)
    require_project_owner(actor, project)

    if can(actor, Capability.VIEW_ALL_PAYMENTS):
        ...
"""

from __future__ import annotations

import enum
from typing import TYPE_CHECKING

from authentication.models import Role
from core.exceptions import ForbiddenError

if TYPE_CHECKING:
    from authentication.models import User


class Capability(str, enum.Enum):
    """Operations gated by role."""

    CREATE_PROJECT = "create_project"
    APPLY_TO_PROJECT = "apply_to_project"
    CHOOSE_APPLICANT = "choose_applicant"
    COMMIT_FREELANCER = "commit_freelancer"
    REQUEST_ADMIN_MANAGEMENT = "request_admin_management"
    COMPLETE_PROJECT = "complete_project"
    CANCEL_PROJECT = "cancel_project"
    UPDATE_ANY_PROJECT = "update_any_project"
    VIEW_ALL_PROJECTS = "view_all_projects"
    CREATE_PAYMENT_RECORD = "create_payment_record"
    PAY = "pay"
    CONFIRM_RECEIPT = "confirm_receipt"
    CONFIRM_ADMIN_FEE_RECEIPT = "confirm_admin_fee_receipt"
    RELEASE_PAYMENT = "release_payment"
    REFUND_PAYMENT = "refund_payment"
    VIEW_ALL_PAYMENTS = "view_all_payments"
    MODERATE_CHAT = "moderate_chat"
    SEND_IN_LOCKED_CHAT = "send_in_locked_chat"


ROLE_CAPABILITIES: dict[str, frozenset[Capability]] = {
    Role.CLIENT: frozenset({
        Capability.CREATE_PROJECT,
        Capability.CHOOSE_APPLICANT,
        Capability.COMMIT_FREELANCER,
        Capability.REQUEST_ADMIN_MANAGEMENT,
        Capability.COMPLETE_PROJECT,
        Capability.CANCEL_PROJECT,
        Capability.CREATE_PAYMENT_RECORD,
        Capability.PAY,
    }),
    Role.FREELANCER: frozenset({
        Capability.APPLY_TO_PROJECT,
        Capability.CONFIRM_RECEIPT,
    }),
    Role.ADMIN: frozenset({
        Capability.COMPLETE_PROJECT,
        Capability.CANCEL_PROJECT,
        Capability.UPDATE_ANY_PROJECT,
        Capability.VIEW_ALL_PROJECTS,
        Capability.CREATE_PAYMENT_RECORD,
        Capability.CONFIRM_ADMIN_FEE_RECEIPT,
        Capability.RELEASE_PAYMENT,
        Capability.REFUND_PAYMENT,
        Capability.VIEW_ALL_PAYMENTS,
        Capability.MODERATE_CHAT,
        Capability.SEND_IN_LOCKED_CHAT,
    }),
    Role.INTERVIEWER: frozenset(),
}

_DENIAL_MESSAGES: dict[Capability, str] = {
    Capability.CREATE_PROJECT: "Only clients can create projects",
    Capability.APPLY_TO_PROJECT: "Only freelancers can apply to projects",
    Capability.RELEASE_PAYMENT: "Only admins can release payments",
    Capability.REFUND_PAYMENT: "Only admins can refund payments",
    Capability.VIEW_ALL_PAYMENTS: "Only admins can view all payments",
    Capability.PAY: "Only clients can pay for projects",
    Capability.MODERATE_CHAT: "Only admins can moderate chats",
    Capability.CONFIRM_ADMIN_FEE_RECEIPT: "Only admins can confirm admin management fees",
}


def capabilities_for(user: User | None) -> frozenset[Capability]:
    if user is None or not user.is_authenticated or not user.is_active:
        return frozenset()
    return ROLE_CAPABILITIES.get(user.role, frozenset())


def can(user: User | None, capability: Capability) -> bool:
    """Return True if the user's role grants ``capability``."""
    return capability in capabilities_for(user)


def require(user: User | None, capability: Capability) -> None:
    """
    Raise ForbiddenError unless the user's role grants ``capability``.

    Raises:
        ForbiddenError: with error_code CAPABILITY_REQUIRED
    """
    if not can(user, capability):
        raise ForbiddenError(
            _DENIAL_MESSAGES.get(capability, "You are not allowed to perform this action"),
            error_code="CAPABILITY_REQUIRED",
            details={"capability": capability.value},
        )


def is_admin(user: User | None) -> bool:
    return user is not None and user.is_authenticated and user.role == Role.ADMIN


def require_project_owner(user: User, project) -> None:
    """Raise ForbiddenError unless ``user`` created ``project``."""
    if project.created_by_id != user.pk:
        raise ForbiddenError(
            "Only the client who created this project can do this",
            error_code="NOT_PROJECT_OWNER",
            details={"project_id": str(project.pk)},
        )


def require_owner_or_admin(user: User, project) -> None:
    """Raise ForbiddenError unless ``user`` owns ``project`` or is an admin."""
    if is_admin(user):
        return
    require_project_owner(user, project)


def require_payment_party(user: User, record) -> None:
    """Raise ForbiddenError unless ``user`` is the client, freelancer, or an admin."""
    if is_admin(user):
        return
    if user.pk in (record.client_id, record.freelancer_id):
        return
    raise ForbiddenError(
        "You are not a party to this payment",
        error_code="NOT_PAYMENT_PARTY",
        details={"payment_id": str(record.pk)},
    )
