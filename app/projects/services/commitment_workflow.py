"""
ProjectCommitmentWorkflow: project lifecycle from posting to completion.

    unassigned ──choose_applicant──▶ pending
    unassigned/pending ──proceed_with_freelancer──▶ in-progress
    in-progress ──complete──▶ completed
    unassigned/pending/in-progress ──cancel──▶ cancelled
    in-progress ──request_admin_management──▶ in-progress (escalated)

Each transition runs the django-fsm method on the instance, then persists
it with a conditional UPDATE on the previous status. Chat side effects go
through ChatStatusSync and payment side effects through
PaymentRecordService, inside the same transaction.

Usage:
    from projects.services import ProjectCommitmentWorkflow

    project = ProjectCommitmentWorkflow.create(client, title="Logo", description="...", budget=1000)
    application, chat = ProjectCommitmentWorkflow.apply(project.id, freelancer)
    project = ProjectCommitmentWorkflow.proceed_with_freelancer(chat.id, Decimal("1200"), client)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from django.conf import settings
from django.contrib.auth import get_user_model
from django.db import IntegrityError
from django.db.models import Q
from django.utils import timezone

from authentication import policy
from authentication.policy import Capability
from chat.models import Chat, ChatStatus, ChatType
from chat.services import ChatStatusSync
from core.exceptions import ConflictError, ForbiddenError, InvalidStateError, NotFoundError, ValidationError
from core.services import BaseService
from notifications.models import NotificationKind
from notifications.services import NotificationService
from payments.fees import to_amount
from payments.models import PaymentRecord
from payments.services import PaymentRecordService
from projects.models import OPEN_STATUSES, Application, Project, ProjectStatus

if TYPE_CHECKING:
    from decimal import Decimal

    from authentication.models import User


EDITABLE_FIELDS = frozenset({"title", "description", "category", "budget", "deadline", "remarks"})


class ProjectCommitmentWorkflow(BaseService):
    """
    Service for project lifecycle operations.

    Methods:
        create / update / delete: Project posting CRUD
        apply: Freelancer applies and opens a discussion
        choose_applicant: Client shortlists an applicant
        proceed_with_freelancer: Client commits to one discussion
        request_admin_management: Client escalates to admin oversight
        complete / cancel: Terminal transitions
        get_for_user / list_for_user / list_applications: Reads
    """

    # =========================================================================
    # Posting
    # =========================================================================

    @classmethod
    def create(cls, client: User, **fields) -> Project:
        """
        Raises:
            ForbiddenError: Actor is not a client
            ValidationError: Negative budget
        """
        policy.require(client, Capability.CREATE_PROJECT)
        cls._validate_budget(fields.get("budget"))

        project = Project.objects.create(created_by=client, **fields)
        cls.get_logger().info(
            "Project created",
            extra={"project_id": str(project.id), "client_id": client.pk},
        )
        return project

    @classmethod
    def update(cls, project_id, actor: User, **fields) -> Project:
        """
        Edit posting details while the project is still open.

        Raises:
            ForbiddenError: Actor is neither the owner nor an admin
            ValidationError: A field that cannot be edited this way
            InvalidStateError: Project is no longer open
        """
        project = cls._get(project_id)
        if not policy.can(actor, Capability.UPDATE_ANY_PROJECT):
            policy.require_project_owner(actor, project)

        unknown = set(fields) - EDITABLE_FIELDS
        if unknown:
            raise ValidationError(
                "These fields cannot be updated",
                error_code="FIELD_NOT_EDITABLE",
                details={"fields": sorted(unknown)},
            )
        if "budget" in fields:
            cls._validate_budget(fields["budget"])

        cls._require_open(project)
        for name, value in fields.items():
            setattr(project, name, value)

        if fields and not cls.conditional_update(project, list(fields), status__in=OPEN_STATUSES):
            raise InvalidStateError(
                "Project can only be edited before a freelancer is committed",
                error_code="PROJECT_NOT_OPEN",
                details={"project_id": str(project.id)},
            )
        return project

    @classmethod
    def delete(cls, project_id, actor: User) -> None:
        """
        Raises:
            ForbiddenError: Actor is not the owner
            ConflictError: A payment record references the project
        """
        project = cls._get(project_id)
        policy.require_project_owner(actor, project)

        if PaymentRecord.objects.filter(project=project).exists():
            raise ConflictError(
                "Projects with payments cannot be deleted",
                error_code="PROJECT_HAS_PAYMENTS",
                details={"project_id": str(project.id)},
            )

        project.delete()
        cls.get_logger().info("Project deleted", extra={"project_id": str(project_id), "actor_id": actor.pk})

    # =========================================================================
    # Applications
    # =========================================================================

    @classmethod
    def apply(cls, project_id, freelancer: User, **application_fields) -> tuple[Application, Chat]:
        """
        Apply to a project and open the discussion chat with its client.

        Raises:
            ForbiddenError: Actor is not a freelancer
            InvalidStateError: Project is no longer open
            ConflictError: A discussion already exists for this freelancer
        """
        policy.require(freelancer, Capability.APPLY_TO_PROJECT)
        project = cls._get(project_id)
        cls._require_open(project)

        try:
            with cls.atomic():
                chat = ChatStatusSync.open_discussion(project, freelancer)
                application = Application.objects.create(
                    project=project,
                    applicant=freelancer,
                    **application_fields,
                )
        except IntegrityError as e:
            raise ConflictError(
                "You have already applied to this project",
                error_code="ALREADY_APPLIED",
                details={"project_id": str(project.id)},
            ) from e

        NotificationService.notify(
            project.created_by_id,
            NotificationKind.APPLICATION,
            title="New application",
            preview=f"{freelancer.get_full_name()} applied to {project.title}",
            meta={"project_id": project.id, "application_id": application.pk, "chat_id": chat.pk},
        )
        return application, chat

    @classmethod
    def choose_applicant(cls, project_id, application_id, actor: User) -> Application:
        """
        Shortlist an applicant and move the project to pending.

        Other applications keep their flags.

        Raises:
            ForbiddenError: Actor is not the owning client
            NotFoundError: Application is not for this project
            InvalidStateError: Project is no longer open
        """
        policy.require(actor, Capability.CHOOSE_APPLICANT)
        project = cls._get(project_id)
        policy.require_project_owner(actor, project)

        application = Application.objects.filter(pk=application_id, project=project).first()
        if application is None:
            raise NotFoundError(
                "Application not found",
                error_code="APPLICATION_NOT_FOUND",
                details={"application_id": application_id},
            )

        with cls.atomic():
            previous = cls.run_transition(project, "mark_pending", error_code="PROJECT_NOT_OPEN")
            if not cls.conditional_update(project, ["status"], status=previous):
                raise InvalidStateError(
                    "Project changed while choosing an applicant",
                    error_code="PROJECT_NOT_OPEN",
                    details={"project_id": str(project.id)},
                )
            Application.objects.filter(pk=application.pk).update(is_chosen_by_client=True, updated_at=timezone.now())
            application.is_chosen_by_client = True

        NotificationService.notify(
            application.applicant_id,
            NotificationKind.APPLICATION,
            title="You were shortlisted",
            preview=f"The client chose your application for {project.title}",
            meta={"project_id": project.id, "application_id": application.pk},
        )
        return application

    # =========================================================================
    # Commitment
    # =========================================================================

    @classmethod
    def proceed_with_freelancer(cls, chat_id, final_budget: Decimal, actor: User) -> Project:
        """
        Commit the project to the freelancer of a discussion chat.

        Sets the chat committed, closes its siblings, assigns the freelancer
        and records the final budget, all in one transaction.

        Raises:
            NotFoundError: Chat does not exist
            ValidationError: Chat is not a project discussion, or bad budget
            ConflictError: Chat already committed, or the project was committed first
            ForbiddenError: Actor does not own the project
            InvalidStateError: Project is not open, or the chat is closed
        """
        policy.require(actor, Capability.COMMIT_FREELANCER)
        chat = Chat.objects.select_related("project", "freelancer").filter(pk=chat_id).first()
        if chat is None:
            raise NotFoundError("Chat not found", error_code="CHAT_NOT_FOUND", details={"chat_id": str(chat_id)})
        if chat.chat_type != ChatType.PROJECT or chat.project is None or chat.freelancer is None:
            raise ValidationError(
                "Only project discussions can be committed",
                error_code="NOT_PROJECT_DISCUSSION",
                details={"chat_id": str(chat.pk)},
            )
        if chat.status == ChatStatus.COMMITTED:
            raise ConflictError(
                "This discussion is already committed",
                error_code="CHAT_ALREADY_COMMITTED",
                details={"chat_id": str(chat.pk)},
            )

        project = chat.project
        policy.require_project_owner(actor, project)

        amount = to_amount(final_budget)
        if amount <= 0:
            raise ValidationError(
                "Final budget must be greater than zero",
                error_code="INVALID_AMOUNT",
                details={"final_budget": str(final_budget)},
            )

        with cls.atomic():
            previous = cls.run_transition(project, "commit", chat.freelancer, amount, error_code="PROJECT_NOT_OPEN")
            if not cls.conditional_update(project, ["status", "assigned_to", "final_budget"], status=previous):
                raise ConflictError(
                    "This project was already committed",
                    error_code="PROJECT_ALREADY_COMMITTED",
                    details={"project_id": str(project.id)},
                )
            _, closed = ChatStatusSync.commit(chat)

        cls.get_logger().info(
            "Freelancer committed",
            extra={
                "project_id": str(project.id),
                "chat_id": str(chat.pk),
                "freelancer_id": chat.freelancer_id,
                "final_budget": str(amount),
            },
        )

        NotificationService.notify(
            chat.freelancer_id,
            NotificationKind.PROJECT,
            title="You got the project",
            preview=f"The client committed to you for {project.title}",
            meta={"project_id": project.id, "chat_id": chat.pk},
        )
        for sibling in closed:
            NotificationService.notify(
                sibling.freelancer_id,
                NotificationKind.PROJECT,
                title="Discussion closed",
                preview=f"The client chose another freelancer for {project.title}",
                meta={"project_id": project.id, "chat_id": sibling.pk},
            )
        return project

    @classmethod
    def request_admin_management(cls, project_id, actor: User) -> tuple[Project, PaymentRecord]:
        """
        Escalate an in-progress project to admin oversight.

        Creates the admin-management fee record, adds the service charge to
        an unpaid main record, and locks the project's chats with an admin
        participant.

        Raises:
            ForbiddenError: Actor is not the owning client
            ValidationError: Not in-progress, already requested, or the
                window since creation has passed
        """
        policy.require(actor, Capability.REQUEST_ADMIN_MANAGEMENT)
        project = cls._get(project_id)
        policy.require_project_owner(actor, project)

        now = timezone.now()
        if project.status != ProjectStatus.IN_PROGRESS:
            raise ValidationError(
                "Admin management can only be requested for projects in progress",
                error_code="PROJECT_NOT_IN_PROGRESS",
                details={"project_id": str(project.id), "status": project.status},
            )
        if project.has_requested_admin_management:
            raise ValidationError(
                "Admin management has already been requested",
                error_code="ADMIN_MANAGEMENT_ALREADY_REQUESTED",
                details={"project_id": str(project.id)},
            )
        if not project.within_admin_management_window(now):
            raise ValidationError(
                "Admin management can only be requested within "
                f"{settings.ADMIN_MANAGEMENT_WINDOW_HOURS} hours of posting the project",
                error_code="ADMIN_MANAGEMENT_WINDOW_EXPIRED",
                details={"project_id": str(project.id), "deadline": project.admin_management_deadline().isoformat()},
            )

        admin = get_user_model().objects.first_admin()

        with cls.atomic():
            project.has_requested_admin_management = True
            project.admin_management_requested_at = now
            if not cls.conditional_update(
                project,
                ["has_requested_admin_management", "admin_management_requested_at"],
                status=ProjectStatus.IN_PROGRESS,
                has_requested_admin_management=False,
            ):
                raise ValidationError(
                    "Admin management has already been requested",
                    error_code="ADMIN_MANAGEMENT_ALREADY_REQUESTED",
                    details={"project_id": str(project.id)},
                )

            fee_record = PaymentRecordService.create_admin_fee_record(project)
            cls._recompute_main_record_fees(project)
            ChatStatusSync.enable_admin_management(project, admin)

        cls.get_logger().info(
            "Admin management requested",
            extra={
                "project_id": str(project.id),
                "fee_payment_id": str(fee_record.id),
                "moderation_id": fee_record.moderation_id,
            },
        )

        meta = {"project_id": project.id, "payment_id": fee_record.id}
        if admin is not None:
            NotificationService.notify(
                admin.pk,
                NotificationKind.PROJECT,
                title="Admin management requested",
                preview=f"{project.title} ({fee_record.moderation_id}) needs an admin",
                meta=meta,
            )
        NotificationService.notify(
            project.assigned_to_id,
            NotificationKind.PROJECT,
            title="Project under admin management",
            preview=f"An admin now oversees {project.title}",
            meta=meta,
        )
        NotificationService.notify(
            project.created_by_id,
            NotificationKind.PAYMENT,
            title="Admin management fee due",
            preview=f"{fee_record.stage_amount} {fee_record.currency} ({fee_record.moderation_id})",
            meta=meta,
        )
        return project, fee_record

    @classmethod
    def _recompute_main_record_fees(cls, project: Project) -> None:
        record = PaymentRecord.objects.main_for_project(project.id)
        if record is None or record.is_paid:
            cls.get_logger().info(
                "Skipping fee recompute for main payment record",
                extra={
                    "project_id": str(project.id),
                    "reason": "missing" if record is None else "already_paid",
                },
            )
            return
        try:
            PaymentRecordService.recompute_fees(record.id, admin_managed=True)
        except InvalidStateError:
            # Paid between the read and the update
            cls.get_logger().info(
                "Skipping fee recompute for main payment record",
                extra={"project_id": str(project.id), "reason": "already_paid"},
            )

    # =========================================================================
    # Terminal Transitions
    # =========================================================================

    @classmethod
    def complete(cls, project_id, actor: User) -> Project:
        """
        Mark an in-progress project completed. Does not release funds.

        Raises:
            ForbiddenError: Actor is neither the owner nor an admin
            InvalidStateError: Project is not in progress
        """
        policy.require(actor, Capability.COMPLETE_PROJECT)
        project = cls._get(project_id)
        policy.require_owner_or_admin(actor, project)

        previous = cls.run_transition(project, "complete", error_code="PROJECT_NOT_IN_PROGRESS")
        if not cls.conditional_update(project, ["status", "completed_at"], status=previous):
            raise ConflictError(
                "Project changed while completing",
                error_code="PROJECT_STATUS_CHANGED",
                details={"project_id": str(project.id)},
            )

        cls.get_logger().info("Project completed", extra={"project_id": str(project.id), "actor_id": actor.pk})
        NotificationService.notify(
            project.assigned_to_id,
            NotificationKind.PROJECT,
            title="Project completed",
            preview=f"{project.title} was marked as completed",
            meta={"project_id": project.id},
        )
        return project

    @classmethod
    def cancel(cls, project_id, actor: User) -> Project:
        """
        Cancel a project that is not yet completed. Does not refund.

        Raises:
            ForbiddenError: Actor is neither the owner nor an admin
            InvalidStateError: Project is already completed or cancelled
        """
        policy.require(actor, Capability.CANCEL_PROJECT)
        project = cls._get(project_id)
        policy.require_owner_or_admin(actor, project)

        freelancer_id = project.assigned_to_id
        previous = cls.run_transition(project, "cancel", error_code="PROJECT_NOT_CANCELLABLE")
        if not cls.conditional_update(project, ["status", "assigned_to", "cancelled_at"], status=previous):
            raise ConflictError(
                "Project changed while cancelling",
                error_code="PROJECT_STATUS_CHANGED",
                details={"project_id": str(project.id)},
            )

        cls.get_logger().info("Project cancelled", extra={"project_id": str(project.id), "actor_id": actor.pk})
        NotificationService.notify(
            freelancer_id,
            NotificationKind.PROJECT,
            title="Project cancelled",
            preview=f"{project.title} was cancelled",
            meta={"project_id": project.id},
        )
        return project

    # =========================================================================
    # Reads
    # =========================================================================

    @classmethod
    def list_for_user(cls, actor: User, status: str | None = None):
        """
        Clients see their own projects, freelancers see open projects and
        the ones assigned to them, admins see everything.

        Raises:
            ForbiddenError: Role has no project access
        """
        queryset = Project.objects.select_related("created_by", "assigned_to")
        if policy.can(actor, Capability.VIEW_ALL_PROJECTS):
            pass
        elif actor.is_client:
            queryset = queryset.filter(created_by=actor)
        elif actor.is_freelancer:
            queryset = queryset.filter(Q(status__in=OPEN_STATUSES) | Q(assigned_to=actor))
        else:
            raise ForbiddenError("Your role cannot view projects", error_code="ROLE_HAS_NO_PROJECTS")

        if status:
            queryset = queryset.filter(status=status)
        return queryset

    @classmethod
    def get_for_user(cls, project_id, actor: User) -> Project:
        project = cls._get(project_id)
        if not cls.list_for_user(actor).filter(pk=project.pk).exists():
            raise ForbiddenError(
                "You cannot view this project",
                error_code="PROJECT_NOT_VISIBLE",
                details={"project_id": str(project.id)},
            )
        return project

    @classmethod
    def list_applications(cls, project_id, actor: User, chosen: bool | None = None):
        project = cls._get(project_id)
        policy.require_owner_or_admin(actor, project)
        queryset = project.applications.select_related("applicant")
        if chosen is not None:
            queryset = queryset.filter(is_chosen_by_client=chosen)
        return queryset

    # =========================================================================
    # Internals
    # =========================================================================

    @classmethod
    def _get(cls, project_id) -> Project:
        project = Project.objects.select_related("created_by").filter(pk=project_id).first()
        if project is None:
            raise NotFoundError(
                "Project not found",
                error_code="PROJECT_NOT_FOUND",
                details={"project_id": str(project_id)},
            )
        return project

    @classmethod
    def _require_open(cls, project: Project) -> None:
        if not project.is_open:
            raise InvalidStateError(
                "Project is no longer open",
                error_code="PROJECT_NOT_OPEN",
                details={"project_id": str(project.id), "status": project.status},
            )

    @classmethod
    def _validate_budget(cls, budget) -> None:
        if budget is not None and to_amount(budget) < 0:
            raise ValidationError("Budget cannot be negative", error_code="INVALID_BUDGET")
