"""
DRF views for projects app.

Endpoints:
    GET    /api/v1/projects/                               - List visible projects (?status=)
    POST   /api/v1/projects/                               - Create project (client)
    GET    /api/v1/projects/{id}/                          - Get project
    PATCH  /api/v1/projects/{id}/                          - Update open project
    DELETE /api/v1/projects/{id}/                          - Delete project (owner)
    POST   /api/v1/projects/{id}/apply/                    - Apply (freelancer)
    GET    /api/v1/projects/{id}/applications/             - List applications (?chosen=true)
    POST   /api/v1/projects/{id}/choose-applicant/         - Shortlist an applicant
    POST   /api/v1/projects/{id}/request-admin-management/ - Escalate to admin oversight
    POST   /api/v1/projects/{id}/complete/                 - Complete project
    POST   /api/v1/projects/{id}/cancel/                   - Cancel project

Committing to a freelancer happens from the discussion chat:
    POST /api/v1/chat/chats/{id}/proceed/
"""

from __future__ import annotations

from drf_spectacular.utils import OpenApiParameter, extend_schema, extend_schema_view
from rest_framework import status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated

from core.responses import success_response
from payments.serializers import PaymentRecordSerializer
from projects.serializers import (
    ApplicationSerializer,
    ApplySerializer,
    ChooseApplicantSerializer,
    ProjectSerializer,
    ProjectWriteSerializer,
)
from projects.services import ProjectCommitmentWorkflow


@extend_schema_view(
    list=extend_schema(
        operation_id="list_projects",
        summary="List projects",
        parameters=[
            OpenApiParameter(
                name="status",
                type=str,
                location=OpenApiParameter.QUERY,
                description="Filter by project status",
                required=False,
            ),
        ],
        tags=["Projects"],
    ),
    retrieve=extend_schema(operation_id="get_project", summary="Get project", tags=["Projects"]),
    create=extend_schema(
        operation_id="create_project",
        summary="Create project",
        request=ProjectWriteSerializer,
        responses={201: ProjectSerializer},
        tags=["Projects"],
    ),
    partial_update=extend_schema(
        operation_id="update_project",
        summary="Update project",
        request=ProjectWriteSerializer,
        tags=["Projects"],
    ),
    destroy=extend_schema(operation_id="delete_project", summary="Delete project", tags=["Projects"]),
)
class ProjectViewSet(viewsets.GenericViewSet):
    """
    Project lifecycle endpoints.

    Visibility and permissions are enforced by ProjectCommitmentWorkflow.
    """

    permission_classes = [IsAuthenticated]
    serializer_class = ProjectSerializer
    lookup_value_regex = "[0-9a-f-]{32,36}"

    def list(self, request):
        projects = ProjectCommitmentWorkflow.list_for_user(
            request.user,
            status=request.query_params.get("status"),
        )
        return success_response(ProjectSerializer(projects, many=True).data)

    def retrieve(self, request, pk=None):
        project = ProjectCommitmentWorkflow.get_for_user(pk, request.user)
        return success_response(ProjectSerializer(project).data)

    def create(self, request):
        serializer = ProjectWriteSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        project = ProjectCommitmentWorkflow.create(request.user, **serializer.validated_data)
        return success_response(
            ProjectSerializer(project).data,
            message="Project created",
            status=status.HTTP_201_CREATED,
        )

    def partial_update(self, request, pk=None):
        serializer = ProjectWriteSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        project = ProjectCommitmentWorkflow.update(pk, request.user, **serializer.validated_data)
        return success_response(ProjectSerializer(project).data, message="Project updated")

    def destroy(self, request, pk=None):
        ProjectCommitmentWorkflow.delete(pk, request.user)
        return success_response(message="Project deleted")

    @extend_schema(
        operation_id="apply_to_project",
        summary="Apply to project",
        request=ApplySerializer,
        responses={201: ApplicationSerializer},
        tags=["Projects"],
    )
    @action(detail=True, methods=["post"])
    def apply(self, request, pk=None):
        serializer = ApplySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        application, chat = ProjectCommitmentWorkflow.apply(pk, request.user, **serializer.validated_data)
        return success_response(
            {**ApplicationSerializer(application).data, "chat_id": str(chat.pk)},
            message="Application submitted",
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(
        operation_id="list_project_applications",
        summary="List applications",
        parameters=[
            OpenApiParameter(
                name="chosen",
                type=bool,
                location=OpenApiParameter.QUERY,
                description="Only chosen (true) or not chosen (false) applications",
                required=False,
            ),
        ],
        responses={200: ApplicationSerializer(many=True)},
        tags=["Projects"],
    )
    @action(detail=True, methods=["get"])
    def applications(self, request, pk=None):
        chosen = request.query_params.get("chosen")
        applications = ProjectCommitmentWorkflow.list_applications(
            pk,
            request.user,
            chosen=None if chosen is None else chosen.lower() == "true",
        )
        return success_response(ApplicationSerializer(applications, many=True).data)

    @extend_schema(
        operation_id="choose_applicant",
        summary="Choose applicant",
        request=ChooseApplicantSerializer,
        responses={200: ApplicationSerializer},
        tags=["Projects"],
    )
    @action(detail=True, methods=["post"], url_path="choose-applicant")
    def choose_applicant(self, request, pk=None):
        serializer = ChooseApplicantSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        application = ProjectCommitmentWorkflow.choose_applicant(
            pk,
            serializer.validated_data["application_id"],
            request.user,
        )
        return success_response(ApplicationSerializer(application).data, message="Applicant chosen")

    @extend_schema(
        operation_id="request_admin_management",
        summary="Request admin management",
        request=None,
        tags=["Projects"],
    )
    @action(detail=True, methods=["post"], url_path="request-admin-management")
    def request_admin_management(self, request, pk=None):
        project, fee_record = ProjectCommitmentWorkflow.request_admin_management(pk, request.user)
        return success_response(
            {
                "project": ProjectSerializer(project).data,
                "admin_fee_payment": PaymentRecordSerializer(fee_record).data,
            },
            message="Admin management requested",
            status=status.HTTP_201_CREATED,
        )

    @extend_schema(operation_id="complete_project", summary="Complete project", request=None, tags=["Projects"])
    @action(detail=True, methods=["post"])
    def complete(self, request, pk=None):
        project = ProjectCommitmentWorkflow.complete(pk, request.user)
        return success_response(ProjectSerializer(project).data, message="Project completed")

    @extend_schema(operation_id="cancel_project", summary="Cancel project", request=None, tags=["Projects"])
    @action(detail=True, methods=["post"])
    def cancel(self, request, pk=None):
        project = ProjectCommitmentWorkflow.cancel(pk, request.user)
        return success_response(ProjectSerializer(project).data, message="Project cancelled")
