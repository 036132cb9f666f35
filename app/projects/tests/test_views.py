"""
Tests for the projects API.
"""

from decimal import Decimal

import pytest

from projects.models import Application, ProjectStatus

BASE_URL = "/api/v1/projects/"


@pytest.mark.django_db
class TestProjectCrud:
    def test_create(self, client_for, client_user):
        response = client_for(client_user).post(
            BASE_URL,
            {"title": "Logo", "description": "A logo", "budget": "1000.00", "category": "Design"},
            format="json",
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["status"] == ProjectStatus.UNASSIGNED
        assert data["created_by"]["id"] == client_user.pk
        assert data["assigned_to"] is None

    def test_create_as_freelancer_forbidden(self, client_for, freelancer_user):
        response = client_for(freelancer_user).post(BASE_URL, {"title": "x", "description": "y"}, format="json")

        assert response.status_code == 403
        assert response.json()["error_code"] == "CAPABILITY_REQUIRED"

    def test_create_missing_title(self, client_for, client_user):
        response = client_for(client_user).post(BASE_URL, {"description": "y"}, format="json")

        assert response.status_code == 400
        assert "title" in response.json()["errors"]

    def test_list_and_filter(self, client_for, open_project, in_progress_project, client_user):
        api = client_for(client_user)

        assert len(api.get(BASE_URL).json()["data"]) == 2
        filtered = api.get(BASE_URL, {"status": "in-progress"}).json()["data"]
        assert [p["id"] for p in filtered] == [str(in_progress_project.id)]

    def test_retrieve_invisible(self, client_for, in_progress_project, other_freelancer):
        response = client_for(other_freelancer).get(f"{BASE_URL}{in_progress_project.id}/")

        assert response.status_code == 403
        assert response.json()["error_code"] == "PROJECT_NOT_VISIBLE"

    def test_partial_update(self, client_for, open_project, client_user):
        response = client_for(client_user).patch(
            f"{BASE_URL}{open_project.id}/", {"remarks": "Urgent"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["data"]["remarks"] == "Urgent"

    def test_delete(self, client_for, open_project, client_user):
        response = client_for(client_user).delete(f"{BASE_URL}{open_project.id}/")

        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "Project deleted", "data": None}


@pytest.mark.django_db
class TestLifecycleViews:
    def test_apply_returns_chat(self, client_for, open_project, freelancer_user):
        response = client_for(freelancer_user).post(
            f"{BASE_URL}{open_project.id}/apply/",
            {"expected_payment": "1100.00", "estimated_delivery": "2 weeks"},
            format="json",
        )

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["chat_id"]
        assert data["estimated_delivery"] == "2 weeks"

    def test_apply_twice_conflicts(self, client_for, discussion, open_project, freelancer_user):
        response = client_for(freelancer_user).post(f"{BASE_URL}{open_project.id}/apply/", {}, format="json")

        assert response.status_code == 409

    def test_choose_and_list_applications(self, client_for, discussion, open_project, client_user):
        application = Application.objects.get(project=open_project)
        api = client_for(client_user)

        response = api.post(
            f"{BASE_URL}{open_project.id}/choose-applicant/",
            {"application_id": application.pk},
            format="json",
        )
        assert response.status_code == 200
        assert response.json()["data"]["is_chosen_by_client"] is True

        chosen = api.get(f"{BASE_URL}{open_project.id}/applications/", {"chosen": "true"}).json()["data"]
        assert [a["id"] for a in chosen] == [application.pk]

    def test_request_admin_management(self, client_for, in_progress_project, client_user, admin_user):
        response = client_for(client_user).post(f"{BASE_URL}{in_progress_project.id}/request-admin-management/")

        assert response.status_code == 201
        data = response.json()["data"]
        assert data["project"]["has_requested_admin_management"] is True
        assert data["admin_fee_payment"]["total_amount"] == "60.00"
        assert data["admin_fee_payment"]["moderation_id"].startswith("MOD-")

    def test_complete_and_cancel(self, client_for, in_progress_project, open_project, client_user):
        api = client_for(client_user)

        completed = api.post(f"{BASE_URL}{in_progress_project.id}/complete/")
        assert completed.status_code == 200
        assert completed.json()["data"]["status"] == ProjectStatus.COMPLETED

        cancelled = api.post(f"{BASE_URL}{open_project.id}/cancel/")
        assert cancelled.status_code == 200
        assert cancelled.json()["data"]["status"] == ProjectStatus.CANCELLED

    def test_complete_open_project_is_bad_request(self, client_for, open_project, client_user):
        response = client_for(client_user).post(f"{BASE_URL}{open_project.id}/complete/")

        assert response.status_code == 400
        assert response.json()["error_code"] == "PROJECT_NOT_IN_PROGRESS"

    def test_proceed_through_chat_endpoint(self, client_for, discussion, client_user, freelancer_user):
        response = client_for(client_user).post(
            f"/api/v1/chat/chats/{discussion.id}/proceed/",
            {"final_budget": "1200.00"},
            format="json",
        )

        assert response.status_code == 200
        data = response.json()["data"]
        assert data["status"] == ProjectStatus.IN_PROGRESS
        assert Decimal(data["final_budget"]) == Decimal("1200")
        assert data["assigned_to"]["id"] == freelancer_user.pk
