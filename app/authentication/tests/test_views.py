"""
Tests for authentication endpoints.
"""

import pytest

from authentication.models import Role
from authentication.tests.factories import FreelancerFactory

ME_URL = "/api/v1/auth/me/"
TOKEN_URL = "/api/v1/auth/token/"


@pytest.mark.django_db
class TestTokenObtain:
    def test_obtain_pair_with_email_and_password(self, api_client):
        FreelancerFactory(email="asha@example.com", password="S3cret-pass")

        response = api_client.post(
            TOKEN_URL,
            {"email": "asha@example.com", "password": "S3cret-pass"},
            format="json",
        )

        assert response.status_code == 200
        assert "access" in response.data
        assert "refresh" in response.data

    def test_wrong_password_rejected(self, api_client):
        FreelancerFactory(email="asha@example.com", password="S3cret-pass")

        response = api_client.post(
            TOKEN_URL,
            {"email": "asha@example.com", "password": "wrong"},
            format="json",
        )

        assert response.status_code == 401
        assert response.data["success"] is False


@pytest.mark.django_db
class TestMeView:
    def test_requires_authentication(self, api_client):
        response = api_client.get(ME_URL)

        assert response.status_code == 401
        assert response.data["success"] is False

    def test_returns_current_user_with_role(self, client_for, freelancer_user):
        response = client_for(freelancer_user).get(ME_URL)

        assert response.status_code == 200
        assert response.data["success"] is True
        assert response.data["data"]["email"] == freelancer_user.email
        assert response.data["data"]["role"] == Role.FREELANCER

    def test_patch_updates_profile_but_not_role(self, client_for, freelancer_user):
        response = client_for(freelancer_user).patch(
            ME_URL,
            {"full_name": "Asha Rao", "phone": "9000000001", "role": Role.ADMIN},
            format="json",
        )

        assert response.status_code == 200
        freelancer_user.refresh_from_db()
        assert freelancer_user.full_name == "Asha Rao"
        assert freelancer_user.phone == "9000000001"
        assert freelancer_user.role == Role.FREELANCER
