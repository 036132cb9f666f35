"""
Tests for UserManager.
"""

from datetime import timedelta

import pytest
from django.utils import timezone

from authentication.models import Role, User
from authentication.tests.factories import AdminFactory


@pytest.mark.django_db
class TestCreateUser:
    def test_normalizes_email_and_hashes_password(self):
        user = User.objects.create_user(email="Someone@EXAMPLE.com", password="pw-12345")

        assert user.email == "Someone@example.com"
        assert user.check_password("pw-12345")
        assert user.role == Role.CLIENT
        assert not user.is_staff

    def test_without_password_is_unusable(self):
        user = User.objects.create_user(email="nopw@example.com")
        assert not user.has_usable_password()

    def test_email_required(self):
        with pytest.raises(ValueError):
            User.objects.create_user(email="", password="pw")

    def test_superuser_holds_admin_role(self):
        user = User.objects.create_superuser(email="root@example.com", password="pw")

        assert user.role == Role.ADMIN
        assert user.is_staff
        assert user.is_superuser
        assert user.is_admin


@pytest.mark.django_db
class TestFirstAdmin:
    def test_returns_longest_standing_active_admin(self):
        older = AdminFactory()
        newer = AdminFactory()
        User.objects.filter(pk=older.pk).update(date_joined=timezone.now() - timedelta(days=30))

        assert User.objects.first_admin() == older
        assert newer != older

    def test_skips_inactive_admins(self):
        AdminFactory(is_active=False)
        assert User.objects.first_admin() is None

    def test_none_without_admins(self, client_user):
        assert User.objects.first_admin() is None


class TestUserDisplay:
    def test_full_name_falls_back_to_email(self):
        assert User(email="a@example.com").get_full_name() == "a@example.com"
        assert User(email="a@example.com", full_name="Asha").get_full_name() == "Asha"

    def test_short_name(self):
        assert User(email="asha@example.com").get_short_name() == "asha"
        assert User(email="asha@example.com", username="ash").get_short_name() == "ash"
