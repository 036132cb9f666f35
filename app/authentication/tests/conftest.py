"""
Test configuration and fixtures for authentication tests.

Role fixtures (client_user, freelancer_user, admin_user, interviewer_user)
and API client helpers live in the project conftest.
"""

import pytest

from authentication.tests.factories import UserFactory


@pytest.fixture
def deactivated_user(db):
    return UserFactory(is_active=False)
