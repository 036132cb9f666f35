"""
Test configuration and fixtures for notification tests.

Usage:
    def test_example(client_user, unread_notification, client_for):
        response = client_for(client_user).get("/api/v1/notifications/")
        assert response.status_code == 200
"""

import pytest

from notifications.tests.factories import NotificationFactory


@pytest.fixture
def unread_notification(client_user):
    return NotificationFactory(recipient=client_user)


@pytest.fixture
def read_notification(client_user):
    return NotificationFactory(recipient=client_user, is_read=True)


@pytest.fixture
def foreign_notification(freelancer_user):
    """Notification owned by someone other than client_user."""
    return NotificationFactory(recipient=freelancer_user)
