"""
Root pytest configuration for the Django project.

This module configures pytest-django and provides project-wide fixtures.
App-specific fixtures are defined in each app's tests/conftest.py.
"""

import os

import pytest

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "config.settings")


def pytest_configure():
    """Adjust settings for the test run."""
    from django.conf import settings

    # Disable throttling during tests to prevent rate limit failures
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_CLASSES"] = []
    settings.REST_FRAMEWORK["DEFAULT_THROTTLE_RATES"] = {}

    # Test client speaks plain HTTP
    settings.SECURE_SSL_REDIRECT = False

    # Use fast password hasher for tests
    settings.PASSWORD_HASHERS = [
        "django.contrib.auth.hashers.MD5PasswordHasher",
    ]

    # Deterministic fee and gateway configuration
    settings.PLATFORM_SERVICE_CHARGE_PERCENT = 5
    settings.PLATFORM_COMMISSION_PERCENT = 10
    settings.ADMIN_MANAGEMENT_FEE_PERCENT = 5
    settings.ADMIN_MANAGEMENT_WINDOW_HOURS = 48
    settings.PAYMENT_CURRENCY = "INR"
    settings.CASHFREE_APP_ID = "test-app-id"
    settings.CASHFREE_SECRET_KEY = "test-secret-key"
    settings.CASHFREE_WEBHOOK_SECRET = "test-webhook-secret"
    settings.CASHFREE_BASE_URL = "https://sandbox.cashfree.test/pg"
    settings.CASHFREE_MAX_RETRIES = 1
    settings.PLATFORM_UPI_ID = "gigmarket@upi"
    settings.PLATFORM_UPI_PAYEE_NAME = "GigMarket"


# =============================================================================
# User Fixtures
# =============================================================================


@pytest.fixture
def client_user(db):
    """Client who posts projects and pays for them."""
    from authentication.tests.factories import ClientFactory

    return ClientFactory()


@pytest.fixture
def freelancer_user(db):
    from authentication.tests.factories import FreelancerFactory

    return FreelancerFactory()


@pytest.fixture
def other_freelancer(db):
    from authentication.tests.factories import FreelancerFactory

    return FreelancerFactory()


@pytest.fixture
def admin_user(db):
    from authentication.tests.factories import AdminFactory

    return AdminFactory()


@pytest.fixture
def interviewer_user(db):
    """User whose role grants no marketplace capabilities."""
    from authentication.models import Role
    from authentication.tests.factories import UserFactory

    return UserFactory(role=Role.INTERVIEWER)


# =============================================================================
# API Client Fixtures
# =============================================================================


@pytest.fixture
def api_client():
    """Unauthenticated API client."""
    from rest_framework.test import APIClient

    return APIClient()


@pytest.fixture
def client_for(db):
    """
    Factory returning an API client authenticated with a JWT for ``user``.

    Usage:
        def test_example(client_for, client_user):
            response = client_for(client_user).get("/api/v1/projects/")
    """
    from rest_framework.test import APIClient
    from rest_framework_simplejwt.tokens import RefreshToken

    def _make_client(user):
        client = APIClient()
        refresh = RefreshToken.for_user(user)
        client.credentials(HTTP_AUTHORIZATION=f"Bearer {refresh.access_token}")
        return client

    return _make_client


def pytest_collection_modifyitems(items):
    """
    Auto-mark tests based on filename patterns.

    Mapping:
    - test_journeys.py → e2e (full user journey workflows)
    - test_views.py, test_services.py, test_tasks.py, etc. → integration
    - test_policy.py, test_fees.py, test_state_transitions.py, etc. → unit
    - Unmatched files → integration (safe default for Django)

    Explicit markers on test functions/classes take precedence.
    """
    e2e_patterns = ["test_journeys.py"]

    integration_patterns = [
        "test_views.py",
        "test_services.py",
        "test_tasks.py",
        "test_webhooks.py",
        "test_commitment_workflow.py",
        "test_status_sync.py",
        "test_messaging.py",
    ]

    unit_patterns = [
        "test_policy.py",
        "test_fees.py",
        "test_adapters.py",
        "test_state_transitions.py",
        "test_exception_handler.py",
    ]

    for item in items:
        existing_markers = {m.name for m in item.iter_markers()}
        if existing_markers & {"unit", "integration", "e2e"}:
            continue

        filename = str(item.fspath).split("/")[-1]

        if any(pattern in filename for pattern in e2e_patterns):
            item.add_marker(pytest.mark.e2e)
        elif any(pattern in filename for pattern in integration_patterns):
            item.add_marker(pytest.mark.integration)
        elif any(pattern in filename for pattern in unit_patterns):
            item.add_marker(pytest.mark.unit)
        else:
            item.add_marker(pytest.mark.integration)
