"""
Pytest fixtures for project tests.

Usage:
    def test_commit(discussion, client_user):
        project = ProjectCommitmentWorkflow.proceed_with_freelancer(discussion.id, Decimal("1200"), client_user)
"""

from decimal import Decimal

import pytest

from projects.services import ProjectCommitmentWorkflow
from projects.tests.factories import InProgressProjectFactory, ProjectFactory


@pytest.fixture
def open_project(db, client_user):
    """Unassigned project with a 1000 budget."""
    return ProjectFactory(created_by=client_user, budget=Decimal("1000"))


@pytest.fixture
def discussion(open_project, freelancer_user):
    """Discussion chat opened by freelancer_user applying to open_project."""
    _, chat = ProjectCommitmentWorkflow.apply(open_project.id, freelancer_user, expected_payment=Decimal("1200"))
    return chat


@pytest.fixture
def other_discussion(open_project, other_freelancer):
    _, chat = ProjectCommitmentWorkflow.apply(open_project.id, other_freelancer)
    return chat


@pytest.fixture
def in_progress_project(db, client_user, freelancer_user):
    return InProgressProjectFactory(
        created_by=client_user,
        assigned_to=freelancer_user,
        final_budget=Decimal("1200"),
    )
