"""
Project services.

This module provides:
- ProjectCommitmentWorkflow: Posting, applications, commitment,
  admin-management escalation, completion and cancellation

Usage:
    from projects.services import ProjectCommitmentWorkflow

    project = ProjectCommitmentWorkflow.complete(project.id, actor=client)
"""

from projects.services.commitment_workflow import ProjectCommitmentWorkflow

__all__ = [
    "ProjectCommitmentWorkflow",
]
