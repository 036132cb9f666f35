"""
Authentication application.

This app provides the custom email-based User model, marketplace roles
(client, freelancer, interviewer, admin), JWT login and the role policy.

Key components:
    - User model: Email login with a marketplace role, phone for gateway orders
    - policy: Role capability checks used by the workflow services

Usage:
    from authentication.models import Role, User
    from authentication.policy import Capability, require
"""

default_app_config = "authentication.apps.AuthenticationConfig"
