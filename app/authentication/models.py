"""
Authentication models.

This module defines the marketplace user:
- User: email-based account carrying the marketplace role
- Role: typed role enum consulted by authentication.policy

Related files:
    - managers.py: Custom user manager for email-based creation
    - policy.py: Capability checks per role (AuthContext)

Security:
    - User passwords hashed with Django's PBKDF2
    - Role is never writable through the public API
"""

from django.contrib.auth.models import AbstractBaseUser, PermissionsMixin
from django.db import models

from authentication.managers import UserManager


class Role(models.TextChoices):
    """Marketplace role of a user."""

    CLIENT = "client", "Client"
    FREELANCER = "freelancer", "Freelancer"
    ADMIN = "admin", "Admin"
    INTERVIEWER = "interviewer", "Interviewer"


class User(AbstractBaseUser, PermissionsMixin):
    """
    Custom User model using email as the primary identifier.

    Fields:
        email: Primary identifier, unique, used for login
        username: Public handle shown in chats
        full_name: Display name, also sent to the payment gateway as customer name
        phone: Contact number, required by the gateway for order creation
        role: Marketplace role (client, freelancer, admin, interviewer)
        is_active: Whether the user account is active
        is_staff: Whether the user can access Django admin
        date_joined: When the user account was created

    Usage:
        client = User.objects.create_user(
            email="client@example.com",
            password="securepassword",
            role=Role.CLIENT,
        )
    """

    email = models.EmailField(
        unique=True,
        db_index=True,
        max_length=254,
        help_text="User's email address (primary identifier)",
    )
    username = models.CharField(
        max_length=30,
        unique=True,
        null=True,
        blank=True,
        help_text="Public handle",
    )
    full_name = models.CharField(max_length=150, blank=True, default="")
    phone = models.CharField(max_length=20, blank=True, default="")
    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.CLIENT,
        db_index=True,
        help_text="Marketplace role used for capability checks",
    )

    is_active = models.BooleanField(
        default=True,
        help_text="Whether this user account is active. Deselect instead of deleting.",
    )
    is_staff = models.BooleanField(
        default=False,
        help_text="Whether the user can access the admin site.",
    )

    date_joined = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    USERNAME_FIELD = "email"
    REQUIRED_FIELDS = []

    objects = UserManager()

    class Meta:
        verbose_name = "user"
        verbose_name_plural = "users"
        ordering = ["-date_joined"]

    def __str__(self):
        return self.email

    def get_full_name(self):
        return self.full_name or self.email

    def get_short_name(self):
        return self.username or self.email.split("@")[0]

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

    @property
    def is_client(self) -> bool:
        return self.role == Role.CLIENT

    @property
    def is_freelancer(self) -> bool:
        return self.role == Role.FREELANCER
