"""
Newsroom Models

The dashboard shell only needs to know who the viewer is and which backend
role string they hold. Everything else (articles, ads, notifications) lives
behind the REST API and is never stored here.

- CustomUser: user with a verbatim backend role string and derived
  canonical role / permission codes
"""

from django.contrib.auth.models import AbstractUser
from django.db import models
from django.utils.translation import gettext_lazy as _

from . import roles


class CustomUser(AbstractUser):
    """
    Custom user model carrying the backend role string.

    The role is stored exactly as the backend hands it out (``system_admin``,
    ``chief_editor``, ...). The canonical role used for navigation is always
    derived through ``roles.map_role`` and never stored.
    """

    ROLE_CHOICES = roles.BACKEND_ROLE_CHOICES

    role = models.CharField(
        max_length=32,
        choices=ROLE_CHOICES,
        default=roles.READER,
        help_text=_("Backend role string")
    )

    preferred_language = models.CharField(
        max_length=2,
        choices=[('ar', 'العربية'), ('en', 'English'), ('ur', 'اردو')],
        default='ar',
        help_text=_("Language used for labels and toasts")
    )

    class Meta:
        verbose_name = _('User')
        verbose_name_plural = _('Users')
        ordering = ['-date_joined']

    def __str__(self):
        return f"{self.username} ({self.role})"

    @property
    def canonical_role(self):
        """Canonical role used to filter navigation."""
        return roles.map_role(self.role)

    @property
    def nav_permissions(self):
        """Permission codes of the canonical role (aliases share them)."""
        return roles.permissions_for_roles([self.role])

    @property
    def is_newsroom_admin(self):
        """Admins and system admins (auto-publish banner, role assignment)."""
        return roles.is_admin_role(self.role)

    @property
    def initials(self):
        """Up to two uppercase initials for the avatar."""
        full_name = self.get_full_name().strip()
        if full_name:
            parts = full_name.split()
            return ''.join(part[0] for part in parts[:2]).upper()
        return (self.email or self.username or 'U')[:1].upper()

    def role_label(self, language='ar'):
        return roles.role_label(self.role, language)

    def can_assign(self, target_role):
        return roles.can_assign_role(self.role, target_role)
