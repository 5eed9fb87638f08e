"""
Custom Permissions for the Newsroom API

Role checks go through the helpers on CustomUser, so permission codes come
from the canonical role while role assignment looks at the backend string.
"""

from rest_framework import permissions


class IsNewsroomAdmin(permissions.BasePermission):
    """
    Permission class to check if user is an admin or system admin.
    """

    def has_permission(self, request, view):
        """Check if user is an admin."""
        return bool(
            request.user and
            request.user.is_authenticated and
            request.user.is_newsroom_admin
        )


class HasPermissionCode(permissions.BasePermission):
    """
    Permission class granting access when the user's role carries the
    permission code declared on the view as ``required_permission``.
    """

    def has_permission(self, request, view):
        """Check the view's permission code against the user's role."""
        if not (request.user and request.user.is_authenticated):
            return False
        required = getattr(view, 'required_permission', None)
        if required is None:
            return True
        return required in request.user.nav_permissions


class CanAssignRole(permissions.BasePermission):
    """
    Permission class for role changes.

    - System admins can assign any role
    - Admins can assign any role except system admin, and cannot change
      the role of an existing system admin
    """

    def has_permission(self, request, view):
        """Only admins reach the role endpoint at all."""
        return IsNewsroomAdmin().has_permission(request, view)

    def has_object_permission(self, request, view, obj):
        """Check both the requested role and the user's current role."""
        target_role = request.data.get('role')
        return request.user.can_assign(target_role) and request.user.can_assign(obj.role)
