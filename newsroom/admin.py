"""
Django Admin Configuration for the Newsroom application

Users are managed with their raw backend role visible next to the canonical
role the dashboards actually filter on.
"""

from django.contrib import admin
from django.contrib.auth.admin import UserAdmin
from django.utils.translation import gettext_lazy as _

from .models import CustomUser


@admin.register(CustomUser)
class CustomUserAdmin(UserAdmin):
    """
    Custom admin interface for CustomUser model.
    """

    list_display = ['username', 'email', 'role', 'canonical_role_display', 'preferred_language', 'is_active']
    list_filter = ['role', 'preferred_language', 'is_staff', 'is_active']
    search_fields = ['username', 'email', 'first_name', 'last_name']

    fieldsets = (
        (None, {'fields': ('username', 'password')}),
        (_('Personal info'), {'fields': ('first_name', 'last_name', 'email', 'preferred_language')}),
        (_('Role'), {'fields': ('role', 'canonical_role_display')}),
        (_('Permissions'), {
            'fields': ('is_active', 'is_staff', 'is_superuser', 'groups', 'user_permissions'),
        }),
        (_('Important dates'), {'fields': ('last_login', 'date_joined')}),
    )

    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('username', 'email', 'role', 'password1', 'password2'),
        }),
    )

    readonly_fields = ['canonical_role_display']

    @admin.display(description=_('Canonical role'))
    def canonical_role_display(self, obj):
        """Role the navigation filters on."""
        return obj.canonical_role
