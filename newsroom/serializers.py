"""
Django REST Framework Serializers for the Newsroom API

Navigation items and breadcrumbs are plain dataclasses, so their
serializers are read-only ``Serializer`` subclasses; the language used for
labels comes from the serializer context.
"""

from django.contrib.auth import get_user_model
from rest_framework import serializers

from . import roles

User = get_user_model()


class UserSerializer(serializers.ModelSerializer):
    """
    Serializer for CustomUser model.

    Exposes the raw backend role next to the derived canonical role and
    permission codes so clients never re-implement the mapping.
    """

    canonical_role = serializers.CharField(read_only=True)
    permissions = serializers.ListField(source='nav_permissions', child=serializers.CharField(), read_only=True)
    role_label = serializers.SerializerMethodField()
    initials = serializers.CharField(read_only=True)

    class Meta:
        model = User
        fields = [
            'id', 'username', 'email', 'first_name', 'last_name',
            'role', 'role_label', 'canonical_role', 'permissions',
            'initials', 'preferred_language',
        ]
        read_only_fields = ['id', 'role']

    def get_role_label(self, obj):
        language = self.context.get('language') or obj.preferred_language
        return obj.role_label(language)


class RoleAssignmentSerializer(serializers.Serializer):
    """Validate a role change request."""

    role = serializers.ChoiceField(choices=roles.BACKEND_ROLE_CHOICES)


class NavItemSerializer(serializers.Serializer):
    """Serializer for a (filtered) NavItem and its children."""

    id = serializers.CharField()
    label_key = serializers.CharField()
    label = serializers.SerializerMethodField()
    path = serializers.CharField(allow_null=True)
    icon = serializers.CharField(allow_null=True)
    divider = serializers.BooleanField()
    children = serializers.SerializerMethodField()

    def get_label(self, obj):
        return obj.label(self.context.get('language', 'ar'))

    def get_children(self, obj):
        return NavItemSerializer(obj.children, many=True, context=self.context).data


class CrumbSerializer(serializers.Serializer):
    label = serializers.CharField()
    href = serializers.CharField(allow_null=True)
    is_current = serializers.BooleanField()


class SidebarStateSerializer(serializers.Serializer):
    """
    Collapsed sidebar groups.

    ``collapsed`` maps group id to a real JSON boolean; strings such as
    ``"true"`` are rejected.
    """

    collapsed = serializers.DictField()

    def validate_collapsed(self, value):
        for group_id, collapsed in value.items():
            if not isinstance(collapsed, bool):
                raise serializers.ValidationError(
                    f"Value for '{group_id}' must be a boolean"
                )
        return value


class AnnouncementStateSerializer(serializers.Serializer):
    id = serializers.CharField()
    viewed = serializers.BooleanField()
    dismissed = serializers.BooleanField()
    should_show = serializers.BooleanField()
