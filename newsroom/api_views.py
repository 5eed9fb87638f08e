"""
Django REST Framework Views for the Newsroom API

Endpoints used by the dashboard frontends:
- GET  /api/nav/<layout>/?pathname=...            resolved navigation state
- GET  /api/sidebar-state/<layout>/               collapsed sidebar groups
- PUT  /api/sidebar-state/<layout>/               replace collapsed groups
- GET  /api/announcements/<id>/                   dismissal state
- POST /api/announcements/<id>/view/              mark as viewed
- POST /api/announcements/<id>/dismiss/           dismiss
- GET  /api/users/ , /api/users/<id>/ , /api/users/me/
- POST /api/users/<id>/role/                      change a user's role
- POST /api/logout                                end the session
"""
import logging

from django.contrib.auth import logout
from rest_framework import filters, status, viewsets
from rest_framework.decorators import action
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from . import roles
from .layouts import get_layout, sidebar_state_for
from .models import CustomUser
from .navigation.breadcrumbs import build_breadcrumbs, detect_language
from .navigation.config import get_feature_flags
from .navigation.resolver import resolve_nav
from .permissions import CanAssignRole, HasPermissionCode
from .serializers import (
    AnnouncementStateSerializer,
    CrumbSerializer,
    NavItemSerializer,
    RoleAssignmentSerializer,
    SidebarStateSerializer,
    UserSerializer,
)
from .storage import AnnouncementTracker, SessionStorage

logger = logging.getLogger(__name__)


class NavStateView(APIView):
    """
    Resolved navigation for the current user.

    GET /api/nav/<layout>/?pathname=/dashboard/articles
    """

    permission_classes = [IsAuthenticated]

    def get(self, request, layout_name):
        layout = get_layout(layout_name)
        pathname = request.query_params.get('pathname') or layout.home_url
        raw_role = request.user.role

        state = resolve_nav(
            layout.nav_tree,
            raw_role,
            flags=get_feature_flags(),
            pathname=pathname,
            permissions=request.user.nav_permissions,
        )

        language = detect_language(pathname)
        context = {'language': language}
        return Response({
            'role': roles.map_role(raw_role),
            'language': language,
            'tree': NavItemSerializer(state.tree_filtered, many=True, context=context).data,
            'active_item': (
                NavItemSerializer(state.active_item, context=context).data
                if state.active_item else None
            ),
            'parents': NavItemSerializer(state.parents, many=True, context=context).data,
            'breadcrumbs': CrumbSerializer(build_breadcrumbs(state, pathname), many=True).data,
        })


class SidebarStateView(APIView):
    """
    Collapsed sidebar groups of one layout, kept in the session.

    GET /api/sidebar-state/<layout>/
    PUT /api/sidebar-state/<layout>/  {"collapsed": {"group-id": true}}
    """

    permission_classes = [IsAuthenticated]

    def get(self, request, layout_name):
        layout = get_layout(layout_name)
        collapsed = sidebar_state_for(request, layout).load()
        return Response({'layout': layout.name, 'collapsed': collapsed})

    def put(self, request, layout_name):
        layout = get_layout(layout_name)
        serializer = SidebarStateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        collapsed = serializer.validated_data['collapsed']
        saved = sidebar_state_for(request, layout).save(collapsed)
        if not saved:
            logger.warning(f"Sidebar state for {layout.name} was not persisted")
        return Response({'layout': layout.name, 'collapsed': collapsed, 'persisted': saved})


class AnnouncementStateView(APIView):
    """
    Per-announcement viewed / dismissed flags.

    GET  /api/announcements/<id>/
    POST /api/announcements/<id>/view/
    POST /api/announcements/<id>/dismiss/
    """

    permission_classes = [IsAuthenticated]

    def _state(self, tracker, announcement_id):
        return AnnouncementStateSerializer({
            'id': announcement_id,
            'viewed': tracker.is_viewed(announcement_id),
            'dismissed': tracker.is_dismissed(announcement_id),
            'should_show': tracker.should_show(announcement_id),
        }).data

    def get(self, request, announcement_id):
        tracker = AnnouncementTracker(SessionStorage(request.session))
        return Response(self._state(tracker, announcement_id))

    def post(self, request, announcement_id, operation):
        tracker = AnnouncementTracker(SessionStorage(request.session))
        if operation == 'view':
            tracker.mark_viewed(announcement_id)
        elif operation == 'dismiss':
            tracker.dismiss(announcement_id)
            logger.info(f"{request.user.username} dismissed announcement {announcement_id}")
        else:
            return Response({'error': 'Unknown operation'}, status=status.HTTP_404_NOT_FOUND)
        return Response(self._state(tracker, announcement_id))


class UserViewSet(viewsets.ReadOnlyModelViewSet):
    """
    ViewSet for User (read-only, plus role changes).

    Endpoints:
    - GET /api/users/ - List users (requires users.view)
    - GET /api/users/<id>/ - Retrieve single user (requires users.view)
    - GET /api/users/me/ - Current user with canonical role and permissions
    - POST /api/users/<id>/role/ - Change role (admins, within their reach)
    """

    queryset = CustomUser.objects.all()
    serializer_class = UserSerializer
    permission_classes = [IsAuthenticated, HasPermissionCode]
    required_permission = roles.USERS_VIEW
    filter_backends = [filters.SearchFilter]
    search_fields = ['username', 'email', 'first_name', 'last_name']

    def get_permissions(self):
        """
        Set permissions based on action.
        """
        if self.action == 'me':
            return [IsAuthenticated()]
        if self.action == 'set_role':
            return [IsAuthenticated(), CanAssignRole()]
        return super().get_permissions()

    @action(detail=False, methods=['get'], url_path='me')
    def me(self, request):
        """
        Get current user details.

        GET /api/users/me/
        """
        language = request.query_params.get('language')
        serializer = UserSerializer(request.user, context={'request': request, 'language': language})
        return Response(serializer.data)

    @action(detail=True, methods=['post'], url_path='role')
    def set_role(self, request, pk=None):
        """
        Change a user's backend role.

        POST /api/users/<id>/role/  {"role": "editor"}
        """
        serializer = RoleAssignmentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        user = self.get_object()
        user.role = serializer.validated_data['role']
        user.save(update_fields=['role'])
        logger.info(f"{request.user.username} changed role of {user.username} to {user.role}")

        return Response(UserSerializer(user, context={'request': request}).data)


class LogoutView(APIView):
    """
    End the current session.

    POST /api/logout
    """

    permission_classes = [IsAuthenticated]

    def post(self, request):
        username = request.user.username
        logout(request)
        logger.info(f"User {username} logged out via API")
        return Response(status=status.HTTP_204_NO_CONTENT)
