"""
Unit Tests for the Newsroom dashboard shell

Tests cover: role mapping, the user model, the layout shells (auth gate,
sidebar state, logout), the REST API and the backend API client.
"""

import json
from io import StringIO
from unittest.mock import Mock, patch

import requests
from django.contrib.auth import get_user_model
from django.core.management import call_command
from django.core.management.base import CommandError
from django.test import RequestFactory, SimpleTestCase, TestCase, override_settings
from rest_framework import status
from rest_framework.test import APITestCase

from newsroom import roles
from newsroom.admin import CustomUserAdmin
from newsroom.api_client import NewsroomApiClient
from newsroom.exceptions import AuthenticationRequired, MutationFailed, StorageUnavailable
from newsroom.layouts import DASHBOARD_LAYOUT, PUBLISHER_LAYOUT, URDU_LAYOUT, build_layout_context
from newsroom.models import CustomUser
from newsroom.navigation.resolver import flatten_nav_tree

User = get_user_model()


# ===== ROLES =====

class RoleMappingTestCase(SimpleTestCase):
    """Test the backend role to canonical role mapping."""

    def test_admin_aliases(self):
        for raw in ('system_admin', 'superadmin', 'super_admin', 'admin'):
            self.assertEqual(roles.map_role(raw), roles.ADMIN)

    def test_desk_roles(self):
        self.assertEqual(roles.map_role('chief_editor'), roles.EDITOR)
        self.assertEqual(roles.map_role('content_creator'), roles.AUTHOR)
        self.assertEqual(roles.map_role('publisher'), roles.AUTHOR)
        self.assertEqual(roles.map_role('media_manager'), roles.EDITOR)

    def test_unknown_values_are_guests(self):
        for raw in (None, '', 'SYSTEM_ADMIN', 'admin ', 'editorial', 7, ['admin']):
            self.assertEqual(roles.map_role(raw), roles.GUEST)

    def test_mapping_is_idempotent(self):
        for role in roles.CANONICAL_ROLES:
            self.assertEqual(roles.map_role(role), role)
            self.assertEqual(roles.map_role(roles.map_role(role)), role)

    def test_every_backend_choice_is_mapped(self):
        for raw, _label in roles.BACKEND_ROLE_CHOICES:
            self.assertNotEqual(roles.map_role(raw), roles.GUEST)

    def test_wildcard_expands_to_all_permissions(self):
        self.assertEqual(roles.permissions_for_roles(['system_admin']), sorted(roles.ALL_PERMISSIONS))

    def test_permissions_union(self):
        granted = roles.permissions_for_roles(['reporter', 'comments_moderator'])
        self.assertIn(roles.ARTICLES_CREATE, granted)
        self.assertIn(roles.COMMENTS_APPROVE, granted)
        self.assertNotIn(roles.USERS_VIEW, granted)
        self.assertEqual(roles.permissions_for_roles(['unknown']), [])
        self.assertEqual(roles.permissions_for_roles(None), [])

    def test_can_assign_role(self):
        self.assertTrue(roles.can_assign_role('system_admin', 'system_admin'))
        self.assertTrue(roles.can_assign_role('admin', 'editor'))
        self.assertFalse(roles.can_assign_role('admin', 'system_admin'))
        self.assertFalse(roles.can_assign_role('editor', 'reporter'))

    def test_is_admin_role(self):
        self.assertTrue(roles.is_admin_role('system_admin'))
        self.assertTrue(roles.is_admin_role('admin'))
        self.assertFalse(roles.is_admin_role('chief_editor'))
        self.assertFalse(roles.is_admin_role(None))

    def test_role_labels(self):
        self.assertEqual(roles.role_label('system_admin', 'ar'), 'مدير النظام')
        self.assertEqual(roles.role_label('editor', 'en'), 'Editor')
        self.assertEqual(roles.role_label('system_admin', 'ur'), 'ایڈمن')
        self.assertEqual(roles.role_label('chief_editor', 'ur'), 'ایڈیٹر')
        self.assertEqual(roles.role_label('reporter', 'ur'), 'مصنف')
        self.assertEqual(roles.role_label('advertiser', 'en'), 'advertiser')


# ===== MODEL =====

class CustomUserTestCase(TestCase):
    """Test model properties."""

    def test_canonical_role_is_derived(self):
        user = User.objects.create_user(username='sa', password='pass', role='system_admin')
        self.assertEqual(user.canonical_role, roles.ADMIN)
        self.assertTrue(user.is_newsroom_admin)
        self.assertIn(roles.USERS_VIEW, user.nav_permissions)

    def test_default_role_is_reader(self):
        user = User.objects.create_user(username='plain', password='pass')
        self.assertEqual(user.role, roles.READER)
        self.assertEqual(user.canonical_role, roles.READER)
        self.assertFalse(user.is_newsroom_admin)

    def test_initials(self):
        user = User(username='amal', first_name='Amal', last_name='Badr')
        self.assertEqual(user.initials, 'AB')
        self.assertEqual(User(username='zaid').initials, 'Z')
        self.assertEqual(User(username='zaid', email='x@example.com').initials, 'X')

    def test_admin_shows_canonical_role(self):
        user = User(username='ce', role='chief_editor')
        self.assertEqual(CustomUserAdmin.canonical_role_display(None, user), roles.EDITOR)


# ===== LAYOUT SHELLS =====

class LayoutAuthGateTestCase(TestCase):
    """Test that shells redirect anonymous users to their login route."""

    def test_dashboard_redirects_to_login(self):
        response = self.client.get('/dashboard')
        self.assertEqual(response.status_code, 302)
        self.assertEqual(response['Location'], '/login?next=/dashboard')

    def test_urdu_dashboard_redirects_to_urdu_login(self):
        response = self.client.get('/ur/dashboard/articles')
        self.assertEqual(response.status_code, 302)
        self.assertTrue(response['Location'].startswith('/ur/login?next='))

    def test_login_pages_render(self):
        self.assertEqual(self.client.get('/login').status_code, 200)
        response = self.client.get('/ur/login')
        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['language'], 'ur')


class DashboardLayoutTestCase(TestCase):
    """Test rendering of the dashboard shells."""

    def setUp(self):
        self.reporter = User.objects.create_user(username='reporter', password='pass', role='reporter')
        self.system_admin = User.objects.create_user(username='root', password='pass', role='system_admin')

    def test_reporter_article_edit_page(self):
        self.client.force_login(self.reporter)
        response = self.client.get('/dashboard/articles/edit/123')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['active_item'].id, 'dashboard-articles')
        self.assertEqual(
            [crumb.label for crumb in response.context['breadcrumbs']],
            ['الرئيسية', 'إدارة المحتوى', 'الأخبار'],
        )
        self.assertContains(response, 'aria-current="page"')
        self.assertContains(response, 'dir="rtl"')

    def test_urdu_shell_for_system_admin(self):
        self.client.force_login(self.system_admin)
        response = self.client.get('/ur/dashboard')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['canonical_role'], roles.ADMIN)
        self.assertEqual(response.context['role_label'], 'ایڈمن')
        self.assertEqual(response.context['breadcrumbs'][0].label, 'ہوم')
        self.assertEqual(response.context['active_item'].id, 'ur-dashboard')

    def test_publisher_shell(self):
        publisher = User.objects.create_user(username='pub', password='pass', role='publisher')
        self.client.force_login(publisher)
        response = self.client.get('/dashboard/publisher/credits')

        self.assertEqual(response.status_code, 200)
        self.assertEqual(response.context['layout'].name, 'publisher')
        self.assertEqual(response.context['active_item'].id, 'publisher-credits')

    def test_sidebar_hides_items_above_role(self):
        self.client.force_login(self.reporter)
        response = self.client.get('/dashboard')
        self.assertNotContains(response, 'data-nav-id="dashboard-users"')
        self.assertContains(response, 'data-nav-id="dashboard-articles"')

    def test_storage_read_failure_renders_expanded(self):
        self.client.force_login(self.reporter)
        with patch('newsroom.layouts.SessionStorage.read', side_effect=StorageUnavailable('boom')):
            response = self.client.get('/dashboard')

        self.assertEqual(response.status_code, 200)
        self.assertTrue(all(not group['collapsed'] for group in response.context['sidebar_groups']))


class ShellRoleEquivalenceTestCase(SimpleTestCase):
    """Backend aliases get the same sidebar as their canonical role."""

    def setUp(self):
        self.factory = RequestFactory()

    def visible(self, layout, raw_role, path=None):
        request = self.factory.get(path or layout.home_url)
        request.user = User(username=f'user-{raw_role}', role=raw_role)
        request.session = {}
        context = build_layout_context(request, layout)
        return {item.id for item in flatten_nav_tree(context['nav_state'].tree_filtered)}

    def test_aliases_match_their_canonical_role(self):
        pairs = [
            ('system_admin', 'admin'),
            ('chief_editor', 'editor'),
            ('media_manager', 'editor'),
            ('content_creator', 'author'),
            ('publisher', 'author'),
        ]
        for layout in (DASHBOARD_LAYOUT, URDU_LAYOUT, PUBLISHER_LAYOUT):
            for alias, canonical in pairs:
                with self.subTest(layout=layout.name, role=alias):
                    self.assertEqual(self.visible(layout, alias), self.visible(layout, canonical))

    def test_chief_editor_keeps_content_sections(self):
        visible = self.visible(DASHBOARD_LAYOUT, 'chief_editor')
        for item_id in ('dashboard-articles', 'dashboard-categories', 'dashboard-media', 'dashboard-analytics'):
            self.assertIn(item_id, visible)

    def test_visibility_grows_with_privilege(self):
        for layout in (DASHBOARD_LAYOUT, URDU_LAYOUT, PUBLISHER_LAYOUT):
            with self.subTest(layout=layout.name):
                guest = self.visible(layout, 'guest')
                reporter = self.visible(layout, 'reporter')
                editor = self.visible(layout, 'editor')
                admin = self.visible(layout, 'admin')
                self.assertLessEqual(guest, reporter)
                self.assertLessEqual(reporter, editor)
                self.assertLessEqual(editor, admin)

    def test_nav_permissions_follow_canonical_role(self):
        self.assertEqual(
            User(role='system_admin').nav_permissions,
            User(role='admin').nav_permissions,
        )
        self.assertEqual(
            User(role='chief_editor').nav_permissions,
            User(role='editor').nav_permissions,
        )
        self.assertLessEqual(set(User(role='editor').nav_permissions), set(User(role='admin').nav_permissions))


class SidebarToggleTestCase(TestCase):
    """Test persisted sidebar group toggling."""

    def setUp(self):
        self.user = User.objects.create_user(username='editor', password='pass', role='editor')
        self.client.force_login(self.user)

    def test_toggle_persists_in_session(self):
        response = self.client.post(
            '/sidebar/dashboard/dashboard-divider-ai/toggle/',
            {'next': '/dashboard/articles'},
        )
        self.assertRedirects(response, '/dashboard/articles', fetch_redirect_response=False)
        self.assertEqual(json.loads(self.client.session['sabq.sidebar.v1']), {'dashboard-divider-ai': True})

        response = self.client.get('/dashboard')
        groups = {group['id']: group['collapsed'] for group in response.context['sidebar_groups']}
        self.assertTrue(groups['dashboard-divider-ai'])
        self.assertFalse(groups['dashboard-divider-content'])

    def test_urdu_state_is_separate(self):
        self.client.post('/sidebar/urdu/ur-divider-content/toggle/')
        self.assertIn('sabq.sidebar.urdu.v1', self.client.session)
        self.assertNotIn('sabq.sidebar.v1', self.client.session)

    def test_unsafe_next_is_ignored(self):
        response = self.client.post('/sidebar/dashboard/x/toggle/', {'next': 'https://evil.example.com/'})
        self.assertRedirects(response, '/dashboard', fetch_redirect_response=False)

    def test_unknown_layout_is_404(self):
        response = self.client.post('/sidebar/nope/x/toggle/')
        self.assertEqual(response.status_code, 404)

    def test_toggle_requires_post(self):
        response = self.client.get('/sidebar/dashboard/x/toggle/')
        self.assertEqual(response.status_code, 405)

    def test_write_failure_is_not_fatal(self):
        with patch('newsroom.layouts.SessionStorage.write', side_effect=StorageUnavailable('full')):
            response = self.client.post('/sidebar/dashboard/x/toggle/')
        self.assertEqual(response.status_code, 302)


class LogoutViewTestCase(TestCase):
    """Test logout from each shell."""

    def setUp(self):
        self.user = User.objects.create_user(username='author', password='pass', role='content_creator')
        self.client.force_login(self.user)

    def test_urdu_logout_redirects_with_toast(self):
        response = self.client.post('/logout/urdu/', follow=True)

        self.assertRedirects(response, '/ur/login')
        self.assertContains(response, 'لاگ آؤٹ ہو گیا')
        self.assertNotIn('_auth_user_id', self.client.session)

    def test_dashboard_logout(self):
        response = self.client.post('/logout/dashboard/')
        self.assertRedirects(response, '/login', fetch_redirect_response=False)

        response = self.client.get('/dashboard')
        self.assertEqual(response.status_code, 302)

    @override_settings(NEWSROOM_API_BASE_URL='http://api.test')
    def test_remote_logout_failure_does_not_block(self):
        with patch('newsroom.views.NewsroomApiClient.logout', side_effect=MutationFailed('down')) as remote:
            response = self.client.post('/logout/publisher/')
        remote.assert_called_once_with()
        self.assertRedirects(response, '/login', fetch_redirect_response=False)

    def test_logout_requires_post(self):
        self.assertEqual(self.client.get('/logout/dashboard/').status_code, 405)


class NotificationsPageTestCase(TestCase):
    """Test the notifications page and the mark-all-read action."""

    def setUp(self):
        self.user = User.objects.create_user(username='editor', password='pass', role='editor')
        self.client.force_login(self.user)

    @patch('newsroom.views.NewsroomApiClient.fetch_notifications')
    def test_lists_notifications(self, fetch):
        fetch.return_value = [{'title': 'خبر عاجل', 'body': 'تفاصيل', 'read': False}]
        response = self.client.get('/dashboard/notifications')

        self.assertEqual(response.status_code, 200)
        self.assertContains(response, 'خبر عاجل')
        self.assertEqual(response.context['active_item'].id, 'dashboard-notifications')

    @patch('newsroom.views.NewsroomApiClient.fetch_notifications', return_value=[])
    def test_empty_state(self, fetch):
        response = self.client.get('/dashboard/notifications')
        self.assertContains(response, 'لا توجد إشعارات')

    @patch('newsroom.views.NewsroomApiClient.fetch_notifications', side_effect=AuthenticationRequired())
    def test_expired_session_goes_to_login(self, fetch):
        response = self.client.get('/dashboard/notifications')
        self.assertRedirects(response, '/login', fetch_redirect_response=False)

    @patch('newsroom.views.NewsroomApiClient.fetch_notifications', return_value=[])
    @patch('newsroom.views.NewsroomApiClient.mark_all_notifications_read')
    def test_mutation_failure_becomes_toast(self, mark_all, fetch):
        mark_all.side_effect = MutationFailed('تعذر تحديث الإشعارات')
        response = self.client.post('/dashboard/notifications/read-all/', follow=True)

        self.assertRedirects(response, '/dashboard/notifications')
        self.assertContains(response, 'تعذر تحديث الإشعارات')


class NavClickTestCase(TestCase):
    """Test click tracking."""

    def test_click_is_logged_and_followed(self):
        with self.assertLogs('newsroom.navigation.resolver', level='INFO'):
            response = self.client.post('/nav/click/', {'item_id': 'dashboard-articles', 'path': '/dashboard/articles'})
        self.assertRedirects(response, '/dashboard/articles', fetch_redirect_response=False)

    def test_offsite_path_is_rejected(self):
        response = self.client.post('/nav/click/', {'item_id': 'x', 'path': 'https://evil.example.com'})
        self.assertRedirects(response, '/', fetch_redirect_response=False)


# ===== API =====

class NavAPITestCase(APITestCase):
    """Test the navigation API."""

    def setUp(self):
        self.reporter = User.objects.create_user(username='reporter', password='pass', role='reporter')
        self.system_admin = User.objects.create_user(username='root', password='pass', role='system_admin')

    def test_requires_authentication(self):
        response = self.client.get('/api/nav/dashboard/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)

    def test_jwt_token_obtain(self):
        response = self.client.post('/api/token/', {'username': 'reporter', 'password': 'pass'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertIn('access', response.data)

        self.client.credentials(HTTP_AUTHORIZATION=f'Bearer {response.data["access"]}')
        self.assertEqual(self.client.get('/api/nav/dashboard/').status_code, status.HTTP_200_OK)

    def test_reporter_article_path(self):
        self.client.force_authenticate(user=self.reporter)
        response = self.client.get('/api/nav/dashboard/', {'pathname': '/dashboard/articles/edit/123'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertEqual(response.data['role'], roles.REPORTER)
        self.assertEqual(response.data['active_item']['id'], 'dashboard-articles')
        self.assertEqual([p['id'] for p in response.data['parents']], ['dashboard-content'])
        self.assertEqual(len(response.data['breadcrumbs']), 3)
        self.assertTrue(response.data['breadcrumbs'][-1]['is_current'])

    def test_urdu_nav_for_system_admin(self):
        self.client.force_authenticate(user=self.system_admin)
        response = self.client.get('/api/nav/urdu/', {'pathname': '/ur/dashboard'})

        self.assertEqual(response.data['role'], roles.ADMIN)
        self.assertEqual(response.data['language'], 'ur')
        self.assertEqual(response.data['breadcrumbs'][0]['label'], 'ہوم')
        self.assertEqual(response.data['active_item']['label'], 'ڈیش بورڈ')

    def test_no_match_has_no_breadcrumbs(self):
        self.client.force_authenticate(user=self.reporter)
        response = self.client.get('/api/nav/dashboard/', {'pathname': '/nowhere'})

        self.assertIsNone(response.data['active_item'])
        self.assertEqual(response.data['parents'], [])
        self.assertEqual(response.data['breadcrumbs'], [])

    def test_unknown_layout(self):
        self.client.force_authenticate(user=self.reporter)
        response = self.client.get('/api/nav/klingon/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class SidebarStateAPITestCase(APITestCase):
    """Test the sidebar state API."""

    def setUp(self):
        self.user = User.objects.create_user(username='editor', password='pass', role='editor')
        self.client.force_login(self.user)

    def test_put_then_get(self):
        response = self.client.put(
            '/api/sidebar-state/urdu/',
            {'collapsed': {'ur-divider-ai': True}},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['persisted'])

        response = self.client.get('/api/sidebar-state/urdu/')
        self.assertEqual(response.data['collapsed'], {'ur-divider-ai': True})

        response = self.client.get('/api/sidebar-state/dashboard/')
        self.assertEqual(response.data['collapsed'], {})

    def test_rejects_non_boolean_values(self):
        response = self.client.put(
            '/api/sidebar-state/dashboard/',
            {'collapsed': {'group': 'yes'}},
            format='json',
        )
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class AnnouncementAPITestCase(APITestCase):
    """Test announcement dismissal tracking."""

    def setUp(self):
        self.user = User.objects.create_user(username='reader', password='pass', role='reader')
        self.client.force_login(self.user)

    def test_dismiss_flow(self):
        response = self.client.get('/api/announcements/42/')
        self.assertTrue(response.data['should_show'])

        response = self.client.post('/api/announcements/42/dismiss/')
        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.assertTrue(response.data['dismissed'])
        self.assertFalse(response.data['should_show'])

        response = self.client.get('/api/announcements/42/')
        self.assertFalse(response.data['should_show'])
        self.assertTrue(self.client.get('/api/announcements/43/').data['should_show'])

    def test_mark_viewed(self):
        response = self.client.post('/api/announcements/7/view/')
        self.assertTrue(response.data['viewed'])
        self.assertTrue(response.data['should_show'])

    def test_unknown_operation(self):
        response = self.client.post('/api/announcements/7/explode/')
        self.assertEqual(response.status_code, status.HTTP_404_NOT_FOUND)


class UserAPITestCase(APITestCase):
    """Test the user endpoints."""

    def setUp(self):
        self.system_admin = User.objects.create_user(username='root', password='pass', role='system_admin')
        self.admin = User.objects.create_user(username='admin', password='pass', role='admin')
        self.reporter = User.objects.create_user(username='reporter', password='pass', role='reporter')

    def test_me(self):
        self.client.force_authenticate(user=self.system_admin)
        response = self.client.get('/api/users/me/', {'language': 'en'})

        self.assertEqual(response.data['role'], 'system_admin')
        self.assertEqual(response.data['canonical_role'], roles.ADMIN)
        self.assertEqual(response.data['role_label'], 'System Admin')
        self.assertIn(roles.USERS_VIEW, response.data['permissions'])

    def test_list_requires_users_view(self):
        self.client.force_authenticate(user=self.reporter)
        self.assertEqual(self.client.get('/api/users/').status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.admin)
        self.assertEqual(self.client.get('/api/users/').status_code, status.HTTP_200_OK)

    def test_admin_assigns_role(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(f'/api/users/{self.reporter.id}/role/', {'role': 'chief_editor'})

        self.assertEqual(response.status_code, status.HTTP_200_OK)
        self.reporter.refresh_from_db()
        self.assertEqual(self.reporter.role, 'chief_editor')
        self.assertEqual(response.data['canonical_role'], roles.EDITOR)

    def test_admin_cannot_grant_system_admin(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(f'/api/users/{self.reporter.id}/role/', {'role': 'system_admin'})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

        self.client.force_authenticate(user=self.system_admin)
        response = self.client.post(f'/api/users/{self.reporter.id}/role/', {'role': 'system_admin'})
        self.assertEqual(response.status_code, status.HTTP_200_OK)

    def test_admin_cannot_change_a_system_admin(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(f'/api/users/{self.system_admin.id}/role/', {'role': 'reader'})

        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)
        self.system_admin.refresh_from_db()
        self.assertEqual(self.system_admin.role, 'system_admin')

    def test_non_admin_cannot_assign(self):
        self.client.force_authenticate(user=self.reporter)
        response = self.client.post(f'/api/users/{self.admin.id}/role/', {'role': 'reader'})
        self.assertEqual(response.status_code, status.HTTP_403_FORBIDDEN)

    def test_invalid_role(self):
        self.client.force_authenticate(user=self.admin)
        response = self.client.post(f'/api/users/{self.reporter.id}/role/', {'role': 'overlord'})
        self.assertEqual(response.status_code, status.HTTP_400_BAD_REQUEST)


class LogoutAPITestCase(APITestCase):
    """Test session termination through the API."""

    def test_logout_ends_session(self):
        user = User.objects.create_user(username='reporter', password='pass', role='reporter')
        self.client.force_login(user)

        response = self.client.post('/api/logout')
        self.assertEqual(response.status_code, status.HTTP_204_NO_CONTENT)

        response = self.client.get('/api/users/me/')
        self.assertEqual(response.status_code, status.HTTP_401_UNAUTHORIZED)


# ===== API CLIENT =====

def make_response(status_code=200, body=None, content=None):
    response = Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400
    if body is None:
        response.content = content if content is not None else b''
        response.json.side_effect = ValueError('No JSON')
    else:
        response.content = json.dumps(body).encode()
        response.json.return_value = body
    return response


class NewsroomApiClientTestCase(SimpleTestCase):
    """Test read/write failure semantics of the backend client."""

    def setUp(self):
        self.session = Mock()
        self.session.headers = {}
        self.client = NewsroomApiClient(base_url='http://api.test/', session=self.session)

    def test_query_success(self):
        self.session.get.return_value = make_response(200, {'notifications': [{'id': 1}]})

        self.assertEqual(self.client.fetch_notifications(limit=5, language='en'), [{'id': 1}])
        self.session.get.assert_called_once_with(
            'http://api.test/api/me/notifications',
            params={'limit': 5, 'language': 'en'},
            timeout=15,
        )

    def test_query_network_error_returns_default(self):
        self.session.get.side_effect = requests.exceptions.ConnectionError('refused')
        with self.assertLogs('newsroom.api_client', level='ERROR'):
            self.assertEqual(self.client.query('/api/categories', default=[]), [])
        self.assertEqual(self.session.get.call_count, 1)

    def test_query_server_error_returns_default(self):
        self.session.get.return_value = make_response(500, {'message': 'boom'})
        self.assertEqual(self.client.fetch_notifications(), [])

    def test_query_unauthorized_raises(self):
        self.session.get.return_value = make_response(401, {'message': 'login'})
        with self.assertRaises(AuthenticationRequired):
            self.client.query('/api/me/notifications')

    def test_mutation_failure_carries_server_message(self):
        self.session.request.return_value = make_response(400, {'message': 'العنوان مطلوب'})
        with self.assertRaises(MutationFailed) as ctx:
            self.client.mutate('/api/articles', 'POST', {'title': ''})
        self.assertEqual(ctx.exception.user_message, 'العنوان مطلوب')
        self.assertEqual(ctx.exception.status_code, 400)

    def test_mutation_failure_without_body(self):
        self.session.request.return_value = make_response(502, content=b'<html>')
        with self.assertRaises(MutationFailed) as ctx:
            self.client.mark_all_notifications_read()
        self.assertEqual(ctx.exception.user_message, NewsroomApiClient.DEFAULT_ERROR_MESSAGE)

    def test_mutation_timeout(self):
        self.session.request.side_effect = requests.exceptions.Timeout()
        with self.assertRaises(MutationFailed):
            self.client.mark_notification_read(3)

    def test_mutation_unauthorized(self):
        self.session.request.return_value = make_response(401)
        with self.assertRaises(AuthenticationRequired):
            self.client.logout()

    def test_mark_read_uses_patch(self):
        self.session.request.return_value = make_response(204)
        self.assertIsNone(self.client.mark_notification_read('abc'))
        self.session.request.assert_called_once_with(
            method='PATCH',
            url='http://api.test/api/me/notifications/abc/read',
            json=None,
            timeout=15,
        )

    def test_logout_posts(self):
        self.session.request.return_value = make_response(200, {'ok': True})
        self.assertEqual(self.client.logout(), {'ok': True})
        self.assertEqual(self.session.request.call_args.kwargs['url'], 'http://api.test/api/logout')


# ===== MANAGEMENT COMMANDS =====

class ManagementCommandTestCase(TestCase):
    """Test the management commands."""

    def test_seed_creates_one_user_per_role(self):
        out = StringIO()
        call_command('seed_newsroom_users', stdout=out)
        call_command('seed_newsroom_users', stdout=out)

        self.assertEqual(User.objects.count(), len(roles.BACKEND_ROLE_CHOICES))
        self.assertEqual(User.objects.get(username='system_admin').canonical_role, roles.ADMIN)
        self.assertTrue(User.objects.get(username='chief_editor').check_password('password123'))
        self.assertIn('system_admin -> admin', out.getvalue())

    @override_settings(NEWSROOM_API_BASE_URL='')
    def test_listen_requires_stream_url(self):
        with self.assertRaises(CommandError):
            call_command('listen_notifications', stdout=StringIO())

    def test_listen_rejects_bad_cookie(self):
        with self.assertRaises(CommandError):
            call_command('listen_notifications', '--url', 'http://api.test/stream', '--cookie', 'nonsense', stdout=StringIO())

    @patch('newsroom.management.commands.listen_notifications.time.sleep', side_effect=KeyboardInterrupt)
    @patch('newsroom.management.commands.listen_notifications.NotificationStream')
    def test_listen_starts_and_stops_stream(self, stream_cls, sleep):
        call_command('listen_notifications', '--url', 'http://api.test/stream', stdout=StringIO())

        stream_cls.return_value.start.assert_called_once_with()
        stream_cls.return_value.stop.assert_called_once_with()
        self.assertEqual(stream_cls.call_args.kwargs['reconnect_delay'], 5.0)


class CustomUserConstantsTestCase(SimpleTestCase):

    def test_role_choices_come_from_roles_module(self):
        self.assertEqual(CustomUser.ROLE_CHOICES, roles.BACKEND_ROLE_CHOICES)
