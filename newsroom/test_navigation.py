"""
Unit Tests for navigation resolution and breadcrumbs

Tests cover: role/flag/permission filtering, active item matching, parent
chains, breadcrumb localization and sidebar grouping.
"""

from django.test import SimpleTestCase

from newsroom import roles
from newsroom.exceptions import NavConfigurationError
from newsroom.layouts import group_nav_items
from newsroom.navigation.breadcrumbs import Crumb, build_breadcrumbs, detect_language
from newsroom.navigation.config import DASHBOARD_NAV, PUBLISHER_NAV, URDU_NAV
from newsroom.navigation.items import NavItem, divider, validate_tree
from newsroom.navigation.resolver import (
    flatten_nav_tree,
    normalize_pathname,
    resolve_nav,
    track_nav_click,
)

ALL_TREES = (DASHBOARD_NAV, URDU_NAV, PUBLISHER_NAV)


def ids(items):
    return [item.id for item in items]


def visible_ids(tree, role, flags=None):
    return set(ids(flatten_nav_tree(resolve_nav(tree, role, flags or {}, '/').tree_filtered)))


class ResolverScenarioTestCase(SimpleTestCase):
    """Test the documented resolution scenarios."""

    def test_reporter_article_edit_page(self):
        """A deep article path activates the articles entry by prefix."""
        state = resolve_nav(DASHBOARD_NAV, roles.REPORTER, {}, '/dashboard/articles/edit/123')
        self.assertEqual(state.active_item.id, 'dashboard-articles')
        self.assertEqual(ids(state.parents), ['dashboard-content'])

    def test_system_admin_on_urdu_dashboard(self):
        """system_admin behaves exactly like admin and gets the Urdu home crumb."""
        state = resolve_nav(URDU_NAV, roles.SYSTEM_ADMIN, {'smartThemes': True}, '/ur/dashboard')
        admin_state = resolve_nav(URDU_NAV, roles.ADMIN, {'smartThemes': True}, '/ur/dashboard')
        self.assertEqual(state, admin_state)
        self.assertEqual(state.active_item.id, 'ur-dashboard')

        crumbs = build_breadcrumbs(state, '/ur/dashboard')
        self.assertEqual(crumbs[0], Crumb(label='ہوم', href='/ur/dashboard'))
        self.assertEqual(crumbs[-1], Crumb(label='ڈیش بورڈ', href=None, is_current=True))

    def test_publisher_home_only_matches_exactly(self):
        state = resolve_nav(PUBLISHER_NAV, 'publisher', {}, '/dashboard/publisher')
        self.assertEqual(state.active_item.id, 'publisher-dashboard')

        state = resolve_nav(PUBLISHER_NAV, 'publisher', {}, '/dashboard/publisher/credits/2024')
        self.assertEqual(state.active_item.id, 'publisher-credits')

        state = resolve_nav(PUBLISHER_NAV, 'publisher', {}, '/dashboard/publisher/unknown')
        self.assertIsNone(state.active_item)


class ResolverPropertyTestCase(SimpleTestCase):
    """Test properties that hold for every role and path."""

    def test_resolution_is_deterministic(self):
        for tree in ALL_TREES:
            for role in roles.CANONICAL_ROLES:
                first = resolve_nav(tree, role, {'smartThemes': True}, '/dashboard/articles/1')
                second = resolve_nav(tree, role, {'smartThemes': True}, '/dashboard/articles/1')
                self.assertEqual(first, second)

    def test_filtering_is_monotonic_in_privilege(self):
        """Guest sees a subset of everyone; reporter <= editor <= admin."""
        for tree in ALL_TREES:
            guest = visible_ids(tree, roles.GUEST)
            for role in roles.CANONICAL_ROLES:
                self.assertLessEqual(guest, visible_ids(tree, role))

            reporter = visible_ids(tree, roles.REPORTER)
            editor = visible_ids(tree, roles.EDITOR)
            admin = visible_ids(tree, roles.ADMIN)
            self.assertLessEqual(reporter, editor)
            self.assertLessEqual(editor, admin)

    def test_garbage_roles_resolve_like_guest(self):
        guest = resolve_nav(DASHBOARD_NAV, roles.GUEST, {}, '/dashboard/profile')
        for garbage in ('hacker', '', 'ADMIN', None, 42, ['admin']):
            self.assertEqual(resolve_nav(DASHBOARD_NAV, garbage, {}, '/dashboard/profile'), guest)

    def test_parents_never_contain_active_item_or_divider(self):
        flags = {'aiDeepAnalysis': True, 'smartThemes': True, 'audioSummaries': True}
        for tree in ALL_TREES:
            for item in flatten_nav_tree(tree):
                if not item.path:
                    continue
                state = resolve_nav(tree, roles.ADMIN, flags, item.path + '/child')
                if state.active_item is None:
                    continue
                self.assertNotIn(state.active_item.id, ids(state.parents))
                self.assertFalse(any(parent.divider for parent in state.parents))

    def test_no_match_means_no_active_item_and_no_parents(self):
        state = resolve_nav(DASHBOARD_NAV, roles.ADMIN, {}, '/somewhere/else')
        self.assertIsNone(state.active_item)
        self.assertEqual(state.parents, ())

    def test_bad_inputs_never_raise(self):
        state = resolve_nav(DASHBOARD_NAV, object(), 'not-a-mapping', None, permissions=5)
        self.assertIsNone(state.active_item)
        self.assertIn('dashboard-profile', ids(state.tree_filtered))


class FilteringTestCase(SimpleTestCase):
    """Test role, flag and permission filtering."""

    def test_flag_items_hidden_unless_flag_is_true(self):
        self.assertNotIn('dashboard-ai-deep-analysis', visible_ids(DASHBOARD_NAV, roles.EDITOR))
        self.assertNotIn(
            'dashboard-ai-deep-analysis',
            visible_ids(DASHBOARD_NAV, roles.EDITOR, {'aiDeepAnalysis': 'yes'}),
        )
        self.assertIn(
            'dashboard-ai-deep-analysis',
            visible_ids(DASHBOARD_NAV, roles.EDITOR, {'aiDeepAnalysis': True}),
        )

    def test_non_mapping_flags_count_as_no_flags(self):
        state = resolve_nav(DASHBOARD_NAV, roles.ADMIN, ['smartThemes'], '/')
        self.assertNotIn('dashboard-themes', ids(flatten_nav_tree(state.tree_filtered)))

    def test_permissions_take_precedence_over_roles(self):
        """Items declaring permissions are checked against the caller's codes when given."""
        editor = resolve_nav(DASHBOARD_NAV, roles.EDITOR, {}, '/', permissions=[roles.USERS_VIEW])
        self.assertIn('dashboard-users', ids(flatten_nav_tree(editor.tree_filtered)))

        admin = resolve_nav(DASHBOARD_NAV, roles.ADMIN, {}, '/', permissions=[])
        self.assertNotIn('dashboard-users', ids(flatten_nav_tree(admin.tree_filtered)))

        admin = resolve_nav(DASHBOARD_NAV, roles.ADMIN, {}, '/', permissions=None)
        self.assertIn('dashboard-users', ids(flatten_nav_tree(admin.tree_filtered)))

    def test_children_of_failing_parent_are_promoted(self):
        tree = validate_tree([
            NavItem(id='parent', label_key='p', path='/p', required_role=roles.ADMIN, children=(
                NavItem(id='child', label_key='c', path='/p/c'),
            )),
        ])
        state = resolve_nav(tree, roles.GUEST, {}, '/p/c')
        self.assertEqual(ids(state.tree_filtered), ['child'])
        self.assertEqual(state.active_item.id, 'child')
        self.assertEqual(state.parents, ())

    def test_parent_without_surviving_children(self):
        tree = validate_tree([
            NavItem(id='container', label_key='c', children=(
                NavItem(id='secret', label_key='s', path='/secret', required_role=roles.ADMIN),
            )),
            NavItem(id='section', label_key='s', path='/section', children=(
                NavItem(id='hidden', label_key='h', path='/section/hidden', required_role=roles.ADMIN),
            )),
        ])
        state = resolve_nav(tree, roles.READER, {}, '/section')
        self.assertEqual(ids(state.tree_filtered), ['section'])
        self.assertEqual(state.tree_filtered[0].children, ())

    def test_dividers_stay_in_filtered_tree(self):
        state = resolve_nav(DASHBOARD_NAV, roles.REPORTER, {}, '/dashboard')
        self.assertIn('dashboard-divider-content', ids(state.tree_filtered))


class ActiveItemTestCase(SimpleTestCase):
    """Test active item matching."""

    def test_longest_prefix_wins(self):
        state = resolve_nav(DASHBOARD_NAV, roles.ADMIN, {}, '/dashboard/users/roles/5')
        self.assertEqual(state.active_item.id, 'dashboard-roles')
        self.assertEqual(ids(state.parents), ['dashboard-users'])

    def test_first_declared_wins_ties(self):
        tree = validate_tree([
            NavItem(id='first', label_key='a', path='/x'),
            NavItem(id='second', label_key='b', path='/x'),
        ])
        self.assertEqual(resolve_nav(tree, roles.GUEST, {}, '/x/y').active_item.id, 'first')
        self.assertEqual(resolve_nav(tree, roles.GUEST, {}, '/x').active_item.id, 'first')

    def test_exact_items_never_match_by_prefix(self):
        state = resolve_nav(DASHBOARD_NAV, roles.ADMIN, {}, '/dashboard/not-a-section')
        self.assertIsNone(state.active_item)

    def test_trailing_slash_and_query_are_ignored(self):
        state = resolve_nav(DASHBOARD_NAV, roles.REPORTER, {}, '/dashboard/articles/?page=2')
        self.assertEqual(state.active_item.id, 'dashboard-articles')

    def test_normalize_pathname(self):
        self.assertEqual(normalize_pathname('/dashboard/'), '/dashboard')
        self.assertEqual(normalize_pathname(''), '/')
        self.assertEqual(normalize_pathname('dashboard?x=1#top'), '/dashboard')
        self.assertIsNone(normalize_pathname(None))

    def test_track_nav_click_logs(self):
        with self.assertLogs('newsroom.navigation.resolver', level='INFO') as logs:
            track_nav_click('dashboard-articles', '/dashboard/articles')
        self.assertIn('dashboard-articles', logs.output[0])


class TreeValidationTestCase(SimpleTestCase):
    """Test static tree invariants."""

    def test_static_trees_have_unique_ids(self):
        for tree in ALL_TREES:
            all_ids = ids(flatten_nav_tree(tree))
            self.assertEqual(len(all_ids), len(set(all_ids)))

    def test_duplicate_nested_id_rejected(self):
        with self.assertRaises(NavConfigurationError):
            validate_tree([
                NavItem(id='a', label_key='a', children=(NavItem(id='a', label_key='b'),)),
            ])

    def test_navigable_divider_rejected(self):
        with self.assertRaises(NavConfigurationError):
            validate_tree([NavItem(id='d', label_key='d', path='/d', divider=True)])

    def test_label_fallback(self):
        item = NavItem(id='x', label_key='x', label_ar='عربي', label_en='English')
        self.assertEqual(item.label('ur'), 'English')
        self.assertEqual(item.label('ar'), 'عربي')
        self.assertEqual(NavItem(id='y', label_key='key').label('en'), 'key')

    def test_with_children_keeps_every_other_field(self):
        item = NavItem(
            id='x', label_key='x', label_ur='اردو', path='/x', icon='file',
            required_role=roles.EDITOR, required_flag='smartThemes',
            permissions=(roles.ARTICLES_VIEW,), exact=True,
            children=(NavItem(id='old', label_key='old'),),
        )
        copy = item.with_children([NavItem(id='new', label_key='new')])

        self.assertEqual(ids(copy.children), ['new'])
        self.assertIsInstance(copy.children, tuple)
        self.assertEqual(copy.with_children(item.children), item)


class BreadcrumbTestCase(SimpleTestCase):
    """Test breadcrumb building."""

    def test_detect_language(self):
        self.assertEqual(detect_language('/ur/dashboard'), 'ur')
        self.assertEqual(detect_language('/ur'), 'ur')
        self.assertEqual(detect_language('/en/dashboard/articles'), 'en')
        self.assertEqual(detect_language('/dashboard'), 'ar')
        self.assertEqual(detect_language('/urgent'), 'ar')
        self.assertEqual(detect_language(None), 'ar')

    def test_no_active_item_renders_nothing(self):
        state = resolve_nav(DASHBOARD_NAV, roles.ADMIN, {}, '/nowhere')
        self.assertEqual(build_breadcrumbs(state, '/nowhere'), [])
        self.assertEqual(build_breadcrumbs(None, '/nowhere'), [])

    def test_parent_without_path_links_home(self):
        state = resolve_nav(DASHBOARD_NAV, roles.REPORTER, {}, '/dashboard/articles')
        crumbs = build_breadcrumbs(state, '/en/dashboard/articles')
        self.assertEqual(crumbs, [
            Crumb(label='Home', href='/en/dashboard'),
            Crumb(label='Content', href='/en/dashboard'),
            Crumb(label='Articles', href=None, is_current=True),
        ])

    def test_arabic_trail(self):
        state = resolve_nav(DASHBOARD_NAV, roles.ADMIN, {}, '/dashboard/users/roles')
        crumbs = build_breadcrumbs(state, '/dashboard/users/roles')
        self.assertEqual([c.label for c in crumbs], ['الرئيسية', 'المستخدمون', 'الأدوار والصلاحيات'])
        self.assertEqual(crumbs[1].href, '/dashboard/users')
        self.assertEqual([c.is_current for c in crumbs], [False, False, True])


class SidebarGroupingTestCase(SimpleTestCase):
    """Test divider-based grouping."""

    def test_groups_follow_dividers_and_drop_empty_ones(self):
        state = resolve_nav(DASHBOARD_NAV, roles.REPORTER, {}, '/dashboard')
        groups = group_nav_items(state.tree_filtered)
        self.assertEqual([g['id'] for g in groups], [
            'group-0',
            'dashboard-divider-content',
            'dashboard-divider-ai',
            'dashboard-divider-communication',
            'dashboard-divider-system',
        ])
        self.assertIsNone(groups[0]['heading'])
        self.assertEqual(ids(groups[0]['items']), ['dashboard-home'])
        self.assertEqual(ids(groups[-1]['items']), ['dashboard-profile'])

    def test_consecutive_dividers(self):
        tree = (
            divider('d1', 'one'),
            divider('d2', 'two'),
            NavItem(id='item', label_key='i', path='/i'),
        )
        groups = group_nav_items(tree)
        self.assertEqual([g['id'] for g in groups], ['d2'])
