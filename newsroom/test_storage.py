"""
Unit Tests for client-local storage

Tests cover: sidebar collapse state, announcement tracking and graceful
degradation when the store fails.
"""

import json
from unittest.mock import MagicMock

from django.test import SimpleTestCase

from newsroom.exceptions import StorageUnavailable
from newsroom.storage import AnnouncementTracker, MemoryStorage, SessionStorage, SidebarState


class SidebarStateTestCase(SimpleTestCase):
    """Test persisted sidebar state."""

    def setUp(self):
        self.storage = MemoryStorage()
        self.state = SidebarState(self.storage, 'sabq.sidebar.v1')

    def test_empty_storage_means_all_expanded(self):
        self.assertEqual(self.state.load(), {})
        self.assertFalse(self.state.is_collapsed('dashboard-divider-ai'))

    def test_toggle_persists_json(self):
        self.state.toggle('dashboard-divider-ai')
        self.assertEqual(json.loads(self.storage.data['sabq.sidebar.v1']), {'dashboard-divider-ai': True})
        self.assertTrue(self.state.is_collapsed('dashboard-divider-ai'))

        self.state.toggle('dashboard-divider-ai')
        self.assertFalse(self.state.is_collapsed('dashboard-divider-ai'))

    def test_read_failure_defaults_to_expanded(self):
        """A store that throws on read behaves like an empty store."""
        state = SidebarState(MemoryStorage(fail_reads=True), 'sabq.sidebar.urdu.v1')
        with self.assertLogs('newsroom.storage', level='WARNING'):
            self.assertEqual(state.load(), {})
        self.assertFalse(state.is_collapsed('ur-divider-content'))

    def test_write_failure_is_ignored(self):
        state = SidebarState(MemoryStorage(fail_writes=True), 'sabq.sidebar.v1')
        with self.assertLogs('newsroom.storage', level='WARNING'):
            self.assertFalse(state.save({'a': True}))
            result = state.toggle('a')
        self.assertEqual(result, {'a': True})
        self.assertEqual(state.load(), {})

    def test_malformed_values_are_ignored(self):
        self.storage.data['sabq.sidebar.v1'] = '{not json'
        self.assertEqual(self.state.load(), {})

        self.storage.data['sabq.sidebar.v1'] = '["a", "b"]'
        self.assertEqual(self.state.load(), {})

        self.storage.data['sabq.sidebar.v1'] = json.dumps({'a': True, 'b': 'yes', 'c': False})
        self.assertEqual(self.state.load(), {'a': True, 'c': False})

    def test_layouts_use_separate_keys(self):
        SidebarState(self.storage, 'sabq.sidebar.v1').toggle('group')
        self.assertFalse(SidebarState(self.storage, 'sabq.sidebar.urdu.v1').is_collapsed('group'))


class AnnouncementTrackerTestCase(SimpleTestCase):
    """Test announcement dismissal tracking."""

    def test_dismiss_uses_announcement_key(self):
        storage = MemoryStorage()
        tracker = AnnouncementTracker(storage)

        self.assertTrue(tracker.should_show(42))
        tracker.dismiss(42)
        self.assertEqual(storage.data['announcement_dismissed_42'], 'true')
        self.assertFalse(tracker.should_show(42))
        self.assertTrue(tracker.should_show(43))

    def test_mark_viewed(self):
        storage = MemoryStorage()
        tracker = AnnouncementTracker(storage)
        tracker.mark_viewed('abc')
        self.assertIn('announcement_viewed_abc', storage.data)
        self.assertTrue(tracker.is_viewed('abc'))
        self.assertTrue(tracker.should_show('abc'))

    def test_reset_clears_both_keys(self):
        storage = MemoryStorage()
        tracker = AnnouncementTracker(storage)
        tracker.mark_viewed(1)
        tracker.dismiss(1)
        tracker.reset(1)
        self.assertEqual(storage.data, {})

    def test_failures_degrade_to_showing(self):
        tracker = AnnouncementTracker(MemoryStorage(fail_reads=True, fail_writes=True))
        with self.assertLogs('newsroom.storage', level='WARNING'):
            self.assertFalse(tracker.dismiss(7))
            self.assertTrue(tracker.should_show(7))


class SessionStorageTestCase(SimpleTestCase):
    """Test the session-backed store."""

    def test_round_trip_on_dict_session(self):
        session = {}
        storage = SessionStorage(session)
        storage.write('key', 'value')
        self.assertEqual(storage.read('key'), 'value')
        storage.clear('key')
        self.assertIsNone(storage.read('key'))

    def test_session_errors_become_storage_unavailable(self):
        session = MagicMock()
        session.get.side_effect = RuntimeError('session backend down')
        session.__setitem__.side_effect = RuntimeError('session backend down')

        storage = SessionStorage(session)
        with self.assertRaises(StorageUnavailable):
            storage.read('key')
        with self.assertRaises(StorageUnavailable):
            storage.write('key', 'value')

        self.assertEqual(SidebarState(storage, 'key').load(), {})
