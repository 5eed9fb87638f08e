"""
Unit Tests for the notification stream and its consumers

Tests cover: the reconnect state machine, SSE parsing, the requests
transport, the notification bell and the auto-publish banner.
"""

import threading
from unittest.mock import MagicMock, Mock

import requests
from django.test import SimpleTestCase

from newsroom.notifications.consumers import AutoPublishBanner, NotificationBell
from newsroom.notifications.stream import (
    NotificationStream,
    RequestsEventSource,
    StreamState,
    ThreadingScheduler,
    parse_event_stream,
)

STREAM_URL = 'http://api.test/api/notifications/stream'


class FakeHandle:
    def __init__(self, delay, fn):
        self.delay = delay
        self.fn = fn
        self.cancelled = False

    def cancel(self):
        self.cancelled = True


class FakeScheduler:
    """Collects scheduled callbacks; run_pending() fires them."""

    def __init__(self):
        self.handles = []

    def schedule(self, delay, fn):
        handle = FakeHandle(delay, fn)
        self.handles.append(handle)
        return handle

    @property
    def pending(self):
        return [h for h in self.handles if not h.cancelled and h.fn is not None]

    def run_pending(self):
        for handle in self.pending:
            fn, handle.fn = handle.fn, None
            fn()


class FakeSource:
    def __init__(self, url, on_open, on_message, on_error):
        self.url = url
        self.on_open = on_open
        self.on_message = on_message
        self.on_error = on_error
        self.opened = False
        self.closed = False

    def open(self):
        self.opened = True

    def close(self):
        self.closed = True


class NotificationStreamTestCase(SimpleTestCase):
    """Test the reconnect state machine."""

    def setUp(self):
        self.sources = []
        self.received = []
        self.scheduler = FakeScheduler()
        self.stream = NotificationStream(
            STREAM_URL,
            self.received.append,
            self.source_factory,
            self.scheduler,
        )

    def source_factory(self, url, on_open, on_message, on_error):
        source = FakeSource(url, on_open, on_message, on_error)
        self.sources.append(source)
        return source

    def live_sources(self):
        return [s for s in self.sources if not s.closed]

    def test_start_connects_once(self):
        self.stream.start()
        self.stream.start()
        self.assertEqual(len(self.sources), 1)
        self.assertTrue(self.sources[0].opened)
        self.assertEqual(self.stream.state, StreamState.CONNECTING)

        self.sources[0].on_open()
        self.assertEqual(self.stream.state, StreamState.CONNECTED)

    def test_messages_are_decoded_and_delivered(self):
        self.stream.start()
        self.sources[0].on_open()
        self.sources[0].on_message('{"type": "BreakingNews", "title": "عاجل"}')
        self.assertEqual(self.received, [{'type': 'BreakingNews', 'title': 'عاجل'}])

    def test_malformed_messages_are_dropped(self):
        self.stream.start()
        with self.assertLogs('newsroom.notifications.stream', level='WARNING'):
            self.sources[0].on_message('{broken')
            self.sources[0].on_message('[1, 2]')
        self.assertEqual(self.received, [])
        self.assertEqual(self.stream.state, StreamState.CONNECTING)

    def test_error_schedules_exactly_one_retry(self):
        self.stream.start()
        self.sources[0].on_open()

        self.sources[0].on_error(ConnectionError('dropped'))
        self.assertEqual(self.stream.state, StreamState.BACKOFF)
        self.assertTrue(self.sources[0].closed)
        self.assertEqual(len(self.scheduler.pending), 1)
        self.assertEqual(self.scheduler.pending[0].delay, 5.0)

        # A second error while backing off does not add a retry
        self.sources[0].on_error(ConnectionError('dropped again'))
        self.assertEqual(len(self.scheduler.pending), 1)

    def test_retry_opens_a_new_source(self):
        self.stream.start()
        self.sources[0].on_error()
        self.scheduler.run_pending()

        self.assertEqual(len(self.sources), 2)
        self.assertEqual(self.stream.state, StreamState.CONNECTING)
        self.assertEqual(self.stream.connect_attempts, 2)

        self.sources[1].on_open()
        self.assertEqual(self.stream.state, StreamState.CONNECTED)

    def test_repeated_drops_never_overlap(self):
        """Each drop costs one retry and there is never more than one live source."""
        self.stream.start()
        for attempt in range(3):
            self.sources[-1].on_error()
            self.assertEqual(len(self.live_sources()), 0)
            self.assertEqual(len(self.scheduler.pending), 1)
            self.scheduler.run_pending()
            self.assertEqual(len(self.live_sources()), 1)

        self.assertEqual(len(self.sources), 4)
        self.assertEqual(len(self.scheduler.handles), 3)

    def test_stale_source_events_are_ignored(self):
        self.stream.start()
        old = self.sources[0]
        old.on_error()
        self.scheduler.run_pending()

        old.on_open()
        old.on_message('{"type": "x"}')
        old.on_error()
        self.assertEqual(self.stream.state, StreamState.CONNECTING)
        self.assertEqual(self.received, [])
        self.assertEqual(self.scheduler.pending, [])

    def test_stop_cancels_retry_and_ignores_events(self):
        self.stream.start()
        self.sources[0].on_error()
        self.stream.stop()

        self.assertEqual(self.stream.state, StreamState.DISCONNECTED)
        self.assertTrue(self.scheduler.handles[0].cancelled)
        self.scheduler.run_pending()
        self.assertEqual(len(self.sources), 1)

    def test_stop_closes_live_source(self):
        self.stream.start()
        self.sources[0].on_open()
        self.stream.stop()

        self.assertTrue(self.sources[0].closed)
        self.sources[0].on_message('{"type": "x"}')
        self.sources[0].on_error()
        self.assertEqual(self.received, [])
        self.assertEqual(self.scheduler.handles, [])

    def test_handler_errors_do_not_escape(self):
        stream = NotificationStream(STREAM_URL, Mock(side_effect=ValueError('boom')), self.source_factory, self.scheduler)
        stream.start()
        with self.assertLogs('newsroom.notifications.stream', level='ERROR'):
            self.sources[0].on_message('{"type": "x"}')
        self.assertEqual(stream.state, StreamState.CONNECTING)

    def test_custom_reconnect_delay(self):
        stream = NotificationStream(STREAM_URL, self.received.append, self.source_factory, self.scheduler, reconnect_delay=1.5)
        stream.start()
        self.sources[0].on_error()
        self.assertEqual(self.scheduler.pending[0].delay, 1.5)


class EventStreamParsingTestCase(SimpleTestCase):
    """Test SSE line parsing."""

    def test_events_split_on_blank_lines(self):
        lines = [
            'data: {"a": 1}',
            '',
            ': keep-alive',
            'event: message',
            'data: line1',
            'data:line2',
            '',
            'data: unterminated',
        ]
        self.assertEqual(list(parse_event_stream(lines)), ['{"a": 1}', 'line1\nline2'])

    def test_bytes_lines(self):
        self.assertEqual(list(parse_event_stream([b'data: x', b''])), ['x'])


class RequestsEventSourceTestCase(SimpleTestCase):
    """Test the requests transport, driven synchronously."""

    def make_source(self, response):
        session = MagicMock()
        session.get.return_value = response
        callbacks = Mock()
        source = RequestsEventSource(
            STREAM_URL, callbacks.on_open, callbacks.on_message, callbacks.on_error,
            session=session, cookies={'sid': 'abc'},
        )
        return source, session, callbacks

    def test_messages_then_error_on_end_of_stream(self):
        response = Mock(ok=True, status_code=200)
        response.iter_lines.return_value = iter(['data: {"type": "x"}', ''])
        source, session, callbacks = self.make_source(response)

        source._run()

        callbacks.on_open.assert_called_once_with()
        callbacks.on_message.assert_called_once_with('{"type": "x"}')
        callbacks.on_error.assert_called_once()
        headers = session.get.call_args.kwargs['headers']
        self.assertEqual(headers['Accept'], 'text/event-stream')
        self.assertTrue(session.get.call_args.kwargs['stream'])
        session.cookies.update.assert_called_once_with({'sid': 'abc'})

    def test_http_error_status_reports_error_without_open(self):
        response = Mock(ok=False, status_code=503)
        source, session, callbacks = self.make_source(response)

        source._run()

        callbacks.on_open.assert_not_called()
        callbacks.on_error.assert_called_once()

    def test_connection_error(self):
        source, session, callbacks = self.make_source(None)
        session.get.side_effect = requests.exceptions.ConnectionError('refused')

        source._run()

        callbacks.on_error.assert_called_once()

    def test_closed_source_stays_silent(self):
        source, session, callbacks = self.make_source(None)
        session.get.side_effect = requests.exceptions.ConnectionError('refused')

        source.close()
        source._run()

        callbacks.on_error.assert_not_called()


    def test_close_during_connect_releases_response(self):
        """A source closed while the GET is in flight never opens and drops the response."""
        response = Mock(ok=True, status_code=200)
        source, session, callbacks = self.make_source(response)
        released = threading.Event()

        def slow_get(*args, **kwargs):
            released.wait(5)
            return response

        session.get.side_effect = slow_get
        source.open()
        source.close()
        released.set()
        source._thread.join(5)

        self.assertFalse(source._thread.is_alive())
        callbacks.on_open.assert_not_called()
        callbacks.on_error.assert_not_called()
        response.close.assert_called_once_with()
        response.iter_lines.assert_not_called()


class ThreadingSchedulerTestCase(SimpleTestCase):

    def test_schedule_returns_cancellable_daemon_timer(self):
        timer = ThreadingScheduler().schedule(60, Mock())
        try:
            self.assertTrue(timer.daemon)
        finally:
            timer.cancel()


class NotificationBellTestCase(SimpleTestCase):
    """Test the notification bell consumer."""

    def test_every_message_invalidates(self):
        invalidate, toast = Mock(), Mock()
        bell = NotificationBell(invalidate, toast)

        bell({'type': 'ArticlePublished', 'title': 'x'})
        bell({'type': 'CommentReply', 'title': 'y'})

        self.assertEqual(invalidate.call_count, 2)
        toast.assert_not_called()

    def test_breaking_news_raises_destructive_toast(self):
        invalidate, toast = Mock(), Mock()
        bell = NotificationBell(invalidate, toast)

        bell({'type': 'BreakingNews', 'title': 'عاجل', 'body': 'تفاصيل'})

        invalidate.assert_called_once_with()
        toast.assert_called_once_with({
            'title': 'عاجل',
            'description': 'تفاصيل',
            'variant': 'destructive',
            'duration': 5000,
        })


class AutoPublishBannerTestCase(SimpleTestCase):
    """Test the auto-publish banner consumer."""

    NOTIFICATION = {
        'type': 'article_published',
        'title': 'تم النشر',
        'body': 'نُشر الخبر تلقائياً',
        'deeplink': '/article/slug',
    }

    def setUp(self):
        self.scheduler = FakeScheduler()

    def test_only_admins_see_banner(self):
        for role in ('editor', 'reporter', 'chief_editor'):
            banner = AutoPublishBanner(role, self.scheduler)
            self.assertFalse(banner.enabled)
            banner(self.NOTIFICATION)
            self.assertFalse(banner.visible)

        for role in ('admin', 'system_admin'):
            self.assertTrue(AutoPublishBanner(role, self.scheduler).enabled)

    def test_banner_shows_and_auto_hides(self):
        banner = AutoPublishBanner('system_admin', self.scheduler)
        banner(self.NOTIFICATION)

        self.assertTrue(banner.visible)
        self.assertEqual(self.scheduler.pending[0].delay, 5.0)

        self.scheduler.run_pending()
        self.assertFalse(banner.visible)
        self.assertIsNone(banner.notification)

    def test_other_types_are_ignored(self):
        banner = AutoPublishBanner('admin', self.scheduler)
        banner({'type': 'BreakingNews', 'title': 'x'})
        self.assertFalse(banner.visible)
        self.assertEqual(self.scheduler.handles, [])

    def test_new_notification_restarts_timer(self):
        banner = AutoPublishBanner('admin', self.scheduler)
        banner(self.NOTIFICATION)
        banner(dict(self.NOTIFICATION, title='second'))

        self.assertTrue(self.scheduler.handles[0].cancelled)
        self.assertEqual(len(self.scheduler.pending), 1)
        self.assertEqual(banner.notification['title'], 'second')

    def test_open_deeplink_closes_banner(self):
        banner = AutoPublishBanner('admin', self.scheduler)
        banner(self.NOTIFICATION)

        self.assertEqual(banner.open_deeplink(), '/article/slug')
        self.assertFalse(banner.visible)
        self.assertEqual(self.scheduler.pending, [])

    def test_open_deeplink_without_link_keeps_banner(self):
        banner = AutoPublishBanner('admin', self.scheduler)
        banner(dict(self.NOTIFICATION, deeplink=None))

        self.assertIsNone(banner.open_deeplink())
        self.assertTrue(banner.visible)
