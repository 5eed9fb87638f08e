"""
Notification stream subscription.

The backend pushes JSON notifications over server-sent events at
``/api/notifications/stream``. A NotificationStream owns at most one live
connection and reconnects after a fixed delay when it drops.

States:
    DISCONNECTED -> start() -> CONNECTING
    CONNECTING   -> open    -> CONNECTED
    CONNECTING / CONNECTED -> error -> BACKOFF (one retry scheduled)
    BACKOFF      -> retry   -> CONNECTING
    any          -> stop()  -> DISCONNECTED

The transport and the timer are injected so the state machine can be
driven by hand in tests.
"""
import enum
import json
import logging
import threading

import requests

logger = logging.getLogger(__name__)

DEFAULT_RECONNECT_DELAY = 5.0


class StreamState(enum.Enum):
    DISCONNECTED = 'disconnected'
    CONNECTING = 'connecting'
    CONNECTED = 'connected'
    BACKOFF = 'backoff'


class NotificationStream:
    """
    Reconnecting subscription to the notification stream.

    Args:
        url: Stream URL
        on_notification: Called with each decoded notification dict
        source_factory: ``factory(url, on_open, on_message, on_error)``
            returning an event source with ``open()`` and ``close()``
        scheduler: Object with ``schedule(delay, fn)`` returning a handle
            with ``cancel()``
        reconnect_delay: Seconds to wait before reconnecting
    """

    def __init__(self, url, on_notification, source_factory, scheduler,
                 reconnect_delay=DEFAULT_RECONNECT_DELAY):
        self.url = url
        self.on_notification = on_notification
        self.source_factory = source_factory
        self.scheduler = scheduler
        self.reconnect_delay = reconnect_delay

        self.state = StreamState.DISCONNECTED
        self.connect_attempts = 0
        self._source = None
        self._retry = None
        self._generation = 0
        self._stopped = False
        self._lock = threading.RLock()

    def start(self):
        """Open the subscription. Does nothing while one is already active."""
        with self._lock:
            self._stopped = False
            if self.state is not StreamState.DISCONNECTED:
                return
            self._connect()

    def stop(self):
        """Close the subscription and ignore every event that arrives later."""
        with self._lock:
            self._stopped = True
            self._generation += 1
            if self._retry is not None:
                self._retry.cancel()
                self._retry = None
            self._close_source()
            self.state = StreamState.DISCONNECTED
            logger.info(f"Notification stream {self.url} stopped")

    # ===== TRANSITIONS =====

    def _connect(self):
        self._generation += 1
        generation = self._generation
        self.state = StreamState.CONNECTING
        self.connect_attempts += 1
        logger.info(f"Connecting to notification stream {self.url} (attempt {self.connect_attempts})")

        self._source = self.source_factory(
            self.url,
            on_open=lambda: self.handle_open(generation),
            on_message=lambda data: self.handle_message(generation, data),
            on_error=lambda error=None: self.handle_error(generation, error),
        )
        self._source.open()

    def _is_current(self, generation):
        return not self._stopped and generation == self._generation

    def handle_open(self, generation):
        with self._lock:
            if not self._is_current(generation):
                return
            self.state = StreamState.CONNECTED
            logger.info(f"Notification stream {self.url} connected")

    def handle_message(self, generation, data):
        with self._lock:
            if not self._is_current(generation):
                return

        try:
            notification = json.loads(data)
        except (TypeError, ValueError):
            logger.warning(f"Dropping malformed notification payload: {data!r}")
            return
        if not isinstance(notification, dict):
            logger.warning(f"Dropping non-object notification payload: {data!r}")
            return

        try:
            self.on_notification(notification)
        except Exception:
            logger.exception(f"Notification handler failed for type={notification.get('type')}")

    def handle_error(self, generation, error=None):
        with self._lock:
            if not self._is_current(generation):
                return
            if self.state is StreamState.BACKOFF:
                return

            logger.warning(
                f"Notification stream {self.url} error: {error}. "
                f"Reconnecting in {self.reconnect_delay}s"
            )
            self._close_source()
            self.state = StreamState.BACKOFF
            self._retry = self.scheduler.schedule(self.reconnect_delay, self._reconnect)

    def _reconnect(self):
        with self._lock:
            self._retry = None
            if self._stopped or self.state is not StreamState.BACKOFF:
                return
            self._connect()

    def _close_source(self):
        source, self._source = self._source, None
        if source is None:
            return
        try:
            source.close()
        except Exception as e:
            logger.debug(f"Ignoring error while closing stream source: {e}")


# ===== TRANSPORT =====

class RequestsEventSource:
    """
    Server-sent events over a streaming ``requests`` response.

    Runs on a daemon thread. ``data:`` lines are collected until a blank
    line and delivered as one message (multi-line data joined with ``\\n``).
    A clean end of stream counts as an error so the owner reconnects.
    """

    def __init__(self, url, on_open, on_message, on_error, session=None, cookies=None,
                 connect_timeout=10):
        self.url = url
        self.on_open = on_open
        self.on_message = on_message
        self.on_error = on_error
        self.session = session or requests.Session()
        if cookies:
            self.session.cookies.update(cookies)
        self.connect_timeout = connect_timeout
        self._closed = threading.Event()
        self._response = None
        self._thread = None

    def open(self):
        self._thread = threading.Thread(target=self._run, name='notification-stream', daemon=True)
        self._thread.start()

    def close(self):
        self._closed.set()
        response = self._response
        if response is not None:
            response.close()

    def _run(self):
        headers = {'Accept': 'text/event-stream', 'Cache-Control': 'no-cache'}
        try:
            response = self.session.get(
                self.url,
                headers=headers,
                stream=True,
                timeout=(self.connect_timeout, None),
            )
        except requests.exceptions.RequestException as e:
            if not self._closed.is_set():
                self.on_error(e)
            return

        self._response = response
        if self._closed.is_set():
            # close() ran while the request was in flight
            response.close()
            return
        if not response.ok:
            response.close()
            if not self._closed.is_set():
                self.on_error(requests.exceptions.HTTPError(f"Stream returned {response.status_code}"))
            return

        self.on_open()
        try:
            for data in parse_event_stream(response.iter_lines(decode_unicode=True)):
                if self._closed.is_set():
                    return
                self.on_message(data)
        except (requests.exceptions.RequestException, AttributeError, ValueError) as e:
            # AttributeError/ValueError: the response was closed under us
            if not self._closed.is_set():
                self.on_error(e)
            return

        if not self._closed.is_set():
            self.on_error(requests.exceptions.ConnectionError('Stream closed by server'))


def parse_event_stream(lines):
    """
    Yield the data of each event in an iterable of SSE lines.

    Comments (``:``) and fields other than ``data`` are skipped.
    """
    data_lines = []
    for line in lines:
        if isinstance(line, bytes):
            line = line.decode('utf-8')
        if line == '':
            if data_lines:
                yield '\n'.join(data_lines)
                data_lines = []
            continue
        if line.startswith(':'):
            continue
        field, _, value = line.partition(':')
        if value.startswith(' '):
            value = value[1:]
        if field == 'data':
            data_lines.append(value)
    # An event cut off before its blank line is discarded


class ThreadingScheduler:
    """Run callbacks after a delay on daemon ``threading.Timer`` threads."""

    def schedule(self, delay, fn):
        timer = threading.Timer(delay, fn)
        timer.daemon = True
        timer.start()
        return timer
