"""
Management command to follow the notification stream from a terminal.

Connects to the backend's server-sent events endpoint, reconnecting after
the configured delay, and prints the toasts and auto-publish banners a
dashboard would show.

Usage:
    python manage.py listen_notifications --role system_admin --cookie sid=...
"""

import time

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError

from newsroom.notifications import (
    AutoPublishBanner,
    NotificationBell,
    NotificationStream,
    RequestsEventSource,
    ThreadingScheduler,
)


class Command(BaseCommand):
    """
    Django management command that listens for notifications until interrupted.
    """

    help = 'Listen to the notification stream and print toasts and banners'

    def add_arguments(self, parser):
        parser.add_argument('--url', help='Stream URL (defaults to NEWSROOM_API_BASE_URL + /api/notifications/stream)')
        parser.add_argument('--role', default='admin', help='Backend role of the listening user')
        parser.add_argument('--cookie', action='append', default=[], help='Session cookie as name=value')
        parser.add_argument('--delay', type=float, default=None, help='Reconnect delay in seconds')

    def handle(self, *args, **options):
        url = options['url']
        if not url:
            base_url = settings.NEWSROOM_API_BASE_URL.rstrip('/')
            if not base_url:
                raise CommandError('Set NEWSROOM_API_BASE_URL or pass --url')
            url = f'{base_url}/api/notifications/stream'

        cookies = {}
        for cookie in options['cookie']:
            name, sep, value = cookie.partition('=')
            if not sep:
                raise CommandError(f'Invalid cookie "{cookie}", expected name=value')
            cookies[name] = value

        scheduler = ThreadingScheduler()
        bell = NotificationBell(
            invalidate=lambda: None,
            toast=lambda toast: self.stdout.write(
                self.style.ERROR(f"[{toast['variant']}] {toast['title']}: {toast['description']}")
            ),
        )
        banner = AutoPublishBanner(options['role'], scheduler)

        def on_notification(notification):
            bell(notification)
            banner(notification)
            if banner.visible and banner.notification is notification:
                self.stdout.write(self.style.SUCCESS(
                    f"Auto-published: {notification.get('title')} {notification.get('deeplink') or ''}"
                ))
            else:
                self.stdout.write(f"{notification.get('type')}: {notification.get('title')}")

        def source_factory(stream_url, on_open, on_message, on_error):
            return RequestsEventSource(stream_url, on_open, on_message, on_error, cookies=cookies)

        delay = options['delay'] if options['delay'] is not None else settings.NEWSROOM_SSE_RECONNECT_DELAY
        stream = NotificationStream(url, on_notification, source_factory, scheduler, reconnect_delay=delay)

        self.stdout.write(self.style.SUCCESS(f'Listening on {url} (Ctrl+C to stop)'))
        stream.start()
        try:
            while True:
                time.sleep(1)
        except KeyboardInterrupt:
            self.stdout.write('Stopping...')
        finally:
            stream.stop()
