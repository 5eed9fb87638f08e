"""
Consumers of the notification stream.

- NotificationBell: refreshes the cached notification list on every
  message and raises a toast for breaking news
- AutoPublishBanner: shows a short-lived banner to admins when an article
  was published automatically
"""
import logging

from .. import roles

logger = logging.getLogger(__name__)

BREAKING_NEWS = 'BreakingNews'
ARTICLE_PUBLISHED = 'article_published'

TOAST_DURATION_MS = 5000
BANNER_HIDE_DELAY = 5.0


class NotificationBell:
    """
    Args:
        invalidate: Called with no arguments to drop the cached list
        toast: Called with a toast dict (title, description, variant, duration)
    """

    def __init__(self, invalidate, toast):
        self.invalidate = invalidate
        self.toast = toast

    def __call__(self, notification):
        self.invalidate()

        if notification.get('type') == BREAKING_NEWS:
            logger.info(f"Breaking news toast: {notification.get('title')}")
            self.toast({
                'title': notification.get('title', ''),
                'description': notification.get('body', ''),
                'variant': 'destructive',
                'duration': TOAST_DURATION_MS,
            })


class AutoPublishBanner:
    """
    Banner for auto-published articles, shown to admins only.

    Only ``article_published`` notifications are shown. Each one replaces
    the previous banner and hides itself after ``hide_delay`` seconds.
    """

    def __init__(self, role, scheduler, hide_delay=BANNER_HIDE_DELAY):
        self.role = role
        self.scheduler = scheduler
        self.hide_delay = hide_delay
        self.notification = None
        self.visible = False
        self._hide = None

    @property
    def enabled(self):
        """Whether this viewer should subscribe at all."""
        return roles.is_admin_role(self.role)

    def __call__(self, notification):
        if not self.enabled:
            return
        if notification.get('type') != ARTICLE_PUBLISHED:
            return

        self._cancel_hide()
        self.notification = notification
        self.visible = True
        self._hide = self.scheduler.schedule(self.hide_delay, self.close)
        logger.info(f"Auto-publish banner shown: {notification.get('title')}")

    def close(self):
        self._cancel_hide()
        self.visible = False
        self.notification = None

    def open_deeplink(self):
        """Close the banner and return the link it pointed at, if any."""
        if self.notification is None:
            return None
        deeplink = self.notification.get('deeplink')
        if not deeplink:
            return None
        self.close()
        return deeplink

    def _cancel_hide(self):
        if self._hide is not None:
            self._hide.cancel()
            self._hide = None
