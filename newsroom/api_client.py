"""
REST API client for the newsroom backend.

Reads and writes fail differently:
- query(): one attempt, failures are logged and the caller's default is
  returned so the page renders its empty state
- mutate(): failures raise MutationFailed with a message fit for a toast
- Both raise AuthenticationRequired on 401 so the caller can go to login
"""
import logging

import requests
from django.conf import settings

from .exceptions import AuthenticationRequired, MutationFailed

logger = logging.getLogger(__name__)


class NewsroomApiClient:
    """
    Thin wrapper around a requests.Session carrying the user's cookies.
    """

    TIMEOUT = 15
    DEFAULT_ERROR_MESSAGE = 'حدث خطأ، يرجى المحاولة مرة أخرى'

    def __init__(self, base_url=None, session=None, timeout=None):
        self.base_url = (base_url or getattr(settings, 'NEWSROOM_API_BASE_URL', '')).rstrip('/')
        self.session = session or requests.Session()
        self.timeout = timeout or self.TIMEOUT
        self.session.headers.setdefault('Accept', 'application/json')

    @classmethod
    def for_request(cls, request, **kwargs):
        """Client that forwards the incoming request's cookies."""
        client = cls(**kwargs)
        client.session.cookies.update(request.COOKIES)
        return client

    def _url(self, path):
        return f"{self.base_url}{path}"

    def query(self, path, default=None, params=None):
        """
        GET a JSON resource.

        Args:
            path: API path, e.g. ``/api/me/notifications``
            default: Returned when the call fails
            params: Optional query parameters

        Returns:
            Decoded JSON body, or ``default``

        Raises:
            AuthenticationRequired: If the backend answers 401
        """
        try:
            response = self.session.get(self._url(path), params=params, timeout=self.timeout)
        except requests.exceptions.RequestException as e:
            logger.error(f"GET {path} failed: {e}")
            return default

        if response.status_code == 401:
            logger.info(f"GET {path} returned 401")
            raise AuthenticationRequired()

        if not response.ok:
            logger.error(f"GET {path} returned {response.status_code}")
            return default

        try:
            return response.json()
        except ValueError:
            logger.error(f"GET {path} returned a non-JSON body")
            return default

    def mutate(self, path, method='POST', payload=None):
        """
        Send a create/update/delete request.

        Args:
            path: API path
            method: HTTP method (POST, PATCH, PUT, DELETE)
            payload: JSON body

        Returns:
            Decoded JSON body, or None for empty responses

        Raises:
            AuthenticationRequired: If the backend answers 401
            MutationFailed: For network errors and any other non-2xx answer
        """
        try:
            response = self.session.request(
                method=method,
                url=self._url(path),
                json=payload,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout:
            logger.error(f"{method} {path} timed out")
            raise MutationFailed('انتهت مهلة الاتصال، يرجى المحاولة مرة أخرى')
        except requests.exceptions.RequestException as e:
            logger.error(f"{method} {path} failed: {e}")
            raise MutationFailed('تعذر الاتصال بالخادم')

        if response.status_code == 401:
            logger.info(f"{method} {path} returned 401")
            raise AuthenticationRequired()

        if not response.ok:
            message = self._error_message(response)
            logger.warning(f"{method} {path} returned {response.status_code}: {message}")
            raise MutationFailed(message, status_code=response.status_code)

        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    def _error_message(self, response):
        """Server supplied ``message`` / ``detail`` if there is one."""
        try:
            body = response.json()
        except ValueError:
            return self.DEFAULT_ERROR_MESSAGE
        if isinstance(body, dict):
            return body.get('message') or body.get('detail') or self.DEFAULT_ERROR_MESSAGE
        return self.DEFAULT_ERROR_MESSAGE

    # ===== NOTIFICATIONS =====

    def fetch_notifications(self, limit=20, language=None, unread_only=False):
        params = {'limit': limit}
        if language:
            params['language'] = language
        if unread_only:
            params['unreadOnly'] = 'true'
        data = self.query('/api/me/notifications', default={'notifications': []}, params=params)
        if not isinstance(data, dict):
            return []
        return data.get('notifications') or []

    def mark_notification_read(self, notification_id):
        return self.mutate(f'/api/me/notifications/{notification_id}/read', method='PATCH')

    def mark_all_notifications_read(self):
        return self.mutate('/api/me/notifications/read-all', method='PATCH')

    # ===== SESSION =====

    def logout(self):
        return self.mutate('/api/logout', method='POST')
