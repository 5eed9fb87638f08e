"""
Client-local key/value state.

Sidebar collapse state and announcement dismissals are the only persisted
UI state. Both go through a small storage interface so views can keep them
in the Django session while tests swap in an in-memory store.

Storage is a best-effort cache: read failures fall back to defaults and
write failures are logged and ignored.
"""
import json
import logging

from .exceptions import StorageUnavailable

logger = logging.getLogger(__name__)


class KeyValueStorage:
    """Interface for string key/value storage."""

    def read(self, key):
        raise NotImplementedError

    def write(self, key, value):
        raise NotImplementedError

    def clear(self, key):
        raise NotImplementedError


class SessionStorage(KeyValueStorage):
    """Storage backed by a Django session."""

    def __init__(self, session):
        self.session = session

    def read(self, key):
        try:
            return self.session.get(key)
        except Exception as e:
            raise StorageUnavailable(f"Could not read '{key}' from session: {e}") from e

    def write(self, key, value):
        try:
            self.session[key] = value
        except Exception as e:
            raise StorageUnavailable(f"Could not write '{key}' to session: {e}") from e

    def clear(self, key):
        try:
            self.session.pop(key, None)
        except Exception as e:
            raise StorageUnavailable(f"Could not clear '{key}' from session: {e}") from e


class MemoryStorage(KeyValueStorage):
    """
    In-memory storage.

    ``fail_reads`` / ``fail_writes`` make every read or write raise
    StorageUnavailable, which is how a full or disabled store behaves.
    """

    def __init__(self, initial=None, fail_reads=False, fail_writes=False):
        self.data = dict(initial or {})
        self.fail_reads = fail_reads
        self.fail_writes = fail_writes

    def read(self, key):
        if self.fail_reads:
            raise StorageUnavailable(f"Storage read failed for '{key}'")
        return self.data.get(key)

    def write(self, key, value):
        if self.fail_writes:
            raise StorageUnavailable(f"Storage write failed for '{key}'")
        self.data[key] = value

    def clear(self, key):
        if self.fail_writes:
            raise StorageUnavailable(f"Storage clear failed for '{key}'")
        self.data.pop(key, None)


# ===== SIDEBAR STATE =====

class SidebarState:
    """
    Collapsed/expanded state of sidebar groups, stored as JSON under one key.

    The stored value maps group id to ``True`` when the group is collapsed.
    Groups missing from the map are expanded.
    """

    def __init__(self, storage, key):
        self.storage = storage
        self.key = key

    def load(self):
        try:
            raw = self.storage.read(self.key)
        except StorageUnavailable as e:
            logger.warning(f"Sidebar state unavailable, using defaults: {e}")
            return {}

        if not raw:
            return {}
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            logger.warning(f"Ignoring malformed sidebar state under '{self.key}'")
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, bool)}

    def save(self, state):
        try:
            self.storage.write(self.key, json.dumps(state))
            return True
        except StorageUnavailable as e:
            logger.warning(f"Failed to persist sidebar state: {e}")
            return False

    def toggle(self, group_id):
        """Flip one group and persist. Returns the new state map."""
        state = self.load()
        state[group_id] = not state.get(group_id, False)
        self.save(state)
        return state

    def is_collapsed(self, group_id):
        return self.load().get(group_id, False)


# ===== ANNOUNCEMENTS =====

class AnnouncementTracker:
    """Per-announcement viewed / dismissed flags."""

    VIEWED_KEY = 'announcement_viewed_{id}'
    DISMISSED_KEY = 'announcement_dismissed_{id}'

    def __init__(self, storage):
        self.storage = storage

    def _set(self, key):
        try:
            self.storage.write(key, 'true')
            return True
        except StorageUnavailable as e:
            logger.warning(f"Failed to store {key}: {e}")
            return False

    def _get(self, key):
        try:
            return self.storage.read(key) == 'true'
        except StorageUnavailable as e:
            logger.warning(f"Failed to read {key}: {e}")
            return False

    def mark_viewed(self, announcement_id):
        return self._set(self.VIEWED_KEY.format(id=announcement_id))

    def dismiss(self, announcement_id):
        return self._set(self.DISMISSED_KEY.format(id=announcement_id))

    def is_viewed(self, announcement_id):
        return self._get(self.VIEWED_KEY.format(id=announcement_id))

    def is_dismissed(self, announcement_id):
        return self._get(self.DISMISSED_KEY.format(id=announcement_id))

    def should_show(self, announcement_id):
        return not self.is_dismissed(announcement_id)

    def reset(self, announcement_id):
        for template in (self.VIEWED_KEY, self.DISMISSED_KEY):
            key = template.format(id=announcement_id)
            try:
                self.storage.clear(key)
            except StorageUnavailable as e:
                logger.warning(f"Failed to clear {key}: {e}")
