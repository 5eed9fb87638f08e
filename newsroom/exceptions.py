"""
Exceptions raised by the Newsroom dashboard.

Nothing here is fatal to a page: views catch these at the edge and turn
them into redirects, toasts or empty states.
"""


class NewsroomError(Exception):
    """Base exception for all Newsroom errors."""

    def __init__(self, message=None, user_friendly=False, details=None, error_code=None):
        self.message = message or "An error occurred"
        self.user_friendly = user_friendly
        self.details = details or {}
        self.error_code = error_code
        super().__init__(self.message)


class AuthenticationRequired(NewsroomError):
    """The session is missing or expired; the caller should go to the login page."""

    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Authentication required", user_friendly, details, "AUTH_REQUIRED")


class MutationFailed(NewsroomError):
    """A create/update/delete call was rejected or never reached the API."""

    def __init__(self, message=None, user_friendly=True, details=None, status_code=None):
        super().__init__(message or "The request could not be completed", user_friendly, details, "MUTATION_FAILED")
        self.status_code = status_code

    @property
    def user_message(self):
        return self.message


class NavConfigurationError(NewsroomError):
    """A static navigation tree is malformed (duplicate ids, navigable dividers)."""

    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Invalid navigation tree", user_friendly, details, "NAV_CONFIG_ERROR")


class StorageUnavailable(NewsroomError):
    """Client-local storage could not be read or written."""

    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Storage unavailable", user_friendly, details, "STORAGE_ERROR")
