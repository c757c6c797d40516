# app/errors.py
"""Exceptions raised by the SalesHub helpers.

Pages catch these and show them with st.error / st.toast. All of them
inherit from SalesHubError so a page can catch everything in one place.
"""


class SalesHubError(Exception):
    """Base exception for all SalesHub errors."""

    pass


class ConfigError(SalesHubError):
    """Raised when required settings (backend URL, API key) are missing."""

    pass


class ValidationError(SalesHubError):
    """Raised when form input is rejected before it reaches the backend."""

    pass


class BackendError(SalesHubError):
    """Raised when a call to the hosted backend fails.

    Covers network errors and rejected queries. ``status_code`` is the HTTP
    status when the SDK reports one; ``code`` is the PostgREST error code.
    """

    def __init__(self, message: str, status_code=None, code: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


class AuthError(BackendError):
    """Raised when the backend rejects credentials or a session token."""

    pass
