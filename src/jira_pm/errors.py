"""Error taxonomy for jira-pm.

Every failure an operation can surface is a ``JiraError``. Local problems
(bad input, missing configuration) never touch the network; remote problems
carry the HTTP status and the upstream payload when there is one.
"""

from typing import Any, Optional


class JiraError(Exception):
    """Base class for all jira-pm errors."""

    def __init__(self, message: str, suggestions: list[str] | None = None):
        super().__init__(message)
        self.suggestions = suggestions or []


class ConfigurationError(JiraError):
    """Raised when credentials or settings are missing or inconsistent."""


class ValidationError(JiraError):
    """Raised for malformed input, before any network call is made."""


class RemoteError(JiraError):
    """Raised for any non-2xx response or transport failure."""

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        payload: Any = None,
        suggestions: list[str] | None = None,
    ):
        super().__init__(message, suggestions)
        self.status = status
        self.payload = payload


class AuthenticationError(RemoteError):
    """Raised on 401: credentials rejected."""


class PermissionDeniedError(RemoteError):
    """Raised on 403: authenticated but not allowed."""


class NotFoundError(RemoteError):
    """Raised on 404."""
