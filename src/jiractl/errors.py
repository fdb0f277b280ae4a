"""Exception taxonomy for jiractl.

Three families:

- ``UsageError``: bad argument shape, detected before any network call.
- ``ResolutionError``: a batch-wide precondition failed (no targets,
  unknown user, invalid transition). Aborts before the executor runs.
- ``JiraAPIError`` and subclasses: raised by ``JiraClient`` for a single
  remote call. The bulk executor records these per key and keeps going.
"""

from __future__ import annotations


class JiractlError(Exception):
    """Base class for every error jiractl raises on purpose."""

    @property
    def suggestion(self) -> str:
        """Actionable hint printed under the error message."""
        return ""


class UsageError(JiractlError, ValueError):
    """Raised when command arguments are malformed or contradictory."""

    @property
    def suggestion(self) -> str:
        return "Check the command syntax and required parameters"


class ResolutionError(JiractlError):
    """Raised when targets, actor, or transition cannot be resolved for a batch."""

    @property
    def suggestion(self) -> str:
        cause = self.__cause__
        if isinstance(cause, JiractlError):
            return cause.suggestion
        return ""


# ---------------------------------------------------------------------------
# Remote call failures
# ---------------------------------------------------------------------------


class JiraAPIError(JiractlError):
    """Raised when the server answers with an unexpected status."""

    def __init__(self, status_code: int, messages: list[str] | None = None, *, method: str = "", path: str = "") -> None:
        self.status_code = status_code
        self.messages = messages or []
        self.method = method
        self.path = path
        detail = "; ".join(self.messages) if self.messages else "unexpected response"
        super().__init__(f"{detail} (HTTP {status_code})")

    @property
    def suggestion(self) -> str:
        if self.status_code == 403:
            return "You don't have permission to perform this operation. Check your access rights"
        if self.status_code >= 500:
            return "Server error. This may be temporary - try again in a moment"
        return "Check your parameters and try again"


class AuthenticationError(JiraAPIError):
    """401 from the server, or 403 on an endpoint that only fails for bad credentials."""

    @property
    def suggestion(self) -> str:
        return "Check your login and JIRA_API_TOKEN, or the auth_type in your config"


class NotFoundError(JiraAPIError):
    @property
    def suggestion(self) -> str:
        return "Verify the key is correct and you have access to this resource"


class RateLimitError(JiraAPIError):
    def __init__(self, retry_after: int = 0, *, method: str = "", path: str = "") -> None:
        self.retry_after = retry_after
        message = f"rate limit exceeded, retry after {retry_after} seconds" if retry_after > 0 else "rate limit exceeded"
        super().__init__(429, [message], method=method, path=path)

    @property
    def suggestion(self) -> str:
        if self.retry_after > 0:
            return f"Wait {self.retry_after} seconds before retrying"
        return "Wait a moment and try again"


class NetworkError(JiraAPIError):
    """Transport failure before a usable HTTP response was received."""

    def __init__(self, cause: Exception, *, method: str = "", path: str = "") -> None:
        self.cause = cause
        super().__init__(0, [f"network error: {cause}"], method=method, path=path)

    def __str__(self) -> str:
        return self.messages[0]

    @property
    def suggestion(self) -> str:
        return "Check your internet connection and try again"
