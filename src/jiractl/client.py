"""REST client for the Jira server.

``JiraClient`` wraps a ``requests.Session`` and exposes exactly the calls
the bulk commands need. Every non-2xx response is raised as a
``JiraAPIError`` subclass; connection failures and timeouts become
``NetworkError``, as does any other ``requests`` transport failure.
Retrying is left to the caller.

Two installation flavours are supported:

- ``cloud``: users are addressed by ``accountId``; JQL search uses the
  token-paginated ``/rest/api/3/search/jql`` endpoint.
- ``local`` (server / data center): users are addressed by username;
  JQL search uses ``/rest/api/2/search`` with ``startAt`` paging.
"""

from __future__ import annotations

import logging
import time
from typing import Any

import requests

from jiractl.config import DEFAULT_TIMEOUT, Settings
from jiractl.errors import (
    AuthenticationError,
    JiraAPIError,
    NetworkError,
    NotFoundError,
    RateLimitError,
    UsageError,
)
from jiractl.types.core import AuthType, Installation, TransitionDict, UserDict

logger = logging.getLogger(__name__)

API_V2 = "/rest/api/2"
API_V3 = "/rest/api/3"
SEARCH_PAGE_SIZE = 100
MAX_SEARCH_RESULTS = 1000
# Jira's magic assignee value meaning "the project's default assignee".
DEFAULT_ASSIGNEE = "-1"
INTERNAL_COMMENT_PROPERTY = "sd.public.comment"


def _error_messages(response: requests.Response) -> list[str]:
    """Flatten Jira's ``errorMessages`` + ``errors`` body into plain strings."""
    try:
        body = response.json()
    except ValueError:
        text = response.text.strip()
        return [text] if text else []
    if not isinstance(body, dict):
        return []
    messages = [str(m) for m in body.get("errorMessages") or []]
    errors = body.get("errors") or {}
    if isinstance(errors, dict):
        messages.extend(f"{field}: {msg}" for field, msg in errors.items())
    return messages


def _retry_after(response: requests.Response) -> int:
    try:
        return int(response.headers.get("Retry-After", "0"))
    except ValueError:
        return 0


class JiraClient:
    """Thin, synchronous Jira REST client. One instance is shared per command."""

    def __init__(
        self,
        server: str,
        *,
        login: str = "",
        token: str = "",
        installation: Installation = "cloud",
        auth_type: AuthType = "basic",
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.server = server.rstrip("/")
        self.installation = installation
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({"Accept": "application/json", "Content-Type": "application/json"})
        if auth_type == "bearer":
            self.session.headers["Authorization"] = f"Bearer {token}"
        else:
            self.session.auth = (login, token)

    @classmethod
    def from_settings(cls, settings: Settings, *, session: requests.Session | None = None) -> JiraClient:
        """Build a client from loaded settings, or raise UsageError naming what is missing."""
        missing = []
        if not settings.server:
            missing.append("server")
        if settings.auth_type == "basic" and not settings.login:
            missing.append("login")
        if not settings.api_token:
            missing.append("JIRA_API_TOKEN")
        if missing:
            msg = f"missing configuration: {', '.join(missing)} (config file: {settings.config_path})"
            raise UsageError(msg)
        return cls(
            settings.server,
            login=settings.login,
            token=settings.api_token,
            installation=settings.installation,
            auth_type=settings.auth_type,
            timeout=settings.timeout,
            session=session,
        )

    @property
    def is_cloud(self) -> bool:
        return self.installation == "cloud"

    # -- Transport -----------------------------------------------------------

    def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        json: Any = None,
    ) -> Any:
        url = f"{self.server}{path}"
        start = time.monotonic()
        try:
            response = self.session.request(method, url, params=params, json=json, timeout=self.timeout)
        except requests.RequestException as exc:
            raise NetworkError(exc, method=method, path=path) from exc
        duration_ms = round((time.monotonic() - start) * 1000, 1)
        logger.debug(
            "%s %s -> %s",
            method,
            path,
            response.status_code,
            extra={"status_code": response.status_code, "duration_ms": duration_ms},
        )

        status = response.status_code
        if status == 401:
            raise AuthenticationError(status, _error_messages(response), method=method, path=path)
        if status == 404:
            raise NotFoundError(status, _error_messages(response), method=method, path=path)
        if status == 429:
            raise RateLimitError(_retry_after(response), method=method, path=path)
        if status >= 400:
            raise JiraAPIError(status, _error_messages(response), method=method, path=path)

        if status == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return None

    # -- Users ---------------------------------------------------------------

    def user_ref(self, user: UserDict) -> dict[str, Any]:
        """The JSON object Jira expects wherever a user is referenced."""
        if self.is_cloud:
            return {"accountId": user.get("accountId")}
        return {"name": user.get("name") or user.get("displayName")}

    def _user_id(self, user: UserDict) -> str:
        if self.is_cloud:
            return user.get("accountId", "")
        return user.get("name", "")

    def search_users(self, query: str, project: str = "", max_results: int = 100) -> list[UserDict]:
        """Search assignable users. The server ranks results by relevance."""
        params: dict[str, Any] = {"maxResults": max_results}
        if self.is_cloud:
            params["query"] = query
        else:
            params["username"] = query
        if project:
            params["project"] = project
        data = self._request("GET", f"{API_V2}/user/assignable/search", params=params)
        return list(data or [])

    def me(self) -> UserDict:
        """The authenticated user."""
        data = self._request("GET", f"{API_V2}/myself")
        return data or {}

    # -- Search --------------------------------------------------------------

    def search_issue_keys(self, jql: str, limit: int = MAX_SEARCH_RESULTS) -> list[str]:
        """Keys of issues matching ``jql``, at most ``limit`` of them.

        Results beyond ``limit`` are silently dropped.
        """
        if self.is_cloud:
            return self._search_keys_cloud(jql, limit)
        return self._search_keys_local(jql, limit)

    def _search_keys_cloud(self, jql: str, limit: int) -> list[str]:
        keys: list[str] = []
        token: str | None = None
        while len(keys) < limit:
            params: dict[str, Any] = {
                "jql": jql,
                "fields": "key",
                "maxResults": min(SEARCH_PAGE_SIZE, limit - len(keys)),
            }
            if token:
                params["nextPageToken"] = token
            data = self._request("GET", f"{API_V3}/search/jql", params=params) or {}
            keys.extend(issue["key"] for issue in data.get("issues", []))
            token = data.get("nextPageToken")
            if not token or data.get("isLast", False):
                break
        return keys[:limit]

    def _search_keys_local(self, jql: str, limit: int) -> list[str]:
        keys: list[str] = []
        start_at = 0
        while len(keys) < limit:
            params = {
                "jql": jql,
                "fields": "key",
                "startAt": start_at,
                "maxResults": min(SEARCH_PAGE_SIZE, limit - len(keys)),
            }
            data = self._request("GET", f"{API_V2}/search", params=params) or {}
            page = [issue["key"] for issue in data.get("issues", [])]
            keys.extend(page)
            start_at += len(page)
            if not page or start_at >= int(data.get("total", 0)):
                break
        return keys[:limit]

    # -- Per-issue writes ----------------------------------------------------

    def assign_issue(self, key: str, user: UserDict | None, *, default: bool = False) -> None:
        """Assign ``key`` to ``user``; ``None`` unassigns, ``default=True`` uses the project default."""
        field = "accountId" if self.is_cloud else "name"
        value: str | None
        if default:
            value = DEFAULT_ASSIGNEE
        elif user is None:
            value = None
        else:
            value = self._user_id(user)
        self._request("PUT", f"{API_V2}/issue/{key}/assignee", json={field: value})

    def edit_labels(self, key: str, deltas: list[str]) -> None:
        """Apply label deltas; a leading ``-`` removes the label, anything else adds it.

        Uses ``update`` verbs so re-adding an existing label is a no-op.
        """
        ops: list[dict[str, str]] = []
        for delta in deltas:
            if delta.startswith("-") and len(delta) > 1:
                op = {"remove": delta[1:]}
            else:
                op = {"add": delta}
            if op not in ops:
                ops.append(op)
        self._request("PUT", f"{API_V2}/issue/{key}", json={"update": {"labels": ops}})

    def add_comment(self, key: str, body: str, *, internal: bool = False) -> None:
        payload: dict[str, Any] = {"body": body}
        if internal:
            payload["properties"] = [{"key": INTERNAL_COMMENT_PROPERTY, "value": {"internal": True}}]
        self._request("POST", f"{API_V2}/issue/{key}/comment", json=payload)

    def get_transitions(self, key: str) -> list[TransitionDict]:
        data = self._request("GET", f"{API_V2}/issue/{key}/transitions") or {}
        transitions: list[TransitionDict] = []
        for t in data.get("transitions", []):
            transitions.append(
                TransitionDict(
                    id=str(t.get("id", "")),
                    name=t.get("name", ""),
                    isAvailable=bool(t.get("isAvailable", True)),
                )
            )
        return transitions

    def transition_issue(
        self,
        key: str,
        transition: TransitionDict,
        *,
        fields: dict[str, Any] | None = None,
        comment: str = "",
    ) -> None:
        payload: dict[str, Any] = {"transition": {"id": transition["id"]}}
        if fields:
            payload["fields"] = fields
        if comment:
            payload["update"] = {"comment": [{"add": {"body": comment}}]}
        self._request("POST", f"{API_V2}/issue/{key}/transitions", json=payload)

    def watch_issue(self, key: str, user: UserDict) -> None:
        # The body is a bare JSON string, not an object.
        self._request("POST", f"{API_V2}/issue/{key}/watchers", json=self._user_id(user))

    def unwatch_issue(self, key: str, user: UserDict) -> None:
        param = "accountId" if self.is_cloud else "username"
        self._request("DELETE", f"{API_V2}/issue/{key}/watchers", params={param: self._user_id(user)})

    def edit_fields(self, key: str, fields: dict[str, Any]) -> None:
        self._request("PUT", f"{API_V2}/issue/{key}", json={"fields": fields})

    def edit_estimate(self, key: str, value: str, *, remaining: bool = False) -> None:
        name = "remainingEstimate" if remaining else "originalEstimate"
        self._request("PUT", f"{API_V2}/issue/{key}", json={"update": {"timetracking": [{"edit": {name: value}}]}})
