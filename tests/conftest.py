"""Shared pytest fixtures for jiractl tests."""

from __future__ import annotations

import logging
from collections.abc import Generator
from typing import Any

import pytest
from click.testing import CliRunner

from jiractl.client import DEFAULT_ASSIGNEE
from jiractl.config import Settings
from jiractl.errors import JiraAPIError, NotFoundError
from jiractl.types.core import CustomFieldConfig, TransitionDict, UserDict

JANE: UserDict = {
    "accountId": "acc-jane",
    "name": "jane",
    "displayName": "Jane Doe",
    "emailAddress": "jane@example.com",
    "active": True,
}
JANET: UserDict = {
    "accountId": "acc-janet",
    "name": "janet",
    "displayName": "Janet Smith",
    "emailAddress": "janet@example.com",
    "active": True,
}
ME: UserDict = {"accountId": "acc-me", "name": "me", "displayName": "Current User", "active": True}

CUSTOM_FIELDS: list[CustomFieldConfig] = [
    {"name": "Story Points", "key": "customfield_10016", "schema": {"datatype": "number"}},
    {"name": "Team", "key": "customfield_10001", "schema": {"datatype": "option"}},
    {"name": "Components", "key": "components", "schema": {"datatype": "array", "items": "component"}},
]


class FakeJira:
    """In-memory stand-in for ``JiraClient`` that records every write.

    Keys listed in ``failing`` raise ``JiraAPIError`` on any write; keys not
    in ``issues`` raise ``NotFoundError``.
    """

    def __init__(self, keys: list[str] | None = None, *, installation: str = "cloud") -> None:
        self.installation = installation
        self.issues: dict[str, dict[str, Any]] = {
            k: {"labels": set(), "comments": [], "watchers": set(), "assignee": None, "status": "To Do", "fields": {}}
            for k in (keys or ["PROJ-1", "PROJ-2", "PROJ-3"])
        }
        self.users: list[UserDict] = [JANE, JANET]
        self.transitions: list[TransitionDict] = [
            {"id": "11", "name": "To Do", "isAvailable": True},
            {"id": "21", "name": "In Progress", "isAvailable": True},
            {"id": "31", "name": "Done", "isAvailable": True},
        ]
        self.jql_results: list[str] = []
        self.failing: set[str] = set()
        self.calls: list[tuple[Any, ...]] = []

    @property
    def is_cloud(self) -> bool:
        return self.installation == "cloud"

    def _issue(self, key: str) -> dict[str, Any]:
        if key in self.failing:
            raise JiraAPIError(500, ["boom"], method="PUT", path=f"/issue/{key}")
        if key not in self.issues:
            raise NotFoundError(404, ["Issue does not exist or you do not have permission to see it."])
        return self.issues[key]

    def user_ref(self, user: UserDict) -> dict[str, Any]:
        if self.is_cloud:
            return {"accountId": user.get("accountId")}
        return {"name": user.get("name")}

    def search_users(self, query: str, project: str = "", max_results: int = 100) -> list[UserDict]:
        self.calls.append(("search_users", query, project))
        q = query.lower()
        return [
            u
            for u in self.users
            if q in u.get("name", "").lower()
            or q in u.get("displayName", "").lower()
            or q in u.get("emailAddress", "").lower()
        ][:max_results]

    def me(self) -> UserDict:
        self.calls.append(("me",))
        return ME

    def search_issue_keys(self, jql: str, limit: int = 1000) -> list[str]:
        self.calls.append(("search_issue_keys", jql, limit))
        return self.jql_results[:limit]

    def assign_issue(self, key: str, user: UserDict | None, *, default: bool = False) -> None:
        self.calls.append(("assign_issue", key))
        issue = self._issue(key)
        issue["assignee"] = DEFAULT_ASSIGNEE if default else (user or {}).get("accountId")

    def edit_labels(self, key: str, deltas: list[str]) -> None:
        self.calls.append(("edit_labels", key, tuple(deltas)))
        issue = self._issue(key)
        for delta in deltas:
            if delta.startswith("-"):
                issue["labels"].discard(delta[1:])
            else:
                issue["labels"].add(delta)

    def add_comment(self, key: str, body: str, *, internal: bool = False) -> None:
        self.calls.append(("add_comment", key, internal))
        self._issue(key)["comments"].append(body)

    def get_transitions(self, key: str) -> list[TransitionDict]:
        self.calls.append(("get_transitions", key))
        self._issue(key)
        return list(self.transitions)

    def transition_issue(
        self, key: str, transition: TransitionDict, *, fields: dict[str, Any] | None = None, comment: str = ""
    ) -> None:
        self.calls.append(("transition_issue", key, transition["id"], fields or {}, comment))
        issue = self._issue(key)
        issue["status"] = transition["name"]
        if comment:
            issue["comments"].append(comment)

    def watch_issue(self, key: str, user: UserDict) -> None:
        self.calls.append(("watch_issue", key))
        self._issue(key)["watchers"].add(user["accountId"])

    def unwatch_issue(self, key: str, user: UserDict) -> None:
        self.calls.append(("unwatch_issue", key))
        self._issue(key)["watchers"].discard(user["accountId"])

    def edit_fields(self, key: str, fields: dict[str, Any]) -> None:
        self.calls.append(("edit_fields", key, fields))
        self._issue(key)["fields"].update(fields)

    def edit_estimate(self, key: str, value: str, *, remaining: bool = False) -> None:
        self.calls.append(("edit_estimate", key, value, remaining))
        name = "remainingEstimate" if remaining else "originalEstimate"
        self._issue(key)["fields"][name] = value

    def write_calls(self, name: str) -> list[tuple[Any, ...]]:
        return [c for c in self.calls if c[0] == name]


@pytest.fixture
def fake_jira() -> FakeJira:
    return FakeJira()


@pytest.fixture
def settings() -> Settings:
    return Settings(
        server="https://example.atlassian.net",
        login="bot@example.com",
        project="PROJ",
        custom_fields=list(CUSTOM_FIELDS),
        api_token="secret",
    )


@pytest.fixture
def cli_runner() -> CliRunner:
    """Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory) -> Generator[None, None, None]:
    """Keep tests away from the developer's real config and credentials."""
    for name in ("JIRA_API_TOKEN", "JIRA_AUTH_TYPE", "JIRA_SERVER", "JIRA_LOGIN", "JIRA_PROJECT", "JIRA_CONFIG_FILE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path_factory.mktemp("xdg")))
    yield


@pytest.fixture(autouse=True)
def _restore_jiractl_logger() -> Generator[None, None, None]:
    """Drop handlers that a test's ``setup_logging`` call attached."""
    logger = logging.getLogger("jiractl")
    before = list(logger.handlers)
    level = logger.level
    yield
    for h in logger.handlers[:]:
        if h not in before:
            logger.removeHandler(h)
            h.close()
    logger.setLevel(level)
