"""CLI tests for move-bulk, watch-bulk and unwatch-bulk."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from click.testing import Result

Invoke = Callable[..., Result]


class TestMoveBulk:
    def test_transitions_all_keys(self, invoke: Invoke, fake_jira: Any) -> None:
        result = invoke(["move-bulk", "PROJ-1", "PROJ-2", "in progress"])
        assert result.exit_code == 0, result.output
        assert 'Successfully transitioned 2 issues to state "In Progress"' in result.stdout
        assert fake_jira.issues["PROJ-1"]["status"] == "In Progress"
        assert fake_jira.issues["PROJ-2"]["status"] == "In Progress"

    def test_transitions_fetched_from_first_key_only(self, invoke: Invoke, fake_jira: Any) -> None:
        invoke(["move-bulk", "PROJ-2", "PROJ-1", "PROJ-3", "Done"])
        assert fake_jira.write_calls("get_transitions") == [("get_transitions", "PROJ-2")]
        assert {c[2] for c in fake_jira.write_calls("transition_issue")} == {"31"}

    def test_invalid_state_lists_available(self, invoke: Invoke, fake_jira: Any) -> None:
        result = invoke(["move-bulk", "PROJ-1", "PROJ-2", "Blocked"])
        assert result.exit_code == 1
        assert 'invalid transition state "Blocked"' in result.stderr
        assert "Available states: 'To Do', 'In Progress', 'Done'" in result.stderr
        assert fake_jira.write_calls("transition_issue") == []

    def test_first_key_missing_aborts(self, invoke: Invoke, fake_jira: Any) -> None:
        result = invoke(["move-bulk", "PROJ-404", "PROJ-1", "Done"])
        assert result.exit_code == 1
        assert "failed to fetch transitions" in result.stderr
        assert fake_jira.write_calls("transition_issue") == []

    def test_extra_fields(self, invoke: Invoke, fake_jira: Any) -> None:
        result = invoke(
            ["move-bulk", "--assignee", "jane", "--resolution", "Fixed", "--comment", "Released", "PROJ-1", "Done"]
        )
        assert result.exit_code == 0, result.output
        (call,) = fake_jira.write_calls("transition_issue")
        assert call[3] == {"assignee": {"accountId": "acc-jane"}, "resolution": {"name": "Fixed"}}
        assert call[4] == "Released"

    def test_unassign_while_moving(self, invoke: Invoke, fake_jira: Any) -> None:
        invoke(["move-bulk", "-a", "x", "PROJ-1", "Done"])
        (call,) = fake_jira.write_calls("transition_issue")
        assert call[3] == {"assignee": None}

    def test_partial(self, invoke: Invoke, fake_jira: Any) -> None:
        fake_jira.failing = {"PROJ-3"}
        result = invoke(["transition-bulk", "PROJ-1", "PROJ-3", "Done"])
        assert result.exit_code == 0
        assert "Transitioned 1 issues successfully, 1 failed" in result.stderr
        assert "Failed: PROJ-3" in result.stdout

    def test_missing_state(self, invoke: Invoke) -> None:
        result = invoke(["move-bulk", "PROJ-1"])
        assert result.exit_code == 1
        assert "at least one issue key and a state are required" in result.stderr


class TestWatchBulk:
    def test_defaults_to_current_user(self, invoke: Invoke, fake_jira: Any) -> None:
        result = invoke(["watch-bulk", "PROJ-1", "PROJ-2"])
        assert result.exit_code == 0, result.output
        assert 'Successfully added "me" as watcher to 2 issues' in result.stdout
        assert fake_jira.issues["PROJ-1"]["watchers"] == {"acc-me"}
        assert fake_jira.write_calls("search_users") == []

    def test_named_watcher(self, invoke: Invoke, fake_jira: Any) -> None:
        result = invoke(["watch-bulk", "PROJ-1", "jane"])
        assert result.exit_code == 0, result.output
        assert fake_jira.issues["PROJ-1"]["watchers"] == {"acc-jane"}
        assert fake_jira.write_calls("me") == []

    def test_watcher_by_email(self, invoke: Invoke, fake_jira: Any) -> None:
        invoke(["watch-bulk", "PROJ-1", "janet@example.com"])
        assert fake_jira.issues["PROJ-1"]["watchers"] == {"acc-janet"}

    def test_sentinel_rejected(self, invoke: Invoke, fake_jira: Any) -> None:
        result = invoke(["watch-bulk", "PROJ-1", "x"])
        assert result.exit_code == 1
        assert "a user is required" in result.stderr
        assert fake_jira.write_calls("watch_issue") == []

    def test_stdin_with_user(self, invoke: Invoke, fake_jira: Any) -> None:
        result = invoke(["watch-bulk", "--stdin", "jane"], input="PROJ-1\nPROJ-2\n")
        assert result.exit_code == 0, result.output
        assert fake_jira.issues["PROJ-2"]["watchers"] == {"acc-jane"}

    def test_stream_accepts_one_user(self, invoke: Invoke) -> None:
        result = invoke(["watch-bulk", "--jql", "x", "jane", "janet"])
        assert result.exit_code == 1
        assert "only one USER argument" in result.stderr

    def test_no_keys(self, invoke: Invoke) -> None:
        result = invoke(["watch-bulk", "jane"])
        assert result.exit_code == 1
        assert "no issue keys provided" in result.stderr


class TestUnwatchBulk:
    def test_removes_named_watcher(self, invoke: Invoke, fake_jira: Any) -> None:
        fake_jira.issues["PROJ-1"]["watchers"] = {"acc-jane", "acc-me"}
        result = invoke(["unwatch-bulk", "PROJ-1", "jane"])
        assert result.exit_code == 0, result.output
        assert 'Successfully removed "jane" from watchers of 1 issues' in result.stdout
        assert fake_jira.issues["PROJ-1"]["watchers"] == {"acc-me"}

    def test_removes_self_with_stdin(self, invoke: Invoke, fake_jira: Any) -> None:
        fake_jira.issues["PROJ-2"]["watchers"] = {"acc-me"}
        result = invoke(["unwatch-batch", "--stdin"], input="PROJ-2\n")
        assert result.exit_code == 0, result.output
        assert fake_jira.issues["PROJ-2"]["watchers"] == set()

    def test_total_failure(self, invoke: Invoke, fake_jira: Any) -> None:
        fake_jira.failing = {"PROJ-1"}
        result = invoke(["unwatch-bulk", "PROJ-1"])
        assert result.exit_code == 1
        assert "failed to remove watcher from all issues" in result.stderr


class TestBracedTransitionName:
    def test_braces_in_transition_name(self, invoke: Invoke, fake_jira: Any) -> None:
        fake_jira.transitions.append({"id": "51", "name": "Done {QA}", "isAvailable": True})
        result = invoke(["move-bulk", "PROJ-1", "done {qa}"])
        assert result.exit_code == 0, result.output
        assert 'Successfully transitioned 1 issues to state "Done {QA}"' in result.stdout
        assert fake_jira.issues["PROJ-1"]["status"] == "Done {QA}"
