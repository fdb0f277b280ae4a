"""Target resolution: turn positional keys, stdin, or a JQL query into a TargetSet.

Exactly one source is used per invocation:

1. stdin (``--stdin``): one key per non-blank line,
2. a JQL query (``--jql``): capped at ``MAX_SEARCH_RESULTS`` keys,
3. the positional keys the command left after stripping its payload.

Keys are normalized and deduplicated keeping first position. An empty
result is a ``ResolutionError``; the executor never runs on zero targets.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass

from jiractl.client import MAX_SEARCH_RESULTS
from jiractl.errors import JiraAPIError, ResolutionError, UsageError
from jiractl.keys import normalize_key
from jiractl.types.core import IssueKey

logger = logging.getLogger(__name__)

QueryExecutor = Callable[[str, int], list[str]]


@dataclass(frozen=True)
class TargetSource:
    """Per-invocation description of where targets come from."""

    args: tuple[str, ...] = ()
    use_stdin: bool = False
    jql: str = ""

    def validate(self) -> None:
        if self.use_stdin and self.jql:
            msg = "--stdin and --jql are mutually exclusive"
            raise UsageError(msg)

    @property
    def name(self) -> str:
        if self.use_stdin:
            return "stdin"
        if self.jql:
            return "jql"
        return "args"


def _dedupe(project: str, raw_keys: Iterable[str]) -> tuple[IssueKey, ...]:
    seen: dict[IssueKey, None] = {}
    for raw in raw_keys:
        raw = raw.strip()
        if not raw:
            continue
        seen.setdefault(normalize_key(project, raw), None)
    return tuple(seen)


def resolve_targets(
    source: TargetSource,
    *,
    project: str = "",
    stdin_lines: Iterable[str] = (),
    query_executor: QueryExecutor | None = None,
    limit: int = MAX_SEARCH_RESULTS,
) -> tuple[IssueKey, ...]:
    """Build the ordered, deduplicated TargetSet for one command invocation.

    ``stdin_lines`` is consumed lazily and only when ``source.use_stdin``.
    ``query_executor(jql, limit)`` is only called when ``source.jql`` is set.
    """
    source.validate()

    if source.use_stdin:
        try:
            targets = _dedupe(project, stdin_lines)
        except OSError as exc:
            msg = f"failed to read from stdin: {exc}"
            raise ResolutionError(msg) from exc
    elif source.jql:
        if query_executor is None:
            msg = "no query executor available for --jql"
            raise UsageError(msg)
        try:
            found = query_executor(source.jql, limit)
        except JiraAPIError as exc:
            msg = f"failed to search issues: {exc}"
            raise ResolutionError(msg) from exc
        if len(found) >= limit:
            logger.warning("JQL results truncated at %d issues", limit, extra={"count": limit})
        targets = _dedupe(project, found)
    else:
        targets = _dedupe(project, source.args)

    if not targets:
        msg = "no issues found"
        raise ResolutionError(msg)
    logger.debug("Resolved %d targets from %s", len(targets), source.name, extra={"count": len(targets)})
    return targets
