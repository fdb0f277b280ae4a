"""Actor resolution for bulk commands.

An actor starts life as raw CLI text and is parsed into one of:

- ``Sentinel``: a reserved token (``x``/``none``/``unassign``/``unassigned``
  or ``default``) that bypasses the directory entirely,
- ``NamedUser``: free text to look up in the user directory.

``resolve_actor`` turns a ``NamedUser`` into a ``ResolvedUser`` or raises
``ResolutionError``. The sentinel vocabulary lives only in this module.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass

from jiractl.errors import JiraAPIError, ResolutionError, UsageError
from jiractl.types.core import UserDict

logger = logging.getLogger(__name__)

DIRECTORY_MAX_RESULTS = 100

DirectorySearch = Callable[[str, str, int], list[UserDict]]


class SentinelKind(enum.Enum):
    NONE = "none"
    DEFAULT = "default"


_SENTINEL_TOKENS: dict[str, SentinelKind] = {
    "x": SentinelKind.NONE,
    "none": SentinelKind.NONE,
    "unassign": SentinelKind.NONE,
    "unassigned": SentinelKind.NONE,
    "default": SentinelKind.DEFAULT,
}


@dataclass(frozen=True)
class NamedUser:
    query: str


@dataclass(frozen=True)
class Sentinel:
    kind: SentinelKind


@dataclass(frozen=True)
class ResolvedUser:
    user: UserDict


@dataclass(frozen=True)
class NotFound:
    query: str


ActorSpec = NamedUser | Sentinel | ResolvedUser
ActorResult = ResolvedUser | Sentinel | NotFound


def sentinel_for(token: str) -> SentinelKind | None:
    return _SENTINEL_TOKENS.get(token.strip().lower())


def parse_actor(raw: str) -> NamedUser | Sentinel:
    kind = sentinel_for(raw)
    if kind is not None:
        return Sentinel(kind)
    return NamedUser(raw.strip())


def queryable_name(user: UserDict) -> str:
    """The user's internal name when set, else the display name."""
    return user.get("name") or user.get("displayName") or ""


def match_user(
    query: str,
    directory_search: DirectorySearch,
    *,
    project: str = "",
    max_results: int = DIRECTORY_MAX_RESULTS,
) -> ActorResult:
    """Pick exactly one user (or sentinel) for ``query``.

    Tie-break order, each a case-insensitive exact match across all results:
    queryable name, then email. Otherwise the first search result wins.
    """
    lowered = query.strip().lower()
    kind = _SENTINEL_TOKENS.get(lowered)
    if kind is not None:
        return Sentinel(kind)

    users = directory_search(query.strip(), project, max_results)
    if not users:
        return NotFound(query)

    for u in users:
        if queryable_name(u).lower() == lowered:
            return ResolvedUser(u)
    for u in users:
        if (u.get("emailAddress") or "").lower() == lowered:
            return ResolvedUser(u)
    return ResolvedUser(users[0])


def resolve_actor(
    spec: ActorSpec,
    directory_search: DirectorySearch,
    *,
    project: str = "",
    allow_sentinels: bool = True,
) -> ResolvedUser | Sentinel:
    """Resolve a parsed actor for a whole batch.

    Raises UsageError when a sentinel is given where a real user is required,
    ResolutionError when the directory has no match, the search fails, or the
    match is an inactive account.
    """
    if isinstance(spec, ResolvedUser):
        return spec
    if isinstance(spec, Sentinel):
        return _check_sentinel(spec, allow_sentinels)

    try:
        result = match_user(spec.query, directory_search, project=project)
    except JiraAPIError as exc:
        msg = f"failed to search for user: {exc}"
        raise ResolutionError(msg) from exc

    match result:
        case NotFound(query=query):
            msg = f'user "{query}" not found'
            raise ResolutionError(msg)
        case Sentinel():
            return _check_sentinel(result, allow_sentinels)
        case ResolvedUser(user=user):
            if user.get("active", True) is False:
                msg = f'user "{queryable_name(user)}" is inactive'
                raise ResolutionError(msg)
            logger.debug("Resolved %r to %s", spec.query, queryable_name(user))
            return result
    msg = f"unexpected match result: {result!r}"
    raise TypeError(msg)


def _check_sentinel(sentinel: Sentinel, allow: bool) -> Sentinel:
    if not allow:
        msg = f"a user is required here, not {sentinel.kind.value!r}"
        raise UsageError(msg)
    return sentinel


def describe_actor(actor: ResolvedUser | Sentinel) -> str:
    match actor:
        case Sentinel(kind=SentinelKind.NONE):
            return "unassigned"
        case Sentinel(kind=SentinelKind.DEFAULT):
            return "default assignee"
        case ResolvedUser(user=user):
            return queryable_name(user)
    msg = f"unexpected actor: {actor!r}"
    raise TypeError(msg)
