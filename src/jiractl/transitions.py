"""Resolve a human-readable state name to a transition for a whole batch.

Transitions are fetched for the first target only and the chosen one is
reused for every other target. A later target whose workflow lacks that
transition fails on its own remote call, as a normal per-key failure.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from jiractl.errors import JiraAPIError, ResolutionError
from jiractl.types.core import TransitionDict

logger = logging.getLogger(__name__)

TransitionFetcher = Callable[[str], list[TransitionDict]]


def match_transition(transitions: list[TransitionDict], desired: str) -> TransitionDict | None:
    """First transition whose name equals ``desired`` case-insensitively."""
    wanted = desired.strip().lower()
    for t in transitions:
        if t.get("name", "").lower() == wanted:
            return t
    return None


def resolve_transition(first_key: str, desired: str, available_transitions: TransitionFetcher) -> TransitionDict:
    try:
        transitions = available_transitions(first_key)
    except JiraAPIError as exc:
        msg = f"failed to fetch transitions: {exc}"
        raise ResolutionError(msg) from exc

    chosen = match_transition(transitions, desired)
    if chosen is None:
        available = ", ".join(f"'{t.get('name', '')}'" for t in transitions)
        msg = f'invalid transition state "{desired}"\nAvailable states: {available}'
        raise ResolutionError(msg)
    if chosen.get("isAvailable", True) is False:
        logger.warning("Transition '%s' is currently unavailable on %s", chosen.get("name"), first_key, extra={"key": first_key})
    return chosen
