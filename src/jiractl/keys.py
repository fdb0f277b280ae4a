"""Issue key normalization and key-shape heuristics."""

from __future__ import annotations

import re

from jiractl.types.core import IssueKey

_ISSUE_KEY_RE = re.compile(r"^[A-Za-z][A-Za-z0-9_]*-\d+$")


def normalize_key(project: str, key: str) -> IssueKey:
    """Return the canonical ``PROJECT-NUMBER`` form of ``key``.

    A bare number gets the configured project prepended; anything else is
    upper-cased. Idempotent.
    """
    key = key.strip()
    if key.isdigit():
        if not project:
            return IssueKey(key)
        return IssueKey(f"{project.upper()}-{key}")
    return IssueKey(key.upper())


def looks_like_issue_key(token: str) -> bool:
    """True for ``PROJ-123`` or a bare issue number."""
    token = token.strip()
    return token.isdigit() or bool(_ISSUE_KEY_RE.match(token))


def split_keys_and_labels(args: list[str] | tuple[str, ...]) -> tuple[list[str], list[str]]:
    """Split positional ``label bulk`` arguments into (keys, labels).

    Tokens are issue keys while they contain a hyphen and split into exactly
    two parts on it; labels start at the first token that does not. A label
    with a single hyphen is therefore read as a key (use ``--label``).
    Returns ``([], [])`` when no boundary is found or the first token is
    already a label.
    """
    label_start = 0
    for i, arg in enumerate(args):
        if "-" not in arg or len(arg.split("-")) != 2:
            label_start = i
            break
    if label_start == 0:
        return [], []
    return list(args[:label_start]), list(args[label_start:])


def split_trailing_user(args: list[str] | tuple[str, ...]) -> tuple[list[str], str | None]:
    """Split ``ISSUE-KEY... [USER]`` where the user is optional.

    The last token is taken as the user only when it does not look like an
    issue key.
    """
    if args and not looks_like_issue_key(args[-1]):
        return list(args[:-1]), args[-1]
    return list(args), None
