"""Shared validation functions for command payloads.

Pure functions with no click or requests dependencies. Each returns
``(cleaned, None)`` on success or ``(empty, error_message)`` on failure.
"""

from __future__ import annotations

import unicodedata
from typing import Any

_MAX_LABEL_LENGTH = 255
_MAX_QUERY_LENGTH = 128


def _control_char_error(value: str, what: str, *, allow_newlines: bool = False) -> str | None:
    for ch in value:
        if allow_newlines and ch in "\n\r\t":
            continue
        cat = unicodedata.category(ch)
        if cat.startswith("C"):  # Cc (control) and Cf (format)
            return f"{what} must not contain control characters (found U+{ord(ch):04X})"
    return None


def sanitize_user_query(value: Any) -> tuple[str, str | None]:
    """Validate a user query (email, handle, display name, or sentinel)."""
    if not isinstance(value, str):
        return ("", "user must be a string")
    err = _control_char_error(value, "user")
    if err:
        return ("", err)
    cleaned = value.strip()
    if not cleaned:
        return ("", "user must not be empty")
    if len(cleaned) > _MAX_QUERY_LENGTH:
        return ("", f"user must be at most {_MAX_QUERY_LENGTH} characters")
    return (cleaned, None)


def sanitize_labels(values: list[str] | tuple[str, ...]) -> tuple[list[str], str | None]:
    """Validate labels: non-empty, no whitespace, deduplicated keeping first position."""
    cleaned: list[str] = []
    for value in values:
        label = value.strip()
        if not label:
            return ([], "label must not be empty")
        if any(ch.isspace() for ch in label):
            return ([], f"label {label!r} must not contain whitespace")
        err = _control_char_error(label, "label")
        if err:
            return ([], err)
        if len(label) > _MAX_LABEL_LENGTH:
            return ([], f"label must be at most {_MAX_LABEL_LENGTH} characters")
        if label not in cleaned:
            cleaned.append(label)
    if not cleaned:
        return ([], "no labels provided")
    return (cleaned, None)


def sanitize_comment(value: Any) -> tuple[str, str | None]:
    if not isinstance(value, str):
        return ("", "comment must be a string")
    err = _control_char_error(value, "comment", allow_newlines=True)
    if err:
        return ("", err)
    if not value.strip():
        return ("", "comment text required")
    return (value, None)


def parse_field_pairs(pairs: list[str] | tuple[str, ...]) -> tuple[dict[str, str], str | None]:
    """Parse ``FIELD=VALUE`` tokens. Later duplicates overwrite earlier ones."""
    fields: dict[str, str] = {}
    for pair in pairs:
        if "=" not in pair:
            return ({}, f"invalid field format: {pair!r} (expected FIELD=VALUE)")
        name, value = pair.split("=", 1)
        name = name.strip()
        if not name:
            return ({}, f"invalid field format: {pair!r} (expected FIELD=VALUE)")
        fields[name] = value.strip()
    if not fields:
        return ({}, "at least one field=value pair is required")
    return (fields, None)


def parse_points(value: str) -> tuple[float, str | None]:
    try:
        points = float(value)
    except ValueError:
        return (0.0, f"invalid story points value: {value!r} (must be a number)")
    if points != points or points in (float("inf"), float("-inf")):
        return (0.0, f"invalid story points value: {value!r} (must be a number)")
    return (points, None)
