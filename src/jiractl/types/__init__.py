# IMPORT CONSTRAINT: types/ modules must only import from typing, stdlib, and each other.
# NEVER import from client.py, bulk.py, or any cli module.
"""Typed contracts for Jira payloads and jiractl result envelopes."""

from __future__ import annotations

from jiractl.types.core import (
    BatchResultDict,
    CustomFieldConfig,
    CustomFieldSchema,
    FailedKeyDict,
    IssueKey,
    SettingsDict,
    TransitionDict,
    UserDict,
)

__all__ = [
    "BatchResultDict",
    "CustomFieldConfig",
    "CustomFieldSchema",
    "FailedKeyDict",
    "IssueKey",
    "SettingsDict",
    "TransitionDict",
    "UserDict",
]
