"""Foundational TypedDicts for Jira records and jiractl output."""

from __future__ import annotations

from typing import Literal, NewType, TypedDict

IssueKey = NewType("IssueKey", str)

Installation = Literal["cloud", "local"]
AuthType = Literal["basic", "bearer"]
OutcomeKind = Literal["success", "partial", "failed"]


class UserDict(TypedDict, total=False):
    """A directory record as returned by the user search endpoints.

    Cloud records carry ``accountId``; server/data-center records carry
    ``name`` (the username). Either may be absent depending on installation.
    """

    accountId: str
    name: str
    key: str
    displayName: str
    emailAddress: str
    active: bool


class TransitionDict(TypedDict, total=False):
    id: str
    name: str
    isAvailable: bool


class CustomFieldSchema(TypedDict, total=False):
    datatype: str
    items: str


class CustomFieldConfig(TypedDict, total=False):
    """One entry of the ``custom_fields`` config list."""

    name: str
    key: str
    schema: CustomFieldSchema


class SettingsDict(TypedDict, total=False):
    """Shape of the jiractl config.json file."""

    server: str
    login: str
    project: str
    installation: Installation
    auth_type: AuthType
    timeout: float
    custom_fields: list[CustomFieldConfig]


class FailedKeyDict(TypedDict):
    key: str
    error: str


class BatchResultDict(TypedDict):
    succeeded: list[str]
    failed: list[FailedKeyDict]
    outcome: OutcomeKind
