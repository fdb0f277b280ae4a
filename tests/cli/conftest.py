"""Fixtures for CLI interface tests."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest
from click.testing import CliRunner, Result

from jiractl.cli import cli
from jiractl.config import Settings

Invoke = Callable[..., Result]


@pytest.fixture
def invoke(cli_runner: CliRunner, fake_jira: Any, settings: Settings) -> Invoke:
    """Run the CLI against the in-memory fake with injected settings."""

    def _invoke(args: list[str], *, input: str | None = None) -> Result:
        obj: dict[str, Any] = {"client": fake_jira, "settings": settings}
        return cli_runner.invoke(cli, args, obj=obj, input=input)

    return _invoke
