"""Shared CLI helpers used by ``cli.py`` and every ``cli_commands/*.py`` module.

Provides settings/client discovery, the common bulk options, target
collection, and ``run_batch`` which executes and reports a batch.
"""

from __future__ import annotations

import functools
import json as json_mod
import logging
import sys
from collections.abc import Callable, Iterator
from dataclasses import dataclass
from typing import Any, NoReturn

import click

from jiractl.bulk import BulkMessages, Operation, execute, report
from jiractl.client import JiraClient
from jiractl.config import Settings, load_settings
from jiractl.errors import JiractlError
from jiractl.logging import setup_logging
from jiractl.targets import TargetSource, resolve_targets
from jiractl.types.core import IssueKey

logger = logging.getLogger("jiractl.cli")


@dataclass(frozen=True)
class BulkOptions:
    """Per-invocation flags shared by all bulk commands."""

    use_stdin: bool = False
    jql: str = ""
    as_json: bool = False
    workers: int = 1

    @property
    def from_stream(self) -> bool:
        """True when targets come from stdin or JQL rather than positionals."""
        return self.use_stdin or bool(self.jql)


def bulk_options(func: Callable[..., Any]) -> Callable[..., Any]:
    """Add ``--stdin``, ``--jql``, ``--json`` and ``--workers`` and fold them into ``options``."""

    @click.option("--stdin", "use_stdin", is_flag=True, help="Read issue keys from stdin (one per line)")
    @click.option("--jql", default="", help="Apply to all issues matching a JQL query (max 1000)")
    @click.option("--json", "as_json", is_flag=True, help="Output as JSON")
    @click.option(
        "--workers",
        default=1,
        type=click.IntRange(1, 16),
        show_default=True,
        help="Concurrent requests per batch",
    )
    @functools.wraps(func)
    def wrapper(*args: Any, use_stdin: bool, jql: str, as_json: bool, workers: int, **kwargs: Any) -> Any:
        options = BulkOptions(use_stdin=use_stdin, jql=jql.strip(), as_json=as_json, workers=workers)
        return func(*args, options=options, **kwargs)

    return wrapper


def fail(message: str, *, as_json: bool = False, suggestion: str = "") -> NoReturn:
    """Print an error the way every command does and exit 1."""
    if as_json:
        click.echo(json_mod.dumps({"error": message}))
    else:
        click.echo(f"Error: {message}", err=True)
        if suggestion:
            click.echo(f"\n{suggestion}", err=True)
    sys.exit(1)


def fail_with(exc: JiractlError, *, as_json: bool = False) -> NoReturn:
    logger.error("%s", exc, extra={"error": str(exc)})
    fail(str(exc), as_json=as_json, suggestion=exc.suggestion)


def get_settings(ctx: click.Context) -> Settings:
    """Load settings once per invocation; tests may inject ``obj["settings"]``."""
    obj = ctx.ensure_object(dict)
    settings: Settings | None = obj.get("settings")
    if settings is None:
        settings = load_settings(obj.get("config"), project=obj.get("project"))
        obj["settings"] = settings
        # File logging lives next to an existing config file only.
        path = settings.config_path
        log_dir = path.parent if path is not None and path.is_file() else None
        if log_dir is not None or obj.get("debug", False):
            try:
                setup_logging(log_dir, debug=obj.get("debug", False))
            except OSError as exc:
                click.echo(f"Warning: file logging disabled: {exc}", err=True)
    elif obj.get("project"):
        settings.project = obj["project"].upper()
    return settings


def get_client(ctx: click.Context, *, as_json: bool = False) -> JiraClient:
    """Build the shared client; tests may inject ``obj["client"]``."""
    obj = ctx.ensure_object(dict)
    client: JiraClient | None = obj.get("client")
    if client is None:
        try:
            client = JiraClient.from_settings(get_settings(ctx))
        except JiractlError as exc:
            fail_with(exc, as_json=as_json)
        obj["client"] = client
    return client


def _stdin_lines() -> Iterator[str]:
    yield from click.get_text_stream("stdin")


def collect_targets(ctx: click.Context, keys: list[str] | tuple[str, ...], options: BulkOptions) -> tuple[IssueKey, ...]:
    """Resolve the TargetSet or exit 1 with the resolution error."""
    settings = get_settings(ctx)
    source = TargetSource(args=tuple(keys), use_stdin=options.use_stdin, jql=options.jql)

    def query_executor(jql: str, limit: int) -> list[str]:
        return get_client(ctx, as_json=options.as_json).search_issue_keys(jql, limit)

    try:
        return resolve_targets(
            source,
            project=settings.project,
            stdin_lines=_stdin_lines(),
            query_executor=query_executor,
        )
    except JiractlError as exc:
        fail_with(exc, as_json=options.as_json)


def run_batch(
    command: str,
    targets: tuple[IssueKey, ...],
    op: Operation,
    messages: BulkMessages,
    options: BulkOptions,
    *,
    progress: str = "",
) -> None:
    """Execute ``op`` over ``targets``, print the outcome, and exit non-zero if nothing succeeded."""
    logger.info("%s started", command, extra={"command": command, "count": len(targets)})
    if progress and not options.as_json:
        click.echo(progress, err=True)

    result = execute(targets, op, workers=options.workers)
    rep = report(result, messages)
    logger.info(
        "%s finished: %s",
        command,
        rep.outcome,
        extra={"command": command, "count": len(result.succeeded), "error": ", ".join(result.failed_keys)},
    )

    if options.as_json:
        click.echo(json_mod.dumps(result.to_dict(), indent=2))
        if rep.exit_code:
            sys.exit(rep.exit_code)
        return

    for outcome in result.failed:
        click.echo(f"  Error {outcome.key}: {outcome.detail}", err=True)
    match rep.outcome:
        case "success":
            click.echo(rep.message)
        case "partial":
            click.echo(rep.message, err=True)
            click.echo(rep.failed_line)
        case "failed":
            click.echo(rep.failed_line)
            click.echo(f"Error: {rep.message}", err=True)
            sys.exit(rep.exit_code)
