"""CLI commands for watchers: watch-bulk, unwatch-bulk."""

from __future__ import annotations

import click

from jiractl.bulk import BulkMessages
from jiractl.cli_common import BulkOptions, bulk_options, collect_targets, fail, fail_with, get_client, get_settings, run_batch
from jiractl.errors import JiraAPIError, JiractlError, ResolutionError
from jiractl.keys import split_trailing_user
from jiractl.types.core import UserDict
from jiractl.users import ResolvedUser, parse_actor, queryable_name, resolve_actor
from jiractl.validation import sanitize_user_query


def _split_args(args: tuple[str, ...], options: BulkOptions) -> tuple[list[str], str | None]:
    if options.from_stream:
        if len(args) > 1:
            fail("with --stdin or --jql only one USER argument is accepted", as_json=options.as_json)
        return [], args[0] if args else None
    return split_trailing_user(args)


def _resolve_watcher(ctx: click.Context, raw: str | None, options: BulkOptions) -> UserDict:
    settings = get_settings(ctx)
    client = get_client(ctx, as_json=options.as_json)
    try:
        if raw is None:
            try:
                return client.me()
            except JiraAPIError as exc:
                msg = f"failed to get current user: {exc}"
                raise ResolutionError(msg) from exc
        query, err = sanitize_user_query(raw)
        if err:
            fail(err, as_json=options.as_json)
        actor = resolve_actor(parse_actor(query), client.search_users, project=settings.project, allow_sentinels=False)
    except JiractlError as exc:
        fail_with(exc, as_json=options.as_json)
    if not isinstance(actor, ResolvedUser):
        fail("a user is required", as_json=options.as_json)
    return actor.user


@click.command("watch-bulk")
@click.argument("args", nargs=-1, metavar="ISSUE-KEY... [WATCHER]")
@bulk_options
@click.pass_context
def watch_bulk(ctx: click.Context, args: tuple[str, ...], options: BulkOptions) -> None:
    """Add a watcher to multiple issues (yourself unless WATCHER is given)."""
    keys, raw_user = _split_args(args, options)
    if not options.from_stream and not keys:
        fail("no issue keys provided", as_json=options.as_json)
    targets = collect_targets(ctx, keys, options)
    user = _resolve_watcher(ctx, raw_user, options)
    name = queryable_name(user) or user.get("displayName", "")
    client = get_client(ctx, as_json=options.as_json)

    def op(key: str) -> None:
        client.watch_issue(key, user)

    run_batch(
        "watch-bulk",
        targets,
        op,
        BulkMessages(
            success='Successfully added "{subject}" as watcher to {count} issues',
            partial="Added watcher to {succeeded} issues successfully, {failed} failed",
            failure="failed to add watcher to all issues",
            subject=name,
        ),
        options,
        progress=f'Adding "{name}" as watcher to {len(targets)} issues...',
    )


@click.command("unwatch-bulk")
@click.argument("args", nargs=-1, metavar="ISSUE-KEY... [USER]")
@bulk_options
@click.pass_context
def unwatch_bulk(ctx: click.Context, args: tuple[str, ...], options: BulkOptions) -> None:
    """Remove a watcher from multiple issues (yourself unless USER is given)."""
    keys, raw_user = _split_args(args, options)
    if not options.from_stream and not keys:
        fail("no issue keys provided", as_json=options.as_json)
    targets = collect_targets(ctx, keys, options)
    user = _resolve_watcher(ctx, raw_user, options)
    name = queryable_name(user) or user.get("displayName", "")
    client = get_client(ctx, as_json=options.as_json)

    def op(key: str) -> None:
        client.unwatch_issue(key, user)

    run_batch(
        "unwatch-bulk",
        targets,
        op,
        BulkMessages(
            success='Successfully removed "{subject}" from watchers of {count} issues',
            partial="Removed watcher from {succeeded} issues successfully, {failed} failed",
            failure="failed to remove watcher from all issues",
            subject=name,
        ),
        options,
        progress=f'Removing "{name}" from watchers of {len(targets)} issues...',
    )


def register(cli: click.Group) -> None:
    """Register watcher commands with the CLI group."""
    cli.add_command(watch_bulk)
    cli.add_command(watch_bulk, "watch-batch")
    cli.add_command(unwatch_bulk)
    cli.add_command(unwatch_bulk, "unwatch-batch")
