"""CLI command for bulk assignment: assign-bulk."""

from __future__ import annotations

import click

from jiractl.bulk import BulkMessages
from jiractl.cli_common import BulkOptions, bulk_options, collect_targets, fail, fail_with, get_client, get_settings, run_batch
from jiractl.errors import JiractlError
from jiractl.users import ResolvedUser, Sentinel, SentinelKind, describe_actor, parse_actor, resolve_actor
from jiractl.validation import sanitize_user_query


@click.command("assign-bulk")
@click.argument("args", nargs=-1, metavar="ISSUE-KEY... ASSIGNEE")
@bulk_options
@click.pass_context
def assign_bulk(ctx: click.Context, args: tuple[str, ...], options: BulkOptions) -> None:
    """Assign multiple issues to the same user.

    ASSIGNEE is a name, login or email; "x" (or "none"/"unassign")
    unassigns and "default" uses the project's default assignee.
    """
    if not args:
        fail("an assignee is required", as_json=options.as_json)
    if not options.from_stream and len(args) < 2:
        fail("at least one issue key and an assignee are required", as_json=options.as_json)
    raw_assignee, err = sanitize_user_query(args[-1])
    if err:
        fail(err, as_json=options.as_json)

    targets = collect_targets(ctx, args[:-1], options)
    settings = get_settings(ctx)
    client = get_client(ctx, as_json=options.as_json)
    try:
        actor = resolve_actor(parse_actor(raw_assignee), client.search_users, project=settings.project)
    except JiractlError as exc:
        fail_with(exc, as_json=options.as_json)

    name = describe_actor(actor)
    messages = BulkMessages(
        success='Successfully assigned {count} issues to "{subject}"',
        partial="Assigned {succeeded} issues successfully, {failed} failed",
        failure="failed to assign all issues",
        subject=name,
    )
    if actor == Sentinel(SentinelKind.NONE):
        messages = BulkMessages(
            success="Successfully unassigned {count} issues",
            partial="Unassigned {succeeded} issues successfully, {failed} failed",
            failure="failed to unassign all issues",
        )

    def op(key: str) -> None:
        match actor:
            case Sentinel(kind=SentinelKind.NONE):
                client.assign_issue(key, None)
            case Sentinel(kind=SentinelKind.DEFAULT):
                client.assign_issue(key, None, default=True)
            case ResolvedUser(user=user):
                client.assign_issue(key, user)

    run_batch(
        "assign-bulk",
        targets,
        op,
        messages,
        options,
        progress=f'Assigning {len(targets)} issues to "{name}"...',
    )


def register(cli: click.Group) -> None:
    """Register assignment commands with the CLI group."""
    cli.add_command(assign_bulk)
    cli.add_command(assign_bulk, "assign-batch")
    cli.add_command(assign_bulk, "asg-bulk")
