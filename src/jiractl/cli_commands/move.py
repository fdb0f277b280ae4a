"""CLI command for bulk transitions: move-bulk."""

from __future__ import annotations

from typing import Any

import click

from jiractl.bulk import BulkMessages
from jiractl.cli_common import BulkOptions, bulk_options, collect_targets, fail, fail_with, get_client, get_settings, run_batch
from jiractl.client import DEFAULT_ASSIGNEE, JiraClient
from jiractl.errors import JiractlError
from jiractl.transitions import resolve_transition
from jiractl.users import ResolvedUser, Sentinel, SentinelKind, parse_actor, resolve_actor


def _assignee_field(client: JiraClient, actor: ResolvedUser | Sentinel) -> dict[str, Any] | None:
    match actor:
        case Sentinel(kind=SentinelKind.NONE):
            return None
        case Sentinel(kind=SentinelKind.DEFAULT):
            return {"accountId": DEFAULT_ASSIGNEE} if client.is_cloud else {"name": DEFAULT_ASSIGNEE}
        case ResolvedUser(user=user):
            return client.user_ref(user)
    msg = f"unexpected actor: {actor!r}"
    raise TypeError(msg)


@click.command("move-bulk")
@click.argument("args", nargs=-1, metavar="ISSUE-KEY... STATE")
@click.option("--comment", default="", help="Add a comment to every issue")
@click.option("--assignee", "-a", default="", help="Assign every issue to a user")
@click.option("--resolution", "-R", default="", help="Set the resolution on every issue")
@bulk_options
@click.pass_context
def move_bulk(
    ctx: click.Context,
    args: tuple[str, ...],
    comment: str,
    assignee: str,
    resolution: str,
    options: BulkOptions,
) -> None:
    """Transition multiple issues to the same state.

    Transitions are looked up on the first issue and reused for the rest.
    """
    if not args or not args[-1].strip():
        fail("a target state is required", as_json=options.as_json)
    if not options.from_stream and len(args) < 2:
        fail("at least one issue key and a state are required", as_json=options.as_json)
    state = args[-1].strip()

    targets = collect_targets(ctx, args[:-1], options)
    settings = get_settings(ctx)
    client = get_client(ctx, as_json=options.as_json)
    try:
        transition = resolve_transition(targets[0], state, client.get_transitions)
        fields: dict[str, Any] = {}
        if assignee:
            actor = resolve_actor(parse_actor(assignee), client.search_users, project=settings.project)
            fields["assignee"] = _assignee_field(client, actor)
        if resolution:
            fields["resolution"] = {"name": resolution}
    except JiractlError as exc:
        fail_with(exc, as_json=options.as_json)

    def op(key: str) -> None:
        client.transition_issue(key, transition, fields=fields, comment=comment)

    run_batch(
        "move-bulk",
        targets,
        op,
        BulkMessages(
            success='Successfully transitioned {count} issues to state "{subject}"',
            partial="Transitioned {succeeded} issues successfully, {failed} failed",
            failure="failed to transition all issues",
            subject=transition["name"],
        ),
        options,
        progress=f'Transitioning {len(targets)} issues to "{transition["name"]}"...',
    )


def register(cli: click.Group) -> None:
    """Register transition commands with the CLI group."""
    cli.add_command(move_bulk)
    cli.add_command(move_bulk, "move-batch")
    cli.add_command(move_bulk, "transition-bulk")
