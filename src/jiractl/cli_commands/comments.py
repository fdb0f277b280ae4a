"""CLI command for bulk comments: comment-bulk."""

from __future__ import annotations

import click

from jiractl.bulk import BulkMessages
from jiractl.cli_common import BulkOptions, bulk_options, collect_targets, fail, get_client, run_batch
from jiractl.validation import sanitize_comment


@click.command("comment-bulk")
@click.argument("args", nargs=-1, metavar="ISSUE-KEY... COMMENT")
@click.option("--internal", is_flag=True, help="Add as an internal comment")
@bulk_options
@click.pass_context
def comment_bulk(ctx: click.Context, args: tuple[str, ...], internal: bool, options: BulkOptions) -> None:
    """Add the same comment to multiple issues."""
    if not args:
        fail("comment text required", as_json=options.as_json)
    body, err = sanitize_comment(args[-1])
    if err:
        fail(err, as_json=options.as_json)
    if not options.from_stream and len(args) < 2:
        fail("no issue keys provided", as_json=options.as_json)

    targets = collect_targets(ctx, args[:-1], options)
    client = get_client(ctx, as_json=options.as_json)

    def op(key: str) -> None:
        client.add_comment(key, body, internal=internal)

    run_batch(
        "comment-bulk",
        targets,
        op,
        BulkMessages(
            success="Successfully added comment to {count} issues",
            partial="Added comment to {succeeded} issues successfully, {failed} failed",
            failure="failed to add comment to all issues",
        ),
        options,
        progress=f"Adding comment to {len(targets)} issues...",
    )


def register(cli: click.Group) -> None:
    """Register comment commands with the CLI group."""
    cli.add_command(comment_bulk)
    cli.add_command(comment_bulk, "comment-batch")
