"""CLI commands for labels: label bulk, label add, label remove."""

from __future__ import annotations

import click

from jiractl.bulk import BulkMessages
from jiractl.cli_common import BulkOptions, bulk_options, collect_targets, fail, get_client, run_batch
from jiractl.keys import split_keys_and_labels
from jiractl.validation import sanitize_labels

_ADD_MESSAGES = BulkMessages(
    success="Successfully added labels to {count} issues",
    partial="Added labels to {succeeded} issues successfully, {failed} failed",
    failure="failed to add labels to all issues",
)
_REMOVE_MESSAGES = BulkMessages(
    success="Successfully removed labels from {count} issues",
    partial="Removed labels from {succeeded} issues successfully, {failed} failed",
    failure="failed to remove labels from all issues",
)


def _apply_labels(
    ctx: click.Context,
    command: str,
    keys: list[str] | tuple[str, ...],
    labels: list[str] | tuple[str, ...],
    *,
    remove: bool,
    options: BulkOptions,
) -> None:
    cleaned, err = sanitize_labels(labels)
    if err:
        fail(err, as_json=options.as_json)
    deltas = [f"-{label}" for label in cleaned] if remove else cleaned

    targets = collect_targets(ctx, keys, options)
    client = get_client(ctx, as_json=options.as_json)

    def op(key: str) -> None:
        client.edit_labels(key, deltas)

    action = "Removing" if remove else "Adding"
    run_batch(
        command,
        targets,
        op,
        _REMOVE_MESSAGES if remove else _ADD_MESSAGES,
        options,
        progress=f"{action} labels {', '.join(cleaned)} on {len(targets)} issues...",
    )


@click.group()
def label() -> None:
    """Add or remove labels on issues."""


@label.command("bulk")
@click.argument("args", nargs=-1, metavar="ISSUE-KEY... LABEL...")
@click.option("--label", "-l", "label_opts", multiple=True, help="Label to apply (repeatable); all positionals become keys")
@click.option("--remove", is_flag=True, help="Remove labels instead of adding")
@bulk_options
@click.pass_context
def label_bulk(
    ctx: click.Context,
    args: tuple[str, ...],
    label_opts: tuple[str, ...],
    remove: bool,
    options: BulkOptions,
) -> None:
    """Add or remove the same labels on multiple issues.

    Without --label, leading arguments shaped like PROJ-123 are issue keys
    and the rest are labels. With --stdin or --jql every argument is a label.
    """
    keys: list[str] = []
    if label_opts:
        keys, labels = list(args), list(label_opts)
    elif options.from_stream:
        labels = list(args)
    else:
        keys, labels = split_keys_and_labels(args)
    if not labels:
        fail("no labels provided", as_json=options.as_json)
    _apply_labels(ctx, "label bulk", keys, labels, remove=remove, options=options)


@label.command("add")
@click.argument("issue_key")
@click.argument("labels", nargs=-1)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def label_add(ctx: click.Context, issue_key: str, labels: tuple[str, ...], as_json: bool) -> None:
    """Add labels to one issue."""
    _apply_labels(ctx, "label add", [issue_key], labels, remove=False, options=BulkOptions(as_json=as_json))


@label.command("remove")
@click.argument("issue_key")
@click.argument("labels", nargs=-1)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def label_remove(ctx: click.Context, issue_key: str, labels: tuple[str, ...], as_json: bool) -> None:
    """Remove labels from one issue."""
    _apply_labels(ctx, "label remove", [issue_key], labels, remove=True, options=BulkOptions(as_json=as_json))


def register(cli: click.Group) -> None:
    """Register label commands with the CLI group."""
    label.add_command(label_bulk, "batch")
    cli.add_command(label)
