"""CLI commands for field updates: custom, story-points, estimate."""

from __future__ import annotations

import re

import click

from jiractl.bulk import BulkMessages
from jiractl.cli_common import BulkOptions, bulk_options, collect_targets, fail, fail_with, get_client, get_settings, run_batch
from jiractl.errors import JiractlError
from jiractl.fields import build_custom_fields, find_story_points_field
from jiractl.validation import parse_field_pairs, parse_points

# Jira duration syntax, e.g. "2h", "1d 4h", "30m", "1w".
_ESTIMATE_RE = re.compile(r"^\s*(\d+(\.\d+)?\s*[wdhm]\s*)+$")

_UPDATE_MESSAGES = BulkMessages(
    success="Successfully updated custom fields for {count} issues",
    partial="Updated {succeeded} issues successfully, {failed} failed",
    failure="failed to update all issues",
)


@click.command("custom")
@click.argument("args", nargs=-1, metavar="ISSUE-KEY... FIELD=VALUE...")
@bulk_options
@click.pass_context
def custom(ctx: click.Context, args: tuple[str, ...], options: BulkOptions) -> None:
    """Set configured custom fields on multiple issues.

    Every argument containing "=" is a FIELD=VALUE pair; the rest are keys.
    """
    keys = [a for a in args if "=" not in a]
    pairs = [a for a in args if "=" in a]
    if not options.from_stream and not keys:
        fail("at least one issue key is required", as_json=options.as_json)
    values, err = parse_field_pairs(pairs)
    if err:
        fail(err, as_json=options.as_json)
    settings = get_settings(ctx)
    try:
        payload = build_custom_fields(values, settings.custom_fields)
    except JiractlError as exc:
        fail_with(exc, as_json=options.as_json)

    targets = collect_targets(ctx, keys, options)
    client = get_client(ctx, as_json=options.as_json)

    def op(key: str) -> None:
        client.edit_fields(key, payload)

    run_batch(
        "custom",
        targets,
        op,
        _UPDATE_MESSAGES,
        options,
        progress=f"Updating {', '.join(values)} for {len(targets)} issues...",
    )


@click.command("story-points")
@click.argument("args", nargs=-1, metavar="ISSUE-KEY... POINTS")
@click.option("--field", "field_name", default=None, help="Custom field name for story points (overrides config)")
@bulk_options
@click.pass_context
def story_points(ctx: click.Context, args: tuple[str, ...], field_name: str | None, options: BulkOptions) -> None:
    """Set story points on multiple issues."""
    if not args:
        fail("a story points value is required", as_json=options.as_json)
    if not options.from_stream and len(args) < 2:
        fail("at least one issue key and a story points value are required", as_json=options.as_json)
    raw_points = args[-1].strip()
    points, err = parse_points(raw_points)
    if err:
        fail(err, as_json=options.as_json)
    settings = get_settings(ctx)
    try:
        field = find_story_points_field(settings.custom_fields, field_name)
    except JiractlError as exc:
        fail_with(exc, as_json=options.as_json)
    field_key = field.get("key", "")
    if not field_key:
        fail(f'custom field "{field.get("name", "")}" has no key configured', as_json=options.as_json)

    targets = collect_targets(ctx, args[:-1], options)
    client = get_client(ctx, as_json=options.as_json)

    def op(key: str) -> None:
        client.edit_fields(key, {field_key: points})

    run_batch(
        "story-points",
        targets,
        op,
        BulkMessages(
            success="Successfully set story points to {subject} for {count} issues",
            partial="Updated {succeeded} issues successfully, {failed} failed",
            failure="failed to update all issues",
            subject=raw_points,
        ),
        options,
        progress=f"Setting story points to {raw_points} for {len(targets)} issues...",
    )


@click.command("estimate")
@click.argument("args", nargs=-1, metavar="ISSUE-KEY... ESTIMATE")
@click.option("--remaining", is_flag=True, help="Update the remaining estimate instead of the original")
@bulk_options
@click.pass_context
def estimate(ctx: click.Context, args: tuple[str, ...], remaining: bool, options: BulkOptions) -> None:
    """Set the original (or remaining) time estimate on multiple issues."""
    if not args:
        fail("an estimate is required", as_json=options.as_json)
    if not options.from_stream and len(args) < 2:
        fail("at least one issue key and an estimate are required", as_json=options.as_json)
    value = args[-1].strip()
    if not _ESTIMATE_RE.match(value):
        fail(f"invalid estimate: {value!r} (expected e.g. 2h, 1d 4h, 30m)", as_json=options.as_json)

    targets = collect_targets(ctx, args[:-1], options)
    client = get_client(ctx, as_json=options.as_json)

    def op(key: str) -> None:
        client.edit_estimate(key, value, remaining=remaining)

    action = "remaining estimate" if remaining else "original estimate"
    run_batch(
        "estimate",
        targets,
        op,
        BulkMessages(
            success="Successfully updated {subject} for {count} issues",
            partial="Updated {succeeded} issues successfully, {failed} failed",
            failure="failed to update all issues",
            subject=action,
        ),
        options,
        progress=f"Setting {action} for {len(targets)} issues...",
    )


def register(cli: click.Group) -> None:
    """Register field commands with the CLI group."""
    cli.add_command(custom)
    cli.add_command(custom, "cf")
    cli.add_command(story_points)
    cli.add_command(story_points, "sp")
    cli.add_command(story_points, "points")
    cli.add_command(estimate)
