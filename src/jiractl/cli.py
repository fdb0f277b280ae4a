"""CLI for jiractl.

Every bulk command takes its targets from positional keys, ``--stdin``,
or ``--jql`` and reports one of three outcomes: full success, partial
success (exit 0, failed keys listed), or total failure (exit 1).

Usage:
    jiractl assign-bulk PROJ-1 PROJ-2 "Jane Doe"          # Assign to a user
    jiractl assign-bulk PROJ-1 PROJ-2 x                   # Unassign
    jiractl comment-bulk --jql "status = Done" "Shipped"  # Comment on a query
    jiractl label bulk PROJ-1 PROJ-2 urgent backend       # Add labels
    jiractl label bulk --remove -l urgent PROJ-1          # Remove a label
    jiractl move-bulk PROJ-1 PROJ-2 "In Progress"         # Transition
    jiractl watch-bulk PROJ-1 PROJ-2                      # Watch as yourself
    jiractl unwatch-bulk --stdin "Jane Doe" < keys.txt    # Unwatch for a user
    jiractl custom PROJ-1 story-points=5 team=Core        # Set custom fields
    jiractl story-points PROJ-1 PROJ-2 8                  # Set story points
    jiractl estimate PROJ-1 2h --remaining                # Set estimates
"""

from __future__ import annotations

import click

from jiractl import __version__
from jiractl.cli_commands import assign as _assign_cmds
from jiractl.cli_commands import comments as _comment_cmds
from jiractl.cli_commands import fields as _field_cmds
from jiractl.cli_commands import labels as _label_cmds
from jiractl.cli_commands import move as _move_cmds
from jiractl.cli_commands import watch as _watch_cmds


@click.group()
@click.version_option(version=__version__, prog_name="jiractl")
@click.option("--project", "-p", default=None, help="Project key (overrides config)")
@click.option("--config", "-c", "config_file", default=None, type=click.Path(dir_okay=False), help="Config file path")
@click.option("--debug", is_flag=True, help="Log requests and decisions to stderr")
@click.pass_context
def cli(ctx: click.Context, project: str | None, config_file: str | None, debug: bool) -> None:
    """jiractl: bulk operations for Jira."""
    ctx.ensure_object(dict)
    if project:
        ctx.obj["project"] = project
    if config_file:
        ctx.obj["config"] = config_file
    ctx.obj["debug"] = debug


_assign_cmds.register(cli)
_comment_cmds.register(cli)
_label_cmds.register(cli)
_move_cmds.register(cli)
_watch_cmds.register(cli)
_field_cmds.register(cli)


def main() -> None:
    cli()


if __name__ == "__main__":
    main()
