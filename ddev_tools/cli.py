"""Command-line interface for ddev-tools."""

import logging
import sys

import click

from . import config, registry, render, teardown
from .app import check_for_conf
from .utils import DdevError


class AliasedCommand(click.Command):
    """A Click Command that can be invoked under extra names."""

    def __init__(self, *args, **kwargs):
        self.aliases = kwargs.pop('aliases', [])
        super().__init__(*args, **kwargs)


class AliasedGroup(click.Group):
    """A Click Group that supports command aliases."""

    def get_command(self, ctx, cmd_name):
        rv = click.Group.get_command(self, ctx, cmd_name)
        if rv is not None:
            return rv
        # Check if cmd_name is an alias for any command
        for name, cmd in self.commands.items():
            if cmd_name in getattr(cmd, 'aliases', []):
                return cmd
        return None

    def format_commands(self, ctx, formatter):
        """List commands with their aliases in the help output."""
        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.get_command(ctx, subcommand)
            if cmd is None or cmd.hidden:
                continue

            cmd_name = subcommand
            if getattr(cmd, 'aliases', None):
                cmd_name = f"{subcommand} ({', '.join(cmd.aliases)})"

            commands.append((cmd_name, cmd))

        if len(commands):
            limit = formatter.width - 6 - max(len(cmd[0]) for cmd in commands)
            rows = [(name, cmd.get_short_help_str(limit)) for name, cmd in commands]
            with formatter.section("Commands"):
                formatter.write_dl(rows)


def _fail(e: Exception) -> None:
    click.echo(f"❌ Error: {e}", err=True)
    sys.exit(1)


@click.group(cls=AliasedGroup)
@click.option("--env-file", type=click.Path(exists=True), help="Path to .env file")
@click.option("--verbose", "-v", is_flag=True, help="Show debug logging")
@click.pass_context
def cli(ctx, env_file, verbose):
    """ddev-tools - List and clean up local ddev development environments."""
    ctx.ensure_object(dict)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if env_file:
        config.reset_config()
    config.get_config(env_file)


@cli.command("list", cls=AliasedCommand, aliases=["ls"])
def list_apps():
    """List applications that have containers."""
    try:
        apps = registry.get_apps()
        if not any(apps.values()):
            click.echo("There are no running ddev applications.")
            return
        for kind, kind_apps in apps.items():
            render.render_app_table(kind, kind_apps)
    except DdevError as e:
        _fail(e)


@cli.command("describe", cls=AliasedCommand, aliases=["status"])
@click.argument("name", required=False, default="")
def describe(name):
    """Show one application (default: the one in the current directory)."""
    try:
        render.render_app(registry.get_active_app(name))
    except DdevError as e:
        _fail(e)


@cli.command("remove", cls=AliasedCommand, aliases=["rm"])
@click.argument("name", required=False, default="")
def remove(name):
    """Stop and remove an application's containers and volumes."""
    try:
        app = registry.get_active_app(name)
        teardown.cleanup(app)
    except DdevError as e:
        _fail(e)
    click.echo(f"✅ Removed {app.name}")


@cli.command("root")
@click.argument("path", required=False, default=".", type=click.Path(file_okay=False))
def root(path):
    """Print the application root containing PATH."""
    try:
        click.echo(check_for_conf(path))
    except DdevError as e:
        _fail(e)


if __name__ == "__main__":
    cli()
