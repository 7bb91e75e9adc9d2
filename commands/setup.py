"""
Setup and help commands for the LIFX plugin CLI.

Contains custom Click group class for coloured help output and typo suggestions,
plus the shared token/timeout options used by the diagnostic commands.
"""

from dataclasses import dataclass

import click
from core.config import DEFAULT_TIMEOUT, USER_CONFIG_FILE, load_config, save_config
from core.errors import LifxAPIError
from models.utils import similarity_score


token_option = click.option(
    '--token', envvar='LIFX_TOKEN', default=None,
    help='LIFX personal access token (env: LIFX_TOKEN)')

timeout_option = click.option(
    '--timeout', type=click.FloatRange(min=0, min_open=True), default=DEFAULT_TIMEOUT,
    show_default=True, help='API request timeout in seconds')


@dataclass(frozen=True)
class CommandSection:
    """Represents a section in the help command."""
    name: str
    commands: list[tuple[str, str]]


class ColouredGroup(click.Group):
    """Custom Group class that adds colour to help output and suggests similar commands."""

    def resolve_command(self, ctx, args):
        """Resolve command with suggestions for typos."""
        try:
            return super().resolve_command(ctx, args)
        except click.UsageError as e:
            if 'No such command' in str(e):
                cmd_name = args[0] if args else ''
                suggestions = self._get_suggestions(ctx, cmd_name)

                if suggestions:
                    error_msg = f"Error: No such command '{cmd_name}'.\n\n"
                    error_msg += click.style("Did you mean one of these?\n", fg='yellow')
                    for suggestion in suggestions:
                        error_msg += click.style(f"  - {suggestion}\n", fg='green')
                    raise click.UsageError(error_msg)
            raise

    def _get_suggestions(self, ctx, cmd_name, max_suggestions=3):
        """Get command suggestions based on similarity."""
        if not cmd_name:
            return []

        suggestions = []
        for command in self.list_commands(ctx):
            cmd_obj = self.get_command(ctx, command)
            if cmd_obj and not cmd_obj.hidden:
                score = similarity_score(cmd_name, command)
                if score > 0:
                    suggestions.append((score, command))

        suggestions.sort(reverse=True, key=lambda x: x[0])
        return [cmd for score, cmd in suggestions[:max_suggestions]]

    def format_commands(self, ctx, formatter):
        """Format commands with colour."""
        commands = []
        for subcommand in self.list_commands(ctx):
            cmd = self.get_command(ctx, subcommand)
            if cmd is None or cmd.hidden:
                continue
            commands.append((subcommand, cmd.get_short_help_str(limit=500)))

        if commands:
            formatter.write_paragraph()
            formatter.write_text(click.style('Commands:', fg='yellow', bold=True))

            max_len = max(max(len(cmd[0]) for cmd in commands), 12)

            with formatter.indentation():
                for subcommand, help_text in commands:
                    formatter.write_text(
                        click.style(subcommand.ljust(max_len), fg='green') + '  ' +
                        click.style(help_text, fg='white', dim=True)
                    )


COMMAND_SECTIONS = [
    CommandSection(
        name="PLUGIN",
        commands=[
            ("serve", "Run as a host plugin (started by the host)"),
            ("manifest", "Show plugin metadata and configuration schema"),
        ]
    ),
    CommandSection(
        name="LIGHTS",
        commands=[
            ("devices", "List all lights on the account"),
            ("status <light>", "Show whether a light is on"),
            ("power <light> [--on/--off]", "Turn a light on or off"),
        ]
    ),
    CommandSection(
        name="CONFIGURATION",
        commands=[
            ("configure", "Save a LIFX token to the user config file"),
        ]
    ),
]


@click.command(name='help')
def help_command():
    """Display help and common commands."""
    click.secho("\nLIFX Integration Plugin - Quick Reference", fg='cyan', bold=True)
    click.echo()

    for section in COMMAND_SECTIONS:
        click.secho(section.name, fg='yellow', bold=True)
        for cmd, desc in section.commands:
            click.echo("  ", nl=False)
            click.secho(cmd, fg='green', nl=False)
            click.echo(" " * (30 - len(cmd)) + "  " + desc)
        click.echo()

    click.secho("For detailed help on any command:", fg='cyan')
    click.echo(f"  lifx-plugin {click.style('<command> -h', fg='white', bold=True)}")
    click.echo()


@click.command(name='configure')
@click.option('--token', prompt='LIFX personal access token', hide_input=True,
              help='Token to store (prompted if omitted)')
@click.option('--verify/--no-verify', default=True, help='Check the token against the API first')
@timeout_option
def configure_command(token: str, verify: bool, timeout: float):
    """Save a LIFX token to the user config file.

    Tokens are created at https://cloud.lifx.com/settings. The stored token is
    used by the diagnostic commands; the host supplies its own token to 'serve'.
    """
    from core.controller import LifxBridge

    token = token.strip()
    if not token:
        click.secho("✗ Token cannot be empty", fg='red')
        return

    if verify:
        bridge = LifxBridge(token=token, timeout=timeout)
        try:
            devices = bridge.fetch_devices()
        except LifxAPIError as e:
            click.secho(f"✗ Token check failed: {e}", fg='red')
            return
        click.secho(f"✓ Token accepted ({len(devices)} lights found)", fg='green')

    config = load_config()
    config['token'] = token
    save_config(config)
    click.secho(f"✓ Configuration saved to {USER_CONFIG_FILE}", fg='green')
