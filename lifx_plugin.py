#!/usr/bin/env python3
"""
LIFX Integration Plugin
Lets a smart-home host discover and toggle LIFX lights through the LIFX cloud API.
"""

import click

from core.config import PLUGIN_NAME, PLUGIN_VERSION

from commands.setup import ColouredGroup, help_command, configure_command
from commands.serve import serve_command
from commands.inspection import devices_command, status_command, manifest_command
from commands.control import power_command


@click.group(
    cls=ColouredGroup,
    context_settings={
        'help_option_names': ['-h', '--help'],
        'max_content_width': 999
    }
)
@click.version_option(version=PLUGIN_VERSION, prog_name=PLUGIN_NAME)
def cli():
    """LIFX Integration Plugin - host plugin and diagnostic tools.

The host starts 'serve' and supplies the LIFX token through its configuration.
The other commands talk to the LIFX cloud API directly and need a token:
--token, LIFX_TOKEN, or one saved with 'configure'.

Use 'help' for a quick reference of all commands."""
    pass


# Register plugin command
cli.add_command(serve_command)

# Register setup and help commands
cli.add_command(help_command)
cli.add_command(configure_command)

# Register inspection commands
cli.add_command(devices_command)
cli.add_command(status_command)
cli.add_command(manifest_command)

# Register control commands
cli.add_command(power_command)


if __name__ == '__main__':
    cli()
