"""
Control commands for direct manipulation of lights.
"""

import click

from commands.setup import timeout_option, token_option
from core.errors import LifxAPIError
from models.utils import find_device, find_similar_strings, get_bridge


@click.command(name='power')
@click.argument('light')
@click.option('--on/--off', default=True, help='Turn light on or off')
@token_option
@timeout_option
def power_command(light: str, on: bool, token: str | None, timeout: float):
    """Turn a light ON or OFF, by id or label.

    \b
    Examples:
      lifx-plugin power "Bedroom" --on
      lifx-plugin power d073d5000001 --off
    """
    bridge = get_bridge(token, timeout)
    if not bridge:
        return

    try:
        devices = bridge.fetch_devices()
    except LifxAPIError as e:
        click.secho(f"✗ Failed to fetch lights: {e}", fg='red')
        return

    device = find_device(devices, light)
    if not device:
        click.echo(f"Error: Light '{light}' not found.")
        similar = find_similar_strings(light, [d.label for d in devices if d.label])
        if similar:
            click.echo(f"Did you mean: {', '.join(similar)}?")
        return

    status = "ON" if on else "OFF"
    name = device.label or device.id
    try:
        bridge.set_device_power(device.id, on)
    except LifxAPIError as e:
        click.echo(f"✗ Failed to turn {name} {status}: {e}")
        return

    click.echo(f"✓ {name} turned {status}")
