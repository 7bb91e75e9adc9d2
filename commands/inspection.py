"""
Inspection commands for lights and plugin metadata.

Includes devices, status and manifest.
"""

import click

from commands.setup import timeout_option, token_option
from core.controller import LifxBridge
from core.errors import LifxAPIError
from models.utils import find_device, find_similar_strings, format_power, get_bridge


@click.command(name='devices')
@token_option
@timeout_option
def devices_command(token: str | None, timeout: float):
    """List all lights on the LIFX account.

    \b
    Examples:
      lifx-plugin devices
      LIFX_TOKEN=... lifx-plugin devices
    """
    bridge = get_bridge(token, timeout)
    if not bridge:
        return

    try:
        devices = bridge.fetch_devices()
    except LifxAPIError as e:
        click.secho(f"✗ Failed to list lights: {e}", fg='red')
        return

    if not devices:
        click.echo("No lights found.")
        return

    click.echo()
    click.secho(f"=== {len(devices)} LIFX light{'s' if len(devices) != 1 else ''} ===",
                fg='cyan', bold=True)
    click.echo()

    label_width = max(len(d.label or d.id) for d in devices)
    for device in sorted(devices, key=lambda d: (d.location.name, d.label)):
        name = (device.label or device.id).ljust(label_width)
        connected = '' if device.connected else click.style(' (offline)', fg='yellow')
        product = f"{device.product.company} {device.product.name}".strip()
        click.echo(f"  {click.style(name, fg='green')}  {format_power(device.is_on):<3}  "
                   f"{device.id}  {product}{connected}")
        if device.group.name or device.location.name:
            click.echo(f"  {' ' * label_width}  {device.location.name} / {device.group.name}")
    click.echo()


@click.command(name='status')
@click.argument('light')
@token_option
@timeout_option
def status_command(light: str, token: str | None, timeout: float):
    """Show whether a light is on, by id or label.

    \b
    Examples:
      lifx-plugin status d073d5000001
      lifx-plugin status "Kitchen"
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

    click.echo(f"{device.label or device.id}: {format_power(device.is_on)}")


@click.command(name='manifest')
def manifest_command():
    """Show plugin metadata and configuration schema."""
    bridge = LifxBridge()
    manifest = bridge.get_manifest()

    click.echo()
    click.secho(f"=== {manifest['Name']} ===", fg='cyan', bold=True)
    click.echo(f"  Id:       {manifest['Id']}")
    click.echo(f"  Author:   {manifest['Author']}")
    click.echo(f"  Version:  {manifest['Version']}")

    click.secho("\nConfiguration:", fg='cyan')
    for entry in bridge.get_plugin_configuration():
        scope = 'per user' if entry['IsUserSpecific'] else 'global'
        click.echo(f"  {click.style(entry['Key'], fg='green')}  {entry['Title']} ({scope})")
        click.echo(f"       {entry['Description']}")
    click.echo()
