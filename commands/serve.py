"""
Plugin entry point started by the host process.
"""

import logging

import click

from commands.setup import timeout_option
from core.config import REFRESH_INTERVAL
from core.controller import LifxBridge
from core.logs import setup_logging
from core.server import run_plugin


@click.command(name='serve')
@timeout_option
@click.option('--refresh-interval', type=click.FloatRange(min=0), default=REFRESH_INTERVAL,
              show_default=True, help='Seconds between full device refreshes')
@click.option('--log-level', type=click.Choice(['debug', 'info', 'warning', 'error']),
              default='debug', show_default=True, help='Minimum level written to stderr')
def serve_command(timeout: float, refresh_interval: float, log_level: str):
    """Serve host plugin calls over stdin/stdout.

    The host launches this command and delivers the LIFX token through its
    configuration update call. Logs go to stderr as JSON lines.
    """
    setup_logging(getattr(logging, log_level.upper()), json_format=True)

    bridge = LifxBridge(timeout=timeout, refresh_interval=refresh_interval)
    raise SystemExit(run_plugin(bridge))
