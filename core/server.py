"""Plugin server connecting the host process to a LifxBridge.

The host launches the plugin with the magic cookie in its environment. After
the handshake line, requests arrive on stdin as one JSON object per line:

    {"id": 1, "method": "GetDeviceStatus", "params": {"id": "d073d5..."}}

and each gets a response on stdout:

    {"id": 1, "result": true}        or        {"id": 1, "error": "..."}

Requests are handled on a thread pool, so responses may arrive out of order.
"""

import json
import logging
import os
import sys
import threading
from concurrent.futures import ThreadPoolExecutor

from core.config import (
    CORE_PROTOCOL_VERSION,
    MAGIC_COOKIE_KEY,
    MAGIC_COOKIE_VALUE,
    PROTOCOL_VERSION,
)
from core.controller import LifxBridge

logger = logging.getLogger(__name__)

HANDSHAKE_LINE = f"{CORE_PROTOCOL_VERSION}|{PROTOCOL_VERSION}|stdio|-|jsonl"

NOT_A_PLUGIN_MESSAGE = (
    "This binary is a plugin. These are not meant to be executed directly.\n"
    "Please execute the program that consumes these plugins, which will\n"
    "load any plugins automatically"
)


def _device_toggle(bridge: LifxBridge, params: dict):
    status = params['status']
    if not isinstance(status, bool):
        raise ValueError(f"OnDeviceToggle: status must be a boolean, got {status!r}")
    bridge.set_device_power(str(params['id']), status)


# Host method name -> handler(bridge, params)
HOST_METHODS = {
    'OnLoad': lambda bridge, params: bridge.on_load(),
    'GetManifest': lambda bridge, params: bridge.get_manifest(),
    'OnDeviceToggle': _device_toggle,
    'GetDeviceStatus': lambda bridge, params: bridge.get_device_power(str(params['id'])),
    'GetPluginConfiguration': lambda bridge, params: bridge.get_plugin_configuration(),
    'OnConfigurationUpdate': lambda bridge, params: bridge.on_configuration_update(
        params.get('config') or []),
    'GetAvailableDevices': lambda bridge, params: bridge.get_available_devices(),
    'GetWebExtensions': lambda bridge, params: bridge.get_web_extensions(),
}


def check_handshake(environ=None) -> bool:
    """Check that the process was started by the host."""
    if environ is None:
        environ = os.environ
    return environ.get(MAGIC_COOKIE_KEY) == MAGIC_COOKIE_VALUE


class PluginServer:
    """Serves host calls for one bridge over line-delimited JSON."""

    def __init__(self, bridge: LifxBridge, stdin=None, stdout=None, max_workers: int = 4):
        self.bridge = bridge
        self.stdin = stdin if stdin is not None else sys.stdin
        self.stdout = stdout if stdout is not None else sys.stdout
        self.max_workers = max_workers
        self._write_lock = threading.Lock()

    def handle(self, request) -> dict:
        """Dispatch one decoded request and build its response."""
        if not isinstance(request, dict):
            return {'id': None, 'error': 'request must be a JSON object'}

        request_id = request.get('id')
        method = request.get('method')
        params = request.get('params') or {}

        handler = HOST_METHODS.get(method)
        if handler is None:
            return {'id': request_id, 'error': f"unknown method: {method}"}
        if not isinstance(params, dict):
            return {'id': request_id, 'error': 'params must be a JSON object'}

        try:
            result = handler(self.bridge, params)
        except KeyError as e:
            return {'id': request_id, 'error': f"{method}: missing parameter {e}"}
        except Exception as e:
            logger.error(f"{method}: {e}")
            return {'id': request_id, 'error': str(e)}

        return {'id': request_id, 'result': result}

    def handle_line(self, line: str) -> dict:
        """Decode one request line and handle it."""
        try:
            request = json.loads(line)
        except ValueError as e:
            return {'id': None, 'error': f"invalid request: {e}"}
        return self.handle(request)

    def _write(self, message: dict | str):
        text = message if isinstance(message, str) else json.dumps(message)
        with self._write_lock:
            self.stdout.write(text + '\n')
            self.stdout.flush()

    def _respond(self, line: str):
        self._write(self.handle_line(line))

    def _log_failure(self, future):
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error(f"Failed to answer request: {error!r}")

    def serve(self):
        """Write the handshake and answer requests until stdin closes."""
        self._write(HANDSHAKE_LINE)
        logger.debug("Plugin server ready")

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            for line in self.stdin:
                line = line.strip()
                if not line:
                    continue
                future = executor.submit(self._respond, line)
                future.add_done_callback(self._log_failure)

        logger.debug("Plugin server stopped")


def run_plugin(bridge: LifxBridge, environ=None, stdin=None, stdout=None) -> int:
    """Run the plugin server if launched by the host.

    Returns:
        Process exit code
    """
    if not check_handshake(environ):
        sys.stderr.write(NOT_A_PLUGIN_MESSAGE + '\n')
        return 1

    PluginServer(bridge, stdin=stdin, stdout=stdout).serve()
    return 0
