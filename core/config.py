"""Configuration constants and user config file handling.

This module handles:
- LIFX API endpoints, timeouts and the refresh interval
- Plugin handshake and manifest constants
- Loading/saving the user config file used by the diagnostic commands
- Token resolution for CLI usage
"""

import json
from pathlib import Path

# LIFX cloud API
API_BASE_URL = 'https://api.lifx.com/v1'
DEFAULT_TIMEOUT = 10  # seconds
REFRESH_INTERVAL = 30  # seconds

# Plugin manifest
PLUGIN_ID = 'lifx'
PLUGIN_NAME = 'LIFX Integration Plugin'
PLUGIN_AUTHOR = 'Nacdlow'
PLUGIN_VERSION = 'v0.1.0'

# Configuration key the host uses for the personal access token
TOKEN_KEY = 'pak'

# Handshake with the host process
PROTOCOL_VERSION = 1
CORE_PROTOCOL_VERSION = 1
MAGIC_COOKIE_KEY = 'IGLU_PLUGIN'
MAGIC_COOKIE_VALUE = 'MzlK0OGpIRs'

# User configuration file location (diagnostic commands only)
USER_CONFIG_FILE = Path.home() / '.lifx_plugin' / 'config.json'


def load_config() -> dict:
    """Load the user configuration file.

    Returns:
        Dict with optional 'token' key, empty if the file does not exist
    """
    if USER_CONFIG_FILE.exists():
        with open(USER_CONFIG_FILE, 'r') as f:
            return json.load(f)
    return {}


def save_config(config: dict):
    """Save configuration to the user config file.

    Args:
        config: Configuration dict to save
    """
    USER_CONFIG_FILE.parent.mkdir(parents=True, exist_ok=True)

    with open(USER_CONFIG_FILE, 'w') as f:
        json.dump(config, f, indent=2)


def resolve_token(token: str | None = None) -> str | None:
    """Pick the API token for CLI usage.

    Priority:
    1. Explicit value (--token option or LIFX_TOKEN env var)
    2. 'token' in the user config file

    Returns:
        Token string, or None if none is configured
    """
    if token and token.strip():
        return token.strip()

    try:
        stored = load_config().get('token')
    except (OSError, ValueError):
        return None

    if stored and stored.strip():
        return stored.strip()
    return None
