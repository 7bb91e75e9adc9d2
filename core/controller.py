"""LifxBridge class for managing LIFX cloud API interactions.

This module contains the bridge that answers the host's capability calls
(list devices, device status, power toggle) using the LIFX HTTP API and a
short-lived in-memory cache.
"""

import logging
from urllib.parse import quote

import requests

from core.cache import DeviceCache
from core.config import (
    API_BASE_URL,
    DEFAULT_TIMEOUT,
    PLUGIN_AUTHOR,
    PLUGIN_ID,
    PLUGIN_NAME,
    PLUGIN_VERSION,
    REFRESH_INTERVAL,
    TOKEN_KEY,
)
from core.errors import LifxAPIError
from models.device import LifxDevice, parse_devices
from models.types import (
    AvailableDevice,
    ConfigKV,
    ConfigValueType,
    PluginConfigField,
    PluginManifest,
    WebExtension,
)

logger = logging.getLogger(__name__)


class LifxBridge:
    """Translates host plugin calls into LIFX cloud API requests."""

    def __init__(self, token: str | None = None, timeout: float = DEFAULT_TIMEOUT,
                 refresh_interval: float = REFRESH_INTERVAL,
                 session: requests.Session | None = None,
                 cache: DeviceCache | None = None):
        """Initialise LifxBridge.

        Args:
            token: LIFX personal access token (usually delivered later by the host)
            timeout: Seconds to wait for any single API call
            refresh_interval: Seconds between full device refreshes
            session: HTTP session to use, a new one if not provided
            cache: Device cache to use, a new one if not provided
        """
        self.token = token or ''
        self.timeout = timeout
        self.base_url = API_BASE_URL
        self.session = session if session is not None else requests.Session()
        self.cache = cache if cache is not None else DeviceCache(refresh_interval)

    def _request(self, method: str, endpoint: str, operation: str,
                 data: dict | None = None) -> requests.Response:
        """Make an authenticated request to the LIFX API.

        Raises:
            LifxAPIError: On transport errors, timeouts and non-2xx responses
        """
        url = f"{self.base_url}{endpoint}"
        headers = {'Authorization': f'Bearer {self.token}'}

        try:
            if method == 'GET':
                response = self.session.get(url, headers=headers, timeout=self.timeout)
            elif method == 'PUT':
                headers['Content-Type'] = 'application/x-www-form-urlencoded'
                response = self.session.put(url, headers=headers, data=data, timeout=self.timeout)
            else:
                raise ValueError(f"unsupported method {method}")

            response.raise_for_status()
            return response
        except requests.exceptions.RequestException as e:
            response = getattr(e, 'response', None)
            status_code = response.status_code if response is not None else None
            logger.error(f"{operation}: error getting response: {e}")
            raise LifxAPIError(operation, str(e), status_code) from e

    def fetch_devices(self) -> list[LifxDevice]:
        """Fetch every light on the account, bypassing the cache.

        Raises:
            LifxAPIError: If the request fails or the body cannot be parsed
        """
        operation = 'get available'
        response = self._request('GET', '/lights/all', operation)

        try:
            payload = response.json()
        except ValueError as e:
            logger.error(f"{operation}: error unmarshalling: {e}")
            raise LifxAPIError(operation, f"invalid JSON body: {e}", response.status_code) from e

        try:
            return parse_devices(payload)
        except ValueError as e:
            logger.error(f"{operation}: error unmarshalling: {e}")
            raise LifxAPIError(operation, str(e), response.status_code) from e

    def refresh(self) -> bool:
        """Refresh the cache if the refresh interval has elapsed.

        Failures are logged and leave the previous cache contents in place.

        Returns:
            True if a refresh ran and succeeded, False otherwise
        """
        generation = self.cache.claim_refresh()
        if generation is None:
            return False

        try:
            devices = self.fetch_devices()
        except LifxAPIError:
            return False

        self.cache.replace(devices, generation)
        logger.debug(f"Refreshed {len(devices)} LIFX lights")
        return True

    def on_load(self):
        """Initialisation hook called once by the host."""
        logger.debug("Loading LIFX integration plugin!")

    def get_manifest(self) -> PluginManifest:
        return {
            'Id': PLUGIN_ID,
            'Name': PLUGIN_NAME,
            'Author': PLUGIN_AUTHOR,
            'Version': PLUGIN_VERSION,
        }

    def get_plugin_configuration(self) -> list[PluginConfigField]:
        """Configuration schema: a single global string field for the API token."""
        return [
            {
                'Title': 'Personal Integration Token',
                'Description': 'Get your token from cloud.lifx.com!',
                'Key': TOKEN_KEY,
                'Type': int(ConfigValueType.STRING),
                'IsUserSpecific': False,
            }
        ]

    def on_configuration_update(self, config: list[ConfigKV]):
        """Apply configuration values delivered by the host.

        Only the token key is recognised; other keys are ignored.
        """
        for entry in config or []:
            key = entry.get('Key', entry.get('key'))
            value = entry.get('Value', entry.get('value'))

            if key == TOKEN_KEY:
                self.token = (value or '').strip()
                logger.info("LIFX API token updated")
            else:
                logger.debug(f"Ignoring unknown configuration key: {key}")

    def set_device_power(self, device_id: str, on: bool):
        """Turn a light on or off.

        The cached state is updated only after the API accepted the request.

        Raises:
            LifxAPIError: If the request could not be completed
        """
        power = 'on' if on else 'off'
        self._request('PUT', f"/lights/id:{quote(device_id, safe='')}/state", 'on toggle',
                      data={'power': power})
        self.cache.set_power(device_id, on)
        logger.debug(f"Light {device_id} turned {power}")

    def get_device_power(self, device_id: str) -> bool:
        """Power state of a light, False if it is unknown."""
        self.refresh()
        return self.cache.get_power(device_id)

    def get_available_devices(self) -> list[AvailableDevice]:
        """All lights known from the most recent successful refresh."""
        self.refresh()
        return self.cache.available_devices()

    def get_web_extensions(self) -> list[WebExtension]:
        return []
