"""Pytest configuration and fixtures for LIFX plugin tests."""

import pytest
import requests
from pathlib import Path
from unittest.mock import MagicMock

from core.cache import DeviceCache
from core.controller import LifxBridge


class FakeClock:
    """Manually advanced replacement for time.monotonic."""

    def __init__(self, now: float = 1000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


def make_response(status_code: int = 200, json_data=None, json_error: Exception | None = None):
    """Build a mock requests.Response."""
    response = MagicMock()
    response.status_code = status_code
    if json_error is not None:
        response.json.side_effect = json_error
    else:
        response.json.return_value = json_data
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status_code} Client Error", response=response)
    return response


@pytest.fixture
def project_root():
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def session():
    """Mock HTTP session; no test touches the network."""
    return MagicMock(spec=requests.Session)


@pytest.fixture
def bridge(session, clock):
    """LifxBridge with a mock session and a fake clock."""
    return LifxBridge(token='abc', session=session, cache=DeviceCache(30, clock=clock))


@pytest.fixture
def lights_payload():
    """Two lights as returned by GET /lights/all."""
    return [
        {
            'id': 'd073d5000001',
            'uuid': '02ea5835-9dc2-4323-84f3-3b825419008d',
            'label': 'Kitchen',
            'connected': True,
            'power': 'on',
            'color': {'hue': 250.0, 'saturation': 0.5, 'kelvin': 3500},
            'brightness': 0.8,
            'effect': 'OFF',
            'group': {'id': 'g1', 'name': 'Downstairs'},
            'location': {'id': 'l1', 'name': 'Home'},
            'product': {
                'name': 'LIFX A19',
                'identifier': 'lifx_a19',
                'company': 'LIFX',
                'capabilities': {
                    'has_color': True,
                    'has_variable_color_temp': True,
                    'min_kelvin': 2500,
                    'max_kelvin': 9000,
                },
            },
            'last_seen': '2024-05-01T10:00:00Z',
            'seconds_since_seen': 2,
        },
        {
            'id': 'd073d5000002',
            'label': 'Bedroom',
            'connected': False,
            'power': 'off',
            'product': {'name': 'LIFX Mini', 'company': 'LIFX'},
        },
    ]
