"""LIFX device model parsed from the cloud API.

Only a handful of fields drive the plugin (id, power, product company and
name). The rest is kept for the diagnostic listing. A JSON null is read the
same as a missing field.
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime

from models.types import AvailableDevice, DeviceType

logger = logging.getLogger(__name__)


def _parse_timestamp(value) -> datetime | None:
    """Parse an ISO 8601 timestamp as returned by the API, None if invalid."""
    if not value or not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return None


def _section(data: dict, key: str) -> dict:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _str(data: dict, key: str, default: str = '') -> str:
    value = data.get(key)
    return value if isinstance(value, str) else default


def _number(data: dict, key: str):
    value = data.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return value


@dataclass(frozen=True)
class Colour:
    hue: float = 0
    saturation: float = 0
    kelvin: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> 'Colour':
        return cls(
            hue=_number(data, 'hue'),
            saturation=_number(data, 'saturation'),
            kelvin=_number(data, 'kelvin'),
        )


@dataclass(frozen=True)
class Place:
    """Group or location a light belongs to."""
    id: str = ''
    name: str = ''

    @classmethod
    def from_dict(cls, data: dict) -> 'Place':
        return cls(id=_str(data, 'id'), name=_str(data, 'name'))


@dataclass(frozen=True)
class Capabilities:
    has_color: bool = False
    has_variable_color_temp: bool = False
    has_ir: bool = False
    has_chain: bool = False
    has_matrix: bool = False
    has_multizone: bool = False
    min_kelvin: int = 0
    max_kelvin: int = 0

    @classmethod
    def from_dict(cls, data: dict) -> 'Capabilities':
        return cls(
            has_color=bool(data.get('has_color', False)),
            has_variable_color_temp=bool(data.get('has_variable_color_temp', False)),
            has_ir=bool(data.get('has_ir', False)),
            has_chain=bool(data.get('has_chain', False)),
            has_matrix=bool(data.get('has_matrix', False)),
            has_multizone=bool(data.get('has_multizone', False)),
            min_kelvin=_number(data, 'min_kelvin'),
            max_kelvin=_number(data, 'max_kelvin'),
        )


@dataclass(frozen=True)
class Product:
    name: str = ''
    identifier: str = ''
    company: str = ''
    capabilities: Capabilities = field(default_factory=Capabilities)

    @classmethod
    def from_dict(cls, data: dict) -> 'Product':
        return cls(
            name=_str(data, 'name'),
            identifier=_str(data, 'identifier'),
            company=_str(data, 'company'),
            capabilities=Capabilities.from_dict(_section(data, 'capabilities')),
        )


@dataclass(frozen=True)
class LifxDevice:
    """A light as reported by GET /lights/all."""
    id: str
    uuid: str = ''
    label: str = ''
    connected: bool = False
    power: str = 'off'
    colour: Colour = field(default_factory=Colour)
    brightness: float = 0
    effect: str = ''
    group: Place = field(default_factory=Place)
    location: Place = field(default_factory=Place)
    product: Product = field(default_factory=Product)
    last_seen: datetime | None = None
    seconds_since_seen: int = 0

    @property
    def is_on(self) -> bool:
        return self.power == 'on'

    @classmethod
    def from_dict(cls, data: dict) -> 'LifxDevice':
        """Build a device from one element of the API response.

        Raises:
            ValueError: If the element is not an object or has no id
        """
        if not isinstance(data, dict):
            raise ValueError(f"expected device object, got {type(data).__name__}")

        device_id = data.get('id')
        if not device_id or not isinstance(device_id, str):
            raise ValueError("device entry without id")

        return cls(
            id=device_id,
            uuid=_str(data, 'uuid'),
            label=_str(data, 'label'),
            connected=bool(data.get('connected', False)),
            power=_str(data, 'power', 'off'),
            colour=Colour.from_dict(_section(data, 'color')),
            brightness=_number(data, 'brightness'),
            effect=_str(data, 'effect'),
            group=Place.from_dict(_section(data, 'group')),
            location=Place.from_dict(_section(data, 'location')),
            product=Product.from_dict(_section(data, 'product')),
            last_seen=_parse_timestamp(data.get('last_seen')),
            seconds_since_seen=_number(data, 'seconds_since_seen'),
        )

    def to_available_device(self) -> AvailableDevice:
        """Convert to the host's available-device shape."""
        return {
            'UniqueID': self.id,
            'ManufacturerName': self.product.company,
            'ModelName': self.product.name,
            'Type': int(DeviceType.LIGHT),
        }


def parse_devices(payload) -> list[LifxDevice]:
    """Parse the decoded JSON body of GET /lights/all.

    Elements that cannot be parsed are logged and skipped.

    Raises:
        ValueError: If the payload is not a list
    """
    if not isinstance(payload, list):
        raise ValueError(f"expected a list of lights, got {type(payload).__name__}")

    devices = []
    for index, item in enumerate(payload):
        try:
            devices.append(LifxDevice.from_dict(item))
        except ValueError as e:
            logger.warning(f"Skipping light at index {index}: {e}")
    return devices
