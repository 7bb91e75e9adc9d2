"""Type definitions for the LIFX integration plugin.

This module provides TypedDict definitions for the structures exchanged with
the host process, using the host's field names.
"""

from enum import IntEnum
from typing import TypedDict


class DeviceType(IntEnum):
    """Device-type tag reported to the host."""
    LIGHT = 0


class ConfigValueType(IntEnum):
    """Value type of a plugin configuration field."""
    STRING = 0
    BOOLEAN = 1
    INTEGER = 2


class PluginManifest(TypedDict):
    """Static plugin metadata."""
    Id: str
    Name: str
    Author: str
    Version: str


class PluginConfigField(TypedDict):
    """One entry of the plugin configuration schema."""
    Title: str
    Description: str
    Key: str
    Type: int
    IsUserSpecific: bool


class ConfigKV(TypedDict):
    """Configuration value delivered by the host."""
    Key: str
    Value: str


class AvailableDevice(TypedDict):
    """Host-facing view of a discovered light."""
    UniqueID: str
    ManufacturerName: str
    ModelName: str
    Type: int


class WebExtension(TypedDict):
    """Web UI extension offered to the host. This plugin offers none."""
    Type: int
    Source: str
    PathName: str
