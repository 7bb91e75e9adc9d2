"""In-memory cache of LIFX device data.

This module holds the available-device views, the power state of every
known light and the time of the last refresh attempt. All three are guarded
by a single lock so a refresh is never observed half-written.
"""

import threading
import time
from typing import Callable, Iterable

from core.config import REFRESH_INTERVAL
from models.device import LifxDevice
from models.types import AvailableDevice


class DeviceCache:
    """Process-lifetime cache owned by one bridge instance."""

    def __init__(self, refresh_interval: float = REFRESH_INTERVAL,
                 clock: Callable[[], float] = time.monotonic):
        """Initialise an empty cache.

        Args:
            refresh_interval: Seconds a refresh attempt suppresses the next one
            clock: Monotonic time source, replaceable in tests
        """
        self.refresh_interval = refresh_interval
        self._clock = clock
        self._lock = threading.Lock()
        self._available: list[AvailableDevice] = []
        self._states: dict[str, bool] = {}
        self._last_refresh: float | None = None
        # Bumped on every set_power(); device id -> generation of its last toggle
        self._generation = 0
        self._toggled: dict[str, int] = {}

    @property
    def last_refresh(self) -> float | None:
        """Clock value of the last refresh attempt, None if never attempted."""
        with self._lock:
            return self._last_refresh

    def _is_stale_locked(self) -> bool:
        if self._last_refresh is None:
            return True
        return self._clock() - self._last_refresh >= self.refresh_interval

    def is_stale(self) -> bool:
        """Check whether the next read should trigger a refresh."""
        with self._lock:
            return self._is_stale_locked()

    def claim_refresh(self) -> int | None:
        """Record a refresh attempt if the cache is stale.

        The timestamp is taken at the start of the attempt, so a failing
        refresh still suppresses retries for the refresh interval.

        Returns:
            Toggle generation to pass to replace(), or None if no refresh is due
        """
        with self._lock:
            if not self._is_stale_locked():
                return None
            self._last_refresh = self._clock()
            return self._generation

    def replace(self, devices: Iterable[LifxDevice], generation: int | None = None):
        """Rebuild the device views and overwrite the state of every listed device.

        States set by set_power() after the claim that produced `generation`
        are newer than the fetched snapshot and are kept.
        """
        devices = list(devices)
        available = [device.to_available_device() for device in devices]
        with self._lock:
            self._available = available
            for device in devices:
                if generation is not None and self._toggled.get(device.id, 0) > generation:
                    continue
                self._states[device.id] = device.is_on

    def set_power(self, device_id: str, on: bool):
        """Set the cached state of a single device."""
        with self._lock:
            self._generation += 1
            self._toggled[device_id] = self._generation
            self._states[device_id] = on

    def get_power(self, device_id: str) -> bool:
        """Cached power state, False for unknown devices."""
        with self._lock:
            return self._states.get(device_id, False)

    def available_devices(self) -> list[AvailableDevice]:
        """Copy of the cached device views."""
        with self._lock:
            return [dict(device) for device in self._available]

    def states(self) -> dict[str, bool]:
        """Copy of the cached power states."""
        with self._lock:
            return dict(self._states)
