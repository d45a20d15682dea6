"""Battery charge sampling.

A battery source reports the first battery's charge as a 0-1 ratio, or None
when the host has no battery. The sampler polls it on a fixed interval and
publishes the formatted percentage.
"""

import logging
import threading
from typing import Optional

import psutil

from .channel import Channel
from .coalescer import RepaintFlag
from .config import BatteryConfig
from .errors import BatteryUnavailableError, ErrorCode

logger = logging.getLogger(__name__)

# Import pydbus lazily to handle missing dependency gracefully
try:
    from pydbus import SystemBus
    PYDBUS_AVAILABLE = True
except ImportError:
    PYDBUS_AVAILABLE = False


def format_battery(ratio: float) -> str:
    """Format a 0-1 charge ratio as an integer percentage string."""
    return f"{ratio * 100:.0f}%"


class PsutilBatterySource:
    """Battery charge from psutil (sysfs on Linux, native APIs elsewhere)."""

    name = "psutil"

    def read_charge_ratio(self) -> Optional[float]:
        """Read the first battery's charge.

        Returns:
            Charge ratio in [0, 1], or None if the host has no battery

        Raises:
            BatteryUnavailableError: Sensor could not be read
        """
        sensors_battery = getattr(psutil, "sensors_battery", None)
        if sensors_battery is None:
            raise BatteryUnavailableError(
                self.name, "battery sensors not supported on this platform",
                code=ErrorCode.BATTERY_BACKEND_MISSING,
            )

        try:
            battery = sensors_battery()
        except Exception as e:
            raise BatteryUnavailableError(self.name, str(e))

        if battery is None:
            return None
        return battery.percent / 100


class UPowerBatterySource:
    """Battery charge from UPower over the D-Bus system bus."""

    name = "upower"

    def read_charge_ratio(self) -> Optional[float]:
        """Read the first present UPower battery device.

        Returns:
            Charge ratio in [0, 1], or None if no battery device is present

        Raises:
            BatteryUnavailableError: pydbus missing or UPower query failed
        """
        if not PYDBUS_AVAILABLE:
            raise BatteryUnavailableError(
                self.name, "pydbus not available",
                code=ErrorCode.BATTERY_BACKEND_MISSING,
            )

        try:
            bus = SystemBus()
            upower = bus.get("org.freedesktop.UPower")

            # Path may vary: /org/freedesktop/UPower/devices/battery_BAT0, battery_BAT1, etc.
            for device_path in upower.EnumerateDevices():
                if "battery" not in device_path.lower():
                    continue
                device = bus.get("org.freedesktop.UPower", device_path)
                if device.IsPresent:
                    return float(device.Percentage) / 100
        except Exception as e:
            raise BatteryUnavailableError(self.name, str(e))

        return None


BATTERY_SOURCES = {
    "psutil": PsutilBatterySource,
    "upower": UPowerBatterySource,
}


def get_battery_source(backend: str):
    """Create the battery source for a backend name.

    Raises:
        ValueError: Unknown backend
    """
    try:
        return BATTERY_SOURCES[backend]()
    except KeyError:
        raise ValueError(
            f"Unknown battery backend '{backend}' (choose from {', '.join(BATTERY_SOURCES)})"
        )


class BatterySampler:
    """Polls a battery source and publishes formatted readings."""

    def __init__(
        self,
        config: BatteryConfig,
        channel: Channel[str],
        repaint_flag: RepaintFlag,
        source=None,
        stop_event: Optional[threading.Event] = None,
    ) -> None:
        self.config = config
        self.channel = channel
        self.repaint_flag = repaint_flag
        self.source = source or get_battery_source(config.backend)
        self.stop_event = stop_event or threading.Event()
        self.thread: Optional[threading.Thread] = None

    def sample(self) -> Optional[str]:
        """Take one reading.

        Returns:
            Published reading, or None if this cycle was skipped
        """
        try:
            ratio = self.source.read_charge_ratio()
        except BatteryUnavailableError as e:
            logger.debug(f"Skipping battery sample: {e}")
            return None

        if ratio is None:
            logger.debug("No battery device found - desktop system?")
            return None

        reading = format_battery(ratio)
        self.channel.publish(reading)
        self.repaint_flag.set()
        return reading

    def run(self) -> None:
        logger.info(f"Battery sampler started (backend {self.source.name}, interval {self.config.interval}s)")
        while not self.stop_event.is_set():
            self.sample()
            self.stop_event.wait(self.config.interval)
        logger.info("Battery sampler stopped")

    def start(self) -> threading.Thread:
        self.thread = threading.Thread(target=self.run, daemon=True, name="battery-sampler")
        self.thread.start()
        return self.thread
