"""Unit tests for battery sources and the battery sampler."""

from collections import namedtuple
from unittest.mock import MagicMock, patch

import pytest

from quebar import battery
from quebar.battery import (
    BatterySampler,
    PsutilBatterySource,
    UPowerBatterySource,
    format_battery,
    get_battery_source,
)
from quebar.config import BatteryConfig
from quebar.errors import BatteryUnavailableError, ErrorCode

from fakes import RecordingStopEvent

# Shape of psutil.sensors_battery() results
sbattery = namedtuple("sbattery", ["percent", "secsleft", "power_plugged"])


class StubSource:
    """Battery source returning scripted ratios (exceptions are raised)."""

    name = "stub"

    def __init__(self, *readings):
        self.readings = list(readings)

    def read_charge_ratio(self):
        reading = self.readings.pop(0)
        if isinstance(reading, BaseException):
            raise reading
        return reading


class TestFormatBattery:
    """Test percentage formatting."""

    @pytest.mark.parametrize("ratio,expected", [
        (0.87, "87%"),
        (1.0, "100%"),
        (0.0, "0%"),
        (0.5, "50%"),
        (0.123, "12%"),
        (0.996, "100%"),
    ])
    def test_format(self, ratio, expected):
        assert format_battery(ratio) == expected


class TestPsutilBatterySource:
    """Test the psutil battery source."""

    def test_reads_ratio(self):
        with patch.object(battery.psutil, "sensors_battery", return_value=sbattery(85.0, 12240, False)):
            assert PsutilBatterySource().read_charge_ratio() == pytest.approx(0.85)

    def test_no_battery_returns_none(self):
        with patch.object(battery.psutil, "sensors_battery", return_value=None):
            assert PsutilBatterySource().read_charge_ratio() is None

    def test_sensor_error_raises_unavailable(self):
        with patch.object(battery.psutil, "sensors_battery", side_effect=OSError("EIO")):
            with pytest.raises(BatteryUnavailableError) as exc_info:
                PsutilBatterySource().read_charge_ratio()
        assert exc_info.value.code is ErrorCode.BATTERY_QUERY_FAILED
        assert exc_info.value.context == {"backend": "psutil"}

    def test_sensor_parse_error_raises_unavailable(self):
        with patch.object(battery.psutil, "sensors_battery", side_effect=ValueError("bad sysfs value")):
            with pytest.raises(BatteryUnavailableError):
                PsutilBatterySource().read_charge_ratio()


class TestUPowerBatterySource:
    """Test the UPower battery source."""

    def test_missing_pydbus_raises_unavailable(self):
        with patch.object(battery, "PYDBUS_AVAILABLE", False):
            with pytest.raises(BatteryUnavailableError) as exc_info:
                UPowerBatterySource().read_charge_ratio()
        assert exc_info.value.code is ErrorCode.BATTERY_BACKEND_MISSING

    def test_reads_first_present_battery(self):
        upower = MagicMock()
        upower.EnumerateDevices.return_value = [
            "/org/freedesktop/UPower/devices/line_power_AC",
            "/org/freedesktop/UPower/devices/battery_BAT0",
            "/org/freedesktop/UPower/devices/battery_BAT1",
        ]
        bat0 = MagicMock(IsPresent=False, Percentage=10.0)
        bat1 = MagicMock(IsPresent=True, Percentage=64.0)
        devices = {
            "/org/freedesktop/UPower/devices/battery_BAT0": bat0,
            "/org/freedesktop/UPower/devices/battery_BAT1": bat1,
        }
        bus = MagicMock()
        bus.get.side_effect = lambda name, path=None: upower if path is None else devices[path]

        with patch.object(battery, "PYDBUS_AVAILABLE", True), \
                patch.object(battery, "SystemBus", return_value=bus, create=True):
            assert UPowerBatterySource().read_charge_ratio() == pytest.approx(0.64)

    def test_no_battery_device_returns_none(self):
        upower = MagicMock()
        upower.EnumerateDevices.return_value = ["/org/freedesktop/UPower/devices/line_power_AC"]
        bus = MagicMock()
        bus.get.return_value = upower

        with patch.object(battery, "PYDBUS_AVAILABLE", True), \
                patch.object(battery, "SystemBus", return_value=bus, create=True):
            assert UPowerBatterySource().read_charge_ratio() is None

    def test_dbus_error_raises_unavailable(self):
        with patch.object(battery, "PYDBUS_AVAILABLE", True), \
                patch.object(battery, "SystemBus", side_effect=RuntimeError("no system bus"), create=True):
            with pytest.raises(BatteryUnavailableError):
                UPowerBatterySource().read_charge_ratio()


class TestGetBatterySource:
    """Test backend selection."""

    def test_known_backends(self):
        assert isinstance(get_battery_source("psutil"), PsutilBatterySource)
        assert isinstance(get_battery_source("upower"), UPowerBatterySource)

    def test_unknown_backend(self):
        with pytest.raises(ValueError, match="Unknown battery backend"):
            get_battery_source("acpi")


class TestBatterySampler:
    """Test sampling, publishing and skipped cycles."""

    def test_sample_publishes_and_raises_flag(self, battery_channel, repaint_flag):
        sampler = BatterySampler(BatteryConfig(), battery_channel, repaint_flag, source=StubSource(0.87))

        assert sampler.sample() == "87%"
        assert battery_channel.drain_latest() == "87%"
        assert repaint_flag.is_set()

    def test_no_battery_skips_cycle(self, battery_channel, repaint_flag):
        sampler = BatterySampler(BatteryConfig(), battery_channel, repaint_flag, source=StubSource(None))

        assert sampler.sample() is None
        assert battery_channel.drain_latest() is None
        assert not repaint_flag.is_set()

    def test_source_error_skips_cycle(self, battery_channel, repaint_flag):
        source = StubSource(BatteryUnavailableError("stub", "driver error"))
        sampler = BatterySampler(BatteryConfig(), battery_channel, repaint_flag, source=source)

        assert sampler.sample() is None
        assert battery_channel.drain_latest() is None
        assert not repaint_flag.is_set()

    def test_psutil_parse_error_skips_cycle(self, battery_channel, repaint_flag):
        sampler = BatterySampler(BatteryConfig(), battery_channel, repaint_flag, source=PsutilBatterySource())

        with patch.object(battery.psutil, "sensors_battery", side_effect=ValueError("bad sysfs value")):
            assert sampler.sample() is None
        assert battery_channel.drain_latest() is None
        assert not repaint_flag.is_set()

    def test_run_samples_every_interval(self, battery_channel, repaint_flag):
        stop_event = RecordingStopEvent(stop_after_waits=3)
        source = StubSource(0.9, BatteryUnavailableError("stub", "driver error"), 0.8)
        sampler = BatterySampler(
            BatteryConfig(interval=60.0), battery_channel, repaint_flag,
            source=source, stop_event=stop_event,
        )

        sampler.run()

        assert stop_event.waits == [60.0, 60.0, 60.0]
        assert source.readings == []
        assert battery_channel.drain_latest() == "80%"

    def test_default_source_from_config(self, battery_channel, repaint_flag):
        sampler = BatterySampler(BatteryConfig(backend="psutil"), battery_channel, repaint_flag)
        assert isinstance(sampler.source, PsutilBatterySource)
