"""Display state aggregation, run once per render frame."""

import logging
from datetime import datetime
from typing import Callable, Optional

from .channel import Channel
from .models import DisplayState, WorkspaceSnapshot
from .render_host import RenderHost

logger = logging.getLogger(__name__)

TIME_FORMAT = "%H:%M"
DATE_FORMAT = "%m/%d/%Y"


def seconds_until_next_minute(unix_time: int) -> int:
    """Seconds until the wall clock reaches the next minute boundary (1-60)."""
    return 60 - (unix_time % 60)


class DisplayStateAggregator:
    """Merges producer channels into the display state and schedules wake-ups."""

    def __init__(
        self,
        workspace_channel: Channel[WorkspaceSnapshot],
        battery_channel: Channel[str],
        initial_battery: str = "100%",
        clock: Optional[Callable[[], datetime]] = None,
    ) -> None:
        """Initialize aggregator.

        Args:
            workspace_channel: Snapshots from the workspace client
            battery_channel: Readings from the battery sampler
            initial_battery: Battery text shown before the first reading
            clock: Returns local time (default: datetime.now)
        """
        self.workspace_channel = workspace_channel
        self.battery_channel = battery_channel
        self.clock = clock or datetime.now
        self.state = DisplayState(battery=initial_battery)

    def poll_workspaces(self) -> Optional[WorkspaceSnapshot]:
        """Newest snapshot published since the last poll, if any."""
        return self.workspace_channel.drain_latest()

    def poll_battery(self) -> Optional[str]:
        """Newest battery reading published since the last poll, if any."""
        return self.battery_channel.drain_latest()

    def update(self, host: RenderHost) -> DisplayState:
        """Run one frame of aggregation.

        Returns:
            Current display state (read-only for the renderer)
        """
        repaint_needed = False

        workspaces = self.poll_workspaces()
        if workspaces is not None:
            self.state.workspaces = workspaces
            repaint_needed = True

        battery = self.poll_battery()
        if battery is not None:
            self.state.battery = battery
            repaint_needed = True

        now = self.clock()
        new_time = now.strftime(TIME_FORMAT)
        new_date = now.strftime(DATE_FORMAT)
        if new_time != self.state.time or new_date != self.state.date:
            self.state.time = new_time
            self.state.date = new_date
            repaint_needed = True

        if repaint_needed:
            host.request_repaint()

        # Keep the clock exact even when nothing else happens
        host.request_repaint_after(seconds_until_next_minute(int(now.timestamp())))

        return self.state

    def close(self) -> None:
        """Consumer teardown; producers keep running but their publishes are dropped."""
        self.workspace_channel.close()
        self.battery_channel.close()
