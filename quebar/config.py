"""Configuration dataclasses for the QueBar status core."""

from dataclasses import dataclass
from typing import Tuple


@dataclass
class WorkspaceClientConfig:
    """Window manager IPC endpoint and reconnect policy."""
    url: str = "ws://localhost:6123"   # GlazeWM IPC server
    reconnect_delay: float = 2.0       # Seconds between failed connect attempts
    open_timeout: float = 5.0          # WebSocket opening handshake timeout
    subscribe_events: Tuple[str, ...] = ("workspace_activated", "focus_changed")


@dataclass
class BatteryConfig:
    """Battery sampling settings."""
    enabled: bool = True
    backend: str = "psutil"   # psutil or upower
    interval: float = 60.0    # Seconds


@dataclass
class RepaintConfig:
    """Repaint coalescing settings."""
    poll_interval: float = 0.1  # Seconds (worst-case repaint latency)


@dataclass
class ColorTheme:
    """Colors for i3bar workspace blocks.

    Default theme: Catppuccin Mocha
    """
    name: str = "catppuccin-mocha"
    focused_text: str = "#ffffff"
    focused_background: str = "#4646b4"
    visible_text: str = "#d3d3d3"
    visible_background: str = "#313244"
    hidden_text: str = "#a0a0a0"
    clock: str = "#cdd6f4"
    battery: str = "#a6e3a1"


@dataclass
class Config:
    """Complete status core configuration.

    Built from CLI flags or defaults.
    """

    workspace: WorkspaceClientConfig = None
    battery: BatteryConfig = None
    repaint: RepaintConfig = None
    theme: ColorTheme = None

    # Battery string shown until the first reading arrives
    initial_battery: str = "100%"
    log_file: str = "/tmp/quebar.log"

    def __post_init__(self):
        """Initialize default sections if not provided."""
        if self.workspace is None:
            self.workspace = WorkspaceClientConfig()
        if self.battery is None:
            self.battery = BatteryConfig()
        if self.repaint is None:
            self.repaint = RepaintConfig()
        if self.theme is None:
            self.theme = ColorTheme()
