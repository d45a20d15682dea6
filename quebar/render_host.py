"""Render host boundary and an i3bar-protocol host for swaybar/i3bar.

The status core only needs two things from whatever draws the bar: a way to
ask for a redraw now, and a way to ask for one no later than some delay.
``I3barRenderHost`` implements both on top of a condition variable and prints
the resulting blocks on stdout.

Protocol: https://i3wm.org/docs/i3bar-protocol.html
"""

import json
import logging
import sys
import threading
import time
from typing import Callable, List, Optional, Protocol, TextIO

from .config import Config
from .models import DisplayState, StatusBlock

logger = logging.getLogger(__name__)


class RenderHost(Protocol):
    """Wake-up primitives the status core calls into."""

    def request_repaint(self) -> None:
        """Redraw as soon as possible."""

    def request_repaint_after(self, seconds: float) -> None:
        """Redraw no later than `seconds` from now."""


def build_status_blocks(state: DisplayState, config: Config) -> List[StatusBlock]:
    """Convert display state into i3bar blocks.

    Returns:
        Workspace blocks in snapshot order, then date, time and battery
    """
    theme = config.theme
    blocks = []

    for ws in state.workspaces:
        if ws.focused:
            color, background = theme.focused_text, theme.focused_background
        elif ws.visible:
            color, background = theme.visible_text, theme.visible_background
        else:
            color, background = theme.hidden_text, None

        blocks.append(StatusBlock(
            name="workspace",
            instance=ws.name,
            full_text=f" {ws.name} ",
            color=color,
            background=background,
            separator=False,
            separator_block_width=3,
        ))

    blocks.append(StatusBlock(name="date", full_text=state.date, color=theme.clock))
    blocks.append(StatusBlock(name="time", full_text=state.time, color=theme.clock))

    if config.battery.enabled:
        blocks.append(StatusBlock(name="battery", full_text=f"🔋 {state.battery}", color=theme.battery))

    return blocks


class I3barRenderHost:
    """Self-scheduling render loop that writes i3bar protocol to a stream."""

    def __init__(self, config: Config, stream: Optional[TextIO] = None) -> None:
        """Initialize render host.

        Args:
            config: Status core configuration
            stream: Output stream (default: stdout)
        """
        self.config = config
        self.stream = stream or sys.stdout
        self._cond = threading.Condition()
        self._repaint_now = True  # First frame renders immediately
        self._deadline: Optional[float] = None
        self._running = True
        self._last_payload = ""
        self.frames = 0

    def request_repaint(self) -> None:
        with self._cond:
            self._repaint_now = True
            self._cond.notify()

    def request_repaint_after(self, seconds: float) -> None:
        deadline = time.monotonic() + max(seconds, 0)
        with self._cond:
            if self._deadline is None or deadline < self._deadline:
                self._deadline = deadline
            self._cond.notify()

    def stop(self) -> None:
        with self._cond:
            self._running = False
            self._cond.notify()

    def wait_for_frame(self) -> bool:
        """Block until a repaint is due.

        Returns:
            True when a frame should run, False once the host is stopped
        """
        with self._cond:
            while self._running:
                now = time.monotonic()
                if self._repaint_now or (self._deadline is not None and now >= self._deadline):
                    # Each frame re-schedules its own deadline
                    self._repaint_now = False
                    self._deadline = None
                    return True
                timeout = None if self._deadline is None else self._deadline - now
                self._cond.wait(timeout)
            return False

    def _print_header(self) -> None:
        """Print i3bar protocol header."""
        header = {"version": 1, "click_events": False}
        self.stream.write(json.dumps(header) + "\n")
        self.stream.write("[\n")  # Start infinite array
        self.stream.flush()

    def render(self, state: DisplayState) -> bool:
        """Write the blocks for one frame if they changed.

        Returns:
            True if a line was written
        """
        blocks = build_status_blocks(state, self.config)
        payload = json.dumps([block.to_json() for block in blocks], ensure_ascii=False)
        if payload == self._last_payload:
            return False
        self.stream.write(payload + ",\n")
        self.stream.flush()
        self._last_payload = payload
        return True

    def run(self, frame: Callable[["I3barRenderHost"], DisplayState]) -> None:
        """Main loop: run one frame per wake-up until stopped.

        Args:
            frame: Called once per wake-up with this host; returns the state to draw
        """
        self._print_header()
        try:
            while self.wait_for_frame():
                state = frame(self)
                self.frames += 1
                self.render(state)
        except BrokenPipeError:
            logger.info("Bar closed stdout, stopping render loop")
            self.stop()
        except KeyboardInterrupt:
            logger.info("Shutting down render loop")
            self.stop()
        else:
            self.stream.write("]\n")  # End infinite array
            self.stream.flush()
