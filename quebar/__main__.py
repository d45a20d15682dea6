#!/usr/bin/env python3
"""QueBar status generator for swaybar/i3bar.

Runs the background producers (workspace client, battery sampler, repaint
ticker) and drives the display aggregator from an i3bar-protocol render loop
on stdout.

Usage:
  python -m quebar [--url ws://localhost:6123] [--battery-backend psutil]
"""

import argparse
import logging
import signal
import threading
from typing import Iterable, Optional

from .aggregator import DisplayStateAggregator
from .battery import BATTERY_SOURCES, BatterySampler
from .channel import Channel
from .coalescer import RepaintFlag, RepaintTicker
from .config import BatteryConfig, Config, RepaintConfig, WorkspaceClientConfig
from .render_host import I3barRenderHost
from .workspace_client import WorkspaceEventClient

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    defaults = Config()
    parser = argparse.ArgumentParser(description="Emit workspace, clock and battery status for swaybar/i3bar")
    parser.add_argument(
        "--url",
        default=defaults.workspace.url,
        help="Window manager IPC WebSocket endpoint (default: %(default)s)",
    )
    parser.add_argument(
        "--reconnect-delay",
        type=float,
        default=defaults.workspace.reconnect_delay,
        help="Seconds between connection attempts (default: %(default)s)",
    )
    parser.add_argument(
        "--battery-backend",
        choices=sorted(BATTERY_SOURCES),
        default=defaults.battery.backend,
        help="Battery source (default: %(default)s)",
    )
    parser.add_argument(
        "--battery-interval",
        type=float,
        default=defaults.battery.interval,
        help="Seconds between battery samples (default: %(default)s)",
    )
    parser.add_argument(
        "--no-battery",
        action="store_true",
        help="Disable the battery sampler and block",
    )
    parser.add_argument(
        "--repaint-interval",
        type=float,
        default=defaults.repaint.poll_interval,
        help="Repaint coalescing window in seconds (default: %(default)s)",
    )
    parser.add_argument(
        "--log-file",
        default=defaults.log_file,
        help="Log file path (default: %(default)s)",
    )
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="INFO",
        help="Log level (default: %(default)s)",
    )
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> Config:
    """Translate CLI flags into a Config."""
    return Config(
        workspace=WorkspaceClientConfig(url=args.url, reconnect_delay=args.reconnect_delay),
        battery=BatteryConfig(
            enabled=not args.no_battery,
            backend=args.battery_backend,
            interval=args.battery_interval,
        ),
        repaint=RepaintConfig(poll_interval=args.repaint_interval),
        log_file=args.log_file,
    )


def setup_logging(log_file: str, level: str) -> None:
    # stdout carries the i3bar protocol, so logs go to a file
    logging.basicConfig(
        level=getattr(logging, level),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[logging.FileHandler(log_file)]
    )


def main(argv: Optional[Iterable[str]] = None) -> int:
    """Entry point for the status generator."""
    args = parse_args(argv)
    config = build_config(args)
    setup_logging(config.log_file, args.log_level)

    stop_event = threading.Event()
    repaint_flag = RepaintFlag()
    workspace_channel = Channel("workspaces")
    battery_channel = Channel("battery")

    host = I3barRenderHost(config)
    aggregator = DisplayStateAggregator(
        workspace_channel,
        battery_channel,
        initial_battery=config.initial_battery,
    )

    WorkspaceEventClient(config.workspace, workspace_channel, repaint_flag, stop_event=stop_event).start()
    if config.battery.enabled:
        BatterySampler(config.battery, battery_channel, repaint_flag, stop_event=stop_event).start()
    RepaintTicker(repaint_flag, host, config.repaint.poll_interval, stop_event=stop_event).start()

    def shutdown(*_args) -> None:
        stop_event.set()
        host.stop()

    signal.signal(signal.SIGINT, shutdown)
    signal.signal(signal.SIGTERM, shutdown)

    logger.info("Status generator initialized")
    host.run(aggregator.update)
    aggregator.close()
    logger.info("Status generator stopped")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
