"""GlazeWM workspace event client with resilient reconnection.

Keeps one WebSocket connection to the window manager, subscribes to workspace
and focus events, and answers every event with a full ``query workspaces``.
Each decoded response is published as a complete snapshot; no partial
workspace state is ever kept here.
"""

import logging
import threading
from enum import Enum
from typing import Callable, Optional, Union

from websockets.exceptions import WebSocketException
from websockets.sync.client import connect as ws_connect

from .channel import Channel
from .coalescer import RepaintFlag
from .config import WorkspaceClientConfig
from .errors import ProtocolError
from .models import WorkspaceSnapshot
from .protocol import (
    QUERY_WORKSPACES,
    decode_workspaces,
    handshake_commands,
    is_subscription_ack,
    parse_envelope,
)

logger = logging.getLogger(__name__)

# Anything that means "the connection is unusable": refused, reset, timed out,
# handshake rejected, closed by peer.
CONNECTION_ERRORS = (OSError, WebSocketException)


class ClientState(Enum):
    """Connection lifecycle of the workspace client."""
    DISCONNECTED = "disconnected"
    SUBSCRIBED = "subscribed"
    STREAMING = "streaming"


class WorkspaceEventClient:
    """Maintains the window manager subscription and publishes workspace snapshots."""

    def __init__(
        self,
        config: WorkspaceClientConfig,
        channel: Channel[WorkspaceSnapshot],
        repaint_flag: RepaintFlag,
        stop_event: Optional[threading.Event] = None,
        connect: Optional[Callable[[], object]] = None,
    ) -> None:
        """Initialize workspace client.

        Args:
            config: Endpoint and reconnect settings
            channel: Where decoded snapshots are published
            repaint_flag: Raised after every published snapshot
            stop_event: Optional signal that ends the client loop
            connect: Connection factory (default: WebSocket to config.url)
        """
        self.config = config
        self.channel = channel
        self.repaint_flag = repaint_flag
        self.stop_event = stop_event or threading.Event()
        self._connect = connect or self._open_websocket
        self.state = ClientState.DISCONNECTED
        self.failed_attempts = 0
        self.thread: Optional[threading.Thread] = None
        self._conn = None

    def _open_websocket(self):
        return ws_connect(self.config.url, open_timeout=self.config.open_timeout)

    def run(self) -> None:
        """Connect, stream, and reconnect until stopped."""
        logger.info(f"Workspace client started for {self.config.url}")

        while not self.stop_event.is_set():
            self.state = ClientState.DISCONNECTED
            try:
                conn = self._connect()
            except CONNECTION_ERRORS as e:
                self.failed_attempts += 1
                if self.failed_attempts == 1:
                    logger.warning(f"Cannot connect to window manager at {self.config.url}: {e}")
                else:
                    logger.debug(f"Connect attempt {self.failed_attempts} failed: {e}")
                self.stop_event.wait(self.config.reconnect_delay)
                continue

            logger.info(f"Connected to window manager at {self.config.url}")
            self.failed_attempts = 0
            self._conn = conn
            try:
                self._stream(conn)
            finally:
                self._conn = None
                self._close(conn)

        self.state = ClientState.DISCONNECTED
        logger.info("Workspace client stopped")

    def _stream(self, conn) -> None:
        """Subscribe, then read messages until the connection drops."""
        self.state = ClientState.SUBSCRIBED
        for command in handshake_commands(self.config.subscribe_events):
            self._send(conn, command)

        self.state = ClientState.STREAMING
        while not self.stop_event.is_set():
            try:
                raw = conn.recv()
            except CONNECTION_ERRORS as e:
                logger.info(f"Connection to window manager lost: {e}")
                return
            self.handle_message(conn, raw)

    def handle_message(self, conn, raw: Union[str, bytes]) -> Optional[WorkspaceSnapshot]:
        """Route one inbound message.

        Returns:
            The snapshot that was published, if any
        """
        try:
            envelope = parse_envelope(raw)
        except ProtocolError as e:
            logger.debug(f"Dropping message: {e}")
            return None

        if envelope.message_type.is_response:
            if is_subscription_ack(envelope.data):
                return None
            try:
                snapshot = decode_workspaces(envelope.data)
            except ProtocolError as e:
                logger.debug(f"Ignoring non-workspace response: {e}")
                return None
            self.channel.publish(snapshot)
            self.repaint_flag.set()
            return snapshot

        if envelope.message_type.is_event:
            # Always re-fetch full state instead of applying the event payload
            self._send(conn, QUERY_WORKSPACES)

        return None

    def _send(self, conn, command: str) -> None:
        try:
            conn.send(command)
        except CONNECTION_ERRORS as e:
            # The next recv() reports the loss and drives reconnection
            logger.debug(f"Failed to send '{command}': {e}")

    def _close(self, conn) -> None:
        try:
            conn.close()
        except CONNECTION_ERRORS as e:
            logger.debug(f"Error closing connection: {e}")

    def start(self) -> threading.Thread:
        self.thread = threading.Thread(target=self.run, daemon=True, name="workspace-client")
        self.thread.start()
        return self.thread

    def stop(self) -> None:
        """Signal the loop to end and unblock a pending read."""
        self.stop_event.set()
        conn = self._conn
        if conn is not None:
            self._close(conn)
