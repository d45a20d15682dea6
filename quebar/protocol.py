"""GlazeWM IPC message codec.

Outbound commands are plain text frames. Inbound messages are JSON objects of
the form ``{"messageType": <str>, "data": <object>}``.
"""

import json
from typing import Any, Iterable, List, Union

from pydantic import ValidationError

from .errors import ErrorCode, ProtocolError
from .models import Envelope, WorkspaceSnapshot, WorkspacesPayload

QUERY_WORKSPACES = "query workspaces"

# Present in the payload of a subscribe command's response
SUBSCRIPTION_ACK_KEY = "subscriptionId"


def subscribe_command(event: str) -> str:
    """Build the subscribe command for one event class."""
    return f"sub -e {event}"


def handshake_commands(events: Iterable[str]) -> List[str]:
    """Commands sent right after connecting: every subscribe, then one query."""
    commands = [subscribe_command(event) for event in events]
    commands.append(QUERY_WORKSPACES)
    return commands


def parse_envelope(raw: Union[str, bytes]) -> Envelope:
    """Decode one inbound text frame.

    Raises:
        ProtocolError: Frame is not JSON or not an envelope object
    """
    if isinstance(raw, bytes):
        raise ProtocolError(ErrorCode.INVALID_ENVELOPE, "binary frame")

    try:
        message = json.loads(raw)
    except (json.JSONDecodeError, RecursionError) as e:
        # RecursionError: nesting deeper than the interpreter stack
        raise ProtocolError(ErrorCode.INVALID_JSON, str(e), raw=raw)

    if not isinstance(message, dict):
        raise ProtocolError(ErrorCode.INVALID_ENVELOPE, "not a JSON object", raw=raw)

    try:
        return Envelope.model_validate(message)
    except ValidationError as e:
        raise ProtocolError(ErrorCode.INVALID_ENVELOPE, str(e), raw=raw)


def is_subscription_ack(data: Any) -> bool:
    """Check whether a response payload acknowledges a subscribe command."""
    return isinstance(data, dict) and SUBSCRIPTION_ACK_KEY in data


def decode_workspaces(data: Any) -> WorkspaceSnapshot:
    """Decode a workspace query payload into a snapshot.

    Order and field values are kept as received; missing focus/visibility
    flags default to False.

    Raises:
        ProtocolError: Payload does not have the workspace shape
    """
    try:
        payload = WorkspacesPayload.model_validate(data)
    except ValidationError as e:
        raise ProtocolError(ErrorCode.INVALID_WORKSPACE_PAYLOAD, str(e))
    return tuple(payload.workspaces)
