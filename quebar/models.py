"""
Data models for the QueBar status core.

Wire shapes (Workspace, Envelope) are pydantic models so the window manager's
alternate key spellings are handled by field aliases. Consumer-side state
(DisplayState, StatusBlock) are plain dataclasses.
"""

from dataclasses import dataclass, asdict
from enum import Enum
from typing import Any, List, Optional, Tuple

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator, model_validator


class Workspace(BaseModel):
    """One workspace as reported by the window manager.

    Identity is positional within the snapshot it belongs to.
    """

    # Strict: "yes", "true" or 1 are not booleans
    model_config = ConfigDict(frozen=True, strict=True)

    name: str = Field(..., description="Workspace name")
    focused: bool = Field(
        False,
        validation_alias=AliasChoices("focused", "hasFocus"),
        description="Workspace holds keyboard focus",
    )
    visible: bool = Field(
        False,
        validation_alias=AliasChoices("visible", "isDisplayed"),
        description="Workspace is displayed on a monitor",
    )

    @model_validator(mode="before")
    @classmethod
    def reject_duplicate_flags(cls, data: Any) -> Any:
        """A flag given under both of its spellings is ambiguous."""
        if isinstance(data, dict):
            for field, alias in (("focused", "hasFocus"), ("visible", "isDisplayed")):
                if field in data and alias in data:
                    raise ValueError(f"duplicate field: {field}/{alias}")
        return data


# Complete, immutable view of workspace state; a new snapshot replaces the old one.
WorkspaceSnapshot = Tuple[Workspace, ...]


class WorkspacesPayload(BaseModel):
    """Payload of a `query workspaces` response."""

    workspaces: List[Workspace]


class MessageType(str, Enum):
    """Envelope message types used for routing."""
    CLIENT_RESPONSE = "client_response"
    QUERY_RESPONSE = "query_response"
    EVENT = "event"
    SUBSCRIBED_EVENT = "subscribed_event"
    EVENT_SUBSCRIPTION = "event_subscription"
    OTHER = "other"

    @property
    def is_response(self) -> bool:
        return self in (MessageType.CLIENT_RESPONSE, MessageType.QUERY_RESPONSE)

    @property
    def is_event(self) -> bool:
        return self in (
            MessageType.EVENT,
            MessageType.SUBSCRIBED_EVENT,
            MessageType.EVENT_SUBSCRIPTION,
        )


class Envelope(BaseModel):
    """Outer message wrapper: a type tag plus an opaque payload."""

    message_type: MessageType = Field(..., alias="messageType")
    data: Any = Field(..., description="Payload; may be null but must be present")

    @field_validator("message_type", mode="before")
    @classmethod
    def map_unknown_type(cls, v: Any) -> Any:
        """Route any unrecognised type string to OTHER."""
        if not isinstance(v, str):
            raise ValueError(f"messageType must be a string, got {type(v).__name__}")
        try:
            return MessageType(v)
        except ValueError:
            return MessageType.OTHER


@dataclass
class DisplayState:
    """Current display state, owned by the aggregator.

    The renderer treats it as read-only for the duration of one frame.
    """

    workspaces: WorkspaceSnapshot = ()
    battery: str = "100%"
    time: str = ""   # HH:MM
    date: str = ""   # MM/DD/YYYY


@dataclass
class StatusBlock:
    """A single status block in the i3bar protocol format.

    See: https://i3wm.org/docs/i3bar-protocol.html
    """

    # Required fields
    full_text: str          # Full text to display (with markup)
    name: str               # Block identifier (workspace, date, time, battery)

    # Optional fields
    instance: Optional[str] = None        # Block instance identifier
    color: Optional[str] = None           # Hex color code (#RRGGBB)
    background: Optional[str] = None      # Background color
    urgent: bool = False                  # Urgent flag (highlights block)
    separator: bool = True                # Show separator after block
    separator_block_width: int = 15       # Separator width
    markup: str = "none"                  # Markup type (none, pango)

    def to_json(self) -> dict:
        """Convert to i3bar protocol JSON format.

        Omits None values and default flags to minimize JSON output.
        """
        return {
            k: v for k, v in asdict(self).items()
            if v is not None and not (k == "urgent" and v is False)
        }
