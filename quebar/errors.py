"""
Error types for the QueBar status core.

None of these errors ever leave a background thread: the codec raises
ProtocolError and the workspace client drops the message, battery sources
raise BatteryUnavailableError and the sampler skips the cycle.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for the status core.

    - 1000-1099: Protocol/decode errors
    - 1100-1199: Battery source errors
    """

    # Protocol errors (1000-1099)
    INVALID_JSON = 1000
    INVALID_ENVELOPE = 1001
    INVALID_WORKSPACE_PAYLOAD = 1002

    # Battery errors (1100-1199)
    BATTERY_BACKEND_MISSING = 1100
    BATTERY_QUERY_FAILED = 1101


class QueBarError(Exception):
    """Base exception for status core errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize status core error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.context = context or {}
        super().__init__(message)


class ProtocolError(QueBarError):
    """A message from the window manager could not be decoded."""

    def __init__(self, code: ErrorCode, reason: str, raw: Optional[str] = None):
        """
        Initialize protocol error.

        Args:
            code: One of the protocol error codes
            reason: Why decoding failed
            raw: Offending message text (truncated)
        """
        context = {}
        if raw is not None:
            context["raw"] = raw[:200]

        super().__init__(
            code=code,
            message=f"Failed to decode message: {reason}",
            context=context
        )


class BatteryUnavailableError(QueBarError):
    """Battery source could not be queried this cycle."""

    def __init__(
        self,
        backend: str,
        reason: str,
        code: ErrorCode = ErrorCode.BATTERY_QUERY_FAILED
    ):
        super().__init__(
            code=code,
            message=f"Battery backend '{backend}' unavailable: {reason}",
            context={"backend": backend}
        )
