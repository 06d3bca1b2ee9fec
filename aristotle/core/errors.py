"""
Error taxonomy for the tutoring engine.

- ContentUnavailable: an item could not be produced; surfaced to the caller.
- OracleError family: judgment service failures; always recovered inside the
  validation pipeline and never raised past it.
- InvalidStateTransition: a command that the session's current state does not
  allow; raised before any side effect.
"""

from __future__ import annotations


class AristotleError(Exception):
    """Base class for all engine errors."""


class ContentUnavailable(AristotleError):
    """Raised when the content provider cannot produce an item."""

    def __init__(self, topic: str, tier: str, item_type: str, reason: str = ""):
        self.topic = topic
        self.tier = tier
        self.item_type = item_type
        self.reason = reason
        message = f"No {item_type} item for topic={topic!r} tier={tier}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class OracleError(AristotleError):
    """Base class for judgment service failures."""

    reason = "error"


class OracleTimeout(OracleError):
    """The judgment service did not answer within the timeout."""

    reason = "timeout"


class OracleUnreachable(OracleError):
    """The judgment service could not be reached or refused the request."""

    reason = "unreachable"


class OracleMalformed(OracleError):
    """The judgment service answered, but not with a usable verdict payload."""

    reason = "malformed"

    def __init__(self, message: str, raw: str = ""):
        self.raw = raw
        super().__init__(message)


class InvalidStateTransition(AristotleError):
    """A session command was issued in a state that does not allow it."""

    def __init__(self, command: str, status: str, detail: str = ""):
        self.command = command
        self.status = status
        message = f"Cannot {command} while session is {status}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
