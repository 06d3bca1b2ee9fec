"""
Session orchestration.

Components:
- controller: SessionController, the single writer of session state
- state: Session record, SessionSnapshot projection, events
- timer: Pausable countdown on a monotonic clock
- presets: Named practice and exam configurations
"""

from .controller import EvaluationToken, SessionController, SubmitOutcome
from .presets import PRESETS, SessionPreset, get_preset
from .state import EventKind, Session, SessionEvent, SessionSnapshot
from .timer import SessionTimer, format_time

__all__ = [
    "EvaluationToken",
    "EventKind",
    "PRESETS",
    "Session",
    "SessionController",
    "SessionEvent",
    "SessionPreset",
    "SessionSnapshot",
    "SessionTimer",
    "SubmitOutcome",
    "format_time",
    "get_preset",
]
