"""
Session state and its read-only projection.

`Session` is owned and mutated by exactly one SessionController. Everything
outside the controller sees a frozen `SessionSnapshot`.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from aristotle.adaptive.remediation import RemediationTrigger
from aristotle.core.errors import InvalidStateTransition
from aristotle.core.models import (
    CompletionReason,
    DifficultyTier,
    Item,
    ItemType,
    LogEntry,
    ScoreSummary,
    SessionMode,
    SessionStatus,
    Verdict,
)

# Legal status moves; completed is terminal
ALLOWED_TRANSITIONS: dict[SessionStatus, frozenset[SessionStatus]] = {
    SessionStatus.SETUP: frozenset({SessionStatus.ACTIVE}),
    SessionStatus.ACTIVE: frozenset({SessionStatus.PAUSED, SessionStatus.COMPLETED}),
    SessionStatus.PAUSED: frozenset({SessionStatus.ACTIVE, SessionStatus.COMPLETED}),
    SessionStatus.COMPLETED: frozenset(),
}


@dataclass
class Session:
    """Mutable session record. Only the controller touches it."""

    session_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    mode: SessionMode = SessionMode.PRACTICE
    status: SessionStatus = SessionStatus.SETUP
    topics: tuple[str, ...] = ()
    item_types: tuple[ItemType, ...] = ()
    item_count: int | None = None
    time_budget_seconds: float | None = None
    tier: DifficultyTier = DifficultyTier.EASY
    started_at: datetime | None = None
    ended_at: datetime | None = None
    completion_reason: CompletionReason | None = None
    current_item: Item | None = None
    items_issued: int = 0
    remediation_streak: int = 0
    last_verdict: Verdict | None = None
    last_remediation: RemediationTrigger | None = None
    log: list[LogEntry] = field(default_factory=list)

    def check_transition(self, target: SessionStatus, command: str) -> None:
        """Raise unless `status -> target` is a legal move."""
        if target not in ALLOWED_TRANSITIONS[self.status]:
            raise InvalidStateTransition(command, self.status.value)

    def transition(self, target: SessionStatus, command: str) -> None:
        self.check_transition(target, command)
        self.status = target

    def plan_for(self, index: int) -> tuple[str, ItemType]:
        """Topic and item type for the index-th issued item."""
        return (
            self.topics[index % len(self.topics)],
            self.item_types[index % len(self.item_types)],
        )


class EventKind(str, Enum):
    REMEDIATION = "remediation"
    TIER_CHANGED = "tier_changed"
    COMPLETED = "completed"


@dataclass(frozen=True)
class SessionEvent:
    """Out-of-band notification delivered to controller listeners."""

    kind: EventKind
    session_id: str
    payload: Any = None


@dataclass(frozen=True)
class SessionSnapshot:
    """Read-only view of a session for presentation layers."""

    session_id: str
    mode: SessionMode
    status: SessionStatus
    tier: DifficultyTier
    current_item: Item | None
    time_remaining: float | None
    summary: ScoreSummary
    last_verdict: Verdict | None
    remediation_streak: int
    last_remediation: RemediationTrigger | None
    difficulty_progression: tuple[DifficultyTier, ...]
    log: tuple[LogEntry, ...]
    started_at: datetime | None
    ended_at: datetime | None
    completion_reason: CompletionReason | None

    @property
    def items_answered(self) -> int:
        return len(self.log)

    @property
    def is_completed(self) -> bool:
        return self.status is SessionStatus.COMPLETED


def utcnow() -> datetime:
    return datetime.now(timezone.utc)
