"""
Domain models for tutoring sessions.

Design:
- Enums are closed `str` enums so they serialize as plain strings
- Records handed across component seams are frozen dataclasses
- Item, AnswerAttempt and Verdict never change after creation
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum


class ItemType(str, Enum):
    """How an item is answered."""

    MULTIPLE_CHOICE = "multiple_choice"
    FREE_FORM = "free_form"

    @classmethod
    def parse(cls, value: str | ItemType) -> ItemType:
        """Accept enum values plus the short names used by item banks."""
        if isinstance(value, ItemType):
            return value
        aliases = {"mcq": cls.MULTIPLE_CHOICE, "written": cls.FREE_FORM}
        key = value.strip().lower().replace("-", "_")
        if key in aliases:
            return aliases[key]
        return cls(key)


class DifficultyTier(str, Enum):
    """Ordered difficulty levels, lowest first."""

    EASY = "easy"
    MEDIUM = "medium"
    ADVANCED = "advanced"

    @property
    def rank(self) -> int:
        return _TIER_ORDER.index(self)

    @property
    def is_highest(self) -> bool:
        return self is _TIER_ORDER[-1]

    @property
    def is_lowest(self) -> bool:
        return self is _TIER_ORDER[0]

    def harder(self) -> DifficultyTier:
        """Next tier up, or self when already highest."""
        return _TIER_ORDER[min(self.rank + 1, len(_TIER_ORDER) - 1)]

    def easier(self) -> DifficultyTier:
        """Next tier down, or self when already lowest."""
        return _TIER_ORDER[max(self.rank - 1, 0)]


_TIER_ORDER = (DifficultyTier.EASY, DifficultyTier.MEDIUM, DifficultyTier.ADVANCED)


class ErrorKind(str, Enum):
    """Closed classification of what went wrong in an answer."""

    NONE = "none"
    SYNTAX = "syntax"
    CALCULATION = "calculation"
    CONCEPTUAL = "conceptual"
    UNKNOWN = "unknown"


class ConfidenceSource(str, Enum):
    """Who produced a verdict."""

    ORACLE = "oracle"
    HEURISTIC = "heuristic"


class FallbackReason(str, Enum):
    """Why a verdict did not come from a well-formed oracle payload."""

    TOO_SHORT = "too_short"
    MALFORMED = "malformed"
    TIMEOUT = "timeout"
    UNREACHABLE = "unreachable"
    ERROR = "error"


class SessionMode(str, Enum):
    PRACTICE = "practice"
    EXAM = "exam"
    FREEFORM = "freeform"


class SessionStatus(str, Enum):
    SETUP = "setup"
    ACTIVE = "active"
    PAUSED = "paused"
    COMPLETED = "completed"


class CompletionReason(str, Enum):
    ITEM_COUNT = "item_count"
    TIME_EXPIRED = "time_expired"
    ENDED = "ended"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Item:
    """One question or step issued to the student."""

    item_id: str
    prompt: str
    item_type: ItemType
    tier: DifficultyTier
    topic: str
    expected_answer: str | None = None
    expected_steps: tuple[str, ...] = ()
    marks: int = 1
    options: tuple[str, ...] = ()
    time_limit_seconds: int | None = None

    def __post_init__(self):
        if self.marks < 1:
            raise ValueError(f"Item {self.item_id}: marks must be >= 1, got {self.marks}")
        if self.expected_answer is None and not self.expected_steps:
            raise ValueError(f"Item {self.item_id}: needs an expected answer or steps")

    @property
    def reference_answer(self) -> str:
        """Expected answer as a single line of text."""
        if self.expected_answer is not None:
            return self.expected_answer
        return ", ".join(self.expected_steps)

    @property
    def steps(self) -> tuple[str, ...]:
        """Expected steps, falling back to the single expected answer."""
        if self.expected_steps:
            return self.expected_steps
        return (self.expected_answer,) if self.expected_answer is not None else ()


@dataclass(frozen=True)
class AnswerAttempt:
    """A single submission for an item."""

    item_id: str
    content: str
    elapsed_seconds: float
    submitted_at: datetime = field(default_factory=_utcnow)
    attempt_id: str = field(default_factory=lambda: uuid.uuid4().hex)


@dataclass(frozen=True)
class Verdict:
    """Judgment of one answer attempt."""

    is_correct: bool
    error_kind: ErrorKind
    feedback: str
    confidence: ConfidenceSource
    encouragement: str = ""
    fallback_reason: FallbackReason | None = None

    @property
    def is_trusted_conceptual(self) -> bool:
        """Conceptual error reported by the oracle itself."""
        return (
            self.confidence is ConfidenceSource.ORACLE
            and self.error_kind is ErrorKind.CONCEPTUAL
        )


@dataclass(frozen=True)
class LogEntry:
    """One recorded (item, attempt, verdict) triple."""

    item: Item
    attempt: AnswerAttempt
    verdict: Verdict


@dataclass(frozen=True)
class TopicScore:
    correct: int
    total: int

    @property
    def accuracy(self) -> float:
        return self.correct / self.total if self.total else 0.0


@dataclass(frozen=True)
class ScoreSummary:
    """Running or final statistics for a session."""

    marks_possible: int = 0
    marks_obtained: int = 0
    average_time_seconds: float = 0.0
    items_answered: int = 0
    items_correct: int = 0
    current_streak: int = 0
    best_streak: int = 0
    timed_items: int = 0
    items_on_time: int = 0
    topics: dict[str, TopicScore] = field(default_factory=dict)

    @property
    def accuracy(self) -> float:
        """Marks-weighted accuracy in [0, 1]; 0 when nothing was scored."""
        if self.marks_possible == 0:
            return 0.0
        return self.marks_obtained / self.marks_possible

    @property
    def on_time_rate(self) -> float:
        """Share of time-limited items answered within their limit."""
        if self.timed_items == 0:
            return 1.0
        return self.items_on_time / self.timed_items
