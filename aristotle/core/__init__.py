"""
Core Module - Shared domain models and errors.

Components:
- models: Item, AnswerAttempt, Verdict, ScoreSummary and their enums
- errors: Engine exception hierarchy

All other packages (grading, adaptive, session, integrations) import
from aristotle.core rather than defining their own record types.
"""

from aristotle.core.errors import (
    AristotleError,
    ContentUnavailable,
    InvalidStateTransition,
    OracleError,
    OracleMalformed,
    OracleTimeout,
    OracleUnreachable,
)
from aristotle.core.models import (
    AnswerAttempt,
    CompletionReason,
    ConfidenceSource,
    DifficultyTier,
    ErrorKind,
    FallbackReason,
    Item,
    ItemType,
    LogEntry,
    ScoreSummary,
    SessionMode,
    SessionStatus,
    TopicScore,
    Verdict,
)

__all__ = [
    # Models
    "AnswerAttempt",
    "CompletionReason",
    "ConfidenceSource",
    "DifficultyTier",
    "ErrorKind",
    "FallbackReason",
    "Item",
    "ItemType",
    "LogEntry",
    "ScoreSummary",
    "SessionMode",
    "SessionStatus",
    "TopicScore",
    "Verdict",
    # Errors
    "AristotleError",
    "ContentUnavailable",
    "InvalidStateTransition",
    "OracleError",
    "OracleMalformed",
    "OracleTimeout",
    "OracleUnreachable",
]
