"""
Base protocol and helpers for local answer checkers.
"""

import re
from typing import Protocol

from aristotle.core.models import ConfidenceSource, ErrorKind, Item, Verdict

# Characters that students (and keyboards) use for the same symbol
_SYMBOL_MAP = str.maketrans({
    "−": "-",  # minus sign
    "–": "-",  # en dash
    "—": "-",  # em dash
    "×": "*",
    "·": "*",
    "÷": "/",
    "²": "^2",
    "³": "^3",
    "≤": "<=",
    "≥": ">=",
})

_WHITESPACE_RE = re.compile(r"\s+")
_NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")

ENCOURAGE_CORRECT = "Great job! Keep going with the next step."
ENCOURAGE_RETRY = "Take your time and show each calculation clearly."


def normalize_answer(text: str) -> str:
    """Canonical form for comparing short math answers."""
    normalized = text.strip().lower().translate(_SYMBOL_MAP)
    normalized = _WHITESPACE_RE.sub("", normalized)
    return normalized.rstrip(".")


def extract_numbers(text: str) -> list[float]:
    """Numeric values appearing in already-normalized text."""
    return [float(match) for match in _NUMBER_RE.findall(text)]


def heuristic_verdict(
    is_correct: bool,
    error_kind: ErrorKind,
    feedback: str,
    encouragement: str = "",
) -> Verdict:
    """Verdict produced by a local checker."""
    return Verdict(
        is_correct=is_correct,
        error_kind=ErrorKind.NONE if is_correct else error_kind,
        feedback=feedback,
        confidence=ConfidenceSource.HEURISTIC,
        encouragement=encouragement or (ENCOURAGE_CORRECT if is_correct else ENCOURAGE_RETRY),
    )


class ItemChecker(Protocol):
    """Protocol for per-item-type local checkers."""

    min_length: int

    def check(self, item: Item, content: str) -> Verdict:
        """Judge the content deterministically. Never calls out."""
        ...
