"""
Adaptive Learning Engine.

Components:
- ScoreAggregator: Running marks, timing and per-topic statistics
- DifficultyAdapter: Moves the next item's tier from cumulative accuracy
- RemediationMonitor: Raises a one-shot trigger on conceptual-error streaks
"""
from aristotle.adaptive.difficulty import DifficultyAdapter, TierChange, next_tier
from aristotle.adaptive.remediation import RemediationMonitor, RemediationTrigger
from aristotle.adaptive.scoring import ScoreAggregator, revision_suggestions

__all__ = [
    # Component classes
    "DifficultyAdapter",
    "RemediationMonitor",
    "ScoreAggregator",
    # Data models
    "RemediationTrigger",
    "TierChange",
    # Functions
    "next_tier",
    "revision_suggestions",
]
