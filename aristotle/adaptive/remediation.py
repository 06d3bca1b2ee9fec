"""
Remediation monitor.

Counts consecutive conceptual errors reported by the judgment service
itself. When the count reaches the threshold, one RemediationTrigger is
emitted and the count goes back to zero. The monitor then stays latched:
further conceptual errors in the same streak do not fire again.

Anything else (a correct answer, another error kind, or a conceptual
classification from local heuristics) breaks the streak and clears the latch.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from loguru import logger

from aristotle.core.models import Item, Verdict


@dataclass(frozen=True)
class RemediationTrigger:
    """Signal that the student needs a concept review."""

    topic: str
    item_ids: tuple[str, ...]
    feedback: tuple[str, ...]
    raised_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class RemediationMonitor:
    """Detects streaks of trusted conceptual errors."""

    def __init__(self, threshold: int | None = None):
        if threshold is None:
            from config import get_settings

            threshold = get_settings().remediation_threshold
        if threshold < 1:
            raise ValueError(f"remediation threshold must be >= 1, got {threshold}")
        self.threshold = threshold
        self._streak: list[tuple[Item, Verdict]] = []
        self._latched = False
        self.triggers_raised = 0

    @property
    def streak(self) -> int:
        return len(self._streak)

    @property
    def latched(self) -> bool:
        """True between a trigger and the verdict that breaks its streak."""
        return self._latched

    def observe(self, item: Item, verdict: Verdict) -> RemediationTrigger | None:
        """Feed one verdict; returns a trigger when a streak first qualifies."""
        if not verdict.is_trusted_conceptual:
            self._streak.clear()
            self._latched = False
            return None

        if self._latched:
            return None

        self._streak.append((item, verdict))
        if len(self._streak) < self.threshold:
            return None

        trigger = RemediationTrigger(
            topic=item.topic,
            item_ids=tuple(i.item_id for i, _ in self._streak),
            feedback=tuple(v.feedback for _, v in self._streak),
        )
        self._streak.clear()
        self._latched = True
        self.triggers_raised += 1
        logger.info(
            f"Remediation triggered for topic {trigger.topic!r} "
            f"after {self.threshold} conceptual errors"
        )
        return trigger
