"""
Difficulty adaptation.

After each recorded verdict, and before the next item is issued:
- cumulative accuracy > upper threshold and not at the top -> one tier up
- cumulative accuracy < lower threshold and not at the bottom -> one tier down
- otherwise hold

The decision depends only on the current tier and the cumulative accuracy
through the last recorded item. Items already issued keep their tier.
"""

from __future__ import annotations

from dataclasses import dataclass

from loguru import logger

from aristotle.core.models import DifficultyTier


@dataclass(frozen=True)
class TierChange:
    """Outcome of one adaptation step."""

    previous: DifficultyTier
    current: DifficultyTier
    accuracy: float

    @property
    def changed(self) -> bool:
        return self.previous is not self.current


def next_tier(
    current: DifficultyTier,
    accuracy: float,
    upper_threshold: float,
    lower_threshold: float,
) -> DifficultyTier:
    """Pure tier decision for the next item."""
    if accuracy > upper_threshold and not current.is_highest:
        return current.harder()
    if accuracy < lower_threshold and not current.is_lowest:
        return current.easier()
    return current


class DifficultyAdapter:
    """Tracks the tier used for the next issued item."""

    def __init__(
        self,
        initial_tier: DifficultyTier,
        upper_threshold: float | None = None,
        lower_threshold: float | None = None,
    ):
        if upper_threshold is None or lower_threshold is None:
            from config import get_settings

            settings = get_settings()
            if upper_threshold is None:
                upper_threshold = settings.difficulty_upper_threshold
            if lower_threshold is None:
                lower_threshold = settings.difficulty_lower_threshold
        if lower_threshold > upper_threshold:
            raise ValueError(
                f"lower threshold {lower_threshold} exceeds upper threshold {upper_threshold}"
            )

        self.tier = initial_tier
        self.upper_threshold = upper_threshold
        self.lower_threshold = lower_threshold
        self.progression: list[DifficultyTier] = []

    def mark_issued(self, tier: DifficultyTier) -> None:
        """Remember the tier of an item that was actually issued."""
        self.progression.append(tier)

    def adapt(self, accuracy: float) -> TierChange:
        """Apply one adaptation step at an item boundary."""
        previous = self.tier
        self.tier = next_tier(previous, accuracy, self.upper_threshold, self.lower_threshold)
        change = TierChange(previous=previous, current=self.tier, accuracy=accuracy)
        if change.changed:
            logger.info(
                f"Difficulty {previous.value} -> {self.tier.value} (accuracy {accuracy:.0%})"
            )
        return change
