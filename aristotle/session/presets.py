"""
Built-in session presets.

Exams mix item types: the first 70% of items are multiple-choice and the
rest are written, as in a paper exam. Practice presets use one type.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

from aristotle.core.models import DifficultyTier, ItemType, SessionMode

EXAM_MULTIPLE_CHOICE_PERCENT = 70


@dataclass(frozen=True)
class SessionPreset:
    """Named bundle of start() arguments."""

    key: str
    name: str
    description: str
    mode: SessionMode
    duration_minutes: int | None
    item_count: int | None
    topics: tuple[str, ...]
    initial_tier: DifficultyTier

    @property
    def time_budget_seconds(self) -> float | None:
        if self.duration_minutes is None:
            return None
        return self.duration_minutes * 60.0

    def item_types(self) -> tuple[ItemType, ...]:
        """Per-item type rotation for this preset."""
        if self.mode is not SessionMode.EXAM or not self.item_count:
            return (ItemType.MULTIPLE_CHOICE,)
        mcq = math.ceil(self.item_count * EXAM_MULTIPLE_CHOICE_PERCENT / 100)
        written = self.item_count - mcq
        return (ItemType.MULTIPLE_CHOICE,) * mcq + (ItemType.FREE_FORM,) * written


PRESETS: dict[str, SessionPreset] = {
    preset.key: preset
    for preset in (
        SessionPreset(
            key="practice",
            name="Adaptive Practice",
            description="10 adaptive questions on one topic, untimed",
            mode=SessionMode.PRACTICE,
            duration_minutes=None,
            item_count=10,
            topics=("quadratic-equations",),
            initial_tier=DifficultyTier.EASY,
        ),
        SessionPreset(
            key="unit-test",
            name="Unit Test",
            description="Single topic assessment (30 minutes)",
            mode=SessionMode.EXAM,
            duration_minutes=30,
            item_count=10,
            topics=("quadratic-equations",),
            initial_tier=DifficultyTier.MEDIUM,
        ),
        SessionPreset(
            key="mid-term",
            name="Mid-Term Exam",
            description="Multiple topics assessment (90 minutes)",
            mode=SessionMode.EXAM,
            duration_minutes=90,
            item_count=20,
            topics=("quadratic-equations", "linear-systems", "functions"),
            initial_tier=DifficultyTier.MEDIUM,
        ),
        SessionPreset(
            key="final-exam",
            name="Final Exam",
            description="Complete syllabus assessment (180 minutes)",
            mode=SessionMode.EXAM,
            duration_minutes=180,
            item_count=40,
            topics=(
                "quadratic-equations",
                "linear-systems",
                "functions",
                "trigonometry",
                "probability",
            ),
            initial_tier=DifficultyTier.ADVANCED,
        ),
    )
}


def get_preset(key: str) -> SessionPreset:
    try:
        return PRESETS[key]
    except KeyError:
        raise KeyError(f"Unknown preset {key!r}; choose from {', '.join(PRESETS)}") from None
