"""
Unit tests for core domain models.
"""

import pytest

from aristotle.core.errors import ContentUnavailable, InvalidStateTransition
from aristotle.core.models import (
    AnswerAttempt,
    ConfidenceSource,
    DifficultyTier,
    ErrorKind,
    Item,
    ItemType,
    ScoreSummary,
    TopicScore,
    Verdict,
)


class TestItemType:
    """Tests for ItemType parsing."""

    @pytest.mark.parametrize("raw,expected", [
        ("mcq", ItemType.MULTIPLE_CHOICE),
        ("written", ItemType.FREE_FORM),
        ("multiple_choice", ItemType.MULTIPLE_CHOICE),
        ("Free-Form", ItemType.FREE_FORM),
    ])
    def test_parse_aliases(self, raw, expected):
        assert ItemType.parse(raw) is expected

    def test_parse_unknown_raises(self):
        with pytest.raises(ValueError):
            ItemType.parse("essay")


class TestDifficultyTier:
    """Tests for tier ordering."""

    def test_order(self):
        assert DifficultyTier.EASY.rank < DifficultyTier.MEDIUM.rank < DifficultyTier.ADVANCED.rank

    def test_harder_saturates_at_top(self):
        assert DifficultyTier.EASY.harder() is DifficultyTier.MEDIUM
        assert DifficultyTier.ADVANCED.harder() is DifficultyTier.ADVANCED
        assert DifficultyTier.ADVANCED.is_highest

    def test_easier_saturates_at_bottom(self):
        assert DifficultyTier.ADVANCED.easier() is DifficultyTier.MEDIUM
        assert DifficultyTier.EASY.easier() is DifficultyTier.EASY
        assert DifficultyTier.EASY.is_lowest


class TestItem:
    """Tests for Item construction rules."""

    def test_marks_must_be_positive(self):
        with pytest.raises(ValueError, match="marks"):
            Item(
                item_id="bad",
                prompt="2 + 2?",
                item_type=ItemType.MULTIPLE_CHOICE,
                tier=DifficultyTier.EASY,
                topic="arithmetic",
                expected_answer="4",
                marks=0,
            )

    def test_needs_answer_or_steps(self):
        with pytest.raises(ValueError, match="expected answer or steps"):
            Item(
                item_id="bad",
                prompt="2 + 2?",
                item_type=ItemType.FREE_FORM,
                tier=DifficultyTier.EASY,
                topic="arithmetic",
            )

    def test_reference_answer_joins_steps(self, written_item):
        assert written_item.reference_answer == "x² = 9, x = ±√9, x = ±3"

    def test_steps_fall_back_to_answer(self, mcq_item):
        assert mcq_item.steps == ("x = ±2",)


def test_attempt_ids_are_unique():
    first = AnswerAttempt(item_id="i", content="a", elapsed_seconds=1.0)
    second = AnswerAttempt(item_id="i", content="a", elapsed_seconds=1.0)
    assert first.attempt_id != second.attempt_id


def test_trusted_conceptual_requires_oracle():
    oracle = Verdict(False, ErrorKind.CONCEPTUAL, "method is wrong", ConfidenceSource.ORACLE)
    local = Verdict(False, ErrorKind.CONCEPTUAL, "method is wrong", ConfidenceSource.HEURISTIC)

    assert oracle.is_trusted_conceptual
    assert not local.is_trusted_conceptual


class TestScoreSummary:
    """Tests for summary arithmetic."""

    def test_empty_summary_accuracy_is_zero(self):
        summary = ScoreSummary()
        assert summary.accuracy == 0.0
        assert summary.marks_obtained == 0

    def test_marks_weighted_accuracy(self):
        summary = ScoreSummary(marks_possible=4, marks_obtained=3)
        assert summary.accuracy == pytest.approx(0.75)

    def test_topic_accuracy(self):
        assert TopicScore(correct=1, total=4).accuracy == pytest.approx(0.25)
        assert TopicScore(correct=0, total=0).accuracy == 0.0


def test_error_messages():
    missing = ContentUnavailable("functions", "easy", "free_form", "bank exhausted")
    assert "functions" in str(missing)
    assert "bank exhausted" in str(missing)

    invalid = InvalidStateTransition("resume", "active")
    assert str(invalid) == "Cannot resume while session is active"
