"""
Unit tests for the remediation monitor.
"""

import pytest

from aristotle.adaptive.remediation import RemediationMonitor
from aristotle.core.models import (
    ConfidenceSource,
    DifficultyTier,
    ErrorKind,
    Item,
    ItemType,
    Verdict,
)

CONCEPTUAL = Verdict(False, ErrorKind.CONCEPTUAL, "Wrong method.", ConfidenceSource.ORACLE)
LOCAL_CONCEPTUAL = Verdict(False, ErrorKind.CONCEPTUAL, "Wrong method?", ConfidenceSource.HEURISTIC)
CALCULATION = Verdict(False, ErrorKind.CALCULATION, "Arithmetic slip.", ConfidenceSource.ORACLE)
CORRECT = Verdict(True, ErrorKind.NONE, "Yes.", ConfidenceSource.ORACLE)


def _item(n):
    return Item(
        item_id=f"i{n}",
        prompt="?",
        item_type=ItemType.FREE_FORM,
        tier=DifficultyTier.MEDIUM,
        topic="functions",
        expected_answer="f(x) = 2x",
    )


def test_fires_once_after_threshold():
    monitor = RemediationMonitor(threshold=2)

    first = monitor.observe(_item(1), CONCEPTUAL)
    second = monitor.observe(_item(2), CONCEPTUAL)

    assert first is None
    assert second is not None
    assert second.topic == "functions"
    assert second.item_ids == ("i1", "i2")
    assert second.feedback == ("Wrong method.", "Wrong method.")
    assert monitor.streak == 0


def test_long_streak_fires_once():
    monitor = RemediationMonitor(threshold=2)

    fired = [monitor.observe(_item(n), CONCEPTUAL) is not None for n in range(4)]

    assert fired == [False, True, False, False]
    assert monitor.triggers_raised == 1
    assert monitor.latched


@pytest.mark.parametrize("breaker", [CORRECT, CALCULATION, LOCAL_CONCEPTUAL])
def test_broken_streak_rearms(breaker):
    monitor = RemediationMonitor(threshold=2)
    for n in range(3):
        monitor.observe(_item(n), CONCEPTUAL)

    monitor.observe(_item(3), breaker)
    assert not monitor.latched

    assert monitor.observe(_item(4), CONCEPTUAL) is None
    trigger = monitor.observe(_item(5), CONCEPTUAL)
    assert trigger is not None
    assert trigger.item_ids == ("i4", "i5")
    assert monitor.triggers_raised == 2


@pytest.mark.parametrize("breaker", [CORRECT, CALCULATION, LOCAL_CONCEPTUAL])
def test_streak_broken(breaker):
    monitor = RemediationMonitor(threshold=2)

    monitor.observe(_item(1), CONCEPTUAL)
    monitor.observe(_item(2), breaker)
    result = monitor.observe(_item(3), CONCEPTUAL)

    assert result is None
    assert monitor.streak == 1


def test_heuristic_conceptual_never_counts():
    monitor = RemediationMonitor(threshold=1)

    assert monitor.observe(_item(1), LOCAL_CONCEPTUAL) is None
    assert monitor.triggers_raised == 0


def test_invalid_threshold():
    with pytest.raises(ValueError):
        RemediationMonitor(threshold=0)
