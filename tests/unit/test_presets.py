"""
Unit tests for session presets.
"""

import pytest

from aristotle.core.models import ItemType, SessionMode
from aristotle.session.presets import PRESETS, get_preset


def test_practice_preset_is_untimed():
    preset = get_preset("practice")

    assert preset.mode is SessionMode.PRACTICE
    assert preset.time_budget_seconds is None
    assert preset.item_types() == (ItemType.MULTIPLE_CHOICE,)


def test_exam_mixes_item_types():
    preset = get_preset("unit-test")
    types = preset.item_types()

    assert preset.time_budget_seconds == 1800.0
    assert len(types) == preset.item_count
    assert types.count(ItemType.MULTIPLE_CHOICE) == 7
    assert types[-1] is ItemType.FREE_FORM


def test_share_rounds_up():
    types = get_preset("final-exam").item_types()

    assert types.count(ItemType.MULTIPLE_CHOICE) == 28
    assert types.count(ItemType.FREE_FORM) == 12


def test_unknown_preset():
    with pytest.raises(KeyError, match="Unknown preset"):
        get_preset("pop-quiz")


def test_keys_match():
    assert all(key == preset.key for key, preset in PRESETS.items())
