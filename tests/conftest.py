"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
"""
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from aristotle.core.models import DifficultyTier, Item, ItemType
from aristotle.integrations.content_provider import ItemBank
from tests.fakes import CountingBank, FakeClock


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "integration: Session flow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "integration" in str(item.fspath):
            item.add_marker(pytest.mark.integration)


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def counting_bank():
    return CountingBank()


@pytest.fixture
def mcq_item():
    """Provide a sample multiple-choice item for testing."""
    return Item(
        item_id="test-mcq-001",
        prompt="What is the solution to x² - 4 = 0?",
        item_type=ItemType.MULTIPLE_CHOICE,
        tier=DifficultyTier.EASY,
        topic="quadratic-equations",
        expected_answer="x = ±2",
        options=("x = ±2", "x = ±4", "x = 2", "x = -2"),
    )


@pytest.fixture
def written_item():
    """Provide a sample free-form item for testing."""
    return Item(
        item_id="test-written-001",
        prompt="Solve the quadratic equation: x² - 9 = 0",
        item_type=ItemType.FREE_FORM,
        tier=DifficultyTier.MEDIUM,
        topic="quadratic-equations",
        expected_steps=("x² = 9", "x = ±√9", "x = ±3"),
        marks=3,
    )


@pytest.fixture
def sample_bank(project_root):
    return ItemBank.from_file(project_root / "aristotle" / "data" / "sample_items.json")
