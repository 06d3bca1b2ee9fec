"""
Answer grading for tutoring sessions.

Each item type has a local checker module registered here:
- multiple_choice: exact match against the expected option
- free_form: rule-based checks on written working

The ValidationPipeline (pipeline.py) tries the judgment service first and
falls back to these checkers through HeuristicValidator (heuristics.py).
"""

from typing import TYPE_CHECKING

from aristotle.core.models import ItemType

if TYPE_CHECKING:
    from .base import ItemChecker

# Checker registry - populated by @register decorator
CHECKERS: dict[ItemType, "ItemChecker"] = {}


def register(item_type: ItemType):
    """Decorator to register an item checker."""
    def decorator(cls):
        CHECKERS[item_type] = cls()
        return cls
    return decorator


def get_checker(item_type: str | ItemType) -> "ItemChecker | None":
    """Get the checker for an item type."""
    if isinstance(item_type, str):
        try:
            item_type = ItemType.parse(item_type)
        except ValueError:
            return None
    return CHECKERS.get(item_type)


# Import checkers to trigger registration
from . import multiple_choice
from . import free_form

from .heuristics import HeuristicValidator
from .oracle_parser import infer_from_text, parse_oracle_response
from .pipeline import ValidationPipeline

__all__ = [
    "CHECKERS",
    "HeuristicValidator",
    "ValidationPipeline",
    "get_checker",
    "infer_from_text",
    "parse_oracle_response",
    "register",
]
