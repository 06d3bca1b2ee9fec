"""
Multiple-choice checker.

Exact match of the chosen option against the expected answer, after
normalizing case, whitespace and look-alike symbols.
"""

from aristotle.core.models import ErrorKind, Item, ItemType, Verdict

from . import register
from .base import heuristic_verdict, normalize_answer


@register(ItemType.MULTIPLE_CHOICE)
class MultipleChoiceChecker:
    """Checker for multiple-choice items."""

    min_length = 1

    def check(self, item: Item, content: str) -> Verdict:
        if normalize_answer(content) == normalize_answer(item.reference_answer):
            return heuristic_verdict(True, ErrorKind.NONE, "Correct! That's the right option.")

        # A choice that isn't even among the options is closer to a typo
        if item.options and normalize_answer(content) not in {
            normalize_answer(option) for option in item.options
        }:
            return heuristic_verdict(
                False,
                ErrorKind.SYNTAX,
                "That doesn't match any of the listed options.",
            )

        return heuristic_verdict(
            False,
            ErrorKind.UNKNOWN,
            "Not quite. Check your work carefully and compare the options again.",
        )
