"""
Free-form (written working) checker.

Rules, in order:
1. Structural completeness: the answer must contain a number or a relation
   (=, <, >). Anything else is a syntax error.
2. The final expected step appears verbatim (normalized) -> correct.
3. Every numeric value of the final expected step appears -> correct. A
   "±" in the final step is satisfied by "±" or by both signed values.
4. Otherwise incorrect: calculation error when the student wrote numbers,
   unknown when they didn't. Feedback reports how many expected
   intermediate steps were found.
"""

import re

from aristotle.core.models import ErrorKind, Item, ItemType, Verdict

from . import register
from .base import extract_numbers, heuristic_verdict, normalize_answer

_RELATION_RE = re.compile(r"[=<>]")
_DIGIT_RE = re.compile(r"\d")


def _contains_step(step: str, answer: str) -> bool:
    """Step appears in the answer, not as part of a longer number."""
    if not step:
        return False
    pattern = r"(?<![\d.])" + re.escape(step) + r"(?![\d.])"
    return re.search(pattern, answer) is not None


def _values_present(expected: list[float], found: list[float]) -> bool:
    found_rounded = {round(value, 6) for value in found}
    return all(round(value, 6) in found_rounded for value in expected)


@register(ItemType.FREE_FORM)
class FreeFormChecker:
    """Checker for written, step-based answers."""

    min_length = 3

    def check(self, item: Item, content: str) -> Verdict:
        answer = normalize_answer(content)

        if not (_DIGIT_RE.search(answer) or _RELATION_RE.search(answer)):
            return heuristic_verdict(
                False,
                ErrorKind.SYNTAX,
                "Please write a more complete step showing your work.",
            )

        steps = [normalize_answer(step) for step in item.steps]
        found_steps = sum(1 for step in steps if _contains_step(step, answer))
        final = steps[-1]

        if _contains_step(final, answer):
            return heuristic_verdict(True, ErrorKind.NONE, "This matches the expected result.")

        expected_values = extract_numbers(final)
        answer_values = extract_numbers(answer)
        if "±" in final and "±" not in answer:
            # Both roots spelled out separately
            expected_values += [-value for value in expected_values]
        if expected_values and _values_present(expected_values, answer_values):
            return heuristic_verdict(
                True,
                ErrorKind.NONE,
                "Your final values match. Make sure to double-check your arithmetic.",
            )

        progress = f"Found {found_steps} of {len(steps)} expected steps."
        if answer_values:
            return heuristic_verdict(
                False,
                ErrorKind.CALCULATION,
                f"Your final values don't match the expected result. {progress}",
                "Don't worry, calculation errors happen! Try redoing the last step.",
            )
        return heuristic_verdict(
            False,
            ErrorKind.UNKNOWN,
            f"This doesn't reach the expected result yet. {progress}",
        )
