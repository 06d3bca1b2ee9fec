"""
Deterministic local validation.

Always available, never calls out. Used when the judgment service times out,
fails, or returns nothing usable.
"""

from __future__ import annotations

from dataclasses import replace

from loguru import logger

from aristotle.core.models import AnswerAttempt, FallbackReason, Item, Verdict


class HeuristicValidator:
    """Dispatches to the registered checker for an item's type."""

    def check(
        self,
        item: Item,
        attempt: AnswerAttempt,
        reason: FallbackReason,
    ) -> Verdict:
        from . import get_checker

        checker = get_checker(item.item_type)
        if checker is None:
            # Registry is closed over ItemType, so this is a programming error
            raise LookupError(f"No checker registered for {item.item_type}")

        verdict = checker.check(item, attempt.content)
        logger.debug(
            f"Heuristic verdict for item {item.item_id} ({reason.value}): "
            f"correct={verdict.is_correct} kind={verdict.error_kind.value}"
        )
        return replace(verdict, fallback_reason=reason)
