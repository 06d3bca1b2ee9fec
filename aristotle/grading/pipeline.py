"""
Validation pipeline: one attempt in, exactly one Verdict out.

Order of evaluation:
1. Empty / too-short content -> syntax verdict, no external call
2. Judgment service (once, bounded by a timeout)
   - well-formed payload -> oracle verdict
   - malformed payload   -> lexical inference (heuristic confidence)
3. Timeout / unreachable / empty reply -> local heuristic checker (once)

evaluate() never raises for judgment failures; they only show up in the
verdict's confidence and fallback_reason.
"""

from __future__ import annotations

import asyncio
from collections.abc import Sequence

from loguru import logger

from aristotle.core.errors import OracleError, OracleMalformed, OracleTimeout
from aristotle.core.models import (
    AnswerAttempt,
    ConfidenceSource,
    ErrorKind,
    FallbackReason,
    Item,
    ItemType,
    Verdict,
)
from aristotle.integrations.judgment_client import JudgmentBackend

from . import CHECKERS
from .heuristics import HeuristicValidator
from .oracle_parser import infer_from_text, parse_oracle_response


class ValidationPipeline:
    """
    Orchestrates judgment service -> local heuristics.

    The oracle is consulted at most once per evaluation and the heuristic
    validator at most once; there is no retry loop.
    """

    def __init__(
        self,
        backend: JudgmentBackend | None = None,
        timeout_seconds: float | None = None,
        min_free_form_length: int | None = None,
        history_window: int | None = None,
        heuristics: HeuristicValidator | None = None,
    ):
        """
        Args:
            backend: Judgment service adapter; None means heuristics only
            timeout_seconds: Upper bound for the judgment call
            min_free_form_length: Minimum characters for a written answer
            history_window: How many prior attempts are sent as context
            heuristics: Local fallback validator
        """
        if timeout_seconds is None or min_free_form_length is None or history_window is None:
            from config import get_settings

            settings = get_settings()
            if timeout_seconds is None:
                timeout_seconds = settings.evaluation_budget_ms / 1000.0
            if min_free_form_length is None:
                min_free_form_length = settings.min_free_form_length
            if history_window is None:
                history_window = settings.judgment_history_window

        self.backend = backend
        self.timeout_seconds = timeout_seconds
        self.min_lengths = {item_type: c.min_length for item_type, c in CHECKERS.items()}
        self.min_lengths[ItemType.FREE_FORM] = min_free_form_length
        self.history_window = history_window
        self.heuristics = heuristics or HeuristicValidator()

    async def evaluate(
        self,
        item: Item,
        attempt: AnswerAttempt,
        prior_attempts: Sequence[AnswerAttempt] = (),
    ) -> Verdict:
        """Judge one attempt. Always returns a verdict."""
        content = attempt.content.strip()
        if len(content) < self.min_lengths[item.item_type]:
            logger.debug(f"Attempt {attempt.attempt_id} too short ({len(content)} chars)")
            return self._too_short()

        if self.backend is None:
            return self.heuristics.check(item, attempt, FallbackReason.UNREACHABLE)

        history = list(prior_attempts)[-self.history_window:] if self.history_window else []
        try:
            raw = await asyncio.wait_for(
                self.backend.judge(item, attempt, history),
                timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.warning(f"Judgment for item {item.item_id} exceeded {self.timeout_seconds}s")
            return self.heuristics.check(item, attempt, FallbackReason.TIMEOUT)
        except OracleTimeout:
            return self.heuristics.check(item, attempt, FallbackReason.TIMEOUT)
        except OracleMalformed as e:
            logger.info(f"Malformed judgment for item {item.item_id}: {e}")
            if e.raw.strip():
                return infer_from_text(e.raw)
            return self.heuristics.check(item, attempt, FallbackReason.MALFORMED)
        except OracleError as e:
            logger.warning(f"Judgment unavailable for item {item.item_id}: {e}")
            return self.heuristics.check(item, attempt, FallbackReason(e.reason))
        except Exception:
            logger.exception(f"Judgment backend failed unexpectedly for item {item.item_id}")
            return self.heuristics.check(item, attempt, FallbackReason.ERROR)

        if not raw or (isinstance(raw, str) and not raw.strip()):
            logger.warning(f"Empty judgment reply for item {item.item_id}")
            return self.heuristics.check(item, attempt, FallbackReason.UNREACHABLE)

        try:
            verdict = parse_oracle_response(raw)
        except OracleMalformed as e:
            logger.info(f"Malformed judgment for item {item.item_id}: {e}")
            return infer_from_text(e.raw)

        logger.debug(
            f"Oracle verdict for item {item.item_id}: "
            f"correct={verdict.is_correct} kind={verdict.error_kind.value}"
        )
        return verdict

    @staticmethod
    def _too_short() -> Verdict:
        return Verdict(
            is_correct=False,
            error_kind=ErrorKind.SYNTAX,
            feedback="Please write a more complete answer before checking it.",
            confidence=ConfidenceSource.HEURISTIC,
            encouragement="Take your time and show each calculation clearly.",
            fallback_reason=FallbackReason.TOO_SHORT,
        )
