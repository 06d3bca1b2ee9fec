"""
Session Controller: the single owner of a tutoring session.

State machine:
    setup -> active             start()
    active <-> paused           pause() / resume()
    active|paused -> completed  end(), item count reached, timer expiry

Every command runs under one asyncio.Lock. The lock is released while the
validation pipeline is awaited, so the countdown keeps ticking during an
evaluation. Each evaluation carries an EvaluationToken scoped to its
AnswerAttempt; pause, end and expiry cancel it, and a cancelled token's
verdict is dropped instead of being applied to a session that moved on.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass

from loguru import logger

from aristotle.adaptive.difficulty import DifficultyAdapter, TierChange
from aristotle.adaptive.remediation import RemediationMonitor, RemediationTrigger
from aristotle.adaptive.scoring import ScoreAggregator
from aristotle.core.errors import ContentUnavailable, InvalidStateTransition
from aristotle.core.models import (
    AnswerAttempt,
    CompletionReason,
    DifficultyTier,
    Item,
    ItemType,
    LogEntry,
    ScoreSummary,
    SessionMode,
    SessionStatus,
    Verdict,
)
from aristotle.grading.pipeline import ValidationPipeline
from aristotle.integrations.content_provider import ContentProvider
from aristotle.session.state import (
    EventKind,
    Session,
    SessionEvent,
    SessionSnapshot,
    utcnow,
)
from aristotle.session.timer import SessionTimer

SessionListener = Callable[[SessionEvent], None]


class EvaluationToken:
    """Cancellation token for one outstanding evaluation."""

    def __init__(self, attempt_id: str):
        self.attempt_id = attempt_id
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


@dataclass(frozen=True)
class SubmitOutcome:
    """What happened to one submitted attempt."""

    verdict: Verdict
    applied: bool
    remediation: RemediationTrigger | None = None
    tier_change: TierChange | None = None
    next_item: Item | None = None
    completed: bool = False
    content_error: ContentUnavailable | None = None


class SessionController:
    """
    Orchestrator for one tutoring session.

    Coordinates the content provider, validation pipeline, score
    aggregator, difficulty adapter, remediation monitor and timer.
    """

    def __init__(
        self,
        content: ContentProvider,
        pipeline: ValidationPipeline,
        *,
        upper_threshold: float | None = None,
        lower_threshold: float | None = None,
        remediation_threshold: int | None = None,
        tick_interval: float | None = None,
        auto_tick: bool = True,
        clock: Callable[[], float] = time.monotonic,
        session_id: str | None = None,
    ):
        if tick_interval is None:
            from config import get_settings

            tick_interval = get_settings().timer_tick_seconds

        self.content = content
        self.pipeline = pipeline
        self.tick_interval = tick_interval
        self.auto_tick = auto_tick
        self._clock = clock
        self._thresholds = (upper_threshold, lower_threshold)

        self.session = Session(session_id=session_id) if session_id else Session()
        self._lock = asyncio.Lock()
        self._timer = SessionTimer(None, clock)
        self._scores = ScoreAggregator()
        self._remediation = RemediationMonitor(remediation_threshold)
        self._difficulty: DifficultyAdapter | None = None
        self._pending: EvaluationToken | None = None
        self._submitted: set[str] = set()
        self._issued_at = 0.0
        self._ticker: asyncio.Task | None = None
        self._completed = asyncio.Event()
        self._listeners: list[SessionListener] = []

    # =========================================================================
    # Commands
    # =========================================================================

    async def start(
        self,
        mode: SessionMode,
        topic: str | Sequence[str],
        item_count: int | None,
        time_budget: float | None,
        initial_tier: DifficultyTier,
        item_type: ItemType | Sequence[ItemType] = ItemType.MULTIPLE_CHOICE,
    ) -> SessionSnapshot:
        """
        Begin the session and issue the first item.

        Args:
            mode: practice, exam or freeform
            topic: One topic, or a rotation of topics per item
            item_count: Items before the session completes (None = unbounded)
            time_budget: Seconds of active time (None = unbounded)
            initial_tier: Tier of the first item; there is no history to derive it
            item_type: One item type, or a rotation of types per item

        Raises:
            InvalidStateTransition: The session was already started
            ContentUnavailable: No first item; the session stays in setup
        """
        async with self._lock:
            self.session.check_transition(SessionStatus.ACTIVE, "start")
            if not isinstance(initial_tier, DifficultyTier):
                raise ValueError("initial_tier must be an explicit DifficultyTier")
            if item_count is not None and item_count < 1:
                raise ValueError(f"item_count must be >= 1, got {item_count}")

            topics = (topic,) if isinstance(topic, str) else tuple(topic)
            if isinstance(item_type, str):
                item_types = (ItemType.parse(item_type),)
            else:
                item_types = tuple(ItemType.parse(t) for t in item_type)
            if not topics or not item_types:
                raise ValueError("at least one topic and one item type are required")

            timer = SessionTimer(time_budget, self._clock)
            upper, lower = self._thresholds
            difficulty = DifficultyAdapter(initial_tier, upper, lower)

            first = await self.content.get_item(topics[0], initial_tier, item_types[0])

            session = self.session
            session.mode = mode
            session.topics = topics
            session.item_types = item_types
            session.item_count = item_count
            session.time_budget_seconds = time_budget
            session.tier = initial_tier
            session.started_at = utcnow()
            session.transition(SessionStatus.ACTIVE, "start")

            self._timer = timer
            self._difficulty = difficulty
            self._timer.start()
            self._issue(first)

            logger.info(
                f"Session {session.session_id} started: mode={mode.value} "
                f"topics={list(topics)} items={item_count or 'unbounded'} "
                f"budget={time_budget or 'unbounded'} tier={initial_tier.value}"
            )

            if not timer.unbounded and self.auto_tick and self.tick_interval > 0:
                self._ticker = asyncio.create_task(self._run_ticker())
            return self._snapshot()

    def new_attempt(self, content: str) -> AnswerAttempt:
        """Create the attempt for the current item, timed on active time only."""
        item = self.session.current_item
        if self.session.status is not SessionStatus.ACTIVE or item is None:
            raise InvalidStateTransition(
                "answer", self.session.status.value, "no item is awaiting an answer"
            )
        elapsed = max(0.0, self._timer.active_elapsed() - self._issued_at)
        return AnswerAttempt(item_id=item.item_id, content=content, elapsed_seconds=elapsed)

    async def submit(self, attempt: AnswerAttempt) -> SubmitOutcome:
        """
        Judge an attempt for the current item and advance the session.

        Raises:
            InvalidStateTransition: Not active, no current item, wrong item,
                an evaluation already outstanding, or a re-submitted attempt
        """
        async with self._lock:
            self._reconcile_timer()
            session = self.session
            if session.status is not SessionStatus.ACTIVE:
                raise InvalidStateTransition("submit", session.status.value)
            item = session.current_item
            if item is None:
                raise InvalidStateTransition("submit", session.status.value, "no item issued")
            if attempt.item_id != item.item_id:
                raise InvalidStateTransition(
                    "submit", session.status.value,
                    f"attempt is for item {attempt.item_id}, current item is {item.item_id}",
                )
            if attempt.attempt_id in self._submitted:
                raise InvalidStateTransition(
                    "submit", session.status.value, "attempt was already submitted"
                )
            if self._pending is not None:
                raise InvalidStateTransition(
                    "submit", session.status.value, "an evaluation is already outstanding"
                )

            token = EvaluationToken(attempt.attempt_id)
            self._pending = token
            self._submitted.add(attempt.attempt_id)
            history = [entry.attempt for entry in session.log]

        try:
            verdict = await self.pipeline.evaluate(item, attempt, history)
        except asyncio.CancelledError:
            if self._pending is token:
                self._pending = None
            raise

        async with self._lock:
            if self._pending is token:
                self._pending = None
            self._reconcile_timer()
            if token.cancelled or self.session.status is not SessionStatus.ACTIVE:
                logger.warning(
                    f"Discarding stale verdict for attempt {attempt.attempt_id} "
                    f"(session {self.session.status.value})"
                )
                return SubmitOutcome(verdict=verdict, applied=False)
            return await self._apply(item, attempt, verdict)

    async def pause(self) -> SessionSnapshot:
        """Freeze the session and its timer; cancels any outstanding evaluation."""
        async with self._lock:
            self._reconcile_timer()
            self.session.transition(SessionStatus.PAUSED, "pause")
            self._timer.pause()
            self._cancel_pending("paused")
            logger.info(f"Session {self.session.session_id} paused")
            return self._snapshot()

    async def resume(self) -> SessionSnapshot:
        async with self._lock:
            if self.session.status is not SessionStatus.PAUSED:
                raise InvalidStateTransition("resume", self.session.status.value)
            self.session.transition(SessionStatus.ACTIVE, "resume")
            self._timer.resume()
            logger.info(f"Session {self.session.session_id} resumed")
            return self._snapshot()

    async def end(self) -> SessionSnapshot:
        """Caller-driven completion from active or paused."""
        async with self._lock:
            self._reconcile_timer()
            self.session.check_transition(SessionStatus.COMPLETED, "end")
            self._complete(CompletionReason.ENDED)
            return self._snapshot()

    async def request_item(self) -> SessionSnapshot:
        """
        Retry issuing an item after a mid-session ContentUnavailable.

        One provider call per invocation; raises ContentUnavailable again
        if it still fails.
        """
        async with self._lock:
            self._reconcile_timer()
            if self.session.status is not SessionStatus.ACTIVE:
                raise InvalidStateTransition("request_item", self.session.status.value)
            if self.session.current_item is not None:
                raise InvalidStateTransition(
                    "request_item", self.session.status.value, "an item is already issued"
                )
            await self._issue_next()
            return self._snapshot()

    async def tick(self) -> float | None:
        """Timer event: complete the session once the budget is spent."""
        async with self._lock:
            self._reconcile_timer()
            return self._timer.remaining()

    async def close(self) -> None:
        """Stop background work without changing session state."""
        if self._ticker is not None and not self._ticker.done():
            self._ticker.cancel()
            try:
                await self._ticker
            except asyncio.CancelledError:
                pass
        self._ticker = None

    async def wait_completed(self) -> SessionSnapshot:
        await self._completed.wait()
        return self._snapshot()

    # =========================================================================
    # Queries
    # =========================================================================

    def snapshot(self) -> SessionSnapshot:
        return self._snapshot()

    def summary(self) -> ScoreSummary:
        """Partial or final score summary; allowed in every state."""
        return self._scores.summary()

    @property
    def status(self) -> SessionStatus:
        return self.session.status

    def time_remaining(self) -> float | None:
        return self._timer.remaining()

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    # =========================================================================
    # Internals (caller holds the lock)
    # =========================================================================

    async def _apply(self, item: Item, attempt: AnswerAttempt, verdict: Verdict) -> SubmitOutcome:
        session = self.session
        session.log.append(LogEntry(item=item, attempt=attempt, verdict=verdict))
        session.last_verdict = verdict
        self._scores.record(item, attempt, verdict)

        trigger = self._remediation.observe(item, verdict)
        session.remediation_streak = self._remediation.streak
        if trigger is not None:
            session.last_remediation = trigger
            self._emit(EventKind.REMEDIATION, trigger)

        tier_change = self._difficulty.adapt(self._scores.accuracy)
        session.tier = self._difficulty.tier
        if tier_change.changed:
            self._emit(EventKind.TIER_CHANGED, tier_change)

        logger.debug(
            f"Recorded item {item.item_id}: correct={verdict.is_correct} "
            f"confidence={verdict.confidence.value} accuracy={self._scores.accuracy:.0%}"
        )

        session.current_item = None
        if session.item_count is not None and len(session.log) >= session.item_count:
            self._complete(CompletionReason.ITEM_COUNT)
            return SubmitOutcome(
                verdict=verdict,
                applied=True,
                remediation=trigger,
                tier_change=tier_change,
                completed=True,
            )

        try:
            next_item = await self._issue_next()
        except ContentUnavailable as e:
            logger.warning(f"Session {session.session_id}: next item unavailable: {e}")
            return SubmitOutcome(
                verdict=verdict,
                applied=True,
                remediation=trigger,
                tier_change=tier_change,
                content_error=e,
            )
        return SubmitOutcome(
            verdict=verdict,
            applied=True,
            remediation=trigger,
            tier_change=tier_change,
            next_item=next_item,
        )

    async def _issue_next(self) -> Item:
        topic, item_type = self.session.plan_for(self.session.items_issued)
        item = await self.content.get_item(topic, self._difficulty.tier, item_type)
        self._issue(item)
        return item

    def _issue(self, item: Item) -> None:
        self.session.current_item = item
        self.session.items_issued += 1
        self._issued_at = self._timer.active_elapsed()
        self._difficulty.mark_issued(item.tier)
        logger.debug(
            f"Issued item {item.item_id} ({item.item_type.value}, {item.tier.value}, "
            f"{item.topic})"
        )

    def _reconcile_timer(self) -> None:
        if self.session.status is SessionStatus.ACTIVE and self._timer.expired:
            self._timer.stop()
            if self.session.current_item is not None:
                logger.info(
                    f"Time expired; discarding unanswered item {self.session.current_item.item_id}"
                )
            self._complete(CompletionReason.TIME_EXPIRED)

    def _cancel_pending(self, why: str) -> None:
        if self._pending is not None:
            logger.debug(f"Cancelling evaluation of attempt {self._pending.attempt_id}: {why}")
            self._pending.cancel()
            self._pending = None

    def _complete(self, reason: CompletionReason) -> None:
        session = self.session
        session.transition(SessionStatus.COMPLETED, "complete")
        session.completion_reason = reason
        session.ended_at = utcnow()
        session.current_item = None
        self._timer.stop()
        self._cancel_pending(reason.value)

        if self._ticker is not None and self._ticker is not asyncio.current_task():
            self._ticker.cancel()

        summary = self._scores.summary()
        logger.info(
            f"Session {session.session_id} completed ({reason.value}): "
            f"{summary.marks_obtained}/{summary.marks_possible} marks, "
            f"{summary.items_answered} answered"
        )
        self._completed.set()
        self._emit(EventKind.COMPLETED, summary)

    def _emit(self, kind: EventKind, payload) -> None:
        event = SessionEvent(kind=kind, session_id=self.session.session_id, payload=payload)
        for listener in self._listeners:
            try:
                listener(event)
            except Exception:
                logger.exception(f"Session listener failed on {kind.value} event")

    async def _run_ticker(self) -> None:
        while self.session.status is not SessionStatus.COMPLETED:
            await asyncio.sleep(self.tick_interval)
            await self.tick()

    def _snapshot(self) -> SessionSnapshot:
        session = self.session
        progression = tuple(self._difficulty.progression) if self._difficulty else ()
        return SessionSnapshot(
            session_id=session.session_id,
            mode=session.mode,
            status=session.status,
            tier=session.tier,
            current_item=session.current_item,
            time_remaining=self._timer.remaining(),
            summary=self._scores.summary(),
            last_verdict=session.last_verdict,
            remediation_streak=session.remediation_streak,
            last_remediation=session.last_remediation,
            difficulty_progression=progression,
            log=tuple(session.log),
            started_at=session.started_at,
            ended_at=session.ended_at,
            completion_reason=session.completion_reason,
        )
