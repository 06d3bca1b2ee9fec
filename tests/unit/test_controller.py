"""
Unit tests for SessionController commands and state transitions.
"""

import asyncio

import pytest

from aristotle.core.errors import ContentUnavailable, InvalidStateTransition
from aristotle.core.models import (
    CompletionReason,
    DifficultyTier,
    ItemType,
    SessionMode,
    SessionStatus,
)
from aristotle.session.controller import SessionController
from aristotle.session.state import EventKind
from tests.fakes import CountingBank, FakeJudge, make_pipeline, oracle_reply


@pytest.fixture
def make_controller(clock):
    def factory(bank=None, backend=None):
        return SessionController(
            bank or CountingBank(),
            make_pipeline(backend),
            upper_threshold=0.8,
            lower_threshold=0.6,
            remediation_threshold=2,
            tick_interval=1.0,
            auto_tick=False,
            clock=clock,
        )
    return factory


async def _start(controller, item_count=5, time_budget=None, tier=DifficultyTier.EASY):
    return await controller.start(
        SessionMode.PRACTICE, "algebra", item_count, time_budget, tier
    )


async def _answer(controller, content="42"):
    return await controller.submit(controller.new_attempt(content))


class TestStart:
    @pytest.mark.asyncio
    async def test_start_issues_first_item(self, make_controller):
        controller = make_controller()

        snapshot = await _start(controller)

        assert snapshot.status is SessionStatus.ACTIVE
        assert snapshot.current_item.item_id == "item-1"
        assert snapshot.current_item.tier is DifficultyTier.EASY
        assert snapshot.difficulty_progression == (DifficultyTier.EASY,)
        assert snapshot.started_at is not None
        assert snapshot.time_remaining is None

    @pytest.mark.asyncio
    async def test_start_twice_rejected(self, make_controller):
        controller = make_controller()
        await _start(controller)

        with pytest.raises(InvalidStateTransition):
            await _start(controller)

    @pytest.mark.asyncio
    async def test_no_first_item_stays_in_setup(self, make_controller):
        bank = CountingBank()
        bank.fail_after = 0
        controller = make_controller(bank)

        with pytest.raises(ContentUnavailable):
            await _start(controller)

        assert controller.status is SessionStatus.SETUP
        assert controller.snapshot().current_item is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("item_count", [0, -1])
    async def test_item_count_must_be_positive(self, make_controller, item_count):
        controller = make_controller()

        with pytest.raises(ValueError):
            await _start(controller, item_count=item_count)
        assert controller.status is SessionStatus.SETUP

    @pytest.mark.asyncio
    async def test_topic_and_type_rotation(self, make_controller):
        bank = CountingBank()
        controller = make_controller(bank)
        await controller.start(
            SessionMode.EXAM,
            ["algebra", "functions"],
            3,
            None,
            DifficultyTier.MEDIUM,
            [ItemType.MULTIPLE_CHOICE, ItemType.MULTIPLE_CHOICE, ItemType.FREE_FORM],
        )
        await _answer(controller)
        await _answer(controller)

        assert [(topic, kind) for topic, _, kind in bank.requests] == [
            ("algebra", ItemType.MULTIPLE_CHOICE),
            ("functions", ItemType.MULTIPLE_CHOICE),
            ("algebra", ItemType.FREE_FORM),
        ]

    @pytest.mark.asyncio
    async def test_summary_before_start(self, make_controller):
        controller = make_controller()

        summary = controller.summary()

        assert summary.accuracy == 0.0
        assert summary.items_answered == 0


class TestSubmit:
    @pytest.mark.asyncio
    async def test_correct_answer_advances(self, make_controller):
        controller = make_controller()
        await _start(controller)

        outcome = await _answer(controller, "42")

        assert outcome.applied
        assert outcome.verdict.is_correct
        assert outcome.next_item.item_id == "item-2"
        assert outcome.tier_change.current is DifficultyTier.MEDIUM
        snapshot = controller.snapshot()
        assert snapshot.items_answered == 1
        assert snapshot.last_verdict == outcome.verdict
        assert snapshot.tier is DifficultyTier.MEDIUM

    @pytest.mark.asyncio
    async def test_wrong_item_rejected(self, make_controller):
        controller = make_controller()
        await _start(controller)
        stale = controller.new_attempt("42")
        await controller.submit(stale)

        with pytest.raises(InvalidStateTransition, match="current item is item-2"):
            await controller.submit(stale)
        assert controller.snapshot().items_answered == 1

    @pytest.mark.asyncio
    async def test_completes_at_item_count(self, make_controller):
        controller = make_controller()
        await _start(controller, item_count=2)

        await _answer(controller)
        outcome = await _answer(controller, "41")

        assert outcome.completed
        assert outcome.next_item is None
        snapshot = controller.snapshot()
        assert snapshot.is_completed
        assert snapshot.completion_reason is CompletionReason.ITEM_COUNT
        assert snapshot.summary.accuracy == pytest.approx(0.5)

    @pytest.mark.asyncio
    async def test_submit_after_completion_rejected(self, make_controller):
        controller = make_controller()
        await _start(controller, item_count=1)
        attempt = controller.new_attempt("42")
        await controller.end()

        with pytest.raises(InvalidStateTransition):
            await controller.submit(attempt)
        assert controller.snapshot().log == ()

    @pytest.mark.asyncio
    async def test_elapsed_excludes_paused_time(self, make_controller, clock):
        controller = make_controller()
        await _start(controller)

        clock.advance(5)
        await controller.pause()
        clock.advance(100)
        await controller.resume()
        clock.advance(2)

        assert controller.new_attempt("42").elapsed_seconds == pytest.approx(7)

    @pytest.mark.asyncio
    async def test_mid_session_content_error(self, make_controller):
        bank = CountingBank()
        bank.fail_after = 1
        controller = make_controller(bank)
        await _start(controller)

        outcome = await _answer(controller)

        assert outcome.applied
        assert isinstance(outcome.content_error, ContentUnavailable)
        assert controller.status is SessionStatus.ACTIVE
        assert controller.snapshot().current_item is None
        with pytest.raises(InvalidStateTransition):
            controller.new_attempt("42")

        with pytest.raises(ContentUnavailable):
            await controller.request_item()

        bank.fail_after = None
        snapshot = await controller.request_item()
        assert snapshot.current_item is not None

    @pytest.mark.asyncio
    async def test_request_item_with_item_outstanding(self, make_controller):
        controller = make_controller()
        await _start(controller)

        with pytest.raises(InvalidStateTransition, match="already issued"):
            await controller.request_item()

    @pytest.mark.asyncio
    async def test_concurrent_submit_rejected(self, make_controller):
        judge = FakeJudge(oracle_reply(True))
        judge.gate = asyncio.Event()
        controller = make_controller(backend=judge)
        await _start(controller)

        first = asyncio.create_task(_answer(controller))
        await judge.started.wait()

        with pytest.raises(InvalidStateTransition, match="already outstanding"):
            await _answer(controller)

        judge.gate.set()
        outcome = await first
        assert outcome.applied


class TestPauseResumeEnd:
    @pytest.mark.asyncio
    async def test_pause_and_resume(self, make_controller):
        controller = make_controller()
        await _start(controller)

        paused = await controller.pause()
        assert paused.status is SessionStatus.PAUSED
        with pytest.raises(InvalidStateTransition):
            await _answer(controller)

        resumed = await controller.resume()
        assert resumed.status is SessionStatus.ACTIVE
        assert resumed.current_item == paused.current_item

    @pytest.mark.asyncio
    async def test_resume_while_active_rejected(self, make_controller):
        controller = make_controller()
        await _start(controller)

        with pytest.raises(InvalidStateTransition):
            await controller.resume()

    @pytest.mark.asyncio
    async def test_pause_before_start_rejected(self, make_controller):
        controller = make_controller()

        with pytest.raises(InvalidStateTransition):
            await controller.pause()

    @pytest.mark.asyncio
    async def test_end_from_paused(self, make_controller):
        controller = make_controller()
        await _start(controller)
        await controller.pause()

        snapshot = await controller.end()

        assert snapshot.status is SessionStatus.COMPLETED
        assert snapshot.completion_reason is CompletionReason.ENDED
        assert snapshot.ended_at is not None
        assert snapshot.current_item is None

    @pytest.mark.asyncio
    async def test_completed_is_terminal(self, make_controller):
        controller = make_controller()
        await _start(controller)
        await controller.end()

        for command in (controller.end, controller.pause, controller.resume):
            with pytest.raises(InvalidStateTransition):
                await command()
        assert controller.status is SessionStatus.COMPLETED

    @pytest.mark.asyncio
    async def test_resubmitting_discarded_attempt_rejected(self, make_controller):
        judge = FakeJudge(oracle_reply(True))
        judge.gate = asyncio.Event()
        controller = make_controller(backend=judge)
        await _start(controller)
        attempt = controller.new_attempt("42")

        task = asyncio.create_task(controller.submit(attempt))
        await judge.started.wait()
        await controller.pause()
        judge.gate.set()
        outcome = await task
        await controller.resume()

        assert not outcome.applied
        with pytest.raises(InvalidStateTransition, match="already submitted"):
            await controller.submit(attempt)

        # A fresh attempt for the same item is still accepted
        retry = await _answer(controller)
        assert retry.applied


class TestEvents:
    @pytest.mark.asyncio
    async def test_listeners_receive_events(self, make_controller):
        controller = make_controller()
        events = []
        controller.add_listener(events.append)
        await _start(controller, item_count=1)

        await _answer(controller)

        kinds = [event.kind for event in events]
        assert kinds == [EventKind.TIER_CHANGED, EventKind.COMPLETED]
        assert events[-1].payload.items_answered == 1

    @pytest.mark.asyncio
    async def test_failing_listener_does_not_break_session(self, make_controller):
        controller = make_controller()

        def broken(event):
            raise RuntimeError("render failed")

        controller.add_listener(broken)
        await _start(controller, item_count=1)

        outcome = await _answer(controller)

        assert outcome.completed
        assert controller.status is SessionStatus.COMPLETED
