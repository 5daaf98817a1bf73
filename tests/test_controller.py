"""
Tests for the session controller and its auto-advance timer.
"""
import random

import pytest

from controller import (
    DeferredCall,
    NoActiveQuestion,
    QuestionAlreadyAnswered,
    SessionClosed,
    SessionController,
    SessionNotFound,
    SessionRegistry,
)
from scheduler import SchedulerConfig


def start(category="letters", timer_factory=None, seed=1, **config):
    return SessionController.start(
        category,
        config=SchedulerConfig(**config),
        rng=random.Random(seed),
        timer_factory=timer_factory,
    )


class TestDeferredCall:

    def test_new_call_cancels_pending(self, timer_factory):
        calls = []
        deferred = DeferredCall(0.5, timer_factory)
        deferred.schedule(lambda: calls.append("first"))
        deferred.schedule(lambda: calls.append("second"))

        first, second = timer_factory.timers
        assert first.cancelled
        assert first.interval == 0.5
        first.fire()
        second.fire()
        assert calls == ["second"]
        assert not deferred.pending

    def test_stale_timer_does_not_run(self, timer_factory):
        calls = []
        deferred = DeferredCall(1, timer_factory)
        deferred.schedule(lambda: calls.append("stale"))
        stale = timer_factory.last
        deferred.schedule(lambda: calls.append("fresh"))
        # Simulate a timer that was already running when it got cancelled.
        stale.cancelled = False
        stale.fire()
        assert calls == []

    def test_cancel(self, timer_factory):
        deferred = DeferredCall(1, timer_factory)
        assert deferred.cancel() is False
        deferred.schedule(lambda: None)
        assert deferred.pending
        assert deferred.cancel() is True
        assert timer_factory.last.cancelled
        assert not deferred.pending

    def test_timers_are_daemons(self, timer_factory):
        DeferredCall(1, timer_factory).schedule(lambda: None)
        assert timer_factory.last.daemon is True
        assert timer_factory.last.started


class TestSubmit:

    def test_correct_answer_schedules_advance(self, timer_factory):
        controller = start(timer_factory=timer_factory)
        question = controller.advance()
        result = controller.submit(answer=question.correct_answer)

        assert result.correct
        assert result.auto_advance
        assert controller.advance_pending
        assert controller.answered

        timer_factory.last.fire()
        assert controller.current is not None
        assert not controller.answered
        assert controller.questions_shown == 2

    def test_wrong_answer_waits_for_next(self, timer_factory):
        controller = start(timer_factory=timer_factory)
        controller.advance()
        result = controller.submit(answer="definitely wrong")

        assert not result.correct
        assert not result.auto_advance
        assert not controller.advance_pending
        assert result.stats.answered == 1
        assert result.stats.correct == 0
        assert timer_factory.timers == []

    def test_revealed_counts_as_wrong(self, timer_factory):
        controller = start(timer_factory=timer_factory)
        question = controller.advance()
        result = controller.submit(answer=question.correct_answer, revealed=True)
        assert not result.correct
        assert result.revealed
        assert controller.scheduler.progress(question.item_id).consecutive_correct == 0

    def test_manual_advance_cancels_timer(self, timer_factory):
        controller = start(timer_factory=timer_factory)
        question = controller.advance()
        controller.submit(answer=question.correct_answer)
        pending = timer_factory.last

        controller.advance()
        assert pending.cancelled
        assert not controller.advance_pending
        assert controller.questions_shown == 2

    def test_close_cancels_timer(self, timer_factory):
        controller = start(timer_factory=timer_factory)
        question = controller.advance()
        controller.submit(answer=question.correct_answer)
        controller.close()

        assert timer_factory.last.cancelled
        assert controller.current is None
        with pytest.raises(SessionClosed):
            controller.advance()

    def test_submit_twice(self, timer_factory):
        controller = start(timer_factory=timer_factory)
        question = controller.advance()
        controller.submit(answer=question.correct_answer)
        with pytest.raises(QuestionAlreadyAnswered):
            controller.submit(answer=question.correct_answer)

    def test_submit_without_question(self):
        controller = start()
        with pytest.raises(NoActiveQuestion):
            controller.submit(answer="а")

    def test_submit_requires_answer(self):
        controller = start()
        controller.advance()
        with pytest.raises(ValueError):
            controller.submit()

    def test_no_auto_advance_when_disabled(self, timer_factory):
        controller = SessionController.start(
            "letters",
            rng=random.Random(0),
            timer_factory=timer_factory,
            auto_advance=False,
        )
        question = controller.advance()
        result = controller.submit(answer=question.correct_answer)
        assert result.correct
        assert not result.auto_advance
        assert timer_factory.timers == []


class TestFullSession:

    @pytest.mark.parametrize("category", ["letters", "words"])
    def test_answering_everything_correctly_finishes(self, category, timer_factory):
        controller = start(
            category,
            timer_factory=timer_factory,
            mastery_threshold=1,
            window_capacity=5,
            repeat_spacing=3,
        )
        total = controller.stats().total
        answered = 0
        question = controller.advance()
        while question is not None:
            result = controller.submit(answer=question.correct_answer)
            assert result.correct
            answered += 1
            assert answered <= total
            question = controller.advance()

        assert answered == total
        assert controller.finished
        assert controller.is_complete()
        stats = controller.stats()
        assert stats.mastered == total
        assert stats.accuracy_percent == 100

    def test_mastered_flag(self):
        controller = start(mastery_threshold=1)
        question = controller.advance()
        result = controller.submit(answer=question.correct_answer)
        assert result.mastered
        assert not result.complete


class TestRegistry:

    def test_create_and_remove(self, timer_factory):
        registry = SessionRegistry(timer_factory=timer_factory)
        session_id, controller = registry.create("letters", seed=3)
        assert registry.get(session_id) is controller
        assert registry.session_ids() == [session_id]

        registry.remove(session_id)
        assert controller.closed
        with pytest.raises(SessionNotFound):
            registry.get(session_id)
        with pytest.raises(SessionNotFound):
            registry.remove(session_id)

    def test_same_seed_same_questions(self):
        registry = SessionRegistry()
        _, first = registry.create("words", seed=8)
        _, second = registry.create("words", seed=8)
        for _ in range(5):
            a = first.advance()
            b = second.advance()
            assert (a.item_id, a.template, a.options, a.pool) == (b.item_id, b.template, b.options, b.pool)
        registry.close_all()
        assert registry.session_ids() == []

    def test_unknown_category(self):
        with pytest.raises(ValueError):
            SessionRegistry().create("numbers")
