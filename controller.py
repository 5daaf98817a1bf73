"""
Session controller shared by the console trainer and the HTTP API.

One controller drives one learning session: it owns the scheduler, renders
the current question, checks answers and moves on to the next question,
either on request or automatically shortly after a correct answer.
"""
from __future__ import annotations

import logging
import random
import threading
import uuid
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

import catalog
from questions import Question, assemble_answer, check_answer, make_question
from scheduler import SchedulerConfig, SessionScheduler, SessionStats, shuffled

logger = logging.getLogger(__name__)

ADVANCE_DELAY = 1.2  # seconds before moving on after a correct answer

TimerFactory = Callable[[float, Callable[[], None]], threading.Timer]


class SessionError(Exception):
    """Base class for session misuse."""


class NoActiveQuestion(SessionError):
    pass


class QuestionAlreadyAnswered(SessionError):
    pass


class SessionClosed(SessionError):
    pass


class SessionNotFound(SessionError, KeyError):
    def __str__(self) -> str:
        return f"Session {self.args[0]!r} does not exist"


class DeferredCall:
    """Single-slot cancellable timer.

    Scheduling a call cancels whatever call is still pending, so at most one
    deferred call exists at a time.
    """

    def __init__(self, delay: float, timer_factory: Optional[TimerFactory] = None) -> None:
        self.delay = delay
        self._timer_factory = timer_factory or threading.Timer
        self._pending = None
        self._lock = threading.Lock()

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def schedule(self, callback: Callable[[], None]) -> None:
        def fire() -> None:
            with self._lock:
                if self._pending is not timer:
                    return
                self._pending = None
            callback()

        with self._lock:
            if self._pending is not None:
                self._pending.cancel()
            timer = self._timer_factory(self.delay, fire)
            timer.daemon = True
            self._pending = timer
        timer.start()

    def cancel(self) -> bool:
        with self._lock:
            if self._pending is None:
                return False
            self._pending.cancel()
            self._pending = None
            return True


@dataclass(frozen=True)
class AnswerResult:
    item_id: str
    correct: bool
    revealed: bool
    given_answer: str
    correct_answer: str
    mastered: bool
    complete: bool
    auto_advance: bool
    stats: SessionStats


class SessionController:
    def __init__(
        self,
        category: str,
        scheduler: SessionScheduler,
        rng: Optional[random.Random] = None,
        advance_delay: float = ADVANCE_DELAY,
        timer_factory: Optional[TimerFactory] = None,
        auto_advance: bool = True,
    ) -> None:
        self.category = category
        self.scheduler = scheduler
        self._rng = rng or random.Random()
        self._lock = threading.RLock()
        self._deferred = DeferredCall(advance_delay, timer_factory)
        self.auto_advance = auto_advance
        self.current: Optional[Question] = None
        self.answered = False
        self.finished = False
        self.closed = False
        self.questions_shown = 0

    @classmethod
    def start(
        cls,
        category: str,
        config: Optional[SchedulerConfig] = None,
        rng: Optional[random.Random] = None,
        **kwargs,
    ) -> "SessionController":
        rng = rng or random.Random()
        items = shuffled(catalog.list_items(category), rng)
        scheduler = SessionScheduler(items, config, rng)
        logger.info("Session started: %s (%d items)", category, len(items))
        return cls(category, scheduler, rng=rng, **kwargs)

    @property
    def advance_pending(self) -> bool:
        return self._deferred.pending

    def stats(self) -> SessionStats:
        return self.scheduler.stats()

    def is_complete(self) -> bool:
        return self.scheduler.is_complete()

    def advance(self) -> Optional[Question]:
        with self._lock:
            if self.closed:
                raise SessionClosed(self.category)
            self._deferred.cancel()
            return self._advance_locked()

    def _advance_locked(self) -> Optional[Question]:
        self.current = None
        self.answered = False
        if self.scheduler.is_complete():
            self._finish()
            return None
        item = self.scheduler.next_item()
        if item is None:
            self._finish()
            return None
        self.current = make_question(item, self.scheduler.items, self._rng)
        self.questions_shown += 1
        logger.debug("Question %s for %s", self.current.template, item.id)
        return self.current

    def _advance_from_timer(self) -> None:
        with self._lock:
            if self.closed or not self.answered:
                return
            self._advance_locked()

    def _finish(self) -> None:
        if not self.finished:
            self.finished = True
            logger.info("Session ended: %s", self.scheduler.stats().to_dict())

    def submit(
        self,
        answer: Optional[str] = None,
        tiles: Optional[Sequence[int]] = None,
        revealed: bool = False,
    ) -> AnswerResult:
        """Check the answer to the current question and record it.

        A revealed solution always counts as an incorrect answer.
        """
        with self._lock:
            if self.closed:
                raise SessionClosed(self.category)
            question = self.current
            if question is None:
                raise NoActiveQuestion("There is no question to answer.")
            if self.answered:
                raise QuestionAlreadyAnswered(question.item_id)
            if tiles is not None:
                answer = assemble_answer(question, tiles)
            elif answer is None and not revealed:
                raise ValueError("Either an answer or tiles are required.")
            answer = answer or ""

            correct = not revealed and check_answer(question, answer)
            self.scheduler.record_answer(question.item_id, correct)
            self.answered = True
            logger.debug(
                "%s: %r %s %r",
                "correct" if correct else "incorrect",
                answer,
                "=" if correct else "!=",
                question.correct_answer,
            )

            scheduled = False
            if correct and self.auto_advance:
                self._deferred.schedule(self._advance_from_timer)
                scheduled = True
            return AnswerResult(
                item_id=question.item_id,
                correct=correct,
                revealed=revealed,
                given_answer=answer,
                correct_answer=question.correct_answer,
                mastered=self.scheduler.is_mastered(question.item_id),
                complete=self.scheduler.is_complete(),
                auto_advance=scheduled,
                stats=self.scheduler.stats(),
            )

    def close(self) -> None:
        with self._lock:
            self._deferred.cancel()
            self.closed = True
            self.current = None


class SessionRegistry:
    """In-memory sessions keyed by id; nothing outlives the process."""

    def __init__(
        self,
        config: Optional[SchedulerConfig] = None,
        advance_delay: float = ADVANCE_DELAY,
        timer_factory: Optional[TimerFactory] = None,
    ) -> None:
        self.config = config or SchedulerConfig()
        self.advance_delay = advance_delay
        self.timer_factory = timer_factory
        self._sessions: Dict[str, SessionController] = {}
        self._lock = threading.Lock()

    def create(self, category: str, seed: Optional[int] = None) -> Tuple[str, SessionController]:
        rng = random.Random(seed)
        controller = SessionController.start(
            category,
            config=self.config,
            rng=rng,
            advance_delay=self.advance_delay,
            timer_factory=self.timer_factory,
        )
        session_id = uuid.uuid4().hex
        with self._lock:
            self._sessions[session_id] = controller
        return session_id, controller

    def get(self, session_id: str) -> SessionController:
        with self._lock:
            controller = self._sessions.get(session_id)
        if controller is None:
            raise SessionNotFound(session_id)
        return controller

    def remove(self, session_id: str) -> None:
        with self._lock:
            controller = self._sessions.pop(session_id, None)
        if controller is None:
            raise SessionNotFound(session_id)
        controller.close()

    def session_ids(self) -> List[str]:
        with self._lock:
            return list(self._sessions)

    def close_all(self) -> None:
        with self._lock:
            controllers = list(self._sessions.values())
            self._sessions.clear()
        for controller in controllers:
            controller.close()
