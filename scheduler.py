"""
Learning-session scheduler.

Decides which item to present next, tracks per-item streaks of correct
answers and retires an item once its streak reaches the mastery threshold.
Only a bounded window of unmastered items is in rotation at any time, and
recently presented items are held back so the same item does not come up
again immediately.
"""
from __future__ import annotations

import logging
import os
import random
from collections import deque
from dataclasses import asdict, dataclass, replace
from typing import Deque, Dict, List, Mapping, Optional, Sequence, Tuple, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from catalog import Item

logger = logging.getLogger(__name__)

MASTERY_THRESHOLD = 3
WINDOW_CAPACITY = 10
REPEAT_SPACING = 5

ENV_PREFIX = "GEO_TRAINER_"

T = TypeVar("T")


class SchedulerError(Exception):
    """Base class for scheduler misuse."""


class UnknownItem(SchedulerError, KeyError):
    """An answer was reported for an id the scheduler never issued."""

    def __init__(self, item_id: str) -> None:
        super().__init__(item_id)
        self.item_id = item_id

    def __str__(self) -> str:
        return f"Unknown item id: {self.item_id!r}"


class SchedulerConfig(BaseModel):
    """Difficulty knobs; must stay fixed for the lifetime of a session."""

    model_config = ConfigDict(frozen=True)

    mastery_threshold: int = Field(MASTERY_THRESHOLD, ge=1)
    window_capacity: int = Field(WINDOW_CAPACITY, ge=1)
    repeat_spacing: int = Field(REPEAT_SPACING, ge=0)


def config_from_env(environ: Optional[Mapping[str, str]] = None) -> SchedulerConfig:
    env = os.environ if environ is None else environ
    values: Dict[str, str] = {}
    for field_name in SchedulerConfig.model_fields:
        raw = env.get(ENV_PREFIX + field_name.upper())
        if raw is not None and raw.strip():
            values[field_name] = raw.strip()
    return SchedulerConfig(**values)


def shuffled(items: Sequence[T], rng: random.Random) -> List[T]:
    result = list(items)
    rng.shuffle(result)
    return result


def pick_random(items: Sequence[T], count: int, rng: random.Random) -> List[T]:
    """Return up to ``count`` distinct elements in random order."""
    if count <= 0 or not items:
        return []
    return rng.sample(list(items), min(count, len(items)))


def rounded_percent(part: int, whole: int) -> int:
    # Half-up rounding, so 12.5% reads as 13%.
    if whole <= 0:
        return 0
    return (200 * part + whole) // (2 * whole)


@dataclass
class ItemProgress:
    consecutive_correct: int = 0
    last_presented_at: int = 0


@dataclass(frozen=True)
class AnswerRecord:
    item_id: str
    is_correct: bool
    sequence: int


@dataclass(frozen=True)
class SessionStats:
    total: int
    mastered: int
    remaining: int
    answered: int
    correct: int
    accuracy_percent: int
    progress_percent: int

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


class SessionScheduler:
    """Per-session item selection with a bounded active window.

    ``items`` should already be filtered to one category and shuffled; the
    order is kept as the tie-break when the window is refilled.
    """

    def __init__(
        self,
        items: Sequence[Item],
        config: Optional[SchedulerConfig] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or SchedulerConfig()
        self._rng = rng or random.Random()
        self._items: List[Item] = list(items)
        self._progress: Dict[str, ItemProgress] = {}
        for item in self._items:
            if item.id in self._progress:
                raise ValueError(f"Duplicate item id: {item.id!r}")
            self._progress[item.id] = ItemProgress()
        self._window: List[Item] = []
        self._recent: Deque[str] = deque(maxlen=self.config.repeat_spacing)
        self._answers: List[AnswerRecord] = []
        self._clock = 0
        self._refill_window()
        logger.debug(
            "Scheduler ready: %d items, window %s",
            len(self._items),
            [item.id for item in self._window],
        )

    @property
    def items(self) -> Tuple[Item, ...]:
        return tuple(self._items)

    @property
    def window(self) -> Tuple[Item, ...]:
        return tuple(self._window)

    @property
    def recent(self) -> Tuple[str, ...]:
        return tuple(self._recent)

    @property
    def answers(self) -> Tuple[AnswerRecord, ...]:
        return tuple(self._answers)

    def progress(self, item_id: str) -> ItemProgress:
        state = self._progress.get(item_id)
        if state is None:
            raise UnknownItem(item_id)
        return replace(state)

    def is_mastered(self, item_id: str) -> bool:
        return self.progress(item_id).consecutive_correct >= self.config.mastery_threshold

    def _unmastered(self) -> List[Item]:
        threshold = self.config.mastery_threshold
        return [
            item for item in self._items
            if self._progress[item.id].consecutive_correct < threshold
        ]

    def _refill_window(self) -> None:
        in_window = {item.id for item in self._window}
        candidates = [item for item in self._unmastered() if item.id not in in_window]
        while len(self._window) < self.config.window_capacity and candidates:
            # min() keeps the first of equal keys, so ties go to catalog order.
            oldest = min(candidates, key=lambda item: self._progress[item.id].last_presented_at)
            candidates.remove(oldest)
            self._window.append(oldest)

    def next_item(self) -> Optional[Item]:
        if not self._window:
            return None
        candidates = [item for item in self._window if item.id not in self._recent]
        if not candidates:
            candidates = list(self._window)
        chosen = self._rng.choice(candidates)
        self._clock += 1
        self._progress[chosen.id].last_presented_at = self._clock
        self._recent.append(chosen.id)
        logger.debug(
            "Selected %s | candidates: %d | recent: %s",
            chosen.id,
            len(candidates),
            list(self._recent),
        )
        return chosen

    def record_answer(self, item_id: str, is_correct: bool) -> None:
        state = self._progress.get(item_id)
        if state is None:
            raise UnknownItem(item_id)
        threshold = self.config.mastery_threshold
        if state.consecutive_correct >= threshold:
            logger.debug("Ignoring answer for mastered item %s", item_id)
            return

        previous = state.consecutive_correct
        if is_correct:
            state.consecutive_correct += 1
            if state.consecutive_correct >= threshold:
                self._window = [item for item in self._window if item.id != item_id]
                self._refill_window()
                logger.info("Item %s mastered", item_id)
                logger.debug("Window refilled: %s", [item.id for item in self._window])
        else:
            state.consecutive_correct = 0

        self._answers.append(
            AnswerRecord(item_id=item_id, is_correct=is_correct, sequence=len(self._answers) + 1)
        )
        logger.debug(
            "Progress %s: %d -> %d/%d",
            item_id,
            previous,
            state.consecutive_correct,
            threshold,
        )

    def is_complete(self) -> bool:
        return not self._unmastered()

    def stats(self) -> SessionStats:
        threshold = self.config.mastery_threshold
        total = len(self._items)
        mastered = total - len(self._unmastered())
        answered = len(self._answers)
        correct = sum(1 for record in self._answers if record.is_correct)
        streak_sum = sum(
            min(state.consecutive_correct, threshold) for state in self._progress.values()
        )
        return SessionStats(
            total=total,
            mastered=mastered,
            remaining=total - mastered,
            answered=answered,
            correct=correct,
            accuracy_percent=rounded_percent(correct, answered),
            progress_percent=rounded_percent(streak_sum, total * threshold),
        )
