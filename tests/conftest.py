import random
from typing import Callable, List

import pytest

from catalog import Letter
from scheduler import SchedulerConfig, SessionScheduler


class ManualTimer:
    """Stand-in for threading.Timer that only fires when told to."""

    def __init__(self, interval: float, function: Callable[[], None]):
        self.interval = interval
        self.function = function
        self.daemon = False
        self.started = False
        self.cancelled = False

    def start(self):
        self.started = True

    def cancel(self):
        self.cancelled = True

    def fire(self):
        if self.started and not self.cancelled:
            self.function()


class ManualTimerFactory:
    def __init__(self):
        self.timers: List[ManualTimer] = []

    def __call__(self, interval, function):
        timer = ManualTimer(interval, function)
        self.timers.append(timer)
        return timer

    @property
    def last(self) -> ManualTimer:
        return self.timers[-1]


@pytest.fixture
def timer_factory():
    return ManualTimerFactory()


def make_letters(count: int) -> List[Letter]:
    return [
        Letter(id=f"t{idx}", source_text=f"g{idx}", target_text=f"r{idx}")
        for idx in range(1, count + 1)
    ]


@pytest.fixture
def make_scheduler():
    def factory(
        count: int = 5,
        mastery_threshold: int = 3,
        window_capacity: int = 5,
        repeat_spacing: int = 3,
        seed: int = 0,
    ) -> SessionScheduler:
        config = SchedulerConfig(
            mastery_threshold=mastery_threshold,
            window_capacity=window_capacity,
            repeat_spacing=repeat_spacing,
        )
        return SessionScheduler(make_letters(count), config, random.Random(seed))

    return factory
