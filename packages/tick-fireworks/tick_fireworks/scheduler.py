"""Launch timing and deferred tasks, both keyed by millisecond timestamps."""
from __future__ import annotations

import heapq
import random as _random_mod
from typing import Callable

from tick_fireworks.types import Millis


class LaunchScheduler:
    """Decides when the next autonomous launch is due.

    ``next_launch`` of None is the "unset" sentinel: the first check after
    ``reset()`` always launches.
    """

    def __init__(
        self,
        interval_ms: tuple[float, float],
        rng: _random_mod.Random | None = None,
    ) -> None:
        lo, hi = interval_ms
        if lo < 0 or lo > hi:
            raise ValueError(f"interval must satisfy 0 <= min <= max, got {interval_ms}")
        self._interval = (lo, hi)
        self._rng = rng if rng is not None else _random_mod.Random()
        self._next: Millis | None = None

    @property
    def next_launch(self) -> Millis | None:
        return self._next

    @property
    def interval(self) -> tuple[float, float]:
        return self._interval

    def should_launch(self, now: Millis) -> bool:
        return self._next is None or now >= self._next

    def schedule_next(self, now: Millis) -> Millis:
        lo, hi = self._interval
        self._next = now + self._rng.uniform(lo, hi)
        return self._next

    def delay_until(self, when: Millis) -> None:
        self._next = when

    def reset(self) -> None:
        self._next = None


class DeferredQueue:
    """Callbacks that run once the tick driver reaches their due time.

    Tasks run in due order, ties in the order they were queued. A task queued
    while the queue drains runs in the same drain if it is already due.
    """

    def __init__(self) -> None:
        self._heap: list[tuple[Millis, int]] = []
        self._tasks: dict[int, Callable[[], object]] = {}
        self._counter = 0

    def __len__(self) -> int:
        return len(self._tasks)

    def call_at(self, due: Millis, callback: Callable[[], object]) -> int:
        task_id = self._counter
        self._counter += 1
        self._tasks[task_id] = callback
        heapq.heappush(self._heap, (due, task_id))
        return task_id

    def cancel(self, task_id: int) -> bool:
        return self._tasks.pop(task_id, None) is not None

    def next_due(self) -> Millis | None:
        while self._heap and self._heap[0][1] not in self._tasks:
            heapq.heappop(self._heap)
        return self._heap[0][0] if self._heap else None

    def run_due(self, now: Millis) -> int:
        ran = 0
        while self._heap and self._heap[0][0] <= now:
            _, task_id = heapq.heappop(self._heap)
            callback = self._tasks.pop(task_id, None)
            if callback is None:
                continue  # cancelled
            callback()
            ran += 1
        return ran

    def clear(self) -> None:
        self._heap.clear()
        self._tasks.clear()
