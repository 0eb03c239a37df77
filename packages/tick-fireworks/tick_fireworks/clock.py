"""Frame clocks and the monotonic time source."""
from __future__ import annotations

import time
from typing import Callable, Protocol, runtime_checkable

import pygame

from tick_fireworks.types import Millis

FrameCallback = Callable[[Millis], None]


def monotonic_ms() -> Millis:
    return time.monotonic() * 1000.0


@runtime_checkable
class FrameClock(Protocol):
    """Delivers one callback per available display frame."""

    def request(self, callback: FrameCallback) -> int:
        """Schedule callback for the next frame and return a handle."""
        ...

    def cancel(self, handle: int) -> None:
        """Drop a pending request. Unknown handles are ignored."""
        ...


class _FrameQueue:
    def __init__(self) -> None:
        self._pending: dict[int, FrameCallback] = {}
        self._next_handle = 1

    @property
    def pending(self) -> int:
        return len(self._pending)

    def request(self, callback: FrameCallback) -> int:
        handle = self._next_handle
        self._next_handle += 1
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    def _fire(self, now: Millis) -> int:
        # Requests made while firing belong to the next frame.
        batch = self._pending
        self._pending = {}
        for callback in batch.values():
            callback(now)
        return len(batch)


class ManualFrameClock(_FrameQueue):
    """Frame clock driven by explicit ``advance`` calls.

    Also serves as the time source: pass ``clock.time`` wherever a
    ``Callable[[], float]`` is expected so both agree on "now".
    """

    def __init__(self, start: Millis = 0.0) -> None:
        super().__init__()
        self._now = start

    @property
    def now(self) -> Millis:
        return self._now

    def time(self) -> Millis:
        return self._now

    def advance(self, ms: Millis = 1000.0 / 60.0) -> int:
        """Move time forward and deliver one frame. Returns callbacks fired."""
        if ms < 0:
            raise ValueError("cannot advance a clock backwards")
        self._now += ms
        return self._fire(self._now)

    def run(self, frames: int, ms: Millis = 1000.0 / 60.0) -> None:
        for _ in range(frames):
            self.advance(ms)


class PygameFrameClock(_FrameQueue):
    """Frame clock for a pygame main loop.

    Call ``pump()`` once per loop iteration; it paces the loop to ``fps`` and
    delivers pending callbacks stamped with ``monotonic_ms()``.
    """

    def __init__(self, fps: int = 60) -> None:
        if fps <= 0:
            raise ValueError("fps must be positive")
        super().__init__()
        self._fps = fps
        self._clock = pygame.time.Clock()

    @property
    def fps(self) -> float:
        return self._clock.get_fps()

    def pump(self) -> int:
        self._clock.tick(self._fps)
        return self._fire(monotonic_ms())
