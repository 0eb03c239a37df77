"""Tests for frame clocks."""
from __future__ import annotations

import pytest

from tick_fireworks.clock import FrameClock, ManualFrameClock, PygameFrameClock, monotonic_ms


def test_manual_clock_delivers_once_per_request() -> None:
    clock = ManualFrameClock()
    seen = []
    clock.request(seen.append)
    assert clock.pending == 1
    assert clock.advance(10.0) == 1
    assert seen == [10.0]
    assert clock.advance(10.0) == 0
    assert seen == [10.0]


def test_requests_made_while_firing_go_to_next_frame() -> None:
    clock = ManualFrameClock()
    seen = []

    def again(now):
        seen.append(now)
        clock.request(again)

    clock.request(again)
    clock.advance(5.0)
    clock.advance(5.0)
    assert seen == [5.0, 10.0]
    assert clock.pending == 1


def test_cancel() -> None:
    clock = ManualFrameClock()
    seen = []
    handle = clock.request(seen.append)
    clock.cancel(handle)
    clock.cancel(handle)
    clock.cancel(999)
    clock.advance()
    assert seen == []


def test_time_and_run() -> None:
    clock = ManualFrameClock(start=100.0)
    assert clock.time() == 100.0
    clock.run(4, 25.0)
    assert clock.now == 200.0


def test_advance_backwards_rejected() -> None:
    with pytest.raises(ValueError):
        ManualFrameClock().advance(-1.0)


def test_clocks_satisfy_protocol() -> None:
    assert isinstance(ManualFrameClock(), FrameClock)
    assert isinstance(PygameFrameClock(), FrameClock)


def test_pygame_clock_pump_fires_with_monotonic_time() -> None:
    clock = PygameFrameClock(fps=1000)
    seen = []
    before = monotonic_ms()
    clock.request(seen.append)
    assert clock.pump() == 1
    assert len(seen) == 1
    assert seen[0] >= before


def test_pygame_clock_rejects_bad_fps() -> None:
    with pytest.raises(ValueError):
        PygameFrameClock(fps=0)


def test_pygame_clock_fps_reports_float() -> None:
    clock = PygameFrameClock()
    assert isinstance(clock.fps, float)
