"""FireworksDisplay - owns the sky, drives the tick/render loop, triggers sound."""
from __future__ import annotations

import logging
import random as _random_mod
from typing import Callable

from tick_fireworks.audio import AudioEngine
from tick_fireworks.clock import FrameClock, monotonic_ms
from tick_fireworks.config import ShowConfig
from tick_fireworks.entities import Particle, Projectile, spawn_projectile
from tick_fireworks.render import Surface, render, resize_surface
from tick_fireworks.scheduler import DeferredQueue, LaunchScheduler
from tick_fireworks.sky import Sky
from tick_fireworks.systems import default_systems, run_systems
from tick_fireworks.types import (
    DisplayState,
    FrameContext,
    Millis,
    SurfaceUnavailableError,
    System,
)

logger = logging.getLogger(__name__)


class FireworksDisplay:
    """Unattended fireworks show bound to one surface and one frame clock.

    State machine: IDLE -> RUNNING <-> PAUSED, and RUNNING/PAUSED -> STOPPED.
    ``start()`` also works from STOPPED. Transitions that do not apply to the
    current state are ignored.

    Args:
        surface: Where frames are drawn. Required.
        frame_clock: Delivers ``tick`` once per display frame. Required.
        time_source: Monotonic clock in milliseconds, on the same timeline as
            the timestamps the frame clock passes to ``tick``.
        audio: Sound engine; None keeps the show silent.
        reduced_motion: Selects the reduced-motion preset. Read once here.
        config: Explicit tuning; overrides ``reduced_motion`` when given.
        rng: Randomness for launches and bursts.
    """

    def __init__(
        self,
        surface: Surface | None,
        frame_clock: FrameClock | None,
        time_source: Callable[[], Millis] = monotonic_ms,
        *,
        audio: AudioEngine | None = None,
        reduced_motion: bool = False,
        config: ShowConfig | None = None,
        rng: _random_mod.Random | None = None,
    ) -> None:
        if surface is None or not isinstance(surface, Surface):
            raise SurfaceUnavailableError("a drawing surface is required")
        if frame_clock is None or not isinstance(frame_clock, FrameClock):
            raise SurfaceUnavailableError("a frame clock is required")

        self._surface = surface
        self._frame_clock = frame_clock
        self._time = time_source
        self._audio = audio
        self._config = config if config is not None else ShowConfig.for_motion(reduced_motion)
        self._rng = rng if rng is not None else _random_mod.Random()

        self._sky = Sky()
        self._scheduler = LaunchScheduler(self._config.launch_interval_ms, self._rng)
        self._deferred = DeferredQueue()
        self._systems: list[System] = default_systems(self._on_explode)

        self._state = DisplayState.IDLE
        self._frame: int | None = None
        self._pending_resize: int | None = None
        self._tick_number = 0

    # --- Properties ---

    @property
    def state(self) -> DisplayState:
        return self._state

    @property
    def sky(self) -> Sky:
        return self._sky

    @property
    def config(self) -> ShowConfig:
        return self._config

    @property
    def scheduler(self) -> LaunchScheduler:
        return self._scheduler

    @property
    def deferred(self) -> DeferredQueue:
        return self._deferred

    @property
    def tick_number(self) -> int:
        return self._tick_number

    @property
    def audio(self) -> AudioEngine | None:
        return self._audio

    # --- Lifecycle ---

    def start(self) -> None:
        if self._state not in (DisplayState.IDLE, DisplayState.STOPPED):
            return
        self._state = DisplayState.RUNNING
        self._scheduler.reset()
        self._launch_if_due(self._time())
        self._request_frame()
        logger.info("fireworks started (reduced_motion=%s)", self._config.reduced_motion)

    def pause(self) -> None:
        if self._state is not DisplayState.RUNNING:
            return
        self._cancel_frame()
        self._state = DisplayState.PAUSED
        logger.info("fireworks paused")

    def resume(self) -> None:
        if self._state is not DisplayState.PAUSED:
            return
        self._scheduler.delay_until(self._time() + self._config.resume_offset_ms)
        self._state = DisplayState.RUNNING
        self._request_frame()
        logger.info("fireworks resumed")

    def stop(self) -> None:
        if self._state not in (DisplayState.RUNNING, DisplayState.PAUSED):
            return
        self._cancel_frame()
        self._deferred.clear()
        self._pending_resize = None
        self._state = DisplayState.STOPPED
        logger.info("fireworks stopped")

    def set_visible(self, visible: bool) -> None:
        """Visibility hook for hosts: hidden pauses, shown resumes."""
        if visible:
            self.resume()
        else:
            self.pause()

    def prime_audio(self) -> bool:
        """Forward the caller's unlock gesture to the audio engine."""
        return self._audio.prime() if self._audio is not None else False

    # --- Surface ---

    def resize(self, width: float, height: float, density: float = 1.0) -> None:
        """Resize the surface; debounced while the show is running.

        The latest call wins: a newer request drops any pending one.
        """
        if self._pending_resize is not None:
            self._deferred.cancel(self._pending_resize)
            self._pending_resize = None
        if self._state is not DisplayState.RUNNING:
            self._apply_resize(width, height, density)
            return
        self._pending_resize = self._deferred.call_at(
            self._time() + self._config.resize_debounce_ms,
            lambda: self._apply_resize(width, height, density),
        )

    def _apply_resize(self, width: float, height: float, density: float) -> None:
        self._pending_resize = None
        if not resize_surface(self._surface, width, height, density, self._config.max_density):
            return
        self._sky.width = width
        self._sky.height = height
        if self._audio is not None:
            self._audio.width = width

    # --- Launching ---

    def launch(self) -> Projectile:
        """Spawn one projectile now and play its launch sound."""
        projectile = spawn_projectile(
            self._sky.width, self._sky.height, self._rng, self._config
        )
        self._sky.add_projectile(projectile)
        if self._audio is not None:
            self._audio.launch_sound(projectile.origin[0])
        return projectile

    def _launch_burst(self, now: Millis) -> None:
        self.launch()
        chance = self._config.salvo_chance
        if chance > 0 and self._rng.random() < chance:
            delay = self._rng.uniform(*self._config.salvo_delay_ms)
            self._deferred.call_at(now + delay, self.launch)

    def _launch_if_due(self, now: Millis) -> bool:
        if not self._scheduler.should_launch(now):
            return False
        self._launch_burst(now)
        self._scheduler.schedule_next(now)
        return True

    def _on_explode(
        self,
        sky: Sky,
        ctx: FrameContext,
        projectile: Projectile,
        particles: list[Particle],
    ) -> None:
        if self._audio is None:
            return
        self._audio.explosion_sound(
            projectile.position[0],
            len(particles) / ctx.config.intensity_divisor,
            crackle=ctx.config.crackle,
        )

    # --- Frame loop ---

    def tick(self, now: Millis) -> None:
        """Frame callback: deferred tasks, launch decision, simulation, render."""
        self._frame = None
        if self._state is not DisplayState.RUNNING:
            return
        self._tick_number += 1
        self._deferred.run_due(now)
        self._launch_if_due(now)
        ctx = FrameContext(
            tick_number=self._tick_number,
            now=now,
            width=self._sky.width,
            height=self._sky.height,
            config=self._config,
            random=self._rng,
        )
        run_systems(self._systems, self._sky, ctx)
        render(self._sky, self._surface)
        if self._state is DisplayState.RUNNING:
            self._request_frame()

    def _request_frame(self) -> None:
        if self._frame is None:
            self._frame = self._frame_clock.request(self.tick)

    def _cancel_frame(self) -> None:
        if self._frame is not None:
            self._frame_clock.cancel(self._frame)
            self._frame = None
