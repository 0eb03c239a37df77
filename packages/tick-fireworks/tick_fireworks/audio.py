"""Audio engine: per-event synthesis graphs for launch and explosion sounds.

Sound is best effort. Every public call that would make noise returns a
``Voice`` when something was played and ``None`` otherwise; device and
synthesis failures are logged at debug level and never raised.
"""
from __future__ import annotations

import logging
import random as _random_mod
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

import numpy as np
import pygame
from numpy.typing import NDArray

from tick_fireworks import synth

logger = logging.getLogger(__name__)

RUNNING = "running"
SUSPENDED = "suspended"
CLOSED = "closed"

# Errors a device or the synthesis code may raise while building or playing.
AUDIO_ERRORS: tuple[type[BaseException], ...] = (
    pygame.error,
    OSError,
    RuntimeError,
    ValueError,
)


@runtime_checkable
class AudioContext(Protocol):
    """An opened output device."""

    @property
    def sample_rate(self) -> int: ...

    @property
    def state(self) -> str:
        """One of "running", "suspended", or "closed"."""
        ...

    def resume(self) -> None: ...

    def play(self, samples: NDArray[np.float32]) -> None:
        """Queue an (n, 2) float buffer in [-1, 1] for immediate playback."""
        ...


@runtime_checkable
class AudioDevice(Protocol):

    def create_context(self) -> AudioContext | None:
        """Open the output. None (or an exception) means unavailable."""
        ...


@dataclass(frozen=True)
class Voice:
    """The rendered stereo buffer of one sound event."""

    kind: str
    samples: NDArray[np.float32]
    sample_rate: int
    pan: float

    @property
    def duration(self) -> float:
        return len(self.samples) / self.sample_rate


# --- Graph builders ---

def build_launch_voice(
    sample_rate: int, pan: float, rng: _random_mod.Random
) -> Voice:
    """Triangle sweep down to 72 Hz, high-passed at 130 Hz, 320 ms long."""
    lifetime = 0.32
    freq = synth.exponential_curve(
        [(0.0, rng.uniform(180.0, 260.0)), (0.28, 72.0)], lifetime, sample_rate
    )
    tone = synth.highpass(synth.oscillator("triangle", freq, sample_rate), 130.0, sample_rate)
    gain = synth.exponential_curve(
        [(0.0, 0.0001), (0.02, 0.07), (0.3, 0.0001)], lifetime, sample_rate
    )
    stereo = synth.pan(tone * gain, pan).astype(np.float32)
    return Voice("launch", stereo, sample_rate, pan)


def build_explosion_voice(
    sample_rate: int,
    pan: float,
    intensity: float,
    noise: NDArray[np.float32],
    rng: _random_mod.Random,
    crackle: bool = True,
) -> Voice:
    """Band-passed noise burst, sine boom, and optional square crackles."""
    volume = min(max(intensity, 0.45), 1.2)

    noise_life = 0.45
    burst = noise[:synth.sample_count(noise_life, sample_rate)]
    burst = synth.bandpass(burst, rng.uniform(650.0, 1400.0), 0.8, sample_rate)
    burst = burst * synth.exponential_curve(
        [(0.0, 0.0001), (0.012, 0.2 * volume), (0.42, 0.0001)],
        len(burst) / sample_rate,
        sample_rate,
    )

    boom_life = 0.4
    boom_freq = synth.exponential_curve(
        [(0.0, rng.uniform(120.0, 170.0)), (0.36, 42.0)], boom_life, sample_rate
    )
    boom = synth.oscillator("sine", boom_freq, sample_rate) * synth.exponential_curve(
        [(0.0, 0.0001), (0.02, 0.11 * volume), (0.38, 0.0001)], boom_life, sample_rate
    )

    layers: list[tuple[int, np.ndarray]] = [(0, burst), (0, boom)]
    if crackle:
        for _ in range(rng.randint(1, 2)):
            layers.append(
                (
                    synth.sample_count(rng.uniform(0.03, 0.18), sample_rate),
                    _crackle(rng.uniform(900.0, 2100.0), volume, sample_rate),
                )
            )

    stereo = synth.pan(synth.mix(layers), pan).astype(np.float32)
    return Voice("explosion", stereo, sample_rate, pan)


def _crackle(pitch: float, volume: float, sample_rate: int) -> np.ndarray:
    life = 0.05
    freq = np.full(synth.sample_count(life, sample_rate), pitch)
    env = synth.exponential_curve(
        [(0.0, 0.0001), (0.004, 0.05 * volume), (0.05, 0.0001)], life, sample_rate
    )
    return synth.oscillator("square", freq, sample_rate) * env


# --- Engine ---

class AudioEngine:
    """Owns the lazily opened output context and the cached noise buffer.

    The context is only opened by ``prime()``, the caller's unlock gesture.
    Until then, and whenever the context is not running, sounds are skipped.
    """

    def __init__(
        self,
        device: AudioDevice | None,
        *,
        pan_limit: float = 0.9,
        rng: _random_mod.Random | None = None,
        noise_rng: np.random.Generator | None = None,
    ) -> None:
        self._device = device
        self._context: AudioContext | None = None
        self._pan_limit = pan_limit
        self._rng = rng if rng is not None else _random_mod.Random()
        self._noise_rng = noise_rng if noise_rng is not None else np.random.default_rng()
        self._noise: NDArray[np.float32] | None = None
        self._noise_rate: int | None = None
        self.width = 0.0
        self.voices_played = 0

    @property
    def context(self) -> AudioContext | None:
        return self._context

    @property
    def available(self) -> bool:
        return self._running_context() is not None

    def prime(self) -> bool:
        """Open and resume the output context. Returns True when running."""
        if self._device is None:
            return False
        try:
            if self._context is None:
                self._context = self._device.create_context()
                if self._context is None:
                    logger.debug("audio output unavailable")
                    return False
            if self._context.state != RUNNING:
                self._context.resume()
            return self._context.state == RUNNING
        except AUDIO_ERRORS as exc:
            logger.debug("audio prime failed: %s", exc)
            return False

    def pan_for(self, x: float) -> float:
        if not self.width:
            return 0.0
        normalized = (x / self.width) * 2.0 - 1.0
        return max(-self._pan_limit, min(self._pan_limit, normalized))

    def noise_buffer(self, sample_rate: int) -> NDArray[np.float32]:
        """Decaying noise shared by all explosions at this sample rate."""
        if self._noise is None or self._noise_rate != sample_rate:
            self._noise = synth.decaying_noise(self._noise_rng, sample_rate)
            self._noise_rate = sample_rate
        return self._noise

    def launch_sound(self, x: float) -> Voice | None:
        context = self._running_context()
        if context is None:
            return None
        try:
            voice = build_launch_voice(context.sample_rate, self.pan_for(x), self._rng)
            context.play(voice.samples)
        except AUDIO_ERRORS as exc:
            logger.debug("launch sound dropped: %s", exc)
            return None
        self.voices_played += 1
        return voice

    def explosion_sound(
        self, x: float, intensity: float = 1.0, crackle: bool = True
    ) -> Voice | None:
        context = self._running_context()
        if context is None:
            return None
        try:
            rate = context.sample_rate
            voice = build_explosion_voice(
                rate,
                self.pan_for(x),
                intensity,
                self.noise_buffer(rate),
                self._rng,
                crackle=crackle,
            )
            context.play(voice.samples)
        except AUDIO_ERRORS as exc:
            logger.debug("explosion sound dropped: %s", exc)
            return None
        self.voices_played += 1
        return voice

    def _running_context(self) -> AudioContext | None:
        context = self._context
        if context is None:
            return None
        try:
            if context.state != RUNNING:
                return None
        except AUDIO_ERRORS:
            return None
        return context


# --- Devices ---

class NullAudioDevice:
    """A device that never opens. Keeps the display silent."""

    def create_context(self) -> AudioContext | None:
        return None


class MemoryContext:
    """Context that keeps played buffers in memory."""

    def __init__(self, sample_rate: int, state: str = RUNNING, locked: bool = False) -> None:
        self.sample_rate = sample_rate
        self.state = state
        self.locked = locked
        self.played: list[NDArray[np.float32]] = []

    def resume(self) -> None:
        if not self.locked:
            self.state = RUNNING

    def play(self, samples: NDArray[np.float32]) -> None:
        self.played.append(samples)


class MemoryAudioDevice:
    """Device whose contexts record instead of playing.

    Conforms to the AudioDevice protocol. For tests and headless runs.

    Args:
        sample_rate: Rate reported by created contexts.
        state: Initial context state, "running" or "suspended".
        locked: When True, ``resume()`` cannot leave the suspended state.
        error: Raised from ``create_context`` instead of opening, if given.
    """

    def __init__(
        self,
        sample_rate: int = 8000,
        state: str = RUNNING,
        locked: bool = False,
        error: BaseException | None = None,
    ) -> None:
        self.sample_rate = sample_rate
        self._state = state
        self._locked = locked
        self._error = error
        self.contexts: list[MemoryContext] = []

    def create_context(self) -> MemoryContext:
        if self._error is not None:
            raise self._error
        context = MemoryContext(self.sample_rate, self._state, self._locked)
        self.contexts.append(context)
        return context


class MixerContext:
    """``pygame.mixer`` as an output context."""

    def __init__(self, sample_rate: int, channels: int) -> None:
        self._sample_rate = sample_rate
        self._channels = channels

    @property
    def sample_rate(self) -> int:
        return self._sample_rate

    @property
    def state(self) -> str:
        return RUNNING if pygame.mixer.get_init() else CLOSED

    def resume(self) -> None:
        if not pygame.mixer.get_init():
            pygame.mixer.init(frequency=self._sample_rate, size=-16, channels=self._channels)

    def play(self, samples: NDArray[np.float32]) -> None:
        pcm = synth.to_pcm16(samples)
        if self._channels == 1:
            pcm = np.ascontiguousarray(pcm.mean(axis=1).astype(np.int16))
        pygame.sndarray.make_sound(pcm).play()


class PygameAudioDevice:
    def __init__(
        self, sample_rate: int = synth.SAMPLE_RATE, buffer: int = 512, voices: int = 32
    ) -> None:
        self._sample_rate = sample_rate
        self._buffer = buffer
        self._voices = voices

    def create_context(self) -> AudioContext | None:
        if not pygame.mixer.get_init():
            try:
                pygame.mixer.init(
                    frequency=self._sample_rate, size=-16, channels=2, buffer=self._buffer
                )
            except pygame.error as exc:
                logger.debug("pygame.mixer.init failed: %s", exc)
                return None
        init = pygame.mixer.get_init()
        if init is None:
            return None
        frequency, size, channels = init
        if size != -16:
            logger.debug("mixer opened with sample size %s, expected -16", size)
            return None
        pygame.mixer.set_num_channels(self._voices)
        return MixerContext(frequency, channels)
