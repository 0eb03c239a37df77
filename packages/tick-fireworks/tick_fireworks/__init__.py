"""tick-fireworks - An unattended fireworks display engine on a frame clock."""
from __future__ import annotations

from tick_fireworks import vec
from tick_fireworks.audio import (
    AudioEngine,
    MemoryAudioDevice,
    NullAudioDevice,
    PygameAudioDevice,
    Voice,
)
from tick_fireworks.clock import ManualFrameClock, PygameFrameClock, monotonic_ms
from tick_fireworks.config import ShowConfig
from tick_fireworks.display import FireworksDisplay
from tick_fireworks.entities import Particle, Projectile
from tick_fireworks.render import (
    PygameSurface,
    RecordingSurface,
    Surface,
    render,
    resize_surface,
)
from tick_fireworks.scheduler import DeferredQueue, LaunchScheduler
from tick_fireworks.sky import Sky
from tick_fireworks.types import (
    DisplayState,
    FireworksError,
    FrameContext,
    StepSignal,
    SurfaceUnavailableError,
)

__all__ = [
    "AudioEngine",
    "DeferredQueue",
    "DisplayState",
    "FireworksDisplay",
    "FireworksError",
    "FrameContext",
    "LaunchScheduler",
    "ManualFrameClock",
    "MemoryAudioDevice",
    "NullAudioDevice",
    "Particle",
    "Projectile",
    "PygameAudioDevice",
    "PygameFrameClock",
    "PygameSurface",
    "RecordingSurface",
    "ShowConfig",
    "Sky",
    "StepSignal",
    "Surface",
    "SurfaceUnavailableError",
    "Voice",
    "monotonic_ms",
    "render",
    "resize_surface",
    "vec",
]
