"""Shared types, frame context, and errors for the fireworks engine."""
from __future__ import annotations

import enum
import random as _random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Callable

if TYPE_CHECKING:
    from tick_fireworks.config import ShowConfig
    from tick_fireworks.sky import Sky

Color = str
Millis = float


class StepSignal(enum.Enum):
    """What the simulation should do with an entity after one update."""

    CONTINUE = "continue"
    EXPLODE = "explode"
    REMOVE = "remove"


class DisplayState(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    STOPPED = "stopped"


@dataclass(frozen=True, slots=True)
class FrameContext:
    """Per-tick view handed to every system."""

    tick_number: int
    now: Millis
    width: float
    height: float
    config: ShowConfig
    random: _random.Random


class FireworksError(Exception):
    """Base class for errors raised by the fireworks engine."""


class SurfaceUnavailableError(FireworksError):
    """Raised when the display is built without a surface or frame clock."""


System = Callable[["Sky", FrameContext], None]
