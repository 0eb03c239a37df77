"""Render pipeline: entity state to drawing operations on a scalable surface."""
from __future__ import annotations

import logging
import math
from typing import Protocol, Sequence, runtime_checkable

import pygame

from tick_fireworks.sky import Sky
from tick_fireworks.types import Color
from tick_fireworks.vec import Vec2

logger = logging.getLogger(__name__)

TRAIL_WIDTH = 2.0
TRAIL_OPACITY = 0.9


@runtime_checkable
class Surface(Protocol):
    """Drawing surface addressed in logical units.

    One logical unit is one CSS-equivalent pixel; ``scale`` maps it to
    buffer pixels.
    """

    @property
    def scale(self) -> float: ...

    def resize_to(self, width: int, height: int, density: float) -> None: ...

    def clear(self) -> None: ...

    def draw_polyline(
        self, points: Sequence[Vec2], color: Color, width: float, opacity: float
    ) -> None: ...

    def draw_disc(
        self, center: Vec2, radius: float, color: Color, opacity: float
    ) -> None: ...


def effective_density(density: float, max_density: float = 2.0) -> float:
    return min(density if density > 0 else 1.0, max_density)


def buffer_size(width: float, height: float, density: float) -> tuple[int, int]:
    return math.floor(width * density), math.floor(height * density)


def resize_surface(
    surface: Surface,
    width: float,
    height: float,
    density: float,
    max_density: float = 2.0,
) -> bool:
    """Resize the surface for a viewport, capping pixel density.

    Non-positive dimensions leave the surface untouched and return False.
    """
    if width <= 0 or height <= 0 or density <= 0:
        logger.debug("ignoring resize to %sx%s @ %s", width, height, density)
        return False
    surface.resize_to(int(width), int(height), effective_density(density, max_density))
    return True


def render(sky: Sky, surface: Surface) -> None:
    """Draw one fresh frame: projectiles then particles, in container order."""
    surface.clear()
    for projectile in sky.projectiles:
        points = list(projectile.trail)
        points.append(projectile.position)
        surface.draw_polyline(points, projectile.color, TRAIL_WIDTH, TRAIL_OPACITY)
    for particle in sky.particles:
        surface.draw_disc(
            particle.position, particle.size, particle.color, max(particle.alpha, 0.0)
        )


class RecordingSurface:
    """Surface that records draw calls instead of drawing.

    Conforms to the Surface protocol. ``calls`` holds the current frame's
    operations as tuples; ``clear()`` starts a new frame.
    """

    def __init__(self) -> None:
        self.calls: list[tuple] = []
        self.frames = 0
        self.logical_size: tuple[int, int] = (0, 0)
        self.buffer_size: tuple[int, int] = (0, 0)
        self._scale = 1.0

    @property
    def scale(self) -> float:
        return self._scale

    def resize_to(self, width: int, height: int, density: float) -> None:
        self.logical_size = (width, height)
        self.buffer_size = buffer_size(width, height, density)
        self._scale = density

    def clear(self) -> None:
        self.calls.clear()
        self.frames += 1

    def draw_polyline(
        self, points: Sequence[Vec2], color: Color, width: float, opacity: float
    ) -> None:
        self.calls.append(("polyline", tuple(points), color, width, opacity))

    def draw_disc(
        self, center: Vec2, radius: float, color: Color, opacity: float
    ) -> None:
        self.calls.append(("disc", center, radius, color, opacity))


class PygameSurface:
    """Offscreen per-pixel-alpha buffer drawn with pygame.

    The buffer is ``floor(width * density)`` by ``floor(height * density)``
    pixels; every draw call is given in logical units and scaled here. The
    host blits ``buffer`` (or ``scaled_to(window)``) onto its display.
    """

    def __init__(self, width: int = 1, height: int = 1, density: float = 1.0) -> None:
        self._width = 0
        self._height = 0
        self._scale = 1.0
        self._buffer = pygame.Surface((1, 1), pygame.SRCALPHA)
        self.resize_to(width, height, density)

    @property
    def scale(self) -> float:
        return self._scale

    @property
    def logical_size(self) -> tuple[int, int]:
        return self._width, self._height

    @property
    def buffer(self) -> pygame.Surface:
        return self._buffer

    def resize_to(self, width: int, height: int, density: float) -> None:
        self._width = width
        self._height = height
        self._scale = density
        size = buffer_size(width, height, density)
        self._buffer = pygame.Surface(
            (max(size[0], 1), max(size[1], 1)), pygame.SRCALPHA
        )

    def clear(self) -> None:
        self._buffer.fill((0, 0, 0, 0))

    def to_pixels(self, point: Vec2) -> Vec2:
        return (point[0] * self._scale, point[1] * self._scale)

    def draw_polyline(
        self, points: Sequence[Vec2], color: Color, width: float, opacity: float
    ) -> None:
        if len(points) < 2 or opacity <= 0:
            return
        line_width = max(1, round(width * self._scale))
        pixels = [self.to_pixels(p) for p in points]
        pad = line_width + 1
        left = math.floor(min(p[0] for p in pixels)) - pad
        top = math.floor(min(p[1] for p in pixels)) - pad
        right = math.ceil(max(p[0] for p in pixels)) + pad
        bottom = math.ceil(max(p[1] for p in pixels)) + pad
        layer = pygame.Surface((right - left, bottom - top), pygame.SRCALPHA)
        local = [(x - left, y - top) for x, y in pixels]
        pygame.draw.lines(layer, _rgba(color, opacity), False, local, line_width)
        self._buffer.blit(layer, (left, top))

    def draw_disc(
        self, center: Vec2, radius: float, color: Color, opacity: float
    ) -> None:
        if radius <= 0 or opacity <= 0:
            return
        r = max(1, round(radius * self._scale))
        cx, cy = self.to_pixels(center)
        layer = pygame.Surface((r * 2 + 1, r * 2 + 1), pygame.SRCALPHA)
        pygame.draw.circle(layer, _rgba(color, opacity), (r, r), r)
        self._buffer.blit(layer, (round(cx) - r, round(cy) - r))

    def scaled_to(self, size: tuple[int, int]) -> pygame.Surface:
        if self._buffer.get_size() == size:
            return self._buffer
        return pygame.transform.smoothscale(self._buffer, size)


def _rgba(color: Color, opacity: float) -> pygame.Color:
    c = pygame.Color(color)
    c.a = max(0, min(255, round(opacity * 255)))
    return c
