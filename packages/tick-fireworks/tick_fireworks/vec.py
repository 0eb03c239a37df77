"""2D vector helpers operating on (x, y) tuples."""
from __future__ import annotations

import math

Vec2 = tuple[float, float]


def add(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] + b[0], a[1] + b[1])


def sub(a: Vec2, b: Vec2) -> Vec2:
    return (a[0] - b[0], a[1] - b[1])


def scale(v: Vec2, s: float) -> Vec2:
    return (v[0] * s, v[1] * s)


def length(v: Vec2) -> float:
    return math.hypot(v[0], v[1])


def distance(a: Vec2, b: Vec2) -> float:
    return math.hypot(b[0] - a[0], b[1] - a[1])


def step_toward(origin: Vec2, target: Vec2, amount: float) -> Vec2:
    """Move `amount` units from origin along the straight line to target.

    A zero-length line leaves the point where it is.
    """
    dx, dy = sub(target, origin)
    dist = math.hypot(dx, dy)
    if dist == 0.0:
        return origin
    return (origin[0] + dx / dist * amount, origin[1] + dy / dist * amount)


def polar(angle: float, magnitude: float) -> Vec2:
    return (math.cos(angle) * magnitude, math.sin(angle) * magnitude)
