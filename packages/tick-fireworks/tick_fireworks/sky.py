"""Sky - live entity containers for one display."""
from __future__ import annotations

from typing import Iterable

from tick_fireworks.entities import Particle, Projectile


class Sky:
    """Ordered projectile and particle containers plus the logical surface size.

    Both containers keep insertion order; index 0 is always the oldest entity.
    """

    def __init__(self, width: float = 0.0, height: float = 0.0) -> None:
        self.width = width
        self.height = height
        self.projectiles: list[Projectile] = []
        self.particles: list[Particle] = []
        self.explosions = 0

    def add_projectile(self, projectile: Projectile) -> None:
        self.projectiles.append(projectile)

    def add_particles(self, particles: Iterable[Particle]) -> None:
        self.particles.extend(particles)

    def evict_oldest(self, cap: int) -> int:
        """Drop the oldest particles until at most `cap` remain."""
        excess = len(self.particles) - cap
        if excess <= 0:
            return 0
        del self.particles[:excess]
        return excess

    def clear(self) -> None:
        self.projectiles.clear()
        self.particles.clear()

    def __len__(self) -> int:
        return len(self.projectiles) + len(self.particles)
