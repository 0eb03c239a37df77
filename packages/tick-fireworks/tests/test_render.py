"""Tests for the render pipeline and surfaces."""
from __future__ import annotations

import pygame
import pytest

from tick_fireworks.entities import Particle, Projectile
from tick_fireworks.render import (
    PygameSurface,
    RecordingSurface,
    Surface,
    buffer_size,
    effective_density,
    render,
    resize_surface,
)
from tick_fireworks.sky import Sky


def _sky() -> Sky:
    sky = Sky(800, 600)
    sky.add_projectile(
        Projectile(
            origin=(10.0, 610.0),
            position=(10.0, 600.0),
            target=(20.0, 100.0),
            speed=5.0,
            color="#f4d77b",
            trail=((10.0, 610.0), (10.0, 605.0)),
        )
    )
    sky.add_projectile(
        Projectile(origin=(50.0, 610.0), position=(50.0, 610.0), target=(60.0, 100.0),
                   speed=4.0, color="#8be9ff")
    )
    sky.add_particles([
        Particle(position=(1.0, 2.0), velocity=(0.0, 0.0), alpha=0.5, decay=0.01,
                 size=2.0, color="#ff91d0"),
        Particle(position=(3.0, 4.0), velocity=(0.0, 0.0), alpha=-0.01, decay=0.01,
                 size=3.0, color="#c2ff9a"),
    ])
    return sky


# --- Pipeline ---

def test_render_clears_then_draws_in_container_order() -> None:
    surface = RecordingSurface()
    render(_sky(), surface)
    assert surface.frames == 1
    kinds = [call[0] for call in surface.calls]
    assert kinds == ["polyline", "polyline", "disc", "disc"]


def test_projectile_polyline_through_trail_and_position() -> None:
    surface = RecordingSurface()
    render(_sky(), surface)
    _, points, color, width, opacity = surface.calls[0]
    assert points == ((10.0, 610.0), (10.0, 605.0), (10.0, 600.0))
    assert color == "#f4d77b"
    assert width == 2.0
    assert opacity == 0.9
    # No trail yet: a single point.
    assert surface.calls[1][1] == ((50.0, 610.0),)


def test_particle_discs_clamp_opacity() -> None:
    surface = RecordingSurface()
    render(_sky(), surface)
    assert surface.calls[2] == ("disc", (1.0, 2.0), 2.0, "#ff91d0", 0.5)
    assert surface.calls[3] == ("disc", (3.0, 4.0), 3.0, "#c2ff9a", 0.0)


def test_every_frame_is_fresh() -> None:
    surface = RecordingSurface()
    sky = _sky()
    render(sky, surface)
    sky.clear()
    render(sky, surface)
    assert surface.frames == 2
    assert surface.calls == []


def test_recording_surface_satisfies_protocol() -> None:
    assert isinstance(RecordingSurface(), Surface)


# --- Resizing ---

def test_buffer_size_and_density_cap() -> None:
    assert buffer_size(1600, 900, 2.0) == (3200, 1800)
    assert buffer_size(101, 51, 1.5) == (151, 76)
    assert effective_density(3.0) == 2.0
    assert effective_density(1.25) == 1.25
    assert effective_density(0.0) == 1.0


def test_resize_surface_applies_capped_density() -> None:
    surface = RecordingSurface()
    assert resize_surface(surface, 800, 600, 3.0) is True
    assert surface.logical_size == (800, 600)
    assert surface.buffer_size == (1600, 1200)
    assert surface.scale == 2.0


@pytest.mark.parametrize("size", [(0, 600, 1.0), (800, -1, 1.0), (800, 600, 0.0)])
def test_resize_surface_non_positive_is_noop(size) -> None:
    surface = RecordingSurface()
    resize_surface(surface, 800, 600, 1.0)
    assert resize_surface(surface, *size) is False
    assert surface.logical_size == (800, 600)
    assert surface.scale == 1.0


# --- PygameSurface ---

def test_pygame_surface_resize_to_high_density() -> None:
    surface = PygameSurface(800, 600, 1.0)
    assert surface.buffer.get_size() == (800, 600)
    resize_surface(surface, 1600, 900, 2.0)
    assert surface.buffer.get_size() == (3200, 1800)
    assert surface.logical_size == (1600, 900)
    assert surface.scale == 2.0


def test_pygame_surface_keeps_logical_coordinates() -> None:
    surface = PygameSurface(800, 600, 1.0)
    resize_surface(surface, 1600, 900, 2.0)
    surface.clear()
    surface.draw_disc((800.0, 450.0), 3.0, "#ff0000", 1.0)
    surface.draw_disc((400.0, 300.0), 3.0, "#0000ff", 1.0)

    center = surface.buffer.get_at((1600, 900))
    assert center.a == 255
    assert center.r > 200 and center.b < 40

    quarter = surface.buffer.get_at((800, 600))
    assert quarter.a == 255
    assert quarter.b > 200 and quarter.r < 40


def test_pygame_surface_clear_erases() -> None:
    surface = PygameSurface(100, 100, 1.0)
    surface.draw_disc((50.0, 50.0), 4.0, "#ffffff", 1.0)
    assert surface.buffer.get_at((50, 50)).a == 255
    surface.clear()
    assert surface.buffer.get_at((50, 50)).a == 0


def test_pygame_surface_polyline() -> None:
    surface = PygameSurface(100, 100, 1.0)
    surface.draw_polyline([(10.0, 20.0), (60.0, 20.0)], "#00ff00", 2.0, 1.0)
    pixel = surface.buffer.get_at((35, 20))
    assert pixel.a > 0
    assert pixel.g > 200


def test_pygame_surface_skips_invisible_primitives() -> None:
    surface = PygameSurface(100, 100, 1.0)
    surface.draw_disc((50.0, 50.0), 4.0, "#ffffff", 0.0)
    surface.draw_polyline([(10.0, 10.0)], "#ffffff", 2.0, 1.0)
    assert pygame.mask.from_surface(surface.buffer).count() == 0


def test_pygame_surface_scaled_to_window() -> None:
    surface = PygameSurface(100, 50, 2.0)
    assert surface.scaled_to((200, 100)) is surface.buffer
    assert surface.scaled_to((100, 50)).get_size() == (100, 50)


def test_render_onto_pygame_surface() -> None:
    surface = PygameSurface(800, 600, 1.0)
    render(_sky(), surface)
    assert surface.buffer.get_at((1, 2)).a > 0
