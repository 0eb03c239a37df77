"""
tick-fireworks Show
Unattended fireworks display in a pygame window, with synthesized sound.

Controls:
  Space / Click   Unlock sound (first press) and fire an extra launch
  P               Pause / resume
  Esc             Quit

Hiding or minimizing the window pauses the show; restoring it resumes.
"""
from __future__ import annotations

import argparse
import logging
import sys

import pygame

from tick_fireworks import (
    AudioEngine,
    DisplayState,
    FireworksDisplay,
    NullAudioDevice,
    PygameAudioDevice,
    PygameFrameClock,
    PygameSurface,
    ShowConfig,
    monotonic_ms,
)

# --- Configuration ---
DEFAULT_SIZE = (1600, 900)
FPS = 60
TITLE = "tick-fireworks"
BG_COLOR = (3, 17, 47)
HUD_COLOR = (200, 200, 220)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--reduced-motion", action="store_true",
                        help="fewer particles, slower launches, no crackle")
    parser.add_argument("--fullscreen", action="store_true")
    parser.add_argument("--mute", action="store_true", help="never open the audio device")
    parser.add_argument("--size", type=int, nargs=2, metavar=("W", "H"), default=DEFAULT_SIZE)
    parser.add_argument("--hud", action="store_true", help="show entity counts and FPS")
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args(argv)


def display_density() -> float:
    # pygame reports window and drawable sizes separately on high-DPI setups.
    try:
        window = pygame.display.get_window_size()
        drawable = pygame.display.get_surface().get_size()
    except (pygame.error, AttributeError):
        return 1.0
    if not window[0]:
        return 1.0
    return drawable[0] / window[0]


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    pygame.init()
    flags = pygame.RESIZABLE | (pygame.FULLSCREEN if args.fullscreen else 0)
    screen = pygame.display.set_mode(tuple(args.size), flags)
    pygame.display.set_caption(TITLE)
    font = pygame.font.SysFont("monospace", 14)

    config = ShowConfig.for_motion(args.reduced_motion)
    device = NullAudioDevice() if args.mute else PygameAudioDevice()
    frame_clock = PygameFrameClock(fps=FPS)
    surface = PygameSurface()
    display = FireworksDisplay(
        surface,
        frame_clock,
        monotonic_ms,
        audio=AudioEngine(device, pan_limit=config.pan_limit),
        config=config,
    )

    width, height = screen.get_size()
    display.resize(width, height, display_density())
    display.start()

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key == pygame.K_SPACE:
                    display.prime_audio()
                    display.launch()
                elif event.key == pygame.K_p:
                    if display.state is DisplayState.RUNNING:
                        display.pause()
                    else:
                        display.resume()
            elif event.type == pygame.MOUSEBUTTONDOWN:
                display.prime_audio()
            elif event.type == pygame.VIDEORESIZE:
                display.resize(event.w, event.h, display_density())
            elif event.type in (pygame.WINDOWMINIMIZED, pygame.WINDOWHIDDEN):
                display.set_visible(False)
            elif event.type in (pygame.WINDOWRESTORED, pygame.WINDOWSHOWN):
                display.set_visible(True)

        frame_clock.pump()

        screen.fill(BG_COLOR)
        screen.blit(surface.scaled_to(screen.get_size()), (0, 0))

        if args.hud:
            sky = display.sky
            line = (
                f"Projectiles: {len(sky.projectiles)}   Particles: {len(sky.particles)}   "
                f"FPS: {frame_clock.fps:.0f}   [{display.state.value}]"
            )
            screen.blit(font.render(line, True, HUD_COLOR), (10, 8))

        pygame.display.flip()

    display.stop()
    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
