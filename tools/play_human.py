"""
Human Play Mode
================

Play the game interactively in a pygame window with synthesized sound.

Controls:
    - Click/Space: Start, flap, or restart after a crash
    - M: Toggle background music
    - ESC: Quit

Usage:
    python -m tools.play_human [--seed SEED] [--fps FPS] [--scale SCALE] [--mute]
"""

from __future__ import annotations

import argparse
import dataclasses
import logging
import sys
from typing import Optional

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

from flappy_game.flappy_core.audio import SoundBoard
from flappy_game.flappy_core.config_loader import load_config, GameConfig
from flappy_game.flappy_core.events import GameEvent, GameEventType
from flappy_game.flappy_core.game import CoreGame
from flappy_game.flappy_core.logger import setup_logging
from flappy_game.flappy_core.render_full_pygame import PygameRenderer

logger = logging.getLogger("flappy_game.tools.play_human")


class HumanPlayer:
    """
    Human-playable game loop: one simulation tick per displayed frame.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None,
        target_fps: Optional[int] = None,
        mute: bool = False
    ):
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame required. Install: pip install pygame")

        if config is None:
            config = load_config()

        self._config = config
        self._target_fps = target_fps or config.display.fps

        # Initialize game
        self._game = CoreGame(config=config, seed=seed)
        self._game.subscribe(self._report_event)

        # Initialize pygame
        pygame.init()
        self._clock = pygame.time.Clock()
        self._renderer = PygameRenderer(config)

        # Audio degrades to silence if the mixer cannot be opened
        self._sound = SoundBoard(config, enabled=not mute)
        self._sound.attach(self._game)

        self._running = True

    def run(self) -> int:
        """Run the game loop. Returns final score."""
        print("=== Flappy ===")
        print("Click or Space to start and flap")
        print("M to toggle music, ESC to quit")
        print()

        try:
            while self._running:
                self._handle_events()
                self._game.tick()
                self._renderer.render_to_screen(self._game.get_render_data())
                self._clock.tick(self._target_fps)
        finally:
            self._sound.close()
            self._renderer.close()
            pygame.quit()

        return self._game.score

    def _handle_events(self) -> None:
        """Process pygame events."""
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self._running = False

            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    self._running = False
                elif event.key == pygame.K_SPACE:
                    self._game.press()
                elif event.key == pygame.K_m:
                    enabled = self._sound.toggle_music()
                    logger.info("Music %s", "on" if enabled else "off")

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button == 1:
                    self._game.press()

    def _report_event(self, event: GameEvent) -> None:
        logger.debug("Event: %s", event.to_dict())
        if event.type is GameEventType.SCORE:
            print(f"  +1 (Total: {event.score})")
        elif event.type is GameEventType.GAME_OVER:
            print(f"\nGAME OVER ({event.data.get('reason')}) - Score: {event.score}")
        elif event.type is GameEventType.RESET:
            print("\n=== Game Restarted ===\n")


def main():
    parser = argparse.ArgumentParser(description="Play Flappy interactively")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument("--fps", type=int, default=None, help="Target FPS (default: from config)")
    parser.add_argument("--scale", type=float, default=None, help="Window scale factor")
    parser.add_argument("--mute", action="store_true", help="Disable all audio")
    parser.add_argument("--log-level", default="info", help="Logging level (default: info)")
    parser.add_argument("--config", default=None, help="Path to game_config.yaml")

    args = parser.parse_args()
    setup_logging(args.log_level)

    try:
        config = load_config(args.config)
        if args.scale is not None:
            config = dataclasses.replace(
                config, display=dataclasses.replace(config.display, scale=args.scale)
            )
        player = HumanPlayer(
            config=config,
            seed=args.seed,
            target_fps=args.fps,
            mute=args.mute
        )
        score = player.run()
        print(f"\nFinal Score: {score}")
        return 0
    except (ImportError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
