"""
Full Pygame Renderer
====================

Draws the playfield with pygame: sky, pipes, the bird as a circle, and
score / start / game-over text. Supports both display mode (human play)
and headless RGB output. Reads render data only; it never calls into the
simulation.
"""

from __future__ import annotations

from typing import Any, Dict, Optional, Tuple

try:
    import pygame
    PYGAME_AVAILABLE = True
except ImportError:
    PYGAME_AVAILABLE = False

import numpy as np

from flappy_game.flappy_core.config_loader import GameConfig, get_config

START_PROMPT = "Click or Press Space to Start"
RESTART_PROMPT = "Click or Press Space to Restart"
GAME_OVER_TEXT = "Game Over!"


class PygameRenderer:
    """
    Renderer using pygame primitives.

    Supports:
    - Screen display for human mode
    - RGB array output for agents
    - Uniform scaling of the playfield to any output size
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration.
        """
        if not PYGAME_AVAILABLE:
            raise ImportError("pygame is required for PygameRenderer")

        if config is None:
            config = get_config()

        self._config = config

        if not pygame.get_init():
            pygame.init()

        # Display surface (created on demand)
        self._screen: Optional[pygame.Surface] = None
        self._screen_size: Optional[Tuple[int, int]] = None

        pygame.font.init()
        self._font_cache: Dict[int, pygame.font.Font] = {}

        display = config.display
        self._bg_color = display.color_background
        self._pipe_color = display.color_pipe
        self._bird_color = display.color_bird
        self._text_color = display.color_text

    def _font(self, size: int) -> "pygame.font.Font":
        size = max(8, size)
        if size not in self._font_cache:
            self._font_cache[size] = pygame.font.Font(None, size)
        return self._font_cache[size]

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render to RGB array (for agent observation).

        Args:
            render_data: Data from CoreGame.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        surface = pygame.Surface((width, height))
        self._render_to_surface(surface, render_data)
        array = pygame.surfarray.array3d(surface)
        return np.transpose(array, (1, 0, 2))

    def render_to_screen(
        self,
        render_data: Dict[str, Any],
        window_width: Optional[int] = None,
        window_height: Optional[int] = None
    ) -> None:
        """
        Render to pygame window and flip the display.

        Args:
            render_data: Data from CoreGame.get_render_data().
            window_width: Window width. Defaults to the scaled playfield width.
            window_height: Window height. Defaults to the scaled playfield height.
        """
        scale = self._config.display.scale
        if window_width is None:
            window_width = int(render_data["board_width"] * scale)
        if window_height is None:
            window_height = int(render_data["board_height"] * scale)

        if self._screen is None or self._screen_size != (window_width, window_height):
            self._screen = pygame.display.set_mode((window_width, window_height))
            self._screen_size = (window_width, window_height)
            pygame.display.set_caption(self._config.display.caption)

        self._render_to_surface(self._screen, render_data)
        pygame.display.flip()

    def _render_to_surface(
        self,
        surface: pygame.Surface,
        render_data: Dict[str, Any]
    ) -> None:
        """Render game state to a pygame surface."""
        width, height = surface.get_size()
        board_width = render_data["board_width"]
        board_height = render_data["board_height"]

        scale_x = width / board_width
        scale_y = height / board_height
        scale = min(scale_x, scale_y)
        offset_x = (width - board_width * scale) / 2
        offset_y = (height - board_height * scale) / 2

        surface.fill(self._bg_color)

        phase = render_data["phase"]
        if phase == "not_started":
            self._draw_centered(surface, START_PROMPT, int(20 * scale), height / 2)
            return

        for pipe in render_data["pipes"]:
            self._draw_pipe(surface, pipe, scale, offset_x, offset_y, board_height)

        bird = render_data["bird"]
        cx = int(offset_x + bird["x"] * scale)
        cy = int(offset_y + bird["y"] * scale)
        pygame.draw.circle(surface, self._bird_color, (cx, cy), max(1, int(bird["radius"] * scale)))

        score_surface = self._font(int(24 * scale)).render(
            f"Score: {render_data['score']}", True, self._text_color
        )
        surface.blit(score_surface, (int(offset_x + 10 * scale), int(offset_y + 12 * scale)))

        if phase == "over":
            self._draw_centered(surface, GAME_OVER_TEXT, int(40 * scale), height / 2)
            self._draw_centered(surface, RESTART_PROMPT, int(20 * scale), height / 2 + 40 * scale)

    def _draw_pipe(
        self,
        surface: pygame.Surface,
        pipe: Dict[str, Any],
        scale: float,
        offset_x: float,
        offset_y: float,
        board_height: float
    ) -> None:
        """Draw the top and bottom rectangles of a pipe."""
        x = int(offset_x + pipe["x"] * scale)
        w = max(1, int(pipe["width"] * scale))
        top_h = int(pipe["top"] * scale)
        bottom_y = int(offset_y + pipe["bottom"] * scale)
        bottom_h = int((board_height - pipe["bottom"]) * scale)

        if top_h > 0:
            pygame.draw.rect(surface, self._pipe_color, pygame.Rect(x, int(offset_y), w, top_h))
        if bottom_h > 0:
            pygame.draw.rect(surface, self._pipe_color, pygame.Rect(x, bottom_y, w, bottom_h))

    def _draw_centered(
        self,
        surface: pygame.Surface,
        text: str,
        size: int,
        center_y: float
    ) -> None:
        text_surface = self._font(size).render(text, True, self._text_color)
        rect = text_surface.get_rect(center=(surface.get_width() // 2, int(center_y)))
        surface.blit(text_surface, rect)

    def close(self) -> None:
        """Clean up pygame resources."""
        self._font_cache.clear()
        if self._screen is not None:
            self._screen = None
