"""
Solid Renderer
==============

Fast numpy-based renderer that draws the collision geometry: the bird's
square hitbox and the pipe rectangles. Used for image observations where
pygame is not wanted.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import numpy as np

from flappy_game.flappy_core.config_loader import GameConfig, get_config


class SolidRenderer:
    """
    Renders the playfield as solid-color rectangles.

    The bird is drawn as the box the collision rules test, not as the
    circle the pygame renderer shows.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize renderer.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        display = config.display
        self._bg_color = np.array(display.color_background, dtype=np.uint8)
        self._pipe_color = np.array(display.color_pipe, dtype=np.uint8)
        self._bird_color = np.array(display.color_bird, dtype=np.uint8)

        # Dimmed playfield while not running
        self._idle_dim = 0.6

    def render(
        self,
        render_data: Dict[str, Any],
        width: int,
        height: int
    ) -> np.ndarray:
        """
        Render the game state to an RGB array.

        Args:
            render_data: Data from CoreGame.get_render_data().
            width: Output image width.
            height: Output image height.

        Returns:
            (height, width, 3) uint8 array.
        """
        img = np.empty((height, width, 3), dtype=np.uint8)
        img[:] = self._bg_color

        board_width = render_data["board_width"]
        board_height = render_data["board_height"]
        scale_x = width / board_width
        scale_y = height / board_height

        for pipe in render_data["pipes"]:
            x0 = pipe["x"] * scale_x
            x1 = (pipe["x"] + pipe["width"]) * scale_x
            self._fill_rect(img, x0, 0.0, x1, pipe["top"] * scale_y, self._pipe_color)
            self._fill_rect(img, x0, pipe["bottom"] * scale_y, x1, height, self._pipe_color)

        if render_data["phase"] != "not_started":
            bird = render_data["bird"]
            r = bird["radius"]
            self._fill_rect(
                img,
                (bird["x"] - r) * scale_x,
                (bird["y"] - r) * scale_y,
                (bird["x"] + r) * scale_x,
                (bird["y"] + r) * scale_y,
                self._bird_color
            )

        if render_data["phase"] != "running":
            img = (img * self._idle_dim).astype(np.uint8)

        return img

    @staticmethod
    def _fill_rect(
        img: np.ndarray,
        x0: float,
        y0: float,
        x1: float,
        y1: float,
        color: np.ndarray
    ) -> None:
        """Fill the pixel rectangle [x0, x1) x [y0, y1), clipped to the image."""
        h, w = img.shape[:2]
        ix0 = max(0, int(np.floor(x0)))
        iy0 = max(0, int(np.floor(y0)))
        ix1 = min(w, int(np.ceil(x1)))
        iy1 = min(h, int(np.ceil(y1)))
        if ix0 < ix1 and iy0 < iy1:
            img[iy0:iy1, ix0:ix1] = color

    def close(self) -> None:
        pass
