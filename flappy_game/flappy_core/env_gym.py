"""
Gymnasium Environment Wrapper
=============================

Provides a standard Gymnasium interface to the flappy simulation.
One env step = optional flap followed by one tick.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple, Union
import numpy as np

import gymnasium as gym
from gymnasium import spaces

from flappy_game.flappy_core.config_loader import GameConfig, load_config
from flappy_game.flappy_core.game import CoreGame
from flappy_game.flappy_core.state_snapshot import GameSnapshot

logger = logging.getLogger(__name__)

ACTION_GLIDE = 0
ACTION_FLAP = 1


class FlappyEnv(gym.Env):
    """
    Flappy bird as a Gymnasium environment.

    Action Space:
        Discrete(2): 0 = glide, 1 = flap.

    Observation Space:
        Dict with bird state, next-gap features and fixed-size pipe arrays,
        plus an optional RGB image.

    Reward:
        Points scored this step (1.0 per pipe passed, else 0.0).

    Termination:
        The bird hits a pipe, the floor or the ceiling. Truncation after
        ``max_episode_ticks`` if set.
    """

    metadata = {
        "render_modes": ["human", "rgb_array"],
        "render_fps": 60,
    }

    def __init__(
        self,
        config_path: Optional[str] = None,
        render_mode: Optional[str] = None,
        render_style: Optional[str] = None,
        image_obs: bool = False,
        image_width: Optional[int] = None,
        image_height: Optional[int] = None,
        max_episode_ticks: Optional[int] = None,
        config: Optional[GameConfig] = None,
    ):
        """
        Initialize flappy environment.

        Args:
            config_path: Path to game_config.yaml. Uses default if None.
            render_mode: "human" for window, "rgb_array" for numpy, None for headless.
            render_style: "solid" for hitbox rendering, "full" for pygame. Config default if None.
            image_obs: If True, include board_rgb in observations.
            image_width: Override observation image width.
            image_height: Override observation image height.
            max_episode_ticks: Truncate episodes after this many ticks.
            config: Preloaded configuration (takes precedence over config_path).
        """
        super().__init__()

        self._config = config if config is not None else load_config(config_path)

        self.render_mode = render_mode
        self._render_style = render_style or self._config.observation.render_style
        self._image_obs = image_obs
        self._max_episode_ticks = max_episode_ticks

        self._img_width = image_width or self._config.observation.image_width
        self._img_height = image_height or self._config.observation.image_height

        self._game = CoreGame(config=self._config)

        # Initialize renderer (lazy)
        self._renderer = None

        self.action_space = spaces.Discrete(2)
        self.observation_space = self._build_observation_space()

    def _build_observation_space(self) -> spaces.Dict:
        """Build the observation space definition."""
        max_pipes = self._config.observation.max_pipes
        width = float(self._config.playfield.width)
        height = float(self._config.playfield.height)
        pipe_width = float(self._config.pipes.width)

        # The crashing tick may carry the bird past an edge by one step
        obs_dict = {
            "phase": spaces.Box(low=0, high=2, shape=(), dtype=np.int32),
            "score": spaces.Box(low=0, high=np.iinfo(np.int64).max, shape=(), dtype=np.int64),
            "bird_y": spaces.Box(low=-height, high=2 * height, shape=(), dtype=np.float32),
            "bird_velocity": spaces.Box(low=-height, high=height, shape=(), dtype=np.float32),
            "next_pipe_dx": spaces.Box(low=-width, high=width, shape=(), dtype=np.float32),
            "next_gap_top": spaces.Box(low=0, high=height, shape=(), dtype=np.float32),
            "next_gap_bottom": spaces.Box(low=0, high=height, shape=(), dtype=np.float32),
            "next_gap_dy": spaces.Box(low=-2 * height, high=2 * height, shape=(), dtype=np.float32),
            "pipe_x": spaces.Box(low=-pipe_width, high=width, shape=(max_pipes,), dtype=np.float32),
            "pipe_top": spaces.Box(low=0, high=height, shape=(max_pipes,), dtype=np.float32),
            "pipe_bottom": spaces.Box(low=0, high=height, shape=(max_pipes,), dtype=np.float32),
            "pipe_passed": spaces.MultiBinary(max_pipes),
            "pipe_mask": spaces.MultiBinary(max_pipes),
        }

        if self._image_obs:
            obs_dict["board_rgb"] = spaces.Box(
                low=0,
                high=255,
                shape=(self._img_height, self._img_width, 3),
                dtype=np.uint8
            )

        return spaces.Dict(obs_dict)

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None
    ) -> Tuple[Dict[str, np.ndarray], Dict[str, Any]]:
        """
        Reset the environment and start a new round.

        Args:
            seed: Random seed for gap placement.
            options: Additional options (unused).

        Returns:
            (observation, info) tuple.
        """
        super().reset(seed=seed)

        self._game.reset(seed=seed)
        self._game.start()

        obs = self._snapshot_to_obs(self._game.snapshot())
        info = self._game.get_info()
        info["delta_score"] = 0

        return obs, info

    def step(
        self,
        action: Union[int, np.ndarray]
    ) -> Tuple[Dict[str, np.ndarray], float, bool, bool, Dict[str, Any]]:
        """
        Execute one step.

        Args:
            action: 1 to flap before the tick, 0 to glide.

        Returns:
            (observation, reward, terminated, truncated, info) tuple.
        """
        if isinstance(action, np.ndarray):
            action = int(action.item() if action.ndim == 0 else action[0])

        if int(action) == ACTION_FLAP:
            self._game.apply_impulse()

        result = self._game.tick()

        obs = self._snapshot_to_obs(self._game.snapshot())
        reward = float(result.delta_score)
        terminated = self._game.is_over
        truncated = (
            not terminated
            and self._max_episode_ticks is not None
            and self._game.tick_count >= self._max_episode_ticks
        )

        info = self._game.get_info()
        info["delta_score"] = result.delta_score
        info["spawned"] = result.spawned is not None

        if result.game_over:
            logger.debug(
                "Episode terminated (%s) after %d ticks, score %d",
                result.termination_reason, self._game.tick_count, self._game.score
            )

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, bool(truncated), info

    def _snapshot_to_obs(self, snapshot: GameSnapshot) -> Dict[str, np.ndarray]:
        """Convert snapshot to observation dict."""
        obs = snapshot.to_obs_dict()

        if self._image_obs:
            obs["board_rgb"] = self._render_to_array()

        return obs

    def _render_to_array(self) -> np.ndarray:
        """Render board to RGB array."""
        if self._renderer is None:
            self._init_renderer()

        render_data = self._game.get_render_data()
        return self._renderer.render(
            render_data,
            self._img_width,
            self._img_height
        )

    def _init_renderer(self) -> None:
        """Initialize renderer based on style."""
        if self.render_mode == "human":
            # Window output needs pygame regardless of style
            from flappy_game.flappy_core.render_full_pygame import PygameRenderer
            self._renderer = PygameRenderer(self._config)
        elif self._render_style == "full":
            try:
                from flappy_game.flappy_core.render_full_pygame import PygameRenderer
                self._renderer = PygameRenderer(self._config)
            except ImportError:
                # Fall back to solid if pygame not available
                from flappy_game.flappy_core.render_solid import SolidRenderer
                self._renderer = SolidRenderer(self._config)
        else:
            from flappy_game.flappy_core.render_solid import SolidRenderer
            self._renderer = SolidRenderer(self._config)

    def render(self) -> Optional[np.ndarray]:
        """
        Render the current game state.

        Returns:
            RGB array if render_mode is "rgb_array", None otherwise.
        """
        if self.render_mode == "rgb_array":
            return self._render_to_array()

        if self.render_mode == "human":
            if self._renderer is None:
                self._init_renderer()

            render_data = self._game.get_render_data()
            self._renderer.render_to_screen(render_data)
            return None

        return None

    def close(self) -> None:
        """Clean up resources."""
        if self._renderer is not None:
            self._renderer.close()
            self._renderer = None

    @property
    def game(self) -> CoreGame:
        """Access to underlying game (for debugging/tools)."""
        return self._game

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config
