"""
RNG - Gap Sampler
=================

Picks the vertical placement of each new pipe gap.
"""

from __future__ import annotations

import random
from typing import Optional, Tuple

from flappy_game.flappy_core.config_loader import GameConfig, get_config


class GapSampler:
    """
    Uniform sampler for pipe gap positions.

    Every gap top is drawn independently from
    [min_height, playfield_height - gap - min_height], so both pipe
    segments are always at least min_height tall.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize gap sampler.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed. Random if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._rng = random.Random(seed)
        self._low, self._high = config.gap_top_range

    @property
    def bounds(self) -> Tuple[float, float]:
        """(low, high) bounds of sampled gap tops."""
        return (self._low, self._high)

    def sample_top(self) -> float:
        """Draw the top offset of the next gap."""
        return self._low + self._rng.random() * (self._high - self._low)

    def reset(self, seed: Optional[int] = None) -> None:
        """
        Reseed the sampler.

        Args:
            seed: New random seed. Keeps the current stream if None.
        """
        if seed is not None:
            self._rng = random.Random(seed)
