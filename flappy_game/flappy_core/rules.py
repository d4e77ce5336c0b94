"""
Game Rules
==========

Collision, pass-detection and boundary rules.

The bird is tested as its square bounding box, not as the circle it is
drawn as. Switching to circle-accurate tests would change how the game
plays and must be treated as a behaviour change.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from flappy_game.flappy_core.config_loader import GameConfig, get_config
from flappy_game.flappy_core.physics_world import BirdBody, Pipe


@dataclass
class TerminationResult:
    """Result of termination check."""
    terminated: bool
    reason: str

    @staticmethod
    def none() -> "TerminationResult":
        return TerminationResult(False, "")

    @staticmethod
    def game_over(reason: str) -> "TerminationResult":
        return TerminationResult(True, reason)


class CollisionRules:
    """
    Axis-aligned box tests between the bird and the world.

    - Pipe: bird box overlaps the pipe's x-span and leaves the gap vertically
    - Floor/ceiling: bird box leaves the playfield vertically
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize collision rules.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._height = config.playfield.height

    @staticmethod
    def overlaps_horizontally(bird: BirdBody, pipe: Pipe) -> bool:
        """True if the bird box and the pipe share any x-range (open interval)."""
        return bird.right > pipe.x and bird.left < pipe.right

    @staticmethod
    def outside_gap(bird: BirdBody, pipe: Pipe) -> bool:
        """True if the bird box pokes above the gap top or below the gap bottom."""
        return bird.top < pipe.top or bird.bottom > pipe.bottom

    def hits_pipe(self, bird: BirdBody, pipe: Pipe) -> bool:
        """
        Box/box collision against both rectangles of a pipe.

        Args:
            bird: The bird body.
            pipe: The pipe to test.

        Returns:
            True if the bird touches the top or bottom pipe segment.
        """
        return self.overlaps_horizontally(bird, pipe) and self.outside_gap(bird, pipe)

    @staticmethod
    def has_passed(bird: BirdBody, pipe: Pipe) -> bool:
        """True once the pipe's trailing edge is strictly behind the bird's x."""
        return pipe.right < bird.x

    def check_bounds(self, bird: BirdBody) -> TerminationResult:
        """
        Check the bird against the top and bottom of the playfield.

        Args:
            bird: The bird body.

        Returns:
            TerminationResult with reason "floor" or "ceiling" on violation.
        """
        if bird.bottom > self._height:
            return TerminationResult.game_over("floor")
        if bird.top < 0:
            return TerminationResult.game_over("ceiling")
        return TerminationResult.none()
