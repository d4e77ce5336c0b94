"""
Physics World
=============

Holds the bird body and the ordered set of live pipes, and applies the
per-tick kinematics: gravity on the bird, horizontal scrolling of pipes.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

from flappy_game.flappy_core.config_loader import GameConfig, get_config


@dataclass
class BirdBody:
    """
    The player's bird.

    Only ``y`` and ``velocity`` change after construction; ``x`` is fixed.
    The collision shape is the square box of half-size ``radius``.
    """
    x: float
    y: float
    radius: float
    velocity: float = 0.0

    @property
    def left(self) -> float:
        return self.x - self.radius

    @property
    def right(self) -> float:
        return self.x + self.radius

    @property
    def top(self) -> float:
        return self.y - self.radius

    @property
    def bottom(self) -> float:
        return self.y + self.radius

    @property
    def box(self) -> Tuple[float, float, float, float]:
        """(left, top, right, bottom) of the collision box."""
        return (self.left, self.top, self.right, self.bottom)


@dataclass
class Pipe:
    """
    A pipe pair with a gap between ``top`` and ``bottom``.

    ``passed`` is set once, the first tick the pipe's trailing edge is
    behind the bird, and never cleared.
    """
    uid: int
    x: float
    top: float
    bottom: float
    width: float
    passed: bool = False

    @property
    def right(self) -> float:
        """Trailing (right) edge."""
        return self.x + self.width

    @property
    def gap_center(self) -> float:
        return (self.top + self.bottom) / 2

    def advance(self, speed: float) -> None:
        self.x -= speed

    def offscreen(self) -> bool:
        return self.right < 0


class PhysicsWorld:
    """
    Manages bird kinematics and the live pipe collection.

    Pipes are kept in creation order, which is also left-to-right order
    on screen.
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """
        Initialize physics world.

        Args:
            config: Game configuration. Uses default if None.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._gravity = config.bird.gravity
        self._jump_impulse = config.bird.jump_impulse
        self._scroll_speed = config.pipes.scroll_speed

        self._bird = BirdBody(
            x=config.bird.x,
            y=config.bird_start_y,
            radius=config.bird.radius
        )
        self._pipes: List[Pipe] = []
        self._next_uid = 0

    @property
    def bird(self) -> BirdBody:
        return self._bird

    @property
    def pipes(self) -> List[Pipe]:
        """Live pipes in creation order."""
        return self._pipes

    @property
    def pipe_count(self) -> int:
        return len(self._pipes)

    @property
    def scroll_speed(self) -> float:
        return self._scroll_speed

    @property
    def width(self) -> int:
        return self._config.playfield.width

    @property
    def height(self) -> int:
        return self._config.playfield.height

    def step_bird(self) -> None:
        """Semi-implicit Euler: update velocity first, then position."""
        self._bird.velocity += self._gravity
        self._bird.y += self._bird.velocity

    def flap(self) -> None:
        """Snap the bird's velocity to the jump impulse."""
        self._bird.velocity = self._jump_impulse

    def spawn_pipe(self, top: float, x: Optional[float] = None) -> Pipe:
        """
        Add a pipe at the right edge (or at ``x``).

        Args:
            top: Gap top offset.
            x: Horizontal position. Defaults to playfield width.

        Returns:
            The new pipe.
        """
        if x is None:
            x = float(self.width)

        pipe = Pipe(
            uid=self._next_uid,
            x=float(x),
            top=float(top),
            bottom=float(top) + self._config.pipes.gap,
            width=self._config.pipes.width
        )
        self._next_uid += 1
        self._pipes.append(pipe)
        return pipe

    def replace_pipes(self, survivors: List[Pipe]) -> None:
        """Swap in the surviving pipes after a tick's removal pass."""
        self._pipes = survivors

    def clear(self) -> None:
        """Restore the bird to its start state and drop every pipe."""
        self._bird.y = self._config.bird_start_y
        self._bird.velocity = 0.0
        self._pipes = []
        self._next_uid = 0
