"""
State Snapshot
==============

Read-only view of the session for renderers, plus packing into fixed-size
numpy arrays for Gymnasium observations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple, TYPE_CHECKING
import numpy as np

from flappy_game.flappy_core.config_loader import GameConfig, get_config

if TYPE_CHECKING:
    from flappy_game.flappy_core.physics_world import PhysicsWorld


PHASE_CODES = {"not_started": 0, "running": 1, "over": 2}


@dataclass(frozen=True)
class PipeView:
    """Immutable copy of a pipe's geometry."""
    uid: int
    x: float
    width: float
    top: float
    bottom: float
    passed: bool

    @property
    def right(self) -> float:
        return self.x + self.width


@dataclass(frozen=True)
class GameSnapshot:
    """
    Complete session snapshot.

    Pipe arrays are fixed-size (max_pipes) with a mask for live entries,
    in creation order.
    """
    # Core state
    phase: str
    score: int
    tick: int

    # Board info (for normalization)
    board_width: float
    board_height: float

    # Bird
    bird_x: float
    bird_y: float
    bird_velocity: float
    bird_radius: float

    # Pipes
    pipes: Tuple[PipeView, ...]
    pipe_count: int

    # Derived features for the pipe the bird has yet to clear
    next_pipe_dx: float               # Trailing edge x minus bird x
    next_gap_top: float
    next_gap_bottom: float
    next_gap_dy: float                # Gap centre minus bird y

    # Fixed-size arrays
    pipe_x: np.ndarray                # (MAX_PIPES,) float32
    pipe_top: np.ndarray              # (MAX_PIPES,) float32
    pipe_bottom: np.ndarray           # (MAX_PIPES,) float32
    pipe_passed: np.ndarray           # (MAX_PIPES,) bool
    pipe_mask: np.ndarray             # (MAX_PIPES,) bool

    @property
    def is_running(self) -> bool:
        return self.phase == "running"

    @property
    def is_over(self) -> bool:
        return self.phase == "over"

    def to_obs_dict(self) -> Dict[str, np.ndarray]:
        """Convert to Gymnasium observation dictionary."""
        return {
            "phase": np.array(PHASE_CODES[self.phase], dtype=np.int32),
            "score": np.array(self.score, dtype=np.int64),
            "bird_y": np.array(self.bird_y, dtype=np.float32),
            "bird_velocity": np.array(self.bird_velocity, dtype=np.float32),
            "next_pipe_dx": np.array(self.next_pipe_dx, dtype=np.float32),
            "next_gap_top": np.array(self.next_gap_top, dtype=np.float32),
            "next_gap_bottom": np.array(self.next_gap_bottom, dtype=np.float32),
            "next_gap_dy": np.array(self.next_gap_dy, dtype=np.float32),
            "pipe_x": self.pipe_x.copy(),
            "pipe_top": self.pipe_top.copy(),
            "pipe_bottom": self.pipe_bottom.copy(),
            "pipe_passed": self.pipe_passed.copy(),
            "pipe_mask": self.pipe_mask.copy(),
        }


class SnapshotBuilder:
    """Builds session snapshots with pre-allocated scratch arrays."""

    def __init__(self, config: Optional[GameConfig] = None):
        if config is None:
            config = get_config()

        self._config = config
        self._max_pipes = config.observation.max_pipes
        self._board_width = config.playfield.width
        self._board_height = config.playfield.height

        self._pipe_x = np.zeros(self._max_pipes, dtype=np.float32)
        self._pipe_top = np.zeros(self._max_pipes, dtype=np.float32)
        self._pipe_bottom = np.zeros(self._max_pipes, dtype=np.float32)
        self._pipe_passed = np.zeros(self._max_pipes, dtype=bool)
        self._pipe_mask = np.zeros(self._max_pipes, dtype=bool)

    @property
    def max_pipes(self) -> int:
        return self._max_pipes

    def build(
        self,
        physics: "PhysicsWorld",
        phase: str,
        score: int,
        tick: int
    ) -> GameSnapshot:
        """Build a snapshot from current game state."""
        self._pipe_x.fill(0)
        self._pipe_top.fill(0)
        self._pipe_bottom.fill(0)
        self._pipe_passed.fill(False)
        self._pipe_mask.fill(False)

        bird = physics.bird
        pipes = tuple(
            PipeView(
                uid=p.uid,
                x=p.x,
                width=p.width,
                top=p.top,
                bottom=p.bottom,
                passed=p.passed
            )
            for p in physics.pipes
        )

        for i, pipe in enumerate(pipes[:self._max_pipes]):
            self._pipe_x[i] = pipe.x
            self._pipe_top[i] = pipe.top
            self._pipe_bottom[i] = pipe.bottom
            self._pipe_passed[i] = pipe.passed
            self._pipe_mask[i] = True

        upcoming = self._next_pipe(pipes, bird.x)
        if upcoming is None:
            # Nothing ahead: report an open playfield
            next_dx = float(self._board_width)
            gap_top = 0.0
            gap_bottom = float(self._board_height)
        else:
            next_dx = upcoming.right - bird.x
            gap_top = upcoming.top
            gap_bottom = upcoming.bottom

        return GameSnapshot(
            phase=phase,
            score=score,
            tick=tick,
            board_width=float(self._board_width),
            board_height=float(self._board_height),
            bird_x=bird.x,
            bird_y=bird.y,
            bird_velocity=bird.velocity,
            bird_radius=bird.radius,
            pipes=pipes,
            pipe_count=len(pipes),
            next_pipe_dx=float(next_dx),
            next_gap_top=float(gap_top),
            next_gap_bottom=float(gap_bottom),
            next_gap_dy=float((gap_top + gap_bottom) / 2 - bird.y),
            pipe_x=self._pipe_x.copy(),
            pipe_top=self._pipe_top.copy(),
            pipe_bottom=self._pipe_bottom.copy(),
            pipe_passed=self._pipe_passed.copy(),
            pipe_mask=self._pipe_mask.copy()
        )

    @staticmethod
    def _next_pipe(pipes: Tuple[PipeView, ...], bird_x: float) -> Optional[PipeView]:
        """First pipe (creation order) whose trailing edge is not behind the bird."""
        for pipe in pipes:
            if pipe.right >= bird_x:
                return pipe
        return None
