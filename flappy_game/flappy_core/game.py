"""
Core Game
=========

Main game orchestrator combining physics, pipe spawning, scoring, rules
and events. Advancing the simulation never draws anything; renderers pull
snapshots and audio subscribes to events.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

from flappy_game.flappy_core.config_loader import GameConfig, get_config
from flappy_game.flappy_core.events import EventBus, GameEvent, GameEventType, Listener
from flappy_game.flappy_core.physics_world import PhysicsWorld, Pipe
from flappy_game.flappy_core.rng import GapSampler
from flappy_game.flappy_core.rules import CollisionRules, TerminationResult
from flappy_game.flappy_core.scoring import ScoreEvent, ScoreTracker
from flappy_game.flappy_core.state_snapshot import GameSnapshot, SnapshotBuilder

logger = logging.getLogger(__name__)


class GamePhase(str, Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    OVER = "over"


@dataclass
class TickResult:
    """Outcome of a single tick."""
    phase: GamePhase
    advanced: bool                    # False when the tick was a no-op
    delta_score: int = 0
    game_over: bool = False
    termination_reason: str = ""
    spawned: Optional[Pipe] = None
    removed: int = 0
    scores: List[ScoreEvent] = field(default_factory=list)
    events: List[GameEvent] = field(default_factory=list)


class CoreGame:
    """
    Main game simulation class.

    Orchestrates:
    - Bird kinematics and pipe scrolling (PhysicsWorld)
    - Pipe spawning (GapSampler + spawn timer)
    - Collision and boundary rules
    - Scoring
    - Phase machine: not_started -> running -> over -> not_started
    - Events for audio/UI listeners

    One tick = one display frame.
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        seed: Optional[int] = None
    ):
        """
        Initialize game in the ``not_started`` phase.

        Args:
            config: Game configuration. Uses default if None.
            seed: Random seed for gap placement.
        """
        if config is None:
            config = get_config()

        self._config = config
        self._seed = seed

        # Subsystems
        self._physics = PhysicsWorld(config)
        self._sampler = GapSampler(config, seed)
        self._rules = CollisionRules(config)
        self._scorer = ScoreTracker()
        self._snapshot_builder = SnapshotBuilder(config)
        self._events = EventBus()

        # Session state
        self._phase = GamePhase.NOT_STARTED
        self._spawn_timer: int = 0
        self._tick_count: int = 0
        self._termination_reason: str = ""

    @property
    def config(self) -> GameConfig:
        """Game configuration."""
        return self._config

    @property
    def physics(self) -> PhysicsWorld:
        """Physics world instance."""
        return self._physics

    @property
    def events(self) -> EventBus:
        """Event bus listeners subscribe to."""
        return self._events

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def score(self) -> int:
        """Current score."""
        return self._scorer.score

    @property
    def spawn_timer(self) -> int:
        """Ticks since the last pipe was spawned."""
        return self._spawn_timer

    @property
    def tick_count(self) -> int:
        """Ticks advanced while running since the last reset."""
        return self._tick_count

    @property
    def pipe_count(self) -> int:
        return self._physics.pipe_count

    @property
    def is_running(self) -> bool:
        return self._phase is GamePhase.RUNNING

    @property
    def is_over(self) -> bool:
        """True if the bird has crashed."""
        return self._phase is GamePhase.OVER

    @property
    def termination_reason(self) -> str:
        """Reason for game end ("pipe", "floor", "ceiling"), or empty string."""
        return self._termination_reason

    def subscribe(self, listener: Listener) -> None:
        """Register an event listener."""
        self._events.subscribe(listener)

    def unsubscribe(self, listener: Listener) -> None:
        self._events.unsubscribe(listener)

    # ------------------------------------------------------------------
    # Input commands
    # ------------------------------------------------------------------

    def start(self) -> bool:
        """
        Begin play from the ``not_started`` phase.

        Returns:
            True if the phase changed.
        """
        if self._phase is not GamePhase.NOT_STARTED:
            return False

        self._phase = GamePhase.RUNNING
        logger.debug("Game started")
        self._emit(GameEventType.START)
        return True

    def apply_impulse(self) -> bool:
        """
        Flap: set the bird's velocity to the jump impulse.

        Only valid while running; a no-op otherwise.

        Returns:
            True if the flap was applied.
        """
        if self._phase is not GamePhase.RUNNING:
            return False

        self._physics.flap()
        self._emit(GameEventType.JUMP)
        return True

    def start_or_restart(self) -> bool:
        """
        Start from ``not_started`` or reset from ``over``.

        Returns:
            True if the phase changed.
        """
        if self._phase is GamePhase.NOT_STARTED:
            return self.start()
        if self._phase is GamePhase.OVER:
            self.reset()
            return True
        return False

    def press(self) -> GamePhase:
        """
        Handle the single activation gesture (click / space).

        Starts a fresh game, flaps while running, or resets after a crash.

        Returns:
            The phase after handling the press.
        """
        if self._phase is GamePhase.RUNNING:
            self.apply_impulse()
        else:
            self.start_or_restart()
        return self._phase

    def reset(self, seed: Optional[int] = None) -> GameSnapshot:
        """
        Re-initialise the session in place and return to ``not_started``.

        Args:
            seed: New random seed for gap placement. Keeps the stream if None.

        Returns:
            Initial game snapshot.
        """
        if seed is not None:
            self._seed = seed

        self._physics.clear()
        self._sampler.reset(seed)
        self._scorer.reset()

        self._phase = GamePhase.NOT_STARTED
        self._spawn_timer = 0
        self._tick_count = 0
        self._termination_reason = ""

        logger.debug("Game reset")
        self._emit(GameEventType.RESET)
        return self.snapshot()

    # ------------------------------------------------------------------
    # Simulation
    # ------------------------------------------------------------------

    def tick(self) -> TickResult:
        """
        Advance the simulation by one fixed step.

        A no-op unless the phase is ``running``.

        Returns:
            TickResult describing what happened this tick.
        """
        if self._phase is not GamePhase.RUNNING:
            return TickResult(phase=self._phase, advanced=False)

        self._tick_count += 1
        result = TickResult(phase=self._phase, advanced=True)
        bird = self._physics.bird

        # 1. Gravity
        self._physics.step_bird()

        # 2. Spawn timer
        self._spawn_timer += 1
        if self._spawn_timer >= self._config.pipes.spawn_interval_ticks:
            result.spawned = self._physics.spawn_pipe(self._sampler.sample_top())
            self._spawn_timer = 0

        # 3. Pipes, in creation order; survivors collected into a new list
        hit_pipe = False
        passed: List[Pipe] = []
        survivors: List[Pipe] = []
        speed = self._physics.scroll_speed
        for pipe in self._physics.pipes:
            pipe.advance(speed)

            if self._rules.hits_pipe(bird, pipe):
                hit_pipe = True

            if not hit_pipe and not pipe.passed and self._rules.has_passed(bird, pipe):
                pipe.passed = True
                passed.append(pipe)

            if pipe.offscreen():
                result.removed += 1
            else:
                survivors.append(pipe)
        self._physics.replace_pipes(survivors)

        # 4. Boundaries
        termination = self._rules.check_bounds(bird)
        if hit_pipe:
            termination = TerminationResult.game_over("pipe")

        # 5. Game over fires once; a crashing tick awards nothing
        if termination.terminated:
            self._phase = GamePhase.OVER
            self._termination_reason = termination.reason
            result.game_over = True
            result.termination_reason = termination.reason
            logger.info(
                "Game over (%s) at tick %d with score %d",
                termination.reason, self._tick_count, self._scorer.score
            )
            result.events.append(
                self._emit(GameEventType.GAME_OVER, reason=termination.reason)
            )
        else:
            # 6. One point and one event per pipe passed
            for pipe in passed:
                score_event = self._scorer.credit_pipe(pipe.uid, self._tick_count)
                result.scores.append(score_event)
                result.delta_score += score_event.points
                result.events.append(
                    self._emit(GameEventType.SCORE, pipe_uid=pipe.uid)
                )

        result.phase = self._phase
        return result

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def snapshot(self) -> GameSnapshot:
        """Read-only view of the current session."""
        return self._snapshot_builder.build(
            physics=self._physics,
            phase=self._phase.value,
            score=self._scorer.score,
            tick=self._tick_count
        )

    def get_info(self) -> Dict[str, Any]:
        """Get additional info dict for Gymnasium."""
        return {
            "score": self._scorer.score,
            "phase": self._phase.value,
            "tick": self._tick_count,
            "pipe_count": self._physics.pipe_count,
            "pipes_passed": self._scorer.pipes_passed,
            "terminated_reason": self._termination_reason,
        }

    def get_render_data(self) -> Dict[str, Any]:
        """
        Get data needed for rendering.

        Returns:
            Dict with bird, pipes, score, phase and board info.
        """
        bird = self._physics.bird
        return {
            "board_width": self._physics.width,
            "board_height": self._physics.height,
            "phase": self._phase.value,
            "score": self._scorer.score,
            "bird": {
                "x": bird.x,
                "y": bird.y,
                "radius": bird.radius,
                "velocity": bird.velocity,
            },
            "pipes": [
                {
                    "uid": p.uid,
                    "x": p.x,
                    "width": p.width,
                    "top": p.top,
                    "bottom": p.bottom,
                    "passed": p.passed,
                }
                for p in self._physics.pipes
            ],
        }

    def _emit(self, event_type: GameEventType, **data: Any) -> GameEvent:
        event = GameEvent(
            type=event_type,
            tick=self._tick_count,
            score=self._scorer.score,
            data=data
        )
        self._events.emit(event)
        return event
