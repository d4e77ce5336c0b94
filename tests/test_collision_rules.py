"""
Tests for pipe collision, pass detection and playfield bounds.
"""

import pytest

from flappy_game.flappy_core.config_loader import load_config
from flappy_game.flappy_core.game import CoreGame, GamePhase
from flappy_game.flappy_core.physics_world import BirdBody, Pipe
from flappy_game.flappy_core.rules import CollisionRules


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def rules(config):
    return CollisionRules(config)


@pytest.fixture
def game(config):
    game = CoreGame(config=config, seed=42)
    game.start()
    return game


def make_pipe(x, top, gap=150.0, width=50.0):
    return Pipe(uid=0, x=x, top=top, bottom=top + gap, width=width)


class TestPipeCollision:
    """Test box/box collision against pipe segments."""

    def test_inside_gap_is_safe(self, rules):
        """Bird fully inside the gap does not collide."""
        bird = BirdBody(x=50, y=240, radius=20)
        assert not rules.hits_pipe(bird, make_pipe(x=40, top=165))

    def test_above_gap_hits(self, rules):
        """Bird poking above the gap top hits the upper segment."""
        bird = BirdBody(x=50, y=240, radius=20)
        assert rules.hits_pipe(bird, make_pipe(x=40, top=230))

    def test_below_gap_hits(self, rules):
        """Bird poking below the gap bottom hits the lower segment."""
        bird = BirdBody(x=50, y=240, radius=20)
        assert rules.hits_pipe(bird, make_pipe(x=40, top=50))

    def test_no_hit_without_horizontal_overlap(self, rules):
        """Vertical misalignment is harmless while the pipe is elsewhere."""
        bird = BirdBody(x=50, y=240, radius=20)
        assert not rules.hits_pipe(bird, make_pipe(x=200, top=300))
        assert not rules.hits_pipe(bird, make_pipe(x=-40, top=300))

    def test_touching_edges_do_not_overlap(self, rules):
        """Overlap is strict: shared edges are not a collision."""
        bird = BirdBody(x=50, y=240, radius=20)
        assert not rules.hits_pipe(bird, make_pipe(x=70, top=300))
        assert not rules.hits_pipe(bird, make_pipe(x=-20, top=300))

    def test_box_corner_counts_as_hit(self, rules):
        """The square box is used, so a corner clipping a segment is a hit."""
        # Circle would clear this pipe; the box does not
        bird = BirdBody(x=50, y=240, radius=20)
        assert rules.hits_pipe(bird, make_pipe(x=68, top=221))


class TestPassAndBounds:
    """Test pass detection and playfield bounds."""

    def test_passed_requires_trailing_edge_behind_bird(self, rules):
        """A pipe is passed once its right edge is strictly left of the bird's x."""
        bird = BirdBody(x=50, y=240, radius=20)
        assert not rules.has_passed(bird, make_pipe(x=0, top=165))
        assert rules.has_passed(bird, make_pipe(x=-0.5, top=165))

    def test_floor(self, rules):
        bird = BirdBody(x=50, y=461, radius=20)
        result = rules.check_bounds(bird)
        assert result.terminated
        assert result.reason == "floor"

    def test_ceiling(self, rules):
        bird = BirdBody(x=50, y=19, radius=20)
        result = rules.check_bounds(bird)
        assert result.terminated
        assert result.reason == "ceiling"

    def test_touching_bounds_is_safe(self, rules):
        """Bird box exactly on the edge is still inside."""
        assert not rules.check_bounds(BirdBody(x=50, y=460, radius=20)).terminated
        assert not rules.check_bounds(BirdBody(x=50, y=20, radius=20)).terminated


class TestTermination:
    """Test game-over through the tick loop."""

    def test_free_fall_hits_floor(self, game):
        """Without input the bird reaches the floor on tick 30."""
        for _ in range(29):
            assert not game.tick().game_over

        result = game.tick()

        assert result.game_over
        assert result.termination_reason == "floor"
        assert game.phase is GamePhase.OVER
        assert game.tick_count == 30

    def test_ceiling_hit(self, game):
        """Flying off the top ends the game."""
        game.physics.bird.y = 15.0
        result = game.tick()
        assert result.game_over
        assert game.termination_reason == "ceiling"

    def test_pipe_hit(self, game):
        """A pipe in the bird's path ends the game."""
        game.physics.spawn_pipe(top=300.0, x=60.0)
        result = game.tick()
        assert result.game_over
        assert result.termination_reason == "pipe"

    def test_two_pipe_hits_end_game_once(self, game):
        """Overlapping pipes on one tick produce one game over."""
        game.physics.spawn_pipe(top=300.0, x=40.0)
        game.physics.spawn_pipe(top=300.0, x=50.0)

        result = game.tick()

        assert result.game_over
        assert result.termination_reason == "pipe"
        assert [e.type.value for e in result.events] == ["game_over"]
        assert not game.tick().game_over

    def test_pipe_hit_takes_precedence_over_bounds(self, game):
        """When both happen on one tick the reason is the pipe."""
        game.physics.spawn_pipe(top=50.0, x=60.0)
        game.physics.bird.y = 470.0
        result = game.tick()
        assert result.termination_reason == "pipe"
