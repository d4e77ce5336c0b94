"""
Tests for the solid and pygame renderers.
"""

import numpy as np
import pytest

from flappy_game.flappy_core.config_loader import load_config
from flappy_game.flappy_core.game import CoreGame
from flappy_game.flappy_core.render_solid import SolidRenderer


@pytest.fixture
def config():
    return load_config()


@pytest.fixture
def game(config):
    return CoreGame(config=config, seed=42)


@pytest.fixture
def running_with_pipe(game):
    """Render data for a running game with one pipe at x=200, gap 100..250."""
    game.start()
    game.physics.spawn_pipe(top=100.0, x=200.0)
    return game.get_render_data()


class TestRenderData:

    def test_render_data_structure(self, running_with_pipe):
        data = running_with_pipe
        assert data["board_width"] == 400
        assert data["board_height"] == 480
        assert data["phase"] == "running"
        assert set(data["bird"]) == {"x", "y", "radius", "velocity"}
        assert data["pipes"][0]["top"] == 100.0
        assert data["pipes"][0]["bottom"] == 250.0


class TestSolidRenderer:
    """Test the numpy hitbox rasterizer."""

    def test_output_shape(self, config, running_with_pipe):
        img = SolidRenderer(config).render(running_with_pipe, 200, 240)
        assert img.shape == (240, 200, 3)
        assert img.dtype == np.uint8

    def test_draws_pipes_and_bird(self, config, running_with_pipe):
        """At board resolution each element lands on its own pixels."""
        img = SolidRenderer(config).render(running_with_pipe, 400, 480)

        display = config.display
        assert tuple(img[50, 210]) == display.color_pipe       # upper segment
        assert tuple(img[300, 210]) == display.color_pipe      # lower segment
        assert tuple(img[175, 210]) == display.color_background  # gap
        assert tuple(img[240, 50]) == display.color_bird
        assert tuple(img[239, 31]) == display.color_bird       # box corner
        assert tuple(img[240, 300]) == display.color_background

    def test_idle_frames_are_dimmed(self, config, game):
        """Outside the running phase the frame is darkened and the bird hidden."""
        img = SolidRenderer(config).render(game.get_render_data(), 400, 480)

        expected = (np.array(config.display.color_background) * 0.6).astype(np.uint8)
        assert tuple(img[240, 50]) == tuple(expected)

    def test_scaled_output(self, config, running_with_pipe):
        img = SolidRenderer(config).render(running_with_pipe, 200, 240)
        assert tuple(img[25, 105]) == config.display.color_pipe
        assert tuple(img[120, 25]) == config.display.color_bird

    def test_pipe_clipped_at_edges(self, config, game):
        """Pipes partly off-screen are clipped, not wrapped."""
        game.start()
        game.physics.spawn_pipe(top=100.0, x=380.0)
        game.physics.spawn_pipe(top=100.0, x=-30.0)
        img = SolidRenderer(config).render(game.get_render_data(), 400, 480)

        assert tuple(img[50, 399]) == config.display.color_pipe
        assert tuple(img[50, 0]) == config.display.color_pipe
        assert tuple(img[50, 25]) == config.display.color_background


class TestPygameRenderer:
    """Test the full pygame renderer headlessly."""

    @pytest.fixture
    def renderer(self, config):
        pytest.importorskip("pygame")
        from flappy_game.flappy_core.render_full_pygame import PygameRenderer
        renderer = PygameRenderer(config)
        yield renderer
        renderer.close()

    def test_output_shape(self, renderer, running_with_pipe):
        img = renderer.render(running_with_pipe, 400, 480)
        assert img.shape == (480, 400, 3)
        assert img.dtype == np.uint8

    def test_draws_pipe(self, renderer, config, running_with_pipe):
        img = renderer.render(running_with_pipe, 400, 480)
        assert tuple(img[50, 220]) == config.display.color_pipe
        assert tuple(img[400, 220]) == config.display.color_pipe

    def test_draws_bird_circle(self, renderer, config, running_with_pipe):
        img = renderer.render(running_with_pipe, 400, 480)
        assert tuple(img[240, 50]) == config.display.color_bird
        # Box corner lies outside the drawn circle
        assert tuple(img[221, 31]) == config.display.color_background

    def test_start_screen_hides_playfield(self, renderer, config, game):
        """Before the first press only the prompt is shown."""
        game.start()
        game.physics.spawn_pipe(top=100.0, x=200.0)
        game.reset()
        img = renderer.render(game.get_render_data(), 400, 480)
        assert tuple(img[5, 5]) == config.display.color_background
        assert tuple(img[240, 50]) == config.display.color_background
