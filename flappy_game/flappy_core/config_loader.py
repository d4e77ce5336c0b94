"""
Configuration Loader
====================

Loads and validates game_config.yaml, providing typed access to all parameters.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Tuple

import yaml


@dataclass(frozen=True)
class PlayfieldConfig:
    """Playfield geometry."""
    width: int
    height: int


@dataclass(frozen=True)
class BirdConfig:
    """Bird kinematics."""
    x: float                # Fixed horizontal position
    radius: float           # Half-size of the collision box
    gravity: float          # Velocity gained per tick
    jump_impulse: float     # Velocity set on flap

    def start_y(self, playfield: PlayfieldConfig) -> float:
        """Vertical start position (playfield centre)."""
        return playfield.height / 2


@dataclass(frozen=True)
class PipeConfig:
    """Obstacle geometry and cadence."""
    width: float
    gap: float
    min_height: float
    scroll_speed: float
    spawn_interval_ticks: int


@dataclass(frozen=True)
class AudioConfig:
    """Sound effect and music settings."""
    enabled: bool
    sample_rate: int
    effects_volume: float
    music_volume: float


@dataclass(frozen=True)
class DisplayConfig:
    """Window and palette settings."""
    fps: int
    scale: float
    caption: str
    color_bird: Tuple[int, int, int]
    color_pipe: Tuple[int, int, int]
    color_background: Tuple[int, int, int]
    color_text: Tuple[int, int, int]


@dataclass(frozen=True)
class ObservationConfig:
    """Observation space parameters."""
    max_pipes: int
    image_width: int
    image_height: int
    render_style: str


@dataclass(frozen=True)
class GameConfig:
    """
    Complete game configuration loaded from YAML.

    All values are immutable to prevent accidental modification during runtime.
    """
    playfield: PlayfieldConfig
    bird: BirdConfig
    pipes: PipeConfig
    audio: AudioConfig
    display: DisplayConfig
    observation: ObservationConfig

    @property
    def bird_start_y(self) -> float:
        """Vertical position the bird starts from and returns to on reset."""
        return self.bird.start_y(self.playfield)

    @property
    def gap_top_range(self) -> Tuple[float, float]:
        """Inclusive range of valid gap-top offsets."""
        low = self.pipes.min_height
        high = self.playfield.height - self.pipes.gap - self.pipes.min_height
        return (low, high)


def _parse_color(color_data: List) -> Tuple[int, int, int]:
    """Parse RGB color from YAML."""
    if len(color_data) != 3:
        raise ValueError(f"Color must have 3 values [R, G, B], got {color_data}")
    color = (int(color_data[0]), int(color_data[1]), int(color_data[2]))
    if any(c < 0 or c > 255 for c in color):
        raise ValueError(f"Color components must be in [0, 255], got {color_data}")
    return color


def _validate_config(config: GameConfig) -> None:
    """Validate configuration consistency."""
    playfield = config.playfield
    if playfield.width <= 0 or playfield.height <= 0:
        raise ValueError(
            f"Playfield size must be positive, got {playfield.width}x{playfield.height}"
        )

    if config.bird.radius <= 0:
        raise ValueError(f"bird.radius must be positive, got {config.bird.radius}")

    # The bird has to fit vertically, otherwise it is out of bounds on spawn
    if 2 * config.bird.radius >= playfield.height:
        raise ValueError(
            f"bird diameter ({2 * config.bird.radius}) must be smaller than "
            f"playfield height ({playfield.height})"
        )

    if not 0 <= config.bird.x <= playfield.width:
        raise ValueError(f"bird.x ({config.bird.x}) must lie inside the playfield")

    pipes = config.pipes
    if pipes.width <= 0 or pipes.gap <= 0:
        raise ValueError("pipes.width and pipes.gap must be positive")

    if pipes.scroll_speed <= 0:
        raise ValueError(f"pipes.scroll_speed must be positive, got {pipes.scroll_speed}")

    if pipes.spawn_interval_ticks < 1:
        raise ValueError(
            f"pipes.spawn_interval_ticks must be at least 1, got {pipes.spawn_interval_ticks}"
        )

    low, high = config.gap_top_range
    if pipes.min_height < 0 or low > high:
        raise ValueError(
            f"Gap of {pipes.gap} with min_height {pipes.min_height} does not fit "
            f"a playfield of height {playfield.height}"
        )

    if config.observation.max_pipes < 1:
        raise ValueError("observation.max_pipes must be at least 1")

    if config.observation.render_style not in ("solid", "full"):
        raise ValueError(
            f"render_style must be 'solid' or 'full', got '{config.observation.render_style}'"
        )

    if config.display.fps < 1 or config.display.scale <= 0:
        raise ValueError("display.fps and display.scale must be positive")


def load_config(config_path: Optional[str] = None) -> GameConfig:
    """
    Load and validate game configuration from YAML.

    Args:
        config_path: Path to game_config.yaml. If None, uses default location.

    Returns:
        Validated GameConfig instance.

    Raises:
        FileNotFoundError: If config file doesn't exist.
        ValueError: If config validation fails.
    """
    if config_path is None:
        config_path = os.path.join(
            os.path.dirname(os.path.dirname(__file__)),
            "game_config.yaml"
        )

    config_path = Path(config_path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, "r") as f:
        raw = yaml.safe_load(f)

    playfield_data = raw["playfield"]
    playfield = PlayfieldConfig(
        width=int(playfield_data["width"]),
        height=int(playfield_data["height"])
    )

    bird_data = raw["bird"]
    bird = BirdConfig(
        x=float(bird_data.get("x", 50)),
        radius=float(bird_data.get("radius", 20)),
        gravity=float(bird_data["gravity"]),
        jump_impulse=float(bird_data["jump_impulse"])
    )

    pipes_data = raw["pipes"]
    pipes = PipeConfig(
        width=float(pipes_data["width"]),
        gap=float(pipes_data["gap"]),
        min_height=float(pipes_data.get("min_height", 50)),
        scroll_speed=float(pipes_data.get("scroll_speed", 2.0)),
        spawn_interval_ticks=int(pipes_data.get("spawn_interval_ticks", 100))
    )

    # Optional sections
    audio_data = raw.get("audio", {})
    audio = AudioConfig(
        enabled=bool(audio_data.get("enabled", True)),
        sample_rate=int(audio_data.get("sample_rate", 44100)),
        effects_volume=float(audio_data.get("effects_volume", 1.0)),
        music_volume=float(audio_data.get("music_volume", 0.35))
    )

    display_data = raw.get("display", {})
    display = DisplayConfig(
        fps=int(display_data.get("fps", 60)),
        scale=float(display_data.get("scale", 1.0)),
        caption=str(display_data.get("caption", "Flappy")),
        color_bird=_parse_color(display_data.get("color_bird", [255, 215, 0])),
        color_pipe=_parse_color(display_data.get("color_pipe", [46, 139, 87])),
        color_background=_parse_color(display_data.get("color_background", [112, 197, 206])),
        color_text=_parse_color(display_data.get("color_text", [255, 255, 255]))
    )

    obs_data = raw.get("observation", {})
    observation = ObservationConfig(
        max_pipes=int(obs_data.get("max_pipes", 4)),
        image_width=int(obs_data.get("image_width", 200)),
        image_height=int(obs_data.get("image_height", 240)),
        render_style=str(obs_data.get("render_style", "solid"))
    )

    config = GameConfig(
        playfield=playfield,
        bird=bird,
        pipes=pipes,
        audio=audio,
        display=display,
        observation=observation
    )

    _validate_config(config)
    return config


# Module-level cache; holds configuration only, never session state
_cached_config: Optional[GameConfig] = None


def get_config() -> GameConfig:
    """Get the cached game configuration, loading if necessary."""
    global _cached_config
    if _cached_config is None:
        _cached_config = load_config()
    return _cached_config


def reload_config(config_path: Optional[str] = None) -> GameConfig:
    """Reload the configuration (useful for testing)."""
    global _cached_config
    _cached_config = load_config(config_path)
    return _cached_config
