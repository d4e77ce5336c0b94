"""
Flappy Core - The game simulation and its adapters.

This module provides the core game simulation, the Gymnasium environment
wrapper, and the supporting systems (physics, rules, scoring, events).

Main exports:
- CoreGame: Tick-driven game simulation
- GamePhase: not_started / running / over
- FlappyEnv: Gymnasium environment for single-agent training
- GameConfig: Configuration loaded from game_config.yaml
- GameEvent, GameEventType: Notifications emitted by CoreGame
- SoundBoard: Event-driven audio
"""

from flappy_game.flappy_core.config_loader import GameConfig, load_config
from flappy_game.flappy_core.events import GameEvent, GameEventType
from flappy_game.flappy_core.game import CoreGame, GamePhase, TickResult
from flappy_game.flappy_core.state_snapshot import GameSnapshot
from flappy_game.flappy_core.env_gym import FlappyEnv
from flappy_game.flappy_core.audio import SoundBoard
from flappy_game.flappy_core.logger import setup_logging

__all__ = [
    "GameConfig",
    "load_config",
    "GameEvent",
    "GameEventType",
    "CoreGame",
    "GamePhase",
    "TickResult",
    "GameSnapshot",
    "FlappyEnv",
    "SoundBoard",
    "setup_logging",
]
