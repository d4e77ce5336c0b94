"""
Game Events
===========

Push-style notifications from the simulation to its collaborators
(audio, UI). Listeners are plain callables; the simulation never depends
on them succeeding.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, List

logger = logging.getLogger(__name__)


class GameEventType(str, Enum):
    START = "start"
    JUMP = "jump"
    SCORE = "score"
    GAME_OVER = "game_over"
    RESET = "reset"


@dataclass
class GameEvent:
    type: GameEventType
    tick: int
    score: int
    data: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "type": self.type.value,
            "tick": self.tick,
            "score": self.score,
            "data": self.data,
        }


Listener = Callable[[GameEvent], None]


class EventBus:
    """Synchronous fan-out of game events to subscribed listeners."""

    def __init__(self) -> None:
        self._listeners: List[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def emit(self, event: GameEvent) -> None:
        # Iterate over a copy so listeners may unsubscribe while handling
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Listener %r failed on %s event", listener, event.type.value)
