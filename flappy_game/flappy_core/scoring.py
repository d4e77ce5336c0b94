"""
Scoring System
==============

One point per pipe passed.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ScoreEvent:
    """Record of a scoring event."""
    points: int
    pipe_uid: int
    tick: int

    def __repr__(self) -> str:
        return f"ScoreEvent(pipe={self.pipe_uid}, +{self.points} @ tick {self.tick})"


class ScoreTracker:
    """
    Tracks the session score.

    Each pipe can be credited at most once; crediting the same pipe uid
    twice is ignored.
    """

    POINTS_PER_PIPE = 1

    def __init__(self):
        self._score: int = 0
        self._credited: set = set()

    @property
    def score(self) -> int:
        """Current total score."""
        return self._score

    @property
    def pipes_passed(self) -> int:
        """Number of distinct pipes credited."""
        return len(self._credited)

    def credit_pipe(self, pipe_uid: int, tick: int) -> ScoreEvent:
        """
        Award points for passing a pipe.

        Args:
            pipe_uid: Identifier of the passed pipe.
            tick: Tick on which the pipe was passed.

        Returns:
            ScoreEvent describing the points awarded (0 if already credited).
        """
        if pipe_uid in self._credited:
            return ScoreEvent(points=0, pipe_uid=pipe_uid, tick=tick)

        self._credited.add(pipe_uid)
        self._score += self.POINTS_PER_PIPE
        return ScoreEvent(points=self.POINTS_PER_PIPE, pipe_uid=pipe_uid, tick=tick)

    def reset(self) -> None:
        """Reset score to zero."""
        self._score = 0
        self._credited.clear()
