from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable

from pexeso.engine import GameComplete, GameEvent, MatchEngine, Mismatch
from pexeso.services.content import GameConfig
from pexeso.services.scores import SaveResult, ScoreRecord, ScoreStore

logger = logging.getLogger(__name__)


class SessionError(ValueError):
    pass


def validate_player_name(name: str) -> str:
    cleaned = name.strip()
    if not cleaned:
        raise SessionError("Enter the player's name.")
    return cleaned


@dataclass
class HideTimer:
    """Frame-driven one-shot timer for turning a mismatched pair face-down."""

    remaining: float = 0.0
    active: bool = False

    def start(self, delay: float) -> None:
        self.remaining = delay
        self.active = True

    def cancel(self) -> None:
        self.remaining = 0.0
        self.active = False

    def update(self, dt: float) -> bool:
        """Advance by dt seconds; True exactly once, on the frame the timer fires."""
        if not self.active:
            return False
        self.remaining -= dt
        if self.remaining > 0:
            return False
        self.cancel()
        return True


class GameSession:
    """One player's game: engine, clock, mismatch hide and result packaging."""

    def __init__(
        self,
        player_name: str,
        config: GameConfig,
        *,
        seed: int | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.player_name = validate_player_name(player_name)
        self.config = config
        self.engine = MatchEngine(config.faces, seed=seed)
        self.hide_timer = HideTimer()
        self._clock = clock
        self._started = clock()
        self._finished: float | None = None

    @property
    def input_enabled(self) -> bool:
        return not self.hide_timer.active and not self.engine.is_complete()

    def select(self, position: int) -> list[GameEvent]:
        events = self.engine.select(position)
        for ev in events:
            if isinstance(ev, Mismatch):
                self.hide_timer.start(self.config.hide_delay)
            elif isinstance(ev, GameComplete):
                self._finished = self._clock()
        return events

    def update(self, dt: float) -> tuple[int, ...]:
        """Advance the hide timer; returns positions turned face-down this frame."""
        if self.hide_timer.update(dt):
            return self.engine.hide_mismatch()
        return ()

    def elapsed_seconds(self) -> int:
        end = self._finished if self._finished is not None else self._clock()
        return max(0, int(end - self._started))

    def result(self) -> ScoreRecord:
        if not self.engine.is_complete():
            raise SessionError("Game is not complete yet.")
        return ScoreRecord(name=self.player_name, score=self.engine.moves(), time=self.elapsed_seconds())

    def save(self, store: ScoreStore) -> SaveResult:
        res = store.try_add(self.result())
        if res.ok:
            logger.debug("Score saved for %s", self.player_name)
        return res
