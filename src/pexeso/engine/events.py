from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Flipped:
    position: int


@dataclass(frozen=True)
class Ignored:
    position: int


@dataclass(frozen=True)
class MatchFound:
    positions: tuple[int, int]


@dataclass(frozen=True)
class Mismatch:
    positions: tuple[int, int]


@dataclass(frozen=True)
class GameComplete:
    moves: int


GameEvent = Flipped | Ignored | MatchFound | Mismatch | GameComplete
