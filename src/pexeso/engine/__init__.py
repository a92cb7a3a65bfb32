"""Deterministic, headless matching engine for Pexeso.

IMPORTANT: This package must never import pygame.
"""

from .events import Flipped, GameComplete, GameEvent, Ignored, MatchFound, Mismatch
from .game import MatchEngine, build_deck, replay
from .types import Card, EngineConfigError, EngineError, RangeError

__all__ = [
    "Card",
    "EngineConfigError",
    "EngineError",
    "Flipped",
    "GameComplete",
    "GameEvent",
    "Ignored",
    "MatchEngine",
    "MatchFound",
    "Mismatch",
    "RangeError",
    "build_deck",
    "replay",
]
