from __future__ import annotations

from dataclasses import dataclass

FaceId = str


class EngineError(RuntimeError):
    pass


class RangeError(EngineError, IndexError):
    """Raised when a selected position is outside the deck."""


class EngineConfigError(EngineError, ValueError):
    pass


@dataclass
class Card:
    id: int
    image_path: FaceId
    is_flipped: bool = False
    is_matched: bool = False

    def matches(self, other: "Card") -> bool:
        return self.image_path == other.image_path
