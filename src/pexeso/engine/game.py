from __future__ import annotations

import logging
import random
from dataclasses import replace
from typing import Callable, Iterable, Sequence

from .events import Flipped, GameComplete, GameEvent, Ignored, MatchFound, Mismatch
from .types import Card, EngineConfigError, FaceId, RangeError

logger = logging.getLogger(__name__)

Listener = Callable[[GameEvent], None]


def build_deck(faces: Sequence[FaceId]) -> list[Card]:
    """Two cards per face, ids 1..2N, in unshuffled order."""
    n = len(faces)
    return [Card(id=i, image_path=faces[(i - 1) % n]) for i in range(1, 2 * n + 1)]


def _check_faces(faces: Iterable[FaceId]) -> tuple[FaceId, ...]:
    out = tuple(faces)
    if len(out) < 2:
        raise EngineConfigError("At least two distinct face values are required.")
    if len(set(out)) != len(out):
        raise EngineConfigError("Face values must be distinct.")
    return out


class MatchEngine:
    """Card-matching state machine.

    `select` is synchronous and returns the events it produced, in order.
    Mismatched cards stay face-up until `hide_mismatch` is called; no
    selection is accepted while such a hide is pending.
    """

    def __init__(self, faces: Iterable[FaceId] | None = None, seed: int | None = None) -> None:
        self._deck: list[Card] = []
        self._selection: list[int] = []
        self._pending_hide: tuple[int, ...] = ()
        self._moves = 0
        self._complete = False
        self._listener: Listener | None = None
        self.seed: int | None = None
        self.faces: tuple[FaceId, ...] = ()
        if faces is not None:
            self.new_game(faces, seed=seed)

    def set_listener(self, listener: Listener | None) -> None:
        if listener is not None and not callable(listener):
            raise EngineConfigError(f"Listener must be callable, got {type(listener).__name__}")
        self._listener = listener

    def new_game(self, faces: Iterable[FaceId], seed: int | None = None) -> None:
        self.faces = _check_faces(faces)
        if seed is None:
            seed = random.randrange(1, 2**31 - 1)
        self.seed = seed
        deck = build_deck(self.faces)
        random.Random(seed).shuffle(deck)
        self._deck = deck
        self._selection = []
        self._pending_hide = ()
        self._moves = 0
        self._complete = False

    # -------- Queries --------
    def cards_in_play(self) -> list[Card]:
        return [replace(c) for c in self._deck]

    def current_selection(self) -> list[Card]:
        return [replace(self._deck[p]) for p in self._selection]

    def moves(self) -> int:
        return self._moves

    def is_complete(self) -> bool:
        return self._complete

    def pending_hide(self) -> tuple[int, ...]:
        return self._pending_hide

    # -------- Commands --------
    def select(self, position: int) -> list[GameEvent]:
        if not 0 <= position < len(self._deck):
            raise RangeError(f"Position {position} is outside the deck (size {len(self._deck)}).")

        card = self._deck[position]
        if card.is_flipped or card.is_matched or len(self._selection) >= 2 or self._pending_hide:
            return self._emit([Ignored(position)])

        card.is_flipped = True
        self._selection.append(position)
        events: list[GameEvent] = [Flipped(position)]
        if len(self._selection) == 2:
            self._moves += 1
            logger.debug("Number of moves: %d", self._moves)
            events.extend(self._resolve())
        return self._emit(events)

    def hide_mismatch(self) -> tuple[int, ...]:
        hidden = self._pending_hide
        for p in hidden:
            self._deck[p].is_flipped = False
        self._pending_hide = ()
        return hidden

    def _resolve(self) -> list[GameEvent]:
        p1, p2 = self._selection
        a, b = self._deck[p1], self._deck[p2]
        events: list[GameEvent] = []
        if a.matches(b):
            a.is_matched = True
            b.is_matched = True
            events.append(MatchFound((p1, p2)))
        else:
            self._pending_hide = (p1, p2)
            events.append(Mismatch((p1, p2)))
        self._selection.clear()

        if not self._complete and all(c.is_matched for c in self._deck):
            self._complete = True
            events.append(GameComplete(self._moves))
        return events

    def _emit(self, events: list[GameEvent]) -> list[GameEvent]:
        if self._listener is not None:
            for ev in events:
                self._listener(ev)
        return events


def replay(faces: Iterable[FaceId], seed: int, positions: Iterable[int]) -> MatchEngine:
    engine = MatchEngine(faces, seed=seed)
    for p in positions:
        engine.hide_mismatch()
        engine.select(p)
    return engine
