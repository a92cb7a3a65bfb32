from __future__ import annotations


from .events import Flipped, GameComplete, GameEvent, Ignored, MatchFound, Mismatch
from .game import MatchEngine
from .types import Card


def event_to_dict(ev: GameEvent) -> dict[str, object]:
    if isinstance(ev, Flipped):
        return {"type": "flipped", "position": ev.position}
    if isinstance(ev, Ignored):
        return {"type": "ignored", "position": ev.position}
    if isinstance(ev, MatchFound):
        return {"type": "match_found", "positions": list(ev.positions)}
    if isinstance(ev, Mismatch):
        return {"type": "mismatch", "positions": list(ev.positions)}
    if isinstance(ev, GameComplete):
        return {"type": "game_complete", "moves": ev.moves}
    # should be unreachable
    return {"type": "unknown"}


def _card_to_dict(c: Card) -> dict[str, object]:
    return {
        "id": c.id,
        "image_path": c.image_path,
        "is_flipped": c.is_flipped,
        "is_matched": c.is_matched,
    }


def snapshot(engine: MatchEngine) -> dict[str, object]:
    """Return a JSON-serializable canonical snapshot of the current game state."""
    return {
        "seed": engine.seed,
        "faces": list(engine.faces),
        "moves": engine.moves(),
        "complete": engine.is_complete(),
        "pending_hide": list(engine.pending_hide()),
        "deck": [_card_to_dict(c) for c in engine.cards_in_play()],
        "selection": [c.id for c in engine.current_selection()],
    }
