from __future__ import annotations

import json

from pexeso.engine import MatchEngine
from pexeso.engine.game import replay
from pexeso.engine.serialize import snapshot
from pexeso.paths import get_paths
from pexeso.services.content import ContentService


def _load_faces() -> tuple[str, ...]:
    paths = get_paths()
    content = ContentService(paths.data_dir, paths.schema_dir)
    return content.load_game_config().faces


def test_same_seed_same_layout() -> None:
    faces = _load_faces()
    a = MatchEngine(faces, seed=424242)
    b = MatchEngine(faces, seed=424242)
    assert [c.image_path for c in a.cards_in_play()] == [c.image_path for c in b.cards_in_play()]


def test_unseeded_game_records_its_seed() -> None:
    faces = _load_faces()
    engine = MatchEngine(faces)
    assert engine.seed is not None
    again = MatchEngine(faces, seed=engine.seed)
    assert snapshot(engine) == snapshot(again)


def test_engine_determinism_replay() -> None:
    faces = _load_faces()
    seed = 424242
    engine = MatchEngine(faces, seed=seed)

    clicks = []
    for i in range(30):
        engine.hide_mismatch()
        pos = (i * 7) % len(faces * 2)
        clicks.append(pos)
        engine.select(pos)

    snap1 = snapshot(engine)
    snap2 = snapshot(replay(faces, seed=seed, positions=clicks))

    assert snap1 == snap2
    # canonical snapshots are plain JSON
    assert json.loads(json.dumps(snap1)) == snap1
