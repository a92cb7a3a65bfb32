from __future__ import annotations

import os
from datetime import datetime, timezone
from pathlib import Path

# Headless pygame for CI and terminals without a display
os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pygame  # type: ignore[import-not-found]
import pytest

from pexeso.client.pygame_app.app import App, GameContext
from pexeso.client.pygame_app.asset_manager import placeholder_color
from pexeso.client.pygame_app.scenes.main_menu import MainMenuScene
from pexeso.client.pygame_app.scenes.scores import ScoresScene
from pexeso.client.pygame_app.ui import format_played_at
from pexeso.paths import get_paths
from pexeso.services.content import ContentService
from pexeso.services.scores import ScoreRecord, ScoreStore
from pexeso.services.telemetry import TelemetryService


class FixedClock:
    def tick(self, fps: int) -> int:
        return 16


class BrokenScene:
    def handle_event(self, event: pygame.event.Event) -> None:
        pass

    def update(self, dt: float) -> None:
        raise RuntimeError("scene crashed")

    def render(self, screen: pygame.Surface) -> None:
        pass


def _context(tmp_path: Path, store: ScoreStore) -> GameContext:
    paths = get_paths(tmp_path)
    return GameContext(
        screen=pygame.Surface((720, 900)),
        clock=FixedClock(),  # type: ignore[arg-type]
        paths=paths,
        assets=None,  # type: ignore[arg-type]
        content=ContentService(paths.data_dir, paths.schema_dir),
        telemetry=TelemetryService(paths.telemetry_log),
        scores=store,
    )


def test_store_closed_when_scene_raises(tmp_path: Path) -> None:
    pygame.display.init()
    try:
        store = ScoreStore(tmp_path / "scores.db")
        app = App(_context(tmp_path, store), BrokenScene())
        with pytest.raises(RuntimeError, match="scene crashed"):
            app.run()
        assert not store.try_add(ScoreRecord(name="Alice", score=1, time=1)).ok
    finally:
        pygame.display.quit()


def test_scores_scene_follows_store_until_it_leaves(tmp_path: Path) -> None:
    with ScoreStore(":memory:") as store:
        scene = ScoresScene(_context(tmp_path, store))
        assert scene._rows == []

        store.add(ScoreRecord(name="Alice", score=4, time=20))
        assert [r.name for r in scene._rows] == ["Alice"]

        scene.go_to_menu()
        transition = scene.update(0.016)
        assert transition is not None
        assert isinstance(transition.next_scene, MainMenuScene)

        store.add(ScoreRecord(name="Bob", score=1, time=5))
        assert [r.name for r in scene._rows] == ["Alice"]


def test_played_at_includes_time_of_day() -> None:
    morning = datetime(2024, 5, 17, 9, 5, tzinfo=timezone.utc)
    evening = datetime(2024, 5, 17, 21, 40, tzinfo=timezone.utc)
    assert format_played_at(morning, timezone.utc) == "17.05.2024 09:05"
    assert format_played_at(evening, timezone.utc) == "17.05.2024 21:40"


def test_placeholder_color_is_stable_per_face() -> None:
    assert placeholder_color("apple") == placeholder_color("apple")
    assert placeholder_color("apple") != placeholder_color("banana")
    assert all(60 <= c < 220 for c in placeholder_color("cherry"))
