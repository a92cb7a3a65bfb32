from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import pygame  # type: ignore[import-not-found]

from pexeso.paths import Paths
from pexeso.services.content import ContentService, GameConfig
from pexeso.services.scores import ScoreStore
from pexeso.services.telemetry import TelemetryService

from .asset_manager import AssetManager
from .scene_base import Scene

logger = logging.getLogger(__name__)


@dataclass
class GameContext:
    screen: pygame.Surface
    clock: pygame.time.Clock
    paths: Paths
    assets: AssetManager
    content: ContentService
    telemetry: TelemetryService

    # Loaded at boot
    config: Optional[GameConfig] = None
    scores: Optional[ScoreStore] = None


class App:
    def __init__(self, ctx: GameContext, initial_scene: Scene) -> None:
        self.ctx = ctx
        self.scene: Scene = initial_scene
        self.running = True

    def run(self) -> int:
        try:
            while self.running:
                dt = self.ctx.clock.tick(60) / 1000.0
                self._frame(dt)
        finally:
            if self.ctx.scores is not None:
                self.ctx.scores.close()
        return 0

    def _frame(self, dt: float) -> None:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.running = False
                return
            self.scene.handle_event(event)

        tr = self.scene.update(dt)
        if tr is not None:
            logger.debug("Scene %s -> %s", type(self.scene).__name__, type(tr.next_scene).__name__)
            self.scene = tr.next_scene

        self.scene.render(self.ctx.screen)
        pygame.display.flip()
