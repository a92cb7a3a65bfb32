from __future__ import annotations

import logging
import traceback

import pygame  # type: ignore[import-not-found]

from pexeso.services.content import ContentError
from pexeso.services.scores import ScoreStore, StorageError
from ..app import GameContext
from ..scene_base import BaseScene, SceneTransition
from ..ui import Button, draw_text
from .main_menu import MainMenuScene

logger = logging.getLogger(__name__)


class BootScene(BaseScene):
    def __init__(self, ctx: GameContext) -> None:
        super().__init__(ctx)
        self._did_boot = False
        self._error: str | None = None
        self._quit_button: Button | None = None

    def handle_event(self, event: pygame.event.Event) -> None:
        if self._quit_button is not None:
            self._quit_button.handle_event(event)

    def update(self, dt: float) -> SceneTransition | None:
        if self._did_boot:
            return None
        self._did_boot = True
        try:
            self.ctx.config = self.ctx.content.load_game_config()
            self.ctx.paths.userdata_dir.mkdir(parents=True, exist_ok=True)
            self.ctx.scores = ScoreStore(self.ctx.paths.scores_db)

            self.ctx.telemetry.log("boot", {"ok": True, "faces": len(self.ctx.config.faces)})
            return SceneTransition(MainMenuScene(self.ctx))
        except (ContentError, StorageError, OSError) as e:
            logger.exception("Boot failed")
            tb = traceback.format_exc(limit=8)
            self._error = f"{e}\n\n{tb}"
            self.ctx.telemetry.log("boot", {"ok": False, "error": str(e)})
            # Offer quit button
            self._quit_button = Button(
                rect=pygame.Rect(20, self.ctx.screen.get_height() - 64, 140, 44),
                text="Quit",
                on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
            )
            return None

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((10, 10, 10))
        font = self.ctx.assets.fonts.big
        draw_text(screen, font, "Pexeso", (20, 20))

        font2 = self.ctx.assets.fonts.ui
        if self._error is None:
            draw_text(screen, font2, "Loading... reading config, opening scores.", (20, 80))
            draw_text(screen, self.ctx.assets.fonts.small, "Tip: run `python tools/generate_placeholder_assets.py`", (20, 110))
        else:
            draw_text(screen, font2, "BOOT ERROR", (20, 80), color=(240, 80, 80))
            y = 120
            for line in self._error.splitlines()[:30]:
                draw_text(screen, self.ctx.assets.fonts.small, line[:90], (20, y), color=(230, 230, 230))
                y += 18
            if self._quit_button is not None:
                self._quit_button.draw(screen, font2)
