from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from ..app import GameContext
from ..scene_base import BaseScene
from ..ui import Button, draw_text
from .new_game import NewGameScene
from .scores import ScoresScene


class MainMenuScene(BaseScene):
    def __init__(self, ctx: GameContext) -> None:
        super().__init__(ctx)
        self._buttons: list[Button] = []
        self._build_ui()

    def _build_ui(self) -> None:
        w = 320
        h = 60
        gap = 16
        x = (self.ctx.screen.get_width() - w) // 2
        y = 240

        self._buttons = [
            Button(
                rect=pygame.Rect(x, y, w, h),
                text="New Game",
                on_click=lambda: self.go(NewGameScene(self.ctx)),
            ),
            Button(
                rect=pygame.Rect(x, y + (h + gap) * 1, w, h),
                text="Scores",
                on_click=lambda: self.go(ScoresScene(self.ctx)),
            ),
            Button(
                rect=pygame.Rect(x, y + (h + gap) * 2, w, h),
                text="Quit",
                on_click=lambda: pygame.event.post(pygame.event.Event(pygame.QUIT)),
            ),
        ]

    def handle_event(self, event: pygame.event.Event) -> None:
        for b in self._buttons:
            if b.handle_event(event):
                return

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((12, 12, 18))
        fonts = self.ctx.assets.fonts
        title = fonts.big.render("Pexeso", True, (240, 240, 240))
        screen.blit(title, title.get_rect(center=(screen.get_width() // 2, 140)).topleft)
        for b in self._buttons:
            b.draw(screen, fonts.ui)
        draw_text(screen, fonts.small, "Find all the pairs in as few moves as you can.", (40, screen.get_height() - 40))
