from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from pexeso.services.session import GameSession, SessionError

from ..app import GameContext
from ..scene_base import BaseScene
from ..ui import Button, TextInput, draw_text


class NewGameScene(BaseScene):
    def __init__(self, ctx: GameContext) -> None:
        super().__init__(ctx)
        self._message = ""
        x = (self.ctx.screen.get_width() - 360) // 2
        self.input = TextInput(rect=pygame.Rect(x, 220, 360, 44), text="", on_submit=self._start, active=True)
        self.btn_start = Button(rect=pygame.Rect(x, 290, 360, 56), text="Start", on_click=self._on_start)
        self.btn_back = Button(rect=pygame.Rect(20, 20, 120, 40), text="Back", on_click=self.go_to_menu)

    def _on_start(self) -> None:
        self._start(self.input.text)

    def _start(self, name: str) -> None:
        from .game import GameScene

        if self.ctx.config is None:
            return
        try:
            session = GameSession(name, self.ctx.config)
        except SessionError as e:
            self._message = str(e)
            return
        self.ctx.telemetry.log("game_started", {"player": session.player_name, "seed": session.engine.seed})
        self.go(GameScene(self.ctx, session))

    def handle_event(self, event: pygame.event.Event) -> None:
        if self.btn_back.handle_event(event):
            return
        if self.btn_start.handle_event(event):
            return
        self.input.handle_event(event)

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((12, 12, 18))
        fonts = self.ctx.assets.fonts
        self.btn_back.draw(screen, fonts.ui)
        draw_text(screen, fonts.big, "New Game", (self.input.rect.x, 100))
        draw_text(screen, fonts.ui, "Player name:", (self.input.rect.x, 190))
        self.input.draw(screen, fonts.ui)
        self.btn_start.draw(screen, fonts.ui)
        if self._message:
            draw_text(screen, fonts.ui, self._message, (self.input.rect.x, 370), color=(240, 200, 120))
