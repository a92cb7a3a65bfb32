from __future__ import annotations

import logging

import pygame  # type: ignore[import-not-found]

from pexeso.engine import GameComplete, Ignored
from pexeso.engine.serialize import event_to_dict
from pexeso.services.session import GameSession

from ..app import GameContext
from ..asset_manager import CARD_BACK
from ..scene_base import BaseScene, SceneTransition
from ..ui import Button, draw_text, format_elapsed

logger = logging.getLogger(__name__)

GRID_TOP = 120
MARGIN = 20
GAP = 10


class GameScene(BaseScene):
    def __init__(self, ctx: GameContext, session: GameSession) -> None:
        super().__init__(ctx)
        self.session = session
        self._save_message = ""
        self._saved = False

        self.btn_menu = Button(rect=pygame.Rect(ctx.screen.get_width() - 140, 20, 120, 40), text="Menu", on_click=self.go_to_menu)
        self.btn_ok = Button(
            rect=pygame.Rect((ctx.screen.get_width() - 200) // 2, ctx.screen.get_height() // 2 + 80, 200, 56),
            text="OK",
            on_click=self.go_to_menu,
        )

    def on_leave(self) -> None:
        self.session.hide_timer.cancel()

    def _cell_size(self) -> tuple[int, int]:
        cfg = self.session.config
        w, h = self.ctx.screen.get_size()
        cw = (w - 2 * MARGIN - (cfg.cols - 1) * GAP) // cfg.cols
        ch = (h - GRID_TOP - MARGIN - (cfg.rows - 1) * GAP) // cfg.rows
        return cw, ch

    def _card_rect(self, position: int) -> pygame.Rect:
        cw, ch = self._cell_size()
        row, col = divmod(position, self.session.config.cols)
        return pygame.Rect(MARGIN + col * (cw + GAP), GRID_TOP + row * (ch + GAP), cw, ch)

    def _hit_test(self, pos: tuple[int, int]) -> int | None:
        for i in range(self.session.config.deck_size):
            if self._card_rect(i).collidepoint(pos):
                return i
        return None

    def handle_event(self, event: pygame.event.Event) -> None:
        if self.session.engine.is_complete():
            self.btn_ok.handle_event(event)
            return
        if self.btn_menu.handle_event(event):
            return
        if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            if not self.session.input_enabled:
                return
            position = self._hit_test(event.pos)
            if position is None:
                return
            for ev in self.session.select(position):
                if not isinstance(ev, Ignored):
                    logger.debug("Game event: %s", event_to_dict(ev))
                if isinstance(ev, GameComplete):
                    self._on_complete()

    def _on_complete(self) -> None:
        if self._saved or self.ctx.scores is None:
            return
        self._saved = True
        res = self.session.save(self.ctx.scores)
        self._save_message = "" if res.ok else "Score could not be saved."
        self.ctx.telemetry.log(
            "game_completed",
            {
                "player": self.session.player_name,
                "moves": self.session.engine.moves(),
                "seconds": self.session.elapsed_seconds(),
                "saved": res.ok,
            },
        )

    def update(self, dt: float) -> SceneTransition | None:
        self.session.update(dt)
        return super().update(dt)

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((8, 10, 14))
        fonts = self.ctx.assets.fonts
        self.btn_menu.draw(screen, fonts.ui)

        draw_text(screen, fonts.ui, self.session.player_name, (MARGIN, 24))
        draw_text(screen, fonts.ui, f"Moves: {self.session.engine.moves()}", (MARGIN, 60))
        draw_text(screen, fonts.ui, f"Time: {format_elapsed(self.session.elapsed_seconds())}", (220, 60))

        size = self._cell_size()
        for i, card in enumerate(self.session.engine.cards_in_play()):
            rect = self._card_rect(i)
            face = card.image_path if (card.is_flipped or card.is_matched) else CARD_BACK
            screen.blit(self.ctx.assets.get_face(face, size), rect.topleft)
            border = (120, 220, 120) if card.is_matched else (0, 0, 0)
            pygame.draw.rect(screen, border, rect, width=3, border_radius=6)

        if self.session.engine.is_complete():
            self._draw_result(screen)

    def _draw_result(self, screen: pygame.Surface) -> None:
        overlay = pygame.Surface(screen.get_size(), pygame.SRCALPHA)
        overlay.fill((0, 0, 0, 170))
        screen.blit(overlay, (0, 0))

        fonts = self.ctx.assets.fonts
        cx = screen.get_width() // 2
        cy = screen.get_height() // 2
        lines = [
            (fonts.big, "Game complete!"),
            (
                fonts.ui,
                f"{self.session.player_name}: {self.session.engine.moves()} moves in {self.session.elapsed_seconds()} s",
            ),
        ]
        if self._save_message:
            lines.append((fonts.ui, self._save_message))
        y = cy - 80
        for font, text in lines:
            img = font.render(text, True, (240, 240, 240))
            screen.blit(img, img.get_rect(center=(cx, y)).topleft)
            y += 44
        self.btn_ok.draw(screen, fonts.ui)
