from __future__ import annotations

import pygame  # type: ignore[import-not-found]

from pexeso.services.scores import ScoreRecord, StorageError, Subscription

from ..app import GameContext
from ..scene_base import BaseScene
from ..ui import Button, TextInput, draw_text, format_elapsed, format_played_at

ROW_H = 30
PAGE = 20


class ScoresScene(BaseScene):
    """Score history, best first. Typing a name filters to that player."""

    def __init__(self, ctx: GameContext) -> None:
        super().__init__(ctx)
        self._rows: list[ScoreRecord] = []
        self._sub: Subscription | None = None
        self._error = ""
        self._filter = ""

        self.btn_back = Button(rect=pygame.Rect(20, 20, 120, 40), text="Back", on_click=self.go_to_menu)
        self.filter_input = TextInput(rect=pygame.Rect(160, 20, 260, 40), text="", on_submit=self._apply_filter)
        self.btn_delete = Button(
            rect=pygame.Rect(440, 20, 240, 40),
            text="Delete player",
            on_click=self._on_delete_player,
            enabled=False,
        )
        self._subscribe()

    def _subscribe(self) -> None:
        self.on_leave()
        store = self.ctx.scores
        if store is None:
            return
        view = store.scores_for_player(self._filter) if self._filter else store.all_scores()
        try:
            self._sub = view.subscribe(self._on_rows)
        except StorageError as e:
            self._error = str(e)

    def _on_rows(self, rows: list[ScoreRecord]) -> None:
        self._rows = rows

    def _apply_filter(self, text: str) -> None:
        self._filter = text.strip()
        self.btn_delete.enabled = bool(self._filter)
        self._subscribe()

    def _on_delete_player(self) -> None:
        if self.ctx.scores is None or not self._filter:
            return
        try:
            removed = self.ctx.scores.remove_player(self._filter)
        except StorageError as e:
            self._error = str(e)
            return
        self.ctx.telemetry.log("scores_deleted", {"player": self._filter, "removed": removed})

    def on_leave(self) -> None:
        if self._sub is not None:
            self._sub.unsubscribe()
            self._sub = None

    def handle_event(self, event: pygame.event.Event) -> None:
        if self.btn_back.handle_event(event):
            return
        if self.btn_delete.handle_event(event):
            return
        self.filter_input.handle_event(event)

    def render(self, screen: pygame.Surface) -> None:
        screen.fill((12, 12, 18))
        fonts = self.ctx.assets.fonts
        self.btn_back.draw(screen, fonts.ui)
        self.filter_input.draw(screen, fonts.ui)
        self.btn_delete.draw(screen, fonts.ui)

        x_cols = (20, 60, 260, 340, 440)
        y = 90
        for x, head in zip(x_cols, ("#", "Name", "Moves", "Time", "Date")):
            draw_text(screen, fonts.ui, head, (x, y), color=(200, 200, 120))
        y += ROW_H + 6

        if self._error:
            draw_text(screen, fonts.ui, self._error, (20, y), color=(240, 80, 80))
            return
        if not self._rows:
            draw_text(screen, fonts.ui, "No scores yet.", (20, y), color=(140, 140, 160))
            return
        for rank, rec in enumerate(self._rows[:PAGE], start=1):
            cells = (
                str(rank),
                rec.name,
                str(rec.score),
                format_elapsed(rec.time),
                format_played_at(rec.date),
            )
            for x, text in zip(x_cols, cells):
                draw_text(screen, fonts.small, text, (x, y + 4))
            y += ROW_H
