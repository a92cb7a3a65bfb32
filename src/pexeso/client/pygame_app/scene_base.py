from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Protocol

import pygame  # type: ignore[import-not-found]

if TYPE_CHECKING:
    from .app import GameContext


@dataclass
class SceneTransition:
    next_scene: "Scene"


class Scene(Protocol):
    def handle_event(self, event: pygame.event.Event) -> None: ...
    def update(self, dt: float) -> SceneTransition | None: ...
    def render(self, screen: pygame.Surface) -> None: ...


class BaseScene:
    """Holds the context and the pending transition shared by every screen."""

    def __init__(self, ctx: "GameContext") -> None:
        self.ctx = ctx
        self._next: SceneTransition | None = None

    def go(self, scene: Scene) -> None:
        self.on_leave()
        self._next = SceneTransition(scene)

    def go_to_menu(self) -> None:
        from .scenes.main_menu import MainMenuScene

        self.go(MainMenuScene(self.ctx))

    def on_leave(self) -> None:
        """Release subscriptions and timers before the next scene takes over."""

    def handle_event(self, event: pygame.event.Event) -> None:
        pass

    def update(self, dt: float) -> SceneTransition | None:
        return self._next

    def render(self, screen: pygame.Surface) -> None:
        raise NotImplementedError
